from __future__ import annotations

import pytest

from osuwu.constants.mode import Mode
from osuwu.exceptions import ParseError
from osuwu.usecases.chart import parse_chart


def test_parse_simple_chart(simple_chart_text: str):
    chart = parse_chart(simple_chart_text)

    assert chart.format_version == 14
    assert chart.mode is Mode.STD
    assert chart.title == "Test Song"
    assert chart.artist == "Test Artist"
    assert chart.creator == "Mapper"
    assert chart.version == "Normal"
    assert chart.beatmap_id == 123
    assert chart.beatmapset_id == 456

    assert chart.cs == 4.0
    assert chart.od == 8.0
    assert chart.ar == 9.0
    assert chart.hp == 5.0
    assert chart.slider_multiplier == 1.4

    assert chart.circle_count == 1
    assert chart.slider_count == 1
    assert chart.spinner_count == 1
    assert chart.object_count == 3

    # circle + slider head and tail + spinner
    assert chart.max_combo == 4


def test_parsing_is_deterministic(simple_chart_text: str):
    assert parse_chart(simple_chart_text) == parse_chart(simple_chart_text)


def test_parse_bytes_with_bom(simple_chart_text: str):
    document = b"\xef\xbb\xbf" + simple_chart_text.encode()

    assert parse_chart(document) == parse_chart(simple_chart_text)


def test_approach_rate_defaults_to_overall_difficulty(simple_chart_text: str):
    chart = parse_chart(simple_chart_text.replace("ApproachRate:9\n", ""))

    assert chart.ar == chart.od == 8.0


def test_comments_are_skipped(simple_chart_text: str):
    document = simple_chart_text.replace(
        "[HitObjects]\n",
        "[HitObjects]\n// a comment\n",
    )

    assert parse_chart(document) == parse_chart(simple_chart_text)


def test_slider_ticks_count_towards_max_combo(simple_chart_text: str):
    # a slider twice as long gets a tick in the middle
    chart = parse_chart(simple_chart_text.replace("L|200:100,1,140", "L|300:100,1,280"))

    assert chart.max_combo == 5


def test_repeating_slider_max_combo(simple_chart_text: str):
    chart = parse_chart(simple_chart_text.replace("L|200:100,1,140", "L|200:100,2,140"))

    # head, repeat and tail
    assert chart.max_combo == 5


def test_empty_hit_objects(simple_chart_text: str):
    document = simple_chart_text.split("[HitObjects]")[0] + "[HitObjects]\n"
    chart = parse_chart(document)

    assert chart.object_count == 0
    assert chart.max_combo == 0


@pytest.mark.parametrize("document", ["", "   \n\n", b""])
def test_empty_document(document: str | bytes):
    with pytest.raises(ParseError):
        parse_chart(document, beatmap_id=1)


def test_missing_header(simple_chart_text: str):
    with pytest.raises(ParseError) as exc_info:
        parse_chart(simple_chart_text.replace("osu file format v14\n", ""), beatmap_id=77)

    assert exc_info.value.beatmap_id == 77
    assert "77" in str(exc_info.value)


def test_html_is_not_a_chart():
    with pytest.raises(ParseError):
        parse_chart("<html><body>not found</body></html>")


def test_missing_required_difficulty_field(simple_chart_text: str):
    with pytest.raises(ParseError) as exc_info:
        parse_chart(simple_chart_text.replace("CircleSize:4\n", ""))

    assert "CircleSize" in str(exc_info.value)


def test_non_standard_mode_is_rejected(simple_chart_text: str):
    with pytest.raises(ParseError):
        parse_chart(simple_chart_text.replace("Mode: 0", "Mode: 3"))


def test_malformed_hit_object_reports_line(simple_chart_text: str):
    document = simple_chart_text.replace("256,192,1000,1,0,0:0:0:0:", "256,192,soon,1,0")

    with pytest.raises(ParseError) as exc_info:
        parse_chart(document)

    assert exc_info.value.line is not None


def test_slider_without_timing_point(simple_chart_text: str):
    document = simple_chart_text.replace("0,500,4,2,0,100,1,0\n", "")

    with pytest.raises(ParseError):
        parse_chart(document)
