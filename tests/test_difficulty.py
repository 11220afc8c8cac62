from __future__ import annotations

import pytest

from osuwu.constants.mods import Mods
from osuwu.usecases.chart import parse_chart
from osuwu.usecases.difficulty import calculate_difficulty

HEADER = """\
osu file format v14

[General]
Mode: 0

[Difficulty]
HPDrainRate:5
CircleSize:4
OverallDifficulty:8
ApproachRate:9
SliderMultiplier:1.4
SliderTickRate:1

[TimingPoints]
0,500,4,2,0,100,1,0

[HitObjects]
"""


def jump_chart(object_count: int, gap: float) -> str:
    lines = []
    for idx in range(object_count):
        x = 100 if idx % 2 == 0 else 400
        lines.append(f"{x},192,{int(1000 + idx * gap)},1,0,0:0:0:0:")

    return HEADER + "\n".join(lines) + "\n"


def test_empty_chart_has_no_difficulty():
    rating = calculate_difficulty(parse_chart(HEADER))

    assert rating.total == 0.0
    assert rating.aim == 0.0
    assert rating.speed == 0.0


def test_single_object_has_no_difficulty():
    rating = calculate_difficulty(parse_chart(jump_chart(1, 300)))

    assert rating.total == 0.0


def test_rating_is_deterministic():
    chart = parse_chart(jump_chart(20, 300))

    assert calculate_difficulty(chart, Mods.HIDDEN) == calculate_difficulty(chart, Mods.HIDDEN)


def test_jumps_rate_both_skills():
    rating = calculate_difficulty(parse_chart(jump_chart(30, 250)))

    assert rating.total > 0
    assert rating.aim > 0
    assert rating.speed > 0


def test_denser_chart_is_not_easier():
    # same length, twice the objects
    sparse = calculate_difficulty(parse_chart(jump_chart(20, 300)))
    dense = calculate_difficulty(parse_chart(jump_chart(40, 150)))

    assert dense.total >= sparse.total


def test_doubletime_is_harder_than_nomod():
    chart = parse_chart(jump_chart(30, 300))

    assert calculate_difficulty(chart, Mods.DOUBLETIME).total > calculate_difficulty(chart).total


def test_halftime_is_easier_than_nomod():
    chart = parse_chart(jump_chart(30, 300))

    assert calculate_difficulty(chart, Mods.HALFTIME).total < calculate_difficulty(chart).total


def test_rating_carries_chart_counts(simple_chart_text: str):
    rating = calculate_difficulty(parse_chart(simple_chart_text))

    assert rating.object_count == 3
    assert rating.circle_count == 1
    assert rating.slider_count == 1
    assert rating.spinner_count == 1
    assert rating.max_combo == 4


def test_nomod_keeps_settings(simple_chart_text: str):
    rating = calculate_difficulty(parse_chart(simple_chart_text))

    assert rating.speed_multiplier == 1.0
    assert rating.ar == pytest.approx(9.0)
    assert rating.od == pytest.approx(8.0)
    assert rating.cs == pytest.approx(4.0)
    assert rating.hp == pytest.approx(5.0)


def test_hardrock_raises_settings(simple_chart_text: str):
    rating = calculate_difficulty(parse_chart(simple_chart_text), Mods.HARDROCK)

    # ar and od are capped at 10
    assert rating.ar == pytest.approx(10.0)
    assert rating.od == pytest.approx(10.0)
    assert rating.cs == pytest.approx(5.2)
    assert rating.hp == pytest.approx(7.0)


def test_easy_halves_settings(simple_chart_text: str):
    rating = calculate_difficulty(parse_chart(simple_chart_text), Mods.EASY)

    assert rating.ar == pytest.approx(4.5)
    assert rating.cs == pytest.approx(2.0)
    assert rating.hp == pytest.approx(2.5)


def test_doubletime_shortens_windows(simple_chart_text: str):
    rating = calculate_difficulty(parse_chart(simple_chart_text), Mods.DOUBLETIME)

    # ar 9 is 600ms, 400ms once sped up
    assert rating.speed_multiplier == 1.5
    assert rating.ar == pytest.approx(5.0 + 800.0 / 150.0)
    assert rating.od > 8.0
    assert rating.cs == pytest.approx(4.0)
