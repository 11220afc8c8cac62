from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Optional
from typing import Union

from osuwu.constants.mode import Mode
from osuwu.exceptions import ParseError
from osuwu.models.chart import Chart
from osuwu.models.chart import HitObject
from osuwu.models.chart import HitObjectType
from osuwu.models.chart import TimingPoint

FORMAT_HEADER = "osu file format v"

REQUIRED_DIFFICULTY_FIELDS = (
    "CircleSize",
    "OverallDifficulty",
    "HPDrainRate",
)

HIT_OBJECT_TYPE_LIMIT = 255


class _ChartBuilder:
    """Accumulates the values found while walking the document.

    Only lives for the duration of a single `parse_chart` call.
    """

    def __init__(self, beatmap_id: Optional[int], document: str) -> None:
        self.beatmap_id = beatmap_id
        self.document = document
        self.line_number = 0

        self.format_version = 0
        self.mode = Mode.STD
        self.metadata: dict[str, str] = {}
        self.difficulty: dict[str, float] = {}
        self.timing_points: list[TimingPoint] = []
        self.hit_objects: list[HitObject] = []

    def error(self, message: str) -> ParseError:
        return ParseError(message, beatmap_id=self.beatmap_id, line=self.line_number)

    def split_property(self, line: str) -> tuple[str, str]:
        if ":" not in line:
            raise self.error(f"Expected a 'Key:Value' pair, got {line!r}")

        key, value = line.split(":", 1)
        return key.strip(), value.strip()

    def to_float(self, value: str, field: str) -> float:
        try:
            return float(value)
        except ValueError:
            raise self.error(f"{field} must be a number, got {value!r}")

    def to_int(self, value: str, field: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise self.error(f"{field} must be an integer, got {value!r}")

    def parse_general(self, line: str) -> None:
        key, value = self.split_property(line)
        if key != "Mode":
            return

        mode = self.to_int(value, key)
        if mode != Mode.STD:
            raise self.error(f"Unsupported game mode {mode}")

        self.mode = Mode(mode)

    def parse_metadata(self, line: str) -> None:
        key, value = self.split_property(line)
        self.metadata[key] = value

    def parse_difficulty(self, line: str) -> None:
        key, value = self.split_property(line)
        self.difficulty[key] = self.to_float(value, key)

    def parse_timing_point(self, line: str) -> None:
        fields = line.split(",")
        if len(fields) < 2:
            raise self.error("A timing point needs at least a time and a beat length")

        time = self.to_float(fields[0], "timing point time")
        ms_per_beat = self.to_float(fields[1], "timing point beat length")

        if len(fields) >= 7:
            uninherited = self.to_int(fields[6], "timing point uninherited flag") != 0
        else:
            uninherited = ms_per_beat >= 0

        self.timing_points.append(
            TimingPoint(time=time, ms_per_beat=ms_per_beat, uninherited=uninherited),
        )

    def parse_hit_object(self, line: str) -> None:
        fields = line.split(",")
        if len(fields) < 5:
            raise self.error("A hit object needs at least 5 fields")

        x = self.to_float(fields[0], "hit object x")
        y = self.to_float(fields[1], "hit object y")
        time = self.to_float(fields[2], "hit object time")
        object_type = self.to_int(fields[3], "hit object type")

        if not 0 <= object_type <= HIT_OBJECT_TYPE_LIMIT:
            raise self.error(f"Invalid hit object type {object_type}")

        if object_type & HitObjectType.CIRCLE:
            hit_object = HitObject(time=time, kind=HitObjectType.CIRCLE, x=x, y=y)

        elif object_type & HitObjectType.SPINNER:
            end_time = None
            if len(fields) >= 6:
                end_time = self.to_float(fields[5], "spinner end time")

            hit_object = HitObject(
                time=time,
                kind=HitObjectType.SPINNER,
                x=x,
                y=y,
                end_time=end_time,
            )

        elif object_type & HitObjectType.SLIDER:
            # x,y,time,type,hitsound,curve,slides,length,...
            if len(fields) < 8:
                raise self.error("A slider needs at least 8 fields")

            hit_object = HitObject(
                time=time,
                kind=HitObjectType.SLIDER,
                x=x,
                y=y,
                repetitions=self.to_int(fields[6], "slider repetitions"),
                pixel_length=self.to_float(fields[7], "slider length"),
            )

        else:
            raise self.error(f"Hit object type {object_type} has no known kind")

        self.hit_objects.append(hit_object)

    def optional_id(self, key: str) -> Optional[int]:
        value = self.metadata.get(key)
        if value is None:
            return None

        try:
            return int(value)
        except ValueError:
            return None

    def build(self) -> Chart:
        for field in REQUIRED_DIFFICULTY_FIELDS:
            if field not in self.difficulty:
                raise ParseError(
                    f"Missing required difficulty field {field}",
                    beatmap_id=self.beatmap_id,
                )

        od = self.difficulty["OverallDifficulty"]
        slider_multiplier = self.difficulty.get("SliderMultiplier", 1.0)
        slider_tick_rate = self.difficulty.get("SliderTickRate", 1.0)

        max_combo = calculate_max_combo(
            self.hit_objects,
            self.timing_points,
            slider_multiplier=slider_multiplier,
            slider_tick_rate=slider_tick_rate,
            format_version=self.format_version,
            beatmap_id=self.beatmap_id,
        )

        return Chart(
            format_version=self.format_version,
            mode=self.mode,
            title=self.metadata.get("Title", ""),
            title_unicode=self.metadata.get("TitleUnicode", ""),
            artist=self.metadata.get("Artist", ""),
            artist_unicode=self.metadata.get("ArtistUnicode", ""),
            creator=self.metadata.get("Creator", ""),
            version=self.metadata.get("Version", ""),
            beatmap_id=self.optional_id("BeatmapID"),
            beatmapset_id=self.optional_id("BeatmapSetID"),
            cs=self.difficulty["CircleSize"],
            od=od,
            # old formats have no approach rate; it used to follow od.
            ar=self.difficulty.get("ApproachRate", od),
            hp=self.difficulty["HPDrainRate"],
            slider_multiplier=slider_multiplier,
            slider_tick_rate=slider_tick_rate,
            timing_points=tuple(self.timing_points),
            hit_objects=tuple(self.hit_objects),
            max_combo=max_combo,
            document=self.document,
        )


def calculate_max_combo(
    hit_objects: Iterable[HitObject],
    timing_points: list[TimingPoint],
    *,
    slider_multiplier: float,
    slider_tick_rate: float,
    format_version: int,
    beatmap_id: Optional[int] = None,
) -> int:
    """Counts circles, spinners, slider heads, ticks, repeats and tails."""

    combo = 0

    timing_index = -1
    next_timing_time: Optional[float] = -math.inf
    px_per_beat: Optional[float] = None

    for hit_object in hit_objects:
        if not hit_object.is_slider:
            combo += 1
            continue

        # advance to the timing point active at this slider
        while next_timing_time is not None and hit_object.time >= next_timing_time:
            timing_index += 1
            if timing_index >= len(timing_points):
                break

            if timing_index + 1 < len(timing_points):
                next_timing_time = timing_points[timing_index + 1].time
            else:
                next_timing_time = None

            timing_point = timing_points[timing_index]
            velocity_multiplier = timing_point.velocity_multiplier

            px_per_beat = slider_multiplier * 100.0 * velocity_multiplier
            if format_version < 8:
                px_per_beat /= velocity_multiplier

        if px_per_beat is None:
            raise ParseError(
                "Slider found without a timing point to derive its velocity",
                beatmap_id=beatmap_id,
            )

        repetitions = max(hit_object.repetitions, 1)
        beats = (hit_object.pixel_length * repetitions) / px_per_beat

        ticks = math.ceil((beats - 0.1) / repetitions * slider_tick_rate)
        ticks -= 1
        ticks *= repetitions
        ticks += repetitions + 1

        combo += max(0, ticks)

    return combo


def parse_chart(
    document: Union[str, bytes],
    *,
    beatmap_id: Optional[int] = None,
) -> Chart:
    """Parses a ``.osu`` chart document.

    Raises:
        ParseError: The document is empty, not a chart, not an osu!standard
            chart, or is missing one of the required difficulty fields.
    """

    if isinstance(document, bytes):
        document = document.decode("utf-8", errors="replace")

    document = document.lstrip("\ufeff")
    if not document.strip():
        raise ParseError("Empty chart document", beatmap_id=beatmap_id)

    builder = _ChartBuilder(beatmap_id, document)
    section = ""
    seen_header = False

    for raw_line in document.splitlines():
        builder.line_number += 1

        # comments (lines indented or starting with an underscore)
        if raw_line.startswith((" ", "_")):
            continue

        line = raw_line.strip()
        if not line or line.startswith("//"):
            continue

        if not seen_header:
            if not line.startswith(FORMAT_HEADER):
                raise builder.error("Missing 'osu file format' header")

            builder.format_version = builder.to_int(
                line[len(FORMAT_HEADER) :],
                "format version",
            )
            seen_header = True
            continue

        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1]
            continue

        match section:
            case "General":
                builder.parse_general(line)
            case "Metadata":
                builder.parse_metadata(line)
            case "Difficulty":
                builder.parse_difficulty(line)
            case "TimingPoints":
                builder.parse_timing_point(line)
            case "HitObjects":
                builder.parse_hit_object(line)
            case _:
                # editor, events, colours and the like don't affect difficulty
                continue

    return builder.build()
