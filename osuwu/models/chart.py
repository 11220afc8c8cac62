from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import IntFlag
from typing import Optional

from osuwu.constants.mode import Mode


class HitObjectType(IntFlag):
    CIRCLE = 1 << 0
    SLIDER = 1 << 1
    NEW_COMBO = 1 << 2
    SPINNER = 1 << 3

    KINDS = CIRCLE | SLIDER | SPINNER


@dataclass(frozen=True)
class TimingPoint:
    time: float
    ms_per_beat: float
    uninherited: bool = True

    @property
    def velocity_multiplier(self) -> float:
        # inherited points store the slider velocity as -100 / multiplier
        if not self.uninherited and self.ms_per_beat < 0:
            return -100.0 / self.ms_per_beat

        return 1.0


@dataclass(frozen=True)
class HitObject:
    time: float
    kind: HitObjectType
    x: float = 0.0
    y: float = 0.0

    # sliders
    repetitions: int = 0
    pixel_length: float = 0.0

    # spinners
    end_time: Optional[float] = None

    @property
    def is_circle(self) -> bool:
        return bool(self.kind & HitObjectType.CIRCLE)

    @property
    def is_slider(self) -> bool:
        return bool(self.kind & HitObjectType.SLIDER)

    @property
    def is_spinner(self) -> bool:
        return bool(self.kind & HitObjectType.SPINNER)


@dataclass(frozen=True)
class Chart:
    """A parsed ``.osu`` chart. Never mutated once built by the parser."""

    format_version: int
    mode: Mode

    title: str
    title_unicode: str
    artist: str
    artist_unicode: str
    creator: str
    version: str
    beatmap_id: Optional[int]
    beatmapset_id: Optional[int]

    cs: float
    od: float
    ar: float
    hp: float
    slider_multiplier: float
    slider_tick_rate: float

    timing_points: tuple[TimingPoint, ...]
    hit_objects: tuple[HitObject, ...]

    max_combo: int

    # the text the chart was parsed from, handed to the difficulty engine
    document: str = field(default="", repr=False, compare=False)

    @property
    def circle_count(self) -> int:
        return sum(1 for obj in self.hit_objects if obj.is_circle)

    @property
    def slider_count(self) -> int:
        return sum(1 for obj in self.hit_objects if obj.is_slider)

    @property
    def spinner_count(self) -> int:
        return sum(1 for obj in self.hit_objects if obj.is_spinner)

    @property
    def object_count(self) -> int:
        return self.circle_count + self.slider_count + self.spinner_count
