from __future__ import annotations

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Optional
from typing import TYPE_CHECKING

from osuwu.constants.mods import Mods

if TYPE_CHECKING:
    import rosu_pp_py as rosu


@dataclass(frozen=True)
class DifficultyRating:
    total: float
    aim: float
    speed: float

    # the chart as it plays once the modifiers have been applied
    mods: Mods
    speed_multiplier: float
    ar: float
    od: float
    cs: float
    hp: float

    max_combo: int
    object_count: int
    circle_count: int
    slider_count: int
    spinner_count: int

    # None for charts without hit objects, which have nothing to rate
    attributes: Optional[rosu.DifficultyAttributes] = field(
        default=None,
        repr=False,
        compare=False,
    )


@dataclass(frozen=True)
class PlayResult:
    combo: Optional[int] = None  # None means a full combo
    misses: int = 0
    accuracy: float = 100.0


@dataclass(frozen=True)
class HitCounts:
    n300: int
    n100: int
    n50: int
    nmiss: int

    @property
    def total(self) -> int:
        return self.n300 + self.n100 + self.n50 + self.nmiss

    @property
    def accuracy(self) -> float:
        """Accuracy in the 0-1 range."""

        if self.total <= 0:
            return 0.0

        return (self.n50 * 50.0 + self.n100 * 100.0 + self.n300 * 300.0) / (
            self.total * 300.0
        )


@dataclass(frozen=True)
class PerformanceResult:
    total: float
    aim: float
    speed: float
    accuracy: float

    hit_counts: HitCounts
    combo: int
    computed_accuracy: float


@dataclass(frozen=True)
class PerformanceReport:
    artist: str
    title: str
    mapper: str
    difficulty_name: str
    beatmap_id: int
    beatmapset_id: Optional[int]

    cs: float
    ar: float
    od: float
    hp: float

    circle_count: int
    slider_count: int
    spinner_count: int
    object_count: int

    stars: DifficultyRating
    mods: str
    combo: int
    max_combo: int
    accuracy: float

    pp: PerformanceResult

    @property
    def hit_counts(self) -> HitCounts:
        return self.pp.hit_counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "artist": self.artist,
            "title": self.title,
            "mapper": self.mapper,
            "difficulty": self.difficulty_name,
            "beatmap_id": self.beatmap_id,
            "beatmapset_id": self.beatmapset_id,
            "cs": self.cs,
            "ar": self.ar,
            "od": self.od,
            "hp": self.hp,
            "objects": {
                "total": self.object_count,
                "circles": self.circle_count,
                "sliders": self.slider_count,
                "spinners": self.spinner_count,
            },
            "stars": {
                "total": self.stars.total,
                "aim": self.stars.aim,
                "speed": self.stars.speed,
            },
            "mods": self.mods,
            "combo": {
                "top": self.combo,
                "max": self.max_combo,
            },
            "accuracy": self.accuracy,
            "pp": {
                "total": self.pp.total,
                "aim": self.pp.aim,
                "speed": self.pp.speed,
                "acc": self.pp.accuracy,
            },
            "computed_accuracy": asdict(self.hit_counts),
        }
