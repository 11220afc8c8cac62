from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

AVATAR_URL = "https://a.ppy.sh/{user_id}"


@dataclass(frozen=True)
class HitCount:
    amount: int
    percentage: float


@dataclass(frozen=True)
class HitCountBreakdown:
    n300: HitCount
    n100: HitCount
    n50: HitCount

    @classmethod
    def from_counts(cls, count300: int, count100: int, count50: int) -> HitCountBreakdown:
        total = count300 + count100 + count50

        def share(count: int) -> float:
            if total == 0:
                return 0.0

            return count / total * 100.0

        return cls(
            n300=HitCount(amount=count300, percentage=share(count300)),
            n100=HitCount(amount=count100, percentage=share(count100)),
            n50=HitCount(amount=count50, percentage=share(count50)),
        )


@dataclass(frozen=True)
class ScoreTotals:
    total: int
    ranked: int
    unranked: int
    per_play: Optional[float]

    @classmethod
    def from_scores(cls, total: int, ranked: int, play_count: int) -> ScoreTotals:
        return cls(
            total=total,
            ranked=ranked,
            unranked=total - ranked,
            per_play=total / play_count if play_count else None,
        )


@dataclass(frozen=True)
class GradeCount:
    gold: int
    silver: int
    total: int

    @classmethod
    def from_counts(cls, gold: int, silver: int) -> GradeCount:
        return cls(gold=gold, silver=silver, total=gold + silver)


@dataclass(frozen=True)
class GradeCounts:
    ss: GradeCount
    s: GradeCount
    a: int


@dataclass(frozen=True)
class UserEvent:
    html: str
    beatmap_id: Optional[int]
    beatmapset_id: Optional[int]
    date: Optional[datetime]
    epic_factor: int


@dataclass(frozen=True)
class User:
    user_id: int
    username: str
    avatar_url: str
    join_date: Optional[datetime]

    hit_counts: HitCountBreakdown
    play_count: int
    level: float
    rank: Optional[int]
    country_rank: Optional[int]
    pp: float
    accuracy: float

    score: ScoreTotals
    grades: GradeCounts

    country_code: str
    country: Optional[str]
    seconds_played: int
    events: tuple[UserEvent, ...] = ()
