from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from osuwu.constants.mods import Mods
from osuwu.models.user import HitCountBreakdown


@dataclass(frozen=True)
class MatchScore:
    slot: int
    team: str
    user_id: int
    score: int
    max_combo: int
    hit_counts: HitCountBreakdown
    passed: bool


@dataclass(frozen=True)
class MatchGame:
    id: int
    start_time: Optional[datetime]
    end_time: Optional[datetime]  # None while the game is in progress
    beatmap_id: int
    mode: str
    scoring_type: str
    team_type: str
    mods: Mods
    scores: tuple[MatchScore, ...]


@dataclass(frozen=True)
class Match:
    id: int
    name: str
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    games: tuple[MatchGame, ...]


@dataclass(frozen=True)
class Replay:
    content: str
    encoding: str

    @property
    def data(self) -> bytes:
        """The raw replay frames, decoded from base64."""

        return base64.b64decode(self.content)
