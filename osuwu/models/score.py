from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from osuwu.constants import mods as mods_codec
from osuwu.constants.mods import Mods


@dataclass(frozen=True)
class Score:
    """A score as returned by the score lookups.

    Best scores carry no username, and recent scores additionally have no
    id, pp or replay availability; those fields are left as `None`.
    """

    score: int
    user_id: int

    n300: int
    n100: int
    n50: int
    misses: int
    katus: int
    gekis: int

    max_combo: int
    perfect_combo: bool
    mods: Mods
    date: Optional[datetime]
    rank: str

    username: Optional[str] = None
    beatmap_id: Optional[int] = None
    score_id: Optional[int] = None
    pp: Optional[float] = None
    replay_available: Optional[bool] = None

    @property
    def mods_str(self) -> str:
        return mods_codec.decode(self.mods)
