from __future__ import annotations

import functools
from enum import IntEnum


class RankedStatus(IntEnum):
    GRAVEYARD = -2
    WIP = -1
    PENDING = 0
    RANKED = 1
    APPROVED = 2
    QUALIFIED = 3
    LOVED = 4

    @functools.cached_property
    def display_name(self) -> str:
        if self is RankedStatus.WIP:
            return "WIP"

        return self.name.capitalize()

    @classmethod
    @functools.cache
    def from_v2(cls, status: str) -> RankedStatus:
        return cls[status.upper()]
