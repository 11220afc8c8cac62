from __future__ import annotations

import functools
from enum import IntEnum

mode_str = (
    "Standard",
    "Taiko",
    "Catch the Beat",
    "Mania",
)

# ruleset names used by the v2 api.
mode_ruleset = (
    "osu",
    "taiko",
    "fruits",
    "mania",
)


class Mode(IntEnum):
    STD = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3

    def __repr__(self) -> str:
        return mode_str[self.value]

    @functools.cached_property
    def display_name(self) -> str:
        return mode_str[self.value]

    @functools.cached_property
    def ruleset(self) -> str:
        return mode_ruleset[self.value]

    @classmethod
    @functools.cache
    def from_ruleset(cls, ruleset: str) -> Mode:
        return cls(mode_ruleset.index(ruleset))
