from __future__ import annotations

from enum import IntEnum


class ScoringType(IntEnum):
    SCORE = 0
    ACCURACY = 1
    COMBO = 2
    SCORE_V2 = 3

    @property
    def display_name(self) -> str:
        if self is ScoringType.SCORE_V2:
            return "Score V2"

        return self.name.capitalize()


class TeamType(IntEnum):
    HEAD_TO_HEAD = 0
    TAG_COOP = 1
    TEAM_VS = 2
    TAG_TEAM_VS = 3

    @property
    def display_name(self) -> str:
        return team_type_str[self]


team_type_str = {
    TeamType.HEAD_TO_HEAD: "Head to Head",
    TeamType.TAG_COOP: "Tag Co-op",
    TeamType.TEAM_VS: "Team vs",
    TeamType.TAG_TEAM_VS: "Tag Team vs",
}


class Team(IntEnum):
    NONE = 0
    BLUE = 1
    RED = 2

    @property
    def display_name(self) -> str:
        return self.name.capitalize()
