from __future__ import annotations

from enum import IntEnum


class Genre(IntEnum):
    ANY = 0
    UNSPECIFIED = 1
    VIDEO_GAME = 2
    ANIME = 3
    ROCK = 4
    POP = 5
    OTHER = 6
    NOVELTY = 7
    HIP_HOP = 9
    ELECTRONIC = 10
    METAL = 11
    CLASSICAL = 12
    FOLK = 13
    JAZZ = 14

    @property
    def display_name(self) -> str:
        return genre_str[self]


genre_str = {
    Genre.ANY: "Any",
    Genre.UNSPECIFIED: "Unspecified",
    Genre.VIDEO_GAME: "Video Game",
    Genre.ANIME: "Anime",
    Genre.ROCK: "Rock",
    Genre.POP: "Pop",
    Genre.OTHER: "Other",
    Genre.NOVELTY: "Novelty",
    Genre.HIP_HOP: "Hip Hop",
    Genre.ELECTRONIC: "Electronic",
    Genre.METAL: "Metal",
    Genre.CLASSICAL: "Classical",
    Genre.FOLK: "Folk",
    Genre.JAZZ: "Jazz",
}


class Language(IntEnum):
    ANY = 0
    UNSPECIFIED = 1
    ENGLISH = 2
    JAPANESE = 3
    CHINESE = 4
    INSTRUMENTAL = 5
    KOREAN = 6
    FRENCH = 7
    GERMAN = 8
    SWEDISH = 9
    SPANISH = 10
    ITALIAN = 11
    RUSSIAN = 12
    POLISH = 13
    OTHER = 14

    @property
    def display_name(self) -> str:
        if self is Language.UNSPECIFIED:
            return "Other"

        return self.name.capitalize()
