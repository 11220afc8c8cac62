from __future__ import annotations

from enum import IntFlag
from typing import Union

from osuwu.exceptions import UnknownModifierError


class Mods(IntFlag):
    NOMOD = 0
    NOFAIL = 1 << 0
    EASY = 1 << 1
    TOUCHSCREEN = 1 << 2
    HIDDEN = 1 << 3
    HARDROCK = 1 << 4
    SUDDENDEATH = 1 << 5
    DOUBLETIME = 1 << 6
    RELAX = 1 << 7
    HALFTIME = 1 << 8
    NIGHTCORE = 1 << 9
    FLASHLIGHT = 1 << 10
    AUTOPLAY = 1 << 11
    SPUNOUT = 1 << 12
    AUTOPILOT = 1 << 13
    PERFECT = 1 << 14
    KEY4 = 1 << 15
    KEY5 = 1 << 16
    KEY6 = 1 << 17
    KEY7 = 1 << 18
    KEY8 = 1 << 19
    FADEIN = 1 << 20
    RANDOM = 1 << 21
    CINEMA = 1 << 22
    TARGET = 1 << 23
    KEY9 = 1 << 24
    KEYCOOP = 1 << 25
    KEY1 = 1 << 26
    KEY3 = 1 << 27
    KEY2 = 1 << 28
    SCOREV2 = 1 << 29
    MIRROR = 1 << 30

    SPEED_MODS = DOUBLETIME | NIGHTCORE | HALFTIME
    MAP_CHANGING = SPEED_MODS | HARDROCK | EASY

    def __repr__(self) -> str:
        return decode(self)

    @property
    def speed_multiplier(self) -> float:
        speed_multiplier = 1.0

        if self & (Mods.DOUBLETIME | Mods.NIGHTCORE):
            speed_multiplier = 1.5
        if self & Mods.HALFTIME:
            speed_multiplier *= 0.75

        return speed_multiplier


# a composite modifier always carries the bits of the one it implies.
IMPLIED_MODS = {
    Mods.NIGHTCORE: Mods.DOUBLETIME,
    Mods.PERFECT: Mods.SUDDENDEATH,
}

# canonical ordering used when turning a bitmask back into tokens.
MOD_TOKENS: tuple[tuple[str, Mods], ...] = (
    ("NF", Mods.NOFAIL),
    ("EZ", Mods.EASY),
    ("TD", Mods.TOUCHSCREEN),
    ("HD", Mods.HIDDEN),
    ("HR", Mods.HARDROCK),
    ("SD", Mods.SUDDENDEATH),
    ("DT", Mods.DOUBLETIME),
    ("RX", Mods.RELAX),
    ("HT", Mods.HALFTIME),
    ("NC", Mods.NIGHTCORE | Mods.DOUBLETIME),
    ("FL", Mods.FLASHLIGHT),
    ("AU", Mods.AUTOPLAY),
    ("SO", Mods.SPUNOUT),
    ("AP", Mods.AUTOPILOT),
    ("PF", Mods.PERFECT | Mods.SUDDENDEATH),
    ("4K", Mods.KEY4),
    ("5K", Mods.KEY5),
    ("6K", Mods.KEY6),
    ("7K", Mods.KEY7),
    ("8K", Mods.KEY8),
    ("FI", Mods.FADEIN),
    ("RN", Mods.RANDOM),
    ("CN", Mods.CINEMA),
    ("TP", Mods.TARGET),
    ("9K", Mods.KEY9),
    ("CO", Mods.KEYCOOP),
    ("1K", Mods.KEY1),
    ("3K", Mods.KEY3),
    ("2K", Mods.KEY2),
    ("V2", Mods.SCOREV2),
    ("MR", Mods.MIRROR),
)

mods_str = dict(MOD_TOKENS)

NOMOD_TOKEN = "NM"


def with_implied(mods: int) -> Mods:
    """Adds the bits implied by any composite modifier present."""

    result = Mods(mods)
    for composite, implied in IMPLIED_MODS.items():
        if result & composite:
            result |= implied

    return result


def encode(mods: str) -> Mods:
    """Converts a token string such as ``"HDDT"`` into a bitmask.

    Tokens are two characters long and case-insensitive. A leading ``+`` is
    ignored, and both an empty string and ``"NM"`` mean no modifiers.
    """

    mods = mods.strip().removeprefix("+").upper()
    if not mods or mods == NOMOD_TOKEN:
        return Mods.NOMOD

    result = Mods.NOMOD
    for idx in range(0, len(mods), 2):
        token = mods[idx : idx + 2]
        if token not in mods_str:
            raise UnknownModifierError(token)

        result |= mods_str[token]

    return result


def decode(mods: int) -> str:
    """Converts a bitmask into its canonical token string.

    A composite modifier is written as its own token only; the token it
    implies is omitted. No modifiers decode to ``"NM"``.
    """

    value = with_implied(mods)
    if not value:
        return NOMOD_TOKEN

    suppressed = Mods.NOMOD
    for composite, implied in IMPLIED_MODS.items():
        if value & composite:
            suppressed |= implied

    tokens = ""
    for token, bits in MOD_TOKENS:
        if value & bits == bits and bits not in suppressed:
            tokens += token

    return tokens or NOMOD_TOKEN


def normalize(mods: Union[int, str, None]) -> Mods:
    """Accepts either representation used by callers of the library."""

    if mods is None:
        return Mods.NOMOD

    if isinstance(mods, str):
        return encode(mods)

    return with_implied(mods)
