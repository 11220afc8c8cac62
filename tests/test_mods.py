from __future__ import annotations

import pytest

from osuwu.constants import mods as mods_codec
from osuwu.constants.mods import Mods
from osuwu.exceptions import UnknownModifierError


def test_encode_combined_tokens():
    mods = mods_codec.encode("DTHD")

    assert mods & Mods.DOUBLETIME
    assert mods & Mods.HIDDEN
    assert mods == Mods.DOUBLETIME | Mods.HIDDEN


def test_decode_uses_canonical_order():
    decoded = mods_codec.decode(mods_codec.encode("DTHD"))

    assert "DT" in decoded
    assert "HD" in decoded
    assert decoded == "HDDT"


@pytest.mark.parametrize("tokens", ["", "NM", "nm", "  "])
def test_nomod_tokens(tokens: str):
    assert mods_codec.encode(tokens) == Mods.NOMOD


def test_decode_nomod():
    assert mods_codec.decode(0) == "NM"


def test_encode_is_case_insensitive_and_accepts_plus():
    assert mods_codec.encode("+hdhr") == Mods.HIDDEN | Mods.HARDROCK


def test_unknown_token_raises():
    with pytest.raises(UnknownModifierError) as exc_info:
        mods_codec.encode("ZZ")

    assert exc_info.value.token == "ZZ"


def test_dangling_token_raises():
    with pytest.raises(UnknownModifierError) as exc_info:
        mods_codec.encode("HDD")

    assert exc_info.value.token == "D"


def test_nightcore_implies_doubletime():
    mods = mods_codec.encode("NC")

    assert mods == Mods.NIGHTCORE | Mods.DOUBLETIME
    assert mods_codec.decode(mods) == "NC"


def test_perfect_implies_suddendeath():
    mods = mods_codec.encode("HDPF")

    assert mods & Mods.SUDDENDEATH
    assert mods_codec.decode(mods) == "HDPF"


@pytest.mark.parametrize("tokens", ["HD", "HDHR", "EZHTFL", "NCHD", "NFSOV2", "HRPF"])
def test_decoded_mods_encode_back(tokens: str):
    mods = mods_codec.encode(tokens)

    assert mods_codec.encode(mods_codec.decode(mods)) == mods


def test_normalize_accepts_both_representations():
    assert mods_codec.normalize("HDDT") == Mods.HIDDEN | Mods.DOUBLETIME
    assert mods_codec.normalize(72) == Mods.HIDDEN | Mods.DOUBLETIME
    assert mods_codec.normalize(None) == Mods.NOMOD


def test_normalize_adds_implied_bits_to_integers():
    assert mods_codec.normalize(512) == Mods.NIGHTCORE | Mods.DOUBLETIME
    assert mods_codec.normalize(576) == Mods.NIGHTCORE | Mods.DOUBLETIME


@pytest.mark.parametrize(
    ("tokens", "expected"),
    [("NM", 1.0), ("DT", 1.5), ("NC", 1.5), ("HT", 0.75), ("HDHR", 1.0)],
)
def test_speed_multiplier(tokens: str, expected: float):
    assert mods_codec.encode(tokens).speed_multiplier == expected
