import pytest

from asciipaint.charsets import BRAILLE, DEFAULT, KEYBOARD, PALETTES, SLASHES, resolve_palette, validate_palette
from asciipaint.engine import InvalidInputError


def test_presets_are_valid_palettes():
    for palette in PALETTES.values():
        assert validate_palette(palette) == palette


def test_braille_has_256_levels():
    assert len(BRAILLE) == 256
    assert BRAILLE[0] == "⠀"
    assert BRAILLE[-1] == "⣿"


def test_resolve_by_name():
    assert resolve_palette("default") == DEFAULT
    assert resolve_palette("keyboard") == KEYBOARD


def test_resolve_by_index():
    assert resolve_palette(0) == DEFAULT
    assert resolve_palette("1") == SLASHES
    assert resolve_palette(2) == BRAILLE


def test_resolve_out_of_range_index():
    with pytest.raises(InvalidInputError, match="Invalid palette index"):
        resolve_palette(len(PALETTES))


def test_resolve_unknown_name():
    with pytest.raises(InvalidInputError, match="Unknown palette"):
        resolve_palette("emoji")


def test_empty_palette_rejected():
    with pytest.raises(InvalidInputError):
        validate_palette("")


def test_duplicate_characters_rejected():
    with pytest.raises(InvalidInputError, match="repeats"):
        validate_palette(" .:.#")
