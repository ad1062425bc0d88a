import numpy as np
import pytest

from asciipaint.charsets import BRAILLE
from asciipaint.engine import InvalidInputError
from asciipaint.glyphs import FONT_PATH, fit_font, rasterize


def test_embedded_font_ships_with_package():
    assert FONT_PATH.is_file()


def test_bitmap_shape():
    bitmap = rasterize("A", 10, 20)
    assert bitmap.shape == (20, 10)
    assert bitmap.dtype == np.uint8


def test_bitmap_is_pure_black_and_white():
    bitmap = rasterize("@", 10, 20)
    assert set(np.unique(bitmap)) <= {0, 255}


def test_space_is_blank():
    assert np.all(rasterize(" ", 10, 20) == 255)


def test_dense_char_has_ink():
    assert (rasterize("@", 10, 20) == 0).sum() > 0


def test_denser_glyph_has_more_ink():
    assert (rasterize("#", 10, 20) == 0).sum() > (rasterize(".", 10, 20) == 0).sum()


def test_rendering_is_deterministic():
    np.testing.assert_array_equal(rasterize("Q", 12, 24), rasterize("Q", 12, 24))


def test_braille_is_covered():
    # U+28FF has all eight dots
    assert (rasterize("⣿", 10, 20) == 0).sum() > 0


def test_uncovered_char_degrades_to_blank():
    bitmap = rasterize("\U000f0001", 10, 20)
    assert bitmap.shape == (20, 10)
    assert np.all(bitmap == 255)


def test_bitmap_is_read_only():
    bitmap = rasterize("x", 10, 20)
    with pytest.raises(ValueError):
        bitmap[0, 0] = 0


def test_fit_font_fits_tile_height():
    font = fit_font(20)
    ascent, descent = font.getmetrics()
    assert ascent + descent <= 20


@pytest.mark.parametrize("width, height", [(0, 20), (10, 0)])
def test_invalid_tile_size(width, height):
    with pytest.raises(InvalidInputError):
        rasterize("A", width, height)


def test_braille_comes_from_fallback_font():
    one_dot = rasterize("⠁", 10, 20)
    all_dots = rasterize("⣿", 10, 20)
    assert (one_dot == 0).sum() > 0
    assert (all_dots == 0).sum() > (one_dot == 0).sum()


def test_braille_patterns_render_distinctly():
    bitmaps = {rasterize(c, 20, 40).tobytes() for c in BRAILLE}
    assert len(bitmaps) > 200


def test_without_fallback_braille_is_blank():
    assert np.all(rasterize("⣿", 10, 20, fallback_path=None) == 255)


def test_fallback_glyph_keeps_tile_size():
    bitmap = rasterize("⣿", 12, 30)
    assert bitmap.shape == (30, 12)
    assert set(np.unique(bitmap)) <= {0, 255}
