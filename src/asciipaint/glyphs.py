import logging
from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from asciipaint.engine import InvalidInputError

logger = logging.getLogger(__name__)

FONTS_DIR = Path(__file__).resolve().parent / "fonts"
FONT_PATH = FONTS_DIR / "DejaVuSansMono.ttf"
# Tried for characters the primary font lacks (Braille, for one)
FALLBACK_FONT_PATH = FONTS_DIR / "DejaVuSans.ttf"

# Last private-use code point; no font we ship draws anything but .notdef for it
MISSING_PROBE = "\U0010fffd"


@lru_cache(maxsize=None)
def fit_font(tile_height: int, font_path: str = str(FONT_PATH)) -> ImageFont.FreeTypeFont:
    """Find the largest font size whose ascent + descent fits within tile_height."""
    for size in range(tile_height, 1, -1):
        font = ImageFont.truetype(font_path, size)
        ascent, descent = font.getmetrics()
        if ascent + descent <= tile_height:
            return font
    return ImageFont.truetype(font_path, 1)


def _cell_width(font: ImageFont.FreeTypeFont) -> int:
    return max(1, round(font.getlength("M")))


def _draw(char: str, font: ImageFont.FreeTypeFont, width: int, height: int) -> Image.Image:
    img = Image.new("L", (width, height), 255)
    draw = ImageDraw.Draw(img)
    # Binary rendering: every pixel is 0 or 255
    draw.fontmode = "1"
    draw.text((0, 0), char, fill=0, font=font)
    return img


@lru_cache(maxsize=None)
def _notdef(tile_height: int, font_path: str, width: int) -> bytes:
    font = fit_font(tile_height, font_path)
    return _draw(MISSING_PROBE, font, width, tile_height).tobytes()


def _render_covered(char: str, font_path: str, width: int, height: int) -> Image.Image | None:
    """Render with one font, or None if that font only has .notdef for ``char``."""
    font = fit_font(height, font_path)
    # Wider glyphs (from a proportional fallback) are drawn whole, then squeezed into the cell
    draw_width = max(width, round(font.getlength(char)))
    img = _draw(char, font, draw_width, height)
    if char != MISSING_PROBE and img.tobytes() == _notdef(height, font_path, draw_width):
        return None
    if draw_width != width:
        img = img.resize((width, height), Image.NEAREST)
    return img


def rasterize(
    char: str,
    tile_width: int,
    tile_height: int,
    font_path: str | Path = FONT_PATH,
    fallback_path: str | Path | None = FALLBACK_FONT_PATH,
) -> np.ndarray:
    """Render ``char`` black-on-white into a tile_height x tile_width uint8 bitmap.

    The glyph is drawn at the top-left of a cell one advance wide and then
    stretched to the tile width. Characters the primary font lacks are drawn
    with the fallback font in the same cell; characters neither font covers
    come back as a blank (all 255) tile. The returned array is read-only.
    """
    if tile_width <= 0 or tile_height <= 0:
        raise InvalidInputError(f"Invalid tile size: {tile_width}x{tile_height}")
    cell_width = _cell_width(fit_font(tile_height, str(font_path)))
    font_paths = [str(font_path)] if fallback_path is None else [str(font_path), str(fallback_path)]

    img = None
    try:
        for path in font_paths:
            img = _render_covered(char, path, cell_width, tile_height)
            if img is not None:
                break
        else:
            logger.debug("No font covers %r (U+%04X), using a blank glyph", char, ord(char[0]))
    except (OSError, ValueError) as exc:
        logger.warning("Could not render %r, using a blank glyph: %s", char, exc)
        img = None
    if img is None:
        img = Image.new("L", (cell_width, tile_height), 255)

    if cell_width != tile_width:
        img = img.resize((tile_width, tile_height), Image.NEAREST)

    bitmap = np.array(img, dtype=np.uint8)
    bitmap.setflags(write=False)
    return bitmap
