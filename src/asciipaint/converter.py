import logging
from pathlib import Path

from PIL import Image

from asciipaint.buckets import render_values
from asciipaint.charsets import DEFAULT
from asciipaint.engine import CharacterGrid, Mode
from asciipaint.glyph_cache import GlyphCache
from asciipaint.matching import render_template_match
from asciipaint.sampling import CELL_ASPECT, grid_rows

logger = logging.getLogger(__name__)

DEFAULT_COLS = 80


def render(
    image: Image.Image,
    mode: Mode | str,
    cols: int = DEFAULT_COLS,
    invert: bool = False,
    palette: str = DEFAULT,
    cell_aspect: float = CELL_ASPECT,
    cache: GlyphCache | None = None,
) -> CharacterGrid:
    """Run one conversion with the selected strategy."""
    mode = Mode(mode)
    if mode is Mode.VALUES:
        rows = grid_rows(image.width, image.height, cols, cell_aspect)
        return render_values(image, cols, rows, invert, palette)
    if cache is None:
        cache = GlyphCache()
    return render_template_match(image, cols, cell_aspect, invert, palette, cache)


def image_to_ascii(
    image: Image.Image | str | Path,
    mode: Mode | str = Mode.VALUES,
    cols: int = DEFAULT_COLS,
    invert: bool = False,
    palette: str = DEFAULT,
    cell_aspect: float = CELL_ASPECT,
    cache: GlyphCache | None = None,
) -> str:
    if not isinstance(image, Image.Image):
        image = Image.open(image)
    logger.info("Image %dx%d, mode %s, palette %r", image.width, image.height, image.mode, palette)
    grid = render(image, mode, cols, invert, palette, cell_aspect, cache)
    return str(grid)
