import logging
from collections.abc import Sequence

import numpy as np
from PIL import Image

from asciipaint.charsets import validate_palette
from asciipaint.engine import CharacterGrid, InvalidInputError, assemble
from asciipaint.glyph_cache import GlyphCache
from asciipaint.sampling import CELL_ASPECT, grid_rows, resize_gray

logger = logging.getLogger(__name__)

TILE_WIDTH = 10

# Emitted for boundary tiles that are smaller than a full tile. This is a
# visible artifact of the resize arithmetic and is left visible on purpose.
SENTINEL = "_"


def tile_size(cell_aspect: float = CELL_ASPECT) -> tuple[int, int]:
    """Pixel (width, height) of one tile for the given cell aspect."""
    return TILE_WIDTH, max(1, int(TILE_WIDTH * cell_aspect))


def match_tiles(pixels: np.ndarray, cols: int, rows: int, glyphs: Sequence[np.ndarray]) -> list[int | None]:
    """Pick the closest glyph for every tile by sum of squared differences.

    ``pixels`` is a (height, width) grayscale image cut into ``rows`` x ``cols``
    tiles of the glyph size, row-major. Returns one palette index per tile,
    the earliest index on ties, or None where the image ran out before the
    tile was complete.
    """
    if not glyphs:
        raise InvalidInputError("Need at least one glyph to match against")
    tile_h, tile_w = glyphs[0].shape
    if any(g.shape != (tile_h, tile_w) for g in glyphs):
        raise ValueError("All glyph bitmaps must share the same size")

    arr = np.asarray(pixels, dtype=np.int32)
    full_rows = min(rows, arr.shape[0] // tile_h)
    full_cols = min(cols, arr.shape[1] // tile_w)

    result: list[int | None] = [None] * (cols * rows)
    if full_rows and full_cols:
        trimmed = arr[: full_rows * tile_h, : full_cols * tile_w]
        tiles = trimmed.reshape(full_rows, tile_h, full_cols, tile_w).transpose(0, 2, 1, 3)
        # tiles is now (full_rows, full_cols, tile_h, tile_w)

        scores = np.empty((len(glyphs), full_rows, full_cols), dtype=np.int64)
        for i, glyph in enumerate(glyphs):
            diff = tiles - glyph.astype(np.int32)
            scores[i] = (diff * diff).sum(axis=(2, 3), dtype=np.int64)

        # argmin returns the first minimum, which is the tie-break we want
        best = scores.argmin(axis=0)
        for r in range(full_rows):
            for c in range(full_cols):
                result[r * cols + c] = int(best[r, c])

    for i, index in enumerate(result):
        if index is None:
            r, c = divmod(i, cols)
            logger.debug("Tile size mismatch at row %d, col %d", r, c)
    return result


def render_template_match(
    image: Image.Image,
    cols: int,
    cell_aspect: float,
    invert: bool,
    palette: str,
    cache: GlyphCache,
) -> CharacterGrid:
    """Choose, for every cell, the palette glyph that looks most like that part of the image."""
    validate_palette(palette)
    rows = grid_rows(image.width, image.height, cols, cell_aspect)
    tile_w, tile_h = tile_size(cell_aspect)

    width = cols * tile_w
    height = max(1, int(width / (image.width / image.height)))
    logger.info("Matching %d x %d tiles of %dx%d on a %dx%d image", cols, rows, tile_w, tile_h, width, height)

    pixels = np.asarray(resize_gray(image, width, height, invert), dtype=np.uint8)
    glyphs = cache.warm(palette, tile_w, tile_h)

    indices = match_tiles(pixels, cols, rows, glyphs)
    mismatched = indices.count(None)
    if mismatched:
        logger.warning("%d boundary tiles were too small and show %r", mismatched, SENTINEL)
    return assemble((SENTINEL if i is None else palette[i] for i in indices), cols)
