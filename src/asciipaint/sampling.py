import numpy as np
from PIL import Image, ImageOps

from asciipaint.engine import InvalidInputError

# Terminal cells are roughly twice as tall as they are wide
CELL_ASPECT = 2.0


def grid_rows(width: int, height: int, cols: int, cell_aspect: float = CELL_ASPECT) -> int:
    """Number of character rows that keep the image's proportions at ``cols`` columns."""
    if cols <= 0:
        raise InvalidInputError(f"Column count must be positive, got {cols}")
    if cell_aspect <= 0:
        raise InvalidInputError(f"Cell aspect must be positive, got {cell_aspect}")
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"Invalid image dimensions: {width}x{height}")
    aspect_ratio = width / height
    rows = int(cols / (aspect_ratio * cell_aspect))
    if rows < 1:
        raise InvalidInputError(f"Image {width}x{height} is too wide for {cols} columns (0 rows)")
    return rows


def resize_gray(image: Image.Image, width: int, height: int, invert: bool = False) -> Image.Image:
    """Nearest-neighbour resize to exactly ``width`` x ``height``, as 8-bit luminance."""
    gray = image.convert("L").resize((width, height), Image.NEAREST)
    if invert:
        gray = ImageOps.invert(gray)
    return gray


def resample(image: Image.Image, cols: int, rows: int, invert: bool = False) -> np.ndarray:
    """One luminance sample per output cell. Returns uint8 array of shape (rows, cols)."""
    if cols <= 0:
        raise InvalidInputError(f"Column count must be positive, got {cols}")
    if rows <= 0:
        raise InvalidInputError(f"Row count must be positive, got {rows}")
    return np.asarray(resize_gray(image, cols, rows, invert), dtype=np.uint8)

