import numpy as np
from PIL import Image

from asciipaint.charsets import validate_palette
from asciipaint.engine import CharacterGrid, assemble
from asciipaint.sampling import resample


def bucket_indices(samples: np.ndarray, palette_length: int) -> np.ndarray:
    """Quantize luminance samples into ``palette_length`` equal-width buckets.

    ``index = floor(palette_length * v / 256)``, so 0 lands on the first
    palette entry and 255 on the last.
    """
    values = np.asarray(samples, dtype=np.int64)
    return np.clip(palette_length * values // 256, 0, palette_length - 1)


def render_values(
    image: Image.Image,
    cols: int,
    rows: int,
    invert: bool,
    palette: str,
) -> CharacterGrid:
    """Pick one palette character per cell from its nearest-neighbour luminance."""
    validate_palette(palette)
    samples = resample(image, cols, rows, invert)
    indices = bucket_indices(samples, len(palette))
    return assemble((palette[i] for i in indices.ravel()), cols)
