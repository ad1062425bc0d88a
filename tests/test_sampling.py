import numpy as np
import pytest
from PIL import Image, ImageOps

from asciipaint.engine import InvalidInputError
from asciipaint.sampling import grid_rows, resample, resize_gray


def test_grid_rows_square_image():
    # ar = 1, cell aspect 2: half as many rows as columns
    assert grid_rows(100, 100, 80) == 40


def test_grid_rows_tall_image():
    assert grid_rows(50, 200, 10) == 20


def test_grid_rows_custom_cell_aspect():
    assert grid_rows(100, 100, 80, cell_aspect=1.0) == 80


def test_grid_rows_truncates():
    # 2 / (1.5 * 2) = 0.67 -> too wide
    with pytest.raises(InvalidInputError, match="0 rows"):
        grid_rows(30, 20, 2)


@pytest.mark.parametrize("cols", [0, -5])
def test_grid_rows_rejects_non_positive_cols(cols):
    with pytest.raises(InvalidInputError):
        grid_rows(100, 100, cols)


def test_grid_rows_rejects_bad_cell_aspect():
    with pytest.raises(InvalidInputError):
        grid_rows(100, 100, 10, cell_aspect=0.0)


def test_resample_shape_and_dtype():
    img = Image.new("RGB", (37, 23), (10, 20, 30))
    samples = resample(img, 7, 3)
    assert samples.shape == (3, 7)
    assert samples.dtype == np.uint8


def test_resample_nearest_keeps_exact_values():
    img = Image.new("L", (2, 2))
    img.putdata([0, 255, 255, 0])
    samples = resample(img, 4, 4)
    # Nearest neighbour never invents intermediate values
    assert set(np.unique(samples)) == {0, 255}
    assert samples[0, 0] == 0
    assert samples[0, 3] == 255
    assert samples[3, 0] == 255
    assert samples[3, 3] == 0


def test_resample_invert():
    rng = np.random.default_rng(7)
    img = Image.fromarray(rng.integers(0, 256, (12, 16), dtype=np.uint8))
    plain = resample(img, 8, 6)
    inverted = resample(img, 8, 6, invert=True)
    np.testing.assert_array_equal(inverted, 255 - plain)


def test_inversion_is_involutive():
    rng = np.random.default_rng(3)
    img = Image.fromarray(rng.integers(0, 256, (10, 10), dtype=np.uint8))
    once = resize_gray(img, 5, 5, invert=True)
    twice = ImageOps.invert(once)
    np.testing.assert_array_equal(np.asarray(twice), resample(img, 5, 5))


@pytest.mark.parametrize("cols, rows", [(0, 3), (3, 0)])
def test_resample_rejects_degenerate_size(cols, rows):
    with pytest.raises(InvalidInputError):
        resample(Image.new("L", (10, 10)), cols, rows)
