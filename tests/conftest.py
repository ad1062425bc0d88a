import pytest
from PIL import Image

from asciipaint.glyph_cache import GlyphCache


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def glyph_cache(cache_dir):
    return GlyphCache(cache_dir)


@pytest.fixture
def solid():
    """Factory for single-colour images."""

    def make(width, height, value, mode="L"):
        if mode == "RGB":
            value = (value, value, value)
        return Image.new(mode, (width, height), value)

    return make
