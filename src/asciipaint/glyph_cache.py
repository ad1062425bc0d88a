"""Two-tier cache of rasterized glyph bitmaps.

The memory tier lives as long as the ``GlyphCache`` object. The optional
disk tier keeps one PNG per glyph so later runs skip rasterization. Since
rendering a given key is deterministic, files are never rewritten with
different content, and concurrent writers are harmless as long as each
file appears atomically.
"""

import hashlib
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

import numpy as np
from PIL import Image

from asciipaint.glyphs import FONT_PATH, rasterize

logger = logging.getLogger(__name__)

CACHE_DIR_ENV = "ASCIIPAINT_CACHE_DIR"


def default_cache_dir() -> Path:
    """Where the disk tier lives unless told otherwise."""
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg).expanduser() if xdg else Path("~/.cache").expanduser()
    return base / "asciipaint"


class GlyphKey(NamedTuple):
    char: str
    width: int
    height: int

    def digest(self) -> str:
        """Stable content hash, identical across processes and platforms."""
        hasher = hashlib.sha256()
        hasher.update(self.char.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(f"{self.width}x{self.height}".encode("ascii"))
        return hasher.hexdigest()[:32]


@dataclass
class CacheStats:
    memory_hits: int = 0
    disk_hits: int = 0
    renders: int = 0


class GlyphCache:
    """
    Memoize ``rasterize`` by ``GlyphKey``.

    Usage:
        cache = GlyphCache(default_cache_dir())
        glyphs = cache.warm(" .:#@", 10, 20)

    With ``cache_dir=None`` only the memory tier is used.
    """

    def __init__(self, cache_dir: str | Path | None = None, font_path: str | Path = FONT_PATH):
        self.font_path = Path(font_path)
        # One subdirectory per font so bitmaps from different fonts never collide
        self.directory = Path(cache_dir).expanduser() / self.font_path.stem if cache_dir is not None else None
        self.stats = CacheStats()
        self._memory: dict[GlyphKey, np.ndarray] = {}

    def __len__(self) -> int:
        return len(self._memory)

    def __contains__(self, key: GlyphKey) -> bool:
        return key in self._memory

    def path_for(self, key: GlyphKey) -> Path | None:
        if self.directory is None:
            return None
        return self.directory / f"{key.digest()}.png"

    def get_or_render(self, key: GlyphKey) -> np.ndarray:
        bitmap = self._memory.get(key)
        if bitmap is not None:
            self.stats.memory_hits += 1
            return bitmap

        path = self.path_for(key)
        if path is not None and path.exists():
            bitmap = self._read(path, key)
            if bitmap is not None:
                self.stats.disk_hits += 1
                self._memory[key] = bitmap
                return bitmap

        bitmap = rasterize(key.char, key.width, key.height, self.font_path)
        self.stats.renders += 1
        if path is not None:
            self._write(path, bitmap)
        self._memory[key] = bitmap
        return bitmap

    def warm(self, chars: str, width: int, height: int) -> list[np.ndarray]:
        """Fetch or render every character, returning bitmaps in the same order."""
        start = time.perf_counter()
        before = self.stats.renders
        glyphs = [self.get_or_render(GlyphKey(char, width, height)) for char in chars]
        logger.debug(
            "Warmed %d glyphs at %dx%d (%d rendered) in %.3fs",
            len(glyphs),
            width,
            height,
            self.stats.renders - before,
            time.perf_counter() - start,
        )
        return glyphs

    def clear(self) -> None:
        """Drop both tiers. Everything is rebuilt on demand."""
        self._memory.clear()
        if self.directory is None or not self.directory.exists():
            return
        # Includes temp files orphaned by a writer that died before its rename
        for pattern in ("*.png", ".*.tmp"):
            for path in self.directory.glob(pattern):
                path.unlink(missing_ok=True)

    def _read(self, path: Path, key: GlyphKey) -> np.ndarray | None:
        """Load a cached bitmap, or None if the file can't be trusted."""
        try:
            with Image.open(path) as img:
                img.load()
                if img.mode != "L" or img.size != (key.width, key.height):
                    logger.warning(
                        "Ignoring cached glyph %s: expected L %dx%d, got %s %dx%d",
                        path,
                        key.width,
                        key.height,
                        img.mode,
                        *img.size,
                    )
                    return None
                bitmap = np.array(img, dtype=np.uint8)
        except (OSError, SyntaxError, ValueError) as exc:
            logger.warning("Ignoring unreadable cached glyph %s: %s", path, exc)
            return None
        bitmap.setflags(write=False)
        return bitmap

    def _write(self, path: Path, bitmap: np.ndarray) -> None:
        """Publish a bitmap atomically: write a temp file, then rename over the target."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
        except OSError as exc:
            logger.warning("Glyph cache disabled for %s: %s", path, exc)
            return
        try:
            with os.fdopen(fd, "wb") as f:
                Image.fromarray(bitmap).save(f, format="PNG")
            os.replace(tmp_name, path)
        except OSError as exc:
            logger.warning("Could not write cached glyph %s: %s", path, exc)
            Path(tmp_name).unlink(missing_ok=True)
