import argparse
import logging
import sys
from pathlib import Path

from PIL import UnidentifiedImageError

from asciipaint.charsets import PALETTES, resolve_palette, validate_palette
from asciipaint.converter import DEFAULT_COLS, image_to_ascii
from asciipaint.engine import InvalidInputError, Mode
from asciipaint.glyph_cache import GlyphCache, default_cache_dir
from asciipaint.sampling import CELL_ASPECT


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Paint an image with text characters")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument("-c", "--cols", type=int, default=DEFAULT_COLS, help=f"Number of columns (default: {DEFAULT_COLS})")
    parser.add_argument("-I", "--invert", action="store_true", default=False, help="Invert luminance")
    parser.add_argument(
        "-m",
        "--mode",
        default=Mode.VALUES.value,
        choices=[m.value for m in Mode],
        help="values: map brightness to the palette; pxmatch: match glyph shapes (default: values)",
    )
    parser.add_argument(
        "-p",
        "--palette",
        default="default",
        help=f"Palette preset by name or index: {', '.join(PALETTES)} (default: default)",
    )
    parser.add_argument("--chars", default=None, help="Custom palette, emptiest to densest; overrides --palette")
    parser.add_argument(
        "--cell-aspect",
        type=float,
        default=CELL_ASPECT,
        help=f"Height/width ratio of a terminal cell (default: {CELL_ASPECT})",
    )
    cache_group = parser.add_mutually_exclusive_group()
    cache_group.add_argument("--cache-dir", type=Path, default=None, help="Glyph cache directory")
    cache_group.add_argument("--no-cache", action="store_true", default=False, help="Keep glyphs in memory only")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log progress to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    if args.no_cache:
        cache = GlyphCache()
    else:
        cache = GlyphCache(args.cache_dir if args.cache_dir is not None else default_cache_dir())

    try:
        palette = validate_palette(args.chars) if args.chars is not None else resolve_palette(args.palette)
        text = image_to_ascii(
            image_path,
            mode=args.mode,
            cols=args.cols,
            invert=args.invert,
            palette=palette,
            cell_aspect=args.cell_aspect,
            cache=cache,
        )
    except InvalidInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except (UnidentifiedImageError, OSError) as exc:
        print(f"Cannot read image {image_path}: {exc}", file=sys.stderr)
        sys.exit(1)
    print(text)
