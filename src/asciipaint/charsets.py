from asciipaint.engine import InvalidInputError

# Ramps run from emptiest to densest glyph.
DEFAULT = " .-=+*#%@"

SLASHES = ".,`~|\\/+X#"

# Braille patterns: U+2800 to U+28FF (256 characters, 2x4 dot grid)
BRAILLE = "".join(chr(i) for i in range(0x2800, 0x2900))

# Keyboard symbols, Colemak row order
KEYBOARD = " !@#$%^&*()-=_+`~qwfpgjluy;[]arstdhneio'zxcvbkm,./\\|QWFPGJLUY:{}ARSTDHNEIO\"ZXCVBKM<>?"

# Insertion order doubles as the numeric preset index.
PALETTES = {
    "default": DEFAULT,
    "slashes": SLASHES,
    "braille": BRAILLE,
    "keyboard": KEYBOARD,
}


def validate_palette(palette: str) -> str:
    if not palette:
        raise InvalidInputError("Palette must contain at least one character")
    seen = set()
    for char in palette:
        if char in seen:
            raise InvalidInputError(f"Palette repeats character {char!r}")
        seen.add(char)
    return palette


def resolve_palette(name: str | int) -> str:
    """Look up a preset by name or by its index in ``PALETTES``."""
    if isinstance(name, int) or (isinstance(name, str) and name.isdigit()):
        index = int(name)
        presets = list(PALETTES.values())
        if not 0 <= index < len(presets):
            raise InvalidInputError(f"Invalid palette index: {index}")
        return presets[index]
    try:
        return PALETTES[name]
    except KeyError:
        raise InvalidInputError(f"Unknown palette: {name!r}") from None
