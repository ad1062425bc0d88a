from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class InvalidInputError(ValueError):
    """Raised for arguments that make a conversion impossible."""


class Mode(str, Enum):
    VALUES = "values"
    PIXEL_MATCH = "pxmatch"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CharacterGrid:
    cols: int
    rows: int
    cells: tuple[str, ...]  # row-major, cols * rows entries

    @property
    def lines(self) -> list[str]:
        return ["".join(self.cells[r * self.cols : (r + 1) * self.cols]) for r in range(self.rows)]

    @property
    def line_breaks(self) -> tuple[int, ...]:
        """Indices into ``cells`` after which a row ends."""
        return tuple(range(self.cols - 1, len(self.cells), self.cols))

    def at(self, row: int, col: int) -> str:
        return self.cells[row * self.cols + col]

    def __str__(self) -> str:
        return "\n".join(self.lines)


def assemble(chars: Iterable[str], cols: int) -> CharacterGrid:
    """Reshape a flat row-major character stream into a grid ``cols`` wide."""
    cells = tuple(chars)
    if cols <= 0:
        raise InvalidInputError(f"Column count must be positive, got {cols}")
    rows, remainder = divmod(len(cells), cols)
    if remainder:
        raise InvalidInputError(f"{len(cells)} characters do not fill rows of {cols}")
    return CharacterGrid(cols=cols, rows=rows, cells=cells)
