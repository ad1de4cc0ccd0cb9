from __future__ import annotations

from enum import Enum

from sudoku.components.board import box_dimension
from sudoku.constants import MIN_CLUE_PERCENT
from sudoku.errors import InvalidValue


class ClueMode(Enum):
    """What to do with a clue count outside the permitted range."""
    CLAMP = "clamp"
    REJECT = "reject"


def clue_bounds(size: int) -> tuple[int, int]:
    """Return ``(minimum, maximum)`` clue counts for a board of ``size``."""
    box_dimension(size)
    cell_count = size * size
    minimum = -(-cell_count * MIN_CLUE_PERCENT // 100)
    return minimum, cell_count


def normalize_clues(size: int, clues: int, mode: ClueMode = ClueMode.CLAMP) -> int:
    """Bring ``clues`` into range for ``size`` according to ``mode``.

    Raises ``InvalidValue`` for a non perfect-square size, a non-integer clue
    count, or (in ``REJECT`` mode) an out of range clue count.
    """
    minimum, maximum = clue_bounds(size)
    if not isinstance(clues, int) or isinstance(clues, bool):
        raise InvalidValue(f"clue count must be an integer, got {clues!r}")
    if minimum <= clues <= maximum:
        return clues
    if mode is ClueMode.REJECT:
        raise InvalidValue(f"clue count {clues} outside {minimum}..{maximum} for size {size}")
    return min(max(clues, minimum), maximum)


def parse_clue_text(text: str, default: int) -> int:
    """Parse the clue field text, falling back to ``default`` when empty or not a number."""
    stripped = text.strip()
    if not stripped.isdigit():
        return default
    value = int(stripped)
    return value or default
