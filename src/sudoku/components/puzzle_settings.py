from dataclasses import dataclass

from sudoku.constants import DEFAULT_CLUES, DEFAULT_SIZE


@dataclass
class PuzzleSettings:
    """Size and clue count the next generate request will ask for."""
    size: int = DEFAULT_SIZE
    clues: int = DEFAULT_CLUES
    clue_text: str = str(DEFAULT_CLUES)
    clue_field_focused: bool = False
    # Used when the clue field is empty or not a number.
    default_clues: int = DEFAULT_CLUES
