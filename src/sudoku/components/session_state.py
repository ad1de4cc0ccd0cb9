"""Session state resource describing the request lifecycle and the live board."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from sudoku.components.board import Board


class SessionPhase(Enum):
    """Phases of the generate/solve lifecycle."""
    IDLE = auto()
    GENERATING = auto()
    LOADED = auto()
    SOLVING = auto()
    ERROR = auto()


BUSY_PHASES = frozenset({SessionPhase.GENERATING, SessionPhase.SOLVING})


@dataclass
class SessionState:
    """Singleton component owning the single live board and the last error."""
    phase: SessionPhase = SessionPhase.IDLE
    board: Optional[Board] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.phase in BUSY_PHASES
