"""Exception hierarchy shared by the board model, session flow and service client."""
from __future__ import annotations


class SudokuError(Exception):
    """Base class for every error raised by the sudoku package."""


# ============================================================================
# BOARD MODEL
# ============================================================================
class BoardError(SudokuError):
    """A local board operation was refused."""


class InvalidOperation(BoardError):
    """Attempt to overwrite a fixed (given) cell."""

    def __init__(self, index: int):
        super().__init__(f"cell {index} is fixed and cannot be changed")
        self.index = index


class OutOfRange(BoardError, IndexError):
    """Cell index outside ``[0, size*size)``."""

    def __init__(self, index: int, cell_count: int):
        super().__init__(f"cell index {index} outside 0..{cell_count - 1}")
        self.index = index
        self.cell_count = cell_count


class InvalidValue(BoardError, ValueError):
    """Value, size or clue count outside its permitted range."""


class MalformedBoard(BoardError, ValueError):
    """Board data that violates the board invariants (usually from the service)."""


# ============================================================================
# SESSION
# ============================================================================
class SessionError(SudokuError):
    """A session action cannot be started in the current state."""


class NoBoardError(SessionError):
    def __init__(self, message: str = "No board to solve"):
        super().__init__(message)


class RequestInFlightError(SessionError):
    def __init__(self, kind: str | None = None):
        message = "A request is already in progress"
        if kind:
            message = f"{message} ({kind})"
        super().__init__(message)
        self.kind = kind


# ============================================================================
# SERVICE
# ============================================================================
class ServiceFailure(SudokuError):
    """The external solving service could not fulfil a request."""


class TransportError(ServiceFailure):
    """Network level failure: unreachable host, refused connection, timeout."""


class ServiceError(ServiceFailure):
    """The service answered with a non-success HTTP status."""

    def __init__(self, status: int, message: str | None = None):
        super().__init__(message or f"HTTP error! status: {status}")
        self.status = status


class Unsolvable(ServiceFailure):
    """The solve endpoint reported that the puzzle has no solution (HTTP 400).

    Not a ``ServiceError``: callers handling generic HTTP failures do not see it.
    """

    def __init__(self, status: int = 400):
        super().__init__("No solution found for this board")
        self.status = status
