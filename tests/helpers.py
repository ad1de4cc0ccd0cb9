from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import Any, Callable

import requests

from sudoku.components.board import Board

SOLVED_4 = (
    1, 2, 3, 4,
    3, 4, 1, 2,
    2, 1, 4, 3,
    4, 3, 2, 1,
)

SOLVED_9 = tuple(
    int(ch)
    for ch in (
        "534678912"
        "672195348"
        "198342567"
        "859761423"
        "426853791"
        "713924856"
        "961537284"
        "287419635"
        "345286179"
    )
)


def solved_cells(size: int) -> tuple[int, ...]:
    if size == 4:
        return SOLVED_4
    if size == 9:
        return SOLVED_9
    raise ValueError(f"no solved grid for size {size}")


def make_board(size: int = 9, fixed=(), filled=()) -> Board:
    """Build a board from a solved grid keeping only ``fixed`` (givens) and ``filled`` (user) indices."""
    solution = solved_cells(size)
    keep = set(fixed) | set(filled)
    cells = tuple(value if index in keep else 0 for index, value in enumerate(solution))
    return Board(size=size, cells=cells, fixed_cells=[(i, solution[i]) for i in fixed])


def make_generated_board(size: int, clues: int) -> Board:
    return make_board(size, fixed=range(clues))


class ImmediateExecutor(Executor):
    """Runs submitted work inline and hands back an already finished future."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, /, *args, **kwargs):
        self.submitted += 1
        future: Future = Future()
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future


class ManualExecutor(Executor):
    """Queues submitted work; ``run_next`` completes the oldest queued call."""

    def __init__(self):
        self.queue: list[tuple[Future, Callable, tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        self.queue.append((future, fn, args, kwargs))
        return future

    def run_next(self) -> Future:
        future, fn, args, kwargs = self.queue.pop(0)
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


class StubBoardService:
    """Records calls; answers with configured boards or raises configured errors."""

    def __init__(self, generated: Board | None = None, solved: Board | None = None):
        self.generated = generated
        self.solved = solved
        self.generate_error: Exception | None = None
        self.solve_error: Exception | None = None
        self.generate_calls: list[tuple[int, int]] = []
        self.solve_calls: list[Board] = []

    def generate(self, size: int, clues: int) -> Board:
        self.generate_calls.append((size, clues))
        if self.generate_error is not None:
            raise self.generate_error
        if self.generated is not None:
            return self.generated
        return make_generated_board(size, clues)

    def solve(self, board: Board) -> Board:
        self.solve_calls.append(board)
        if self.solve_error is not None:
            raise self.solve_error
        if self.solved is not None:
            return self.solved
        return Board(size=board.size, cells=solved_cells(board.size), fixed_cells=board.fixed_cells)


class StubResponse:
    def __init__(self, status_code: int = 200, body: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise requests.JSONDecodeError("Expecting value", "", 0)
        return self._body


class StubHttpSession:
    """Stands in for ``requests.Session``; returns queued responses or raises ``error``."""

    def __init__(self, *responses: StubResponse, error: Exception | None = None):
        self.responses = list(responses)
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    def close(self):
        self.closed = True
