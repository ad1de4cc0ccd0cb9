"""Board model: a square sudoku grid plus the set of cells given by the generator.

Boards are immutable values. ``set_cell`` returns a new board that differs in a
single cell, which lets the session swap the live board atomically.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from sudoku.errors import InvalidOperation, InvalidValue, MalformedBoard, OutOfRange

Position = tuple[int, int]
FixedCell = tuple[int, int]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def box_dimension(size: int) -> int:
    """Return the box edge for ``size`` or raise ``InvalidValue`` when it is not a perfect square."""
    if not _is_int(size) or size < 1:
        raise InvalidValue(f"board size must be a positive integer, got {size!r}")
    root = math.isqrt(size)
    if root * root != size:
        raise InvalidValue(f"board size {size} is not a perfect square")
    return root


@dataclass(frozen=True, slots=True)
class Board:
    size: int
    cells: tuple[int, ...]
    fixed_cells: tuple[FixedCell, ...] = ()
    _fixed_lookup: dict[int, int] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        try:
            box_dimension(self.size)
        except InvalidValue as exc:
            raise MalformedBoard(str(exc)) from None

        cells = tuple(self.cells)
        cell_count = self.size * self.size
        if len(cells) != cell_count:
            raise MalformedBoard(f"expected {cell_count} cells for size {self.size}, got {len(cells)}")
        for index, value in enumerate(cells):
            if not _is_int(value) or not 0 <= value <= self.size:
                raise MalformedBoard(f"cell {index} holds {value!r}, expected 0..{self.size}")

        lookup: dict[int, int] = {}
        for entry in _iter_fixed(self.fixed_cells):
            index, value = entry
            if not _is_int(index) or not 0 <= index < cell_count:
                raise MalformedBoard(f"fixed cell index {index!r} outside the grid")
            if not _is_int(value) or not 1 <= value <= self.size:
                raise MalformedBoard(f"fixed cell {index} holds {value!r}, expected 1..{self.size}")
            if index in lookup:
                raise MalformedBoard(f"fixed cell {index} listed more than once")
            if cells[index] != value:
                raise MalformedBoard(
                    f"fixed cell {index} expects {value} but the grid holds {cells[index]}"
                )
            lookup[index] = value

        object.__setattr__(self, "cells", cells)
        object.__setattr__(self, "fixed_cells", tuple(sorted(lookup.items())))
        object.__setattr__(self, "_fixed_lookup", lookup)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_payload(cls, data: Any) -> "Board":
        """Build a board from the service JSON shape ``{size, cells, fixed_cells}``."""
        if not isinstance(data, Mapping):
            raise MalformedBoard(f"board payload must be an object, got {type(data).__name__}")
        missing = [key for key in ("size", "cells", "fixed_cells") if key not in data]
        if missing:
            raise MalformedBoard(f"board payload missing {', '.join(missing)}")
        cells = data["cells"]
        fixed = data["fixed_cells"]
        if not isinstance(cells, (list, tuple)):
            raise MalformedBoard("board payload 'cells' must be a list")
        if not isinstance(fixed, (list, tuple)):
            raise MalformedBoard("board payload 'fixed_cells' must be a list")
        return cls(size=data["size"], cells=tuple(cells), fixed_cells=tuple(fixed))

    def to_payload(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "cells": list(self.cells),
            "fixed_cells": [[index, value] for index, value in self.fixed_cells],
        }

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def box_dim(self) -> int:
        return math.isqrt(self.size)

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def index_of(self, row: int, col: int) -> int:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise OutOfRange(row * self.size + col, self.cell_count)
        return row * self.size + col

    def position_of(self, index: int) -> Position:
        self._check_index(index)
        return divmod(index, self.size)

    def box_of(self, row: int, col: int) -> Position:
        box = self.box_dim
        return row // box, col // box

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_fixed(self, index: int) -> bool:
        return index in self._fixed_lookup

    def value_at(self, index: int) -> int:
        self._check_index(index)
        return self.cells[index]

    @property
    def clue_count(self) -> int:
        return len(self._fixed_lookup)

    @property
    def empty_count(self) -> int:
        return sum(1 for value in self.cells if value == 0)

    @property
    def is_complete(self) -> bool:
        return all(self.cells)

    # ------------------------------------------------------------------
    # Mutation (copy-on-write)
    # ------------------------------------------------------------------

    def set_cell(self, index: int, value: int) -> "Board":
        """Return a copy with ``cells[index]`` replaced.

        Raises ``OutOfRange`` for an index outside the grid, ``InvalidOperation``
        for a fixed cell and ``InvalidValue`` for a value outside ``0..size``.
        """
        self._check_index(index)
        if self.is_fixed(index):
            raise InvalidOperation(index)
        if not _is_int(value) or not 0 <= value <= self.size:
            raise InvalidValue(f"value {value!r} outside 0..{self.size}")
        if self.cells[index] == value:
            return self
        cells = list(self.cells)
        cells[index] = value
        return Board(size=self.size, cells=tuple(cells), fixed_cells=self.fixed_cells)

    def _check_index(self, index: int) -> None:
        if not _is_int(index) or not 0 <= index < self.cell_count:
            raise OutOfRange(index, self.cell_count)

    # ------------------------------------------------------------------
    # Text rendering
    # ------------------------------------------------------------------

    def format_grid(self, empty: str = "□") -> str:
        """Render the grid as text with ``|`` between boxes and dashed rules between box rows."""
        box = self.box_dim
        width = max(len(str(self.size)), 2)
        rule_length = (width + 1) * self.size + (box + 1 if box > 1 else 0)
        rule = "-" * rule_length
        lines: list[str] = []
        for row in range(self.size):
            if row and row % box == 0:
                lines.append(rule)
            parts: list[str] = []
            for col in range(self.size):
                if col and col % box == 0:
                    parts.append("| ")
                value = self.cells[row * self.size + col]
                parts.append(f"{(str(value) if value else empty):>{width}} ")
            lines.append("".join(parts))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format_grid()


def _iter_fixed(fixed: Iterable[Any] | Mapping[int, int]) -> Iterator[FixedCell]:
    if isinstance(fixed, Mapping):
        yield from fixed.items()
        return
    for entry in fixed:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise MalformedBoard(f"fixed cell entry {entry!r} is not an [index, value] pair")
        yield entry[0], entry[1]
