from __future__ import annotations

from dataclasses import dataclass

from sudoku.components.board import Board
from sudoku.constants import (
    CONTROL_COLUMN_WIDTH,
    GRID_MARGIN,
    GRID_MAX_HEIGHT_PCT,
    GRID_MAX_WIDTH_PCT,
    GRID_MIN_CELL_SIZE,
)


@dataclass(frozen=True, slots=True)
class GridGeometry:
    size: int
    cell_size: int
    left: float
    bottom: float

    @property
    def extent(self) -> float:
        return self.cell_size * self.size

    @property
    def top(self) -> float:
        return self.bottom + self.extent

    @property
    def right(self) -> float:
        return self.left + self.extent


def compute_grid_geometry(window_width: int, window_height: int, size: int) -> GridGeometry:
    """Fit a ``size`` x ``size`` grid into the area right of the control column."""
    area_width = max(window_width - CONTROL_COLUMN_WIDTH - 2 * GRID_MARGIN, 0)
    area_height = max(window_height - 2 * GRID_MARGIN, 0)
    cell_by_w = area_width * GRID_MAX_WIDTH_PCT / size
    cell_by_h = area_height * GRID_MAX_HEIGHT_PCT / size
    cell_size = max(int(min(cell_by_w, cell_by_h)), GRID_MIN_CELL_SIZE)
    extent = cell_size * size
    left = CONTROL_COLUMN_WIDTH + (window_width - CONTROL_COLUMN_WIDTH - extent) / 2
    bottom = (window_height - extent) / 2
    return GridGeometry(size=size, cell_size=cell_size, left=left, bottom=bottom)


def cell_at_point(geometry: GridGeometry, x: float, y: float) -> int | None:
    """Return the row-major cell index under (x, y); row 0 is drawn at the top."""
    if not (geometry.left <= x < geometry.right and geometry.bottom <= y < geometry.top):
        return None
    col = int((x - geometry.left) // geometry.cell_size)
    row_from_bottom = int((y - geometry.bottom) // geometry.cell_size)
    row = geometry.size - 1 - row_from_bottom
    return row * geometry.size + col


def cell_center(geometry: GridGeometry, index: int) -> tuple[float, float]:
    row, col = divmod(index, geometry.size)
    x = geometry.left + (col + 0.5) * geometry.cell_size
    y = geometry.top - (row + 0.5) * geometry.cell_size
    return x, y


def box_boundary_lines(board: Board) -> list[bool]:
    """For each of the ``size + 1`` grid lines, whether it separates two boxes (or is the edge).

    Rows and columns share the same answer, so one list serves both directions.
    """
    size = board.size
    lines = [True]
    for k in range(1, size):
        lines.append(board.box_of(k - 1, 0)[0] != board.box_of(k, 0)[0])
    lines.append(True)
    return lines
