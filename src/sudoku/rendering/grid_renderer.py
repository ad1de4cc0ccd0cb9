from __future__ import annotations

from typing import TYPE_CHECKING

from sudoku.components.board import Board
from sudoku.ui.layout import GridGeometry, box_boundary_lines, cell_center

if TYPE_CHECKING:
    from sudoku.systems.render import RenderSystem

ACCENT = (25, 118, 210)
THIN_LINE = (221, 221, 221)
SELECTED_FILL = (227, 242, 253)
CELL_FILL = (255, 255, 255)
EDITABLE_TEXT = (51, 51, 51)


class GridRenderer:
    def __init__(self, render_system: RenderSystem):
        self._rs = render_system

    def render(self, arcade, board: Board, geometry: GridGeometry, selected: int | None, headless: bool) -> None:
        rs = self._rs
        rs._last_cell_centers = {
            index: cell_center(geometry, index) for index in range(board.cell_count)
        }
        if headless:
            return

        arcade.draw_lbwh_rectangle_filled(geometry.left, geometry.bottom, geometry.extent, geometry.extent, CELL_FILL)
        if selected is not None:
            row, col = board.position_of(selected)
            arcade.draw_lbwh_rectangle_filled(
                geometry.left + col * geometry.cell_size,
                geometry.top - (row + 1) * geometry.cell_size,
                geometry.cell_size,
                geometry.cell_size,
                SELECTED_FILL,
            )

        font_size = max(int(geometry.cell_size * 0.42), 8)
        for index, (x, y) in rs._last_cell_centers.items():
            value = board.cells[index]
            if value == 0:
                continue
            fixed = board.is_fixed(index)
            arcade.draw_text(
                str(value),
                x,
                y,
                ACCENT if fixed else EDITABLE_TEXT,
                font_size,
                anchor_x="center",
                anchor_y="center",
                bold=fixed,
            )

        # Thin lines first so the box borders stay on top.
        lines = box_boundary_lines(board)
        for thick_pass in (False, True):
            for k, thick in enumerate(lines):
                if thick != thick_pass:
                    continue
                color = ACCENT if thick else THIN_LINE
                width = 2 if thick else 1
                offset = k * geometry.cell_size
                arcade.draw_line(geometry.left + offset, geometry.bottom, geometry.left + offset, geometry.top, color, width)
                arcade.draw_line(geometry.left, geometry.top - offset, geometry.right, geometry.top - offset, color, width)
