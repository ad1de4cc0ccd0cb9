"""Rendering of the control column: title, size presets, clue field, action buttons, status."""
from __future__ import annotations

from esper import World

from sudoku.components.session_state import SessionPhase
from sudoku.constants import CONTROL_COLUMN_WIDTH, CONTROL_PADDING
from sudoku.controls.components import ClueField, ControlButton
from sudoku.utils.session_state import get_puzzle_settings, get_session_state

PANEL_FILL = (245, 247, 250)
BUTTON_FILL = (25, 118, 210)
BUTTON_DISABLED = (189, 189, 189)
ERROR_TEXT = (211, 47, 47)
MUTED_TEXT = (117, 117, 117)

_PHASE_STATUS = {
    SessionPhase.GENERATING: "Generating...",
    SessionPhase.SOLVING: "Solving...",
}


def status_line(world: World) -> tuple[str, bool]:
    """Return the status text for the current session and whether it is an error."""
    state = get_session_state(world)
    if state.phase == SessionPhase.ERROR and state.error:
        return state.error, True
    if state.phase in _PHASE_STATUS:
        return _PHASE_STATUS[state.phase], False
    if state.board is None:
        return 'No board loaded. Click "Generate New" to start', False
    return f"{state.board.size}x{state.board.size} board, {state.board.clue_count} clues", False


class ControlRenderSystem:
    """Draws the control column every frame."""

    def __init__(self, world: World, window) -> None:
        self.world = world
        self.window = window

    def process(self, arcade) -> None:
        arcade.draw_lbwh_rectangle_filled(0, 0, CONTROL_COLUMN_WIDTH, self.window.height, PANEL_FILL)
        arcade.draw_text(
            "Sudoku Solver",
            CONTROL_PADDING,
            self.window.height - 40,
            arcade.color.BLACK,
            22,
            bold=True,
        )
        arcade.draw_text(
            "Board Size",
            CONTROL_PADDING,
            self.window.height - 76,
            MUTED_TEXT,
            11,
        )

        for _, button in self.world.get_component(ControlButton):
            self._draw_button(arcade, button)
        for _, field in self.world.get_component(ClueField):
            self._draw_clue_field(arcade, field)

        text, is_error = status_line(self.world)
        lowest = min(
            (button.y - button.height / 2 for _, button in self.world.get_component(ControlButton)),
            default=self.window.height / 2,
        )
        arcade.draw_text(
            text,
            CONTROL_PADDING,
            lowest - 28,
            ERROR_TEXT if is_error else MUTED_TEXT,
            11,
            multiline=True,
            width=CONTROL_COLUMN_WIDTH - 2 * CONTROL_PADDING,
        )

    def _draw_button(self, arcade, button: ControlButton) -> None:
        left = button.x - button.width / 2
        bottom = button.y - button.height / 2
        if not button.enabled:
            fill, text_color = BUTTON_DISABLED, arcade.color.WHITE
        elif button.selected or button.size is None:
            fill, text_color = BUTTON_FILL, arcade.color.WHITE
        else:
            fill, text_color = arcade.color.WHITE, BUTTON_FILL
        arcade.draw_lbwh_rectangle_filled(left, bottom, button.width, button.height, fill)
        arcade.draw_lbwh_rectangle_outline(left, bottom, button.width, button.height, BUTTON_FILL, border_width=2)
        arcade.draw_text(
            button.label,
            button.x,
            button.y,
            text_color,
            11 if button.size is not None else 13,
            anchor_x="center",
            anchor_y="center",
            bold=True,
        )

    def _draw_clue_field(self, arcade, field: ClueField) -> None:
        settings = get_puzzle_settings(self.world)
        left = field.x - field.width / 2
        bottom = field.y - field.height / 2
        outline = BUTTON_FILL if settings.clue_field_focused else MUTED_TEXT
        arcade.draw_text(field.label, left, field.y + field.height / 2 + 6, MUTED_TEXT, 10)
        arcade.draw_lbwh_rectangle_filled(left, bottom, field.width, field.height, arcade.color.WHITE)
        arcade.draw_lbwh_rectangle_outline(left, bottom, field.width, field.height, outline, border_width=2)
        caret = "|" if settings.clue_field_focused else ""
        arcade.draw_text(
            settings.clue_text + caret,
            left + 10,
            field.y,
            arcade.color.BLACK,
            14,
            anchor_y="center",
        )
        arcade.draw_text(field.helper_text, left, bottom - 18, MUTED_TEXT, 9)
