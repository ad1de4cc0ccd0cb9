from __future__ import annotations

from esper import World

from sudoku.components.board import Board
from sudoku.errors import BoardError
from sudoku.events.bus import (
    EVENT_BOARD_REPLACED,
    EVENT_CELL_CHANGED,
    EVENT_CELL_CLICK,
    EVENT_CELL_DESELECTED,
    EVENT_CELL_SELECTED,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_PRESS,
    EVENT_VALUE_ENTRY,
    EventBus,
)
from sudoku.utils.keys import KEY_BACKSPACE, KEY_DELETE, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_UP, digit_for_key
from sudoku.utils.session_state import get_puzzle_settings, get_selection, get_session_state

# Screen coordinates grow upwards, grid rows grow downwards.
_ARROW_STEPS = {
    KEY_LEFT: (0, -1),
    KEY_RIGHT: (0, 1),
    KEY_UP: (-1, 0),
    KEY_DOWN: (1, 0),
}


def parse_cell_input(raw_input, size: int) -> int | None:
    """Translate text typed into a cell to a value, or None when it must be ignored.

    ``""`` clears the cell (0); a string of digits in ``1..size`` sets it.
    Anything else, including signs, spaces and ``"0"``, is refused.
    """
    if not isinstance(raw_input, str):
        return None
    if raw_input == "":
        return 0
    if not (raw_input.isascii() and raw_input.isdigit()):
        return None
    value = int(raw_input)
    if 1 <= value <= size:
        return value
    return None


class GridInteractionSystem:
    """Routes cell selection and value entry to the live board.

    Fixed cells are refused twice: ``select_cell`` will not select them and
    ``Board.set_cell`` will not write them. ``enter_value`` relies on the second
    check only.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_CELL_CLICK, self.on_cell_click)
        self.event_bus.subscribe(EVENT_VALUE_ENTRY, self.on_value_entry)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)
        self.event_bus.subscribe(EVENT_BOARD_REPLACED, self.on_board_replaced)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    @property
    def selected(self) -> int | None:
        return get_selection(self.world).index

    def _board(self) -> Board | None:
        return get_session_state(self.world).board

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_cell(self, index: int) -> bool:
        board = self._board()
        if board is None:
            return False
        if not isinstance(index, int) or not 0 <= index < board.cell_count:
            return False
        if board.is_fixed(index):
            return False
        selection = get_selection(self.world)
        selection.index = index
        row, col = board.position_of(index)
        self.event_bus.emit(EVENT_CELL_SELECTED, index=index, row=row, col=col)
        return True

    def clear_selection(self, reason: str) -> None:
        selection = get_selection(self.world)
        prev = selection.index
        if prev is None:
            return
        selection.index = None
        self.event_bus.emit(EVENT_CELL_DESELECTED, reason=reason, prev_index=prev)

    # ------------------------------------------------------------------
    # Value entry
    # ------------------------------------------------------------------

    def enter_value(self, index: int, raw_input) -> bool:
        """Write typed input into a cell. Invalid input and refused writes are no-ops."""
        board = self._board()
        if board is None:
            return False
        value = parse_cell_input(raw_input, board.size)
        if value is None:
            return False
        try:
            previous = board.value_at(index)
            updated = board.set_cell(index, value)
        except BoardError:
            return False
        if updated is board:
            return True
        get_session_state(self.world).board = updated
        self.event_bus.emit(EVENT_CELL_CHANGED, index=index, previous=previous, value=value)
        return True

    def handle_key(self, symbol: int) -> bool:
        """Apply a key press to the selected cell the way a small text field would."""
        board = self._board()
        index = self.selected
        if board is None or index is None:
            return False
        if symbol in _ARROW_STEPS:
            return self._move_selection(board, index, *_ARROW_STEPS[symbol])
        current = "" if board.cells[index] == 0 else str(board.cells[index])
        if symbol == KEY_DELETE:
            return self.enter_value(index, "")
        if symbol == KEY_BACKSPACE:
            return self.enter_value(index, current[:-1])
        digit = digit_for_key(symbol)
        if digit is None:
            return False
        appended = (current + digit).lstrip("0")
        if parse_cell_input(appended, board.size) is not None:
            return self.enter_value(index, appended)
        return self.enter_value(index, digit)

    def _move_selection(self, board: Board, index: int, d_row: int, d_col: int) -> bool:
        row, col = board.position_of(index)
        row += d_row
        col += d_col
        while 0 <= row < board.size and 0 <= col < board.size:
            candidate = board.index_of(row, col)
            if not board.is_fixed(candidate):
                return self.select_cell(candidate)
            row += d_row
            col += d_col
        return False

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_cell_click(self, sender, **kwargs):
        index = kwargs.get('index')
        if index is None:
            return
        self.select_cell(index)

    def on_value_entry(self, sender, **kwargs):
        index = kwargs.get('index')
        if index is None:
            return
        self.enter_value(index, kwargs.get('raw_input'))

    def on_key_press(self, sender, **kwargs):
        if get_puzzle_settings(self.world).clue_field_focused:
            return
        symbol = kwargs.get('symbol')
        if symbol is None:
            return
        self.handle_key(symbol)

    def on_mouse_press(self, sender, **kwargs):
        # Right-click clears the selection (arcade reports the right button as 4).
        if kwargs.get('button') != 4:
            return
        self.clear_selection(reason='right_click')

    def on_board_replaced(self, sender, **kwargs):
        self.clear_selection(reason=kwargs.get('reason') or 'board_replaced')

