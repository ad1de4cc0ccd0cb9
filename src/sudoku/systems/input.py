from esper import World

from sudoku.events.bus import EVENT_CELL_CLICK, EVENT_MOUSE_PRESS, EventBus
from sudoku.ui.layout import cell_at_point, compute_grid_geometry
from sudoku.utils.session_state import get_live_board


class InputSystem:
    """Maps left clicks over the grid to cell clicks."""

    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button')
        if x is None or y is None:
            return
        # Left button (1) only; right-click deselection is handled by the grid system.
        if button != 1:
            return
        board = get_live_board(self.world)
        if board is None:
            return
        geometry = compute_grid_geometry(self.window.width, self.window.height, board.size)
        index = cell_at_point(geometry, float(x), float(y))
        if index is None:
            return
        self.event_bus.emit(EVENT_CELL_CLICK, index=index)
