from __future__ import annotations

from esper import World

from sudoku.controls.render_system import ControlRenderSystem
from sudoku.events.bus import EVENT_CELL_DESELECTED, EVENT_CELL_SELECTED, EventBus
from sudoku.rendering.grid_renderer import GridRenderer
from sudoku.ui.layout import GridGeometry, compute_grid_geometry
from sudoku.utils.session_state import get_live_board


class RenderSystem:
    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_CELL_SELECTED, self.on_cell_selected)
        self.event_bus.subscribe(EVENT_CELL_DESELECTED, self.on_cell_deselected)
        self.selected: int | None = None
        self.geometry: GridGeometry | None = None
        self._last_cell_centers: dict[int, tuple[float, float]] = {}
        self._grid_renderer = GridRenderer(self)
        self._control_renderer = ControlRenderSystem(world, window)

    def on_cell_selected(self, sender, **kwargs):
        self.selected = kwargs.get('index')

    def on_cell_deselected(self, sender, **kwargs):
        self.selected = None

    def get_cell_center(self, index: int) -> tuple[float, float] | None:
        return self._last_cell_centers.get(index)

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except RuntimeError:
            headless = True

        board = get_live_board(self.world)
        if not headless:
            self._control_renderer.process(arcade)
        if board is None:
            self.geometry = None
            self._last_cell_centers = {}
            return
        self.geometry = compute_grid_geometry(self.window.width, self.window.height, board.size)
        self._grid_renderer.render(arcade, board, self.geometry, self.selected, headless=headless)
