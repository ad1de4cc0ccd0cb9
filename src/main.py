"""Entry point for the sudoku board client.

Sets up the ECS world, event bus, systems, the service client and the Arcade window.
"""
import logging

from arcade import Window, run, set_background_color, color

from sudoku.config import AppConfig, load_config
from sudoku.constants import WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from sudoku.controls.factory import spawn_control_panel
from sudoku.controls.input_system import ControlInputSystem
from sudoku.controls.state_system import ControlStateSystem
from sudoku.events.bus import EVENT_KEY_PRESS, EVENT_MOUSE_PRESS, EVENT_SHUTDOWN, EVENT_TICK, EventBus
from sudoku.services.board_service import BoardServiceClient
from sudoku.systems.grid_interaction import GridInteractionSystem
from sudoku.systems.input import InputSystem
from sudoku.systems.render import RenderSystem
from sudoku.systems.session_system import SessionSystem
from sudoku.world import create_world

logger = logging.getLogger(__name__)


class SudokuWindow(Window):
    def __init__(self, config: AppConfig):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE, resizable=True)
        self.set_update_rate(1/60)
        self.config = config
        self.event_bus = EventBus()
        self.world = create_world(session_config=config.session)
        self.service = BoardServiceClient.from_config(config.service)

        # Session and grid systems
        self.session_system = SessionSystem(self.world, self.event_bus, self.service, config=config.session)
        self.grid_interaction_system = GridInteractionSystem(self.world, self.event_bus)

        # Interface systems
        spawn_control_panel(self.world, self.height)
        self.control_input_system = ControlInputSystem(self.world, self.event_bus)
        self.control_state_system = ControlStateSystem(self.world, self.event_bus)
        self.input_system = InputSystem(self.world, self.event_bus, self)
        self.render_system = RenderSystem(self.world, self.event_bus, self)

        set_background_color(color.WHITE_SMOKE)
        logger.info("Using solving service at %s", config.service.base_url)

    def on_resize(self, width: int, height: int):
        spawn_control_panel(self.world, height)
        self.control_state_system.refresh()
        return super().on_resize(width, height)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button, modifiers=modifiers)

    def on_key_press(self, symbol: int, modifiers: int):
        self.event_bus.emit(EVENT_KEY_PRESS, symbol=symbol, modifiers=modifiers)

    def on_close(self):
        self.event_bus.emit(EVENT_SHUTDOWN)
        self.service.close()
        super().on_close()


def main(argv=None):
    config = load_config(argv)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    SudokuWindow(config)
    run()


if __name__ == "__main__":
    main()
