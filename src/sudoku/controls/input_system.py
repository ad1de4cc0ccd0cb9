"""Input handling for the control column."""
from esper import World

from sudoku.controls.components import ClueField, ControlAction, ControlButton
from sudoku.events.bus import (
    EVENT_CLUE_FIELD_FOCUS,
    EVENT_CLUES_EDITED,
    EVENT_GENERATE_REQUEST,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_PRESS,
    EVENT_SIZE_CHOSEN,
    EVENT_SOLVE_REQUEST,
    EventBus,
)
from sudoku.utils.clues import parse_clue_text
from sudoku.utils.keys import KEY_BACKSPACE, KEY_DELETE, KEY_ENTER, KEY_ESCAPE, KEY_KP_ENTER, digit_for_key
from sudoku.utils.session_state import get_puzzle_settings

MAX_CLUE_DIGITS = 3


class ControlInputSystem:
    """Turns clicks on control buttons into session requests and edits the clue field."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    def on_mouse_press(self, sender, **payload) -> None:
        x = payload.get("x")
        y = payload.get("y")
        button = payload.get("button")
        if x is None or y is None or button != 1:
            return
        self.handle_mouse_press(float(x), float(y))

    def handle_mouse_press(self, x: float, y: float) -> bool:
        """Activate the control under (x, y). Returns True when a control consumed the click."""
        for _, field in self.world.get_component(ClueField):
            if field.contains(x, y):
                self._set_focus(True)
                return True
        self._set_focus(False)

        for _, control in self.world.get_component(ControlButton):
            if not control.enabled or not control.contains(x, y):
                continue
            self._activate(control)
            return True
        return False

    def on_key_press(self, sender, **payload) -> None:
        symbol = payload.get("symbol")
        if symbol is None:
            return
        self.handle_key_press(int(symbol))

    def handle_key_press(self, symbol: int) -> bool:
        settings = get_puzzle_settings(self.world)
        if not settings.clue_field_focused:
            return False
        if symbol in (KEY_ENTER, KEY_KP_ENTER, KEY_ESCAPE):
            self._set_focus(False)
            return True
        text = settings.clue_text
        if symbol in (KEY_BACKSPACE, KEY_DELETE):
            text = text[:-1]
        else:
            digit = digit_for_key(symbol)
            if digit is None or len(text) >= MAX_CLUE_DIGITS:
                return False
            text = text + digit
        self.set_clue_text(text)
        return True

    def set_clue_text(self, text: str) -> None:
        settings = get_puzzle_settings(self.world)
        settings.clue_text = text
        settings.clues = parse_clue_text(text, default=settings.default_clues)
        self.event_bus.emit(EVENT_CLUES_EDITED, text=text, clues=settings.clues)

    def choose_size(self, size: int) -> None:
        settings = get_puzzle_settings(self.world)
        if settings.size == size:
            return
        settings.size = size
        self.event_bus.emit(EVENT_SIZE_CHOSEN, size=size)

    def _activate(self, control: ControlButton) -> None:
        if control.action == ControlAction.CHOOSE_SIZE and control.size is not None:
            self.choose_size(control.size)
        elif control.action == ControlAction.GENERATE:
            self.event_bus.emit(EVENT_GENERATE_REQUEST)
        elif control.action == ControlAction.SOLVE:
            self.event_bus.emit(EVENT_SOLVE_REQUEST)

    def _set_focus(self, focused: bool) -> None:
        settings = get_puzzle_settings(self.world)
        if settings.clue_field_focused == focused:
            return
        settings.clue_field_focused = focused
        self.event_bus.emit(EVENT_CLUE_FIELD_FOCUS, focused=focused)
