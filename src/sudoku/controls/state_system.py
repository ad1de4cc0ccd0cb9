"""Keeps control enablement in step with the session phase and puzzle settings."""
from __future__ import annotations

from esper import World

from sudoku.controls.components import ClueField, ControlAction, ControlButton
from sudoku.events.bus import (
    EVENT_BOARD_REPLACED,
    EVENT_CLUES_EDITED,
    EVENT_SESSION_PHASE_CHANGED,
    EVENT_SIZE_CHOSEN,
    EventBus,
)
from sudoku.errors import InvalidValue
from sudoku.utils.clues import clue_bounds
from sudoku.utils.session_state import get_puzzle_settings, get_session_state


class ControlStateSystem:
    """Disables generate/solve while a request is in flight and solve when there is no board."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        for name in (EVENT_SESSION_PHASE_CHANGED, EVENT_BOARD_REPLACED, EVENT_SIZE_CHOSEN, EVENT_CLUES_EDITED):
            self.event_bus.subscribe(name, self._on_change)
        self.refresh()

    def _on_change(self, sender, **payload) -> None:
        self.refresh()

    def refresh(self) -> None:
        state = get_session_state(self.world)
        settings = get_puzzle_settings(self.world)
        busy = state.busy
        for _, button in self.world.get_component(ControlButton):
            if button.action == ControlAction.GENERATE:
                button.enabled = not busy
            elif button.action == ControlAction.SOLVE:
                button.enabled = not busy and state.board is not None
            elif button.action == ControlAction.CHOOSE_SIZE:
                button.selected = button.size == settings.size
        try:
            minimum, maximum = clue_bounds(settings.size)
        except InvalidValue:
            helper = "Fewer clues = harder puzzle"
        else:
            helper = f"Fewer clues = harder puzzle ({minimum}-{maximum})"
        for _, field in self.world.get_component(ClueField):
            field.helper_text = helper
