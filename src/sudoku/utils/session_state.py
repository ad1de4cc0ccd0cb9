from __future__ import annotations

from esper import World

from sudoku.components.board import Board
from sudoku.components.cell_selection import CellSelection
from sudoku.components.puzzle_settings import PuzzleSettings
from sudoku.components.session_state import SessionPhase, SessionState
from sudoku.events.bus import EVENT_SESSION_PHASE_CHANGED, EventBus


def get_session_state(world: World) -> SessionState:
    for _, state in world.get_component(SessionState):
        return state
    raise RuntimeError("SessionState resource not found")


def get_live_board(world: World) -> Board | None:
    return get_session_state(world).board


def get_selection(world: World) -> CellSelection:
    for _, selection in world.get_component(CellSelection):
        return selection
    raise RuntimeError("CellSelection resource not found")


def get_puzzle_settings(world: World) -> PuzzleSettings:
    for _, settings in world.get_component(PuzzleSettings):
        return settings
    raise RuntimeError("PuzzleSettings resource not found")


def set_session_phase(
    world: World,
    event_bus: EventBus,
    phase: SessionPhase,
) -> None:
    """Update the session phase and emit a change event when it differs."""
    state = get_session_state(world)
    previous = state.phase
    if previous == phase:
        return
    state.phase = phase
    event_bus.emit(EVENT_SESSION_PHASE_CHANGED, previous_phase=previous, new_phase=phase)
