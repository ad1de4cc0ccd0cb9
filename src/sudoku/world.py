from esper import World

from sudoku.components.cell_selection import CellSelection
from sudoku.components.puzzle_settings import PuzzleSettings
from sudoku.components.session_state import SessionPhase, SessionState
from sudoku.config import SessionConfig
from sudoku.utils.clues import normalize_clues


def create_world(
    *,
    session_config: SessionConfig | None = None,
) -> World:
    """Create a world holding the session resources: state, selection and puzzle settings.

    The world starts idle with no board; boards only arrive through a generate request.
    """
    config = session_config or SessionConfig()
    world = World()
    clues = normalize_clues(config.default_size, config.default_clues)

    state_entity = world.create_entity()
    world.add_component(state_entity, SessionState(phase=SessionPhase.IDLE))
    world.add_component(state_entity, CellSelection())
    world.add_component(
        state_entity,
        PuzzleSettings(
            size=config.default_size,
            clues=clues,
            clue_text=str(clues),
            default_clues=config.default_clues,
        ),
    )
    return world
