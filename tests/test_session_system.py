import pytest

from sudoku.components.session_state import SessionPhase
from sudoku.config import SessionConfig
from sudoku.errors import (
    InvalidValue,
    MalformedBoard,
    NoBoardError,
    RequestInFlightError,
    ServiceError,
    TransportError,
    Unsolvable,
)
from sudoku.events.bus import (
    EVENT_BOARD_REPLACED,
    EVENT_GENERATE_REQUEST,
    EVENT_REQUEST_FAILED,
    EVENT_REQUEST_REJECTED,
    EVENT_REQUEST_STARTED,
    EVENT_SESSION_PHASE_CHANGED,
    EVENT_SESSION_RESET_REQUEST,
    EVENT_SOLVE_REQUEST,
    EVENT_STALE_RESPONSE_DISCARDED,
    EVENT_TICK,
    EventBus,
)
from sudoku.systems.grid_interaction import GridInteractionSystem
from sudoku.systems.session_system import SessionSystem, failure_kind
from sudoku.utils.clues import ClueMode
from sudoku.utils.session_state import get_session_state
from sudoku.world import create_world

from tests.helpers import ImmediateExecutor, ManualExecutor, StubBoardService, make_board


def setup_session(service=None, executor=None, config=None):
    bus = EventBus()
    world = create_world(session_config=config)
    service = service or StubBoardService()
    executor = executor or ImmediateExecutor()
    system = SessionSystem(world, bus, service, executor=executor, config=config)
    return bus, world, service, executor, system


def record(bus, name):
    captured = []
    bus.subscribe(name, lambda sender, **kwargs: captured.append(kwargs))
    return captured


def test_starts_idle_without_board():
    bus, world, service, executor, system = setup_session()
    state = get_session_state(world)
    assert state.phase == SessionPhase.IDLE
    assert state.board is None
    assert not system.is_busy


def test_generate_loads_board_with_requested_clues():
    bus, world, service, executor, system = setup_session()
    replaced = record(bus, EVENT_BOARD_REPLACED)

    system.generate(9, 30)
    assert get_session_state(world).phase == SessionPhase.GENERATING
    assert system.poll() is True

    state = get_session_state(world)
    assert state.phase == SessionPhase.LOADED
    assert state.board.size == 9
    assert state.board.clue_count == 30
    assert state.error is None
    assert service.generate_calls == [(9, 30)]
    assert replaced[-1]["reason"] == "generated"


def test_generate_uses_puzzle_settings_by_default():
    config = SessionConfig(default_size=4, default_clues=6)
    bus, world, service, executor, system = setup_session(config=config)
    system.generate()
    assert service.generate_calls == [(4, 6)]


def test_phase_transitions_are_announced_in_order():
    bus, world, service, executor, system = setup_session()
    phases = record(bus, EVENT_SESSION_PHASE_CHANGED)
    started = record(bus, EVENT_REQUEST_STARTED)
    system.generate(4, 8)
    bus.emit(EVENT_TICK, dt=0.016)
    assert [(p["previous_phase"], p["new_phase"]) for p in phases] == [
        (SessionPhase.IDLE, SessionPhase.GENERATING),
        (SessionPhase.GENERATING, SessionPhase.LOADED),
    ]
    assert started == [{"kind": "generate", "request_id": 1}]


def test_solve_without_board_raises_and_skips_service():
    bus, world, service, executor, system = setup_session()
    with pytest.raises(NoBoardError) as excinfo:
        system.solve()
    assert str(excinfo.value) == "No board to solve"
    assert service.solve_calls == []
    assert executor.submitted == 0
    assert get_session_state(world).phase == SessionPhase.IDLE


def test_solve_request_event_without_board_is_rejected():
    bus, world, service, executor, system = setup_session()
    rejected = record(bus, EVENT_REQUEST_REJECTED)
    bus.emit(EVENT_SOLVE_REQUEST)
    assert rejected == [{"kind": "solve", "reason": "NoBoardError", "message": "No board to solve"}]
    assert service.solve_calls == []


def test_solve_replaces_board_with_solution():
    bus, world, service, executor, system = setup_session()
    system.generate(4, 8)
    system.poll()
    generated = get_session_state(world).board

    system.solve()
    assert get_session_state(world).phase == SessionPhase.SOLVING
    system.poll()

    state = get_session_state(world)
    assert state.phase == SessionPhase.LOADED
    assert state.board.is_complete
    assert state.board.fixed_cells == generated.fixed_cells
    assert service.solve_calls == [generated]


def test_unsolvable_keeps_board_and_reports_error():
    bus, world, service, executor, system = setup_session()
    system.generate(9, 30)
    system.poll()
    board = get_session_state(world).board
    failures = record(bus, EVENT_REQUEST_FAILED)

    service.solve_error = Unsolvable()
    system.solve()
    system.poll()

    state = get_session_state(world)
    assert state.phase == SessionPhase.ERROR
    assert state.board is board
    assert state.error_kind == "unsolvable"
    assert state.error == "Failed to solve board: No solution found for this board"
    assert failures[0]["kind"] == "solve"
    assert isinstance(failures[0]["error"], Unsolvable)


def test_generate_failure_clears_board_by_default():
    bus, world, service, executor, system = setup_session()
    system.generate(4, 8)
    system.poll()
    assert get_session_state(world).board is not None

    service.generate_error = ServiceError(500)
    system.generate(4, 8)
    system.poll()

    state = get_session_state(world)
    assert state.phase == SessionPhase.ERROR
    assert state.board is None
    assert state.error == "Failed to generate board: HTTP error! status: 500"
    assert state.error_kind == "service"


def test_generate_failure_can_keep_board():
    config = SessionConfig(keep_board_on_generate_failure=True)
    bus, world, service, executor, system = setup_session(config=config)
    system.generate(4, 8)
    system.poll()
    board = get_session_state(world).board

    service.generate_error = TransportError("Could not reach http://localhost:3000/generate")
    system.generate(4, 8)
    system.poll()

    state = get_session_state(world)
    assert state.phase == SessionPhase.ERROR
    assert state.board is board
    assert state.error_kind == "transport"


def test_recovers_from_error_with_new_generate():
    bus, world, service, executor, system = setup_session()
    service.generate_error = MalformedBoard("bad board")
    system.generate(4, 8)
    system.poll()
    assert get_session_state(world).error_kind == "malformed"

    service.generate_error = None
    system.generate(4, 8)
    system.poll()
    state = get_session_state(world)
    assert state.phase == SessionPhase.LOADED
    assert state.error is None
    assert state.error_kind is None


def test_requests_refused_while_busy():
    executor = ManualExecutor()
    bus, world, service, executor, system = setup_session(executor=executor)
    rejected = record(bus, EVENT_REQUEST_REJECTED)
    system.generate(4, 8)
    assert system.is_busy

    with pytest.raises(RequestInFlightError):
        system.generate(4, 8)
    bus.emit(EVENT_GENERATE_REQUEST, size=4, clues=8)
    assert rejected[0]["reason"] == "RequestInFlightError"
    assert len(executor.queue) == 1

    executor.run_next()
    system.poll()
    assert not system.is_busy
    assert get_session_state(world).phase == SessionPhase.LOADED


def test_poll_before_completion_changes_nothing():
    executor = ManualExecutor()
    bus, world, service, executor, system = setup_session(executor=executor)
    system.generate(4, 8)
    assert system.poll() is False
    assert get_session_state(world).phase == SessionPhase.GENERATING


def test_stale_response_after_reset_is_discarded():
    executor = ManualExecutor()
    bus, world, service, executor, system = setup_session(executor=executor)
    stale = record(bus, EVENT_STALE_RESPONSE_DISCARDED)
    request_id = system.generate(4, 8)

    bus.emit(EVENT_SESSION_RESET_REQUEST)
    state = get_session_state(world)
    assert state.phase == SessionPhase.IDLE
    assert not system.is_busy

    executor.run_next()
    bus.emit(EVENT_TICK, dt=0.016)
    assert stale == [{"kind": "generate", "request_id": request_id}]
    assert state.board is None
    assert state.phase == SessionPhase.IDLE


def test_new_request_after_reset_ignores_the_old_one():
    executor = ManualExecutor()
    bus, world, service, executor, system = setup_session(executor=executor)
    first = system.generate(4, 8)
    system.reset()
    second = system.generate(9, 30)
    assert second != first

    executor.run_next()
    system.poll()
    assert get_session_state(world).phase == SessionPhase.GENERATING

    executor.run_next()
    system.poll()
    assert get_session_state(world).board.size == 9


def test_edits_during_solve_are_overwritten_by_solution():
    executor = ManualExecutor()
    bus, world, service, executor, system = setup_session(executor=executor)
    grid = GridInteractionSystem(world, bus)
    system.generate(4, 8)
    executor.run_next()
    system.poll()

    system.solve()
    assert grid.enter_value(15, "2") is True
    executor.run_next()
    system.poll()
    assert get_session_state(world).board.cells[15] == 1


def test_clue_count_is_clamped_by_default():
    bus, world, service, executor, system = setup_session()
    system.generate(9, 500)
    system.reset()
    system.generate(9, 1)
    assert service.generate_calls == [(9, 81), (9, 9)]


def test_clue_count_can_be_rejected():
    config = SessionConfig(clue_mode=ClueMode.REJECT)
    bus, world, service, executor, system = setup_session(config=config)
    rejected = record(bus, EVENT_REQUEST_REJECTED)
    with pytest.raises(InvalidValue):
        system.generate(9, 500)
    bus.emit(EVENT_GENERATE_REQUEST, size=9, clues=0)
    assert rejected[0]["reason"] == "InvalidValue"
    assert service.generate_calls == []
    assert get_session_state(world).phase == SessionPhase.IDLE


def test_invalid_size_rejected_before_request():
    bus, world, service, executor, system = setup_session()
    with pytest.raises(InvalidValue):
        system.generate(8, 10)
    assert executor.submitted == 0


def test_unexpected_worker_error_leaves_session_in_error():
    bus, world, service, executor, system = setup_session()
    failures = record(bus, EVENT_REQUEST_FAILED)
    service.generate_error = RuntimeError("boom")
    system.generate(9, 30)

    with pytest.raises(RuntimeError):
        system.poll()

    state = get_session_state(world)
    assert state.phase == SessionPhase.ERROR
    assert not state.busy
    assert not system.is_busy
    assert state.error == "Failed to generate board: boom"
    assert state.error_kind == "error"
    assert failures[0]["kind"] == "generate"

    service.generate_error = None
    system.generate(9, 30)
    system.poll()
    assert get_session_state(world).phase == SessionPhase.LOADED


def test_failure_kind_labels():
    assert failure_kind(Unsolvable()) == "unsolvable"
    assert failure_kind(ServiceError(503)) == "service"
    assert failure_kind(TransportError("down")) == "transport"
    assert failure_kind(MalformedBoard("bad")) == "malformed"
    assert failure_kind(NoBoardError()) == "error"


def test_reset_clears_board():
    bus, world, service, executor, system = setup_session()
    system.generate(4, 8)
    system.poll()
    replaced = record(bus, EVENT_BOARD_REPLACED)
    system.reset()
    assert get_session_state(world).board is None
    assert replaced == [{"board": None, "reason": "reset"}]


def test_loaded_board_matches_service_response():
    board = make_board(4, fixed=[0, 5, 10, 15])
    bus, world, service, executor, system = setup_session(service=StubBoardService(generated=board))
    system.generate(4, 4)
    system.poll()
    assert get_session_state(world).board is board
