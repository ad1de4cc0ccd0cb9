"""Session controller: drives generate/solve requests and swaps the live board."""
from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Protocol

from esper import World

from sudoku.components.board import Board, box_dimension
from sudoku.components.pending_request import PendingRequest, RequestKind
from sudoku.components.session_state import SessionPhase, SessionState
from sudoku.config import SessionConfig
from sudoku.errors import (
    InvalidValue,
    MalformedBoard,
    NoBoardError,
    RequestInFlightError,
    ServiceError,
    SessionError,
    SudokuError,
    TransportError,
    Unsolvable,
)
from sudoku.events.bus import (
    EVENT_BOARD_REPLACED,
    EVENT_GENERATE_REQUEST,
    EVENT_REQUEST_FAILED,
    EVENT_REQUEST_REJECTED,
    EVENT_REQUEST_STARTED,
    EVENT_SESSION_RESET_REQUEST,
    EVENT_SHUTDOWN,
    EVENT_SOLVE_REQUEST,
    EVENT_STALE_RESPONSE_DISCARDED,
    EVENT_TICK,
    EventBus,
)
from sudoku.utils.clues import normalize_clues
from sudoku.utils.session_state import get_puzzle_settings, get_session_state, set_session_phase

logger = logging.getLogger(__name__)

_UNCHANGED: Any = object()


class BoardService(Protocol):
    def generate(self, size: int, clues: int) -> Board: ...

    def solve(self, board: Board) -> Board: ...


def failure_kind(error: Exception) -> str:
    """Short label used by the UI to tell failure classes apart."""
    if isinstance(error, Unsolvable):
        return "unsolvable"
    if isinstance(error, ServiceError):
        return "service"
    if isinstance(error, TransportError):
        return "transport"
    if isinstance(error, MalformedBoard):
        return "malformed"
    return "error"


class SessionSystem:
    """Owns the idle/generating/loaded/solving/error lifecycle.

    Service calls run on ``executor``; their futures are kept in a
    ``PendingRequest`` component and applied from ``poll`` on the event loop
    thread, so every board swap happens in one step on one thread. Only the
    response whose ``request_id`` matches the active request is applied.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        service: BoardService,
        *,
        executor: Executor | None = None,
        config: SessionConfig | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.service = service
        self.config = config or SessionConfig()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="sudoku-service")
        self._next_request_id = 0
        self._active_request_id: int | None = None
        self._orphaned: list[PendingRequest] = []
        self._state_entity = self._find_state_entity()

        self.event_bus.subscribe(EVENT_GENERATE_REQUEST, self._on_generate_request)
        self.event_bus.subscribe(EVENT_SOLVE_REQUEST, self._on_solve_request)
        self.event_bus.subscribe(EVENT_SESSION_RESET_REQUEST, self._on_reset_request)
        self.event_bus.subscribe(EVENT_TICK, self._on_tick)
        self.event_bus.subscribe(EVENT_SHUTDOWN, self._on_shutdown)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self._pending() is not None

    @property
    def state(self) -> SessionState:
        return get_session_state(self.world)

    def generate(self, size: int | None = None, clues: int | None = None) -> int:
        """Start a generate request and return its request id.

        Size and clue count default to the current ``PuzzleSettings``. The clue
        count is clamped (or rejected, depending on config) before anything is
        sent.
        """
        self._ensure_idle()
        settings = get_puzzle_settings(self.world)
        size = settings.size if size is None else size
        clues = settings.clues if clues is None else clues
        box_dimension(size)
        clues = normalize_clues(size, clues, self.config.clue_mode)

        self._commit(SessionPhase.GENERATING)
        return self._submit(RequestKind.GENERATE, self.service.generate, size, clues)

    def solve(self) -> int:
        """Start a solve request for the live board and return its request id."""
        self._ensure_idle()
        board = self.state.board
        if board is None:
            raise NoBoardError()

        self._commit(SessionPhase.SOLVING)
        return self._submit(RequestKind.SOLVE, self.service.solve, board)

    def reset(self) -> None:
        """Return to idle with no board; an in-flight response will be discarded."""
        pending = self._pending()
        if pending is not None:
            self.world.remove_component(self._state_entity, PendingRequest)
            self._orphaned.append(pending)
        self._active_request_id = None
        self._commit(SessionPhase.IDLE, board=None, reason="reset")

    def poll(self) -> bool:
        """Apply a finished response, if any. Returns True when the state changed."""
        self._drain_orphans()
        pending = self._pending()
        if pending is None or not pending.future.done():
            return False
        self.world.remove_component(self._state_entity, PendingRequest)
        if pending.request_id != self._active_request_id:
            self._discard(pending)
            return False
        self._active_request_id = None

        try:
            board = pending.future.result()
        except SudokuError as exc:
            self._fail(pending, exc)
        except Exception as exc:
            # ERROR is committed before re-raising; the session never stays busy.
            self._fail(pending, exc)
            raise
        else:
            self._succeed(pending, board)
        return True

    def shutdown(self, wait: bool = False) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_generate_request(self, sender, **payload) -> None:
        try:
            self.generate(payload.get("size"), payload.get("clues"))
        except (SessionError, InvalidValue) as exc:
            self._reject(RequestKind.GENERATE, exc)

    def _on_solve_request(self, sender, **payload) -> None:
        try:
            self.solve()
        except SessionError as exc:
            self._reject(RequestKind.SOLVE, exc)

    def _on_reset_request(self, sender, **payload) -> None:
        self.reset()

    def _on_tick(self, sender, **payload) -> None:
        self.poll()

    def _on_shutdown(self, sender, **payload) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find_state_entity(self) -> int:
        for entity, _ in self.world.get_component(SessionState):
            return entity
        raise RuntimeError("SessionState resource not found")

    def _pending(self) -> PendingRequest | None:
        try:
            return self.world.component_for_entity(self._state_entity, PendingRequest)
        except KeyError:
            return None

    def _ensure_idle(self) -> None:
        pending = self._pending()
        if pending is not None:
            raise RequestInFlightError(pending.kind.value)

    def _submit(self, kind: RequestKind, fn, *args) -> int:
        self._next_request_id += 1
        request_id = self._next_request_id
        future = self._executor.submit(fn, *args)
        self._active_request_id = request_id
        self.world.add_component(
            self._state_entity,
            PendingRequest(kind=kind, request_id=request_id, future=future),
        )
        logger.info("Started %s request #%d", kind.value, request_id)
        self.event_bus.emit(EVENT_REQUEST_STARTED, kind=kind.value, request_id=request_id)
        return request_id

    def _succeed(self, pending: PendingRequest, board: Board) -> None:
        reason = "generated" if pending.kind is RequestKind.GENERATE else "solved"
        logger.info("%s request #%d succeeded (%dx%d)", pending.kind.value, pending.request_id, board.size, board.size)
        self._commit(SessionPhase.LOADED, board=board, reason=reason)

    def _fail(self, pending: PendingRequest, error: Exception) -> None:
        if pending.kind is RequestKind.GENERATE:
            message = f"Failed to generate board: {error}"
            board = _UNCHANGED if self.config.keep_board_on_generate_failure else None
        else:
            message = f"Failed to solve board: {error}"
            board = _UNCHANGED
        kind_label = failure_kind(error)
        logger.warning("%s request #%d failed (%s): %s", pending.kind.value, pending.request_id, kind_label, error)
        self._commit(
            SessionPhase.ERROR,
            board=board,
            error=message,
            error_kind=kind_label,
            reason=f"{pending.kind.value}_failed",
        )
        self.event_bus.emit(
            EVENT_REQUEST_FAILED,
            kind=pending.kind.value,
            request_id=pending.request_id,
            error=error,
            message=message,
        )

    def _reject(self, kind: RequestKind, error: SudokuError) -> None:
        logger.info("Rejected %s request: %s", kind.value, error)
        self.event_bus.emit(
            EVENT_REQUEST_REJECTED,
            kind=kind.value,
            reason=type(error).__name__,
            message=str(error),
        )

    def _discard(self, pending: PendingRequest) -> None:
        logger.info("Discarding stale %s response #%d", pending.kind.value, pending.request_id)
        self.event_bus.emit(
            EVENT_STALE_RESPONSE_DISCARDED,
            kind=pending.kind.value,
            request_id=pending.request_id,
        )

    def _drain_orphans(self) -> None:
        if not self._orphaned:
            return
        still_running: list[PendingRequest] = []
        for pending in self._orphaned:
            if pending.future.done():
                self._discard(pending)
            else:
                still_running.append(pending)
        self._orphaned = still_running

    def _commit(
        self,
        phase: SessionPhase,
        *,
        board: Board | None = _UNCHANGED,
        error: str | None = None,
        error_kind: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Write phase, board and error together, then announce the change."""
        state = self.state
        board_changed = board is not _UNCHANGED and board is not state.board
        if board is not _UNCHANGED:
            state.board = board
        state.error = error
        state.error_kind = error_kind
        set_session_phase(self.world, self.event_bus, phase)
        if board_changed:
            self.event_bus.emit(EVENT_BOARD_REPLACED, board=state.board, reason=reason)
