from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems that are not stored in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float
EVENT_SHUTDOWN = "shutdown"                        # payload: None


# ============================================================================
# INPUT
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_KEY_PRESS = "key_press"                      # payload: symbol=int, modifiers=int
EVENT_CELL_CLICK = "cell_click"                    # payload: index=int


# ============================================================================
# GRID INTERACTION
# ============================================================================
EVENT_CELL_SELECTED = "cell_selected"              # payload: index=int, row=int, col=int
EVENT_CELL_DESELECTED = "cell_deselected"          # payload: reason=str, prev_index=int
EVENT_VALUE_ENTRY = "value_entry"                  # payload: index=int, raw_input=str
EVENT_CELL_CHANGED = "cell_changed"                # payload: index=int, previous=int, value=int


# ============================================================================
# CONTROL PANEL
# ============================================================================
EVENT_SIZE_CHOSEN = "size_chosen"                  # payload: size=int
EVENT_CLUES_EDITED = "clues_edited"                # payload: text=str, clues=int
EVENT_CLUE_FIELD_FOCUS = "clue_field_focus"        # payload: focused=bool


# ============================================================================
# SESSION
# ============================================================================
EVENT_GENERATE_REQUEST = "generate_request"        # payload: size=int|None, clues=int|None
EVENT_SOLVE_REQUEST = "solve_request"              # payload: None
EVENT_SESSION_RESET_REQUEST = "session_reset_request"  # payload: None
EVENT_SESSION_PHASE_CHANGED = "session_phase_changed"  # payload: previous_phase=SessionPhase, new_phase=SessionPhase
EVENT_BOARD_REPLACED = "board_replaced"            # payload: board=Board|None, reason=str
EVENT_REQUEST_STARTED = "request_started"          # payload: kind=str, request_id=int
EVENT_REQUEST_FAILED = "request_failed"            # payload: kind=str, request_id=int, error=SudokuError, message=str
EVENT_REQUEST_REJECTED = "request_rejected"        # payload: kind=str, reason=str, message=str
EVENT_STALE_RESPONSE_DISCARDED = "stale_response_discarded"  # payload: kind=str, request_id=int
