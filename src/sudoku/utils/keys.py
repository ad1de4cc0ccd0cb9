"""Key symbols as reported by pyglet/arcade; kept here so input code does not import arcade."""
from __future__ import annotations

KEY_BACKSPACE = 65288
KEY_ENTER = 65293
KEY_ESCAPE = 65307
KEY_LEFT = 65361
KEY_UP = 65362
KEY_RIGHT = 65363
KEY_DOWN = 65364
KEY_KP_ENTER = 65421
KEY_DELETE = 65535
KEY_0 = 48
KEY_9 = 57
KEY_NUM_0 = 65456
KEY_NUM_9 = 65465


def digit_for_key(symbol: int) -> str | None:
    """Return the digit typed by ``symbol`` (main row or keypad), or None."""
    if KEY_0 <= symbol <= KEY_9:
        return str(symbol - KEY_0)
    if KEY_NUM_0 <= symbol <= KEY_NUM_9:
        return str(symbol - KEY_NUM_0)
    return None
