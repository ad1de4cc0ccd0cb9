"""Components used by the control column (size presets, clue field, action buttons)."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ControlAction(Enum):
    """Actions that a control button can trigger."""
    CHOOSE_SIZE = auto()
    GENERATE = auto()
    SOLVE = auto()


@dataclass
class ControlButton:
    """Interactive button; ``x``/``y`` is the centre."""
    label: str
    action: ControlAction
    x: float
    y: float
    width: float
    height: float
    enabled: bool = True
    size: Optional[int] = None  # only for CHOOSE_SIZE
    selected: bool = False
    tooltip: str = ""

    def contains(self, px: float, py: float) -> bool:
        return (
            abs(px - self.x) <= self.width / 2
            and abs(py - self.y) <= self.height / 2
        )


@dataclass
class ClueField:
    """Numeric text field for the clue count; ``x``/``y`` is the centre."""
    x: float
    y: float
    width: float
    height: float
    label: str = "Number of Clues"
    helper_text: str = ""

    def contains(self, px: float, py: float) -> bool:
        return (
            abs(px - self.x) <= self.width / 2
            and abs(py - self.y) <= self.height / 2
        )


@dataclass
class ControlTag:
    """Marker component so control entities can be rebuilt together."""
    pass
