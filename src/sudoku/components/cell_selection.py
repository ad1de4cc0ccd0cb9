from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class CellSelection:
    """Singleton component holding the currently selected cell index (at most one)."""
    index: Optional[int] = None
