from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum


class RequestKind(Enum):
    GENERATE = "generate"
    SOLVE = "solve"


@dataclass(slots=True)
class PendingRequest:
    """An in-flight service call; ``request_id`` identifies the response that may be applied."""
    kind: RequestKind
    request_id: int
    future: Future = field(repr=False)
