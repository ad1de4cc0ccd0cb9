"""HTTP client for the remote generate/solve service."""
from __future__ import annotations

import logging
from typing import Any

import requests

from sudoku.components.board import Board
from sudoku.config import ServiceConfig
from sudoku.constants import DEFAULT_API_BASE_URL
from sudoku.errors import MalformedBoard, ServiceError, TransportError, Unsolvable

logger = logging.getLogger(__name__)

UNSOLVABLE_STATUS = 400


class BoardServiceClient:
    """Serializes board requests and validates the boards that come back.

    Every failure leaves as a ``ServiceFailure`` or ``MalformedBoard``: the
    caller never sees a raw ``requests`` exception.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: ServiceConfig, *, session: requests.Session | None = None) -> "BoardServiceClient":
        return cls(config.base_url, timeout=config.timeout, session=session)

    def generate(self, size: int, clues: int) -> Board:
        response = self._post("/generate", {"size": size, "clues": clues})
        if not _is_success(response.status_code):
            logger.warning("generate(size=%s, clues=%s) failed with HTTP %s", size, clues, response.status_code)
            raise ServiceError(response.status_code)
        board = self._decode_board(response)
        if board.size != size:
            raise MalformedBoard(f"generated board has size {board.size}, expected {size}")
        logger.info("Generated %dx%d board with %d clues", board.size, board.size, board.clue_count)
        return board

    def solve(self, board: Board) -> Board:
        response = self._post("/solve", board.to_payload())
        status = response.status_code
        if status == UNSOLVABLE_STATUS:
            logger.info("Service reported no solution for %dx%d board", board.size, board.size)
            raise Unsolvable(status)
        if not _is_success(status):
            logger.warning("solve failed with HTTP %s", status)
            raise ServiceError(status)
        solved = self._decode_board(response)
        if solved.size != board.size:
            raise MalformedBoard(f"solved board has size {solved.size}, expected {board.size}")
        missing = set(board.fixed_cells) - set(solved.fixed_cells)
        if missing:
            raise MalformedBoard(f"solved board lost {len(missing)} of the given cells")
        if not solved.is_complete:
            raise MalformedBoard(f"solved board still has {solved.empty_count} empty cells")
        logger.debug("Solved board:\n%s", solved)
        return solved

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "BoardServiceClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _post(self, path: str, payload: dict[str, Any]) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("POST %s", url)
        try:
            return self._session.post(url, json=payload, timeout=self.timeout)
        except requests.Timeout as exc:
            raise TransportError(f"Request to {url} timed out") from exc
        except requests.ConnectionError as exc:
            raise TransportError(f"Could not reach {url}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

    @staticmethod
    def _decode_board(response: requests.Response) -> Board:
        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedBoard("response body is not valid JSON") from exc
        return Board.from_payload(data)


def _is_success(status: int) -> bool:
    return 200 <= status < 300
