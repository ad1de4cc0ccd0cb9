"""Runtime configuration assembled from defaults, environment variables and CLI flags."""
from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Sequence

from sudoku.constants import DEFAULT_API_BASE_URL, DEFAULT_CLUES, DEFAULT_SIZE, SUPPORTED_SIZES
from sudoku.utils.clues import ClueMode

ENV_API_URL = "SUDOKU_API_URL"
ENV_API_TIMEOUT = "SUDOKU_API_TIMEOUT"
ENV_CLUE_MODE = "SUDOKU_CLUE_MODE"
ENV_KEEP_BOARD = "SUDOKU_KEEP_BOARD_ON_FAILURE"
ENV_LOG_LEVEL = "SUDOKU_LOG_LEVEL"

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ServiceConfig:
    """Where the solving service lives and how long to wait for it."""
    base_url: str = DEFAULT_API_BASE_URL
    # None waits indefinitely, matching a plain fetch without a deadline.
    timeout: float | None = None


@dataclass(frozen=True)
class SessionConfig:
    clue_mode: ClueMode = ClueMode.CLAMP
    # Whether a failed generate keeps the board that was on screen.
    keep_board_on_generate_failure: bool = False
    default_size: int = DEFAULT_SIZE
    default_clues: int = DEFAULT_CLUES


@dataclass(frozen=True)
class AppConfig:
    service: ServiceConfig = field(default_factory=ServiceConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    log_level: str = "INFO"


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ValueError(f"expected a boolean, got {text!r}")


def parse_timeout(text: str) -> float | None:
    stripped = text.strip().lower()
    if stripped in ("", "none", "off"):
        return None
    value = float(stripped)
    if value <= 0:
        raise ValueError(f"timeout must be positive, got {text!r}")
    return value


def parse_log_level(text: str) -> str:
    level = text.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level {text!r}")
    return level


def _config_from_environ(base: AppConfig, environ: Mapping[str, str]) -> AppConfig:
    service = base.service
    session = base.session
    log_level = base.log_level
    if ENV_API_URL in environ:
        service = replace(service, base_url=environ[ENV_API_URL].rstrip("/"))
    if ENV_API_TIMEOUT in environ:
        service = replace(service, timeout=parse_timeout(environ[ENV_API_TIMEOUT]))
    if ENV_CLUE_MODE in environ:
        session = replace(session, clue_mode=ClueMode(environ[ENV_CLUE_MODE].strip().lower()))
    if ENV_KEEP_BOARD in environ:
        session = replace(session, keep_board_on_generate_failure=parse_bool(environ[ENV_KEEP_BOARD]))
    if ENV_LOG_LEVEL in environ:
        log_level = parse_log_level(environ[ENV_LOG_LEVEL])
    return AppConfig(service=service, session=session, log_level=log_level)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and solve sudoku boards through a remote service.")
    parser.add_argument("--api-url", help=f"Base URL of the solving service (default {DEFAULT_API_BASE_URL})")
    parser.add_argument("--timeout", type=parse_timeout, help="Request timeout in seconds ('none' to wait forever)")
    parser.add_argument(
        "--clue-mode",
        choices=[mode.value for mode in ClueMode],
        help="Clamp or reject clue counts outside the permitted range",
    )
    parser.add_argument(
        "--keep-board-on-failure",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep the current board when generating a new one fails",
    )
    parser.add_argument("--size", type=int, choices=SUPPORTED_SIZES, help="Initial board size")
    parser.add_argument("--clues", type=int, help="Initial clue count")
    parser.add_argument("--log-level", type=parse_log_level, help="Logging level (DEBUG, INFO, ...)")
    return parser


def load_config(argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Merge defaults, then environment variables, then command line flags."""
    config = _config_from_environ(AppConfig(), os.environ if environ is None else environ)
    args = build_arg_parser().parse_args(argv)

    service = config.service
    session = config.session
    log_level = config.log_level
    if args.api_url:
        service = replace(service, base_url=args.api_url.rstrip("/"))
    if args.timeout is not None:
        service = replace(service, timeout=args.timeout)
    if args.clue_mode:
        session = replace(session, clue_mode=ClueMode(args.clue_mode))
    if args.keep_board_on_failure is not None:
        session = replace(session, keep_board_on_generate_failure=args.keep_board_on_failure)
    if args.size is not None:
        session = replace(session, default_size=args.size)
    if args.clues is not None:
        session = replace(session, default_clues=args.clues)
    if args.log_level:
        log_level = args.log_level
    return AppConfig(service=service, session=session, log_level=log_level)
