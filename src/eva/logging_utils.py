"""Process logging for EVA, with the active session id on every record."""

from __future__ import annotations

import os
import sys
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Literal

import loguru
from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "chat", "json"]

DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | session={extra[session]} | {name}:{function}:{line} | {message}"
)
NO_SESSION = "-"

_configured: tuple[LogProfile, str] | None = None
_session_context: ContextVar[str] = ContextVar("eva_session")


def current_session() -> str:
    """Id of the session handled in the current context, or ``-`` outside one."""
    return _session_context.get(NO_SESSION)


@contextmanager
def session_scope(session_id: str) -> Generator[str, None, None]:
    token = _session_context.set(session_id)
    try:
        yield session_id
    finally:
        _session_context.reset(token)


def _attach_session(record: loguru.Record) -> None:
    record["extra"].setdefault("session", current_session())


def _sink_options(profile: LogProfile, level: str) -> dict[str, Any]:
    options: dict[str, Any] = {"level": level, "backtrace": False, "diagnose": False}
    if profile == "chat":
        # Rich owns the terminal while chatting; keep log lines short.
        handler = RichHandler(console=get_console(), show_time=False, show_path=False, markup=False)
        options.update(sink=handler, format="[{extra[session]}] {message}")
    elif profile == "json":
        options.update(sink=sys.stderr, serialize=True)
    else:
        options.update(sink=sys.stderr, format=DEFAULT_FORMAT)
    return options


def configure_logging(*, profile: LogProfile = "default", level: str | None = None) -> None:
    """Replace loguru's sinks with the one for ``profile``.

    Calling again with the same profile and level is a no-op. The level
    comes from ``level`` or ``EVA_LOG_LEVEL`` and defaults to INFO.
    """
    global _configured
    resolved_level = (level or os.getenv("EVA_LOG_LEVEL") or "INFO").upper()
    if _configured == (profile, resolved_level):
        return

    logger.remove()
    logger.add(**_sink_options(profile, resolved_level))
    logger.configure(patcher=_attach_session)
    _configured = (profile, resolved_level)
