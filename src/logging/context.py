# src/logging/context.py — v1
"""Contextual logging support — attach run_id, restart and level to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per Louvain run.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_restart: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "restart", default=None
)
_level: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "level", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    restart: int | None = None
    level: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        restart=_restart.get(),
        level=_level.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per detection run)."""
    _run_id.set(run_id)
    _restart.set(None)
    _level.set(None)


def set_restart_context(restart: int | None, level: int | None = None) -> None:
    """Set restart-level context (called per randomized restart and level)."""
    _restart.set(restart)
    _level.set(level)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _restart.set(None)
    _level.set(None)
