# src/logging/context.py - v1
"""Contextual logging support: attach run_id, batch and file_name to log records.

Context variables are copied into every asyncio task at creation, so values
set inside a per-file task never leak into sibling tasks of the same batch.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_batch: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "batch", default=None
)
_file_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_name", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    batch: int | None = None
    file_name: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        batch=_batch.get(),
        file_name=_file_name.get(),
        step=_step.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per pipeline invocation)."""
    _run_id.set(run_id)


def set_batch_context(batch: int) -> None:
    """Set the batch number currently being scheduled."""
    _batch.set(batch)


def set_file_context(file_name: str, step: str | None = None) -> None:
    """Set file-level context (called inside each per-file task)."""
    _file_name.set(file_name)
    _step.set(step)


def set_step(step: str | None) -> None:
    """Update the step of the current per-file task."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _batch.set(None)
    _file_name.set(None)
    _step.set(None)
