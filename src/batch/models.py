# src/batch/models.py - v2
"""Run-level models: Batch, RunState, ProgressSnapshot, ProgressEvent."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from draftmodels.core.models import (
    FailureOutcome,
    FileError,
    FileTask,
    GeneratedModel,
    Outcome,
    SuccessOutcome,
)

RunPhase = Literal["idle", "running", "completed", "cancelled"]

TERMINAL_PHASES: frozenset[str] = frozenset({"completed", "cancelled"})


class Batch(BaseModel):
    """Contiguous slice of at most ``batch_size`` tasks, derived on demand."""

    number: int = Field(ge=1)
    tasks: list[FileTask]

    @property
    def size(self) -> int:
        return len(self.tasks)


class ScheduleReport(BaseModel):
    """What the scheduler actually started."""

    total_batches: int
    batches_started: int = 0
    tasks_started: int = 0
    cancelled: bool = False


class ProgressSnapshot(BaseModel):
    """Point-in-time view of run progress."""

    processed_count: int
    total_count: int
    current_batch: int
    total_batches: int
    phase: RunPhase


class ProgressEvent(ProgressSnapshot):
    """Progress notification; ``terminal`` marks the final event of a run."""

    last_outcome: Outcome | None = None
    terminal: bool = False


class RunState(BaseModel):
    """Mutable state of one pipeline invocation, owned by the RunController.

    ``outcomes`` and ``models`` are append-only. Models of one file are
    appended together, right after that file's outcome.
    """

    run_id: str
    phase: RunPhase = "idle"
    current_batch: int = 0
    total_batches: int
    total_files: int
    outcomes: list[Outcome] = Field(default_factory=list)
    models: list[GeneratedModel] = Field(default_factory=list)
    cancel_requested: bool = False
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def processed_count(self) -> int:
        """Every terminal outcome counts, success or failure."""
        return len(self.outcomes)

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def successes(self) -> list[SuccessOutcome]:
        return [o for o in self.outcomes if isinstance(o, SuccessOutcome)]

    @property
    def failures(self) -> list[FailureOutcome]:
        return [o for o in self.outcomes if isinstance(o, FailureOutcome)]

    @property
    def errors(self) -> list[FileError]:
        """Per-file errors shown to the reviewer, in recording order."""
        return [FileError.from_outcome(o) for o in self.failures]

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            processed_count=self.processed_count,
            total_count=self.total_files,
            current_batch=self.current_batch,
            total_batches=self.total_batches,
            phase=self.phase,
        )
