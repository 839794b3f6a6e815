# src/batch/controller.py - v1
"""Run controller: owns RunState, cancellation and progress for one run.

Phases: idle -> running -> completed | cancelled. ``cancelled`` is entered
only after in-flight tasks have drained and their Outcomes are recorded.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone

from draftmodels.batch.executor import TaskExecutor
from draftmodels.batch.models import Batch, ProgressEvent, ProgressSnapshot, RunState
from draftmodels.batch.progress import BaseProgressSink, QueueProgressSink
from draftmodels.batch.queue import TaskQueue
from draftmodels.batch.scheduler import DEFAULT_INTER_BATCH_COOLDOWN_MS, BatchScheduler, Sleep
from draftmodels.core.cancellation import CancellationToken
from draftmodels.core.models import (
    FileTask,
    GenerationOptions,
    LibraryModel,
    Outcome,
    SuccessOutcome,
)
from draftmodels.extraction.text_extractor import BaseTextExtractor
from draftmodels.generation.base_generator import BaseModelGenerator
from draftmodels.library.base_library_store import BaseLibraryStore
from draftmodels.logging.context import clear_context, set_run_context
from draftmodels.similarity.dedup import SimilarityDedup

logger = logging.getLogger(__name__)


class RunStateError(RuntimeError):
    """Raised on an operation that the run's current phase does not allow."""


def _generate_run_id() -> str:
    """Generate a run ID: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{ts}_{uuid.uuid4().hex[:8]}"


class RunController:
    """Drive one bulk generation run over a TaskQueue."""

    def __init__(
        self,
        queue: TaskQueue,
        extractor: BaseTextExtractor,
        generator: BaseModelGenerator,
        options: GenerationOptions | None = None,
        dedup: SimilarityDedup | None = None,
        library_store: BaseLibraryStore | None = None,
        stagger_delay_ms: int = 0,
        inter_batch_cooldown_ms: int = DEFAULT_INTER_BATCH_COOLDOWN_MS,
        sinks: list[BaseProgressSink] | None = None,
        token: CancellationToken | None = None,
        sleep: Sleep = asyncio.sleep,
        run_id: str | None = None,
    ) -> None:
        self._queue = queue
        self._extractor = extractor
        self._generator = generator
        self._options = options or GenerationOptions()
        self._dedup = dedup
        self._library_store = library_store
        self._sinks: list[BaseProgressSink] = list(sinks or [])
        self._token = token or CancellationToken()
        self._scheduler = BatchScheduler(
            self._token,
            stagger_delay_ms=stagger_delay_ms,
            inter_batch_cooldown_ms=inter_batch_cooldown_ms,
            sleep=sleep,
            on_batch_start=self._on_batch_start,
        )
        self._state = RunState(
            run_id=run_id or _generate_run_id(),
            total_batches=queue.total_batches,
            total_files=len(queue),
        )

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def library_store(self) -> BaseLibraryStore | None:
        return self._library_store

    @property
    def token(self) -> CancellationToken:
        return self._token

    async def run(self) -> RunState:
        """Process every queued file and return the terminal RunState.

        Raises:
            RunStateError: If the run was already started.
        """
        if self._state.phase != "idle":
            raise RunStateError(f"Run {self._state.run_id} was already started")

        self._state.phase = "running"
        self._state.started_at = datetime.now(timezone.utc)
        set_run_context(self._state.run_id)
        logger.info(
            "Starting run %s: %d file(s) in %d batch(es)",
            self._state.run_id, self._state.total_files, self._state.total_batches,
        )

        try:
            executor = TaskExecutor(
                self._extractor,
                self._generator,
                options=self._options,
                dedup=self._dedup,
                library=await self._load_library(),
                run_models=lambda: self._state.models,
            )

            async def launch(task: FileTask) -> None:
                self._record(await executor.execute(task))

            report = await self._scheduler.run(self._queue, launch)
            # The token may be shared with the caller and cancelled without cancel().
            if self._token.cancelled:
                self._state.cancel_requested = True
            self._state.phase = "cancelled" if self._state.cancel_requested else "completed"
            self._state.finished_at = datetime.now(timezone.utc)
            logger.info(
                "Run %s %s: %d succeeded, %d failed, %d not started, %d model(s)",
                self._state.run_id, self._state.phase,
                len(self._state.successes), len(self._state.failures),
                self._state.total_files - report.tasks_started,
                len(self._state.models),
            )
            self._emit(ProgressEvent(**self._state.snapshot().model_dump(), terminal=True))
            return self._state
        finally:
            clear_context()

    def cancel(self) -> bool:
        """Request cooperative cancellation.

        Idempotent. A no-op outside the running phase. Returns True only
        for the call that actually requested cancellation.
        """
        if self._state.phase != "running":
            logger.debug("cancel() ignored in phase %s", self._state.phase)
            return False
        if not self._token.cancel():
            return False
        self._state.cancel_requested = True
        logger.info(
            "Cancellation requested after %d/%d file(s)",
            self._state.processed_count, self._state.total_files,
        )
        return True

    def progress(self) -> ProgressSnapshot:
        return self._state.snapshot()

    def result(self) -> RunState:
        """Return the terminal RunState.

        Raises:
            RunStateError: If the run has not reached a terminal phase.
        """
        if not self._state.is_terminal:
            raise RunStateError(
                f"Run {self._state.run_id} has no result yet (phase {self._state.phase})"
            )
        return self._state

    def events(self) -> QueueProgressSink:
        """Subscribe to progress events as an async iterator.

        The iterator ends after the terminal event. Subscribing after the
        run ended yields a single terminal event.
        """
        sink = QueueProgressSink()
        if self._state.is_terminal:
            sink.emit(ProgressEvent(**self._state.snapshot().model_dump(), terminal=True))
        else:
            self._sinks.append(sink)
        return sink

    def add_sink(self, sink: BaseProgressSink) -> None:
        self._sinks.append(sink)

    # --- internals ---

    async def _load_library(self) -> list[LibraryModel]:
        if self._library_store is None or self._dedup is None:
            return []
        try:
            return await self._library_store.list_models()
        except Exception as e:
            logger.warning("Library unavailable, similarity limited to this run: %s", e)
            return []

    def _on_batch_start(self, batch: Batch) -> None:
        self._state.current_batch = batch.number

    def _record(self, outcome: Outcome) -> None:
        if self._state.processed_count >= self._state.total_files:
            raise RunStateError("More outcomes than submitted files")
        self._state.outcomes.append(outcome)
        if isinstance(outcome, SuccessOutcome):
            self._state.models.extend(outcome.models)
        self._emit(
            ProgressEvent(**self._state.snapshot().model_dump(), last_outcome=outcome)
        )

    def _emit(self, event: ProgressEvent) -> None:
        for sink in self._sinks:
            try:
                sink.emit(event)
            except Exception:
                logger.exception("Progress sink %s failed (non-fatal)", type(sink).__name__)
