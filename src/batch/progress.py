# src/batch/progress.py - v1
"""Progress sinks: consumers of ProgressEvents emitted by the RunController.

A run emits one event per recorded Outcome and a final terminal event.
Sinks are called on the event loop thread and must not block.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from draftmodels.batch.models import ProgressEvent
from draftmodels.core.models import FailureOutcome

logger = logging.getLogger(__name__)


class BaseProgressSink(ABC):
    """Receives progress events."""

    @abstractmethod
    def emit(self, event: ProgressEvent) -> None:
        """Handle one event."""


class LoggingProgressSink(BaseProgressSink):
    """Writes a log line per event."""

    def emit(self, event: ProgressEvent) -> None:
        if event.terminal:
            logger.info(
                "Run %s: %d/%d file(s) processed",
                event.phase, event.processed_count, event.total_count,
            )
            return
        outcome = event.last_outcome
        if isinstance(outcome, FailureOutcome):
            detail = f"{outcome.file_name} failed ({outcome.stage}): {outcome.reason}"
        elif outcome is not None:
            detail = f"{outcome.file_name} -> {len(outcome.models)} model(s)"
        else:
            detail = "-"
        logger.info(
            "Progress %d/%d (batch %d/%d): %s",
            event.processed_count, event.total_count,
            event.current_batch, event.total_batches, detail,
        )


class CallbackProgressSink(BaseProgressSink):
    """Forwards events to a plain callable."""

    def __init__(self, callback: Callable[[ProgressEvent], None]) -> None:
        self._callback = callback

    def emit(self, event: ProgressEvent) -> None:
        self._callback(event)


class CollectingProgressSink(BaseProgressSink):
    """Keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def emit(self, event: ProgressEvent) -> None:
        self.events.append(event)


class QueueProgressSink(BaseProgressSink):
    """Async iterator over events; iteration ends after the terminal event."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ProgressEvent] = asyncio.Queue()
        self._done = False

    def emit(self, event: ProgressEvent) -> None:
        self._queue.put_nowait(event)

    def __aiter__(self) -> QueueProgressSink:
        return self

    async def __anext__(self) -> ProgressEvent:
        if self._done:
            raise StopAsyncIteration
        event = await self._queue.get()
        if event.terminal:
            self._done = True
        return event
