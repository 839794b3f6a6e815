# src/batch/scheduler.py - v1
"""Batch scheduler: bounded, staggered, cancellable launch of per-file work.

For each batch, the task at intra-batch offset ``i`` starts ``i * stagger``
after the batch starts; the batch is awaited as a whole and a cooldown is
slept before the next one. Batches are throttling boundaries, not
correctness boundaries: a failing task never cancels its siblings.

Cancellation is observed before each batch and, per task, once its stagger
delay has elapsed. Tasks already started always run to completion.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from draftmodels.batch.models import Batch, ScheduleReport
from draftmodels.batch.queue import TaskQueue
from draftmodels.core.cancellation import CancellationToken
from draftmodels.core.models import FileTask
from draftmodels.logging.context import set_batch_context

logger = logging.getLogger(__name__)

DEFAULT_INTER_BATCH_COOLDOWN_MS = 1000

Launch = Callable[[FileTask], Awaitable[None]]
Sleep = Callable[[float], Awaitable[Any]]


class BatchScheduler:
    """Drive a TaskQueue batch by batch."""

    def __init__(
        self,
        token: CancellationToken,
        stagger_delay_ms: int = 0,
        inter_batch_cooldown_ms: int = DEFAULT_INTER_BATCH_COOLDOWN_MS,
        sleep: Sleep = asyncio.sleep,
        on_batch_start: Callable[[Batch], None] | None = None,
    ) -> None:
        if stagger_delay_ms < 0:
            raise ValueError(f"stagger_delay_ms must be >= 0, got {stagger_delay_ms}")
        if inter_batch_cooldown_ms < 0:
            raise ValueError(
                f"inter_batch_cooldown_ms must be >= 0, got {inter_batch_cooldown_ms}"
            )
        self._token = token
        self._stagger_s = stagger_delay_ms / 1000.0
        self._cooldown_s = inter_batch_cooldown_ms / 1000.0
        self._sleep = sleep
        self._on_batch_start = on_batch_start

    async def run(self, queue: TaskQueue, launch: Launch) -> ScheduleReport:
        """Launch every task of ``queue`` through ``launch`` unless cancelled."""
        report = ScheduleReport(total_batches=queue.total_batches)

        for batch in queue.batches():
            if self._token.cancelled:
                logger.info(
                    "Run cancelled, not starting batch %d/%d",
                    batch.number, queue.total_batches,
                )
                break

            set_batch_context(batch.number)
            if self._on_batch_start is not None:
                self._on_batch_start(batch)
            report.batches_started += 1
            logger.info(
                "Starting batch %d/%d (%d file(s))",
                batch.number, queue.total_batches, batch.size,
            )

            report.tasks_started += await self._run_batch(batch, launch)

            if (
                batch.number < queue.total_batches
                and self._cooldown_s > 0
                and not self._token.cancelled
            ):
                logger.debug("Cooling down %.2fs before next batch", self._cooldown_s)
                await self._sleep(self._cooldown_s)

        report.cancelled = self._token.cancelled
        return report

    async def _run_batch(self, batch: Batch, launch: Launch) -> int:
        async def _start(offset: int, task: FileTask) -> bool:
            delay = offset * self._stagger_s
            if delay > 0:
                await self._sleep(delay)
            if self._token.cancelled:
                logger.info("Run cancelled, not starting %s", task.name)
                return False
            await launch(task)
            return True

        results = await asyncio.gather(
            *(_start(offset, task) for offset, task in enumerate(batch.tasks)),
            return_exceptions=True,
        )

        started = 0
        for task, result in zip(batch.tasks, results):
            if isinstance(result, BaseException):
                # launch() records its own failures; reaching here is a bug in it.
                logger.error(
                    "Unhandled error while processing %s: %s", task.name, result,
                    exc_info=result,
                )
                started += 1
            elif result:
                started += 1
        return started
