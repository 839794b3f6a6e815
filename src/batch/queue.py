# src/batch/queue.py - v1
"""Task queue: validates a submitted file set and slices it into batches.

The queue is immutable once built. A task's index alone decides its batch:
task ``i`` belongs to batch ``i // batch_size + 1``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Union

from draftmodels.batch.models import Batch
from draftmodels.core.models import FileTask
from draftmodels.extraction.text_extractor import is_supported as default_is_supported

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 3
DEFAULT_MAX_FILES = 20

# A filesystem path, or an uploaded (display name, raw bytes) pair.
FileInput = Union[Path, str, tuple[str, bytes]]


class BatchValidationError(ValueError):
    """Raised synchronously when a file set cannot start a run."""


def build_tasks(
    files: Sequence[FileInput],
    max_files: int = DEFAULT_MAX_FILES,
    is_supported: Callable[[str], bool] | None = default_is_supported,
) -> list[FileTask]:
    """Validate inputs and turn them into indexed FileTasks.

    Raises:
        BatchValidationError: Empty set, too many files, missing file or
            unsupported extension.
    """
    if not files:
        raise BatchValidationError("No files submitted")
    if len(files) > max_files:
        raise BatchValidationError(
            f"Too many files: {len(files)} submitted, maximum is {max_files}"
        )

    tasks: list[FileTask] = []
    for index, item in enumerate(files):
        if isinstance(item, tuple):
            name, data = item
            task = FileTask(index=index, name=name, size_bytes=len(data), source=data)
        else:
            path = Path(item)
            if not path.is_file():
                raise BatchValidationError(f"File not found: {path}")
            task = FileTask(
                index=index, name=path.name, size_bytes=path.stat().st_size, source=path,
            )
        if is_supported is not None and not is_supported(task.extension):
            raise BatchValidationError(
                f"Unsupported file type for {task.name!r}: {task.extension or '(none)'}"
            )
        tasks.append(task)
    return tasks


class TaskQueue:
    """Ordered, read-only list of FileTasks with batch slicing."""

    def __init__(self, tasks: Sequence[FileTask], batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise BatchValidationError(f"batch_size must be >= 1, got {batch_size}")
        if not tasks:
            raise BatchValidationError("No files submitted")
        for expected, task in enumerate(tasks):
            if task.index != expected:
                raise BatchValidationError(
                    f"Task indexes must be contiguous from 0; got {task.index} at {expected}"
                )
        self._tasks: tuple[FileTask, ...] = tuple(tasks)
        self._batch_size = batch_size

    @classmethod
    def from_files(
        cls,
        files: Sequence[FileInput],
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
        is_supported: Callable[[str], bool] | None = default_is_supported,
    ) -> TaskQueue:
        queue = cls(build_tasks(files, max_files, is_supported), batch_size)
        logger.debug(
            "Queued %d file(s) in %d batch(es) of %d",
            len(queue), queue.total_batches, batch_size,
        )
        return queue

    @property
    def tasks(self) -> tuple[FileTask, ...]:
        return self._tasks

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def total_batches(self) -> int:
        return math.ceil(len(self._tasks) / self._batch_size)

    def batches(self) -> Iterator[Batch]:
        """Yield batches in order; the last one may be short."""
        for start in range(0, len(self._tasks), self._batch_size):
            yield Batch(
                number=start // self._batch_size + 1,
                tasks=list(self._tasks[start : start + self._batch_size]),
            )

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[FileTask]:
        return iter(self._tasks)
