# src/core/cancellation.py - v1
"""Cooperative cancellation token shared by the scheduler and executors.

Cancellation never interrupts a collaborator call in flight. Holders check
the token at safe points (before a batch, before a task start, between the
steps of a task) and stop starting new work.
"""

from __future__ import annotations

import asyncio


class CancellationToken:
    """Idempotent, one-way cancellation flag backed by an asyncio.Event."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> bool:
        """Signal cancellation. Returns True only for the first effective call."""
        if self._event.is_set():
            return False
        self._event.set()
        return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Suspend until cancellation is signalled."""
        await self._event.wait()
