# src/library/memory_store.py - v1
"""In-process library store for embedding hosts and tests."""

from __future__ import annotations

import logging

from draftmodels.core.models import GeneratedModel, LibraryModel, PersistedModel
from draftmodels.library.base_library_store import BaseLibraryStore, to_persisted

logger = logging.getLogger(__name__)


class InMemoryLibraryStore(BaseLibraryStore):
    """Library kept in a list; ``persist_calls`` records every commit payload."""

    def __init__(self, models: list[LibraryModel] | None = None) -> None:
        super().__init__()
        self._models: list[LibraryModel] = list(models or [])
        self.persist_calls: list[list[GeneratedModel]] = []

    async def list_models(self) -> list[LibraryModel]:
        return list(self._models)

    async def persist(self, models: list[GeneratedModel]) -> list[PersistedModel]:
        self.persist_calls.append(list(models))
        persisted = [to_persisted(m) for m in models]
        self._models.extend(persisted)
        self.commit_count += 1
        logger.debug("Persisted %d model(s) in memory", len(persisted))
        return persisted
