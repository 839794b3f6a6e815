# src/library/base_library_store.py - v1
"""Abstract model library store."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from draftmodels.core.models import GeneratedModel, LibraryModel, PersistedModel


class LibraryStoreError(Exception):
    """Raised when the library cannot be read or written."""


class BaseLibraryStore(ABC):
    """Unified interface for model library backends.

    ``persist`` is all-or-nothing: either every model of the call is stored
    or none is.
    """

    def __init__(self) -> None:
        self.commit_count = 0

    @abstractmethod
    async def list_models(self) -> list[LibraryModel]:
        """Every persisted model, in insertion order."""

    @abstractmethod
    async def persist(self, models: list[GeneratedModel]) -> list[PersistedModel]:
        """Store models in the given order and return their final identities."""


def to_persisted(model: GeneratedModel, now: datetime | None = None) -> PersistedModel:
    """Assign a fresh library identity to a generated model."""
    return PersistedModel(
        id=str(uuid.uuid4()),
        generated_id=model.id,
        title=model.title,
        content=model.content,
        category=model.category,
        keywords=list(model.keywords),
        source_file=model.source_file,
        created_at=now or datetime.now(timezone.utc),
        favorite=False,
    )
