# src/library/json_store.py - v1
"""JSON file library store (default LIBRARY_PATH).

The library is one document ``{"models": [...]}``. Each commit rewrites it
through a temporary sibling file and ``os.replace`` so readers never see a
partially written library.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from draftmodels.core.models import GeneratedModel, LibraryModel, PersistedModel
from draftmodels.library.base_library_store import (
    BaseLibraryStore,
    LibraryStoreError,
    to_persisted,
)

logger = logging.getLogger(__name__)


class JsonLibraryStore(BaseLibraryStore):
    """File-based library store using a single JSON document."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def list_models(self) -> list[LibraryModel]:
        return self._load()

    async def persist(self, models: list[GeneratedModel]) -> list[PersistedModel]:
        existing = self._load()
        persisted = [to_persisted(m) for m in models]
        self._write(existing + persisted)
        self.commit_count += 1
        logger.info("Persisted %d model(s) to %s", len(persisted), self._path)
        return persisted

    def _load(self) -> list[LibraryModel]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise LibraryStoreError(f"Cannot read library {self._path}: {e}") from e

        raw_models = data.get("models", []) if isinstance(data, dict) else data
        try:
            return [LibraryModel.model_validate(raw) for raw in raw_models]
        except (TypeError, ValidationError) as e:
            raise LibraryStoreError(f"Invalid library {self._path}: {e}") from e

    def _write(self, models: list[LibraryModel]) -> None:
        payload = {"models": [m.model_dump(mode="json") for m in models]}
        temp_path = self._path.parent / f".{self._path.name}.tmp"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(
                json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8",
            )
            os.replace(temp_path, self._path)
        except OSError as e:
            raise LibraryStoreError(f"Cannot write library {self._path}: {e}") from e
