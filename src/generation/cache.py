# src/generation/cache.py - v1
"""In-memory cache of generation results for the process lifetime."""

from __future__ import annotations

import hashlib

from draftmodels.core.models import CandidateModel, GenerationOptions


def generation_cache_key(source_name: str, text: str, options: GenerationOptions) -> str:
    """SHA-256 of file name, text and the options fingerprint."""
    h = hashlib.sha256()
    for part in (source_name, text, options.fingerprint()):
        h.update(part.encode("utf-8"))
        h.update(b"\x00")
    return h.hexdigest()


class GenerationCache:
    """Dict-backed cache; stores copies so callers cannot mutate entries."""

    def __init__(self) -> None:
        self._entries: dict[str, list[CandidateModel]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> list[CandidateModel] | None:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        return [m.model_copy(deep=True) for m in entry]

    def set(self, key: str, models: list[CandidateModel]) -> None:
        self._entries[key] = [m.model_copy(deep=True) for m in models]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
