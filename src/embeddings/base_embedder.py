# src/embeddings/base_embedder.py - v2
"""Embedding provider interface consumed by the embedding comparator.

The comparator hands over every text it has not seen yet in one call, which
on a first run means the whole library. ``embed_texts`` splits that into
provider-sized requests and checks that each text got exactly one vector.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import ClassVar


class EmbeddingError(RuntimeError):
    """Raised when a provider answer does not match the texts sent."""


class BaseEmbedder(ABC):
    """Unified interface for all embedding providers."""

    provider: ClassVar[str] = ""
    # Most texts accepted by one provider request.
    max_batch: ClassVar[int] = 64

    def __init__(self, model: str) -> None:
        self.model = model

    @property
    def label(self) -> str:
        return f"{self.provider}/{self.model}"

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed ``texts`` into one vector each, in order."""
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.max_batch):
            chunk = texts[start : start + self.max_batch]
            answer = await self._embed_batch(chunk)
            if len(answer) != len(chunk):
                raise EmbeddingError(
                    f"{self.label} returned {len(answer)} vectors for {len(chunk)} texts"
                )
            vectors.extend([float(x) for x in vec] for vec in answer)
        return vectors

    @abstractmethod
    async def _embed_batch(self, texts: list[str]) -> Sequence[Sequence[float]]:
        """One provider request for at most ``max_batch`` texts."""
