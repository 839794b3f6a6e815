# src/similarity/embedding_comparator.py - v1
"""Semantic comparator over a BaseEmbedder.

Each model is embedded from its title, keywords and the first 2000 chars of
its tag-stripped content. Vectors are memoized by text so library entries
are embedded once per process.
"""

from __future__ import annotations

import hashlib
import logging
import re

import numpy as np

from draftmodels.core.similarity import cosine_scores
from draftmodels.embeddings.base_embedder import BaseEmbedder
from draftmodels.similarity.base_comparator import BaseSimilarityComparator

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_MAX_CONTENT_CHARS = 2000


def embedding_text(content: str, title: str = "", keywords: list[str] | None = None) -> str:
    """Text that represents one model for embedding."""
    stripped = " ".join(_TAG_RE.sub(" ", content).split())[:_MAX_CONTENT_CHARS]
    parts = [title.strip(), ", ".join(keywords or []), stripped]
    return "\n".join(p for p in parts if p)


class EmbeddingComparator(BaseSimilarityComparator):
    """Cosine similarity of embeddings, clamped to [0, 1]."""

    def __init__(self, embedder: BaseEmbedder) -> None:
        self._embedder = embedder
        self._vectors: dict[str, list[float]] = {}

    @property
    def name(self) -> str:
        return "embedding"

    async def search(
        self, content: str, corpus: list[tuple[str, str]],
    ) -> list[tuple[str, float]]:
        if not corpus:
            return []

        texts = [embedding_text(text) for _, text in corpus]
        query_text = embedding_text(content)
        await self._ensure_vectors(texts + [query_text])

        matrix = np.asarray([self._vectors[_key(t)] for t in texts], dtype=np.float64)
        query = np.asarray(self._vectors[_key(query_text)], dtype=np.float64)
        scores = cosine_scores(query, matrix)
        return [
            (doc_id, float(min(max(score, 0.0), 1.0)))
            for (doc_id, _), score in zip(corpus, scores)
        ]

    async def _ensure_vectors(self, texts: list[str]) -> None:
        missing: list[str] = []
        seen: set[str] = set()
        for text in texts:
            key = _key(text)
            if key not in self._vectors and key not in seen:
                seen.add(key)
                missing.append(text)
        if not missing:
            return
        logger.debug("Embedding %d text(s) with %s", len(missing), self._embedder.label)
        vectors = await self._embedder.embed_texts(missing)
        for text, vec in zip(missing, vectors):
            self._vectors[_key(text)] = vec


def _key(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
