# src/embeddings/sentence_tf_embedder.py - v2
"""Local sentence-transformers embedder, the default when no API key is set.

Encoding is CPU or GPU bound, so it runs in a worker thread. Vectors come
back normalized, which makes the comparator's cosine a plain dot product.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from draftmodels.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder(BaseEmbedder):
    provider = "sentence_transformers"
    max_batch = 256

    def __init__(self, model: str = "all-MiniLM-L6-v2") -> None:
        super().__init__(model)
        self.__encoder = None

    @property
    def _encoder(self):
        if self.__encoder is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError as e:
                raise ImportError(
                    "sentence-transformers package required: "
                    "pip install sentence-transformers"
                ) from e
            logger.info("Loading sentence-transformers model %s", self.model)
            self.__encoder = SentenceTransformer(self.model)
        return self.__encoder

    async def _embed_batch(self, texts: list[str]) -> Sequence[Sequence[float]]:
        encoder = self._encoder
        return await asyncio.to_thread(
            encoder.encode, texts, show_progress_bar=False, normalize_embeddings=True,
        )
