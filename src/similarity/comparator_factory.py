# src/similarity/comparator_factory.py - v1
"""Factory: similarity comparator from SIMILARITY_BACKEND."""

from __future__ import annotations

import logging

from draftmodels.config.settings import Settings
from draftmodels.core.similarity import configure_backend
from draftmodels.embeddings.base_embedder import BaseEmbedder
from draftmodels.similarity.base_comparator import BaseSimilarityComparator

logger = logging.getLogger(__name__)


def create_comparator(
    settings: Settings,
    embedder: BaseEmbedder | None = None,
) -> BaseSimilarityComparator:
    """Instantiate the configured comparator.

    ``embedder`` overrides the embedding provider from settings when the
    embedding backend is selected.
    """
    configure_backend(settings.similarity_matrix_backend)

    if settings.similarity_backend == "embedding":
        from draftmodels.embeddings.embedder_factory import create_embedder
        from draftmodels.similarity.embedding_comparator import EmbeddingComparator

        embedder = embedder or create_embedder(settings)
        logger.debug("Using embedding comparator (%s)", embedder.label)
        return EmbeddingComparator(embedder)

    from draftmodels.similarity.tfidf_comparator import TfidfComparator

    return TfidfComparator()
