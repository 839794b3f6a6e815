# tests/unit/similarity/test_unit_comparator_factory.py - v1
"""Tests for similarity/comparator_factory.py."""

from __future__ import annotations

from unittest.mock import MagicMock

from draftmodels.config.settings import Settings
from draftmodels.core.similarity import reset_backend
from draftmodels.embeddings.base_embedder import BaseEmbedder
from draftmodels.similarity.comparator_factory import create_comparator
from draftmodels.similarity.embedding_comparator import EmbeddingComparator
from draftmodels.similarity.tfidf_comparator import TfidfComparator


class TestCreateComparator:
    def teardown_method(self):
        reset_backend()

    def test_default_is_tfidf(self):
        assert isinstance(create_comparator(Settings(_env_file=None)), TfidfComparator)

    def test_embedding_backend_uses_given_embedder(self):
        s = Settings(_env_file=None, similarity_backend="embedding")
        comparator = create_comparator(s, embedder=MagicMock(spec=BaseEmbedder))
        assert isinstance(comparator, EmbeddingComparator)
        assert comparator.name == "embedding"
