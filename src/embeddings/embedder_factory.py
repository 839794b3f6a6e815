# src/embeddings/embedder_factory.py - v4
"""Embedder for SIMILARITY_BACKEND=embedding, chosen by EMBEDDING_PROVIDER.

Each provider reads its own model setting: Voyage and OpenAI share
EMBEDDING_MODEL, while the local providers have dedicated ones so switching
back and forth does not require editing the model name.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any

from draftmodels.config.settings import Settings
from draftmodels.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)

_EMBEDDERS: dict[str, str] = {
    "voyage": "draftmodels.embeddings.remote_embedders.VoyageEmbedder",
    "openai": "draftmodels.embeddings.remote_embedders.OpenAIEmbedder",
    "ollama": "draftmodels.embeddings.remote_embedders.OllamaEmbedder",
    "sentence_transformers": (
        "draftmodels.embeddings.sentence_tf_embedder.SentenceTransformerEmbedder"
    ),
}

_SETTINGS: dict[str, Callable[[Settings], dict[str, Any]]] = {
    "voyage": lambda s: {"model": s.embedding_model, "api_key": s.voyage_api_key},
    "openai": lambda s: {"model": s.embedding_model, "api_key": s.openai_api_key},
    "ollama": lambda s: {"model": s.embedding_ollama_model, "base_url": s.ollama_base_url},
    "sentence_transformers": lambda s: {"model": s.embedding_st_model},
}


class UnsupportedEmbeddingProviderError(ValueError):
    """Raised when an embedding provider is not registered."""


def create_embedder(settings: Settings) -> BaseEmbedder:
    """Raises UnsupportedEmbeddingProviderError for an unknown provider."""
    provider = settings.embedding_provider
    class_path = _EMBEDDERS.get(provider)
    if class_path is None:
        raise UnsupportedEmbeddingProviderError(
            f"Unsupported embedding provider: {provider!r}. "
            f"Available: {', '.join(sorted(_EMBEDDERS))}"
        )
    module_path, _, class_name = class_path.rpartition(".")
    embedder_cls = getattr(importlib.import_module(module_path), class_name)

    kwargs = _SETTINGS.get(provider, lambda s: {"model": s.embedding_model})(settings)
    logger.debug("Creating %s embedder (%s)", provider, kwargs["model"])
    return embedder_cls(**kwargs)


def register_embedding_provider(name: str, class_path: str) -> None:
    """Custom providers are built with ``model=EMBEDDING_MODEL``."""
    _EMBEDDERS[name] = class_path
