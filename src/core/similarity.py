# src/core/similarity.py - v2
"""Cosine similarity between one query vector and a corpus matrix.

Backend is selected by ``configure_backend()`` (called from settings by the
facade) or lazily from the SIMILARITY_MATRIX_BACKEND env var:
- numpy (CPU, default)
- sklearn (CPU, falls back to numpy if sklearn is not installed)
- torch (GPU when CUDA is available)
"""

from __future__ import annotations

import logging
import os

import numpy as np

logger = logging.getLogger(__name__)

_SUPPORTED_BACKENDS = ("numpy", "sklearn", "torch")

_backend: str | None = None


def configure_backend(name: str) -> None:
    """Pin the similarity backend for the process."""
    global _backend
    if name not in _SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unknown similarity backend {name!r}. "
            f"Available: {', '.join(_SUPPORTED_BACKENDS)}"
        )
    _backend = name


def _get_backend() -> str:
    global _backend
    if _backend is None:
        _backend = os.environ.get("SIMILARITY_MATRIX_BACKEND", "numpy")
    return _backend


def cosine_scores(query: np.ndarray, corpus: np.ndarray) -> np.ndarray:
    """Cosine similarity of ``query`` against every row of ``corpus``.

    Args:
        query: 1D array of shape (n_features,).
        corpus: 2D array of shape (n_samples, n_features).

    Returns:
        1D array of shape (n_samples,) with values in [-1, 1].

    Raises:
        ValueError: On shape mismatch.
    """
    if query.ndim != 1:
        raise ValueError(f"Expected 1D query, got {query.ndim}D")
    if corpus.ndim != 2:
        raise ValueError(f"Expected 2D corpus, got {corpus.ndim}D")
    if corpus.shape[0] == 0:
        return np.empty((0,), dtype=np.float64)
    if corpus.shape[1] != query.shape[0]:
        raise ValueError(
            f"Dimension mismatch: query has {query.shape[0]} features, "
            f"corpus has {corpus.shape[1]}"
        )

    backend = _get_backend()
    if backend == "torch":
        return _cosine_torch(query, corpus)
    if backend == "sklearn":
        return _cosine_sklearn(query, corpus)
    return _cosine_numpy(query, corpus)


def _cosine_numpy(query: np.ndarray, corpus: np.ndarray) -> np.ndarray:
    q_norm = max(float(np.linalg.norm(query)), 1e-10)
    c_norms = np.maximum(np.linalg.norm(corpus, axis=1), 1e-10)
    return (corpus @ query) / (c_norms * q_norm)


def _cosine_sklearn(query: np.ndarray, corpus: np.ndarray) -> np.ndarray:
    try:
        from sklearn.metrics.pairwise import cosine_similarity

        return cosine_similarity(query.reshape(1, -1), corpus)[0]
    except ImportError:
        logger.debug("sklearn not available, using numpy fallback")
        return _cosine_numpy(query, corpus)


def _cosine_torch(query: np.ndarray, corpus: np.ndarray) -> np.ndarray:
    try:
        import torch

        device = "cuda" if torch.cuda.is_available() else "cpu"
        q = torch.tensor(query, dtype=torch.float32, device=device).unsqueeze(0)
        c = torch.tensor(corpus, dtype=torch.float32, device=device)
        result = torch.nn.functional.cosine_similarity(q, c, dim=1)
        return result.cpu().numpy().astype(np.float64)
    except ImportError:
        logger.warning("torch not available, falling back to numpy")
        return _cosine_numpy(query, corpus)


def reset_backend() -> None:
    """Reset cached backend (for testing)."""
    global _backend
    _backend = None
