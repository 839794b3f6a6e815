# src/similarity/dedup.py - v1
"""Similarity dedup: advisory near-duplicate annotation of generated models.

A candidate is compared against the persisted library and against the models
already produced by the run. The best match is attached as SimilarityInfo
when it reaches the reporting threshold. Nothing is ever blocked or dropped.

Ordering rules:
- the corpus is the library first, then run output in recording order;
- the highest score wins, and equal scores keep the earliest corpus entry.
"""

from __future__ import annotations

import logging

from draftmodels.core.models import (
    GeneratedModel,
    LibraryModel,
    ModelReference,
    SimilarityInfo,
)
from draftmodels.similarity.base_comparator import BaseSimilarityComparator

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.60


class SimilarityDedup:
    """Attach SimilarityInfo to candidates that resemble existing models."""

    def __init__(
        self,
        comparator: BaseSimilarityComparator,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self._comparator = comparator
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    async def annotate(
        self,
        candidate: GeneratedModel,
        library: list[LibraryModel],
        run_models: list[GeneratedModel],
    ) -> GeneratedModel:
        """Return ``candidate`` with similarity_info set, or unchanged.

        Comparator errors propagate; the caller decides how to degrade.
        """
        refs: list[ModelReference] = []
        corpus: list[tuple[str, str]] = []
        for model in library:
            refs.append(ModelReference(id=model.id, title=model.title, origin="library"))
            corpus.append((str(len(corpus)), model.content))
        for model in run_models:
            if model.id == candidate.id:
                continue
            refs.append(ModelReference(id=model.id, title=model.title, origin="run"))
            corpus.append((str(len(corpus)), model.content))

        if not corpus:
            return candidate

        scores = dict(await self._comparator.search(candidate.content, corpus))

        best_idx: int | None = None
        best_score = 0.0
        for idx in range(len(corpus)):
            score = min(max(scores.get(str(idx), 0.0), 0.0), 1.0)
            if score >= self._threshold and (best_idx is None or score > best_score):
                best_idx, best_score = idx, score

        if best_idx is None:
            return candidate

        match = refs[best_idx]
        logger.info(
            "'%s' resembles %s model '%s' (%.0f%%)",
            candidate.title, match.origin, match.title, best_score * 100,
        )
        return candidate.model_copy(
            update={
                "similarity_info": SimilarityInfo(similarity=best_score, similar_model=match)
            }
        )
