# src/similarity/base_comparator.py - v1
"""Abstract similarity comparator: score one text against a corpus."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseSimilarityComparator(ABC):
    """Collaborator contract for near-duplicate detection.

    Implementations must be deterministic: identical inputs give identical
    scores, so dedup annotations are reproducible.
    """

    @abstractmethod
    async def search(
        self, content: str, corpus: list[tuple[str, str]],
    ) -> list[tuple[str, float]]:
        """Score ``content`` against every ``(id, content)`` corpus entry.

        Returns:
            One ``(id, score)`` pair per corpus entry, in corpus order, with
            scores normalized to [0, 1].
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier (tfidf, embedding)."""
