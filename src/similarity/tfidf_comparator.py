# src/similarity/tfidf_comparator.py - v1
"""TF-IDF cosine comparator, fully local and deterministic.

The index is rebuilt per query over the corpus plus the query text:
- tokens are lower-cased, accent-stripped words longer than two letters,
  with HTML tags, punctuation, digits and stopwords removed;
- the vocabulary keeps terms whose document frequency is at least 2 and
  below 90% of the documents;
- weights are ``(1 + ln tf) * (ln(N / df) + 1)``, L2-normalized.
"""

from __future__ import annotations

import math
import re
import unicodedata
from collections import Counter

import numpy as np

from draftmodels.core.similarity import cosine_scores
from draftmodels.similarity.base_comparator import BaseSimilarityComparator

_TAG_RE = re.compile(r"<[^>]+>")
_NON_WORD_RE = re.compile(r"[^\w\s]")
_DIGITS_RE = re.compile(r"\d+")

STOPWORDS: frozenset[str] = frozenset(
    # English
    "the and for are but not you all any can had her was one our out has him his how "
    "its may new now old see two who did get let put say she too use that with this "
    "from they will would there their what about which when make like than them then "
    "these some into only other also such been were shall upon under".split()
    # Portuguese, including legal boilerplate
    + "das dos nas nos para por com sem sob sobre entre ate uma uns umas mas porem "
    "contudo todavia que qual quais quando onde como porque ser estar ter haver fazer "
    "vir foi era sido sendo seja foram sao aos pela pelo pelas pelos este esta estes "
    "estas esse essa esses essas isso isto aquilo aquele aquela nao sim mais menos "
    "muito pouco art artigo paragrafo inciso alinea fls folhas pag pagina processo "
    "autos requerente requerido reclamante reclamada autor reu parte partes assim "
    "ainda tambem apenas mesmo entao pois".split()
)


def tokenize(text: str) -> list[str]:
    """Normalize and split text into index terms."""
    text = unicodedata.normalize("NFD", (text or "").lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _TAG_RE.sub(" ", text)
    text = _NON_WORD_RE.sub(" ", text)
    text = _DIGITS_RE.sub(" ", text)
    return [w for w in text.split() if len(w) > 2 and w not in STOPWORDS]


class TfidfComparator(BaseSimilarityComparator):
    """Sparse-vocabulary TF-IDF with cosine scoring."""

    def __init__(self, min_df: int = 2, max_df_ratio: float = 0.9) -> None:
        self._min_df = min_df
        self._max_df_ratio = max_df_ratio

    @property
    def name(self) -> str:
        return "tfidf"

    async def search(
        self, content: str, corpus: list[tuple[str, str]],
    ) -> list[tuple[str, float]]:
        if not corpus:
            return []

        docs = [tokenize(text) for _, text in corpus]
        query = tokenize(content)
        vocab, idf = self._build_vocabulary(docs + [query])

        if not vocab:
            return [(doc_id, 0.0) for doc_id, _ in corpus]

        matrix = np.vstack([self._vector(tokens, vocab, idf) for tokens in docs])
        scores = cosine_scores(self._vector(query, vocab, idf), matrix)
        return [
            (doc_id, float(min(max(score, 0.0), 1.0)))
            for (doc_id, _), score in zip(corpus, scores)
        ]

    def _build_vocabulary(
        self, documents: list[list[str]],
    ) -> tuple[dict[str, int], np.ndarray]:
        n_docs = len(documents)
        df: Counter[str] = Counter()
        for tokens in documents:
            df.update(set(tokens))

        vocab: dict[str, int] = {}
        weights: list[float] = []
        for term in sorted(df):
            freq = df[term]
            if freq >= self._min_df and freq < n_docs * self._max_df_ratio:
                vocab[term] = len(vocab)
                weights.append(math.log(n_docs / freq) + 1.0)
        return vocab, np.asarray(weights, dtype=np.float64)

    @staticmethod
    def _vector(tokens: list[str], vocab: dict[str, int], idf: np.ndarray) -> np.ndarray:
        vec = np.zeros(len(vocab), dtype=np.float64)
        for term, tf in Counter(t for t in tokens if t in vocab).items():
            idx = vocab[term]
            vec[idx] = (1.0 + math.log(tf)) * idf[idx]
        norm = np.linalg.norm(vec)
        if norm > 0:
            vec /= norm
        return vec
