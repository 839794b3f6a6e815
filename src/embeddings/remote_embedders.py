# src/embeddings/remote_embedders.py - v1
"""Embedding providers reached over an API: Voyage, OpenAI and Ollama.

SDKs are imported on first use so only the selected provider needs to be
installed.
"""

from __future__ import annotations

from collections.abc import Sequence

from draftmodels.embeddings.base_embedder import BaseEmbedder


class VoyageEmbedder(BaseEmbedder):
    """Voyage AI, ``document`` input type since library models are stored documents."""

    provider = "voyage"
    max_batch = 128

    def __init__(self, model: str = "voyage-3", api_key: str | None = None) -> None:
        super().__init__(model)
        self._api_key = api_key
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            try:
                import voyageai
            except ImportError as e:
                raise ImportError("voyageai package required: pip install voyageai") from e
            self.__client = voyageai.AsyncClient(api_key=self._api_key or None)
        return self.__client

    async def _embed_batch(self, texts: list[str]) -> Sequence[Sequence[float]]:
        result = await self._client.embed(texts, model=self.model, input_type="document")
        return result.embeddings


class OpenAIEmbedder(BaseEmbedder):
    provider = "openai"
    max_batch = 512

    def __init__(
        self, model: str = "text-embedding-3-small", api_key: str | None = None,
    ) -> None:
        super().__init__(model)
        self._api_key = api_key
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            try:
                import openai
            except ImportError as e:
                raise ImportError("openai package required: pip install openai") from e
            self.__client = openai.AsyncOpenAI(api_key=self._api_key or "")
        return self.__client

    async def _embed_batch(self, texts: list[str]) -> Sequence[Sequence[float]]:
        response = await self._client.embeddings.create(input=texts, model=self.model)
        # Items carry their input position; do not rely on list order.
        return [item.embedding for item in sorted(response.data, key=lambda d: d.index)]


class OllamaEmbedder(BaseEmbedder):
    """Local Ollama server (nomic-embed-text, mxbai-embed-large, ...)."""

    provider = "ollama"
    max_batch = 32

    def __init__(
        self, model: str = "nomic-embed-text", base_url: str = "http://localhost:11434",
    ) -> None:
        super().__init__(model)
        self._host = base_url.rstrip("/")

    async def _embed_batch(self, texts: list[str]) -> Sequence[Sequence[float]]:
        import ollama

        resp = await ollama.AsyncClient(host=self._host).embed(model=self.model, input=texts)
        return resp["embeddings"]
