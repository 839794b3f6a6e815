# src/llm/base_client.py - v2
"""LLM client interface used by the generation backend.

A provider answers one prompt with one text body. Adapters implement
``_request`` only; ``complete`` times the call and reports answers cut off
by the output-token limit, which for a JSON answer means an unparseable
body rather than a malformed one.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import ClassVar, Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Message(BaseModel):
    """One conversation turn. System instructions travel separately."""

    role: Literal["user", "assistant"]
    content: str


class LLMResponse(BaseModel):
    """Normalized answer from any provider."""

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
    truncated: bool = False


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    provider: ClassVar[str] = ""

    def __init__(self, model: str, api_key: str = "") -> None:
        self._model = model
        self._api_key = api_key

    @property
    def provider_name(self) -> str:
        return self.provider

    @property
    def model_name(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        json_output: bool = False,
    ) -> LLMResponse:
        """Send ``messages`` and return the normalized answer.

        ``json_output`` asks the provider for a JSON body when it supports it.
        """
        start = time.monotonic()
        response = await self._request(messages, system, max_tokens, temperature, json_output)
        response = response.model_copy(
            update={"latency_ms": int((time.monotonic() - start) * 1000)}
        )
        if response.truncated:
            logger.warning(
                "%s/%s stopped at the %d-token output limit",
                self.provider, self._model, max_tokens,
            )
        return response

    @abstractmethod
    async def _request(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
        json_output: bool,
    ) -> LLMResponse:
        """Perform one provider call."""
