# src/llm/adapters/anthropic_adapter.py - v3
"""Anthropic Claude adapter over the official anthropic SDK."""

from __future__ import annotations

from typing import Any

from draftmodels.llm.base_client import BaseLLMClient, LLMResponse, Message


class AnthropicAdapter(BaseLLMClient):
    """Messages API adapter. The SDK client is created on first use."""

    provider = "anthropic"

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(model, api_key or "")
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            try:
                import anthropic
            except ImportError as e:
                raise ImportError(
                    "anthropic package required: pip install anthropic"
                ) from e
            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self.__client

    async def _request(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
        json_output: bool,
    ) -> LLMResponse:
        # No JSON mode on the Messages API; the prompt carries the schema.
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if system:
            kwargs["system"] = system

        response = await self._client.messages.create(**kwargs)
        return LLMResponse(
            content=self._extract_text(response),
            model=response.model,
            provider=self.provider,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            truncated=getattr(response, "stop_reason", None) == "max_tokens",
        )

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Concatenate the text blocks of an Anthropic response."""
        return "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
