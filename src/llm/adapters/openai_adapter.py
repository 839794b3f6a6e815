# src/llm/adapters/openai_adapter.py - v2
"""OpenAI chat completions adapter over the official openai SDK."""

from __future__ import annotations

from typing import Any

from draftmodels.llm.base_client import BaseLLMClient, LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    provider = "openai"

    def __init__(self, model: str = "gpt-4o", api_key: str = "", **kwargs: Any):
        super().__init__(model, api_key)

    async def _request(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
        json_output: bool,
    ) -> LLMResponse:
        import openai

        client = openai.AsyncOpenAI(api_key=self._api_key)
        chat = [{"role": "system", "content": system}] if system else []
        chat += [{"role": m.role, "content": m.content} for m in messages]

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": chat,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        resp = await client.chat.completions.create(**kwargs)
        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            model=self._model,
            provider=self.provider,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            truncated=choice.finish_reason == "length",
        )
