# src/llm/adapters/ollama_adapter.py - v2
"""Ollama adapter for local inference, over the ollama SDK."""

from __future__ import annotations

from typing import Any

from draftmodels.llm.base_client import BaseLLMClient, LLMResponse, Message


class OllamaAdapter(BaseLLMClient):
    provider = "ollama"

    def __init__(
        self, model: str = "llama3", base_url: str = "http://localhost:11434", **kwargs: Any,
    ):
        super().__init__(model)
        self._host = base_url

    async def _request(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
        json_output: bool,
    ) -> LLMResponse:
        import ollama

        client = ollama.AsyncClient(host=self._host)
        chat = [{"role": "system", "content": system}] if system else []
        chat += [{"role": m.role, "content": m.content} for m in messages]

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": chat,
            "options": {"num_predict": max_tokens, "temperature": temperature},
        }
        if json_output:
            kwargs["format"] = "json"

        resp = await client.chat(**kwargs)
        return LLMResponse(
            content=resp["message"]["content"],
            model=self._model,
            provider=self.provider,
            input_tokens=resp.get("prompt_eval_count", 0) or 0,
            output_tokens=resp.get("eval_count", 0) or 0,
            truncated=resp.get("done_reason") == "length",
        )
