# src/llm/adapters/google_adapter.py - v2
"""Google Gemini adapter over the google-generativeai SDK."""

from __future__ import annotations

from typing import Any

from draftmodels.llm.base_client import BaseLLMClient, LLMResponse, Message


class GoogleAdapter(BaseLLMClient):
    provider = "google"

    def __init__(self, model: str = "gemini-1.5-pro", api_key: str = "", **kwargs: Any):
        super().__init__(model, api_key)

    async def _request(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
        json_output: bool,
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        config: dict[str, Any] = {"max_output_tokens": max_tokens, "temperature": temperature}
        if json_output:
            config["response_mime_type"] = "application/json"
        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in messages
        ]

        resp = await model.generate_content_async(contents, generation_config=config)
        usage = getattr(resp, "usage_metadata", None)
        finish = resp.candidates[0].finish_reason if resp.candidates else None
        return LLMResponse(
            content=resp.text or "",
            model=self._model,
            provider=self.provider,
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            truncated=getattr(finish, "name", finish) == "MAX_TOKENS",
        )
