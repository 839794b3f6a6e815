# src/generation/llm_generator.py - v2
"""Generation backend over a BaseLLMClient.

Validates and truncates the text, builds the bulk analysis prompt, calls the
LLM under a timeout and parses the JSON answer. Any failure surfaces as a
GenerationError whose message is kept verbatim by the task executor.
"""

from __future__ import annotations

import asyncio
import logging
import time

from draftmodels.core.models import CandidateModel, GenerationOptions
from draftmodels.generation.base_generator import BaseModelGenerator, GenerationError
from draftmodels.generation.cache import GenerationCache, generation_cache_key
from draftmodels.generation.parser import parse_models
from draftmodels.generation.prompts import SYSTEM_PROMPT, build_bulk_analysis_prompt
from draftmodels.llm.base_client import BaseLLMClient, LLMResponse, Message
from draftmodels.llm.retry import LLMRetryExhausted, with_retry

logger = logging.getLogger(__name__)

TEXT_TOO_SHORT = "Text too short or invalid for analysis"


class LLMModelGenerator(BaseModelGenerator):
    """Model generator that asks an LLM for a JSON list of models."""

    def __init__(
        self,
        client: BaseLLMClient,
        timeout_s: float = 180.0,
        min_text_chars: int = 50,
        max_input_chars: int = 200_000,
        retry_enabled: bool = False,
        cache: GenerationCache | None = None,
    ) -> None:
        self._client = client
        self._timeout_s = timeout_s
        self._min_text_chars = min_text_chars
        self._max_input_chars = max_input_chars
        self._retry_enabled = retry_enabled
        self._cache = cache

    async def generate(
        self,
        text: str,
        options: GenerationOptions,
        source_name: str = "",
    ) -> list[CandidateModel]:
        text = text.strip()
        if len(text) < self._min_text_chars:
            raise GenerationError(TEXT_TOO_SHORT)
        if len(text) > self._max_input_chars:
            logger.warning(
                "Truncating %s from %d to %d chars",
                source_name or "text", len(text), self._max_input_chars,
            )
            text = text[: self._max_input_chars]

        cache_key = None
        if self._cache is not None:
            cache_key = generation_cache_key(source_name, text, options)
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.info("Generation cache hit for %s", source_name or "text")
                return cached

        prompt = build_bulk_analysis_prompt(text, options.style_hints)
        t0 = time.monotonic()
        response = await self._call(prompt, options)
        try:
            models = parse_models(response.content)
        except GenerationError:
            if response.truncated:
                raise GenerationError(
                    f"Response cut off at the {options.max_tokens}-token output limit"
                ) from None
            raise

        logger.info(
            "Generated %d model(s) for %s in %.1fs",
            len(models), source_name or "text", time.monotonic() - t0,
        )
        if self._cache is not None and cache_key is not None:
            self._cache.set(cache_key, models)
        return models

    async def _call(self, prompt: str, options: GenerationOptions) -> LLMResponse:
        messages = [Message(role="user", content=prompt)]

        async def _complete() -> LLMResponse:
            return await asyncio.wait_for(
                self._client.complete(
                    messages=messages,
                    system=SYSTEM_PROMPT,
                    max_tokens=options.max_tokens,
                    temperature=options.temperature,
                    json_output=True,
                ),
                timeout=self._timeout_s,
            )

        try:
            if self._retry_enabled:
                return await with_retry(_complete, component="generation")
            return await _complete()
        except LLMRetryExhausted as e:
            raise GenerationError(_describe(e.last_error)) from e
        except Exception as e:
            raise GenerationError(_describe(e)) from e


def _describe(error: BaseException) -> str:
    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return "Generation timed out"
    return str(error) or type(error).__name__
