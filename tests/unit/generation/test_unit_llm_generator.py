# tests/unit/generation/test_unit_llm_generator.py - v2
"""Tests for generation/llm_generator.py with a mocked LLM client."""

from __future__ import annotations

import asyncio

import pytest

from draftmodels.core.models import GenerationOptions
from draftmodels.generation.base_generator import GenerationError
from draftmodels.generation.cache import GenerationCache
from draftmodels.generation.llm_generator import TEXT_TOO_SHORT, LLMModelGenerator
from draftmodels.generation.prompts import SYSTEM_PROMPT
from draftmodels.llm.base_client import LLMResponse

LONG_TEXT = "The employee worked overtime every week without the statutory premium. " * 3
OPTIONS = GenerationOptions(provider="test", model="test-model", max_tokens=1000, temperature=0.1)


def _response(content: str) -> LLMResponse:
    return LLMResponse(content=content, model="test-model", provider="test")


class TestLLMModelGenerator:
    @pytest.mark.asyncio
    async def test_generates_models(self, mock_llm):
        mock_llm.complete.return_value = _response(
            '{"models": [{"title": "Overtime", "content": "<p>x</p>"}]}'
        )
        models = await LLMModelGenerator(mock_llm).generate(LONG_TEXT, OPTIONS, "a.txt")

        assert [m.title for m in models] == ["Overtime"]
        kwargs = mock_llm.complete.await_args.kwargs
        assert kwargs["system"] == SYSTEM_PROMPT
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.1
        assert kwargs["json_output"] is True
        assert LONG_TEXT.strip() in kwargs["messages"][0].content

    @pytest.mark.asyncio
    async def test_empty_model_list_is_not_an_error(self, mock_llm):
        assert await LLMModelGenerator(mock_llm).generate(LONG_TEXT, OPTIONS) == []

    @pytest.mark.asyncio
    async def test_text_too_short(self, mock_llm):
        with pytest.raises(GenerationError, match=TEXT_TOO_SHORT):
            await LLMModelGenerator(mock_llm).generate("   short   ", OPTIONS)
        mock_llm.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_truncates_long_input(self, mock_llm):
        gen = LLMModelGenerator(mock_llm, min_text_chars=1, max_input_chars=10)
        await gen.generate("abcdefghijKLMNOP", OPTIONS)
        prompt = mock_llm.complete.await_args.kwargs["messages"][0].content
        assert "abcdefghij" in prompt
        assert "KLMNOP" not in prompt

    @pytest.mark.asyncio
    async def test_timeout_becomes_generation_error(self, mock_llm):
        async def _slow(**kwargs):
            await asyncio.sleep(1)

        mock_llm.complete.side_effect = _slow
        gen = LLMModelGenerator(mock_llm, timeout_s=0.01)
        with pytest.raises(GenerationError, match="Generation timed out"):
            await gen.generate(LONG_TEXT, OPTIONS)

    @pytest.mark.asyncio
    async def test_backend_error_message_kept(self, mock_llm):
        mock_llm.complete.side_effect = RuntimeError("invalid api key")
        with pytest.raises(GenerationError, match="invalid api key"):
            await LLMModelGenerator(mock_llm).generate(LONG_TEXT, OPTIONS)

    @pytest.mark.asyncio
    async def test_unparseable_answer(self, mock_llm):
        mock_llm.complete.return_value = _response("no json here")
        with pytest.raises(GenerationError, match="no valid JSON"):
            await LLMModelGenerator(mock_llm).generate(LONG_TEXT, OPTIONS)

    @pytest.mark.asyncio
    async def test_cut_off_answer_names_the_token_limit(self, mock_llm):
        mock_llm.complete.return_value = LLMResponse(
            content='{"models": [{"title": "Overtime", "content": "<p>The emp',
            model="test-model",
            provider="test",
            truncated=True,
        )
        with pytest.raises(GenerationError, match="cut off at the 1000-token output limit"):
            await LLMModelGenerator(mock_llm).generate(LONG_TEXT, OPTIONS)

    @pytest.mark.asyncio
    async def test_retry_disabled_by_default(self, mock_llm):
        mock_llm.complete.side_effect = RuntimeError("429 rate limited")
        with pytest.raises(GenerationError):
            await LLMModelGenerator(mock_llm).generate(LONG_TEXT, OPTIONS)
        assert mock_llm.complete.await_count == 1

    @pytest.mark.asyncio
    async def test_retry_exhausted_reports_last_error(self, mock_llm):
        mock_llm.complete.side_effect = RuntimeError("bad request")
        gen = LLMModelGenerator(mock_llm, retry_enabled=True)
        with pytest.raises(GenerationError) as exc_info:
            await gen.generate(LONG_TEXT, OPTIONS)
        assert str(exc_info.value) == "bad request"


class TestGenerationCache:
    @pytest.mark.asyncio
    async def test_cache_hit_skips_llm(self, mock_llm):
        mock_llm.complete.return_value = _response('{"models": [{"title": "A"}]}')
        cache = GenerationCache()
        gen = LLMModelGenerator(mock_llm, cache=cache)

        first = await gen.generate(LONG_TEXT, OPTIONS, "a.txt")
        second = await gen.generate(LONG_TEXT, OPTIONS, "a.txt")

        assert first == second
        assert mock_llm.complete.await_count == 1
        assert (cache.hits, len(cache)) == (1, 1)

    @pytest.mark.asyncio
    async def test_different_options_miss(self, mock_llm):
        cache = GenerationCache()
        gen = LLMModelGenerator(mock_llm, cache=cache)
        await gen.generate(LONG_TEXT, OPTIONS, "a.txt")
        await gen.generate(LONG_TEXT, OPTIONS.model_copy(update={"style_hints": "formal"}), "a.txt")
        assert mock_llm.complete.await_count == 2

    def test_entries_are_copies(self):
        from draftmodels.core.models import CandidateModel

        cache = GenerationCache()
        cache.set("k", [CandidateModel(title="A", content="x")])
        cache.get("k")[0].title = "mutated"
        assert cache.get("k")[0].title == "A"
