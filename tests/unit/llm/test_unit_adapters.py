# tests/unit/llm/test_unit_adapters.py - v2
"""Tests for llm/adapters - request shaping with mocked SDK clients."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from draftmodels.llm.adapters.anthropic_adapter import AnthropicAdapter
from draftmodels.llm.base_client import Message


def _anthropic_response(text: str, stop_reason: str = "end_turn") -> SimpleNamespace:
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=12, output_tokens=3),
        model="claude-test",
        stop_reason=stop_reason,
    )


class TestAnthropicAdapter:
    @pytest.mark.asyncio
    async def test_complete_passes_system_and_normalizes(self):
        adapter = AnthropicAdapter(model="claude-test", api_key="k")
        create = AsyncMock(return_value=_anthropic_response('{"models": []}'))
        adapter._AnthropicAdapter__client = SimpleNamespace(messages=SimpleNamespace(create=create))

        resp = await adapter.complete(
            [Message(role="user", content="hi")], system="sys", max_tokens=100,
        )

        kwargs = create.await_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["max_tokens"] == 100
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert resp.content == '{"models": []}'
        assert (resp.input_tokens, resp.output_tokens) == (12, 3)
        assert resp.provider == "anthropic"

    def test_names(self):
        adapter = AnthropicAdapter(model="claude-test")
        assert adapter.provider_name == "anthropic"
        assert adapter.model_name == "claude-test"

    def test_extract_text_skips_non_text_blocks(self):
        resp = SimpleNamespace(content=[
            SimpleNamespace(type="thinking", thinking="..."),
            SimpleNamespace(type="text", text="a"),
            SimpleNamespace(type="text", text="b"),
        ])
        assert AnthropicAdapter._extract_text(resp) == "ab"

    @pytest.mark.asyncio
    async def test_max_tokens_stop_marks_truncated(self):
        adapter = AnthropicAdapter(model="claude-test", api_key="k")
        create = AsyncMock(return_value=_anthropic_response('{"models": [', "max_tokens"))
        adapter._AnthropicAdapter__client = SimpleNamespace(messages=SimpleNamespace(create=create))

        resp = await adapter.complete([Message(role="user", content="hi")], max_tokens=10)

        assert resp.truncated is True
        assert resp.output_tokens == 3
