# tests/unit/generation/test_unit_prompts.py - v1
"""Tests for generation/prompts.py."""

from __future__ import annotations

from draftmodels.generation.prompts import build_bulk_analysis_prompt


class TestBuildBulkAnalysisPrompt:
    def test_embeds_text_and_json_schema(self):
        prompt = build_bulk_analysis_prompt("The employee worked {extra} hours.")
        assert "The employee worked {extra} hours." in prompt
        assert '"models": [' in prompt
        assert "WRITING STYLE" not in prompt

    def test_style_hints_section(self):
        prompt = build_bulk_analysis_prompt("text", style_hints="  formal, first person  ")
        assert "WRITING STYLE:\nformal, first person" in prompt

    def test_blank_style_hints_ignored(self):
        assert "WRITING STYLE" not in build_bulk_analysis_prompt("text", style_hints="   ")
