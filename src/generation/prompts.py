# src/generation/prompts.py - v1
"""Prompt templates for bulk model generation."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a drafting assistant that turns documents into generic, "
    "reusable content models. Respond only with valid JSON."
)

_BULK_ANALYSIS_TEMPLATE = """TASK: Analyze the document below and identify EVERY distinct topic that can become a complete, reusable drafting model.

GENERALIZATION RULES:
1. Remove case-specific data: names of people or companies, monetary amounts, dates, case or file numbers, addresses.
2. Replace them with generic terms ("the claimant", "the company", "the amount due", "the period worked").
3. Keep the reasoning, arguments and cited authorities that apply to similar cases.
4. Each model must work as a template for ANY case of the same kind.

LITERAL PRESERVATION:
- Only substitute specific data with generic terms, like a find-and-replace.
- Do NOT summarize, rephrase, simplify or reorder the text.
- Keep sentence structure, connectives and citations exactly as written.
- Do NOT open a model with a summary of what the parties claimed; start directly with the analysis.

OUTPUT FORMAT:
Answer with a single JSON object and nothing else:
{{
  "models": [
    {{
      "title": "short descriptive title",
      "category": "subject area",
      "keywords": ["keyword1", "keyword2"],
      "content": "<p>model text as HTML paragraphs</p>"
    }}
  ]
}}
If the document contains no reusable topic, answer {{"models": []}}.
{style_section}
DOCUMENT:
{text}
"""

_STYLE_SECTION = """
WRITING STYLE:
{style_hints}
"""


def build_bulk_analysis_prompt(text: str, style_hints: str = "") -> str:
    """Build the generation prompt for one document's text."""
    style_section = ""
    if style_hints.strip():
        style_section = _STYLE_SECTION.format(style_hints=style_hints.strip())
    return _BULK_ANALYSIS_TEMPLATE.format(style_section=style_section, text=text)
