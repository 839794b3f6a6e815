# src/generation/parser.py - v1
"""Parse a backend answer into CandidateModels.

Accepts the JSON object bare, wrapped in a fenced code block or surrounded
by prose. Keys are read in English (models/title/category/keywords/content)
or in the legacy Portuguese form (modelos/titulo/categoria/palavrasChave/
conteudo). Missing fields get placeholder values rather than failing.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from draftmodels.core.models import CandidateModel
from draftmodels.generation.base_generator import GenerationError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_CONTENT = "<p>Content not generated</p>"

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "models": ("models", "modelos"),
    "title": ("title", "titulo"),
    "category": ("category", "categoria"),
    "keywords": ("keywords", "palavrasChave"),
    "content": ("content", "conteudo"),
}


def _pick(raw: dict[str, Any], field: str) -> Any:
    for key in _FIELD_ALIASES[field]:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None


def extract_json(content: str) -> Any:
    """Locate and decode the JSON payload of a backend answer.

    Raises:
        GenerationError: If no decodable JSON is present.
    """
    text = content.strip()
    fence = _FENCE_RE.search(text)
    if fence:
        text = fence.group(1).strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Fall back to the outermost object or array inside surrounding prose.
    for opener, closer in (("{", "}"), ("[", "]")):
        start, end = text.find(opener), text.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(text[start : end + 1])
            except json.JSONDecodeError:
                continue

    raise GenerationError("Backend response contained no valid JSON")


def _keywords(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(k).strip() for k in value if str(k).strip()]
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    return []


def parse_models(content: str) -> list[CandidateModel]:
    """Turn a raw backend answer into CandidateModels.

    Raises:
        GenerationError: If the payload is not JSON or has no model list.
    """
    payload = extract_json(content)

    if isinstance(payload, list):
        raw_models = payload
    elif isinstance(payload, dict):
        raw_models = _pick(payload, "models")
        if raw_models is None:
            raw_models = []
    else:
        raise GenerationError("Backend response has an unexpected JSON shape")

    if not isinstance(raw_models, list):
        raise GenerationError("Backend response 'models' field is not a list")

    models: list[CandidateModel] = []
    for idx, raw in enumerate(raw_models):
        if not isinstance(raw, dict):
            logger.debug("Skipping non-object model entry at position %d", idx)
            continue
        models.append(
            CandidateModel(
                title=str(_pick(raw, "title") or f"Model {idx + 1}"),
                category=str(_pick(raw, "category") or DEFAULT_CATEGORY),
                keywords=_keywords(_pick(raw, "keywords")),
                content=str(_pick(raw, "content") or DEFAULT_CONTENT),
            )
        )
    return models
