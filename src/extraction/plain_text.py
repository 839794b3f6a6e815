# src/extraction/plain_text.py - v1
"""Plain text and Markdown: decoded as UTF-8, nothing to parse."""

from __future__ import annotations

import re

from draftmodels.core.models import ExtractionResult
from draftmodels.extraction.base_extractor import BaseExtractor, Source, read_bytes

_IMAGE_REF = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")


def decode_text(data: bytes) -> str:
    """UTF-8 with undecodable bytes replaced and a leading BOM dropped."""
    return data.decode("utf-8", errors="replace").lstrip("\ufeff")


class TxtExtractor(BaseExtractor):
    extensions = (".txt",)

    async def extract(self, source: Source) -> ExtractionResult:
        return ExtractionResult(raw_text=decode_text(read_bytes(source)), source_format="txt")


class MarkdownExtractor(BaseExtractor):
    """Markdown kept as written, except images, which become their alt text."""

    extensions = (".md", ".markdown")

    async def extract(self, source: Source) -> ExtractionResult:
        text = _IMAGE_REF.sub(lambda m: m.group(1), decode_text(read_bytes(source)))
        return ExtractionResult(raw_text=text, source_format="md")
