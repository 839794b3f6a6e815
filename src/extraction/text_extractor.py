# src/extraction/text_extractor.py - v2
"""Text extraction collaborator used by the task executor.

Holds the format registry, which also decides which file types a run
accepts, and dispatches each FileTask by extension. Every failure reaches
the executor as an ExtractionError carrying the original message. Safe to
call concurrently for distinct files.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from draftmodels.core.models import FileTask
from draftmodels.extraction.base_extractor import BaseExtractor, ExtractionError
from draftmodels.extraction.docx_extractor import DocxExtractor
from draftmodels.extraction.pdf_extractor import PdfExtractor
from draftmodels.extraction.plain_text import MarkdownExtractor, TxtExtractor

logger = logging.getLogger(__name__)

_FORMATS: dict[str, type[BaseExtractor]] = {}


def _normalize(extension: str) -> str:
    ext = extension.lower()
    return ext if ext.startswith(".") else f".{ext}"


def register_format(cls: type[BaseExtractor]) -> None:
    """Accept the extensions ``cls`` declares, replacing earlier registrations."""
    for ext in cls.extensions:
        _FORMATS[_normalize(ext)] = cls


for _cls in (TxtExtractor, MarkdownExtractor, PdfExtractor, DocxExtractor):
    register_format(_cls)


def is_supported(extension: str) -> bool:
    return _normalize(extension) in _FORMATS


def supported_extensions() -> list[str]:
    return sorted(_FORMATS)


class BaseTextExtractor(ABC):
    """Collaborator contract: extract(file) -> text."""

    @abstractmethod
    async def extract(self, task: FileTask) -> str:
        """Return plain text for the task, or raise ExtractionError."""


class DocumentTextExtractor(BaseTextExtractor):
    """Extension-dispatching extractor over the format registry."""

    async def extract(self, task: FileTask) -> str:
        cls = _FORMATS.get(task.extension)
        if cls is None:
            raise ExtractionError(
                f"Unsupported file type {task.extension or '(none)'!r}; "
                f"accepted: {', '.join(supported_extensions())}"
            )

        try:
            result = await cls().extract(task.source)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Failed to read {task.name}: {e}") from e

        logger.debug(
            "Extracted %d chars from %s (%s)",
            result.char_count, task.name, result.source_format,
        )
        return result.raw_text
