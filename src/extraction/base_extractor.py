# src/extraction/base_extractor.py - v2
"""Format extractor interface.

A format extractor turns one FileTask source, a path on disk or uploaded
bytes, into plain text. Problems that belong to the document itself raise
ExtractionError; the dispatcher in text_extractor.py wraps anything else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Union

from draftmodels.core.models import ExtractionResult

Source = Union[Path, bytes]


class ExtractionError(Exception):
    """Text could not be extracted from a document. Treated as permanent for that file."""


class BaseExtractor(ABC):
    """One document format."""

    extensions: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    async def extract(self, source: Source) -> ExtractionResult:
        """Return the document's text."""


def read_bytes(source: Source) -> bytes:
    return source.read_bytes() if isinstance(source, Path) else source
