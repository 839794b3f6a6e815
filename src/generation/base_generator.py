# src/generation/base_generator.py - v1
"""Abstract generation backend: text -> candidate models."""

from __future__ import annotations

from abc import ABC, abstractmethod

from draftmodels.core.models import CandidateModel, GenerationOptions


class GenerationError(Exception):
    """Raised when the backend fails, times out or answers with unusable data.

    The message is shown to the reviewer verbatim as the file's failure reason.
    """


class BaseModelGenerator(ABC):
    """Collaborator contract: generate(text, options) -> [CandidateModel].

    Implementations never retry implicitly; a caller that wants retries
    wraps the generator or enables them in configuration.
    """

    @abstractmethod
    async def generate(
        self,
        text: str,
        options: GenerationOptions,
        source_name: str = "",
    ) -> list[CandidateModel]:
        """Synthesize zero or more reusable models from one document's text.

        Args:
            text: Extracted plain text of the document.
            options: Run-wide settings bundle, passed unchanged for every file.
            source_name: Display name of the file (logging and cache keys only).

        Raises:
            GenerationError: On backend error, timeout or malformed response.
        """
