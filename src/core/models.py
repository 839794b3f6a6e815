# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# === INPUT ===


class FileTask(BaseModel):
    """One input file of a bulk run.

    ``index`` is the stable 0-based position in the submitted set; it alone
    determines batch membership. ``source`` is the opaque file handle handed
    to the extraction collaborator (a filesystem path or uploaded bytes).
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    name: str
    size_bytes: int = Field(ge=0)
    source: Path | bytes

    @property
    def extension(self) -> str:
        """Lower-cased extension of the display name, including the dot."""
        return Path(self.name).suffix.lower()

    def batch_number(self, batch_size: int) -> int:
        """1-based number of the batch this task belongs to."""
        return self.index // batch_size + 1


# === GENERATION ===


class CandidateModel(BaseModel):
    """A model exactly as the generation backend produced it."""

    title: str
    content: str
    category: str = ""
    keywords: list[str] = Field(default_factory=list)


class GenerationOptions(BaseModel):
    """Opaque settings bundle passed unchanged to every generate() call of a run."""

    model_config = ConfigDict(frozen=True)

    provider: str = ""
    model: str = ""
    style_hints: str = ""
    max_tokens: int = 8000
    temperature: float = 0.3

    def fingerprint(self) -> str:
        """Stable string identifying the options, used in cache keys."""
        return self.model_dump_json()


# === SIMILARITY ===


class ModelReference(BaseModel):
    """Pointer to the closest existing model of a similarity match."""

    id: str
    title: str
    origin: Literal["library", "run"]


class SimilarityInfo(BaseModel):
    """Advisory near-duplicate annotation attached after generation."""

    similarity: float = Field(ge=0.0, le=1.0)
    similar_model: ModelReference


class GeneratedModel(BaseModel):
    """A reusable content model produced from one file's text."""

    id: str
    title: str
    content: str
    category: str = ""
    keywords: list[str] = Field(default_factory=list)
    source_file: str
    similarity_info: SimilarityInfo | None = None


# === LIBRARY ===


class LibraryModel(BaseModel):
    """A model already persisted in the library."""

    id: str
    title: str
    content: str
    category: str = ""
    keywords: list[str] = Field(default_factory=list)
    source_file: str | None = None
    created_at: datetime | None = None
    favorite: bool = False


class PersistedModel(LibraryModel):
    """Library entry returned by a commit, carrying its final identity."""

    generated_id: str


# === OUTCOMES ===


class SuccessOutcome(BaseModel):
    """Terminal success of one FileTask."""

    status: Literal["success"] = "success"
    file_name: str
    file_index: int
    models: list[GeneratedModel] = Field(default_factory=list)
    duration_seconds: float = 0.0


class FailureOutcome(BaseModel):
    """Terminal failure of one FileTask. ``reason`` keeps the error message verbatim."""

    status: Literal["failure"] = "failure"
    file_name: str
    file_index: int
    reason: str
    stage: Literal["extraction", "generation"]
    duration_seconds: float = 0.0


Outcome = Annotated[Union[SuccessOutcome, FailureOutcome], Field(discriminator="status")]


class FileError(BaseModel):
    """Per-file error entry shown to the reviewer."""

    file_name: str
    reason: str
    stage: str

    @classmethod
    def from_outcome(cls, outcome: FailureOutcome) -> FileError:
        return cls(file_name=outcome.file_name, reason=outcome.reason, stage=outcome.stage)


# === EXTRACTION ===


class ExtractionResult(BaseModel):
    """Plain text extracted from one document."""

    raw_text: str
    source_format: str
    page_count: int | None = None

    @property
    def char_count(self) -> int:
        return len(self.raw_text)
