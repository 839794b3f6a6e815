# tests/unit/core/test_unit_models.py - v2
"""Tests for core/models.py - shared domain models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from draftmodels.core.models import (
    FailureOutcome,
    FileError,
    FileTask,
    GeneratedModel,
    GenerationOptions,
    ModelReference,
    Outcome,
    SimilarityInfo,
    SuccessOutcome,
)


class TestFileTask:
    def test_extension_lowercased(self):
        task = FileTask(index=0, name="Report.PDF", size_bytes=10, source=Path("Report.PDF"))
        assert task.extension == ".pdf"

    def test_frozen(self):
        task = FileTask(index=0, name="a.txt", size_bytes=1, source=b"x")
        with pytest.raises(ValidationError):
            task.index = 2  # type: ignore[misc]

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            FileTask(index=-1, name="a.txt", size_bytes=1, source=b"x")

    @pytest.mark.parametrize(
        ("index", "batch_size", "expected"),
        [(0, 3, 1), (2, 3, 1), (3, 3, 2), (4, 3, 2), (6, 3, 3), (0, 1, 1), (5, 1, 6)],
    )
    def test_batch_number(self, index, batch_size, expected):
        task = FileTask(index=index, name="a.txt", size_bytes=1, source=b"x")
        assert task.batch_number(batch_size) == expected


class TestSimilarityInfo:
    def test_score_bounds(self):
        ref = ModelReference(id="m1", title="T", origin="library")
        with pytest.raises(ValidationError):
            SimilarityInfo(similarity=1.2, similar_model=ref)

    def test_generated_model_without_similarity(self):
        model = GeneratedModel(id="g1", title="T", content="c", source_file="a.txt")
        assert model.similarity_info is None
        assert model.keywords == []


class TestOutcome:
    def test_discriminated_by_status(self):
        adapter = TypeAdapter(Outcome)
        ok = adapter.validate_python({"status": "success", "file_name": "a", "file_index": 0})
        ko = adapter.validate_python(
            {"status": "failure", "file_name": "b", "file_index": 1,
             "reason": "boom", "stage": "extraction"}
        )
        assert isinstance(ok, SuccessOutcome)
        assert isinstance(ko, FailureOutcome)

    def test_invalid_stage(self):
        with pytest.raises(ValidationError):
            FailureOutcome(file_name="a", file_index=0, reason="x", stage="similarity")

    def test_file_error_from_outcome(self):
        failure = FailureOutcome(file_name="b.pdf", file_index=1, reason="boom", stage="generation")
        assert FileError.from_outcome(failure) == FileError(
            file_name="b.pdf", reason="boom", stage="generation",
        )


class TestGenerationOptions:
    def test_fingerprint_stable(self):
        a = GenerationOptions(provider="anthropic", model="m", style_hints="formal")
        b = GenerationOptions(provider="anthropic", model="m", style_hints="formal")
        assert a.fingerprint() == b.fingerprint()
        assert a.fingerprint() != GenerationOptions(provider="openai", model="m").fingerprint()
