# src/batch/executor.py - v2
"""Task executor: extract -> generate -> annotate for one file.

Every invocation returns exactly one Outcome. Extraction and generation
errors become FailureOutcomes carrying the collaborator's message verbatim;
a backend answer that is not a list of candidates counts as a generation
error. Similarity errors only cost the annotation.

A started task always runs to the end: cancellation is observed by the
scheduler before new tasks start, never between the steps of one file.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence

from draftmodels.core.models import (
    CandidateModel,
    FailureOutcome,
    FileTask,
    GeneratedModel,
    GenerationOptions,
    LibraryModel,
    Outcome,
    SuccessOutcome,
)
from draftmodels.extraction.text_extractor import BaseTextExtractor
from draftmodels.generation.base_generator import BaseModelGenerator
from draftmodels.logging.context import set_file_context, set_step
from draftmodels.similarity.dedup import SimilarityDedup

logger = logging.getLogger(__name__)


def _new_model_id() -> str:
    return f"gen-{uuid.uuid4().hex[:12]}"


def _reason(error: BaseException) -> str:
    return str(error) or type(error).__name__


class MalformedCandidatesError(TypeError):
    """Raised when a generation backend answers with something other than candidates."""


class TaskExecutor:
    """Per-file unit of work.

    Args:
        extractor: Text extraction collaborator.
        generator: Generation backend collaborator.
        options: Run-wide generation options, passed unchanged to every call.
        dedup: Similarity annotator; None disables annotation.
        library: Library snapshot taken at run start.
        run_models: Returns the models recorded so far in the run.
    """

    def __init__(
        self,
        extractor: BaseTextExtractor,
        generator: BaseModelGenerator,
        options: GenerationOptions | None = None,
        dedup: SimilarityDedup | None = None,
        library: Sequence[LibraryModel] = (),
        run_models: Callable[[], Sequence[GeneratedModel]] = lambda: (),
        id_factory: Callable[[], str] = _new_model_id,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._extractor = extractor
        self._generator = generator
        self._options = options or GenerationOptions()
        self._dedup = dedup
        self._library = list(library)
        self._run_models = run_models
        self._id_factory = id_factory
        self._clock = clock

    async def execute(self, task: FileTask) -> Outcome:
        set_file_context(task.name, step="extraction")
        start = self._clock()

        try:
            text = await self._extractor.extract(task)
        except Exception as e:
            logger.warning("Extraction failed: %s", e)
            return self._failure(task, _reason(e), "extraction", start)

        set_step("generation")
        try:
            candidates = await self._generator.generate(
                text, self._options, source_name=task.name,
            )
            drafts = [self._to_model(c, task) for c in _as_candidates(candidates)]
        except Exception as e:
            logger.warning("Generation failed: %s", e)
            return self._failure(task, _reason(e), "generation", start)
        duration = self._clock() - start

        set_step("similarity")
        models: list[GeneratedModel] = []
        for draft in drafts:
            models.append(await self._annotate(draft, models))

        logger.info("Produced %d model(s) in %.1fs", len(models), duration)
        return SuccessOutcome(
            file_name=task.name,
            file_index=task.index,
            models=models,
            duration_seconds=duration,
        )

    def _to_model(self, candidate: CandidateModel, task: FileTask) -> GeneratedModel:
        return GeneratedModel(
            id=self._id_factory(),
            title=candidate.title,
            content=candidate.content,
            category=candidate.category,
            keywords=list(candidate.keywords),
            source_file=task.name,
        )

    async def _annotate(
        self, model: GeneratedModel, same_file: list[GeneratedModel],
    ) -> GeneratedModel:
        if self._dedup is None:
            return model
        try:
            return await self._dedup.annotate(
                model, self._library, [*self._run_models(), *same_file],
            )
        except Exception as e:
            logger.warning("Similarity check failed for '%s': %s", model.title, e)
            return model

    def _failure(
        self, task: FileTask, reason: str, stage: str, start: float,
    ) -> FailureOutcome:
        return FailureOutcome(
            file_name=task.name,
            file_index=task.index,
            reason=reason,
            stage=stage,
            duration_seconds=self._clock() - start,
        )


def _as_candidates(answer: object) -> list[CandidateModel]:
    if not isinstance(answer, list):
        raise MalformedCandidatesError(
            f"Generation backend returned {type(answer).__name__}, expected a list of models"
        )
    for item in answer:
        if not isinstance(item, CandidateModel):
            raise MalformedCandidatesError(
                f"Generation backend returned a {type(item).__name__} instead of a model"
            )
    return answer
