# src/api/facade.py - v3
"""Public API facade: wire collaborators from Settings and run a pipeline.

Usage:
    from draftmodels.api.facade import generate_models
    session = await generate_models([Path("a.pdf"), Path("b.docx")])
    await session.commit()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from draftmodels.api.models import RunOverrides
from draftmodels.batch.controller import RunController, RunStateError
from draftmodels.batch.progress import BaseProgressSink, LoggingProgressSink
from draftmodels.batch.queue import FileInput, TaskQueue
from draftmodels.batch.scheduler import Sleep
from draftmodels.config.settings import Settings
from draftmodels.core.cancellation import CancellationToken
from draftmodels.core.models import GenerationOptions
from draftmodels.extraction.text_extractor import BaseTextExtractor, DocumentTextExtractor
from draftmodels.generation.base_generator import BaseModelGenerator
from draftmodels.generation.cache import GenerationCache
from draftmodels.library.base_library_store import BaseLibraryStore
from draftmodels.llm.base_client import BaseLLMClient
from draftmodels.llm.client_factory import LLMAssignment, resolve_llm
from draftmodels.review.session import ReviewSession
from draftmodels.similarity.base_comparator import BaseSimilarityComparator
from draftmodels.similarity.dedup import SimilarityDedup

logger = logging.getLogger(__name__)

# Shared for the process lifetime so repeated runs skip identical calls.
_generation_cache = GenerationCache()


def apply_overrides(settings: Settings, overrides: RunOverrides | None) -> Settings:
    """Return settings with per-run overrides applied and revalidated."""
    if overrides is None:
        return settings
    values = overrides.model_dump(exclude_none=True)
    if not values:
        return settings
    current = settings.model_dump()
    current.update(values)
    return Settings(**current)


def generation_options(settings: Settings, assignment: LLMAssignment) -> GenerationOptions:
    return GenerationOptions(
        provider=assignment.provider,
        model=assignment.model,
        style_hints=settings.generation_style_hints,
        max_tokens=settings.generation_max_tokens,
        temperature=settings.generation_temperature,
    )


def build_pipeline(
    files: Sequence[FileInput],
    settings: Settings | None = None,
    overrides: RunOverrides | None = None,
    *,
    extractor: BaseTextExtractor | None = None,
    generator: BaseModelGenerator | None = None,
    llm_client: BaseLLMClient | None = None,
    comparator: BaseSimilarityComparator | None = None,
    library_store: BaseLibraryStore | None = None,
    sinks: list[BaseProgressSink] | None = None,
    token: CancellationToken | None = None,
    sleep: Sleep = asyncio.sleep,
) -> RunController:
    """Validate the file set and assemble a RunController.

    Any collaborator left as None is built from settings.

    Raises:
        BatchValidationError: Empty set, too many files or unsupported type.
        ConfigurationError: Inconsistent settings.
    """
    settings = apply_overrides(settings or Settings(), overrides)
    queue = TaskQueue.from_files(
        files, batch_size=settings.batch_size, max_files=settings.max_files,
    )

    assignment = resolve_llm("generation", settings)
    if generator is None:
        generator = _build_generator(settings, assignment, llm_client)
    if comparator is None:
        from draftmodels.similarity.comparator_factory import create_comparator

        comparator = create_comparator(settings)
    if library_store is None:
        from draftmodels.library.json_store import JsonLibraryStore

        library_store = JsonLibraryStore(settings.library_path)

    logger.debug(
        "Pipeline: llm=%s (%s), similarity=%s, batch_size=%d, stagger=%dms",
        assignment.key, assignment.source, comparator.name,
        settings.batch_size, settings.stagger_delay_ms,
    )

    return RunController(
        queue,
        extractor or DocumentTextExtractor(),
        generator,
        options=generation_options(settings, assignment),
        dedup=SimilarityDedup(comparator, threshold=settings.similarity_threshold),
        library_store=library_store,
        stagger_delay_ms=settings.stagger_delay_ms,
        inter_batch_cooldown_ms=settings.inter_batch_cooldown_ms,
        sinks=sinks if sinks is not None else [LoggingProgressSink()],
        token=token,
        sleep=sleep,
    )


async def generate_models(
    files: Sequence[FileInput],
    settings: Settings | None = None,
    overrides: RunOverrides | None = None,
    **collaborators: object,
) -> ReviewSession:
    """Run the full pipeline and open a review session on its result."""
    controller = build_pipeline(files, settings, overrides, **collaborators)  # type: ignore[arg-type]
    state = await controller.run()
    store = controller.library_store
    if store is None:
        raise RunStateError(f"Run {state.run_id} has no library store to commit to")
    return ReviewSession.from_run(state, store)


def _build_generator(
    settings: Settings,
    assignment: LLMAssignment,
    llm_client: BaseLLMClient | None,
) -> BaseModelGenerator:
    from draftmodels.generation.llm_generator import LLMModelGenerator
    from draftmodels.llm.client_factory import create_llm_client

    client = llm_client or create_llm_client(
        assignment.provider, assignment.model, settings=settings,
    )
    return LLMModelGenerator(
        client,
        timeout_s=settings.generation_timeout_s,
        min_text_chars=settings.generation_min_text_chars,
        max_input_chars=settings.generation_max_input_chars,
        retry_enabled=settings.generation_retry_enabled,
        cache=_generation_cache if settings.generation_cache_enabled else None,
    )
