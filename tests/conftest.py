# tests/conftest.py - v3
"""Shared test fixtures for all unit and integration tests.

Provides stub collaborators (extractor, generator, comparator), an in-memory
library, a mock LLM client and a recording sleep so scheduling tests run
instantly. No external dependencies: all I/O is mocked.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from draftmodels.batch.controller import RunController
from draftmodels.batch.progress import CollectingProgressSink
from draftmodels.batch.queue import TaskQueue
from draftmodels.core.cancellation import CancellationToken
from draftmodels.core.models import (
    CandidateModel,
    FileTask,
    GenerationOptions,
    LibraryModel,
)
from draftmodels.extraction.base_extractor import ExtractionError
from draftmodels.extraction.text_extractor import BaseTextExtractor
from draftmodels.generation.base_generator import BaseModelGenerator, GenerationError
from draftmodels.library.memory_store import InMemoryLibraryStore
from draftmodels.llm.base_client import LLMResponse
from draftmodels.similarity.base_comparator import BaseSimilarityComparator
from draftmodels.similarity.dedup import SimilarityDedup


# === STUB COLLABORATORS ===


class StubExtractor(BaseTextExtractor):
    """Returns "text of <name>" unless the name is listed in ``failures``."""

    def __init__(self, failures: dict[str, str] | None = None) -> None:
        self.failures = failures or {}
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self.hooks: dict[str, Callable[[], None]] = {}

    async def extract(self, task: FileTask) -> str:
        self.calls.append(task.name)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            if task.name in self.hooks:
                self.hooks[task.name]()
            if task.name in self.failures:
                raise ExtractionError(self.failures[task.name])
            return f"text of {task.name}"
        finally:
            self.active -= 1


class StubGenerator(BaseModelGenerator):
    """One candidate per file by default; ``per_file`` overrides the list."""

    def __init__(
        self,
        per_file: dict[str, list[CandidateModel]] | None = None,
        failures: dict[str, str] | None = None,
    ) -> None:
        self.per_file = per_file or {}
        self.failures = failures or {}
        self.calls: list[tuple[str, GenerationOptions]] = []

    async def generate(
        self, text: str, options: GenerationOptions, source_name: str = "",
    ) -> list[CandidateModel]:
        self.calls.append((source_name, options))
        await asyncio.sleep(0)
        if source_name in self.failures:
            raise GenerationError(self.failures[source_name])
        if source_name in self.per_file:
            return [m.model_copy() for m in self.per_file[source_name]]
        return [
            CandidateModel(
                title=f"Model from {source_name}",
                content=f"content derived from {text}",
                category="General",
                keywords=["draft"],
            )
        ]


class StubComparator(BaseSimilarityComparator):
    """Scores looked up by (query content, corpus content); default 0."""

    def __init__(self, scores: dict[tuple[str, str], float] | None = None) -> None:
        self.scores = scores or {}
        self.calls = 0

    @property
    def name(self) -> str:
        return "stub"

    async def search(
        self, content: str, corpus: list[tuple[str, str]],
    ) -> list[tuple[str, float]]:
        self.calls += 1
        return [(doc_id, self.scores.get((content, text), 0.0)) for doc_id, text in corpus]


class RecordingSleep:
    """Drop-in for asyncio.sleep that records delays and only yields."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


# === FIXTURES: Collaborators ===


@pytest.fixture
def extractor() -> StubExtractor:
    return StubExtractor()


@pytest.fixture
def generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def comparator() -> StubComparator:
    return StubComparator()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def library_model() -> LibraryModel:
    return LibraryModel(
        id="lib-1",
        title="Overtime pay",
        content="<p>Overtime hours must be paid with the statutory premium.</p>",
        category="Labor",
        keywords=["overtime"],
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def library_store(library_model: LibraryModel) -> InMemoryLibraryStore:
    return InMemoryLibraryStore([library_model])


@pytest.fixture
def empty_library() -> InMemoryLibraryStore:
    return InMemoryLibraryStore()


@pytest.fixture
def mock_llm() -> AsyncMock:
    """Mock LLM client returning an empty model list."""
    client = AsyncMock()
    client.complete.return_value = LLMResponse(
        content='{"models": []}',
        input_tokens=100,
        output_tokens=10,
        model="test-model",
        provider="test",
        latency_ms=5,
    )
    client.provider_name = "test"
    client.model_name = "test-model"
    return client


# === FIXTURES: Builders ===


@pytest.fixture
def make_tasks() -> Callable[..., list[FileTask]]:
    """Build ``n`` in-memory .txt tasks named file0.txt, file1.txt, ..."""

    def _make(n: int) -> list[FileTask]:
        return [
            FileTask(index=i, name=f"file{i}.txt", size_bytes=4, source=b"data")
            for i in range(n)
        ]

    return _make


@pytest.fixture
def make_controller(
    make_tasks: Callable[..., list[FileTask]],
    extractor: StubExtractor,
    generator: StubGenerator,
    comparator: StubComparator,
    recording_sleep: RecordingSleep,
    empty_library: InMemoryLibraryStore,
) -> Callable[..., tuple[RunController, CollectingProgressSink]]:
    """Controller over stub collaborators; returns (controller, sink)."""

    def _make(
        n_files: int,
        batch_size: int = 3,
        stagger_delay_ms: int = 0,
        inter_batch_cooldown_ms: int = 1000,
        library_store: InMemoryLibraryStore | None = None,
        token: CancellationToken | None = None,
    ) -> tuple[RunController, CollectingProgressSink]:
        sink = CollectingProgressSink()
        controller = RunController(
            TaskQueue(make_tasks(n_files), batch_size=batch_size),
            extractor,
            generator,
            options=GenerationOptions(provider="test", model="test-model"),
            dedup=SimilarityDedup(comparator, threshold=0.60),
            library_store=library_store if library_store is not None else empty_library,
            stagger_delay_ms=stagger_delay_ms,
            inter_batch_cooldown_ms=inter_batch_cooldown_ms,
            sinks=[sink],
            sleep=recording_sleep,
            run_id="run-test",
            token=token,
        )
        return controller, sink

    return _make
