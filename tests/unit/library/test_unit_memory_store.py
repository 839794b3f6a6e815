# tests/unit/library/test_unit_memory_store.py - v1
"""Tests for library/memory_store.py and the persisted identity mapping."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from draftmodels.core.models import GeneratedModel
from draftmodels.library.base_library_store import to_persisted
from draftmodels.library.memory_store import InMemoryLibraryStore


def _generated(id_: str) -> GeneratedModel:
    return GeneratedModel(
        id=id_, title=f"T {id_}", content="<p>c</p>", category="Labor",
        keywords=["k"], source_file="a.txt",
    )


class TestToPersisted:
    def test_assigns_new_identity(self):
        now = datetime(2025, 5, 1, tzinfo=timezone.utc)
        persisted = to_persisted(_generated("gen-1"), now=now)
        assert persisted.id != "gen-1"
        assert persisted.generated_id == "gen-1"
        assert persisted.created_at == now
        assert persisted.favorite is False
        assert persisted.source_file == "a.txt"


class TestInMemoryLibraryStore:
    @pytest.mark.asyncio
    async def test_persist_appends_in_order(self, library_store):
        persisted = await library_store.persist([_generated("g1"), _generated("g2")])

        assert [p.generated_id for p in persisted] == ["g1", "g2"]
        models = await library_store.list_models()
        assert [m.id for m in models] == ["lib-1", persisted[0].id, persisted[1].id]
        assert library_store.commit_count == 1
        assert len(library_store.persist_calls) == 1

    @pytest.mark.asyncio
    async def test_list_returns_copy(self, empty_library):
        models = await empty_library.list_models()
        models.append(object())
        assert await empty_library.list_models() == []
