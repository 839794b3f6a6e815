# tests/unit/library/test_unit_json_store.py - v1
"""Tests for library/json_store.py."""

from __future__ import annotations

import json

import pytest

from draftmodels.core.models import GeneratedModel
from draftmodels.library.base_library_store import LibraryStoreError
from draftmodels.library.json_store import JsonLibraryStore


def _generated(id_: str) -> GeneratedModel:
    return GeneratedModel(id=id_, title=f"T {id_}", content="<p>c</p>", source_file="a.txt")


class TestJsonLibraryStore:
    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        assert await JsonLibraryStore(tmp_path / "none.json").list_models() == []

    @pytest.mark.asyncio
    async def test_persist_then_reload(self, tmp_path):
        path = tmp_path / "nested" / "library.json"
        store = JsonLibraryStore(path)

        persisted = await store.persist([_generated("g1"), _generated("g2")])
        await store.persist([_generated("g3")])

        reloaded = await JsonLibraryStore(path).list_models()
        assert [m.title for m in reloaded] == ["T g1", "T g2", "T g3"]
        assert reloaded[0].id == persisted[0].id
        assert store.commit_count == 2
        assert not (path.parent / ".library.json.tmp").exists()

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["models"][0]["generated_id"] == "g1"

    @pytest.mark.asyncio
    async def test_accepts_bare_list(self, tmp_path):
        path = tmp_path / "library.json"
        path.write_text(json.dumps([{"id": "x", "title": "X", "content": "c"}]), encoding="utf-8")
        [model] = await JsonLibraryStore(path).list_models()
        assert model.id == "x"

    @pytest.mark.asyncio
    async def test_corrupt_file(self, tmp_path):
        path = tmp_path / "library.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LibraryStoreError, match="Cannot read library"):
            await JsonLibraryStore(path).list_models()

    @pytest.mark.asyncio
    async def test_invalid_entries(self, tmp_path):
        path = tmp_path / "library.json"
        path.write_text(json.dumps({"models": [{"title": "no id"}]}), encoding="utf-8")
        with pytest.raises(LibraryStoreError, match="Invalid library"):
            await JsonLibraryStore(path).list_models()

    @pytest.mark.asyncio
    async def test_failed_persist_leaves_library_untouched(self, tmp_path):
        path = tmp_path / "library.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonLibraryStore(path)
        with pytest.raises(LibraryStoreError):
            await store.persist([_generated("g1")])
        assert path.read_text(encoding="utf-8") == "{not json"
        assert store.commit_count == 0

    def test_expands_user(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert JsonLibraryStore("~/lib.json").path == tmp_path / "lib.json"
