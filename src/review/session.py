# src/review/session.py - v1
"""Review/commit state machine over the models of a finished run.

States: reviewing -> discarded | committed. Both end states are final and
every later operation is rejected. Per-file errors stay visible in every
state, whatever happens to the models.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Literal

from draftmodels.batch.controller import RunStateError
from draftmodels.batch.models import RunState
from draftmodels.core.models import FileError, GeneratedModel, PersistedModel
from draftmodels.library.base_library_store import BaseLibraryStore

logger = logging.getLogger(__name__)

ReviewPhase = Literal["reviewing", "discarded", "committed"]


class ReviewStateError(RuntimeError):
    """Raised on any operation after the session was discarded or committed."""


class UnknownModelError(LookupError):
    """Raised when a model id is not part of the reviewed list."""


class ReviewSession:
    """User curation of generated models before they reach the library."""

    def __init__(
        self,
        models: Iterable[GeneratedModel],
        errors: Iterable[FileError],
        library_store: BaseLibraryStore,
    ) -> None:
        self._models: list[GeneratedModel] = list(models)
        self._errors: tuple[FileError, ...] = tuple(errors)
        self._store = library_store
        self._phase: ReviewPhase = "reviewing"
        self._persisted: list[PersistedModel] = []

    @classmethod
    def from_run(cls, state: RunState, library_store: BaseLibraryStore) -> ReviewSession:
        """Open a session on a completed or cancelled run.

        Raises:
            RunStateError: If the run is not terminal yet.
        """
        if not state.is_terminal:
            raise RunStateError(
                f"Cannot review run {state.run_id} in phase {state.phase}"
            )
        return cls(state.models, state.errors, library_store)

    @property
    def phase(self) -> ReviewPhase:
        return self._phase

    @property
    def models(self) -> list[GeneratedModel]:
        return list(self._models)

    @property
    def errors(self) -> list[FileError]:
        return list(self._errors)

    @property
    def persisted(self) -> list[PersistedModel]:
        return list(self._persisted)

    def get_model(self, model_id: str) -> GeneratedModel:
        for model in self._models:
            if model.id == model_id:
                return model
        raise UnknownModelError(f"No model with id {model_id!r} under review")

    def remove_model(self, model_id: str) -> GeneratedModel:
        """Drop one model from the review list and return it."""
        self._require_reviewing("remove_model")
        model = self.get_model(model_id)
        self._models.remove(model)
        logger.debug("Removed '%s' from review", model.title)
        return model

    def discard_all(self) -> None:
        """Drop every model. Irreversible."""
        self._require_reviewing("discard_all")
        dropped = len(self._models)
        self._models.clear()
        self._phase = "discarded"
        logger.info("Discarded %d generated model(s)", dropped)

    async def commit(self, selection: Iterable[str] | None = None) -> list[PersistedModel]:
        """Persist the remaining models, or the ``selection`` of their ids.

        Models keep their review order whatever the order of ``selection``.
        The library store is called exactly once, with an empty list when
        nothing remains. If the store fails the session stays in review.

        Raises:
            ReviewStateError: If the session already ended.
            UnknownModelError: If ``selection`` names a model not under review.
        """
        self._require_reviewing("commit")

        if selection is None:
            chosen = list(self._models)
        else:
            wanted = set(selection)
            known = {m.id for m in self._models}
            unknown = sorted(wanted - known)
            if unknown:
                raise UnknownModelError(f"Unknown model id(s) in selection: {unknown}")
            chosen = [m for m in self._models if m.id in wanted]

        persisted = await self._store.persist(chosen)
        self._persisted = list(persisted)
        self._phase = "committed"
        logger.info(
            "Committed %d model(s) to the library (%d file error(s) reported)",
            len(persisted), len(self._errors),
        )
        return list(persisted)

    def _require_reviewing(self, operation: str) -> None:
        if self._phase != "reviewing":
            raise ReviewStateError(f"Cannot {operation}: review already {self._phase}")
