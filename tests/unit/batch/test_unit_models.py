# tests/unit/batch/test_unit_models.py - v2
"""Tests for batch/models.py - RunState derived views."""

from __future__ import annotations

from datetime import datetime, timezone

from draftmodels.batch.models import RunState
from draftmodels.core.models import FailureOutcome, GeneratedModel, SuccessOutcome


def _state() -> RunState:
    model = GeneratedModel(id="g1", title="T", content="c", source_file="a.txt")
    return RunState(
        run_id="r1",
        phase="running",
        current_batch=1,
        total_batches=2,
        total_files=4,
        outcomes=[
            SuccessOutcome(file_name="a.txt", file_index=0, models=[model]),
            FailureOutcome(
                file_name="b.pdf", file_index=1, reason="corrupt", stage="extraction",
            ),
        ],
        models=[model],
    )


class TestRunState:
    def test_processed_count_includes_failures(self):
        assert _state().processed_count == 2

    def test_successes_failures_errors(self):
        state = _state()
        assert [o.file_name for o in state.successes] == ["a.txt"]
        assert [o.file_name for o in state.failures] == ["b.pdf"]
        [error] = state.errors
        assert (error.file_name, error.reason, error.stage) == ("b.pdf", "corrupt", "extraction")

    def test_terminal_phases(self):
        state = _state()
        assert not state.is_terminal
        state.phase = "cancelled"
        assert state.is_terminal

    def test_snapshot(self):
        snap = _state().snapshot()
        assert (snap.processed_count, snap.total_count) == (2, 4)
        assert (snap.current_batch, snap.total_batches, snap.phase) == (1, 2, "running")

    def test_duration(self):
        state = _state()
        assert state.duration_seconds is None
        state.started_at = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        state.finished_at = datetime(2025, 1, 1, 12, 0, 30, tzinfo=timezone.utc)
        assert state.duration_seconds == 30.0

    def test_outcome_discriminator_round_trip(self):
        state = _state()
        restored = RunState.model_validate_json(state.model_dump_json())
        assert isinstance(restored.outcomes[1], FailureOutcome)
