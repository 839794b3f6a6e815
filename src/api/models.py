# src/api/models.py - v2
"""API-level models: per-run overrides of Settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RunOverrides(BaseModel):
    """Per-run overrides, a validated subset of Settings."""

    batch_size: int | None = Field(default=None, ge=1)
    stagger_delay_ms: int | None = Field(default=None, ge=0)
    generation_style_hints: str | None = None
    similarity_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    library_path: Path | None = None
