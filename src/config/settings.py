# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: generation backend,
batching and rate-limit throttling, similarity reporting, library location
and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Stagger presets offered by front ends, in milliseconds.
STAGGER_PRESETS_MS: tuple[int, ...] = (0, 300, 500, 1000)


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "anthropic"
    llm_default_model: str = "claude-sonnet-4-20250514"

    # Component override, "provider:model" (highest priority)
    llm_generation: str = ""

    anthropic_api_key: str = ""
    openai_api_key: str = ""
    google_api_key: str = ""
    voyage_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # === Generation ===
    generation_max_tokens: int = Field(default=8000, ge=1)
    generation_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    generation_timeout_s: float = Field(default=180.0, gt=0)
    generation_style_hints: str = ""
    generation_min_text_chars: int = Field(default=50, ge=0)
    generation_max_input_chars: int = Field(default=200_000, ge=1)
    generation_retry_enabled: bool = False
    generation_cache_enabled: bool = True

    # === Batch run ===
    batch_size: int = Field(default=3, ge=1)
    stagger_delay_ms: int = Field(default=0, ge=0)
    inter_batch_cooldown_ms: int = Field(default=1000, ge=0)
    max_files: int = Field(default=20, ge=1)

    # === Similarity ===
    similarity_backend: Literal["tfidf", "embedding"] = "tfidf"
    similarity_threshold: float = Field(default=0.60, ge=0.0, le=1.0)
    similarity_matrix_backend: Literal["numpy", "sklearn", "torch"] = "numpy"

    # === Embeddings (similarity_backend=embedding) ===
    embedding_provider: str = "sentence_transformers"
    embedding_model: str = "voyage-3"
    embedding_ollama_model: str = "nomic-embed-text"
    embedding_st_model: str = "all-MiniLM-L6-v2"

    # === Library ===
    library_path: Path = Path("~/.draftmodels/library.json")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.generation_max_input_chars < self.generation_min_text_chars:
            errors.append(
                "GENERATION_MAX_INPUT_CHARS must be >= GENERATION_MIN_TEXT_CHARS"
            )

        if self.llm_generation and ":" not in self.llm_generation:
            errors.append("LLM_GENERATION must use the 'provider:model' form")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def stagger_delay_s(self) -> float:
        return self.stagger_delay_ms / 1000.0

    @property
    def inter_batch_cooldown_s(self) -> float:
        return self.inter_batch_cooldown_ms / 1000.0


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
