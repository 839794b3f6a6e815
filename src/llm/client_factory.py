# src/llm/client_factory.py - v4
"""Which LLM a run generates with, and the adapter that talks to it.

Selection cascade for a component (only ``generation`` today):
  1. ``LLM_<COMPONENT>=provider:model``
  2. ``LLM_DEFAULT_PROVIDER`` with ``LLM_DEFAULT_MODEL``
  3. the built-in Claude model

Adapters are imported when first selected, so only the chosen provider's
SDK has to be installed.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Any, Literal

from draftmodels.config.settings import Settings
from draftmodels.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

FALLBACK_PROVIDER = "anthropic"
FALLBACK_MODEL = "claude-sonnet-4-20250514"

_ADAPTERS: dict[str, str] = {
    "anthropic": "draftmodels.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "openai": "draftmodels.llm.adapters.openai_adapter.OpenAIAdapter",
    "google": "draftmodels.llm.adapters.google_adapter.GoogleAdapter",
    "ollama": "draftmodels.llm.adapters.ollama_adapter.OllamaAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


@dataclass(frozen=True)
class LLMAssignment:
    provider: str
    model: str
    source: Literal["component", "default", "fallback"]

    @property
    def key(self) -> str:
        return f"{self.provider}:{self.model}"


def resolve_llm(component: str, settings: Settings) -> LLMAssignment:
    override = getattr(settings, f"llm_{component}", "")
    if override and ":" in override:
        provider, model = (part.strip() for part in override.split(":", 1))
        return LLMAssignment(provider, model, "component")
    if settings.llm_default_provider and settings.llm_default_model:
        return LLMAssignment(settings.llm_default_provider, settings.llm_default_model, "default")
    return LLMAssignment(FALLBACK_PROVIDER, FALLBACK_MODEL, "fallback")


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: Any,
) -> BaseLLMClient:
    """Build the adapter for ``provider``.

    Credentials and hosts come from ``settings`` unless passed in ``kwargs``.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    class_path = _ADAPTERS.get(provider)
    if class_path is None:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(available_providers())}"
        )
    module_path, _, class_name = class_path.rpartition(".")
    adapter_cls = getattr(importlib.import_module(module_path), class_name)

    if settings is not None:
        for name, value in _connection(provider, settings).items():
            kwargs.setdefault(name, value)

    logger.debug("Creating LLM client %s:%s", provider, model)
    return adapter_cls(model=model, **kwargs)


def _connection(provider: str, settings: Settings) -> dict[str, str]:
    if provider == "ollama":
        return {"base_url": settings.ollama_base_url}
    api_key = getattr(settings, f"{provider}_api_key", None)
    return {"api_key": api_key} if api_key is not None else {}


def register_provider(name: str, class_path: str) -> None:
    """Make ``name`` selectable; ``class_path`` points at a BaseLLMClient subclass."""
    _ADAPTERS[name] = class_path
    logger.info("Registered LLM provider %s -> %s", name, class_path)


def available_providers() -> list[str]:
    return sorted(_ADAPTERS)
