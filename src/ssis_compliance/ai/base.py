"""
Vision Provider — Abstract Base
=================================
Defines the interface for vision models that read nutrition labels.
Implementations: API (OpenAI), local (Ollama).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ssis_compliance.config import get_settings
from ssis_compliance.errors import ProviderConfigError
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)


class VisionProvider(ABC):
    """Abstract vision model used for label field extraction."""

    @abstractmethod
    def extract(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        """Send a prompt with an image and return the model's raw text reply."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging."""
        ...


class NoOpProvider(VisionProvider):
    """Placeholder when AI is disabled. Extraction is impossible without a model."""

    def extract(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        raise ProviderConfigError(
            "AI provider is disabled. Set AI_PROVIDER=openai or AI_PROVIDER=local in .env."
        )

    @property
    def name(self) -> str:
        return "none"


def get_ai_provider(provider_name: str | None = None) -> VisionProvider:
    """
    Factory: return the configured vision provider.

    Reads from config/settings.yaml or .env:
      AI_PROVIDER=openai   → OpenAI API
      AI_PROVIDER=local    → Ollama (free, local)
      AI_PROVIDER=none     → disabled
    """
    settings = get_settings()
    provider_name = (provider_name or settings.ai.provider).lower()

    if provider_name == "openai":
        from ssis_compliance.ai.api import OpenAIProvider
        return OpenAIProvider()
    elif provider_name == "local":
        from ssis_compliance.ai.local import OllamaProvider
        return OllamaProvider()
    elif provider_name == "none":
        return NoOpProvider()
    else:
        logger.warning("Unknown AI provider '%s', using NoOp", provider_name)
        return NoOpProvider()
