"""AI subpackage — vision providers (OpenAI, Ollama) and nutrition extraction."""

from ssis_compliance.ai.base import VisionProvider, get_ai_provider
from ssis_compliance.ai.extractor import ExtractionResult, extract_nutrition

__all__ = ["VisionProvider", "get_ai_provider", "ExtractionResult", "extract_nutrition"]
