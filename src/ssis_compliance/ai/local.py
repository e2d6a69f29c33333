"""
Ollama Provider (Free, Local)
================================
Uses Ollama for local vision inference. No API key required.
Install Ollama: https://ollama.ai
Then: ollama pull llama3.2-vision
"""

from __future__ import annotations

import time

import ollama

from ssis_compliance.ai.base import VisionProvider
from ssis_compliance.config import get_settings
from ssis_compliance.errors import ExtractionError
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)

# Small vision models follow short instructions better
_SYSTEM_PROMPT = (
    "You read nutrition facts labels. "
    "Always respond with valid JSON only. No markdown, no extra text."
)


class OllamaProvider(VisionProvider):
    """Local vision provider using Ollama with JSON output mode."""

    def __init__(self) -> None:
        settings = get_settings()
        self._model = settings.ai.local_model
        self._temperature = settings.ai.temperature
        self._max_tokens = settings.ai.max_tokens
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = ollama.Client()
            logger.info("Ollama client ready, vision=%s", self._model)
        return self._client

    def extract(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        """Send the label image to the local vision model.

        Ollama's format="json" guarantees a JSON reply; the mime type is
        not needed because Ollama sniffs the image bytes itself.
        """
        client = self._get_client()
        try:
            t0 = time.time()
            response = client.chat(
                model=self._model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": prompt, "images": [image_data]},
                ],
                format="json",
                options={
                    "temperature": self._temperature,
                    "num_predict": self._max_tokens,
                },
            )
            elapsed = time.time() - t0
        except ollama.ResponseError as e:
            logger.error("Ollama vision call failed: %s", e)
            raise ExtractionError(str(e.error), status_code=e.status_code) from e
        except ConnectionError as e:
            logger.error("Cannot connect to Ollama: %s", e)
            raise ExtractionError(f"Cannot connect to Ollama: {e}") from e
        except Exception as e:
            # httpx timeouts and transport errors surface from the client unwrapped
            logger.error("Ollama vision call failed: %s", e)
            raise ExtractionError(f"Ollama vision call failed: {e}") from e

        content = response["message"]["content"]
        logger.debug("Ollama vision (%s) took %.1fs, %d chars", self._model, elapsed, len(content or ""))
        if not content:
            raise ExtractionError("Invalid response format from vision model")
        return content

    @property
    def name(self) -> str:
        return f"ollama/{self._model}"
