"""
OpenAI Provider (API)
======================
Uses OpenAI GPT-4o vision to read nutrition labels.
Requires OPENAI_API_KEY in .env.
"""

from __future__ import annotations

import base64
import os

import openai

from ssis_compliance.ai.base import VisionProvider
from ssis_compliance.config import get_settings
from ssis_compliance.errors import ExtractionError, ProviderConfigError
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)


class OpenAIProvider(VisionProvider):
    """API-based vision provider using OpenAI."""

    def __init__(self) -> None:
        settings = get_settings()
        self._model = settings.ai.openai_model
        self._temperature = settings.ai.temperature
        self._max_tokens = settings.ai.max_tokens
        self._client = None

    def _get_client(self):
        if self._client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ProviderConfigError(
                    "API key not found. Add OPENAI_API_KEY to .env or export OPENAI_API_KEY=sk-..."
                )
            self._client = openai.OpenAI(api_key=api_key)
            logger.info("OpenAI client initialized, model=%s", self._model)
        return self._client

    def extract(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        """Send the label image to GPT-4o with JSON output enforced."""
        client = self._get_client()
        b64 = base64.b64encode(image_data).decode("utf-8")

        try:
            response = client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": f"data:{mime_type};base64,{b64}",
                                    "detail": "high",
                                },
                            },
                        ],
                    },
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error("OpenAI vision call failed: %s", e)
            raise ExtractionError(str(e), status_code=getattr(e, "status_code", None)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExtractionError("Invalid response format from vision model")
        return content

    @property
    def name(self) -> str:
        return f"openai/{self._model}"
