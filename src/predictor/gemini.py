"""
Gemini backend: the one I/O boundary of the prediction path.
"""

import logging
from typing import Dict, Protocol

import google.generativeai as genai

logger = logging.getLogger(__name__)


class PredictorBackend(Protocol):
    """Anything that turns a prompt + response schema into raw response text."""

    def generate(self, prompt: str, schema: Dict, temperature: float) -> str:
        ...


class GeminiBackend:
    """Structured-generation calls against the Gemini API."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash"):
        self.model_name = model_name
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        logger.info("Gemini backend initialized with model %s", model_name)

    def generate(self, prompt: str, schema: Dict, temperature: float) -> str:
        """
        Request a JSON response constrained to `schema`.

        Any SDK, network or service error propagates to the caller unchanged.
        """
        generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=schema,
            temperature=temperature,
        )
        response = self.model.generate_content(
            prompt,
            generation_config=generation_config,
        )
        return response.text
