"""Gemini text completion client."""

import logging

from google import genai

from app.exceptions import AIProviderError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Single-turn text completions against a fixed Gemini model."""

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash"):
        if not api_key:
            raise ValueError("api_key is required")
        self.client = genai.Client(api_key=api_key)
        self.model = model

    def generate_text(self, prompt: str) -> str:
        """
        Send one prompt and return the raw response text.

        Generation parameters are left at the provider defaults.

        Raises:
            AIProviderError: if the call fails or the model returns no text
        """
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except Exception as e:
            logger.error(f"Gemini call failed for model {self.model}: {e}")
            raise AIProviderError(f"AI call failed: {e}") from e

        text = response.text
        if text is None:
            raise AIProviderError("AI call returned no text")
        return text
