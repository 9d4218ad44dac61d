"""Gemini text generation client.

Wraps the synchronous google-genai SDK for use from asyncio code
(asyncio.to_thread). The SDK client is created per call, so a missing
GEMINI_API_KEY only fails when generation is actually requested.

All failures, including an empty reply, are raised as PartialEnrichmentFailure:
generated text is always optional in this service.
"""

import asyncio

from google import genai

from src.utils.errors import PartialEnrichmentFailure
from src.utils.logger import logger


class GeminiClient:
    """Prompt in, free text out."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash") -> None:
        self.api_key = api_key
        self.model = model

    async def generate(self, prompt: str) -> str:
        """Generate text for ``prompt``.

        Returns:
            Non-empty response text.

        Raises:
            PartialEnrichmentFailure: If the SDK call fails or returns no text.
        """
        try:
            client = genai.Client(api_key=self.api_key)
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.model,
                contents=prompt,
            )
        except Exception as e:
            raise PartialEnrichmentFailure(f"Gemini call failed: {e}") from e

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise PartialEnrichmentFailure("Gemini returned an empty response")

        logger.debug(f"Gemini ({self.model}) returned {len(text)} chars")
        return text
