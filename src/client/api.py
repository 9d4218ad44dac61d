"""HTTP client for the Recipe Finder service (used by the terminal client)."""

import asyncio
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from src.models.models import RecipeSearchResponse
from src.utils.errors import ClientFetchFailure
from src.utils.logger import logger


class RecipeApiClient:
    """Calls GET /api/recipes and returns a validated RecipeSearchResponse."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def recipes_url(self, ingredients: str) -> str:
        """Endpoint URL with the ingredient text URL-encoded."""
        return f"{self.base_url}/api/recipes?ingredients={quote(ingredients, safe='')}"

    async def fetch_recipes(self, ingredients: str) -> RecipeSearchResponse:
        """Fetch recipes for ``ingredients``.

        Raises:
            ClientFetchFailure: On connection errors, timeouts, non-200 statuses (the service's
                ``error`` message is included when present) or unparseable bodies.
        """
        url = self.recipes_url(ingredients)
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(url) as response:
                    body = await response.json(content_type=None)
                    status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Fetch error: {e}")
            raise ClientFetchFailure(f"Could not reach recipe service: {e}") from e

        if status != 200:
            detail = body.get("error") if isinstance(body, dict) else None
            raise ClientFetchFailure(detail or f"Recipe service returned HTTP {status}")

        try:
            return RecipeSearchResponse.model_validate(body)
        except ValidationError as e:
            logger.error(f"Unexpected response shape: {e.error_count()} error(s)")
            raise ClientFetchFailure("Recipe service returned an unexpected response") from e
