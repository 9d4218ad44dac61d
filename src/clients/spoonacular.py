"""Spoonacular REST client (async).

This module provides the SpoonacularClient class used by the aggregator for the two
Spoonacular endpoints the service needs:
- GET /recipes/findByIngredients: ranked search by ingredient list
- GET /recipes/{id}/information: per-recipe details (instructions)

Every failure (network, HTTP status, non-JSON body) is raised as UpstreamError.
Whether that error is fatal is the caller's decision. No retries are attempted.
"""

import asyncio
from typing import Any, Optional

import aiohttp

from src.utils.errors import UpstreamError
from src.utils.logger import logger


class SpoonacularClient:
    """Thin async wrapper around the Spoonacular recipes API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.spoonacular.com",
        number: int = 5,
    ) -> None:
        """Initialize SpoonacularClient with configuration.

        Args:
            api_key: Spoonacular API key. May be empty: the API then rejects calls
                at request time and the failure surfaces as UpstreamError.
            base_url: API root without trailing slash.
            number: Number of candidates requested from findByIngredients (default: 5).
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.number = number

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        """GET ``path`` and decode the JSON body.

        Raises:
            UpstreamError: On connection errors, timeouts, non-2xx statuses or undecodable bodies.
        """
        url = f"{self.base_url}{path}"
        query = {**params, "apiKey": self.api_key}
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(url, params=query) as response:
                    if response.status >= 400:
                        raise UpstreamError(
                            f"Spoonacular {path} returned HTTP {response.status}",
                            status=response.status,
                        )
                    return await response.json(content_type=None)
        except UpstreamError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise UpstreamError(f"Spoonacular {path} request failed: {e}") from e

    async def find_by_ingredients(self, ingredients: str) -> list[dict[str, Any]]:
        """Ranked ingredient search.

        Args:
            ingredients: Sanitized comma-separated ingredient list.

        Returns:
            Raw candidate dicts; an empty list when the body is not a list.
        """
        logger.debug(f"Spoonacular findByIngredients: {ingredients} (number={self.number})")
        data = await self._get_json(
            "/recipes/findByIngredients",
            {"ingredients": ingredients, "number": self.number},
        )
        if not isinstance(data, list):
            logger.warning(f"Unexpected findByIngredients body type: {type(data).__name__}")
            return []
        return [item for item in data if isinstance(item, dict)]

    async def get_information(self, recipe_id: int) -> dict[str, Any]:
        """Fetch extended details for one recipe.

        Raises:
            UpstreamError: If the call fails or the body is not a JSON object.
        """
        data = await self._get_json(f"/recipes/{recipe_id}/information", {})
        if not isinstance(data, dict):
            raise UpstreamError(f"Unexpected information body for recipe {recipe_id}")
        return data

    @staticmethod
    def instructions_of(information: Optional[dict[str, Any]]) -> str:
        """Instructions text from an information payload ("" when absent)."""
        if not information:
            return ""
        return information.get("instructions") or ""
