"""Recipe aggregation: search, enrich, rank, suggest.

RecipeAggregator.find_recipes() is the single operation behind GET /api/recipes:

1. Validate and sanitize the ingredient text (InvalidRequest if blank)
2. Ranked search on Spoonacular (UpstreamError if it fails, empty result if no hits)
3. Fetch details for every candidate concurrently; each candidate degrades on its own
4. Generate instructions with Gemini when a recipe has none
5. Score and stable-sort the candidates
6. Ask Gemini for one improvement (healthier/cheaper/faster) for the best candidate
7. Return recipes + suggestion

Only step 2 can fail the request. Every other failure becomes a placeholder and a log line.
"""

import asyncio
import json
import re
from typing import Any, Optional

from pydantic import ValidationError

from src.clients.gemini import GeminiClient
from src.clients.spoonacular import SpoonacularClient
from src.models.models import (
    INSTRUCTIONS_PLACEHOLDER,
    RecipeCandidate,
    RecipeSearchResponse,
    Suggestion,
    SuggestionPayload,
)
from src.prompts.prompts import build_instructions_prompt, build_suggestion_prompt
from src.utils.config import Config
from src.utils.errors import InvalidRequest, UpstreamError, safe_execute_async, safe_execute_sync
from src.utils.logger import logger

SUGGESTION_UNAVAILABLE = "AI suggestion unavailable."

_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9,\s]")


# ============================================================================
# Pure helpers
# ============================================================================


def sanitize_ingredients(text: str) -> str:
    """Strip every character except ASCII letters, digits, commas and whitespace.

    Idempotent: sanitizing sanitized text returns it unchanged.
    """
    return _DISALLOWED_CHARS.sub("", text)


def score_recipe(used: int, missed: int, likes: int) -> float:
    """Ranking heuristic: reward used ingredients, penalize missing ones, cap popularity at 10."""
    return used * 3 - missed * 2 + min(likes / 50, 10)


def rank_recipes(recipes: list[RecipeCandidate]) -> list[RecipeCandidate]:
    """Attach scores and sort descending. Ties keep their incoming order (sorted() is stable)."""
    scored = [
        recipe.model_copy(
            update={
                "score": score_recipe(
                    recipe.used_ingredient_count,
                    recipe.missed_ingredient_count,
                    recipe.likes,
                )
            }
        )
        for recipe in recipes
    ]
    return sorted(scored, key=lambda recipe: recipe.score, reverse=True)


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` substring of ``text``, or None.

    Braces inside JSON string literals are ignored.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]
        # Unbalanced from this brace; try the next opening brace
        start = text.find("{", start + 1)
    return None


def parse_suggestion(text: str, best: RecipeCandidate) -> Suggestion:
    """Turn the AI reply into a Suggestion for ``best``.

    Parsing strategies, in order:
    1. json.loads() on the whole reply
    2. json.loads() on the first balanced {...} substring
    The decoded object must validate against SuggestionPayload. If any step fails,
    the reply is kept verbatim as ``reasoning`` with no goal, substitutions or steps.
    """

    def _parse_json_direct():
        return json.loads(text)

    def _parse_json_embedded():
        candidate = extract_json_object(text)
        return json.loads(candidate) if candidate else None

    parsed = safe_execute_sync(_parse_json_direct, "Direct suggestion JSON parse", log_level="debug")
    if not isinstance(parsed, dict):
        parsed = safe_execute_sync(_parse_json_embedded, "Embedded suggestion JSON parse", log_level="debug")

    payload: Optional[SuggestionPayload] = None
    if isinstance(parsed, dict):
        try:
            payload = SuggestionPayload.model_validate(parsed)
        except ValidationError as e:
            logger.warning(f"AI suggestion failed schema validation: {e.error_count()} error(s)")

    if payload is None:
        return Suggestion(
            best_recipe_id=best.id,
            best_recipe_title=best.title,
            reasoning=text,
        )

    return Suggestion(
        best_recipe_id=best.id,
        best_recipe_title=best.title,
        goal=payload.goal,
        reasoning=payload.reasoning,
        substitutions=payload.substitutions,
        improved_instructions=payload.improved_instructions,
    )


# ============================================================================
# Orchestration
# ============================================================================


class RecipeAggregator:
    """Orchestrates Spoonacular and Gemini calls for one ingredient query.

    Collaborators are injected so tests can substitute doubles; when omitted
    they are built from ``config``.
    """

    def __init__(
        self,
        config: Config,
        spoonacular: Optional[SpoonacularClient] = None,
        gemini: Optional[GeminiClient] = None,
    ) -> None:
        self.config = config
        self.spoonacular = spoonacular or SpoonacularClient(
            api_key=config.SPOONACULAR_API_KEY,
            base_url=config.SPOONACULAR_BASE_URL,
            number=config.SEARCH_RESULT_COUNT,
        )
        self.gemini = gemini or GeminiClient(api_key=config.GEMINI_API_KEY, model=config.GEMINI_MODEL)

    async def find_recipes(self, ingredients: Optional[str]) -> RecipeSearchResponse:
        """Search, enrich, rank and suggest for a comma-separated ingredient list.

        Args:
            ingredients: Raw user text (may be None).

        Returns:
            RecipeSearchResponse; ``{recipes: [], agentic: None}`` when nothing matched.

        Raises:
            InvalidRequest: If the text is absent or blank (before or after sanitizing).
            UpstreamError: If the ranked search call fails for any reason.
        """
        if ingredients is None or not ingredients.strip():
            raise InvalidRequest("Missing ingredients")
        query = sanitize_ingredients(ingredients)
        if not query.strip():
            raise InvalidRequest("Missing ingredients")

        logger.info(f"🔍 Fetching recipes for: {query}", extra={"query": query})

        try:
            raw_candidates = await self.spoonacular.find_by_ingredients(query)
        except UpstreamError as e:
            logger.error(f"Recipe search failed: {e}", extra={"query": query})
            raise
        except Exception as e:
            logger.error(f"Recipe search failed: {e!r}", extra={"query": query})
            raise UpstreamError(f"Recipe search failed: {e!r}") from e

        if not raw_candidates:
            logger.info("No recipes found", extra={"query": query})
            return RecipeSearchResponse(recipes=[], agentic=None)

        candidates = self._parse_candidates(raw_candidates)
        if not candidates:
            return RecipeSearchResponse(recipes=[], agentic=None)

        # Each coroutine returns an enriched candidate or a placeholder one; none raises
        enriched = await asyncio.gather(*(self._enrich_candidate(candidate, query) for candidate in candidates))

        ranked = rank_recipes(list(enriched))
        best = ranked[0]
        agentic = await self._suggest(best, query)

        logger.info(f"Returning {len(ranked)} recipes", extra={"query": query})
        return RecipeSearchResponse(recipes=ranked, agentic=agentic)

    def _parse_candidates(self, raw_candidates: list[dict[str, Any]]) -> list[RecipeCandidate]:
        """Validate raw search hits, dropping (and logging) malformed entries."""
        candidates = []
        for raw in raw_candidates:
            try:
                candidates.append(RecipeCandidate.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed search result {raw.get('id')}: {e.error_count()} error(s)")
        return candidates

    async def _enrich_candidate(self, candidate: RecipeCandidate, query: str) -> RecipeCandidate:
        """Attach instructions to one candidate; never raises."""
        try:
            information = await self.spoonacular.get_information(candidate.id)
        except Exception as e:
            logger.warning(
                f"Failed to fetch details for recipe {candidate.id}: {e}",
                extra={"recipe_id": candidate.id},
            )
            return candidate.model_copy(update={"instructions": INSTRUCTIONS_PLACEHOLDER})

        instructions = SpoonacularClient.instructions_of(information)
        if not instructions.strip():
            instructions = await safe_execute_async(
                self.gemini.generate(build_instructions_prompt(candidate.title, query)),
                f"Instructions generation for recipe {candidate.id}",
                default_return=INSTRUCTIONS_PLACEHOLDER,
                recipe_id=candidate.id,
            )

        return candidate.model_copy(update={"instructions": instructions or INSTRUCTIONS_PLACEHOLDER})

    async def _suggest(self, best: RecipeCandidate, query: str) -> Suggestion:
        """Ask Gemini for one improvement of ``best``; degrade to a reasoning-only suggestion."""
        text = await safe_execute_async(
            self.gemini.generate(build_suggestion_prompt(best, query)),
            "AI suggestion",
            default_return=None,
            recipe_id=best.id,
        )
        if text is None:
            return Suggestion(
                best_recipe_id=best.id,
                best_recipe_title=best.title,
                reasoning=SUGGESTION_UNAVAILABLE,
            )
        return parse_suggestion(text, best)
