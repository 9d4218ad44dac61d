"""Prompt builders for the generative calls made by Recipe Finder.

Two prompts are used:
- Instructions fallback: when Spoonacular has no instructions for a recipe
- Improvement suggestion: asks the model to pick ONE goal for the best recipe and
  answer with a JSON object matching SuggestionPayload
"""

from src.models.models import GOALS, RecipeCandidate


SUGGESTION_EXAMPLE = """{
  "goal": "healthier",
  "reasoning": "why",
  "substitutions": [
    {"from": "cream", "to": "yogurt", "benefit": "less fat"}
  ],
  "improved_instructions": ["Step 1", "Step 2"]
}"""


def build_instructions_prompt(title: str, ingredients: str) -> str:
    """Prompt asking for step-by-step instructions for a recipe without any.

    Args:
        title: Recipe title as returned by the search.
        ingredients: The sanitized ingredient list the user searched with.
    """
    return (
        f'Generate step-by-step cooking instructions for a recipe called "{title}" '
        f"using the following ingredients: {ingredients}."
    )


def build_suggestion_prompt(recipe: RecipeCandidate, ingredients: str) -> str:
    """Prompt asking the model to improve the best recipe along one goal.

    The reply is expected to contain a single JSON object; anything else is
    kept verbatim as the suggestion reasoning.

    Args:
        recipe: Best-ranked candidate (already enriched with instructions).
        ingredients: The sanitized ingredient list the user searched with.

    Returns:
        str: Complete prompt text.
    """
    goals = ", ".join(GOALS[:-1]) + f", or {GOALS[-1]}"
    return f"""
You are an autonomous cooking assistant.
Pick ONE goal: {goals}.
Return ONLY a JSON object with exactly these fields:
{SUGGESTION_EXAMPLE}
Recipe: {recipe.title}
Ingredients: {ingredients}
Current instructions: {recipe.instructions}
"""
