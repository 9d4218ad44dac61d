"""Data models and schemas for Recipe Finder.

Defines Pydantic models for upstream Spoonacular payloads, the aggregated
search response, and the AI suggestion schema.
All models use Pydantic v2; JSON field names follow Spoonacular's camelCase
via aliases so the browser frontend reads the same keys the upstream API uses.
"""

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Literal text used whenever instructions cannot be obtained
INSTRUCTIONS_PLACEHOLDER = "Instructions unavailable."

Goal = Literal["healthier", "cheaper", "faster"]
GOALS: tuple[str, ...] = ("healthier", "cheaper", "faster")


class IngredientRef(BaseModel):
    """One ingredient entry as returned by findByIngredients.

    Only the fields the service and clients read are declared; anything else
    Spoonacular sends (aisle, unitLong, meta, ...) is passed through.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    name: str
    amount: Optional[float] = None
    unit: Optional[str] = None
    original: Optional[str] = None
    image: Optional[str] = None


class RecipeCandidate(BaseModel):
    """A ranked-search result, enriched with instructions and a score.

    Frozen: enrichment and ranking produce copies via ``model_copy(update=...)``.
    Counts default to the length of the matching ingredient list when the
    upstream payload omits them.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: int
    title: str
    image: Optional[str] = None
    used_ingredients: Annotated[List[IngredientRef], Field(default_factory=list, alias="usedIngredients")]
    missed_ingredients: Annotated[List[IngredientRef], Field(default_factory=list, alias="missedIngredients")]
    used_ingredient_count: Annotated[int, Field(ge=0, alias="usedIngredientCount")] = 0
    missed_ingredient_count: Annotated[int, Field(ge=0, alias="missedIngredientCount")] = 0
    likes: Annotated[int, Field(ge=0)] = 0
    instructions: str = ""
    score: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def fill_counts_from_lists(cls, data):
        """Derive missing counts from the ingredient lists and coerce null lists/likes."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for list_key, list_name, count_key, count_name in (
            ("usedIngredients", "used_ingredients", "usedIngredientCount", "used_ingredient_count"),
            ("missedIngredients", "missed_ingredients", "missedIngredientCount", "missed_ingredient_count"),
        ):
            items = data.get(list_key, data.get(list_name))
            if items is None:
                data.pop(list_key, None)
                data.pop(list_name, None)
            if data.get(count_key, data.get(count_name)) is None:
                data.pop(count_name, None)
                data[count_key] = len(items or [])
        if data.get("likes") is None:
            data["likes"] = 0
        if data.get("instructions") is None:
            data["instructions"] = ""
        return data


class Substitution(BaseModel):
    """One ingredient swap proposed by the AI."""

    model_config = ConfigDict(populate_by_name=True)

    from_: Annotated[str, Field(alias="from", min_length=1)]
    to: Annotated[str, Field(min_length=1)]
    benefit: str = ""

    @field_validator("benefit", mode="before")
    @classmethod
    def none_benefit_to_empty(cls, v):
        return "" if v is None else v


class SuggestionPayload(BaseModel):
    """Strict schema the AI reply must satisfy to be accepted as a suggestion."""

    goal: Goal
    reasoning: Annotated[str, Field(min_length=1)]
    substitutions: List[Substitution] = Field(default_factory=list)
    improved_instructions: List[str] = Field(default_factory=list)

    @field_validator("goal", mode="before")
    @classmethod
    def normalize_goal(cls, v):
        """Accept goals regardless of case and surrounding whitespace."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class Suggestion(BaseModel):
    """The "agentic" improvement proposal for the best-ranked recipe."""

    model_config = ConfigDict(populate_by_name=True)

    best_recipe_id: int = Field(alias="bestRecipeId")
    best_recipe_title: str = Field(alias="bestRecipeTitle")
    goal: Optional[Goal] = None
    reasoning: Optional[str] = None
    substitutions: List[Substitution] = Field(default_factory=list)
    improved_instructions: List[str] = Field(default_factory=list)


class RecipeSearchResponse(BaseModel):
    """Payload returned by GET /api/recipes."""

    recipes: List[RecipeCandidate] = Field(default_factory=list)
    agentic: Optional[Suggestion] = None

    @model_validator(mode="after")
    def suggestion_references_returned_recipe(self) -> "RecipeSearchResponse":
        """A suggestion must point at one of the recipes in the same response."""
        if self.agentic is not None:
            ids = {recipe.id for recipe in self.recipes}
            if self.agentic.best_recipe_id not in ids:
                raise ValueError(
                    f"Suggestion references recipe {self.agentic.best_recipe_id} which is not in the response"
                )
        return self


class ErrorResponse(BaseModel):
    """Error body for 400/500 responses."""

    error: str
