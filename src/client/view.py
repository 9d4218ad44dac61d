"""Terminal presentation of recipe search results.

SearchView drives explicit UI states around one fetch:

    IDLE --search--> LOADING --success--> RENDERED
                             --failure--> ERROR

Blank input never leaves the current state (the user only gets an alert).
The loading flag is cleared whatever the outcome. Rendering uses rich.
"""

import re
from enum import Enum
from typing import Callable, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.client.api import RecipeApiClient
from src.models.models import RecipeCandidate, Suggestion
from src.utils.errors import ClientFetchFailure
from src.utils.logger import logger

EMPTY_INPUT_ALERT = "Please enter some ingredients!"
FETCH_FAILED_ALERT = "Failed to load recipes. Check backend or API keys."

# Accent colors per theme
PALETTES = {
    "light": {"accent": "blue", "used": "green", "missed": "red", "muted": "grey42"},
    "dark": {"accent": "bright_cyan", "used": "bright_green", "missed": "bright_red", "muted": "grey70"},
}

_TAG = re.compile(r"<[^>]+>")


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    ERROR = "error"


def plain_instructions(text: str) -> str:
    """Spoonacular instructions often carry HTML; keep the text only."""
    return re.sub(r"[ \t]+", " ", _TAG.sub(" ", text)).strip()


def goal_label(suggestion: Suggestion) -> str:
    if suggestion.goal:
        return f"🎯 Goal: {suggestion.goal.capitalize()}"
    return "🎯 Goal: Auto-detected"


class SearchView:
    """One search screen: input -> fetch -> cards + suggestion, plus detail view."""

    def __init__(
        self,
        api: RecipeApiClient,
        console: Optional[Console] = None,
        theme: str = "light",
        alert: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.api = api
        self.console = console or Console()
        self.palette = PALETTES.get(theme, PALETTES["light"])
        self.alert = alert or self._default_alert
        self.state = ViewState.IDLE
        self.loading = False
        self.recipes: list[RecipeCandidate] = []
        self.agentic: Optional[Suggestion] = None
        self.error: Optional[str] = None

    def _default_alert(self, message: str) -> None:
        self.console.print(f"[bold red]{message}[/bold red]")

    def _transition(self, state: ViewState) -> None:
        logger.debug(f"View state: {self.state.value} -> {state.value}")
        self.state = state

    async def search(self, text: Optional[str]) -> ViewState:
        """Run one search and render its outcome.

        Returns:
            The resulting state.
        """
        ingredients = (text or "").strip()
        if not ingredients:
            self.alert(EMPTY_INPUT_ALERT)
            return self.state

        self.recipes = []
        self.agentic = None
        self.error = None
        self._transition(ViewState.LOADING)
        self.loading = True
        try:
            with self.console.status("Finding recipes..."):
                response = await self.api.fetch_recipes(ingredients)
        except ClientFetchFailure as e:
            logger.error(f"Fetch error: {e}")
            self.error = str(e)
            self._transition(ViewState.ERROR)
            self.alert(FETCH_FAILED_ALERT)
        else:
            self.recipes = list(response.recipes)
            self.agentic = response.agentic
            self._transition(ViewState.RENDERED)
            self.render()
        finally:
            self.loading = False
        return self.state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> None:
        self.console.print(self.cards())
        panel = self.suggestion_panel()
        if panel is not None:
            self.console.print(panel)

    def cards(self):
        """Recipe list as a table, or a plain notice when empty."""
        if not self.recipes:
            return Text("No recipes found.", style=self.palette["muted"])

        table = Table(title="Recipes", header_style=f"bold {self.palette['accent']}")
        table.add_column("#", justify="right")
        table.add_column("Title")
        table.add_column("Used", justify="right", style=self.palette["used"])
        table.add_column("Missing", justify="right", style=self.palette["missed"])
        table.add_column("Score", justify="right")
        table.add_column("Image", style=self.palette["muted"], overflow="fold")
        for index, recipe in enumerate(self.recipes, start=1):
            table.add_row(
                str(index),
                recipe.title,
                str(len(recipe.used_ingredients)),
                str(len(recipe.missed_ingredients)),
                f"{recipe.score:.1f}" if recipe.score is not None else "-",
                recipe.image or "",
            )
        return table

    def suggestion_panel(self) -> Optional[Panel]:
        """Agentic suggestion panel; None (hidden) when there is no suggestion."""
        suggestion = self.agentic
        if suggestion is None:
            return None

        parts = [
            Text(goal_label(suggestion), style=f"bold {self.palette['accent']}"),
            Text(suggestion.reasoning or "No reasoning provided by AI."),
        ]
        if suggestion.substitutions:
            parts.append(Text("Substitutions", style="bold"))
            for sub in suggestion.substitutions:
                parts.append(Text(f"  • {sub.from_} → {sub.to} ({sub.benefit})"))
        if suggestion.improved_instructions:
            parts.append(Text("Improved Steps", style="bold"))
            for number, step in enumerate(suggestion.improved_instructions, start=1):
                parts.append(Text(f"  {number}. {step}"))

        return Panel(
            Group(*parts),
            title=f"🤖 Agentic Suggestion: {suggestion.best_recipe_title}",
            border_style=self.palette["accent"],
        )

    def recipe(self, number: int) -> RecipeCandidate:
        """Recipe by its 1-based card number.

        Raises:
            IndexError: If no card has that number.
        """
        if not 1 <= number <= len(self.recipes):
            raise IndexError(f"No recipe #{number} (have {len(self.recipes)})")
        return self.recipes[number - 1]

    def detail_panel(self, recipe: RecipeCandidate) -> Panel:
        """Full detail view: ingredient lists and instructions."""
        parts = []
        if recipe.image:
            parts.append(Text(recipe.image, style=self.palette["muted"]))
        parts.append(Text("Used Ingredients", style=f"bold {self.palette['used']}"))
        parts.extend(Text(f"  ✅ {ingredient.name}") for ingredient in recipe.used_ingredients)
        parts.append(Text("Missing Ingredients", style=f"bold {self.palette['missed']}"))
        parts.extend(Text(f"  ❌ {ingredient.name}") for ingredient in recipe.missed_ingredients)
        parts.append(Text("Cooking Instructions", style="bold"))
        parts.append(Text(plain_instructions(recipe.instructions) or "No instructions available."))
        return Panel(Group(*parts), title=recipe.title, border_style=self.palette["accent"])

    def show_detail(self, number: int) -> RecipeCandidate:
        recipe = self.recipe(number)
        self.console.print(self.detail_panel(recipe))
        return recipe
