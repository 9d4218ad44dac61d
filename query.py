#!/usr/bin/env python3
"""Terminal client for the Recipe Finder service.

Calls a running service (python app.py) and renders the results in the terminal.

Usage:
    python query.py "chicken, rice"
    python query.py --debug "chicken, rice"          # Also print the raw JSON response
    python query.py --detail 1 "chicken, rice"       # Open the detail view of recipe #1
    python query.py --pdf 2 "chicken, rice"          # Save missing ingredients of #2 as PDF
    python query.py --youtube 1 "chicken, rice"      # Search cooking videos for #1
    python query.py --toggle-theme                   # Switch light/dark and exit

Features:
- Recipe cards and agentic suggestion panel rendered with rich
- Detail view with used/missing ingredients and instructions
- Missing-ingredient PDF export and YouTube search shortcut
- Light/dark theme persisted across runs (THEME_FILE)
"""

import asyncio
import sys
from typing import Optional

from rich.console import Console

from src.client.api import RecipeApiClient
from src.client.export import export_missing_ingredients_pdf, open_youtube_search
from src.client.theme import ThemeStore
from src.client.view import SearchView, ViewState
from src.utils.config import config
from src.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--detail N] [--pdf N] [--youtube N] [--toggle-theme] "<ingredients>"'


def run_query(
    ingredients: str,
    debug: bool = False,
    detail: Optional[int] = None,
    pdf: Optional[int] = None,
    youtube: Optional[int] = None,
) -> int:
    """Execute one search and the requested detail actions.

    Args:
        ingredients: Comma-separated ingredient list.
        debug: If True, print the full JSON response.
        detail: 1-based recipe number to open in the detail view.
        pdf: 1-based recipe number whose missing ingredients are exported.
        youtube: 1-based recipe number to search on YouTube.

    Returns:
        Process exit code.
    """
    theme = ThemeStore(config.THEME_FILE).current()
    view = SearchView(RecipeApiClient(config.API_BASE_URL), console=console, theme=theme)

    state = asyncio.run(view.search(ingredients))
    if state is not ViewState.RENDERED:
        return 1

    if debug:
        console.print("[bold cyan]Debug Mode: Full Response[/bold cyan]")
        console.print_json(
            data={
                "recipes": [recipe.model_dump(by_alias=True) for recipe in view.recipes],
                "agentic": view.agentic.model_dump(by_alias=True) if view.agentic else None,
            }
        )

    try:
        if detail is not None:
            view.show_detail(detail)
        if pdf is not None:
            path = export_missing_ingredients_pdf(view.recipe(pdf))
            console.print(f"[green]✓ Saved {path}[/green]")
        if youtube is not None:
            open_youtube_search(view.recipe(youtube).title)
    except IndexError as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1
    return 0


def _parse_number(flag: str, value: Optional[str]) -> int:
    if value is None or not value.isdigit():
        print(f"Error: {flag} requires a recipe number")
        sys.exit(1)
    return int(value)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(USAGE)
        print("")
        print("Examples:")
        print('  python query.py "chicken, rice"')
        print('  python query.py --detail 1 --pdf 1 "chicken, rice"')
        sys.exit(1)

    debug_mode = False
    detail_number = pdf_number = youtube_number = None
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        value = sys.argv[argv_start + 1] if argv_start + 1 < len(sys.argv) else None
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag == "--toggle-theme":
            new_theme = ThemeStore(config.THEME_FILE).toggle()
            console.print(f"Theme set to {new_theme}")
            sys.exit(0)
        elif flag == "--detail":
            detail_number = _parse_number(flag, value)
            argv_start += 2
        elif flag == "--pdf":
            pdf_number = _parse_number(flag, value)
            argv_start += 2
        elif flag == "--youtube":
            youtube_number = _parse_number(flag, value)
            argv_start += 2
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    if argv_start >= len(sys.argv):
        print("Error: No ingredients provided")
        print(USAGE)
        sys.exit(1)

    query = " ".join(sys.argv[argv_start:])

    try:
        sys.exit(run_query(query, debug=debug_mode, detail=detail_number, pdf=pdf_number, youtube=youtube_number))
    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        sys.exit(0)
