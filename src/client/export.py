"""Detail-view actions: missing-ingredient PDF export and YouTube search shortcut."""

import re
import webbrowser
from pathlib import Path
from typing import Union
from urllib.parse import quote

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from src.models.models import RecipeCandidate
from src.utils.logger import logger

YOUTUBE_SEARCH_URL = "https://www.youtube.com/results?search_query={query}+recipe"


def missing_ingredients_filename(title: str) -> str:
    """``Chicken Fried Rice`` -> ``Chicken_Fried_Rice_MissingIngredients.pdf``."""
    return re.sub(r"\s+", "_", title) + "_MissingIngredients.pdf"


def missing_ingredient_lines(recipe: RecipeCandidate) -> list[str]:
    """Bullet lines for the PDF body; ``["None"]`` when nothing is missing."""
    lines = [f"• {ingredient.name}" for ingredient in recipe.missed_ingredients]
    return lines or ["None"]


def export_missing_ingredients_pdf(recipe: RecipeCandidate, directory: Union[str, Path] = ".") -> Path:
    """Write the missing-ingredient list of ``recipe`` to a one-page PDF.

    Args:
        recipe: Recipe whose ``missed_ingredients`` are exported.
        directory: Target directory (created if needed).

    Returns:
        Path of the written file.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / missing_ingredients_filename(recipe.title)

    pdf = canvas.Canvas(str(path), pagesize=letter)
    _, height = letter
    pdf.setTitle(f"Missing Ingredients for {recipe.title}")
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawString(40, height - 50, f"Missing Ingredients for {recipe.title}")

    pdf.setFont("Helvetica", 12)
    y = height - 80
    for line in missing_ingredient_lines(recipe):
        if y < 50:
            pdf.showPage()
            pdf.setFont("Helvetica", 12)
            y = height - 50
        pdf.drawString(40, y, line)
        y -= 16
    pdf.save()

    logger.info(f"Saved missing ingredients PDF: {path}")
    return path


def youtube_search_url(title: str) -> str:
    """YouTube results page for cooking videos of ``title``."""
    return YOUTUBE_SEARCH_URL.format(query=quote(title, safe=""))


def open_youtube_search(title: str) -> bool:
    """Open the YouTube search for ``title`` in a new browser tab."""
    url = youtube_search_url(title)
    logger.info(f"Opening {url}")
    return webbrowser.open_new_tab(url)
