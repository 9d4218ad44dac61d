"""Configuration management for Recipe Finder.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

API keys are read but never required here: a missing key only surfaces
when the upstream call that needs it is made.
"""

import os
from pathlib import Path

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()

# Project root (directory holding app.py and frontend/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Upstream credentials
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.SPOONACULAR_API_KEY: str = os.getenv("SPOONACULAR_API_KEY", "")
        # Generative model used for instructions fallback and suggestions
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Spoonacular REST root (overridable for local stubs)
        self.SPOONACULAR_BASE_URL: str = os.getenv("SPOONACULAR_BASE_URL", "https://api.spoonacular.com").rstrip("/")
        # Number of candidates requested from findByIngredients. Default: 5
        self.SEARCH_RESULT_COUNT: int = int(os.getenv("SEARCH_RESULT_COUNT", "5"))
        # Server
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "5000"))
        # Single-page frontend bundle served for "/" and unmatched routes
        self.FRONTEND_DIR: str = os.getenv("FRONTEND_DIR", str(PROJECT_ROOT / "frontend"))
        # Comma-separated list of allowed CORS origins ("*" allows all)
        self.CORS_ORIGINS: list[str] = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]
        # Terminal client settings
        self.API_BASE_URL: str = os.getenv("API_BASE_URL", f"http://localhost:{self.PORT}").rstrip("/")
        self.THEME_FILE: str = os.getenv("THEME_FILE", str(Path.home() / ".recipe_finder" / "theme.json"))

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a numeric setting is out of range.
        """
        if not (1 <= self.PORT <= 65535):
            raise ValueError(f"PORT must be between 1 and 65535, got: {self.PORT}")
        if not (1 <= self.SEARCH_RESULT_COUNT <= 100):
            raise ValueError(
                f"SEARCH_RESULT_COUNT must be between 1 and 100, got: {self.SEARCH_RESULT_COUNT}"
            )
        if not self.CORS_ORIGINS:
            raise ValueError("CORS_ORIGINS must list at least one origin")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
