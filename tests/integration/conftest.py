"""Pytest configuration and fixtures for integration tests.

Loads .env and skips the whole package when the upstream API keys are missing.
These tests call the real Spoonacular and Gemini APIs and spend quota.
"""

import os
import pytest
from dotenv import load_dotenv
from pathlib import Path


def pytest_configure(config):
    """Load .env from the project root before test collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests require valid GEMINI_API_KEY and SPOONACULAR_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip integration tests if the API keys are not configured in .env."""
    missing = [name for name in ("GEMINI_API_KEY", "SPOONACULAR_API_KEY") if not os.getenv(name)]
    if missing:
        pytest.skip(
            f"Integration tests skipped. Missing API keys: {', '.join(missing)}. Please set these in your .env file.",
            allow_module_level=True,
        )
