"""Unit tests for app.py - HTTP endpoint, error mapping and frontend serving.

The aggregator's upstream clients are AsyncMock doubles, so no network is used.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app import create_app
from src.clients.spoonacular import SpoonacularClient
from src.services.aggregator import RecipeAggregator
from src.utils.config import Config
from src.utils.errors import PartialEnrichmentFailure, UpstreamError


@pytest.fixture
def frontend_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html>recipe finder</html>", encoding="utf-8")
    (tmp_path / "script.js").write_text("console.log('hi');", encoding="utf-8")
    return tmp_path


@pytest.fixture
def app_config(monkeypatch, frontend_dir):
    monkeypatch.setenv("FRONTEND_DIR", str(frontend_dir))
    monkeypatch.setenv("CORS_ORIGINS", "*")
    return Config()


@pytest.fixture
def spoonacular():
    client = MagicMock()
    client.find_by_ingredients = AsyncMock(return_value=[])
    client.get_information = AsyncMock(return_value={"instructions": "Cook."})
    return client


@pytest.fixture
def gemini():
    client = MagicMock()
    client.generate = AsyncMock(
        return_value=json.dumps(
            {
                "goal": "cheaper",
                "reasoning": "Use thighs.",
                "substitutions": [{"from": "chicken breast", "to": "chicken thighs", "benefit": "cheaper cut"}],
                "improved_instructions": ["Sear thighs", "Simmer with rice"],
            }
        )
    )
    return client


@pytest.fixture
def client(app_config, spoonacular, gemini):
    aggregator = RecipeAggregator(app_config, spoonacular=spoonacular, gemini=gemini)
    return TestClient(create_app(app_config, aggregator))


class TestRecipesEndpoint:
    """GET /api/recipes."""

    def test_missing_ingredients_returns_400(self, client, spoonacular):
        response = client.get("/api/recipes")

        assert response.status_code == 400
        assert response.json() == {"error": "Missing ingredients"}
        spoonacular.find_by_ingredients.assert_not_called()

    def test_blank_ingredients_returns_400(self, client, spoonacular):
        response = client.get("/api/recipes", params={"ingredients": "   "})

        assert response.status_code == 400
        spoonacular.find_by_ingredients.assert_not_called()

    def test_search_failure_returns_500(self, client, spoonacular):
        spoonacular.find_by_ingredients.side_effect = UpstreamError("HTTP 401", status=401)

        response = client.get("/api/recipes", params={"ingredients": "chicken"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load recipes"}
        assert "recipes" not in response.json()

    def test_unexpected_search_error_returns_json_500(self, client, spoonacular):
        spoonacular.find_by_ingredients.side_effect = RuntimeError("connection pool closed")

        response = client.get("/api/recipes", params={"ingredients": "chicken"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load recipes"}

    @patch("src.clients.spoonacular.aiohttp.ClientSession")
    def test_search_timeout_returns_json_500(self, session_cls, app_config, gemini):
        session = MagicMock()
        session.get.return_value.__aenter__.side_effect = asyncio.TimeoutError()
        session_cls.return_value.__aenter__.return_value = session
        aggregator = RecipeAggregator(app_config, spoonacular=SpoonacularClient(api_key="k"), gemini=gemini)

        response = TestClient(create_app(app_config, aggregator)).get(
            "/api/recipes", params={"ingredients": "chicken"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load recipes"}
        gemini.generate.assert_not_called()

    def test_empty_search(self, client):
        response = client.get("/api/recipes", params={"ingredients": "unobtainium"})

        assert response.status_code == 200
        assert response.json() == {"recipes": [], "agentic": None}

    def test_chicken_rice_scenario(self, client, spoonacular, gemini):
        spoonacular.find_by_ingredients.return_value = [
            {
                "id": 1,
                "title": "Chicken and Rice",
                "image": "https://img.spoonacular.com/recipes/1-312x231.jpg",
                "usedIngredientCount": 2,
                "missedIngredientCount": 1,
                "usedIngredients": [{"id": 5006, "name": "chicken"}, {"id": 20444, "name": "rice"}],
                "missedIngredients": [{"id": 11291, "name": "green onions"}],
                "likes": 10,
            },
            {
                "id": 2,
                "title": "Rice Pilaf",
                "usedIngredientCount": 1,
                "missedIngredientCount": 3,
                "usedIngredients": [{"id": 20444, "name": "rice"}],
                "missedIngredients": [{"name": "onion"}, {"name": "broth"}, {"name": "butter"}],
                "likes": 0,
            },
        ]
        spoonacular.get_information.side_effect = lambda recipe_id: {
            1: {"instructions": "Simmer chicken with rice."},
            2: {"instructions": ""},
        }[recipe_id]
        gemini.generate.side_effect = [PartialEnrichmentFailure("quota"), "not json at all"]

        response = client.get("/api/recipes", params={"ingredients": "chicken, rice"})

        assert response.status_code == 200
        body = response.json()
        assert len(body["recipes"]) == 2
        first, second = body["recipes"]
        assert first["id"] == 1
        assert first["instructions"] == "Simmer chicken with rice."
        assert first["usedIngredients"][0]["name"] == "chicken"
        assert first["score"] == pytest.approx(4.2)
        assert second["instructions"] == "Instructions unavailable."
        assert body["agentic"]["bestRecipeId"] == 1
        assert body["agentic"]["reasoning"] == "not json at all"
        assert body["agentic"]["substitutions"] == []

    def test_suggestion_payload_shape(self, client, spoonacular):
        spoonacular.find_by_ingredients.return_value = [{"id": 9, "title": "Chicken Soup", "likes": 50}]

        body = client.get("/api/recipes", params={"ingredients": "chicken"}).json()

        assert body["agentic"] == {
            "bestRecipeId": 9,
            "bestRecipeTitle": "Chicken Soup",
            "goal": "cheaper",
            "reasoning": "Use thighs.",
            "substitutions": [{"from": "chicken breast", "to": "chicken thighs", "benefit": "cheaper cut"}],
            "improved_instructions": ["Sear thighs", "Simmer with rice"],
        }

    def test_cors_header(self, client):
        response = client.get(
            "/api/recipes", params={"ingredients": "rice"}, headers={"Origin": "http://elsewhere.test"}
        )

        assert response.headers["access-control-allow-origin"] == "*"


class TestFrontendServing:
    """Static bundle and client-side routing fallback."""

    def test_root_serves_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "recipe finder" in response.text

    def test_existing_asset_is_served(self, client):
        response = client.get("/script.js")

        assert response.status_code == 200
        assert "console.log" in response.text

    def test_unmatched_route_falls_back_to_index(self, client):
        response = client.get("/recipes/123/details")

        assert response.status_code == 200
        assert "recipe finder" in response.text

    def test_path_traversal_falls_back_to_index(self, client):
        response = client.get("/..%2F..%2Fetc%2Fpasswd")

        assert response.status_code == 200
        assert "recipe finder" in response.text


class TestCreateApp:
    """App factory wiring."""

    def test_state_holds_injected_objects(self, app_config):
        aggregator = MagicMock()
        app = create_app(app_config, aggregator)

        assert app.state.config is app_config
        assert app.state.aggregator is aggregator

    def test_default_aggregator_built_from_config(self, app_config):
        app = create_app(app_config)

        assert isinstance(app.state.aggregator, RecipeAggregator)

    def test_docs_route_not_shadowed_by_fallback(self, client):
        response = client.get("/openapi.json")

        assert response.status_code == 200
        assert "/api/recipes" in response.json()["paths"]
