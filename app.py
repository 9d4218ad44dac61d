"""Recipe Finder HTTP service.

Single entry point for the recipe aggregation service:
- GET /api/recipes?ingredients=...  search + enrich + rank + AI suggestion
- Serves the single-page frontend for "/" and every unmatched route

Configuration and the aggregator are injected through create_app() so tests can
swap in doubles for the upstream calls.

Run with: python app.py
"""

from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from src.models.models import ErrorResponse, RecipeSearchResponse
from src.services.aggregator import RecipeAggregator
from src.utils.config import Config, config as default_config
from src.utils.errors import InvalidRequest, UpstreamError
from src.utils.logger import logger


def create_app(config: Optional[Config] = None, aggregator: Optional[RecipeAggregator] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration to use. Defaults to the module-level environment config.
        aggregator: Recipe aggregator. Defaults to one built from ``config``.

    Returns:
        Configured FastAPI instance.
    """
    config = config or default_config
    aggregator = aggregator or RecipeAggregator(config)
    frontend_dir = Path(config.FRONTEND_DIR).resolve()

    app = FastAPI(title="Recipe Finder API", version="1.0.0")
    app.state.config = config
    app.state.aggregator = aggregator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidRequest)
    async def invalid_request_handler(request: Request, exc: InvalidRequest) -> JSONResponse:
        return JSONResponse(status_code=400, content=ErrorResponse(error="Missing ingredients").model_dump())

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error(f"❌ Error: {exc}")
        return JSONResponse(status_code=500, content=ErrorResponse(error="Failed to load recipes").model_dump())

    @app.get(
        "/api/recipes",
        response_model=RecipeSearchResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def get_recipes(ingredients: Optional[str] = Query(None)) -> RecipeSearchResponse:
        return await aggregator.find_recipes(ingredients)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str) -> FileResponse:
        # Real asset if it exists inside the bundle, index.html otherwise (client-side routing)
        if full_path:
            candidate = (frontend_dir / full_path).resolve()
            if candidate.is_file() and frontend_dir in candidate.parents:
                return FileResponse(str(candidate))
        return FileResponse(str(frontend_dir / "index.html"))

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Starting Recipe Finder on port {default_config.PORT}")
    logger.info(f"Access Web UI at: http://localhost:{default_config.PORT}")
    logger.info(f"API docs available at: http://localhost:{default_config.PORT}/docs")
    uvicorn.run(app, host=default_config.HOST, port=default_config.PORT)
