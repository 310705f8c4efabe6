"""
Main Application Entry Point.

Configures and initializes the FastAPI application, including logging,
routers, and health checks.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.settings import BackendSettings, load_settings
from apps.ingredients.api import build_ingredients_router


def create_app(settings: Optional[BackendSettings] = None) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or load_settings()
    # Configure logging: info level for app, warning for noisy HTTP internals
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s"
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    fastapi_app = FastAPI(title="Skincare Ingredient Analyzer", version="0.1.0")

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": "backend",
            "llm_model": settings.llm_model_name,
            "llm_configured": bool(settings.llm_api_key),
            "internal_auth_enabled": bool(settings.internal_token),
            "jwt_auth_enabled": bool(settings.jwt_secret or settings.jwt_jwks_url),
        }

    fastapi_app.include_router(build_ingredients_router(settings))
    return fastapi_app


def main() -> None:
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
