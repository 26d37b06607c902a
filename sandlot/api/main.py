"""FastAPI application for the Sandlot simulator."""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sandlot.api.routers import playbook_router, simulation_router
from sandlot.playbook.plays import PlaybookTables

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Sandlot API",
        description="Youth football play and game simulator",
        version=API_VERSION,
    )

    # Local tools and notebooks hit this from anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(playbook_router, prefix="/api/v1")
    app.include_router(simulation_router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict:
        """Root endpoint - API info."""
        return {
            "name": "Sandlot API",
            "version": API_VERSION,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        tables = PlaybookTables.default()
        return {
            "status": "healthy",
            "offensive_plays": len(tables.offensive_plays),
            "defensive_plays": len(tables.defensive_plays),
        }

    return app


# Create app instance
app = create_app()


def run_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the API server."""
    logger.info(f"Starting Sandlot API on {host}:{port}")
    uvicorn.run(
        "sandlot.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run_api(reload=True)
