"""
Gridiron Draft API - Main Application

FastAPI application for league drafts and fantasy scoring.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gridiron_draft import __version__
from gridiron_draft.api.dependencies import ClientManager
from gridiron_draft.api.routes import draft, leagues, players, scoring, standings
from gridiron_draft.clients.espn import ESPNAPIError
from gridiron_draft.config import get_settings
from gridiron_draft.database import init_db
from gridiron_draft.exceptions import GridironError, PickRejected
from gridiron_draft.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    settings = get_settings()
    logger.info("api_starting", version=__version__, debug=settings.debug)
    init_db()

    yield

    # Shutdown
    logger.info("api_stopping")
    await ClientManager.close_client()


async def gridiron_error_handler(request: Request, exc: GridironError) -> JSONResponse:
    content = {"detail": exc.message}
    if isinstance(exc, PickRejected):
        content["reason"] = exc.reason.value
    logger.info(
        "request_rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error=type(exc).__name__,
        detail=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=content)


async def espn_error_handler(request: Request, exc: ESPNAPIError) -> JSONResponse:
    logger.warning(
        "espn_upstream_error",
        path=request.url.path,
        upstream_status=exc.status_code,
        transient=exc.transient,
        detail=exc.message,
    )
    return JSONResponse(status_code=502, content={"detail": f"ESPN request failed: {exc.message}"})


def create_app() -> FastAPI:
    """Application factory to create the FastAPI app."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GridironError, gridiron_error_handler)
    app.add_exception_handler(ESPNAPIError, espn_error_handler)

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.api_title,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "leagues": "/api/leagues",
                "draft": "/api/draft",
                "scoring": "/api/scoring",
                "standings": "/api/standings",
                "players": "/api/players",
            },
        }

    # Register API routes
    app.include_router(leagues.router, prefix="/api/leagues", tags=["Leagues"])
    app.include_router(draft.router, prefix="/api/draft", tags=["Draft"])
    app.include_router(scoring.router, prefix="/api/scoring", tags=["Scoring"])
    app.include_router(standings.router, prefix="/api/standings", tags=["Standings"])
    app.include_router(players.router, prefix="/api/players", tags=["Players"])

    return app


# Create the application instance
app = create_app()


def run():
    """Run the application (used by the CLI entry point)."""
    settings = get_settings()
    uvicorn.run(
        "gridiron_draft.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run()
