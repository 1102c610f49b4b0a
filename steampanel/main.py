"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from steampanel.config import get_settings
from steampanel.infrastructure.dependencies import build_monitoring_system, get_sse_manager
from steampanel.infrastructure.logging.log_config import setup_logging
from steampanel.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — assemble and start the domain schedulers."""
    settings = get_settings()
    setup_logging()

    system = build_monitoring_system(settings)
    app.state.monitoring = system
    system.start_all()
    logger.info("%s %s started (%s)", settings.app_title, settings.app_version, settings.app_env)

    yield

    # Shutdown
    await system.shutdown()
    app.state.monitoring = None
    sse = get_sse_manager()
    await sse.shutdown()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "steampanel.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
