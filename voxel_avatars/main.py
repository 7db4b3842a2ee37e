"""
FastAPI application entry point.

Configures the application, middleware, and routes.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from voxel_avatars.api.routes import avatar, health
from voxel_avatars.config import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs startup and shutdown; the pipeline itself holds no resources.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Batch workers: {settings.batch.max_workers}, max items: {settings.batch.max_items}")

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Procedural voxel avatar service. Normalizes token trait metadata "
            "and assembles it into part-based 3D avatar geometry."
        ),
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    app.include_router(
        health.router,
        prefix=settings.api_prefix,
        tags=["Health"],
    )
    app.include_router(
        avatar.router,
        prefix=settings.api_prefix,
        tags=["Avatar"],
    )

    return app


# Create the application instance
app = create_app()
