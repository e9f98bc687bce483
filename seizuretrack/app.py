"""
FastAPI Application
SeizureTrack API Server

Usage:
    # Development with auto-reload
    uvicorn seizuretrack.app:app --reload

    # Production
    uvicorn seizuretrack.app:app --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seizuretrack import __version__
from seizuretrack.core.logger import get_logger
from seizuretrack.handlers import register_fastapi_routes
from seizuretrack.system.runtime import build_runtime, stop_runtime

logger = get_logger(__name__)


def create_app(config_file: Optional[str] = None) -> FastAPI:
    """Create and configure FastAPI application

    Args:
        config_file: Configuration file path, defaults to <app home>/config.toml
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """FastAPI application lifecycle management"""
        logger.info("========== SeizureTrack Starting ==========")

        try:
            # Loads configuration, opens the database and loads every collection
            app.state.runtime = build_runtime(config_file)
            logger.info("========== SeizureTrack Ready ==========")
        except Exception as e:
            logger.error(f"Failed to initialize backend: {e}", exc_info=True)
            raise

        yield

        # Shutdown: clean up resources
        logger.info("========== SeizureTrack Shutting Down ==========")
        try:
            await stop_runtime(app.state.runtime)
        except Exception as e:
            logger.error(f"Error during shutdown: {e}", exc_info=True)

    app = FastAPI(
        title="SeizureTrack API",
        description="Personal seizure, medication and appointment tracker",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict to specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routes using the @api_handler decorator
    register_fastapi_routes(app, prefix="/api")

    # Health check endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "service": "SeizureTrack API",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
            "redoc": "/redoc",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        runtime = getattr(app.state, "runtime", None)
        if runtime is None:
            return {"status": "unhealthy", "service": "seizuretrack", "error": "not started"}
        return {
            "status": "healthy",
            "service": "seizuretrack",
            "storeLoaded": runtime.store.is_loaded,
            "remindersArmed": runtime.scheduler.is_armed,
        }

    logger.info("✓ FastAPI application created with routes")
    return app


# Create application instance
app = create_app()
