"""
Bookmarks Backend API
FastAPI application with Firebase integration
"""
import os
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn

from bookmarks_api.core.config import settings
from bookmarks_api.core.exceptions import AuthenticationException
from bookmarks_api.core.responses import unauthorized_response
from bookmarks_api.api.dependencies import ServiceContainer, build_services
from bookmarks_api.api.v1.router import api_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    """Build the application; ``services`` overrides the Firestore-backed defaults"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        # Startup
        logger.info("🚀 Starting Bookmarks Backend...")
        logger.debug(f"Debug mode: {settings.DEBUG}")

        container = services or build_services()
        await container.store.connect()
        app.state.services = container
        logger.info("✅ Document store connected")

        yield

        # Shutdown
        logger.info("🛑 Shutting down Bookmarks Backend...")

    app = FastAPI(
        title="Bookmarks API",
        description="Backend API for grouped, ordered bookmarks",
        version="2.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    allowed_origins = settings.cors_origins
    if settings.DEBUG:
        logger.warning("⚠️  CORS wildcard enabled - DEBUG mode. Disable in production!")
        allowed_origins = allowed_origins + ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthenticationException)
    async def authentication_error_handler(request: Request, exc: AuthenticationException):
        logger.info(f"Rejected request to {request.url.path}: {exc.message}")
        return unauthorized_response(exc.message, error=exc.details.get("error"))

    app.include_router(api_router, prefix=settings.API_PREFIX)

    # Health check
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "message": "Bookmarks Backend is running"}

    return app


app = create_app()


if __name__ == "__main__":
    # Read PORT from environment (Cloud Run sets this)
    port = int(os.getenv("PORT", settings.PORT))
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=port,
        reload=settings.DEBUG,
        log_level="info",
        access_log=True,
        log_config=None  # Use our custom logging config
    )
