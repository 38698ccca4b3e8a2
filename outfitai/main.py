"""Main FastAPI application entry point.

This module serves as the primary entry point for the OutfitAI application.
It handles all core application setup including:
- FastAPI application initialization and configuration
- Middleware setup for CORS, correlation IDs and request logging
- Route registration and API versioning
- Application startup/shutdown handling of the AI service
- Health check endpoint
"""

# Standard library imports
import time
from contextlib import asynccontextmanager

# FastAPI imports
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

# Internal imports
from outfitai.core.config import get_settings
from outfitai.core.logging import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    get_logger,
    setup_logging,
)
from outfitai.api.v1.router import api_router
from outfitai.core.exceptions import AppException
from outfitai.services.ai_processing import AIService

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.
    This context manager ensures the model client is closed on shutdown.
    """
    setup_logging()
    logger.info("Starting up application...")
    app.state.ai_service = AIService()
    logger.info("Services initialized successfully", ai_service=app.state.ai_service.status)

    try:
        yield  # Application runs here
    finally:
        logger.info("Shutting down application...")
        await app.state.ai_service.close()
        logger.info("Cleanup completed")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    Handles all application setup including middleware, routes, and error handlers.
    """
    app = FastAPI(
        title="OutfitAI API",
        description="AI outfit suggestions, styled previews and shopping links for a clothing photo",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url=settings.DOCS_URL if not settings.PROD else None,
        redoc_url=None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware; the last added runs first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle custom application exceptions"""
        logger.error(
            "Request failed with application error",
            error=exc,
            path=request.url.path,
            status_code=exc.status_code
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors with clear messages"""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_errors(exc)}
        )

    # Register routers
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint for monitoring systems."""
        ai_service = getattr(request.app.state, 'ai_service', None)
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": app.version,
            "environment": settings.ENVIRONMENT.value,
            "services": {
                "ai_service": ai_service.status if ai_service else "not_initialized"
            }
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw input, which may hold a whole image."""
    return [
        {key: value for key, value in error.items() if key not in ("input", "ctx")}
        for error in exc.errors()
    ]


# Create the application instance
app = create_application()

# Only run the server directly in development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "outfitai.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.PROD,
        log_level="debug" if settings.DEBUG else "info"
    )
