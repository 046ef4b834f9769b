"""
FastAPI application factory.

Creates and configures the FastAPI application instance. Run with
``uvicorn taskflow.main:create_app --factory``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from taskflow.api.v1.router import api_router
from taskflow.core.config import Settings, get_settings
from taskflow.core.errors import AppError, AuthenticationError, ErrorKind
from taskflow.core.logging_setup import configure_logging
from taskflow.core.security import build_token_issuer
from taskflow.db.session import create_db_engine
from taskflow.services.email_service import EmailNotifier, build_email_notifier

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, notifier: Optional[EmailNotifier] = None,
               engine: Optional[Engine] = None, configure_logs: bool = True) -> FastAPI:
    """
    Build the application with explicitly constructed collaborators.

    Args:
        settings: Application settings, loaded from the environment if omitted
        notifier: Email notifier, SMTP or logging depending on settings if omitted
        engine: Database engine, created from settings if omitted
        configure_logs: Install the JSON log handler on the root logger
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="TaskFlow identity, session and authorization API.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json")

    app.state.settings = settings
    app.state.engine = engine if engine is not None else create_db_engine(settings)
    app.state.notifier = notifier if notifier is not None else build_email_notifier(settings)
    app.state.token_issuer = build_token_issuer(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "service": "taskflow-api",
            "version": settings.VERSION
        }

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Map application errors to JSON responses."""

    @app.exception_handler(AppError)
    async def _handle_app_error(request: Request, exc: AppError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        if exc.status_code >= 401:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.kind.value)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation failed",
                "code": ErrorKind.VALIDATION_ERROR.value,
                "details": jsonable_encoder(exc.errors(), exclude={"input", "ctx"}),
            },
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content={"error": "Internal Server Error"})
