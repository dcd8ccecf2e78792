#!/usr/bin/env python3
"""
E-Season Backend - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds and wires modules (explicit dependency injection)
3. Registers middleware, error handlers and routes
4. Runs the API server

All business logic is in the modules, following black box principles.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from eseason import __version__
from eseason.config.provider import ConfigProvider, EnvConfigProvider
from eseason.errors import ServiceError
from eseason.logging_config import configure_logging, get_logging_config
from eseason.modules.api.models import HealthResponse, error_envelope
from eseason.modules.api.routes import admin_router, passenger_router
from eseason.modules.auth.factory import AuthFactory
from eseason.modules.middleware import AuthMiddleware
from eseason.modules.passenger.service import PassengerService
from eseason.modules.storage import (
    PassengerRepository,
    create_db_engine,
    create_session_factory,
    init_db,
)

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure through the standard response envelope."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(exc.message, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        detail = _format_validation_errors(exc)
        logger.debug(f"Validation error on {request.url.path}: {detail}")
        return JSONResponse(
            status_code=400,
            content=error_envelope("Invalid request data", detail),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(str(exc.detail)),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_envelope("Internal server error", str(exc)),
        )


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    engine: Optional[Engine] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        config_provider: Configuration source (defaults to environment)
        engine: Pre-built engine, mainly for tests

    Returns:
        Configured FastAPI application
    """
    config_provider = config_provider or EnvConfigProvider()
    api_config = config_provider.get_api_config()

    engine = engine or create_db_engine(config_provider.get_database_config())
    repository = PassengerRepository(create_session_factory(engine))
    auth_stack = AuthFactory.build(config_provider.get_auth_config())
    passenger_service = PassengerService(
        repository=repository,
        credentials=auth_stack.credentials,
        tokens=auth_stack.tokens,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle - initialize and cleanup resources."""
        logger.info("Starting E-Season Backend...")
        init_db(engine)
        logger.info("E-Season Backend started successfully")

        yield

        logger.info("Shutting down E-Season Backend...")
        engine.dispose()
        logger.info("E-Season Backend shutdown complete")

    app = FastAPI(
        title="E-Season Backend",
        description="Passenger registration, authentication and admin lookup",
        version=__version__,
        debug=api_config.debug,
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.auth_gate = auth_stack.gate
    app.state.passenger_service = passenger_service

    auth_middleware = AuthMiddleware(gate=auth_stack.gate)

    @app.middleware("http")
    async def authenticate(request: Request, call_next):
        return await auth_middleware(request, call_next)

    # Added last so it wraps the auth gate and decorates 401s too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Authorization", "Accept", "X-Requested-With"],
        expose_headers=["Content-Length"],
    )

    register_error_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    def health():
        """Liveness check. No authentication."""
        return HealthResponse(status="ok", message="E-Season Backend is running")

    app.include_router(passenger_router)
    app.include_router(admin_router)

    return app


def main() -> None:
    """Run the API server with configuration from the environment."""
    api_config = EnvConfigProvider().get_api_config()
    logging_args = (api_config.log_level, api_config.log_format, api_config.sql_log_level)
    configure_logging(*logging_args)
    logger.info(f"Server starting on port {api_config.port}")

    uvicorn.run(
        "eseason.main:create_app",
        factory=True,
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(*logging_args),
    )


if __name__ == "__main__":
    main()
