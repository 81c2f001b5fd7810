"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..lib.exceptions import DatabaseError, InvalidUrl
from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


def _register_error_handlers(app: FastAPI) -> None:
    """Translate domain errors into generic JSON responses."""
    
    @app.exception_handler(InvalidUrl)
    async def invalid_url_handler(request: Request, exc: InvalidUrl):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            content={"error": "could not create link"},
        )
    
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            content={"error": "could not create link"},
        )
    
    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "database error"},
        )


def create_app(
    service_instance,
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.
    
    Args:
        service_instance: Service instance (may be set later by the lifespan)
        config: Configuration instance
        logger: Logger handed to the request-logging middleware
        
    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Link Shortener",
        description="Shorten URLs to opaque hashes and redirect on visit",
        version="0.1.0",
        docs_url="/v1/docs",
        redoc_url=None,
        openapi_url="/v1/openapi.json",
    )
    
    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger
    
    app.add_middleware(LoggingMiddleware, logger=logger)
    
    _register_error_handlers(app)
    
    app.include_router(api_router, prefix="/v1", tags=["API"])
    # Registered last: its catch-all /{hash} must not shadow the API
    app.include_router(web_router, tags=["Web"])
    
    return app
