"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import api_router
from .web import redirect_router, web_router
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance,
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: QRLinkService, or None when the lifespan builds it
        config: Configuration instance
        logger: Optional logger shared with the routes

    Returns:
        Configured FastAPI app
    """
    logger = logger or logging.getLogger("qrlink.web")

    app = FastAPI(
        title="QR Link",
        description="QR code generator with expiring short links",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware, logger=logger.getChild("http"))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"detail": message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    short_prefix = "/" + config.short_path_prefix.strip("/")
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(redirect_router, prefix=short_prefix, tags=["Redirect"])
    app.include_router(web_router, tags=["Web"])

    return app
