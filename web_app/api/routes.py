"""API routes implementation."""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from qrlink.common.urls import build_base_url, build_short_url
from qrlink.exceptions import ValidationError
from qrlink.timestamps import is_expired

from .schemas import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
    LinkInfoResponse,
)

router = APIRouter()


def short_url_builder(request: Request):
    """Return a function mapping a short ID to an absolute short link for this request."""
    config = request.app.state.config
    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return lambda short_id: build_short_url(
        short_id=short_id,
        base_url=base_url,
        path_prefix=config.short_path_prefix,
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Generate QR code",
    description="Render a QR code for a URL, text, Wi-Fi network or email. URLs are shortened by default.",
)
async def generate_qr_code(request: Request, body: GenerateRequest):
    """Generate a QR code."""
    service = request.app.state.service
    logger = request.app.state.logger

    try:
        render_options = None
        if body.render_options is not None:
            render_options = body.render_options.merged_with(service.renderer.defaults)

        result = await service.generate(
            kind=body.type,
            data=body.data,
            short_url_for=short_url_builder(request),
            render_options=render_options,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error generating QR code")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        )

    return GenerateResponse(
        qr_code=result.qr_code,
        short_url=result.short_url,
        short_id=result.link.short_id if result.link else None,
        expires_at=result.link.expires_at if result.link else None,
    )


@router.get(
    "/links/{short_id}",
    response_model=LinkInfoResponse,
    response_model_by_alias=True,
    responses={
        404: {"model": ErrorResponse, "description": "Short link not found"},
    },
    summary="Get link information",
    description="Get a stored short link and whether it is still active.",
)
async def get_link_info(request: Request, short_id: str):
    """Get information about a short link."""
    service = request.app.state.service

    link = await service.find_link(short_id)
    if link is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short link '{short_id}' not found",
        )

    expired = is_expired(link.expires_at, now=service.clock())
    return LinkInfoResponse(
        short_id=link.short_id,
        original_url=link.original_url,
        expires_at=link.expires_at,
        created_at=link.created_at.isoformat() if link.created_at else None,
        status="expired" if expired else "active",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health of the service and its dependencies.",
)
async def health_check(request: Request):
    """Health check endpoint."""
    service = request.app.state.service

    health = await service.health_check()
    response = HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database=health["database"],
        cache=health["cache"],
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    if not health["overall"]:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )
    return response
