"""Web interface routes implementation."""

import os

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from qrlink.service import Expired, NotFound

router = APIRouter()
redirect_router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)


@redirect_router.get("/{short_id}", include_in_schema=False)
async def follow_short_link(request: Request, short_id: str):
    """Redirect to the destination of a short link, or explain why not."""
    service = request.app.state.service

    resolution = await service.resolve(short_id)

    if isinstance(resolution, NotFound):
        return templates.TemplateResponse(
            request,
            "link_status.html",
            {
                "title": "Link not found",
                "message": "This short link does not exist.",
                "short_id": short_id,
            },
            status_code=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(resolution, Expired):
        return templates.TemplateResponse(
            request,
            "link_status.html",
            {
                "title": "Link expired",
                "message": f"This link expired on {resolution.display}.",
                "short_id": short_id,
            },
            status_code=status.HTTP_410_GONE,
        )

    return RedirectResponse(url=resolution.url, status_code=status.HTTP_302_FOUND)


@router.get("/health", include_in_schema=False)
async def health(request: Request):
    """Simple health check for load balancers."""
    service = request.app.state.service
    health_status = await service.health_check()

    if health_status["overall"]:
        return JSONResponse(content={"status": "healthy"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", **health_status},
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Point visitors at the API documentation."""
    return templates.TemplateResponse(
        request,
        "link_status.html",
        {
            "title": "QR Link",
            "message": "Generate QR codes with POST /api/generate. See /api/docs.",
            "short_id": None,
        },
    )
