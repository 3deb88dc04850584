"""HTML routes and short link redirects."""

from .routes import redirect_router, router as web_router

__all__ = ["redirect_router", "web_router"]
