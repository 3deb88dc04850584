"""Core business logic for QR link service."""

from .shortid import ShortIdGenerator
from .service import QRLinkService, Redirect, Expired, NotFound, GenerateResult, GeneratedImage
from .qr_renderer import QRRenderer, RenderOptions

__all__ = [
    "ShortIdGenerator",
    "QRLinkService",
    "Redirect",
    "Expired",
    "NotFound",
    "GenerateResult",
    "GeneratedImage",
    "QRRenderer",
    "RenderOptions",
]
