"""Common utilities for QR link service."""

from .validators import is_valid_url, is_valid_hex_color
from .urls import build_base_url, build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_hex_color",
    "build_base_url",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
