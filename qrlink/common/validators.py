"""Validation utilities for QR link service."""

import re
from urllib.parse import urlparse
from typing import Tuple


MAX_URL_LENGTH = 2048

_HEX_COLOR_RE = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate an absolute destination URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    if not result.netloc or not result.hostname:
        return False, "URL must have a valid domain"

    return True, ""


def is_valid_hex_color(color: str) -> Tuple[bool, str]:
    """Validate a ``#rgb``, ``#rrggbb`` or ``#rrggbbaa`` color.

    Args:
        color: The color string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not color or not isinstance(color, str):
        return False, "Color is required"

    if not _HEX_COLOR_RE.match(color):
        return False, f"'{color}' is not a hex color (expected #rgb or #rrggbb)"

    return True, ""
