"""Short link URL building."""

from typing import Mapping, Optional


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Work out the public base URL a short link should point at.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host (set by a reverse proxy)
    2. Request scheme + Host header
    3. Configured base URL

    Args:
        headers: Request headers
        fallback_base_url: Base URL from configuration
        request_scheme: Request scheme (http/https)
        request_host: Value of the Host header

    Returns:
        Base URL without trailing slash (e.g. https://qr.example.com)
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    forwarded_proto = lowered.get("x-forwarded-proto")
    forwarded_host = lowered.get("x-forwarded-host")

    if forwarded_proto and forwarded_host:
        # Proxies may append a chain ("https, http"); the first hop is the client's.
        proto = forwarded_proto.split(",")[0].strip()
        host = forwarded_host.split(",")[0].strip()
        return f"{proto}://{host}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def build_short_url(short_id: str, base_url: str, path_prefix: str = "r") -> str:
    """Build the absolute short link, e.g. ``https://host/r/AbC123xY``."""
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_id}"
    return f"{base}/{short_id}"
