"""Business logic service for QR link generation and resolution."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .common.validators import is_valid_url
from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .database.models import Link
from .exceptions import DuplicateShortIdError, ShortIdExhaustedError, ValidationError
from .maintenance import RepairReport, normalize_stored_expirations
from .payloads import UrlPayload, format_payload, parse_payload, payload_kind
from .qr_renderer import QRRenderer, RenderOptions
from .shortid import ShortIdGenerator
from .timestamps import (
    TimestampInput,
    format_for_display,
    is_expired,
    normalize_expiration,
    utc_now,
)


@dataclass(frozen=True)
class Redirect:
    url: str


@dataclass(frozen=True)
class Expired:
    display: str
    expires_at: Optional[str] = None


@dataclass(frozen=True)
class NotFound:
    pass


Resolution = Union[Redirect, Expired, NotFound]


@dataclass(frozen=True)
class GenerateResult:
    qr_code: str
    payload: str
    short_url: Optional[str] = None
    link: Optional[Link] = None


@dataclass(frozen=True)
class GeneratedImage:
    image: bytes
    payload: str
    short_url: Optional[str] = None
    link: Optional[Link] = None


class QRLinkService:
    """Service layer for short link and QR code business logic."""

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[RedisCache] = None,
        short_id_generator: Optional[ShortIdGenerator] = None,
        renderer: Optional[QRRenderer] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize QR link service.

        Args:
            store: Open link store
            cache: Optional record cache
            short_id_generator: Optional short ID generator
            renderer: Optional QR renderer
            logger: Optional logger
            max_collision_retries: Extra attempts after a short ID collision
            clock: Returns the current UTC instant (overridable for tests)
        """
        self.store = store
        self.cache = cache
        self.generator = short_id_generator or ShortIdGenerator()
        self.renderer = renderer or QRRenderer()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries
        self.clock = clock or utc_now

    async def create_link(
        self,
        original_url: str,
        expires_at: TimestampInput = None,
    ) -> Link:
        """Create a new short link.

        Validation happens before anything is written, so a rejected request
        leaves no row behind.

        Args:
            original_url: Destination URL
            expires_at: Optional expiration (string, datetime or epoch millis)

        Returns:
            The stored link

        Raises:
            ValidationError: If the URL is invalid
            InvalidExpirationError: If expires_at cannot be parsed
            ExpirationInPastError: If expires_at is not in the future
            ShortIdExhaustedError: If every generated short ID collided
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise ValidationError(f"Invalid URL format ({error})")

        canonical_expiry = normalize_expiration(expires_at, now=self.clock())

        for attempt in range(self.max_collision_retries + 1):
            short_id = self.generator.generate()
            try:
                link = await self.store.create(short_id, original_url, canonical_expiry)
            except DuplicateShortIdError:
                self.logger.warning(f"Short ID collision on attempt {attempt + 1}: {short_id}")
                continue

            if self.cache:
                await self.cache.set_link(link)

            self.logger.info(
                f"Created short link: {link.short_id} -> {original_url} "
                f"(expires: {canonical_expiry or 'never'})"
            )
            return link

        raise ShortIdExhaustedError(
            f"Unable to allocate a unique short ID after {self.max_collision_retries + 1} attempts"
        )

    async def find_link(self, short_id: str) -> Optional[Link]:
        """Get a link record by short ID, through the cache when enabled."""
        if self.cache:
            cached = await self.cache.get_link(short_id)
            if cached:
                self.logger.debug(f"Cache hit for {short_id}")
                return cached

        link = await self.store.find_by_short_id(short_id)
        if link and self.cache:
            await self.cache.set_link(link)
        return link

    async def resolve(self, short_id: str) -> Resolution:
        """Decide what a visit to a short link should do.

        The expiration is checked against the clock on every call. A stored
        expiration that cannot be parsed counts as expired.

        Returns:
            Redirect, Expired or NotFound
        """
        link = await self.find_link(short_id)

        if link is None:
            self.logger.info(f"Short ID not found: {short_id}")
            return NotFound()

        if is_expired(link.expires_at, now=self.clock()):
            self.logger.info(f"Short link expired: {short_id} (expiresAt={link.expires_at})")
            return Expired(display=format_for_display(link.expires_at), expires_at=link.expires_at)

        self.logger.debug(f"Resolved {short_id} -> {link.original_url}")
        return Redirect(url=link.original_url)

    async def _encode(
        self,
        kind: Any,
        data: Optional[Mapping[str, Any]],
        short_url_for: Callable[[str], str],
        render_options: Optional[RenderOptions],
    ) -> Tuple[RenderOptions, str, Optional[str], Optional[Link]]:
        options = (render_options or self.renderer.defaults).validated()
        payload = parse_payload(kind, data)

        link = None
        short_url = None
        if isinstance(payload, UrlPayload):
            if payload.shorten:
                link = await self.create_link(payload.url, payload.expires_at)
                short_url = short_url_for(link.short_id)
            elif payload.expires_at not in (None, ""):
                raise ValidationError("An expiration can only be set on shortened links")

        encoded = format_payload(payload, short_url=short_url)
        self.logger.info(f"Generated {payload_kind(payload).value} QR code ({len(encoded)} chars)")
        return options, encoded, short_url, link

    async def generate(
        self,
        kind: Any,
        data: Optional[Mapping[str, Any]],
        short_url_for: Callable[[str], str],
        render_options: Optional[RenderOptions] = None,
    ) -> GenerateResult:
        """Build a QR code for a typed request.

        For a shortened URL request the link is created first and the QR
        code encodes the short link, never the destination itself.

        Args:
            kind: Payload type name ("url", "text", "wifi", "email")
            data: Payload fields
            short_url_for: Maps a short ID to its absolute short link
            render_options: Optional rendering options

        Returns:
            The rendered data URI, the encoded string and, for URLs, the link
        """
        options, encoded, short_url, link = await self._encode(kind, data, short_url_for, render_options)
        qr_code = self.renderer.render_data_uri(encoded, options)
        return GenerateResult(qr_code=qr_code, payload=encoded, short_url=short_url, link=link)

    async def generate_image(
        self,
        kind: Any,
        data: Optional[Mapping[str, Any]],
        short_url_for: Callable[[str], str],
        render_options: Optional[RenderOptions] = None,
    ) -> GeneratedImage:
        """Like ``generate`` but returns raw image bytes for writing to a file."""
        options, encoded, short_url, link = await self._encode(kind, data, short_url_for, render_options)
        image = self.renderer.render(encoded, options)
        return GeneratedImage(image=image, payload=encoded, short_url=short_url, link=link)

    async def repair_expirations(self) -> RepairReport:
        """Normalize every stored expiration (maintenance only)."""
        return await normalize_stored_expirations(self.store, cache=self.cache, logger=self.logger)

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
