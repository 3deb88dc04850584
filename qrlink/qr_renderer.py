"""QR image rendering on top of segno."""

import io
import logging
from dataclasses import dataclass, replace
from typing import Optional

import segno

from .common.validators import is_valid_hex_color
from .exceptions import ValidationError


ERROR_CORRECTION_LEVELS = ("L", "M", "Q", "H")
IMAGE_FORMATS = ("png", "svg")


@dataclass(frozen=True)
class RenderOptions:
    """How a payload is drawn.

    Attributes:
        dark: Module color
        light: Background color
        width: Target image width in pixels (the module scale is derived from it)
        margin: Quiet zone size in modules
        error_correction: One of L, M, Q, H
        image_format: "png" or "svg"
    """

    dark: str = "#000000"
    light: str = "#FFFFFF"
    width: int = 256
    margin: int = 2
    error_correction: str = "H"
    image_format: str = "png"

    def validated(self) -> "RenderOptions":
        for name in ("dark", "light"):
            is_valid, error = is_valid_hex_color(getattr(self, name))
            if not is_valid:
                raise ValidationError(f"Invalid {name} color: {error}")
        if self.width < 21 or self.width > 4096:
            raise ValidationError("Width must be between 21 and 4096 pixels")
        if self.margin < 0 or self.margin > 16:
            raise ValidationError("Margin must be between 0 and 16 modules")
        level = self.error_correction.upper()
        if level not in ERROR_CORRECTION_LEVELS:
            raise ValidationError(f"Error correction must be one of {', '.join(ERROR_CORRECTION_LEVELS)}")
        image_format = self.image_format.lower()
        if image_format not in IMAGE_FORMATS:
            raise ValidationError(f"Image format must be one of {', '.join(IMAGE_FORMATS)}")
        return replace(self, error_correction=level, image_format=image_format)


class QRRenderer:
    """Render payload strings into QR code images."""

    def __init__(
        self,
        defaults: Optional[RenderOptions] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.defaults = defaults or RenderOptions()
        self.logger = logger or logging.getLogger(__name__)

    def _make(self, payload: str, options: RenderOptions) -> "segno.QRCode":
        try:
            # boost_error=False keeps the requested level instead of raising it.
            return segno.make(payload, error=options.error_correction, micro=False, boost_error=False)
        except segno.DataOverflowError as e:
            raise ValidationError("QR code data is too long to encode") from e

    def _scale(self, qr: "segno.QRCode", options: RenderOptions) -> int:
        modules_wide, _ = qr.symbol_size(scale=1, border=options.margin)
        return max(1, options.width // modules_wide)

    def render(self, payload: str, options: Optional[RenderOptions] = None) -> bytes:
        """Render a payload to PNG or SVG bytes."""
        options = (options or self.defaults).validated()
        qr = self._make(payload, options)
        buffer = io.BytesIO()
        qr.save(
            buffer,
            kind=options.image_format,
            scale=self._scale(qr, options),
            border=options.margin,
            dark=options.dark,
            light=options.light,
        )
        self.logger.debug(f"Rendered QR version {qr.version} ({len(payload)} chars)")
        return buffer.getvalue()

    def render_data_uri(self, payload: str, options: Optional[RenderOptions] = None) -> str:
        """Render a payload to a ``data:`` URI usable as an <img> source."""
        options = (options or self.defaults).validated()
        qr = self._make(payload, options)
        kwargs = dict(
            scale=self._scale(qr, options),
            border=options.margin,
            dark=options.dark,
            light=options.light,
        )
        if options.image_format == "svg":
            return qr.svg_data_uri(**kwargs)
        return qr.png_data_uri(**kwargs)
