"""Pydantic schemas for API requests and responses."""

from dataclasses import replace
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from qrlink.qr_renderer import RenderOptions


class RenderOptionsModel(BaseModel):
    """Optional drawing options for a generated QR code."""

    model_config = ConfigDict(populate_by_name=True)

    dark: Optional[str] = Field(None, description="Module color as #rgb, #rrggbb or #rrggbbaa")
    light: Optional[str] = Field(None, description="Background color")
    width: Optional[int] = Field(None, description="Image width in pixels")
    margin: Optional[int] = Field(None, description="Quiet zone size in modules")
    error_correction: Optional[str] = Field(
        None, alias="errorCorrectionLevel", description="One of L, M, Q, H"
    )
    image_format: Optional[str] = Field(None, alias="format", description="png or svg")

    def merged_with(self, defaults: RenderOptions) -> RenderOptions:
        """Overlay the supplied fields on the server defaults."""
        overrides = self.model_dump(exclude_none=True)
        return replace(defaults, **overrides)


class GenerateRequest(BaseModel):
    """Request to generate a QR code."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "type": "url",
                    "data": {"url": "https://example.com/page", "expiresAt": "2030-01-01T00:00:00Z"},
                },
                {
                    "type": "wifi",
                    "data": {"ssid": "Office", "password": "secret", "encryption": "WPA"},
                    "renderOptions": {"dark": "#222222", "width": 320},
                },
            ]
        },
    )

    type: str = Field(..., description="Payload type: url, text, wifi or email")
    data: Dict[str, Any] = Field(default_factory=dict, description="Payload fields")
    render_options: Optional[RenderOptionsModel] = Field(None, alias="renderOptions")


class GenerateResponse(BaseModel):
    """Generated QR code and, for shortened URLs, the created link."""

    model_config = ConfigDict(populate_by_name=True)

    qr_code: str = Field(..., alias="qrCode", description="Image as a data URI")
    short_url: Optional[str] = Field(None, alias="shortUrl")
    short_id: Optional[str] = Field(None, alias="shortId")
    expires_at: Optional[str] = Field(None, alias="expiresAt")


class LinkInfoResponse(BaseModel):
    """Stored link with its current status."""

    model_config = ConfigDict(populate_by_name=True)

    short_id: str = Field(..., alias="shortId")
    original_url: str = Field(..., alias="originalUrl")
    expires_at: Optional[str] = Field(None, alias="expiresAt")
    created_at: Optional[str] = Field(None, alias="createdAt")
    status: str = Field(..., description="active or expired")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: bool
    cache: bool
    timestamp: str


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str
