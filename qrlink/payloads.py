"""QR payload types and the string formats they encode to.

Each payload kind is its own class carrying only the fields that kind needs.
``parse_payload`` turns a raw ``(type, data)`` pair from a request into one of
them, and ``format_payload`` produces the literal string placed in the QR code.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote, urlencode

from .common.validators import is_valid_url
from .exceptions import EmptyPayloadError, UnsupportedTypeError, ValidationError
from .timestamps import TimestampInput


class PayloadKind(str, Enum):
    URL = "url"
    TEXT = "text"
    WIFI = "wifi"
    EMAIL = "email"


class WifiEncryption(str, Enum):
    WPA = "WPA"
    WEP = "WEP"
    NOPASS = "nopass"

    @classmethod
    def from_value(cls, value: Any) -> "WifiEncryption":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        allowed = ", ".join(member.value for member in cls)
        raise ValidationError(f"Unsupported Wi-Fi encryption '{value}' (expected one of: {allowed})")


@dataclass(frozen=True)
class UrlPayload:
    url: str
    expires_at: TimestampInput = None
    shorten: bool = True


@dataclass(frozen=True)
class TextPayload:
    text: str


@dataclass(frozen=True)
class WifiPayload:
    ssid: str
    password: Optional[str] = None
    encryption: WifiEncryption = WifiEncryption.WPA


@dataclass(frozen=True)
class EmailPayload:
    to: str
    subject: Optional[str] = None
    body: Optional[str] = None


Payload = Union[UrlPayload, TextPayload, WifiPayload, EmailPayload]


_WIFI_SPECIAL_CHARS = re.compile(r'([\\;,:"])')


def escape_wifi_field(value: str) -> str:
    """Backslash-escape the characters reserved by the WIFI: format."""
    return _WIFI_SPECIAL_CHARS.sub(r'\\\1', value)


def format_wifi(payload: WifiPayload) -> str:
    password = escape_wifi_field(payload.password) if payload.password else ""
    return f"WIFI:T:{payload.encryption.value};S:{escape_wifi_field(payload.ssid)};P:{password};;"


def format_email(payload: EmailPayload) -> str:
    params = {}
    if payload.subject:
        params["subject"] = payload.subject
    if payload.body:
        params["body"] = payload.body

    # quote (not quote_plus): mail clients expect %20 for spaces in mailto URIs.
    query = urlencode(params, quote_via=quote)
    return f"mailto:{payload.to}?{query}" if query else f"mailto:{payload.to}"


def format_text(payload: TextPayload) -> str:
    return payload.text


def format_payload(payload: Payload, short_url: Optional[str] = None) -> str:
    """Build the exact string encoded into the QR image.

    Args:
        payload: A parsed payload
        short_url: Absolute short link, required for a shortened UrlPayload

    Returns:
        The string to encode

    Raises:
        UnsupportedTypeError: If payload is not a known payload class
        EmptyPayloadError: If the resulting string is empty
    """
    if isinstance(payload, UrlPayload):
        if payload.shorten:
            if short_url is None:
                raise ValueError("short_url is required to encode a shortened URL payload")
            result = short_url
        else:
            result = payload.url
    elif isinstance(payload, TextPayload):
        result = format_text(payload)
    elif isinstance(payload, WifiPayload):
        result = format_wifi(payload)
    elif isinstance(payload, EmailPayload):
        result = format_email(payload)
    else:
        raise UnsupportedTypeError("Unsupported QR code type")

    if not result:
        raise EmptyPayloadError("QR code data cannot be empty")
    return result


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{key}' must be a string")
    return value


def _required_str(data: Mapping[str, Any], key: str, message: str) -> str:
    value = _optional_str(data, key)
    if not value or not value.strip():
        raise ValidationError(message)
    return value


def parse_payload(kind: Any, data: Optional[Mapping[str, Any]]) -> Payload:
    """Build a typed payload from a request's type name and data object.

    Args:
        kind: One of "url", "text", "wifi", "email"
        data: Fields for that kind

    Raises:
        UnsupportedTypeError: If kind is unknown
        ValidationError: If a required field is missing or malformed
    """
    try:
        kind = PayloadKind(kind)
    except ValueError:
        raise UnsupportedTypeError("Unsupported QR code type") from None

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValidationError("Invalid request payload")

    if kind is PayloadKind.URL:
        url = _required_str(data, "url", "URL is required").strip()
        is_valid, error = is_valid_url(url)
        if not is_valid:
            raise ValidationError(f"Invalid URL format ({error})")
        expires_at = data.get("expiresAt", data.get("expires_at"))
        shorten = data.get("shorten", True)
        if not isinstance(shorten, bool):
            raise ValidationError("'shorten' must be a boolean")
        return UrlPayload(url=url, expires_at=expires_at, shorten=shorten)

    if kind is PayloadKind.TEXT:
        return TextPayload(text=_optional_str(data, "text") or "")

    if kind is PayloadKind.WIFI:
        return WifiPayload(
            ssid=_required_str(data, "ssid", "SSID is required"),
            password=_optional_str(data, "password"),
            encryption=WifiEncryption.from_value(data.get("encryption", WifiEncryption.WPA.value)),
        )

    return EmailPayload(
        to=_required_str(data, "to", "Recipient email address is required").strip(),
        subject=_optional_str(data, "subject"),
        body=_optional_str(data, "body"),
    )


def payload_kind(payload: Payload) -> PayloadKind:
    kinds: Dict[type, PayloadKind] = {
        UrlPayload: PayloadKind.URL,
        TextPayload: PayloadKind.TEXT,
        WifiPayload: PayloadKind.WIFI,
        EmailPayload: PayloadKind.EMAIL,
    }
    try:
        return kinds[type(payload)]
    except KeyError:
        raise UnsupportedTypeError("Unsupported QR code type") from None
