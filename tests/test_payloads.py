"""Tests for QR payload parsing and formatting."""

import pytest

from qrlink.exceptions import EmptyPayloadError, UnsupportedTypeError, ValidationError
from qrlink.payloads import (
    EmailPayload,
    PayloadKind,
    TextPayload,
    UrlPayload,
    WifiEncryption,
    WifiPayload,
    escape_wifi_field,
    format_payload,
    parse_payload,
    payload_kind,
)


class TestWifi:
    """Test WIFI: payloads."""

    def test_default_encryption(self):
        payload = parse_payload("wifi", {"ssid": "Home", "password": "secret"})
        assert format_payload(payload) == "WIFI:T:WPA;S:Home;P:secret;;"

    def test_reserved_characters_are_escaped(self):
        payload = parse_payload("wifi", {"ssid": 'My;Net"work'})
        assert format_payload(payload) == r'WIFI:T:WPA;S:My\;Net\"work;P:;;'

    def test_escape_all_reserved(self):
        assert escape_wifi_field(r'a\b;c,d:e"f') == r'a\\b\;c\,d\:e\"f'

    def test_encryption_is_case_insensitive(self):
        payload = parse_payload("wifi", {"ssid": "Cafe", "encryption": "wep", "password": "k"})
        assert payload.encryption is WifiEncryption.WEP
        assert format_payload(payload) == "WIFI:T:WEP;S:Cafe;P:k;;"

    def test_nopass_keeps_supplied_password(self):
        payload = WifiPayload(ssid="Cafe", password="x", encryption=WifiEncryption.NOPASS)
        assert format_payload(payload) == "WIFI:T:nopass;S:Cafe;P:x;;"

    def test_unknown_encryption(self):
        with pytest.raises(ValidationError, match="encryption"):
            parse_payload("wifi", {"ssid": "Cafe", "encryption": "WPA9"})

    def test_missing_ssid(self):
        with pytest.raises(ValidationError, match="SSID is required"):
            parse_payload("wifi", {"password": "secret"})


class TestEmail:
    """Test mailto: payloads."""

    def test_body_only(self):
        payload = parse_payload("email", {"to": "a@example.com", "body": "hello world"})
        assert format_payload(payload) == "mailto:a@example.com?body=hello%20world"

    def test_subject_and_body(self):
        payload = EmailPayload(to="a@example.com", subject="Hi & bye", body="Line")
        assert format_payload(payload) == "mailto:a@example.com?subject=Hi%20%26%20bye&body=Line"

    def test_no_parameters(self):
        payload = parse_payload("email", {"to": "a@example.com"})
        assert format_payload(payload) == "mailto:a@example.com"

    def test_missing_recipient(self):
        with pytest.raises(ValidationError, match="Recipient email address is required"):
            parse_payload("email", {"subject": "Hi"})


class TestTextAndUrl:
    """Test text and URL payloads."""

    def test_text_verbatim(self):
        assert format_payload(TextPayload(text="line one\nline two")) == "line one\nline two"

    def test_empty_text(self):
        with pytest.raises(EmptyPayloadError, match="QR code data cannot be empty"):
            format_payload(parse_payload("text", {"text": ""}))

    def test_shortened_url_encodes_short_link(self):
        payload = parse_payload("url", {"url": "https://example.com/long"})
        assert payload.shorten
        assert format_payload(payload, short_url="http://qr.test/r/AbC123xY") == "http://qr.test/r/AbC123xY"

    def test_shortened_url_requires_short_link(self):
        with pytest.raises(ValueError):
            format_payload(UrlPayload(url="https://example.com"))

    def test_unshortened_url(self):
        payload = parse_payload("url", {"url": "https://example.com/long", "shorten": False})
        assert format_payload(payload) == "https://example.com/long"

    def test_expiration_aliases(self):
        assert parse_payload("url", {"url": "https://a.com", "expiresAt": "x"}).expires_at == "x"
        assert parse_payload("url", {"url": "https://a.com", "expires_at": "y"}).expires_at == "y"

    def test_missing_url(self):
        with pytest.raises(ValidationError, match="URL is required"):
            parse_payload("url", {})

    def test_invalid_url(self):
        with pytest.raises(ValidationError, match="Invalid URL format"):
            parse_payload("url", {"url": "ftp://example.com"})

    def test_shorten_must_be_bool(self):
        with pytest.raises(ValidationError, match="shorten"):
            parse_payload("url", {"url": "https://a.com", "shorten": "no"})


class TestDispatch:
    """Test type dispatch."""

    @pytest.mark.parametrize("kind", ["vcard", "", None, "URL"])
    def test_unsupported_type(self, kind):
        with pytest.raises(UnsupportedTypeError, match="Unsupported QR code type"):
            parse_payload(kind, {})

    def test_data_must_be_mapping(self):
        with pytest.raises(ValidationError):
            parse_payload("text", ["not", "a", "mapping"])

    def test_field_type_checked(self):
        with pytest.raises(ValidationError, match="'text' must be a string"):
            parse_payload("text", {"text": 42})

    def test_payload_kind(self):
        assert payload_kind(TextPayload(text="x")) is PayloadKind.TEXT
        assert payload_kind(EmailPayload(to="a@b.c")) is PayloadKind.EMAIL
