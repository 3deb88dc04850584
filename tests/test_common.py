"""Tests for common utilities."""

import logging

import pytest
from qrlink.common.validators import is_valid_url, is_valid_hex_color
from qrlink.common.urls import build_base_url, build_short_url
from qrlink.common.logging_config import get_logger, setup_logging


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        valid, _ = is_valid_url("https://example.com")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("https://sub.example.com:8080/path?query=value")
        assert valid

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url("not-a-url")
        assert not valid

        valid, error = is_valid_url("ftp://example.com")
        assert not valid
        assert "http" in error.lower()

        valid, error = is_valid_url("https://")
        assert not valid
        assert "domain" in error.lower()

    def test_url_too_long(self):
        valid, error = is_valid_url("https://example.com/" + "a" * 2048)
        assert not valid
        assert "too long" in error

    @pytest.mark.parametrize("color", ["#000", "#FFFFFF", "#12abEF", "#11223344"])
    def test_valid_colors(self, color):
        valid, _ = is_valid_hex_color(color)
        assert valid

    @pytest.mark.parametrize("color", ["", "black", "#12", "123456", "#GGGGGG"])
    def test_invalid_colors(self, color):
        valid, _ = is_valid_hex_color(color)
        assert not valid


class TestURLBuilding:
    """Test short link URL building."""

    def test_forwarded_headers_win(self):
        headers = {"X-Forwarded-Proto": "https", "X-Forwarded-Host": "qr.example.com"}
        base = build_base_url(headers, "http://localhost:3000", "http", "internal:3000")
        assert base == "https://qr.example.com"

    def test_forwarded_chain_uses_first_hop(self):
        headers = {"x-forwarded-proto": "https, http", "x-forwarded-host": "a.example.com, b.internal"}
        assert build_base_url(headers, "http://localhost:3000") == "https://a.example.com"

    def test_request_host(self):
        assert build_base_url({}, "http://localhost:3000", "http", "testserver") == "http://testserver"

    def test_fallback(self):
        assert build_base_url({}, "https://qr.example.com/") == "https://qr.example.com"

    def test_build_short_url(self):
        assert build_short_url("AbC123xY", "https://qr.example.com/") == "https://qr.example.com/r/AbC123xY"
        assert build_short_url("AbC123xY", "https://qr.example.com", "/go/") == "https://qr.example.com/go/AbC123xY"
        assert build_short_url("AbC123xY", "https://qr.example.com", "") == "https://qr.example.com/AbC123xY"


class TestLogging:
    """Test logging setup."""

    def test_setup_logging(self):
        logger = setup_logging(level="warning")
        assert logger.name == "qrlink"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_setup_logging_with_file(self, tmp_path):
        logger = setup_logging(level="INFO", log_file=str(tmp_path / "qrlink.log"), json_format=True)
        assert len(logger.handlers) == 2
        for handler in logger.handlers:
            handler.close()

    def test_get_logger_namespacing(self):
        assert get_logger("web").name == "qrlink.web"
        assert get_logger("qrlink.database").name == "qrlink.database"
        assert get_logger().name == "qrlink"
