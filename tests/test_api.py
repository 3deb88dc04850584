"""Tests for API endpoints."""

import pytest
from unittest.mock import AsyncMock


@pytest.mark.asyncio
class TestGenerateEndpoint:
    """Test POST /api/generate."""

    async def test_generate_url(self, client, sample_urls):
        response = await client.post(
            "/api/generate",
            json={"type": "url", "data": {"url": sample_urls[0], "expiresAt": "2030-02-01T00:00:00+01:00"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["qrCode"].startswith("data:image/png;base64,")
        assert data["shortUrl"] == f"http://testserver/r/{data['shortId']}"
        assert data["expiresAt"] == "2030-01-31T23:00:00.000Z"

    async def test_generate_url_behind_proxy(self, client, sample_urls):
        response = await client.post(
            "/api/generate",
            json={"type": "url", "data": {"url": sample_urls[0]}},
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "qr.example.com"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["shortUrl"].startswith("https://qr.example.com/r/")
        assert "expiresAt" not in data

    async def test_generate_text_has_no_link(self, client):
        response = await client.post("/api/generate", json={"type": "text", "data": {"text": "hi"}})

        assert response.status_code == 200
        assert set(response.json()) == {"qrCode"}

    async def test_generate_svg(self, client):
        response = await client.post(
            "/api/generate",
            json={
                "type": "email",
                "data": {"to": "a@example.com"},
                "renderOptions": {"format": "svg", "dark": "#333", "errorCorrectionLevel": "Q"},
            },
        )

        assert response.status_code == 200
        assert response.json()["qrCode"].startswith("data:image/svg+xml")

    @pytest.mark.parametrize(
        "body, detail",
        [
            ({"type": "url", "data": {"url": "https://a.com", "expiresAt": "2001-01-01T00:00:00Z"}},
             "Expiration must be a future date/time"),
            ({"type": "url", "data": {"url": "https://a.com", "expiresAt": "soonish"}},
             "Invalid expiration date format"),
            ({"type": "url", "data": {}}, "URL is required"),
            ({"type": "vcard", "data": {}}, "Unsupported QR code type"),
            ({"type": "text", "data": {"text": ""}}, "QR code data cannot be empty"),
            ({"type": "wifi", "data": {}}, "SSID is required"),
            ({"type": "text", "data": {"text": "x"}, "renderOptions": {"dark": "red"}}, "Invalid dark color"),
        ],
    )
    async def test_validation_errors(self, client, body, detail):
        response = await client.post("/api/generate", json=body)

        assert response.status_code == 400
        assert detail in response.json()["detail"]

    async def test_malformed_request_body(self, client):
        response = await client.post("/api/generate", json={"data": {}})
        assert response.status_code == 400

    async def test_unexpected_error_is_not_leaked(self, client, service):
        service.generate = AsyncMock(side_effect=RuntimeError("database password is hunter2"))

        response = await client.post("/api/generate", json={"type": "text", "data": {"text": "x"}})

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}


@pytest.mark.asyncio
class TestLinkEndpoints:
    """Test link lookup and health endpoints."""

    async def test_get_link(self, client, service, sample_urls):
        link = await service.create_link(sample_urls[0], "2030-01-01T13:00:00Z")

        response = await client.get(f"/api/links/{link.short_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["shortId"] == link.short_id
        assert data["originalUrl"] == sample_urls[0]
        assert data["expiresAt"] == "2030-01-01T13:00:00.000Z"
        assert data["status"] == "active"

    async def test_get_expired_link(self, client, service, clock, sample_urls):
        link = await service.create_link(sample_urls[0], "2030-01-01T13:00:00Z")
        clock.advance(hours=1)

        response = await client.get(f"/api/links/{link.short_id}")

        assert response.json()["status"] == "expired"

    async def test_get_missing_link(self, client):
        response = await client.get("/api/links/missing1")
        assert response.status_code == 404

    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] is True

    async def test_unhealthy(self, client, service):
        service.store.health_check = AsyncMock(return_value=False)

        response = await client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
