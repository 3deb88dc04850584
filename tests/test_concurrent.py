"""Tests that the server handles multiple concurrent connections correctly.

The app is async (FastAPI + a shared SQLite connection or asyncpg pool +
redis.asyncio). These tests assert that many simultaneous requests succeed
and return correct results.
"""

import asyncio
import pytest


@pytest.mark.asyncio
class TestConcurrentConnections:
    """Prove the server handles many simultaneous requests."""

    async def test_concurrent_health_requests(self, client):
        """Many concurrent GET /api/health requests all succeed."""
        concurrency = 50
        responses = await asyncio.gather(*[client.get("/api/health") for _ in range(concurrency)])

        assert all(r.status_code == 200 for r in responses)

    async def test_concurrent_generate_distinct_links(self, client, sample_urls):
        """Concurrent shortened URL requests each get their own link."""
        concurrency = 30
        tasks = [
            client.post("/api/generate", json={"type": "url", "data": {"url": f"{sample_urls[0]}?n={i}"}})
            for i in range(concurrency)
        ]
        responses = await asyncio.gather(*tasks)

        assert all(r.status_code == 200 for r in responses)
        short_ids = {r.json()["shortId"] for r in responses}
        assert len(short_ids) == concurrency

    async def test_concurrent_redirects(self, client, service, sample_urls):
        """Concurrent visits to the same short link all redirect."""
        link = await service.create_link(sample_urls[1])

        responses = await asyncio.gather(*[client.get(f"/r/{link.short_id}") for _ in range(40)])

        assert all(r.status_code == 302 for r in responses)
        assert {r.headers["location"] for r in responses} == {sample_urls[1]}
