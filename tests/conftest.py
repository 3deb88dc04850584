"""Pytest configuration and fixtures."""

import itertools
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Iterable

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from qrlink.common.logging_config import setup_logging
from qrlink.database.sqlite import SQLiteLinkStore
from qrlink.service import QRLinkService
from qrlink.shortid import ShortIdGenerator
from web_app import create_app


START = datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable stand-in for the service clock."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)

    def set(self, now: datetime) -> None:
        self.now = now


class SequenceGenerator:
    """Short ID generator that hands out a fixed sequence of IDs."""

    def __init__(self, ids: Iterable[str]):
        self.ids = iter(ids)

    def generate(self, length=None) -> str:
        return next(self.ids)

    @classmethod
    def always(cls, short_id: str) -> "SequenceGenerator":
        return cls(itertools.repeat(short_id))


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def store(logger) -> AsyncGenerator[SQLiteLinkStore, None]:
    """Create an in-memory link store."""
    link_store = SQLiteLinkStore(":memory:", logger=logger)
    await link_store.open()

    yield link_store

    await link_store.close()


@pytest.fixture
def short_id_generator():
    return ShortIdGenerator(default_length=8)


@pytest.fixture
def service(store, short_id_generator, clock, logger) -> QRLinkService:
    """Create service instance."""
    return QRLinkService(
        store=store,
        cache=None,  # No cache for tests
        short_id_generator=short_id_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="sqlite:///:memory:",
        base_url="http://testserver",
        redis_url=None,
    )


@pytest.fixture
def app(service, config, logger):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
