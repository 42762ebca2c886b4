"""Pytest configuration and fixtures for passwordle tests."""
import os
import random
from typing import AsyncGenerator, Generator

# Set test environment before importing app modules
os.environ["SESSION_STORE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

from passwordle.main import create_app
from passwordle.services.session_manager import SessionManager
from passwordle.services.word_source import WordListSource
from passwordle.storage.memory import InMemoryBackend


class FakeClock:
    """Manually advanced clock shared by a store and a manager."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def word_source() -> WordListSource:
    """A source whose only five-letter word is CRANE."""
    return WordListSource(["crane", "bake", "rocket"], rng=random.Random(0))


@pytest.fixture
def store(clock) -> InMemoryBackend:
    return InMemoryBackend(clock=clock)


@pytest.fixture
def manager(store, word_source, clock) -> SessionManager:
    return SessionManager(
        store=store,
        word_source=word_source,
        ttl_seconds=3600,
        max_conflict_retries=0,
        clock=clock,
    )


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def test_app(manager) -> FastAPI:
    """Create a test FastAPI application wired to the test manager."""
    app = create_app(session_manager=manager)
    # ASGITransport does not run lifespan, so set state up front as well
    app.state.session_manager = manager
    return app


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Create a test client for synchronous tests."""
    with TestClient(test_app) as c:
        yield c


@pytest_asyncio.fixture
async def async_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for async tests."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
