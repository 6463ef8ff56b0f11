"""
tests/conftest.py
──────────────────
Shared pytest fixtures for the backend test suite.

Fixtures
--------
make_history
    Factory turning a list of prices into consecutive daily PricePoints.
trending_history
    60 days of a noisy upward-trending series — enough for any lookback
    used in the tests.
app_client
    ``httpx.AsyncClient`` wired to the FastAPI app.  Startup lifespan is
    skipped, so no logging reconfiguration happens during tests.

Usage
-----
    async def test_health(app_client):
        resp = await app_client.get("/")
        assert resp.status_code == 200
"""

from datetime import date, timedelta
from typing import AsyncGenerator, Callable, List, Sequence

import numpy as np
import pytest
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_indicator_engine
from app.main import app
from schemas.prices import PricePoint

HistoryFactory = Callable[..., List[PricePoint]]


# ── Price history builders ────────────────────────────────────────────────────


@pytest.fixture
def make_history() -> HistoryFactory:
    """
    Return a builder: ``make_history([10, 11, 12], start=date(2024, 1, 1))``.
    """

    def _build(prices: Sequence[float], start: date = date(2024, 1, 1)) -> List[PricePoint]:
        return [
            PricePoint(date=start + timedelta(days=i), price=float(p), volume=1_000 + i)
            for i, p in enumerate(prices)
        ]

    return _build


@pytest.fixture
def trending_prices() -> List[float]:
    rng = np.random.default_rng(7)
    steps = np.arange(60)
    return list(100 + 0.5 * steps + 3 * np.sin(steps / 4) + rng.normal(0, 0.5, size=60))


@pytest.fixture
def trending_history(make_history: HistoryFactory, trending_prices: List[float]) -> List[PricePoint]:
    return make_history(trending_prices)


# ── Test client ───────────────────────────────────────────────────────────────


@pytest.fixture
async def app_client() -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTPX client talking to the app in-process.

    The shared indicator engine is reset so cache statistics are per-test.
    """
    get_indicator_engine.cache_clear()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    get_indicator_engine.cache_clear()
