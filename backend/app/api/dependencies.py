"""
app/api/dependencies.py
───────────────────────
FastAPI dependency functions shared across all endpoints.

Usage
-----
    from app.api.dependencies import get_indicator_engine

    @router.post("/foo")
    def my_route(engine = Depends(get_indicator_engine)):
        ...
"""

from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache

from analytics.indicators import IndicatorEngine
from core.config import Settings, get_settings


def get_app_settings() -> Settings:
    """FastAPI dependency returning the cached ``Settings``."""
    return get_settings()


@lru_cache(maxsize=1)
def get_indicator_engine() -> IndicatorEngine:
    """
    Process-wide indicator engine.

    Shared so its memoisation survives across requests: re-requesting
    indicators for an unchanged history skips the computation.
    """
    settings = get_settings()
    return IndicatorEngine(
        ma_periods=settings.MA_PERIODS,
        rsi_period=settings.RSI_PERIOD,
        overbought=settings.RSI_OVERBOUGHT,
        oversold=settings.RSI_OVERSOLD,
        cache_size=settings.INDICATOR_CACHE_SIZE,
    )


@lru_cache(maxsize=1)
def get_training_executor() -> ThreadPoolExecutor:
    """
    A small pool for model training.

    Training is CPU-bound; running it here keeps the event loop free.
    """
    settings = get_settings()
    return ThreadPoolExecutor(
        max_workers=settings.TRAINING_WORKERS, thread_name_prefix="forecast"
    )
