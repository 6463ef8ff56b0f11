"""
app/main.py
────────────
FastAPI application factory.

All business logic lives in ``analytics/``; endpoints live in
``app/api/v1/endpoints/``.  This file is intentionally slim — it wires
together logging, middleware, routers, and lifecycle events only.

API Layout
----------
GET  /                                 Health check
GET  /api/v1/forecast/models           Available model backends
POST /api/v1/forecast/{model_type}     Train + iterative forecast
POST /api/v1/indicators                Moving averages and RSI

OpenAPI docs
------------
- Swagger UI:  http://localhost:8000/docs
- ReDoc:       http://localhost:8000/redoc
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analytics.forecasting import ForecastingFactory
from app.api.dependencies import get_training_executor
from app.api.v1.router import api_router
from core.config import get_settings
from core.logging_config import configure_logging

logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application startup and shutdown logic.

    Startup:  Configure logging from settings.
    Shutdown: Wait for in-flight training jobs and stop the pool.
    """
    settings = get_settings()
    configure_logging(settings.effective_log_level)
    logger.info(
        "Starting %s v%s (debug=%s)",
        settings.APP_TITLE,
        settings.APP_VERSION,
        settings.DEBUG,
    )

    yield  # ← application runs here

    get_training_executor().shutdown(wait=True)
    get_training_executor.cache_clear()
    logger.info("Shutting down %s", settings.APP_TITLE)


# ── App factory ───────────────────────────────────────────────────────────────

settings = get_settings()

app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    lifespan=lifespan,
)

# ── Middleware ────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(api_router, prefix="/api/v1")

# ── Root health-check ─────────────────────────────────────────────────────────


@app.get("/", tags=["health"], summary="Health check")
def health_check() -> dict:
    """
    Liveness probe listing what this instance can serve.

    ``models`` holds the registered forecasting backends; ``lstm`` is
    listed even when TensorFlow is missing, in which case requests for
    it answer 503.
    """
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "models": ForecastingFactory.list_available_models(),
        "indicators": {"ma_periods": settings.MA_PERIODS, "rsi_period": settings.RSI_PERIOD},
    }
