"""
core/config.py
──────────────
Centralised application settings via ``pydantic-settings``.

All configuration is driven by environment variables (or a ``.env`` file
in the ``backend/`` directory).  ``pydantic-settings`` validates types at
startup, so a malformed value fails fast with a clear error message.

Usage
-----
    from core.config import get_settings

    settings = get_settings()
    print(settings.DEFAULT_LOOKBACK)
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the backend/ directory so relative .env paths work from any cwd.
_BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables / ``.env`` file.

    Attributes:
        APP_TITLE:           Human-readable API name shown in OpenAPI docs.
        APP_VERSION:         Semantic version string.
        APP_DESCRIPTION:     Short description shown in the OpenAPI UI.
        DEBUG:               Enable verbose logging.
        LOG_LEVEL:           Root log level when DEBUG is off.
        DEFAULT_LOOKBACK:    Window length used when a request omits it.
        DEFAULT_EPOCHS:      Training epochs used when a request omits it.
        DEFAULT_HORIZON:     Forecast steps used when a request omits it.
        VALIDATION_FRACTION: Chronological hold-out share during training.
        BATCH_SIZE:          LSTM mini-batch size.
        LEARNING_RATE:       LSTM Adam learning rate.
        RANDOM_SEED:         Seed for model initialisation.
        RIDGE_ALPHA:         Regularisation of the linear backend.
        RSI_PERIOD:          RSI window.
        MA_PERIODS:          Moving-average windows.
        RSI_OVERBOUGHT:      RSI level flagged as overbought.
        RSI_OVERSOLD:        RSI level flagged as oversold.
        INDICATOR_CACHE_SIZE: Distinct histories memoised by the indicator engine.
        TRAINING_WORKERS:    Thread-pool size for model training.
        FRONTEND_URL:        Optional deployed frontend origin for CORS.
    """

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        # Extra env vars are ignored — don't raise on unexpected keys.
        extra="ignore",
    )

    # ── API metadata ──────────────────────────────────────────────────────
    APP_TITLE: str = "Price Forecasting API"
    APP_VERSION: str = "0.3.0"
    APP_DESCRIPTION: str = (
        "LSTM price forecasting and technical indicators "
        "(moving averages, RSI) over a supplied price history."
    )

    # ── Feature flags ─────────────────────────────────────────────────────
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Forecasting ───────────────────────────────────────────────────────
    DEFAULT_LOOKBACK: int = Field(default=10, ge=1)
    DEFAULT_EPOCHS: int = Field(default=30, ge=1)
    DEFAULT_HORIZON: int = Field(default=7, ge=1)
    VALIDATION_FRACTION: float = Field(default=0.2, ge=0.0, lt=1.0)
    BATCH_SIZE: int = Field(default=32, ge=1)
    LEARNING_RATE: float = Field(default=0.001, gt=0.0)
    RANDOM_SEED: int = 42
    RIDGE_ALPHA: float = Field(default=1e-3, ge=0.0)
    TRAINING_WORKERS: int = Field(default=2, ge=1)

    # ── Indicators ────────────────────────────────────────────────────────
    RSI_PERIOD: int = Field(default=14, ge=1)
    MA_PERIODS: List[int] = [10, 20]
    RSI_OVERBOUGHT: float = Field(default=70.0, le=100.0)
    RSI_OVERSOLD: float = Field(default=30.0, ge=0.0)
    INDICATOR_CACHE_SIZE: int = Field(default=32, ge=1)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Optional extra origin injected by the hosting environment.
    FRONTEND_URL: str = ""

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """
        Build the full CORS allow-list.

        Hard-coded dev origins plus the optional ``FRONTEND_URL`` env var.
        """
        origins: List[str] = [
            "http://localhost:5173",   # Vite / React dev server
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ]
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL)
        return origins

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()

    @field_validator("MA_PERIODS")
    @classmethod
    def _positive_periods(cls, v: List[int]) -> List[int]:
        if not v or any(p <= 0 for p in v):
            raise ValueError("MA_PERIODS must be a non-empty list of positive integers")
        return v

    @model_validator(mode="after")
    def _thresholds_ordered(self) -> "Settings":
        if self.RSI_OVERSOLD >= self.RSI_OVERBOUGHT:
            raise ValueError("RSI_OVERSOLD must be below RSI_OVERBOUGHT")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached ``Settings`` singleton.

    The instance is created (and the ``.env`` file parsed) only once per
    process lifetime, courtesy of ``functools.lru_cache``.
    """
    return Settings()
