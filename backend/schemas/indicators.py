"""
Pydantic schemas for the technical-indicator endpoint.

Undefined indicator values (not enough lookback yet) are sent as JSON
``null`` since NaN is not valid JSON.
"""

from datetime import date as Date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.prices import PricePoint


class IndicatorRequest(BaseModel):
    """
    Attributes:
        symbol:     Ticker, echoed back only.
        history:    Daily price points, oldest → newest.
        ma_periods: Moving-average windows; defaults to server settings.
        rsi_period: RSI window; defaults to server settings.
    """

    symbol: str
    history: List[PricePoint] = Field(..., min_length=1)
    ma_periods: Optional[List[int]] = Field(default=None, min_length=1, max_length=5)
    rsi_period: Optional[int] = Field(default=None, ge=1, le=200)

    @field_validator("symbol")
    @classmethod
    def normalise_symbol(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("symbol must not be empty")
        return v

    @field_validator("ma_periods")
    @classmethod
    def _positive_periods(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        if v is not None and any(p < 1 for p in v):
            raise ValueError("ma_periods must be positive")
        return v


class IndicatorRow(BaseModel):
    """One date of the indicator table; ``ma`` is keyed by period."""

    date: Date
    price: float
    ma: Dict[int, Optional[float]]
    rsi: Optional[float] = None


class IndicatorResponse(BaseModel):
    """
    Indicator table plus the latest readings.

    ``change`` / ``change_percent`` compare the last two prices and are
    ``null`` for a single-point history.
    """

    symbol: str
    rsi_period: int
    ma_periods: List[int]
    rows: List[IndicatorRow]
    latest: Dict[str, Optional[float]]
    rsi_signal: Optional[Literal["overbought", "oversold", "neutral"]] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
