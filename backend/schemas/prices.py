"""
Pydantic models for price history and forecast points.

Both are frozen: a PricePoint is immutable once produced by the price
source, and a ForecastPoint is immutable once produced by a rollout.
"""

import math
from datetime import date as Date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PricePoint(BaseModel):
    """
    One daily bar of price history.

    Attributes:
        date:   Calendar day, ISO 8601 (``YYYY-MM-DD``).
        price:  Closing price.
        volume: Traded volume (≥ 0).
    """

    model_config = ConfigDict(frozen=True)

    date: Date
    price: float
    volume: int = Field(default=0, ge=0)

    @field_validator("price")
    @classmethod
    def _finite_price(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("price must be a finite number")
        return v


class ForecastPoint(BaseModel):
    """One future step of an iterative forecast."""

    model_config = ConfigDict(frozen=True)

    date: Date
    value: float
