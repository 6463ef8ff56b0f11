"""
Pydantic schemas for request/response serialization.

Separate from analytics (computation) and routes (HTTP layer).
"""

from schemas.forecast import ForecastRequest, ForecastResponse, TrainingSummaryOut
from schemas.indicators import IndicatorRequest, IndicatorResponse, IndicatorRow
from schemas.prices import ForecastPoint, PricePoint

__all__ = [
    "PricePoint",
    "ForecastPoint",
    "ForecastRequest",
    "ForecastResponse",
    "TrainingSummaryOut",
    "IndicatorRequest",
    "IndicatorResponse",
    "IndicatorRow",
]
