"""
app/api/v1/endpoints/indicators.py
────────────────────────────────────
Technical indicator endpoint.

Routes
------
POST /api/v1/indicators    Moving averages and RSI for a supplied history.

Requests using the server's default periods go through the shared,
memoised IndicatorEngine; custom periods get a one-off engine.
"""

import logging
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from analytics.forecasting import ForecastingError
from analytics.indicators import IndicatorEngine, IndicatorReport
from app.api.dependencies import get_app_settings, get_indicator_engine
from core.config import Settings
from schemas.indicators import IndicatorRequest, IndicatorResponse, IndicatorRow

logger = logging.getLogger(__name__)
router = APIRouter()


def _nan_to_none(value: float) -> Optional[float]:
    return None if math.isnan(value) else float(value)


def _select_engine(
    request: IndicatorRequest, settings: Settings, shared: IndicatorEngine
) -> IndicatorEngine:
    ma_periods = tuple(request.ma_periods or settings.MA_PERIODS)
    rsi_period = request.rsi_period or settings.RSI_PERIOD
    if ma_periods == shared.ma_periods and rsi_period == shared.rsi_period:
        return shared
    return IndicatorEngine(
        ma_periods=ma_periods,
        rsi_period=rsi_period,
        overbought=settings.RSI_OVERBOUGHT,
        oversold=settings.RSI_OVERSOLD,
        cache_size=1,
    )


def _to_rows(report: IndicatorReport) -> List[IndicatorRow]:
    frame = report.to_frame()
    rows: List[IndicatorRow] = []
    for day, record in frame.iterrows():
        rows.append(
            IndicatorRow(
                date=day,
                price=float(record["price"]),
                ma={p: _nan_to_none(record[f"ma_{p}"]) for p in report.moving_averages},
                rsi=_nan_to_none(record["rsi"]),
            )
        )
    return rows


@router.post("", response_model=IndicatorResponse, summary="Moving averages and RSI")
def compute_indicators(
    request: IndicatorRequest,
    settings: Settings = Depends(get_app_settings),
    shared_engine: IndicatorEngine = Depends(get_indicator_engine),
) -> IndicatorResponse:
    """
    Compute indicator series aligned with ``request.history``.

    Entries without enough lookback are ``null``; the row count always
    equals the history length.

    Raises:
        HTTPException 422: Unsorted history or invalid periods.
    """
    dates = [p.date for p in request.history]
    if any(b <= a for a, b in zip(dates, dates[1:])):
        raise HTTPException(
            status_code=422, detail="history must be sorted oldest → newest without duplicates"
        )

    engine = _select_engine(request, settings, shared_engine)
    try:
        report = engine.compute(request.history)
    except ForecastingError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    latest = report.latest()
    return IndicatorResponse(
        symbol=request.symbol,
        rsi_period=report.rsi_period,
        ma_periods=list(report.moving_averages),
        rows=_to_rows(report),
        latest=latest,
        rsi_signal=report.rsi_signal,
        change=latest["change"],
        change_percent=latest["change_percent"],
    )
