"""
analytics/indicators.py
───────────────────────
Technical indicators computed directly over price history.

Functions
---------
moving_average
    Simple moving average; NaN until the window fills.
rsi
    Relative Strength Index using simple trailing averages of gains and
    losses (not Wilder smoothing).
rsi_signal
    Overbought / oversold / neutral label for one RSI value.

Classes
-------
IndicatorEngine
    Computes the standard indicator set for a history and memoises the
    result, so refreshing a view over unchanged prices costs nothing.

All series are positionally aligned with the input: output length always
equals input length, and NaN marks "not enough lookback yet".
"""

import logging
from dataclasses import dataclass
from datetime import date as Date
from functools import lru_cache
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from analytics.forecasting.errors import InvalidInputError
from analytics.forecasting.scaler import ArrayLike
from schemas.prices import PricePoint

logger = logging.getLogger(__name__)

DEFAULT_RSI_PERIOD = 14
DEFAULT_MA_PERIODS: Tuple[int, ...] = (10, 20)
RSI_OVERBOUGHT = 70.0
RSI_OVERSOLD = 30.0


def _validate(prices: ArrayLike, period: int) -> np.ndarray:
    if isinstance(period, bool) or not isinstance(period, (int, np.integer)) or period <= 0:
        raise InvalidInputError(f"period must be a positive integer, got {period!r}")
    arr = np.asarray(prices, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidInputError(f"Expected a 1-D price series, got shape {arr.shape}")
    if not np.isfinite(arr).all():
        raise InvalidInputError("prices contains NaN or infinite values")
    return arr


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def moving_average(prices: ArrayLike, period: int) -> np.ndarray:
    """Simple Moving Average over the trailing ``period`` prices."""
    data = _validate(prices, period)
    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = data[i - period + 1 : i + 1].sum() / period
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(prices: ArrayLike, period: int = DEFAULT_RSI_PERIOD) -> np.ndarray:
    """
    Relative Strength Index with simple windowed averages.

    Deltas start at index 1, so one leading NaN re-aligns the result with
    ``prices``.  A window with no losses scores 100.

    Args:
        prices: 1-D closing prices.
        period: Number of deltas averaged per value.

    Returns:
        Array the same length as ``prices``; defined values lie in [0, 100].
    """
    data = _validate(prices, period)
    if len(data) == 0:
        return np.empty(0)

    deltas = np.diff(data)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    values = np.full(len(deltas), np.nan)
    for i in range(period - 1, len(deltas)):
        avg_gain = gains[i - period + 1 : i + 1].sum() / period
        avg_loss = losses[i - period + 1 : i + 1].sum() / period
        if avg_loss == 0:
            values[i] = 100.0
        else:
            values[i] = 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)

    return np.concatenate(([np.nan], values))


def rsi_signal(
    value: Optional[float],
    overbought: float = RSI_OVERBOUGHT,
    oversold: float = RSI_OVERSOLD,
) -> Optional[str]:
    """Classify an RSI reading; ``None`` when the value is undefined."""
    if value is None or np.isnan(value):
        return None
    if value > overbought:
        return "overbought"
    if value < oversold:
        return "oversold"
    return "neutral"


# =============================================================================
# CACHED ENGINE
# =============================================================================


@dataclass(frozen=True, eq=False)
class IndicatorReport:
    """
    Indicator series for one price history.

    Arrays are read-only because reports are shared through the cache.
    """

    dates: Tuple[Date, ...]
    prices: np.ndarray
    moving_averages: Dict[int, np.ndarray]
    rsi: np.ndarray
    rsi_period: int
    rsi_signal: Optional[str]

    def latest(self) -> Dict[str, Optional[float]]:
        """
        Most recent value of each series (``None`` when undefined).

        Also carries the last bar's ``change`` and ``change_percent``
        against the previous price; both need two prices, and the
        percentage needs a non-zero previous price.
        """
        out: Dict[str, Optional[float]] = {}
        for period, series in self.moving_averages.items():
            out[f"ma_{period}"] = _last_or_none(series)
        out["rsi"] = _last_or_none(self.rsi)
        out["change"], out["change_percent"] = _last_change(self.prices)
        return out

    def to_frame(self) -> pd.DataFrame:
        """One row per date with ``price``, ``ma_<n>`` and ``rsi`` columns."""
        frame = pd.DataFrame({"price": self.prices}, index=pd.Index(self.dates, name="date"))
        for period, series in self.moving_averages.items():
            frame[f"ma_{period}"] = series
        frame["rsi"] = self.rsi
        return frame


class IndicatorEngine:
    """
    Computes moving averages and RSI for a history, memoised on its prices.

    Args:
        ma_periods: Moving-average windows to compute.
        rsi_period: RSI window.
        overbought: RSI level above which the signal is ``"overbought"``.
        oversold:   RSI level below which the signal is ``"oversold"``.
        cache_size: Number of distinct histories kept in the cache.
    """

    def __init__(
        self,
        ma_periods: Sequence[int] = DEFAULT_MA_PERIODS,
        rsi_period: int = DEFAULT_RSI_PERIOD,
        overbought: float = RSI_OVERBOUGHT,
        oversold: float = RSI_OVERSOLD,
        cache_size: int = 32,
    ) -> None:
        if oversold >= overbought:
            raise InvalidInputError("oversold threshold must be below overbought")
        self.ma_periods = tuple(ma_periods)
        self.rsi_period = rsi_period
        self.overbought = overbought
        self.oversold = oversold
        self._cached = lru_cache(maxsize=cache_size)(self._compute)

    def compute(self, history: Sequence[PricePoint]) -> IndicatorReport:
        """
        Return the indicator report for ``history``.

        Repeated calls with the same dates and prices hit the cache.
        """
        key = tuple((p.date, p.price) for p in history)
        return self._cached(key)

    def cache_info(self):
        return self._cached.cache_info()

    def cache_clear(self) -> None:
        self._cached.cache_clear()

    def _compute(self, key: Tuple[Tuple[Date, float], ...]) -> IndicatorReport:
        logger.debug("Computing indicators for %d prices", len(key))
        dates = tuple(d for d, _ in key)
        prices = _frozen(np.array([p for _, p in key], dtype=np.float64))
        mas = {period: _frozen(moving_average(prices, period)) for period in self.ma_periods}
        rsi_values = _frozen(rsi(prices, self.rsi_period))
        return IndicatorReport(
            dates=dates,
            prices=prices,
            moving_averages=mas,
            rsi=rsi_values,
            rsi_period=self.rsi_period,
            rsi_signal=rsi_signal(
                _last_or_none(rsi_values), self.overbought, self.oversold
            ),
        )


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def _last_change(prices: np.ndarray) -> Tuple[Optional[float], Optional[float]]:
    if len(prices) < 2:
        return None, None
    previous = float(prices[-2])
    change = float(prices[-1]) - previous
    if previous == 0:
        return change, None
    return change, change / previous * 100.0


def _last_or_none(series: np.ndarray) -> Optional[float]:
    if len(series) == 0 or np.isnan(series[-1]):
        return None
    return float(series[-1])
