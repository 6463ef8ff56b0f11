"""
analytics/forecasting/scaler.py
───────────────────────────────
Min-max normalisation over a single price series.

The scaler is a frozen ``(min, max)`` pair.  It is fitted once per training
run and replaced wholesale on retraining — never mutated in place.

Usage
-----
    scaler = Scaler.fit(prices)
    scaled = normalize(prices, scaler)
    restored = denormalize(scaled, scaler)
"""

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from analytics.forecasting.errors import InvalidInputError

ArrayLike = Union[Sequence[float], np.ndarray]


@dataclass(frozen=True)
class Scaler:
    """
    Affine mapping between a price range and ``[0, 1]``.

    Attributes:
        min: Smallest value seen at fit time.
        max: Largest value seen at fit time.

    Raises:
        InvalidInputError: If ``max <= min`` (flat or inverted range) or
                           ``max - min`` overflows to infinity.
    """

    min: float
    max: float

    def __post_init__(self) -> None:
        if not (np.isfinite(self.min) and np.isfinite(self.max)):
            raise InvalidInputError("Scaler bounds must be finite")
        if self.max <= self.min:
            raise InvalidInputError(
                f"Degenerate scaler (min={self.min}, max={self.max}) — "
                "a flat price history cannot be normalised"
            )
        if not np.isfinite(self.max - self.min):
            raise InvalidInputError(
                f"Scaler range overflows (min={self.min}, max={self.max})"
            )

    @property
    def span(self) -> float:
        return self.max - self.min

    @classmethod
    def fit(cls, series: ArrayLike) -> "Scaler":
        """
        Compute the min/max pair for ``series``.

        Args:
            series: 1-D sequence of prices.

        Returns:
            A new, immutable Scaler.

        Raises:
            InvalidInputError: Empty series, non-finite values, or a
                               constant series (``max == min``).
        """
        arr = _as_1d(series)
        if arr.size == 0:
            raise InvalidInputError("Cannot fit a scaler on an empty series")
        if not np.isfinite(arr).all():
            raise InvalidInputError("series contains NaN or infinite values — clean data before fitting")
        return cls(min=float(arr.min()), max=float(arr.max()))


def normalize(series: ArrayLike, scaler: Scaler) -> np.ndarray:
    """Map ``series`` into the scaler's ``[0, 1]`` space."""
    return (_as_1d(series) - scaler.min) / scaler.span


def denormalize(series: ArrayLike, scaler: Scaler) -> np.ndarray:
    """Inverse of :func:`normalize`."""
    return _as_1d(series) * scaler.span + scaler.min


def _as_1d(series: ArrayLike) -> np.ndarray:
    arr = np.asarray(series, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidInputError(f"Expected a 1-D series, got shape {arr.shape}")
    return arr
