"""
analytics/forecasting/sequences.py
──────────────────────────────────
Sliding-window dataset construction for sequence-to-one models.
"""

from typing import Tuple

import numpy as np

from analytics.forecasting.errors import InsufficientDataError, InvalidInputError
from analytics.forecasting.scaler import ArrayLike


def make_sequences(series: ArrayLike, lookback: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Slide a window over ``series`` to produce (X, y) pairs.

    For every ``i`` in ``[lookback, len(series) - 1]`` the window is
    ``series[i - lookback : i]`` and the target is ``series[i]``.  Order is
    chronological; no shuffling happens here.

    Args:
        series:   1-D (usually normalised) price array.
        lookback: Window length, must be positive.

    Returns:
        X: shape (n_samples, lookback)
        y: shape (n_samples,)

    Raises:
        InvalidInputError:     If ``lookback`` is not a positive integer.
        InsufficientDataError: If the series yields no windows at all.
    """
    if isinstance(lookback, bool) or not isinstance(lookback, (int, np.integer)) or lookback <= 0:
        raise InvalidInputError(f"lookback must be a positive integer, got {lookback!r}")

    data = np.asarray(series, dtype=np.float64).ravel()
    n_samples = max(0, len(data) - lookback)
    if n_samples == 0:
        raise InsufficientDataError(
            f"No sequences created — need at least {lookback + 1} samples "
            f"for lookback={lookback}, got {len(data)}"
        )

    X = np.empty((n_samples, lookback), dtype=np.float64)
    y = np.empty(n_samples, dtype=np.float64)
    for row, i in enumerate(range(lookback, len(data))):
        X[row] = data[i - lookback : i]
        y[row] = data[i]
    return X, y
