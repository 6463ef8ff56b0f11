"""
analytics/forecasting/forecaster.py
───────────────────────────────────
End-to-end train → iterative forecast orchestration.

The forecaster owns exactly one ``(Scaler, ForecastModel)`` pair, stored
behind a single ``FittedState`` reference.  ``train`` builds a complete new
pair before swapping it in, so ``forecast`` always sees either the old pair
or the new one, never a mix.

Usage
-----
    forecaster = IterativeForecaster(model_type="lstm")
    await forecaster.train_async(history, epochs=30, lookback=10)
    points = forecaster.forecast(history, lookback=10, horizon=7)
"""

import asyncio
import functools
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from analytics.forecasting.base import ForecastModel, TrainingSummary
from analytics.forecasting.errors import (
    InsufficientDataError,
    InvalidInputError,
    NotTrainedError,
    ShapeError,
)
from analytics.forecasting.factory import ForecastingFactory
from analytics.forecasting.scaler import Scaler, denormalize, normalize
from analytics.forecasting.sequences import make_sequences
from schemas.prices import ForecastPoint, PricePoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FittedState:
    """The scaler a model was trained in, the model itself, and its losses."""

    scaler: Scaler
    model: ForecastModel
    summary: TrainingSummary


class IterativeForecaster:
    """
    Trains a ForecastModel on a price history and rolls it forward.

    Args:
        model_type:          Name registered in ``ForecastingFactory``.
        validation_fraction: Held-out share passed to ``ForecastModel.fit``.
        executor:            Executor used by :meth:`train_async`; ``None``
                             means the event loop's default executor.
        **model_kwargs:      Extra constructor arguments for the model
                             (``lookback`` is supplied per training call).
    """

    def __init__(
        self,
        model_type: str = "lstm",
        validation_fraction: float = 0.2,
        executor: Optional[Executor] = None,
        **model_kwargs: Any,
    ) -> None:
        self.model_type = model_type.lower()
        self.validation_fraction = validation_fraction
        self._executor = executor
        self._model_kwargs = model_kwargs
        self._fitted: Optional[FittedState] = None

    # ── status ────────────────────────────────────────────────────────────

    @property
    def is_trained(self) -> bool:
        return self._fitted is not None

    @property
    def scaler(self) -> Optional[Scaler]:
        fitted = self._fitted
        return fitted.scaler if fitted else None

    @property
    def training_summary(self) -> Optional[TrainingSummary]:
        fitted = self._fitted
        return fitted.summary if fitted else None

    # ── train ─────────────────────────────────────────────────────────────

    def train(self, history: Sequence[PricePoint], epochs: int, lookback: int) -> TrainingSummary:
        """
        Fit a fresh scaler and model on ``history`` and store them.

        On success the previous pair (if any) is replaced and its model
        disposed.  On failure the previous pair is left untouched.

        Args:
            history:  Price points sorted oldest → newest.
            epochs:   Training epochs.
            lookback: Window length for the model.

        Returns:
            The model's TrainingSummary.

        Raises:
            InvalidInputError:     Empty/unsorted history or flat prices.
            InsufficientDataError: Fewer than ``lookback + 1`` points.
            TrainingError:         The model failed to fit.
        """
        prices = _extract_prices(history)
        if isinstance(lookback, bool) or not isinstance(lookback, int) or lookback <= 0:
            raise InvalidInputError(f"lookback must be a positive integer, got {lookback!r}")
        if len(prices) < lookback + 1:
            raise InsufficientDataError(
                f"Insufficient data. Need at least {lookback + 1} "
                f"samples, got {len(prices)}"
            )

        scaler = Scaler.fit(prices)
        X, y = make_sequences(normalize(prices, scaler), lookback)

        model = ForecastingFactory.create_model(
            self.model_type, lookback=lookback, **self._model_kwargs
        )
        try:
            summary = model.fit(X, y, epochs=epochs, validation_fraction=self.validation_fraction)
        except Exception:
            model.dispose()
            raise

        previous = self._fitted
        self._fitted = FittedState(scaler=scaler, model=model, summary=summary)
        if previous is not None:
            previous.model.dispose()

        logger.info(
            "Trained %s forecaster on %d prices (scaler %.4f–%.4f)",
            self.model_type,
            len(prices),
            scaler.min,
            scaler.max,
        )
        return summary

    async def train_async(
        self, history: Sequence[PricePoint], epochs: int, lookback: int
    ) -> TrainingSummary:
        """
        Run :meth:`train` on an executor so the event loop is not blocked.

        Training itself is one uninterrupted computation; this is the only
        point at which the caller yields.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor,
            functools.partial(self.train, history, epochs, lookback),
        )

    # ── forecast ──────────────────────────────────────────────────────────

    def forecast(
        self, history: Sequence[PricePoint], lookback: int, horizon: int
    ) -> List[ForecastPoint]:
        """
        Iterative multi-step prediction.

        Each step's prediction is appended to the input window for the next
        step, so errors compound over the horizon.  Prices are scaled with
        the scaler stored at training time.

        Args:
            history:  Price points sorted oldest → newest.
            lookback: Window length; must equal the trained model's.
            horizon:  Number of future daily steps.

        Returns:
            One ForecastPoint per step, dated consecutively from the day
            after the last history date.

        Raises:
            NotTrainedError:       No trained model is stored.
            InvalidInputError:     Bad horizon or empty/unsorted history.
            ShapeError:            ``lookback`` differs from the model's.
            InsufficientDataError: Fewer than ``lookback`` history points.
        """
        fitted = self._fitted
        if fitted is None:
            raise NotTrainedError("Call train() before forecast()")
        if isinstance(horizon, bool) or not isinstance(horizon, int) or horizon <= 0:
            raise InvalidInputError(f"horizon must be a positive integer, got {horizon!r}")
        if lookback != fitted.model.lookback:
            raise ShapeError(
                f"Model was trained with lookback={fitted.model.lookback}, got {lookback}"
            )

        prices = _extract_prices(history)
        if len(prices) < lookback:
            raise InsufficientDataError(
                f"Need at least {lookback} history points to seed the window, got {len(prices)}"
            )

        # Seed the rolling window with the last `lookback` scaled prices
        window = normalize(prices[-lookback:], fitted.scaler)

        raw_preds: List[float] = []
        for _ in range(horizon):
            pred = fitted.model.predict_one(window)
            raw_preds.append(pred)
            window = np.append(window[1:], pred)

        values = denormalize(raw_preds, fitted.scaler)
        last_date = history[-1].date
        return [
            ForecastPoint(date=last_date + timedelta(days=h), value=float(v))
            for h, v in enumerate(values, start=1)
        ]

    # ── lifecycle ─────────────────────────────────────────────────────────

    def dispose(self) -> None:
        """Release the stored model; the forecaster returns to untrained."""
        fitted, self._fitted = self._fitted, None
        if fitted is not None:
            fitted.model.dispose()

    def get_model_info(self) -> Dict[str, Any]:
        fitted = self._fitted
        info: Dict[str, Any] = {
            "model_type": self.model_type,
            "validation_fraction": self.validation_fraction,
            "is_trained": fitted is not None,
        }
        if fitted is not None:
            info.update(fitted.model.get_model_info())
            info["scaler"] = {"min": fitted.scaler.min, "max": fitted.scaler.max}
        return info


def _extract_prices(history: Sequence[PricePoint]) -> np.ndarray:
    """Pull closing prices out of ``history``, checking it is non-empty and sorted."""
    if not history:
        raise InvalidInputError("history must contain at least one price point")
    for prev, cur in zip(history, history[1:]):
        if cur.date <= prev.date:
            raise InvalidInputError(
                f"history must be sorted oldest → newest without duplicates "
                f"({prev.date} is followed by {cur.date})"
            )
    return np.array([p.price for p in history], dtype=np.float64)
