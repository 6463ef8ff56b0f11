"""
analytics/forecasting/base.py
─────────────────────────────
Abstract sequence-to-one model interface shared by every backend.

Classes
-------
ModelState
    Lifecycle of a model: UNTRAINED → TRAINED → DISPOSED.
TrainingSummary
    Loss figures reported by a successful fit().
ForecastModel
    Abstract interface every model must implement.  Owns input validation,
    the chronological train / validation split and the state machine, so
    subclasses only provide ``_fit``, ``_predict_batch`` and ``_release``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error

from analytics.forecasting.errors import (
    ForecastingError,
    InvalidInputError,
    NotTrainedError,
    ShapeError,
    TrainingError,
)
from analytics.forecasting.scaler import ArrayLike

logger = logging.getLogger(__name__)


class ModelState(str, Enum):
    UNTRAINED = "untrained"
    TRAINED = "trained"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class TrainingSummary:
    """
    Outcome of one ``ForecastModel.fit`` call, in normalised units.

    Attributes:
        epochs:             Epochs requested for the fit.
        train_samples:      Windows used for parameter updates.
        validation_samples: Held-out windows (never trained on).
        train_loss:         MSE on the training split after fitting.
        validation_loss:    MSE on the held-out split, ``None`` if empty.
        validation_mae:     MAE on the held-out split, ``None`` if empty.
    """

    epochs: int
    train_samples: int
    validation_samples: int
    train_loss: float
    validation_loss: Optional[float] = None
    validation_mae: Optional[float] = None


# ─── Abstract Base ────────────────────────────────────────────────────────────


class ForecastModel(ABC):
    """
    Trainable regressor mapping a window of ``lookback`` values to the next one.

    The model works entirely in normalised (0–1) space and knows nothing
    about the original price scale.

    Args:
        lookback: Window length the model is trained and queried with.

    Raises:
        InvalidInputError: If ``lookback`` is not a positive integer.
    """

    def __init__(self, lookback: int) -> None:
        if isinstance(lookback, bool) or not isinstance(lookback, int) or lookback <= 0:
            raise InvalidInputError(f"lookback must be a positive integer, got {lookback!r}")
        self.lookback = lookback
        self._state = ModelState.UNTRAINED

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def is_trained(self) -> bool:
        return self._state is ModelState.TRAINED

    # ── backend hooks ─────────────────────────────────────────────────────

    @abstractmethod
    def _fit(
        self,
        X_train: np.ndarray,
        y_train: np.ndarray,
        X_val: np.ndarray,
        y_val: np.ndarray,
        epochs: int,
    ) -> None:
        """
        Train backend parameters on ``X_train`` / ``y_train`` only.

        ``X_val`` / ``y_val`` may be used for monitoring but must never
        drive parameter updates.  Both X arrays have shape (n, lookback).
        """

    @abstractmethod
    def _predict_batch(self, X: np.ndarray) -> np.ndarray:
        """Return one prediction per row of ``X`` (shape (n, lookback))."""

    @abstractmethod
    def _release(self) -> None:
        """Drop any backend resources held by the trained model."""

    # ── public contract ───────────────────────────────────────────────────

    def fit(
        self,
        windows: ArrayLike,
        targets: ArrayLike,
        epochs: int,
        validation_fraction: float = 0.2,
    ) -> TrainingSummary:
        """
        Train on chronologically ordered (window, target) pairs.

        The last ``validation_fraction`` of the dataset is held out and only
        scored, never trained on.

        Args:
            windows:             Array of shape (n, lookback).
            targets:             Array of shape (n,).
            epochs:              Number of training epochs (> 0).
            validation_fraction: Held-out share in ``[0, 1)``.

        Returns:
            TrainingSummary with train and validation losses.

        Raises:
            NotTrainedError:   If the model has been disposed.
            InvalidInputError: Bad ``epochs`` or ``validation_fraction``.
            ShapeError:        Window length differs from ``lookback``.
            TrainingError:     Empty dataset, empty training split, or
                               a failure inside the backend.
        """
        if self._state is ModelState.DISPOSED:
            raise NotTrainedError("Model has been disposed — create a new one")
        if isinstance(epochs, bool) or not isinstance(epochs, int) or epochs <= 0:
            raise InvalidInputError(f"epochs must be a positive integer, got {epochs!r}")
        if not 0.0 <= validation_fraction < 1.0:
            raise InvalidInputError(
                f"validation_fraction must be in [0, 1), got {validation_fraction}"
            )

        X, y = self._as_dataset(windows, targets)

        split = int(len(X) * (1 - validation_fraction))
        if split == 0:
            raise TrainingError(
                f"Training split is empty ({len(X)} samples, "
                f"validation_fraction={validation_fraction})"
            )
        X_train, y_train = X[:split], y[:split]
        X_val, y_val = X[split:], y[split:]

        if self._state is ModelState.TRAINED:
            logger.debug("Refitting %s — releasing previous state", self.__class__.__name__)
            self._release()
            self._state = ModelState.UNTRAINED

        logger.info(
            "Fitting %s on %d windows (%d held out, lookback=%d, epochs=%d)",
            self.__class__.__name__,
            len(X_train),
            len(X_val),
            self.lookback,
            epochs,
        )
        try:
            self._fit(X_train, y_train, X_val, y_val, epochs)
            summary = self._summarise(X_train, y_train, X_val, y_val, epochs)
        except ForecastingError:
            self._release()
            raise
        except Exception as exc:
            self._release()
            raise TrainingError(f"{self.__class__.__name__} failed to train: {exc}") from exc

        self._state = ModelState.TRAINED
        logger.info(
            "%s fitted — train MSE %.6f, validation MSE %s",
            self.__class__.__name__,
            summary.train_loss,
            "n/a" if summary.validation_loss is None else f"{summary.validation_loss:.6f}",
        )
        return summary

    def predict_one(self, window: ArrayLike) -> float:
        """
        Predict the value following ``window``.

        Raises:
            NotTrainedError: Model is untrained or disposed.
            ShapeError:      ``len(window) != lookback``.
        """
        if self._state is not ModelState.TRAINED:
            raise NotTrainedError(
                f"Model is {self._state.value} — call fit() before predict_one()"
            )
        arr = np.asarray(window, dtype=np.float64)
        if arr.ndim != 1 or arr.shape[0] != self.lookback:
            raise ShapeError(
                f"Expected a window of length {self.lookback}, got shape {arr.shape}"
            )
        return float(self._predict_batch(arr.reshape(1, -1))[0])

    def dispose(self) -> None:
        """Release model resources.  Safe to call more than once."""
        if self._state is ModelState.TRAINED:
            self._release()
        self._state = ModelState.DISPOSED

    def get_model_info(self) -> Dict[str, Any]:
        """
        Return model metadata for logging / API responses.

        Returns:
            Dict with at least ``model_name`` and ``version`` keys.
        """
        return {
            "model_name": self.__class__.__name__,
            "version": "1.0",
            "lookback": self.lookback,
            "state": self._state.value,
        }

    # ── helpers ───────────────────────────────────────────────────────────

    def _as_dataset(self, windows: ArrayLike, targets: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
        X = np.asarray(windows, dtype=np.float64)
        y = np.asarray(targets, dtype=np.float64).ravel()
        if X.size == 0 or len(X) == 0:
            raise TrainingError("Cannot fit on an empty dataset")
        if X.ndim != 2 or X.shape[1] != self.lookback:
            raise ShapeError(
                f"windows must have shape (n, {self.lookback}), got {X.shape}"
            )
        if len(X) != len(y):
            raise TrainingError(
                f"windows ({len(X)}) and targets ({len(y)}) must have the same length"
            )
        if not (np.isfinite(X).all() and np.isfinite(y).all()):
            raise TrainingError("Dataset contains NaN or infinite values")
        return X, y

    def _summarise(
        self,
        X_train: np.ndarray,
        y_train: np.ndarray,
        X_val: np.ndarray,
        y_val: np.ndarray,
        epochs: int,
    ) -> TrainingSummary:
        train_pred = self._predict_batch(X_train)
        val_loss: Optional[float] = None
        val_mae: Optional[float] = None
        if len(X_val) > 0:
            val_pred = self._predict_batch(X_val)
            val_loss = float(mean_squared_error(y_val, val_pred))
            val_mae = float(mean_absolute_error(y_val, val_pred))
        return TrainingSummary(
            epochs=epochs,
            train_samples=len(X_train),
            validation_samples=len(X_val),
            train_loss=float(mean_squared_error(y_train, train_pred)),
            validation_loss=val_loss,
            validation_mae=val_mae,
        )
