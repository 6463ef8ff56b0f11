"""
analytics/forecasting/lstm.py
─────────────────────────────
LSTM neural network backend for next-value prediction.

Architecture
------------
Input (lookback, 1)
  → LSTM(50, return_sequences=True) → Dropout(0.2)
  → LSTM(50) → Dropout(0.2)
  → Dense(25) → Dense(1)
  → next normalised price

Compiled with Adam (lr=0.001), MSE loss and an MAE metric.  Training
progress is logged every ``log_every`` epochs.

Requires
--------
    pip install tensorflow>=2.15.0
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Dict, Optional

import numpy as np

from analytics.forecasting.base import ForecastModel

logger = logging.getLogger(__name__)

# Optional import — graceful degradation if TF not installed.
try:
    import tensorflow as tf
    from tensorflow.keras import layers

    _TF_AVAILABLE = True
except ImportError:
    _TF_AVAILABLE = False
    warnings.warn(
        "TensorFlow not installed — LSTMForecastModel is unavailable. "
        "Install with: pip install tensorflow",
        stacklevel=2,
    )


class LSTMForecastModel(ForecastModel):
    """
    Stacked-LSTM sequence-to-one regressor.

    Args:
        lookback:      Number of time steps fed into the LSTM.
        units:         Hidden units of each LSTM layer.
        dropout:       Dropout rate after each LSTM layer.
        batch_size:    Mini-batch size during training.
        learning_rate: Adam learning rate.
        random_state:  Seed for reproducibility.
        log_every:     Log the epoch loss every N epochs.

    Raises:
        ImportError: If TensorFlow is not installed when instantiated.
    """

    def __init__(
        self,
        lookback: int = 10,
        units: int = 50,
        dropout: float = 0.2,
        batch_size: int = 32,
        learning_rate: float = 0.001,
        random_state: int = 42,
        log_every: int = 10,
    ) -> None:
        if not _TF_AVAILABLE:
            raise ImportError(
                "TensorFlow is required for LSTMForecastModel. "
                "Install with: pip install tensorflow"
            )
        super().__init__(lookback)

        self.units = units
        self.dropout = dropout
        self.batch_size = batch_size
        self.learning_rate = learning_rate
        self.random_state = random_state
        self.log_every = log_every

        self.model: Optional[tf.keras.Model] = None

        tf.random.set_seed(random_state)
        np.random.seed(random_state)

    # ── internal helpers ──────────────────────────────────────────────────

    def _build_model(self) -> tf.keras.Model:
        """Construct and compile the Keras model."""
        model = tf.keras.Sequential(
            [
                layers.Input(shape=(self.lookback, 1)),
                layers.LSTM(self.units, return_sequences=True),
                layers.Dropout(self.dropout),
                layers.LSTM(self.units),
                layers.Dropout(self.dropout),
                layers.Dense(25),
                layers.Dense(1),
            ],
            name="lstm_price_forecaster",
        )
        model.compile(
            optimizer=tf.keras.optimizers.Adam(learning_rate=self.learning_rate),
            loss="mse",
            metrics=["mae"],
        )
        return model

    def _progress_callback(self) -> tf.keras.callbacks.Callback:
        def _on_epoch_end(epoch: int, logs: Optional[Dict[str, float]] = None) -> None:
            if epoch % self.log_every == 0:
                loss = (logs or {}).get("loss", float("nan"))
                logger.info("Epoch %d: loss = %.4f", epoch, loss)

        return tf.keras.callbacks.LambdaCallback(on_epoch_end=_on_epoch_end)

    @staticmethod
    def _to_tensor_shape(X: np.ndarray) -> np.ndarray:
        # Keras LSTMs expect (samples, timesteps, features)
        return X.reshape(X.shape[0], X.shape[1], 1)

    # ── backend hooks ─────────────────────────────────────────────────────

    def _fit(
        self,
        X_train: np.ndarray,
        y_train: np.ndarray,
        X_val: np.ndarray,
        y_val: np.ndarray,
        epochs: int,
    ) -> None:
        self.model = self._build_model()
        validation_data = (
            (self._to_tensor_shape(X_val), y_val.reshape(-1, 1)) if len(X_val) > 0 else None
        )
        self.model.fit(
            self._to_tensor_shape(X_train),
            y_train.reshape(-1, 1),
            epochs=epochs,
            batch_size=min(self.batch_size, len(X_train)),
            validation_data=validation_data,
            callbacks=[self._progress_callback()],
            verbose=0,
        )

    def _predict_batch(self, X: np.ndarray) -> np.ndarray:
        return self.model.predict(self._to_tensor_shape(X), verbose=0).ravel()

    def _release(self) -> None:
        self.model = None

    def get_model_info(self) -> Dict[str, Any]:
        """Return LSTM model metadata."""
        info = super().get_model_info()
        info.update(
            {
                "units": self.units,
                "dropout": self.dropout,
                "batch_size": self.batch_size,
                "learning_rate": self.learning_rate,
            }
        )
        return info
