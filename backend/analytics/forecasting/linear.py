"""
analytics/forecasting/linear.py
───────────────────────────────
Ridge-regression backend — no deep-learning dependency required.

Treats each lookback window as a feature vector and fits a linear map to
the next value.  Used as a fast sanity-check benchmark next to the LSTM,
and wherever TensorFlow is not installed.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np
from sklearn.linear_model import Ridge

from analytics.forecasting.base import ForecastModel

logger = logging.getLogger(__name__)


class LinearForecastModel(ForecastModel):
    """
    Closed-form linear window regressor.

    ``epochs`` is accepted for interface compatibility; a Ridge fit
    converges in a single pass.

    Args:
        lookback: Window length.
        alpha:    L2 regularisation strength.
    """

    def __init__(self, lookback: int = 10, alpha: float = 1e-3) -> None:
        super().__init__(lookback)
        self.alpha = alpha
        self._regressor: Optional[Ridge] = None

    def _fit(
        self,
        X_train: np.ndarray,
        y_train: np.ndarray,
        X_val: np.ndarray,
        y_val: np.ndarray,
        epochs: int,
    ) -> None:
        if epochs > 1:
            logger.debug("LinearForecastModel ignores epochs=%d (closed-form fit)", epochs)
        self._regressor = Ridge(alpha=self.alpha).fit(X_train, y_train)

    def _predict_batch(self, X: np.ndarray) -> np.ndarray:
        return np.asarray(self._regressor.predict(X), dtype=np.float64).ravel()

    def _release(self) -> None:
        self._regressor = None

    def get_model_info(self) -> Dict[str, Any]:
        info = super().get_model_info()
        info["alpha"] = self.alpha
        return info
