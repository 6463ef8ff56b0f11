"""
analytics/forecasting — Normalisation, windowing, models and rollout.

Public API
----------
    from analytics.forecasting import IterativeForecaster
    from analytics.forecasting import ForecastModel, LSTMForecastModel, LinearForecastModel
    from analytics.forecasting import Scaler, normalize, denormalize, make_sequences
"""

from analytics.forecasting.base import ForecastModel, ModelState, TrainingSummary
from analytics.forecasting.errors import (
    ForecastingError,
    InsufficientDataError,
    InvalidInputError,
    NotTrainedError,
    ShapeError,
    TrainingError,
)
from analytics.forecasting.factory import ForecastingFactory
from analytics.forecasting.forecaster import FittedState, IterativeForecaster
from analytics.forecasting.linear import LinearForecastModel
from analytics.forecasting.lstm import LSTMForecastModel
from analytics.forecasting.scaler import Scaler, denormalize, normalize
from analytics.forecasting.sequences import make_sequences

__all__ = [
    "ForecastModel",
    "ModelState",
    "TrainingSummary",
    "ForecastingError",
    "InsufficientDataError",
    "InvalidInputError",
    "NotTrainedError",
    "ShapeError",
    "TrainingError",
    "ForecastingFactory",
    "FittedState",
    "IterativeForecaster",
    "LinearForecastModel",
    "LSTMForecastModel",
    "Scaler",
    "normalize",
    "denormalize",
    "make_sequences",
]
