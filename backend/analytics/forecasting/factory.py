"""
analytics/forecasting/factory.py
────────────────────────────────
Model selection for the forecasting pipeline.

Usage
-----
    from analytics.forecasting.factory import ForecastingFactory

    model = ForecastingFactory.create_model("lstm", lookback=10)

    # Or register a custom backend
    ForecastingFactory.register_model("custom", CustomForecastModel)
"""

import logging
from typing import Any, Dict, List, Type

from analytics.forecasting.base import ForecastModel
from analytics.forecasting.linear import LinearForecastModel
from analytics.forecasting.lstm import LSTMForecastModel

logger = logging.getLogger(__name__)


class ForecastingFactory:
    """
    Registry of ForecastModel implementations keyed by short name.
    """

    _models: Dict[str, Type[ForecastModel]] = {
        "lstm": LSTMForecastModel,
        "linear": LinearForecastModel,
    }

    @classmethod
    def create_model(cls, model_type: str = "lstm", **kwargs: Any) -> ForecastModel:
        """
        Create a model instance.

        Args:
            model_type: Registered model name (e.g. ``"lstm"``, ``"linear"``).
            **kwargs:   Passed to the model's ``__init__``.

        Returns:
            An untrained ForecastModel.

        Raises:
            ValueError:  If ``model_type`` is unknown or kwargs are invalid.
            ImportError: If the backend library is not installed.
        """
        model_type = model_type.lower()

        if model_type not in cls._models:
            available = ", ".join(cls._models.keys())
            raise ValueError(
                f"Unknown model type: '{model_type}'. "
                f"Available models: {available}"
            )

        model_class = cls._models[model_type]
        logger.debug("Creating %s model with params: %s", model_type, kwargs)

        try:
            return model_class(**kwargs)
        except TypeError as e:
            raise ValueError(f"Invalid parameters for {model_type}: {e}") from e

    @classmethod
    def register_model(cls, name: str, model_class: Type[ForecastModel]) -> None:
        """
        Register a new model class under ``name``.

        Raises:
            TypeError:  If ``model_class`` does not inherit from ForecastModel.
            ValueError: If ``name`` is already registered.
        """
        if not issubclass(model_class, ForecastModel):
            raise TypeError(f"{model_class.__name__} must inherit from ForecastModel")

        name = name.lower()
        if name in cls._models:
            raise ValueError(
                f"Model '{name}' is already registered. "
                f"Use a different name or unregister the existing model."
            )

        cls._models[name] = model_class
        logger.info("Registered new forecasting model: %s", name)

    @classmethod
    def unregister_model(cls, name: str) -> None:
        """Remove a registered model; unknown names are ignored."""
        cls._models.pop(name.lower(), None)

    @classmethod
    def list_available_models(cls) -> List[str]:
        return list(cls._models.keys())
