"""
analytics/forecasting/errors.py
───────────────────────────────
Exception taxonomy for the forecasting and indicator pipeline.

Every error derives from ``ValueError`` (through ``ForecastingError``) so
callers that already treat ``ValueError`` as "bad input" — the API layer
maps it to HTTP 422 — keep working without special cases.
"""


class ForecastingError(ValueError):
    """Base class for all pipeline errors."""


class InvalidInputError(ForecastingError):
    """Empty, malformed, or degenerate (flat) input series."""


class InsufficientDataError(ForecastingError):
    """History is too short for the requested lookback window."""


class TrainingError(ForecastingError):
    """Dataset is empty or the model backend failed while fitting."""


class NotTrainedError(ForecastingError):
    """Prediction requested before training, or after dispose()."""


class ShapeError(ForecastingError):
    """Input window length does not match the length used at fit time."""
