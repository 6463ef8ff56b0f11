"""
Pydantic schemas for forecast request / response.

Every model backend (``lstm``, ``linear``) shares identical I/O shapes so
the frontend only needs to change the URL to switch models.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.prices import ForecastPoint, PricePoint


def _normalise_symbol(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("symbol must not be empty")
    return v


class ForecastRequest(BaseModel):
    """
    Payload sent by the client to a forecast endpoint.

    The client supplies the full price history; the server does not fetch
    or cache market data.

    Attributes:
        symbol:              Ticker (e.g. ``AAPL``), echoed back only.
        history:             Daily price points, oldest → newest.
        lookback:            Window length fed to the model.
        epochs:              Training epochs.
        horizon:             Number of future days to forecast.
        validation_fraction: Chronological hold-out share during training.

    Omitted training / horizon parameters are filled from server settings
    by the endpoint, which also checks the history covers ``lookback + 1``.
    """

    symbol: str
    history: List[PricePoint] = Field(..., min_length=2)
    lookback: Optional[int] = Field(default=None, ge=1, le=120)
    epochs: Optional[int] = Field(default=None, ge=1, le=500)
    horizon: Optional[int] = Field(default=None, ge=1, le=365)
    validation_fraction: Optional[float] = Field(default=None, ge=0.0, lt=1.0)

    @field_validator("symbol")
    @classmethod
    def normalise_symbol(cls, v: str) -> str:
        return _normalise_symbol(v)


class TrainingSummaryOut(BaseModel):
    """Training losses, in normalised units."""

    epochs: int
    train_samples: int
    validation_samples: int
    train_loss: float
    validation_loss: Optional[float] = None
    validation_mae: Optional[float] = None


class ForecastResponse(BaseModel):
    """
    Forecast result returned by every forecast endpoint.

    Attributes:
        symbol:           Ticker the forecast was built for.
        model_type:       Backend that produced the forecast.
        data_points_used: History rows the model trained on.
        forecast:         One dated value per future day.
        training:         Loss summary of the training run.
        model_info:       Free-form model metadata dict.
    """

    symbol: str
    model_type: str
    data_points_used: int
    forecast: List[ForecastPoint]
    training: TrainingSummaryOut
    model_info: Dict[str, Any]
