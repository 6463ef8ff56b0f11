"""
app/api/v1/endpoints/forecast.py
──────────────────────────────────
Forecast endpoints.

Routes
------
GET  /api/v1/forecast/models          Names of the available model backends.
POST /api/v1/forecast/{model_type}    Train on the supplied history and
                                      return an N-day iterative forecast.

Every backend shares the ForecastRequest / ForecastResponse shapes, so the
frontend only needs to change the URL to switch models.

Design note
-----------
Model training is CPU-bound.  Training and rollout run on a thread-pool
executor so FastAPI's asyncio event loop is never blocked.  Each request
gets its own forecaster, disposed once the response is built.
"""

import asyncio
import dataclasses
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from analytics.forecasting import ForecastingFactory, IterativeForecaster
from app.api.dependencies import get_app_settings, get_training_executor
from core.config import Settings
from schemas.forecast import ForecastRequest, ForecastResponse, TrainingSummaryOut

logger = logging.getLogger(__name__)
router = APIRouter()


# ── helpers ───────────────────────────────────────────────────────────────────


def _model_kwargs(model_type: str, settings: Settings) -> Dict[str, Any]:
    """Backend-specific constructor arguments taken from settings."""
    if model_type == "lstm":
        return {
            "batch_size": settings.BATCH_SIZE,
            "learning_rate": settings.LEARNING_RATE,
            "random_state": settings.RANDOM_SEED,
        }
    if model_type == "linear":
        return {"alpha": settings.RIDGE_ALPHA}
    return {}


def _with_defaults(request: ForecastRequest, settings: Settings) -> ForecastRequest:
    """Fill omitted parameters from settings and check the history length."""
    defaults = {
        "lookback": settings.DEFAULT_LOOKBACK,
        "epochs": settings.DEFAULT_EPOCHS,
        "horizon": settings.DEFAULT_HORIZON,
        "validation_fraction": settings.VALIDATION_FRACTION,
    }
    resolved = request.model_copy(
        update={k: v for k, v in defaults.items() if getattr(request, k) is None}
    )
    if len(resolved.history) < resolved.lookback + 1:
        raise HTTPException(
            status_code=422,
            detail=f"history needs at least lookback + 1 = {resolved.lookback + 1} points, "
            f"got {len(resolved.history)}",
        )
    return resolved


# ── endpoints ─────────────────────────────────────────────────────────────────


@router.get("/models", response_model=List[str], summary="Available model backends")
def list_models() -> List[str]:
    return ForecastingFactory.list_available_models()


@router.post(
    "/{model_type}",
    response_model=ForecastResponse,
    summary="Train on a price history and forecast ahead",
)
async def create_forecast(
    model_type: str,
    request: ForecastRequest,
    settings: Settings = Depends(get_app_settings),
    executor: ThreadPoolExecutor = Depends(get_training_executor),
) -> ForecastResponse:
    """
    Train the selected backend on ``request.history`` and roll it forward.

    Args:
        model_type: Registered backend name (``lstm`` or ``linear``).
        request:    Symbol, price history and training / horizon parameters;
                    omitted parameters take the settings defaults.

    Returns:
        Dated forecast values plus the training loss summary.

    Raises:
        HTTPException 404: Unknown ``model_type``.
        HTTPException 422: Invalid or insufficient history, training failure.
        HTTPException 503: The backend library (TensorFlow) is not installed.
    """
    model_type = model_type.lower()
    if model_type not in ForecastingFactory.list_available_models():
        raise HTTPException(
            status_code=404,
            detail=f"Unknown model '{model_type}'. "
            f"Available: {', '.join(ForecastingFactory.list_available_models())}",
        )
    request = _with_defaults(request, settings)

    forecaster = IterativeForecaster(
        model_type=model_type,
        validation_fraction=request.validation_fraction,
        executor=executor,
        **_model_kwargs(model_type, settings),
    )
    loop = asyncio.get_running_loop()
    try:
        summary = await forecaster.train_async(request.history, request.epochs, request.lookback)
        points = await loop.run_in_executor(
            executor,
            functools.partial(
                forecaster.forecast, request.history, request.lookback, request.horizon
            ),
        )
        model_info = forecaster.get_model_info()
    except ImportError as exc:
        raise HTTPException(
            status_code=503,
            detail=f"'{model_type}' backend is not installed on this server. Use /forecast/linear instead.",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("%s forecast failed for %s", model_type, request.symbol)
        raise HTTPException(status_code=500, detail="Forecast computation failed") from exc
    finally:
        forecaster.dispose()

    logger.info(
        "%s forecast for %s: %d steps from %d points",
        model_type,
        request.symbol,
        len(points),
        len(request.history),
    )
    return ForecastResponse(
        symbol=request.symbol,
        model_type=model_type,
        data_points_used=len(request.history),
        forecast=points,
        training=TrainingSummaryOut(**dataclasses.asdict(summary)),
        model_info=model_info,
    )
