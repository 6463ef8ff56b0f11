"""
app/api/v1/router.py
────────────────────
Aggregates every v1 endpoint router under one ``api_router``.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import forecast, indicators

api_router = APIRouter()
api_router.include_router(forecast.router, prefix="/forecast", tags=["forecast"])
api_router.include_router(indicators.router, prefix="/indicators", tags=["indicators"])
