"""
analytics — Forecasting pipeline and technical indicators.

Sub-packages / modules
----------------------
    analytics.forecasting   Scaler, windowing, models, iterative forecaster.
    analytics.indicators    Moving averages, RSI and the cached engine.
"""
