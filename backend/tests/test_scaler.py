"""
tests/test_scaler.py
─────────────────────
Min-max Scaler: fitting, normalisation, and the inverse transform.
"""

import numpy as np
import pytest

from analytics.forecasting import InvalidInputError, Scaler, denormalize, normalize


class TestFit:
    def test_min_and_max_taken_from_series(self) -> None:
        scaler = Scaler.fit([5.0, 2.0, 9.0, 4.0])
        assert scaler.min == 2.0
        assert scaler.max == 9.0

    def test_empty_series_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            Scaler.fit([])

    def test_flat_series_rejected(self) -> None:
        """A constant history would divide by zero — must fail at fit time."""
        with pytest.raises(InvalidInputError, match="Degenerate"):
            Scaler.fit([3.0, 3.0, 3.0])

    def test_nan_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            Scaler.fit([1.0, float("nan"), 2.0])

    def test_direct_construction_validates_range(self) -> None:
        with pytest.raises(InvalidInputError):
            Scaler(min=5.0, max=5.0)

    def test_range_overflowing_to_infinity_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="overflows"):
            Scaler.fit([-1e308, 0.0, 1e308])

    def test_scaler_is_immutable(self) -> None:
        scaler = Scaler.fit([1.0, 2.0])
        with pytest.raises(AttributeError):
            scaler.min = 0.0  # type: ignore[misc]


class TestTransform:
    def test_normalize_maps_range_onto_unit_interval(self) -> None:
        scaler = Scaler(min=10.0, max=20.0)
        np.testing.assert_allclose(normalize([10.0, 15.0, 20.0], scaler), [0.0, 0.5, 1.0])

    def test_values_outside_fit_range_extrapolate(self) -> None:
        scaler = Scaler(min=10.0, max=20.0)
        np.testing.assert_allclose(normalize([25.0, 5.0], scaler), [1.5, -0.5])

    def test_denormalize_inverts_normalize(self) -> None:
        series = np.array([101.25, 99.5, 180.75, 0.01, 1234.5678])
        scaler = Scaler.fit(series)
        restored = denormalize(normalize(series, scaler), scaler)
        np.testing.assert_allclose(restored, series, rtol=1e-9)

    def test_two_dimensional_input_rejected(self) -> None:
        scaler = Scaler(min=0.0, max=1.0)
        with pytest.raises(InvalidInputError):
            normalize([[1.0, 2.0]], scaler)
