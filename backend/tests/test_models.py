"""
tests/test_models.py
─────────────────────
ForecastModel contract: state machine, chronological hold-out, shape
checks and error wrapping — exercised through a recording test double
and the scikit-learn linear backend.  Also covers ForecastingFactory.
"""

from typing import List

import numpy as np
import pytest

from analytics.forecasting import (
    ForecastingFactory,
    ForecastModel,
    InvalidInputError,
    LinearForecastModel,
    ModelState,
    NotTrainedError,
    ShapeError,
    TrainingError,
    make_sequences,
)


class RecordingModel(ForecastModel):
    """Predicts the window mean and remembers what it was trained on."""

    def __init__(self, lookback: int = 3, fail_with: Exception = None) -> None:
        super().__init__(lookback)
        self.fail_with = fail_with
        self.trained_on: List[np.ndarray] = []
        self.releases = 0

    def _fit(self, X_train, y_train, X_val, y_val, epochs) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.trained_on.append(X_train.copy())

    def _predict_batch(self, X: np.ndarray) -> np.ndarray:
        return X.mean(axis=1)

    def _release(self) -> None:
        self.releases += 1


@pytest.fixture
def dataset():
    return make_sequences(np.linspace(0.0, 1.0, 13), lookback=3)


# ── state machine ─────────────────────────────────────────────────────────────


class TestLifecycle:
    def test_new_model_is_untrained(self) -> None:
        assert RecordingModel().state is ModelState.UNTRAINED

    def test_predict_before_fit_raises(self) -> None:
        with pytest.raises(NotTrainedError):
            RecordingModel().predict_one([0.1, 0.2, 0.3])

    def test_fit_moves_to_trained(self, dataset) -> None:
        model = RecordingModel()
        model.fit(*dataset, epochs=1)
        assert model.state is ModelState.TRAINED
        assert model.predict_one([0.0, 0.3, 0.6]) == pytest.approx(0.3)

    def test_dispose_blocks_prediction(self, dataset) -> None:
        model = RecordingModel()
        model.fit(*dataset, epochs=1)
        model.dispose()
        assert model.state is ModelState.DISPOSED
        assert model.releases == 1
        with pytest.raises(NotTrainedError):
            model.predict_one([0.1, 0.2, 0.3])

    def test_dispose_is_idempotent(self, dataset) -> None:
        model = RecordingModel()
        model.fit(*dataset, epochs=1)
        model.dispose()
        model.dispose()
        assert model.releases == 1

    def test_fit_after_dispose_raises(self, dataset) -> None:
        model = RecordingModel()
        model.dispose()
        with pytest.raises(NotTrainedError):
            model.fit(*dataset, epochs=1)

    def test_refit_releases_previous_state(self, dataset) -> None:
        model = RecordingModel()
        model.fit(*dataset, epochs=1)
        model.fit(*dataset, epochs=1)
        assert model.releases == 1
        assert len(model.trained_on) == 2
        assert model.is_trained


# ── hold-out split ────────────────────────────────────────────────────────────


class TestValidationSplit:
    def test_last_fraction_is_never_trained_on(self, dataset) -> None:
        X, y = dataset  # 10 windows
        model = RecordingModel()
        summary = model.fit(X, y, epochs=1, validation_fraction=0.2)

        np.testing.assert_array_equal(model.trained_on[0], X[:8])
        assert summary.train_samples == 8
        assert summary.validation_samples == 2
        assert summary.validation_loss is not None
        assert summary.validation_mae is not None

    def test_zero_fraction_trains_on_everything(self, dataset) -> None:
        X, y = dataset
        model = RecordingModel()
        summary = model.fit(X, y, epochs=1, validation_fraction=0.0)
        assert summary.train_samples == len(X)
        assert summary.validation_samples == 0
        assert summary.validation_loss is None

    def test_empty_training_split_raises(self) -> None:
        X, y = make_sequences([0.0, 0.5, 1.0, 0.2], lookback=3)  # one window
        with pytest.raises(TrainingError):
            RecordingModel().fit(X, y, epochs=1, validation_fraction=0.5)

    @pytest.mark.parametrize("fraction", [-0.1, 1.0, 1.5])
    def test_fraction_out_of_range_rejected(self, dataset, fraction) -> None:
        with pytest.raises(InvalidInputError):
            RecordingModel().fit(*dataset, epochs=1, validation_fraction=fraction)


# ── input validation ──────────────────────────────────────────────────────────


class TestValidation:
    def test_empty_dataset_raises_training_error(self) -> None:
        with pytest.raises(TrainingError):
            RecordingModel().fit(np.empty((0, 3)), np.empty(0), epochs=1)

    @pytest.mark.parametrize("epochs", [0, -5, 2.0])
    def test_bad_epochs_rejected(self, dataset, epochs) -> None:
        with pytest.raises(InvalidInputError):
            RecordingModel().fit(*dataset, epochs=epochs)

    def test_wrong_window_width_at_fit(self, dataset) -> None:
        with pytest.raises(ShapeError):
            RecordingModel(lookback=4).fit(*dataset, epochs=1)

    def test_mismatched_target_count(self, dataset) -> None:
        X, y = dataset
        with pytest.raises(TrainingError):
            RecordingModel().fit(X, y[:-1], epochs=1)

    def test_wrong_window_length_at_predict(self, dataset) -> None:
        model = RecordingModel()
        model.fit(*dataset, epochs=1)
        with pytest.raises(ShapeError):
            model.predict_one([0.1, 0.2])

    def test_backend_failure_wrapped(self, dataset) -> None:
        model = RecordingModel(fail_with=RuntimeError("out of memory"))
        with pytest.raises(TrainingError, match="out of memory"):
            model.fit(*dataset, epochs=1)
        assert model.state is ModelState.UNTRAINED

    def test_non_positive_lookback_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            RecordingModel(lookback=0)


# ── linear backend ────────────────────────────────────────────────────────────


class TestLinearForecastModel:
    def test_learns_linear_continuation(self) -> None:
        X, y = make_sequences(np.linspace(0.0, 1.0, 41), lookback=5)
        model = LinearForecastModel(lookback=5, alpha=1e-6)
        summary = model.fit(X, y, epochs=1)

        assert summary.train_loss < 1e-4
        # Next value after an evenly spaced window continues the step.
        assert model.predict_one([0.5, 0.525, 0.55, 0.575, 0.6]) == pytest.approx(0.625, abs=0.01)

    def test_predictions_are_deterministic(self) -> None:
        X, y = make_sequences(np.sin(np.linspace(0, 6, 50)) * 0.5 + 0.5, lookback=4)
        model = LinearForecastModel(lookback=4)
        model.fit(X, y, epochs=1)
        window = X[-1]
        assert model.predict_one(window) == model.predict_one(window)

    def test_model_info(self) -> None:
        info = LinearForecastModel(lookback=4, alpha=0.5).get_model_info()
        assert info["model_name"] == "LinearForecastModel"
        assert info["lookback"] == 4
        assert info["alpha"] == 0.5
        assert info["state"] == "untrained"


# ── factory ───────────────────────────────────────────────────────────────────


class TestForecastingFactory:
    def test_builtin_models_registered(self) -> None:
        assert {"lstm", "linear"} <= set(ForecastingFactory.list_available_models())

    def test_create_linear(self) -> None:
        model = ForecastingFactory.create_model("LINEAR", lookback=6)
        assert isinstance(model, LinearForecastModel)
        assert model.lookback == 6

    def test_unknown_model_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown model type"):
            ForecastingFactory.create_model("arima")

    def test_bad_kwargs_become_value_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid parameters"):
            ForecastingFactory.create_model("linear", lookback=3, units=10)

    def test_register_requires_forecast_model_subclass(self) -> None:
        with pytest.raises(TypeError):
            ForecastingFactory.register_model("bogus", dict)  # type: ignore[arg-type]

    def test_register_and_unregister(self) -> None:
        ForecastingFactory.register_model("recording", RecordingModel)
        try:
            assert "recording" in ForecastingFactory.list_available_models()
            with pytest.raises(ValueError, match="already registered"):
                ForecastingFactory.register_model("recording", RecordingModel)
            assert isinstance(ForecastingFactory.create_model("recording"), RecordingModel)
        finally:
            ForecastingFactory.unregister_model("recording")
        assert "recording" not in ForecastingFactory.list_available_models()
