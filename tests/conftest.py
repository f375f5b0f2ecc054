"""Fixtures used by pytest."""

import pathlib
from typing import Callable, Dict, List, Optional

import joblib
import numpy as np
import polars as pl
import pytest
from sklearn import linear_model

from activitypy.core import models
from activitypy.processing import classifiers, features


class StubClassifier(classifiers.AbstractClassifier):
    """Deterministic classifier that records every feature vector it receives."""

    def __init__(self, probabilities: Optional[Dict[str, float]] = None) -> None:
        """Initialize with the probabilities to return."""
        self.probabilities = (
            probabilities
            if probabilities is not None
            else {"sit": 0.1, "wlk": 0.7, "jog": 0.2}
        )
        self.calls: List[np.ndarray] = []
        self.fail = False

    def predict(self, features: np.ndarray) -> Dict[str, float]:
        """Return the configured probabilities, or raise when failing."""
        self.calls.append(features)
        if self.fail:
            raise RuntimeError("model unavailable")
        return dict(self.probabilities)


@pytest.fixture
def stub_classifier() -> StubClassifier:
    """A stub classifier predicting 'Walking'."""
    return StubClassifier()


@pytest.fixture
def write_recording(tmp_path: pathlib.Path) -> Callable[..., pathlib.Path]:
    """Factory writing an interleaved accelerometer and gyroscope recording."""

    def _write(
        n_readings: int = 20,
        name: str = "recording.csv",
        accel: tuple = (1.0, 0.0, 0.0),
        gyro: tuple = (0.0, 0.0, 0.0),
    ) -> pathlib.Path:
        time = np.arange(n_readings) / 50
        data = pl.concat(
            [
                pl.DataFrame(
                    {
                        "time": time,
                        "sensor": ["accelerometer"] * n_readings,
                        "x": [accel[0]] * n_readings,
                        "y": [accel[1]] * n_readings,
                        "z": [accel[2]] * n_readings,
                    }
                ),
                pl.DataFrame(
                    {
                        "time": time,
                        "sensor": ["gyroscope"] * n_readings,
                        "x": [gyro[0]] * n_readings,
                        "y": [gyro[1]] * n_readings,
                        "z": [gyro[2]] * n_readings,
                    }
                ),
            ]
        )
        path = tmp_path / name
        if path.suffix == ".parquet":
            data.write_parquet(path)
        else:
            data.write_csv(path)
        return path

    return _write


@pytest.fixture
def fitted_estimator() -> linear_model.LogisticRegression:
    """A logistic regression fitted on synthetic feature vectors of every activity."""
    rng = np.random.default_rng(0)
    codes = list(models.ACTIVITY_LABELS)
    n_features = len(features.FEATURE_NAMES)
    X = np.concatenate(
        [rng.normal(loc=index, size=(20, n_features)) for index in range(len(codes))]
    )
    y = np.repeat(codes, 20)
    return linear_model.LogisticRegression(max_iter=1000).fit(X, y)


@pytest.fixture
def model_path(
    tmp_path: pathlib.Path, fitted_estimator: linear_model.LogisticRegression
) -> pathlib.Path:
    """The fitted estimator persisted with joblib."""
    path = tmp_path / "model.joblib"
    joblib.dump(fitted_estimator, path)
    return path
