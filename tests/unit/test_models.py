"""Test the internal data model."""

import math

import pydantic
import pytest

from activitypy.core import models


def test_activity_state_default_is_unknown() -> None:
    """Test the sentinel state published before any prediction."""
    state = models.ActivityState()

    assert state.label == models.UNKNOWN_LABEL
    assert state.probabilities == {}


def test_activity_state_is_immutable() -> None:
    """Test that a published state cannot be modified."""
    state = models.ActivityState(label="Walking", probabilities={"wlk": 1.0})

    with pytest.raises(pydantic.ValidationError):
        state.label = "Jogging"  # type: ignore[misc]


@pytest.mark.parametrize("probability", [-0.1, 1.5])
def test_activity_state_probability_out_of_range(probability: float) -> None:
    """Test error on probabilities outside of [0, 1]."""
    with pytest.raises(pydantic.ValidationError):
        models.ActivityState(probabilities={"wlk": probability})


def test_activity_state_allows_nan() -> None:
    """Test that non-finite probabilities are kept as returned."""
    state = models.ActivityState(probabilities={"wlk": math.nan})

    assert math.isnan(state.probabilities["wlk"])


def test_ranked_probabilities() -> None:
    """Test display names sorted from most to least likely."""
    state = models.ActivityState(
        label="Walking",
        probabilities={"sit": 0.1, "wlk": 0.7, "jog": 0.2, "swim": math.nan},
    )

    ranked = state.ranked_probabilities()

    assert [name for name, _ in ranked] == ["Walking", "Jogging", "Sitting", "swim"]


def test_sensor_reading_invalid_kind() -> None:
    """Test error on an unknown sensor kind."""
    with pytest.raises(pydantic.ValidationError):
        models.SensorReading(kind="magnetometer", x=0, y=0, z=0)  # type: ignore[arg-type]
