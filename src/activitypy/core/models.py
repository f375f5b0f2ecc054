"""Internal data model."""

import enum
import math
from typing import Dict, List, Optional, Tuple

import pydantic
from pydantic import BaseModel, field_validator

UNKNOWN_LABEL = "Unknown"

ACTIVITY_LABELS: Dict[str, str] = {
    "dws": "Downstairs",
    "ups": "Upstairs",
    "sit": "Sitting",
    "std": "Standing",
    "wlk": "Walking",
    "jog": "Jogging",
}


class SensorKind(str, enum.Enum):
    """The source of a sensor reading."""

    acceleration = "acceleration"
    rotation_rate = "rotation_rate"


class Channel(str, enum.Enum):
    """A scalar time series tracked by the pipeline."""

    accel_x = "accel_x"
    accel_y = "accel_y"
    accel_z = "accel_z"
    accel_norm = "accel_norm"
    gyro_x = "gyro_x"
    gyro_y = "gyro_y"
    gyro_z = "gyro_z"


# Order is the layout of the feature vector expected by the classifier.
CHANNELS: Tuple[Channel, ...] = (
    Channel.accel_x,
    Channel.accel_y,
    Channel.accel_z,
    Channel.accel_norm,
    Channel.gyro_x,
    Channel.gyro_y,
    Channel.gyro_z,
)


class PipelineStatus(str, enum.Enum):
    """Lifecycle of an activity pipeline."""

    warming_up = "WARMING_UP"
    ready = "READY"


class SensorReading(BaseModel):
    """A single 3-axis reading delivered by the accelerometer or gyroscope.

    The timestamp is carried along for replay and reporting purposes only; the
    pipeline consumes the three scalar components.
    """

    kind: SensorKind
    x: float
    y: float
    z: float
    timestamp: Optional[float] = None


class ActivityState(BaseModel):
    """The most recently published classification result.

    Instances are immutable; the pipeline replaces its state wholesale on every
    successful prediction.
    """

    label: str = UNKNOWN_LABEL
    probabilities: Dict[str, float] = pydantic.Field(default_factory=dict)

    class Config:
        """Config to make published states immutable."""

        frozen = True

    @field_validator("probabilities")
    def validate_probabilities(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Validate that every finite probability lies within [0, 1].

        Non-finite values are kept as returned by the classifier; they make the
        label selection fall back to the unknown label instead.

        Args:
            cls: The class.
            v: The label to probability mapping to validate.

        Returns:
            v: The mapping if it is valid.

        Raises:
            ValueError: If a finite probability lies outside of [0, 1].
        """
        for code, probability in v.items():
            if math.isfinite(probability) and not 0.0 <= probability <= 1.0:
                raise ValueError(
                    f"Probability for '{code}' must be within [0, 1], got {probability}"
                )
        return v

    def ranked_probabilities(self) -> List[Tuple[str, float]]:
        """Probabilities keyed by display name, most likely activity first."""
        ranked = sorted(
            self.probabilities.items(),
            key=lambda item: item[1] if math.isfinite(item[1]) else -math.inf,
            reverse=True,
        )
        return [(ACTIVITY_LABELS.get(code, code), value) for code, value in ranked]
