"""Streaming activity classification from accelerometer and gyroscope readings."""

import math
import threading
from typing import Callable, Dict, List, Mapping, Optional, Union

import numpy as np

from activitypy.core import config, models
from activitypy.processing import buffers, classifiers, features, inference

logger = config.get_logger()

ClassifierLike = Union[
    classifiers.AbstractClassifier, Callable[[np.ndarray], Mapping[str, float]]
]
Subscriber = Callable[[models.ActivityState], None]


class ActivityPipeline:
    """Turns a live stream of sensor readings into published activity states.

    Every reading is appended to the rolling buffers of its channels (an
    accelerometer reading also feeds the derived norm channel). After every
    append, from either sensor, the pipeline checks whether all channel buffers
    are full; if so it extracts the feature vector, runs the classifier and
    publishes the result. Prediction cadence therefore follows the combined
    sensor rate rather than a timer.

    A failed prediction leaves the previously published state in place. The
    append-check-predict-publish sequence is guarded by a single lock, so
    readings may be delivered from independent threads.

    With `background_inference` enabled, the classifier runs on a worker thread
    fed through a single latest-wins slot, so slow inference never delays
    ingestion; feature vectors that are superseded before inference starts are
    dropped.
    """

    def __init__(
        self,
        classifier: ClassifierLike,
        window_size: int = config.DEFAULT_WINDOW_SIZE,
        *,
        background_inference: bool = False,
    ) -> None:
        """Initialize the pipeline in the warming up state.

        Args:
            classifier: Either an AbstractClassifier or a plain function mapping a
                feature vector to activity probabilities.
            window_size: Number of samples per channel window. Must be >= 1.
            background_inference: If true, run the classifier on a background
                worker instead of on the ingesting thread.

        Raises:
            ValueError: If window_size is smaller than 1.
        """
        if window_size < 1:
            raise ValueError("Window size must be at least 1.")

        if isinstance(classifier, classifiers.AbstractClassifier):
            self._predict: Callable[[np.ndarray], Mapping[str, float]] = (
                classifier.predict
            )
        else:
            self._predict = classifier

        self.window_size = window_size
        self._extractor = features.FeatureExtractor(models.CHANNELS)
        self._buffers: Dict[models.Channel, buffers.SampleBuffer] = {
            channel: buffers.SampleBuffer(window_size) for channel in models.CHANNELS
        }
        self._lock = threading.RLock()
        self._state = models.ActivityState()
        self._status = models.PipelineStatus.warming_up
        self._subscribers: List[Subscriber] = []
        self.last_features: Optional[np.ndarray] = None
        self.predictions = 0
        self.failures = 0
        self.rejected = 0

        self._worker: Optional[inference.InferenceWorker[np.ndarray]] = None
        if background_inference:
            self._worker = inference.InferenceWorker(self._predict_and_publish)

    @property
    def state(self) -> models.ActivityState:
        """The most recently published activity state."""
        with self._lock:
            return self._state

    @property
    def status(self) -> models.PipelineStatus:
        """Whether a prediction has been published yet."""
        with self._lock:
            return self._status

    def subscribe(self, callback: Subscriber) -> None:
        """Register a callback invoked with every newly published state."""
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        """Remove a previously registered callback."""
        with self._lock:
            self._subscribers.remove(callback)

    def windows(self) -> Dict[models.Channel, np.ndarray]:
        """Snapshot of every channel buffer, oldest sample first."""
        with self._lock:
            return {
                channel: buffer.snapshot() for channel, buffer in self._buffers.items()
            }

    def is_window_full(self) -> bool:
        """True when every channel buffer holds a full window."""
        with self._lock:
            return all(buffer.is_full() for buffer in self._buffers.values())

    def ingest(self, reading: models.SensorReading) -> None:
        """Dispatch a reading to the handler of its sensor kind."""
        if reading.kind == models.SensorKind.acceleration:
            self.on_acceleration(reading.x, reading.y, reading.z)
        else:
            self.on_rotation_rate(reading.x, reading.y, reading.z)

    def on_acceleration(self, x: float, y: float, z: float) -> None:
        """Ingest an accelerometer reading and its derived norm.

        Readings with a non-finite component or norm are dropped with a warning so
        that every channel stays aligned.
        """
        norm = _norm(x, y, z)
        if not _is_finite(x, y, z, norm):
            self._reject(models.SensorKind.acceleration, x, y, z)
            return
        with self._lock:
            self._buffers[models.Channel.accel_x].append(x)
            self._buffers[models.Channel.accel_y].append(y)
            self._buffers[models.Channel.accel_z].append(z)
            self._buffers[models.Channel.accel_norm].append(norm)
            self._maybe_predict()

    def on_rotation_rate(self, x: float, y: float, z: float) -> None:
        """Ingest a gyroscope reading, dropping it if a component is not finite."""
        if not _is_finite(x, y, z):
            self._reject(models.SensorKind.rotation_rate, x, y, z)
            return
        with self._lock:
            self._buffers[models.Channel.gyro_x].append(x)
            self._buffers[models.Channel.gyro_y].append(y)
            self._buffers[models.Channel.gyro_z].append(z)
            self._maybe_predict()

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for background inference to settle; a no-op without a worker."""
        if self._worker is None:
            return True
        return self._worker.drain(timeout)

    def close(self) -> None:
        """Stop the background worker, if any."""
        if self._worker is not None:
            self._worker.close()

    def __enter__(self) -> "ActivityPipeline":
        """Use the pipeline as a context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Stop the background worker on exit."""
        self.close()

    def _maybe_predict(self) -> None:
        if not all(buffer.is_full() for buffer in self._buffers.values()):
            return

        with np.errstate(over="ignore", invalid="ignore"):
            feature_vector = self._extractor.compute(
                {
                    channel: buffer.snapshot()
                    for channel, buffer in self._buffers.items()
                }
            )
        assert feature_vector.shape == (self._extractor.vector_length,)
        self.last_features = feature_vector
        if not np.isfinite(feature_vector).all():
            self.failures += 1
            logger.warning(
                "Window statistics overflowed, keeping the last published state."
            )
            return

        if self._worker is not None:
            self._worker.submit(feature_vector)
        else:
            self._predict_and_publish(feature_vector)

    def _predict_and_publish(self, feature_vector: np.ndarray) -> None:
        try:
            probabilities = dict(self._predict(feature_vector))
            state = models.ActivityState(
                label=classifiers.select_label(probabilities),
                probabilities=probabilities,
            )
        except Exception:
            with self._lock:
                self.failures += 1
            logger.exception("Prediction failed, keeping the last published state.")
            return
        self._publish(state)

    def _publish(self, state: models.ActivityState) -> None:
        with self._lock:
            self._state = state
            self.predictions += 1
            if self._status == models.PipelineStatus.warming_up:
                self._status = models.PipelineStatus.ready
                logger.info("First full window classified as %s.", state.label)
            logger.debug(
                "Published %s (prediction %d).", state.label, self.predictions
            )
            for callback in list(self._subscribers):
                try:
                    callback(state)
                except Exception:
                    logger.exception("Activity state subscriber failed.")

    def _reject(self, kind: models.SensorKind, x: float, y: float, z: float) -> None:
        with self._lock:
            self.rejected += 1
        logger.warning(
            "Dropped non-finite %s reading (%s, %s, %s).", kind.value, x, y, z
        )


def _norm(x: float, y: float, z: float) -> float:
    try:
        return math.hypot(x, y, z)
    except OverflowError:
        return math.inf


def _is_finite(*values: float) -> bool:
    return all(math.isfinite(value) for value in values)
