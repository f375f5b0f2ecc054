"""Classifier capability used by the activity pipeline."""

import abc
import math
import pathlib
from typing import Any, Dict, Mapping, Union

import joblib
import numpy as np

from activitypy.core import config, exceptions, models

logger = config.get_logger()


class AbstractClassifier(abc.ABC):
    """Abstract class defining the interface of an activity classifier.

    A classifier maps one feature vector to a probability per activity code. Any
    failure must be raised; the pipeline treats it as a skipped prediction.
    """

    @abc.abstractmethod
    def predict(self, features: np.ndarray) -> Dict[str, float]:
        """Predict activity probabilities for one feature vector.

        Args:
            features: The ordered feature vector.

        Returns:
            Mapping of activity code to probability.
        """
        pass


class EstimatorClassifier(AbstractClassifier):
    """Adapts a scikit-learn style estimator to the classifier interface.

    The estimator must implement `predict_proba` and expose its labels as
    `classes_`, which is the case for every scikit-learn classifier.
    """

    def __init__(self, estimator: Any) -> None:
        """Initialize the adapter.

        Args:
            estimator: A fitted estimator.

        Raises:
            ModelLoadError: If the estimator lacks `predict_proba` or `classes_`.
        """
        if not hasattr(estimator, "predict_proba") or not hasattr(
            estimator, "classes_"
        ):
            raise exceptions.ModelLoadError(
                f"{type(estimator).__name__} must implement predict_proba and be "
                "fitted (expose classes_)."
            )
        self.estimator = estimator

    def predict(self, features: np.ndarray) -> Dict[str, float]:
        """Run the estimator on a single feature vector.

        Args:
            features: The ordered feature vector.

        Returns:
            Mapping of activity code to probability.

        Raises:
            ClassifierError: If the estimator raises or its output does not match
                its classes.
        """
        try:
            probabilities = self.estimator.predict_proba(
                np.asarray(features, dtype=np.float64).reshape(1, -1)
            )[0]
        except Exception as exc_info:
            raise exceptions.ClassifierError(
                f"Inference failed: {exc_info}"
            ) from exc_info

        classes = list(self.estimator.classes_)
        if len(probabilities) != len(classes):
            raise exceptions.ClassifierError(
                f"Estimator returned {len(probabilities)} probabilities for "
                f"{len(classes)} classes."
            )
        return {
            str(code): float(probability)
            for code, probability in zip(classes, probabilities)
        }


def load_classifier(path: Union[pathlib.Path, str]) -> EstimatorClassifier:
    """Load a persisted estimator with joblib.

    Args:
        path: Path to the joblib file.

    Returns:
        The estimator wrapped as a classifier.

    Raises:
        ModelLoadError: If the file cannot be loaded or does not hold a usable
            estimator.
    """
    path = pathlib.Path(path)
    try:
        estimator = joblib.load(path)
    except Exception as exc_info:
        raise exceptions.ModelLoadError(
            f"Could not load classifier from {path}: {exc_info}"
        ) from exc_info
    logger.debug("Loaded %s from %s", type(estimator).__name__, path)
    return EstimatorClassifier(estimator)


def select_label(probabilities: Mapping[str, float]) -> str:
    """Choose the display name of the most probable activity.

    Args:
        probabilities: Mapping of activity code to probability.

    Returns:
        The display name of the activity with the highest probability. The unknown
        label is returned when the mapping is empty, a probability is not finite,
        several activities share the maximum or the winning code is not one of
        the known activities.
    """
    if not probabilities:
        return models.UNKNOWN_LABEL

    if not all(math.isfinite(value) for value in probabilities.values()):
        return models.UNKNOWN_LABEL

    best_code, best_probability = max(probabilities.items(), key=lambda item: item[1])

    tied = [code for code, value in probabilities.items() if value == best_probability]
    if len(tied) > 1:
        logger.warning("Ambiguous prediction, tied activities: %s", tied)
        return models.UNKNOWN_LABEL

    if best_code not in models.ACTIVITY_LABELS:
        logger.warning("Classifier returned unknown activity code: %s", best_code)
        return models.UNKNOWN_LABEL
    return models.ACTIVITY_LABELS[best_code]
