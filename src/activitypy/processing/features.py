"""Compute the window statistics that make up the classifier's feature vector."""

from typing import List, Mapping, Sequence, Tuple

import numpy as np

from activitypy.core import models

STATISTICS: Tuple[str, ...] = ("last", "mean", "std", "median")

FEATURES_PER_CHANNEL = len(STATISTICS)


def summarize_window(window: Sequence[float]) -> np.ndarray:
    """Reduce one channel window to its four summary statistics.

    The statistics are, in order: the newest sample, the arithmetic mean, the
    population standard deviation and the median. The median is the element at
    index `len(window) // 2` of the sorted window, i.e. the upper middle element
    for even window sizes. The model was trained on features computed this way,
    so this must not be replaced by the average of the two middle elements.

    Args:
        window: The samples of one channel, oldest first.

    Returns:
        An array of length 4 containing last, mean, std and median.

    Raises:
        ValueError: If the window is empty.
    """
    values = np.asarray(window, dtype=np.float64)
    if values.size == 0:
        raise ValueError("Cannot summarize an empty window.")

    mean = values.sum() / values.size
    std = np.sqrt(np.sum((values - mean) ** 2) / values.size)
    median = np.sort(values)[values.size // 2]

    return np.array([values[-1], mean, std, median], dtype=np.float64)


def feature_names(
    channels: Sequence[models.Channel] = models.CHANNELS,
) -> List[str]:
    """Names of the feature vector entries, e.g. 'accel_x_mean'."""
    return [
        f"{channel.value}_{statistic}"
        for channel in channels
        for statistic in STATISTICS
    ]


FEATURE_NAMES = feature_names()


class FeatureExtractor:
    """Assembles per-channel statistics into a single ordered feature vector.

    Entry `[4 * k : 4 * k + 4]` of the vector always holds the statistics of the
    k-th channel. Reordering the channels silently produces wrong predictions, so
    the channel order is fixed at construction.
    """

    def __init__(self, channels: Sequence[models.Channel] = models.CHANNELS) -> None:
        """Initialize the extractor.

        Args:
            channels: The channels in feature vector order.

        Raises:
            ValueError: If no channels or duplicate channels are given.
        """
        if not channels:
            raise ValueError("At least one channel is required.")
        if len(set(channels)) != len(channels):
            raise ValueError("Channels must be unique.")
        self.channels: Tuple[models.Channel, ...] = tuple(channels)

    @property
    def vector_length(self) -> int:
        """Length of the produced feature vector."""
        return FEATURES_PER_CHANNEL * len(self.channels)

    def compute(self, windows: Mapping[models.Channel, Sequence[float]]) -> np.ndarray:
        """Compute the feature vector for the current windows.

        Args:
            windows: The current window of every channel, oldest sample first.

        Returns:
            The concatenated [last, mean, std, median] statistics of each channel,
            in channel order.

        Raises:
            KeyError: If a channel's window is missing.
            ValueError: If a window is empty.
        """
        return np.concatenate(
            [summarize_window(windows[channel]) for channel in self.channels]
        )
