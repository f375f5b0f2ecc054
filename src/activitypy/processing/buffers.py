"""Fixed capacity rolling storage for a single channel."""

import collections
from typing import Deque

import numpy as np


class SampleBuffer:
    """Append-only sliding window over the most recent samples of a channel.

    The buffer grows until it holds `capacity` samples. From then on every append
    evicts the oldest sample first, so the length never exceeds the capacity and
    samples are always kept in chronological order.
    """

    def __init__(self, capacity: int) -> None:
        """Initialize an empty buffer.

        Args:
            capacity: The window size, the number of samples held once full.

        Raises:
            ValueError: If the capacity is smaller than one.
        """
        if capacity < 1:
            raise ValueError("Buffer capacity must be at least 1.")
        self._samples: Deque[float] = collections.deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """The configured window size."""
        return self._samples.maxlen  # type: ignore[return-value]

    def __len__(self) -> int:
        """Number of samples currently held."""
        return len(self._samples)

    def append(self, value: float) -> None:
        """Add a sample as the newest value, evicting the oldest one when full."""
        self._samples.append(float(value))

    def is_full(self) -> bool:
        """True when the buffer holds exactly `capacity` samples."""
        return len(self._samples) == self.capacity

    def snapshot(self) -> np.ndarray:
        """Copy of the current contents, oldest sample first.

        Callers are expected to check `is_full` first; a partially filled buffer
        returns the shorter sequence.
        """
        return np.fromiter(self._samples, dtype=np.float64, count=len(self._samples))

    def clear(self) -> None:
        """Drop all samples."""
        self._samples.clear()
