"""Bandwidth estimator interface."""

from abc import ABC, abstractmethod


class IBandwidthEstimator(ABC):
    """Smoothed estimate of download bandwidth in bits/ms."""

    @abstractmethod
    def add_measurement(self, measurement: float) -> None:
        """Fold a new bandwidth measurement into the average.

        Args:
            measurement: Bandwidth in bits/ms, strictly positive
        """
        pass

    @abstractmethod
    def get_average(self) -> float:
        """Get the current average.

        Returns:
            Average in bits/ms, or -1.0 if nothing has been measured
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Discard all measurements."""
        pass
