"""Quality classifier interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from netquality.interfaces.listener import IQualityChangeListener
    from netquality.quality import ConnectionQuality


class IQualityClassifier(ABC):
    """Classifies download bandwidth into debounced quality tiers."""

    @abstractmethod
    def add_bandwidth(self, bytes_received: int, time_in_ms: int) -> None:
        """Ingest one (bytes, elapsed milliseconds) sample.

        Args:
            bytes_received: Bytes received during the interval
            time_in_ms: Interval length in milliseconds

        Degenerate samples are ignored silently.
        """
        pass

    @abstractmethod
    def get_current_bandwidth_quality(self) -> "ConnectionQuality":
        """Get the tier of the current moving average (not debounced).

        Returns:
            ConnectionQuality, UNKNOWN when no average exists
        """
        pass

    @abstractmethod
    def get_download_kbits_per_second(self) -> float:
        """Get the raw moving average.

        Returns:
            Average in kbps, or -1.0 if none recorded
        """
        pass

    @abstractmethod
    def register(self, listener: "IQualityChangeListener") -> "ConnectionQuality":
        """Add a listener.

        Returns:
            The committed tier at registration time
        """
        pass

    @abstractmethod
    def remove(self, listener: "IQualityChangeListener") -> None:
        """Remove a listener (no-op if not registered)."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Clear the average and set the committed tier to UNKNOWN."""
        pass
