"""Interfaces for the periodic bandwidth sampler and its byte counter."""

from abc import ABC, abstractmethod


class IByteCounter(ABC):
    """Monotonic source of total received bytes."""

    @abstractmethod
    def read_total_rx_bytes(self) -> int:
        """Return total bytes received by the device since boot.

        Raises:
            OSError: If the platform counter cannot be read
        """
        pass


class IBandwidthSampler(ABC):
    """Periodically feeds received-byte deltas into a classifier."""

    @abstractmethod
    def start_sampling(self) -> None:
        """Start sampling (reference-counted)."""
        pass

    @abstractmethod
    def stop_sampling(self) -> None:
        """Stop sampling once every start has been matched (reference-counted)."""
        pass

    @abstractmethod
    def is_sampling(self) -> bool:
        """Check whether any caller still holds the sampler running.

        Returns:
            True if sampling, False otherwise
        """
        pass
