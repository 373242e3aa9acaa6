"""Observer interface for committed connection quality changes."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from netquality.quality import ConnectionQuality


class IQualityChangeListener(ABC):
    """Receives committed tier transitions from a classifier.

    Any object exposing on_bandwidth_state_change() can be registered;
    subclassing is optional.
    """

    @abstractmethod
    def on_bandwidth_state_change(self, bandwidth_state: "ConnectionQuality") -> None:
        """Called once per committed transition, in registration order.

        Args:
            bandwidth_state: The newly committed tier (never UNKNOWN)

        Runs inside the classifier's critical section: must not call
        back into the classifier. When a DeviceBandwidthSampler drives the
        classifier this also runs on the sampling thread, which
        stop_sampling() joins, so do not stop the sampler from here.
        """
        pass
