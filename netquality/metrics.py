"""Classifier metrics collection and aggregation.

Tracks accepted and rejected samples, tier transition outcomes and the
distribution of recent bandwidth samples. In-memory only.
"""

import logging
import threading
import time
from collections import deque
from datetime import datetime
from typing import Any

import numpy as np

logger = logging.getLogger(__name__)


class BandwidthHistogram:
    """Tracks recent bandwidth samples with percentile calculations."""

    def __init__(self, max_samples: int = 1000):
        """Initialize bandwidth histogram.

        Args:
            max_samples: Maximum samples to retain (circular buffer)
        """
        self.samples: deque[float] = deque(maxlen=max_samples)
        self.max_samples = max_samples

    def record(self, bandwidth_kbps: float) -> None:
        """Record a bandwidth sample.

        Args:
            bandwidth_kbps: Instantaneous bandwidth in kbps
        """
        self.samples.append(bandwidth_kbps)

    def clear(self) -> None:
        """Drop all retained samples."""
        self.samples.clear()

    def get_stats(self) -> dict[str, float | int]:
        """Get bandwidth statistics.

        Returns:
            Dictionary with avg, p50, p95, p99, samples count
        """
        if not self.samples:
            return {"avg": 0.0, "p50": 0.0, "p95": 0.0, "p99": 0.0, "samples": 0}

        arr = np.array(list(self.samples))
        return {
            "avg": float(np.mean(arr)),
            "p50": float(np.percentile(arr, 50)),
            "p95": float(np.percentile(arr, 95)),
            "p99": float(np.percentile(arr, 99)),
            "samples": len(self.samples),
        }


class ClassifierMetrics:
    """Counts sample and transition events for one classifier."""

    def __init__(self, histogram_max_samples: int = 1000) -> None:
        """Initialize metrics collector.

        Args:
            histogram_max_samples: Capacity of the bandwidth histogram
        """
        self.bandwidth = BandwidthHistogram(max_samples=histogram_max_samples)

        self.accepted_samples = 0
        self.rejected_samples = 0
        self.transitions_started = 0
        self.transitions_abandoned = 0
        self.transitions_committed = 0

        self.start_time = time.time()
        self._lock = threading.Lock()

    def record_accepted(self, bandwidth_kbps: float) -> None:
        """Record a sample that reached the estimator."""
        with self._lock:
            self.accepted_samples += 1
            self.bandwidth.record(bandwidth_kbps)

    def record_rejected(self) -> None:
        """Record a sample discarded by the ingestion filter."""
        with self._lock:
            self.rejected_samples += 1

    def record_transition_started(self) -> None:
        with self._lock:
            self.transitions_started += 1

    def record_transition_abandoned(self) -> None:
        with self._lock:
            self.transitions_abandoned += 1

    def record_transition_committed(self) -> None:
        with self._lock:
            self.transitions_committed += 1

    def get_snapshot(self) -> dict[str, Any]:
        """Get current metrics snapshot.

        Returns:
            Dictionary with all metrics data
        """
        with self._lock:
            return {
                "bandwidth_kbps": self.bandwidth.get_stats(),
                "accepted_samples": self.accepted_samples,
                "rejected_samples": self.rejected_samples,
                "transitions_started": self.transitions_started,
                "transitions_abandoned": self.transitions_abandoned,
                "transitions_committed": self.transitions_committed,
                "uptime_sec": time.time() - self.start_time,
                "timestamp": datetime.now().isoformat(),
            }
