"""Integration test for concurrent producers, readers and listeners.

Exercises the classifier lock: every accepted sample must reach the
estimator exactly once and listener callbacks must never overlap.
"""

import threading

from netquality.classifier import BandwidthQualityClassifier
from netquality.config import NetQualityConfig
from netquality.quality import ConnectionQuality

THREADS = 8
SAMPLES_PER_THREAD = 250


class OverlapDetectingListener:
    """Records notifications and flags concurrent invocations."""

    def __init__(self):
        self.active = 0
        self.overlapped = False
        self.changes: list[ConnectionQuality] = []
        self._guard = threading.Lock()

    def on_bandwidth_state_change(self, bandwidth_state: ConnectionQuality) -> None:
        with self._guard:
            self.active += 1
            if self.active > 1:
                self.overlapped = True
        self.changes.append(bandwidth_state)
        with self._guard:
            self.active -= 1


class TestConcurrentAccess:
    """Test the classifier under parallel load."""

    def test_parallel_producers_and_readers(self):
        classifier = BandwidthQualityClassifier(
            NetQualityConfig(env="test", decay_constant=1.0)
        )
        listener = OverlapDetectingListener()
        classifier.register(listener)

        stop_readers = threading.Event()
        observed: list[ConnectionQuality] = []
        errors: list[BaseException] = []

        def producer(index: int) -> None:
            # Alternate between POOR and EXCELLENT runs per thread
            kbps = 100 if index % 2 == 0 else 3000
            try:
                for _ in range(SAMPLES_PER_THREAD):
                    classifier.add_bandwidth(kbps * 125, 1000)
            except BaseException as e:
                errors.append(e)

        def reader() -> None:
            while not stop_readers.is_set():
                observed.append(classifier.current_quality)
                observed.append(classifier.get_current_bandwidth_quality())
                classifier.get_download_kbits_per_second()

        readers = [threading.Thread(target=reader) for _ in range(2)]
        producers = [threading.Thread(target=producer, args=(i,)) for i in range(THREADS)]
        for thread in readers + producers:
            thread.start()
        for thread in producers:
            thread.join(timeout=30)
        stop_readers.set()
        for thread in readers:
            thread.join(timeout=5)

        assert errors == []
        assert classifier.estimator.sample_count == THREADS * SAMPLES_PER_THREAD
        assert classifier.metrics.accepted_samples == THREADS * SAMPLES_PER_THREAD
        assert not listener.overlapped, "Listener callbacks overlapped"
        assert all(isinstance(q, ConnectionQuality) for q in observed)
        assert len(listener.changes) == classifier.metrics.transitions_committed

    def test_register_during_notifications(self):
        """Registering and removing listeners while samples flow is safe."""
        classifier = BandwidthQualityClassifier(
            NetQualityConfig(env="test", decay_constant=1.0, samples_to_quality_change=1)
        )
        done = threading.Event()

        def churn() -> None:
            while not done.is_set():
                listener = OverlapDetectingListener()
                classifier.register(listener)
                classifier.remove(listener)

        churner = threading.Thread(target=churn)
        churner.start()
        try:
            for i in range(500):
                kbps = 100 if (i // 3) % 2 == 0 else 3000
                classifier.add_bandwidth(kbps * 125, 1000)
        finally:
            done.set()
            churner.join(timeout=5)

        assert classifier.metrics.transitions_committed > 0
