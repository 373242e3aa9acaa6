"""Unit tests for classifier metrics."""

import pytest

from netquality.metrics import BandwidthHistogram, ClassifierMetrics


class TestBandwidthHistogram:
    """Test percentile statistics over recent samples."""

    def test_empty_stats(self):
        stats = BandwidthHistogram().get_stats()

        assert stats == {"avg": 0.0, "p50": 0.0, "p95": 0.0, "p99": 0.0, "samples": 0}

    def test_percentiles(self):
        histogram = BandwidthHistogram()
        for value in range(1, 101):
            histogram.record(float(value))

        stats = histogram.get_stats()
        assert stats["avg"] == pytest.approx(50.5)
        assert stats["p50"] == pytest.approx(50.5)
        assert stats["p99"] == pytest.approx(99.01)
        assert stats["samples"] == 100

    def test_bounded(self):
        histogram = BandwidthHistogram(max_samples=10)
        for value in range(100):
            histogram.record(float(value))

        assert histogram.get_stats()["samples"] == 10
        assert min(histogram.samples) == 90.0


class TestClassifierMetrics:
    """Test event counters and snapshots."""

    def test_snapshot_counts(self):
        metrics = ClassifierMetrics()
        metrics.record_accepted(1000.0)
        metrics.record_accepted(3000.0)
        metrics.record_rejected()
        metrics.record_transition_started()
        metrics.record_transition_abandoned()
        metrics.record_transition_started()
        metrics.record_transition_committed()

        snapshot = metrics.get_snapshot()

        assert snapshot["accepted_samples"] == 2
        assert snapshot["rejected_samples"] == 1
        assert snapshot["transitions_started"] == 2
        assert snapshot["transitions_abandoned"] == 1
        assert snapshot["transitions_committed"] == 1
        assert snapshot["bandwidth_kbps"]["avg"] == pytest.approx(2000.0)
        assert snapshot["uptime_sec"] >= 0.0
        assert "timestamp" in snapshot
