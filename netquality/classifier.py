"""Bandwidth quality classification with debounce and hysteresis.

Maps the smoothed download bandwidth onto a ConnectionQuality tier and
decides when a change of tier is durable enough to commit. Two checks
compose before a commit: a run of consistent instantaneous tiers
(debounce) and an average that clears the committed band's edge by the
hysteresis margin.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Optional

from netquality.config import NetQualityConfig, get_config
from netquality.estimator import NO_AVERAGE, ExponentialGeometricAverage
from netquality.interfaces.classifier import IQualityClassifier
from netquality.interfaces.estimator import IBandwidthEstimator
from netquality.interfaces.listener import IQualityChangeListener
from netquality.metrics import ClassifierMetrics
from netquality.quality import ConnectionQuality, QualityThresholds

logger = logging.getLogger(__name__)

BYTES_TO_BITS = 8


@dataclass
class TransitionState:
    """Bookkeeping for a candidate tier change.

    pending_quality and sample_counter only mean something while
    change_in_progress is True.
    """

    change_in_progress: bool = False
    pending_quality: ConnectionQuality = ConnectionQuality.UNKNOWN
    sample_counter: int = 1


class BandwidthQualityClassifier(IQualityClassifier):
    """Classifies download bandwidth into debounced quality tiers.

    One instance is meant to serve an application session; share it by
    passing it around (see NetQualityContainer) rather than through a
    global.

    Thread-safety: add_bandwidth(), get_current_bandwidth_quality(),
    get_download_kbits_per_second() and reset() serialise on one
    non-reentrant lock. current_quality is readable from any thread
    without taking it.
    """

    def __init__(
        self,
        config: Optional[NetQualityConfig] = None,
        estimator: Optional[IBandwidthEstimator] = None,
        metrics: Optional[ClassifierMetrics] = None,
    ):
        """Initialize classifier.

        Args:
            config: Thresholds, hysteresis and debounce settings
                (defaults to get_config())
            estimator: Moving average to classify (defaults to an
                ExponentialGeometricAverage using config.decay_constant)
            metrics: Metrics collector (a private one is created if omitted)
        """
        self.config = config or get_config()
        self.thresholds = QualityThresholds(
            poor=self.config.poor_bandwidth,
            moderate=self.config.moderate_bandwidth,
            good=self.config.good_bandwidth,
        )
        self.samples_to_quality_change = self.config.samples_to_quality_change
        self.bandwidth_lower_bound = self.config.bandwidth_lower_bound

        hysteresis = self.config.hysteresis_percent
        self._hysteresis_top_multiplier = 100.0 / (100.0 - hysteresis)
        self._hysteresis_bottom_multiplier = (100.0 - hysteresis) / 100.0

        self.estimator = estimator or ExponentialGeometricAverage(
            self.config.decay_constant
        )
        self.metrics = metrics or ClassifierMetrics(
            histogram_max_samples=self.config.histogram_max_samples
        )

        self._lock = threading.Lock()
        self._transition = TransitionState()
        self._current_quality = ConnectionQuality.UNKNOWN

        self._listeners: list[IQualityChangeListener] = []
        self._listeners_lock = threading.Lock()

        logger.info(
            f"Classifier initialized (thresholds={self.thresholds.poor:g}/"
            f"{self.thresholds.moderate:g}/{self.thresholds.good:g} kbps, "
            f"hysteresis={hysteresis:g}%, "
            f"samples_to_change={self.samples_to_quality_change})"
        )

    @property
    def current_quality(self) -> ConnectionQuality:
        """Committed tier. Lock-free."""
        return self._current_quality

    def add_bandwidth(self, bytes_received: int, time_in_ms: int) -> None:
        """Ingest one (bytes, elapsed milliseconds) sample.

        Notifies listeners if this sample commits a tier change.

        Args:
            bytes_received: Bytes received during the interval
            time_in_ms: Interval length in milliseconds
        """
        with self._lock:
            if time_in_ms == 0:
                self.metrics.record_rejected()
                logger.debug("Ignoring sample with zero-length interval")
                return

            bandwidth = bytes_received / time_in_ms * BYTES_TO_BITS
            if bandwidth < self.bandwidth_lower_bound:
                self.metrics.record_rejected()
                logger.debug(
                    f"Ignoring sample below lower bound: {bandwidth:.2f} < "
                    f"{self.bandwidth_lower_bound:g} bits/ms"
                )
                return

            self.estimator.add_measurement(bandwidth)
            self.metrics.record_accepted(bandwidth)
            instantaneous = self._map_average()
            transition = self._transition

            logger.debug(
                f"Sample {bandwidth:.1f} kbps, average "
                f"{self.estimator.get_average():.1f} kbps ({instantaneous.value})",
                extra={"bandwidth_kbps": round(bandwidth, 1)},
            )

            if transition.change_in_progress:
                transition.sample_counter += 1

                if instantaneous != transition.pending_quality:
                    logger.debug(
                        f"Abandoning transition to {transition.pending_quality.value} "
                        f"after {transition.sample_counter - 1} samples"
                    )
                    transition.change_in_progress = False
                    transition.sample_counter = 1
                    self.metrics.record_transition_abandoned()
                elif (
                    transition.sample_counter >= self.samples_to_quality_change
                    and self._significantly_outside_current_band()
                ):
                    previous = self._current_quality
                    run_length = transition.sample_counter
                    self._current_quality = transition.pending_quality
                    transition.change_in_progress = False
                    transition.sample_counter = 1
                    self.metrics.record_transition_committed()

                    logger.info(
                        f"Connection quality changed: {previous.value} -> "
                        f"{self._current_quality.value} "
                        f"(average {self.estimator.get_average():.1f} kbps)",
                        extra={
                            "quality": self._current_quality.value,
                            "sample_count": run_length,
                        },
                    )
                    self._notify_listeners(self._current_quality)
                return

            if instantaneous != self._current_quality:
                transition.change_in_progress = True
                transition.pending_quality = instantaneous
                self.metrics.record_transition_started()
                logger.debug(
                    f"Candidate transition {self._current_quality.value} -> "
                    f"{instantaneous.value}"
                )

    def get_current_bandwidth_quality(self) -> ConnectionQuality:
        """Get the tier the moving average represents right now.

        This is the instantaneous, non-debounced tier; see current_quality
        for the committed one.

        Returns:
            ConnectionQuality, UNKNOWN when no average exists
        """
        with self._lock:
            return self._map_average()

    def get_download_kbits_per_second(self) -> float:
        """Get the raw moving average.

        Returns:
            Average in kbps, or -1.0 if none recorded
        """
        with self._lock:
            average = self.estimator.get_average()
        return average if average >= 0 else NO_AVERAGE

    def get_transition_state(self) -> TransitionState:
        """Return a copy of the candidate transition bookkeeping."""
        with self._lock:
            return replace(self._transition)

    def register(self, listener: IQualityChangeListener) -> ConnectionQuality:
        """Add a listener for committed tier changes.

        Args:
            listener: Object with an on_bandwidth_state_change() method;
                None is ignored

        Returns:
            The committed tier at registration time
        """
        if listener is not None:
            with self._listeners_lock:
                self._listeners.append(listener)
        return self._current_quality

    def remove(self, listener: IQualityChangeListener) -> None:
        """Remove a previously registered listener.

        Args:
            listener: Listener to remove; unknown listeners are ignored
        """
        if listener is None:
            return
        with self._listeners_lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                logger.debug(f"Listener {listener!r} was not registered")

    def reset(self) -> None:
        """Reset the bandwidth average and committed tier.

        Listeners stay registered. The candidate transition record is left
        as it is.
        """
        with self._lock:
            self.estimator.reset()
            self._current_quality = ConnectionQuality.UNKNOWN
        logger.info("Classifier reset", extra={"quality": ConnectionQuality.UNKNOWN.value})

    def _map_average(self) -> ConnectionQuality:
        return self.thresholds.classify(self.estimator.get_average())

    def _significantly_outside_current_band(self) -> bool:
        """Check whether the average has left the committed band by the margin.

        Rising out of the band requires exceeding top * 100/(100-H);
        falling out requires undershooting bottom * (100-H)/100.
        """
        band = self.thresholds.band(self._current_quality)
        if band is None:
            # Leaving UNKNOWN is always significant
            return True

        bottom, top = band
        average = self.estimator.get_average()
        if average > top:
            return average > top * self._hysteresis_top_multiplier
        return average < bottom * self._hysteresis_bottom_multiplier

    def _notify_listeners(self, quality: ConnectionQuality) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener.on_bandwidth_state_change(quality)
            except Exception as e:
                logger.error(f"Listener {listener!r} failed: {e}", exc_info=True)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"BandwidthQualityClassifier(quality={self._current_quality.value}, "
            f"average={self.estimator.get_average():.1f})"
        )
