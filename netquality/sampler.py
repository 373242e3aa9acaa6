"""Periodic download bandwidth sampler.

Reads the device's total received-bytes counter on a fixed cadence and
feeds (bytes, milliseconds) deltas into a quality classifier. Start and
stop are reference-counted so independent callers can share one loop.
"""

import logging
import threading
import time
from typing import Callable, Optional

import psutil

from netquality.config import NetQualityConfig, get_config
from netquality.exceptions import SamplerError
from netquality.interfaces.classifier import IQualityClassifier
from netquality.interfaces.sampler import IBandwidthSampler, IByteCounter

logger = logging.getLogger(__name__)

# Seconds to wait for the sampling thread to exit on stop
THREAD_JOIN_TIMEOUT_SEC = 5.0


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class PsutilByteCounter(IByteCounter):
    """Total received bytes across all network interfaces, via psutil."""

    def read_total_rx_bytes(self) -> int:
        """Return total bytes received since boot.

        Raises:
            OSError: If no network interface counters are available
        """
        counters = psutil.net_io_counters()
        if not counters:
            raise OSError("No network interface counters available")
        return counters.bytes_recv


class DeviceBandwidthSampler(IBandwidthSampler):
    """Samples received bytes periodically and reports them to a classifier.

    Bytes received while not sampling are never attributed to an interval:
    the byte baseline is dropped when the last caller stops.
    """

    def __init__(
        self,
        classifier: IQualityClassifier,
        byte_counter: Optional[IByteCounter] = None,
        interval_ms: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
        config: Optional[NetQualityConfig] = None,
    ):
        """Initialize sampler.

        Args:
            classifier: Classifier receiving add_bandwidth() calls
            byte_counter: Received-bytes source (defaults to psutil)
            interval_ms: Time between samples (defaults to config.sample_interval_ms)
            clock: Monotonic millisecond clock (defaults to time.monotonic)
            config: Configuration (defaults to get_config())
        """
        self.classifier = classifier
        self.byte_counter = byte_counter or PsutilByteCounter()
        self.interval_ms = interval_ms or (config or get_config()).sample_interval_ms
        self._clock = clock or monotonic_ms

        self._sampling_counter = 0
        self._counter_lock = threading.Lock()

        self._previous_bytes = -1
        self._last_time_reading = 0.0
        self._sample_lock = threading.Lock()

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        logger.info(f"Bandwidth sampler initialized (interval={self.interval_ms}ms)")

    def start_sampling(self) -> None:
        """Start sampling; only the first of nested calls starts the loop."""
        with self._counter_lock:
            self._sampling_counter += 1
            if self._sampling_counter == 1:
                self._start_thread()

    def stop_sampling(self) -> None:
        """Stop sampling once every start_sampling() call has been matched.

        The call that stops the loop joins the sampling thread and records
        one final sample. Quality-change listeners run on that thread, so
        they must not call this (or shutdown()) directly; hand the request
        to another thread instead.

        Raises:
            SamplerError: If called more times than start_sampling()
        """
        with self._counter_lock:
            if self._sampling_counter == 0:
                raise SamplerError("stop_sampling() called without matching start_sampling()")
            self._sampling_counter -= 1
            if self._sampling_counter == 0:
                self._stop_thread()
                self.add_final_sample()

    def shutdown(self) -> None:
        """Stop sampling regardless of how many callers still hold it."""
        with self._counter_lock:
            if self._sampling_counter == 0:
                return
            logger.info(
                f"Shutting down sampler with {self._sampling_counter} active holder(s)"
            )
            self._sampling_counter = 0
            self._stop_thread()
            self.add_final_sample()

    def is_sampling(self) -> bool:
        """Check whether any caller still holds the sampler running.

        Returns:
            True if sampling, False otherwise
        """
        return self._sampling_counter != 0

    def add_sample(self) -> None:
        """Read the byte counter and report the delta since the last reading.

        The first reading after a (re)start only establishes the baseline.
        Bytes and time are read together under the sample lock, so
        concurrent callers see monotonic readings.

        Raises:
            OSError: If the byte counter cannot be read
        """
        with self._sample_lock:
            current_time = self._clock()
            new_bytes = self.byte_counter.read_total_rx_bytes()

            if self._previous_bytes >= 0:
                byte_diff = new_bytes - self._previous_bytes
                elapsed_ms = int(current_time - self._last_time_reading)

                if byte_diff >= 0:
                    self.classifier.add_bandwidth(byte_diff, elapsed_ms)
                else:
                    logger.warning(
                        f"Received-bytes counter went backwards "
                        f"({self._previous_bytes} -> {new_bytes}), re-baselining"
                    )

            self._previous_bytes = new_bytes
            self._last_time_reading = current_time

    def add_final_sample(self) -> None:
        """Record a last sample and forget the byte baseline."""
        self._safe_add_sample()
        with self._sample_lock:
            self._previous_bytes = -1

    def _safe_add_sample(self) -> None:
        try:
            self.add_sample()
        except (OSError, psutil.Error) as e:
            logger.warning(f"Skipping sample, byte counter unavailable: {e}")

    def _start_thread(self) -> None:
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._sampling_loop,
            args=(self._stop_event,),
            name="netquality-sampler",
            daemon=True,
        )
        self._thread.start()
        logger.info("Bandwidth sampling started")

    def _stop_thread(self) -> None:
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None:
            thread.join(timeout=THREAD_JOIN_TIMEOUT_SEC)
            if thread.is_alive():
                logger.warning("Sampling thread did not exit within timeout")
        logger.info("Bandwidth sampling stopped")

    def _sampling_loop(self, stop_event: threading.Event) -> None:
        interval_sec = self.interval_ms / 1000.0
        try:
            while not stop_event.is_set():
                self._safe_add_sample()
                if stop_event.wait(interval_sec):
                    break
        except Exception as e:
            logger.error(f"Error in sampling loop: {e}", exc_info=True)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"DeviceBandwidthSampler(interval={self.interval_ms}ms, "
            f"holders={self._sampling_counter})"
        )
