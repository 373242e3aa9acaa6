"""Dependency injection container for netquality components.

Holds the one classifier/sampler pair an application session works with.
Construct a container explicitly and pass it (or the components it
provides) to whoever needs them.
"""

import logging
from typing import Any, Optional

from netquality.classifier import BandwidthQualityClassifier
from netquality.config import NetQualityConfig, get_config
from netquality.estimator import ExponentialGeometricAverage
from netquality.interfaces.sampler import IByteCounter
from netquality.metrics import ClassifierMetrics
from netquality.sampler import DeviceBandwidthSampler

logger = logging.getLogger(__name__)


class NetQualityContainer:
    """Dependency injection container for classifier components."""

    def __init__(
        self,
        config: Optional[NetQualityConfig] = None,
        byte_counter: Optional[IByteCounter] = None,
    ) -> None:
        """Initialize DI container.

        Args:
            config: Configuration (defaults to get_config())
            byte_counter: Received-bytes source for the sampler (defaults to psutil)
        """
        self._config = config or get_config()
        self._byte_counter = byte_counter
        self._instances: dict[str, Any] = {}

        logger.info("DI container initialized")

    def get_config(self) -> NetQualityConfig:
        """Get configuration instance."""
        return self._config

    def get_estimator(self) -> ExponentialGeometricAverage:
        """Get or create bandwidth estimator instance."""
        if "estimator" not in self._instances:
            self._instances["estimator"] = ExponentialGeometricAverage(
                self._config.decay_constant
            )
        return self._instances["estimator"]

    def get_metrics(self) -> ClassifierMetrics:
        """Get or create metrics collector instance."""
        if "metrics" not in self._instances:
            self._instances["metrics"] = ClassifierMetrics(
                histogram_max_samples=self._config.histogram_max_samples
            )
        return self._instances["metrics"]

    def get_classifier(self) -> BandwidthQualityClassifier:
        """Get or create quality classifier instance."""
        if "classifier" not in self._instances:
            self._instances["classifier"] = BandwidthQualityClassifier(
                config=self._config,
                estimator=self.get_estimator(),
                metrics=self.get_metrics(),
            )
        return self._instances["classifier"]

    def get_sampler(self) -> DeviceBandwidthSampler:
        """Get or create bandwidth sampler instance."""
        if "sampler" not in self._instances:
            self._instances["sampler"] = DeviceBandwidthSampler(
                classifier=self.get_classifier(),
                byte_counter=self._byte_counter,
                config=self._config,
            )
        return self._instances["sampler"]

    def cleanup(self) -> None:
        """Stop sampling and drop all managed instances."""
        logger.info("Cleaning up DI container")

        if "sampler" in self._instances:
            try:
                self._instances["sampler"].shutdown()
            except Exception as e:
                logger.error(f"Error shutting down sampler: {e}")

        self._instances.clear()
        logger.info("DI container cleaned up")
