"""netquality - download bandwidth quality classification.

This package contains the smoothed bandwidth estimator, the debounced
quality classifier, the periodic device sampler and the status API.
"""

from netquality.classifier import BandwidthQualityClassifier, TransitionState
from netquality.config import NetQualityConfig, get_config
from netquality.di_container import NetQualityContainer
from netquality.estimator import ExponentialGeometricAverage
from netquality.exceptions import ConfigurationError, NetQualityError, SamplerError
from netquality.interfaces import IByteCounter, IQualityChangeListener
from netquality.metrics import ClassifierMetrics
from netquality.quality import ConnectionQuality, QualityThresholds, map_bandwidth_quality
from netquality.sampler import DeviceBandwidthSampler, PsutilByteCounter

__version__ = "1.0.0"

__all__ = [
    # Core components
    "ExponentialGeometricAverage",
    "BandwidthQualityClassifier",
    "DeviceBandwidthSampler",
    "PsutilByteCounter",
    "NetQualityContainer",
    # Data structures
    "ConnectionQuality",
    "QualityThresholds",
    "TransitionState",
    "map_bandwidth_quality",
    # Interfaces
    "IQualityChangeListener",
    "IByteCounter",
    # Configuration
    "NetQualityConfig",
    "get_config",
    # Metrics
    "ClassifierMetrics",
    # Errors
    "NetQualityError",
    "ConfigurationError",
    "SamplerError",
]
