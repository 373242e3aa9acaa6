"""Internal interfaces for netquality components.

Abstract Base Classes (ABCs) defining contracts for bandwidth estimation,
quality classification, change listeners and sampling.
"""

from netquality.interfaces.classifier import IQualityClassifier
from netquality.interfaces.estimator import IBandwidthEstimator
from netquality.interfaces.listener import IQualityChangeListener
from netquality.interfaces.sampler import IBandwidthSampler, IByteCounter

__all__ = [
    # Core interfaces
    "IBandwidthEstimator",
    "IQualityClassifier",
    "IQualityChangeListener",
    # Sampling interfaces
    "IBandwidthSampler",
    "IByteCounter",
]
