"""Custom exceptions for netquality."""


class NetQualityError(Exception):
    """Base exception for all netquality errors."""

    pass


class ConfigurationError(NetQualityError):
    """Error in estimator or classifier configuration."""

    pass


class SamplerError(NetQualityError):
    """Error in the bandwidth sampler lifecycle."""

    pass
