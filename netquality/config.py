"""Configuration management for netquality.

Loads and validates environment variables using Pydantic settings.
"""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class NetQualityConfig(BaseSettings):
    """netquality configuration loaded from NETQUALITY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NETQUALITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Literal["development", "production", "test"] = Field(default="development")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )

    # Moving average
    decay_constant: float = Field(default=0.05, ge=0.0, le=1.0)

    # Tier thresholds (bits/ms, i.e. kbps)
    poor_bandwidth: float = Field(default=150.0, gt=0.0)
    moderate_bandwidth: float = Field(default=550.0, gt=0.0)
    good_bandwidth: float = Field(default=2000.0, gt=0.0)

    # Debounce and hysteresis
    hysteresis_percent: float = Field(default=20.0, ge=0.0, lt=100.0)
    samples_to_quality_change: int = Field(default=5, ge=1)
    bandwidth_lower_bound: float = Field(default=10.0, gt=0.0)

    # Sampler
    sample_interval_ms: int = Field(default=1000, ge=10)

    # Status API
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8010, ge=1024, le=65535)

    # Metrics
    histogram_max_samples: int = Field(default=1000, ge=1)

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "NetQualityConfig":
        """Validate that tier thresholds are strictly increasing."""
        if not (self.poor_bandwidth < self.moderate_bandwidth < self.good_bandwidth):
            raise ValueError(
                "Thresholds must satisfy poor < moderate < good, got "
                f"{self.poor_bandwidth}/{self.moderate_bandwidth}/{self.good_bandwidth}"
            )
        return self


# Lazily created instance for application entry points
_config: NetQualityConfig | None = None


def get_config() -> NetQualityConfig:
    """Get the application-level configuration instance.

    Returns:
        NetQualityConfig: Configuration loaded from the environment
    """
    global _config
    if _config is None:
        _config = NetQualityConfig()
    return _config
