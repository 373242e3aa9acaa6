"""Connection quality tiers and the bandwidth thresholds that define them."""

import math
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from netquality.exceptions import ConfigurationError

# Default tier thresholds in kilobits per second (equivalently bits/ms)
DEFAULT_POOR_BANDWIDTH = 150.0
DEFAULT_MODERATE_BANDWIDTH = 550.0
DEFAULT_GOOD_BANDWIDTH = 2000.0


@total_ordering
class ConnectionQuality(Enum):
    """Discrete download bandwidth tier.

    POOR < MODERATE < GOOD < EXCELLENT follows declaration order.
    UNKNOWN is the initial state and is not ordered against the others:
    ordering comparisons involving it raise TypeError.
    """

    POOR = "POOR"  # Under 150 kbps
    MODERATE = "MODERATE"  # 150 to 550 kbps
    GOOD = "GOOD"  # 550 to 2000 kbps
    EXCELLENT = "EXCELLENT"  # Over 2000 kbps
    UNKNOWN = "UNKNOWN"  # No measurement yet

    @property
    def is_known(self) -> bool:
        """True for every tier except UNKNOWN."""
        return self is not ConnectionQuality.UNKNOWN

    @property
    def rank(self) -> int:
        """Position in the POOR..EXCELLENT ordering.

        Raises:
            TypeError: For UNKNOWN, which has no rank
        """
        if not self.is_known:
            raise TypeError("UNKNOWN connection quality has no rank")
        return _RANKED.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ConnectionQuality):
            return NotImplemented
        if not (self.is_known and other.is_known):
            return NotImplemented
        return self.rank < other.rank


_RANKED = (
    ConnectionQuality.POOR,
    ConnectionQuality.MODERATE,
    ConnectionQuality.GOOD,
    ConnectionQuality.EXCELLENT,
)


@dataclass(frozen=True)
class QualityThresholds:
    """Upper limits (exclusive) of the POOR, MODERATE and GOOD tiers.

    Attributes:
        poor: Averages below this are POOR
        moderate: Averages below this are MODERATE
        good: Averages below this are GOOD, at or above it EXCELLENT
    """

    poor: float = DEFAULT_POOR_BANDWIDTH
    moderate: float = DEFAULT_MODERATE_BANDWIDTH
    good: float = DEFAULT_GOOD_BANDWIDTH

    def __post_init__(self) -> None:
        if not (0 < self.poor < self.moderate < self.good):
            raise ConfigurationError(
                f"Thresholds must satisfy 0 < poor < moderate < good, "
                f"got {self.poor}/{self.moderate}/{self.good}"
            )

    def classify(self, average: float) -> ConnectionQuality:
        """Map a raw bandwidth average to its tier.

        Args:
            average: Bandwidth average in bits/ms, negative when unmeasured

        Returns:
            Tier whose band contains the average. A value exactly on a
            threshold belongs to the tier above it.
        """
        if average < 0:
            return ConnectionQuality.UNKNOWN
        if average < self.poor:
            return ConnectionQuality.POOR
        if average < self.moderate:
            return ConnectionQuality.MODERATE
        if average < self.good:
            return ConnectionQuality.GOOD
        return ConnectionQuality.EXCELLENT

    def band(self, quality: ConnectionQuality) -> tuple[float, float] | None:
        """Return the nominal [bottom, top) band of a tier.

        Returns:
            (bottom, top) pair, or None for UNKNOWN
        """
        if quality is ConnectionQuality.POOR:
            return (0.0, self.poor)
        if quality is ConnectionQuality.MODERATE:
            return (self.poor, self.moderate)
        if quality is ConnectionQuality.GOOD:
            return (self.moderate, self.good)
        if quality is ConnectionQuality.EXCELLENT:
            return (self.good, math.inf)
        return None


DEFAULT_THRESHOLDS = QualityThresholds()


def map_bandwidth_quality(
    average: float, thresholds: QualityThresholds = DEFAULT_THRESHOLDS
) -> ConnectionQuality:
    """Map a bandwidth average to a tier using the given thresholds."""
    return thresholds.classify(average)
