"""Exponentially weighted geometric moving average of bandwidth samples.

While few samples have been seen the average behaves like a cumulative
(decay-weighted) geometric mean; after the cutover count it becomes a
standard EWMA in log space with a constant decay ratio.
"""

import logging
import math

from netquality.exceptions import ConfigurationError
from netquality.interfaces.estimator import IBandwidthEstimator

logger = logging.getLogger(__name__)

NO_AVERAGE = -1.0
DEFAULT_DECAY_CONSTANT = 0.05


class ExponentialGeometricAverage(IBandwidthEstimator):
    """Moving average of bandwidth measurements in bits/ms.

    Not thread-safe on its own: the owning classifier serialises access.
    """

    def __init__(self, decay_constant: float = DEFAULT_DECAY_CONSTANT):
        """Initialize estimator.

        Args:
            decay_constant: Weight of each new sample once past the cutover.
                Smaller values make the average less responsive. Zero
                disables the steady-state branch entirely.

        Raises:
            ConfigurationError: If decay_constant is outside [0, 1]
        """
        if not 0.0 <= decay_constant <= 1.0:
            raise ConfigurationError(
                f"Decay constant must be in [0, 1], got {decay_constant}"
            )

        self.decay_constant = decay_constant
        self.cutover: float = (
            math.inf if decay_constant == 0.0 else math.ceil(1 / decay_constant)
        )
        self._value = NO_AVERAGE
        self._count = 0

    @property
    def sample_count(self) -> int:
        """Number of measurements folded in since construction or reset."""
        return self._count

    def add_measurement(self, measurement: float) -> None:
        """Fold a new bandwidth measurement into the average.

        Args:
            measurement: Bandwidth in bits/ms, strictly positive

        Raises:
            ValueError: If measurement is not positive
        """
        if measurement <= 0:
            raise ValueError(f"Measurement must be positive, got {measurement}")

        keep_constant = 1.0 - self.decay_constant

        if self._count > self.cutover:
            self._value = self._blend(measurement, self.decay_constant)
        elif self._count > 0:
            retained = keep_constant * self._count / (self._count + 1.0)
            self._value = self._blend(measurement, 1.0 - retained)
        else:
            self._value = measurement

        self._count += 1

    def _blend(self, measurement: float, newcomer: float) -> float:
        # exp((1 - w) * ln(v) + w * ln(x)) == v * exp(w * ln(x / v));
        # the second form keeps v exact when x == v.
        return self._value * math.exp(newcomer * math.log(measurement / self._value))

    def get_average(self) -> float:
        """Get the current average.

        Returns:
            Average in bits/ms, or -1.0 if nothing has been measured
        """
        return self._value

    def reset(self) -> None:
        """Reset the moving average."""
        self._value = NO_AVERAGE
        self._count = 0
        logger.debug("Bandwidth average reset")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"ExponentialGeometricAverage(decay={self.decay_constant}, "
            f"value={self._value:.1f}, count={self._count})"
        )
