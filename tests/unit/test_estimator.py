"""Unit tests for the exponential geometric moving average."""

import math

import pytest

from netquality.estimator import ExponentialGeometricAverage
from netquality.exceptions import ConfigurationError


def reference_average(samples: list[float], decay: float) -> float:
    """Straight log-space evaluation of the averaging rules."""
    keep = 1.0 - decay
    cutover = math.inf if decay == 0 else math.ceil(1 / decay)
    value = -1.0
    for count, x in enumerate(samples):
        if count == 0:
            value = x
        elif count <= cutover:
            retained = keep * count / (count + 1.0)
            value = math.exp(retained * math.log(value) + (1.0 - retained) * math.log(x))
        else:
            value = math.exp(keep * math.log(value) + decay * math.log(x))
    return value


class TestExponentialGeometricAverage:
    """Test averaging behaviour before and after the cutover."""

    def test_initial_state(self):
        """A new estimator has no average and no samples."""
        estimator = ExponentialGeometricAverage()

        assert estimator.get_average() == -1.0
        assert estimator.sample_count == 0

    def test_first_measurement_is_taken_verbatim(self):
        estimator = ExponentialGeometricAverage()
        estimator.add_measurement(420.0)

        assert estimator.get_average() == 420.0
        assert estimator.sample_count == 1

    def test_second_measurement_weighted_geometric_mean(self):
        """Second sample uses retained = keep * 1/2."""
        estimator = ExponentialGeometricAverage(decay_constant=0.05)
        estimator.add_measurement(100.0)
        estimator.add_measurement(400.0)

        retained = 0.95 * 1 / 2
        expected = math.exp(retained * math.log(100.0) + (1 - retained) * math.log(400.0))
        assert estimator.get_average() == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize(
        "decay, cutover",
        [(0.05, 20), (0.3, 4), (1.0, 1), (0.0, math.inf)],
    )
    def test_cutover(self, decay, cutover):
        assert ExponentialGeometricAverage(decay).cutover == cutover

    def test_matches_reference_across_cutover(self):
        """Average follows the geometric-mean phase, then the EWMA phase."""
        samples = [100.0 + (i * 37) % 900 for i in range(60)]
        estimator = ExponentialGeometricAverage(decay_constant=0.05)

        for i, sample in enumerate(samples, start=1):
            estimator.add_measurement(sample)
            expected = reference_average(samples[:i], 0.05)
            assert estimator.get_average() == pytest.approx(expected, rel=1e-9), (
                f"Diverged from reference after {i} samples"
            )

    def test_steady_state_decays_at_constant_ratio(self):
        """Past the cutover each sample moves log(value) by decay * distance."""
        estimator = ExponentialGeometricAverage(decay_constant=0.1)
        for _ in range(estimator.cutover + 1):
            estimator.add_measurement(1000.0)

        before = estimator.get_average()
        estimator.add_measurement(2000.0)
        after = estimator.get_average()

        assert math.log(after / before) == pytest.approx(0.1 * math.log(2000.0 / before))

    def test_zero_decay_is_cumulative_geometric_mean(self):
        """With decay 0 the cutover is never reached."""
        estimator = ExponentialGeometricAverage(decay_constant=0.0)
        for i in range(100):
            estimator.add_measurement(100.0 if i % 2 == 0 else 400.0)

        assert estimator.get_average() == pytest.approx(200.0, rel=1e-9)

    def test_repeated_value_stays_exact(self):
        estimator = ExponentialGeometricAverage()
        for _ in range(50):
            estimator.add_measurement(2000.0)

        assert estimator.get_average() == 2000.0

    def test_sample_count_monotonic_until_reset(self):
        estimator = ExponentialGeometricAverage()
        previous = estimator.sample_count

        for value in [50.0, 5000.0, 12.0, 800.0, 800.0]:
            estimator.add_measurement(value)
            assert estimator.sample_count == previous + 1
            previous = estimator.sample_count

        estimator.reset()
        assert estimator.sample_count == 0
        assert estimator.get_average() == -1.0

    def test_reset_then_measure_starts_over(self):
        estimator = ExponentialGeometricAverage()
        estimator.add_measurement(100.0)
        estimator.add_measurement(900.0)
        estimator.reset()
        estimator.add_measurement(250.0)

        assert estimator.get_average() == 250.0

    @pytest.mark.parametrize("measurement", [0.0, -5.0])
    def test_rejects_non_positive_measurement(self, measurement):
        estimator = ExponentialGeometricAverage()

        with pytest.raises(ValueError):
            estimator.add_measurement(measurement)
        assert estimator.sample_count == 0

    @pytest.mark.parametrize("decay", [-0.1, 1.5])
    def test_rejects_decay_outside_unit_interval(self, decay):
        with pytest.raises(ConfigurationError):
            ExponentialGeometricAverage(decay_constant=decay)
