import math

import pytest

from rlinsolve.loggers import (
    MovingAverageLoggerConfig,
    ResidualLoggerConfig,
    complete_logger,
)
from rlinsolve.stops import (
    MaxIterations,
    MovingAverageStop,
    StopCriterion,
    Threshold,
)


@pytest.fixture
def residual_logger():
    """Create a residual logger."""
    return complete_logger(ResidualLoggerConfig(), 100)


@pytest.fixture
def ma_logger():
    """Create a moving average logger in a known state."""
    logger = complete_logger(MovingAverageLoggerConfig(sigma2=2.0), 100)
    logger.iteration = 10
    logger.width = 4
    logger.iota = 1e-20
    logger.resid = 1e-11
    return logger


class TestMaxIterations:
    """Tests for the iteration cap."""

    def test_exact_equality(self, residual_logger):
        """Test that the criterion fires exactly at max_iter."""
        stop = MaxIterations(5)
        assert not stop._condition(residual_logger, 5)
        assert not stop._check(residual_logger, 0)
        assert not stop._check(residual_logger, 4)
        assert stop._check(residual_logger, 5)
        assert not stop._check(residual_logger, 6)

    @pytest.mark.parametrize("max_iter", [0, -3])
    def test_nonpositive(self, max_iter):
        """Test that the cap must be positive."""
        with pytest.raises(ValueError):
            MaxIterations(max_iter)

    def test_type(self):
        """Test that the cap must be an integer."""
        with pytest.raises(TypeError):
            MaxIterations(5.0)


class TestThreshold:
    """Tests for the residual threshold."""

    def test_fires_below_threshold(self, residual_logger):
        """Test that the criterion fires once the tracked value is small."""
        stop = Threshold(100, 1e-3)
        residual_logger.iteration = 3
        residual_logger.resid = 1e-2
        assert not stop._check(residual_logger, 3)
        residual_logger.resid = 1e-4
        assert stop._check(residual_logger, 3)

    def test_guard_before_first_update(self, residual_logger):
        """Test that nothing fires before the logger saw an iterate."""
        stop = Threshold(100, 1.0)
        assert not stop._check(residual_logger, 0)

    def test_cap(self, residual_logger):
        """Test that the cap fires regardless of the tracked value."""
        stop = Threshold(7, 0.0)
        residual_logger.iteration = 7
        residual_logger.resid = 1.0
        assert stop._check(residual_logger, 7)
        assert not stop._condition(residual_logger, 7)
        residual_logger.resid = 0.0
        assert not stop._condition(residual_logger, 7)

    def test_condition_at_cap(self, residual_logger):
        """Test that the condition is reported separately from the cap."""
        stop = Threshold(7, 1e-3)
        residual_logger.iteration = 7
        residual_logger.resid = 1e-4
        assert stop._check(residual_logger, 7)
        assert stop._condition(residual_logger, 7)

    def test_invalid(self):
        """Test the validation of the threshold."""
        with pytest.raises(ValueError):
            Threshold(10, -1.0)


class TestMovingAverageStop:
    """Tests for the moving average stop criterion."""

    def test_iota_threshold_without_omega(self, ma_logger):
        """Test the threshold against its closed form."""
        stop = MovingAverageStop(100, threshold=1e-10)
        siota = 2.0 * math.sqrt(1e-20) * (1 + math.log(4)) / 4
        expected = min(
            (1 - 0.9) ** 2 * 1e-20 / (2 * math.log(100)),
            (1.1 - 1) ** 2 * 1e-20 / (2 * math.log(100)),
        ) / siota
        assert stop.iota_threshold(ma_logger) == pytest.approx(expected)

    def test_iota_threshold_with_omega(self, ma_logger):
        """Test that the exponential bound caps the threshold."""
        ma_logger.omega = 1e3
        stop = MovingAverageStop(100, threshold=1e-10)
        siota = 2.0 * math.sqrt(1e-20) * (1 + math.log(4)) / 4
        log_chi = 2 * math.log(100)
        low = min(
            (1 - 0.9) ** 2 * 1e-20 / (log_chi * siota),
            4 * (1 - 0.9) * 1e-10 / (log_chi * 1e3),
        )
        high = min(
            (1.1 - 1) ** 2 * 1e-20 / (log_chi * siota),
            4 * (1.1 - 1) * 1e-10 / (log_chi * 1e3),
        )
        assert stop.iota_threshold(ma_logger) == pytest.approx(min(low, high))

    def test_zero_iota(self, ma_logger):
        """Test that a vanishing uncertainty gives an infinite threshold."""
        ma_logger.iota = 0.0
        assert MovingAverageStop(100).iota_threshold(ma_logger) == math.inf

    def test_fires_when_certain(self, ma_logger):
        """Test that the criterion fires when the estimate is small and certain."""
        ma_logger.iota = 0.0
        ma_logger.resid = 1e-12
        stop = MovingAverageStop(100, threshold=1e-10)
        assert not stop._check(ma_logger, 0)
        assert stop._check(ma_logger, 10)

    def test_waits_for_small_average(self, ma_logger):
        """Test that the moving average itself must be below the threshold."""
        ma_logger.iota = 0.0
        ma_logger.resid = 1e-9
        assert not MovingAverageStop(100, threshold=1e-10)._check(ma_logger, 10)

    def test_waits_for_certainty(self, ma_logger):
        """Test that an uncertain estimate does not stop the solve."""
        ma_logger.iota = 1.0
        ma_logger.resid = 1e-12
        assert not MovingAverageStop(100, threshold=1e-10)._check(ma_logger, 10)

    def test_cap(self, ma_logger):
        """Test that the cap fires regardless of the estimate."""
        ma_logger.iota = 1.0
        assert MovingAverageStop(10)._check(ma_logger, 10)
        assert not MovingAverageStop(10)._condition(ma_logger, 10)

    def test_requires_sigma2(self):
        """Test that an unbound logger without sigma2 is rejected."""
        logger = complete_logger(MovingAverageLoggerConfig(), 10)
        logger.iota, logger.width = 1.0, 1
        with pytest.raises(ValueError, match="sigma2"):
            MovingAverageStop(10).iota_threshold(logger)

    def test_requires_moving_average_logger(self, residual_logger):
        """Test that other loggers are rejected."""
        with pytest.raises(TypeError):
            MovingAverageStop(10)._check(residual_logger, 1)

    @pytest.mark.parametrize(
        "kwargs",
        [{"delta1": 1.2}, {"delta2": 0.9}, {"chi1": 0.0}, {"chi2": 1.0}],
    )
    def test_invalid(self, kwargs):
        """Test the validation of the risk parameters."""
        with pytest.raises(ValueError):
            MovingAverageStop(10, **kwargs)


class TestStopCriterion:
    """Tests for the stop criterion base class."""

    def test_base_class(self, residual_logger):
        """Test that the base class has no check."""
        with pytest.raises(NotImplementedError):
            StopCriterion(5)._check(residual_logger, 1)
        with pytest.raises(NotImplementedError):
            StopCriterion(5)._condition(residual_logger, 5)

    def test_cap_on_subclass(self, residual_logger):
        """Test that a subclass only defining its condition gets the cap."""

        class _Never(StopCriterion):
            def _condition(self, logger, iteration):
                return False

        stop = _Never(3)
        assert not stop._check(residual_logger, 2)
        assert stop._check(residual_logger, 3)

    def test_repr(self):
        """Test the representation of a criterion."""
        assert repr(Threshold(5, 0.5)) == "Threshold(max_iter=5, threshold=0.5)"
