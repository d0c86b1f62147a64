"""Stopping criteria based on the iteration count and the logged progress."""

from math import inf, log, sqrt

from .stop import StopCriterion
from rlinsolve.loggers import Logger, MovingAverageLogger
from rlinsolve.utils.input_checkers import (
    _is_nonneg_float,
    _is_open_unit_float,
    _is_pos_float,
)


__all__ = ["MaxIterations", "Threshold", "MovingAverageStop"]


class MaxIterations(StopCriterion):
    """Stops exactly when the iteration count equals ``max_iter``."""

    def _condition(self, logger, iteration):
        return False


class Threshold(StopCriterion):
    """Stops once the current progress measure drops below ``threshold``.

    Attributes:
        max_iter (int): Iteration cap.
        threshold (float): Level the progress measure must fall below.
    """

    def __init__(self, max_iter: int, threshold: float):
        super().__init__(max_iter)
        _is_nonneg_float(threshold, "threshold")
        self.threshold = threshold

    def _condition(self, logger: Logger, iteration: int) -> bool:
        # nothing has been tracked before iteration 0
        if logger.iteration < 0:
            return False
        return logger.resid < self.threshold


class MovingAverageStop(StopCriterion):
    """Stops when the moving average is below ``threshold`` with high confidence.

    The criterion controls two risks: stopping while the true residual is above
    ``delta2 * threshold`` (probability ``chi2``) and continuing while it is below
    ``delta1 * threshold`` (probability ``chi1``). It stops once the uncertainty of
    the moving average, ``sqrt(iota)``, is below the value returned by
    ``iota_threshold`` and the moving average itself is below ``threshold``.

    Attributes:
        max_iter (int): Iteration cap.
        threshold (float): Level the squared residual norm should reach.
        delta1 (float): Lower relative tolerance, in (0, 1).
        delta2 (float): Upper relative tolerance, greater than 1.
        chi1 (float): Probability of stopping too late, in (0, 1).
        chi2 (float): Probability of stopping too early, in (0, 1).
    """

    def __init__(
        self,
        max_iter: int,
        threshold: float = 1e-10,
        delta1: float = 0.9,
        delta2: float = 1.1,
        chi1: float = 0.01,
        chi2: float = 0.01,
    ):
        super().__init__(max_iter)
        _is_pos_float(threshold, "threshold")
        _is_open_unit_float(delta1, "delta1")
        _is_pos_float(delta2, "delta2")
        if delta2 <= 1:
            raise ValueError(f"delta2 must be greater than 1, but received {delta2}")
        _is_open_unit_float(chi1, "chi1")
        _is_open_unit_float(chi2, "chi2")
        self.threshold = threshold
        self.delta1 = delta1
        self.delta2 = delta2
        self.chi1 = chi1
        self.chi2 = chi2

    def iota_threshold(self, logger: MovingAverageLogger) -> float:
        """Largest uncertainty of the moving average that still allows stopping.

        Args:
            logger (MovingAverageLogger): Logger holding sigma2, omega and the current
                moving averages.

        Returns:
            float: The threshold for ``sqrt(iota)``, infinite when the current
            moving average of squares is zero.

        Raises:
            ValueError: If the logger has no sigma2.
        """
        if logger.sigma2 is None:
            raise ValueError(
                "MovingAverageStop requires sigma2. Provide it in the logger "
                "configuration or use a technique with known constants."
            )

        width = logger.width
        siota = logger.sigma2 * sqrt(logger.iota) * (1 + log(width)) / width
        if siota == 0:
            return inf

        tau = self.threshold
        log1, log2 = log(1 / self.chi1), log(1 / self.chi2)
        low = (1 - self.delta1) ** 2 * tau**2 / (2 * log1 * siota)
        high = (self.delta2 - 1) ** 2 * tau**2 / (2 * log2 * siota)
        if logger.omega is None:
            return min(low, high)

        omega = logger.omega
        low = min(low, width * (1 - self.delta1) * tau / (2 * log1 * omega))
        high = min(high, width * (self.delta2 - 1) * tau / (2 * log2 * omega))
        return min(low, high)

    def _check(self, logger: MovingAverageLogger, iteration: int) -> bool:
        if not isinstance(logger, MovingAverageLogger):
            raise TypeError(
                f"logger is of type {type(logger).__name__}, "
                "but expected type MovingAverageLogger"
            )
        return super()._check(logger, iteration)

    def _condition(self, logger: MovingAverageLogger, iteration: int) -> bool:
        if iteration == 0:
            return False
        return (
            sqrt(logger.iota) <= self.iota_threshold(logger)
            and logger.resid <= self.threshold
        )
