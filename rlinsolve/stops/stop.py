"""This module defines the base class for stopping criteria."""

from typing import TYPE_CHECKING

from rlinsolve.utils.input_checkers import _is_pos_int

if TYPE_CHECKING:
    from rlinsolve.loggers import Logger  # Import only for type hints


__all__ = ["StopCriterion"]


class StopCriterion:
    """Base class for stopping criteria.

    Every criterion carries an iteration cap so that a solve always terminates.
    Subclasses implement ``_condition``, the test of the criterion itself, and
    ``_check`` adds the cap on top of it.

    Attributes:
        max_iter (int): Iteration at which the solve stops unconditionally.
    """

    def __init__(self, max_iter: int):
        _is_pos_int(max_iter, "max_iter")
        self.max_iter = max_iter

    def _condition(self, logger: "Logger", iteration: int) -> bool:
        """Test the criterion, ignoring the iteration cap.

        Args:
            logger (Logger): Logger holding the current progress measure.
            iteration (int): Last completed iteration, 0 for the initial iterate.

        Returns:
            bool: True if the progress measure satisfies the criterion.
        """
        raise NotImplementedError(
            "No `check` method exists for stop criterion of type "
            f"{type(self).__name__}."
        )

    def _check(self, logger: "Logger", iteration: int) -> bool:
        """Decide whether the solve stops after ``iteration``.

        Returns:
            bool: True at the iteration cap or when ``_condition`` holds.
        """
        if iteration == self.max_iter:
            return True
        return self._condition(logger, iteration)

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v}" for k, v in vars(self).items())
        return f"{type(self).__name__}({params})"
