"""Moving average logger.

Tracks a moving average of the (scaled) squared sketched residual together with
the moving average of its square, which bounds the variance of the estimator.
The averaging window starts narrow (``lambda1``) while the estimator is still
decreasing quickly and switches permanently to ``lambda2`` the first time it
stops decreasing. The width of each average grows by one per update toward the
width of the current phase and never exceeds the number of values written so far.

For more information see:
    - Pritchard, N. and Patel, V. "Solving, tracking and stopping streaming linear
      inverse problems." Inverse Problems 40.8 (2024).
    - Pritchard, N. and Patel, V. "Towards practical large-scale randomized
      iterative least squares solvers through uncertainty quantification."
      SIAM/ASA J. Uncertainty Quantification 11 (2023): 996-1024.
"""

from dataclasses import dataclass
from math import nan
from typing import Optional, Tuple
from warnings import warn

import numpy as np
import torch

from .configs import MovingAverageLoggerConfig
from .logger import Logger


__all__ = ["MAInfo", "MovingAverageLogger", "get_uncertainty"]


@dataclass
class MAInfo:
    """State of the moving average.

    Attributes:
        lambda1 (int): Window width of the fast convergence phase.
        lambda2 (int): Window width of the steady phase and size of the buffer.
        lambda_ (int): Target width of the average, starts at ``lambda1`` and grows
            by one per update toward the width of the current phase.
        flag (bool): True once the steady phase has been entered.
        idx (int): Position of the most recent value in ``res_window``.
        n_valid (int): Number of values written to ``res_window`` since the last
            reset, at most ``lambda2``.
        res_window (np.ndarray): Circular buffer of the most recent values.
    """

    lambda1: int
    lambda2: int
    lambda_: Optional[int] = None
    flag: bool = False
    idx: int = 0
    n_valid: int = 0
    res_window: Optional[np.ndarray] = None

    def __post_init__(self):
        if self.lambda_ is None:
            self.lambda_ = self.lambda1
        if self.res_window is None:
            self.res_window = np.zeros(self.lambda2)

    def _reset(self):
        self.lambda_ = self.lambda1
        self.flag = False
        self.idx = 0
        self.n_valid = 0
        self.res_window.fill(0.0)

    def _push(self, res: float, first: bool):
        self.idx = 0 if first else (self.idx + 1) % self.lambda2
        self.res_window[self.idx] = res
        self.n_valid = min(self.n_valid + 1, self.lambda2)

    def _window_values(self, width: int) -> np.ndarray:
        """Return the ``width`` most recent values of the buffer."""
        if width == self.lambda2:
            return self.res_window
        start = self.idx - width + 1
        if start >= 0:
            return self.res_window[start : self.idx + 1]
        # the valid values wrap around the end of the buffer
        return np.concatenate(
            (self.res_window[: self.idx + 1], self.res_window[self.lambda2 + start :])
        )


class MovingAverageLogger(Logger):
    """Logger tracking moving averages of the squared sketched residual.

    Attributes:
        ma_info (MAInfo): Moving average state.
        iota_hist (np.ndarray): History of the moving average of squared values.
        lambda_hist (np.ndarray): History of the widths used for each average.
        resid (float): Current moving average.
        iota (float): Current moving average of the squared values.
        width (int): Width of the current moving average.
        sigma2 (Optional[float]): Variance parameter of the sub-Exponential bound.
        omega (Optional[float]): Exponential parameter of the sub-Exponential bound.
        scaling (float): Factor making the sketched value an unbiased estimate of
            the squared full residual norm.
    """

    def __init__(self, config: MovingAverageLoggerConfig, max_iterations: int):
        self.ma_info = MAInfo(lambda1=config.lambda1, lambda2=config.lambda2)
        self.eta = config.eta
        self.true_res = config.true_res
        self.sigma2 = config.sigma2
        self.omega = config.omega
        self.scaling = 1.0
        super().__init__(config, max_iterations)

    def _allocate(self, length):
        super()._allocate(length)
        self.iota_hist = np.zeros(length)
        self.lambda_hist = np.zeros(length, dtype=np.int64)

    def _reset(self):
        super()._reset()
        self.iota_hist.fill(0.0)
        self.lambda_hist.fill(0)
        self.ma_info._reset()
        self.iota = nan
        self.width = 0

    def _bind(self, source):
        get_constants = getattr(source, "concentration_constants", None)
        constants = get_constants(self.eta) if get_constants is not None else None

        if constants is None:
            if self.config.sigma2 is None:
                warn(
                    "No concentration constants are known for "
                    f"{type(source).__name__}. Using sigma2 = 1 and scaling = 1.",
                    UserWarning,
                )
            constants = (1.0, None, 1.0)

        sigma2, omega, self.scaling = constants
        if self.config.sigma2 is None:
            self.sigma2, self.omega = sigma2, omega

    def _track(self, iteration, x, sample, A, b):
        if iteration == 0 or self.true_res or sample is None:
            res = self._full_residual_norm(x, A, b) ** 2
        else:
            res = self.scaling * torch.sum(sample.res**2).item()

        ma_info = self.ma_info
        if ma_info.flag:
            self._update_ma(res, ma_info.lambda2, iteration)
        elif iteration == 0 or res < ma_info.res_window[ma_info.idx]:
            self._update_ma(res, ma_info.lambda1, iteration)
        else:
            ma_info.flag = True
            self._update_ma(res, ma_info.lambda2, iteration)

    def _update_ma(self, res: float, lambda_base: int, iteration: int):
        ma_info = self.ma_info
        ma_info._push(res, first=iteration == 0)

        # the target grows before averaging so a phase switch widens this average
        if ma_info.lambda_ < lambda_base:
            ma_info.lambda_ += 1
        self.width = min(ma_info.lambda_, ma_info.n_valid)

        values = ma_info._window_values(self.width)
        self.resid = float(np.sum(values)) / self.width
        self.iota = float(np.sum(values**2)) / self.width

    def _write(self, loc):
        super()._write(loc)
        self.iota_hist[loc] = self.iota
        self.lambda_hist[loc] = self.width

    def get_uncertainty(
        self, alpha: float = 0.05
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Credible band around the recorded moving averages.

        See :func:`get_uncertainty`.
        """
        return get_uncertainty(self, alpha)


def get_uncertainty(
    logger: MovingAverageLogger, alpha: float = 0.05
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Compute a (1 - alpha) credible band around each recorded moving average.

    With ``c = sigma2 * (1 + log(w)) * iota / (eta * w)`` for a record of width w,
    the half width is ``sqrt(2 * c * log(2 / alpha))``. When omega is known it is
    the larger of that value and ``sqrt(iota) * 2 * log(2 / alpha) * omega /
    (eta * w)``.

    Args:
        logger (MovingAverageLogger): The logger holding the histories.
        alpha (float): Probability of the band failing. Defaults to 0.05.

    Returns:
        Tuple[np.ndarray, np.ndarray, np.ndarray]: The recorded moving averages,
        the upper bounds and the lower bounds.

    Raises:
        ValueError: If the logger has no sigma2 or alpha is not in (0, 1).
    """
    if not 0 < alpha < 1:
        raise ValueError(
            f"alpha must lie strictly between 0 and 1, but received {alpha}"
        )
    if logger.sigma2 is None:
        raise ValueError(
            "sigma2 is unknown. Provide sigma2 in the logger configuration or bind "
            "the logger to a sampling technique."
        )

    n = logger.record_location
    resid = logger.resid_hist[:n].copy()
    iota = logger.iota_hist[:n]
    width = logger.lambda_hist[:n].astype(np.float64)
    log_term = np.log(2 / alpha)

    c = logger.sigma2 * (1 + np.log(width)) * iota / (logger.eta * width)
    diff = np.sqrt(2 * c * log_term)
    if logger.omega is not None:
        diff_o = np.sqrt(iota) * 2 * log_term * logger.omega / (logger.eta * width)
        diff = np.maximum(diff, diff_o)

    return resid, resid + diff, resid - diff
