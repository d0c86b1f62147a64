"""Residual logger."""

import torch

from .configs import ResidualLoggerConfig
from .enums import _ErrorMode
from .logger import Logger


__all__ = ["ResidualLogger"]


class ResidualLogger(Logger):
    """Records a residual based progress measure.

    The measure is the norm of the full residual, of the sketched residual or of
    the least-squares gradient. The sketched variant falls back to the full
    residual at iteration 0, where no sample exists yet. The gradient vanishes at
    every least-squares solution, so it also measures progress on inconsistent
    systems.
    """

    def __init__(self, config: ResidualLoggerConfig, max_iterations: int):
        self.error = config.error
        super().__init__(config, max_iterations)

    def _track(self, iteration, x, sample, A, b):
        if self.error == _ErrorMode.LS_GRADIENT:
            self.resid = torch.linalg.vector_norm(A.T @ (A @ x - b)).item()
        elif self.error == _ErrorMode.FULL or sample is None:
            self.resid = self._full_residual_norm(x, A, b)
        else:
            self.resid = torch.linalg.vector_norm(sample.res).item()
