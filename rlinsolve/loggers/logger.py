"""This module defines the base class for progress loggers.

A logger tracks a scalar progress measure of an iterative solver. The current value
is refreshed on every update while the histories, preallocated to
``ceil(max_iterations / collection_rate) + 1`` entries, only receive the values of
iterations that are multiples of ``collection_rate``. Iteration 0 is always recorded.
"""

from math import ceil, nan
from typing import TYPE_CHECKING, Optional

import numpy as np
import torch

from .configs import LoggerConfig

if TYPE_CHECKING:
    from rlinsolve.samplers import Sample  # Import only for type hints


__all__ = ["Logger"]


class Logger:
    """Base class for progress loggers.

    Attributes:
        config (LoggerConfig): Configuration the logger was completed from.
        collection_rate (int): Recording frequency.
        max_iterations (int): Largest iteration the histories are sized for.
        resid_hist (np.ndarray): History of the progress measure.
        record_location (int): Number of recorded entries, which is also the index
            of the next free slot.
        iteration (int): Last iteration passed to the logger, -1 before the first.
        resid (float): Current value of the progress measure.
    """

    def __init__(self, config: LoggerConfig, max_iterations: int):
        self.config = config
        self.collection_rate = config.collection_rate
        self.max_iterations = max_iterations
        self._allocate(ceil(max_iterations / self.collection_rate) + 1)
        self._reset()

    def _allocate(self, length: int):
        self.resid_hist = np.zeros(length)

    @property
    def hist(self) -> np.ndarray:
        return self.resid_hist

    def _reset(self):
        """Clear the histories and every piece of tracking state."""
        self.resid_hist.fill(0.0)
        self.record_location = 0
        self.iteration = -1
        self.resid = nan
        self._last_recorded = -1

    def _bind(self, source):
        """Attach the logger to the technique producing the samples.

        Args:
            source: Object exposing ``concentration_constants(eta)``, such as a
                solver, a sampler or a compressor.
        """
        pass

    def _track(
        self,
        iteration: int,
        x: torch.Tensor,
        sample: Optional["Sample"],
        A: torch.Tensor,
        b: torch.Tensor,
    ):
        raise NotImplementedError(
            f"No `update` method exists for logger of type {type(self).__name__}."
        )

    def _write(self, loc: int):
        self.resid_hist[loc] = self.resid

    def _record(self):
        if self.record_location >= self.resid_hist.shape[0]:
            raise RuntimeError(
                f"{type(self).__name__} history is full after "
                f"{self.record_location} records; it was sized for "
                f"max_iterations={self.max_iterations}"
            )
        self._write(self.record_location)
        self.record_location += 1
        self._last_recorded = self.iteration

    def _update(
        self,
        iteration: int,
        x: torch.Tensor,
        sample: Optional["Sample"],
        A: torch.Tensor,
        b: torch.Tensor,
    ):
        """Refresh the progress measure with the current iterate and sample.

        Args:
            iteration (int): Current iteration, 0 for the initial iterate.
            x (torch.Tensor): Current iterate.
            sample (Optional[Sample]): Sample drawn at this iteration, None at
                iteration 0.
            A (torch.Tensor): Coefficient matrix.
            b (torch.Tensor): Right-hand side.
        """
        self.iteration = iteration
        self._track(iteration, x, sample, A, b)
        if iteration % self.collection_rate == 0:
            self._record()

    def _record_final(self, iteration: int):
        """Record the current values at termination if not recorded already."""
        if self.iteration == iteration and self._last_recorded != iteration:
            self._record()

    @staticmethod
    def _full_residual_norm(x: torch.Tensor, A: torch.Tensor, b: torch.Tensor):
        return torch.linalg.vector_norm(A @ x - b).item()
