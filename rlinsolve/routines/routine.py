from typing import TYPE_CHECKING

import torch

from .configs import RoutineConfig

if TYPE_CHECKING:
    from rlinsolve.samplers import Sample  # Import only for type hints


__all__ = ["Routine"]


class Routine:
    """Base class for routines that update the iterate from a sample in place."""

    def __init__(self, config: RoutineConfig, A: torch.Tensor, b: torch.Tensor):
        self.config = config
        self.alpha = config.alpha
        self.n = A.shape[1]

    def _step(self, x: torch.Tensor, sample: "Sample", iteration: int):
        raise NotImplementedError(
            f"No `step` method exists for routine of type {type(self).__name__}."
        )
