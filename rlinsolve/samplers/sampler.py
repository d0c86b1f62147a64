"""This module defines the sample container and the base class for samplers."""

from dataclasses import dataclass
from typing import Optional, Tuple

import torch

from .configs import SamplerConfig


__all__ = ["Sample", "Sampler"]


@dataclass
class Sample:
    """A sampled sub-problem ``mat @ x = vec``.

    Attributes:
        mat (torch.Tensor): A single row (1D) or a compressed block of rows (2D).
        vec (torch.Tensor): The matching entry (0D) or entries (1D) of the
            right-hand side.
        res (torch.Tensor): Sketched residual ``mat @ x - vec`` at the iterate the
            sample was drawn at.
    """

    mat: torch.Tensor
    vec: torch.Tensor
    res: torch.Tensor

    @property
    def is_block(self) -> bool:
        return self.mat.ndim == 2


class Sampler:
    """Base class for row samplers.

    Attributes:
        config (SamplerConfig): Configuration the sampler was completed from.
        A (torch.Tensor): Coefficient matrix.
        b (torch.Tensor): Right-hand side.
    """

    def __init__(self, config: SamplerConfig, A: torch.Tensor, b: torch.Tensor):
        self.config = config
        self.A = A
        self.b = b

    @property
    def block_dimension(self) -> int:
        return 1

    def _sample(self, x: torch.Tensor, iteration: int) -> Sample:
        raise NotImplementedError(
            "No `sample` method exists for sampler of type "
            f"{type(self).__name__}."
        )

    def concentration_constants(
        self, eta: float
    ) -> Optional[Tuple[float, Optional[float], float]]:
        """Return ``(sigma2, omega, scaling)`` or None when unknown."""
        return None
