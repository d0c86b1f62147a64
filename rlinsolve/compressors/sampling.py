"""Sampling compressor.

Selects a subset of the rows (left) or columns (right) of a matrix. The indices are
drawn from a distribution over the sampled dimension and the compressor is never
materialized: every product is carried out through indexing.
"""

import torch

from .compressor import Compressor, _scale, _scale_add
from .configs import SamplingConfig
from .enums import _Cardinality, _Distribution


class Sampling(Compressor):
    """Row or column selection compressor.

    Attributes:
        idx (torch.Tensor): Indices of the currently selected rows or columns.
        weights (torch.Tensor): Unnormalized sampling weights.
        replace (bool): Whether indices are drawn with replacement.
    """

    def __init__(self, config: SamplingConfig, A: torch.Tensor):
        super().__init__(config, A)
        self.distribution = config.distribution
        self.replace = config.replace

        if not self.replace and config.compression_dim > self.sampled_dim:
            raise ValueError(
                f"compression_dim must not exceed {self.sampled_dim} when sampling "
                f"without replacement, but received {config.compression_dim}"
            )

        self.weights = self._get_weights(A)
        self.idx = torch.empty(
            config.compression_dim, dtype=torch.long, device=self.device
        )
        self._sample()

    @property
    def sampled_dim(self) -> int:
        if self.cardinality == _Cardinality.LEFT:
            return self.shape[1]
        return self.shape[0]

    def _get_weights(self, A: torch.Tensor) -> torch.Tensor:
        if self.distribution == _Distribution.UNIFORM:
            return torch.ones(self.sampled_dim, dtype=self.dtype, device=self.device)
        dim = 1 if self.cardinality == _Cardinality.LEFT else 0
        return A.square().sum(dim=dim)

    def _sample(self):
        self.idx.copy_(
            torch.multinomial(
                self.weights, self.compression_dim, replacement=self.replace
            )
        )

    def update(self, A=None, b=None, x=None):
        if A is not None and self.distribution == _Distribution.SQUARED_NORM:
            self.weights = self._get_weights(A)
        self._sample()

    def _mul_left(self, C, A, alpha, beta):
        if self.cardinality == _Cardinality.LEFT:
            _scale_add(C, A[self.idx], alpha, beta)
        else:
            _scale(C, beta)
            C.index_add_(0, self.idx, A, alpha=alpha)

    def _mul_right(self, C, A, alpha, beta):
        if self.cardinality == _Cardinality.RIGHT:
            _scale_add(C, A[..., self.idx], alpha, beta)
        else:
            _scale(C, beta)
            C.index_add_(C.ndim - 1, self.idx, A, alpha=alpha)

    def concentration_constants(self, eta):
        if self.distribution != _Distribution.UNIFORM:
            return None
        ratio = self.sampled_dim / self.compression_dim
        return ratio**2 / (4 * eta), None, ratio
