"""Gaussian compressor.

Typical usage example:

  S = complete_compressor(GaussianConfig(compression_dim=10), A)
  SA = S @ A
"""

import torch

from .compressor import Compressor, _scale_add
from .configs import GaussianConfig


class Gaussian(Compressor):
    """Dense compressor with i.i.d. N(0, 1/compression_dim) entries.

    The left compressor has shape (compression_dim, A.shape[0]) and the right
    compressor has shape (A.shape[1], compression_dim).

    Note:
        Scaling the entries by 1 / sqrt(compression_dim) makes S.T @ S an expected
        isometry.
    """

    def __init__(self, config: GaussianConfig, A: torch.Tensor):
        super().__init__(config, A)
        self.scale = config.compression_dim ** (-0.5)
        self.mat = torch.empty(self.shape, dtype=self.dtype, device=self.device)
        self.update()

    def update(self, A=None, b=None, x=None):
        self.mat.normal_(mean=0.0, std=self.scale)

    def _mul_left(self, C, A, alpha, beta):
        _scale_add(C, self.mat @ A, alpha, beta)

    def _mul_right(self, C, A, alpha, beta):
        _scale_add(C, A @ self.mat, alpha, beta)

    def concentration_constants(self, eta):
        return self.compression_dim / (0.2345 * eta), 0.1127, 1.0
