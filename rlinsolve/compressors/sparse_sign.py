"""Sparse sign compressor."""

import torch

from .compressor import Compressor, _scale_add
from .configs import SparseSignConfig
from .enums import _Cardinality


class SparseSign(Compressor):
    """Compressor with ``nnz`` entries of value +-1/sqrt(nnz) per column or row.

    When applied from the left every column holds ``nnz`` nonzeros in distinct rows;
    when applied from the right every row holds ``nnz`` nonzeros in distinct columns.
    """

    def __init__(self, config: SparseSignConfig, A: torch.Tensor):
        super().__init__(config, A)
        self.nnz = config.nnz
        self.mat = torch.zeros(self.shape, dtype=self.dtype, device=self.device)
        self.update()

    def update(self, A=None, b=None, x=None):
        n_rows, n_cols = self.shape
        # Positions come from random permutations so that they never collide
        if self.cardinality == _Cardinality.LEFT:
            dim = 0
            idx = torch.rand(n_rows, n_cols, device=self.device).argsort(dim=0)
            idx = idx[: self.nnz]
        else:
            dim = 1
            idx = torch.rand(n_rows, n_cols, device=self.device).argsort(dim=1)
            idx = idx[:, : self.nnz]

        signs = 2 * torch.randint(0, 2, idx.shape, device=self.device) - 1
        signs = signs.to(self.dtype) * self.nnz ** (-0.5)

        self.mat.zero_()
        self.mat.scatter_(dim, idx, signs)

    def _mul_left(self, C, A, alpha, beta):
        _scale_add(C, self.mat @ A, alpha, beta)

    def _mul_right(self, C, A, alpha, beta):
        _scale_add(C, A @ self.mat, alpha, beta)
