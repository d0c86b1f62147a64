"""This module implements the Identity compressor."""

import torch

from .compressor import Compressor, _scale_add
from .configs import IdentityConfig
from .enums import _Cardinality


class Identity(Compressor):
    """Identity compressor class.

    Leaves its operand unchanged. It is square and sized to the rows (left) or
    columns (right) of the matrix it was completed against, which makes it a
    convenient baseline that turns a sketched solver into its full counterpart.

    Example:
        >>> S = complete_compressor(IdentityConfig(), A)
        >>> assert torch.equal(S @ A, A)
    """

    def _get_dims(self, A: torch.Tensor):
        d = A.shape[0] if self.cardinality == _Cardinality.LEFT else A.shape[1]
        return d, d

    def update(self, A=None, b=None, x=None):
        pass

    def _mul_left(self, C, A, alpha, beta):
        _scale_add(C, A, alpha, beta)

    def _mul_right(self, C, A, alpha, beta):
        _scale_add(C, A, alpha, beta)
