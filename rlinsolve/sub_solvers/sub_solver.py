"""This module defines the base class for sub-solvers.

A sub-solver is bound to a (typically compressed) matrix through ``update`` and
solves the associated problem for a right-hand side through ``solve``. When the
bound matrix is numerically singular the sub-solver falls back to the
pseudo-inverse solution and warns once.
"""

from warnings import warn

import torch

from .configs import SubSolverConfig
from rlinsolve.compressors.dimchecks import DimensionMismatchError
from rlinsolve.utils.input_checkers import (
    _is_torch_tensor_1d,
    _is_torch_tensor_2d,
)


__all__ = ["SubSolver"]


def _is_singular(R: torch.Tensor) -> bool:
    """Check whether a triangular factor is numerically singular."""
    diag = R.diagonal().abs()
    if diag.numel() == 0:
        return True
    tol = diag.max() * max(R.shape) * torch.finfo(R.dtype).eps
    return bool(diag.min() <= tol)


class SubSolver:
    """Base class for sub-solvers.

    Attributes:
        config (SubSolverConfig): Configuration the sub-solver was completed from.
        A (torch.Tensor): The matrix the sub-solver is currently bound to.
    """

    def __init__(self, config: SubSolverConfig, A: torch.Tensor):
        self.config = config
        self.A = None
        self._warned = False
        self.update(A)

    def update(self, A: torch.Tensor):
        """Bind the sub-solver to a new matrix.

        The new matrix may have a different number of rows than the previous one.

        Args:
            A (torch.Tensor): The new matrix.
        """
        raise NotImplementedError(
            "No `update` method exists for sub-solver of type "
            f"{type(self).__name__}."
        )

    def _solve(self, x: torch.Tensor, b: torch.Tensor):
        raise NotImplementedError(
            "No `solve` method exists for sub-solver of type "
            f"{type(self).__name__}."
        )

    def _check_dims(self, x: torch.Tensor, b: torch.Tensor):
        _is_torch_tensor_1d(x, "x")
        _is_torch_tensor_1d(b, "b")
        a_rows, a_cols = self.A.shape
        if x.shape[0] != a_cols:
            raise DimensionMismatchError(
                f"Vector x is of dimension {x.shape[0]} while A has {a_cols} columns."
            )
        if b.shape[0] != a_rows:
            raise DimensionMismatchError(
                f"Vector b is of dimension {b.shape[0]} while A has {a_rows} rows."
            )

    def _fallback(self, x: torch.Tensor, b: torch.Tensor):
        if not self._warned:
            warn(
                f"{type(self).__name__} received a numerically singular matrix. "
                "Falling back to the pseudo-inverse solution.",
                RuntimeWarning,
            )
            self._warned = True
        x.copy_(torch.linalg.pinv(self.A) @ b)

    def solve(self, x: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
        """Overwrite x with the solution of the bound problem for b.

        Args:
            x (torch.Tensor): Output vector, overwritten in place.
            b (torch.Tensor): Right-hand side.

        Returns:
            torch.Tensor: The vector x.

        Raises:
            DimensionMismatchError: If x or b do not match the bound matrix.
        """
        self._check_dims(x, b)
        self._solve(x, b)
        return x

    @staticmethod
    def _check_matrix(A: torch.Tensor):
        _is_torch_tensor_2d(A, "A")
