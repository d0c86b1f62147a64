"""LQ sub-solver for underdetermined (minimum-norm) problems."""

import torch

from .sub_solver import SubSolver, _is_singular


class LQSolver(SubSolver):
    """Minimum-norm sub-solver for ``A x = b`` with A of full row rank.

    The factorization ``A^T = Q R`` gives ``A = R^T Q^T`` and the minimum-norm solution
    ``x = Q R^{-T} b``. A single row ``a`` is handled without a factorization:
    ``x = b / <a, a> * a``.
    """

    def update(self, A):
        self._check_matrix(A)
        self.A = A
        if A.shape[0] == 1:
            self.Q, self.R = None, None
            self.row_norm2 = torch.dot(A[0], A[0])
            self._singular = bool(self.row_norm2 == 0)
            return
        if A.shape[0] > A.shape[1]:
            self.Q, self.R = None, None
            self._singular = True
            return
        self.Q, self.R = torch.linalg.qr(A.T)
        self._singular = _is_singular(self.R)

    def _solve(self, x, b):
        if self._singular:
            self._fallback(x, b)
            return
        if self.R is None:
            x.copy_(self.A[0] * (b[0] / self.row_norm2))
            return
        y = torch.linalg.solve_triangular(self.R.T, b.unsqueeze(-1), upper=False)
        x.copy_((self.Q @ y).squeeze(-1))
