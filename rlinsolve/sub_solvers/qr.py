"""QR sub-solver for overdetermined (least-squares) problems."""

import torch

from .sub_solver import SubSolver, _is_singular


class QRSolver(SubSolver):
    """Least-squares sub-solver ``argmin_x ||A x - b||``.

    Factorizes ``A = Q R`` on every ``update``. Matrices with fewer rows than columns,
    or with a singular R factor, are solved through the pseudo-inverse instead.
    """

    def update(self, A):
        self._check_matrix(A)
        self.A = A
        if A.shape[0] < A.shape[1]:
            self.Q, self.R = None, None
            self._singular = True
            return
        self.Q, self.R = torch.linalg.qr(A)
        self._singular = _is_singular(self.R)

    def _solve(self, x, b):
        if self._singular:
            self._fallback(x, b)
            return
        y = (self.Q.T @ b).unsqueeze(-1)
        x.copy_(torch.linalg.solve_triangular(self.R, y, upper=True).squeeze(-1))
