"""Projection routines.

RowProjection projects the iterate onto the hyperplane of a sampled row, optionally
along a direction orthogonalized against the last few search directions.
BlockProjection projects onto the solution set of a sampled block through a
sub-solver.
"""

import torch

from .configs import RowProjectionConfig, BlockProjectionConfig
from .routine import Routine
from rlinsolve.sub_solvers import complete_sub_solver


class RowProjection(Routine):
    """Standard or partially orthogonalized row projection.

    With ``memory = 0`` the update is
    ``x <- x - alpha * (<a, x> - b_i) / <a, a> * a``. Otherwise ``a`` is first
    orthogonalized (modified Gram-Schmidt) against the stored directions, the step is
    skipped if the remainder is numerically zero, and the normalized remainder
    replaces the oldest stored direction.
    """

    def __init__(self, config: RowProjectionConfig, A, b):
        super().__init__(config, A, b)
        self.memory = config.memory
        self.Z = torch.zeros(self.memory, self.n, dtype=A.dtype, device=A.device)
        self._next = 0

    def _step(self, x, sample, iteration):
        if sample.is_block:
            raise TypeError(
                "RowProjection expects samples of a single row, "
                f"but received a block of shape {tuple(sample.mat.shape)}"
            )
        a = sample.mat

        if self.memory == 0:
            nrm_sq = torch.dot(a, a)
            if nrm_sq == 0:
                return
            x.sub_(a * (self.alpha * sample.res / nrm_sq))
            return

        u = a.clone()
        for z in self.Z:
            u.sub_(z * torch.dot(z, u))
        nrm_sq = torch.dot(u, u)
        if nrm_sq < 1e-15 * self.n:
            return

        # <a, u> = <u, u> since u is a minus its projection onto the directions
        x.sub_(u * (self.alpha * sample.res / nrm_sq))
        self.Z[self._next] = u / torch.sqrt(nrm_sq)
        self._next = (self._next + 1) % self.memory


class BlockProjection(Routine):
    """Block projection ``x <- x - alpha * solve(S A, S A x - S b)``.

    The sub-solver is completed against the first sampled block and rebound to every
    later one.
    """

    def __init__(self, config: BlockProjectionConfig, A, b):
        super().__init__(config, A, b)
        self.sub_solver_config = config.sub_solver_config
        self.sub_solver = None
        self.update_vec = torch.zeros(self.n, dtype=A.dtype, device=A.device)

    def _step(self, x, sample, iteration):
        if not sample.is_block:
            raise TypeError(
                "BlockProjection expects samples of a block of rows, "
                "but received a single row"
            )
        if self.sub_solver is None:
            self.sub_solver = complete_sub_solver(self.sub_solver_config, sample.mat)
        else:
            self.sub_solver.update(sample.mat)

        self.sub_solver.solve(self.update_vec, sample.res)
        x.sub_(self.update_vec, alpha=self.alpha)
