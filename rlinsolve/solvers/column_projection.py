"""Column projection solver for least-squares problems.

At every iteration the columns of the system are compressed, ``A S``, and the
iterate moves inside the range of ``S`` so that the residual is projected onto the
orthogonal complement of the range of ``A S``,

    v = argmin_v ||A S v - r||,    x <- x - alpha * S v,    r <- r - alpha * A S v,

where ``r = A x - b``. The iterates converge to a least-squares solution even when
the system is inconsistent.

For more information see:
    - Leventhal, D. and Lewis, A. S. "Randomized methods for linear constraints:
      convergence rates and conditioning." Math. Oper. Res. 35.3 (2010): 641-654.
    - Patel, V., Jahangoshahi, M. and Maldonado, D. A. "Randomized block adaptive
      linear system solvers." SIAM J. Matrix Anal. Appl. 44.3 (2023): 1349-1369.
"""

from typing import TYPE_CHECKING
from warnings import warn

import torch

from .solver import Solver
from rlinsolve.compressors import CompressorConfig, complete_compressor, mul
from rlinsolve.compressors.enums import _Cardinality
from rlinsolve.samplers import Sample
from rlinsolve.sub_solvers import SubSolverConfig, complete_sub_solver

if TYPE_CHECKING:
    from rlinsolve.models import LinSys  # Import only for type hints


class ColumnProjection(Solver):
    """Solver projecting the residual onto compressed column spaces.

    The sample of an iteration holds ``A S``, the residual ``A x - b`` it was
    projected against and the compressed gradient ``(A S)^T (A x - b)``.
    """

    def __init__(
        self,
        system: "LinSys",
        x_init: torch.Tensor,
        compressor_config: CompressorConfig,
        sub_solver_config: SubSolverConfig,
        alpha: float,
    ):
        super().__init__(system, x_init)
        A, b = system.A, system.b
        self.alpha = alpha
        self.sub_solver_config = sub_solver_config
        self.sub_solver = None

        if compressor_config.cardinality == _Cardinality.LEFT:
            warn(
                "Compressor has cardinality `left` but ColumnProjection compresses "
                "from the `right`. Using the adjoint of the compressor instead.",
                UserWarning,
            )
            # A left compressor of A^T is the adjoint of a right compressor of A
            self._source = A.T
            self.technique = complete_compressor(compressor_config, self._source, b)
            self.compressor = self.technique.adjoint
        else:
            self._source = A
            self.technique = complete_compressor(compressor_config, A, b)
            self.compressor = self.technique

        s = self.compressor.shape[1]
        self.AS = torch.zeros(A.shape[0], s, dtype=A.dtype, device=A.device)
        self.gradient = torch.zeros(s, dtype=A.dtype, device=A.device)
        self.update_vec = torch.zeros(s, dtype=A.dtype, device=A.device)
        # r = A x - b is kept up to date by every update
        self.residual = A @ self._x - b

    @property
    def block_dimension(self) -> int:
        return self.compressor.shape[1]

    def _step(self, iteration):
        A, b = self.system.A, self.system.b
        self.technique.update(self._source, b, self._x)
        mul(self.AS, A, self.compressor)
        torch.mv(self.AS.T, self.residual, out=self.gradient)
        sample = Sample(mat=self.AS, vec=self.residual.clone(), res=self.gradient)

        if self.AS.shape[1] == 1:
            self._solve_column()
        else:
            self._solve_block()

        mul(self._x, self.compressor, self.update_vec, alpha=-self.alpha, beta=1.0)
        self.residual.sub_(self.AS @ self.update_vec, alpha=self.alpha)
        return sample

    def _solve_column(self):
        a = self.AS[:, 0]
        nrm_sq = torch.dot(a, a)
        if nrm_sq == 0:
            self.update_vec.zero_()
            return
        self.update_vec[0] = self.gradient[0] / nrm_sq

    def _solve_block(self):
        if self.sub_solver is None:
            self.sub_solver = complete_sub_solver(self.sub_solver_config, self.AS)
        else:
            self.sub_solver.update(self.AS)
        self.sub_solver.solve(self.update_vec, self.residual)
