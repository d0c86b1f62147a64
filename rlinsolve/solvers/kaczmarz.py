"""Kaczmarz solver.

At every iteration the rows of the system are compressed, ``S A`` and ``S b``, and
the iterate is projected onto the solution set of the compressed system,

    x <- x - alpha * (S A)^+ (S A x - S b).

With a compression dimension of 1 this is the classical Kaczmarz update
``x <- x - alpha * (<a, x> - c) / <a, a> * a``.

For more information see:
    - Strohmer, T. and Vershynin, R. "A randomized Kaczmarz algorithm with
      exponential convergence." J. Fourier Anal. Appl. 15 (2009): 262-278.
    - Needell, D. and Tropp, J. A. "Paved with good intentions: analysis of a
      randomized block Kaczmarz method." Linear Algebra Appl. 441 (2014): 199-221.
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


class Kaczmarz(Solver):
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

        if compressor_config.cardinality == _Cardinality.RIGHT:
            warn(
                "Compressor has cardinality `right` but Kaczmarz compresses from the "
                "`left`. Using the adjoint of the compressor instead.",
                UserWarning,
            )
            # A right compressor of A^T is the adjoint of a left compressor of A
            self._source = A.T
            self.technique = complete_compressor(compressor_config, self._source, b)
            self.compressor = self.technique.adjoint
        else:
            self._source = A
            self.technique = complete_compressor(compressor_config, A, b)
            self.compressor = self.technique

        s = self.compressor.shape[0]
        self.SA = torch.zeros(s, A.shape[1], dtype=A.dtype, device=A.device)
        self.Sb = torch.zeros(s, dtype=b.dtype, device=b.device)
        self.res = torch.zeros(s, dtype=A.dtype, device=A.device)
        self.update_vec = torch.zeros(A.shape[1], dtype=A.dtype, device=A.device)

    @property
    def block_dimension(self) -> int:
        return self.compressor.shape[0]

    def _step(self, iteration):
        A, b = self.system.A, self.system.b
        self.technique.update(self._source, b, self._x)
        mul(self.SA, self.compressor, A)
        mul(self.Sb, self.compressor, b)
        torch.mv(self.SA, self._x, out=self.res)
        self.res.sub_(self.Sb)

        if self.SA.shape[0] == 1:
            self._update_row()
        else:
            self._update_block()

        return Sample(mat=self.SA, vec=self.Sb, res=self.res)

    def _update_row(self):
        a = self.SA[0]
        nrm_sq = torch.dot(a, a)
        if nrm_sq == 0:
            return
        self._x.sub_(a * (self.alpha * self.res[0] / nrm_sq))

    def _update_block(self):
        if self.sub_solver is None:
            self.sub_solver = complete_sub_solver(self.sub_solver_config, self.SA)
        else:
            self.sub_solver.update(self.SA)
        self.sub_solver.solve(self.update_vec, self.res)
        self._x.sub_(self.update_vec, alpha=self.alpha)

    def concentration_constants(self, eta):
        return self.technique.concentration_constants(eta)
