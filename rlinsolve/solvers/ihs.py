"""Iterative Hessian sketch.

Each iteration replaces the Hessian ``A^T A`` of the least-squares objective by
the sketched Hessian ``(S A)^T (S A) = R^T R`` and takes the Newton-like step

    x <- x + alpha * R^{-1} R^{-T} A^T (b - A x).

The compression dimension must be at least the number of columns of ``A`` so that
``R`` is square.

For more information see:
    - Pilanci, M. and Wainwright, M. J. "Iterative Hessian sketch: fast and
      accurate solution approximation for constrained least-squares." J. Mach.
      Learn. Res. 17.53 (2016): 1-38.
"""

from typing import TYPE_CHECKING
from warnings import warn

import torch

from .solver import Solver
from rlinsolve.compressors import CompressorConfig, complete_compressor, mul
from rlinsolve.compressors.enums import _Cardinality
from rlinsolve.samplers import Sample
from rlinsolve.sub_solvers.sub_solver import _is_singular

if TYPE_CHECKING:
    from rlinsolve.models import LinSys  # Import only for type hints


class IterativeHessianSketch(Solver):
    def __init__(
        self,
        system: "LinSys",
        x_init: torch.Tensor,
        compressor_config: CompressorConfig,
        alpha: float,
    ):
        super().__init__(system, x_init)
        A, b = system.A, system.b
        self.alpha = alpha
        self._warned = False

        if compressor_config.cardinality == _Cardinality.RIGHT:
            warn(
                "Compressor has cardinality `right` but IterativeHessianSketch "
                "compresses from the `left`. Using the adjoint of the compressor "
                "instead.",
                UserWarning,
            )
            self._source = A.T
            self.technique = complete_compressor(compressor_config, self._source, b)
            self.compressor = self.technique.adjoint
        else:
            self._source = A
            self.technique = complete_compressor(compressor_config, A, b)
            self.compressor = self.technique

        s, n = self.compressor.shape[0], A.shape[1]
        if s < n:
            raise ValueError(
                f"compression_dim must be at least the number of columns of A ({n}), "
                f"but received {s}"
            )

        self.SA = torch.zeros(s, n, dtype=A.dtype, device=A.device)
        self.Sb = torch.zeros(s, dtype=b.dtype, device=b.device)
        self.res = torch.zeros(s, dtype=A.dtype, device=A.device)
        self.gradient = torch.zeros(n, dtype=A.dtype, device=A.device)
        self.update_vec = torch.zeros(n, dtype=A.dtype, device=A.device)

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

        # negative gradient of 0.5 * ||A x - b||^2
        torch.mv(A.T, b - A @ self._x, out=self.gradient)
        R = torch.linalg.qr(self.SA, mode="r").R
        if _is_singular(R):
            self._singular_step()
        else:
            y = torch.linalg.solve_triangular(
                R.T, self.gradient.unsqueeze(-1), upper=False
            )
            step = torch.linalg.solve_triangular(R, y, upper=True)
            self.update_vec.copy_(step.squeeze(-1))

        self._x.add_(self.update_vec, alpha=self.alpha)
        return Sample(mat=self.SA, vec=self.Sb, res=self.res)

    def _singular_step(self):
        if not self._warned:
            warn(
                "IterativeHessianSketch received a numerically singular sketch. "
                "Falling back to the pseudo-inverse of the sketched Hessian.",
                RuntimeWarning,
            )
            self._warned = True
        hessian = self.SA.T @ self.SA
        torch.mv(torch.linalg.pinv(hessian), self.gradient, out=self.update_vec)

    def concentration_constants(self, eta):
        return self.technique.concentration_constants(eta)
