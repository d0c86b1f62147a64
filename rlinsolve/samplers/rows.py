"""Samplers that return a single (possibly combined) row of the system."""

import torch

from .configs import RandomCyclicRowsConfig, GaussianRowsConfig
from .sampler import Sample, Sampler


class RandomCyclicRows(Sampler):
    """Visits every row once per pass, in a fresh random order for each pass."""

    def __init__(self, config: RandomCyclicRowsConfig, A, b):
        super().__init__(config, A, b)
        self.order = torch.randperm(A.shape[0], device=A.device)

    def _sample(self, x, iteration):
        pos = (iteration - 1) % self.A.shape[0]
        if pos == 0:
            self.order = torch.randperm(self.A.shape[0], device=self.A.device)
        i = self.order[pos]
        a, b_i = self.A[i], self.b[i]
        return Sample(mat=a, vec=b_i, res=torch.dot(a, x) - b_i)

    def concentration_constants(self, eta):
        m = self.A.shape[0]
        return m**2 / (4 * eta), None, float(m)


class GaussianRows(Sampler):
    """Returns ``a = A^T g`` and ``b^T g`` for a standard Gaussian vector g."""

    def __init__(self, config: GaussianRowsConfig, A, b):
        super().__init__(config, A, b)
        self.g = torch.empty(A.shape[0], dtype=A.dtype, device=A.device)
        self.a = torch.empty(A.shape[1], dtype=A.dtype, device=A.device)

    def _sample(self, x, iteration):
        self.g.normal_()
        torch.mv(self.A.T, self.g, out=self.a)
        b_g = torch.dot(self.b, self.g)
        return Sample(mat=self.a, vec=b_g, res=torch.dot(self.a, x) - b_g)

    def concentration_constants(self, eta):
        return 1 / (0.2345 * eta), 0.1127, 1.0
