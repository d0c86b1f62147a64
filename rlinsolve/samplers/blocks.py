"""Samplers that return a compressed block of rows of the system.

Each block sampler owns a left compressor, redraws it every iteration and forms
``S A``, ``S b`` and the sketched residual into preallocated buffers.
"""

import torch

from .configs import BlockGaussianRowsConfig, BlockSampledRowsConfig
from .sampler import Sample, Sampler
from rlinsolve.compressors import (
    CompressorConfig,
    GaussianConfig,
    SamplingConfig,
    complete_compressor,
    mul,
)


class _BlockRows(Sampler):
    def __init__(self, config, A, b, compressor_config: CompressorConfig):
        super().__init__(config, A, b)
        self.compressor = complete_compressor(compressor_config, A, b)
        s = self.compressor.shape[0]
        self.SA = torch.empty(s, A.shape[1], dtype=A.dtype, device=A.device)
        self.Sb = torch.empty(s, dtype=A.dtype, device=A.device)
        self.res = torch.empty(s, dtype=A.dtype, device=A.device)

    @property
    def block_dimension(self) -> int:
        return self.compressor.shape[0]

    def _sample(self, x, iteration):
        self.compressor.update(self.A, self.b, x)
        mul(self.SA, self.compressor, self.A)
        mul(self.Sb, self.compressor, self.b)
        torch.mv(self.SA, x, out=self.res)
        self.res.sub_(self.Sb)
        return Sample(mat=self.SA, vec=self.Sb, res=self.res)

    def concentration_constants(self, eta):
        return self.compressor.concentration_constants(eta)


class BlockGaussianRows(_BlockRows):
    """Gaussian sketch of all rows into ``block_size`` rows."""

    def __init__(self, config: BlockGaussianRowsConfig, A, b):
        super().__init__(
            config, A, b, GaussianConfig(compression_dim=config.block_size)
        )


class BlockSampledRows(_BlockRows):
    """Uniformly sampled block of ``block_size`` rows."""

    def __init__(self, config: BlockSampledRowsConfig, A, b):
        super().__init__(
            config,
            A,
            b,
            SamplingConfig(compression_dim=config.block_size, replace=config.replace),
        )
