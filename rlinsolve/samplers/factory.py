"""This module provides a factory for completing row samplers."""

import torch

from .blocks import BlockGaussianRows, BlockSampledRows
from .configs import (
    SamplerConfig,
    RandomCyclicRowsConfig,
    GaussianRowsConfig,
    BlockGaussianRowsConfig,
    BlockSampledRowsConfig,
    _is_sampler_config,
)
from .rows import GaussianRows, RandomCyclicRows
from .sampler import Sampler


CONFIG_TO_SAMPLER = {
    RandomCyclicRowsConfig: RandomCyclicRows,
    GaussianRowsConfig: GaussianRows,
    BlockGaussianRowsConfig: BlockGaussianRows,
    BlockSampledRowsConfig: BlockSampledRows,
}


__all__ = ["complete_sampler"]


def complete_sampler(
    config: SamplerConfig, A: torch.Tensor, b: torch.Tensor
) -> Sampler:
    """Create the sampler described by a configuration for the system ``A x = b``.

    Raises:
        TypeError: If config is not a SamplerConfig.
        NotImplementedError: If no sampler class is registered for config.
    """
    _is_sampler_config(config, "config")

    sampler_class = CONFIG_TO_SAMPLER.get(config.__class__)
    if sampler_class is None:
        raise NotImplementedError(
            "No `complete_sampler` method exists for configuration of type "
            f"{config.__class__.__name__}."
        )

    return sampler_class(config, A, b)
