"""This module provides a factory for completing compressors.

It maps compressor configurations to the classes that realize them against a given
problem.
"""

from typing import Optional

import torch

from .compressor import Compressor
from .configs import (
    CompressorConfig,
    GaussianConfig,
    SparseSignConfig,
    SamplingConfig,
    IdentityConfig,
    _is_compressor_config,
)
from .gauss import Gaussian
from .identity import Identity
from .sampling import Sampling
from .sparse_sign import SparseSign
from rlinsolve.utils.input_checkers import _is_torch_tensor_2d


# Mapping of configuration classes to their corresponding compressor classes
CONFIG_TO_COMPRESSOR = {
    GaussianConfig: Gaussian,
    SparseSignConfig: SparseSign,
    SamplingConfig: Sampling,
    IdentityConfig: Identity,
}


__all__ = ["complete_compressor"]


def complete_compressor(
    config: CompressorConfig,
    A: torch.Tensor,
    b: Optional[torch.Tensor] = None,
    x: Optional[torch.Tensor] = None,
) -> Compressor:
    """Create the compressor described by a configuration for a given problem.

    Args:
        config (CompressorConfig): The configuration of the compressor.
        A (torch.Tensor): The matrix the compressor will be applied to.
        b (Optional[torch.Tensor]): Right-hand side of the problem. Unused by the
            current techniques.
        x (Optional[torch.Tensor]): Current iterate. Unused by the current techniques.

    Returns:
        Compressor: A compressor whose shape is consistent with A.

    Raises:
        TypeError: If config is not a CompressorConfig.
        NotImplementedError: If no compressor class is registered for config.

    Example:
        >>> S = complete_compressor(GaussianConfig(compression_dim=10), A)
        >>> print(S.shape)
        torch.Size([10, 1000])
    """
    _is_compressor_config(config, "config")
    _is_torch_tensor_2d(A, "A")

    compressor_class = CONFIG_TO_COMPRESSOR.get(config.__class__)
    if compressor_class is None:
        raise NotImplementedError(
            "No `complete_compressor` method exists for configuration of type "
            f"{config.__class__.__name__}."
        )

    return compressor_class(config, A)
