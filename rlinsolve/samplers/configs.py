"""This module defines configuration classes for row samplers."""

from abc import ABC
from dataclasses import dataclass, asdict
from typing import Any

from rlinsolve.utils.input_checkers import _is_bool, _is_pos_int


__all__ = [
    "SamplerConfig",
    "RandomCyclicRowsConfig",
    "GaussianRowsConfig",
    "BlockGaussianRowsConfig",
    "BlockSampledRowsConfig",
    "_is_sampler_config",
]


@dataclass(kw_only=True, frozen=False)
class SamplerConfig(ABC):
    """Abstract base class for sampler configurations."""

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        return asdict(self)


@dataclass(kw_only=True, frozen=False)
class RandomCyclicRowsConfig(SamplerConfig):
    """Configuration for sampling single rows in random cyclic order.

    Every pass over the rows follows a fresh random permutation.
    """

    pass


@dataclass(kw_only=True, frozen=False)
class GaussianRowsConfig(SamplerConfig):
    """Configuration for sampling Gaussian combinations of the rows."""

    pass


@dataclass(kw_only=True, frozen=False)
class BlockGaussianRowsConfig(SamplerConfig):
    """Configuration for Gaussian sketches of blocks of rows.

    Attributes:
        block_size (int): Number of rows of each sketched block. Defaults to 2.
    """

    block_size: int = 2

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        _is_pos_int(self.block_size, "block_size")


@dataclass(kw_only=True, frozen=False)
class BlockSampledRowsConfig(SamplerConfig):
    """Configuration for uniformly sampled blocks of rows.

    Attributes:
        block_size (int): Number of rows of each block. Defaults to 2.
        replace (bool): Whether rows are drawn with replacement. Defaults to False.
    """

    block_size: int = 2
    replace: bool = False

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        _is_pos_int(self.block_size, "block_size")
        _is_bool(self.replace, "replace")


def _is_sampler_config(param: Any, param_name: str):
    if not isinstance(param, SamplerConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type SamplerConfig"
        )
