"""This module defines configuration classes for the compression techniques.

A configuration only holds user-facing parameters. Completing it against a matrix
(see :func:`rlinsolve.compressors.complete_compressor`) yields a Compressor that owns
all buffers needed for repeated application.
"""

from abc import ABC
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Optional

from .enums import _Cardinality, _Distribution
from rlinsolve.utils.input_checkers import _is_bool, _is_pos_int


__all__ = [
    "CompressorConfig",
    "GaussianConfig",
    "SparseSignConfig",
    "SamplingConfig",
    "IdentityConfig",
    "_is_compressor_config",
]


@dataclass(kw_only=True, frozen=False)
class CompressorConfig(ABC):
    """Abstract base class for compressor configurations.

    Attributes:
        cardinality (str): Side from which the compressor is applied. Can be specified
            as "left" or "right". Defaults to "left".
            The cardinality internally maps to the _Cardinality enum.
    """

    cardinality: str = "left"

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        self.cardinality = _Cardinality._from_str(self.cardinality, "cardinality")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        data_dict = asdict(self)
        for key, value in data_dict.items():
            if isinstance(value, Enum):
                data_dict[key] = value.name.lower()
        return data_dict


@dataclass(kw_only=True, frozen=False)
class GaussianConfig(CompressorConfig):
    """Configuration for the Gaussian compressor.

    Attributes:
        compression_dim (int): Target compression dimension.
    """

    compression_dim: int

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")


@dataclass(kw_only=True, frozen=False)
class SparseSignConfig(CompressorConfig):
    """Configuration for the sparse sign compressor.

    Attributes:
        compression_dim (int): Target compression dimension.
        nnz (Optional[int]): Number of nonzeros in each column (left) or row (right)
            of the compression matrix. Defaults to min(8, compression_dim).
    """

    compression_dim: int
    nnz: Optional[int] = None

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")
        if self.nnz is None:
            self.nnz = min(8, self.compression_dim)
        _is_pos_int(self.nnz, "nnz")
        if self.nnz > self.compression_dim:
            raise ValueError(
                f"nnz must not exceed compression_dim, but received nnz={self.nnz} "
                f"and compression_dim={self.compression_dim}"
            )


@dataclass(kw_only=True, frozen=False)
class SamplingConfig(CompressorConfig):
    """Configuration for the sampling compressor.

    Attributes:
        compression_dim (int): Number of rows (left) or columns (right) to select.
        distribution (str): Probability weights over the indices. Can be specified
            as "uniform" or "squared_norm". Defaults to "uniform".
        replace (bool): Whether indices are drawn with replacement.
            Defaults to False.
    """

    compression_dim: int
    distribution: str = "uniform"
    replace: bool = False

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")
        self.distribution = _Distribution._from_str(self.distribution, "distribution")
        _is_bool(self.replace, "replace")


@dataclass(kw_only=True, frozen=False)
class IdentityConfig(CompressorConfig):
    """Configuration for the Identity compressor.

    This configuration doesn't require any specific parameters.
    """

    pass


def _is_compressor_config(param: Any, param_name: str):
    """Check if a parameter is an instance of CompressorConfig.

    Args:
        param (Any): The parameter to check.
        param_name (str): The name of the parameter (for error reporting).

    Raises:
        TypeError: If the parameter is not an instance of CompressorConfig.
    """
    if not isinstance(param, CompressorConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type CompressorConfig"
        )
