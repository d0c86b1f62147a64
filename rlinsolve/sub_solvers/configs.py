"""This module defines configuration classes for sub-solvers."""

from abc import ABC
from dataclasses import dataclass, asdict
from typing import Any


__all__ = [
    "SubSolverConfig",
    "QRConfig",
    "LQConfig",
    "_is_sub_solver_config",
]


@dataclass(kw_only=True, frozen=False)
class SubSolverConfig(ABC):
    """Abstract base class for sub-solver configurations."""

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        return asdict(self)


@dataclass(kw_only=True, frozen=False)
class QRConfig(SubSolverConfig):
    """Configuration for the QR sub-solver (least-squares solutions)."""

    pass


@dataclass(kw_only=True, frozen=False)
class LQConfig(SubSolverConfig):
    """Configuration for the LQ sub-solver (minimum-norm solutions)."""

    pass


def _is_sub_solver_config(param: Any, param_name: str):
    if not isinstance(param, SubSolverConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type SubSolverConfig"
        )
