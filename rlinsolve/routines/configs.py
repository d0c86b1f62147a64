"""This module defines configuration classes for iterate update routines."""

from abc import ABC
from dataclasses import dataclass, asdict, field
from typing import Any

from rlinsolve.sub_solvers import SubSolverConfig, LQConfig, _is_sub_solver_config
from rlinsolve.utils.input_checkers import _is_nonneg_int, _is_pos_float


__all__ = [
    "RoutineConfig",
    "RowProjectionConfig",
    "BlockProjectionConfig",
    "_is_routine_config",
]


@dataclass(kw_only=True, frozen=False)
class RoutineConfig(ABC):
    """Abstract base class for routine configurations.

    Attributes:
        alpha (float): Relaxation parameter of the update. Defaults to 1.0.
    """

    alpha: float = 1.0

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        _is_pos_float(self.alpha, "alpha")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        return asdict(self)


@dataclass(kw_only=True, frozen=False)
class RowProjectionConfig(RoutineConfig):
    """Configuration for projections onto sampled rows.

    Attributes:
        memory (int): Number of previous search directions the new direction is
            orthogonalized against. 0 gives the standard Kaczmarz projection.
            Defaults to 5.
    """

    memory: int = 5

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_nonneg_int(self.memory, "memory")


@dataclass(kw_only=True, frozen=False)
class BlockProjectionConfig(RoutineConfig):
    """Configuration for projections onto sampled blocks of rows.

    Attributes:
        sub_solver_config (SubSolverConfig): Sub-solver used for the block problems.
            Defaults to LQConfig().
    """

    sub_solver_config: SubSolverConfig = field(default_factory=LQConfig)

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_sub_solver_config(self.sub_solver_config, "sub_solver_config")


def _is_routine_config(param: Any, param_name: str):
    if not isinstance(param, RoutineConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type RoutineConfig"
        )
