from abc import ABC
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any

from rlinsolve.compressors import CompressorConfig, _is_compressor_config
from rlinsolve.routines import (
    RoutineConfig,
    RowProjectionConfig,
    _is_routine_config,
)
from rlinsolve.samplers import (
    SamplerConfig,
    RandomCyclicRowsConfig,
    _is_sampler_config,
)
from rlinsolve.sub_solvers import (
    SubSolverConfig,
    LQConfig,
    QRConfig,
    _is_sub_solver_config,
)
from rlinsolve.utils.input_checkers import _is_pos_float


__all__ = [
    "SolverConfig",
    "RowActionConfig",
    "KaczmarzConfig",
    "ColumnProjectionConfig",
    "IHSConfig",
    "_is_solver_config",
    "_get_solver_name",
]


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name.lower()
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    return value


@dataclass(kw_only=True, frozen=False)
class SolverConfig(ABC):
    def to_dict(self) -> dict:
        # asdict recurses into nested configs, enums are converted afterwards
        return _to_plain(asdict(self))


@dataclass(kw_only=True, frozen=False)
class RowActionConfig(SolverConfig):
    """Configuration of a solver combining a row sampler with an update routine.

    Attributes:
        sampler_config (SamplerConfig): Technique drawing the rows of each iteration.
            Defaults to RandomCyclicRowsConfig().
        routine_config (RoutineConfig): Technique updating the iterate from a sample.
            Defaults to RowProjectionConfig().
    """

    sampler_config: SamplerConfig = field(default_factory=RandomCyclicRowsConfig)
    routine_config: RoutineConfig = field(default_factory=RowProjectionConfig)

    def __post_init__(self):
        _is_sampler_config(self.sampler_config, "sampler_config")
        _is_routine_config(self.routine_config, "routine_config")


@dataclass(kw_only=True, frozen=False)
class KaczmarzConfig(SolverConfig):
    """Configuration of the (block) Kaczmarz solver.

    Attributes:
        compressor_config (CompressorConfig): Compressor applied to the rows of the
            system at every iteration.
        sub_solver_config (SubSolverConfig): Sub-solver projecting onto the
            compressed rows. Unused when the compression dimension is 1.
            Defaults to LQConfig().
        alpha (float): Relaxation parameter of the update. Defaults to 1.0.
    """

    compressor_config: CompressorConfig
    sub_solver_config: SubSolverConfig = field(default_factory=LQConfig)
    alpha: float = 1.0

    def __post_init__(self):
        _is_compressor_config(self.compressor_config, "compressor_config")
        _is_sub_solver_config(self.sub_solver_config, "sub_solver_config")
        _is_pos_float(self.alpha, "alpha")


@dataclass(kw_only=True, frozen=False)
class ColumnProjectionConfig(SolverConfig):
    """Configuration of the column projection solver for least-squares problems.

    Attributes:
        compressor_config (CompressorConfig): Compressor applied to the columns of
            the system at every iteration. A `left` compressor is replaced by its
            adjoint with a warning.
        sub_solver_config (SubSolverConfig): Sub-solver of the compressed
            least-squares problems. Unused when the compression dimension is 1.
            Defaults to QRConfig().
        alpha (float): Relaxation parameter of the update. Defaults to 1.0.
    """

    compressor_config: CompressorConfig
    sub_solver_config: SubSolverConfig = field(default_factory=QRConfig)
    alpha: float = 1.0

    def __post_init__(self):
        _is_compressor_config(self.compressor_config, "compressor_config")
        _is_sub_solver_config(self.sub_solver_config, "sub_solver_config")
        _is_pos_float(self.alpha, "alpha")


@dataclass(kw_only=True, frozen=False)
class IHSConfig(SolverConfig):
    """Configuration of the iterative Hessian sketch.

    Attributes:
        compressor_config (CompressorConfig): Compressor of the rows of the system.
            Its compression dimension must be at least the number of columns.
        alpha (float): Step size. Defaults to 1.0.
    """

    compressor_config: CompressorConfig
    alpha: float = 1.0

    def __post_init__(self):
        _is_compressor_config(self.compressor_config, "compressor_config")
        _is_pos_float(self.alpha, "alpha")


def _is_solver_config(param: Any, param_name: str):
    if not isinstance(param, SolverConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type SolverConfig"
        )


CONFIG_TO_NAME = {
    RowActionConfig: "row_action",
    KaczmarzConfig: "kaczmarz",
    ColumnProjectionConfig: "column_projection",
    IHSConfig: "ihs",
}


def _get_solver_name(solver_config: SolverConfig) -> str:
    config_class = solver_config.__class__
    return CONFIG_TO_NAME.get(config_class)
