from typing import TYPE_CHECKING

import torch

from .column_projection import ColumnProjection
from .configs import (
    SolverConfig,
    RowActionConfig,
    KaczmarzConfig,
    ColumnProjectionConfig,
    IHSConfig,
)
from .ihs import IterativeHessianSketch
from .kaczmarz import Kaczmarz
from .row_action import RowActionSolver

if TYPE_CHECKING:
    from rlinsolve.models import LinSys  # Import only for type hints


__all__ = ["_get_solver"]


def _get_row_action(
    system: "LinSys", x_init: torch.Tensor, row_action_config: RowActionConfig
):
    return RowActionSolver(
        system=system,
        x_init=x_init,
        sampler_config=row_action_config.sampler_config,
        routine_config=row_action_config.routine_config,
    )


def _get_kaczmarz(
    system: "LinSys", x_init: torch.Tensor, kaczmarz_config: KaczmarzConfig
):
    return Kaczmarz(
        system=system,
        x_init=x_init,
        compressor_config=kaczmarz_config.compressor_config,
        sub_solver_config=kaczmarz_config.sub_solver_config,
        alpha=kaczmarz_config.alpha,
    )


def _get_column_projection(
    system: "LinSys", x_init: torch.Tensor, column_config: ColumnProjectionConfig
):
    return ColumnProjection(
        system=system,
        x_init=x_init,
        compressor_config=column_config.compressor_config,
        sub_solver_config=column_config.sub_solver_config,
        alpha=column_config.alpha,
    )


def _get_ihs(system: "LinSys", x_init: torch.Tensor, ihs_config: IHSConfig):
    return IterativeHessianSketch(
        system=system,
        x_init=x_init,
        compressor_config=ihs_config.compressor_config,
        alpha=ihs_config.alpha,
    )


def _get_solver(
    system: "LinSys", x_init: torch.Tensor, solver_config: SolverConfig
):
    # Get the class of solver_config
    solver_config_class = solver_config.__class__

    if solver_config_class == RowActionConfig:
        return _get_row_action(system, x_init, solver_config)
    elif solver_config_class == KaczmarzConfig:
        return _get_kaczmarz(system, x_init, solver_config)
    elif solver_config_class == ColumnProjectionConfig:
        return _get_column_projection(system, x_init, solver_config)
    elif solver_config_class == IHSConfig:
        return _get_ihs(system, x_init, solver_config)
    raise NotImplementedError(
        "No solver exists for configuration of type "
        f"{solver_config_class.__name__}."
    )
