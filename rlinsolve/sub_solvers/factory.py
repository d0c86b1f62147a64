"""This module provides a factory for completing sub-solvers."""

from typing import Optional

import torch

from .configs import SubSolverConfig, QRConfig, LQConfig, _is_sub_solver_config
from .lq import LQSolver
from .qr import QRSolver
from .sub_solver import SubSolver


# Mapping of configuration classes to their corresponding sub-solver classes
CONFIG_TO_SUB_SOLVER = {
    QRConfig: QRSolver,
    LQConfig: LQSolver,
}


__all__ = ["complete_sub_solver"]


def complete_sub_solver(
    config: SubSolverConfig, A: torch.Tensor, b: Optional[torch.Tensor] = None
) -> SubSolver:
    """Create the sub-solver described by a configuration, bound to A.

    Args:
        config (SubSolverConfig): The configuration of the sub-solver.
        A (torch.Tensor): The matrix of the sub-problem.
        b (Optional[torch.Tensor]): Right-hand side of the sub-problem. Unused by the
            current techniques.

    Returns:
        SubSolver: A sub-solver bound to A.

    Raises:
        TypeError: If config is not a SubSolverConfig.
        NotImplementedError: If no sub-solver class is registered for config.
    """
    _is_sub_solver_config(config, "config")

    sub_solver_class = CONFIG_TO_SUB_SOLVER.get(config.__class__)
    if sub_solver_class is None:
        raise NotImplementedError(
            "No `complete_sub_solver` method exists for configuration of type "
            f"{config.__class__.__name__}."
        )

    return sub_solver_class(config, A)
