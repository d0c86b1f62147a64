"""This module provides a factory for completing routines."""

import torch

from .configs import (
    RoutineConfig,
    RowProjectionConfig,
    BlockProjectionConfig,
    _is_routine_config,
)
from .projections import BlockProjection, RowProjection
from .routine import Routine


CONFIG_TO_ROUTINE = {
    RowProjectionConfig: RowProjection,
    BlockProjectionConfig: BlockProjection,
}


__all__ = ["complete_routine"]


def complete_routine(
    config: RoutineConfig, A: torch.Tensor, b: torch.Tensor
) -> Routine:
    """Create the routine described by a configuration for the system ``A x = b``.

    Raises:
        TypeError: If config is not a RoutineConfig.
        NotImplementedError: If no routine class is registered for config.
    """
    _is_routine_config(config, "config")

    routine_class = CONFIG_TO_ROUTINE.get(config.__class__)
    if routine_class is None:
        raise NotImplementedError(
            "No `complete_routine` method exists for configuration of type "
            f"{config.__class__.__name__}."
        )

    return routine_class(config, A, b)
