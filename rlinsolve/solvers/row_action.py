from typing import TYPE_CHECKING

import torch

from .solver import Solver
from rlinsolve.routines import RoutineConfig, complete_routine
from rlinsolve.samplers import SamplerConfig, complete_sampler

if TYPE_CHECKING:
    from rlinsolve.models import LinSys  # Import only for type hints


class RowActionSolver(Solver):
    """Solver drawing a sample from a sampler and passing it to a routine.

    The sample is drawn at the current iterate, so its residual is the one of the
    iterate before the update.
    """

    def __init__(
        self,
        system: "LinSys",
        x_init: torch.Tensor,
        sampler_config: SamplerConfig,
        routine_config: RoutineConfig,
    ):
        super().__init__(system, x_init)
        self.sampler = complete_sampler(sampler_config, system.A, system.b)
        self.routine = complete_routine(routine_config, system.A, system.b)

    @property
    def block_dimension(self) -> int:
        return self.sampler.block_dimension

    def _step(self, iteration):
        sample = self.sampler._sample(self._x, iteration)
        self.routine._step(self._x, sample, iteration)
        return sample

    def concentration_constants(self, eta):
        return self.sampler.concentration_constants(eta)
