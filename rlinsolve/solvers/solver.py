from abc import ABC, abstractmethod
from typing import Optional, Tuple, TYPE_CHECKING

import torch

if TYPE_CHECKING:
    from rlinsolve.models import LinSys  # Import only for type hints
    from rlinsolve.samplers import Sample  # Import only for type hints

__all__ = ["Solver"]


class Solver(ABC):
    """Base class for iterative solvers of ``A x = b``.

    A solver owns the iterate and advances it by one sample per call to ``_step``.
    """

    def __init__(self, system: "LinSys", x_init: torch.Tensor):
        self.system = system
        self._x = x_init.clone()

    @property
    def x(self) -> torch.Tensor:
        return self._x

    @property
    def block_dimension(self) -> int:
        return 1

    @abstractmethod
    def _step(self, iteration: int) -> "Sample":
        pass

    def concentration_constants(
        self, eta: float
    ) -> Optional[Tuple[float, Optional[float], float]]:
        return None
