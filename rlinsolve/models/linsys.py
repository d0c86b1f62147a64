from dataclasses import dataclass
from typing import Any, Optional, Tuple

import torch

from .model import Model
from rlinsolve.compressors import DimensionMismatchError
from rlinsolve.loggers import (
    Logger,
    ResidualLoggerConfig,
    _is_logger_config,
    complete_logger,
)
from rlinsolve.solvers import (
    Solver,
    RowActionConfig,
    _is_solver_config,
    _get_solver_name,
    _get_solver,
)
from rlinsolve.stops import MaxIterations, StopCriterion
from rlinsolve.utils import Tracker
from rlinsolve.utils.input_checkers import (
    _is_bool,
    _is_callable,
    _is_pos_int,
    _is_torch_tensor_1d,
    _is_torch_tensor_2d,
)


__all__ = ["LinSys", "SolveSession", "rsolve"]


@dataclass
class SolveSession:
    """Everything a solve leaves behind besides the solution.

    Attributes:
        iteration (int): Last completed iteration.
        x (torch.Tensor): Final iterate.
        solver (Solver): The solver that produced the iterates.
        logger (Logger): The logger holding the recorded histories.
        stop (StopCriterion): The stop criterion of the solve.
        converged (bool): True if the condition of the stop criterion held at the
            last iteration, even when that iteration is the cap.
        log (dict): Run tracker entries keyed by iteration.
    """

    iteration: int
    x: torch.Tensor
    solver: Solver
    logger: Logger
    stop: StopCriterion
    converged: bool
    log: dict


class LinSys(Model):
    """Model for linear systems ``A x = b``."""

    def __init__(self, A: torch.Tensor, b: torch.Tensor):
        """Initialize LinSys model.

        Args:
            A (torch.Tensor): Coefficient matrix of shape (m, n).
            b (torch.Tensor): Right-hand side of shape (m,).
        """
        self._check_inputs(A, b)
        self._A = A
        self._b = b

    @property
    def A(self):
        return self._A

    @property
    def b(self):
        return self._b

    def _check_inputs(self, A: Any, b: Any):
        _is_torch_tensor_2d(A, "A")
        _is_torch_tensor_1d(b, "b")
        if A.shape[0] != b.shape[0]:
            raise DimensionMismatchError(
                f"Vector b is of dimension {b.shape[0]} while A has {A.shape[0]} rows."
            )

    def _check_x_init(self, x_init: Any):
        _is_torch_tensor_1d(x_init, "x_init")
        if x_init.shape[0] != self.A.shape[1]:
            raise DimensionMismatchError(
                f"Vector x_init is of dimension {x_init.shape[0]} while A has "
                f"{self.A.shape[1]} columns."
            )

    def _compute_internal_metrics(self, x: torch.Tensor, logger: Logger):
        abs_res = torch.linalg.vector_norm(self.A @ x - self.b)
        rel_res = abs_res / torch.linalg.vector_norm(self.b)
        return {
            "abs_res": abs_res.item(),
            "rel_res": rel_res.item(),
            "progress": logger.resid,
        }

    def solve(
        self,
        solver_config=None,
        x_init=None,
        logger_config=None,
        stop=None,
        callback_fn=None,
        callback_args=None,
        callback_kwargs=None,
        callback_freq=10,
        log_in_wandb=False,
        wandb_init_kwargs=None,
    ) -> Tuple[torch.Tensor, SolveSession]:
        """Solve the system.

        Args:
            solver_config (Optional[SolverConfig]): Solver to use. Defaults to
                RowActionConfig().
            x_init (Optional[torch.Tensor]): Initial iterate, not modified. Defaults
                to zeros.
            logger_config (Optional[LoggerConfig]): Progress logger. Defaults to
                ResidualLoggerConfig().
            stop (Optional[StopCriterion]): Stop criterion. Defaults to
                MaxIterations(10 * m).
            callback_fn (Optional[Callable]): Called as
                ``callback_fn(x, model, *callback_args, **callback_kwargs)`` every
                callback_freq iterations.
            callback_args (Optional[list]): Extra positional arguments of callback_fn.
            callback_kwargs (Optional[dict]): Extra keyword arguments of callback_fn.
            callback_freq (int): Reporting frequency. Defaults to 10.
            log_in_wandb (bool): Stream the reports to Weights & Biases.
                Defaults to False.
            wandb_init_kwargs (Optional[dict]): Arguments of ``wandb.init``.
                Required when log_in_wandb is True.

        Returns:
            Tuple[torch.Tensor, SolveSession]: The final iterate and the session.
        """
        if solver_config is None:
            solver_config = RowActionConfig()
        if logger_config is None:
            logger_config = ResidualLoggerConfig()
        if stop is None:
            stop = MaxIterations(10 * self.A.shape[0])
        if x_init is None:
            x_init = torch.zeros(
                self.A.shape[1], dtype=self.A.dtype, device=self.A.device
            )

        _is_solver_config(solver_config, "solver_config")
        _is_logger_config(logger_config, "logger_config")
        if not isinstance(stop, StopCriterion):
            raise TypeError(
                f"stop is of type {type(stop).__name__}, "
                "but expected type StopCriterion"
            )
        self._check_x_init(x_init)
        if callback_fn is not None:
            _is_callable(callback_fn, "callback_fn")
        _is_pos_int(callback_freq, "callback_freq")
        _is_bool(log_in_wandb, "log_in_wandb")
        if log_in_wandb and wandb_init_kwargs is None:
            raise ValueError(
                "wandb_init_kwargs must be specified if log_in_wandb is True"
            )

        # Get solver and logger
        solver = _get_solver(
            system=self, x_init=x_init, solver_config=solver_config
        )
        logger = complete_logger(logger_config, stop.max_iter)

        # Setup run tracking
        run_config = self._get_run_config(
            solver_name=_get_solver_name(solver_config),
            solver_config=solver_config,
            logger_config=logger_config,
            stop=stop,
            callback_freq=callback_freq,
        )
        tracker = Tracker(
            report_freq=callback_freq,
            report_fn=self._get_report_fn(callback_fn, callback_args, callback_kwargs),
            run_config=run_config,
            wandb_init_kwargs=wandb_init_kwargs if log_in_wandb else None,
        )

        # Run solver
        iteration, converged, log = self._train(
            logger=logger,
            stop=stop,
            solver=solver,
            tracker=tracker,
        )

        session = SolveSession(
            iteration=iteration,
            x=solver.x,
            solver=solver,
            logger=logger,
            stop=stop,
            converged=converged,
            log=log,
        )
        return solver.x, session


def rsolve(
    A: torch.Tensor,
    b: torch.Tensor,
    x: Optional[torch.Tensor] = None,
    **kwargs,
) -> torch.Tensor:
    """Solve ``A x = b`` and return only the solution.

    When x is given it is used as the initial iterate and overwritten with the
    solution.

    Args:
        A (torch.Tensor): Coefficient matrix.
        b (torch.Tensor): Right-hand side.
        x (Optional[torch.Tensor]): Initial iterate. Defaults to zeros.
        **kwargs: Keyword arguments of :meth:`LinSys.solve`.

    Returns:
        torch.Tensor: The solution.
    """
    solution, _ = LinSys(A, b).solve(x_init=x, **kwargs)
    if x is None:
        return solution
    return x.copy_(solution)
