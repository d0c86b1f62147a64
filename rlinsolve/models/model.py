from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple

import torch

from rlinsolve.loggers import Logger, LoggerConfig
from rlinsolve.solvers import Solver, SolverConfig
from rlinsolve.stops import StopCriterion
from rlinsolve.utils import Tracker


__all__ = ["Model"]


class Model(ABC):
    def __init__(self, *args, **kwargs):
        pass

    @abstractmethod
    def _check_inputs(self, *args, **kwargs):
        pass

    @abstractmethod
    def _compute_internal_metrics(self, *args, **kwargs):
        pass

    def _get_report_fn(
        self,
        callback_fn: Optional[Callable],
        callback_args: Optional[list],
        callback_kwargs: Optional[dict],
    ) -> Callable:
        args = () if callback_args is None else tuple(callback_args)
        kwargs = {} if callback_kwargs is None else dict(callback_kwargs)

        def report_fn(x, logger):
            report = {"internal_metrics": self._compute_internal_metrics(x, logger)}
            if callback_fn is not None:
                report["callback"] = callback_fn(x, self, *args, **kwargs)
            return report

        return report_fn

    @staticmethod
    def _get_run_config(
        solver_name: str,
        solver_config: SolverConfig,
        logger_config: LoggerConfig,
        stop: StopCriterion,
        callback_freq: int,
    ) -> dict:
        return {
            "solver_name": solver_name,
            "solver_config": solver_config.to_dict(),
            "logger_config": logger_config.to_dict(),
            "stop": repr(stop),
            "callback_freq": callback_freq,
        }

    def _train(
        self,
        logger: Logger,
        stop: StopCriterion,
        solver: Solver,
        tracker: Tracker,
    ) -> Tuple[int, bool, dict]:
        """Run the solve loop until the stop criterion fires or the cap is reached.

        The initial iterate is recorded as iteration 0 and checked before any step is
        taken. Every later iteration draws a sample, updates the iterate, logs and
        checks the stop criterion, in that order. The loop never runs past
        ``stop.max_iter``, whatever the criterion answers.

        Returns:
            Tuple[int, bool, dict]: The last iteration, whether the condition of the
            criterion held there, and the tracker log.
        """
        log = {}
        A, b = self.A, self.b

        logger._reset()
        logger._bind(solver)

        # Get initial log and check for termination
        logger._update(0, solver.x, None, A, b)
        log_0 = tracker._compute_log(0, solver.x, logger)
        if log_0 is not None:
            log[0] = log_0

        iteration = 0
        while iteration < stop.max_iter and not stop._check(logger, iteration):
            iteration += 1
            sample = solver._step(iteration)
            logger._update(iteration, solver.x, sample, A, b)
            log_i = tracker._compute_log(iteration, solver.x, logger)
            if log_i is not None:
                log[iteration] = log_i

        converged = stop._condition(logger, iteration)
        logger._record_final(iteration)
        tracker._terminate()

        return iteration, converged, log

    @abstractmethod
    def solve(
        self,
        solver_config: Optional[SolverConfig] = None,
        x_init: Optional[torch.Tensor] = None,
        logger_config: Optional[LoggerConfig] = None,
        stop: Optional[StopCriterion] = None,
        callback_fn: Optional[Callable] = None,
        callback_args: Optional[list] = None,
        callback_kwargs: Optional[dict] = None,
        callback_freq: int = 10,
        log_in_wandb: bool = False,
        wandb_init_kwargs: Optional[dict] = None,
    ):
        pass
