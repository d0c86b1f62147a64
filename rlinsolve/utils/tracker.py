"""Run-level progress reporting.

The tracker measures the wall time between two reports and, every ``report_freq``
iterations, evaluates a report function on the current iterate. When a
Weights & Biases run is requested the reports are streamed to it as well.
"""

from typing import Callable, Optional
from warnings import warn
import time

import wandb


__all__ = ["Tracker"]


def _merge_run_config(run_config: dict, wandb_init_kwargs: dict) -> dict:
    """Combine the description of a solve with the user's ``wandb.init`` kwargs."""
    init_kwargs = dict(wandb_init_kwargs)
    config = dict(run_config)
    if "config" in init_kwargs:
        warn(
            "Found 'config' key in wandb_init_kwargs. "
            "Merging with internally specified 'config' key."
        )
        config.update(init_kwargs.pop("config"))
    init_kwargs["config"] = config
    return init_kwargs


class Tracker:
    """Times iterations, produces periodic reports and streams them to wandb.

    Attributes:
        report_freq (int): Iterations between two reports.
        report_fn (Optional[Callable]): Called with the arguments of
            ``_compute_log`` to produce the ``metrics`` entry of a report.
        log_in_wandb (bool): Whether reports are sent to Weights & Biases.
        iter_time (float): Wall time since the previous report.
        cum_time (float): Wall time accumulated over every report.
    """

    def __init__(
        self,
        report_freq: int,
        report_fn: Optional[Callable] = None,
        run_config: Optional[dict] = None,
        wandb_init_kwargs: Optional[dict] = None,
    ):
        self.report_freq = report_freq
        self.report_fn = report_fn
        self.log_in_wandb = wandb_init_kwargs is not None

        if self.log_in_wandb:
            run_config = {} if run_config is None else run_config
            wandb.init(**_merge_run_config(run_config, wandb_init_kwargs))

        self.iter_time = 0.0
        self.cum_time = 0.0
        self._mark = time.time()

    def _compute_log(self, i: int, *args, **kwargs) -> Optional[dict]:
        if i % self.report_freq != 0:
            return None

        now = time.time()
        self.iter_time = now - self._mark
        self.cum_time += self.iter_time

        metrics = {} if self.report_fn is None else self.report_fn(*args, **kwargs)
        report = {
            "iter_time": self.iter_time,
            "cum_time": self.cum_time,
            "metrics": metrics,
        }
        if self.log_in_wandb:
            wandb.log(report, step=i)

        # the report itself is not charged to the next iterations
        self._mark = time.time()
        return report

    def _terminate(self):
        if self.log_in_wandb:
            wandb.finish()
