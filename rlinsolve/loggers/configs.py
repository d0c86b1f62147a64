"""This module defines configuration classes for progress loggers."""

from abc import ABC
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Optional

from .enums import _ErrorMode
from rlinsolve.utils.input_checkers import _is_bool, _is_pos_float, _is_pos_int


__all__ = [
    "LoggerConfig",
    "ResidualLoggerConfig",
    "MovingAverageLoggerConfig",
    "_is_logger_config",
]


@dataclass(kw_only=True, frozen=False)
class LoggerConfig(ABC):
    """Abstract base class for logger configurations.

    Attributes:
        collection_rate (int): Record every collection_rate-th iteration, starting
            with iteration 0. Defaults to 1.
    """

    collection_rate: int = 1

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        _is_pos_int(self.collection_rate, "collection_rate")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        data_dict = asdict(self)
        for key, value in data_dict.items():
            if isinstance(value, Enum):
                data_dict[key] = value.name.lower()
        return data_dict


@dataclass(kw_only=True, frozen=False)
class ResidualLoggerConfig(LoggerConfig):
    """Configuration for the residual logger.

    Attributes:
        error (str): Progress measure. Can be specified as "full" for the norm of
            the full residual, "compressed" for the norm of the sketched residual of
            each sample or "ls_gradient" for the norm of ``A^T (A x - b)``.
            Defaults to "full".
            The error internally maps to the _ErrorMode enum.
    """

    error: str = "full"

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        self.error = _ErrorMode._from_str(self.error, "error")


@dataclass(kw_only=True, frozen=False)
class MovingAverageLoggerConfig(LoggerConfig):
    """Configuration for the moving average logger.

    Attributes:
        lambda1 (int): Width of the moving average in the fast convergence phase.
            Defaults to 1.
        lambda2 (int): Width of the moving average in the steady phase.
            Defaults to 30.
        sigma2 (Optional[float]): Variance parameter of the sub-Exponential bound.
            Looked up from the sampling technique when None. Defaults to None.
        omega (Optional[float]): Exponential parameter of the sub-Exponential bound.
            Only used when sigma2 is given. Defaults to None.
        eta (float): Conservativeness of the bound, larger is less conservative.
            Defaults to 1.0.
        true_res (bool): Track the full residual instead of the sketched one.
            Defaults to False.
    """

    lambda1: int = 1
    lambda2: int = 30
    sigma2: Optional[float] = None
    omega: Optional[float] = None
    eta: float = 1.0
    true_res: bool = False

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.lambda1, "lambda1")
        _is_pos_int(self.lambda2, "lambda2")
        if self.lambda1 > self.lambda2:
            raise ValueError(
                "lambda1 must be less than or equal to lambda2, but received "
                f"lambda1={self.lambda1} and lambda2={self.lambda2}"
            )
        if self.sigma2 is not None:
            _is_pos_float(self.sigma2, "sigma2")
        if self.omega is not None:
            _is_pos_float(self.omega, "omega")
        _is_pos_float(self.eta, "eta")
        _is_bool(self.true_res, "true_res")


def _is_logger_config(param: Any, param_name: str):
    if not isinstance(param, LoggerConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type LoggerConfig"
        )
