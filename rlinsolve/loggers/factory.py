"""This module provides a factory for completing progress loggers."""

from .configs import (
    LoggerConfig,
    ResidualLoggerConfig,
    MovingAverageLoggerConfig,
    _is_logger_config,
)
from .logger import Logger
from .moving_average import MovingAverageLogger
from .residual import ResidualLogger
from rlinsolve.utils.input_checkers import _is_nonneg_int


# Mapping of configuration classes to their corresponding logger classes
CONFIG_TO_LOGGER = {
    ResidualLoggerConfig: ResidualLogger,
    MovingAverageLoggerConfig: MovingAverageLogger,
}


__all__ = ["complete_logger"]


def complete_logger(config: LoggerConfig, max_iterations: int) -> Logger:
    """Create the logger described by a configuration.

    Args:
        config (LoggerConfig): The configuration of the logger.
        max_iterations (int): Largest iteration the solve can reach. Sizes the
            histories of the logger.

    Returns:
        Logger: A logger with empty histories.

    Raises:
        TypeError: If config is not a LoggerConfig.
        ValueError: If max_iterations is negative or smaller than the collection
            rate.
        NotImplementedError: If no logger class is registered for config.
    """
    _is_logger_config(config, "config")
    _is_nonneg_int(max_iterations, "max_iterations")
    if max_iterations > 0 and config.collection_rate > max_iterations:
        raise ValueError(
            f"collection_rate={config.collection_rate} exceeds "
            f"max_iterations={max_iterations}"
        )

    logger_class = CONFIG_TO_LOGGER.get(config.__class__)
    if logger_class is None:
        raise NotImplementedError(
            "No `complete_logger` method exists for configuration of type "
            f"{config.__class__.__name__}."
        )

    return logger_class(config, max_iterations)
