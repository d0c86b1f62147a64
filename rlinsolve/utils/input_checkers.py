from typing import Any

import torch


def _is_bool(param: Any, param_name: str):
    if not isinstance(param, bool):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, but expected type bool"
        )


def _is_callable(param: Any, param_name: str):
    if not callable(param):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, but expected a callable"
        )


def _is_float(param: Any, param_name: str):
    # ints are accepted wherever a float is expected, bools are not
    if isinstance(param, bool) or not isinstance(param, (float, int)):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, but expected type float"
        )


def _is_int(param: Any, param_name: str):
    if isinstance(param, bool) or not isinstance(param, int):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, but expected type int"
        )


def _is_torch_tensor(param: Any, param_name: str):
    if not isinstance(param, torch.Tensor):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type torch.Tensor"
        )


def _is_torch_tensor_1d(param: Any, param_name: str):
    _is_torch_tensor(param, param_name)
    if param.ndim != 1:
        raise ValueError(
            f"{param_name} must be a 1D tensor, but received {param.ndim}D tensor"
        )


def _is_torch_tensor_2d(param: Any, param_name: str):
    _is_torch_tensor(param, param_name)
    if param.ndim != 2:
        raise ValueError(
            f"{param_name} must be a 2D tensor, but received {param.ndim}D tensor"
        )


def _is_torch_tensor_1d_2d(param: Any, param_name: str):
    _is_torch_tensor(param, param_name)
    if param.ndim not in (1, 2):
        raise ValueError(
            f"{param_name} must be a 1D or 2D tensor, "
            f"but received {param.ndim}D tensor"
        )


def _is_nonneg_float(param: Any, param_name: str):
    _is_float(param, param_name)
    if param < 0:
        raise ValueError(f"{param_name} must be non-negative, but received {param}")


def _is_pos_float(param: Any, param_name: str):
    _is_float(param, param_name)
    if param <= 0:
        raise ValueError(f"{param_name} must be positive, but received {param}")


def _is_nonneg_int(param: Any, param_name: str):
    _is_int(param, param_name)
    if param < 0:
        raise ValueError(f"{param_name} must be non-negative, but received {param}")


def _is_pos_int(param: Any, param_name: str):
    _is_int(param, param_name)
    if param <= 0:
        raise ValueError(f"{param_name} must be positive, but received {param}")


def _is_open_unit_float(param: Any, param_name: str):
    _is_float(param, param_name)
    if not 0 < param < 1:
        raise ValueError(
            f"{param_name} must lie strictly between 0 and 1, but received {param}"
        )
