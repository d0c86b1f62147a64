"""Dimension checks shared by every multiplication entry point.

Vectors are treated as a single column when they sit to the right of the compressor
and as a single row when they sit to its left. All checks run before any output
buffer is touched.
"""

from typing import Tuple

import torch


__all__ = [
    "DimensionMismatchError",
    "left_mul_dimcheck",
    "right_mul_dimcheck",
]


class DimensionMismatchError(ValueError):
    """Raised when the operands of a multiplication have incompatible shapes."""


def _as_column(x: torch.Tensor) -> Tuple[int, int]:
    return (x.shape[0], 1) if x.ndim == 1 else (x.shape[0], x.shape[1])


def _as_row(x: torch.Tensor) -> Tuple[int, int]:
    return (1, x.shape[0]) if x.ndim == 1 else (x.shape[0], x.shape[1])


def left_mul_dimcheck(C: torch.Tensor, S, A: torch.Tensor):
    """Check the shapes of ``C = S @ A``.

    Args:
        C (torch.Tensor): Output matrix or vector.
        S: Compressor (or adjoint view) exposing a ``shape``.
        A (torch.Tensor): Matrix or vector being compressed.

    Raises:
        DimensionMismatchError: If any pair of extents disagrees.
    """
    s_rows, s_cols = S.shape
    a_rows, a_cols = _as_column(A)
    c_rows, c_cols = _as_column(C)

    if a_rows != s_cols:
        if A.ndim == 1:
            raise DimensionMismatchError(
                f"Vector A is of dimension {a_rows} while S has {s_cols} columns."
            )
        raise DimensionMismatchError(
            f"Matrix A has {a_rows} rows while S has {s_cols} columns."
        )
    if a_cols != c_cols:
        raise DimensionMismatchError(
            f"Matrix A has {a_cols} columns while matrix C has {c_cols} columns."
        )
    if c_rows != s_rows:
        raise DimensionMismatchError(
            f"Matrix C has {c_rows} rows while S has {s_rows} rows."
        )


def right_mul_dimcheck(C: torch.Tensor, A: torch.Tensor, S):
    """Check the shapes of ``C = A @ S``.

    Args:
        C (torch.Tensor): Output matrix or vector.
        A (torch.Tensor): Matrix or vector being compressed.
        S: Compressor (or adjoint view) exposing a ``shape``.

    Raises:
        DimensionMismatchError: If any pair of extents disagrees.
    """
    s_rows, s_cols = S.shape
    a_rows, a_cols = _as_row(A)
    c_rows, c_cols = _as_row(C)

    if a_cols != s_rows:
        if A.ndim == 1:
            raise DimensionMismatchError(
                f"Vector A is of dimension {a_cols} while S has {s_rows} rows."
            )
        raise DimensionMismatchError(
            f"Matrix A has {a_cols} columns while S has {s_rows} rows."
        )
    if c_cols != s_cols:
        raise DimensionMismatchError(
            f"Matrix C has {c_cols} columns while S has {s_cols} columns."
        )
    if c_rows != a_rows:
        raise DimensionMismatchError(
            f"Matrix C has {c_rows} rows while matrix A has {a_rows} rows."
        )
