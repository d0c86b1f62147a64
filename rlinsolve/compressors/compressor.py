"""This module defines the base classes for compressors and their adjoints.

A Compressor is the realized, size-bound counterpart of a CompressorConfig. It owns
every buffer needed to apply the compression matrix and exposes the in-place
multiplication ``C := alpha * S @ A + beta * C`` (and its right-sided analogue).
A CompressorAdjoint is a view over a Compressor which routes every multiplication
back to its parent with transposed operands.

Example:
    >>> S = complete_compressor(GaussianConfig(compression_dim=5), A)
    >>> C = torch.zeros(5, A.shape[1], dtype=A.dtype)
    >>> mul(C, S, A)  # C = S @ A
    >>> y = A.T @ S.T  # allocating adjoint product
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

import torch

from .configs import CompressorConfig
from .dimchecks import left_mul_dimcheck, right_mul_dimcheck
from .enums import _Cardinality
from rlinsolve.utils.input_checkers import _is_torch_tensor_1d_2d


__all__ = ["Compressor", "CompressorAdjoint", "mul"]


def _transpose(x: torch.Tensor) -> torch.Tensor:
    # vectors are their own transpose
    return x if x.ndim == 1 else x.T


def _scale_add(C: torch.Tensor, update: torch.Tensor, alpha: float, beta: float):
    """Overwrite C with alpha * update + beta * C in place."""
    update = update.reshape(C.shape)
    if beta == 0:
        C.copy_(update)
        if alpha != 1:
            C.mul_(alpha)
    else:
        if beta != 1:
            C.mul_(beta)
        C.add_(update, alpha=alpha)


def _scale(C: torch.Tensor, beta: float):
    if beta == 0:
        C.zero_()
    elif beta != 1:
        C.mul_(beta)


class _BaseCompressor(ABC):
    """Operations shared by compressors and their adjoint views."""

    @property
    @abstractmethod
    def shape(self) -> torch.Size:
        pass

    @abstractmethod
    def _mul_left(self, C: torch.Tensor, A: torch.Tensor, alpha: float, beta: float):
        pass

    @abstractmethod
    def _mul_right(self, C: torch.Tensor, A: torch.Tensor, alpha: float, beta: float):
        pass

    @property
    @abstractmethod
    def adjoint(self) -> "_BaseCompressor":
        pass

    @property
    def T(self) -> "_BaseCompressor":
        return self.adjoint

    def __matmul__(self, A: torch.Tensor) -> torch.Tensor:
        """Allocate and return ``S @ A``."""
        _is_torch_tensor_1d_2d(A, "A")
        if A.ndim == 1:
            C = torch.zeros(self.shape[0], dtype=A.dtype, device=A.device)
        else:
            C = torch.zeros(self.shape[0], A.shape[1], dtype=A.dtype, device=A.device)
        return mul(C, self, A)

    def __rmatmul__(self, A: torch.Tensor) -> torch.Tensor:
        """Allocate and return ``A @ S``."""
        _is_torch_tensor_1d_2d(A, "A")
        if A.ndim == 1:
            C = torch.zeros(self.shape[1], dtype=A.dtype, device=A.device)
        else:
            C = torch.zeros(A.shape[0], self.shape[1], dtype=A.dtype, device=A.device)
        return mul(C, A, self)


class Compressor(_BaseCompressor):
    """Abstract base class for compressors.

    Concrete compressors are created by ``complete_compressor`` and must provide
    ``update``, ``_mul_left`` and ``_mul_right``. The operations of this base class
    raise NotImplementedError so that an incomplete technique fails loudly instead of
    silently doing nothing inside a running solve.

    Attributes:
        config (CompressorConfig): Configuration the compressor was completed from.
        cardinality (_Cardinality): Side from which the compressor is applied.
        dtype (torch.dtype): Data type of the compressed matrix.
        device (torch.device): Device of the compressed matrix.
    """

    def __init__(self, config: CompressorConfig, A: torch.Tensor):
        """Initialize the Compressor.

        Args:
            config (CompressorConfig): Configuration for the compressor.
            A (torch.Tensor): Matrix the compressor is sized against.
        """
        self.config = config
        self.cardinality = config.cardinality
        self.dtype = A.dtype
        self.device = A.device
        self._shape = torch.Size(self._get_dims(A))

    @property
    def shape(self) -> torch.Size:
        return self._shape

    @property
    def compression_dim(self) -> int:
        if self.cardinality == _Cardinality.LEFT:
            return self._shape[0]
        return self._shape[1]

    def _get_dims(self, A: torch.Tensor) -> Tuple[int, int]:
        s = self.config.compression_dim
        if self.cardinality == _Cardinality.LEFT:
            return s, A.shape[0]
        return A.shape[1], s

    def update(
        self,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
        x: Optional[torch.Tensor] = None,
    ):
        """Redraw the values of the compressor in place.

        The shape of the compressor never changes.

        Args:
            A (Optional[torch.Tensor]): Current coefficient matrix.
            b (Optional[torch.Tensor]): Current right-hand side.
            x (Optional[torch.Tensor]): Current iterate.
        """
        raise NotImplementedError(
            "No `update` method exists for compressor of type "
            f"{type(self).__name__}."
        )

    def _mul_left(self, C, A, alpha, beta):
        raise NotImplementedError(
            "No `mul` method exists for compressor of type "
            f"{type(self).__name__} applied from the left."
        )

    def _mul_right(self, C, A, alpha, beta):
        raise NotImplementedError(
            "No `mul` method exists for compressor of type "
            f"{type(self).__name__} applied from the right."
        )

    def concentration_constants(
        self, eta: float
    ) -> Optional[Tuple[float, Optional[float], float]]:
        """Sub-exponential constants of the sketched residual norm.

        Args:
            eta (float): Conservativeness parameter, larger is less conservative.

        Returns:
            Optional[Tuple[float, Optional[float], float]]: ``(sigma2, omega,
            scaling)`` or None if the technique has no documented constants.
        """
        return None

    @property
    def adjoint(self) -> "CompressorAdjoint":
        return CompressorAdjoint(self)


class CompressorAdjoint(_BaseCompressor):
    """Adjoint view of a Compressor.

    The view holds no buffers of its own. Its shape is the reverse of the parent's,
    and ``S.adjoint.adjoint is S``.

    Attributes:
        parent (Compressor): The wrapped compressor.
    """

    def __init__(self, parent: Compressor):
        self.parent = parent

    @property
    def shape(self) -> torch.Size:
        return torch.Size(reversed(self.parent.shape))

    @property
    def adjoint(self) -> Compressor:
        return self.parent

    def _mul_left(self, C, A, alpha, beta):
        # C = S' A  <=>  C' = A' S
        self.parent._mul_right(_transpose(C), _transpose(A), alpha, beta)

    def _mul_right(self, C, A, alpha, beta):
        # C = A S'  <=>  C' = S A'
        self.parent._mul_left(_transpose(C), _transpose(A), alpha, beta)


def mul(
    C: torch.Tensor,
    X: Union[torch.Tensor, _BaseCompressor],
    Y: Union[torch.Tensor, _BaseCompressor],
    alpha: float = 1.0,
    beta: float = 0.0,
) -> torch.Tensor:
    """Compute ``C := alpha * X @ Y + beta * C`` in place.

    Exactly one of X and Y must be a Compressor or CompressorAdjoint. Dimensions are
    checked before C is modified.

    Args:
        C (torch.Tensor): Output buffer, overwritten in place.
        X (Union[torch.Tensor, Compressor, CompressorAdjoint]): Left operand.
        Y (Union[torch.Tensor, Compressor, CompressorAdjoint]): Right operand.
        alpha (float): Scaling of the product. Defaults to 1.0.
        beta (float): Scaling of the previous content of C. Defaults to 0.0.

    Returns:
        torch.Tensor: The buffer C.

    Raises:
        DimensionMismatchError: If the shapes of C, X and Y are incompatible.
        TypeError: If neither X nor Y is a compressor.
    """
    _is_torch_tensor_1d_2d(C, "C")
    if isinstance(X, _BaseCompressor):
        _is_torch_tensor_1d_2d(Y, "A")
        left_mul_dimcheck(C, X, Y)
        X._mul_left(C, Y, alpha, beta)
    elif isinstance(Y, _BaseCompressor):
        _is_torch_tensor_1d_2d(X, "A")
        right_mul_dimcheck(C, X, Y)
        Y._mul_right(C, X, alpha, beta)
    else:
        raise TypeError(
            f"mul expects a Compressor or CompressorAdjoint operand, but received "
            f"{type(X).__name__} and {type(Y).__name__}"
        )
    return C
