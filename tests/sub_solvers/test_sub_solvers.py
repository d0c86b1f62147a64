import warnings

import pytest
import torch

from rlinsolve.compressors import DimensionMismatchError
from rlinsolve.sub_solvers import (
    LQConfig,
    QRConfig,
    SubSolver,
    SubSolverConfig,
    complete_sub_solver,
)


def get_available_devices():
    """Return a list of available devices to test."""
    devices = ["cpu"]
    if torch.cuda.is_available():
        devices.append("cuda:0")
    return devices


@pytest.fixture(params=get_available_devices())
def device(request):
    """Parameterized fixture for testing on different devices."""
    return torch.device(request.param)


@pytest.fixture(params=[torch.float32, torch.float64], ids=["float32", "float64"])
def precision(request):
    """Parameterized fixture for testing with different precision."""
    return request.param


# Dictionary of tolerance values by precision
TOLERANCES = {
    torch.float32: {"rtol": 1e-3, "atol": 1e-4},
    torch.float64: {"rtol": 1e-8, "atol": 1e-8},
}


@pytest.fixture
def tol(precision):
    """Return appropriate tolerance values for the current precision."""
    return TOLERANCES[precision]


@pytest.fixture
def wide_matrix(device, precision):
    """Create a 4 x 10 matrix of full row rank."""
    return torch.randn(4, 10, device=device, dtype=precision)


@pytest.fixture
def tall_matrix(device, precision):
    """Create a 10 x 4 matrix of full column rank."""
    return torch.randn(10, 4, device=device, dtype=precision)


class TestLQSolver:
    """Tests for the minimum-norm sub-solver."""

    def test_minimum_norm_solution(self, wide_matrix, device, precision, tol):
        """Test that the solution solves the system and lies in the row space."""
        solver = complete_sub_solver(LQConfig(), wide_matrix)
        b = torch.randn(4, device=device, dtype=precision)
        x = torch.zeros(10, device=device, dtype=precision)
        result = solver.solve(x, b)

        assert result is x
        assert torch.allclose(wide_matrix @ x, b, **tol)
        assert torch.allclose(x, torch.linalg.pinv(wide_matrix) @ b, **tol)

    def test_single_row(self, device, precision, tol):
        """Test the closed form for a single row."""
        a = torch.randn(1, 6, device=device, dtype=precision)
        solver = complete_sub_solver(LQConfig(), a)
        b = torch.tensor([2.0], device=device, dtype=precision)
        x = torch.zeros(6, device=device, dtype=precision)
        solver.solve(x, b)
        assert torch.allclose(x, a[0] * 2.0 / torch.dot(a[0], a[0]), **tol)

    def test_update_changes_rows(self, wide_matrix, device, precision, tol):
        """Test that the sub-solver can be rebound to a matrix with more rows."""
        solver = complete_sub_solver(LQConfig(), wide_matrix)
        A = torch.randn(6, 10, device=device, dtype=precision)
        solver.update(A)
        b = torch.randn(6, device=device, dtype=precision)
        x = torch.zeros(10, device=device, dtype=precision)
        solver.solve(x, b)
        assert torch.allclose(A @ x, b, **tol)

    def test_rank_deficient_fallback(self, device, precision, tol):
        """Test that a singular matrix falls back to the pseudo-inverse once."""
        A = torch.randn(3, 5, device=device, dtype=precision)
        A[1] = 0
        solver = complete_sub_solver(LQConfig(), A)
        b = A @ torch.randn(5, device=device, dtype=precision)
        x = torch.zeros(5, device=device, dtype=precision)

        with pytest.warns(RuntimeWarning, match="numerically singular"):
            solver.solve(x, b)
        assert torch.allclose(x, torch.linalg.pinv(A) @ b, **tol)

        # The warning is only emitted once per sub-solver
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            solver.solve(x, b)


class TestQRSolver:
    """Tests for the least-squares sub-solver."""

    def test_least_squares_solution(self, tall_matrix, device, precision, tol):
        """Test that the solution matches the least-squares solution."""
        solver = complete_sub_solver(QRConfig(), tall_matrix)
        b = torch.randn(10, device=device, dtype=precision)
        x = torch.zeros(4, device=device, dtype=precision)
        solver.solve(x, b)
        expected = torch.linalg.lstsq(tall_matrix.cpu(), b.cpu().unsqueeze(-1))
        assert torch.allclose(x.cpu(), expected.solution.squeeze(-1), **tol)

    def test_wide_matrix_fallback(self, wide_matrix, device, precision):
        """Test that a matrix with more columns than rows uses the fallback."""
        solver = complete_sub_solver(QRConfig(), wide_matrix)
        x = torch.zeros(10, device=device, dtype=precision)
        b = torch.randn(4, device=device, dtype=precision)
        with pytest.warns(RuntimeWarning):
            solver.solve(x, b)


class TestSubSolverErrors:
    """Tests for the errors of sub-solvers."""

    def test_dimension_mismatch(self, wide_matrix, device, precision):
        """Test that x and b must match the bound matrix."""
        solver = complete_sub_solver(LQConfig(), wide_matrix)
        with pytest.raises(DimensionMismatchError):
            solver.solve(
                torch.zeros(9, device=device, dtype=precision),
                torch.zeros(4, device=device, dtype=precision),
            )
        with pytest.raises(DimensionMismatchError):
            solver.solve(
                torch.zeros(10, device=device, dtype=precision),
                torch.zeros(5, device=device, dtype=precision),
            )

    def test_base_class(self, wide_matrix):
        """Test that the base class has no update."""
        with pytest.raises(NotImplementedError):
            SubSolver(LQConfig(), wide_matrix)

    def test_wrong_config_type(self, wide_matrix):
        """Test that completing something other than a configuration raises."""
        with pytest.raises(TypeError):
            complete_sub_solver("lq", wide_matrix)

    def test_unregistered_config(self, wide_matrix):
        """Test that completing an unknown configuration raises."""

        class _Unknown(SubSolverConfig):
            pass

        with pytest.raises(NotImplementedError):
            complete_sub_solver(_Unknown(), wide_matrix)
