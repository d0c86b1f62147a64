import pytest
import torch

import rlinsolve.utils.tracker as tracker_module
from rlinsolve import rsolve
from rlinsolve.compressors import (
    DimensionMismatchError,
    GaussianConfig,
    SparseSignConfig,
)
from rlinsolve.loggers import (
    MovingAverageLogger,
    MovingAverageLoggerConfig,
    ResidualLoggerConfig,
)
from rlinsolve.models import LinSys, SolveSession
from rlinsolve.solvers import (
    ColumnProjectionConfig,
    IHSConfig,
    KaczmarzConfig,
    RowActionConfig,
)
from rlinsolve.stops import (
    MaxIterations,
    MovingAverageStop,
    StopCriterion,
    Threshold,
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


@pytest.fixture
def system(device):
    """Create a consistent 20 x 5 system in double precision."""
    torch.manual_seed(1234)
    A = torch.randn(20, 5, device=device, dtype=torch.float64)
    x_true = torch.randn(5, device=device, dtype=torch.float64)
    return A, A @ x_true, x_true


@pytest.fixture
def ls_system(device):
    """Create an inconsistent 60 x 5 system and its least-squares solution."""
    torch.manual_seed(4321)
    A = torch.randn(60, 5, device=device, dtype=torch.float64)
    b = torch.randn(60, device=device, dtype=torch.float64)
    x_ls = torch.linalg.lstsq(A.cpu(), b.cpu().unsqueeze(-1)).solution.squeeze(-1)
    return A, b, x_ls.to(device)


class _IgnoresCap(StopCriterion):
    """A criterion that never asks the solve to stop."""

    def _check(self, logger, iteration):
        return False

    def _condition(self, logger, iteration):
        return False


class _FakeWandb:
    """Records the calls made to Weights & Biases."""

    def __init__(self):
        self.init_kwargs = None
        self.logged = []
        self.finished = False

    def init(self, **kwargs):
        self.init_kwargs = kwargs

    def log(self, data, step=None):
        self.logged.append((step, data))

    def finish(self):
        self.finished = True


class TestSolve:
    """End-to-end tests of the solve loop."""

    def test_default_solve(self, system):
        """Test that the default settings solve a small consistent system."""
        A, b, x_true = system
        x, session = LinSys(A, b).solve()

        assert isinstance(session, SolveSession)
        assert torch.linalg.vector_norm(x - x_true) < 1e-6
        assert session.iteration == 200
        assert not session.converged
        assert isinstance(session.stop, MaxIterations)
        # Iterations 0 to 200 are all recorded
        assert session.logger.record_location == 201
        assert session.logger.hist[-1] < 1e-6

    def test_initial_iterate_untouched(self, system):
        """Test that the initial iterate is copied."""
        A, b, _ = system
        x_init = torch.ones(5, dtype=A.dtype, device=A.device)
        x, _ = LinSys(A, b).solve(x_init=x_init, stop=MaxIterations(10))
        assert torch.all(x_init == 1)
        assert x is not x_init

    def test_threshold_stop(self, system):
        """Test that the solve stops early once the residual is small."""
        A, b, x_true = system
        x, session = LinSys(A, b).solve(stop=Threshold(500, 1e-8))

        assert session.converged
        assert session.iteration < 500
        assert session.logger.resid < 1e-8
        assert torch.linalg.vector_norm(x - x_true) < 1e-6

    def test_collection_rate(self, system):
        """Test the recorded entries with a collection rate."""
        A, b, _ = system
        _, session = LinSys(A, b).solve(
            logger_config=ResidualLoggerConfig(collection_rate=3),
            stop=MaxIterations(10),
        )
        # Iterations 0, 3, 6, 9 and the final iteration 10
        assert session.logger.record_location == 5
        assert session.logger.hist.shape == (5,)

    def test_moving_average_stop(self, system):
        """Test the moving average logger with its stop criterion."""
        A, b, x_true = system
        x, session = LinSys(A, b).solve(
            logger_config=MovingAverageLoggerConfig(),
            stop=MovingAverageStop(500, threshold=1e-10),
        )

        assert isinstance(session.logger, MovingAverageLogger)
        assert session.converged
        assert session.logger.sigma2 == pytest.approx(20**2 / 4)
        assert torch.linalg.vector_norm(x - x_true) < 1e-6

        resid, upper, lower = session.logger.get_uncertainty()
        assert resid.shape == (session.logger.record_location,)
        assert (upper >= resid).all() and (lower <= resid).all()

    def test_kaczmarz(self, system):
        """Test the compressor based Kaczmarz solver end to end."""
        A, b, x_true = system
        config = KaczmarzConfig(compressor_config=SparseSignConfig(compression_dim=3))
        x, session = LinSys(A, b).solve(
            solver_config=config, stop=Threshold(2000, 1e-10)
        )
        assert session.converged
        assert torch.linalg.vector_norm(x - x_true) < 1e-6

    def test_loop_respects_cap(self, system):
        """Test that the loop stops at max_iter even if the criterion never fires."""
        A, b, _ = system
        _, session = LinSys(A, b).solve(stop=_IgnoresCap(7))
        assert session.iteration == 7
        assert session.logger.record_location == 8
        assert not session.converged

    def test_converged_at_cap(self, system):
        """Test that a condition first met at max_iter counts as converged."""
        A, b, x_true = system
        # five distinct rows pin down the solution of the 20 x 5 system
        x, session = LinSys(A, b).solve(stop=Threshold(5, 1e-8))
        assert session.iteration == 5
        assert session.converged
        assert torch.linalg.vector_norm(x - x_true) < 1e-6

        _, session = LinSys(A, b).solve(stop=MaxIterations(5))
        assert not session.converged

    def test_stop_at_zero(self, device):
        """Test that a solved system stops at iteration 0."""
        A = torch.randn(6, 3, device=device, dtype=torch.float64)
        b = torch.zeros(6, device=device, dtype=torch.float64)
        _, session = LinSys(A, b).solve(stop=Threshold(100, 1e-12))
        assert session.iteration == 0
        assert session.logger.record_location == 1


class TestLeastSquares:
    """End-to-end tests of the least-squares solvers on inconsistent systems."""

    def test_column_projection(self, ls_system):
        """Test that column projection reaches the least-squares solution."""
        A, b, x_ls = ls_system
        config = ColumnProjectionConfig(
            compressor_config=GaussianConfig(compression_dim=2, cardinality="right")
        )
        x, session = LinSys(A, b).solve(
            solver_config=config,
            logger_config=ResidualLoggerConfig(error="ls_gradient"),
            stop=Threshold(3000, 1e-9),
        )
        assert session.converged
        assert session.iteration < 3000
        assert torch.linalg.vector_norm(x - x_ls) < 1e-6

    def test_iterative_hessian_sketch(self, ls_system):
        """Test that the iterative Hessian sketch reaches the least-squares solution."""
        A, b, x_ls = ls_system
        config = IHSConfig(compressor_config=GaussianConfig(compression_dim=20))
        x, session = LinSys(A, b).solve(
            solver_config=config,
            logger_config=ResidualLoggerConfig(error="ls_gradient"),
            stop=Threshold(300, 1e-9),
        )
        assert session.converged
        assert session.iteration < 300
        assert torch.linalg.vector_norm(x - x_ls) < 1e-6

    def test_full_residual_does_not_vanish(self, ls_system):
        """Test that the full residual stays away from zero on these systems."""
        A, b, _ = ls_system
        config = IHSConfig(compressor_config=GaussianConfig(compression_dim=20))
        _, session = LinSys(A, b).solve(
            solver_config=config, stop=Threshold(50, 1e-9)
        )
        assert not session.converged
        assert session.logger.resid > 1.0


class TestTracking:
    """Tests for callbacks and run tracking."""

    def test_callback(self, system):
        """Test that the callback is evaluated every callback_freq iterations."""
        A, b, _ = system
        calls = []

        def callback_fn(x, model, scale):
            calls.append(x.clone())
            return {"scaled_norm": scale * torch.linalg.vector_norm(x).item()}

        _, session = LinSys(A, b).solve(
            stop=MaxIterations(20),
            callback_fn=callback_fn,
            callback_args=[2.0],
            callback_freq=5,
        )

        assert sorted(session.log) == [0, 5, 10, 15, 20]
        assert len(calls) == 5
        metrics = session.log[10]["metrics"]
        assert "scaled_norm" in metrics["callback"]
        assert set(metrics["internal_metrics"]) == {"abs_res", "rel_res", "progress"}

    def test_wandb(self, system, monkeypatch):
        """Test that reports are streamed to Weights & Biases."""
        A, b, _ = system
        fake = _FakeWandb()
        monkeypatch.setattr(tracker_module, "wandb", fake)

        with pytest.warns(UserWarning, match="config"):
            LinSys(A, b).solve(
                stop=MaxIterations(4),
                callback_freq=2,
                log_in_wandb=True,
                wandb_init_kwargs={"project": "test", "config": {"seed": 1234}},
            )

        assert fake.init_kwargs["project"] == "test"
        config = fake.init_kwargs["config"]
        assert config["solver_name"] == "row_action"
        assert config["seed"] == 1234
        assert config["stop"] == "MaxIterations(max_iter=4)"
        assert [step for step, _ in fake.logged] == [0, 2, 4]
        assert fake.finished

    def test_wandb_requires_kwargs(self, system):
        """Test that logging in wandb requires initialization arguments."""
        A, b, _ = system
        with pytest.raises(ValueError):
            LinSys(A, b).solve(log_in_wandb=True)


class TestInputs:
    """Tests for the validation of the model inputs."""

    def test_matrix_dimension(self, device):
        """Test that A must be a matrix."""
        with pytest.raises(ValueError):
            LinSys(torch.randn(5, device=device), torch.randn(5, device=device))

    def test_rows_mismatch(self, device):
        """Test that b must have as many entries as A has rows."""
        with pytest.raises(DimensionMismatchError):
            LinSys(torch.randn(5, 2, device=device), torch.randn(4, device=device))

    def test_x_init_mismatch(self, system):
        """Test that x_init must have as many entries as A has columns."""
        A, b, _ = system
        with pytest.raises(DimensionMismatchError):
            LinSys(A, b).solve(x_init=torch.zeros(4, dtype=A.dtype, device=A.device))

    def test_invalid_arguments(self, system):
        """Test the type checks of solve."""
        A, b, _ = system
        model = LinSys(A, b)
        with pytest.raises(TypeError):
            model.solve(solver_config=ResidualLoggerConfig())
        with pytest.raises(TypeError):
            model.solve(stop=10)
        with pytest.raises(TypeError):
            model.solve(logger_config=RowActionConfig())


class TestRsolve:
    """Tests for the functional interface."""

    def test_returns_solution(self, system):
        """Test that rsolve returns the solution."""
        A, b, x_true = system
        x = rsolve(A, b)
        assert torch.linalg.vector_norm(x - x_true) < 1e-6

    def test_overwrites_given_iterate(self, system):
        """Test that a given iterate is overwritten with the solution."""
        A, b, x_true = system
        x = torch.zeros(5, dtype=A.dtype, device=A.device)
        result = rsolve(A, b, x, stop=Threshold(500, 1e-10))
        assert result is x
        assert torch.linalg.vector_norm(x - x_true) < 1e-6
