import pytest
import torch

from rlinsolve.samplers import (
    BlockGaussianRowsConfig,
    BlockSampledRowsConfig,
    GaussianRowsConfig,
    RandomCyclicRowsConfig,
    Sample,
    Sampler,
    complete_sampler,
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
    torch.float32: {"rtol": 1e-4, "atol": 1e-5},
    torch.float64: {"rtol": 1e-8, "atol": 1e-8},
}


@pytest.fixture
def tol(precision):
    """Return appropriate tolerance values for the current precision."""
    return TOLERANCES[precision]


@pytest.fixture
def system(device, precision):
    """Create a 6 x 3 system and an iterate."""
    A = torch.randn(6, 3, device=device, dtype=precision)
    b = torch.randn(6, device=device, dtype=precision)
    x = torch.randn(3, device=device, dtype=precision)
    return A, b, x


class TestRandomCyclicRows:
    """Tests for the random cyclic row sampler."""

    def test_each_pass_visits_every_row(self, system):
        """Test that every pass over the rows is a permutation."""
        A, b, x = system
        sampler = complete_sampler(RandomCyclicRowsConfig(), A, b)
        for start in (1, 7):
            rows = []
            for it in range(start, start + 6):
                sample = sampler._sample(x, it)
                matches = torch.all(A == sample.mat, dim=1).nonzero().flatten()
                rows.append(matches[0].item())
            assert sorted(rows) == list(range(6))

    def test_sample_residual(self, system, tol):
        """Test that the residual is the one of the given iterate."""
        A, b, x = system
        sampler = complete_sampler(RandomCyclicRowsConfig(), A, b)
        sample = sampler._sample(x, 1)
        assert not sample.is_block
        assert torch.allclose(sample.res, torch.dot(sample.mat, x) - sample.vec, **tol)

    def test_concentration_constants(self, system):
        """Test the constants of row sampling."""
        A, b, _ = system
        sampler = complete_sampler(RandomCyclicRowsConfig(), A, b)
        assert sampler.concentration_constants(2.0) == (36 / 8, None, 6.0)
        assert sampler.block_dimension == 1


class TestGaussianRows:
    """Tests for the Gaussian row combination sampler."""

    def test_sample_is_combination(self, system, tol):
        """Test that the sampled row and entry use the same weights."""
        A, b, x = system
        sampler = complete_sampler(GaussianRowsConfig(), A, b)
        sample = sampler._sample(x, 1)
        assert torch.allclose(sample.mat, A.T @ sampler.g, **tol)
        assert torch.allclose(sample.vec, torch.dot(b, sampler.g), **tol)
        assert torch.allclose(sample.res, torch.dot(sample.mat, x) - sample.vec, **tol)

    def test_concentration_constants(self, system):
        """Test the constants of Gaussian row combinations."""
        A, b, _ = system
        sampler = complete_sampler(GaussianRowsConfig(), A, b)
        sigma2, omega, scaling = sampler.concentration_constants(1.0)
        assert sigma2 == pytest.approx(1 / 0.2345)
        assert omega == pytest.approx(0.1127)
        assert scaling == 1.0


class TestBlockSamplers:
    """Tests for the block samplers."""

    @pytest.mark.parametrize(
        "config",
        [BlockGaussianRowsConfig(block_size=3), BlockSampledRowsConfig(block_size=3)],
        ids=["gaussian", "sampled"],
    )
    def test_block_sample(self, config, system, tol):
        """Test that a block sample holds S A, S b and their residual."""
        A, b, x = system
        sampler = complete_sampler(config, A, b)
        sample = sampler._sample(x, 1)
        assert sample.is_block
        assert sample.mat.shape == (3, 3)
        assert sampler.block_dimension == 3
        assert torch.allclose(sample.mat, sampler.compressor @ A, **tol)
        assert torch.allclose(sample.vec, sampler.compressor @ b, **tol)
        assert torch.allclose(sample.res, sample.mat @ x - sample.vec, **tol)

    def test_sampled_rows_constants(self, system):
        """Test that block samplers report the constants of their compressor."""
        A, b, _ = system
        sampler = complete_sampler(BlockSampledRowsConfig(block_size=2), A, b)
        assert sampler.concentration_constants(1.0) == (
            sampler.compressor.concentration_constants(1.0)
        )

    def test_block_size_validation(self):
        """Test that the block size must be positive."""
        with pytest.raises(ValueError):
            BlockGaussianRowsConfig(block_size=0)


class TestSamplerErrors:
    """Tests for the errors of samplers."""

    def test_base_class(self, system):
        """Test that the base class cannot sample."""
        A, b, x = system
        sampler = Sampler(RandomCyclicRowsConfig(), A, b)
        with pytest.raises(NotImplementedError):
            sampler._sample(x, 1)
        assert sampler.concentration_constants(1.0) is None

    def test_wrong_config_type(self, system):
        """Test that completing something other than a configuration raises."""
        A, b, _ = system
        with pytest.raises(TypeError):
            complete_sampler("rows", A, b)

    def test_sample_container(self, device, precision):
        """Test the block flag of the sample container."""
        row = Sample(
            mat=torch.ones(3, device=device, dtype=precision),
            vec=torch.tensor(1.0, device=device, dtype=precision),
            res=torch.tensor(2.0, device=device, dtype=precision),
        )
        assert not row.is_block
