"""Randomized iterative solvers for linear systems built on PyTorch."""
from .models import LinSys, SolveSession, rsolve

__version__ = "0.1.0"

__all__ = ["LinSys", "SolveSession", "rsolve"]
