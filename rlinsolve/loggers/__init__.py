"""Loggers module __init__.py file."""
from .configs import *
from .factory import *
from .logger import *
from .moving_average import *
from .residual import *

# Collect __all__ from imported modules
__all__ = []
for module in [configs, factory, logger, moving_average, residual]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
