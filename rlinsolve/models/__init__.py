"""Models module __init__.py file."""
from .model import *
from .linsys import *

# Collect __all__ from imported modules
__all__ = []
for module in [model, linsys]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
