"""Stops module __init__.py file."""
from .criteria import *
from .stop import *

# Collect __all__ from imported modules
__all__ = []
for module in [criteria, stop]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
