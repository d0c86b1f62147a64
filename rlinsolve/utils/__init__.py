"""Utils module __init__.py file."""
from .input_checkers import *
from .tracker import *

# Collect __all__ from imported modules
__all__ = []
for module in [input_checkers, tracker]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
