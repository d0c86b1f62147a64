"""Compressors module __init__.py file."""
from .configs import *
from .compressor import *
from .dimchecks import *
from .factory import *

# Collect __all__ from imported modules
__all__ = []
for module in [configs, compressor, dimchecks, factory]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
