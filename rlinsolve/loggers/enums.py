from enum import Enum, auto


class _ErrorMode(Enum):
    """Enumeration for the progress measure of residual loggers.

    Attributes:
        FULL: Norm of the full residual ``A x - b``.
        COMPRESSED: Norm of the sketched residual carried by the sample.
        LS_GRADIENT: Norm of the least-squares gradient ``A^T (A x - b)``.
    """

    FULL = auto()
    COMPRESSED = auto()
    LS_GRADIENT = auto()

    @classmethod
    def _from_str(cls, value, param_name):
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            value = value.lower()
            if value == "full":
                return cls.FULL
            elif value == "compressed":
                return cls.COMPRESSED
            elif value == "ls_gradient":
                return cls.LS_GRADIENT

        raise ValueError(
            f"Invalid value for {param_name}: {value}. "
            "Expected 'full', 'compressed', 'ls_gradient', _ErrorMode.FULL, "
            "_ErrorMode.COMPRESSED, or _ErrorMode.LS_GRADIENT."
        )
