"""Enums for specifying compressor orientations and sampling distributions.

This module provides the _Cardinality enum, which represents the side (LEFT or RIGHT)
from which a compression matrix is applied to a target matrix, and the _Distribution
enum, which represents the probability weights used by sampling compressors. Both
enums include utility methods for parsing from string representations.
"""
from enum import Enum, auto


class _Cardinality(Enum):
    """Enumeration for compression sides.

    Attributes:
        LEFT: Compress from the left, reducing the number of rows.
        RIGHT: Compress from the right, reducing the number of columns.
    """

    LEFT = auto()
    RIGHT = auto()

    @classmethod
    def _from_str(cls, value, param_name):
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            value = value.lower()
            if value == "left":
                return cls.LEFT
            elif value == "right":
                return cls.RIGHT

        raise ValueError(
            f"Invalid value for {param_name}: {value}. "
            "Expected 'left', 'right', _Cardinality.LEFT, "
            "or _Cardinality.RIGHT."
        )


class _Distribution(Enum):
    """Enumeration for index distributions of sampling compressors.

    Attributes:
        UNIFORM: Every row (or column) index has the same weight.
        SQUARED_NORM: Weights proportional to squared row (or column) norms.
    """

    UNIFORM = auto()
    SQUARED_NORM = auto()

    @classmethod
    def _from_str(cls, value, param_name):
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            value = value.lower()
            if value == "uniform":
                return cls.UNIFORM
            elif value == "squared_norm":
                return cls.SQUARED_NORM

        raise ValueError(
            f"Invalid value for {param_name}: {value}. "
            "Expected 'uniform', 'squared_norm', _Distribution.UNIFORM, "
            "or _Distribution.SQUARED_NORM."
        )
