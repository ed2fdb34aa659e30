"""
Core math modules для bonding_curve

Целочисленные fixed-point примитивы с гарантией отсутствия переполнения.
"""

from bonding_curve.core.math.fixed_point import (
    # Constants
    UINT256_MAX,
    WAD,
    # Mul-div
    mul_div,
    # Utilities
    clamp_uint,
    # Validation
    validate_positive_uint,
    validate_uint,
)

__all__ = [
    # Constants
    "UINT256_MAX",
    "WAD",
    # Mul-div
    "mul_div",
    # Utilities
    "clamp_uint",
    # Validation
    "validate_positive_uint",
    "validate_uint",
]
