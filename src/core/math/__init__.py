"""
Core math modules

Целочисленные примитивы uint256 с checked-арифметикой.
"""

from src.core.math.uint256 import (
    ARITHMETIC_ERROR_TAG,
    UINT256_BITS,
    UINT256_MAX,
    checked_add,
    checked_sub,
    is_uint256,
    validate_uint256,
)

__all__ = [
    # Constants
    "ARITHMETIC_ERROR_TAG",
    "UINT256_BITS",
    "UINT256_MAX",
    # Validation
    "is_uint256",
    "validate_uint256",
    # Checked arithmetic
    "checked_add",
    "checked_sub",
]
