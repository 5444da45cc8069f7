"""
existon/scalar.py - Tristate Scalar Arithmetic

Values in {-1, 0, 1}. Addition wraps (1 + 1 = -1, -1 + -1 = 1),
multiplication is the ordinary integer product.
Pure functions, no receipts.
"""

import numpy as np


def normalize(value: int) -> int:
    """Collapse any integer to its sign."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def add(a: int, b: int) -> int:
    """
    Wraparound addition.

    Args:
        a: Scalar in {-1, 0, 1}
        b: Scalar in {-1, 0, 1}

    Returns:
        int: -1 if a + b > 1, 1 if a + b < -1, else a + b
    """
    total = a + b
    if total > 1:
        return -1
    if total < -1:
        return 1
    return total


def mul(a: int, b: int) -> int:
    """Ordinary product, closed over {-1, 0, 1}."""
    return a * b


def add_arrays(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Elementwise add() over two equal-length int8 arrays."""
    total = a.astype(np.int8) + b.astype(np.int8)
    wrapped = np.where(total > 1, -1, np.where(total < -1, 1, total))
    return wrapped.astype(np.int8)
