"""
Small numeric helpers: hyperbolic functions, extrema, p-norms, bit sizes.
"""

import math
from typing import Sequence

import numpy as np

from .errors import DomainError


# =============================================================================
# Hyperbolic functions
# =============================================================================

def arc_cosh(x: float) -> float:
    """Inverse hyperbolic cosine, defined for x >= 1."""
    if x < 1:
        raise DomainError(f"arc_cosh requires x >= 1, got {x}")
    return math.acosh(x)


def arc_sinh(x: float) -> float:
    """Inverse hyperbolic sine."""
    return math.asinh(x)


def arc_tanh(x: float) -> float:
    """Inverse hyperbolic tangent, defined for |x| < 1."""
    if not -1 < x < 1:
        raise DomainError(f"arc_tanh requires |x| < 1, got {x}")
    return math.atanh(x)


def sinh(x: float) -> float:
    return math.sinh(x)


def cosh(x: float) -> float:
    return math.cosh(x)


def tanh(x: float) -> float:
    return math.tanh(x)


# =============================================================================
# Extrema
# =============================================================================

def _check_non_empty(values: Sequence, name: str):
    if len(values) == 0:
        raise DomainError(f"{name} of an empty sequence")


def max_i(values: Sequence[int]) -> int:
    """Largest element of a non-empty integer sequence."""
    _check_non_empty(values, "max_i")
    return int(max(values))


def min_i(values: Sequence[int]) -> int:
    """Smallest element of a non-empty integer sequence."""
    _check_non_empty(values, "min_i")
    return int(min(values))


def max_d(values: Sequence[float]) -> float:
    """Largest element of a non-empty real sequence."""
    _check_non_empty(values, "max_d")
    return float(np.max(values))


def min_d(values: Sequence[float]) -> float:
    """Smallest element of a non-empty real sequence."""
    _check_non_empty(values, "min_d")
    return float(np.min(values))


# =============================================================================
# Norms
# =============================================================================

def p_norm(p: float, values: Sequence[float]) -> float:
    """
    The L(p) norm (sum |x_i|^p)^(1/p).

    Args:
        p: Exponent, p >= 1
        values: Real vector

    Returns:
        The p-norm of values

    Raises:
        DomainError: If p < 1
    """
    if p < 1.0:
        raise DomainError(f"p must be >= 1, got {p}")
    v = np.abs(np.asarray(values, dtype=float)).reshape(-1)
    return float(np.sum(v ** p) ** (1.0 / p))


def p_normalized(p: float, values: Sequence[float]) -> np.ndarray:
    """
    Rescale values to unit p-norm.

    A zero vector is returned unchanged.
    """
    v = np.asarray(values, dtype=float).reshape(-1)
    norm = p_norm(p, v)
    if norm == 0.0:
        return v.copy()
    return v / norm


# =============================================================================
# Integers and periodic reals
# =============================================================================

def bit_size(value: int) -> int:
    """
    Number of bits needed to write a non-negative integer.

    bit_size(0) == 0, bit_size(1) == 1, bit_size(255) == 8.

    Raises:
        DomainError: If value < 0
    """
    if value < 0:
        raise DomainError(f"bit_size requires a non-negative value, got {value}")

    count = 0
    while value:
        value >>= 1
        count += 1
    return count


def real_mod(value: float, period: float, minimum: float) -> float:
    """
    Map value onto the interval [minimum, minimum + period).

    Raises:
        DomainError: If period <= 0
    """
    if period <= 0:
        raise DomainError(f"period must be positive, got {period}")
    fractional = (value - minimum) / period
    fractional -= math.floor(fractional)
    result = minimum + fractional * period
    # Rounding can land exactly on the open end
    if result >= minimum + period:
        return minimum
    return result
