"""
Exact integer arithmetic used in classical pre- and post-processing.

This module provides:
- The extended Euclidean algorithm (Bezout coefficients)
- GCD and coprimality built on it
- Canonical modulus, modular inverse and modular exponentiation

All routines are iterative, so arbitrarily large Python ints are fine.
"""

from typing import Iterator, Tuple

from .errors import DomainError, NotCoprimeError


# =============================================================================
# Euclidean recurrence
# =============================================================================

def _sign(x: int) -> int:
    return -1 if x < 0 else 1


def euclid_steps(a: int, b: int) -> Iterator[Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]]:
    """
    Walk the Euclidean recurrence on |a|, |b|.

    Yields the triples (r, s, t) before every step and once more at the end,
    where each is a pair (previous, current) and s[i]*|a| + t[i]*|b| == r[i].
    The consumer decides when to stop; iteration ends once r[1] == 0.

    Args:
        a, b: Integers (signs are stripped)

    Yields:
        (r, s, t) pairs of pairs
    """
    r = (abs(a), abs(b))
    s = (1, 0)
    t = (0, 1)

    while True:
        yield r, s, t
        if r[1] == 0:
            return
        quotient = r[0] // r[1]
        r = (r[1], r[0] - quotient * r[1])
        s = (s[1], s[0] - quotient * s[1])
        t = (t[1], t[0] - quotient * t[1])


def extended_gcd(a: int, b: int) -> Tuple[int, int]:
    """
    Extended Euclidean algorithm.

    Args:
        a, b: Integers of any sign

    Returns:
        Bezout pair (u, v) with u*a + v*b == gcd(a, b) >= 0.
        For a == b == 0 this is (0, 0).
    """
    if a == 0 and b == 0:
        return 0, 0

    for r, s, t in euclid_steps(a, b):
        pass
    return s[0] * _sign(a), t[0] * _sign(b)


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor, always non-negative.

    Args:
        a, b: Integers

    Returns:
        gcd(a, b); 0 only when a == b == 0
    """
    u, v = extended_gcd(a, b)
    return u * a + v * b


def is_coprime(a: int, b: int) -> bool:
    """Check if a and b share no common factor, i.e. gcd(a, b) == 1."""
    return gcd(a, b) == 1


# =============================================================================
# Modular arithmetic
# =============================================================================

def modulus(value: int, modulus: int) -> int:
    """
    Canonical residue of value modulo modulus.

    Args:
        value: Any integer
        modulus: Positive modulus

    Returns:
        Integer in [0, modulus)

    Raises:
        DomainError: If modulus <= 0
    """
    if modulus <= 0:
        raise DomainError(f"modulus must be positive, got {modulus}")
    return value % modulus


def inverse_mod(a: int, modulus_: int) -> int:
    """
    Modular inverse via the extended Euclidean algorithm.

    Args:
        a: Number to invert
        modulus_: Positive modulus

    Returns:
        b in [0, modulus_) such that (a * b) mod modulus_ == 1

    Raises:
        DomainError: If modulus_ <= 0
        NotCoprimeError: If gcd(a, modulus_) != 1
    """
    if modulus_ <= 0:
        raise DomainError(f"modulus must be positive, got {modulus_}")

    u, v = extended_gcd(a, modulus_)
    if u * a + v * modulus_ != 1:
        raise NotCoprimeError(f"{a} and {modulus_} must be coprime")
    return modulus(u, modulus_)


def exp_mod(base: int, power: int, modulus_: int) -> int:
    """
    Modular exponentiation by repeated squaring.

    Scans the bits of power from LSB to MSB, so it performs O(log power)
    modular multiplications.

    Args:
        base: Positive base
        power: Non-negative exponent
        modulus_: Positive modulus

    Returns:
        base**power mod modulus_, in [0, modulus_)

    Raises:
        DomainError: If base <= 0, power < 0 or modulus_ <= 0
    """
    if base <= 0:
        raise DomainError(f"base must be positive, got {base}")
    if power < 0:
        raise DomainError(f"power must be non-negative, got {power}")
    if modulus_ <= 0:
        raise DomainError(f"modulus must be positive, got {modulus_}")

    result = 1 % modulus_
    square = base % modulus_
    while power:
        if power & 1:
            result = (result * square) % modulus_
        square = (square * square) % modulus_
        power >>= 1
    return result
