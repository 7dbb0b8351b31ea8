"""
Continued fractions for classical post-processing.

The measured phase in period finding is approximately s/r for some
integer s. The continued-fraction convergents of the measured value are
the best rational approximations to it, so the last convergent whose
denominator stays below N is the natural candidate for s/r.

This module includes:
- The Fraction pair type
- Bounded-denominator convergent search
- Period extraction from a phase-estimation measurement
"""

from typing import NamedTuple, Optional, Tuple, Union

from .errors import DomainError
from .rational import _sign, euclid_steps, exp_mod


class Fraction(NamedTuple):
    """
    An exact rational numerator/denominator.

    Not reduced to lowest terms; the denominator may carry the sign.
    """
    numerator: int
    denominator: int


def continued_fraction_convergent(
    fraction: Union[Fraction, Tuple[int, int]],
    denominator_bound: int,
) -> Fraction:
    """
    Find the last continued-fraction convergent of a/b within a bound.

    Runs the Euclidean recurrence on (a, b) and stops as soon as the
    remainder vanishes or the next convergent's denominator exceeds the
    bound. If the expansion terminated within the bound, the exact value is
    returned; otherwise the previous convergent, which still respected the
    bound.

    Signs are carried through, so e.g. 314159/100000 with bound 113 comes
    back as Fraction(-355, -113).

    Args:
        fraction: (numerator, denominator) pair, denominator non-zero
        denominator_bound: Largest admissible |denominator|, positive

    Returns:
        Fraction with |denominator| <= denominator_bound

    Raises:
        DomainError: If denominator_bound <= 0 or the denominator is 0
    """
    a, b = fraction
    if denominator_bound <= 0:
        raise DomainError(f"denominator bound must be positive, got {denominator_bound}")
    if b == 0:
        raise DomainError(f"denominator must be non-zero, got {a}/{b}")

    sign_a, sign_b = _sign(a), _sign(b)

    for r, s, t in euclid_steps(a, b):
        if r[1] == 0 or abs(s[1]) > denominator_bound:
            break

    if r[1] == 0 and abs(s[1]) <= denominator_bound:
        return Fraction(-t[1] * sign_b, s[1] * sign_a)
    return Fraction(-t[0] * sign_b, s[0] * sign_a)


def extract_period(measurement: int, num_qubits: int, N: int, a: int,
                   verbose: bool = False) -> Optional[int]:
    """
    Extract period r from a measurement result using continued fractions.

    The measurement gives an approximation to s/r * 2^num_qubits. When s and
    r share a common factor the fraction reduces and the convergent only
    yields a divisor of r, so multiples of the denominator are tried as well.

    Args:
        measurement: Measured value from the control register
        num_qubits: Number of qubits in the control register
        N: Modulus of the periodic function a^x mod N
        a: Base of the periodic function
        verbose: If True, print progress

    Returns:
        Period r with a^r mod N == 1, or None if extraction failed

    Raises:
        DomainError: If num_qubits < 1, N < 2, a <= 0 or the measurement
            does not fit in num_qubits bits
    """
    if num_qubits < 1:
        raise DomainError(f"num_qubits must be >= 1, got {num_qubits}")
    if N < 2:
        raise DomainError(f"N must be >= 2, got {N}")
    if a <= 0:
        raise DomainError(f"a must be positive, got {a}")
    if not 0 <= measurement < 2 ** num_qubits:
        raise DomainError(f"measurement must be in [0, {2 ** num_qubits - 1}], got {measurement}")

    if measurement == 0:
        # No information about r
        return None

    approx = continued_fraction_convergent(Fraction(measurement, 2 ** num_qubits), N)
    denom = abs(approx.denominator)

    if verbose:
        print(f"Measurement {measurement}/{2 ** num_qubits} ≈ "
              f"{abs(approx.numerator)}/{denom}")

    r = denom
    while r < N:
        if exp_mod(a, r, N) == 1:
            if verbose:
                print(f"Period found: {a}^{r} mod {N} = 1")
            return r
        r += denom

    if verbose:
        print(f"No multiple of {denom} below {N} is a period of {a} mod {N}")
    return None
