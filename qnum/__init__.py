"""
Qnum - classical numerics for quantum circuit construction.

This package provides the exact, runtime-independent arithmetic that a
circuit construction layer needs around its quantum parts: number theory
for period finding, and a fixed-point discretization of probability
weights for alias-table state preparation.

Modules:
    rational            - Extended GCD, modular inverse and exponentiation
    continued_fractions - Bounded-denominator convergents, period extraction
    discretize          - Exact-sum integer histograms with alias tables
    numeric             - Hyperbolic functions, extrema, p-norms, bit size
    errors              - DomainError, NotCoprimeError

Quick Start:
    >>> from qnum import *
    >>> inverse_mod(3, 7)
    5
    >>> discretize(2, [1, 1, 1, 1]).keep_coeff
    [3, 3, 3, 3]
"""

# Errors
from .errors import (
    DomainError,
    NotCoprimeError,
)

# Rational arithmetic
from .rational import (
    extended_gcd,
    gcd,
    is_coprime,
    modulus,
    inverse_mod,
    exp_mod,
)

# Continued fractions
from .continued_fractions import (
    Fraction,
    continued_fraction_convergent,
    extract_period,
)

# Discretization
from .discretize import (
    MAX_BITS_PRECISION,
    DiscretizedHistogram,
    discretize,
    bits_precision_for_error,
    sample_alias,
)

# Numeric helpers
from .numeric import (
    arc_cosh,
    arc_sinh,
    arc_tanh,
    sinh,
    cosh,
    tanh,
    max_i,
    min_i,
    max_d,
    min_d,
    p_norm,
    p_normalized,
    bit_size,
    real_mod,
)

__version__ = "0.1.0"
__all__ = [
    # Errors
    "DomainError",
    "NotCoprimeError",
    # Rational
    "extended_gcd",
    "gcd",
    "is_coprime",
    "modulus",
    "inverse_mod",
    "exp_mod",
    # Continued fractions
    "Fraction",
    "continued_fraction_convergent",
    "extract_period",
    # Discretization
    "MAX_BITS_PRECISION",
    "DiscretizedHistogram",
    "discretize",
    "bits_precision_for_error",
    "sample_alias",
    # Numeric
    "arc_cosh",
    "arc_sinh",
    "arc_tanh",
    "sinh",
    "cosh",
    "tanh",
    "max_i",
    "min_i",
    "max_d",
    "min_d",
    "p_norm",
    "p_normalized",
    "bit_size",
    "real_mod",
]
