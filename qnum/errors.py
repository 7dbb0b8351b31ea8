"""
Exception types raised by qnum.

Every function checks its preconditions before computing anything, so a
raised error never leaves partial results behind.
"""


class DomainError(ValueError):
    """An argument lies outside the domain of the operation."""


class NotCoprimeError(ArithmeticError):
    """A modular inverse was requested for a pair that is not coprime."""
