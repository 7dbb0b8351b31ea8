"""
Fixed-point discretization of probability weights with an alias table.

Given N real weights, discretize() rounds them to an integer histogram in
units of bar_height = 2^bits - 1 that sums to exactly N * bar_height, and
stores it as an alias table (keep_coeff, alt_index). Sampling takes O(1):

    draw j uniformly from [0, N), draw v uniformly from [0, bar_height];
    return j if v <= keep_coeff[j] else alt_index[j].

With bits = bits_precision_for_error(eps), rounding moves the mass of each
index by at most eps / N of the total.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Union

import numpy as np

from .errors import DomainError

MAX_BITS_PRECISION = 31


@dataclass(frozen=True)
class DiscretizedHistogram:
    """
    Result of discretize().

    Unpacks as (one_norm, keep_coeff, alt_index).

    Attributes:
        one_norm: Sum of |weights|
        keep_coeff: Integer mass kept at each slot, in [0, bar_height]
        alt_index: Slot receiving the remaining mass of each slot
        bits_precision: Precision the histogram was built at
    """
    one_norm: float
    keep_coeff: List[int]
    alt_index: List[int]
    bits_precision: int

    @property
    def bar_height(self) -> int:
        return 2 ** self.bits_precision - 1

    def __len__(self) -> int:
        return len(self.keep_coeff)

    def __iter__(self) -> Iterator:
        return iter((self.one_norm, self.keep_coeff, self.alt_index))

    def masses(self) -> List[int]:
        """
        Integer mass each index receives through the table.

        Slot j gives keep_coeff[j] to j and the rest of its bar to
        alt_index[j]. The result equals the rounded histogram and sums to
        exactly N * bar_height.
        """
        bar_height = self.bar_height
        mass = list(self.keep_coeff)
        for j, alt in enumerate(self.alt_index):
            mass[alt] += bar_height - self.keep_coeff[j]
        return mass

    def probabilities(self) -> np.ndarray:
        """Exact sampling probability of each index under the alias table."""
        n = len(self.keep_coeff)
        slots = self.bar_height + 1
        probs = np.zeros(n)
        for j, (keep, alt) in enumerate(zip(self.keep_coeff, self.alt_index)):
            probs[j] += (keep + 1) / slots
            probs[alt] += (slots - keep - 1) / slots
        return probs / n


def bits_precision_for_error(target_error: float) -> int:
    """
    Bits of precision needed for a target sampling error.

    Args:
        target_error: Allowed error eps, so each probability is off by at
            most eps / N

    Returns:
        ceil(-log2(eps / 2)) + 1

    Raises:
        DomainError: If target_error is not positive and finite, or it needs
            more than 31 bits
    """
    if not (target_error > 0 and math.isfinite(target_error)):
        raise DomainError(f"target error must be positive and finite, got {target_error}")

    bits = max(math.ceil(-math.log2(0.5 * target_error)) + 1, 0)
    if bits > MAX_BITS_PRECISION:
        raise DomainError(
            f"target error {target_error} needs {bits} bits of precision, "
            f"at most {MAX_BITS_PRECISION} are supported"
        )
    return bits


def discretize(bits_precision: int, weights: Sequence[float],
               verbose: bool = False) -> DiscretizedHistogram:
    """
    Discretize weights into an exact-sum integer histogram with alias table.

    The algorithm:
    1. Round |w_i| / ||w||_1 * N * bar_height to the nearest integer
    2. Fix the rounding drift by +-1 on the first |excess| slots, in index
       order, so the total is exactly N * bar_height (zero slots are
       skipped when decrementing)
    3. Split slots into sources (above bar_height) and sinks (below)
    4. Repeatedly fill a sink from a source, pointing the sink's alias at
       the source, until one side runs out
    5. Clip any leftover sources to bar_height

    Every transfer settles its sink for good, so at most N - 1 transfers
    happen.

    Args:
        bits_precision: Bits per coefficient, in [0, 31]
        weights: At least two reals, not all zero; signs are ignored
        verbose: If True, print the histogram before and after redistribution

    Returns:
        DiscretizedHistogram(one_norm, keep_coeff, alt_index)

    Raises:
        DomainError: If there are fewer than 2 weights, bits_precision is out
            of range, or all weights are zero
    """
    magnitudes = np.abs(np.asarray(weights, dtype=float)).reshape(-1)
    n = magnitudes.size

    if n <= 1:
        raise DomainError(f"need at least 2 coefficients, got {n}")
    if not 0 <= bits_precision <= MAX_BITS_PRECISION:
        raise DomainError(
            f"bits_precision must be in [0, {MAX_BITS_PRECISION}], got {bits_precision}"
        )

    one_norm = float(magnitudes.sum())
    if not np.isfinite(one_norm):
        raise DomainError(f"weights must be finite, got 1-norm {one_norm}")
    if one_norm == 0.0:
        raise DomainError("weights must not all be zero")

    bar_height = 2 ** bits_precision - 1
    total = n * bar_height

    # Python ints from here on, so sums are exact
    keep_coeff = [int(c) for c in np.rint(magnitudes / one_norm * total)]
    alt_index = list(range(n))

    excess = sum(keep_coeff) - total
    step = -1 if excess > 0 else 1
    adjusted = 0
    for i in range(n):
        if adjusted == abs(excess):
            break
        # Slots already at zero were not rounded up; never push them negative
        if step < 0 and keep_coeff[i] == 0:
            continue
        keep_coeff[i] += step
        adjusted += 1

    if verbose:
        print(f"one_norm = {one_norm}, bar_height = {bar_height}, excess = {excess}")
        print(f"keep_coeff (rounded) = {keep_coeff}")

    sources = [i for i in range(n) if keep_coeff[i] > bar_height]
    sinks = [i for i in range(n) if keep_coeff[i] < bar_height]

    transfers = 0
    while sources and sinks:
        i = sources.pop()
        j = sinks.pop()

        keep_coeff[i] = keep_coeff[i] - bar_height + keep_coeff[j]
        alt_index[j] = i
        transfers += 1

        if keep_coeff[i] > bar_height:
            sources.append(i)
        elif keep_coeff[i] < bar_height:
            sinks.append(i)

    assert transfers <= n - 1, f"{transfers} transfers for {n} coefficients"

    # Residue from integer rounding
    for i in sources:
        keep_coeff[i] = bar_height

    if verbose:
        print(f"keep_coeff = {keep_coeff}")
        print(f"alt_index  = {alt_index}")
        print(f"transfers  = {transfers}")

    return DiscretizedHistogram(
        one_norm=one_norm,
        keep_coeff=keep_coeff,
        alt_index=alt_index,
        bits_precision=bits_precision,
    )


def sample_alias(histogram: DiscretizedHistogram, size: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None) -> Union[int, np.ndarray]:
    """
    Sample indices from a discretized histogram.

    Args:
        histogram: Output of discretize()
        size: Number of samples, or None for a single int
        rng: numpy Generator (a fresh default_rng() if not given)

    Returns:
        Sampled index, or array of indices when size is given
    """
    if rng is None:
        rng = np.random.default_rng()

    n = len(histogram.keep_coeff)
    keep = np.asarray(histogram.keep_coeff, dtype=np.int64)
    alt = np.asarray(histogram.alt_index, dtype=np.int64)

    j = rng.integers(0, n, size=size)
    v = rng.integers(0, histogram.bar_height, size=size, endpoint=True)
    samples = np.where(v <= keep[j], j, alt[j])

    if size is None:
        return int(samples)
    return samples


def demo_discretize():
    """Print alias tables for a few weight vectors."""

    test_cases = [
        (2, [1, 1, 1, 1]),
        (3, [0.5, 0.25, 0.125, 0.125]),
        (4, [1, -2, 3, -4, 5]),
        (8, [0.9, 0.05, 0.03, 0.02]),
    ]

    print("Alias-table discretization demo")
    print("=" * 60)

    for bits, weights in test_cases:
        hist = discretize(bits, weights)
        target = np.abs(weights) / hist.one_norm
        err = np.max(np.abs(hist.probabilities() - target))
        print(f"bits={bits} weights={weights}")
        print(f"  keep_coeff = {hist.keep_coeff}")
        print(f"  alt_index  = {hist.alt_index}")
        print(f"  max |p - w/|w|| = {err:.3e}")


if __name__ == "__main__":
    demo_discretize()
