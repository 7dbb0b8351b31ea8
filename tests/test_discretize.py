"""Tests for alias-table discretization."""

import numpy as np
import pytest

from qnum import (
    discretize, bits_precision_for_error, sample_alias,
    DiscretizedHistogram, DomainError, MAX_BITS_PRECISION,
)


def _check_invariants(hist, n, bits):
    bar_height = 2 ** bits - 1
    assert hist.bar_height == bar_height
    assert len(hist.keep_coeff) == n
    assert len(hist.alt_index) == n
    assert sum(hist.masses()) == n * bar_height
    assert all(0 <= c <= bar_height for c in hist.keep_coeff)
    assert all(0 <= a < n for a in hist.alt_index)
    assert all(isinstance(c, int) for c in hist.keep_coeff)


class TestDiscretize:
    """Tests for the histogram and alias construction."""

    def test_uniform_weights(self):
        """Uniform weights need no redistribution."""
        one_norm, keep_coeff, alt_index = discretize(2, [1, 1, 1, 1])
        assert one_norm == 4.0
        assert keep_coeff == [3, 3, 3, 3]
        assert alt_index == [0, 1, 2, 3]

    def test_returns_histogram(self):
        """discretize returns a DiscretizedHistogram."""
        hist = discretize(2, [1, 1, 1, 1])
        assert isinstance(hist, DiscretizedHistogram)
        assert hist.bar_height == 3
        assert len(hist) == 4

    def test_two_to_one(self):
        """Weights [2, 1] at 2 bits: slot 1 aliases to slot 0."""
        # Rounded: [4, 2], sum 6 == 2 * 3
        hist = discretize(2, [2, 1])
        assert hist.one_norm == 3.0
        assert hist.keep_coeff == [3, 2]
        assert hist.alt_index == [0, 0]
        assert hist.masses() == [4, 2]

    def test_one_hot(self):
        """All mass on one index sends every other slot there."""
        hist = discretize(3, [0, 0, 5, 0])
        _check_invariants(hist, 4, 3)
        assert hist.keep_coeff[2] == 7
        assert hist.alt_index == [2, 2, 2, 2]
        assert hist.keep_coeff == [0, 0, 7, 0]
        assert hist.masses() == [0, 0, 28, 0]

    def test_signs_ignored(self):
        """Only magnitudes matter."""
        a = discretize(5, [1, -2, 3, -4])
        b = discretize(5, [-1, 2, -3, 4])
        assert a == b
        assert a.one_norm == 10.0

    def test_negative_excess_fills_first_slots(self):
        """A shortfall of 2 adds one unit to slots 0 and 1, in index order."""
        # Rounded [3, 3, 3, 3, 3, 1], sum 16, corrected to [4, 4, 3, 3, 3, 1]
        hist = discretize(2, [1, 1, 1, 1, 1, 0.2])
        _check_invariants(hist, 6, 2)
        assert hist.masses() == [4, 4, 3, 3, 3, 1]
        assert hist.keep_coeff == [3, 2, 3, 3, 3, 1]
        assert hist.alt_index == [0, 0, 2, 3, 4, 1]

    def test_positive_excess_trims_first_slots(self):
        """An overshoot of 1 takes the unit from slot 0, not the largest remainder."""
        # Rounded [4, 4, 2], sum 10, corrected to [3, 4, 2]
        hist = discretize(2, [2, 2, 1])
        _check_invariants(hist, 3, 2)
        assert hist.masses() == [3, 4, 2]
        assert hist.keep_coeff == [3, 3, 2]
        assert hist.alt_index == [0, 1, 1]

    def test_rounding_excess_never_negative(self):
        """Drift correction skips zero slots instead of pushing them below 0."""
        # Rounded [0, 2, 2], excess 1: slot 0 is skipped, slot 1 drops to 1
        hist = discretize(1, [0, 1, 1])
        _check_invariants(hist, 3, 1)
        assert hist.masses() == [0, 1, 2]
        assert hist.keep_coeff == [0, 1, 1]
        assert hist.alt_index == [2, 1, 2]

    @pytest.mark.parametrize("bits", [0, 1, 2, 3, 8, 16, 31])
    def test_invariants_random(self, bits):
        """Exact sum and range invariants hold for random weight vectors."""
        rng = np.random.default_rng(1234 + bits)
        for n in [2, 3, 5, 17, 64]:
            for _ in range(5):
                weights = rng.normal(size=n)
                hist = discretize(bits, weights)
                _check_invariants(hist, n, bits)
                assert hist.one_norm == pytest.approx(np.sum(np.abs(weights)))

    def test_invariants_skewed(self):
        """Heavily skewed weights still satisfy the invariants."""
        weights = [1e-9, 1.0, 1e-6, 0.0, 3.5, 1e-12, 2.0]
        for bits in [1, 4, 12, 20]:
            _check_invariants(discretize(bits, weights), len(weights), bits)

    def test_deterministic(self):
        """Identical inputs give identical outputs."""
        weights = [0.3, 0.1, 0.05, 0.55, 0.2]
        first = discretize(10, weights)
        second = discretize(10, weights)
        assert first == second
        assert first.keep_coeff == second.keep_coeff
        assert first.alt_index == second.alt_index

    def test_input_not_mutated(self):
        """The weight vector is left untouched."""
        weights = np.array([0.5, -0.25, 0.25])
        discretize(4, weights)
        assert np.array_equal(weights, [0.5, -0.25, 0.25])

    def test_probabilities_close_to_weights(self):
        """Alias probabilities approximate |w_i| / one_norm."""
        weights = np.array([0.5, 0.2, 0.15, 0.1, 0.05])
        bits = 8
        hist = discretize(bits, weights)
        probs = hist.probabilities()
        assert probs.sum() == pytest.approx(1.0)
        assert np.max(np.abs(probs - weights)) <= 2.0 ** (1 - bits)

    def test_verbose(self, capsys):
        """verbose=True prints the rounded and final tables."""
        discretize(2, [2, 1], verbose=True)
        out = capsys.readouterr().out
        assert "bar_height = 3" in out
        assert "alt_index" in out


class TestDiscretizeErrors:
    """Precondition failures."""

    def test_single_weight(self):
        """N = 1 is rejected."""
        with pytest.raises(DomainError):
            discretize(4, [1.0])

    def test_empty(self):
        """N = 0 is rejected."""
        with pytest.raises(DomainError):
            discretize(4, [])

    def test_too_many_bits(self):
        """bits_precision = 32 is rejected."""
        with pytest.raises(DomainError):
            discretize(MAX_BITS_PRECISION + 1, [1, 1])

    def test_negative_bits(self):
        """Negative precision is rejected."""
        with pytest.raises(DomainError):
            discretize(-1, [1, 1])

    def test_all_zero(self):
        """Zero one-norm is rejected."""
        with pytest.raises(DomainError):
            discretize(4, [0, 0, 0])

    def test_non_finite(self):
        """Infinite weights are rejected."""
        with pytest.raises(DomainError):
            discretize(4, [1.0, np.inf])

    def test_domain_error_is_value_error(self):
        """DomainError can be caught as ValueError."""
        with pytest.raises(ValueError):
            discretize(4, [0, 0])


class TestBitsPrecision:
    """Tests for bits-of-precision selection."""

    def test_examples(self):
        """ceil(-log2(eps/2)) + 1."""
        assert bits_precision_for_error(1e-3) == 12
        assert bits_precision_for_error(0.5) == 3
        assert bits_precision_for_error(0.25) == 4

    def test_monotone(self):
        """Smaller errors never need fewer bits."""
        errors = [0.5, 0.1, 0.01, 1e-4, 1e-6]
        bits = [bits_precision_for_error(e) for e in errors]
        assert bits == sorted(bits)

    @pytest.mark.parametrize("eps", [0.0, -0.1, 1e-12, float("inf"), float("nan")])
    def test_domain_errors(self, eps):
        """Non-positive, non-finite or too-small errors are rejected."""
        with pytest.raises(DomainError):
            bits_precision_for_error(eps)


class TestSampleAlias:
    """Tests for sampling from the alias table."""

    def test_single_sample(self):
        """Without size, a plain int index comes back."""
        hist = discretize(4, [1, 2, 3])
        j = sample_alias(hist, rng=np.random.default_rng(0))
        assert isinstance(j, int)
        assert 0 <= j < 3

    def test_one_hot_mostly_hits(self):
        """Zero-weight slots keep only their lowest level, 1 / 2^bits of a slot."""
        bits = 6
        hist = discretize(bits, [0, 0, 1, 0])
        probs = hist.probabilities()
        assert probs[2] == pytest.approx(1 - 3 / (4 * 2 ** bits))
        samples = sample_alias(hist, size=2000, rng=np.random.default_rng(1))
        assert np.mean(samples == 2) > 0.95

    def test_empirical_frequencies(self):
        """Sample frequencies approach the normalized weights."""
        weights = np.array([0.4, 0.3, 0.2, 0.1])
        hist = discretize(12, weights)
        samples = sample_alias(hist, size=200_000, rng=np.random.default_rng(42))
        freqs = np.bincount(samples, minlength=4) / samples.size
        assert np.allclose(freqs, weights, atol=0.01)

    def test_reproducible_with_seed(self):
        """Same seed, same samples."""
        hist = discretize(8, [0.1, 0.6, 0.3])
        a = sample_alias(hist, size=50, rng=np.random.default_rng(7))
        b = sample_alias(hist, size=50, rng=np.random.default_rng(7))
        assert np.array_equal(a, b)
