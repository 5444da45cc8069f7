"""
tests/test_scalar.py - Tristate Scalar Arithmetic

Validates:
- normalize collapses to sign
- add wraps and stays closed, commutes
- mul is closed
"""

from itertools import product

import numpy as np
import pytest

from existon import scalar
from existon.constants import SCALAR_VALUES


class TestNormalize:
    """Tests for normalize."""

    @pytest.mark.parametrize("value,expected", [(5, 1), (1, 1), (0, 0), (-1, -1), (-42, -1)])
    def test_normalize_sign(self, value, expected):
        """Any integer collapses to its sign."""
        assert scalar.normalize(value) == expected


class TestAdd:
    """Tests for wraparound add."""

    def test_wraps_positive(self):
        """1 + 1 wraps to -1."""
        assert scalar.add(1, 1) == -1

    def test_wraps_negative(self):
        """-1 + -1 wraps to 1."""
        assert scalar.add(-1, -1) == 1

    def test_plain_sums(self):
        """Sums inside the range are untouched."""
        assert scalar.add(1, -1) == 0
        assert scalar.add(0, 1) == 1
        assert scalar.add(-1, 0) == -1

    def test_closed(self):
        """Every sum stays in {-1, 0, 1}."""
        for a, b in product(SCALAR_VALUES, repeat=2):
            assert scalar.add(a, b) in SCALAR_VALUES, f"add({a}, {b}) left the domain"

    def test_commutative(self):
        """add(a, b) == add(b, a)."""
        for a, b in product(SCALAR_VALUES, repeat=2):
            assert scalar.add(a, b) == scalar.add(b, a)

    def test_grouping_over_all_triples(self):
        """
        The wraparound rule coincides with addition mod 3, so regrouping a
        triple never changes the result. Folds still run in a fixed order.
        """
        for a, b, c in product(SCALAR_VALUES, repeat=3):
            left = scalar.add(scalar.add(a, b), c)
            right = scalar.add(a, scalar.add(b, c))
            assert left == right, f"grouping changed ({a}, {b}, {c}): {left} vs {right}"
            assert left == ((a + b + c + 1) % 3) - 1

    def test_repeated_ones(self):
        """add(add(1, 1), 1) lands on 0, matching three steps around Z(3)."""
        assert scalar.add(scalar.add(1, 1), 1) == 0
        assert scalar.add(1, scalar.add(1, 1)) == 0


class TestMul:
    """Tests for mul."""

    def test_closed(self):
        """Every product stays in {-1, 0, 1}."""
        for a, b in product(SCALAR_VALUES, repeat=2):
            assert scalar.mul(a, b) in SCALAR_VALUES

    def test_values(self):
        assert scalar.mul(-1, -1) == 1
        assert scalar.mul(-1, 1) == -1
        assert scalar.mul(0, -1) == 0


class TestArrays:
    """Tests for add_arrays."""

    def test_add_arrays_matches_scalar_add(self):
        """Elementwise add_arrays equals add() on every pair."""
        pairs = list(product(SCALAR_VALUES, repeat=2))
        a = np.array([x for x, _ in pairs], dtype=np.int8)
        b = np.array([y for _, y in pairs], dtype=np.int8)
        result = scalar.add_arrays(a, b)
        assert result.dtype == np.int8
        assert result.tolist() == [scalar.add(x, y) for x, y in pairs]
