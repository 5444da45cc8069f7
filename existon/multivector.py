"""
existon/multivector.py - Cl(p,0) Multivectors over the Tristate Scalar

A multivector holds 2**p scalar coefficients. Index i is a bitmask over
the p basis vectors: 0 is the scalar blade, 1 << k is e_k, 0b101 is e_0e_2.
Grade of blade i is popcount(i).

Blade products land on i ^ j. The sign counts how many basis vectors of
blade i sit above each basis vector of blade j; an odd count flips it.
Repeated vectors cancel through the XOR, giving e_k * e_k = +1.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Tuple

import numpy as np

from receipts import StopRule, emit_receipt

from . import scalar
from .constants import INVERSION_SCALAR


# =============================================================================
# STOPRULE: dimension_mismatch
# =============================================================================

class DimensionMismatch(StopRule):
    """Two multivectors (or a multivector and an automaton) disagree on p."""
    pass


def stoprule_dimension_mismatch(operation: str, left_p: int, right_p: int) -> None:
    """Emit an anomaly receipt and raise when GA dimensions differ."""
    if left_p != right_p:
        emit_receipt("anomaly", {
            "metric": "ga_dimension",
            "operation": operation,
            "baseline": left_p,
            "delta": right_p - left_p,
            "classification": "violation",
            "action": "halt"
        })
        raise DimensionMismatch(
            f"{operation}: GA dimension mismatch (p={left_p} vs p={right_p})"
        )


# =============================================================================
# BLADE ARITHMETIC
# =============================================================================

def grade(blade: int) -> int:
    """Number of basis vectors in a blade."""
    return bin(blade).count("1")


def reorder_sign(i: int, j: int) -> int:
    """
    Sign of the product of basis blades i and j.

    For every basis vector k in blade j, count the vectors of blade i with
    a higher index; an even total gives +1, odd gives -1.
    """
    flips = 0
    k = 0
    rest = j
    while rest:
        if rest & 1:
            flips += grade(i >> (k + 1))
        rest >>= 1
        k += 1
    return 1 if flips % 2 == 0 else -1


@lru_cache(maxsize=None)
def sign_table(p: int) -> Tuple[Tuple[int, ...], ...]:
    """reorder_sign() for every blade pair of a p-dimensional algebra."""
    n = 1 << p
    return tuple(tuple(reorder_sign(i, j) for j in range(n)) for i in range(n))


@lru_cache(maxsize=None)
def grade_mask(p: int, min_grade: int) -> np.ndarray:
    """Boolean mask of the blades whose grade is at least min_grade."""
    mask = np.array([grade(i) >= min_grade for i in range(1 << p)], dtype=bool)
    mask.setflags(write=False)
    return mask


# =============================================================================
# MULTIVECTOR
# =============================================================================

@dataclass(frozen=True, eq=False)
class Multivector:
    """Immutable element of Cl(p,0) with tristate coefficients."""
    p: int
    coefficients: np.ndarray

    def __post_init__(self):
        if self.p < 0:
            raise ValueError(f"GA dimension must be >= 0, got {self.p}")
        coeffs = np.sign(np.asarray(self.coefficients, dtype=np.int64)).astype(np.int8)
        if coeffs.shape != (1 << self.p,):
            raise ValueError(
                f"Multivector of p={self.p} needs {1 << self.p} coefficients, "
                f"got shape {coeffs.shape}"
            )
        coeffs.setflags(write=False)
        object.__setattr__(self, "coefficients", coeffs)

    def __eq__(self, other):
        if not isinstance(other, Multivector):
            return NotImplemented
        return self.p == other.p and np.array_equal(self.coefficients, other.coefficients)

    def __hash__(self):
        return hash((self.p, self.coefficients.tobytes()))

    def __repr__(self):
        return f"Multivector(p={self.p}, coefficients={self.as_tuple()})"

    def __len__(self):
        return len(self.coefficients)

    def __getitem__(self, blade: int) -> int:
        return int(self.coefficients[blade])

    def __add__(self, other: "Multivector") -> "Multivector":
        return add(self, other)

    def __mul__(self, other: "Multivector") -> "Multivector":
        return geometric_product(self, other)

    def as_tuple(self) -> Tuple[int, ...]:
        """Coefficients as plain ints, blade order."""
        return tuple(int(c) for c in self.coefficients)

    def is_zero(self) -> bool:
        return not self.coefficients.any()

    def project(self, max_grade: int) -> "Multivector":
        """Copy with every blade of grade > max_grade set to 0."""
        coeffs = self.coefficients.copy()
        coeffs[grade_mask(self.p, max_grade + 1)] = 0
        return Multivector(self.p, coeffs)


# =============================================================================
# CONSTRUCTION
# =============================================================================

def zero(p: int) -> Multivector:
    """All 2**p coefficients zero."""
    return Multivector(p, np.zeros(1 << p, dtype=np.int8))


def random(p: int, rng: np.random.Generator) -> Multivector:
    """Each coefficient drawn uniformly from {-1, 0, 1}."""
    return Multivector(p, rng.integers(-1, 2, size=1 << p, dtype=np.int8))


def from_coefficients(p: int, values: Iterable[int]) -> Multivector:
    """Build from a sequence of 2**p ints (normalized to their sign)."""
    return Multivector(p, np.array(list(values), dtype=np.int64))


def scalar_blade(p: int, value: int) -> Multivector:
    """Pure scalar multivector."""
    coeffs = np.zeros(1 << p, dtype=np.int8)
    coeffs[0] = scalar.normalize(value)
    return Multivector(p, coeffs)


def basis_vector(p: int, k: int) -> Multivector:
    """Unit coefficient on e_k (blade 1 << k)."""
    if not 0 <= k < p:
        raise ValueError(f"basis vector e_{k} does not exist for p={p}")
    coeffs = np.zeros(1 << p, dtype=np.int8)
    coeffs[1 << k] = 1
    return Multivector(p, coeffs)


def inversion(p: int) -> Multivector:
    """Scalar -1: applied to an entangled partner on collapse."""
    return scalar_blade(p, INVERSION_SCALAR)


# =============================================================================
# OPERATORS
# =============================================================================

def add(a: Multivector, b: Multivector) -> Multivector:
    """Componentwise wraparound sum."""
    stoprule_dimension_mismatch("add", a.p, b.p)
    return Multivector(a.p, scalar.add_arrays(a.coefficients, b.coefficients))


def geometric_product(a: Multivector, b: Multivector) -> Multivector:
    """
    Geometric product a * b.

    Contributions are folded into each result blade with scalar.add in
    (i ascending, j ascending) order.

    Args:
        a: Left operand
        b: Right operand, same p

    Returns:
        Multivector: a * b

    Raises:
        DimensionMismatch: if a.p != b.p
    """
    stoprule_dimension_mismatch("geometric_product", a.p, b.p)
    signs = sign_table(a.p)
    left = a.coefficients.tolist()
    right = b.coefficients.tolist()
    result = [0] * len(left)

    for i, a_coeff in enumerate(left):
        if a_coeff == 0:
            continue
        row = signs[i]
        for j, b_coeff in enumerate(right):
            if b_coeff == 0:
                continue
            contribution = scalar.mul(scalar.mul(a_coeff, b_coeff), row[j])
            blade = i ^ j
            result[blade] = scalar.add(result[blade], contribution)

    return Multivector(a.p, np.array(result, dtype=np.int8))


def sum_all(p: int, items: Iterable[Multivector]) -> Multivector:
    """Left fold of add() over items, starting from zero(p)."""
    acc = zero(p)
    for item in items:
        acc = add(acc, item)
    return acc
