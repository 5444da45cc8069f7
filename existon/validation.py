"""
existon/validation.py - Universe Invariant Checks

Grid shape, id layout, scalar closure and entanglement map checks.
Stoprules emit an anomaly receipt and raise StopRule.
"""

from typing import List

import numpy as np

from receipts import StopRule, emit_receipt

from .coordinates import cell_count
from .entanglement import check_entanglement_invariant


def check_grid_shape(universe) -> List[str]:
    """Grid length, cell ids and per-cell GA dimension."""
    violations = []
    expected = cell_count(universe.grid_extents)
    if len(universe.grid) != expected:
        violations.append(f"grid has {len(universe.grid)} cells, extents need {expected}")
    for index, cell in enumerate(universe.grid):
        if cell.id != index:
            violations.append(f"cell at {index} has id {cell.id}")
        if cell.state.p != universe.ga_dimension:
            violations.append(f"cell {index} has p={cell.state.p}, universe p={universe.ga_dimension}")
    return violations


def check_scalar_closure(universe) -> List[str]:
    """Every coefficient stays in {-1, 0, 1}."""
    violations = []
    for cell in universe.grid:
        coeffs = cell.state.coefficients
        if np.any((coeffs < -1) | (coeffs > 1)):
            violations.append(f"cell {cell.id} left the tristate domain")
    return violations


def check_universe(universe) -> List[str]:
    """All violations, empty when the universe is consistent."""
    return (check_grid_shape(universe)
            + check_scalar_closure(universe)
            + check_entanglement_invariant(universe.entangled_pairs))


def validate_universe(universe) -> bool:
    """
    Stoprule for a broken universe.

    Returns:
        True when every invariant holds

    Raises:
        StopRule: on any violation, after emitting an anomaly receipt
    """
    violations = check_universe(universe)
    if violations:
        receipt = emit_receipt("anomaly", {
            "tenant_id": universe.tenant_id,
            "metric": "universe_invariants",
            "baseline": 0,
            "delta": len(violations),
            "classification": "violation",
            "action": "halt",
            "violations": violations[:10]
        })
        universe.receipt_ledger.append(receipt)
        raise StopRule(f"Universe invariants violated: {violations[:3]}")
    return True
