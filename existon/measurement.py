"""
existon/measurement.py - Phase Census and Grade Profile

Read-only measurements of a Universe snapshot.
Pure functions with receipts.
"""

from typing import Dict

import numpy as np

from receipts import emit_receipt

from .constants import CellPhase
from .multivector import grade
from .types_result import StepResult


def phase_census(universe) -> Dict[str, int]:
    """Number of cells in each phase, keyed by phase value."""
    census = {phase.value: 0 for phase in CellPhase}
    for cell in universe.grid:
        census[cell.phase.value] += 1
    return census


def grade_profile(universe) -> Dict[int, int]:
    """Count of nonzero coefficients per blade grade across the grid."""
    p = universe.ga_dimension
    if not universe.grid:
        return {g: 0 for g in range(p + 1)}
    stacked = np.stack([cell.state.coefficients for cell in universe.grid])
    nonzero = np.count_nonzero(stacked, axis=0)
    profile = {g: 0 for g in range(p + 1)}
    for blade, count in enumerate(nonzero.tolist()):
        profile[grade(blade)] += int(count)
    return profile


def observed_fraction(universe) -> float:
    if not universe.grid:
        return 0.0
    return phase_census(universe)[CellPhase.OBSERVED.value] / universe.cell_count


def measure_step(universe, step_result: StepResult) -> dict:
    """
    Emit a phase_census receipt for the snapshot after step_result.

    Args:
        universe: Universe after the step
        step_result: StepResult the step returned

    Returns:
        dict: phase_census receipt (also appended to the universe ledger)
    """
    census = phase_census(universe)
    receipt = emit_receipt("phase_census", {
        "tenant_id": universe.tenant_id,
        "step": step_result.step,
        "census": census,
        "grade_profile": {str(g): n for g, n in grade_profile(universe).items()},
        "observations": step_result.observations,
        "entanglement_events": len(step_result.entanglement_events),
    })
    universe.receipt_ledger.append(receipt)
    return receipt
