"""
existon - Existon Automaton Package

Public API for the tristate geometric-algebra cellular automaton.
Flat, focused files. One file = one responsibility.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_config import (
    AutomatonConfig,
    SCENARIO_ORIGINAL,
    SCENARIO_DETERMINISTIC,
    SCENARIO_HIGH_FLUX,
    SCENARIO_VOLUME,
    SCENARIO_SPINOR,
    MANDATORY_SCENARIOS,
    SCENARIOS_BY_NAME,
)
from .types_result import StepResult, RunResult

# =============================================================================
# CONSTANTS
# =============================================================================
from .constants import (
    CellPhase,
    RECEIPT_SCHEMA,
    DEFAULT_OBSERVATION_RATE,
    DEFAULT_DECAY_RATE,
    DEFAULT_FLUCTUATION_RATE,
    DEFAULT_ENTANGLEMENT_PERCENTAGE,
    DEFAULT_RECEIPT_LIMIT,
)

# =============================================================================
# ALGEBRA
# =============================================================================
from .multivector import (
    Multivector,
    DimensionMismatch,
    zero,
    random,
    from_coefficients,
    scalar_blade,
    basis_vector,
    inversion,
    add,
    geometric_product,
    reorder_sign,
    grade,
)

# =============================================================================
# CELLS AND GRID
# =============================================================================
from .cell import Existon
from .automaton import Universe
from .coordinates import (
    compute_strides,
    encode,
    decode,
    neighbor_offsets,
    neighbor_indices,
)
from .entanglement import (
    bind_pair,
    generate_pairs,
    pair_count_for,
    check_entanglement_invariant,
)

# =============================================================================
# RUN LOOP
# =============================================================================
from .cycle import run_automaton, run_batch
from .measurement import phase_census, grade_profile, observed_fraction, measure_step
from .validation import check_universe, validate_universe
from .export import export_run, generate_report, snapshot_grid

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    # Types
    "AutomatonConfig",
    "StepResult",
    "RunResult",
    # Scenario presets
    "SCENARIO_ORIGINAL",
    "SCENARIO_DETERMINISTIC",
    "SCENARIO_HIGH_FLUX",
    "SCENARIO_VOLUME",
    "SCENARIO_SPINOR",
    "MANDATORY_SCENARIOS",
    "SCENARIOS_BY_NAME",
    # Constants
    "CellPhase",
    "RECEIPT_SCHEMA",
    "DEFAULT_OBSERVATION_RATE",
    "DEFAULT_DECAY_RATE",
    "DEFAULT_FLUCTUATION_RATE",
    "DEFAULT_ENTANGLEMENT_PERCENTAGE",
    "DEFAULT_RECEIPT_LIMIT",
    # Algebra
    "Multivector",
    "DimensionMismatch",
    "zero",
    "random",
    "from_coefficients",
    "scalar_blade",
    "basis_vector",
    "inversion",
    "add",
    "geometric_product",
    "reorder_sign",
    "grade",
    # Cells and grid
    "Existon",
    "Universe",
    "compute_strides",
    "encode",
    "decode",
    "neighbor_offsets",
    "neighbor_indices",
    "bind_pair",
    "generate_pairs",
    "pair_count_for",
    "check_entanglement_invariant",
    # Run loop
    "run_automaton",
    "run_batch",
    "phase_census",
    "grade_profile",
    "observed_fraction",
    "measure_step",
    "check_universe",
    "validate_universe",
    "export_run",
    "generate_report",
    "snapshot_grid",
]
