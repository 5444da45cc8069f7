"""
existon/constants.py - Automaton Constants

Default rates, grid presets and receipt types. Centralized for tuning.
Pure data, no behavior.
"""

from enum import Enum

# =============================================================================
# SCALAR DOMAIN
# =============================================================================

SCALAR_VALUES = (-1, 0, 1)  # Tristate scalar, closed under add and mul

# =============================================================================
# LIFECYCLE RATES (classic 120x80 host defaults)
# =============================================================================

DEFAULT_OBSERVATION_RATE = 0.0005  # Spontaneous collapse per Potential cell per step
DEFAULT_DECAY_RATE = 0.01          # Observed -> Potential per step
DEFAULT_FLUCTUATION_RATE = 0.0     # Full re-randomization of a Potential cell
DEFAULT_ENTANGLEMENT_PERCENTAGE = 0.1  # 10% of cells paired = cell_count / 20 pairs

# =============================================================================
# GRID DEFAULTS
# =============================================================================

DEFAULT_GRID_EXTENTS = (120, 80)  # width, height
DEFAULT_GA_DIMENSION = 2          # Cl(2,0): s, e0, e1, e01
DEFAULT_N_STEPS = 100

# =============================================================================
# RECEIPTS
# =============================================================================

DEFAULT_RECEIPT_LIMIT = 10_000  # Per-universe ledger bound; oldest receipts drop first

# =============================================================================
# ALGEBRA
# =============================================================================

COLLAPSE_MIN_GRADE = 2     # observe() zeroes every blade of grade >= 2
OPERATOR_BLADE = 1         # Canonical operator state: unit e_0
INVERSION_SCALAR = -1      # Entangled partner state multiplied by this scalar

# =============================================================================
# NEIGHBORHOOD
# =============================================================================

NEIGHBOR_STEPS = (-1, 0, 1)  # Per-axis Moore offsets, in enumeration order

# =============================================================================
# RECEIPTS
# =============================================================================

RECEIPT_SCHEMA = [
    "automaton_init",
    "automaton_step",
    "entanglement_collapse",
    "operator_placed",
    "operator_cleared",
    "cell_disrupted",
    "cell_observed",
    "entanglement_bound",
    "entanglement_regenerated",
    "phase_census",
    "automaton_run",
    "run_export",
    "anomaly",
]


# =============================================================================
# CELL PHASE
# =============================================================================

class CellPhase(Enum):
    """Lifecycle phase of an Existon."""
    POTENTIAL = "POTENTIAL"  # Superposed, subject to spontaneous collapse
    OBSERVED = "OBSERVED"    # Collapsed to grade <= 1, may decay back
    OPERATOR = "OPERATOR"    # Pinned by the host, skipped by the update rule
