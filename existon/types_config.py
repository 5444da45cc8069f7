"""
existon/types_config.py - AutomatonConfig Dataclass and Scenario Presets

Immutable configuration for automaton runs.
Frozen dataclass, validation only.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    DEFAULT_DECAY_RATE,
    DEFAULT_ENTANGLEMENT_PERCENTAGE,
    DEFAULT_FLUCTUATION_RATE,
    DEFAULT_GA_DIMENSION,
    DEFAULT_GRID_EXTENTS,
    DEFAULT_N_STEPS,
    DEFAULT_OBSERVATION_RATE,
    DEFAULT_RECEIPT_LIMIT,
)


def validate_rate(name: str, value: float) -> None:
    """Rates are probabilities."""
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


def validate_geometry(grid_extents: Tuple[int, ...], ga_dimension: int) -> None:
    if not grid_extents:
        raise ValueError("grid_extents must name at least one dimension")
    if any(int(d) <= 0 for d in grid_extents):
        raise ValueError(f"grid extents must be positive, got {tuple(grid_extents)}")
    if ga_dimension < 0:
        raise ValueError(f"ga_dimension must be >= 0, got {ga_dimension}")


@dataclass(frozen=True)
class AutomatonConfig:
    """Automaton configuration (immutable)."""
    grid_extents: Tuple[int, ...] = DEFAULT_GRID_EXTENTS
    ga_dimension: int = DEFAULT_GA_DIMENSION
    observation_rate: float = DEFAULT_OBSERVATION_RATE
    decay_rate: float = DEFAULT_DECAY_RATE
    fluctuation_rate: float = DEFAULT_FLUCTUATION_RATE
    entanglement_percentage: float = DEFAULT_ENTANGLEMENT_PERCENTAGE
    n_steps: int = DEFAULT_N_STEPS
    random_seed: Optional[int] = 42
    scenario_name: str = "ORIGINAL"
    tenant_id: str = "automaton"
    receipt_limit: Optional[int] = DEFAULT_RECEIPT_LIMIT

    def __post_init__(self):
        object.__setattr__(self, "grid_extents", tuple(int(d) for d in self.grid_extents))
        validate_geometry(self.grid_extents, self.ga_dimension)
        validate_rate("observation_rate", self.observation_rate)
        validate_rate("decay_rate", self.decay_rate)
        validate_rate("fluctuation_rate", self.fluctuation_rate)
        validate_rate("entanglement_percentage", self.entanglement_percentage)
        if self.n_steps < 0:
            raise ValueError(f"n_steps must be >= 0, got {self.n_steps}")
        if self.receipt_limit is not None and self.receipt_limit < 1:
            raise ValueError(f"receipt_limit must be >= 1 or None, got {self.receipt_limit}")


# =============================================================================
# SCENARIO PRESETS
# =============================================================================

# Classic host: 120x80 window of Cl(2,0) cells.
SCENARIO_ORIGINAL = AutomatonConfig(
    grid_extents=(120, 80),
    ga_dimension=2,
    observation_rate=0.0005,
    decay_rate=0.01,
    fluctuation_rate=0.0,
    entanglement_percentage=0.1,
    n_steps=100,
    random_seed=42,
    scenario_name="ORIGINAL"
)

# No Bernoulli draw ever succeeds: pure local algebra.
SCENARIO_DETERMINISTIC = AutomatonConfig(
    grid_extents=(16, 16),
    ga_dimension=2,
    observation_rate=0.0,
    decay_rate=0.0,
    fluctuation_rate=0.0,
    entanglement_percentage=0.0,
    n_steps=50,
    random_seed=43,
    scenario_name="DETERMINISTIC"
)

# Frequent collapse, decay and entanglement traffic.
SCENARIO_HIGH_FLUX = AutomatonConfig(
    grid_extents=(32, 32),
    ga_dimension=2,
    observation_rate=0.05,
    decay_rate=0.2,
    fluctuation_rate=0.01,
    entanglement_percentage=0.5,
    n_steps=100,
    random_seed=44,
    scenario_name="HIGH_FLUX"
)

# Three-dimensional torus: 26 neighbors per cell.
SCENARIO_VOLUME = AutomatonConfig(
    grid_extents=(8, 8, 8),
    ga_dimension=3,
    observation_rate=0.01,
    decay_rate=0.05,
    fluctuation_rate=0.001,
    entanglement_percentage=0.2,
    n_steps=20,
    random_seed=45,
    scenario_name="VOLUME"
)

# Cl(3,0) on a plane: grade-2 and grade-3 terms present until collapse.
SCENARIO_SPINOR = AutomatonConfig(
    grid_extents=(24, 24),
    ga_dimension=3,
    observation_rate=0.01,
    decay_rate=0.02,
    fluctuation_rate=0.0,
    entanglement_percentage=0.1,
    n_steps=50,
    random_seed=46,
    scenario_name="SPINOR"
)

MANDATORY_SCENARIOS = [
    SCENARIO_ORIGINAL,
    SCENARIO_DETERMINISTIC,
    SCENARIO_HIGH_FLUX,
    SCENARIO_VOLUME,
    SCENARIO_SPINOR,
]

SCENARIOS_BY_NAME = {config.scenario_name: config for config in MANDATORY_SCENARIOS}
