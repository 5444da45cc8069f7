"""
existon/automaton.py - The Universe: Toroidal N-dimensional Existon Automaton

One step:
    Phase 1 (local): for every non-Operator cell, fold the Moore neighborhood
    into an influence multivector, next state = influence * state, then roll
    the lifecycle transitions.
    Phase 2 (nonlocal): every cell observed this step collapses its Potential
    entangled partner and inverts the partner's state.

All reads in a step see the previous snapshot; writes land in a separate
next snapshot that replaces the grid at the end.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Tuple

import numpy as np

from receipts import DEFAULT_TENANT, emit_receipt

from . import coordinates
from . import entanglement
from . import multivector as mv
from . import scalar
from .cell import Existon
from .constants import (
    DEFAULT_DECAY_RATE,
    DEFAULT_ENTANGLEMENT_PERCENTAGE,
    DEFAULT_FLUCTUATION_RATE,
    DEFAULT_OBSERVATION_RATE,
    DEFAULT_RECEIPT_LIMIT,
    OPERATOR_BLADE,
    CellPhase,
)
from .multivector import Multivector, stoprule_dimension_mismatch
from .types_config import AutomatonConfig, validate_geometry, validate_rate
from .types_result import StepResult


class Universe:
    """
    Flat grid of Existons over a torus with explicit strides.

    The cell id equals its flat index. The random stream is owned here and
    consumed in a fixed order, so equal seeds give equal runs.
    """

    def __init__(
        self,
        grid_extents: Sequence[int],
        ga_dimension: int,
        *,
        observation_rate: float = DEFAULT_OBSERVATION_RATE,
        decay_rate: float = DEFAULT_DECAY_RATE,
        fluctuation_rate: float = DEFAULT_FLUCTUATION_RATE,
        entanglement_percentage: float = DEFAULT_ENTANGLEMENT_PERCENTAGE,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        tenant_id: str = DEFAULT_TENANT,
        receipt_limit: Optional[int] = DEFAULT_RECEIPT_LIMIT,
    ):
        extents = tuple(int(d) for d in grid_extents)
        validate_geometry(extents, ga_dimension)
        for name, value in (("observation_rate", observation_rate),
                            ("decay_rate", decay_rate),
                            ("fluctuation_rate", fluctuation_rate),
                            ("entanglement_percentage", entanglement_percentage)):
            validate_rate(name, value)
        if receipt_limit is not None and receipt_limit < 1:
            raise ValueError(f"receipt_limit must be >= 1 or None, got {receipt_limit}")

        self.grid_extents: Tuple[int, ...] = extents
        self.ga_dimension: int = ga_dimension
        self.strides: Tuple[int, ...] = coordinates.compute_strides(extents)
        self.neighbor_table: np.ndarray = coordinates.neighbor_table(extents, self.strides)
        self.observation_rate = observation_rate
        self.decay_rate = decay_rate
        self.fluctuation_rate = fluctuation_rate
        self.entanglement_percentage = entanglement_percentage
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.tenant_id = tenant_id

        self.step_count = 0
        self.pending_observations: List[int] = []
        # Oldest receipts fall off once receipt_limit is reached; None keeps all.
        self.receipt_ledger: Deque[dict] = deque(maxlen=receipt_limit)
        self.grid: List[Existon] = [
            Existon.spawn(i, ga_dimension, self.rng)
            for i in range(coordinates.cell_count(extents))
        ]
        self.entangled_pairs: Dict[int, int] = {}

        self._record("automaton_init", {
            "grid_extents": list(extents),
            "ga_dimension": ga_dimension,
            "cell_count": self.cell_count,
            "seed": seed,
        })
        self.re_entangle()

    @classmethod
    def from_config(cls, config: AutomatonConfig) -> "Universe":
        return cls(
            config.grid_extents,
            config.ga_dimension,
            observation_rate=config.observation_rate,
            decay_rate=config.decay_rate,
            fluctuation_rate=config.fluctuation_rate,
            entanglement_percentage=config.entanglement_percentage,
            seed=config.random_seed,
            tenant_id=config.tenant_id,
            receipt_limit=config.receipt_limit,
        )

    # =========================================================================
    # READ ACCESSORS
    # =========================================================================

    @property
    def cell_count(self) -> int:
        return len(self.grid)

    @property
    def grid_arity(self) -> int:
        return len(self.grid_extents)

    def cell(self, index: int) -> Optional[Existon]:
        """The cell at index, or None outside [0, cell_count)."""
        if not self._valid_index(index):
            return None
        return self.grid[index]

    def phase_of(self, index: int) -> Optional[CellPhase]:
        if not self._valid_index(index):
            return None
        return self.grid[index].phase

    def coefficients_of(self, index: int) -> Optional[Tuple[int, ...]]:
        if not self._valid_index(index):
            return None
        return self.grid[index].state.as_tuple()

    def partner_of(self, cell_id: int) -> Optional[int]:
        return self.entangled_pairs.get(cell_id)

    # =========================================================================
    # COORDINATES
    # =========================================================================

    def encode_coordinate(self, coord: Sequence[int]) -> Optional[int]:
        return coordinates.encode(coord, self.grid_extents, self.strides)

    def decode_index(self, index: int) -> Optional[Tuple[int, ...]]:
        return coordinates.decode(index, self.grid_extents, self.strides)

    def neighbor_indices(self, index: int) -> List[int]:
        if not self._valid_index(index):
            return []
        return self.neighbor_table[index].tolist()

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < self.cell_count

    # =========================================================================
    # STEP PROTOCOL
    # =========================================================================

    def influence(self, index: int) -> Multivector:
        """Fold of the neighbor states with wraparound add, in offset order."""
        return mv.sum_all(self.ga_dimension,
                          (self.grid[n].state for n in self.neighbor_indices(index)))

    def influences(self, grid: List[Existon]) -> np.ndarray:
        """
        influence() for every cell at once, as a (cell_count, 2**p) array.

        Adds one neighbor column at a time, so each row is folded in the
        same offset order as influence().
        """
        states = np.stack([cell.state.coefficients for cell in grid])
        acc = np.zeros_like(states)
        for col in range(self.neighbor_table.shape[1]):
            acc = scalar.add_arrays(acc, states[self.neighbor_table[:, col]])
        return acc

    def _bernoulli(self, rate: float) -> bool:
        return bool(self.rng.random() < rate)

    def step_detailed(self) -> StepResult:
        """
        Advance one step and report what happened.

        Returns:
            StepResult with entanglement events, observed ids and counts
        """
        previous = self.grid
        next_grid = [c.copy() for c in previous]
        observed_this_step: List[int] = []
        decayed = 0
        fluctuated = 0
        p = self.ga_dimension

        # Phase 1: local update
        influences = self.influences(previous)
        for idx, current in enumerate(previous):
            if current.phase is CellPhase.OPERATOR:
                continue

            influence = Multivector(p, influences[idx])
            next_grid[idx].state = mv.geometric_product(influence, current.state)

            if current.phase is CellPhase.POTENTIAL:
                if self._bernoulli(self.observation_rate):
                    next_grid[idx].observe()
                    observed_this_step.append(current.id)
                elif self._bernoulli(self.fluctuation_rate):
                    next_grid[idx] = Existon.spawn(current.id, p, self.rng)
                    fluctuated += 1
            elif current.phase is CellPhase.OBSERVED:
                if self._bernoulli(self.decay_rate):
                    next_grid[idx].decay(self.rng)
                    decayed += 1

        # Phase 2: nonlocal entanglement
        triggers = self.pending_observations + observed_this_step
        self.pending_observations = []
        events: List[Tuple[int, int]] = []
        flip = mv.inversion(p)
        for cell_id in triggers:
            partner_id = self.entangled_pairs.get(cell_id)
            if partner_id is None:
                continue
            partner = next_grid[partner_id]
            if partner.phase is not CellPhase.POTENTIAL:
                continue
            partner.observe()
            partner.state = mv.geometric_product(partner.state, flip)
            events.append((cell_id, partner_id))

        self.grid = next_grid
        step_index = self.step_count
        self.step_count += 1

        for observer_id, partner_id in events:
            self._record("entanglement_collapse", {
                "step": step_index,
                "observer_id": observer_id,
                "partner_id": partner_id,
            })
        self._record("automaton_step", {
            "step": step_index,
            "observed": len(observed_this_step),
            "decayed": decayed,
            "fluctuated": fluctuated,
            "entanglement_events": len(events),
        })

        return StepResult(
            step=step_index,
            entanglement_events=tuple(events),
            observed_ids=tuple(observed_this_step),
            decayed=decayed,
            fluctuated=fluctuated,
        )

    def step(self) -> List[Tuple[int, int]]:
        """Advance one step; returns the (observer_id, partner_id) collapse pairs."""
        return list(self.step_detailed().entanglement_events)

    # =========================================================================
    # EDITING OPERATIONS
    # =========================================================================

    def operator_state(self) -> Multivector:
        """Canonical pinned state: unit e_0, or scalar +1 when p == 0."""
        if self.ga_dimension == 0:
            return mv.scalar_blade(0, 1)
        coeffs = np.zeros(1 << self.ga_dimension, dtype=np.int8)
        coeffs[OPERATOR_BLADE] = 1
        return Multivector(self.ga_dimension, coeffs)

    def set_operator(self, coord: Sequence[int]) -> bool:
        """Pin the cell at coord as an Operator. False if coord is invalid."""
        index = self.encode_coordinate(coord)
        if index is None:
            return False
        cell = self.grid[index]
        cell.phase = CellPhase.OPERATOR
        cell.state = self.operator_state()
        self._forget_observation(index)
        self._record("operator_placed", {"index": index, "coord": list(coord)})
        return True

    def clear_operator(self, coord: Sequence[int]) -> bool:
        """Replace the cell at coord with a fresh Potential cell, any phase."""
        index = self.encode_coordinate(coord)
        if index is None:
            return False
        self.grid[index] = Existon.spawn(index, self.ga_dimension, self.rng)
        self._forget_observation(index)
        self._record("operator_cleared", {"index": index, "coord": list(coord)})
        return True

    def disrupt_cell(self, index: int) -> bool:
        """Force decay(); no-op unless the cell is Observed."""
        if not self._valid_index(index):
            return False
        changed = self.grid[index].decay(self.rng)
        if changed:
            self._forget_observation(index)
            self._record("cell_disrupted", {"index": index, "step": self.step_count})
        return changed

    def observe_cell(self, index: int) -> bool:
        """
        Force observe(); no-op unless the cell is Potential.

        A real collapse is queued so the next step propagates it to the
        cell's entangled partner.
        """
        if not self._valid_index(index):
            return False
        changed = self.grid[index].observe()
        if changed:
            self.pending_observations.append(self.grid[index].id)
            self._record("cell_observed", {"index": index, "step": self.step_count})
        return changed

    def _forget_observation(self, index: int) -> None:
        """A cell that left OBSERVED before the next step no longer propagates."""
        if index in self.pending_observations:
            self.pending_observations.remove(index)

    def set_state(self, index: int, state: Multivector) -> bool:
        """
        Overwrite a cell's state. False if index is invalid.

        Raises:
            DimensionMismatch: state.p differs from the universe's p
        """
        stoprule_dimension_mismatch("set_state", self.ga_dimension, state.p)
        if not self._valid_index(index):
            return False
        self.grid[index].state = state
        return True

    # =========================================================================
    # ENTANGLEMENT
    # =========================================================================

    def entangle_pair(self, id1: int, id2: int) -> bool:
        """Pair two unpaired, distinct ids. No-op otherwise."""
        bound = entanglement.bind_pair(self.entangled_pairs, id1, id2, self.cell_count)
        if bound:
            self._record("entanglement_bound", {"id1": id1, "id2": id2})
        return bound

    def re_entangle(self) -> int:
        """Discard all pairs and draw a fresh random pairing. Returns pair count."""
        self.entangled_pairs = entanglement.generate_pairs(
            self.cell_count, self.entanglement_percentage, self.rng
        )
        n_pairs = len(self.entangled_pairs) // 2
        self._record("entanglement_regenerated", {
            "pairs": n_pairs,
            "entanglement_percentage": self.entanglement_percentage,
        })
        return n_pairs

    # =========================================================================
    # RECEIPTS
    # =========================================================================

    def _record(self, receipt_type: str, data: dict) -> dict:
        receipt = emit_receipt(receipt_type, {"tenant_id": self.tenant_id, **data})
        self.receipt_ledger.append(receipt)
        return receipt

    def drain_receipts(self) -> List[dict]:
        """Hand over every buffered receipt and empty the ledger."""
        drained = list(self.receipt_ledger)
        self.receipt_ledger.clear()
        return drained

    def __repr__(self):
        return (f"Universe(extents={self.grid_extents}, p={self.ga_dimension}, "
                f"step={self.step_count}, pairs={len(self.entangled_pairs) // 2})")
