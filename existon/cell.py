"""
existon/cell.py - The Existon Cell and its Lifecycle

POTENTIAL --observe--> OBSERVED --decay--> POTENTIAL
OPERATOR is only entered and left through the automaton's editing operations.
"""

from dataclasses import dataclass, replace

import numpy as np

from . import multivector as mv
from .constants import COLLAPSE_MIN_GRADE, CellPhase
from .multivector import Multivector


@dataclass
class Existon:
    """One grid cell: stable id, lifecycle phase, algebraic state."""
    id: int
    phase: CellPhase
    state: Multivector

    @classmethod
    def spawn(cls, cell_id: int, p: int, rng: np.random.Generator) -> "Existon":
        """Fresh Potential cell in a random state."""
        return cls(id=cell_id, phase=CellPhase.POTENTIAL, state=mv.random(p, rng))

    @property
    def p(self) -> int:
        return self.state.p

    def observe(self) -> bool:
        """
        Collapse: POTENTIAL -> OBSERVED, keeping only grade 0 and 1 terms.

        Returns:
            bool: True if the cell transitioned, False if it was not Potential
        """
        if self.phase is not CellPhase.POTENTIAL:
            return False
        self.phase = CellPhase.OBSERVED
        self.state = self.state.project(COLLAPSE_MIN_GRADE - 1)
        return True

    def decay(self, rng: np.random.Generator) -> bool:
        """
        Return to superposition: OBSERVED -> POTENTIAL with a fresh random state.

        Returns:
            bool: True if the cell transitioned, False if it was not Observed
        """
        if self.phase is not CellPhase.OBSERVED:
            return False
        self.phase = CellPhase.POTENTIAL
        self.state = mv.random(self.state.p, rng)
        return True

    def copy(self) -> "Existon":
        # Multivectors are immutable, a shallow copy is a full snapshot.
        return replace(self)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "phase": self.phase.value,
            "state": list(self.state.as_tuple()),
        }
