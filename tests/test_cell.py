"""
tests/test_cell.py - Existon Lifecycle

Validates:
- spawn gives a Potential cell with a random state
- observe collapses to grade <= 1 and is idempotent
- decay only changes Observed cells
"""

import numpy as np
import pytest

from existon import multivector as mv
from existon.cell import Existon
from existon.constants import CellPhase


@pytest.fixture
def rng():
    return np.random.default_rng(99)


def full_cell(p, phase=CellPhase.POTENTIAL):
    """Cell with every coefficient set to 1."""
    return Existon(id=3, phase=phase, state=mv.from_coefficients(p, [1] * (1 << p)))


class TestSpawn:
    """Tests for Existon.spawn."""

    def test_spawn_potential(self, rng):
        cell = Existon.spawn(7, 3, rng)
        assert cell.id == 7
        assert cell.phase is CellPhase.POTENTIAL
        assert cell.p == 3
        assert len(cell.state) == 8


class TestObserve:
    """Tests for observe()."""

    def test_observe_transitions(self):
        cell = full_cell(3)
        assert cell.observe() is True
        assert cell.phase is CellPhase.OBSERVED

    @pytest.mark.parametrize("p", [2, 3, 4])
    def test_observe_zeroes_high_grades(self, p, rng):
        """Every blade with popcount >= 2 is exactly 0 after observe."""
        for _ in range(10):
            cell = Existon.spawn(0, p, rng)
            before = cell.state.as_tuple()
            cell.observe()
            after = cell.state.as_tuple()
            for blade in range(1 << p):
                if mv.grade(blade) >= 2:
                    assert after[blade] == 0, f"blade {blade} survived collapse"
                else:
                    assert after[blade] == before[blade], f"blade {blade} changed"

    def test_observe_idempotent(self):
        """Second observe is a no-op."""
        once = full_cell(3)
        once.observe()
        twice = full_cell(3)
        twice.observe()
        assert twice.observe() is False
        assert twice.phase is once.phase
        assert twice.state == once.state

    def test_observe_ignores_operator(self):
        cell = full_cell(2, CellPhase.OPERATOR)
        before = cell.state
        assert cell.observe() is False
        assert cell.phase is CellPhase.OPERATOR
        assert cell.state == before


class TestDecay:
    """Tests for decay()."""

    def test_decay_from_observed(self, rng):
        cell = full_cell(2, CellPhase.OBSERVED)
        assert cell.decay(rng) is True
        assert cell.phase is CellPhase.POTENTIAL
        assert cell.state.p == 2

    def test_decay_draws_fresh_state(self):
        """The new state is the next draw from the generator."""
        cell = full_cell(3, CellPhase.OBSERVED)
        cell.decay(np.random.default_rng(5))
        assert cell.state == mv.random(3, np.random.default_rng(5))

    @pytest.mark.parametrize("phase", [CellPhase.POTENTIAL, CellPhase.OPERATOR])
    def test_decay_noop_elsewhere(self, phase, rng):
        """Potential and Operator cells are untouched."""
        cell = full_cell(2, phase)
        before = cell.state
        assert cell.decay(rng) is False
        assert cell.phase is phase
        assert cell.state == before


class TestCopy:
    def test_copy_independent(self):
        cell = full_cell(1)
        clone = cell.copy()
        clone.observe()
        assert cell.phase is CellPhase.POTENTIAL
        assert clone.phase is CellPhase.OBSERVED

    def test_as_dict(self):
        cell = full_cell(1)
        assert cell.as_dict() == {"id": 3, "phase": "POTENTIAL", "state": [1, 1]}
