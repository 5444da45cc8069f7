"""
tests/test_cycle.py - Run Loop, Measurement, Validation and Export

Validates:
- run_automaton traces, statistics and receipts
- phase_census / grade_profile
- validate_universe stoprule
- export_run JSON and generate_report text
"""

import json
from dataclasses import replace

import pytest

from existon import (
    MANDATORY_SCENARIOS,
    SCENARIO_DETERMINISTIC,
    SCENARIO_HIGH_FLUX,
    SCENARIO_ORIGINAL,
    SCENARIO_VOLUME,
    AutomatonConfig,
    CellPhase,
    Universe,
    export_run,
    generate_report,
    grade_profile,
    observed_fraction,
    phase_census,
    run_automaton,
    run_batch,
    snapshot_grid,
    validate_universe,
)
from existon.validation import check_universe
from receipts import StopRule


def small(config, **overrides):
    """Shrink a preset so the test stays fast."""
    values = {"grid_extents": (6, 6), "n_steps": 5}
    values.update(overrides)
    return replace(config, **values)


# =============================================================================
# CONFIG
# =============================================================================

class TestConfig:
    """AutomatonConfig validation and presets."""

    def test_original_defaults(self):
        assert SCENARIO_ORIGINAL.grid_extents == (120, 80)
        assert SCENARIO_ORIGINAL.ga_dimension == 2
        assert SCENARIO_ORIGINAL.observation_rate == 0.0005
        assert SCENARIO_ORIGINAL.decay_rate == 0.01

    def test_extents_coerced_to_tuple(self):
        config = AutomatonConfig(grid_extents=[4, 4])
        assert config.grid_extents == (4, 4)

    @pytest.mark.parametrize("kwargs", [
        {"grid_extents": ()},
        {"grid_extents": (0, 4)},
        {"ga_dimension": -1},
        {"decay_rate": -0.1},
        {"entanglement_percentage": 1.2},
        {"n_steps": -1},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            AutomatonConfig(**kwargs)

    def test_frozen(self):
        with pytest.raises(Exception):
            SCENARIO_ORIGINAL.n_steps = 3

    def test_scenario_names_unique(self):
        names = [c.scenario_name for c in MANDATORY_SCENARIOS]
        assert len(names) == len(set(names))


# =============================================================================
# RUN LOOP
# =============================================================================

class TestRunAutomaton:
    """Tests for run_automaton and run_batch."""

    def test_deterministic_run(self):
        result = run_automaton(small(SCENARIO_DETERMINISTIC))
        stats = result.statistics
        assert stats["steps"] == 5
        assert stats["observations"] == 0
        assert stats["decays"] == 0
        assert stats["entanglement_events"] == 0
        assert stats["final_census"]["POTENTIAL"] == 36
        assert len(result.traces["phase_census"]) == 6
        assert len(result.step_results) == 5

    def test_high_flux_run_valid(self):
        result = run_automaton(small(SCENARIO_HIGH_FLUX, n_steps=15))
        assert result.statistics["observations"] > 0
        assert validate_universe(result.final_universe) is True
        for census in result.traces["phase_census"]:
            assert sum(census.values()) == 36

    def test_events_carry_step(self):
        result = run_automaton(small(SCENARIO_HIGH_FLUX, n_steps=15))
        for step, a, b in result.entanglement_events:
            assert 0 <= step < 15
            assert result.final_universe.entangled_pairs.get(a) == b

    def test_reproducible(self):
        config = small(SCENARIO_HIGH_FLUX, n_steps=8)
        a = run_automaton(config)
        b = run_automaton(config)
        assert a.statistics == b.statistics
        assert a.entanglement_events == b.entanglement_events
        assert a.traces == b.traces

    def test_volume_scenario(self):
        result = run_automaton(replace(SCENARIO_VOLUME, grid_extents=(3, 3, 3), n_steps=3))
        assert result.statistics["cell_count"] == 27

    def test_run_receipt(self):
        result = run_automaton(small(SCENARIO_DETERMINISTIC, n_steps=2))
        ledger = result.final_universe.receipt_ledger
        last = ledger[-1]
        assert last["receipt_type"] == "automaton_run"
        assert last["scenario"] == "DETERMINISTIC"
        assert ":" in last["ledger_root"]
        assert sum(1 for r in ledger if r["receipt_type"] == "phase_census") == 2

    def test_zero_steps(self):
        result = run_automaton(small(SCENARIO_DETERMINISTIC, n_steps=0))
        assert result.statistics["steps"] == 0
        assert len(result.traces["phase_census"]) == 1

    def test_run_batch(self):
        configs = [small(SCENARIO_DETERMINISTIC, n_steps=1), small(SCENARIO_HIGH_FLUX, n_steps=1)]
        results = run_batch(configs)
        assert [r.config.scenario_name for r in results] == ["DETERMINISTIC", "HIGH_FLUX"]


# =============================================================================
# MEASUREMENT
# =============================================================================

class TestMeasurement:
    def test_census_counts(self):
        universe = Universe((3, 3), 1, entanglement_percentage=0.0, seed=1)
        universe.observe_cell(0)
        universe.set_operator((1, 0))
        census = phase_census(universe)
        assert census == {"POTENTIAL": 7, "OBSERVED": 1, "OPERATOR": 1}
        assert observed_fraction(universe) == pytest.approx(1 / 9)

    def test_grade_profile(self):
        universe = Universe((2, 2), 2, entanglement_percentage=0.0, seed=1)
        for index in range(4):
            universe.set_operator(universe.decode_index(index))
        assert grade_profile(universe) == {0: 0, 1: 4, 2: 0}


# =============================================================================
# VALIDATION
# =============================================================================

class TestValidation:
    def test_valid_universe(self):
        universe = Universe((4, 4), 2, seed=3)
        assert check_universe(universe) == []
        assert validate_universe(universe) is True

    def test_broken_pairs(self):
        universe = Universe((4, 4), 2, entanglement_percentage=0.0, seed=3)
        universe.entangled_pairs[0] = 5
        with pytest.raises(StopRule):
            validate_universe(universe)
        assert universe.receipt_ledger[-1]["receipt_type"] == "anomaly"

    def test_broken_ids(self):
        universe = Universe((2, 2), 1, seed=3)
        universe.grid[1], universe.grid[2] = universe.grid[2], universe.grid[1]
        assert any("has id" in v for v in check_universe(universe))


# =============================================================================
# EXPORT
# =============================================================================

class TestExport:
    def test_export_json(self, tmp_path):
        result = run_automaton(small(SCENARIO_HIGH_FLUX, n_steps=3))
        path = tmp_path / "run.json"
        text = export_run(result, output_path=str(path), include_grid=True)
        data = json.loads(text)
        assert data["config"]["scenario_name"] == "HIGH_FLUX"
        assert data["config"]["grid_extents"] == [6, 6]
        assert len(data["final_grid"]["cells"]) == 36
        assert data["final_grid"]["cells"][0]["phase"] in {p.value for p in CellPhase}
        assert json.loads(path.read_text()) == data
        assert result.final_universe.receipt_ledger[-1]["receipt_type"] == "run_export"

    def test_snapshot_pairs_listed_once(self):
        """Each entangled pair appears once, lower id first."""
        result = run_automaton(small(SCENARIO_HIGH_FLUX, n_steps=1))
        universe = result.final_universe
        pairs = json.loads(json.dumps(snapshot_grid(universe)))["entangled_pairs"]
        assert len(pairs) == len(universe.entangled_pairs) // 2
        for a, b in pairs:
            assert a < b
            assert universe.entangled_pairs[a] == b

    def test_report(self):
        result = run_automaton(small(SCENARIO_DETERMINISTIC, n_steps=2))
        report = generate_report(result)
        assert "EXISTON AUTOMATON REPORT" in report
        assert "Scenario: DETERMINISTIC" in report
        assert "Grid: 6x6 (Cl(2,0))" in report
        assert "POTENTIAL=36" in report
