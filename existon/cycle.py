"""
existon/cycle.py - Headless Run Loop

Entry points: run_automaton, run_batch.
Plays the role of the host loop: build a Universe, tick it, record traces.
"""

from typing import List

from receipts import emit_receipt, merkle

from .automaton import Universe
from .measurement import grade_profile, measure_step, phase_census
from .types_config import AutomatonConfig
from .types_result import RunResult
from .validation import validate_universe


def run_automaton(config: AutomatonConfig, validate: bool = True) -> RunResult:
    """
    Run a complete headless simulation.

    Args:
        config: AutomatonConfig with geometry, rates, seed and step count
        validate: check universe invariants after every step

    Returns:
        RunResult with final universe, traces, events and statistics
    """
    universe = Universe.from_config(config)
    census_trace = [phase_census(universe)]
    events = []
    step_results = []

    for _ in range(config.n_steps):
        result = universe.step_detailed()
        step_results.append(result)
        measure_step(universe, result)
        census_trace.append(phase_census(universe))
        events.extend((result.step, a, b) for a, b in result.entanglement_events)
        if validate:
            validate_universe(universe)

    statistics = {
        "steps": universe.step_count,
        "cell_count": universe.cell_count,
        "observations": sum(r.observations for r in step_results),
        "decays": sum(r.decayed for r in step_results),
        "fluctuations": sum(r.fluctuated for r in step_results),
        "entanglement_events": len(events),
        "entangled_pairs": len(universe.entangled_pairs) // 2,
        "final_census": census_trace[-1],
        "final_grade_profile": {str(g): n for g, n in grade_profile(universe).items()},
    }

    run_receipt = emit_receipt("automaton_run", {
        "tenant_id": config.tenant_id,
        "scenario": config.scenario_name,
        "random_seed": config.random_seed,
        "ledger_root": merkle([r["payload_hash"] for r in universe.receipt_ledger]),
        **{k: v for k, v in statistics.items() if not isinstance(v, dict)}
    })
    universe.receipt_ledger.append(run_receipt)

    return RunResult(
        final_universe=universe,
        traces={"phase_census": census_trace},
        entanglement_events=events,
        statistics=statistics,
        config=config,
        step_results=step_results,
    )


def run_batch(configs: List[AutomatonConfig]) -> List[RunResult]:
    """Run several configurations in sequence."""
    results = []
    for config in configs:
        results.append(run_automaton(config))
    return results
