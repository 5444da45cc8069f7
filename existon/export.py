"""
existon/export.py - Run Export and Reports

JSON export of a RunResult, grid snapshots, and a plain-text report.
"""

import json
from typing import Optional

from receipts import dual_hash, emit_receipt

from .entanglement import pair_list
from .types_result import RunResult


def snapshot_grid(universe) -> dict:
    """Serializable snapshot of every cell plus the pair map."""
    return {
        "grid_extents": list(universe.grid_extents),
        "ga_dimension": universe.ga_dimension,
        "step": universe.step_count,
        "cells": [cell.as_dict() for cell in universe.grid],
        "entangled_pairs": [list(pair) for pair in pair_list(universe.entangled_pairs)],
    }


def export_run(result: RunResult, output_path: Optional[str] = None,
               include_grid: bool = False) -> str:
    """
    Format a RunResult as JSON.

    Args:
        result: RunResult to export
        output_path: Optional file path to also write the JSON to
        include_grid: embed the final grid snapshot

    Returns:
        str: JSON formatted output
    """
    config = result.config
    export_data = {
        "config": {
            "scenario_name": config.scenario_name,
            "grid_extents": list(config.grid_extents),
            "ga_dimension": config.ga_dimension,
            "observation_rate": config.observation_rate,
            "decay_rate": config.decay_rate,
            "fluctuation_rate": config.fluctuation_rate,
            "entanglement_percentage": config.entanglement_percentage,
            "n_steps": config.n_steps,
            "random_seed": config.random_seed,
        },
        "statistics": result.statistics,
        "traces": result.traces,
        "entanglement_events": [list(e) for e in result.entanglement_events],
    }
    if include_grid:
        export_data["final_grid"] = snapshot_grid(result.final_universe)

    export_data["dual_hash"] = dual_hash(json.dumps(export_data, sort_keys=True))
    text = json.dumps(export_data, indent=2)

    if output_path:
        with open(output_path, "w") as f:
            f.write(text)

    result.final_universe.receipt_ledger.append(emit_receipt("run_export", {
        "tenant_id": config.tenant_id,
        "scenario": config.scenario_name,
        "dual_hash": export_data["dual_hash"],
        "output_path": output_path
    }))

    return text


def generate_report(result: RunResult) -> str:
    """Human-readable summary of a run."""
    stats = result.statistics
    census = stats["final_census"]
    extents = "x".join(str(d) for d in result.config.grid_extents)
    lines = [
        "=== EXISTON AUTOMATON REPORT ===",
        f"Scenario: {result.config.scenario_name}",
        f"Grid: {extents} (Cl({result.config.ga_dimension},0))",
        f"Steps: {stats['steps']}",
        f"Observations: {stats['observations']}",
        f"Decays: {stats['decays']}",
        f"Fluctuations: {stats['fluctuations']}",
        f"Entangled pairs: {stats['entangled_pairs']}",
        f"Entanglement events: {stats['entanglement_events']}",
        "Final census: " + ", ".join(f"{k}={v}" for k, v in census.items()),
    ]
    return "\n".join(lines)
