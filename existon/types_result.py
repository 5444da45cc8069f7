"""
existon/types_result.py - StepResult and RunResult Dataclasses

Immutable containers returned by the step protocol and the run loop.
"""

from dataclasses import dataclass, field
from typing import Any, List, Tuple

from .types_config import AutomatonConfig


@dataclass(frozen=True)
class StepResult:
    """Outcome of one automaton step."""
    step: int
    entanglement_events: Tuple[Tuple[int, int], ...] = ()
    observed_ids: Tuple[int, ...] = ()
    decayed: int = 0
    fluctuated: int = 0

    @property
    def observations(self) -> int:
        return len(self.observed_ids)


@dataclass(frozen=True)
class RunResult:
    """Immutable run result."""
    final_universe: Any
    traces: dict
    entanglement_events: List[Tuple[int, int, int]]
    statistics: dict
    config: AutomatonConfig
    step_results: List[StepResult] = field(default_factory=list)
