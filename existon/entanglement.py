"""
existon/entanglement.py - Entangled Pair Bookkeeping

The pair map is symmetric and injective: a -> b implies b -> a, no id maps
to itself, and no id has two partners.
"""

from typing import Dict, List, Tuple

import numpy as np


def pair_count_for(cell_count: int, entanglement_percentage: float) -> int:
    """floor(cell_count * entanglement_percentage / 2)."""
    return int(cell_count * entanglement_percentage // 2)


def bind_pair(pairs: Dict[int, int], id1: int, id2: int, cell_count: int) -> bool:
    """
    Insert id1 <-> id2 if both are valid, distinct and unpaired.

    Args:
        pairs: Pair map (mutated in place)
        id1: First cell id
        id2: Second cell id
        cell_count: Number of cells; ids must be in [0, cell_count)

    Returns:
        bool: True if the pair was inserted
    """
    if id1 == id2:
        return False
    if not (0 <= id1 < cell_count and 0 <= id2 < cell_count):
        return False
    if id1 in pairs or id2 in pairs:
        return False
    pairs[id1] = id2
    pairs[id2] = id1
    return True


def generate_pairs(cell_count: int, entanglement_percentage: float,
                   rng: np.random.Generator) -> Dict[int, int]:
    """
    Shuffle all ids, then pair consecutive ids greedily.

    Stops at pair_count_for(cell_count, entanglement_percentage) pairs or
    when fewer than two ids remain.
    """
    target = pair_count_for(cell_count, entanglement_percentage)
    order = rng.permutation(cell_count).tolist()
    pairs: Dict[int, int] = {}
    formed = 0
    cursor = 0
    while formed < target and cursor + 1 < len(order):
        if bind_pair(pairs, order[cursor], order[cursor + 1], cell_count):
            formed += 1
        cursor += 2
    return pairs


def pair_list(pairs: Dict[int, int]) -> List[Tuple[int, int]]:
    """Each pair once, lower id first, sorted."""
    return sorted((a, b) for a, b in pairs.items() if a < b)


def check_entanglement_invariant(pairs: Dict[int, int]) -> List[str]:
    """Return a list of violations (empty when the map is valid)."""
    violations = []
    for a, b in pairs.items():
        if a == b:
            violations.append(f"self pair: {a}")
        elif pairs.get(b) != a:
            violations.append(f"asymmetric pair: {a} -> {b} but {b} -> {pairs.get(b)}")
    return violations

