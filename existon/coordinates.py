"""
existon/coordinates.py - Flat Index <-> N-dimensional Coordinate Encoding

Grid extents d_0..d_{n-1}; stride[0] = 1, stride[k] = stride[k-1] * d_{k-1}.
Flat index = sum(coord[k] * stride[k]). Invalid input yields None.
"""

from functools import lru_cache
from itertools import product
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import NEIGHBOR_STEPS


def compute_strides(extents: Sequence[int]) -> Tuple[int, ...]:
    """Mixed-radix strides, lowest dimension fastest."""
    strides = []
    stride = 1
    for extent in extents:
        strides.append(stride)
        stride *= extent
    return tuple(strides)


def cell_count(extents: Sequence[int]) -> int:
    total = 1
    for extent in extents:
        total *= extent
    return total


def encode(coord: Sequence[int], extents: Sequence[int],
           strides: Sequence[int]) -> Optional[int]:
    """
    Coordinate to flat index.

    Returns:
        int index, or None on arity mismatch or any out-of-range component
    """
    if len(coord) != len(extents):
        return None
    index = 0
    for c, extent, stride in zip(coord, extents, strides):
        if not 0 <= c < extent:
            return None
        index += c * stride
    return index


def decode(index: int, extents: Sequence[int],
           strides: Sequence[int]) -> Optional[Tuple[int, ...]]:
    """Flat index to coordinate, highest dimension first. None if out of range."""
    if not 0 <= index < cell_count(extents):
        return None
    coord = [0] * len(extents)
    rest = index
    for k in range(len(extents) - 1, -1, -1):
        coord[k] = rest // strides[k]
        rest %= strides[k]
    return tuple(coord)


@lru_cache(maxsize=None)
def neighbor_offsets(arity: int) -> Tuple[Tuple[int, ...], ...]:
    """
    Moore neighborhood offsets, all-zero excluded.

    Ordered by increasing mixed-radix offset index with dimension 0 varying
    fastest, the same convention as the flat grid index.
    """
    offsets = []
    for reversed_offset in product(NEIGHBOR_STEPS, repeat=arity):
        offset = tuple(reversed(reversed_offset))
        if any(offset):
            offsets.append(offset)
    return tuple(offsets)


def neighbor_table(extents: Sequence[int], strides: Sequence[int]) -> np.ndarray:
    """
    (cell_count, 3**n - 1) array: row i lists the wrapped neighbors of cell i.

    Column order is neighbor_offsets() order, so folding column by column
    keeps every cell's accumulation order.
    """
    n = cell_count(extents)
    ext = np.array(extents, dtype=np.int64)
    strd = np.array(strides, dtype=np.int64)
    coords = (np.arange(n, dtype=np.int64)[:, None] // strd) % ext
    offsets = neighbor_offsets(len(extents))
    table = np.empty((n, len(offsets)), dtype=np.int64)
    for col, offset in enumerate(offsets):
        wrapped = (coords + np.array(offset, dtype=np.int64)) % ext
        table[:, col] = wrapped @ strd
    table.setflags(write=False)
    return table


def neighbor_indices(index: int, extents: Sequence[int],
                     strides: Sequence[int]) -> List[int]:
    """Flat indices of the wrapped Moore neighbors of index, in offset order."""
    coord = decode(index, extents, strides)
    if coord is None:
        return []
    neighbors = []
    for offset in neighbor_offsets(len(extents)):
        flat = 0
        for c, dc, extent, stride in zip(coord, offset, extents, strides):
            flat += ((c + dc) % extent) * stride
        neighbors.append(flat)
    return neighbors
