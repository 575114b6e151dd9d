"""
evopack.core.overlap
====================

Overlap penalty strategies.

Both strategies compute the same quantity: the sum over every unordered pair of
distinct genes of ``(r_i + r_j - d_ij)^2 * weight`` for pairs closer than the sum
of their radii. They differ only in how candidate pairs are enumerated:

- :class:`QuadraticOverlap` checks all ``N(N-1)/2`` pairs at once with NumPy.
- :class:`SpatialHashOverlap` buckets genes in a uniform grid of cell size
  ``2 * max_radius`` and only checks the 3x3 block of cells around each gene.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections import defaultdict

import numpy as np

from evopack.core.distance import pair_penalty
from evopack.core.genotype import PointGenotype

__all__ = [
    "OverlapStrategy",
    "QuadraticOverlap",
    "SpatialHashOverlap",
]


class OverlapStrategy(ABC):
    """Abstract base class for overlap penalty strategies."""

    @abstractmethod
    def total_penalty(self, genotype: PointGenotype, weight: float) -> float:
        """Return the accumulated overlap penalty of ``genotype``."""
        pass


class QuadraticOverlap(OverlapStrategy):
    """All-pairs O(N^2) strategy, cheapest for small N."""

    def total_penalty(self, genotype: PointGenotype, weight: float) -> float:
        n = len(genotype)
        if n < 2:
            return 0.0
        arr = genotype.as_array()
        # j > i: each unordered pair exactly once, never a gene with itself
        i, j = np.triu_indices(n, k=1)
        actual = np.hypot(arr[j, 0] - arr[i, 0], arr[j, 1] - arr[i, 1])
        required = arr[i, 2] + arr[j, 2]
        overlap = required - actual
        overlap = overlap[overlap > 0.0]
        return float(np.sum(overlap * overlap) * weight)


class SpatialHashOverlap(OverlapStrategy):
    """Uniform-grid strategy, O(N) on average.

    Parameters
    ----------
    max_radius : float
        Largest radius present in the problem. Cell side is ``2 * max_radius`` so
        any overlapping pair sits in the same or in an adjacent cell.
    """

    def __init__(self, max_radius: float):
        if max_radius <= 0:
            raise ValueError("max_radius must be > 0")
        self.max_radius = max_radius
        self.cell_size = 2.0 * max_radius

    def cell_of(self, x: float, y: float) -> tuple[int, int]:
        return math.floor(x / self.cell_size), math.floor(y / self.cell_size)

    def total_penalty(self, genotype: PointGenotype, weight: float) -> float:
        points = genotype.points()
        # rebuilt on every call; positions change between generations
        grid: dict[tuple[int, int], list[int]] = defaultdict(list)
        cells = [self.cell_of(p.x, p.y) for p in points]
        for idx, cell in enumerate(cells):
            grid[cell].append(idx)

        penalty = 0.0
        for i, (ci, cj) in enumerate(cells):
            p_i = points[i]
            for di in (-1, 0, 1):
                for dj in (-1, 0, 1):
                    neighbours = grid.get((ci + di, cj + dj))
                    if not neighbours:
                        continue
                    for j in neighbours:
                        # gene index order: skips self and counts each pair once
                        if j <= i:
                            continue
                        penalty += pair_penalty(p_i, points[j], weight)
        return penalty
