"""Point distance utilities.

This module centralizes the geometry shared by the overlap strategies so both
of them agree on a single definition of distance and pair penalty.

Three public helper functions are provided:

    point_distance(p, q) -> float
        Euclidean distance between two centres.

    pair_penalty(p, q, weight) -> float
        Quadratic overlap penalty of one pair:
        ``(r_p + r_q - d)^2 * weight`` when ``d < r_p + r_q``, else ``0``.

    min_separation_gap(genotype) -> float
        Smallest ``d - (r_i + r_j)`` over all pairs. Negative means overlap.
        ``inf`` for genotypes with fewer than two genes.
"""

from __future__ import annotations

from math import hypot

import numpy as np

from .genotype import Point, PointGenotype

__all__ = [
    "min_separation_gap",
    "pair_penalty",
    "point_distance",
]


def point_distance(p: Point, q: Point) -> float:
    return hypot(q.x - p.x, q.y - p.y)


def pair_penalty(p: Point, q: Point, weight: float) -> float:
    required = p.radius + q.radius
    actual = point_distance(p, q)
    if actual < required:
        overlap = required - actual
        return overlap * overlap * weight
    return 0.0


def min_separation_gap(genotype: PointGenotype) -> float:
    n = len(genotype)
    if n < 2:
        return float("inf")
    arr = genotype.as_array()
    i, j = np.triu_indices(n, k=1)
    dist = np.hypot(arr[j, 0] - arr[i, 0], arr[j, 1] - arr[i, 1])
    gaps = dist - (arr[i, 2] + arr[j, 2])
    return float(gaps.min())
