"""
evopack.core.genotype
=====================

This module defines the gene and genome representations used by the packing search.

A gene is a :class:`Point` (circle centre plus a fixed radius). A genome is a
:class:`PointGenotype`, an ordered sequence of points that is owned by exactly one
individual. Points are immutable; a genome changes only by replacing a whole point
at a given index.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class Point:
    """Single placed object: centre coordinates and radius."""

    x: float
    y: float
    radius: float

    def moved_to(self, x: float, y: float) -> Point:
        """Return a new point at ``(x, y)`` keeping the radius."""
        return Point(float(x), float(y), self.radius)

    def __str__(self) -> str:
        return f"({self.x:.4f}, {self.y:.4f})"


class PointGenotype:
    """Ordered, owned sequence of :class:`Point` genes."""

    __slots__ = ("_points",)

    def __init__(self, points: Iterable[Point]):
        # always build a fresh list so two genotypes never share storage
        self._points: list[Point] = list(points)
        if not all(isinstance(p, Point) for p in self._points):
            raise TypeError("PointGenotype genes must be Point instances.")

    @classmethod
    def random(
        cls,
        length: int,
        bounds: tuple[float, float, float, float],
        radius: float,
        rng: np.random.Generator | None = None,
    ) -> PointGenotype:
        """Create a genotype with points sampled uniformly inside a box.

        Parameters
        ----------
        length : int
            Number of genes.
        bounds : tuple[float, float, float, float]
            ``(min_x, min_y, max_x, max_y)`` of the sampling box.
        radius : float
            Radius given to every point.
        rng : numpy.random.Generator | None, default None
            Optional RNG for reproducibility. Falls back to a fresh default generator if None.
        """
        if length <= 0:
            raise ValueError("length must be > 0")
        min_x, min_y, max_x, max_y = bounds
        _rng = rng if rng is not None else np.random.default_rng()
        xs = _rng.uniform(min_x, max_x, size=length)
        ys = _rng.uniform(min_y, max_y, size=length)
        return cls(Point(float(x), float(y), float(radius)) for x, y in zip(xs, ys))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PointGenotype):
            return False
        return self._points == other._points

    def __hash__(self):
        return hash(tuple(self._points))

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> Point:
        return self._points[index]

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(len={len(self)})"

    def replace(self, index: int, point: Point) -> None:
        """Replace the gene at ``index`` in place."""
        if not isinstance(point, Point):
            raise TypeError("replacement gene must be a Point")
        self._points[index] = point

    def copy(self) -> PointGenotype:
        """Create an independent copy (points are immutable and may be shared)."""
        return PointGenotype(self._points)

    def points(self) -> tuple[Point, ...]:
        """Return a read-only snapshot of the genes."""
        return tuple(self._points)

    def as_array(self) -> np.ndarray:
        """Return the genes as an ``(N, 3)`` float array of ``x, y, radius``."""
        if not self._points:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([(p.x, p.y, p.radius) for p in self._points], dtype=np.float64)

    def max_radius(self) -> float:
        return max((p.radius for p in self._points), default=0.0)
