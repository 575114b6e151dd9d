"""
evopack.domains.base
====================

Capability interface every placement region implements.

The search engine only needs three things from a region: a bounding box for
sampling and clamping, an O(1) point predicate, and a whole-individual validity
check. Every concrete shape must return a bounding box that fully encloses its
valid region.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple

from evopack.core.individual import Individual


class BoundingBox(NamedTuple):
    """Axis-aligned rectangle ``[min_x, max_x] x [min_y, max_y]``."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


class Domain(ABC):
    """Abstract base class for 2-D placement regions."""

    #: name used by the domain factory and in log messages
    name: str = "domain"

    @abstractmethod
    def bounding_box(self) -> BoundingBox:
        """Return a box enclosing the whole valid region."""
        pass

    @abstractmethod
    def is_point_outside(self, x: float, y: float) -> bool:
        """Return True when ``(x, y)`` is not part of the region. Boundary counts as inside."""
        pass

    def contains_point(self, x: float, y: float) -> bool:
        return not self.is_point_outside(x, y)

    def is_valid_individual(self, individual: Individual) -> bool:
        """Return True when every gene centre of ``individual`` lies inside the region."""
        return not any(self.is_point_outside(p.x, p.y) for p in individual.genotype)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(bounding_box={tuple(self.bounding_box())})"
