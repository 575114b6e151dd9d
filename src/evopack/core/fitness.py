"""
evopack.core.fitness
====================

Penalty-based fitness for circle placements.

The total penalty ``C`` of an individual is

    C = DOMAIN_PENALTY * (genes outside the domain) + overlap penalty

and fitness is ``F = 1 / (1 + C)``, so ``F`` lies in ``(0, 1]`` and reaches ``1.0``
only for a placement with no boundary violation and no overlap.

The overlap term uses :class:`QuadraticOverlap` up to ``hashing_threshold`` genes
and :class:`SpatialHashOverlap` above it.
"""

from __future__ import annotations

from evopack.core.genotype import PointGenotype
from evopack.core.individual import Individual
from evopack.core.overlap import OverlapStrategy, QuadraticOverlap, SpatialHashOverlap
from evopack.domains.base import Domain

DOMAIN_PENALTY = 10000.0
OVERLAP_WEIGHT = 100.0
HASHING_THRESHOLD = 80


class FitnessEvaluator:
    """Callable fitness function bound to one domain.

    Instances hold no mutable state after construction and can be shared by
    worker threads or pickled to worker processes.

    Parameters
    ----------
    domain : Domain
        Region the genes must stay in.
    max_radius : float
        Largest gene radius in the problem; sizes the spatial hash grid.
    domain_penalty : float, default DOMAIN_PENALTY
        Penalty per gene outside the domain.
    overlap_weight : float, default OVERLAP_WEIGHT
        Multiplier of the squared overlap depth.
    hashing_threshold : int, default HASHING_THRESHOLD
        Largest gene count still handled by the quadratic strategy.
    """

    def __init__(
        self,
        domain: Domain,
        max_radius: float,
        domain_penalty: float = DOMAIN_PENALTY,
        overlap_weight: float = OVERLAP_WEIGHT,
        hashing_threshold: int = HASHING_THRESHOLD,
    ):
        if domain_penalty < 0 or overlap_weight < 0:
            raise ValueError("penalty weights must be >= 0")
        self.domain = domain
        self.domain_penalty = domain_penalty
        self.overlap_weight = overlap_weight
        self.hashing_threshold = hashing_threshold
        self.quadratic: OverlapStrategy = QuadraticOverlap()
        self.spatial: OverlapStrategy = SpatialHashOverlap(max_radius)

    def strategy_for(self, n_genes: int) -> OverlapStrategy:
        return self.quadratic if n_genes <= self.hashing_threshold else self.spatial

    def boundary_violations(self, genotype: PointGenotype) -> int:
        return sum(1 for p in genotype if self.domain.is_point_outside(p.x, p.y))

    def overlap_penalty(self, genotype: PointGenotype) -> float:
        return self.strategy_for(len(genotype)).total_penalty(genotype, self.overlap_weight)

    def penalty(self, individual: Individual) -> float:
        genotype = individual.genotype
        return self.boundary_violations(genotype) * self.domain_penalty + self.overlap_penalty(genotype)

    def evaluate(self, individual: Individual) -> float:
        return 1.0 / (1.0 + self.penalty(individual))

    __call__ = evaluate
