"""
evopack.operators.mutation
==========================

This module defines mutation operators for point genotypes.

:class:`AdaptiveCreepMutation` moves each gene, with a given probability, by a
uniform offset in ``[-strength, strength)`` on both axes. The strength anneals
with the generation index:

    strength(g) = initial_strength / (1 + decay_rate * g / total_generations)

Moved coordinates are soft-clamped to the domain's bounding box.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from evopack.core.genotype import PointGenotype


def clamp(value: float, low: float, high: float) -> float:
    """Limit ``value`` to the closed interval ``[low, high]``."""
    return max(low, min(high, value))


# =============================================================================
# Base class
# =============================================================================
class MutationOperator(ABC):
    """Abstract base class for mutation operators."""

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def mutate(
        self, genotype: PointGenotype, generation: int = 0, rng: np.random.Generator | None = None
    ) -> PointGenotype:
        """Return a mutated copy of the genotype."""
        pass


class AdaptiveCreepMutation(MutationOperator):
    """
    Creep mutation with annealed strength and bounding-box soft clamping.

    Parameters:
        probability (float): Probability of mutating each gene.
        initial_strength (float): Maximum offset at generation 0.
        bounds (tuple): ``(min_x, min_y, max_x, max_y)`` used for clamping.
        total_generations (int): Length of the run the schedule is spread over.
        decay_rate (float): How fast the strength shrinks; 0 keeps it constant.
    """

    def __init__(
        self,
        probability: float,
        initial_strength: float,
        bounds: tuple[float, float, float, float],
        total_generations: int,
        decay_rate: float = 5.0,
        rng: np.random.Generator | None = None,
    ):
        super().__init__(rng=rng)
        if not (0.0 <= probability <= 1.0):
            raise ValueError("probability must be in [0,1]")
        if initial_strength <= 0:
            raise ValueError("initial_strength must be > 0")
        if total_generations <= 0:
            raise ValueError("total_generations must be > 0")
        if decay_rate < 0:
            raise ValueError("decay_rate must be >= 0")
        min_x, min_y, max_x, max_y = bounds
        if min_x > max_x or min_y > max_y:
            raise ValueError(f"Invalid bounds {bounds}: min must be <= max.")
        self.probability = probability
        self.initial_strength = initial_strength
        self.bounds = (float(min_x), float(min_y), float(max_x), float(max_y))
        self.total_generations = total_generations
        self.decay_rate = decay_rate

    def strength(self, generation: int) -> float:
        return self.initial_strength / (1.0 + self.decay_rate * generation / self.total_generations)

    def mutate(
        self, genotype: PointGenotype, generation: int = 0, rng: np.random.Generator | None = None
    ) -> PointGenotype:
        if not isinstance(genotype, PointGenotype):
            raise TypeError("AdaptiveCreepMutation is only applicable to PointGenotype.")
        _rng = rng if rng is not None else self.rng
        min_x, min_y, max_x, max_y = self.bounds
        strength = self.strength(generation)
        n = len(genotype)
        mask = _rng.random(n) < self.probability
        offsets = _rng.uniform(-1.0, 1.0, size=(n, 2)) * strength

        mutated = genotype.copy()
        for i in np.flatnonzero(mask):
            old = mutated[i]
            new_x = clamp(old.x + offsets[i, 0], min_x, max_x)
            new_y = clamp(old.y + offsets[i, 1], min_y, max_y)
            mutated.replace(int(i), old.moved_to(new_x, new_y))
        return mutated
