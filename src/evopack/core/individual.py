"""Core individual abstraction and population factory utilities.

The :class:`Individual` couples a :class:`PointGenotype` with its fitness.
An unevaluated individual carries ``-inf`` fitness.
"""

import math
from collections.abc import Callable, Sequence
from typing import NewType

from evopack.core.genotype import PointGenotype

Population = NewType("Population", list["Individual"])

UNEVALUATED = float("-inf")


class Individual:
    """Represents a single candidate placement.

    Parameters
    ----------
    genotype : PointGenotype
        Genes owned by this individual. Never shared with another individual.
    fitness : float, default -inf
        Fitness in ``(0, 1]`` once evaluated; ``-inf`` until then.
    """

    __slots__ = ("fitness", "genotype")

    def __init__(self, genotype: PointGenotype, fitness: float = UNEVALUATED) -> None:
        self.genotype: PointGenotype = genotype
        self.fitness: float = float(fitness)

    # ------------------------------------------------------------------
    # Core protocol helpers
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, Individual):
            return False
        return self.genotype == other.genotype and self.fitness == other.fitness

    def __hash__(self):
        return hash((self.genotype, self.fitness))

    def __repr__(self) -> str:
        return f"Individual(genotype={self.genotype!r}, fitness={self.fitness:.6f})"

    def __str__(self) -> str:
        lines = ["Individual"]
        lines.extend(str(p) for p in self.genotype)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.genotype)

    @property
    def evaluated(self) -> bool:
        return math.isfinite(self.fitness)

    def copy(self) -> "Individual":
        """Create a deep copy preserving fitness."""
        return Individual(genotype=self.genotype.copy(), fitness=self.fitness)

    # ------------------------------------------------------------------
    # Population utilities
    # ------------------------------------------------------------------
    @staticmethod
    def create_population(genotype_factory: Callable[[], PointGenotype], size: int) -> Population:
        """Create a new population of unevaluated individuals.

        Parameters
        ----------
        genotype_factory : Callable[[], PointGenotype]
            Factory returning a freshly randomized genotype instance.
        size : int
            Number of individuals to create (must be > 0).
        """
        if size <= 0:
            raise ValueError("size must be > 0")
        return Population([Individual(genotype_factory()) for _ in range(size)])


def best_of(population: Sequence[Individual]) -> Individual:
    """Return the highest-fitness individual after scanning the whole population.

    Ties keep the earliest individual.
    """
    if len(population) == 0:
        raise ValueError("population must not be empty")
    king = population[0]
    for ind in population[1:]:
        if ind.fitness > king.fitness:
            king = ind
    return king
