"""
evopack.operators.selection
===========================

This module defines the selection strategies used by the packing search:

- :class:`Elitism` keeps the exact top-K individuals of a generation.
- :class:`TournamentSelection` picks parents as the best of ``k`` distinct,
  uniformly drawn contestants.

Both expect an evaluated population (every fitness finite).

Tournament methods take an optional ``rng`` so that every worker building
children can draw from its own generator.
"""

import heapq
from collections.abc import Sequence

import numpy as np

from evopack.core.errors import ConfigurationError
from evopack.core.individual import Individual, Population

# second-parent redraws before falling back to a tournament without the first parent
_MAX_RESAMPLES = 32


class SelectionStrategy:
    """Base class for all selection strategies."""

    # Common input validation helper
    @staticmethod
    def _validate(population: Sequence[Individual], n_parents: int = 1) -> None:
        if len(population) == 0:
            raise ValueError("population must not be empty")
        if n_parents <= 0:
            raise ValueError("n_parents must be > 0")


class TournamentSelection(SelectionStrategy):
    """
    Tournament Selection.
    Randomly draw k distinct individuals and pick the one with highest fitness.
    """

    def __init__(self, k: int = 3, rng: np.random.Generator | None = None):
        if k <= 0:
            raise ConfigurationError("tournament size k must be > 0")
        self.k = k
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    def tournament(self, population: Sequence[Individual], rng: np.random.Generator | None = None) -> Individual:
        self._validate(population)
        if self.k > len(population):
            raise ConfigurationError(f"tournament size {self.k} exceeds population size {len(population)}")
        _rng = rng if rng is not None else self.rng
        contender_indices = _rng.choice(len(population), size=self.k, replace=False)
        contenders = [population[i] for i in contender_indices]
        return max(contenders, key=lambda ind: ind.fitness)

    def select(
        self, population: Sequence[Individual], n_parents: int, rng: np.random.Generator | None = None
    ) -> Population:
        self._validate(population, n_parents)
        return Population([self.tournament(population, rng) for _ in range(n_parents)])

    def select_pair(
        self, population: Sequence[Individual], rng: np.random.Generator | None = None
    ) -> tuple[Individual, Individual]:
        """Return two parents that are distinct objects.

        The second parent is redrawn while it is the same individual as the first.
        When ``k`` covers (almost) the whole population the same winner keeps coming
        back, so after a bounded number of redraws the second parent is taken from a
        tournament over the population without the first parent.
        """
        if len(population) < 2:
            raise ValueError("at least two individuals are required to select a pair")
        first = self.tournament(population, rng)
        for _ in range(_MAX_RESAMPLES):
            second = self.tournament(population, rng)
            if second is not first:
                return first, second
        rest = [ind for ind in population if ind is not first]
        fallback = TournamentSelection(k=min(self.k, len(rest)), rng=self.rng)
        return first, fallback.tournament(rest, rng)


class Elitism(SelectionStrategy):
    """
    Elitism.
    Preserves the top ``max(1, floor(len(population) * fraction))`` individuals.

    A bounded min-heap keeps the current best K; a newcomer enters only if it is
    strictly better than the worst of them, so among equal boundary values the
    earliest individuals win. Elites are returned best first.
    """

    def __init__(self, fraction: float = 0.1):
        if not (0.0 < fraction <= 1.0):
            raise ConfigurationError("elite fraction must be in (0, 1]")
        self.fraction = fraction

    def elite_count(self, population_size: int) -> int:
        return max(1, int(population_size * self.fraction))

    def select(self, population: Sequence[Individual], n_parents: int | None = None) -> Population:
        self._validate(population)
        k = self.elite_count(len(population)) if n_parents is None else n_parents
        if k <= 0:
            raise ValueError("elite size must be > 0")
        heap: list[tuple[float, int, Individual]] = []
        for order, ind in enumerate(population):
            # order breaks fitness ties so Individuals are never compared
            entry = (ind.fitness, -order, ind)
            if len(heap) < k:
                heapq.heappush(heap, entry)
            elif ind.fitness > heap[0][0]:
                heapq.heapreplace(heap, entry)
        elites = sorted(heap, key=lambda e: (e[0], e[1]), reverse=True)
        return Population([ind for _, _, ind in elites])
