"""
evopack.operators.crossover
===========================

This module defines crossover (recombination) operators for point genotypes.

Every operator returns a freshly built genotype that shares no storage with
either parent, so mutating the child can never corrupt a parent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from evopack.core.genotype import PointGenotype


# =============================================================================
# Base class
# =============================================================================
class CrossoverOperator(ABC):
    """Abstract base class for crossover operators supporting RNG injection.

    Parameters
    ----------
    rng : numpy.random.Generator | None, default None
        Optional RNG for deterministic behavior. If ``None`` a new default
        generator is created.
    """

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def crossover(
        self, parent1: PointGenotype, parent2: PointGenotype, rng: np.random.Generator | None = None
    ) -> PointGenotype:
        """Return one offspring genotype created from parent1 and parent2."""
        pass

    @staticmethod
    def _check_parents(parent1: PointGenotype, parent2: PointGenotype) -> None:
        if not isinstance(parent1, PointGenotype) or not isinstance(parent2, PointGenotype):
            raise TypeError("Parents must be PointGenotype instances.")
        if len(parent1) != len(parent2):
            raise ValueError(f"Parents must have the same length, got {len(parent1)} and {len(parent2)}.")


class UniformCrossover(CrossoverOperator):
    """
    Uniform crossover with a recombination probability.

    With probability ``probability`` every gene of the child is taken from either
    parent with 50/50 odds. Otherwise the child is an independent copy of one
    parent chosen by a coin toss.
    """

    def __init__(self, probability: float = 0.9, rng: np.random.Generator | None = None):
        super().__init__(rng=rng)
        if not (0.0 <= probability <= 1.0):
            raise ValueError("probability must be in [0,1]")
        self.probability = probability

    def crossover(
        self, parent1: PointGenotype, parent2: PointGenotype, rng: np.random.Generator | None = None
    ) -> PointGenotype:
        self._check_parents(parent1, parent2)
        _rng = rng if rng is not None else self.rng
        if _rng.random() < self.probability:
            mask = _rng.random(len(parent1)) < 0.5
            return PointGenotype(a if take_first else b for a, b, take_first in zip(parent1, parent2, mask))
        source = parent1 if _rng.random() < 0.5 else parent2
        return source.copy()
