"""
evopack.operators
=================

Genetic operators of the packing search: selection, crossover and mutation.

Each operator owns a default ``numpy.random.Generator`` and its hot-path methods
accept an ``rng`` override, so parallel workers never share a generator.
"""

from evopack.operators.crossover import CrossoverOperator, UniformCrossover
from evopack.operators.mutation import AdaptiveCreepMutation, MutationOperator, clamp
from evopack.operators.selection import Elitism, SelectionStrategy, TournamentSelection

__all__ = [
    "AdaptiveCreepMutation",
    "CrossoverOperator",
    "Elitism",
    "MutationOperator",
    "SelectionStrategy",
    "TournamentSelection",
    "UniformCrossover",
    "clamp",
]
