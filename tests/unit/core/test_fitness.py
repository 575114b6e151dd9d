import pickle

import numpy as np
import pytest

from evopack.core.fitness import DOMAIN_PENALTY, HASHING_THRESHOLD, FitnessEvaluator
from evopack.core.genotype import Point, PointGenotype
from evopack.core.individual import Individual
from evopack.core.overlap import QuadraticOverlap, SpatialHashOverlap
from evopack.domains import CircleDomain, RectangleDomain


@pytest.fixture
def evaluator():
    return FitnessEvaluator(CircleDomain(10.0), max_radius=1.0)


def _individual(points) -> Individual:
    return Individual(PointGenotype(Point(x, y, r) for x, y, r in points))


def test_feasible_configuration_scores_one(evaluator):
    ind = _individual([(0.0, 0.0, 1.0), (3.0, 0.0, 1.0), (-3.0, 0.0, 1.0), (0.0, 5.0, 1.0)])
    assert evaluator.evaluate(ind) == 1.0
    assert evaluator(ind) == 1.0


@pytest.mark.parametrize("violations", [1, 2, 3])
def test_boundary_violations_alone(evaluator, violations):
    inside = [(0.0, 0.0, 1.0)]
    outside = [(20.0 + 5.0 * i, 0.0, 1.0) for i in range(violations)]
    ind = _individual(inside + outside)
    assert evaluator.boundary_violations(ind.genotype) == violations
    assert evaluator.evaluate(ind) == pytest.approx(1.0 / (1.0 + DOMAIN_PENALTY * violations))


def test_overlap_penalty_enters_fitness(evaluator):
    ind = _individual([(0.0, 0.0, 1.0), (1.5, 0.0, 1.0)])
    assert evaluator.penalty(ind) == pytest.approx(25.0)
    assert evaluator.evaluate(ind) == pytest.approx(1.0 / 26.0)


def test_fitness_range(evaluator):
    rng = np.random.default_rng(5)
    for _ in range(20):
        ind = Individual(PointGenotype.random(30, (-15.0, -15.0, 15.0, 15.0), 1.0, rng=rng))
        f = evaluator.evaluate(ind)
        assert 0.0 < f <= 1.0


def test_strategy_switch(evaluator):
    assert evaluator.hashing_threshold == HASHING_THRESHOLD
    assert isinstance(evaluator.strategy_for(HASHING_THRESHOLD), QuadraticOverlap)
    assert isinstance(evaluator.strategy_for(HASHING_THRESHOLD + 1), SpatialHashOverlap)


def test_both_sides_of_threshold_agree():
    domain = RectangleDomain(30.0, 30.0)
    genotype = PointGenotype.random(120, tuple(domain.bounding_box()), 1.0, rng=np.random.default_rng(3))
    ind = Individual(genotype)
    spatial = FitnessEvaluator(domain, 1.0, hashing_threshold=10).evaluate(ind)
    quadratic = FitnessEvaluator(domain, 1.0, hashing_threshold=1000).evaluate(ind)
    assert spatial == pytest.approx(quadratic, rel=1e-12)


def test_custom_weights():
    evaluator = FitnessEvaluator(CircleDomain(1.0), max_radius=1.0, domain_penalty=1.0, overlap_weight=0.0)
    ind = _individual([(5.0, 0.0, 1.0), (5.0, 0.0, 1.0)])
    assert evaluator.evaluate(ind) == pytest.approx(1.0 / 3.0)


def test_negative_weights_rejected():
    with pytest.raises(ValueError):
        FitnessEvaluator(CircleDomain(1.0), max_radius=1.0, overlap_weight=-1.0)


def test_evaluator_is_picklable(evaluator):
    clone = pickle.loads(pickle.dumps(evaluator))
    ind = _individual([(0.0, 0.0, 1.0), (1.0, 0.0, 1.0)])
    assert clone.evaluate(ind) == evaluator.evaluate(ind)
