import numpy as np
import pytest

from evopack.core.genotype import Point, PointGenotype
from evopack.operators.mutation import AdaptiveCreepMutation, clamp

BOUNDS = (-5.0, -5.0, 5.0, 5.0)


def make_operator(**kwargs) -> AdaptiveCreepMutation:
    params = dict(probability=0.5, initial_strength=2.0, bounds=BOUNDS, total_generations=100, decay_rate=5.0)
    params.update(kwargs)
    return AdaptiveCreepMutation(**params)


def make_genotype(n: int = 50, rng=None) -> PointGenotype:
    return PointGenotype.random(n, BOUNDS, radius=0.3, rng=rng or np.random.default_rng(0))


# -----------------------------------------------------------------------------
# clamp
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("value", [-1.0, 0.0, 0.3, 1.0])
def test_clamp_inside_is_identity(value):
    assert clamp(value, -1.0, 1.0) == value


@pytest.mark.parametrize("value, expected", [(-3.0, -1.0), (7.5, 1.0)])
def test_clamp_outside(value, expected):
    assert clamp(value, -1.0, 1.0) == expected


@pytest.mark.parametrize("value", [-10.0, -0.5, 0.0, 2.0, 100.0])
def test_clamp_idempotent(value):
    once = clamp(value, -1.0, 1.0)
    assert clamp(once, -1.0, 1.0) == once


# -----------------------------------------------------------------------------
# strength schedule
# -----------------------------------------------------------------------------
def test_strength_at_generation_zero():
    assert make_operator().strength(0) == 2.0


def test_strength_strictly_decreasing():
    op = make_operator()
    values = [op.strength(g) for g in range(0, 101)]
    assert all(a > b for a, b in zip(values, values[1:]))
    assert op.strength(100) == pytest.approx(2.0 / 6.0)


def test_zero_decay_keeps_strength_constant():
    op = make_operator(decay_rate=0.0)
    assert op.strength(0) == op.strength(50) == 2.0


# -----------------------------------------------------------------------------
# mutate
# -----------------------------------------------------------------------------
def test_mutation_returns_new_genotype_and_keeps_original():
    genotype = make_genotype()
    snapshot = genotype.points()
    mutated = make_operator(probability=1.0).mutate(genotype)
    assert mutated is not genotype
    assert genotype.points() == snapshot
    assert mutated != genotype
    assert len(mutated) == len(genotype)


def test_zero_probability_changes_nothing():
    genotype = make_genotype()
    assert make_operator(probability=0.0).mutate(genotype) == genotype


def test_offsets_bounded_by_strength_and_radius_kept():
    genotype = make_genotype()
    op = make_operator(probability=1.0)
    generation = 40
    mutated = op.mutate(genotype, generation=generation)
    limit = op.strength(generation)
    for old, new in zip(genotype, mutated):
        assert abs(new.x - old.x) <= limit + 1e-12
        assert abs(new.y - old.y) <= limit + 1e-12
        assert new.radius == old.radius


def test_soft_clamp_to_bounds():
    corner = PointGenotype([Point(4.9, -4.9, 0.3)] * 20)
    op = make_operator(probability=1.0, initial_strength=50.0)
    mutated = op.mutate(corner, rng=np.random.default_rng(9))
    for p in mutated:
        assert -5.0 <= p.x <= 5.0
        assert -5.0 <= p.y <= 5.0
    assert any(p.x in (-5.0, 5.0) or p.y in (-5.0, 5.0) for p in mutated)


def test_mutation_rate_roughly_respected():
    genotype = make_genotype(n=1000)
    mutated = make_operator(probability=0.2, rng=np.random.default_rng(4)).mutate(genotype)
    changed = sum(1 for a, b in zip(genotype, mutated) if a != b)
    assert 140 < changed < 260


def test_rng_override_reproducible():
    genotype = make_genotype()
    op = make_operator()
    m1 = op.mutate(genotype, 10, rng=np.random.default_rng(21))
    m2 = op.mutate(genotype, 10, rng=np.random.default_rng(21))
    assert m1 == m2


def test_mutation_wrong_type():
    with pytest.raises(TypeError, match="AdaptiveCreepMutation is only applicable to PointGenotype."):
        make_operator().mutate([Point(0.0, 0.0, 1.0)])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"probability": 1.5},
        {"initial_strength": 0.0},
        {"total_generations": 0},
        {"decay_rate": -1.0},
        {"bounds": (1.0, 0.0, 0.0, 1.0)},
    ],
)
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        make_operator(**kwargs)
