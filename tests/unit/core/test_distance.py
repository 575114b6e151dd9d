import math

import pytest

from evopack.core.distance import min_separation_gap, pair_penalty, point_distance
from evopack.core.genotype import Point, PointGenotype


def test_point_distance():
    assert point_distance(Point(0.0, 0.0, 1.0), Point(3.0, 4.0, 1.0)) == 5.0


def test_pair_penalty_no_overlap():
    assert pair_penalty(Point(0.0, 0.0, 1.0), Point(2.0, 0.0, 1.0), 100.0) == 0.0
    assert pair_penalty(Point(0.0, 0.0, 1.0), Point(5.0, 0.0, 1.0), 100.0) == 0.0


def test_pair_penalty_is_quadratic_in_depth():
    # required 2.0, actual 1.5 -> depth 0.5 -> 0.25 * weight
    assert pair_penalty(Point(0.0, 0.0, 1.0), Point(1.5, 0.0, 1.0), 100.0) == pytest.approx(25.0)
    # twice the depth, four times the penalty
    assert pair_penalty(Point(0.0, 0.0, 1.0), Point(1.0, 0.0, 1.0), 100.0) == pytest.approx(100.0)


def test_pair_penalty_mixed_radii():
    p, q = Point(0.0, 0.0, 2.0), Point(2.5, 0.0, 1.0)
    assert pair_penalty(p, q, 1.0) == pytest.approx(0.25)


def test_min_separation_gap():
    genotype = PointGenotype([Point(0.0, 0.0, 1.0), Point(2.5, 0.0, 1.0), Point(10.0, 0.0, 1.0)])
    assert min_separation_gap(genotype) == pytest.approx(0.5)
    overlapping = PointGenotype([Point(0.0, 0.0, 1.0), Point(1.0, 0.0, 1.0)])
    assert min_separation_gap(overlapping) == pytest.approx(-1.0)


def test_min_separation_gap_single_gene():
    assert math.isinf(min_separation_gap(PointGenotype([Point(0.0, 0.0, 1.0)])))
