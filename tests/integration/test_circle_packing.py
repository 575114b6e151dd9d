import pytest

from evopack.core.distance import min_separation_gap
from evopack.domains import AnnulusDomain, CircleDomain, RightTriangleDomain
from evopack.engine import GAConfig, GAEngine, SearchNotConvergedError


def _check_outcome(engine: GAEngine) -> None:
    try:
        best = engine.run()
    except SearchNotConvergedError as e:
        assert e.attempts == engine.config.max_retry_attempts
        assert e.best is not None
        return
    assert engine.domain.is_valid_individual(best)
    assert min_separation_gap(best.genotype) >= -1e-9
    assert best.fitness == pytest.approx(1.0)


# Pack five unit circles into a disc of radius 10
def test_circle_packing_integration():
    config = GAConfig(
        population_size=50,
        individual_size=5,
        radius=1.0,
        generations=200,
        seed=42,
    )
    _check_outcome(GAEngine(config, CircleDomain(10.0)))


@pytest.mark.parametrize("domain", [AnnulusDomain(3.0, 10.0), RightTriangleDomain(12.0, 12.0)], ids=lambda d: d.name)
def test_non_convex_and_off_centre_domains(domain):
    config = GAConfig(
        population_size=40,
        individual_size=4,
        radius=0.5,
        generations=100,
        num_workers=2,
        seed=7,
    )
    _check_outcome(GAEngine(config, domain))
