import pytest

from evopack.core.errors import ConfigurationError
from evopack.domains import (
    AnnulusDomain,
    CircleDomain,
    DomainType,
    FrameDomain,
    RightTriangleDomain,
    SquareDomain,
    create_domain,
)


def test_menu_ids_are_unique_and_sequential():
    assert [t.menu_id for t in DomainType] == list(range(1, len(DomainType) + 1))


@pytest.mark.parametrize("name, expected", [("circle", DomainType.CIRCLE), (" Frame ", DomainType.FRAME)])
def test_from_name(name, expected):
    assert DomainType.from_name(name) is expected


def test_from_name_unknown():
    with pytest.raises(ConfigurationError, match="Unknown domain type"):
        DomainType.from_name("hexagon")


def test_from_menu_id():
    assert DomainType.from_menu_id(3) is DomainType.SQUARE
    assert DomainType.from_menu_id(99) is None


@pytest.mark.parametrize(
    "name, params, cls",
    [
        ("circle", {"radius": 4}, CircleDomain),
        ("square", {"side": "2.5"}, SquareDomain),
        ("annulus", {"inner_radius": 1.0, "outer_radius": 3.0}, AnnulusDomain),
        ("frame", {"inner_width": 1, "inner_height": 1, "outer_width": 4, "outer_height": 4}, FrameDomain),
        ("triangle", {"base": 3.0, "height": 2.0}, RightTriangleDomain),
    ],
)
def test_create_domain(name, params, cls):
    domain = create_domain(name, params)
    assert isinstance(domain, cls)
    assert domain.name == name


def test_create_domain_from_enum():
    domain = create_domain(DomainType.CIRCLE, {"radius": 2.0})
    assert domain.bounding_box() == (-2.0, -2.0, 2.0, 2.0)


def test_missing_parameter():
    with pytest.raises(ConfigurationError, match="Missing parameter"):
        create_domain("rectangle", {"width": 2.0})


def test_unexpected_parameter():
    with pytest.raises(ConfigurationError, match="Unexpected parameter"):
        create_domain("circle", {"radius": 2.0, "side": 1.0})


def test_non_numeric_parameter():
    with pytest.raises(ConfigurationError, match="must be numbers"):
        create_domain("circle", {"radius": "wide"})


def test_invalid_geometry_surfaces_as_configuration_error():
    with pytest.raises(ConfigurationError):
        create_domain("annulus", {"inner_radius": 3.0, "outer_radius": 1.0})
