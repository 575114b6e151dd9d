"""Domain type registry and factory.

:class:`DomainType` carries the metadata needed to build a region from loosely
typed input (CLI flags, YAML): a menu id, a display name and the names of the
required parameters. :func:`create_domain` validates the parameters and builds
the shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from evopack.core.errors import ConfigurationError
from evopack.domains.base import Domain
from evopack.domains.shapes import (
    AnnulusDomain,
    CircleDomain,
    EllipseDomain,
    FrameDomain,
    RectangleDomain,
    RightTriangleDomain,
    SquareDomain,
)


class DomainType(Enum):
    CIRCLE = (1, "circle", ("radius",), CircleDomain)
    RECTANGLE = (2, "rectangle", ("width", "height"), RectangleDomain)
    SQUARE = (3, "square", ("side",), SquareDomain)
    ELLIPSE = (4, "ellipse", ("semi_width", "semi_height"), EllipseDomain)
    ANNULUS = (5, "annulus", ("inner_radius", "outer_radius"), AnnulusDomain)
    FRAME = (6, "frame", ("inner_width", "inner_height", "outer_width", "outer_height"), FrameDomain)
    TRIANGLE = (7, "triangle", ("base", "height"), RightTriangleDomain)

    def __init__(self, menu_id: int, display_name: str, required_parameters: tuple[str, ...], shape: type[Domain]):
        self.menu_id = menu_id
        self.display_name = display_name
        self.required_parameters = required_parameters
        self.shape = shape

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def from_name(cls, name: str) -> DomainType:
        key = name.strip().lower()
        for member in cls:
            if member.display_name == key:
                return member
        known = ", ".join(m.display_name for m in cls)
        raise ConfigurationError(f"Unknown domain type '{name}'. Known types: {known}")

    @classmethod
    def from_menu_id(cls, menu_id: int) -> DomainType | None:
        return next((m for m in cls if m.menu_id == menu_id), None)


def create_domain(domain_type: DomainType | str, params: Mapping[str, float]) -> Domain:
    """Build a domain after checking that every required parameter is present.

    Raises
    ------
    ConfigurationError
        Unknown type, missing or extra parameter, or invalid geometry.
    """
    if isinstance(domain_type, str):
        domain_type = DomainType.from_name(domain_type)
    missing = [key for key in domain_type.required_parameters if params.get(key) is None]
    if missing:
        raise ConfigurationError(f"Missing parameter(s) for domain '{domain_type}': {', '.join(missing)}")
    extra = sorted(set(params) - set(domain_type.required_parameters))
    if extra:
        raise ConfigurationError(f"Unexpected parameter(s) for domain '{domain_type}': {', '.join(extra)}")
    try:
        values = {key: float(params[key]) for key in domain_type.required_parameters}
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Domain '{domain_type}' parameters must be numbers: {exc}") from exc
    return domain_type.shape(**values)
