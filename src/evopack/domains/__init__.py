"""
evopack.domains
===============

Placement regions consumed by the search engine through the :class:`Domain`
capability interface. New shapes are added by subclassing :class:`Domain`; the
engine needs no change.
"""

from evopack.domains.base import BoundingBox, Domain
from evopack.domains.factory import DomainType, create_domain
from evopack.domains.shapes import (
    AnnulusDomain,
    CircleDomain,
    EllipseDomain,
    FrameDomain,
    RectangleDomain,
    RightTriangleDomain,
    SquareDomain,
)

__all__ = [
    "AnnulusDomain",
    "BoundingBox",
    "CircleDomain",
    "Domain",
    "DomainType",
    "EllipseDomain",
    "FrameDomain",
    "RectangleDomain",
    "RightTriangleDomain",
    "SquareDomain",
    "create_domain",
]
