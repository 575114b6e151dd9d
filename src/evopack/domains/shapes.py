"""
evopack.domains.shapes
======================

Concrete placement regions. All shapes are centred on the origin except the
right triangle, whose right angle sits at ``(0, 0)`` in the first quadrant.

Available shapes:
- CircleDomain
- RectangleDomain
- SquareDomain
- EllipseDomain
- AnnulusDomain (non-convex)
- FrameDomain (non-convex)
- RightTriangleDomain
"""

from __future__ import annotations

from evopack.core.errors import ConfigurationError
from evopack.domains.base import BoundingBox, Domain


def _require_positive(**values: float) -> None:
    for key, value in values.items():
        if not value > 0:
            raise ConfigurationError(f"{key} must be > 0, got {value}")


class CircleDomain(Domain):
    """Disc of the given radius."""

    name = "circle"

    def __init__(self, radius: float):
        _require_positive(radius=radius)
        self.radius = float(radius)
        self._box = BoundingBox(-self.radius, -self.radius, self.radius, self.radius)

    def bounding_box(self) -> BoundingBox:
        return self._box

    def is_point_outside(self, x: float, y: float) -> bool:
        return x * x + y * y > self.radius * self.radius


class RectangleDomain(Domain):
    """Axis-aligned rectangle ``width x height``."""

    name = "rectangle"

    def __init__(self, width: float, height: float):
        _require_positive(width=width, height=height)
        self.width = float(width)
        self.height = float(height)
        self._box = BoundingBox(-self.width / 2.0, -self.height / 2.0, self.width / 2.0, self.height / 2.0)

    def bounding_box(self) -> BoundingBox:
        return self._box

    def is_point_outside(self, x: float, y: float) -> bool:
        return not self._box.contains(x, y)


class SquareDomain(RectangleDomain):
    """Square of the given side."""

    name = "square"

    def __init__(self, side: float):
        _require_positive(side=side)
        super().__init__(side, side)
        self.side = float(side)


class EllipseDomain(Domain):
    """Ellipse with semi-axes ``semi_width`` (x) and ``semi_height`` (y)."""

    name = "ellipse"

    def __init__(self, semi_width: float, semi_height: float):
        _require_positive(semi_width=semi_width, semi_height=semi_height)
        self.semi_width = float(semi_width)
        self.semi_height = float(semi_height)
        self._box = BoundingBox(-self.semi_width, -self.semi_height, self.semi_width, self.semi_height)

    def bounding_box(self) -> BoundingBox:
        return self._box

    def is_point_outside(self, x: float, y: float) -> bool:
        a2 = self.semi_width * self.semi_width
        b2 = self.semi_height * self.semi_height
        return x * x / a2 + y * y / b2 > 1.0


class AnnulusDomain(Domain):
    """Ring between two concentric circles."""

    name = "annulus"

    def __init__(self, inner_radius: float, outer_radius: float):
        _require_positive(inner_radius=inner_radius, outer_radius=outer_radius)
        if inner_radius >= outer_radius:
            raise ConfigurationError("inner_radius must be strictly smaller than outer_radius")
        self.inner_radius = float(inner_radius)
        self.outer_radius = float(outer_radius)
        r = self.outer_radius
        self._box = BoundingBox(-r, -r, r, r)

    def bounding_box(self) -> BoundingBox:
        return self._box

    def is_point_outside(self, x: float, y: float) -> bool:
        d2 = x * x + y * y
        return d2 > self.outer_radius * self.outer_radius or d2 < self.inner_radius * self.inner_radius


class FrameDomain(Domain):
    """Area between two concentric axis-aligned rectangles."""

    name = "frame"

    def __init__(self, inner_width: float, inner_height: float, outer_width: float, outer_height: float):
        _require_positive(
            inner_width=inner_width, inner_height=inner_height, outer_width=outer_width, outer_height=outer_height
        )
        if inner_width >= outer_width or inner_height >= outer_height:
            raise ConfigurationError("inner dimensions must be strictly smaller than outer dimensions")
        self.inner_width = float(inner_width)
        self.inner_height = float(inner_height)
        self.outer_width = float(outer_width)
        self.outer_height = float(outer_height)
        self._box = BoundingBox(
            -self.outer_width / 2.0, -self.outer_height / 2.0, self.outer_width / 2.0, self.outer_height / 2.0
        )
        # the hole boundary belongs to the hole
        self._hole = BoundingBox(
            -self.inner_width / 2.0, -self.inner_height / 2.0, self.inner_width / 2.0, self.inner_height / 2.0
        )

    def bounding_box(self) -> BoundingBox:
        return self._box

    def is_point_outside(self, x: float, y: float) -> bool:
        if not self._box.contains(x, y):
            return True
        return self._hole.contains(x, y)


class RightTriangleDomain(Domain):
    """Right triangle with legs ``base`` on the x axis and ``height`` on the y axis."""

    name = "triangle"

    def __init__(self, base: float, height: float):
        _require_positive(base=base, height=height)
        self.base = float(base)
        self.height = float(height)
        self._box = BoundingBox(0.0, 0.0, self.base, self.height)

    def bounding_box(self) -> BoundingBox:
        return self._box

    def is_point_outside(self, x: float, y: float) -> bool:
        if x < 0 or y < 0:
            return True
        return y > self.height - (self.height / self.base) * x
