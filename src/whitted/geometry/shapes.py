"""Shape variants and local-space intersection dispatch.

A Shape is a tagged variant: a ShapeKind plus the fields only some kinds
use (cylinder and cone extents and the closed-cap flag). Kernels dispatch
on the kind with a single if/elif chain, so adding a primitive means one
new module and one new branch here.

This module also provides host-callable queries that run one primitive's
intersection or normal function in a tiny kernel and return plain Python
values. They exist for tests and debugging; rendering never uses them.

Example:
    >>> from whitted.core.settings import init_backend
    >>> init_backend()
    >>> from whitted.geometry.shapes import Shape, local_intersections
    >>> local_intersections(Shape.sphere(), (0, 0, -5), (0, 0, 1))
    [4.0, 6.0]
"""

import math
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti

from whitted.core.ray import real, vec3
from whitted.core.types import Point3, Vector3, as_triple
from whitted.errors import SceneError
from whitted.geometry.box import box_normal, intersect_box
from whitted.geometry.cone import cone_normal, intersect_cone
from whitted.geometry.cylinder import cylinder_normal, intersect_cylinder
from whitted.geometry.hits import MAX_LOCAL_HITS, LocalHits, no_hits
from whitted.geometry.plane import intersect_disk, intersect_plane, plane_normal
from whitted.geometry.sphere import intersect_sphere, sphere_normal


class ShapeKind(IntEnum):
    """Enumeration of supported primitives, used for kernel dispatch."""

    SPHERE = 0
    PLANE = 1
    BOX = 2
    DISK = 3
    CYLINDER = 4
    CONE = 5


# Kinds that carry minimum/maximum/closed
_EXTENDED_KINDS = (ShapeKind.CYLINDER, ShapeKind.CONE)


@dataclass(frozen=True)
class Shape:
    """A primitive in its local coordinate frame.

    Attributes:
        kind: Which primitive this is.
        minimum: Lower clipping height along y (cylinder and cone only).
        maximum: Upper clipping height along y (cylinder and cone only).
        closed: Whether the ends of a truncated cylinder or cone are capped.
    """

    kind: ShapeKind
    minimum: float = -math.inf
    maximum: float = math.inf
    closed: bool = False

    def __post_init__(self) -> None:
        if math.isnan(self.minimum) or math.isnan(self.maximum):
            raise SceneError("Shape extents must not be NaN")
        if self.minimum > self.maximum:
            raise SceneError(
                f"{self.kind.name.lower()} minimum ({self.minimum}) "
                f"exceeds maximum ({self.maximum})"
            )
        if self.kind not in _EXTENDED_KINDS and (
            self.minimum != -math.inf or self.maximum != math.inf or self.closed
        ):
            raise SceneError(f"{self.kind.name.lower()} does not take minimum/maximum/closed")

    @classmethod
    def sphere(cls) -> "Shape":
        """Unit sphere at the origin."""
        return cls(ShapeKind.SPHERE)

    @classmethod
    def plane(cls) -> "Shape":
        """Infinite plane y = 0."""
        return cls(ShapeKind.PLANE)

    @classmethod
    def box(cls) -> "Shape":
        """Axis-aligned cube spanning [-1, 1] on each axis."""
        return cls(ShapeKind.BOX)

    @classmethod
    def disk(cls) -> "Shape":
        """Unit disk in the plane y = 0."""
        return cls(ShapeKind.DISK)

    @classmethod
    def cylinder(
        cls, minimum: float = -math.inf, maximum: float = math.inf, closed: bool = False
    ) -> "Shape":
        """Unit-radius cylinder around the y-axis."""
        return cls(ShapeKind.CYLINDER, float(minimum), float(maximum), bool(closed))

    @classmethod
    def cone(
        cls, minimum: float = -math.inf, maximum: float = math.inf, closed: bool = False
    ) -> "Shape":
        """Double-napped cone x^2 + z^2 = y^2 around the y-axis."""
        return cls(ShapeKind.CONE, float(minimum), float(maximum), bool(closed))


# =============================================================================
# Kernel-side dispatch
# =============================================================================


@ti.func
def intersect_local(
    kind: ti.i32,
    origin: vec3,
    direction: vec3,
    minimum: real,
    maximum: real,
    closed: ti.i32,
) -> LocalHits:
    """Intersect an object-space ray with the primitive of the given kind."""
    hits = no_hits()
    if kind == int(ShapeKind.SPHERE):
        hits = intersect_sphere(origin, direction)
    elif kind == int(ShapeKind.PLANE):
        hits = intersect_plane(origin, direction)
    elif kind == int(ShapeKind.BOX):
        hits = intersect_box(origin, direction)
    elif kind == int(ShapeKind.DISK):
        hits = intersect_disk(origin, direction)
    elif kind == int(ShapeKind.CYLINDER):
        hits = intersect_cylinder(origin, direction, minimum, maximum, closed)
    elif kind == int(ShapeKind.CONE):
        hits = intersect_cone(origin, direction, minimum, maximum, closed)
    return hits


@ti.func
def local_normal(kind: ti.i32, point: vec3, minimum: real, maximum: real) -> vec3:
    """Object-space outward normal (not necessarily unit length)."""
    normal = vec3(0.0, 0.0, 0.0)
    if kind == int(ShapeKind.SPHERE):
        normal = sphere_normal(point)
    elif kind == int(ShapeKind.PLANE) or kind == int(ShapeKind.DISK):
        normal = plane_normal()
    elif kind == int(ShapeKind.BOX):
        normal = box_normal(point)
    elif kind == int(ShapeKind.CYLINDER):
        normal = cylinder_normal(point, minimum, maximum)
    elif kind == int(ShapeKind.CONE):
        normal = cone_normal(point, minimum, maximum)
    return normal


# =============================================================================
# Host-side queries
# =============================================================================

_query_count = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=real, shape=MAX_LOCAL_HITS)
_query_normal = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _query_intersections(
    kind: ti.i32,
    ox: real,
    oy: real,
    oz: real,
    dx: real,
    dy: real,
    dz: real,
    minimum: real,
    maximum: real,
    closed: ti.i32,
):
    hits = intersect_local(kind, vec3(ox, oy, oz), vec3(dx, dy, dz), minimum, maximum, closed)
    _query_count[None] = hits.count
    for k in ti.static(range(MAX_LOCAL_HITS)):
        _query_t[k] = hits.t[k]


@ti.kernel
def _query_local_normal(kind: ti.i32, px: real, py: real, pz: real, minimum: real, maximum: real):
    _query_normal[None] = local_normal(kind, vec3(px, py, pz), minimum, maximum)


def local_intersections(shape: Shape, origin: Point3, direction: Vector3) -> list[float]:
    """Candidate t values of a local-space ray against a shape.

    Args:
        shape: The primitive to test.
        origin: Ray origin in the shape's local frame.
        direction: Ray direction in the shape's local frame.

    Returns:
        The candidate t values in ascending order (not filtered by sign).
    """
    ox, oy, oz = as_triple(origin, "origin")
    dx, dy, dz = as_triple(direction, "direction")
    _query_intersections(
        int(shape.kind), ox, oy, oz, dx, dy, dz, shape.minimum, shape.maximum, int(shape.closed)
    )
    count = int(_query_count[None])
    return sorted(float(_query_t[k]) for k in range(count))


def local_normal_at(shape: Shape, point: Point3) -> tuple[float, float, float]:
    """Object-space outward normal of a shape at a surface point."""
    px, py, pz = as_triple(point, "point")
    _query_local_normal(int(shape.kind), px, py, pz, shape.minimum, shape.maximum)
    n = _query_normal[None]
    return (float(n[0]), float(n[1]), float(n[2]))
