"""Geometry module for local-space primitives.

Each primitive lives in its own canonical frame and is placed in the world
by its object's transform:

Components:
    sphere: Unit sphere at the origin
    plane: Infinite plane y = 0 and the unit disk
    box: Axis-aligned cube [-1, 1]^3
    cylinder: Unit cylinder around y, optionally truncated and capped
    cone: Double-napped cone x^2 + z^2 = y^2, optionally truncated and capped
    shapes: ShapeKind/Shape variant, kernel dispatch and host queries

All intersection functions take an object-space ray and return LocalHits,
a short list of candidate t values shared with world space.
"""

from .hits import MAX_LOCAL_HITS, LocalHits
from .shapes import (
    Shape,
    ShapeKind,
    intersect_local,
    local_intersections,
    local_normal,
    local_normal_at,
)

__all__ = [
    "MAX_LOCAL_HITS",
    "LocalHits",
    "Shape",
    "ShapeKind",
    "intersect_local",
    "local_intersections",
    "local_normal",
    "local_normal_at",
]
