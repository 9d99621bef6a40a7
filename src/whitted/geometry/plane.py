"""Flat primitives: the infinite xz-plane and the unit disk.

Both lie in the local plane y = 0 with a constant +y normal. A ray whose
direction has a y-component negligible relative to its length is parallel to the plane and
produces no intersection, including when it lies inside the plane.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import EPSILON, vec3, vec4
from whitted.geometry.hits import LocalHits, push_hit


@ti.func
def intersect_plane(origin: vec3, direction: vec3) -> LocalHits:
    """Intersect a local-space ray with the plane y = 0.

    Returns:
        One candidate t = -origin.y / direction.y, or none when the ray is
        parallel to the plane.
    """
    count = 0
    ts = vec4(0.0, 0.0, 0.0, 0.0)
    if ti.abs(direction.y) >= EPSILON * tm.length(direction):
        count, ts = push_hit(count, ts, -origin.y / direction.y)
    return LocalHits(count=count, t=ts)


@ti.func
def intersect_disk(origin: vec3, direction: vec3) -> LocalHits:
    """Intersect a local-space ray with the unit disk x^2 + z^2 <= 1, y = 0."""
    count = 0
    ts = vec4(0.0, 0.0, 0.0, 0.0)
    if ti.abs(direction.y) >= EPSILON * tm.length(direction):
        t = -origin.y / direction.y
        x = origin.x + t * direction.x
        z = origin.z + t * direction.z
        if x * x + z * z <= 1.0:
            count, ts = push_hit(count, ts, t)
    return LocalHits(count=count, t=ts)


@ti.func
def plane_normal() -> vec3:
    """Normal of the plane and the disk (constant +y)."""
    return vec3(0.0, 1.0, 0.0)
