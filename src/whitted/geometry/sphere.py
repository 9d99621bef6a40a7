"""Unit sphere primitive with robust ray-sphere intersection.

The sphere is centred at the local origin with radius 1; position and size
come from the owning object's transform. Intersection uses the half-b
quadratic and the robust root formula from Ray Tracing Gems to avoid
cancellation when the discriminant is small.

Example:
    >>> # Inside a Taichi kernel:
    >>> # hits = intersect_sphere(vec3(0, 0, -5), vec3(0, 0, 1))
    >>> # hits.count == 2, hits.t[0] == 4.0, hits.t[1] == 6.0
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import vec3, vec4
from whitted.geometry.hits import (
    DISCRIMINANT_EPSILON,
    LocalHits,
    push_hit,
    solve_quadratic_robust,
)


@ti.func
def intersect_sphere(origin: vec3, direction: vec3) -> LocalHits:
    """Intersect a local-space ray with the unit sphere.

    Solves |origin + t * direction|^2 = 1, expanded as
    a*t^2 + 2*h*t + c = 0 with a = d.d, h = d.o, c = o.o - 1.

    Args:
        origin: Ray origin in object space.
        direction: Ray direction in object space (need not be normalized).

    Returns:
        Two candidates in ascending order, or none when the ray misses or
        is tangent. The tangent threshold is relative to a.
    """
    a = tm.dot(direction, direction)
    h = tm.dot(direction, origin)
    c = tm.dot(origin, origin) - 1.0
    discriminant = h * h - a * c

    count = 0
    ts = vec4(0.0, 0.0, 0.0, 0.0)
    if a > 0.0 and discriminant > DISCRIMINANT_EPSILON * a:
        t0, t1 = solve_quadratic_robust(h, a, c, ti.sqrt(discriminant))
        count, ts = push_hit(count, ts, t0)
        count, ts = push_hit(count, ts, t1)
    return LocalHits(count=count, t=ts)


@ti.func
def sphere_normal(point: vec3) -> vec3:
    """Outward normal of the unit sphere, which is the point itself."""
    return point
