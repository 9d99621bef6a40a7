"""Unit cylinder primitive around the local y-axis, with optional end caps.

The side surface is x^2 + z^2 = 1. It is infinite by default and truncated
to the open interval (minimum, maximum) along y when those bounds are
finite. A closed cylinder also intersects its two end caps, discs of
radius 1 at y = minimum and y = maximum. Caps at an infinite bound are
never tested.

The cap helpers here are shared with the cone, whose cap radius at height
y is |y| instead of 1.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import EPSILON, real, vec3, vec4
from whitted.geometry.hits import (
    DISCRIMINANT_EPSILON,
    LocalHits,
    push_hit,
    solve_quadratic_robust,
)

# Bounds at or beyond this magnitude are treated as infinite
BOUND_INFINITY = 1.0e300


@ti.func
def is_finite_bound(value: real) -> ti.i32:
    """Whether a cylinder/cone extent is a finite clipping plane."""
    return ti.abs(value) < BOUND_INFINITY


@ti.func
def within_extent(origin: vec3, direction: vec3, t: real, minimum: real, maximum: real) -> ti.i32:
    """Whether the hit at t lies strictly between the extents along y."""
    y = origin.y + t * direction.y
    return minimum < y and y < maximum


@ti.func
def add_cap_hits(
    count: ti.i32,
    ts: vec4,
    origin: vec3,
    direction: vec3,
    minimum: real,
    maximum: real,
    closed: ti.i32,
    cone: ti.i32,
):
    """Append end-cap intersections to a candidate list.

    A cap hit counts when the point lies within the surface's radius at the
    cap height: 1 for a cylinder, |y| for a cone.

    Args:
        count: Current number of candidates.
        ts: Current candidate list.
        origin: Ray origin in object space.
        direction: Ray direction in object space.
        minimum: Lower extent along y.
        maximum: Upper extent along y.
        closed: 1 if the caps are present.
        cone: 1 to use the cone's radius, 0 for the unit cylinder.

    Returns:
        The updated (count, ts).
    """
    new_count = count
    new_ts = ts
    if closed == 1 and ti.abs(direction.y) >= EPSILON * tm.length(direction):
        if is_finite_bound(minimum):
            t = (minimum - origin.y) / direction.y
            if _inside_cap(origin, direction, t, _cap_radius(minimum, cone)):
                new_count, new_ts = push_hit(new_count, new_ts, t)
        if is_finite_bound(maximum):
            t = (maximum - origin.y) / direction.y
            if _inside_cap(origin, direction, t, _cap_radius(maximum, cone)):
                new_count, new_ts = push_hit(new_count, new_ts, t)
    return new_count, new_ts


@ti.func
def _cap_radius(y: real, cone: ti.i32) -> real:
    return ti.select(cone == 1, ti.abs(y), 1.0)


@ti.func
def _inside_cap(origin: vec3, direction: vec3, t: real, radius: real) -> ti.i32:
    x = origin.x + t * direction.x
    z = origin.z + t * direction.z
    return x * x + z * z <= radius * radius


@ti.func
def intersect_cylinder(
    origin: vec3, direction: vec3, minimum: real, maximum: real, closed: ti.i32
) -> LocalHits:
    """Intersect a local-space ray with a (possibly truncated) cylinder.

    The side quadric is a*t^2 + 2*h*t + c = 0 with a = dx^2 + dz^2,
    h = ox*dx + oz*dz and c = ox^2 + oz^2 - 1. Rays parallel to the axis
    (a small relative to d.d) can only hit the caps. Both tolerances are
    relative to d.d.

    Args:
        origin: Ray origin in object space.
        direction: Ray direction in object space.
        minimum: Lower extent along y (may be -inf).
        maximum: Upper extent along y (may be +inf).
        closed: 1 if the end caps are solid.

    Returns:
        Up to two side hits followed by up to two cap hits.
    """
    count = 0
    ts = vec4(0.0, 0.0, 0.0, 0.0)

    dd = tm.dot(direction, direction)
    a = direction.x * direction.x + direction.z * direction.z
    if a >= EPSILON * dd:
        h = origin.x * direction.x + origin.z * direction.z
        c = origin.x * origin.x + origin.z * origin.z - 1.0
        discriminant = h * h - a * c
        if discriminant > DISCRIMINANT_EPSILON * dd:
            t0, t1 = solve_quadratic_robust(h, a, c, ti.sqrt(discriminant))
            if within_extent(origin, direction, t0, minimum, maximum):
                count, ts = push_hit(count, ts, t0)
            if within_extent(origin, direction, t1, minimum, maximum):
                count, ts = push_hit(count, ts, t1)

    count, ts = add_cap_hits(count, ts, origin, direction, minimum, maximum, closed, 0)
    return LocalHits(count=count, t=ts)


@ti.func
def cylinder_normal(point: vec3, minimum: real, maximum: real) -> vec3:
    """Outward normal on the cylinder side or one of its caps."""
    dist = point.x * point.x + point.z * point.z
    normal = vec3(point.x, 0.0, point.z)
    if dist < 1.0 and point.y >= maximum - EPSILON:
        normal = vec3(0.0, 1.0, 0.0)
    elif dist < 1.0 and point.y <= minimum + EPSILON:
        normal = vec3(0.0, -1.0, 0.0)
    return normal
