"""Double-napped cone primitive x^2 + z^2 = y^2 around the local y-axis.

The radius at height y is |y|, so the two nappes meet at the origin.
Truncation and caps work as for the cylinder; a closed cone has cap
radius |minimum| and |maximum|.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import EPSILON, real, vec3, vec4
from whitted.geometry.cylinder import add_cap_hits, within_extent
from whitted.geometry.hits import (
    DISCRIMINANT_EPSILON,
    LocalHits,
    push_hit,
    solve_quadratic_robust,
)


@ti.func
def intersect_cone(
    origin: vec3, direction: vec3, minimum: real, maximum: real, closed: ti.i32
) -> LocalHits:
    """Intersect a local-space ray with a (possibly truncated) cone.

    The side quadric is a*t^2 + 2*h*t + c = 0 with
    a = dx^2 - dy^2 + dz^2, h = ox*dx - oy*dy + oz*dz and
    c = ox^2 - oy^2 + oz^2. When a ~ 0 the ray is parallel to one nappe
    and crosses the other once, at t = -c / (2h). Tolerances are relative
    to the direction's length.

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
    a = direction.x * direction.x - direction.y * direction.y + direction.z * direction.z
    h = origin.x * direction.x - origin.y * direction.y + origin.z * direction.z
    c = origin.x * origin.x - origin.y * origin.y + origin.z * origin.z

    if ti.abs(a) < EPSILON * dd:
        if ti.abs(h) >= EPSILON * ti.sqrt(dd):
            t = -c / (2.0 * h)
            if within_extent(origin, direction, t, minimum, maximum):
                count, ts = push_hit(count, ts, t)
    else:
        discriminant = h * h - a * c
        if discriminant > DISCRIMINANT_EPSILON * dd:
            t0, t1 = solve_quadratic_robust(h, a, c, ti.sqrt(discriminant))
            if within_extent(origin, direction, t0, minimum, maximum):
                count, ts = push_hit(count, ts, t0)
            if within_extent(origin, direction, t1, minimum, maximum):
                count, ts = push_hit(count, ts, t1)

    count, ts = add_cap_hits(count, ts, origin, direction, minimum, maximum, closed, 1)
    return LocalHits(count=count, t=ts)


@ti.func
def cone_normal(point: vec3, minimum: real, maximum: real) -> vec3:
    """Outward normal on the cone side or one of its caps.

    The side normal is the quadric gradient (x, -y, z); it is left
    unnormalized and the caller renormalizes after mapping to world space.
    """
    dist = point.x * point.x + point.z * point.z
    normal = vec3(point.x, -point.y, point.z)
    if dist < point.y * point.y and point.y >= maximum - EPSILON:
        normal = vec3(0.0, 1.0, 0.0)
    elif dist < point.y * point.y and point.y <= minimum + EPSILON:
        normal = vec3(0.0, -1.0, 0.0)
    return normal
