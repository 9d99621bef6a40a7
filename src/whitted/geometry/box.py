"""Axis-aligned unit box primitive spanning [-1, 1] on every axis.

Intersection uses the slab method: each axis contributes an entry and exit
distance against its two bounding planes, and the ray hits the box when
the largest entry is smaller than the smallest exit.

Face normals are chosen by the largest absolute coordinate at the hit
point. Exact ties (edges and corners) resolve in the fixed order x, then
y, then z.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import EPSILON, real, vec3, vec4
from whitted.geometry.hits import LocalHits, push_hit

# Stand-in for an unbounded slab when a ray is parallel to an axis
_SLAB_INFINITY = 1.0e300


@ti.func
def _check_axis(origin: real, direction: real, tolerance: real):
    """Entry and exit distances for one slab.

    Components with magnitude below tolerance count as parallel.

    Returns:
        Tuple (t_enter, t_exit). For a ray parallel to the slab the slab is
        unbounded when the origin lies inside it and empty otherwise.
    """
    t_enter = -_SLAB_INFINITY
    t_exit = _SLAB_INFINITY
    if ti.abs(direction) >= tolerance:
        t_a = (-1.0 - origin) / direction
        t_b = (1.0 - origin) / direction
        t_enter = ti.min(t_a, t_b)
        t_exit = ti.max(t_a, t_b)
    elif origin < -1.0 or origin > 1.0:
        t_enter = _SLAB_INFINITY
        t_exit = -_SLAB_INFINITY
    return t_enter, t_exit


@ti.func
def intersect_box(origin: vec3, direction: vec3) -> LocalHits:
    """Intersect a local-space ray with the unit box.

    Returns:
        Entry and exit candidates, or none when the slabs do not overlap.
        A ray that only grazes an edge (entry == exit) is a miss.
    """
    tolerance = EPSILON * tm.length(direction)
    x_enter, x_exit = _check_axis(origin.x, direction.x, tolerance)
    y_enter, y_exit = _check_axis(origin.y, direction.y, tolerance)
    z_enter, z_exit = _check_axis(origin.z, direction.z, tolerance)

    t_enter = ti.max(ti.max(x_enter, y_enter), z_enter)
    t_exit = ti.min(ti.min(x_exit, y_exit), z_exit)

    count = 0
    ts = vec4(0.0, 0.0, 0.0, 0.0)
    if t_enter < t_exit:
        count, ts = push_hit(count, ts, t_enter)
        count, ts = push_hit(count, ts, t_exit)
    return LocalHits(count=count, t=ts)


@ti.func
def box_normal(point: vec3) -> vec3:
    """Outward face normal at a point on the unit box."""
    ax = ti.abs(point.x)
    ay = ti.abs(point.y)
    az = ti.abs(point.z)
    normal = vec3(0.0, 0.0, ti.select(point.z >= 0.0, 1.0, -1.0))
    if ax >= ay and ax >= az:
        normal = vec3(ti.select(point.x >= 0.0, 1.0, -1.0), 0.0, 0.0)
    elif ay >= az:
        normal = vec3(0.0, ti.select(point.y >= 0.0, 1.0, -1.0), 0.0)
    return normal
