"""Candidate intersection lists shared by all local-space primitives.

Every shape returns a LocalHits value: up to four candidate t values along
the object-space ray, in the order they were found. Only a closed cone can
produce four (two side hits plus two caps); the other primitives produce at
most two. Filtering by t > epsilon and picking the nearest happens in the
scene layer.
"""

import taichi as ti

from whitted.core.ray import real, vec4

# Maximum number of candidate t values any primitive can produce
MAX_LOCAL_HITS = 4

# Discriminants at or below this are treated as tangent (no hit)
DISCRIMINANT_EPSILON = 1e-12


@ti.dataclass
class LocalHits:
    """Candidate intersections of a ray with one primitive.

    Attributes:
        count: Number of valid entries in t (0 to MAX_LOCAL_HITS).
        t: Candidate ray parameters; entries at index >= count are unused.
    """

    count: ti.i32
    t: vec4


@ti.func
def no_hits() -> LocalHits:
    """An empty candidate list."""
    return LocalHits(count=0, t=vec4(0.0, 0.0, 0.0, 0.0))


@ti.func
def push_hit(count: ti.i32, ts: vec4, t: real):
    """Append t to a candidate list held as (count, ts).

    Returns:
        The updated (count, ts). Appends past MAX_LOCAL_HITS are dropped.
    """
    result = ts
    for k in ti.static(range(MAX_LOCAL_HITS)):
        if k == count:
            result[k] = t
    return ti.min(count + 1, MAX_LOCAL_HITS), result


@ti.func
def solve_quadratic_robust(h: real, a: real, c: real, sqrt_d: real):
    """Solve a quadratic using the robust formula from Ray Tracing Gems.

    Solves a*t^2 + 2*h*t + c = 0 while avoiding catastrophic cancellation
    when h*h is close to a*c.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient (non-zero).
        c: Constant term.
        sqrt_d: Square root of the reduced discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0
    if ti.abs(q) < 1e-12:
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1
