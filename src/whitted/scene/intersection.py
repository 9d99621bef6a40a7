"""Scene-level object storage and ray queries.

Objects are stored Structure-of-Arrays in Taichi fields: shape kind and
extents, material ID, and the object's forward and inverse transform.
Queries transform the world-space ray into each object's frame with the
inverse matrix, without renormalizing the direction, so local t values are
directly comparable across objects.

Nearest-hit rule: among all candidates with t in (t_min, t_max) the
smallest wins. Candidates are compared with a strict ``<`` in object order,
so on an exact tie the object added first wins.

Example:
    >>> from whitted.core.settings import init_backend
    >>> init_backend()
    >>> from whitted.geometry.shapes import Shape
    >>> from whitted.core.transform import Transform
    >>> from whitted.scene.intersection import add_object, clear_scene, nearest_hit
    >>> clear_scene()
    >>> add_object(Shape.sphere(), Transform.translation(0, 0, -3), material_id=0)
    0
    >>> nearest_hit((0, 0, 0), (0, 0, -1))
    (2.0, 0)
"""

import logging

import taichi as ti

from whitted.core.ray import real, normalize, transform_point, transform_vector, vec3
from whitted.core.transform import Transform
from whitted.core.types import Point3, Vector3, as_triple
from whitted.geometry.hits import MAX_LOCAL_HITS, LocalHits
from whitted.geometry.shapes import Shape, intersect_local, local_normal

logger = logging.getLogger(__name__)

# Minimum accepted hit distance, avoids self-intersection (acne)
T_MIN = 1e-4
T_MAX = 1e30


@ti.dataclass
class SceneHit:
    """Nearest intersection of a ray with the scene.

    Attributes:
        hit: 1 if any object was hit, 0 otherwise.
        t: Ray parameter of the hit. Only valid if hit == 1.
        object_id: Index of the object hit, or -1.
    """

    hit: ti.i32
    t: real
    object_id: ti.i32


# Maximum number of objects supported in the scene
MAX_OBJECTS = 1024

object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_minimums = ti.field(dtype=real, shape=MAX_OBJECTS)
object_maximums = ti.field(dtype=real, shape=MAX_OBJECTS)
object_closed = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_inverses = ti.Matrix.field(4, 4, dtype=real, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all objects from the scene.

    Resets the object count to zero. Field data is overwritten as new
    objects are added.
    """
    num_objects[None] = 0


def add_object(shape: Shape, transform: Transform, material_id: int = 0) -> int:
    """Add an object to the scene.

    Args:
        shape: The local-space primitive.
        transform: Object-to-world transform.
        material_id: ID of an already-registered material.

    Returns:
        The index of the added object.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    object_kinds[idx] = int(shape.kind)
    object_minimums[idx] = shape.minimum
    object_maximums[idx] = shape.maximum
    object_closed[idx] = int(shape.closed)
    object_material_ids[idx] = material_id
    object_inverses[idx] = ti.Matrix(transform.inverse.tolist())
    num_objects[None] = idx + 1
    logger.debug("object %d: %s material=%d", idx, shape.kind.name, material_id)
    return idx


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


# =============================================================================
# Kernel-side queries
# =============================================================================


@ti.func
def object_local_hits(object_id: ti.i32, origin: vec3, direction: vec3) -> LocalHits:
    """Candidate hits of a world-space ray against one object."""
    inverse = object_inverses[object_id]
    return intersect_local(
        object_kinds[object_id],
        transform_point(inverse, origin),
        transform_vector(inverse, direction),
        object_minimums[object_id],
        object_maximums[object_id],
        object_closed[object_id],
    )


@ti.func
def intersect_scene(origin: vec3, direction: vec3, t_min: real, t_max: real) -> SceneHit:
    """Find the nearest object hit by a world-space ray.

    Args:
        origin: Ray origin in world space.
        direction: Ray direction in world space.
        t_min: Hits at or below this distance are ignored.
        t_max: Hits at or beyond this distance are ignored.

    Returns:
        A SceneHit; check hit to see whether anything was hit.
    """
    closest = t_max
    closest_id = -1
    for k in range(num_objects[None]):
        hits = object_local_hits(k, origin, direction)
        for s in ti.static(range(MAX_LOCAL_HITS)):
            if s < hits.count:
                t = hits.t[s]
                if t > t_min and t < closest:
                    closest = t
                    closest_id = k
    return SceneHit(hit=ti.select(closest_id >= 0, 1, 0), t=closest, object_id=closest_id)


@ti.func
def intersect_scene_any(origin: vec3, direction: vec3, t_min: real, t_max: real) -> ti.i32:
    """Whether any object is hit with t in (t_min, t_max).

    Cheaper than intersect_scene for shadow rays since it stops testing
    candidates once something is found.
    """
    found = 0
    for k in range(num_objects[None]):
        if found == 0:
            hits = object_local_hits(k, origin, direction)
            for s in ti.static(range(MAX_LOCAL_HITS)):
                if s < hits.count:
                    t = hits.t[s]
                    if t > t_min and t < t_max:
                        found = 1
    return found


@ti.func
def world_normal(object_id: ti.i32, point: vec3) -> vec3:
    """Unit outward normal of an object at a world-space point.

    The local normal is mapped back with the inverse-transpose of the
    object's transform and renormalized.
    """
    inverse = object_inverses[object_id]
    local_point = transform_point(inverse, point)
    normal = local_normal(
        object_kinds[object_id],
        local_point,
        object_minimums[object_id],
        object_maximums[object_id],
    )
    return normalize(transform_vector(inverse.transpose(), normal))


# =============================================================================
# Host-side queries
# =============================================================================

_query_count = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=real, shape=MAX_LOCAL_HITS)
_query_hit = ti.field(dtype=ti.i32, shape=())
_query_nearest_t = ti.field(dtype=real, shape=())
_query_object = ti.field(dtype=ti.i32, shape=())
_query_normal = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _query_object_hits(object_id: ti.i32, ox: real, oy: real, oz: real, dx: real, dy: real, dz: real):
    hits = object_local_hits(object_id, vec3(ox, oy, oz), vec3(dx, dy, dz))
    _query_count[None] = hits.count
    for k in ti.static(range(MAX_LOCAL_HITS)):
        _query_t[k] = hits.t[k]


@ti.kernel
def _query_nearest(ox: real, oy: real, oz: real, dx: real, dy: real, dz: real):
    # Single-iteration loop keeps the object loop inside serial
    for _ in range(1):
        record = intersect_scene(vec3(ox, oy, oz), vec3(dx, dy, dz), T_MIN, T_MAX)
        _query_hit[None] = record.hit
        _query_nearest_t[None] = record.t
        _query_object[None] = record.object_id


@ti.kernel
def _query_world_normal(object_id: ti.i32, px: real, py: real, pz: real):
    _query_normal[None] = world_normal(object_id, vec3(px, py, pz))


def _check_object_id(object_id: int) -> None:
    if not 0 <= object_id < get_object_count():
        raise IndexError(f"Object {object_id} is not in the scene")


def object_intersections(object_id: int, origin: Point3, direction: Vector3) -> list[float]:
    """Candidate t values of a world-space ray against one object, ascending."""
    _check_object_id(object_id)
    ox, oy, oz = as_triple(origin, "origin")
    dx, dy, dz = as_triple(direction, "direction")
    _query_object_hits(object_id, ox, oy, oz, dx, dy, dz)
    return sorted(float(_query_t[k]) for k in range(int(_query_count[None])))


def nearest_hit(origin: Point3, direction: Vector3) -> tuple[float, int] | None:
    """Nearest (t, object_id) along a world-space ray, or None on a miss."""
    ox, oy, oz = as_triple(origin, "origin")
    dx, dy, dz = as_triple(direction, "direction")
    _query_nearest(ox, oy, oz, dx, dy, dz)
    if _query_hit[None] == 0:
        return None
    return float(_query_nearest_t[None]), int(_query_object[None])


def normal_at(object_id: int, point: Point3) -> tuple[float, float, float]:
    """Unit world-space normal of an object at a world-space surface point."""
    _check_object_id(object_id)
    px, py, pz = as_triple(point, "point")
    _query_world_normal(object_id, px, py, pz)
    n = _query_normal[None]
    return (float(n[0]), float(n[1]), float(n[2]))
