"""Whitted-style ray tracing integrator.

This module implements the main rendering kernel. Each camera ray is traced
through a tree of perfect reflections and refractions: at every hit the
surface is shaded with Phong lighting from each point light (with hard
shadows), and reflected and refracted child rays are spawned according to
the material's reflective and transparency coefficients.

Taichi functions cannot recurse, so the tree is walked with an explicit
stack of pending rays. Every entry carries its origin, direction, the
colour weight it contributes with, and the remaining depth. The sum of
weight * local colour over all entries equals the recursive definition:

    colour(ray, 0)     = black
    colour(ray, depth) = background                          on a miss
                       = surface + k_r * colour(reflected, depth - 1)
                                 + k_t * colour(refracted, depth - 1)

where k_r and k_t are the material's reflective and transparency
coefficients, rebalanced with Schlick's approximation when a material has
both.

Key features:
    - Row-parallel render kernel; each row owns a slice of the ray stack
    - Deterministic jitter and lens samples (no shared RNG state)
    - Progressive sample accumulation with NaN/Inf and negative guards
    - Self-intersection avoidance with over/under points

Example:
    >>> from whitted.core.settings import init_backend
    >>> init_backend()
    >>> from whitted.core.integrator import render_image, setup_render_target
    >>> from whitted.scene.three_spheres import create_three_spheres_scene
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.camera.camera import setup_camera
    >>>
    >>> scene, camera = create_three_spheres_scene()
    >>> SceneManager().load(scene)
    >>> setup_camera(camera, 320, 240)
    >>> setup_render_target(320, 240)
    >>> render_image(num_samples=4, max_depth=5)
"""

import logging

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.camera.camera import get_ray
from whitted.core.ray import normalize, real, reflect, refract, schlick_reflectance, vec2, vec3
from whitted.core.sampling import next_random, sample_unit_disk, seed_sample
from whitted.core.settings import MAX_DEPTH, MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from whitted.core.types import Colour, Point3, Vector3, as_triple
from whitted.materials.material import (
    material_reflective,
    material_refractive_index,
    material_transparency,
)
from whitted.materials.shading import shade, surface_colour
from whitted.scene.intersection import (
    T_MAX,
    T_MIN,
    intersect_scene,
    intersect_scene_any,
    object_material_ids,
    world_normal,
)
from whitted.scene.lighting import get_background, get_light_count, light_positions, num_lights

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Depth-first traversal keeps at most one pending sibling per level
STACK_SIZE = MAX_DEPTH + 2

# Offset along the normal for secondary ray origins
RAY_EPSILON = 1e-4

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Colour accumulation buffer indexed [row, column], row 0 at the top
_colour_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

_total_samples = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# =============================================================================
# Ray Stack (one lane per image row)
# =============================================================================

_stack_origin = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_HEIGHT, STACK_SIZE))
_stack_direction = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_HEIGHT, STACK_SIZE))
_stack_weight = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_HEIGHT, STACK_SIZE))
_stack_depth = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_HEIGHT, STACK_SIZE))


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers. The buffers
    are preallocated to MAX_IMAGE_HEIGHT x MAX_IMAGE_WIDTH so that kernels
    compile once.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the colour buffer and the sample count."""
    _colour_buffer.fill(0.0)
    _total_samples[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading Helpers
# =============================================================================


@ti.func
def is_shadowed(point: vec3, light_position: vec3) -> ti.i32:
    """Whether any object lies strictly between a point and a light."""
    to_light = light_position - point
    distance = tm.length(to_light)
    return intersect_scene_any(point, normalize(to_light), T_MIN, distance)


@ti.func
def shade_surface(object_id: ti.i32, point: vec3, over_point: vec3, normal: vec3, eye: vec3) -> vec3:
    """Sum of the Phong contributions of every light at a surface point.

    Args:
        object_id: The object that was hit.
        point: The exact hit point, used for the pattern lookup.
        over_point: The hit point nudged along the normal, used for lighting
            and shadow rays.
        normal: Unit normal facing the eye.
        eye: Unit vector toward the viewer.
    """
    base = surface_colour(object_id, point)
    colour = vec3(0.0, 0.0, 0.0)
    for light in range(num_lights[None]):
        in_shadow = is_shadowed(over_point, light_positions[light])
        colour += shade(object_id, base, over_point, normal, eye, light, in_shadow)
    return colour


# =============================================================================
# Ray Tree Traversal
# =============================================================================


@ti.func
def _push(lane: ti.i32, top: ti.i32, origin: vec3, direction: vec3, weight: vec3, depth: ti.i32) -> ti.i32:
    """Push a pending ray if there is room; returns the new stack top."""
    new_top = top
    if top < STACK_SIZE:
        _stack_origin[lane, top] = origin
        _stack_direction[lane, top] = direction
        _stack_weight[lane, top] = weight
        _stack_depth[lane, top] = depth
        new_top = top + 1
    return new_top


@ti.func
def trace(origin: vec3, direction: vec3, max_depth: ti.i32, lane: ti.i32) -> vec3:
    """Colour seen along a ray, following reflections and refractions.

    Args:
        origin: Ray origin in world space.
        direction: Ray direction in world space.
        max_depth: Remaining depth. 0 returns black; 1 shades the first
            hit without spawning secondary rays.
        lane: Stack lane owned by the caller (its image row).

    Returns:
        The unclamped colour carried back along the ray.
    """
    colour = vec3(0.0, 0.0, 0.0)
    top = 0
    if max_depth > 0:
        top = _push(lane, top, origin, normalize(direction), vec3(1.0, 1.0, 1.0), max_depth)

    while top > 0:
        top -= 1
        ray_origin = _stack_origin[lane, top]
        ray_direction = _stack_direction[lane, top]
        weight = _stack_weight[lane, top]
        depth = _stack_depth[lane, top]

        record = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)
        if record.hit == 0:
            colour += weight * get_background()
        else:
            object_id = record.object_id
            point = ray_origin + record.t * ray_direction
            eye = -ray_direction
            normal = world_normal(object_id, point)

            inside = 0
            if tm.dot(normal, eye) < 0.0:
                inside = 1
                normal = -normal

            over_point = point + normal * RAY_EPSILON
            under_point = point - normal * RAY_EPSILON

            colour += weight * shade_surface(object_id, point, over_point, normal, eye)

            if depth > 1:
                material_id = object_material_ids[object_id]
                reflect_weight = material_reflective[material_id]
                refract_weight = material_transparency[material_id]

                # Entering: air -> material; exiting: material -> air
                ior = material_refractive_index[material_id]
                n1 = 1.0
                n2 = ior
                if inside == 1:
                    n1 = ior
                    n2 = 1.0

                refracted, valid = refract(ray_direction, normal, n1 / n2)
                if reflect_weight > 0.0 and refract_weight > 0.0:
                    reflectance = schlick_reflectance(tm.dot(eye, normal), n1, n2)
                    reflect_weight *= reflectance
                    refract_weight *= 1.0 - reflectance
                if valid == 0:
                    refract_weight = 0.0

                if reflect_weight > 0.0:
                    top = _push(
                        lane,
                        top,
                        over_point,
                        reflect(ray_direction, normal),
                        weight * reflect_weight,
                        depth - 1,
                    )
                if refract_weight > 0.0:
                    top = _push(
                        lane,
                        top,
                        under_point,
                        normalize(refracted),
                        weight * refract_weight,
                        depth - 1,
                    )

    return colour


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_sample(
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    sample_index: ti.i32,
    jitter: ti.i32,
    seed: ti.i32,
):
    """Trace one sample per pixel and fold it into the running average.

    The outer loop over rows is parallelized; each row traces its pixels
    serially using its own stack lane.
    """
    for j in range(height):
        for i in range(width):
            state = seed_sample(i, j, sample_index, seed)
            offset = vec2(0.5, 0.5)
            if jitter == 1:
                state, ox = next_random(state)
                state, oy = next_random(state)
                offset = vec2(ox, oy)
            state, u1 = next_random(state)
            state, u2 = next_random(state)
            lens = sample_unit_disk(u1, u2)

            ray = get_ray(i, j, offset, lens)
            colour = trace(ray.origin, ray.direction, max_depth, j)

            # Check for NaN/Inf and replace with zero
            for c in ti.static(range(3)):
                if tm.isnan(colour[c]) or tm.isinf(colour[c]):
                    colour[c] = 0.0

            colour = tm.max(colour, vec3(0.0, 0.0, 0.0))

            # Running average: avg_n = avg_{n-1} + (x_n - avg_{n-1}) / n
            n = ti.cast(sample_index + 1, real)
            previous = ti.cast(_colour_buffer[j, i], real)
            _colour_buffer[j, i] = ti.cast(previous + (colour - previous) / n, ti.f32)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image(num_samples: int = 1, max_depth: int = 5, seed: int = 0, jitter: bool | None = None) -> None:
    """Render samples into the colour buffer.

    Progressively accumulates samples, so it can be called repeatedly to
    refine the image.

    Args:
        num_samples: Number of samples per pixel to add.
        max_depth: Maximum ray tree depth (0 to MAX_DEPTH).
        seed: Seed for the deterministic jitter and lens samples.
        jitter: Whether to jitter samples within each pixel. Defaults to
            jittering only when more than one sample is requested.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If num_samples or max_depth is out of range.
    """
    _check_render_target_initialized()
    if num_samples < 1:
        raise ValueError(f"num_samples must be at least 1, got {num_samples}")
    if not 0 <= max_depth <= MAX_DEPTH:
        raise ValueError(f"max_depth must be in [0, {MAX_DEPTH}], got {max_depth}")
    if jitter is None:
        jitter = num_samples > 1

    width, height = get_image_dimensions()
    for _ in range(num_samples):
        sample_index = int(_total_samples[None])
        _render_one_sample(width, height, max_depth, sample_index, int(jitter), seed & 0x7FFFFFFF)
        _total_samples[None] = sample_index + 1


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return int(_total_samples[None])


def get_image_numpy() -> np.ndarray:
    """Get the accumulated image as a NumPy array.

    Values are not clamped or gamma corrected.

    Returns:
        float64 array of shape (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    full_image = _colour_buffer.to_numpy()
    return full_image[:height, :width, :].astype(np.float64)


# =============================================================================
# Host-side queries
# =============================================================================

_query_colour = ti.Vector.field(3, dtype=real, shape=())
_query_shadowed = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _query_trace(ox: real, oy: real, oz: real, dx: real, dy: real, dz: real, depth: ti.i32):
    # Single-iteration loop keeps the traversal serial
    for _ in range(1):
        _query_colour[None] = trace(vec3(ox, oy, oz), vec3(dx, dy, dz), depth, 0)


@ti.kernel
def _query_is_shadowed(px: real, py: real, pz: real, light_index: ti.i32):
    for _ in range(1):
        _query_shadowed[None] = is_shadowed(vec3(px, py, pz), light_positions[light_index])


def trace_ray(origin: Point3, direction: Vector3, depth: int = 5) -> Colour:
    """Colour seen along a single world-space ray in the uploaded scene.

    Raises:
        ValueError: If depth is out of range.
    """
    if not 0 <= depth <= MAX_DEPTH:
        raise ValueError(f"depth must be in [0, {MAX_DEPTH}], got {depth}")
    ox, oy, oz = as_triple(origin, "origin")
    dx, dy, dz = as_triple(direction, "direction")
    _query_trace(ox, oy, oz, dx, dy, dz, depth)
    c = _query_colour[None]
    return (float(c[0]), float(c[1]), float(c[2]))


def is_shadowed_at(point: Point3, light_index: int = 0) -> bool:
    """Whether a world-space point is occluded from a registered light.

    Raises:
        IndexError: If the light is not registered.
    """
    if not 0 <= light_index < get_light_count():
        raise IndexError(f"Light {light_index} is not registered")
    px, py, pz = as_triple(point, "point")
    _query_is_shadowed(px, py, pz, light_index)
    return bool(_query_shadowed[None])
