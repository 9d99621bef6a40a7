"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the Ray dataclass, double-precision vector types and
the vector functions shared by every stage of the tracer: normalization,
reflection, refraction, Schlick reflectance and 4x4 affine application.
All functions are ``@ti.func`` and run inside Taichi kernels.

Normalization policy: a zero-length vector normalizes to the zero vector.
Callers treat a zero direction as "no ray" rather than propagating NaN.

Example:
    >>> import taichi as ti
    >>> from whitted.core.settings import init_backend
    >>> init_backend()
    >>> from whitted.core.ray import Ray, ray_at, vec3
    >>> @ti.kernel
    ... def query() -> ti.f64:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 5.0).z
"""

import taichi as ti
import taichi.math as tm

# Scalar precision used for all geometry and shading
real = ti.f64

# Double-precision vector and matrix types
vec2 = ti.types.vector(2, real)
vec3 = ti.types.vector(3, real)
vec4 = ti.types.vector(4, real)
mat4 = ti.types.matrix(4, 4, real)

# Tolerance for parallel and tangent tests
EPSILON = 1e-6


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. It must be non-zero but need not
            be unit length; object-space rays are deliberately left
            unnormalized so that t is shared with world space.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: real) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or the zero vector if v
        has zero length.
    """
    result = vec3(0.0, 0.0, 0.0)
    norm = tm.length(v)
    if norm > 0.0:
        result = v / norm
    return result


@ti.func
def transform_point(m: mat4, p: vec3) -> vec3:
    """Apply a 4x4 affine matrix to a point (translation applies)."""
    h = m @ vec4(p.x, p.y, p.z, 1.0)
    return vec3(h.x, h.y, h.z)


@ti.func
def transform_vector(m: mat4, v: vec3) -> vec3:
    """Apply a 4x4 affine matrix to a direction (translation ignored)."""
    h = m @ vec4(v.x, v.y, v.z, 0.0)
    return vec3(h.x, h.y, h.z)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        incident - 2 (incident . normal) normal.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: real):
    """Refract an incident vector through a surface using Snell's law.

    Args:
        incident: The incoming direction (normalized).
        normal: The surface normal on the incident side (normalized).
        eta: Ratio n1 / n2 of the refractive indices of the medium being
            left and the medium being entered.

    Returns:
        A tuple (direction, valid). valid is 0 under total internal
        reflection, in which case direction is the zero vector.
    """
    cos_i = -tm.dot(incident, normal)
    sin2_t = eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(0.0, 0.0, 0.0)
    valid = 0
    if sin2_t <= 1.0:
        cos_t = ti.sqrt(1.0 - sin2_t)
        result = eta * incident + (eta * cos_i - cos_t) * normal
        valid = 1
    return result, valid


@ti.func
def schlick_reflectance(cos_i: real, n1: real, n2: real) -> real:
    """Fraction of light reflected at a dielectric boundary.

    Uses Schlick's approximation of the Fresnel equations. When leaving a
    denser medium the cosine of the transmitted angle is used, and beyond
    the critical angle the reflectance is 1 (total internal reflection).

    Args:
        cos_i: Cosine of the angle between the eye vector and the normal.
        n1: Refractive index of the medium the ray is leaving.
        n2: Refractive index of the medium the ray is entering.

    Returns:
        Reflectance in [0, 1].
    """
    cosine = cos_i
    total_internal = 0
    if n1 > n2:
        ratio = n1 / n2
        sin2_t = ratio * ratio * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            total_internal = 1
        else:
            cosine = ti.sqrt(1.0 - sin2_t)

    result = 1.0
    if total_internal == 0:
        r0 = ((n1 - n2) / (n1 + n2)) ** 2
        result = r0 + (1.0 - r0) * (1.0 - cosine) ** 5
    return result
