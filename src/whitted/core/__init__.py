"""Core rendering module.

Components:
    ray: Ray data structure, vector types and reflect/refract/Schlick
    sampling: Deterministic per-sample random numbers
    transform: Host-side affine transforms with cached inverses
    settings: Render configuration and Taichi backend initialization
    integrator: Stack-based Whitted trace and the row-parallel render kernel
    renderer: High-level Renderer wrapping scene upload and accumulation

None of the modules imported here declare Taichi fields, so this package is
safe to import before ``init_backend()``.
"""

from .ray import (
    EPSILON,
    Ray,
    make_ray,
    mat4,
    normalize,
    ray_at,
    real,
    reflect,
    refract,
    schlick_reflectance,
    transform_point,
    transform_vector,
    vec2,
    vec3,
    vec4,
)
from .settings import MAX_DEPTH, RenderSettings, init_backend
from .transform import Transform

# Note: integrator and renderer are NOT imported here; they declare fields
# and depend on the scene package. Import them directly when needed.

__all__ = [
    "EPSILON",
    "MAX_DEPTH",
    "Ray",
    "RenderSettings",
    "Transform",
    "init_backend",
    "make_ray",
    "mat4",
    "normalize",
    "ray_at",
    "real",
    "reflect",
    "refract",
    "schlick_reflectance",
    "transform_point",
    "transform_vector",
    "vec2",
    "vec3",
    "vec4",
]
