"""Local illumination (Phong) for a single surface point and light.

For light colour L, surface colour C and unit vectors n (normal), l (to
light), e (to eye) and r = reflect(-l, n):

    ambient  = C * L * ambient
    diffuse  = C * L * diffuse * (n . l)              when n . l >= 0
    specular = L * specular * (r . e) ** shininess    when n . l >= 0 and r . e > 0

In shadow only the ambient term remains. The surface colour C is the
material's flat colour, or its pattern evaluated at the point mapped into
object space and then pattern space.

This module reads the object and material registries, so it is not
re-exported from ``whitted.materials``; import it directly.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import normalize, real, reflect, transform_point, vec3
from whitted.core.types import Colour, Point3, Vector3, as_triple
from whitted.materials.material import (
    material_ambient,
    material_colours,
    material_diffuse,
    material_pattern_ids,
    material_shininess,
    material_specular,
)
from whitted.materials.pattern import pattern_colour_at
from whitted.scene.intersection import get_object_count, object_inverses, object_material_ids
from whitted.scene.lighting import get_light_count, light_colours, light_positions


@ti.func
def lighting(
    colour: vec3,
    ambient: real,
    diffuse: real,
    specular: real,
    shininess: real,
    light_position: vec3,
    light_colour: vec3,
    point: vec3,
    normal: vec3,
    eye: vec3,
    in_shadow: ti.i32,
) -> vec3:
    """Phong contribution of one light at a surface point.

    Args:
        colour: Surface colour at the point.
        ambient: Ambient coefficient.
        diffuse: Diffuse coefficient.
        specular: Specular coefficient.
        shininess: Specular exponent.
        light_position: World-space light position.
        light_colour: Light colour/intensity.
        point: World-space surface point.
        normal: Unit surface normal facing the eye.
        eye: Unit vector from the point toward the viewer.
        in_shadow: 1 if the light is occluded.

    Returns:
        The sum of the ambient, diffuse and specular terms.
    """
    effective = colour * light_colour
    ambient_term = effective * ambient
    diffuse_term = vec3(0.0, 0.0, 0.0)
    specular_term = vec3(0.0, 0.0, 0.0)

    if in_shadow == 0:
        light_v = normalize(light_position - point)
        light_dot_normal = tm.dot(light_v, normal)
        if light_dot_normal >= 0.0:
            diffuse_term = effective * diffuse * light_dot_normal
            reflect_dot_eye = tm.dot(reflect(-light_v, normal), eye)
            if reflect_dot_eye > 0.0:
                specular_term = light_colour * specular * reflect_dot_eye**shininess

    return ambient_term + diffuse_term + specular_term


@ti.func
def surface_colour(object_id: ti.i32, point: vec3) -> vec3:
    """Flat or patterned base colour of an object at a world-space point."""
    material_id = object_material_ids[object_id]
    colour = material_colours[material_id]
    pattern_id = material_pattern_ids[material_id]
    if pattern_id >= 0:
        object_point = transform_point(object_inverses[object_id], point)
        colour = pattern_colour_at(pattern_id, object_point)
    return colour


@ti.func
def shade(
    object_id: ti.i32,
    colour: vec3,
    point: vec3,
    normal: vec3,
    eye: vec3,
    light_index: ti.i32,
    in_shadow: ti.i32,
) -> vec3:
    """Shade an object's surface point for one registered light.

    colour is the base colour from surface_colour() at the hit point. point
    is where the light vector is measured from.
    """
    material_id = object_material_ids[object_id]
    return lighting(
        colour,
        material_ambient[material_id],
        material_diffuse[material_id],
        material_specular[material_id],
        material_shininess[material_id],
        light_positions[light_index],
        light_colours[light_index],
        point,
        normal,
        eye,
        in_shadow,
    )


# =============================================================================
# Host-side query
# =============================================================================

_query_colour = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _query_shade(
    object_id: ti.i32,
    px: real,
    py: real,
    pz: real,
    nx: real,
    ny: real,
    nz: real,
    ex: real,
    ey: real,
    ez: real,
    light_index: ti.i32,
    in_shadow: ti.i32,
):
    point = vec3(px, py, pz)
    _query_colour[None] = shade(
        object_id,
        surface_colour(object_id, point),
        point,
        vec3(nx, ny, nz),
        vec3(ex, ey, ez),
        light_index,
        in_shadow,
    )


def shade_at(
    object_id: int,
    point: Point3,
    normal: Vector3,
    eye: Vector3,
    light_index: int = 0,
    in_shadow: bool = False,
) -> Colour:
    """Host-side query for shade() on an uploaded scene.

    Raises:
        IndexError: If the object or light is not registered.
    """
    if not 0 <= object_id < get_object_count():
        raise IndexError(f"Object {object_id} is not in the scene")
    if not 0 <= light_index < get_light_count():
        raise IndexError(f"Light {light_index} is not registered")
    px, py, pz = as_triple(point, "point")
    nx, ny, nz = as_triple(normal, "normal")
    ex, ey, ez = as_triple(eye, "eye")
    _query_shade(object_id, px, py, pz, nx, ny, nz, ex, ey, ez, light_index, int(in_shadow))
    c = _query_colour[None]
    return (float(c[0]), float(c[1]), float(c[2]))
