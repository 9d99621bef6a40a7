"""Scene module for object storage, lights and scene upload.

Components:
    lighting: Point lights and the background colour
    intersection: Object registry, nearest-hit and shadow queries
    model: Immutable Scene and SceneObject descriptions
    manager: SceneManager that uploads a Scene into the registries
    three_spheres: Demo scene factory
"""

from .intersection import (
    MAX_OBJECTS,
    T_MAX,
    T_MIN,
    SceneHit,
    add_object,
    clear_scene,
    get_object_count,
    intersect_scene,
    intersect_scene_any,
    nearest_hit,
    normal_at,
    object_intersections,
    world_normal,
)
from .lighting import MAX_LIGHTS, PointLight, add_light, clear_lights, get_light_count, set_background
from .manager import MaterialInfo, ObjectInfo, SceneManager, clear_all
from .model import Scene, SceneObject
from .three_spheres import ThreeSpheresParams, create_three_spheres_scene

__all__ = [
    "MAX_LIGHTS",
    "MAX_OBJECTS",
    "T_MAX",
    "T_MIN",
    "MaterialInfo",
    "ObjectInfo",
    "PointLight",
    "Scene",
    "SceneHit",
    "SceneManager",
    "SceneObject",
    "ThreeSpheresParams",
    "add_light",
    "add_object",
    "clear_all",
    "clear_lights",
    "clear_scene",
    "create_three_spheres_scene",
    "get_light_count",
    "get_object_count",
    "intersect_scene",
    "intersect_scene_any",
    "nearest_hit",
    "normal_at",
    "object_intersections",
    "set_background",
    "world_normal",
]
