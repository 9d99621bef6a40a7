"""Scene manager that uploads a Scene into the Taichi registries.

The SceneManager coordinates the pattern, material, object and light
registries. It offers two levels of API:

- ``load(scene)`` clears every registry and uploads an immutable Scene in
  one call, which is what the Renderer uses.
- ``add_pattern``, ``add_material``, ``add_object`` and ``add_light`` add
  single items when building a scene incrementally (mostly for tests).

Patterns are uploaded per material, and materials are de-duplicated by
equality, so objects sharing a Material share one material ID.

Example:
    >>> from whitted.core.settings import init_backend
    >>> init_backend()
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.scene.model import Scene, SceneObject
    >>> from whitted.scene.lighting import PointLight
    >>> from whitted.geometry.shapes import Shape
    >>> manager = SceneManager()
    >>> manager.load(Scene(
    ...     objects=[SceneObject(Shape.sphere())],
    ...     lights=[PointLight((-10, 10, -10))],
    ... ))
    >>> manager.get_object_count()
    1
"""

import logging
from dataclasses import dataclass

from whitted.core.transform import Transform
from whitted.core.types import Colour
from whitted.geometry.shapes import Shape
from whitted.materials.material import Material, add_material, clear_materials, get_material_count
from whitted.materials.pattern import Pattern, add_pattern, clear_patterns, get_pattern_count
from whitted.scene.intersection import add_object, clear_scene, get_object_count
from whitted.scene.lighting import (
    PointLight,
    add_light,
    clear_lights,
    get_background_colour,
    get_light_count,
    set_background,
)
from whitted.scene.model import Scene, SceneObject

logger = logging.getLogger(__name__)


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material ID used by objects.
        material: The host-side material.
        pattern_id: The registered pattern ID, or -1.
    """

    material_id: int
    material: Material
    pattern_id: int


@dataclass
class ObjectInfo:
    """Information about an object in the scene.

    Attributes:
        object_id: Index of the object in the object registry.
        shape: The local-space primitive.
        transform: Object-to-world transform.
        material_id: The material ID assigned to the object.
    """

    object_id: int
    shape: Shape
    transform: Transform
    material_id: int


def clear_all() -> None:
    """Clear every scene registry (objects, materials, patterns, lights)."""
    clear_scene()
    clear_materials()
    clear_patterns()
    clear_lights()


class SceneManager:
    """Uploads scenes into the Taichi registries and tracks what was added.

    Attributes:
        materials: MaterialInfo for every registered material, by ID.
        objects: ObjectInfo for every object, by ID.
        lights: Every registered light, by index.
    """

    def __init__(self) -> None:
        """Initialize an empty scene (clears all registries)."""
        self.materials: list[MaterialInfo] = []
        self.objects: list[ObjectInfo] = []
        self.lights: list[PointLight] = []
        self._material_ids: dict[Material, int] = {}
        self._clear_all()

    def _clear_all(self) -> None:
        clear_all()
        self.materials.clear()
        self.objects.clear()
        self.lights.clear()
        self._material_ids.clear()

    def clear(self) -> None:
        """Clear the entire scene and its tracking structures."""
        self._clear_all()

    def load(self, scene: Scene) -> None:
        """Replace the uploaded scene with the given one.

        Args:
            scene: The scene to upload.

        Raises:
            RuntimeError: If the scene exceeds a registry capacity.
        """
        self._clear_all()
        set_background(scene.background)
        for obj in scene.objects:
            self.add_scene_object(obj)
        for light in scene.lights:
            self.add_light(light)
        logger.info(
            "Loaded scene: %d objects, %d materials, %d patterns, %d lights",
            self.get_object_count(),
            self.get_material_count(),
            get_pattern_count(),
            self.get_light_count(),
        )

    # =========================================================================
    # Incremental API
    # =========================================================================

    def add_pattern(self, pattern: Pattern) -> int:
        """Register a pattern and return its pattern ID."""
        return add_pattern(pattern)

    def add_material(self, material: Material) -> int:
        """Register a material (and its pattern) and return its material ID.

        Registering an equal material again returns the existing ID.
        """
        existing = self._material_ids.get(material)
        if existing is not None:
            return existing
        pattern_id = -1 if material.pattern is None else self.add_pattern(material.pattern)
        material_id = add_material(material, pattern_id)
        self._material_ids[material] = material_id
        self.materials.append(MaterialInfo(material_id, material, pattern_id))
        return material_id

    def add_object(self, shape: Shape, transform: Transform, material_id: int) -> int:
        """Add an object referencing an already-registered material.

        Raises:
            ValueError: If material_id is not a registered material.
            RuntimeError: If the maximum number of objects is exceeded.
        """
        if material_id < 0 or material_id >= get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")
        object_id = add_object(shape, transform, material_id)
        self.objects.append(ObjectInfo(object_id, shape, transform, material_id))
        return object_id

    def add_scene_object(self, obj: SceneObject) -> int:
        """Register an object's material and add the object."""
        material_id = self.add_material(obj.material)
        return self.add_object(obj.shape, obj.transform, material_id)

    def add_light(self, light: PointLight) -> int:
        """Register a point light and return its index."""
        index = add_light(light)
        self.lights.append(light)
        return index

    def set_background(self, colour: Colour) -> None:
        """Set the colour of rays that escape the scene."""
        set_background(colour)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_object_count(self) -> int:
        """Get the number of objects in the scene."""
        return get_object_count()

    def get_material_count(self) -> int:
        """Get the number of registered materials."""
        return get_material_count()

    def get_light_count(self) -> int:
        """Get the number of registered lights."""
        return get_light_count()

    def get_background(self) -> Colour:
        """Get the current background colour."""
        return get_background_colour()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_object_info(self, object_id: int) -> ObjectInfo | None:
        """Get information about an object by ID, or None if not found."""
        if 0 <= object_id < len(self.objects):
            return self.objects[object_id]
        return None
