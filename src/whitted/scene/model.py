"""Immutable host-side scene description.

The scene loader (outside this package) builds these dataclasses; the
SceneManager uploads them into Taichi fields. Nothing here changes once a
render starts.
"""

from dataclasses import dataclass, field

from whitted.core.transform import Transform
from whitted.core.types import Colour, as_colour
from whitted.errors import SceneError
from whitted.geometry.shapes import Shape
from whitted.materials.material import Material
from whitted.scene.lighting import PointLight


@dataclass(frozen=True)
class SceneObject:
    """A shape placed in the world with a material.

    Attributes:
        shape: The local-space primitive.
        material: Surface shading parameters.
        transform: Object-to-world transform.
    """

    shape: Shape
    material: Material = field(default_factory=Material.plastic)
    transform: Transform = field(default_factory=Transform.identity)

    def __post_init__(self) -> None:
        if not isinstance(self.shape, Shape):
            raise SceneError(f"shape must be a Shape, got {type(self.shape).__name__}")
        if not isinstance(self.material, Material):
            raise SceneError(f"material must be a Material, got {type(self.material).__name__}")
        if not isinstance(self.transform, Transform):
            raise SceneError(f"transform must be a Transform, got {type(self.transform).__name__}")


@dataclass(frozen=True)
class Scene:
    """Everything the renderer reads: objects, lights and background.

    Attributes:
        objects: Objects in intersection order (earlier objects win ties).
        lights: Point lights.
        background: Colour of rays that escape the scene.
    """

    objects: tuple[SceneObject, ...] = ()
    lights: tuple[PointLight, ...] = ()
    background: Colour = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "lights", tuple(self.lights))
        object.__setattr__(self, "background", as_colour(self.background, "background"))
        for obj in self.objects:
            if not isinstance(obj, SceneObject):
                raise SceneError(f"Scene objects must be SceneObject, got {type(obj).__name__}")
        for light in self.lights:
            if not isinstance(light, PointLight):
                raise SceneError(f"Scene lights must be PointLight, got {type(light).__name__}")
