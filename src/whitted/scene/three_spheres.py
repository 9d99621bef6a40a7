"""Three-spheres demo scene.

A small scene that shows off each material variant. From left to right it
has a glass sphere, a plastic sphere and a metal sphere, each of radius 1
and centred on the x axis. A checkered floor plane sits just below them.
One white point light shines from above and to the left.

The camera sits at z = 5 looking at the origin with an 80 degree horizontal
field of view, so all three spheres fit comfortably in a 4:3 frame.

Example:
    >>> from whitted.core.settings import RenderSettings, init_backend
    >>> init_backend()
    >>> from whitted.scene.three_spheres import create_three_spheres_scene
    >>> from whitted.core.renderer import render_scene
    >>> scene, camera = create_three_spheres_scene()
    >>> image = render_scene(scene, camera, RenderSettings(width=160, height=120))
"""

from dataclasses import dataclass

from whitted.camera.camera import Camera
from whitted.core.transform import Transform
from whitted.core.types import Colour, Point3
from whitted.geometry.shapes import Shape
from whitted.materials.material import Material
from whitted.materials.pattern import Pattern, PatternKind
from whitted.scene.lighting import PointLight
from whitted.scene.model import Scene, SceneObject

# =============================================================================
# Scene Parameters
# =============================================================================


@dataclass
class ThreeSpheresParams:
    """Parameters for customizing the demo scene.

    Attributes:
        light_position: World-space position of the single point light.
        light_colour: Light colour and intensity.
        background: Colour of rays that leave the scene.
        spacing: Distance between neighbouring sphere centres.
        floor: Whether to add the checkered floor plane.
    """

    light_position: Point3 = (-5.0, 10.0, 10.0)
    light_colour: Colour = (1.0, 1.0, 1.0)
    background: Colour = (0.1, 0.1, 0.1)
    spacing: float = 2.2
    floor: bool = True


# =============================================================================
# Scene Constants
# =============================================================================

SPHERE_RADIUS = 1.0
FLOOR_HEIGHT = -1.0

PLASTIC_COLOUR = (0.9, 0.2, 0.2)
METAL_COLOUR = (0.8, 0.8, 0.85)
GLASS_COLOUR = (0.05, 0.05, 0.05)

FLOOR_COLOUR_A = (0.9, 0.9, 0.9)
FLOOR_COLOUR_B = (0.2, 0.2, 0.2)


# =============================================================================
# Scene Factory
# =============================================================================


def create_three_spheres_scene(params: ThreeSpheresParams | None = None) -> tuple[Scene, Camera]:
    """Create the demo scene and a camera that frames it.

    Args:
        params: Optional ThreeSpheresParams. Defaults to ThreeSpheresParams().

    Returns:
        A tuple (scene, camera).
    """
    if params is None:
        params = ThreeSpheresParams()

    def sphere_at(x: float) -> Transform:
        return Transform.uniform_scaling(SPHERE_RADIUS).then(Transform.translation(x, 0.0, 0.0))

    objects = [
        SceneObject(Shape.sphere(), Material.glass(colour=GLASS_COLOUR), sphere_at(-params.spacing)),
        SceneObject(Shape.sphere(), Material.plastic(colour=PLASTIC_COLOUR), sphere_at(0.0)),
        SceneObject(Shape.sphere(), Material.metal(colour=METAL_COLOUR), sphere_at(params.spacing)),
    ]

    if params.floor:
        checkers = Pattern(PatternKind.CHECKERS, FLOOR_COLOUR_A, FLOOR_COLOUR_B)
        # Nudged just below the spheres so they rest on the floor without touching it
        floor = SceneObject(
            Shape.plane(),
            Material.plastic(pattern=checkers, specular=0.0),
            Transform.translation(0.0, FLOOR_HEIGHT - 1e-3, 0.0),
        )
        objects.append(floor)

    scene = Scene(
        objects=objects,
        lights=[PointLight(params.light_position, params.light_colour)],
        background=params.background,
    )

    camera = Camera(
        look_from=(0.0, 0.0, 5.0),
        look_at=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=80.0,
    )
    return scene, camera
