"""Point lights and the background colour.

Lights are stored Structure-of-Arrays in Taichi fields like every other
scene registry. The background colour is what a ray that escapes the
scene contributes.
"""

import logging
from dataclasses import dataclass

import taichi as ti

from whitted.core.ray import real, vec3
from whitted.core.types import Colour, Point3, as_colour, as_triple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointLight:
    """An infinitely small light source.

    Attributes:
        position: World-space position.
        colour: Light colour and intensity (channels may exceed 1).
    """

    position: Point3
    colour: Colour = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_triple(self.position, "light position"))
        object.__setattr__(self, "colour", as_colour(self.colour, "light colour"))


MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=real, shape=MAX_LIGHTS)
light_colours = ti.Vector.field(3, dtype=real, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

_background = ti.Vector.field(3, dtype=real, shape=())


def clear_lights() -> None:
    """Remove all lights and reset the background to black."""
    num_lights[None] = 0
    _background[None] = [0.0, 0.0, 0.0]


def add_light(light: PointLight) -> int:
    """Register a point light and return its index.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = list(light.position)
    light_colours[idx] = list(light.colour)
    num_lights[None] = idx + 1
    logger.debug("light %d at %s colour=%s", idx, light.position, light.colour)
    return idx


def get_light_count() -> int:
    """Get the number of registered lights."""
    return int(num_lights[None])


def set_background(colour: Colour) -> None:
    """Set the colour returned for rays that hit nothing."""
    _background[None] = list(as_colour(colour, "background"))


def get_background_colour() -> Colour:
    """Read the background colour back from its field."""
    c = _background[None]
    return (float(c[0]), float(c[1]), float(c[2]))


@ti.func
def get_background() -> vec3:
    """Background colour for escaped rays."""
    return _background[None]
