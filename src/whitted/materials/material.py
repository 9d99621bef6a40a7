"""Material variants and the GPU-side material registry.

A Material is a tagged variant (Plastic, Metal, Glass, Custom) that
resolves to one flat set of shading coefficients. The variant only
chooses defaults; kernels never branch on it. Each factory accepts keyword
overrides for any coefficient.

Variant defaults:

=========  =======  =======  ========  =========  ==========  ============  ===
kind       ambient  diffuse  specular  shininess  reflective  transparency  ior
=========  =======  =======  ========  =========  ==========  ============  ===
PLASTIC    0.1      0.9      0.9       200        0.0         0.0           1.0
METAL      0.1      0.3      0.9       300        0.9         0.0           1.0
GLASS      0.0      0.1      0.9       300        0.9         1.0           1.5
CUSTOM     caller supplies every coefficient (Plastic values if omitted)
=========  =======  =======  ========  =========  ==========  ============  ===

Example:
    >>> from whitted.materials.material import Material
    >>> red = Material.plastic(colour=(0.9, 0.1, 0.1))
    >>> mirror = Material.metal(reflective=1.0)
    >>> water = Material.glass(refractive_index=1.333)
"""

import logging
import math
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti

from whitted.core.ray import real
from whitted.core.types import Colour, as_colour
from whitted.errors import SceneError
from whitted.materials.pattern import Pattern

logger = logging.getLogger(__name__)


class MaterialKind(IntEnum):
    """Enumeration of material variants."""

    PLASTIC = 0
    METAL = 1
    GLASS = 2
    CUSTOM = 3


MATERIAL_DEFAULTS: dict[MaterialKind, dict[str, float]] = {
    MaterialKind.PLASTIC: {
        "ambient": 0.1,
        "diffuse": 0.9,
        "specular": 0.9,
        "shininess": 200.0,
        "reflective": 0.0,
        "transparency": 0.0,
        "refractive_index": 1.0,
    },
    MaterialKind.METAL: {
        "ambient": 0.1,
        "diffuse": 0.3,
        "specular": 0.9,
        "shininess": 300.0,
        "reflective": 0.9,
        "transparency": 0.0,
        "refractive_index": 1.0,
    },
    MaterialKind.GLASS: {
        "ambient": 0.0,
        "diffuse": 0.1,
        "specular": 0.9,
        "shininess": 300.0,
        "reflective": 0.9,
        "transparency": 1.0,
        "refractive_index": 1.5,
    },
}


@dataclass(frozen=True)
class Material:
    """Shading parameters for a surface.

    Attributes:
        kind: The variant this material was built from.
        colour: Flat base colour, used when there is no pattern.
        pattern: Optional procedural pattern replacing the flat colour.
        ambient: Ambient coefficient (always applied, even in shadow).
        diffuse: Lambertian coefficient.
        specular: Phong highlight coefficient.
        shininess: Phong highlight exponent.
        reflective: Weight of the mirror-reflected ray, in [0, 1].
        transparency: Weight of the refracted ray, in [0, 1].
        refractive_index: Index of refraction of the material (>= 1).
    """

    kind: MaterialKind = MaterialKind.CUSTOM
    colour: Colour = (1.0, 1.0, 1.0)
    pattern: Pattern | None = None
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MaterialKind(self.kind))
        object.__setattr__(self, "colour", as_colour(self.colour, "colour"))
        if self.pattern is not None and not isinstance(self.pattern, Pattern):
            raise SceneError(f"pattern must be a Pattern, got {type(self.pattern).__name__}")

        for name in ("ambient", "diffuse", "specular", "shininess"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0.0:
                raise SceneError(f"{name} must be a finite non-negative number, got {value}")
        for name in ("reflective", "transparency"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise SceneError(f"{name} must be in [0, 1], got {value}")
        if not math.isfinite(self.refractive_index) or self.refractive_index < 1.0:
            raise SceneError(f"refractive_index must be >= 1.0, got {self.refractive_index}")

    @classmethod
    def _from_kind(cls, kind: MaterialKind, **overrides) -> "Material":
        params = dict(MATERIAL_DEFAULTS[kind])
        params.update(overrides)
        return cls(kind=kind, **params)

    @classmethod
    def plastic(cls, **overrides) -> "Material":
        """Opaque, non-reflective material."""
        return cls._from_kind(MaterialKind.PLASTIC, **overrides)

    @classmethod
    def metal(cls, **overrides) -> "Material":
        """Opaque, strongly reflective material."""
        return cls._from_kind(MaterialKind.METAL, **overrides)

    @classmethod
    def glass(cls, **overrides) -> "Material":
        """Transparent, refractive material with Fresnel reflections."""
        return cls._from_kind(MaterialKind.GLASS, **overrides)

    @classmethod
    def custom(
        cls,
        *,
        colour: Colour = (1.0, 1.0, 1.0),
        pattern: Pattern | None = None,
        ambient: float = 0.1,
        diffuse: float = 0.9,
        specular: float = 0.9,
        shininess: float = 200.0,
        reflective: float = 0.0,
        transparency: float = 0.0,
        refractive_index: float = 1.0,
    ) -> "Material":
        """Material with every coefficient given explicitly."""
        return cls(
            MaterialKind.CUSTOM,
            colour,
            pattern,
            ambient,
            diffuse,
            specular,
            shininess,
            reflective,
            transparency,
            refractive_index,
        )


# =============================================================================
# Material Registry (Taichi fields)
# =============================================================================

MAX_MATERIALS = 1024

material_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_colours = ti.Vector.field(3, dtype=real, shape=MAX_MATERIALS)
material_pattern_ids = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_ambient = ti.field(dtype=real, shape=MAX_MATERIALS)
material_diffuse = ti.field(dtype=real, shape=MAX_MATERIALS)
material_specular = ti.field(dtype=real, shape=MAX_MATERIALS)
material_shininess = ti.field(dtype=real, shape=MAX_MATERIALS)
material_reflective = ti.field(dtype=real, shape=MAX_MATERIALS)
material_transparency = ti.field(dtype=real, shape=MAX_MATERIALS)
material_refractive_index = ti.field(dtype=real, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all registered materials."""
    num_materials[None] = 0


def add_material(material: Material, pattern_id: int = -1) -> int:
    """Register a material and return its material ID.

    Args:
        material: The material to upload.
        pattern_id: ID of the already-registered pattern replacing the flat
            colour, or -1 for none.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
    material_kinds[idx] = int(material.kind)
    material_colours[idx] = list(material.colour)
    material_pattern_ids[idx] = pattern_id
    material_ambient[idx] = material.ambient
    material_diffuse[idx] = material.diffuse
    material_specular[idx] = material.specular
    material_shininess[idx] = material.shininess
    material_reflective[idx] = material.reflective
    material_transparency[idx] = material.transparency
    material_refractive_index[idx] = material.refractive_index
    num_materials[None] = idx + 1
    logger.debug(
        "material %d: %s colour=%s pattern=%d", idx, material.kind.name, material.colour, pattern_id
    )
    return idx


def get_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_materials[None])


def get_material_info(material_id: int) -> dict[str, float | int | tuple[float, float, float]]:
    """Read back a registered material's coefficients for debugging.

    Raises:
        IndexError: If material_id is not a registered material.
    """
    if not 0 <= material_id < get_material_count():
        raise IndexError(f"Material {material_id} is not registered")
    c = material_colours[material_id]
    return {
        "kind": int(material_kinds[material_id]),
        "colour": (float(c[0]), float(c[1]), float(c[2])),
        "pattern_id": int(material_pattern_ids[material_id]),
        "ambient": float(material_ambient[material_id]),
        "diffuse": float(material_diffuse[material_id]),
        "specular": float(material_specular[material_id]),
        "shininess": float(material_shininess[material_id]),
        "reflective": float(material_reflective[material_id]),
        "transparency": float(material_transparency[material_id]),
        "refractive_index": float(material_refractive_index[material_id]),
    }
