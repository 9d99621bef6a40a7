"""Materials module for surface appearance.

Components:
    material: Material variants (Plastic, Metal, Glass, Custom) and registry
    pattern: Stripes, gradient, rings and checkers patterns and registry
    shading: Phong lighting for one light (import directly; it depends on
        the scene registries)

Materials and patterns are uploaded into Structure-of-Arrays Taichi fields
and referenced from objects by integer ID.
"""

from .material import (
    MATERIAL_DEFAULTS,
    MAX_MATERIALS,
    Material,
    MaterialKind,
    add_material,
    clear_materials,
    get_material_count,
    get_material_info,
)
from .pattern import (
    MAX_PATTERNS,
    Pattern,
    PatternKind,
    add_pattern,
    clear_patterns,
    evaluate_pattern,
    get_pattern_count,
    pattern_colour,
    pattern_colour_at,
)

__all__ = [
    "MATERIAL_DEFAULTS",
    "MAX_MATERIALS",
    "MAX_PATTERNS",
    "Material",
    "MaterialKind",
    "Pattern",
    "PatternKind",
    "add_material",
    "add_pattern",
    "clear_materials",
    "clear_patterns",
    "evaluate_pattern",
    "get_material_count",
    "get_material_info",
    "get_pattern_count",
    "pattern_colour",
    "pattern_colour_at",
]
