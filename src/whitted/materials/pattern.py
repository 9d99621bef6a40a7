"""Procedural surface patterns: stripes, gradient, rings and checkers.

A pattern maps a point in its own local space to one of two colours (or a
blend of them). Patterns carry a transform independent of the object they
decorate; a world-space point is mapped through the object's inverse
transform and then the pattern's inverse transform before evaluation.

Pattern functions (p is the pattern-space point):
    Stripes:  colour_a when floor(p.x) is even, else colour_b
    Gradient: colour_a + (colour_b - colour_a) * (p.x - floor(p.x))
    Rings:    colour_a when floor(sqrt(p.x^2 + p.z^2)) is even, else colour_b
    Checkers: colour_a when floor(p.x) + floor(p.y) + floor(p.z) is even

Example:
    >>> from whitted.materials.pattern import Pattern, PatternKind
    >>> from whitted.core.transform import Transform
    >>> stripes = Pattern(
    ...     PatternKind.STRIPES,
    ...     colour_a=(1.0, 1.0, 1.0),
    ...     colour_b=(0.0, 0.0, 0.0),
    ...     transform=Transform.uniform_scaling(0.25),
    ... )
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum

import taichi as ti

from whitted.core.ray import real, transform_point, vec3
from whitted.core.transform import Transform
from whitted.core.types import Colour, Point3, as_colour, as_triple

logger = logging.getLogger(__name__)

# Added before flooring so points a rounding error below an integer
# boundary are classified with that boundary
_BOUNDARY_EPSILON = 1e-9


class PatternKind(IntEnum):
    """Enumeration of procedural pattern functions."""

    STRIPES = 0
    GRADIENT = 1
    RINGS = 2
    CHECKERS = 3


@dataclass(frozen=True)
class Pattern:
    """A two-colour procedural pattern with its own transform.

    Attributes:
        kind: Which pattern function to evaluate.
        colour_a: First colour (even cells, gradient start).
        colour_b: Second colour (odd cells, gradient end).
        transform: Pattern-to-object transform.
    """

    kind: PatternKind
    colour_a: Colour
    colour_b: Colour
    transform: Transform = field(default_factory=Transform.identity)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", PatternKind(self.kind))
        object.__setattr__(self, "colour_a", as_colour(self.colour_a, "colour_a"))
        object.__setattr__(self, "colour_b", as_colour(self.colour_b, "colour_b"))


# =============================================================================
# Pattern Registry (Taichi fields)
# =============================================================================

MAX_PATTERNS = 1024

pattern_kinds = ti.field(dtype=ti.i32, shape=MAX_PATTERNS)
pattern_colour_a = ti.Vector.field(3, dtype=real, shape=MAX_PATTERNS)
pattern_colour_b = ti.Vector.field(3, dtype=real, shape=MAX_PATTERNS)
pattern_inverses = ti.Matrix.field(4, 4, dtype=real, shape=MAX_PATTERNS)
num_patterns = ti.field(dtype=ti.i32, shape=())


def clear_patterns() -> None:
    """Clear all registered patterns."""
    num_patterns[None] = 0


def add_pattern(pattern: Pattern) -> int:
    """Register a pattern and return its pattern ID.

    Args:
        pattern: The pattern to upload.

    Returns:
        The index of the added pattern.

    Raises:
        RuntimeError: If the maximum number of patterns is exceeded.
    """
    idx = num_patterns[None]
    if idx >= MAX_PATTERNS:
        raise RuntimeError(f"Maximum number of patterns ({MAX_PATTERNS}) exceeded")
    pattern_kinds[idx] = int(pattern.kind)
    pattern_colour_a[idx] = list(pattern.colour_a)
    pattern_colour_b[idx] = list(pattern.colour_b)
    pattern_inverses[idx] = ti.Matrix(pattern.transform.inverse.tolist())
    num_patterns[None] = idx + 1
    logger.debug("pattern %d: %s", idx, pattern.kind.name)
    return idx


def get_pattern_count() -> int:
    """Get the number of registered patterns."""
    return int(num_patterns[None])


# =============================================================================
# Pattern evaluation
# =============================================================================


@ti.func
def _parity(value: real) -> ti.i32:
    """0 when floor(value) is even, 1 when odd (also for negative values)."""
    return ti.cast(ti.floor(value + _BOUNDARY_EPSILON), ti.i32) % 2


@ti.func
def pattern_colour(kind: ti.i32, colour_a: vec3, colour_b: vec3, point: vec3) -> vec3:
    """Evaluate a pattern function at a point in pattern space.

    Args:
        kind: A PatternKind value.
        colour_a: First colour.
        colour_b: Second colour.
        point: The point, already mapped into pattern space.

    Returns:
        The pattern colour at the point.
    """
    colour = colour_a
    if kind == int(PatternKind.STRIPES):
        if _parity(point.x) != 0:
            colour = colour_b
    elif kind == int(PatternKind.GRADIENT):
        fraction = point.x - ti.floor(point.x)
        colour = colour_a + (colour_b - colour_a) * fraction
    elif kind == int(PatternKind.RINGS):
        if _parity(ti.sqrt(point.x * point.x + point.z * point.z)) != 0:
            colour = colour_b
    elif kind == int(PatternKind.CHECKERS):
        if (_parity(point.x) + _parity(point.y) + _parity(point.z)) % 2 != 0:
            colour = colour_b
    return colour


@ti.func
def pattern_colour_at(pattern_id: ti.i32, object_point: vec3) -> vec3:
    """Evaluate a registered pattern at an object-space point."""
    local = transform_point(pattern_inverses[pattern_id], object_point)
    return pattern_colour(
        pattern_kinds[pattern_id],
        pattern_colour_a[pattern_id],
        pattern_colour_b[pattern_id],
        local,
    )


_query_colour = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _query_pattern(pattern_id: ti.i32, x: real, y: real, z: real):
    _query_colour[None] = pattern_colour_at(pattern_id, vec3(x, y, z))


def evaluate_pattern(pattern_id: int, object_point: Point3) -> Colour:
    """Host-side query: colour of a registered pattern at an object-space point.

    Raises:
        IndexError: If pattern_id is not a registered pattern.
    """
    if not 0 <= pattern_id < get_pattern_count():
        raise IndexError(f"Pattern {pattern_id} is not registered")
    x, y, z = as_triple(object_point, "object_point")
    _query_pattern(pattern_id, x, y, z)
    c = _query_colour[None]
    return (float(c[0]), float(c[1]), float(c[2]))

