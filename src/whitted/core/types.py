"""Host-side type aliases and validation helpers for scene values."""

import math
from collections.abc import Sequence

from whitted.errors import SceneError

Point3 = tuple[float, float, float]
Vector3 = tuple[float, float, float]
Colour = tuple[float, float, float]


def as_triple(value: Sequence[float], name: str) -> tuple[float, float, float]:
    """Convert a 3-sequence to a tuple of finite floats.

    Args:
        value: Any sequence of three numbers.
        name: Field name used in the error message.

    Returns:
        The value as a tuple of Python floats.

    Raises:
        SceneError: If the value does not have three finite components.
    """
    try:
        items = tuple(float(v) for v in value)
    except (TypeError, ValueError) as exc:
        raise SceneError(f"{name} must be a sequence of three numbers, got {value!r}") from exc
    if len(items) != 3:
        raise SceneError(f"{name} must have exactly three components, got {len(items)}")
    if not all(math.isfinite(v) for v in items):
        raise SceneError(f"{name} components must be finite, got {items}")
    return items  # type: ignore[return-value]


def as_colour(value: Sequence[float], name: str = "colour") -> Colour:
    """Convert a 3-sequence to a colour, rejecting negative channels.

    Channels above 1.0 are allowed; clamping happens only when the image is
    encoded.

    Raises:
        SceneError: If a component is negative or not finite.
    """
    colour = as_triple(value, name)
    if any(c < 0.0 for c in colour):
        raise SceneError(f"{name} components must be non-negative, got {colour}")
    return colour
