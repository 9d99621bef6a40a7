"""Render configuration and Taichi backend initialization.

Example:
    >>> from whitted.core.settings import RenderSettings, init_backend
    >>> init_backend()  # CPU, float64
    >>> settings = RenderSettings(width=320, height=240, samples=4, max_depth=5)
"""

import logging
from dataclasses import dataclass

import taichi as ti

logger = logging.getLogger(__name__)

# Maximum supported image dimensions (render buffers are preallocated)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Maximum reflection/refraction depth; sizes the per-row ray stack
MAX_DEPTH = 50


def init_backend(arch=None, debug: bool = False, seed: int = 0) -> None:
    """Initialize Taichi for double-precision rendering.

    Must be called before importing any module that declares Taichi fields
    (geometry, materials, scene, camera, integrator and renderer).

    Args:
        arch: Taichi architecture. Defaults to ti.cpu.
        debug: Enable Taichi's bounds checking.
        seed: Seed for Taichi's own RNG. Rendering itself uses a
            deterministic hash and does not depend on it.
    """
    ti.init(
        arch=ti.cpu if arch is None else arch,
        default_fp=ti.f64,
        default_ip=ti.i32,
        debug=debug,
        random_seed=seed,
    )
    logger.debug("Taichi initialized (arch=%s, debug=%s)", arch or "cpu", debug)


@dataclass(frozen=True)
class RenderSettings:
    """The render configuration surface.

    Attributes:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).
        samples: Samples per pixel. With one sample the ray passes through
            the pixel centre; with more, each sample is jittered.
        max_depth: Maximum number of reflection/refraction bounces. 0 renders
            black, 1 renders surfaces without reflection or refraction.
        seed: Seed for the deterministic sample jitter.
    """

    width: int
    height: int
    samples: int = 1
    max_depth: int = 5
    seed: int = 0

    def __post_init__(self) -> None:
        if not 0 < self.width <= MAX_IMAGE_WIDTH:
            raise ValueError(f"width must be in [1, {MAX_IMAGE_WIDTH}], got {self.width}")
        if not 0 < self.height <= MAX_IMAGE_HEIGHT:
            raise ValueError(f"height must be in [1, {MAX_IMAGE_HEIGHT}], got {self.height}")
        if self.samples < 1:
            raise ValueError(f"samples must be at least 1, got {self.samples}")
        if not 0 <= self.max_depth <= MAX_DEPTH:
            raise ValueError(f"max_depth must be in [0, {MAX_DEPTH}], got {self.max_depth}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height
