"""High-level renderer that ties a Scene, a Camera and RenderSettings together.

This module provides a convenient wrapper around the core integrator:
- Scene and camera upload into the Taichi registries
- Progressive rendering, one sample pass at a time
- Progress callbacks or a generator for UI updates
- Conversion of the linear image to displayable 8-bit values

The registries are module-level Taichi fields, so only one scene can be
resident at a time. A Renderer re-uploads its scene whenever another
Renderer has been used since.

Example:
    >>> from whitted.core.settings import RenderSettings, init_backend
    >>> init_backend()
    >>> from whitted.core.renderer import Renderer, to_display
    >>> from whitted.scene.three_spheres import create_three_spheres_scene
    >>>
    >>> scene, camera = create_three_spheres_scene()
    >>> renderer = Renderer(scene, camera, RenderSettings(width=320, height=240, samples=4))
    >>> image = renderer.render(callback=lambda done, total: print(f"{done}/{total}"))
    >>> pixels = to_display(image)
"""

import logging
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from whitted.camera.camera import Camera, setup_camera
from whitted.core.integrator import (
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)
from whitted.core.settings import RenderSettings
from whitted.scene.manager import SceneManager
from whitted.scene.model import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (samples_done, samples_total)
ProgressCallback = Callable[[int, int], None]

# Renderer whose scene currently occupies the Taichi registries
_resident: "Renderer | None" = None


class Renderer:
    """Renders a scene through a camera with fixed settings.

    Attributes:
        scene: The immutable scene being rendered.
        camera: The camera configuration.
        settings: Image size, samples per pixel, depth and seed.
    """

    def __init__(self, scene: Scene, camera: Camera, settings: RenderSettings) -> None:
        """Upload the scene and camera and clear the render target.

        Raises:
            SceneError: If the scene cannot be uploaded.
            RuntimeError: If the scene exceeds a registry capacity.
        """
        self.scene = scene
        self.camera = camera
        self.settings = settings
        self._manager = SceneManager()
        self._samples_done = 0
        self._upload()

    def _upload(self) -> None:
        global _resident
        self._manager.load(self.scene)
        setup_camera(self.camera, self.settings.width, self.settings.height)
        setup_render_target(self.settings.width, self.settings.height)
        self._samples_done = 0
        _resident = self

    def _ensure_resident(self) -> None:
        if _resident is not self:
            logger.debug("Re-uploading scene for %r", self)
            self._upload()

    @property
    def sample_count(self) -> int:
        """Number of samples per pixel accumulated so far."""
        if _resident is not self:
            return self._samples_done
        return get_total_samples()

    def reset(self) -> None:
        """Discard accumulated samples so the next render starts fresh."""
        self._ensure_resident()
        clear_render_target()
        self._samples_done = 0

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render the remaining samples, yielding after each pass.

        Yields:
            Tuple of (samples_done, samples_total).
        """
        self._ensure_resident()
        settings = self.settings
        total = settings.samples
        if self.sample_count == 0:
            logger.info(
                "Rendering %dx%d, %d samples, max depth %d",
                settings.width,
                settings.height,
                total,
                settings.max_depth,
            )
        start = time.perf_counter()

        while self.sample_count < total:
            render_image(
                num_samples=1,
                max_depth=settings.max_depth,
                seed=settings.seed,
                jitter=total > 1,
            )
            self._samples_done = get_total_samples()
            yield (self._samples_done, total)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)

    def render(self, callback: ProgressCallback | None = None) -> npt.NDArray[np.float64]:
        """Render the image, calling callback after each sample pass.

        Args:
            callback: Optional function receiving (samples_done, samples_total).

        Returns:
            float64 array of shape (height, width, 3), row 0 at the top.
        """
        for done, total in self.render_progressive():
            if callback is not None:
                callback(done, total)
        return self.get_image_numpy()

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the accumulated image as a (height, width, 3) float64 array."""
        self._ensure_resident()
        return get_image_numpy()

    def __repr__(self) -> str:
        s = self.settings
        return (
            f"Renderer({len(self.scene.objects)} objects, {s.width}x{s.height}, "
            f"samples={s.samples}, max_depth={s.max_depth})"
        )


def render_scene(
    scene: Scene,
    camera: Camera,
    settings: RenderSettings,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.float64]:
    """Render a scene in one call and return the linear image."""
    return Renderer(scene, camera, settings).render(callback)


def to_display(image: npt.ArrayLike, gamma: float = 2.0) -> npt.NDArray[np.uint8]:
    """Convert a linear image to 8-bit display values.

    Clamps to [0, 1] and applies gamma correction (value ** (1 / gamma)).

    Args:
        image: Array of shape (height, width, 3).
        gamma: Gamma correction value. 1.0 disables correction.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    linear = np.clip(np.nan_to_num(np.asarray(image, dtype=np.float64)), 0.0, 1.0)
    corrected = np.power(linear, 1.0 / gamma)
    return (corrected * 255.0 + 0.5).astype(np.uint8)
