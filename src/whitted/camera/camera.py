"""Look-at camera with optional thin-lens depth of field.

The camera builds an orthonormal basis from its view parameters:
- forward: normalize(look_at - look_from)
- right:   normalize(forward x vup)
- up:      right x forward

The virtual image plane sits at unit distance along forward. Its longer
side spans 2 * tan(vfov / 2) and the shorter side is cut to the image
aspect ratio, so vfov is the horizontal field of view for landscape
images and the vertical one for portrait images. Pixel (0, 0) is the
top-left corner of the image, matching raster order.

With aperture > 0, ray origins are spread over a lens disk of that radius
around look_from. Every ray for the same sub-pixel position still passes
through the same point on the focal plane (at focus_distance along
forward), so only geometry away from that plane blurs.

Example:
    >>> from whitted.core.settings import init_backend
    >>> init_backend()
    >>> from whitted.camera.camera import Camera, setup_camera, ray_for_pixel
    >>> camera = Camera(look_from=(0.0, 0.0, 5.0), look_at=(0.0, 0.0, 0.0), vfov=60.0)
    >>> setup_camera(camera, 320, 240)
    >>> origin, direction = ray_for_pixel(160, 120)
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from whitted.core.ray import Ray, make_ray, normalize, real, vec2
from whitted.core.types import Point3, Vector3, as_triple
from whitted.errors import SceneError

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Configuration for a look-at camera.

    Attributes:
        look_from: Camera position in world space.
        look_at: Point the camera is looking at.
        vup: Approximate up direction (must not be parallel to the view).
        vfov: Field of view across the longer image side, in degrees,
            in (0, 180).
        aperture: Lens radius. 0 gives a pinhole camera.
        focus_distance: Distance to the focal plane along the view
            direction. Defaults to |look_at - look_from|.
    """

    look_from: Point3 = (0.0, 0.0, 0.0)
    look_at: Point3 = (0.0, 0.0, -1.0)
    vup: Vector3 = (0.0, 1.0, 0.0)
    vfov: float = 90.0
    aperture: float = 0.0
    focus_distance: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "look_from", as_triple(self.look_from, "look_from"))
        object.__setattr__(self, "look_at", as_triple(self.look_at, "look_at"))
        object.__setattr__(self, "vup", as_triple(self.vup, "vup"))
        if not 0.0 < self.vfov < 180.0:
            raise SceneError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if not math.isfinite(self.aperture) or self.aperture < 0.0:
            raise SceneError(f"aperture must be non-negative, got {self.aperture}")
        if self.focus_distance is not None and not (
            math.isfinite(self.focus_distance) and self.focus_distance > 0.0
        ):
            raise SceneError(f"focus_distance must be positive, got {self.focus_distance}")
        # Validates look_from != look_at and vup not parallel to the view
        self.basis()

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Compute the (forward, right, up) orthonormal basis.

        Raises:
            SceneError: If the view direction or the right vector is degenerate.
        """
        look_from = np.array(self.look_from, dtype=np.float64)
        look_at = np.array(self.look_at, dtype=np.float64)
        vup = np.array(self.vup, dtype=np.float64)

        view = look_at - look_from
        view_length = np.linalg.norm(view)
        if view_length == 0.0:
            raise SceneError("look_from and look_at must differ")
        forward = view / view_length

        right = np.cross(forward, vup)
        right_length = np.linalg.norm(right)
        if right_length < 1e-12:
            raise SceneError("vup must not be parallel to the view direction")
        right = right / right_length

        up = np.cross(right, forward)
        return forward, right, up

    @property
    def resolved_focus_distance(self) -> float:
        """Focus distance, defaulting to the look-at distance."""
        if self.focus_distance is not None:
            return float(self.focus_distance)
        return float(np.linalg.norm(np.subtract(self.look_at, self.look_from)))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=real, shape=())
_camera_forward = ti.Vector.field(3, dtype=real, shape=())
_camera_right = ti.Vector.field(3, dtype=real, shape=())
_camera_up = ti.Vector.field(3, dtype=real, shape=())

# Image-plane half extents at unit distance
_half_width = ti.field(dtype=real, shape=())
_half_height = ti.field(dtype=real, shape=())

_aperture = ti.field(dtype=real, shape=())
_focus_distance = ti.field(dtype=real, shape=())
_image_size = ti.Vector.field(2, dtype=ti.i32, shape=())


def setup_camera(camera: Camera, width: int, height: int) -> None:
    """Upload camera state for an image of the given size.

    Args:
        camera: Camera configuration.
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        ValueError: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    forward, right, up = camera.basis()
    half_view = math.tan(math.radians(camera.vfov) / 2.0)
    if width >= height:
        half_width, half_height = half_view, half_view * height / width
    else:
        half_width, half_height = half_view * width / height, half_view

    _camera_origin[None] = list(camera.look_from)
    _camera_forward[None] = forward.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _half_width[None] = half_width
    _half_height[None] = half_height
    _aperture[None] = camera.aperture
    _focus_distance[None] = camera.resolved_focus_distance
    _image_size[None] = [width, height]

    logger.debug(
        "Camera at %s forward=%s right=%s up=%s half_extent=(%.4f, %.4f)",
        camera.look_from,
        forward.round(6).tolist(),
        right.round(6).tolist(),
        up.round(6).tolist(),
        half_width,
        half_height,
    )


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(px: ti.i32, py: ti.i32, offset: vec2, lens: vec2) -> Ray:
    """Generate a camera ray for a pixel.

    Args:
        px: Pixel column (0 = left).
        py: Pixel row (0 = top).
        offset: Sub-pixel position in [0, 1)^2; (0.5, 0.5) is the centre.
        lens: Point in the unit disk selecting where on the lens the ray
            starts. Ignored for a pinhole camera.

    Returns:
        A ray with a unit-length direction.
    """
    size = _image_size[None]
    sx = (2.0 * (ti.cast(px, real) + offset.x) / ti.cast(size.x, real) - 1.0) * _half_width[None]
    sy = (1.0 - 2.0 * (ti.cast(py, real) + offset.y) / ti.cast(size.y, real)) * _half_height[None]

    look_from = _camera_origin[None]
    right = _camera_right[None]
    up = _camera_up[None]
    direction = _camera_forward[None] + sx * right + sy * up

    origin = look_from
    aperture = _aperture[None]
    if aperture > 0.0:
        focal_point = look_from + _focus_distance[None] * direction
        origin = look_from + aperture * (lens.x * right + lens.y * up)
        direction = focal_point - origin

    return make_ray(origin, normalize(direction))


# =============================================================================
# Utility Functions
# =============================================================================

_query_origin = ti.Vector.field(3, dtype=real, shape=())
_query_direction = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _query_ray(px: ti.i32, py: ti.i32, ox: real, oy: real, lx: real, ly: real):
    ray = get_ray(px, py, vec2(ox, oy), vec2(lx, ly))
    _query_origin[None] = ray.origin
    _query_direction[None] = ray.direction


def ray_for_pixel(
    px: int,
    py: int,
    sample_offset: tuple[float, float] = (0.5, 0.5),
    lens_sample: tuple[float, float] = (0.0, 0.0),
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Host-side ray generation for the uploaded camera.

    Args:
        px: Pixel column (0 = left).
        py: Pixel row (0 = top).
        sample_offset: Sub-pixel position in [0, 1)^2.
        lens_sample: Point in the unit disk on the lens.

    Returns:
        Tuple (origin, direction) with a unit-length direction.
    """
    _query_ray(px, py, sample_offset[0], sample_offset[1], lens_sample[0], lens_sample[1])
    o = _query_origin[None]
    d = _query_direction[None]
    return (float(o[0]), float(o[1]), float(o[2])), (float(d[0]), float(d[1]), float(d[2]))


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, forward, right, up, half_extent,
        aperture_focus and image_size.
    """

    def _vec(field) -> tuple[float, float, float]:
        v = field[None]
        return (float(v[0]), float(v[1]), float(v[2]))

    size = _image_size[None]
    return {
        "origin": _vec(_camera_origin),
        "forward": _vec(_camera_forward),
        "right": _vec(_camera_right),
        "up": _vec(_camera_up),
        "half_extent": (float(_half_width[None]), float(_half_height[None])),
        "aperture_focus": (float(_aperture[None]), float(_focus_distance[None])),
        "image_size": (int(size[0]), int(size[1])),
    }
