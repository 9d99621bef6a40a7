"""Camera module for primary ray generation.

Components:
    camera: Look-at camera with a longer-side field of view and thin-lens
        depth of field; uploads its basis to Taichi fields and generates
        rays inside kernels
"""

from .camera import Camera, get_camera_info, get_ray, ray_for_pixel, setup_camera

__all__ = [
    "Camera",
    "get_camera_info",
    "get_ray",
    "ray_for_pixel",
    "setup_camera",
]
