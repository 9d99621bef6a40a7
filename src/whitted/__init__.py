"""Taichi implementation of a Whitted-style ray tracer.

This package renders scenes of transformed primitives with Phong shading,
hard shadows from point lights, mirror reflection and Fresnel-weighted
refraction. Rendering runs inside Taichi kernels, one parallel worker per
image row.

Subpackages:
    core: Vector math, transforms, sampling, the trace kernel and renderer
    geometry: Local-space primitives (sphere, plane, box, disk, cylinder, cone)
    materials: Materials, procedural patterns and the lighting model
    scene: Scene model, object storage, lights and scene upload
    camera: Look-at camera with depth of field

Taichi fields are created when their modules are imported, so call
``whitted.core.settings.init_backend()`` before importing anything other
than ``whitted.core``, ``whitted.errors`` and ``whitted.core.transform``.
"""

__version__ = "0.1.0"
