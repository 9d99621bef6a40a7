"""Exceptions raised while building or uploading a scene."""


class SceneError(ValueError):
    """An invalid scene configuration.

    Raised at construction or upload time, before any rendering starts:
    singular transforms, shapes with minimum > maximum, out-of-range
    material coefficients, degenerate cameras and similar faults.
    """
