"""Affine transforms between object space and world space.

A Transform wraps an invertible 4x4 float64 matrix together with its
inverse, computed once when the transform is built. Objects and patterns
upload both matrices so kernels never invert anything per ray.

Operations compose left-to-right: building a transform from
``[op1, op2, op3]`` yields ``M = op3 @ op2 @ op1``, so ``op1`` is applied
to a point first. Rotations take angles in degrees.

Example:
    >>> from whitted.core.transform import Transform
    >>> t = Transform.from_operations([
    ...     ("scale_uniform", 2.0),
    ...     ("translate", 0.0, 1.0, 0.0),
    ... ])
    >>> t.apply_point((1.0, 0.0, 0.0))
    (2.0, 1.0, 0.0)
"""

import math
from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np
import numpy.typing as npt

from whitted.core.types import Point3, Vector3, as_triple
from whitted.errors import SceneError

# Determinant magnitude below which a matrix is treated as singular
SINGULAR_EPSILON = 1e-12


class Transform:
    """An invertible affine transform with a cached inverse.

    Instances are immutable: the stored arrays are marked read-only and
    every composition returns a new Transform.

    Attributes:
        matrix: The object-to-world matrix (4x4, float64).
        inverse: The world-to-object matrix (4x4, float64).
    """

    __slots__ = ("_matrix", "_inverse")

    def __init__(self, matrix: npt.ArrayLike | None = None) -> None:
        """Create a transform from a 4x4 matrix.

        Args:
            matrix: A 4x4 matrix. Defaults to the identity.

        Raises:
            SceneError: If the matrix is not 4x4, has non-finite entries or
                is not invertible.
        """
        m = np.identity(4) if matrix is None else np.array(matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise SceneError(f"Transform matrix must be 4x4, got shape {m.shape}")
        if not np.all(np.isfinite(m)):
            raise SceneError("Transform matrix has non-finite entries")
        if abs(np.linalg.det(m)) < SINGULAR_EPSILON:
            raise SceneError("Transform matrix is not invertible")

        inverse = np.linalg.inv(m)
        m.setflags(write=False)
        inverse.setflags(write=False)
        self._matrix = m
        self._inverse = inverse

    @property
    def matrix(self) -> npt.NDArray[np.float64]:
        """Object-to-world matrix."""
        return self._matrix

    @property
    def inverse(self) -> npt.NDArray[np.float64]:
        """World-to-object matrix."""
        return self._inverse

    @property
    def inverse_transpose(self) -> npt.NDArray[np.float64]:
        """Matrix mapping object-space normals to world space."""
        return self._inverse.T

    # =========================================================================
    # Elementary operations
    # =========================================================================

    @classmethod
    def identity(cls) -> "Transform":
        """Return the identity transform."""
        return cls()

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> "Transform":
        """Return a translation by (x, y, z)."""
        m = np.identity(4)
        m[:3, 3] = (x, y, z)
        return cls(m)

    @classmethod
    def scaling(cls, x: float, y: float, z: float) -> "Transform":
        """Return a non-uniform scale along each axis."""
        return cls(np.diag((x, y, z, 1.0)))

    @classmethod
    def uniform_scaling(cls, factor: float) -> "Transform":
        """Return a uniform scale by factor."""
        return cls.scaling(factor, factor, factor)

    @classmethod
    def rotation_x(cls, degrees: float) -> "Transform":
        """Return a right-handed rotation about the x-axis."""
        c, s = _cos_sin(degrees)
        m = np.identity(4)
        m[1, 1], m[1, 2] = c, -s
        m[2, 1], m[2, 2] = s, c
        return cls(m)

    @classmethod
    def rotation_y(cls, degrees: float) -> "Transform":
        """Return a right-handed rotation about the y-axis."""
        c, s = _cos_sin(degrees)
        m = np.identity(4)
        m[0, 0], m[0, 2] = c, s
        m[2, 0], m[2, 2] = -s, c
        return cls(m)

    @classmethod
    def rotation_z(cls, degrees: float) -> "Transform":
        """Return a right-handed rotation about the z-axis."""
        c, s = _cos_sin(degrees)
        m = np.identity(4)
        m[0, 0], m[0, 1] = c, -s
        m[1, 0], m[1, 1] = s, c
        return cls(m)

    @classmethod
    def shearing(
        cls, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float
    ) -> "Transform":
        """Return a shear where each coordinate moves in proportion to the others.

        ``xy`` is how much x changes in proportion to y, and so on.
        """
        m = np.identity(4)
        m[0, 1], m[0, 2] = xy, xz
        m[1, 0], m[1, 2] = yx, yz
        m[2, 0], m[2, 1] = zx, zy
        return cls(m)

    # =========================================================================
    # Composition
    # =========================================================================

    def then(self, other: "Transform") -> "Transform":
        """Return the transform applying self first, then other."""
        return Transform(other.matrix @ self.matrix)

    def __matmul__(self, other: "Transform") -> "Transform":
        return Transform(self.matrix @ other.matrix)

    @classmethod
    def compose(cls, transforms: Iterable["Transform"]) -> "Transform":
        """Chain transforms left-to-right (the first one is applied first)."""
        result = cls.identity()
        for transform in transforms:
            result = result.then(transform)
        return result

    @classmethod
    def from_operations(cls, operations: Iterable[Sequence[Any]]) -> "Transform":
        """Build a transform from a list of named operations.

        Each operation is a sequence whose first item is the operation name
        and whose remaining items are its numeric arguments:

        ========================  ==========================
        name                      arguments
        ========================  ==========================
        ``translate``             x, y, z
        ``scale``                 x, y, z
        ``scale_uniform``         factor
        ``rotate_x``              degrees
        ``rotate_y``              degrees
        ``rotate_z``              degrees
        ``shear``                 xy, xz, yx, yz, zx, zy
        ========================  ==========================

        Args:
            operations: Operations in configuration order.

        Returns:
            The composed transform ``opN @ ... @ op1``.

        Raises:
            SceneError: For an unknown name, wrong argument count, or a
                resulting matrix that is not invertible.
        """
        transforms = []
        for operation in operations:
            if not operation:
                raise SceneError("Empty transform operation")
            name, *args = operation
            builder = _OPERATIONS.get(name)
            if builder is None:
                raise SceneError(
                    f"Unknown transform operation {name!r}; "
                    f"expected one of {sorted(_OPERATIONS)}"
                )
            factory, arity = builder
            if len(args) != arity:
                raise SceneError(f"Operation {name!r} takes {arity} arguments, got {len(args)}")
            try:
                values = [float(a) for a in args]
            except (TypeError, ValueError) as exc:
                raise SceneError(f"Operation {name!r} has non-numeric arguments {args!r}") from exc
            transforms.append(factory(*values))
        return cls.compose(transforms)

    # =========================================================================
    # Host-side application
    # =========================================================================

    def apply_point(self, point: Point3) -> Point3:
        """Map an object-space point to world space."""
        return _apply(self._matrix, as_triple(point, "point"), 1.0)

    def apply_vector(self, vector: Vector3) -> Vector3:
        """Map an object-space direction to world space (ignores translation)."""
        return _apply(self._matrix, as_triple(vector, "vector"), 0.0)

    def apply_normal(self, normal: Vector3) -> Vector3:
        """Map an object-space normal to world space and renormalize.

        A zero-length result is returned as the zero vector.
        """
        x, y, z = _apply(self.inverse_transpose, as_triple(normal, "normal"), 0.0)
        length = math.sqrt(x * x + y * y + z * z)
        if length == 0.0:
            return (0.0, 0.0, 0.0)
        return (x / length, y / length, z / length)

    def inverted(self) -> "Transform":
        """Return the inverse transform."""
        return Transform(self._inverse)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    def __hash__(self) -> int:
        return hash(self._matrix.tobytes())

    def __repr__(self) -> str:
        rows = ", ".join(str(list(row)) for row in self._matrix.round(6))
        return f"Transform([{rows}])"


def _cos_sin(degrees: float) -> tuple[float, float]:
    radians = math.radians(degrees)
    return math.cos(radians), math.sin(radians)


def _apply(matrix: npt.NDArray[np.float64], v: tuple[float, float, float], w: float) -> tuple[float, float, float]:
    x, y, z, _ = matrix @ np.array((v[0], v[1], v[2], w))
    return (float(x), float(y), float(z))


_OPERATIONS = {
    "translate": (Transform.translation, 3),
    "scale": (Transform.scaling, 3),
    "scale_uniform": (Transform.uniform_scaling, 1),
    "rotate_x": (Transform.rotation_x, 1),
    "rotate_y": (Transform.rotation_y, 1),
    "rotate_z": (Transform.rotation_z, 1),
    "shear": (Transform.shearing, 6),
}
