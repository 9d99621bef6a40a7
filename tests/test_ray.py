"""Unit tests for the Ray dataclass and vector utilities.

Tests cover:
- Ray construction and point evaluation
- Normalization, including the zero-vector policy
- Reflection about flat and slanted normals
- Refraction and total internal reflection
- Schlick reflectance at normal, grazing and beyond-critical angles
- Affine point/vector application
"""

import math

import pytest
import taichi as ti


def _xyz(v):
    return tuple(float(c) for c in v.to_numpy())


class TestRay:
    """Tests for Ray and ray_at."""

    def test_ray_at(self):
        from whitted.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=4)

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(2.0, 3.0, 4.0), vec3(1.0, 0.0, 0.0))
            result[0] = ray_at(ray, 0.0)
            result[1] = ray_at(ray, 1.0)
            result[2] = ray_at(ray, -1.0)
            result[3] = ray_at(ray, 2.5)

        test_kernel()
        expected = [(2.0, 3.0, 4.0), (3.0, 3.0, 4.0), (1.0, 3.0, 4.0), (4.5, 3.0, 4.0)]
        for k, e in enumerate(expected):
            assert _xyz(result[k]) == pytest.approx(e)


class TestVectorUtilities:
    """Tests for normalize, reflect and the affine helpers."""

    def test_normalize(self):
        from whitted.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(1.0, 2.0, 3.0))

        test_kernel()
        length = math.sqrt(14.0)
        assert _xyz(result[None]) == pytest.approx((1 / length, 2 / length, 3 / length))

    def test_normalize_zero_vector_is_zero(self):
        from whitted.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        v = result[None]
        assert not any(math.isnan(c) for c in _xyz(v))
        assert _xyz(v) == (0.0, 0.0, 0.0)

    def test_reflect_at_45_degrees(self):
        from whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert _xyz(result[None]) == pytest.approx((1.0, 1.0, 0.0))

    def test_reflect_off_slanted_surface(self):
        from whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        s = math.sqrt(2.0) / 2.0

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(0.0, -1.0, 0.0), vec3(s, s, 0.0))

        test_kernel()
        assert _xyz(result[None]) == pytest.approx((1.0, 0.0, 0.0), abs=1e-12)

    def test_transform_point_and_vector(self):
        from whitted.core.ray import transform_point, transform_vector, vec3
        from whitted.core.transform import Transform

        m = Transform.translation(1.0, 2.0, 3.0).then(Transform.scaling(2.0, 2.0, 2.0))
        matrix = ti.Matrix.field(4, 4, dtype=ti.f64, shape=())
        matrix[None] = ti.Matrix(m.matrix.tolist())
        point = ti.Vector.field(3, dtype=ti.f64, shape=())
        vector = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            point[None] = transform_point(matrix[None], vec3(1.0, 1.0, 1.0))
            vector[None] = transform_vector(matrix[None], vec3(1.0, 1.0, 1.0))

        test_kernel()
        assert _xyz(point[None]) == pytest.approx((4.0, 6.0, 8.0))
        assert _xyz(vector[None]) == pytest.approx((2.0, 2.0, 2.0))


class TestRefraction:
    """Tests for Snell refraction and Schlick reflectance."""

    def test_refract_straight_through(self):
        from whitted.core.ray import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        valid = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            d, ok = refract(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)
            result[None] = d
            valid[None] = ok

        test_kernel()
        assert valid[None] == 1
        assert _xyz(result[None]) == pytest.approx((0.0, -1.0, 0.0))

    def test_refract_bends_toward_normal(self):
        from whitted.core.ray import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        s = math.sqrt(2.0) / 2.0

        @ti.kernel
        def test_kernel():
            d, _ = refract(vec3(s, -s, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)
            result[None] = d

        test_kernel()
        sin_t = s / 1.5
        expected = (sin_t, -math.sqrt(1.0 - sin_t * sin_t), 0.0)
        assert _xyz(result[None]) == pytest.approx(expected)

    def test_total_internal_reflection(self):
        from whitted.core.ray import refract, vec3

        valid = ti.field(dtype=ti.i32, shape=())
        s = math.sqrt(2.0) / 2.0

        @ti.kernel
        def test_kernel():
            _, ok = refract(vec3(s, -s, 0.0), vec3(0.0, 1.0, 0.0), 1.5)
            valid[None] = ok

        test_kernel()
        assert valid[None] == 0

    @pytest.mark.parametrize(
        "cos_i, n1, n2, expected",
        [
            # Normal incidence, air to glass
            (1.0, 1.0, 1.5, 0.04),
            # Grazing incidence (ray at y = 0.99 on a unit glass sphere)
            (math.sqrt(1.0 - 0.99**2), 1.0, 1.5, 0.48873),
            # Beyond the critical angle inside glass
            (math.sqrt(2.0) / 2.0, 1.5, 1.0, 1.0),
        ],
    )
    def test_schlick(self, cos_i, n1, n2, expected):
        from whitted.core.ray import schlick_reflectance

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(c: ti.f64, a: ti.f64, b: ti.f64):
            result[None] = schlick_reflectance(c, a, b)

        test_kernel(cos_i, n1, n2)
        assert result[None] == pytest.approx(expected, abs=1e-5)


class TestSampling:
    """Tests for the deterministic per-sample random numbers."""

    def test_same_inputs_same_values(self):
        from whitted.core.sampling import next_random, seed_sample

        values = ti.field(dtype=ti.f64, shape=4)

        @ti.kernel
        def test_kernel():
            a = seed_sample(3, 7, 0, 11)
            b = seed_sample(3, 7, 0, 11)
            a, va = next_random(a)
            b, vb = next_random(b)
            c = seed_sample(4, 7, 0, 11)
            c, vc = next_random(c)
            d = seed_sample(3, 7, 1, 11)
            d, vd = next_random(d)
            values[0] = va
            values[1] = vb
            values[2] = vc
            values[3] = vd

        test_kernel()
        assert values[0] == values[1]
        assert values[0] != values[2]
        assert values[0] != values[3]
        for k in range(4):
            assert 0.0 <= values[k] < 1.0

    def test_unit_disk_samples_inside(self):
        from whitted.core.sampling import sample_unit_disk

        radius = ti.field(dtype=ti.f64, shape=16)

        @ti.kernel
        def test_kernel():
            for k in range(16):
                p = sample_unit_disk(ti.cast(k, ti.f64) / 16.0, ti.cast(15 - k, ti.f64) / 16.0)
                radius[k] = p.norm()

        test_kernel()
        for k in range(16):
            assert radius[k] <= 1.0 + 1e-12
            assert radius[k] == pytest.approx(math.sqrt(k / 16.0))
