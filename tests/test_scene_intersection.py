"""Tests for scene-level ray queries.

Tests cover:
- Nearest hit across several objects
- Ties resolved in favour of the earlier object
- Transformed objects (scaled, translated, rotated)
- Hits that do not change however far an object is scaled
- World-space normals through object transforms
- Scene model validation
"""

import math

import pytest


def _add(shape, transform=None, material_id=0):
    from whitted.core.transform import Transform
    from whitted.scene.intersection import add_object

    return add_object(shape, transform or Transform.identity(), material_id)


class TestNearestHit:
    """Tests for nearest_hit."""

    def test_miss_returns_none(self):
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import nearest_hit

        _add(Shape.sphere())
        assert nearest_hit((0.0, 2.0, -5.0), (0.0, 0.0, 1.0)) is None

    def test_empty_scene(self):
        from whitted.scene.intersection import nearest_hit

        assert nearest_hit((0.0, 0.0, 0.0), (0.0, 0.0, 1.0)) is None

    def test_nearest_of_several(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import nearest_hit

        _add(Shape.sphere(), Transform.translation(0.0, 0.0, 10.0))
        _add(Shape.sphere(), Transform.scaling(0.5, 0.5, 0.5))
        _add(Shape.sphere(), Transform.translation(0.0, 0.0, 4.0))

        t, object_id = nearest_hit((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert object_id == 1
        assert t == pytest.approx(4.5)

    def test_hits_behind_origin_ignored(self):
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import nearest_hit

        _add(Shape.sphere())
        t, object_id = nearest_hit((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert (t, object_id) == (pytest.approx(1.0), 0)
        assert nearest_hit((0.0, 0.0, 5.0), (0.0, 0.0, 1.0)) is None

    def test_tie_goes_to_first_object(self):
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import nearest_hit

        _add(Shape.sphere(), material_id=3)
        _add(Shape.sphere(), material_id=7)
        _, object_id = nearest_hit((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert object_id == 0


class TestTransformedObjects:
    """Tests for objects placed with a transform."""

    def test_scaled_sphere(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import object_intersections

        object_id = _add(Shape.sphere(), Transform.scaling(2.0, 2.0, 2.0))
        assert object_intersections(object_id, (0.0, 0.0, -5.0), (0.0, 0.0, 1.0)) == pytest.approx([3.0, 7.0])

    def test_translated_sphere(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import object_intersections

        object_id = _add(Shape.sphere(), Transform.translation(5.0, 0.0, 0.0))
        assert object_intersections(object_id, (0.0, 0.0, -5.0), (0.0, 0.0, 1.0)) == []

    def test_unnormalized_direction_keeps_world_t(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import object_intersections

        object_id = _add(Shape.sphere(), Transform.scaling(2.0, 2.0, 2.0))
        # Point = origin + t * direction in world space for any direction length
        ts = object_intersections(object_id, (0.0, 0.0, -5.0), (0.0, 0.0, 2.0))
        assert ts == pytest.approx([1.5, 3.5])

    def test_unknown_object_rejected(self):
        from whitted.scene.intersection import object_intersections

        with pytest.raises(IndexError):
            object_intersections(0, (0.0, 0.0, 0.0), (0.0, 0.0, 1.0))


class TestScaledObjects:
    """Hits must not depend on how far an object is scaled."""

    def test_steep_ray_hits_scaled_cylinder(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import clear_scene, nearest_hit

        _add(Shape.cylinder())
        assert nearest_hit((0.0, 0.0, 0.0), (0.05, 0.99875, 0.0)) == (pytest.approx(20.0), 0)

        clear_scene()
        _add(Shape.cylinder(), Transform.uniform_scaling(100.0))
        assert nearest_hit((0.0, 0.0, 0.0), (0.05, 0.99875, 0.0)) == (pytest.approx(2000.0), 0)

    def test_closed_scaled_cylinder_caps(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import object_intersections

        object_id = _add(Shape.cylinder(-1.0, 1.0, closed=True), Transform.uniform_scaling(1e7))
        ts = object_intersections(object_id, (0.0, -2e7, 0.0), (0.0, 1.0, 0.0))
        assert ts == pytest.approx([1e7, 3e7])

    def test_scaled_cone(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import object_intersections

        object_id = _add(Shape.cone(), Transform.uniform_scaling(1e4))
        ts = object_intersections(object_id, (0.0, 5e3, -5e4), (0.0, 0.0, 1.0))
        assert ts == pytest.approx([4.5e4, 5.5e4])

    def test_grazing_ray_hits_scaled_plane(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import object_intersections

        object_id = _add(Shape.plane(), Transform.uniform_scaling(1e5))
        assert object_intersections(object_id, (0.0, 1.0, 0.0), (1.0, -0.01, 0.0)) == pytest.approx([100.0])

    def test_scaled_box(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import object_intersections

        object_id = _add(Shape.box(), Transform.uniform_scaling(1e7))
        ts = object_intersections(object_id, (0.0, 0.0, -3e7), (0.0, 0.0, 1.0))
        assert ts == pytest.approx([2e7, 4e7])


class TestWorldNormal:
    """Tests for normals through object transforms."""

    def test_translated_sphere_normal(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import normal_at

        object_id = _add(Shape.sphere(), Transform.translation(0.0, 1.0, 0.0))
        assert normal_at(object_id, (0.0, 1.70711, -0.70711)) == pytest.approx(
            (0.0, 0.70711, -0.70711), abs=1e-5
        )

    def test_scaled_and_rotated_sphere_normal(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import normal_at

        transform = Transform.rotation_z(36.0).then(Transform.scaling(1.0, 0.5, 1.0))
        object_id = _add(Shape.sphere(), transform)
        s = math.sqrt(2.0) / 2.0
        assert normal_at(object_id, (0.0, s, -s)) == pytest.approx((0.0, 0.97014, -0.24254), abs=1e-5)

    def test_normal_is_unit_length(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.scene.intersection import normal_at

        object_id = _add(Shape.plane(), Transform.scaling(3.0, 0.2, 1.0))
        n = normal_at(object_id, (1.0, 0.0, 1.0))
        assert n == pytest.approx((0.0, 1.0, 0.0))


class TestSceneModel:
    """Tests for Scene and SceneObject validation."""

    def test_scene_object_defaults(self):
        from whitted.core.transform import Transform
        from whitted.geometry.shapes import Shape
        from whitted.materials.material import Material
        from whitted.scene.model import SceneObject

        obj = SceneObject(Shape.sphere())
        assert obj.material == Material.plastic()
        assert obj.transform == Transform.identity()

    def test_scene_normalizes_sequences(self):
        from whitted.geometry.shapes import Shape
        from whitted.scene.lighting import PointLight
        from whitted.scene.model import Scene, SceneObject

        scene = Scene(objects=[SceneObject(Shape.sphere())], lights=[PointLight((0, 5, 0))])
        assert isinstance(scene.objects, tuple)
        assert isinstance(scene.lights, tuple)
        assert scene.lights[0].position == (0.0, 5.0, 0.0)

    def test_invalid_scene_rejected(self):
        from whitted.errors import SceneError
        from whitted.scene.model import Scene, SceneObject

        with pytest.raises(SceneError):
            SceneObject("sphere")
        with pytest.raises(SceneError):
            Scene(objects=["sphere"])
        with pytest.raises(SceneError):
            Scene(lights=[(0.0, 1.0, 0.0)])
        with pytest.raises(SceneError):
            Scene(background=(-1.0, 0.0, 0.0))

    def test_invalid_light_rejected(self):
        from whitted.errors import SceneError
        from whitted.scene.lighting import PointLight

        with pytest.raises(SceneError):
            PointLight((0.0, math.nan, 0.0))
        with pytest.raises(SceneError):
            PointLight((0.0, 1.0, 0.0), (-1.0, 1.0, 1.0))
