"""Tests for Phong lighting at a single surface point.

Tests cover:
- Eye between the light and the surface
- Eye and light offset by 45 degrees
- Eye in the path of the reflection vector
- Light behind the surface
- Surface in shadow (ambient only)
- Patterned surfaces through object and pattern transforms
"""

import math

import pytest

S = math.sqrt(2.0) / 2.0


def _scene_with_light(light_position, material=None, transform=None):
    """Upload one sphere and one white light; returns the object ID."""
    from whitted.core.transform import Transform
    from whitted.geometry.shapes import Shape
    from whitted.materials.material import Material
    from whitted.scene.lighting import PointLight
    from whitted.scene.manager import SceneManager
    from whitted.scene.model import SceneObject

    manager = SceneManager()
    obj = SceneObject(
        Shape.sphere(),
        material or Material.plastic(),
        transform or Transform.identity(),
    )
    object_id = manager.add_scene_object(obj)
    manager.add_light(PointLight(light_position, (1.0, 1.0, 1.0)))
    return object_id


class TestLighting:
    """Tests for the ambient, diffuse and specular terms."""

    @pytest.mark.parametrize(
        "eye, light, expected",
        [
            # Eye between the light and the surface
            ((0.0, 0.0, -1.0), (0.0, 0.0, -10.0), 1.9),
            # Eye offset 45 degrees
            ((0.0, S, -S), (0.0, 0.0, -10.0), 1.0),
            # Light offset 45 degrees
            ((0.0, 0.0, -1.0), (0.0, 10.0, -10.0), 0.7364),
            # Eye in the path of the reflection vector
            ((0.0, -S, -S), (0.0, 10.0, -10.0), 1.6364),
            # Light behind the surface
            ((0.0, 0.0, -1.0), (0.0, 0.0, 10.0), 0.1),
        ],
    )
    def test_lighting(self, eye, light, expected):
        from whitted.materials.shading import shade_at

        object_id = _scene_with_light(light)
        colour = shade_at(object_id, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), eye)
        assert colour == pytest.approx((expected, expected, expected), abs=1e-4)

    def test_surface_in_shadow(self):
        from whitted.materials.shading import shade_at

        object_id = _scene_with_light((0.0, 0.0, -10.0))
        colour = shade_at(object_id, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), in_shadow=True)
        assert colour == pytest.approx((0.1, 0.1, 0.1))

    def test_light_colour_scales_result(self):
        from whitted.materials.material import Material
        from whitted.materials.shading import shade_at
        from whitted.scene.lighting import PointLight, add_light

        object_id = _scene_with_light((0.0, 0.0, -10.0), Material.plastic(colour=(1.0, 0.5, 0.0)))
        add_light(PointLight((0.0, 0.0, -10.0), (0.5, 0.5, 0.5)))
        colour = shade_at(object_id, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), light_index=1)
        # ambient + diffuse use colour * light; specular uses the light only
        expected_r = 0.5 * (0.1 + 0.9) + 0.5 * 0.9
        expected_g = 0.25 * (0.1 + 0.9) + 0.5 * 0.9
        expected_b = 0.5 * 0.9
        assert colour == pytest.approx((expected_r, expected_g, expected_b))

    def test_unknown_light_rejected(self):
        from whitted.materials.shading import shade_at

        object_id = _scene_with_light((0.0, 0.0, -10.0))
        with pytest.raises(IndexError):
            shade_at(object_id, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), light_index=3)


class TestPatternedShading:
    """Tests for pattern lookup during shading."""

    def _striped(self, pattern_transform=None):
        from whitted.core.transform import Transform
        from whitted.materials.material import Material
        from whitted.materials.pattern import Pattern, PatternKind

        stripes = Pattern(
            PatternKind.STRIPES,
            (1.0, 1.0, 1.0),
            (0.0, 0.0, 0.0),
            pattern_transform or Transform.identity(),
        )
        return Material.custom(pattern=stripes, ambient=1.0, diffuse=0.0, specular=0.0)

    def test_pattern_replaces_colour(self):
        from whitted.materials.shading import shade_at

        object_id = _scene_with_light((0.0, 0.0, -10.0), self._striped())
        eye = (0.0, 0.0, -1.0)
        normal = (0.0, 0.0, -1.0)
        assert shade_at(object_id, (0.9, 0.0, 0.0), normal, eye) == pytest.approx((1.0, 1.0, 1.0))
        assert shade_at(object_id, (1.1, 0.0, 0.0), normal, eye) == pytest.approx((0.0, 0.0, 0.0))

    def test_object_transform_applies_to_pattern(self):
        from whitted.core.transform import Transform
        from whitted.materials.shading import shade_at

        object_id = _scene_with_light(
            (0.0, 0.0, -10.0), self._striped(), Transform.scaling(2.0, 2.0, 2.0)
        )
        colour = shade_at(object_id, (1.5, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0))
        assert colour == pytest.approx((1.0, 1.0, 1.0))

    def test_object_and_pattern_transforms_combine(self):
        from whitted.core.transform import Transform
        from whitted.materials.shading import shade_at

        material = self._striped(Transform.translation(0.5, 0.0, 0.0))
        object_id = _scene_with_light((0.0, 0.0, -10.0), material, Transform.scaling(2.0, 2.0, 2.0))
        colour = shade_at(object_id, (2.5, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0))
        # 2.5 -> object 1.25 -> pattern 0.75
        assert colour == pytest.approx((1.0, 1.0, 1.0))
