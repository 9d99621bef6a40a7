"""Tests for procedural patterns.

Tests cover:
- Stripes vary in x only
- Gradient interpolation
- Rings in x and z
- Checkers repeating in each dimension
- Pattern and object transforms
- Pattern validation and registry bounds
"""

import pytest

WHITE = (1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0)


def _register(kind, transform=None):
    from whitted.core.transform import Transform
    from whitted.materials.pattern import Pattern, add_pattern

    pattern = Pattern(kind, WHITE, BLACK, transform or Transform.identity())
    return add_pattern(pattern)


class TestStripes:
    """Tests for the stripes pattern."""

    @pytest.mark.parametrize(
        "point",
        [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 2.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 2.0)],
    )
    def test_constant_in_y_and_z(self, point):
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.STRIPES)
        assert evaluate_pattern(pid, point) == WHITE

    @pytest.mark.parametrize(
        "x, expected",
        [
            (0.0, WHITE),
            (0.9, WHITE),
            (1.0, BLACK),
            (-0.1, BLACK),
            (-1.0, BLACK),
            (-1.1, WHITE),
        ],
    )
    def test_alternates_in_x(self, x, expected):
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.STRIPES)
        assert evaluate_pattern(pid, (x, 0.0, 0.0)) == expected

    def test_pattern_transform(self):
        from whitted.core.transform import Transform
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.STRIPES, Transform.scaling(2.0, 2.0, 2.0))
        assert evaluate_pattern(pid, (1.5, 0.0, 0.0)) == WHITE
        assert evaluate_pattern(pid, (2.5, 0.0, 0.0)) == BLACK

    def test_pattern_translation(self):
        from whitted.core.transform import Transform
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.STRIPES, Transform.translation(0.5, 0.0, 0.0))
        assert evaluate_pattern(pid, (0.75, 0.0, 0.0)) == WHITE
        assert evaluate_pattern(pid, (0.25, 0.0, 0.0)) == BLACK


class TestGradient:
    """Tests for the linear gradient pattern."""

    @pytest.mark.parametrize(
        "x, expected",
        [
            (0.0, (1.0, 1.0, 1.0)),
            (0.25, (0.75, 0.75, 0.75)),
            (0.5, (0.5, 0.5, 0.5)),
            (0.75, (0.25, 0.25, 0.25)),
        ],
    )
    def test_linear_interpolation(self, x, expected):
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.GRADIENT)
        assert evaluate_pattern(pid, (x, 0.0, 0.0)) == pytest.approx(expected)


class TestRings:
    """Tests for the concentric rings pattern."""

    @pytest.mark.parametrize(
        "point, expected",
        [
            ((0.0, 0.0, 0.0), WHITE),
            ((1.0, 0.0, 0.0), BLACK),
            ((0.0, 0.0, 1.0), BLACK),
            ((0.708, 0.0, 0.708), BLACK),
            ((2.0, 5.0, 0.0), WHITE),
        ],
    )
    def test_rings_extend_in_x_and_z(self, point, expected):
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.RINGS)
        assert evaluate_pattern(pid, point) == expected


class TestCheckers:
    """Tests for the 3D checkers pattern."""

    @pytest.mark.parametrize(
        "axis",
        [0, 1, 2],
    )
    def test_repeats_in_each_dimension(self, axis):
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.CHECKERS)

        def point(value):
            p = [0.0, 0.0, 0.0]
            p[axis] = value
            return tuple(p)

        assert evaluate_pattern(pid, point(0.0)) == WHITE
        assert evaluate_pattern(pid, point(0.99)) == WHITE
        assert evaluate_pattern(pid, point(1.01)) == BLACK

    def test_rounding_below_boundary_counts_as_boundary(self):
        from whitted.materials.pattern import PatternKind, evaluate_pattern

        pid = _register(PatternKind.CHECKERS)
        assert evaluate_pattern(pid, (1.0 - 1e-12, 0.0, 0.0)) == BLACK


class TestPatternValidation:
    """Tests for Pattern construction and the registry."""

    def test_negative_colour_rejected(self):
        from whitted.errors import SceneError
        from whitted.materials.pattern import Pattern, PatternKind

        with pytest.raises(SceneError):
            Pattern(PatternKind.STRIPES, (-1.0, 0.0, 0.0), BLACK)

    def test_unknown_kind_rejected(self):
        from whitted.materials.pattern import Pattern

        with pytest.raises(ValueError):
            Pattern(42, WHITE, BLACK)

    def test_unregistered_pattern_rejected(self):
        from whitted.materials.pattern import evaluate_pattern

        with pytest.raises(IndexError):
            evaluate_pattern(0, (0.0, 0.0, 0.0))

    def test_registry_counts(self):
        from whitted.materials.pattern import PatternKind, clear_patterns, get_pattern_count

        assert get_pattern_count() == 0
        assert _register(PatternKind.STRIPES) == 0
        assert _register(PatternKind.RINGS) == 1
        assert get_pattern_count() == 2
        clear_patterns()
        assert get_pattern_count() == 0
