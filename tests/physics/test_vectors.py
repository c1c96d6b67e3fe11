"""Tests for the numpy vector and matrix helpers."""

import math

import numpy as np
import pytest

from flysim.physics.vectors import (
    look_at,
    normalize,
    perspective,
    rotate,
    rotation,
    sign,
    transform_direction,
    transform_point,
    translate,
    vec3,
)


class TestNormalizeAndSign:
    """Test normalize() and sign()."""

    def test_normalize_unit_length(self) -> None:
        """Test a regular vector is scaled to unit length."""
        result = normalize(vec3(3.0, 4.0, 0.0))
        assert result == pytest.approx([0.6, 0.8, 0.0])

    def test_normalize_zero_vector_is_zero(self) -> None:
        """Test normalizing the zero vector gives zeros instead of NaN."""
        result = normalize(vec3())
        assert not np.isnan(result).any()
        assert result.tolist() == [0.0, 0.0, 0.0]

    def test_normalize_does_not_modify_input(self) -> None:
        """Test the input array is left alone."""
        v = vec3(0.0, 0.0, 2.0)
        normalize(v)
        assert v.tolist() == [0.0, 0.0, 2.0]

    @pytest.mark.parametrize(("value", "expected"), [(2.5, 1.0), (-0.1, -1.0), (0.0, 0.0)])
    def test_sign(self, value: float, expected: float) -> None:
        """Test sign() returns 0 for exact zero."""
        assert sign(value) == expected


class TestRotation:
    """Test rotation construction and composition."""

    def test_rotation_about_z_maps_x_to_y(self) -> None:
        """Test rotations are right-handed."""
        r = rotation(math.pi / 2.0, vec3(0.0, 0.0, 1.0))
        assert transform_direction(r, vec3(1.0, 0.0, 0.0)) == pytest.approx([0.0, 1.0, 0.0])

    def test_rotation_normalizes_axis(self) -> None:
        """Test a scaled axis gives the same rotation."""
        a = rotation(0.3, vec3(0.0, 0.0, 5.0))
        b = rotation(0.3, vec3(0.0, 0.0, 1.0))
        assert np.allclose(a, b)

    def test_rotation_zero_axis_is_identity(self) -> None:
        """Test a zero axis does not produce NaNs."""
        assert np.array_equal(rotation(1.0, vec3()), np.identity(4))

    def test_rotate_composes_in_body_space(self) -> None:
        """Test rotate() applies the rotation about the matrix's own axes."""
        yawed = rotation(math.pi / 2.0, vec3(0.0, 0.0, 1.0))  # nose along +y
        rolled = rotate(yawed, math.pi / 2.0, vec3(1.0, 0.0, 0.0))

        # Rolling about the body x axis keeps the nose where it was
        assert rolled[:3, 0] == pytest.approx([0.0, 1.0, 0.0])
        # and tips the roof over to world +x
        assert rolled[:3, 2] == pytest.approx([1.0, 0.0, 0.0])


class TestTransforms:
    """Test translation, look-at and perspective matrices."""

    def test_translate_moves_points_not_directions(self) -> None:
        """Test translation affects points (w=1) only."""
        t = translate(vec3(1.0, 2.0, 3.0))
        assert transform_point(t, vec3()) == pytest.approx([1.0, 2.0, 3.0])
        assert transform_direction(t, vec3(1.0, 0.0, 0.0)) == pytest.approx([1.0, 0.0, 0.0])

    def test_look_at_maps_eye_to_origin(self) -> None:
        """Test the eye ends up at the origin of eye space."""
        eye = vec3(1.0, 2.0, 3.0)
        view = look_at(eye, vec3(4.0, 2.0, 3.0), vec3(0.0, 0.0, 1.0))
        assert transform_point(view, eye) == pytest.approx([0.0, 0.0, 0.0], abs=1e-12)

    def test_look_at_center_is_down_negative_z(self) -> None:
        """Test the looked-at point lies straight ahead on -Z."""
        view = look_at(vec3(), vec3(1.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
        assert transform_point(view, vec3(1.0, 0.0, 0.0)) == pytest.approx([0.0, 0.0, -1.0])
        # World up stays up
        assert transform_direction(view, vec3(0.0, 0.0, 1.0)) == pytest.approx([0.0, 1.0, 0.0])

    def test_look_at_along_up_is_orthonormal(self) -> None:
        """Test looking straight along the up vector still yields a rotation."""
        view = look_at(vec3(), vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0))
        basis = view[:3, :3]
        assert np.allclose(basis @ basis.T, np.identity(3))
        assert transform_point(view, vec3(0.0, 0.0, 1.0)) == pytest.approx([0.0, 0.0, -1.0])

    def test_perspective_shape(self) -> None:
        """Test the projection copies -z into w."""
        p = perspective(math.radians(45.0), 4.0 / 3.0, 0.05, 50.0)
        assert p[3, 2] == -1.0
        assert p[1, 1] == pytest.approx(1.0 / math.tan(math.radians(22.5)))
        assert p[0, 0] == pytest.approx(p[1, 1] * 3.0 / 4.0)

    @pytest.mark.parametrize(
        ("fov", "aspect", "near", "far"),
        [
            (0.0, 1.0, 0.1, 10.0),
            (1.0, 0.0, 0.1, 10.0),
            (1.0, 1.0, 0.0, 10.0),
            (1.0, 1.0, 10.0, 1.0),
        ],
    )
    def test_perspective_rejects_invalid_frustum(
        self, fov: float, aspect: float, near: float, far: float
    ) -> None:
        """Test invalid parameters raise ValueError."""
        with pytest.raises(ValueError):
            perspective(fov, aspect, near, far)
