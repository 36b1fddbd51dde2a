"""Tests for elementary rotation matrices and angle helpers."""

import jax.numpy as jnp
import numpy as np
import pytest

from astroframes._angle import wrap_to_2pi, wrap_to_pi
from astroframes.config import set_dtype
from astroframes.constants import MAS2RAD
from astroframes.rotations import Rx, Ry, Rz, rotate, small_rotation

set_dtype(jnp.float64)


class TestElementaryRotations:
    """Passive rotations about the coordinate axes."""

    def test_rz_90_moves_x_onto_minus_y(self):
        v = rotate(Rz(90.0, use_degrees=True), jnp.array([1.0, 0.0, 0.0]))
        np.testing.assert_allclose(v, [0.0, -1.0, 0.0], atol=1e-15)

    def test_rx_90_moves_y_onto_minus_z(self):
        v = rotate(Rx(90.0, use_degrees=True), jnp.array([0.0, 1.0, 0.0]))
        np.testing.assert_allclose(v, [0.0, 0.0, -1.0], atol=1e-15)

    def test_ry_90_moves_z_onto_minus_x(self):
        v = rotate(Ry(90.0, use_degrees=True), jnp.array([0.0, 0.0, 1.0]))
        np.testing.assert_allclose(v, [-1.0, 0.0, 0.0], atol=1e-15)

    @pytest.mark.parametrize("rot", [Rx, Ry, Rz])
    def test_orthonormal(self, rot):
        m = rot(0.3)
        np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-15)
        assert float(jnp.linalg.det(m)) == pytest.approx(1.0, abs=1e-15)

    @pytest.mark.parametrize("rot", [Rx, Ry, Rz])
    def test_transpose_is_negative_angle(self, rot):
        np.testing.assert_allclose(rot(0.7).T, rot(-0.7), atol=1e-15)

    def test_zero_angle_is_identity(self):
        np.testing.assert_array_equal(Rz(0.0), np.eye(3))

    def test_degrees_match_radians(self):
        np.testing.assert_allclose(Ry(30.0, use_degrees=True), Ry(jnp.pi / 6.0), atol=1e-15)


class TestSmallRotation:
    def test_composition_order(self):
        x, y, z = 1e-4, -2e-4, 3e-4
        np.testing.assert_allclose(small_rotation(x, y, z), Rx(x) @ Ry(y) @ Rz(z), atol=1e-18)

    def test_fk5_bias_is_milliarcsecond_sized(self):
        m = small_rotation(-19.9 * MAS2RAD, -9.1 * MAS2RAD, 22.9 * MAS2RAD)
        offdiag = np.abs(np.asarray(m) - np.eye(3))
        assert offdiag.max() < 30.0 * MAS2RAD


class TestRotate:
    def test_batched_vectors(self):
        vectors = jnp.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        out = rotate(Rz(0.4), vectors)
        assert out.shape == (3, 3)
        np.testing.assert_allclose(out, (Rz(0.4) @ vectors.T).T, atol=1e-15)

    def test_preserves_norm(self):
        v = jnp.array([3.0, -4.0, 12.0])
        out = rotate(Rx(0.2) @ Ry(-1.1) @ Rz(2.5), v)
        assert float(jnp.linalg.norm(out)) == pytest.approx(13.0, rel=1e-14)


class TestWrapAngles:
    def test_wrap_to_pi_range(self):
        angles = jnp.linspace(-20.0, 20.0, 101)
        wrapped = wrap_to_pi(angles)
        assert bool(jnp.all(wrapped > -jnp.pi))
        assert bool(jnp.all(wrapped <= jnp.pi))
        np.testing.assert_allclose(jnp.sin(wrapped), jnp.sin(angles), atol=1e-12)

    def test_wrap_to_pi_keeps_pi(self):
        assert float(wrap_to_pi(jnp.pi)) == pytest.approx(jnp.pi)

    def test_wrap_to_2pi(self):
        assert float(wrap_to_2pi(-0.5)) == pytest.approx(2.0 * jnp.pi - 0.5)
