"""Four-momentum arithmetic, Lorentz boosts and frame rotations."""

import math

import numpy as np
import pytest

from darkbrem.core.kinematics import boost, momentum_from_angles, rotate_uz
from darkbrem.models.kinematics import FourMomentum


class TestFourMomentum:
    def test_addition(self):
        total = FourMomentum(1.0, 0.1, 0.2, 0.3) + FourMomentum(2.0, -0.1, 0.0, 0.5)
        assert total == FourMomentum(3.0, 0.0, 0.2, 0.8)

    def test_perp_and_p(self):
        v = FourMomentum(10.0, 3.0, 4.0, 12.0)
        assert v.perp == pytest.approx(5.0)
        assert v.p == pytest.approx(13.0)

    def test_mass(self):
        v = FourMomentum(5.0, 0.0, 0.0, 4.0)
        assert v.mass == pytest.approx(3.0)

    def test_spacelike_mass_is_zero(self):
        assert FourMomentum(1.0, 0.0, 0.0, 2.0).mass == 0.0

    def test_boost_vector(self):
        assert FourMomentum(2.0, 0.0, 0.0, 1.0).boost_vector() == pytest.approx((0.0, 0.0, 0.5))

    def test_boost_vector_zero_energy(self):
        assert FourMomentum(0.0, 0.0, 0.0, 0.0).boost_vector() == (0.0, 0.0, 0.0)


class TestBoost:
    def test_zero_boost_is_identity(self):
        v = FourMomentum(3.0, 1.0, 0.5, 2.0)
        assert boost(v, (0.0, 0.0, 0.0)) is v

    def test_boost_to_rest_frame(self):
        v = FourMomentum(5.0, 0.0, 0.0, 4.0)
        beta = v.boost_vector()
        rest = boost(v, (-beta[0], -beta[1], -beta[2]))
        assert rest.e == pytest.approx(3.0)
        assert rest.p == pytest.approx(0.0, abs=1e-12)

    def test_invariant_mass_preserved(self):
        v = FourMomentum(7.0, 1.0, -2.0, 3.0)
        boosted = boost(v, (0.1, 0.3, -0.6))
        assert boosted.mass == pytest.approx(v.mass, rel=1e-12)

    def test_boost_and_back(self):
        v = FourMomentum(4.0, 0.3, -0.2, 3.5)
        beta = (0.2, -0.1, 0.7)
        back = boost(boost(v, beta), tuple(-b for b in beta))
        assert back.e == pytest.approx(v.e)
        assert back.px == pytest.approx(v.px)
        assert back.py == pytest.approx(v.py)
        assert back.pz == pytest.approx(v.pz)

    @pytest.mark.parametrize("beta", [(0.0, 0.0, 1.0), (0.6, 0.0, 0.9)])
    def test_superluminal_boost_rejected(self, beta):
        with pytest.raises(ValueError, match="beta"):
            boost(FourMomentum(2.0, 0.0, 0.0, 1.0), beta)


class TestRotateUz:
    def test_z_direction_is_identity(self):
        v = np.array([0.1, 0.2, 0.9])
        np.testing.assert_allclose(rotate_uz(np.array([0.0, 0.0, 1.0]), v), v)

    def test_antiparallel(self):
        v = np.array([0.1, 0.2, 0.9])
        np.testing.assert_allclose(
            rotate_uz(np.array([0.0, 0.0, -1.0]), v), [-0.1, 0.2, -0.9],
        )

    def test_z_axis_maps_to_direction(self):
        direction = np.array([1.0, 2.0, 2.0])
        rotated = rotate_uz(direction, np.array([0.0, 0.0, 3.0]))
        np.testing.assert_allclose(rotated, [1.0, 2.0, 2.0], atol=1e-12)

    @pytest.mark.parametrize("direction", [
        [1.0, 0.0, 0.0],
        [0.3, -0.4, 0.5],
        [0.0, 1.0, -1.0],
    ])
    def test_preserves_magnitude_and_angle(self, direction):
        direction = np.array(direction)
        v = np.array([0.3, -0.1, 2.0])
        rotated = rotate_uz(direction, v)
        assert np.linalg.norm(rotated) == pytest.approx(np.linalg.norm(v))
        unit = direction / np.linalg.norm(direction)
        # angle to the new axis equals the angle to the old z-axis
        assert np.dot(rotated, unit) == pytest.approx(v[2])


class TestMomentumFromAngles:
    def test_forward(self):
        np.testing.assert_allclose(momentum_from_angles(2.0, 0.0, 1.3), [0.0, 0.0, 2.0])

    def test_components(self):
        p = momentum_from_angles(1.0, math.pi / 2, math.pi / 2)
        np.testing.assert_allclose(p, [0.0, 1.0, 0.0], atol=1e-12)
