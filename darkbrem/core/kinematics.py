"""Relativistic kinematics helpers — Lorentz boosts and frame rotations.

All energies in GeV (core units).
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from darkbrem.models.kinematics import FourMomentum


def boost(v: FourMomentum, beta: Sequence[float]) -> FourMomentum:
    """Boost *v* by velocity *beta* (pure boost, no rotation).

    For β² = 0 the vector is returned unchanged.

    Args:
        v: Four-momentum to transform [GeV].
        beta: Boost velocity (βx, βy, βz), |β| < 1.

    Returns:
        Boosted four-momentum [GeV].

    Raises:
        ValueError: If |β| ≥ 1.
    """
    bx, by, bz = beta
    b2 = bx * bx + by * by + bz * bz
    if b2 <= 0.0:
        return v
    if b2 >= 1.0:
        raise ValueError(f"Boost velocity must satisfy |beta| < 1, got beta^2 = {b2:.6g}")
    gamma = 1.0 / math.sqrt(1.0 - b2)
    bp = bx * v.px + by * v.py + bz * v.pz
    gamma2 = (gamma - 1.0) / b2
    return FourMomentum(
        e=gamma * (v.e + bp),
        px=v.px + gamma2 * bp * bx + gamma * bx * v.e,
        py=v.py + gamma2 * bp * by + gamma * by * v.e,
        pz=v.pz + gamma2 * bp * bz + gamma * bz * v.e,
    )


def rotate_uz(
    direction: NDArray[np.float64],
    v: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Rotate *v* from the frame where the z-axis is *direction*.

    The vector is assumed to be expressed relative to a reference axis
    along z; the result is the same vector expressed in the frame where
    that axis points along *direction*.

    Args:
        direction: New z-axis (need not be normalised).
        v: 3-vector relative to the reference z-axis.

    Returns:
        Rotated 3-vector.
    """
    u = np.asarray(direction, dtype=np.float64)
    u = u / np.linalg.norm(u)
    u1, u2, u3 = float(u[0]), float(u[1]), float(u[2])
    px, py, pz = float(v[0]), float(v[1]), float(v[2])

    up = u1 * u1 + u2 * u2
    if up > 0.0:
        up = math.sqrt(up)
        return np.array([
            (u1 * u3 * px - u2 * py) / up + u1 * pz,
            (u2 * u3 * px + u1 * py) / up + u2 * pz,
            -up * px + u3 * pz,
        ])
    if u3 < 0.0:
        # anti-parallel to z: rotation by π about y
        return np.array([-px, py, -pz])
    return np.array([px, py, pz])


def momentum_from_angles(
    magnitude: float,
    theta: float,
    phi: float,
) -> NDArray[np.float64]:
    """3-vector from magnitude, polar angle and azimuth."""
    sin_theta = math.sin(theta)
    return magnitude * np.array([
        sin_theta * math.cos(phi),
        sin_theta * math.sin(phi),
        math.cos(theta),
    ])
