"""Kinematics scaler — adapts library vertices to the actual beam energy.

A vertex generated at library energy E_lib is rescaled to the incident
energy E₀ by holding the recoil lepton's kinetic-energy fraction fixed:

    E_acc = (E_lep − m) · (E₀ − m − m_A) / (E_lib − m − m_A) + m

Three methods are available (see :class:`ScalingMethod`):

- ``FORWARD_ONLY`` keeps the library transverse momentum and re-samples
  vertices whose Pt would exceed the scaled energy budget.
- ``CM_SCALING`` boosts the lepton out of its recorded lepton–A′ frame and
  into a frame whose energy and longitudinal momentum are reduced by
  E_lib − E₀, then rescales the energy.  When that shifted frame is not
  time-like the second boost is skipped.
- ``UNDEFINED`` uses the library lepton unchanged.

The outgoing lepton is returned along the reference z-axis with a uniformly
drawn azimuth; callers rotate it onto the real incident direction.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from darkbrem.core.event_library import EventLibrary
from darkbrem.core.kinematics import boost, momentum_from_angles
from darkbrem.models.config import ScalingMethod
from darkbrem.models.kinematics import FourMomentum, OutgoingKinematics

logger = logging.getLogger(__name__)


def scaled_energy(
    record: OutgoingKinematics,
    incident_energy: float,
    lepton_mass: float,
    aprime_mass: float,
) -> float:
    """Recoil energy at *incident_energy* with the kinetic fraction fixed [GeV]."""
    return (
        (record.lepton.e - lepton_mass)
        * (incident_energy - lepton_mass - aprime_mass)
        / (record.incident_energy - lepton_mass - aprime_mass)
        + lepton_mass
    )


class KinematicsScaler:
    """Draws library vertices and scales them to the requested energy.

    Args:
        library: Vertex library to sample from.
        method: Scaling method.
        aprime_mass_GeV: A′ mass [GeV].
        rng: Random generator for the azimuth draws.
    """

    def __init__(
        self,
        library: EventLibrary,
        method: ScalingMethod,
        aprime_mass_GeV: float,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._library = library
        self._method = method
        self._ma = aprime_mass_GeV
        self._rng = rng or np.random.default_rng()

    @property
    def method(self) -> ScalingMethod:
        return self._method

    @property
    def library(self) -> EventLibrary:
        return self._library

    def scale(self, incident_energy: float, lepton_mass: float) -> NDArray[np.float64]:
        """Outgoing lepton 3-momentum relative to the reference z-axis.

        Args:
            incident_energy: Total energy of the incident lepton [GeV].
            lepton_mass: Lepton mass [GeV].

        Returns:
            Recoil 3-momentum [GeV/c].
        """
        if self._method is ScalingMethod.FORWARD_ONLY:
            energy, pt, p = self._forward_only(incident_energy, lepton_mass)
        elif self._method is ScalingMethod.CM_SCALING:
            energy, pt, p = self._cm_scaling(incident_energy, lepton_mass)
        else:
            record = self._library.sample(incident_energy)
            energy = record.lepton.e
            p = math.sqrt(max(energy * energy - lepton_mass * lepton_mass, 0.0))
            pt = record.lepton.perp

        phi = self._rng.random() * 2.0 * math.pi
        magnitude = math.sqrt(max(energy * energy - lepton_mass * lepton_mass, 0.0))
        sin_theta = min(1.0, pt / p) if p > 0.0 else 0.0
        return momentum_from_angles(magnitude, math.asin(sin_theta), phi)

    def scale_batch(
        self,
        incident_energy: float,
        lepton_mass: float,
        n_samples: int,
    ) -> NDArray[np.float64]:
        """Draw *n_samples* scaled recoil momenta at one incident energy.

        Returns:
            Array of shape (n_samples, 3) [GeV/c].

        Raises:
            ValueError: If *n_samples* is negative.
        """
        if n_samples < 0:
            raise ValueError(f"n_samples must be non-negative, got {n_samples}")
        result = np.empty((n_samples, 3), dtype=np.float64)
        for i in range(n_samples):
            result[i] = self.scale(incident_energy, lepton_mass)
        return result

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def _forward_only(
        self,
        incident_energy: float,
        lepton_mass: float,
    ) -> tuple[float, float, float]:
        m2 = lepton_mass * lepton_mass
        record = self._library.sample(incident_energy)
        energy = scaled_energy(record, incident_energy, lepton_mass, self._ma)
        pt = record.lepton.perp

        attempts = 0
        while pt * pt + m2 > energy * energy:
            if attempts >= self._library.max_iterations:
                logger.warning(
                    "Could not produce a realistic vertex with library energy "
                    "%.6g GeV; consider expanding the library with a beam "
                    "energy closer to %.6g GeV.",
                    record.incident_energy, incident_energy,
                )
                break
            attempts += 1
            record = self._library.sample(incident_energy)
            energy = scaled_energy(record, incident_energy, lepton_mass, self._ma)
            pt = record.lepton.perp

        p = math.sqrt(max(energy * energy - m2, 0.0))
        return energy, pt, p

    def _cm_scaling(
        self,
        incident_energy: float,
        lepton_mass: float,
    ) -> tuple[float, float, float]:
        record = self._library.sample(incident_energy)
        cm = record.center_momentum
        ediff = record.incident_energy - incident_energy
        new_cm = FourMomentum(cm.e - ediff, cm.px, cm.py, cm.pz - ediff)

        lepton = record.lepton
        if cm.e > cm.p:
            beta = cm.boost_vector()
            lepton = boost(lepton, (-beta[0], -beta[1], -beta[2]))
        if new_cm.e > new_cm.p:
            lepton = boost(lepton, new_cm.boost_vector())
        else:
            # shifted frame is not timelike; keep the lepton in the recorded CM frame
            logger.debug(
                "Reconstructed CM frame at %.6g GeV is space-like "
                "(library energy %.6g GeV); skipping the boost into it.",
                incident_energy, record.incident_energy,
            )

        energy = scaled_energy(record, incident_energy, lepton_mass, self._ma)
        return energy, lepton.perp, lepton.p
