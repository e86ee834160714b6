"""Track and particle-change data models exchanged with the host engine.

Host units: energies in MeV, momenta in MeV/c.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from darkbrem.constants import ELECTRON_MASS_GEV, MUON_MASS_GEV
from darkbrem.core.units import GeV_to_MeV


class Particle(Enum):
    """Particles the process can see or create."""
    ELECTRON = "e-"
    MUON_MINUS = "mu-"
    MUON_PLUS = "mu+"
    DARK_PHOTON = "A'"

    @property
    def is_muon(self) -> bool:
        return self in (Particle.MUON_MINUS, Particle.MUON_PLUS)


_LEPTON_MASS_MEV: dict[Particle, float] = {
    Particle.ELECTRON: GeV_to_MeV(ELECTRON_MASS_GEV),
    Particle.MUON_MINUS: GeV_to_MeV(MUON_MASS_GEV),
    Particle.MUON_PLUS: GeV_to_MeV(MUON_MASS_GEV),
}


class TrackStatus(Enum):
    ALIVE = "alive"
    STOP_AND_KILL = "stop_and_kill"


def _z_axis() -> NDArray[np.float64]:
    return np.array([0.0, 0.0, 1.0])


@dataclass
class LeptonTrack:
    """Incident lepton at the point where dark brem may occur.

    Attributes:
        particle: Lepton species.
        kinetic_energy_MeV: Kinetic energy [MeV].
        direction: Unit momentum direction.
    """
    particle: Particle
    kinetic_energy_MeV: float
    direction: NDArray[np.float64] = field(default_factory=_z_axis)

    @property
    def mass_MeV(self) -> float:
        return _LEPTON_MASS_MEV[self.particle]

    @property
    def total_energy_MeV(self) -> float:
        return self.kinetic_energy_MeV + self.mass_MeV

    @property
    def momentum_MeV(self) -> NDArray[np.float64]:
        """3-momentum [MeV/c] along :attr:`direction`."""
        e = self.total_energy_MeV
        p = math.sqrt(max(e * e - self.mass_MeV ** 2, 0.0))
        unit = np.asarray(self.direction, dtype=np.float64)
        return p * unit / np.linalg.norm(unit)


@dataclass
class Secondary:
    """Particle created by the interaction.

    Attributes:
        particle: Particle species.
        momentum_MeV: 3-momentum [MeV/c].
    """
    particle: Particle
    momentum_MeV: NDArray[np.float64]


@dataclass
class ParticleChange:
    """Changes proposed to the host after a dark brem.

    Attributes:
        secondaries: Created particles (dark photon first).
        track_status: Status proposed for the incident track.
        proposed_direction: New unit direction of the incident track, when
            the track survives.
        proposed_kinetic_energy_MeV: New kinetic energy of the incident
            track [MeV], when the track survives.
    """
    secondaries: list[Secondary] = field(default_factory=list)
    track_status: TrackStatus = TrackStatus.ALIVE
    proposed_direction: NDArray[np.float64] | None = None
    proposed_kinetic_energy_MeV: float | None = None
