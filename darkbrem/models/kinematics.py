"""Kinematics data models — four-momenta and event-library records.

All values in GeV / GeV·c⁻¹ (core units).
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class FourMomentum:
    """Four-momentum (E, px, py, pz).

    Attributes:
        e: Energy [GeV].
        px: x-momentum [GeV/c].
        py: y-momentum [GeV/c].
        pz: z-momentum [GeV/c].
    """
    e: float
    px: float
    py: float
    pz: float

    def __add__(self, other: "FourMomentum") -> "FourMomentum":
        return FourMomentum(
            self.e + other.e,
            self.px + other.px,
            self.py + other.py,
            self.pz + other.pz,
        )

    @property
    def perp(self) -> float:
        """Transverse momentum with respect to the z-axis."""
        return math.hypot(self.px, self.py)

    @property
    def p(self) -> float:
        """Magnitude of the 3-momentum."""
        return math.sqrt(self.px * self.px + self.py * self.py + self.pz * self.pz)

    @property
    def mass(self) -> float:
        """Invariant mass, zero for space-like vectors."""
        m2 = self.e * self.e - self.p * self.p
        return math.sqrt(m2) if m2 > 0 else 0.0

    def boost_vector(self) -> tuple[float, float, float]:
        """Velocity β = p/E of the frame this four-momentum rests in."""
        if self.e == 0:
            return (0.0, 0.0, 0.0)
        return (self.px / self.e, self.py / self.e, self.pz / self.e)


@dataclass(frozen=True)
class OutgoingKinematics:
    """One precomputed dark brem vertex from the event library.

    Attributes:
        lepton: Outgoing lepton four-momentum [GeV].
        center_momentum: Sum of outgoing lepton and dark photon
            four-momenta, i.e. the lepton–A′ centre-of-momentum vector [GeV].
        incident_energy: Total energy of the incident lepton, also the
            library bucket key [GeV].
    """
    lepton: FourMomentum
    center_momentum: FourMomentum
    incident_energy: float
