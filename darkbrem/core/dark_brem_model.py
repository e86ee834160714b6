"""Dark brem model — cross sections plus library-driven final states.

:class:`DarkBremModelBase` is the contract the process talks to;
:class:`DarkBremModel` is the vertex-library implementation.  Internally the
model works in GeV; the host-facing methods take MeV kinetic energies and
tracks in MeV.
"""

from __future__ import annotations

import logging
import math
import pathlib
from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from darkbrem.core.errors import ConfigurationError
from darkbrem.core.event_library import EventLibrary
from darkbrem.core.kinematics import rotate_uz
from darkbrem.core.scaling import KinematicsScaler
from darkbrem.core.units import GeV_to_MeV, MeV_to_GeV
from darkbrem.core.xsec_engine import CrossSectionEngine
from darkbrem.models.config import DarkBremConfig
from darkbrem.models.track import (
    LeptonTrack,
    Particle,
    ParticleChange,
    Secondary,
    TrackStatus,
)

logger = logging.getLogger(__name__)


class DarkBremModelBase(ABC):
    """Interface between the dark brem process and a physics model.

    Args:
        muons: True if the model describes muons, False for electrons.
    """

    def __init__(self, muons: bool) -> None:
        self._muons = muons

    @property
    def muons(self) -> bool:
        return self._muons

    @abstractmethod
    def compute_cross_section(
        self,
        kinetic_energy_MeV: float,
        A: float,
        Z: float,
    ) -> float:
        """Cross section per atom [pb] for a lepton of the given kinetic energy."""

    @abstractmethod
    def generate_interaction(
        self,
        incident_momentum: NDArray[np.float64],
        incident_energy: float,
        lepton_mass: float,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """(recoil lepton, dark photon) 3-momenta [GeV/c]."""

    @abstractmethod
    def generate_change(
        self,
        track: LeptonTrack,
        always_create_new_lepton: bool = True,
    ) -> ParticleChange:
        """Host-level outcome of an interaction on *track*."""

    @abstractmethod
    def describe(self) -> str:
        """Human-readable configuration summary."""

    def print_info(self) -> None:
        for line in self.describe().splitlines():
            logger.info(line)


class DarkBremModel(DarkBremModelBase):
    """Vertex-library dark brem model.

    Cross sections come from :class:`CrossSectionEngine`; outgoing
    kinematics are drawn from an :class:`EventLibrary` and scaled to the
    actual incident energy.

    Args:
        config: Model configuration.
        library_path: Library file or directory.
        load_library: Load the library now.  Disable for cross-section-only
            use; sampling then raises :class:`ConfigurationError`.
        rng: Random generator shared by the cursor offsets and azimuth draws.

    Raises:
        ConfigurationError: If the library is requested but unusable.
    """

    def __init__(
        self,
        config: DarkBremConfig,
        library_path: str | pathlib.Path | None = None,
        load_library: bool = True,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(config.muons)
        self._config = config
        self._library_path = library_path
        self._rng = rng or np.random.default_rng()
        self._engine = CrossSectionEngine(config)
        self._scaler: KinematicsScaler | None = None

        if load_library:
            if library_path is None:
                raise ConfigurationError(
                    "A vertex library path is required when load_library is set"
                )
            logger.info("Loading dark brem event library from %s", library_path)
            self.set_library(
                EventLibrary.load(library_path, config.dark_photon, rng=self._rng)
            )

    @classmethod
    def from_library(
        cls,
        config: DarkBremConfig,
        library: EventLibrary,
        rng: np.random.Generator | None = None,
    ) -> DarkBremModel:
        """Model around an already-built library."""
        model = cls(config, load_library=False, rng=rng)
        model.set_library(library)
        return model

    def set_library(self, library: EventLibrary) -> None:
        self._scaler = KinematicsScaler(
            library,
            self._config.method,
            self._config.dark_photon.mass_GeV,
            rng=self._rng,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> DarkBremConfig:
        return self._config

    @property
    def engine(self) -> CrossSectionEngine:
        return self._engine

    @property
    def library(self) -> EventLibrary:
        """Loaded vertex library.

        Raises:
            ConfigurationError: If no library was loaded.
        """
        return self._require_scaler().library

    @property
    def lepton_mass_GeV(self) -> float:
        return self._config.lepton_mass_GeV

    # ------------------------------------------------------------------
    # Model interface
    # ------------------------------------------------------------------

    def compute_cross_section(
        self,
        kinetic_energy_MeV: float,
        A: float,
        Z: float,
    ) -> float:
        return self._engine.compute_cross_section(kinetic_energy_MeV, A, Z)

    def scale(self, incident_energy: float, lepton_mass: float) -> NDArray[np.float64]:
        """Scaled recoil 3-momentum along the reference axis [GeV/c]."""
        return self._require_scaler().scale(incident_energy, lepton_mass)

    def generate_interaction(
        self,
        incident_momentum: NDArray[np.float64],
        incident_energy: float,
        lepton_mass: float,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Recoil lepton and dark photon momenta for one interaction.

        The recoil is rotated onto the incident direction and the dark photon
        takes the remaining 3-momentum; nuclear recoil is neglected.

        Args:
            incident_momentum: Incident lepton 3-momentum [GeV/c].
            incident_energy: Incident lepton total energy [GeV].
            lepton_mass: Lepton mass [GeV].

        Returns:
            (recoil, dark photon) 3-momenta [GeV/c].
        """
        incident_momentum = np.asarray(incident_momentum, dtype=np.float64)
        recoil = self.scale(incident_energy, lepton_mass)
        recoil = rotate_uz(incident_momentum, recoil)
        return recoil, incident_momentum - recoil

    def generate_change(
        self,
        track: LeptonTrack,
        always_create_new_lepton: bool = True,
    ) -> ParticleChange:
        """Host-level outcome of an interaction on *track*.

        By default the incident track is killed and two secondaries are
        created: the dark photon and a new recoil lepton.  Otherwise only the
        dark photon is created and the incident track is given the recoil
        direction and kinetic energy.
        """
        mass = MeV_to_GeV(track.mass_MeV)
        incident_energy = MeV_to_GeV(track.total_energy_MeV)
        incident_momentum = track.momentum_MeV / 1000.0

        recoil, aprime = self.generate_interaction(
            incident_momentum, incident_energy, mass,
        )
        dark_photon = Secondary(Particle.DARK_PHOTON, aprime * 1000.0)

        if always_create_new_lepton:
            return ParticleChange(
                secondaries=[dark_photon, Secondary(track.particle, recoil * 1000.0)],
                track_status=TrackStatus.STOP_AND_KILL,
            )

        recoil_p = float(np.linalg.norm(recoil))
        direction = recoil / recoil_p if recoil_p > 0.0 else np.asarray(track.direction)
        recoil_energy = math.sqrt(recoil_p * recoil_p + mass * mass)
        return ParticleChange(
            secondaries=[dark_photon],
            track_status=TrackStatus.ALIVE,
            proposed_direction=direction,
            proposed_kinetic_energy_MeV=GeV_to_MeV(recoil_energy - mass),
        )

    def describe(self) -> str:
        lines = [
            " Dark Brem Vertex Library Model",
            f"   Lepton:          {'muon' if self.muons else 'electron'}",
            f"   A' Mass [GeV]:   {self._config.dark_photon.mass_GeV}",
            f"   Threshold [GeV]: {self._config.effective_threshold_GeV}",
            f"   Epsilon:         {self._config.epsilon}",
            f"   Scaling Method:  {self._config.method.value}",
            f"   Vertex Library:  {self._library_path if self._library_path is not None else '-'}",
        ]
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _require_scaler(self) -> KinematicsScaler:
        if self._scaler is None:
            raise ConfigurationError(
                "Dark brem model was built without an event library; "
                "it can compute cross sections but not sample vertices"
            )
        return self._scaler
