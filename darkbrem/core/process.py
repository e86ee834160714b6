"""Host-facing dark brem process.

Wraps a :class:`DarkBremModelBase` in the two calls a transport engine makes
on a discrete process: the mean free path of a track in a material, and the
particle change once the interaction has been selected.  Materials come
from the host or from :class:`~darkbrem.core.target_database.TargetService`.
"""

from __future__ import annotations

import logging
import math

from darkbrem.core.dark_brem_model import DarkBremModelBase
from darkbrem.core.units import macroscopic_cross_section, mean_free_path_cm
from darkbrem.core.xsec_cache import ElementXsecCache
from darkbrem.models.config import ProcessConfig
from darkbrem.models.target import TargetMaterial
from darkbrem.models.track import LeptonTrack, Particle, ParticleChange

logger = logging.getLogger(__name__)

PROCESS_NAME = "DarkBrem"


class DarkBremProcess:
    """Discrete dark brem process for electrons or muons.

    Args:
        model: Physics model providing cross sections and final states.
        config: Process options.
    """

    def __init__(
        self,
        model: DarkBremModelBase,
        config: ProcessConfig | None = None,
    ) -> None:
        self._model = model
        self._config = config or ProcessConfig()
        self._active = True
        self._cache = ElementXsecCache(model) if self._config.cache_xsec else None
        logger.debug(
            "Dark brem process connected to %s",
            "mu-/mu+" if model.muons else "e-",
        )

    @property
    def name(self) -> str:
        return PROCESS_NAME

    @property
    def model(self) -> DarkBremModelBase:
        return self._model

    @property
    def config(self) -> ProcessConfig:
        return self._config

    @property
    def cache(self) -> ElementXsecCache | None:
        return self._cache

    @property
    def active(self) -> bool:
        return self._active

    def is_applicable(self, particle: Particle) -> bool:
        """True for electrons with an electron model, μ± with a muon model."""
        if self._model.muons:
            return particle.is_muon
        return particle is Particle.ELECTRON

    def reactivate(self) -> None:
        """Re-enable the process, e.g. at the start of a new event."""
        self._active = True

    def cross_section_per_volume(
        self,
        kinetic_energy_MeV: float,
        material: TargetMaterial,
    ) -> float:
        """Biased macroscopic cross section Σ [cm⁻¹] of *material*."""
        sigma = 0.0
        for element in material.elements:
            if self._cache is not None:
                xsec = self._cache.get(kinetic_energy_MeV, element.A, element.Z)
            else:
                xsec = self._model.compute_cross_section(
                    kinetic_energy_MeV, element.A, element.Z,
                )
            sigma += macroscopic_cross_section(element.atoms_per_cm3, xsec)
        return sigma * self._config.global_bias

    def mean_free_path(self, track: LeptonTrack, material: TargetMaterial) -> float:
        """Mean free path [cm] of *track* in *material*.

        Returns ``math.inf`` for non-applicable tracks, while the process is
        deactivated, or when the cross section vanishes.
        """
        if not self._active or not self.is_applicable(track.particle):
            return math.inf
        sigma = self.cross_section_per_volume(track.kinetic_energy_MeV, material)
        logger.debug(
            "%s: Σ = %.6g cm⁻¹ at %.3f MeV in %s",
            PROCESS_NAME, sigma, track.kinetic_energy_MeV, material.name,
        )
        return mean_free_path_cm(sigma)

    def post_step_do_it(self, track: LeptonTrack) -> ParticleChange:
        """Produce the interaction outcome for *track*.

        Raises:
            ValueError: If the process does not apply to *track*.
        """
        if not self.is_applicable(track.particle):
            raise ValueError(
                f"Dark brem process received a track that isn't applicable: "
                f"{track.particle.value}"
            )
        if self._config.only_one_per_event:
            logger.debug("Deactivating %s process", PROCESS_NAME)
            self._active = False
        return self._model.generate_change(
            track, always_create_new_lepton=self._config.always_create_new_lepton,
        )

    def describe(self) -> str:
        lines = [
            f" Muons              : {self._model.muons}",
            f" Only One Per Event : {self._config.only_one_per_event}",
            f" Global Bias        : {self._config.global_bias}",
            f" Cache Xsec         : {self._config.cache_xsec}",
        ]
        return "\n".join(lines)

    def print_info(self) -> None:
        for line in self.describe().splitlines():
            logger.info(line)
        self._model.print_info()
