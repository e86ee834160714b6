"""Model and process configuration data models.

Configuration objects are immutable once constructed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from darkbrem.constants import (
    DEFAULT_APRIME_LHE_ID,
    ELECTRON_MASS_GEV,
    MUON_MASS_GEV,
)
from darkbrem.core.errors import ConfigurationError


class ScalingMethod(Enum):
    """How a library vertex is adapted to the actual incident energy."""
    FORWARD_ONLY = "forward_only"
    CM_SCALING = "cm_scaling"
    UNDEFINED = "undefined"

    @classmethod
    def from_name(cls, name: str) -> ScalingMethod:
        """Resolve a method name, rejecting unknown names.

        Raises:
            ConfigurationError: If *name* is not a known scaling method.
        """
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                f"Invalid dark brem interpretation/scaling method {name!r}. "
                f"Choose one of {[m.value for m in cls]}."
            ) from None


@dataclass(frozen=True)
class DarkPhoton:
    """Dark photon definition shared by the engine and the sampler.

    Attributes:
        mass_GeV: A′ mass [GeV].
        lhe_id: Particle ID of the A′ inside legacy LHE records.
    """
    mass_GeV: float
    lhe_id: int = DEFAULT_APRIME_LHE_ID

    def __post_init__(self) -> None:
        if self.mass_GeV <= 0:
            raise ConfigurationError(
                f"Dark photon mass must be positive, got {self.mass_GeV} GeV"
            )


@dataclass(frozen=True)
class DarkBremConfig:
    """Vertex-library model configuration.

    Attributes:
        dark_photon: A′ definition.
        method: Library vertex scaling method.
        threshold_GeV: Minimum lepton energy for a non-zero cross section
            [GeV]. The effective threshold is never below twice the A′ mass.
        epsilon: Dark photon / photon mixing strength.
        muons: True for muons, False for electrons.
    """
    dark_photon: DarkPhoton
    method: ScalingMethod = ScalingMethod.FORWARD_ONLY
    threshold_GeV: float = 0.0
    epsilon: float = 1.0
    muons: bool = False

    @property
    def lepton_mass_GeV(self) -> float:
        return MUON_MASS_GEV if self.muons else ELECTRON_MASS_GEV

    @property
    def effective_threshold_GeV(self) -> float:
        return max(self.threshold_GeV, 2.0 * self.dark_photon.mass_GeV)


@dataclass(frozen=True)
class ProcessConfig:
    """Host-facing process options.

    Attributes:
        only_one_per_event: Deactivate the process after one interaction.
        global_bias: Multiplier applied to the summed cross section.
        cache_xsec: Memoize per-element cross sections.
        always_create_new_lepton: Kill the incident track and create a new
            recoil lepton, instead of updating the incident track in place.
    """
    only_one_per_event: bool = False
    global_bias: float = 1.0
    cache_xsec: bool = True
    always_create_new_lepton: bool = True
