"""Unit conversion module — single conversion point between host and core.

All unit conversions MUST go through this module.

Core units:
    Energy       : GeV (library records, scaling, interaction kinematics)
    Momentum     : GeV/c
    Cross section: pb
    Angle        : radian

Host units:
    Energy       : MeV (kinetic energies, cache keys, tracks)
    Number density: atoms/cm³
    Length       : cm (mean free path)
"""

import math
import sys
from typing import NewType

# Unit annotations for signatures
GeV = NewType('GeV', float)
MeV = NewType('MeV', float)
Cm2 = NewType('Cm2', float)

_PB_TO_CM2 = 1e-36


# ---------------------------------------------------------------------------
# Energy conversions
# ---------------------------------------------------------------------------

def MeV_to_GeV(mev: float) -> GeV:
    """Host (MeV) → Core (GeV)."""
    return GeV(mev / 1000.0)


def GeV_to_MeV(gev: float) -> MeV:
    """Core (GeV) → Host (MeV)."""
    return MeV(gev * 1000.0)


# ---------------------------------------------------------------------------
# Cross-section conversions
# ---------------------------------------------------------------------------

def pb_to_cm2(pb: float) -> Cm2:
    """Picobarn → cm²."""
    return Cm2(pb * _PB_TO_CM2)


# ---------------------------------------------------------------------------
# Attenuation in matter
# ---------------------------------------------------------------------------

def macroscopic_cross_section(
    atoms_per_cm3: float,
    xsec_pb: float,
) -> float:
    """Number density × microscopic cross section → Σ [cm⁻¹].

    Args:
        atoms_per_cm3: Number density of the element [atoms/cm³].
        xsec_pb: Cross section per atom [pb].

    Returns:
        Macroscopic cross section [cm⁻¹].
    """
    return atoms_per_cm3 * pb_to_cm2(xsec_pb)


def mean_free_path_cm(sigma_per_cm: float) -> float:
    """Macroscopic cross section [cm⁻¹] → mean free path [cm].

    Returns ``math.inf`` when Σ is not larger than the smallest positive
    normal float.
    """
    if sigma_per_cm > sys.float_info.min:
        return 1.0 / sigma_per_cm
    return math.inf
