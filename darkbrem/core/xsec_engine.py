"""Dark brem cross-section engine — Weizsäcker–Williams integrals.

Computes the total A′ production cross section per target atom by numerical
integration of the differential cross section over the A′ energy fraction
``x`` (and, for muons, the A′ emission angle ``θ``).

Host-facing energies are kinetic energies in MeV; everything inside the
integrals is in GeV.  Results are in picobarn.

References:
    Bjorken, Essig, Schuster, Toro, PRD 80 075018 (2009), App. A (form factors).
    Gninenko, Kirpichnikov, Kirsanov, Krasnikov, arXiv:2101.12192, App. A
    (differential cross section and amplitude).
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from scipy import integrate

from darkbrem.constants import (
    ALPHA_EW,
    FORM_FACTOR_ELECTRON_MASS_GEV,
    GEV2_TO_PB,
    INELASTIC_DIPOLE_SCALE_GEV2,
    MIN_KINETIC_ENERGY_MEV,
    PROTON_MAGNETIC_MOMENT,
    PROTON_MASS_GEV,
    QUAD_EPSREL,
    QUAD_LIMIT,
    THETA_MAX_RAD,
)
from darkbrem.core.units import GeV_to_MeV, MeV_to_GeV
from darkbrem.models.config import DarkBremConfig

# (μ_p² − 1) / (4 m_p²)
_INELASTIC_NUCLEON_TERM = (
    (PROTON_MAGNETIC_MOMENT ** 2 - 1.0) / (4.0 * PROTON_MASS_GEV ** 2)
)


def _integrate(
    func: Callable[[float], float],
    a: float,
    b: float,
    points: Sequence[float] | None = None,
) -> float:
    """Adaptive Gauss–Kronrod quadrature with the engine's tolerance.

    Uses a pure relative error target and a bounded number of subintervals.
    When the subdivision limit is reached the best estimate is returned.
    """
    if b <= a:
        return 0.0
    result = integrate.quad(
        func, a, b,
        epsabs=0.0,
        epsrel=QUAD_EPSREL,
        limit=QUAD_LIMIT,
        points=points,
        full_output=1,
    )
    return float(result[0])


def _screening_parameters(A: float, Z: float) -> tuple[float, float]:
    """Elastic form-factor parameters (a⁻², d) [GeV²].

    a = 111 Z^(-1/3) / m_e,  d = 0.164 A^(-2/3)
    """
    a_el = 111.0 * Z ** (-1.0 / 3.0) / FORM_FACTOR_ELECTRON_MASS_GEV
    d_el = 0.164 * A ** (-2.0 / 3.0)
    return 1.0 / (a_el * a_el), d_el


def flux_factor_chi_analytic(
    A: float,
    Z: float,
    tmin: float,
    tmax: float,
) -> float:
    """Closed-form effective photon flux χ, elastic form factor only.

    χ = −Z² d² / (a⁻² − d)³ × [ (a⁻² − d)(a⁻² + d + 2t_max)(t_max − t_min)
        / ((a⁻² + t_max)(d + t_max))
        + (a⁻² + d + 2t_min) ln((a⁻² + t_max)(d + t_min) / ((a⁻² + t_min)(d + t_max))) ]

    Args:
        A: Atomic mass [amu].
        Z: Atomic number.
        tmin: Lower momentum-transfer² limit [GeV²].
        tmax: Upper momentum-transfer² limit [GeV²].

    Returns:
        χ [dimensionless].
    """
    ta, td = _screening_parameters(A, Z)
    log_term = (
        math.log(ta + tmax) - math.log(td + tmax)
        - math.log(ta + tmin) + math.log(td + tmin)
    )
    bracket = (
        (ta - td) * (ta + td + 2.0 * tmax) * (tmax - tmin)
        / ((ta + tmax) * (td + tmax))
        + (ta + td + 2.0 * tmin) * log_term
    )
    return -Z * Z * (td * td * bracket) / (ta - td) ** 3


def flux_factor_chi_numerical(
    A: float,
    Z: float,
    tmin: float,
    tmax: float,
    elastic_only: bool = False,
) -> float:
    """Effective photon flux χ by numerical integration over t.

    χ = ∫ dt (G₂,el(t) + G₂,inel(t)) (t − t_min) / t²

    The 1/t² of the measure is cancelled analytically against the t² in
    both form factors so the integrand stays finite at small t.

    Args:
        A: Atomic mass [amu].
        Z: Atomic number.
        tmin: Lower momentum-transfer² limit [GeV²].
        tmax: Upper momentum-transfer² limit [GeV²].
        elastic_only: Drop the inelastic (proton) term.

    Returns:
        χ [dimensionless].
    """
    ael_inv2, del_ = _screening_parameters(A, Z)
    a_in = 773.0 * Z ** (-2.0 / 3.0) / FORM_FACTOR_ELECTRON_MASS_GEV
    ain_inv2 = 1.0 / (a_in * a_in)
    din = INELASTIC_DIPOLE_SCALE_GEV2

    def integrand(t: float) -> float:
        elastic = (Z / ((ael_inv2 + t) * (1.0 + t / del_))) ** 2
        if elastic_only:
            return elastic * (t - tmin)
        nucl = 1.0 + t * _INELASTIC_NUCLEON_TERM
        inelastic = Z * (nucl / ((ain_inv2 + t) * (1.0 + t / din) ** 4)) ** 2
        return (elastic + inelastic) * (t - tmin)

    return _integrate(integrand, tmin, tmax)


class CrossSectionEngine:
    """Total dark brem cross section per atom.

    Electrons use the improved WW approximation: χ is evaluated once at the
    forward (θ = 0, x = 1) limits and a single integral over x remains,

        σ = pb/GeV² · χ ∫₀^x_max dx 4 α³ ε² √(1 − m_A²/E₀²)
              (1 − x + x²/3) / (m_A²(1 − x)/x + m_e² x)

    Muons are too heavy for that approximation; the full WW form is
    integrated over θ ∈ [0, 0.3] and x with χ(x, θ) evaluated analytically
    (elastic term only) at every phase-space point,

        dσ/dx dcosθ = 2 α³ ε² √(x²E₀² − m_A²) E₀ (1 − x) χ(x, θ)/ũ² 𝒜²
        ũ = −x E₀² θ² − m_A² (1 − x)/x − m_μ² x
        t_min = (ũ / 2E₀(1 − x))²,  t_max = E₀²

    In both cases x_max = 1 − max(m_l, m_A)/E₀.

    Args:
        config: Model configuration (A′ mass, ε, threshold, lepton species).
    """

    def __init__(self, config: DarkBremConfig) -> None:
        self._config = config
        self._ma = config.dark_photon.mass_GeV
        self._threshold = config.effective_threshold_GeV
        self._lepton_mass = config.lepton_mass_GeV
        self._eps_sq = config.epsilon ** 2

    @property
    def threshold_GeV(self) -> float:
        return self._threshold

    @property
    def muons(self) -> bool:
        return self._config.muons

    def compute_cross_section(
        self,
        kinetic_energy_MeV: float,
        A: float,
        Z: float,
    ) -> float:
        """Cross section per atom.

        Args:
            kinetic_energy_MeV: Lepton kinetic energy [MeV].
            A: Atomic mass of the target element [amu].
            Z: Atomic number of the target element.

        Returns:
            σ [pb]; 0.0 below threshold or outside the kinematic range.
        """
        if (kinetic_energy_MeV < MIN_KINETIC_ENERGY_MEV
                or kinetic_energy_MeV < GeV_to_MeV(self._threshold)):
            return 0.0
        if A <= 0 or Z <= 0:
            return 0.0

        lepton_e = MeV_to_GeV(kinetic_energy_MeV) + self._lepton_mass
        x_max = 1.0 - max(self._lepton_mass, self._ma) / lepton_e
        x_threshold = self._threshold / lepton_e
        if x_threshold >= x_max:
            return 0.0

        if self.muons:
            x_integrand = self._muon_x_integrand(lepton_e, A, Z)
        else:
            x_integrand = self._electron_x_integrand(lepton_e, A, Z)

        integrated = _integrate(x_integrand, 0.0, x_max, points=[x_threshold])
        cross = integrated * GEV2_TO_PB
        # floating-point cancellation near the integration edges
        return cross if cross > 0.0 else 0.0

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _electron_x_integrand(
        self,
        lepton_e: float,
        A: float,
        Z: float,
    ) -> Callable[[float], float]:
        ma2 = self._ma * self._ma
        ml2 = self._lepton_mass * self._lepton_mass
        lepton_e_sq = lepton_e * lepton_e
        chi = flux_factor_chi_numerical(
            A, Z, ma2 * ma2 / (4.0 * lepton_e_sq), ma2 + ml2,
        )
        beta = math.sqrt(1.0 - ma2 / lepton_e_sq)
        prefactor = 4.0 * self._eps_sq * ALPHA_EW ** 3 * chi * beta

        def integrand(x: float) -> float:
            if x * lepton_e < self._threshold:
                return 0.0
            numerator = 1.0 - x + x * x / 3.0
            denominator = ma2 * (1.0 - x) / x + ml2
            return prefactor * numerator / denominator

        return integrand

    def _muon_x_integrand(
        self,
        lepton_e: float,
        A: float,
        Z: float,
    ) -> Callable[[float], float]:
        def integrand(x: float) -> float:
            if x * lepton_e < self._threshold:
                return 0.0
            return _integrate(
                lambda theta: self._differential(x, theta, lepton_e, A, Z),
                0.0, THETA_MAX_RAD,
            )

        return integrand

    def _differential(
        self,
        x: float,
        theta: float,
        lepton_e: float,
        A: float,
        Z: float,
    ) -> float:
        """dσ/dx dθ (including the sin θ Jacobian) [GeV⁻²]."""
        if x * lepton_e < self._threshold:
            return 0.0

        ma2 = self._ma * self._ma
        ml2 = self._lepton_mass * self._lepton_mass
        lepton_e_sq = lepton_e * lepton_e
        x_sq = x * x

        utilde = -x * lepton_e_sq * theta * theta - ma2 * (1.0 - x) / x - ml2 * x
        utilde_sq = utilde * utilde

        tmin = utilde_sq / (4.0 * lepton_e_sq * (1.0 - x) * (1.0 - x))
        tmax = lepton_e_sq
        if tmin < 0.0 or tmax < tmin:
            return 0.0

        chi = flux_factor_chi_analytic(A, Z, tmin, tmax)

        factor1 = 2.0 * (2.0 - 2.0 * x + x_sq) / (1.0 - x)
        factor2 = 4.0 * (ma2 + 2.0 * ml2) / utilde_sq
        factor3 = utilde * x + ma2 * (1.0 - x) + ml2 * x_sq
        amplitude_sq = factor1 + factor2 * factor3

        return (
            2.0 * self._eps_sq * ALPHA_EW ** 3
            * math.sqrt(x_sq * lepton_e_sq - ma2) * lepton_e * (1.0 - x)
            * (chi / utilde_sq) * amplitude_sq * math.sin(theta)
        )
