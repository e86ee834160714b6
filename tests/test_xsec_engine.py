"""Dark brem cross-section engine.

Reference values were computed independently with a fine fixed-step
integration of the same WW expressions.
"""

import math

import pytest

from darkbrem.constants import ELECTRON_MASS_GEV
from darkbrem.core.xsec_engine import (
    CrossSectionEngine,
    flux_factor_chi_analytic,
    flux_factor_chi_numerical,
)
from darkbrem.models.config import DarkBremConfig, DarkPhoton

W_A, W_Z = 183.84, 74.0


def _engine(mass_GeV: float = 0.1, **kwargs) -> CrossSectionEngine:
    return CrossSectionEngine(DarkBremConfig(dark_photon=DarkPhoton(mass_GeV), **kwargs))


@pytest.fixture(scope="module")
def electron_engine() -> CrossSectionEngine:
    return _engine(0.1)


@pytest.fixture(scope="module")
def muon_engine() -> CrossSectionEngine:
    return _engine(1.0, muons=True)


# -----------------------------------------------------------------------
# Flux factor
# -----------------------------------------------------------------------

class TestFluxFactor:
    def test_analytic_forward_limits(self):
        E = 4.0 + ELECTRON_MASS_GEV
        ma2 = 0.01
        tmin = ma2 * ma2 / (4.0 * E * E)
        tmax = ma2 + ELECTRON_MASS_GEV ** 2
        chi = flux_factor_chi_analytic(W_A, W_Z, tmin, tmax)
        assert chi == pytest.approx(3.2948335273e4, rel=1e-6)

    def test_analytic_wide_range(self):
        chi = flux_factor_chi_analytic(W_A, W_Z, 1e-3, 100.0)
        assert chi == pytest.approx(2.8199262694e3, rel=1e-6)

    @pytest.mark.parametrize("tmin, tmax", [
        (1.5625e-6, 0.01),
        (1e-3, 100.0),
    ])
    def test_numerical_elastic_matches_analytic(self, tmin, tmax):
        numerical = flux_factor_chi_numerical(W_A, W_Z, tmin, tmax, elastic_only=True)
        analytic = flux_factor_chi_analytic(W_A, W_Z, tmin, tmax)
        assert numerical == pytest.approx(analytic, rel=1e-5)

    def test_inelastic_term_is_small_positive_correction(self):
        tmin, tmax = 1.5625e-6, 0.01
        elastic = flux_factor_chi_numerical(W_A, W_Z, tmin, tmax, elastic_only=True)
        full = flux_factor_chi_numerical(W_A, W_Z, tmin, tmax)
        assert full > elastic
        assert full / elastic - 1.0 < 0.05


# -----------------------------------------------------------------------
# Electron (improved WW)
# -----------------------------------------------------------------------

class TestElectronCrossSection:
    def test_tungsten_reference(self, electron_engine: CrossSectionEngine):
        xsec = electron_engine.compute_cross_section(4000.0, W_A, W_Z)
        assert xsec == pytest.approx(2.2671760e9, rel=0.01)

    @pytest.mark.parametrize("ke_MeV", [0.0, 0.5e-3, 10.0, 150.0, 199.9])
    def test_zero_below_threshold(self, electron_engine: CrossSectionEngine, ke_MeV):
        """Threshold is twice the A′ mass (0.2 GeV)."""
        assert electron_engine.compute_cross_section(ke_MeV, W_A, W_Z) == 0.0

    def test_user_threshold_above_mass(self):
        engine = _engine(0.1, threshold_GeV=2.0)
        assert engine.threshold_GeV == pytest.approx(2.0)
        assert engine.compute_cross_section(1999.0, W_A, W_Z) == 0.0
        assert engine.compute_cross_section(4000.0, W_A, W_Z) > 0.0

    @pytest.mark.parametrize("A, Z", [(183.84, 74), (207.2, 82), (63.546, 29), (12.011, 6)])
    def test_non_negative(self, electron_engine: CrossSectionEngine, A, Z):
        for ke in (250.0, 1000.0, 4000.0, 8000.0):
            xsec = electron_engine.compute_cross_section(ke, A, Z)
            assert xsec >= 0.0
            assert math.isfinite(xsec)

    def test_epsilon_squared_scaling(self, electron_engine: CrossSectionEngine):
        weak = _engine(0.1, epsilon=0.1)
        ratio = weak.compute_cross_section(4000.0, W_A, W_Z) / \
            electron_engine.compute_cross_section(4000.0, W_A, W_Z)
        assert ratio == pytest.approx(0.01, rel=1e-6)

    def test_grows_with_Z(self, electron_engine: CrossSectionEngine):
        light = electron_engine.compute_cross_section(4000.0, 12.011, 6)
        heavy = electron_engine.compute_cross_section(4000.0, W_A, W_Z)
        assert heavy > light

    def test_deterministic(self, electron_engine: CrossSectionEngine):
        first = electron_engine.compute_cross_section(3210.5, W_A, W_Z)
        second = electron_engine.compute_cross_section(3210.5, W_A, W_Z)
        assert first == second

    def test_invalid_target_returns_zero(self, electron_engine: CrossSectionEngine):
        assert electron_engine.compute_cross_section(4000.0, 0.0, 0.0) == 0.0


# -----------------------------------------------------------------------
# Muon (full WW, nested integral)
# -----------------------------------------------------------------------

class TestMuonCrossSection:
    def test_tungsten_reference(self, muon_engine: CrossSectionEngine):
        xsec = muon_engine.compute_cross_section(100_000.0, W_A, W_Z)
        assert xsec == pytest.approx(5.58065e6, rel=0.01)

    def test_zero_below_threshold(self, muon_engine: CrossSectionEngine):
        assert muon_engine.compute_cross_section(1500.0, W_A, W_Z) == 0.0

    def test_zero_when_lepton_cannot_reach_threshold_fraction(self, muon_engine: CrossSectionEngine):
        # E = 2.1057 GeV: x_threshold = 2/E = 0.95 exceeds x_max = 1 - 1/E = 0.53
        assert muon_engine.compute_cross_section(2000.0, W_A, W_Z) == 0.0
