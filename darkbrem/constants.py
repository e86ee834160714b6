"""Package-wide constants.

Physical constants are in GeV unless the name says otherwise.
"""

# Lepton masses (PDG) [GeV]
ELECTRON_MASS_GEV = 0.00051099895
MUON_MASS_GEV = 0.1056583755

# Form-factor parameterisation (Bjorken et al., PRD 80 075018, App. A)
FORM_FACTOR_ELECTRON_MASS_GEV = 0.000511
PROTON_MASS_GEV = 0.938
PROTON_MAGNETIC_MOMENT = 2.79
INELASTIC_DIPOLE_SCALE_GEV2 = 0.71

# Couplings and conversions
ALPHA_EW = 1.0 / 137.0
GEV2_TO_PB = 3.894e8  # GeV⁻² → pb
AVOGADRO = 6.02214076e23  # mol⁻¹

# Cross-section integration
THETA_MAX_RAD = 0.3  # wide-angle A' production is negligible
QUAD_EPSREL = 1e-9
QUAD_LIMIT = 32  # subintervals, ~ depth 5 of bisection
MIN_KINETIC_ENERGY_MEV = 1e-3  # 1 keV

# Event library
DEFAULT_APRIME_LHE_ID = 622
MAX_SAMPLING_ITERATIONS = 10_000
APRIME_MASS_TOLERANCE = 1e-3  # relative
LHE_INCOMING = -1
LHE_OUTGOING = 1
LHE_LEPTON_IDS = (11, 13)
LIBRARY_EXTENSIONS = (".lhe", ".lhe.gz", ".csv", ".csv.gz")

LIBRARY_CSV_HEADER = [
    "incident_energy",
    "recoil_energy", "recoil_px", "recoil_py", "recoil_pz",
    "centerMomentum_energy", "centerMomentum_px",
    "centerMomentum_py", "centerMomentum_pz",
]
SCALED_CSV_HEADER = ["recoil_energy", "recoil_px", "recoil_py", "recoil_pz"]

# Cross-section cache key packing
CACHE_MAX_A = 1000
CACHE_MAX_E_MEV = 1_500_000
XSEC_TABLE_HEADER = ["A [au]", "Z [protons]", "Energy [MeV]", "Xsec [pb]"]

# Configuration JSON files
CONFIG_SCHEMA_VERSION = "1.0"
