"""Physical constants, unit conversions and solar-system defaults.

Positions are kept in astronomical units, velocities in AU/day and masses in
kilograms.  The force evaluator works in metres internally and folds the
conversion back to AU/day² into :data:`G_ACC`.
"""

# --- Units ---
G_REAL = 6.6743e-11            # Gravitational constant (m^3 kg^-1 s^-2)
DAY = 86400.0                  # Seconds per day
AU = 1.496e11                  # Metres per astronomical unit
ACC_SCALE = (DAY * DAY) / AU   # m/s^2 -> AU/day^2
G_ACC = ACC_SCALE * G_REAL     # G with the unit conversion folded in
AU_PER_DAY = AU / DAY          # AU/day -> m/s

# --- PEFRL (Omelyan, Mryglod & Folk 2002) ---
XI = 0.1786178958448091
LAMBDA = -0.2123418310626054
CHI = -0.06626458266981849
P1 = (1.0 - 2.0 * LAMBDA) / 2.0
P2 = 1.0 - 2.0 * (CHI + XI)

# --- Solar system ---
BODY_NAMES = (
    "Sun",
    "Mercury",
    "Venus",
    "Earth",
    "Mars",
    "Jupiter",
    "Saturn",
    "Uranus",
    "Neptune",
)
SOLAR_SYSTEM_MASSES = (
    1.989e30,
    3.301e23,
    4.868e24,
    5.972e24,
    6.417e23,
    1.898e27,
    5.683e26,
    8.681e25,
    1.024e26,
)
# JPL Horizons target IDs (Sun, then planet centres)
HORIZONS_IDS = ("10", "199", "299", "399", "499", "599", "699", "799", "899")
HORIZONS_URL = "https://ssd.jpl.nasa.gov/api/horizons.api"
DEFAULT_EPOCH_YEAR = 2000

SOLAR_MASS = SOLAR_SYSTEM_MASSES[0]
EARTH_MASS = SOLAR_SYSTEM_MASSES[3]
