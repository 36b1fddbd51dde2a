"""
The `constants` module defines the angular, temporal and physical constants used by the frame-conversion engine.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Constant to convert arcseconds to radians. Equal to 2pi/(360*3600). Units: *rad/as*
"""
AS2RAD = 2.0 * PI / 360.0 / 3600.0

"""
Constant to convert radians to arcseconds. Equal to (360*3600)/(2pi). Units: *as/rad*
"""
RAD2AS = 360.0 * 3600.0 / PI / 2.0

"""
Constant to convert milliarcseconds to radians. Units: *rad/mas*
"""
MAS2RAD = AS2RAD * 1e-3

"""
Constant to convert microarcseconds to radians. Units: *rad/uas*
"""
UAS2RAD = AS2RAD * 1e-6

# Time Constants

"""
Offset between Julian Date and Modified Julian Date. Units: *days*
"""
JD_MJD_OFFSET = 2400000.5

"""
Modified Julian Date of the J2000.0 epoch (2000-01-01 12:00:00 TT). Units: *days*
"""
MJD_J2000 = 51544.5

"""
Modified Julian Date of the Besselian epoch B1900.0. Units: *days*
"""
MJD_B1900 = 15019.81352

"""
Modified Julian Date of the Besselian epoch B1950.0. Units: *days*
"""
MJD_B1950 = 33281.92345905

"""
Length of the Julian year. Units: *days*
"""
JULIAN_YEAR_DAYS = 365.25

"""
Length of the Besselian (tropical) year. Units: *days*

References:

1. J. Lieske, *Precession matrix based on IAU (1976) system of astronomical constants*, A&A 73, 1979
"""
BESSELIAN_YEAR_DAYS = 365.242198781

"""
Days per Julian century. Units: *days*
"""
JULIAN_CENTURY_DAYS = 36525.0

"""
Seconds per day. Units: *s*
"""
SECONDS_PER_DAY = 86400.0

"""
Length of the mean sidereal day. Units: *s*
"""
SIDEREAL_DAY = 86164.0905

"""
Year at which catalogue conventions switch from Besselian (FK4) to Julian (FK5) epochs.
"""
JULIAN_EPOCH_SWITCH_YEAR = 1984.0

# Physical Constants
"""
Speed of light in vacuum. Units: *m/s*

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, 2010
"""
C_LIGHT = 299792458.0  # [m/s] Exact definition

"""
Astronomical Unit. TDB-compatible value. Units: *m*

References:

1. P. Gerard and B. Luzum, *IERS Technical Note 36*, 2010
"""
AU = 1.49597870700e11  # [m] Astronomical Unit IAU 2010

"""
Light year, the distance light travels in one Julian year. Units: *m*
"""
LIGHT_YEAR = C_LIGHT * JULIAN_YEAR_DAYS * SECONDS_PER_DAY

"""
Earth semi-major axis - WGS84 value. Units: *m*

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_a = 6378137.0  # WGS-84 semi-major axis

"""
Earth ellipsoid flattening - WGS84 value. Units: *dimensionless*

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_f = 1.0 / 298.257223563  # WGS-84 flattening

"""
Earth axial rotation rate. Units: *rad/s*

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, p. 222, 2010
"""
OMEGA_EARTH = 7.292115146706979e-5  # [rad/s]

"""
Gravitational constant of the Sun. Units: *m^3/s^2*

References:

1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012.
"""
GM_SUN = 132712440041.939400 * 1e9

"""
Nominal radius of the Sun. Units: *m*

References:

1. IAU 2015 Resolution B3, *Recommended nominal conversion constants for
   selected solar and planetary properties*.
"""
R_SUN = 6.957e8
