"""
astroframes converts celestial directions between equatorial reference frames, implemented in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    AS2RAD,
    RAD2AS,
    MAS2RAD,
    UAS2RAD,
    JD_MJD_OFFSET,
    MJD_J2000,
    C_LIGHT,
    AU,
    LIGHT_YEAR,
    WGS84_a,
    WGS84_f,
    OMEGA_EARTH,
    GM_SUN,
)

from .rotations import Rx, Ry, Rz, small_rotation

from .config import set_dtype, get_dtype

from .errors import (
    FrameError,
    EphemerisDomainError,
    UnsupportedRouteError,
    EpochMismatchError,
    FrameParseError,
    FrameMismatchError,
)

from .epoch import (
    CoordinateEpoch,
    JulianEpoch,
    BesselianEpoch,
    J2000,
    B1900,
    B1950,
)

from .coordinates import EquatorialCoordinates, GeodeticLocation

from .delaunay import DelaunayArguments, delaunay_arguments

from .nutation import Precision, nutation, set_default_precision, get_default_precision

from .ephemeris import Body, SimpleEphemeris

from .frames import (
    ICRS_FRAME,
    GCRS_J2000,
    FK4_B1900,
    FK4_B1950,
    FK5_J2000,
    DYNAMICAL_J2000,
    EquatorialTransform,
    icrs,
    gcrs,
    fk4,
    fk5,
    dynamical,
    topocentric,
    convert,
    convert_in_place,
    describe_fits,
    frame_from_fits,
    frame_from_string,
)

__all__ = [
    # Constants
    "DEG2RAD",
    "RAD2DEG",
    "AS2RAD",
    "RAD2AS",
    "MAS2RAD",
    "UAS2RAD",
    "JD_MJD_OFFSET",
    "MJD_J2000",
    "C_LIGHT",
    "AU",
    "LIGHT_YEAR",
    "WGS84_a",
    "WGS84_f",
    "OMEGA_EARTH",
    "GM_SUN",
    # Rotations
    "Rx",
    "Ry",
    "Rz",
    "small_rotation",
    # Config
    "set_dtype",
    "get_dtype",
    # Errors
    "FrameError",
    "EphemerisDomainError",
    "UnsupportedRouteError",
    "EpochMismatchError",
    "FrameParseError",
    "FrameMismatchError",
    # Epochs
    "CoordinateEpoch",
    "JulianEpoch",
    "BesselianEpoch",
    "J2000",
    "B1900",
    "B1950",
    # Coordinates
    "EquatorialCoordinates",
    "GeodeticLocation",
    # Nutation
    "DelaunayArguments",
    "delaunay_arguments",
    "Precision",
    "nutation",
    "set_default_precision",
    "get_default_precision",
    # Ephemeris
    "Body",
    "SimpleEphemeris",
    # Frames
    "ICRS_FRAME",
    "GCRS_J2000",
    "FK4_B1900",
    "FK4_B1950",
    "FK5_J2000",
    "DYNAMICAL_J2000",
    "EquatorialTransform",
    "icrs",
    "gcrs",
    "fk4",
    "fk5",
    "dynamical",
    "topocentric",
    "convert",
    "convert_in_place",
    "describe_fits",
    "frame_from_fits",
    "frame_from_string",
]
