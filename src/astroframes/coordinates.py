"""Spherical coordinate pairs and observer locations.

Converts between equatorial (right ascension, declination) pairs and
rectangular direction vectors, and describes observer sites on the WGS84
ellipsoid for topocentric frames.

All inputs and outputs use SI base units (metres, radians) unless
``use_degrees`` is given.

References:
    1. NIMA Technical Report TR8350.2, *Department of Defense World Geodetic
       System 1984*.
    2. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, Springer, 2012, Sec. 5.3.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes._angle import from_radians, to_radians, wrap_to_2pi
from astroframes.config import get_dtype
from astroframes.constants import WGS84_a, WGS84_f

# First eccentricity squared of the WGS84 ellipsoid
ECC2 = WGS84_f * (2.0 - WGS84_f)


# ---------------------------------------------------------------------------
# Spherical <-> rectangular
# ---------------------------------------------------------------------------


def spherical_to_cartesian(lon: ArrayLike, lat: ArrayLike, use_degrees: bool = False) -> Array:
    """Unit vector pointing at a longitude/latitude pair.

    Args:
        lon: Longitude (right ascension).
        lat: Latitude (declination).
        use_degrees: If ``True``, interpret the angles as degrees.

    Returns:
        jax.Array: Unit vector(s) of shape ``lon.shape + (3,)``.
    """
    lon = to_radians(jnp.asarray(lon, dtype=get_dtype()), use_degrees)
    lat = to_radians(jnp.asarray(lat, dtype=get_dtype()), use_degrees)
    cos_lat = jnp.cos(lat)
    return jnp.stack([cos_lat * jnp.cos(lon), cos_lat * jnp.sin(lon), jnp.sin(lat)], axis=-1)


def cartesian_to_spherical(vector: ArrayLike, use_degrees: bool = False) -> tuple[Array, Array]:
    """Longitude/latitude of a rectangular vector of any magnitude.

    Args:
        vector: Vector(s) with a trailing axis of length 3.
        use_degrees: If ``True``, return degrees.

    Returns:
        tuple[jax.Array, jax.Array]: Longitude in [0, 2pi) and latitude in
        [-pi/2, pi/2] (or the degree equivalents).
    """
    vector = jnp.asarray(vector, dtype=get_dtype())
    x, y, z = vector[..., 0], vector[..., 1], vector[..., 2]
    lon = wrap_to_2pi(jnp.arctan2(y, x))
    lat = jnp.arctan2(z, jnp.hypot(x, y))
    return from_radians(lon, use_degrees), from_radians(lat, use_degrees)


class EquatorialCoordinates:
    """A mutable right ascension / declination pair.

    The pair may be tagged with the frame it is expressed in; frame
    conversions performed in place check and update the tag.

    Args:
        ra: Right ascension [rad].
        dec: Declination [rad].
        frame: Frame the coordinates are expressed in, if known.

    Examples:
        ```python
        from astroframes.coordinates import EquatorialCoordinates
        eq = EquatorialCoordinates.from_degrees(83.63, 22.01)
        v = eq.to_cartesian()
        ```
    """

    __slots__ = ('ra', 'dec', 'frame')

    def __init__(self, ra: float, dec: float, frame=None) -> None:
        self.ra = float(ra)
        self.dec = float(dec)
        self.frame = frame

    @classmethod
    def from_degrees(cls, ra: float, dec: float, frame=None) -> EquatorialCoordinates:
        """Create coordinates from angles in degrees."""
        return cls(float(jnp.deg2rad(ra)), float(jnp.deg2rad(dec)), frame)

    @classmethod
    def from_cartesian(cls, vector: ArrayLike, frame=None) -> EquatorialCoordinates:
        """Create coordinates from a rectangular vector."""
        coords = cls(0.0, 0.0, frame)
        coords.set_cartesian(vector)
        return coords

    def to_cartesian(self) -> Array:
        """Return the unit vector of these coordinates."""
        return spherical_to_cartesian(self.ra, self.dec)

    def set_cartesian(self, vector: ArrayLike) -> None:
        """Overwrite the angles from a rectangular vector of any magnitude."""
        ra, dec = cartesian_to_spherical(vector)
        self.ra = float(ra)
        self.dec = float(dec)

    def __repr__(self) -> str:
        return f"EquatorialCoordinates(ra={self.ra!r}, dec={self.dec!r}, frame={self.frame!r})"


# ---------------------------------------------------------------------------
# Observer locations
# ---------------------------------------------------------------------------


def position_geodetic_to_ecef(
    x_geod: ArrayLike,
    use_degrees: bool = False,
) -> Array:
    """Convert geodetic position to ECEF Cartesian coordinates.

    Uses the WGS84 prime vertical radius of curvature:

    .. math::

        N = \\frac{a}{\\sqrt{1 - e^2 \\sin^2 \\phi}}

    Args:
        x_geod: Geodetic coordinates ``[lon, lat, alt]``.
            Longitude and latitude in *rad* (or *deg* if ``use_degrees=True``),
            altitude in *m* above the WGS84 ellipsoid.
        use_degrees: If ``True``, interpret longitude and latitude as degrees.

    Returns:
        jax.Array: ECEF position ``[x, y, z]`` in *m*.

    Example:
        >>> import jax.numpy as jnp
        >>> from astroframes.coordinates import position_geodetic_to_ecef
        >>> x_ecef = position_geodetic_to_ecef(jnp.array([0.0, 0.0, 0.0]))
        >>> float(x_ecef[0])  # WGS84_a on the equator
        6378137.0
    """
    x_geod = jnp.asarray(x_geod, dtype=get_dtype())
    lon = to_radians(x_geod[0], use_degrees)
    lat = to_radians(x_geod[1], use_degrees)
    alt = x_geod[2]

    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)
    N = WGS84_a / jnp.sqrt(1.0 - ECC2 * sin_lat * sin_lat)

    return jnp.array([
        (N + alt) * cos_lat * jnp.cos(lon),
        (N + alt) * cos_lat * jnp.sin(lon),
        ((1.0 - ECC2) * N + alt) * sin_lat,
    ])


def rotation_ellipsoid_to_enz(
    x_ellipsoid: ArrayLike,
    use_degrees: bool = False,
) -> Array:
    """Compute the rotation matrix from ECEF to East-North-Zenith (ENZ).

    Args:
        x_ellipsoid: Ellipsoidal coordinates ``[lon, lat, alt]``.
            Longitude and latitude in *rad* (or *deg* if ``use_degrees=True``),
            altitude in *m*.
        use_degrees: If ``True``, interpret longitude and latitude as degrees.

    Returns:
        3x3 rotation matrix (ECEF -> ENZ). Its transpose maps ENZ to ECEF.
    """
    x_ellipsoid = jnp.asarray(x_ellipsoid, dtype=get_dtype())
    lon = to_radians(x_ellipsoid[0], use_degrees)
    lat = to_radians(x_ellipsoid[1], use_degrees)

    sin_lon = jnp.sin(lon)
    cos_lon = jnp.cos(lon)
    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    # Rows are E, N, Z basis vectors expressed in ECEF
    return jnp.array([
        [-sin_lon, cos_lon, 0.0],
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
    ])


class GeodeticLocation(NamedTuple):
    """An observer site on the WGS84 ellipsoid.

    Attributes:
        lon: East longitude [rad].
        lat: Geodetic latitude [rad].
        alt: Height above the ellipsoid [m].
    """

    lon: float
    lat: float
    alt: float = 0.0

    @classmethod
    def from_degrees(cls, lon: float, lat: float, alt: float = 0.0) -> GeodeticLocation:
        """Create a location from longitude and latitude in degrees."""
        return cls(float(jnp.deg2rad(lon)), float(jnp.deg2rad(lat)), float(alt))

    def as_array(self) -> Array:
        """Return ``[lon, lat, alt]`` as an array."""
        return jnp.array([self.lon, self.lat, self.alt], dtype=get_dtype())

    def to_ecef(self) -> Array:
        """ECEF position of the site [m]."""
        return position_geodetic_to_ecef(self.as_array())

    def enz_to_ecef(self) -> Array:
        """Rotation matrix taking local ENZ vectors to ECEF."""
        return rotation_ellipsoid_to_enz(self.as_array()).T
