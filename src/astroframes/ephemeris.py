"""Simplified solar-system ephemeris for aberration, parallax and deflection.

Supplies approximate heliocentric and barycentric positions and velocities
of the Sun and the Earth, in metres and metres per second, referred to the
ICRS-aligned J2000 equator. The model follows the ``solsys3`` ephemeris of
NOVAS:

- the geocentric Sun comes from a 50-term trigonometric series in
  longitude and distance, referred to the mean equator and equinox of date
  and then precessed to J2000,
- the Earth is the negated Sun vector, with velocity from a central
  difference at +/- 0.1 day,
- the solar-system barycenter is offset from the Sun by the mass-weighted
  Keplerian positions of Jupiter, Saturn, Uranus and Neptune.

The series and the barycenter model are only calibrated for MJD 0 to
100000; queries outside that window raise
:class:`~astroframes.errors.EphemerisDomainError`.

References:

    1. G. Kaplan et al., *User's Guide to NOVAS Version C3.1*, USNO, 2011.
    2. P. K. Seidelmann (ed.), *Explanatory Supplement to the Astronomical
       Almanac*, 1992, p. 316.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable

import jax.numpy as jnp
from jax import Array

from astroframes._angle import wrap_to_2pi
from astroframes.config import get_dtype
from astroframes.constants import AS2RAD, AU, JULIAN_CENTURY_DAYS, MJD_J2000, SECONDS_PER_DAY
from astroframes.errors import EphemerisDomainError
from astroframes.precession import precession_matrix
from astroframes.rotations import rotate
from astroframes.time import mjd_to_julian_year

MJD_MIN: float = 0.0
"""Earliest MJD the ephemeris is valid for."""

MJD_MAX: float = 100000.0
"""Latest MJD the ephemeris is valid for."""

_VELOCITY_STEP_DAYS = 0.1

_BARYCENTER_MJD_TOLERANCE = 1e-6

# Obliquity used to rotate the giant-planet orbits onto the equator (IAU 1976).
_EPS0 = 84381.448 * AS2RAD

# Jupiter, Saturn, Uranus, Neptune: reciprocal mass [Sun masses], semi-major
# axis [AU], eccentricity, inclination, longitude of node, longitude of
# perihelion, mean longitude at J2000 [rad], mean motion [rad/day].
_GIANT_PLANETS: tuple[tuple[float, ...], ...] = (
    (1047.349, 5.203363, 0.048393, 0.022782, 1.755036, 0.257503, 0.600470, 1.450138e-3),
    (3497.898, 9.537070, 0.054151, 0.043362, 1.984702, 1.613242, 0.871693, 5.841727e-4),
    (22903.0, 19.191264, 0.047168, 0.013437, 1.295556, 2.983889, 5.466933, 2.047497e-4),
    (19412.2, 30.068963, 0.008586, 0.030878, 2.298977, 0.784898, 5.321160, 1.043891e-4),
)

# Sun longitude / distance series: longitude amplitude, distance amplitude
# [1e-7 rad, 1e-7 AU], phase [rad], frequency [rad / 10000 Julian years].
_SUN_SERIES: tuple[tuple[float, float, float, float], ...] = (
    (403406.0, 0.0, 4.721964, 1.621043),
    (195207.0, -97597.0, 5.937458, 62830.348067),
    (119433.0, -59715.0, 1.115589, 62830.821524),
    (112392.0, -56188.0, 5.781616, 62829.634302),
    (3891.0, -1556.0, 5.5474, 125660.5691),
    (2819.0, -1126.0, 1.5120, 125660.9845),
    (1721.0, -861.0, 4.1897, 62832.4766),
    (0.0, 941.0, 1.163, 0.813),
    (660.0, -264.0, 5.415, 125659.310),
    (350.0, -163.0, 4.315, 57533.850),
    (334.0, 0.0, 4.553, -33.931),
    (314.0, 309.0, 5.198, 777137.715),
    (268.0, -158.0, 5.989, 78604.191),
    (242.0, 0.0, 2.911, 5.412),
    (234.0, -54.0, 1.423, 39302.098),
    (158.0, 0.0, 0.061, -34.861),
    (132.0, -93.0, 2.317, 115067.698),
    (129.0, -20.0, 3.193, 15774.337),
    (114.0, 0.0, 2.828, 5296.670),
    (99.0, -47.0, 0.52, 58849.27),
    (93.0, 0.0, 4.65, 5296.11),
    (86.0, 0.0, 4.35, -3980.70),
    (78.0, -33.0, 2.75, 52237.69),
    (72.0, -32.0, 4.50, 55076.47),
    (68.0, 0.0, 3.23, 261.08),
    (64.0, -10.0, 1.22, 15773.85),
    (46.0, -16.0, 0.14, 188491.03),
    (38.0, 0.0, 3.44, -7756.55),
    (37.0, 0.0, 4.37, 264.89),
    (32.0, -24.0, 1.14, 117906.27),
    (29.0, -13.0, 2.84, 55075.75),
    (28.0, 0.0, 5.96, -7961.39),
    (27.0, -9.0, 5.09, 188489.81),
    (27.0, 0.0, 1.72, 2132.19),
    (25.0, -17.0, 2.56, 109771.03),
    (24.0, -11.0, 1.92, 54868.56),
    (21.0, 0.0, 0.09, 25443.93),
    (21.0, 31.0, 5.98, -55731.43),
    (20.0, -10.0, 4.03, 60697.74),
    (18.0, 0.0, 4.27, 2132.79),
    (17.0, -12.0, 0.79, 109771.63),
    (14.0, 0.0, 4.24, -7752.82),
    (13.0, -5.0, 2.01, 188491.91),
    (13.0, 0.0, 2.65, 207.81),
    (13.0, 0.0, 4.98, 29424.63),
    (12.0, 0.0, 0.93, -7.99),
    (10.0, 0.0, 2.21, 46941.14),
    (10.0, 0.0, 3.59, -68.29),
    (10.0, 0.0, 1.50, 21463.25),
    (10.0, -9.0, 2.55, 157208.40),
)


class Body(enum.Enum):
    """Bodies covered by the simplified ephemeris."""

    SUN = "sun"
    EARTH = "earth"


def check_domain(mjd: float) -> None:
    """Raise if *mjd* lies outside the calibrated window.

    Raises:
        EphemerisDomainError: If *mjd* is not within [0, 100000].
    """
    if not (MJD_MIN <= mjd <= MJD_MAX):
        raise EphemerisDomainError(mjd, MJD_MIN, MJD_MAX)


# ---------------------------------------------------------------------------
# Model evaluation
# ---------------------------------------------------------------------------


def sun_geocentric_position(mjd: float) -> Array:
    """Geocentric position of the Sun on the J2000 equator [m].

    No domain check is applied; callers validate the requested MJD.

    Args:
        mjd: Modified Julian Date (TT).

    Returns:
        jax.Array: Position vector of shape ``(3,)``.
    """
    dtype = get_dtype()
    series = jnp.asarray(_SUN_SERIES, dtype=dtype)

    t = (jnp.asarray(mjd, dtype=dtype) - MJD_J2000) / JULIAN_CENTURY_DAYS
    u = 0.01 * t

    arg = series[:, 2] + series[:, 3] * u
    sum_lon = 1e-7 * jnp.sum(series[:, 0] * jnp.sin(arg))
    sum_r = 1e-7 * jnp.sum(series[:, 1] * jnp.cos(arg))

    # Correction to the longitude from a linear fit to DE405 over 1900-2100.
    lon = 4.9353929 + 62833.1961680 * u + sum_lon
    lon = wrap_to_2pi(lon + (-0.1371679461 - 0.2918293271 * t) * AS2RAD)

    eps_mean = (84381.406 + (-46.836769 + (-0.0001831 + 0.00200340 * t) * t) * t) * AS2RAD
    distance = (1.0001026 + sum_r) * AU

    sin_lon = jnp.sin(lon)
    of_date = distance * jnp.stack(
        [jnp.cos(lon), jnp.cos(eps_mean) * sin_lon, jnp.sin(eps_mean) * sin_lon]
    )
    year = float(mjd_to_julian_year(mjd))
    return rotate(precession_matrix(year, 2000.0), of_date)


def barycenter_offset(mjd: float) -> tuple[Array, Array]:
    """Heliocentric position and velocity of the solar-system barycenter.

    Only the four giant planets are included, on unperturbed Keplerian
    orbits with a second-order solution of Kepler's equation.

    Args:
        mjd: Modified Julian Date (TT).

    Returns:
        tuple[jax.Array, jax.Array]: Position [m] and velocity [m/s].
    """
    dtype = get_dtype()
    planets = jnp.asarray(_GIANT_PLANETS, dtype=dtype)
    rmass, a, e, incl, node, peri, mlon0, motion = planets.T

    total_mass = 1.0 + 5.977e-6 + jnp.sum(1.0 / rmass)

    se, ce = jnp.sin(_EPS0), jnp.cos(_EPS0)
    si, ci = jnp.sin(incl), jnp.cos(incl)
    sn, cn = jnp.sin(node), jnp.cos(node)
    sw, cw = jnp.sin(peri - node), jnp.cos(peri - node)

    # Orbital basis vectors on the J2000 equator (Brouwer & Clemence 1961).
    p_hat = a[:, None] * jnp.stack([
        cw * cn - sw * sn * ci,
        (cw * sn + sw * cn * ci) * ce - sw * si * se,
        (cw * sn + sw * cn * ci) * se + sw * si * ce,
    ], axis=-1)
    q_hat = (a * jnp.sqrt(1.0 - e * e))[:, None] * jnp.stack([
        -sw * cn - cw * sn * ci,
        (-sw * sn + cw * cn * ci) * ce - cw * si * se,
        (-sw * sn + cw * cn * ci) * se + cw * si * ce,
    ], axis=-1)

    mean_lon = mlon0 + motion * (mjd - MJD_J2000)
    mean_anomaly = jnp.remainder(mean_lon - peri + jnp.pi, 2.0 * jnp.pi) - jnp.pi
    ecc_anomaly = mean_anomaly + e * jnp.sin(mean_anomaly) + 0.5 * e * e * jnp.sin(2.0 * mean_anomaly)
    sin_u, cos_u = jnp.sin(ecc_anomaly), jnp.cos(ecc_anomaly)
    rate = motion / (1.0 - e * cos_u)

    positions = (cos_u - e)[:, None] * p_hat + sin_u[:, None] * q_hat
    velocities = rate[:, None] * (-sin_u[:, None] * p_hat + cos_u[:, None] * q_hat)

    weights = (1.0 / (rmass * total_mass))[:, None]
    position = jnp.sum(weights * positions, axis=0) * AU
    velocity = jnp.sum(weights * velocities, axis=0) * (AU / SECONDS_PER_DAY)
    return position, velocity


# ---------------------------------------------------------------------------
# Barycenter cache
# ---------------------------------------------------------------------------


class BarycenterCache:
    """Depth-1 memo of the barycenter offset.

    Holds only the most recently computed MJD. Thread-safe via internal lock.
    """

    def __init__(self) -> None:
        self._mjd: float | None = None
        self._value: tuple[Array, Array] | None = None
        self._lock = threading.Lock()

    @property
    def last_mjd(self) -> float | None:
        """MJD of the stored offset, or None when empty."""
        with self._lock:
            return self._mjd

    def get(
        self, mjd: float, compute: Callable[[float], tuple[Array, Array]]
    ) -> tuple[Array, Array]:
        """Return the offset at *mjd*, computing and storing it on a miss.

        Args:
            mjd: Modified Julian Date.
            compute: Function producing (position, velocity) for an MJD.

        Returns:
            tuple[jax.Array, jax.Array]: Position [m] and velocity [m/s].
        """
        with self._lock:
            if self._mjd is None or abs(mjd - self._mjd) > _BARYCENTER_MJD_TOLERANCE:
                self._value = compute(mjd)
                self._mjd = mjd
            return self._value

    def clear(self) -> None:
        """Forget the stored offset."""
        with self._lock:
            self._mjd = None
            self._value = None


# ---------------------------------------------------------------------------
# Ephemeris
# ---------------------------------------------------------------------------


class SimpleEphemeris:
    """Heliocentric and barycentric states of the Sun and the Earth.

    Args:
        barycenter_cache: Cache for the barycenter offset. A fresh
            :class:`BarycenterCache` when omitted.

    Examples:
        ```python
        from astroframes.ephemeris import Body, SimpleEphemeris
        eph = SimpleEphemeris()
        v = eph.barycentric_velocity(Body.EARTH, 60000.0)  # ~30 km/s
        ```
    """

    def __init__(self, barycenter_cache: BarycenterCache | None = None) -> None:
        self.barycenter_cache = barycenter_cache if barycenter_cache is not None else BarycenterCache()

    def heliocentric_position(self, body: Body, mjd: float) -> Array:
        """Position relative to the Sun [m].

        Raises:
            EphemerisDomainError: If *mjd* is outside [0, 100000].
        """
        check_domain(mjd)
        if body is Body.SUN:
            return jnp.zeros(3, dtype=get_dtype())
        return -sun_geocentric_position(mjd)

    def heliocentric_velocity(self, body: Body, mjd: float) -> Array:
        """Velocity relative to the Sun [m/s].

        Raises:
            EphemerisDomainError: If *mjd* is outside [0, 100000].
        """
        check_domain(mjd)
        if body is Body.SUN:
            return jnp.zeros(3, dtype=get_dtype())
        ahead = sun_geocentric_position(mjd + _VELOCITY_STEP_DAYS)
        behind = sun_geocentric_position(mjd - _VELOCITY_STEP_DAYS)
        return -(ahead - behind) / (2.0 * _VELOCITY_STEP_DAYS * SECONDS_PER_DAY)

    def barycenter(self, mjd: float) -> tuple[Array, Array]:
        """Heliocentric position [m] and velocity [m/s] of the barycenter.

        Raises:
            EphemerisDomainError: If *mjd* is outside [0, 100000].
        """
        check_domain(mjd)
        return self.barycenter_cache.get(mjd, barycenter_offset)

    def barycentric_position(self, body: Body, mjd: float) -> Array:
        """Position relative to the solar-system barycenter [m].

        Raises:
            EphemerisDomainError: If *mjd* is outside [0, 100000].
        """
        position = self.heliocentric_position(body, mjd)
        return position - self.barycenter(mjd)[0]

    def barycentric_velocity(self, body: Body, mjd: float) -> Array:
        """Velocity relative to the solar-system barycenter [m/s].

        Raises:
            EphemerisDomainError: If *mjd* is outside [0, 100000].
        """
        velocity = self.heliocentric_velocity(body, mjd)
        return velocity - self.barycenter(mjd)[1]


_default_ephemeris = SimpleEphemeris()


def default_ephemeris() -> SimpleEphemeris:
    """Return the process-wide ephemeris shared by frame conversions."""
    return _default_ephemeris
