"""JAX translations of the IAU SOFA routines used by the frame engine.

Covers the planetary fundamental arguments consumed by the planetary part
of the IAU 2000A nutation series, the IAU 2006 mean obliquity, the Earth
Rotation Angle, the TIO locator and the polar-motion matrix used for the
topocentric wobble correction. Uses routines and computations derived
from software provided by SOFA under license to the user. Does not itself
constitute software provided by and/or endorsed by SOFA.

All functions respect :func:`~astroframes.config.get_dtype` for float
precision.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes.config import get_dtype
from astroframes.rotations import Rx, Ry, Rz

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DJ00: float = 2451545.0
"""Julian Date of J2000.0."""

DJC: float = 36525.0
"""Days per Julian century."""

DAS2R: float = 4.848136811095359935899141e-6
"""Arcseconds to radians."""

D2PI: float = 6.283185307179586476925287
"""2*pi."""

TURNAS: float = 1296000.0
"""Arcseconds in a full circle."""

MJD_ZERO: float = 2400000.5
"""Julian Date of MJD zero-point."""

# Mean longitudes of the planets, Mercury through Neptune (IERS 2003):
# (value at J2000.0 [rad], rate [rad/century]).
_PLANET_LONGITUDES: tuple[tuple[float, float], ...] = (
    (4.402608842, 2608.7903141574),  # Mercury
    (3.176146697, 1021.3285546211),  # Venus
    (1.753470314, 628.3075849991),  # Earth
    (6.203480913, 334.0612426700),  # Mars
    (0.599546497, 52.9690962641),  # Jupiter
    (0.874016757, 21.3299104960),  # Saturn
    (5.481293872, 7.4781598567),  # Uranus
    (5.311886287, 3.8133035638),  # Neptune
)


def centuries_since_j2000(mjd: ArrayLike) -> Array:
    """Julian centuries of TT elapsed since J2000.0.

    Args:
        mjd: Modified Julian Date (TT).

    Returns:
        Time in Julian centuries.
    """
    mjd = jnp.asarray(mjd, dtype=get_dtype())
    return ((MJD_ZERO - DJ00) + mjd) / DJC


# ---------------------------------------------------------------------------
# Planetary fundamental arguments (IERS Conventions 2003)
# ---------------------------------------------------------------------------


def planetary_longitudes(t: ArrayLike) -> Array:
    """Mean longitudes of the eight planets (IERS 2003).

    Args:
        t: TDB Julian centuries since J2000.0.

    Returns:
        Array of shape ``(8,) + t.shape`` with the longitudes of Mercury
        through Neptune in radians, each reduced modulo 2*pi.
    """
    t = jnp.asarray(t, dtype=get_dtype())
    table = jnp.asarray(_PLANET_LONGITUDES, dtype=get_dtype())
    base = table[:, 0].reshape((8,) + (1,) * t.ndim)
    rate = table[:, 1].reshape((8,) + (1,) * t.ndim)
    return jnp.fmod(base + rate * t, D2PI)


def fapa03(t: ArrayLike) -> Array:
    """General accumulated precession in longitude (IERS 2003).

    Args:
        t: TDB Julian centuries since J2000.0.

    Returns:
        General precession in radians.
    """
    t = jnp.asarray(t, dtype=get_dtype())
    return (0.024381750 + 0.00000538691 * t) * t


# ---------------------------------------------------------------------------
# Mean obliquity
# ---------------------------------------------------------------------------


def obl06(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Mean obliquity of the ecliptic, IAU 2006 precession.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Obliquity of the ecliptic in radians.
    """
    t = ((jnp.asarray(date1, dtype=get_dtype()) - DJ00) + date2) / DJC
    eps0 = 84381.406 + t * (
        -46.836769 + t * (-0.0001831 + t * (0.00200340 + t * (-0.000000576 + t * (-0.0000000434))))
    )
    return eps0 * DAS2R


def mean_obliquity(mjd: ArrayLike) -> Array:
    """IAU 2006 mean obliquity of the ecliptic at an MJD (TT), in radians."""
    return obl06(MJD_ZERO, mjd)


# ---------------------------------------------------------------------------
# Earth Rotation Angle
# ---------------------------------------------------------------------------


def era00(dj1: ArrayLike, dj2: ArrayLike) -> Array:
    """Earth Rotation Angle (IAU 2000 model).

    Args:
        dj1: UT1 as 2-part Julian Date (part 1).
        dj2: UT1 as 2-part Julian Date (part 2).

    Returns:
        Earth Rotation Angle in radians, in [0, 2*pi).
    """
    dj1 = jnp.asarray(dj1, dtype=get_dtype())
    dj2 = jnp.asarray(dj2, dtype=get_dtype())

    t = dj1 + dj2 - DJ00
    f = jnp.fmod(dj1, 1.0) + jnp.fmod(dj2, 1.0)

    return jnp.mod(f + 0.7790572732640 + 0.00273781191135448 * t, 1.0) * D2PI


# ---------------------------------------------------------------------------
# Polar motion
# ---------------------------------------------------------------------------


def sp00(date1: ArrayLike, date2: ArrayLike) -> Array:
    """TIO locator s', positioning the Terrestrial Intermediate Origin.

    Only the secular term, about -47 microarcseconds per century, is kept.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        TIO locator s' in radians.
    """
    t = ((jnp.asarray(date1, dtype=get_dtype()) - DJ00) + date2) / DJC
    return -47e-6 * t * DAS2R


def pom00(xp: ArrayLike, yp: ArrayLike, sp: ArrayLike) -> Array:
    """Form the polar motion matrix (TIRS -> ITRS).

    The matrix is ``Rx(-yp) @ Ry(-xp) @ Rz(sp)``.

    Args:
        xp: Polar motion x-component (radians, positive towards Greenwich).
        yp: Polar motion y-component (radians, positive towards 270E).
        sp: TIO locator s' (radians).

    Returns:
        3x3 polar motion matrix.
    """
    return Rx(-jnp.asarray(yp)) @ Ry(-jnp.asarray(xp)) @ Rz(sp)
