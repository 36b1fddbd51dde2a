"""Time-scale helpers consumed by epochs and frames.

Calendar <-> MJD conversions, Julian and Besselian year numbering, the
Earth Rotation Angle as a function of MJD, and parsing of FITS
``DATE-OBS`` timestamps. UT1 is approximated by UTC and TT by the input
MJD; the difference is far below the accuracy of the simple ephemeris and
only enters the diurnal terms at the sub-mas level.
"""

from __future__ import annotations

import re

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from .config import get_dtype
from .constants import (
    BESSELIAN_YEAR_DAYS,
    JD_MJD_OFFSET,
    JULIAN_YEAR_DAYS,
    MJD_B1900,
    MJD_J2000,
)
from .sofa import era00

# FITS DATE-OBS forms: date only, or date and time with optional fraction
# and optional trailing Z.
_FITS_DATE_PATTERNS = [
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})$'),
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2}(?:\.\d+)?)Z?$'),
]


def caldate_to_mjd(
    year: ArrayLike,
    month: ArrayLike,
    day: ArrayLike,
    hour: ArrayLike = 0,
    minute: ArrayLike = 0,
    second: ArrayLike = 0.0,
) -> jax.Array:
    """Convert a Gregorian calendar date to Modified Julian Date.

    Only valid from year 1583 onward.

    Args:
        year (ArrayLike): Year of the calendar date.
        month (ArrayLike): Month of the calendar date.
        day (ArrayLike): Day of the calendar date.
        hour (ArrayLike): Hour of the calendar date. Default: ``0``
        minute (ArrayLike): Minute of the calendar date. Default: ``0``
        second (ArrayLike): Second of the calendar date. Default: ``0.0``

    Returns:
        Modified Julian Date.

    References:

        1. Montenbruck, O., & Gill, E. (2012). *Satellite Orbits: Models, Methods and Applications*. Springer Science & Business Media.
    """
    year = jnp.asarray(year)
    month = jnp.asarray(month)

    is_jan_or_feb = month <= 2
    year = jnp.where(is_jan_or_feb, year - 1, year)
    month = jnp.where(is_jan_or_feb, month + 12, month)

    leap_days = jnp.floor(year / 400) - jnp.floor(year / 100) + jnp.floor(year / 4)
    day_number = 365 * year - 679004 + leap_days + jnp.floor(30.6001 * (month + 1)) + day

    frac_day = (hour + (minute + second / 60.0) / 60.0) / 24.0

    return jnp.asarray(jnp.floor(day_number), dtype=get_dtype()) + frac_day


def mjd_to_jd(mjd: ArrayLike) -> jax.Array:
    """Convert Modified Julian Date to Julian Date."""
    return jnp.asarray(mjd, dtype=get_dtype()) + JD_MJD_OFFSET


def jd_to_mjd(jd: ArrayLike) -> jax.Array:
    """Convert Julian Date to Modified Julian Date."""
    return jnp.asarray(jd, dtype=get_dtype()) - JD_MJD_OFFSET


# ---------------------------------------------------------------------------
# Year numbering
# ---------------------------------------------------------------------------


def julian_year_to_mjd(year: ArrayLike) -> jax.Array:
    """Convert a Julian epoch year (e.g. ``2000.0``) to MJD.

    Args:
        year (ArrayLike): Julian epoch year.

    Returns:
        Modified Julian Date.
    """
    return MJD_J2000 + (jnp.asarray(year, dtype=get_dtype()) - 2000.0) * JULIAN_YEAR_DAYS


def mjd_to_julian_year(mjd: ArrayLike) -> jax.Array:
    """Convert MJD to a Julian epoch year."""
    return 2000.0 + (jnp.asarray(mjd, dtype=get_dtype()) - MJD_J2000) / JULIAN_YEAR_DAYS


def besselian_year_to_mjd(year: ArrayLike) -> jax.Array:
    """Convert a Besselian epoch year (e.g. ``1950.0``) to MJD.

    Args:
        year (ArrayLike): Besselian epoch year.

    Returns:
        Modified Julian Date.

    References:

        1. J. Lieske, *Precession matrix based on IAU (1976) system of astronomical constants*, A&A 73, 1979
    """
    return MJD_B1900 + (jnp.asarray(year, dtype=get_dtype()) - 1900.0) * BESSELIAN_YEAR_DAYS


def mjd_to_besselian_year(mjd: ArrayLike) -> jax.Array:
    """Convert MJD to a Besselian epoch year."""
    return 1900.0 + (jnp.asarray(mjd, dtype=get_dtype()) - MJD_B1900) / BESSELIAN_YEAR_DAYS


# ---------------------------------------------------------------------------
# Earth rotation
# ---------------------------------------------------------------------------


def earth_rotation_angle(mjd: ArrayLike) -> jax.Array:
    """Earth Rotation Angle at an MJD, taking UT1 equal to UTC.

    Args:
        mjd (ArrayLike): Modified Julian Date (UTC).

    Returns:
        Earth Rotation Angle in radians, in [0, 2*pi).
    """
    return era00(JD_MJD_OFFSET, mjd)


# ---------------------------------------------------------------------------
# FITS timestamps
# ---------------------------------------------------------------------------


def parse_fits_date(value: str) -> float:
    """Parse a FITS ``DATE-OBS`` value into an MJD.

    Accepts ``YYYY-MM-DD`` and ``YYYY-MM-DDTHH:MM:SS[.fff][Z]``.

    Args:
        value (str): The header value, surrounding whitespace and quotes
            are ignored.

    Returns:
        float: Modified Julian Date.

    Raises:
        ValueError: If *value* matches none of the supported forms.

    Examples:
        ```python
        from astroframes.time import parse_fits_date
        parse_fits_date("2000-01-01T12:00:00")  # 51544.5
        ```
    """
    text = value.strip().strip("'").strip()
    for pattern in _FITS_DATE_PATTERNS:
        match = pattern.match(text)
        if match is None:
            continue
        groups = match.groups()
        year, month, day = (int(g) for g in groups[:3])
        hour = minute = 0
        second = 0.0
        if len(groups) > 3:
            hour, minute = int(groups[3]), int(groups[4])
            second = float(groups[5])
        return float(caldate_to_mjd(year, month, day, hour, minute, second))
    raise ValueError(f"Invalid FITS date string: {value!r}")
