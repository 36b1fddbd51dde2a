"""Coordinate epochs: years under the Julian or Besselian numbering.

A coordinate epoch names the instant a precessing frame is anchored to.
Julian epochs count 365.25-day years from J2000.0; Besselian epochs count
tropical years from B1900.0. Both convert to and from Modified Julian
Date, are immutable once constructed, and compare equal when their years
agree within :func:`~astroframes.config.get_epoch_eq_tolerance` (1e-3 yr).
A Julian and a Besselian epoch never compare equal, even at the same
instant, because frames built on them follow different conventions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import get_epoch_eq_tolerance
from .constants import JULIAN_EPOCH_SWITCH_YEAR
from .time import (
    besselian_year_to_mjd,
    julian_year_to_mjd,
    mjd_to_besselian_year,
    mjd_to_julian_year,
)


class CoordinateEpoch:
    """Base class for Julian and Besselian epochs.

    Subclasses supply the year <-> MJD mapping and a one-letter prefix used
    in the string form (``J2000.0``, ``B1950.0``).
    """

    __slots__ = ('_year',)

    prefix = ''

    def __init__(self, year: float) -> None:
        object.__setattr__(self, '_year', float(year))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_mjd(cls, mjd: float) -> CoordinateEpoch:
        """Create an epoch of this numbering from a Modified Julian Date."""
        return cls(cls._mjd_to_year(mjd))

    @staticmethod
    def _mjd_to_year(mjd: float) -> float:
        raise NotImplementedError

    @staticmethod
    def _year_to_mjd(year: float) -> float:
        raise NotImplementedError

    @property
    def year(self) -> float:
        """Epoch year under this numbering."""
        return self._year

    @property
    def mjd(self) -> float:
        """Modified Julian Date of the epoch."""
        return self._year_to_mjd(self._year)

    def to_julian(self) -> JulianEpoch:
        """Return the Julian epoch at the same instant."""
        return JulianEpoch.from_mjd(self.mjd)

    def to_besselian(self) -> BesselianEpoch:
        """Return the Besselian epoch at the same instant."""
        return BesselianEpoch.from_mjd(self.mjd)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CoordinateEpoch):
            return NotImplemented
        if type(self) is not type(other):
            return False
        return abs(self._year - other._year) < get_epoch_eq_tolerance()

    def __hash__(self) -> int:
        # Tolerance equality is not transitive, so only the numbering can
        # take part in the hash.
        return hash(type(self).__name__)

    def __lt__(self, other: CoordinateEpoch) -> bool:
        return self.mjd < other.mjd

    def __str__(self) -> str:
        return f"{self.prefix}{self._year:.1f}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._year!r})"


class JulianEpoch(CoordinateEpoch):
    """Epoch counted in Julian years of 365.25 days from J2000.0."""

    __slots__ = ()

    prefix = 'J'

    @staticmethod
    def _mjd_to_year(mjd: float) -> float:
        return float(mjd_to_julian_year(mjd))

    @staticmethod
    def _year_to_mjd(year: float) -> float:
        return float(julian_year_to_mjd(year))


class BesselianEpoch(CoordinateEpoch):
    """Epoch counted in tropical (Besselian) years from B1900.0."""

    __slots__ = ()

    prefix = 'B'

    @staticmethod
    def _mjd_to_year(mjd: float) -> float:
        return float(mjd_to_besselian_year(mjd))

    @staticmethod
    def _year_to_mjd(year: float) -> float:
        return float(besselian_year_to_mjd(year))


J2000 = JulianEpoch(2000.0)
"""The standard Julian epoch J2000.0 (MJD 51544.5)."""

B1900 = BesselianEpoch(1900.0)
"""The Besselian epoch B1900.0."""

B1950 = BesselianEpoch(1950.0)
"""The Besselian epoch B1950.0."""


def epoch_for_year(year: float) -> CoordinateEpoch:
    """Pick the customary numbering for a bare epoch year.

    Years before 1984.0 are read as Besselian, later ones as Julian.
    """
    if year < JULIAN_EPOCH_SWITCH_YEAR:
        return BesselianEpoch(year)
    return JulianEpoch(year)


def epoch_from_string(text: str) -> CoordinateEpoch:
    """Parse an epoch string such as ``"J2000"``, ``"B1950.0"`` or ``"1975"``.

    Args:
        text (str): Epoch string. A leading ``J`` or ``B`` (any case)
            selects the numbering; a bare year uses :func:`epoch_for_year`.

    Returns:
        CoordinateEpoch: The parsed epoch.

    Raises:
        ValueError: If the string is not a recognizable epoch.

    Examples:
        ```python
        from astroframes.epoch import epoch_from_string
        epoch_from_string("B1950")  # BesselianEpoch(1950.0)
        ```
    """
    token = text.strip().upper()
    try:
        if token.startswith('J'):
            return JulianEpoch(float(token[1:]))
        if token.startswith('B'):
            return BesselianEpoch(float(token[1:]))
        return epoch_for_year(float(token))
    except ValueError:
        raise ValueError(f"Cannot parse coordinate epoch from {text!r}") from None


def as_epoch(value: CoordinateEpoch | float | str) -> CoordinateEpoch:
    """Coerce an epoch, a bare year or an epoch string into an epoch."""
    if isinstance(value, CoordinateEpoch):
        return value
    if isinstance(value, str):
        return epoch_from_string(value)
    return epoch_for_year(float(value))


def epoch_from_header(header: Mapping[str, Any], alt: str = '') -> CoordinateEpoch:
    """Read the coordinate epoch from FITS header keywords.

    ``RADESYS = 'FK4'`` implies a Besselian ``EQUINOX`` (default 1950.0);
    any other ``RADESYS`` implies a Julian one (default 2000.0). Without
    ``RADESYS`` the year alone decides, and without either keyword the
    result is J2000.

    Args:
        header (Mapping[str, Any]): Header keyword/value pairs.
        alt (str): Alternative coordinate-system suffix (``''`` or
            ``'A'``..``'Z'``).

    Returns:
        CoordinateEpoch: The epoch described by the header.
    """
    radesys = header.get(f"RADESYS{alt}")
    equinox = header.get(f"EQUINOX{alt}")

    if radesys is not None:
        if str(radesys).strip().upper() == 'FK4':
            return BesselianEpoch(1950.0 if equinox is None else float(equinox))
        return JulianEpoch(2000.0 if equinox is None else float(equinox))
    if equinox is None:
        return J2000
    return epoch_for_year(float(equinox))
