"""Equatorial reference-frame value types.

Each frame variant is a frozen dataclass tagged with a :class:`FrameKind`.
Frames compare equal when they are the same variant and their epochs agree
within :func:`~astroframes.config.get_frame_eq_tolerance` (1e-6 yr);
topocentric frames additionally compare location, polar wobble and time.
Hashes use the variant tag only, so that tolerance-equal frames hash
alike.

The conversion engine dispatches on ``frame.kind``; the classes carry no
conversion behavior of their own.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar

from jax import Array

from astroframes.config import get_frame_eq_tolerance
from astroframes.coordinates import GeodeticLocation
from astroframes.epoch import (
    B1900,
    B1950,
    J2000,
    BesselianEpoch,
    CoordinateEpoch,
    JulianEpoch,
    as_epoch,
)
from astroframes.errors import EpochMismatchError
from astroframes.frames._operations import observer_equatorial_velocity


class FrameKind(enum.Enum):
    """Variant tag of an equatorial frame."""

    ICRS = "ICRS"
    GCRS = "GCRS"
    FK4 = "FK4"
    FK5 = "FK5"
    DYNAMICAL = "Dynamical"
    TOPOCENTRIC = "Topocentric"


@dataclass(frozen=True, eq=False)
class EquatorialFrame:
    """Base class of the equatorial frame variants.

    Attributes:
        kind: Variant tag used by the conversion engine.
        precessing: Whether the frame's equator moves with its epoch.
        fits_name: ``RADESYS`` value written for the frame.
    """

    kind: ClassVar[FrameKind | None] = None
    precessing: ClassVar[bool] = False
    fits_name: ClassVar[str] = ""

    @property
    def epoch(self) -> CoordinateEpoch:
        """Epoch the frame is anchored to."""
        return J2000

    @property
    def julian_year(self) -> float:
        """Epoch of the frame as a Julian year."""
        epoch = self.epoch
        if isinstance(epoch, JulianEpoch):
            return epoch.year
        return epoch.to_julian().year

    @property
    def mjd(self) -> float:
        """Epoch of the frame as an MJD."""
        return self.epoch.mjd

    def _same_epoch(self, other: EquatorialFrame) -> bool:
        return abs(self.julian_year - other.julian_year) < get_frame_eq_tolerance()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EquatorialFrame):
            return NotImplemented
        return self.kind == other.kind and type(self) is type(other) and self._same_epoch(other)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.kind))

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.epoch})"


def _require_epoch(frame_name: str, epoch: object, expected: type) -> None:
    if not isinstance(epoch, expected):
        raise EpochMismatchError(
            f"{frame_name} requires a {expected.__name__}, got {epoch!r}"
        )


@dataclass(frozen=True, eq=False)
class ICRS(EquatorialFrame):
    """The International Celestial Reference System, the conversion pivot."""

    kind: ClassVar[FrameKind] = FrameKind.ICRS
    fits_name: ClassVar[str] = "ICRS"

    def __str__(self) -> str:
        return "ICRS"


@dataclass(frozen=True, eq=False)
class GCRS(EquatorialFrame):
    """Geocentric Celestial Reference System at a Julian epoch.

    ICRS-aligned but seen from the geocenter: directions include annual
    aberration, solar light deflection and, for finite distances, parallax.
    """

    kind: ClassVar[FrameKind] = FrameKind.GCRS
    fits_name: ClassVar[str] = "GCRS"

    julian_epoch: JulianEpoch = J2000

    def __post_init__(self) -> None:
        _require_epoch("GCRS", self.julian_epoch, JulianEpoch)

    @property
    def epoch(self) -> JulianEpoch:
        return self.julian_epoch


@dataclass(frozen=True, eq=False)
class FK4(EquatorialFrame):
    """FK4 catalogue frame at a Besselian epoch."""

    kind: ClassVar[FrameKind] = FrameKind.FK4
    precessing: ClassVar[bool] = True
    fits_name: ClassVar[str] = "FK4"

    besselian_epoch: BesselianEpoch = B1950

    def __post_init__(self) -> None:
        _require_epoch("FK4", self.besselian_epoch, BesselianEpoch)

    @property
    def epoch(self) -> BesselianEpoch:
        return self.besselian_epoch


@dataclass(frozen=True, eq=False)
class FK5(EquatorialFrame):
    """FK5 catalogue frame at a Julian epoch."""

    kind: ClassVar[FrameKind] = FrameKind.FK5
    precessing: ClassVar[bool] = True
    fits_name: ClassVar[str] = "FK5"

    julian_epoch: JulianEpoch = J2000

    def __post_init__(self) -> None:
        _require_epoch("FK5", self.julian_epoch, JulianEpoch)

    @property
    def epoch(self) -> JulianEpoch:
        return self.julian_epoch


@dataclass(frozen=True, eq=False)
class Dynamical(EquatorialFrame):
    """True equator and equinox of date (CIRS-equivalent) at a Julian epoch."""

    kind: ClassVar[FrameKind] = FrameKind.DYNAMICAL
    precessing: ClassVar[bool] = True
    fits_name: ClassVar[str] = "GAPPT"

    julian_epoch: JulianEpoch = J2000

    def __post_init__(self) -> None:
        _require_epoch("Dynamical", self.julian_epoch, JulianEpoch)

    @property
    def epoch(self) -> JulianEpoch:
        return self.julian_epoch


@dataclass(frozen=True, eq=False)
class Topocentric(EquatorialFrame):
    """Apparent frame of an observer at a given site and time.

    Attributes:
        name: Label of the site; not part of equality.
        location: Site on the WGS84 ellipsoid.
        observed_mjd: Time of observation (UTC, used as UT1 and TT).
        wobble: Polar motion (xp, yp) [rad].
        surface_velocity: Observer velocity relative to the rotating Earth,
            in local East-North-Zenith axes [m/s].
    """

    kind: ClassVar[FrameKind] = FrameKind.TOPOCENTRIC
    precessing: ClassVar[bool] = True
    fits_name: ClassVar[str] = "GAPPT"

    name: str
    location: GeodeticLocation
    observed_mjd: float
    wobble: tuple[float, float] = (0.0, 0.0)
    surface_velocity: tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))

    def __post_init__(self) -> None:
        object.__setattr__(self, "location", GeodeticLocation(*self.location))
        object.__setattr__(self, "observed_mjd", float(self.observed_mjd))
        object.__setattr__(self, "wobble", tuple(float(w) for w in self.wobble))
        object.__setattr__(
            self, "surface_velocity", tuple(float(v) for v in self.surface_velocity)
        )
        if len(self.wobble) != 2:
            raise ValueError(f"wobble must have 2 components, got {len(self.wobble)}")
        if len(self.surface_velocity) != 3:
            raise ValueError(
                f"surface_velocity must have 3 components, got {len(self.surface_velocity)}"
            )

    @property
    def epoch(self) -> JulianEpoch:
        return JulianEpoch.from_mjd(self.observed_mjd)

    @property
    def equatorial_velocity(self) -> Array:
        """Observer velocity in true-of-date equatorial axes [m/s].

        Includes Earth rotation at the site plus ``surface_velocity``.
        """
        return observer_equatorial_velocity(self.location, self.observed_mjd, self.surface_velocity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EquatorialFrame):
            return NotImplemented
        if not isinstance(other, Topocentric):
            return False
        return (
            self.location == other.location
            and self.wobble == other.wobble
            and self.observed_mjd == other.observed_mjd
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.kind))

    def __str__(self) -> str:
        return f"Topocentric({self.name}, MJD {self.observed_mjd})"


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def _julian(value: CoordinateEpoch | float | str) -> CoordinateEpoch:
    if isinstance(value, (int, float)):
        return JulianEpoch(value)
    return as_epoch(value)


def _besselian(value: CoordinateEpoch | float | str) -> CoordinateEpoch:
    if isinstance(value, (int, float)):
        return BesselianEpoch(value)
    return as_epoch(value)


def icrs() -> ICRS:
    """Return the ICRS frame."""
    return ICRS_FRAME


def gcrs(epoch: JulianEpoch | float | str = J2000) -> GCRS:
    """GCRS frame at a Julian epoch.

    Args:
        epoch: A :class:`JulianEpoch`, a Julian year, or an epoch string.

    Raises:
        EpochMismatchError: If *epoch* is Besselian.
    """
    return GCRS(_julian(epoch))


def fk4(epoch: BesselianEpoch | float | str = B1950) -> FK4:
    """FK4 frame at a Besselian epoch.

    Args:
        epoch: A :class:`BesselianEpoch`, a Besselian year, or an epoch
            string such as ``"B1950"``.

    Raises:
        EpochMismatchError: If *epoch* is Julian.
    """
    return FK4(_besselian(epoch))


def fk5(epoch: JulianEpoch | float | str = J2000) -> FK5:
    """FK5 frame at a Julian epoch.

    Args:
        epoch: A :class:`JulianEpoch`, a Julian year, or an epoch string.

    Raises:
        EpochMismatchError: If *epoch* is Besselian.
    """
    return FK5(_julian(epoch))


def dynamical(epoch: JulianEpoch | float | str) -> Dynamical:
    """True-of-date dynamical frame at a Julian epoch.

    Raises:
        EpochMismatchError: If *epoch* is Besselian.
    """
    return Dynamical(_julian(epoch))


def topocentric(
    name: str,
    location: GeodeticLocation | tuple[float, float, float],
    mjd: float,
    wobble: tuple[float, float] | None = None,
    surface_velocity: tuple[float, float, float] | None = None,
) -> Topocentric:
    """Topocentric frame of an observer.

    Args:
        name: Site label.
        location: Site as (lon [rad], lat [rad], alt [m]).
        mjd: Time of observation.
        wobble: Polar motion (xp, yp) [rad]. Default: no wobble.
        surface_velocity: Observer velocity over the ground in ENZ axes
            [m/s]. Default: at rest on the ground.

    Returns:
        Topocentric: The frame.

    Examples:
        ```python
        from astroframes.coordinates import GeodeticLocation
        from astroframes.frames import topocentric
        site = GeodeticLocation.from_degrees(-155.47, 19.82, 4205.0)
        frame = topocentric("Mauna Kea", site, 60000.25)
        ```
    """
    return Topocentric(
        name=name,
        location=GeodeticLocation(*location),
        observed_mjd=mjd,
        wobble=(0.0, 0.0) if wobble is None else wobble,
        surface_velocity=(0.0, 0.0, 0.0) if surface_velocity is None else surface_velocity,
    )


def is_precessing(frame: EquatorialFrame) -> bool:
    """Whether the frame's equator and equinox depend on its epoch."""
    return frame.precessing


ICRS_FRAME = ICRS()
"""The ICRS frame."""

GCRS_J2000 = GCRS(J2000)
"""GCRS at J2000.0."""

FK4_B1900 = FK4(B1900)
"""FK4 at B1900.0."""

FK4_B1950 = FK4(B1950)
"""FK4 at B1950.0."""

FK5_J2000 = FK5(J2000)
"""FK5 at J2000.0."""

DYNAMICAL_J2000 = Dynamical(J2000)
"""True equator and equinox of J2000.0."""
