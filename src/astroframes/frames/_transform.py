"""Conversion of direction vectors between equatorial frames.

A conversion is resolved once, when an :class:`EquatorialTransform` is
built, into an ordered list of invertible steps (see
:mod:`astroframes.frames._operations`). Routes are chosen by a decision
table over the variant tags of the two frames, in priority order:

1. Equal frames: no steps.
2. Same variant: a direct route (precession for FK4/FK5, precession and
   difference nutation for Dynamical, through the dynamical frame for
   Topocentric, through ICRS for GCRS).
3. Target ICRS: the source's route up to ICRS.
4. Target GCRS: up to ICRS, then down to the target.
5. Target Dynamical: from Topocentric, undo the diurnal correction and
   precess/nutate; otherwise up to ICRS and down to the target.
6. Target FK4/FK5: from FK4/FK5, precess directly; otherwise up and down.
7. Target Topocentric: from Dynamical, precess/nutate to the time of
   observation and apply the diurnal correction; otherwise up and down.
8. Anything else: :class:`~astroframes.errors.UnsupportedRouteError`.

Every frame's route down from ICRS is a fixed list of steps and its route
up is that list inverted, so a conversion and its reverse compose to the
identity up to rounding.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes.config import get_dtype
from astroframes.coordinates import EquatorialCoordinates
from astroframes.ephemeris import Body, SimpleEphemeris, default_ephemeris
from astroframes.epoch import JulianEpoch
from astroframes.errors import FrameMismatchError, UnsupportedRouteError
from astroframes.frames._operations import (
    AberrationStep,
    GeocentricStep,
    RotationStep,
    polar_wobble_matrix,
)
from astroframes.frames._systems import (
    Dynamical,
    EquatorialFrame,
    FrameKind,
    Topocentric,
)
from astroframes.nutation import NutationModel, Precision, get_model
from astroframes.precession import (
    fk5_precession_matrix,
    fk5_to_icrs_bias,
    icrs_to_j2000_bias,
    nutation_matrix,
    precession_matrix,
)
from astroframes.sofa import mean_obliquity

logger = logging.getLogger(__name__)

_FK_KINDS = frozenset({FrameKind.FK4, FrameKind.FK5})


class EquatorialTransform:
    """Conversion session between two frames.

    The route is resolved at construction, pulling ephemeris and nutation
    values as needed, so ephemeris domain errors and unsupported routes are
    raised here rather than on first use. A session is cheap to apply many
    times but holds no locks; do not share one between threads while
    calling :meth:`inverse`.

    Args:
        from_frame: Frame of the input vectors.
        to_frame: Frame of the output vectors.
        precision: Nutation tier. Defaults to
            :func:`~astroframes.nutation.get_default_precision`.
        nutation_model: Model to evaluate nutation with; takes precedence
            over *precision*.
        ephemeris: Source of Earth and Sun states. Defaults to the shared
            :func:`~astroframes.ephemeris.default_ephemeris`.

    Raises:
        UnsupportedRouteError: If no route joins the two frames.
        EphemerisDomainError: If a leg needs the ephemeris outside its
            calibrated window.

    Examples:
        ```python
        from astroframes.frames import FK4_B1950, FK5_J2000, EquatorialTransform
        t = EquatorialTransform(FK4_B1950, FK5_J2000)
        v = t.apply([1.0, 0.0, 0.0])
        ```
    """

    def __init__(
        self,
        from_frame: EquatorialFrame,
        to_frame: EquatorialFrame,
        precision: Precision | None = None,
        nutation_model: NutationModel | None = None,
        ephemeris: SimpleEphemeris | None = None,
    ) -> None:
        self._from = from_frame
        self._to = to_frame
        self._nutation = nutation_model if nutation_model is not None else get_model(precision)
        self._ephemeris = ephemeris if ephemeris is not None else default_ephemeris()
        self._steps = _RouteBuilder(self._nutation, self._ephemeris).route(from_frame, to_frame)

        dtype = get_dtype()
        self.gcrs_hops = 0
        self.earth_velocity_offset = jnp.zeros(3, dtype=dtype)
        self.earth_position_offset = jnp.zeros(3, dtype=dtype)
        for step in self._steps:
            if isinstance(step, GeocentricStep):
                sign = 1 if step.to_gcrs else -1
                self.gcrs_hops += sign
                self.earth_velocity_offset = self.earth_velocity_offset + sign * step.earth_velocity
                self.earth_position_offset = self.earth_position_offset + sign * step.earth_position

        logger.debug("Resolved %s -> %s in %d steps", from_frame, to_frame, len(self._steps))

    @property
    def from_frame(self) -> EquatorialFrame:
        return self._from

    @property
    def to_frame(self) -> EquatorialFrame:
        return self._to

    @property
    def steps(self) -> tuple:
        """Resolved steps, in the order they are applied."""
        return tuple(self._steps)

    @property
    def is_identity(self) -> bool:
        return not self._steps

    def apply(self, vector: ArrayLike, distance: float | None = None) -> Array:
        """Convert direction vector(s) from ``from_frame`` to ``to_frame``.

        Args:
            vector: Direction(s) of shape ``(..., 3)``. The magnitude is
                preserved.
            distance: Barycentric distance of the source [m]. ``None``
                treats the source as infinitely distant; parallax is
                applied only beyond one light year.

        Returns:
            jax.Array: Converted vector(s). For an identity conversion the
            input is returned unchanged.
        """
        if not self._steps:
            return vector
        v = jnp.asarray(vector, dtype=get_dtype())
        for step in self._steps:
            v = step.apply(v, distance)
        return v

    __call__ = apply

    def transform(self, coordinates: EquatorialCoordinates, distance: float | None = None) -> None:
        """Convert a right ascension / declination pair in place."""
        if self._steps:
            coordinates.set_cartesian(self.apply(coordinates.to_cartesian(), distance))
        coordinates.frame = self._to

    def inverse(self) -> EquatorialTransform:
        """Reverse this session in place and return it.

        Swaps the end frames, negates the GCRS hop count and the accumulated
        Earth offsets, and replaces the steps by their inverses in reverse
        order.
        """
        self._from, self._to = self._to, self._from
        self._steps = [step.inverse() for step in reversed(self._steps)]
        self.gcrs_hops = -self.gcrs_hops
        self.earth_velocity_offset = -self.earth_velocity_offset
        self.earth_position_offset = -self.earth_position_offset
        return self

    def get_inverse(self) -> EquatorialTransform:
        """Return a reversed copy, leaving this session unchanged."""
        other = object.__new__(EquatorialTransform)
        other.__dict__.update(self.__dict__)
        other._steps = list(self._steps)
        return other.inverse()

    def __repr__(self) -> str:
        return f"EquatorialTransform({self._from} -> {self._to}, {len(self._steps)} steps)"


# ---------------------------------------------------------------------------
# Route resolution
# ---------------------------------------------------------------------------


def _invert(steps: list) -> list:
    return [step.inverse() for step in reversed(steps)]


def _dynamical_at(mjd: float) -> Dynamical:
    return Dynamical(JulianEpoch.from_mjd(mjd))


class _RouteBuilder:
    """Builds step lists for one nutation model and ephemeris."""

    def __init__(self, nutation: NutationModel, ephemeris: SimpleEphemeris) -> None:
        self.nutation = nutation
        self.ephemeris = ephemeris
        self._down: dict[FrameKind, Callable[[EquatorialFrame], list]] = {
            FrameKind.ICRS: lambda frame: [],
            FrameKind.GCRS: lambda frame: [self.geocentric(frame.mjd)],
            FrameKind.FK4: self.down_fk,
            FrameKind.FK5: self.down_fk,
            FrameKind.DYNAMICAL: self.down_dynamical,
            FrameKind.TOPOCENTRIC: self.down_topocentric,
        }

    # -- Elementary steps ---------------------------------------------------

    def geocentric(self, mjd: float) -> GeocentricStep:
        eph = self.ephemeris
        return GeocentricStep(
            mjd=mjd,
            earth_position=eph.barycentric_position(Body.EARTH, mjd),
            earth_velocity=eph.barycentric_velocity(Body.EARTH, mjd),
            sun_position=eph.barycentric_position(Body.SUN, mjd),
        )

    def full_nutation(self, mjd: float) -> RotationStep:
        dpsi, deps = self.nutation(mjd)
        return RotationStep("nutation", nutation_matrix(mean_obliquity(mjd), dpsi, deps))

    def dynamical_to_dynamical(self, source: EquatorialFrame, target: EquatorialFrame) -> list:
        """Precession plus the difference of nutation between two epochs.

        Built from the earlier epoch to the later one and inverted for the
        opposite direction.
        """
        if source.julian_year > target.julian_year:
            return _invert(self.dynamical_to_dynamical(target, source))

        dpsi0, deps0 = self.nutation(source.mjd)
        dpsi1, deps1 = self.nutation(target.mjd)
        return [
            RotationStep("precession", precession_matrix(source.julian_year, target.julian_year)),
            RotationStep(
                "nutation difference",
                nutation_matrix(mean_obliquity(target.mjd), dpsi1 - dpsi0, deps1 - deps0),
            ),
        ]

    def diurnal(self, frame: Topocentric) -> list:
        xp, yp = frame.wobble
        return [
            RotationStep("polar wobble", polar_wobble_matrix(frame.observed_mjd, xp, yp)),
            AberrationStep("diurnal aberration", frame.equatorial_velocity),
        ]

    # -- Chains through ICRS --------------------------------------------------

    def down_fk(self, frame: EquatorialFrame) -> list:
        return [
            RotationStep("ICRS to FK5 bias", fk5_to_icrs_bias().T),
            RotationStep("FK5 precession", fk5_precession_matrix(2000.0, frame.julian_year)),
        ]

    def down_dynamical(self, frame: EquatorialFrame) -> list:
        return [
            self.geocentric(frame.mjd),
            RotationStep("frame bias", icrs_to_j2000_bias()),
            RotationStep("precession", precession_matrix(2000.0, frame.julian_year)),
            self.full_nutation(frame.mjd),
        ]

    def down_topocentric(self, frame: Topocentric) -> list:
        return self.down_dynamical(_dynamical_at(frame.observed_mjd)) + self.diurnal(frame)

    def down(self, frame: EquatorialFrame, source: EquatorialFrame, target: EquatorialFrame) -> list:
        build = self._down.get(frame.kind)
        if build is None:
            raise UnsupportedRouteError(source, target)
        return build(frame)

    def up(self, frame: EquatorialFrame, source: EquatorialFrame, target: EquatorialFrame) -> list:
        return _invert(self.down(frame, source, target))

    # -- Decision table -------------------------------------------------------

    def route(self, source: EquatorialFrame, target: EquatorialFrame) -> list:
        if source == target:
            return []

        for frame in (source, target):
            if frame.kind not in self._down:
                raise UnsupportedRouteError(source, target)

        def via_icrs() -> list:
            return self.up(source, source, target) + self.down(target, source, target)

        if source.kind is target.kind:
            if source.kind is FrameKind.DYNAMICAL:
                return self.dynamical_to_dynamical(source, target)
            if source.kind is FrameKind.TOPOCENTRIC:
                return (
                    _invert(self.diurnal(source))
                    + self.dynamical_to_dynamical(
                        _dynamical_at(source.observed_mjd), _dynamical_at(target.observed_mjd)
                    )
                    + self.diurnal(target)
                )
            if source.kind in _FK_KINDS:
                return [self.fk_precession(source, target)]
            return via_icrs()

        if target.kind is FrameKind.ICRS:
            return self.up(source, source, target)
        if target.kind is FrameKind.GCRS:
            return via_icrs()
        if target.kind is FrameKind.DYNAMICAL:
            if source.kind is FrameKind.TOPOCENTRIC:
                return _invert(self.diurnal(source)) + self.dynamical_to_dynamical(
                    _dynamical_at(source.observed_mjd), target
                )
            return via_icrs()
        if target.kind in _FK_KINDS:
            if source.kind in _FK_KINDS:
                return [self.fk_precession(source, target)]
            return via_icrs()
        if target.kind is FrameKind.TOPOCENTRIC:
            if source.kind is FrameKind.DYNAMICAL:
                return self.dynamical_to_dynamical(
                    source, _dynamical_at(target.observed_mjd)
                ) + self.diurnal(target)
            return via_icrs()

        raise UnsupportedRouteError(source, target)

    def fk_precession(self, source: EquatorialFrame, target: EquatorialFrame) -> RotationStep:
        return RotationStep(
            "FK5 precession", fk5_precession_matrix(source.julian_year, target.julian_year)
        )


# ---------------------------------------------------------------------------
# Module-level conversions
# ---------------------------------------------------------------------------


def convert(
    direction: ArrayLike,
    from_frame: EquatorialFrame,
    to_frame: EquatorialFrame,
    distance: float | None = None,
) -> Array:
    """Convert direction vector(s) between two frames.

    Args:
        direction: Direction(s) of shape ``(..., 3)``.
        from_frame: Frame of *direction*.
        to_frame: Frame to express the result in.
        distance: Barycentric distance of the source [m], or ``None`` for
            an infinitely distant source.

    Returns:
        jax.Array: Converted vector(s); *direction* itself when the frames
        are equal.

    Raises:
        UnsupportedRouteError: If no route joins the two frames.
        EphemerisDomainError: If a leg needs the ephemeris outside its
            calibrated window.

    Examples:
        ```python
        from astroframes.frames import ICRS_FRAME, FK5_J2000, convert
        v = convert([0.0, 0.0, 1.0], ICRS_FRAME, FK5_J2000)
        ```
    """
    if from_frame == to_frame:
        return direction
    return EquatorialTransform(from_frame, to_frame).apply(direction, distance)


def convert_in_place(
    coordinates: EquatorialCoordinates,
    from_frame: EquatorialFrame,
    to_frame: EquatorialFrame,
    distance: float | None = None,
) -> None:
    """Convert a right ascension / declination pair in place.

    The pair goes through rectangular form and back, and its frame tag is
    set to *to_frame*.

    Raises:
        FrameMismatchError: If *coordinates* are tagged with a frame other
            than *from_frame*.
    """
    if coordinates.frame is not None and coordinates.frame != from_frame:
        raise FrameMismatchError(
            f"Coordinates are expressed in {coordinates.frame}, not {from_frame}"
        )
    if from_frame == to_frame:
        coordinates.frame = to_frame
        return
    EquatorialTransform(from_frame, to_frame).transform(coordinates, distance)
