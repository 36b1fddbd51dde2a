"""Elementary, invertible operations of a frame conversion.

A conversion is a sequence of steps. Every step maps direction vectors of
shape ``(..., 3)`` (any magnitude; the magnitude is preserved) and knows
its own inverse, obtained by transposing a matrix or negating an operand
rather than by re-deriving the operation:

- :class:`RotationStep`: frame bias, precession, nutation and wobble.
- :class:`AberrationStep`: relativistic aberration for an observer
  velocity; undone with the negated velocity.
- :class:`GeocentricStep`: the ICRS <-> GCRS leg, i.e. parallax, solar
  light deflection and annual aberration, applied in that order and undone
  in reverse.

The vector helpers (:func:`aberrate`, :func:`parallax_shift`,
:func:`deflect` and their inverses) are usable on their own.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes.config import get_dtype
from astroframes.constants import C_LIGHT, GM_SUN, JD_MJD_OFFSET, LIGHT_YEAR, OMEGA_EARTH, R_SUN
from astroframes.coordinates import GeodeticLocation
from astroframes.rotations import Rz, rotate
from astroframes.sofa import pom00, sp00
from astroframes.time import earth_rotation_angle

# Deflection is suppressed within about 1 arcsec of the anti-solar direction
# and behind the solar disk.
_DEFLECTION_LIMIT = 0.99999999999

_UNDEFLECT_ITERATIONS = 6


def _dot(a: Array, b: Array) -> Array:
    return jnp.sum(a * b, axis=-1, keepdims=True)


def _norm(a: Array) -> Array:
    return jnp.sqrt(_dot(a, a))


def _unit(a: Array) -> Array:
    return a / _norm(a)


# ---------------------------------------------------------------------------
# Vector operations
# ---------------------------------------------------------------------------


def aberrate(direction: ArrayLike, velocity: ArrayLike) -> Array:
    """Apply relativistic aberration for an observer moving at *velocity*.

    Follows SOFA ``iauAb`` without its gravitational term, which is handled
    by :func:`deflect`. Aberration with ``-velocity`` is the exact inverse.

    Args:
        direction: Unit direction(s) to the source, shape ``(..., 3)``.
        velocity: Observer velocity [m/s], shape ``(3,)``.

    Returns:
        jax.Array: Apparent unit direction(s).
    """
    p = jnp.asarray(direction)
    beta = jnp.asarray(velocity, dtype=p.dtype) / C_LIGHT
    bm1 = jnp.sqrt(1.0 - jnp.sum(beta * beta))
    pdv = _dot(p, beta)
    w1 = 1.0 + pdv / (1.0 + bm1)
    return _unit(bm1 * p + w1 * beta)


def parallax_shift(direction: ArrayLike, distance: float, observer: ArrayLike) -> Array:
    """Direction of a source as seen from a displaced observer.

    Args:
        direction: Unit direction(s) from the barycenter, shape ``(..., 3)``.
        distance: Barycentric distance of the source [m].
        observer: Barycentric position of the observer [m], shape ``(3,)``.

    Returns:
        jax.Array: Unit direction(s) from the observer.
    """
    p = jnp.asarray(direction)
    return _unit(distance * p - jnp.asarray(observer, dtype=p.dtype))


def undo_parallax_shift(direction: ArrayLike, distance: float, observer: ArrayLike) -> Array:
    """Inverse of :func:`parallax_shift` for the same distance and observer.

    Solves ``|s * u + E| = distance`` for the range ``s`` along the observed
    direction ``u`` and returns the barycentric direction of ``s * u + E``.
    """
    u = jnp.asarray(direction)
    e = jnp.asarray(observer, dtype=u.dtype)
    b = _dot(u, e)
    s = -b + jnp.sqrt(b * b - jnp.sum(e * e) + distance * distance)
    return _unit(s * u + e)


def _deflection(
    p: Array,
    observer: ArrayLike,
    sun: ArrayLike,
    distance: float | None,
) -> tuple[Array, Array]:
    """Deflected direction and the mask of directions left unchanged."""
    sun_to_observer = jnp.asarray(observer, dtype=p.dtype) - jnp.asarray(sun, dtype=p.dtype)
    emag = jnp.sqrt(jnp.sum(sun_to_observer * sun_to_observer))
    observer_at_sun = emag == 0.0
    emag = jnp.where(observer_at_sun, 1.0, emag)

    e = sun_to_observer / emag
    if distance is not None and 0.0 < distance < LIGHT_YEAR:
        sun_to_source = sun_to_observer + distance * p
        qmag = _norm(sun_to_source)
        q = sun_to_source / jnp.where(qmag == 0.0, 1.0, qmag)
        at_sun = qmag == 0.0
    else:
        q = p
        at_sun = jnp.zeros(p.shape[:-1] + (1,), dtype=bool)

    edotp = _dot(e, p)
    pdotq = _dot(p, q)
    qdote = _dot(q, e)

    factor = 2.0 * GM_SUN / (C_LIGHT * C_LIGHT * emag)
    bent = _unit(p + factor * (pdotq * e - edotp * q) / (1.0 + qdote))

    # -e points at the Sun; compare against the apparent solar radius
    disk = jnp.clip(R_SUN / emag, 0.0, 1.0)
    behind_disk = -edotp > jnp.sqrt(1.0 - disk * disk)

    skip = observer_at_sun | at_sun | behind_disk | (edotp > _DEFLECTION_LIMIT)
    return bent, skip


def deflect(
    direction: ArrayLike,
    observer: ArrayLike,
    sun: ArrayLike,
    distance: float | None = None,
) -> Array:
    """Gravitational light deflection by the Sun.

    Loosely follows NOVAS ``grav_vec``. For a source closer than one light
    year the Sun-to-source vector is formed from *distance*; otherwise the
    source is treated as infinitely distant. The deflection is zero when
    the observer is at the Sun, when the source is the Sun, when the
    source lies within about 1 arcsec of the anti-solar direction, and
    when it lies behind the solar disk as seen by the observer. Light is
    bent away from the Sun, so a deflected direction never lands behind
    the disk and :func:`undeflect` inverts this function everywhere.

    Args:
        direction: Unit direction(s) from the observer, shape ``(..., 3)``.
        observer: Barycentric position of the observer [m].
        sun: Barycentric position of the Sun [m].
        distance: Distance of the source from the observer [m], if finite.

    Returns:
        jax.Array: Deflected unit direction(s).
    """
    p = jnp.asarray(direction)
    bent, skip = _deflection(p, observer, sun, distance)
    return jnp.where(skip, p, bent)


def undeflect(
    direction: ArrayLike,
    observer: ArrayLike,
    sun: ArrayLike,
    distance: float | None = None,
) -> Array:
    """Inverse of :func:`deflect`, by fixed-point iteration.

    Directions in the zone where :func:`deflect` is a no-op are returned
    unchanged. Elsewhere the iteration runs on the unmasked deflection, and
    outside the solar disk each pass shrinks the error by a factor of 500
    or more, so a few passes reach rounding level.
    """
    target = jnp.asarray(direction)
    _, unchanged = _deflection(target, observer, sun, distance)
    p = target
    for _ in range(_UNDEFLECT_ITERATIONS):
        bent, _ = _deflection(p, observer, sun, distance)
        p = _unit(p + (target - bent))
    return jnp.where(unchanged, target, p)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RotationStep:
    """A fixed rotation, inverted by its transpose.

    Attributes:
        label: Short description, e.g. ``"precession"``.
        matrix: 3x3 rotation matrix.
    """

    label: str
    matrix: Array

    def apply(self, vector: Array, distance: float | None = None) -> Array:
        return rotate(self.matrix, vector)

    def inverse(self) -> RotationStep:
        return RotationStep(f"inverse {self.label}", self.matrix.T)


@dataclass(frozen=True)
class AberrationStep:
    """Aberration for an observer velocity, inverted by negating it.

    Attributes:
        label: Short description, e.g. ``"diurnal aberration"``.
        velocity: Observer velocity in equatorial axes [m/s].
    """

    label: str
    velocity: Array

    def apply(self, vector: Array, distance: float | None = None) -> Array:
        scale = _norm(vector)
        return aberrate(vector / scale, self.velocity) * scale

    def inverse(self) -> AberrationStep:
        return AberrationStep(f"inverse {self.label}", -self.velocity)


@dataclass(frozen=True)
class GeocentricStep:
    """The ICRS <-> GCRS leg at one instant.

    In the forward (ICRS to GCRS) direction the source is shifted for
    parallax (only for distances beyond one light year), deflected by the
    Sun, then aberrated by the Earth's barycentric velocity. The reverse
    direction undoes the three corrections in the opposite order.

    Attributes:
        mjd: Instant of the leg.
        earth_position: Barycentric position of the Earth [m].
        earth_velocity: Barycentric velocity of the Earth [m/s].
        sun_position: Barycentric position of the Sun [m].
        to_gcrs: ``True`` for ICRS to GCRS, ``False`` for the reverse.
    """

    mjd: float
    earth_position: Array
    earth_velocity: Array
    sun_position: Array
    to_gcrs: bool = True

    @property
    def label(self) -> str:
        return "ICRS to GCRS" if self.to_gcrs else "GCRS to ICRS"

    def apply(self, vector: Array, distance: float | None = None) -> Array:
        scale = _norm(vector)
        p = vector / scale
        has_parallax = distance is not None and distance > LIGHT_YEAR
        if self.to_gcrs:
            if has_parallax:
                p = parallax_shift(p, distance, self.earth_position)
            p = deflect(p, self.earth_position, self.sun_position, distance)
            p = aberrate(p, self.earth_velocity)
        else:
            p = aberrate(p, -self.earth_velocity)
            p = undeflect(p, self.earth_position, self.sun_position, distance)
            if has_parallax:
                p = undo_parallax_shift(p, distance, self.earth_position)
        return p * scale

    def inverse(self) -> GeocentricStep:
        return GeocentricStep(
            mjd=self.mjd,
            earth_position=self.earth_position,
            earth_velocity=self.earth_velocity,
            sun_position=self.sun_position,
            to_gcrs=not self.to_gcrs,
        )


# ---------------------------------------------------------------------------
# Observer geometry
# ---------------------------------------------------------------------------


def polar_wobble_matrix(mjd: float, xp: float, yp: float) -> Array:
    """Polar-motion rotation expressed in true-of-date equatorial axes.

    The pole offset ``(xp, yp)`` and the TIO locator s' are applied in
    terrestrial axes, reached by rotating through the Earth rotation angle
    and back.

    Args:
        mjd: Time of observation.
        xp: Polar motion x-component [rad].
        yp: Polar motion y-component [rad].

    Returns:
        jax.Array: 3x3 rotation matrix.
    """
    theta = earth_rotation_angle(mjd)
    sp = sp00(JD_MJD_OFFSET, mjd)
    return Rz(-theta) @ pom00(xp, yp, sp) @ Rz(theta)


def observer_equatorial_velocity(
    location: GeodeticLocation,
    mjd: float,
    surface_velocity: ArrayLike = (0.0, 0.0, 0.0),
) -> Array:
    """Velocity of a ground observer in true-of-date equatorial axes [m/s].

    Sums the velocity due to Earth rotation at the site and the observer's
    own motion over the ground.

    Args:
        location: Observer site.
        mjd: Time of observation.
        surface_velocity: Motion over the ground in East-North-Zenith axes
            [m/s].

    Returns:
        jax.Array: Velocity vector of shape ``(3,)``.
    """
    dtype = get_dtype()
    r_ecef = location.to_ecef()
    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)
    v_ecef = jnp.cross(omega, r_ecef) + location.enz_to_ecef() @ jnp.asarray(surface_velocity, dtype=dtype)
    return rotate(Rz(-earth_rotation_angle(mjd)), v_ecef)
