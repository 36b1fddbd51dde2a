"""Frame-bias, precession and nutation rotation matrices.

Every matrix here is a composition of :func:`~astroframes.rotations.Rx`,
:func:`~astroframes.rotations.Ry` and :func:`~astroframes.rotations.Rz` in
a fixed order. Precession between two epochs is always evaluated from the
earlier epoch to the later one and transposed for the opposite direction,
so that converting forward and back composes to the identity up to
rounding.

Epochs are Julian years throughout; Besselian epochs are converted before
they reach these functions.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes.constants import AS2RAD, MAS2RAD
from astroframes.rotations import Rx, Ry, Rz, small_rotation

# ---------------------------------------------------------------------------
# Frame bias
# ---------------------------------------------------------------------------

ETA0: float = -6.8192 * MAS2RAD
"""Offset of the J2000 mean pole from the ICRS pole about x [rad]."""

XI0: float = -16.617 * MAS2RAD
"""Offset of the J2000 mean pole from the ICRS pole about y [rad]."""

DALPHA0: float = -14.6 * MAS2RAD
"""Offset of the J2000 mean equinox from the ICRS origin [rad]."""

FK5_BIAS: tuple[float, float, float] = (-19.9 * MAS2RAD, -9.1 * MAS2RAD, 22.9 * MAS2RAD)
"""Orientation of FK5 relative to the (Hipparcos) ICRS about x, y, z [rad]."""

EPS0: float = 84381.448 * AS2RAD
"""Mean obliquity of the ecliptic at J2000.0 (IAU 1976) [rad]."""


def icrs_to_j2000_bias() -> Array:
    """Frame-bias matrix from ICRS to the J2000 mean equator and equinox.

    Returns:
        3x3 matrix ``Rx(-eta0) @ Ry(xi0) @ Rz(dalpha0)``.
    """
    return Rx(-ETA0) @ Ry(XI0) @ Rz(DALPHA0)


def fk5_to_icrs_bias() -> Array:
    """Rotation from FK5(J2000) to ICRS by the tabulated FK5 offsets.

    Returns:
        3x3 matrix ``small_rotation(-19.9 mas, -9.1 mas, 22.9 mas)``.
    """
    return small_rotation(*FK5_BIAS)


# ---------------------------------------------------------------------------
# Precession
# ---------------------------------------------------------------------------


def _mean_obliquity_at(T: float) -> float:
    """Mean obliquity at T centuries from J2000 (Lieske polynomial) [rad]."""
    return EPS0 + T * (-46.8150 + T * (-0.00059 + T * 0.001813)) * AS2RAD


def _lieske(from_year: float, to_year: float) -> Array:
    T = 0.01 * (from_year - 2000.0)
    t = 0.01 * (to_year - from_year)

    eps_bar = _mean_obliquity_at(T)
    omega = eps_bar + t * t * ((0.05127 - T * 0.009186) - t * 0.007726) * AS2RAD
    psi = t * ((5038.7784 + T * (0.49263 - T * 0.000124)) + t * ((-1.07259 - T * 0.001106) - t * 0.001147)) * AS2RAD
    chi = t * ((10.5526 + T * (-1.88623 + T * 0.000096)) + t * ((-2.38064 - T * 0.000833) - t * 0.001125)) * AS2RAD

    return Rz(chi) @ Rx(-omega) @ Rz(-psi) @ Rx(eps_bar)


def precession_matrix(from_year: float, to_year: float) -> Array:
    """Precession of the mean equator and equinox between two Julian epochs.

    Uses the four-rotation (epsilon_0, psi_A, omega_A, chi_A) formulation
    with the Lieske et al. (1977) polynomials, as updated for the IERS 2003
    conventions.

    Args:
        from_year: Julian epoch year of the input frame.
        to_year: Julian epoch year of the output frame.

    Returns:
        3x3 rotation matrix.

    References:

        1. J. Lieske et al., A&A 58, 1 (1977).
        2. N. Capitaine et al., A&A 412, 567 (2003).
    """
    if from_year > to_year:
        return _lieske(to_year, from_year).T
    return _lieske(from_year, to_year)


def _lederle_schwan(from_year: float, to_year: float) -> Array:
    T = 0.01 * (from_year - 2000.0)
    t = 0.01 * (to_year - from_year)

    zeta = (2305.6997 + (1.39744 + 0.000060 * T) * T + (0.30201 - 0.000270 * T + 0.017996 * t) * t) * t
    z = (2305.6997 + (1.39744 + 0.000060 * T) * T + (1.09543 + 0.000390 * T + 0.018326 * t) * t) * t
    theta = (2003.8746 - (0.85405 + 0.000370 * T) * T - (0.42707 + 0.000370 * T + 0.041803 * t) * t) * t

    return Rz(-z * AS2RAD) @ Ry(theta * AS2RAD) @ Rz(-zeta * AS2RAD)


def fk5_precession_matrix(from_year: float, to_year: float) -> Array:
    """FK4/FK5 catalogue precession between two Julian epochs.

    Args:
        from_year: Julian epoch year of the input frame.
        to_year: Julian epoch year of the output frame.

    Returns:
        3x3 rotation matrix ``Rz(-z) @ Ry(theta) @ Rz(-zeta)``.

    References:

        1. T. Lederle and H. Schwan, A&A 134, 1 (1984).
    """
    if from_year > to_year:
        return _lederle_schwan(to_year, from_year).T
    return _lederle_schwan(from_year, to_year)


# ---------------------------------------------------------------------------
# Nutation
# ---------------------------------------------------------------------------


def nutation_matrix(eps_mean: ArrayLike, dpsi: ArrayLike, deps: ArrayLike) -> Array:
    """Rotation from the mean to the true equator and equinox.

    Args:
        eps_mean: Mean obliquity of the ecliptic [rad].
        dpsi: Nutation in longitude [rad].
        deps: Nutation in obliquity [rad].

    Returns:
        3x3 matrix ``Rx(-(eps + deps)) @ Rz(-dpsi) @ Rx(eps)``.
    """
    eps_mean = jnp.asarray(eps_mean)
    return Rx(-(eps_mean + deps)) @ Rz(-jnp.asarray(dpsi)) @ Rx(eps_mean)
