"""Delaunay fundamental arguments of lunisolar nutation.

The five arguments are the mean anomalies of the Moon and the Sun, the
mean argument of latitude of the Moon, the mean elongation of the Moon
from the Sun, and the mean longitude of the Moon's ascending node. Two
forms are offered:

- the full IERS 2003 quartic polynomials, used by the precise nutation
  tiers, and
- a linear approximation accurate to about an arcsecond over a few
  centuries, used by the cheaper tiers.

Both return angles in radians reduced to (-pi, pi].
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes._angle import wrap_to_pi
from astroframes.config import get_dtype
from astroframes.sofa import DAS2R, TURNAS, centuries_since_j2000

# Polynomial coefficients in arcseconds, constant term first (IERS 2003).
_FULL_COEFFICIENTS: tuple[tuple[float, ...], ...] = (
    (485868.249036, 1717915923.2178, 31.8792, 0.051635, -0.00024470),  # l
    (1287104.793048, 129596581.0481, -0.5532, 0.000136, -0.00001149),  # l'
    (335779.526232, 1739527262.8478, -12.7512, -0.001037, 0.00000417),  # F
    (1072260.703692, 1602961601.2090, -6.3706, 0.006593, -0.00003169),  # D
    (450160.398036, -6962890.5431, 7.4722, 0.007702, -0.00005939),  # Omega
)

# Linear approximation: (value at J2000.0 [rad], rate [rad/century]).
_LINEAR_COEFFICIENTS: tuple[tuple[float, float], ...] = (
    (2.3555557435, 8328.6914257191),  # l
    (6.2400601269, 628.3019551714),  # l'
    (1.6279050815, 8433.4661569164),  # F
    (5.1984665887, 7771.3771455937),  # D
    (2.1824391966, -33.7570459536),  # Omega
)


class DelaunayArguments(NamedTuple):
    """The five Delaunay arguments at one instant, in radians.

    Attributes:
        l: Mean anomaly of the Moon.
        l_prime: Mean anomaly of the Sun.
        F: Mean argument of latitude of the Moon (L - Omega).
        D: Mean elongation of the Moon from the Sun.
        omega: Mean longitude of the Moon's ascending node.
    """

    l: Array
    l_prime: Array
    F: Array
    D: Array
    omega: Array

    def as_array(self) -> Array:
        """Stack the arguments into an array of shape ``(5,) + t.shape``."""
        return jnp.stack(tuple(self))


def _full_form(t: Array) -> Array:
    coeffs = jnp.asarray(_FULL_COEFFICIENTS, dtype=get_dtype())
    # Horner evaluation, highest power first.
    arcsec = coeffs[:, 4]
    for k in (3, 2, 1, 0):
        arcsec = coeffs[:, k] + t * arcsec
    return jnp.fmod(arcsec, TURNAS) * DAS2R


def _linear_form(t: Array) -> Array:
    coeffs = jnp.asarray(_LINEAR_COEFFICIENTS, dtype=get_dtype())
    return coeffs[:, 0] + coeffs[:, 1] * t


def delaunay_arguments(mjd: ArrayLike, truncated: bool = False) -> DelaunayArguments:
    """Evaluate the Delaunay arguments at an MJD.

    Args:
        mjd (ArrayLike): Modified Julian Date (TT), scalar.
        truncated (bool): Use the linear approximation instead of the full
            polynomials. Default: ``False``

    Returns:
        DelaunayArguments: The five arguments, each in (-pi, pi].

    Examples:
        ```python
        from astroframes.delaunay import delaunay_arguments
        args = delaunay_arguments(51544.5)
        float(args.omega)  # about 2.18 rad at J2000.0
        ```
    """
    t = centuries_since_j2000(mjd)
    values = _linear_form(t) if truncated else _full_form(t)
    return DelaunayArguments(*wrap_to_pi(values))
