"""Angle and unit conversion helpers.

These helpers wrap the ``use_degrees`` convention used throughout
astroframes, providing JAX-traceable degree/radian conversion via
``jnp.where``, and the range reductions used by the fundamental arguments
and the spherical coordinate types.
"""

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike


def to_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle to radians if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle value.
        use_degrees (bool): If ``True``, treat ``angle`` as degrees and convert.

    Returns:
        Angle in radians.
    """
    return jnp.where(use_degrees, jnp.deg2rad(angle), angle)


def from_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle from radians to degrees if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle in radians.
        use_degrees (bool): If ``True``, convert to degrees.

    Returns:
        Angle in radians or degrees.
    """
    return jnp.where(use_degrees, jnp.rad2deg(angle), angle)


def wrap_to_pi(angle: ArrayLike) -> Array:
    """Reduce an angle in radians to the half-open range (-pi, pi].

    Args:
        angle (ArrayLike): Angle in radians.

    Returns:
        Equivalent angle in (-pi, pi].
    """
    wrapped = jnp.mod(angle, 2.0 * jnp.pi)
    return jnp.where(wrapped > jnp.pi, wrapped - 2.0 * jnp.pi, wrapped)


def wrap_to_2pi(angle: ArrayLike) -> Array:
    """Reduce an angle in radians to [0, 2pi)."""
    return jnp.mod(angle, 2.0 * jnp.pi)
