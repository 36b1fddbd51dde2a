"""Elementary rotation matrices shared by every frame-conversion step.

All matrices follow the passive (frame-rotation) convention: applying
``Rz(a)`` to a vector expresses it in axes rotated counter-clockwise by
``a`` about z. Frame bias, precession, nutation and polar-wobble steps are
all built by composing these three matrices in a fixed order, and each
composition is inverted by its transpose.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes._angle import to_radians
from astroframes.config import get_dtype


def Rx(angle: ArrayLike, use_degrees: bool = False) -> Array:
    """Rotation matrix, for a rotation about the x-axis.

    Args:
        angle (ArrayLike): Counter-clockwise angle of rotation as viewed
            looking back along the positive direction of the rotation axis.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        Array: 3x3 rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    angle = to_radians(jnp.asarray(angle, dtype=get_dtype()), use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[1.0,  0.0,  0.0],
                      [0.0,   +c,   +s],
                      [0.0,   -s,   +c]], dtype=get_dtype())


def Ry(angle: ArrayLike, use_degrees: bool = False) -> Array:
    """Rotation matrix, for a rotation about the y-axis.

    Args:
        angle (ArrayLike): Counter-clockwise angle of rotation as viewed
            looking back along the positive direction of the rotation axis.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        Array: 3x3 rotation matrix.
    """
    angle = to_radians(jnp.asarray(angle, dtype=get_dtype()), use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,  0.0,   -s],
                      [0.0, +1.0,  0.0],
                      [ +s,  0.0,   +c]], dtype=get_dtype())


def Rz(angle: ArrayLike, use_degrees: bool = False) -> Array:
    """Rotation matrix, for a rotation about the z-axis.

    Args:
        angle (ArrayLike): Counter-clockwise angle of rotation as viewed
            looking back along the positive direction of the rotation axis.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        Array: 3x3 rotation matrix.
    """
    angle = to_radians(jnp.asarray(angle, dtype=get_dtype()), use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,   +s,  0.0],
                      [ -s,   +c,  0.0],
                      [0.0,  0.0,  1.0]], dtype=get_dtype())


def small_rotation(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> Array:
    """Compose rotations about x, then y, then z into one matrix.

    This is the form in which fixed frame-bias offsets are tabulated: the
    three angles are the small rotations about each axis that carry one
    frame onto the other.

    Args:
        x (ArrayLike): Rotation about the x-axis [rad].
        y (ArrayLike): Rotation about the y-axis [rad].
        z (ArrayLike): Rotation about the z-axis [rad].

    Returns:
        Array: ``Rx(x) @ Ry(y) @ Rz(z)``.

    Examples:
        ```python
        from astroframes.constants import MAS2RAD
        from astroframes.rotations import small_rotation
        m = small_rotation(-19.9 * MAS2RAD, -9.1 * MAS2RAD, 22.9 * MAS2RAD)
        ```
    """
    return Rx(x) @ Ry(y) @ Rz(z)


def rotate(matrix: Array, vector: ArrayLike) -> Array:
    """Apply a 3x3 matrix to one vector or a batch of shape ``(..., 3)``.

    Args:
        matrix (Array): 3x3 rotation matrix.
        vector (ArrayLike): Vector(s) with a trailing axis of length 3.

    Returns:
        Array: Rotated vector(s), same shape as *vector*.
    """
    return jnp.einsum("ij,...j->...i", matrix, jnp.asarray(vector, dtype=get_dtype()))
