"""Module-wide floating-point precision and tolerance configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
throughout astroframes, plus the equality tolerances shared by epochs and
frames.

The default dtype is ``jnp.float64``. Frame-bias rotations are tens of
milliarcseconds and round trips are checked at the 1e-9 level, neither of
which survives single precision, so JAX's 64-bit mode
(``jax_enable_x64``) is switched on when this module is imported.
Selecting a narrower dtype afterwards is allowed but degrades every
sub-arcsecond correction.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

jax.config.update("jax_enable_x64", True)

_dtype = jnp.float64

_EPOCH_EQ_TOLERANCE = 1e-3
_FRAME_EQ_TOLERANCE = 1e-6


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for astroframes.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is (re-)enabled via
    ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_epoch_eq_tolerance() -> float:
    """Return the tolerance for epoch equality, in years (about 8.8 hours)."""
    return _EPOCH_EQ_TOLERANCE


def get_frame_eq_tolerance() -> float:
    """Return the tolerance for comparing frame epochs, in years."""
    return _FRAME_EQ_TOLERANCE
