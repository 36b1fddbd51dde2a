"""Evaluation of the IAU 2000A nutation series at a chosen precision tier.

A :class:`NutationModel` binds one :class:`Precision` tier to its
truncated coefficient tables and a :class:`NutationCache`. Tables are read
from the bundled resources the first time a model is evaluated. If they
cannot be read, the model logs a warning and yields a zero correction from
then on: nutation is a sub-arcsecond refinement and a conversion without
it is still usable.
"""

from __future__ import annotations

import logging
import threading

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroframes.config import get_dtype
from astroframes.constants import UAS2RAD
from astroframes.delaunay import delaunay_arguments
from astroframes.nutation._cache import NutationCache
from astroframes.nutation._providers import load_default_tables
from astroframes.nutation._types import NutationTables, NutationTerms, Precision
from astroframes.sofa import centuries_since_j2000, fapa03, planetary_longitudes

logger = logging.getLogger(__name__)

_default_precision = Precision.TRUNCATED_100UAS

_default_models: dict[Precision, NutationModel] = {}
_default_models_lock = threading.Lock()


def _series_sum(terms: NutationTerms, fundamental: Array, t: Array) -> Array:
    """Sum ``(A_s sin(arg) + A_c cos(arg)) * t^j`` over a table [uas]."""
    arg = terms.multipliers @ fundamental
    contrib = terms.amplitudes[:, 0] * jnp.sin(arg) + terms.amplitudes[:, 1] * jnp.cos(arg)
    contrib = jnp.where(terms.powers == 1, contrib * t, contrib)
    return jnp.sum(contrib)


def iau2006_adjustment(omega: ArrayLike, F: ArrayLike, D: ArrayLike, t: ArrayLike) -> Array:
    """Closed-form IAU 2006 adjustment to the IAU 2000A nutation.

    Args:
        omega: Mean longitude of the Moon's ascending node [rad].
        F: Mean argument of latitude of the Moon [rad].
        D: Mean elongation of the Moon from the Sun [rad].
        t: TT Julian centuries since J2000.0.

    Returns:
        Array of shape ``(2,)``: corrections to (delta psi, delta epsilon)
        in microarcseconds.
    """
    a = 2.0 * (F - D + omega)
    dpsi0 = -8.1 * jnp.sin(omega) - 0.6 * jnp.sin(a)
    dpsi1 = (
        47.8 * jnp.sin(omega)
        + 3.7 * jnp.sin(a)
        + 0.6 * jnp.sin(2.0 * (F + omega))
        - 0.6 * jnp.sin(2.0 * omega)
    )
    deps1 = -25.6 * jnp.cos(omega) - 1.6 * jnp.cos(a)
    return jnp.stack([dpsi0 + dpsi1 * t, deps1 * t])


class NutationModel:
    """IAU 2000A nutation evaluator for one precision tier.

    Args:
        precision: Truncation tier. Default: ``Precision.PRECISE``.
        cache: Result cache. A fresh :class:`NutationCache` when omitted.
        tables: Pre-loaded coefficient tables, already truncated. Loaded
            from the bundled resources on first use when omitted.

    Examples:
        ```python
        from astroframes.nutation import NutationModel, Precision
        model = NutationModel(Precision.TRUNCATED_1MAS)
        dpsi, deps = model(60000.0)
        ```
    """

    def __init__(
        self,
        precision: Precision = Precision.PRECISE,
        cache: NutationCache | None = None,
        tables: NutationTables | None = None,
    ) -> None:
        self.precision = precision
        self.cache = cache if cache is not None else NutationCache()
        self._tables = tables
        self._load_failed = False
        self._load_lock = threading.Lock()

    @property
    def tables(self) -> NutationTables | None:
        """The coefficient tables, loading them if needed.

        None when the tables could not be loaded.
        """
        self._ensure_tables()
        return self._tables

    def _ensure_tables(self) -> None:
        if self._tables is not None or self._load_failed:
            return
        with self._load_lock:
            if self._tables is not None or self._load_failed:
                return
            try:
                self._tables = load_default_tables(self.precision)
            except (OSError, ValueError, ImportError):
                logger.warning(
                    "Failed to load nutation tables for precision %s, "
                    "nutation corrections will be zero",
                    self.precision.name,
                    exc_info=True,
                )
                self._load_failed = True

    def compute(self, mjd: float) -> Array:
        """Evaluate the series at *mjd*, bypassing the cache.

        Args:
            mjd: Modified Julian Date (TT).

        Returns:
            Array of shape ``(2,)``: (delta psi, delta epsilon) in radians.
        """
        tables = self.tables
        if tables is None:
            return jnp.zeros(2, dtype=get_dtype())

        t = centuries_since_j2000(mjd)
        delaunay = delaunay_arguments(mjd, truncated=self.precision.linear_arguments)
        fundamental = jnp.concatenate(
            [delaunay.as_array(), planetary_longitudes(t), fapa03(t)[None]]
        )

        result = jnp.stack(
            [_series_sum(tables.psi, fundamental, t), _series_sum(tables.eps, fundamental, t)]
        )
        if self.precision is Precision.PRECISE:
            result = result + iau2006_adjustment(delaunay.omega, delaunay.F, delaunay.D, t)

        return result * UAS2RAD

    def __call__(self, mjd: float) -> Array:
        """Return (delta psi, delta epsilon) in radians at *mjd*, memoized.

        Args:
            mjd: Modified Julian Date (TT).

        Returns:
            Array of shape ``(2,)``.
        """
        cached = self.cache.get(mjd)
        if cached is not None:
            return cached
        value = self.compute(mjd)
        self.cache.put(mjd, value)
        return value

    def __repr__(self) -> str:
        return f"NutationModel(precision={self.precision.name})"


def get_model(precision: Precision | None = None) -> NutationModel:
    """Return the shared model for a tier, creating it on first use.

    Args:
        precision: Tier. Defaults to :func:`get_default_precision`.

    Returns:
        The process-wide NutationModel for that tier.
    """
    if precision is None:
        precision = _default_precision
    with _default_models_lock:
        model = _default_models.get(precision)
        if model is None:
            model = NutationModel(precision)
            _default_models[precision] = model
        return model


def nutation(mjd: float, precision: Precision | None = None) -> Array:
    """Nutation in longitude and obliquity at an MJD.

    Args:
        mjd: Modified Julian Date (TT).
        precision: Tier. Defaults to :func:`get_default_precision`.

    Returns:
        Array of shape ``(2,)``: (delta psi, delta epsilon) in radians.

    Examples:
        ```python
        from astroframes.nutation import Precision, nutation
        dpsi, deps = nutation(51544.5, Precision.PRECISE)
        ```
    """
    return get_model(precision)(mjd)


def set_default_precision(precision: Precision) -> None:
    """Set the nutation tier used when a conversion does not name one.

    Args:
        precision: A :class:`Precision` member.

    Raises:
        ValueError: If *precision* is not a ``Precision`` member.
    """
    global _default_precision
    if not isinstance(precision, Precision):
        raise ValueError(
            f"Unsupported nutation precision {precision!r}. Must be one of: "
            f"{', '.join(p.name for p in Precision)}"
        )
    _default_precision = precision


def get_default_precision() -> Precision:
    """Return the default nutation tier (initially ``TRUNCATED_100UAS``)."""
    return _default_precision
