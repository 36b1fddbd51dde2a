"""Type definitions for the IAU 2000A nutation series.

Provides the core data types for nutation evaluation:

- :class:`Precision`: The four truncation tiers of the series.
- :class:`NutationTerms`: One coefficient table (longitude or obliquity)
  held as JAX arrays for vectorized evaluation.
- :class:`NutationTables`: The pair of tables backing one tier.

``NutationTerms`` and ``NutationTables`` are :class:`~typing.NamedTuple`
types, which JAX treats as pytrees automatically.
"""

from __future__ import annotations

import enum
from typing import NamedTuple

from jax import Array


class Precision(enum.Enum):
    """Truncation tier of the nutation series.

    Each tier drops, at table-load time, every term whose sine and cosine
    amplitudes are both below the tier's threshold, so cheaper tiers are
    backed by strictly shorter term lists.

    Attributes:
        PRECISE: Full series plus the IAU 2006 adjustment.
        TRUNCATED_100UAS: Terms of at least 100 microarcseconds.
        TRUNCATED_1MAS: Terms of at least 1 milliarcsecond, evaluated with
            the linear fundamental arguments.
        TRUNCATED_10MAS: Terms of at least 10 milliarcseconds, evaluated
            with the linear fundamental arguments.
    """

    PRECISE = "precise"
    TRUNCATED_100UAS = "100uas"
    TRUNCATED_1MAS = "1mas"
    TRUNCATED_10MAS = "10mas"

    @property
    def threshold_uas(self) -> float:
        """Amplitude threshold below which terms are dropped [uas]."""
        return _THRESHOLDS_UAS[self]

    @property
    def linear_arguments(self) -> bool:
        """Whether this tier uses the linear Delaunay arguments."""
        return self in (Precision.TRUNCATED_1MAS, Precision.TRUNCATED_10MAS)


_THRESHOLDS_UAS = {
    Precision.PRECISE: 0.0,
    Precision.TRUNCATED_100UAS: 100.0,
    Precision.TRUNCATED_1MAS: 1000.0,
    Precision.TRUNCATED_10MAS: 10000.0,
}


class NutationTerms(NamedTuple):
    """One nutation coefficient table.

    Attributes:
        amplitudes: Sine and cosine amplitudes [uas], shape ``(N, 2)``.
        multipliers: Integer multipliers of the fourteen fundamental
            arguments (l, l', F, D, Omega, eight planetary longitudes and
            the general precession), shape ``(N, 14)``.
        powers: Power of time (0 or 1) multiplying each term, shape ``(N,)``.
    """

    amplitudes: Array
    multipliers: Array
    powers: Array

    def __len__(self) -> int:
        return int(self.powers.shape[0])


class NutationTables(NamedTuple):
    """Longitude and obliquity tables backing one precision tier.

    Attributes:
        psi: Terms of the nutation in longitude.
        eps: Terms of the nutation in obliquity.
    """

    psi: NutationTerms
    eps: NutationTerms

    @property
    def n_terms(self) -> int:
        """Total number of retained terms across both tables."""
        return len(self.psi) + len(self.eps)
