"""Loaders for the nutation coefficient tables.

Provides:

- :func:`truncate_terms`: Drop terms below a tier's amplitude threshold.
- :func:`load_tables_from_files`: Load and truncate a pair of table files.
- :func:`load_default_tables`: Load the bundled IERS tables for a tier.
"""

from __future__ import annotations

import importlib.resources
import logging
from pathlib import Path

import jax.numpy as jnp

from astroframes.nutation._parsers import parse_table_file
from astroframes.nutation._types import NutationTables, NutationTerms, Precision

logger = logging.getLogger(__name__)

_PSI_FILENAME = "tab5.3a.txt"
"""Bundled table of the nutation in longitude."""

_EPS_FILENAME = "tab5.3b.txt"
"""Bundled table of the nutation in obliquity."""


def truncate_terms(terms: NutationTerms, threshold_uas: float) -> NutationTerms:
    """Drop every term whose sine and cosine amplitudes are both below a threshold.

    Args:
        terms: Table to truncate.
        threshold_uas: Amplitude threshold [uas]. Zero keeps every term.

    Returns:
        NutationTerms with the surviving rows, in their original order.
    """
    if threshold_uas <= 0.0:
        return terms
    keep = jnp.any(jnp.abs(terms.amplitudes) >= threshold_uas, axis=1)
    return NutationTerms(
        amplitudes=terms.amplitudes[keep],
        multipliers=terms.multipliers[keep],
        powers=terms.powers[keep],
    )


def load_tables_from_files(
    psi_path: str | Path,
    eps_path: str | Path,
    precision: Precision = Precision.PRECISE,
) -> NutationTables:
    """Load a longitude/obliquity table pair and truncate it for a tier.

    Args:
        psi_path: Path to the nutation-in-longitude table.
        eps_path: Path to the nutation-in-obliquity table.
        precision: Tier whose threshold is applied. Default: ``PRECISE``.

    Returns:
        NutationTables for the tier.

    Raises:
        FileNotFoundError: If either file does not exist.
        ValueError: If either file holds no coefficient rows.
    """
    threshold = precision.threshold_uas
    tables = NutationTables(
        psi=truncate_terms(parse_table_file(psi_path), threshold),
        eps=truncate_terms(parse_table_file(eps_path), threshold),
    )
    logger.debug(
        "Loaded %d nutation terms for precision %s", tables.n_terms, precision.name
    )
    return tables


def load_default_tables(precision: Precision = Precision.PRECISE) -> NutationTables:
    """Load the bundled IAU 2000A tables, truncated for a tier.

    Uses ``importlib.resources`` to locate the data files bundled with the
    package.

    Args:
        precision: Tier whose threshold is applied. Default: ``PRECISE``.

    Returns:
        NutationTables for the tier.

    Examples:
        ```python
        from astroframes.nutation import Precision, load_default_tables
        tables = load_default_tables(Precision.TRUNCATED_1MAS)
        tables.n_terms
        ```
    """
    data_pkg = importlib.resources.files("astroframes.data.nutation")
    psi_resource = data_pkg.joinpath(_PSI_FILENAME)
    eps_resource = data_pkg.joinpath(_EPS_FILENAME)
    with importlib.resources.as_file(psi_resource) as psi_path, importlib.resources.as_file(
        eps_resource
    ) as eps_path:
        return load_tables_from_files(psi_path, eps_path, precision)
