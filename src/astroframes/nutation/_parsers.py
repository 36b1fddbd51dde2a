"""Parsers for IAU 2000A nutation coefficient tables.

The bundled tables follow the layout of IERS Conventions (2010) Tables
5.3a and 5.3b: free-text preamble lines, then one section per power of
time introduced by a ``j = N`` header, each row holding a running index,
the sine and cosine amplitudes in microarcseconds and fourteen integer
multipliers of the fundamental arguments. Anything that is not a header
or a well-formed row is ignored.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import jax.numpy as jnp

from astroframes.config import get_dtype
from astroframes.nutation._types import NutationTerms

_N_ARGUMENTS = 14
_ROW_TOKENS = 3 + _N_ARGUMENTS


def parse_power_header(line: str) -> int | None:
    """Return the power of time announced by a ``j = N`` section header.

    Args:
        line: A single line from a coefficient table.

    Returns:
        The integer power, or None if the line is not a section header.
    """
    tokens = line.split()
    if len(tokens) < 3 or tokens[0] != "j" or tokens[1] != "=":
        return None
    try:
        return int(tokens[2])
    except ValueError:
        return None


def parse_term_line(line: str) -> tuple[float, float, tuple[int, ...]] | None:
    """Parse a single coefficient row.

    Args:
        line: A single line from a coefficient table.

    Returns:
        Tuple of (sine amplitude [uas], cosine amplitude [uas], multipliers),
        or None if the line is not a coefficient row.
    """
    tokens = line.split()
    if len(tokens) != _ROW_TOKENS:
        return None
    try:
        int(tokens[0])
        a_sin = float(tokens[1])
        a_cos = float(tokens[2])
        multipliers = tuple(int(tok) for tok in tokens[3:])
    except ValueError:
        return None
    return a_sin, a_cos, multipliers


def parse_table_lines(lines: Iterable[str]) -> NutationTerms:
    """Parse the lines of a coefficient table into :class:`NutationTerms`.

    Rows seen before the first ``j = N`` header are taken as power 0.

    Args:
        lines: Lines of the table file.

    Returns:
        NutationTerms holding every row in file order.

    Raises:
        ValueError: If no coefficient rows are found.
    """
    power = 0
    amplitudes: list[tuple[float, float]] = []
    multipliers: list[tuple[int, ...]] = []
    powers: list[int] = []

    for line in lines:
        header = parse_power_header(line)
        if header is not None:
            power = header
            continue
        row = parse_term_line(line)
        if row is None:
            continue
        amplitudes.append((row[0], row[1]))
        multipliers.append(row[2])
        powers.append(power)

    if not amplitudes:
        raise ValueError("No nutation coefficient rows found")

    return NutationTerms(
        amplitudes=jnp.array(amplitudes, dtype=get_dtype()),
        multipliers=jnp.array(multipliers, dtype=get_dtype()),
        powers=jnp.array(powers, dtype=jnp.int32),
    )


def parse_table_file(filepath: str | Path) -> NutationTerms:
    """Parse a coefficient table from disk.

    Args:
        filepath: Path to the table file.

    Returns:
        NutationTerms parsed from the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds no coefficient rows.
    """
    filepath = Path(filepath)
    with open(filepath) as f:
        return parse_table_lines(f)
