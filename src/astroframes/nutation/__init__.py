"""IAU 2000A/2006 nutation series with selectable truncation.

Provides four precision tiers backed by progressively shorter coefficient
tables, a bounded per-model result cache, and a module-level
:func:`nutation` function backed by one shared model per tier.
"""

from astroframes.nutation._cache import NutationCache, cache_key
from astroframes.nutation._model import (
    NutationModel,
    get_default_precision,
    get_model,
    iau2006_adjustment,
    nutation,
    set_default_precision,
)
from astroframes.nutation._parsers import (
    parse_power_header,
    parse_table_file,
    parse_table_lines,
    parse_term_line,
)
from astroframes.nutation._providers import (
    load_default_tables,
    load_tables_from_files,
    truncate_terms,
)
from astroframes.nutation._types import NutationTables, NutationTerms, Precision

__all__ = [
    "NutationCache",
    "NutationModel",
    "NutationTables",
    "NutationTerms",
    "Precision",
    "cache_key",
    "get_default_precision",
    "get_model",
    "iau2006_adjustment",
    "load_default_tables",
    "load_tables_from_files",
    "nutation",
    "parse_power_header",
    "parse_table_file",
    "parse_table_lines",
    "parse_term_line",
    "set_default_precision",
    "truncate_terms",
]
