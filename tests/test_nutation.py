"""Tests for the IAU 2000A nutation series, its tiers and its cache."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from unittest.mock import patch

import jax.numpy as jnp
import pytest

from astroframes.config import set_dtype
from astroframes.constants import MAS2RAD, UAS2RAD
from astroframes.delaunay import delaunay_arguments
from astroframes.nutation import (
    NutationCache,
    NutationModel,
    Precision,
    cache_key,
    get_default_precision,
    get_model,
    iau2006_adjustment,
    load_default_tables,
    load_tables_from_files,
    nutation,
    parse_power_header,
    parse_table_lines,
    parse_term_line,
    set_default_precision,
    truncate_terms,
)

set_dtype(jnp.float64)

_MJD = 60000.0

_PSI_TABLE = """\
 Test table: nutation in longitude

j = 0  Number of terms = 2
     i             A_s           A_c    l  lp   F   D  Om  Me  Ve   E  Ma  Ju  Sa  Ur  Ne  pA
     1     1000.00         0.00    0   0   0   0   1   0   0   0   0   0   0   0   0   0
     2        5.00         0.00    0   0   2  -2   2   0   0   0   0   0   0   0   0   0
"""

_EPS_TABLE = """\
j = 0  Number of terms = 1
     1        0.00       500.00    0   0   0   0   1   0   0   0   0   0   0   0   0   0
j = 1  Number of terms = 1
     2        0.00       200.00    0   0   0   0   1   0   0   0   0   0   0   0   0   0
"""


@pytest.fixture
def table_files(tmp_path: Path) -> tuple[Path, Path]:
    psi = tmp_path / "psi.txt"
    eps = tmp_path / "eps.txt"
    psi.write_text(_PSI_TABLE)
    eps.write_text(_EPS_TABLE)
    return psi, eps


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


class TestParsers:
    """Line-level parsing of the coefficient tables."""

    def test_power_header(self):
        assert parse_power_header("j = 1  Number of terms = 37") == 1

    def test_not_a_power_header(self):
        assert parse_power_header("     i   A_s   A_c") is None
        assert parse_power_header("j = x") is None

    def test_term_line(self):
        line = "   1   -17206424.18   3338.60   0 0 0 0 1 0 0 0 0 0 0 0 0 0"
        a_sin, a_cos, multipliers = parse_term_line(line)
        assert a_sin == pytest.approx(-17206424.18)
        assert a_cos == pytest.approx(3338.60)
        assert multipliers == (0, 0, 0, 0, 1) + (0,) * 9

    def test_term_line_wrong_length(self):
        assert parse_term_line("1 2.0 3.0 0 0 0") is None

    def test_term_line_not_numeric(self):
        assert parse_term_line("     i             A_s           A_c    l  lp   F   D  Om  Me  Ve   E  Ma  Ju  Sa  Ur  Ne  pA") is None

    def test_table_lines_powers(self):
        terms = parse_table_lines(_EPS_TABLE.splitlines())
        assert len(terms) == 2
        assert terms.powers.tolist() == [0, 1]
        assert terms.multipliers.shape == (2, 14)

    def test_table_lines_empty_raises(self):
        with pytest.raises(ValueError, match="No nutation coefficient rows"):
            parse_table_lines(["just a preamble", ""])


# ---------------------------------------------------------------------------
# Tables and truncation
# ---------------------------------------------------------------------------


class TestTables:
    def test_full_table_size(self):
        tables = load_default_tables(Precision.PRECISE)
        assert len(tables.psi) == 1352 + 37
        assert len(tables.eps) == 1071 + 19
        assert tables.n_terms == 2479

    def test_tiers_strictly_shorter(self):
        counts = [load_default_tables(p).n_terms for p in Precision]
        assert counts == sorted(counts, reverse=True)
        assert len(set(counts)) == len(counts)

    def test_tier_sizes(self):
        assert load_default_tables(Precision.TRUNCATED_100UAS).n_terms == 159
        assert load_default_tables(Precision.TRUNCATED_1MAS).n_terms == 58
        assert load_default_tables(Precision.TRUNCATED_10MAS).n_terms == 21

    def test_truncate_keeps_term_with_one_large_amplitude(self, table_files):
        psi, _ = table_files
        tables = load_tables_from_files(psi, psi, Precision.TRUNCATED_1MAS)
        assert len(tables.psi) == 1
        assert float(tables.psi.amplitudes[0, 0]) == pytest.approx(1000.0)

    def test_truncate_zero_threshold_is_noop(self, table_files):
        psi, _ = table_files
        tables = load_tables_from_files(psi, psi)
        assert truncate_terms(tables.psi, 0.0) is tables.psi

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_tables_from_files(tmp_path / "nope.txt", tmp_path / "nope.txt")


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class TestEvaluation:
    def test_custom_tables(self, table_files):
        """A hand-written table evaluates to its closed form."""
        psi, eps = table_files
        tables = load_tables_from_files(psi, eps, Precision.TRUNCATED_100UAS)
        model = NutationModel(Precision.TRUNCATED_100UAS, tables=tables)

        args = delaunay_arguments(_MJD)
        t = (_MJD - 51544.5) / 36525.0
        dpsi, deps = model.compute(_MJD)

        assert float(dpsi) == pytest.approx(1000.0 * float(jnp.sin(args.omega)) * UAS2RAD, abs=1e-15)
        expected_eps = (500.0 + 200.0 * t) * float(jnp.cos(args.omega)) * UAS2RAD
        assert float(deps) == pytest.approx(expected_eps, abs=1e-15)

    def test_sofa_reference(self):
        """Full series against SOFA iauNut06a(2400000.5, 53736.0)."""
        dpsi, deps = NutationModel(Precision.PRECISE).compute(53736.0)
        assert float(dpsi) == pytest.approx(-0.9630912025820308797e-5, abs=5e-10)
        assert float(deps) == pytest.approx(0.4063238496887249798e-4, abs=5e-10)

    def test_magnitude(self):
        """Nutation in longitude stays within about 20 arcseconds."""
        dpsi, deps = nutation(_MJD, Precision.TRUNCATED_10MAS)
        assert abs(float(dpsi)) < 20.0 * 1000.0 * MAS2RAD
        assert abs(float(deps)) < 10.0 * 1000.0 * MAS2RAD

    def test_100uas_tier_accuracy(self):
        full = NutationModel(Precision.PRECISE).compute(_MJD)
        tier = NutationModel(Precision.TRUNCATED_100UAS).compute(_MJD)
        assert float(jnp.max(jnp.abs(full - tier))) < 1.0 * MAS2RAD

    def test_10mas_tier_accuracy(self):
        full = NutationModel(Precision.PRECISE).compute(_MJD)
        tier = NutationModel(Precision.TRUNCATED_10MAS).compute(_MJD)
        assert float(jnp.max(jnp.abs(full - tier))) < 15.0 * MAS2RAD

    def test_iau2006_adjustment_is_small(self):
        args = delaunay_arguments(_MJD)
        adj = iau2006_adjustment(args.omega, args.F, args.D, 0.23)
        assert adj.shape == (2,)
        assert float(jnp.max(jnp.abs(adj))) < 30.0

    def test_only_precise_tier_adjusts(self, table_files):
        psi, eps = table_files
        tables = load_tables_from_files(psi, eps)
        precise = NutationModel(Precision.PRECISE, tables=tables).compute(_MJD)
        plain = NutationModel(Precision.TRUNCATED_100UAS, tables=tables).compute(_MJD)
        assert float(jnp.max(jnp.abs(precise - plain))) > 0.0


class TestLoadFailure:
    def test_warns_and_returns_zero(self, caplog):
        with patch(
            "astroframes.nutation._model.load_default_tables",
            side_effect=OSError("resource missing"),
        ):
            model = NutationModel(Precision.TRUNCATED_1MAS)
            with caplog.at_level(logging.WARNING, logger="astroframes.nutation._model"):
                result = model(_MJD)

        assert float(jnp.max(jnp.abs(result))) == 0.0
        assert model.tables is None
        assert "Failed to load nutation tables" in caplog.text

    def test_warns_once(self, caplog):
        with patch(
            "astroframes.nutation._model.load_default_tables",
            side_effect=ValueError("No nutation coefficient rows found"),
        ) as loader:
            model = NutationModel(Precision.TRUNCATED_10MAS)
            with caplog.at_level(logging.WARNING):
                model.compute(_MJD)
                model.compute(_MJD + 1.0)
        assert loader.call_count == 1

    def test_missing_data_package(self, caplog):
        """A missing bundled data package degrades to zero nutation too."""
        with patch(
            "importlib.resources.files",
            side_effect=ModuleNotFoundError("No module named 'astroframes.data.nutation'"),
        ):
            model = NutationModel(Precision.TRUNCATED_1MAS)
            with caplog.at_level(logging.WARNING, logger="astroframes.nutation._model"):
                result = model(_MJD)

        assert float(jnp.max(jnp.abs(result))) == 0.0
        assert model.tables is None
        assert "Failed to load nutation tables" in caplog.text


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class TestNutationCache:
    def test_key_rounds_to_hundredth_of_day(self):
        assert cache_key(60000.004) == cache_key(60000.0)
        assert cache_key(60000.006) == cache_key(60000.01)

    def test_hit_returns_stored_value(self):
        cache = NutationCache()
        value = jnp.array([1.0, 2.0])
        cache.put(60000.0, value)
        assert cache.get(60000.001) is value
        assert 60000.002 in cache

    def test_miss(self):
        assert NutationCache().get(60000.0) is None

    def test_eviction_halves(self):
        cache = NutationCache(maxsize=10)
        for i in range(10):
            cache.put(60000.0 + i, jnp.zeros(2))
        assert len(cache) == 10
        cache.put(70000.0, jnp.ones(2))
        assert len(cache) == 6
        assert 70000.0 in cache

    def test_overwrite_does_not_evict(self):
        cache = NutationCache(maxsize=2)
        cache.put(1.0, jnp.zeros(2))
        cache.put(2.0, jnp.zeros(2))
        cache.put(2.0, jnp.ones(2))
        assert len(cache) == 2

    def test_clear(self):
        cache = NutationCache()
        cache.put(1.0, jnp.zeros(2))
        cache.clear()
        assert len(cache) == 0

    def test_invalid_maxsize(self):
        with pytest.raises(ValueError, match="maxsize"):
            NutationCache(maxsize=0)

    def test_model_memoizes(self):
        cache = NutationCache()
        model = NutationModel(Precision.TRUNCATED_10MAS, cache=cache)
        first = model(_MJD)
        assert _MJD in cache
        with patch.object(model, "compute", side_effect=AssertionError("not cached")):
            assert model(_MJD + 0.001) is first

    def test_concurrent_puts(self):
        cache = NutationCache(maxsize=50)

        def worker(offset: int) -> None:
            for i in range(200):
                cache.put(offset * 1000.0 + i, jnp.zeros(2))

        threads = [threading.Thread(target=worker, args=(k,)) for k in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(cache) <= 50


# ---------------------------------------------------------------------------
# Module-level defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    @pytest.fixture(autouse=True)
    def restore_default(self):
        previous = get_default_precision()
        yield
        set_default_precision(previous)

    def test_initial_default(self):
        assert get_default_precision() is Precision.TRUNCATED_100UAS

    def test_set_default(self):
        set_default_precision(Precision.TRUNCATED_1MAS)
        assert get_model().precision is Precision.TRUNCATED_1MAS

    def test_set_invalid_raises(self):
        with pytest.raises(ValueError, match="Unsupported nutation precision"):
            set_default_precision("precise")

    def test_shared_model_per_tier(self):
        assert get_model(Precision.PRECISE) is get_model(Precision.PRECISE)
        assert get_model(Precision.PRECISE) is not get_model(Precision.TRUNCATED_10MAS)

    def test_nutation_uses_shared_model(self):
        value = nutation(_MJD, Precision.TRUNCATED_1MAS)
        assert get_model(Precision.TRUNCATED_1MAS)(_MJD) is value
