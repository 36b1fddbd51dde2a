"""Tests for Julian and Besselian coordinate epochs."""

import jax.numpy as jnp
import pytest

from astroframes.config import set_dtype
from astroframes.constants import MJD_B1900, MJD_B1950, MJD_J2000
from astroframes.epoch import (
    B1900,
    B1950,
    J2000,
    BesselianEpoch,
    JulianEpoch,
    as_epoch,
    epoch_for_year,
    epoch_from_header,
    epoch_from_string,
)

set_dtype(jnp.float64)


class TestConstruction:
    def test_j2000_mjd(self):
        assert J2000.mjd == pytest.approx(MJD_J2000)

    def test_b1950_mjd(self):
        assert B1950.mjd == pytest.approx(MJD_B1950, abs=1e-6)

    def test_b1900_mjd(self):
        assert B1900.mjd == pytest.approx(MJD_B1900, abs=1e-6)

    def test_from_mjd(self):
        epoch = JulianEpoch.from_mjd(MJD_J2000 + 365.25 * 10.5)
        assert epoch.year == pytest.approx(2010.5)

    def test_immutable(self):
        with pytest.raises(AttributeError, match="immutable"):
            J2000._year = 1999.0

    def test_str(self):
        assert str(J2000) == "J2000.0"
        assert str(B1950) == "B1950.0"

    def test_repr(self):
        assert repr(BesselianEpoch(1875.0)) == "BesselianEpoch(1875.0)"


class TestConversion:
    def test_b1950_to_julian(self):
        julian = B1950.to_julian()
        assert isinstance(julian, JulianEpoch)
        assert julian.year == pytest.approx(1949.99979, abs=1e-5)

    def test_roundtrip(self):
        epoch = JulianEpoch(2031.25)
        assert epoch.to_besselian().to_julian().year == pytest.approx(2031.25, abs=1e-10)


class TestEquality:
    def test_within_tolerance(self):
        """Epochs closer than 1e-3 yr (about 8.8 hours) compare equal."""
        assert JulianEpoch(2000.0) == JulianEpoch(2000.0009)

    def test_outside_tolerance(self):
        assert JulianEpoch(2000.0) != JulianEpoch(2000.002)

    def test_julian_never_equals_besselian(self):
        assert JulianEpoch(1950.0) != BesselianEpoch(1950.0)
        assert B1950.to_julian() != B1950

    def test_equal_epochs_hash_alike(self):
        assert hash(JulianEpoch(2000.0)) == hash(JulianEpoch(2000.0005))

    def test_ordering(self):
        assert B1950 < J2000
        assert sorted([J2000, B1900, B1950]) == [B1900, B1950, J2000]

    def test_not_equal_to_number(self):
        assert J2000 != 2000.0


class TestParsing:
    @pytest.mark.parametrize(
        ("text", "cls", "year"),
        [
            ("J2000", JulianEpoch, 2000.0),
            ("j2015.5", JulianEpoch, 2015.5),
            ("B1950.0", BesselianEpoch, 1950.0),
            ("1975", BesselianEpoch, 1975.0),
            ("1984", JulianEpoch, 1984.0),
            (" 2000.0 ", JulianEpoch, 2000.0),
        ],
    )
    def test_valid(self, text, cls, year):
        epoch = epoch_from_string(text)
        assert type(epoch) is cls
        assert epoch.year == pytest.approx(year)

    @pytest.mark.parametrize("text", ["", "J", "X2000", "B19x0"])
    def test_invalid(self, text):
        with pytest.raises(ValueError, match="Cannot parse coordinate epoch"):
            epoch_from_string(text)

    def test_epoch_for_year_switch(self):
        assert isinstance(epoch_for_year(1983.99), BesselianEpoch)
        assert isinstance(epoch_for_year(1984.0), JulianEpoch)

    def test_as_epoch_passthrough(self):
        assert as_epoch(J2000) is J2000

    def test_as_epoch_number(self):
        assert as_epoch(1950) == B1950


class TestEpochFromHeader:
    def test_fk4_default_equinox(self):
        assert epoch_from_header({"RADESYS": "FK4"}) == B1950

    def test_fk5_equinox(self):
        assert epoch_from_header({"RADESYS": "FK5", "EQUINOX": 2010.0}) == JulianEpoch(2010.0)

    def test_equinox_only(self):
        assert epoch_from_header({"EQUINOX": 1950.0}) == B1950

    def test_empty_header(self):
        assert epoch_from_header({}) == J2000

    def test_alternate_suffix(self):
        header = {"RADESYS": "ICRS", "RADESYSA": "FK4", "EQUINOXA": 1900.0}
        assert epoch_from_header(header, alt="A") == B1900
