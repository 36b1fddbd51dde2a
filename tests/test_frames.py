"""Tests for frame values, constructors, parsing and FITS keywords."""

from __future__ import annotations

import logging

import jax.numpy as jnp
import pytest

from astroframes.config import set_dtype
from astroframes.coordinates import GeodeticLocation
from astroframes.epoch import B1900, B1950, J2000, BesselianEpoch, JulianEpoch
from astroframes.errors import EpochMismatchError, FrameError, FrameParseError
from astroframes.frames import (
    DYNAMICAL_J2000,
    FK4,
    FK4_B1900,
    FK4_B1950,
    FK5,
    FK5_J2000,
    GCRS,
    GCRS_J2000,
    ICRS,
    ICRS_FRAME,
    Dynamical,
    FrameKind,
    describe_fits,
    dynamical,
    fk4,
    fk5,
    frame_for_epoch_year,
    frame_from_fits,
    frame_from_string,
    gcrs,
    icrs,
    is_precessing,
    topocentric,
)

set_dtype(jnp.float64)

_SITE = GeodeticLocation.from_degrees(-155.4681, 19.8206, 4205.0)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstructors:
    def test_icrs_singleton(self):
        assert icrs() is ICRS_FRAME
        assert icrs() == ICRS()

    def test_fk4_default(self):
        assert fk4() == FK4_B1950

    def test_fk4_from_number_is_besselian(self):
        frame = fk4(1900)
        assert isinstance(frame.epoch, BesselianEpoch)
        assert frame == FK4_B1900

    def test_fk5_from_string(self):
        assert fk5("J2010.5") == FK5(JulianEpoch(2010.5))

    def test_gcrs_default(self):
        assert gcrs() == GCRS_J2000

    def test_dynamical(self):
        assert dynamical(2000.0) == DYNAMICAL_J2000

    @pytest.mark.parametrize(
        ("factory", "epoch"),
        [(fk4, J2000), (fk5, B1950), (gcrs, B1900), (dynamical, "B1950")],
    )
    def test_epoch_mismatch(self, factory, epoch):
        with pytest.raises(EpochMismatchError):
            factory(epoch)

    def test_epoch_mismatch_is_type_error(self):
        with pytest.raises(TypeError):
            FK4(JulianEpoch(1950.0))
        with pytest.raises(FrameError):
            FK5(BesselianEpoch(2000.0))

    def test_frames_are_frozen(self):
        with pytest.raises(AttributeError):
            FK5_J2000.julian_epoch = JulianEpoch(2010.0)

    def test_topocentric(self):
        frame = topocentric("Mauna Kea", _SITE, 60000.25, wobble=(1e-6, 2e-6))
        assert frame.kind is FrameKind.TOPOCENTRIC
        assert frame.wobble == (1e-6, 2e-6)
        assert frame.surface_velocity == (0.0, 0.0, 0.0)
        assert frame.epoch == JulianEpoch.from_mjd(60000.25)

    def test_topocentric_bad_wobble(self):
        with pytest.raises(ValueError, match="wobble"):
            topocentric("x", _SITE, 60000.0, wobble=(1.0, 2.0, 3.0))


class TestFrameProperties:
    def test_kinds(self):
        assert [f.kind for f in (ICRS_FRAME, GCRS_J2000, FK4_B1950, FK5_J2000, DYNAMICAL_J2000)] == [
            FrameKind.ICRS,
            FrameKind.GCRS,
            FrameKind.FK4,
            FrameKind.FK5,
            FrameKind.DYNAMICAL,
        ]

    def test_precessing(self):
        assert not is_precessing(ICRS_FRAME)
        assert not is_precessing(GCRS_J2000)
        assert is_precessing(FK4_B1950)
        assert is_precessing(FK5_J2000)
        assert is_precessing(DYNAMICAL_J2000)

    def test_julian_year_of_besselian_frame(self):
        assert FK4_B1950.julian_year == pytest.approx(1949.99979, abs=1e-5)

    def test_str(self):
        assert str(ICRS_FRAME) == "ICRS"
        assert str(FK5_J2000) == "FK5(J2000.0)"

    def test_equatorial_velocity_includes_rotation(self):
        """A site on the ground moves at about 440 m/s at latitude 20 deg."""
        frame = topocentric("Mauna Kea", _SITE, 60000.25)
        speed = float(jnp.linalg.norm(frame.equatorial_velocity))
        assert speed == pytest.approx(465.1 * float(jnp.cos(_SITE.lat)), rel=0.01)

    def test_equatorial_velocity_is_eastward(self):
        """Earth rotation carries the observer along the equator, not the pole."""
        frame = topocentric("Equator", GeodeticLocation(0.0, 0.0, 0.0), 60000.0)
        assert abs(float(frame.equatorial_velocity[2])) < 1e-9


class TestFrameEquality:
    def test_epoch_tolerance(self):
        assert FK5(JulianEpoch(2000.0)) == FK5(JulianEpoch(2000.0 + 5e-7))
        assert FK5(JulianEpoch(2000.0)) != FK5(JulianEpoch(2000.0 + 5e-6))

    def test_different_variant(self):
        assert FK5_J2000 != DYNAMICAL_J2000
        assert GCRS_J2000 != ICRS_FRAME

    def test_hash_consistent_with_equality(self):
        assert hash(FK5(JulianEpoch(2000.0))) == hash(FK5(JulianEpoch(2000.0 + 5e-7)))
        assert len({FK5_J2000, fk5(2000.0), FK4_B1950}) == 2

    def test_not_equal_to_other_types(self):
        assert FK5_J2000 != "FK5"

    def test_topocentric_ignores_name(self):
        a = topocentric("a", _SITE, 60000.0)
        b = topocentric("b", _SITE, 60000.0)
        assert a == b

    def test_topocentric_compares_time_location_wobble(self):
        base = topocentric("a", _SITE, 60000.0)
        assert base != topocentric("a", _SITE, 60000.1)
        assert base != topocentric("a", GeodeticLocation(0.0, 0.0, 0.0), 60000.0)
        assert base != topocentric("a", _SITE, 60000.0, wobble=(1e-6, 0.0))
        assert base != Dynamical(JulianEpoch.from_mjd(60000.0))


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestFrameFromString:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("ICRS", ICRS_FRAME),
            ("hcrs", ICRS_FRAME),
            ("BCRS", ICRS_FRAME),
            ("", ICRS_FRAME),
            ("FK5", FK5_J2000),
            ("FK5 J2000", FK5_J2000),
            ("fk5 (J2021.333)", FK5(JulianEpoch(2021.333))),
            ("J2021.243", FK5(JulianEpoch(2021.243))),
            ("2021.765", FK5(JulianEpoch(2021.765))),
            ("FK4", FK4_B1950),
            ("fk4(1900)", FK4_B1900),
            ("b1950", FK4_B1950),
            ("1966.12", FK4(BesselianEpoch(1966.12))),
            ("CIRS 2021.443", Dynamical(JulianEpoch(2021.443))),
            ("GAPPT", DYNAMICAL_J2000),
            ("apparent (J2010)", Dynamical(JulianEpoch(2010.0))),
            ("GCRS", GCRS_J2000),
        ],
    )
    def test_valid(self, text, expected):
        frame = frame_from_string(text)
        assert type(frame) is type(expected)
        assert frame == expected

    @pytest.mark.parametrize("text", ["GALACTIC", "ecliptic 2000", "J20x0"])
    def test_invalid(self, text):
        with pytest.raises(FrameParseError, match="Cannot create equatorial frame"):
            frame_from_string(text)

    def test_epoch_year_switch(self):
        assert isinstance(frame_for_epoch_year(1983.5), FK4)
        assert isinstance(frame_for_epoch_year(1984.0), FK5)
        assert frame_for_epoch_year(2000.0) is FK5_J2000


# ---------------------------------------------------------------------------
# FITS keywords
# ---------------------------------------------------------------------------


class TestDescribeFits:
    def test_icrs(self):
        assert describe_fits(ICRS_FRAME) == {"RADESYS": "ICRS"}

    def test_fk4(self):
        assert describe_fits(FK4_B1950) == {"RADESYS": "FK4", "EQUINOX": 1950.0}

    def test_dynamical_alt(self):
        cards = describe_fits(Dynamical(JulianEpoch(2021.5)), alt="B")
        assert cards == {"RADESYSB": "GAPPT", "EQUINOXB": 2021.5}

    def test_gcrs_has_no_equinox(self):
        assert describe_fits(GCRS_J2000) == {"RADESYS": "GCRS"}


class TestFrameFromFits:
    @pytest.mark.parametrize(
        "frame", [ICRS_FRAME, FK4_B1950, FK4_B1900, FK5_J2000, FK5(JulianEpoch(2015.5)), GCRS_J2000]
    )
    def test_roundtrip(self, frame):
        assert frame_from_fits(describe_fits(frame)) == frame

    def test_empty_header_is_icrs(self):
        assert frame_from_fits({}) is ICRS_FRAME

    def test_equinox_only_before_1984_is_fk4(self):
        frame = frame_from_fits({"EQUINOX": 1975.0})
        assert frame == FK4(BesselianEpoch(1975.0))

    def test_equinox_only_after_1984_is_fk5(self):
        assert frame_from_fits({"EQUINOX": 2000.0}) == FK5_J2000

    def test_unknown_radesys_with_equinox(self):
        assert frame_from_fits({"RADESYS": "GALACTIC", "EQUINOX": 1950.0}) == FK4_B1950

    def test_unknown_radesys_without_equinox(self):
        assert frame_from_fits({"RADESYS": "GALACTIC"}) is ICRS_FRAME

    def test_quoted_radesys(self):
        assert frame_from_fits({"RADESYS": "'FK5     '", "EQUINOX": 2000.0}) == FK5_J2000

    def test_alternate_suffix(self):
        header = {"RADESYS": "ICRS", "RADESYSA": "FK4", "EQUINOXA": 1950.0}
        assert frame_from_fits(header, alt="A") == FK4_B1950

    def test_dynamical_from_mjd_obs(self):
        frame = frame_from_fits({"RADESYS": "GAPPT", "MJD-OBS": 60000.0})
        assert frame == Dynamical(JulianEpoch.from_mjd(60000.0))

    def test_dynamical_from_date_obs(self):
        frame = frame_from_fits({"RADESYS": "GAPPT", "DATE-OBS": "2000-01-01T12:00:00"})
        assert frame == DYNAMICAL_J2000

    def test_mjd_obs_preferred(self):
        header = {"RADESYS": "GAPPT", "MJD-OBS": 60000.0, "DATE-OBS": "2000-01-01"}
        assert frame_from_fits(header) == Dynamical(JulianEpoch.from_mjd(60000.0))

    def test_dynamical_without_time_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="astroframes.frames._fits"):
            frame = frame_from_fits({"RADESYS": "GAPPT", "EQUINOX": 2021.5})
        assert frame == Dynamical(JulianEpoch(2021.5))
        assert "No MJD-OBS or DATE-OBS" in caplog.text

    def test_dynamical_bad_date_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="astroframes.frames._fits"):
            frame = frame_from_fits({"RADESYS": "GAPPT", "DATE-OBS": "yesterday"})
        assert frame == DYNAMICAL_J2000
        assert "Unparseable DATE-OBS" in caplog.text
