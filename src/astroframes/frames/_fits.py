"""Frame descriptions: strings and FITS header keywords.

Frames serialize to the standard FITS ``RADESYSa`` / ``EQUINOXa`` keyword
pair and are recovered from ``RADESYSa``, ``EQUINOXa``, ``MJD-OBS`` and
``DATE-OBS``. Free-form names such as ``"FK5 J2000"``, ``"fk4(1900)"`` or
``"apparent (J2021.4)"`` are also understood.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from astroframes.constants import JULIAN_EPOCH_SWITCH_YEAR
from astroframes.epoch import J2000, BesselianEpoch, JulianEpoch
from astroframes.errors import FrameParseError
from astroframes.frames._systems import (
    FK4,
    FK4_B1900,
    FK4_B1950,
    FK5,
    FK5_J2000,
    GCRS,
    ICRS_FRAME,
    Dynamical,
    EquatorialFrame,
)
from astroframes.time import parse_fits_date

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[()\s]+")

# Names that all denote the ICRS for conversion purposes (HCRS is the
# Hipparcos realization; BCRS assumes proper motions are already applied).
_ICRS_NAMES = frozenset({"ICRS", "ICR", "HCRS", "HCR", "BCRS", "BCR"})

_DYNAMICAL_NAMES = frozenset({"GAPPT", "CIRS", "ERS", "APP", "APPT", "APPARENT"})


def frame_for_epoch_year(year: float) -> EquatorialFrame:
    """Catalogue frame customary for a bare epoch year.

    FK4 at the Besselian year before 1984.0, FK5 at the Julian year from
    then on.

    Args:
        year: Epoch year.

    Returns:
        EquatorialFrame: An :class:`FK4` or :class:`FK5` frame.
    """
    if year == 1900.0:
        return FK4_B1900
    if year == 1950.0:
        return FK4_B1950
    if year < JULIAN_EPOCH_SWITCH_YEAR:
        return FK4(BesselianEpoch(year))
    if year == 2000.0:
        return FK5_J2000
    return FK5(JulianEpoch(year))


def _split_epoch(token: str) -> float | None:
    """Year of a ``J2000``/``B1950``/``1975.5`` token, or None."""
    text = token[1:] if token[:1] in ("J", "B") else token
    try:
        return float(text)
    except ValueError:
        return None


def frame_from_string(text: str) -> EquatorialFrame:
    """Best-matching frame for a free-form description.

    Case-insensitive. Examples of accepted input:

    ==========================  ===============================
    ``"ICRS"``, ``"HCRS"``       ICRS
    ``""``                       ICRS
    ``"FK5 J2000"``              FK5 at J2000
    ``"fk5 (J2021.333)"``        FK5 at J2021.333
    ``"J2021.243"``              FK5 at J2021.243
    ``"2021.765"``               FK5 (years from 1984.0 on)
    ``"FK4"``                    FK4 at B1950
    ``"b1950"``, ``"1966.12"``   FK4 (years before 1984.0)
    ``"CIRS 2021.443"``          Dynamical at J2021.443
    ``"GCRS"``                   GCRS at J2000
    ==========================  ===============================

    Args:
        text: Frame description.

    Returns:
        EquatorialFrame: The parsed frame.

    Raises:
        FrameParseError: If no frame can be inferred.
    """
    tokens = [tok for tok in _TOKEN_SPLIT.split(text.strip().upper()) if tok]
    if not tokens:
        return ICRS_FRAME

    name = tokens[0]
    if name in _ICRS_NAMES:
        return ICRS_FRAME

    year = _split_epoch(name)
    if year is not None:
        # A bare epoch: its prefix or its value selects the catalogue.
        if name.startswith("B") or (not name.startswith("J") and year < JULIAN_EPOCH_SWITCH_YEAR):
            name = "FK4"
        else:
            name = ""
    elif len(tokens) > 1:
        year = _split_epoch(tokens[1])

    if name == "FK4":
        if year is None or year == 1950.0:
            return FK4_B1950
        if year == 1900.0:
            return FK4_B1900
        return FK4(BesselianEpoch(year))

    epoch = J2000 if year is None or year == 2000.0 else JulianEpoch(year)

    if name == "":
        return ICRS_FRAME if year is None else FK5(epoch)
    if name == "FK5":
        return FK5(epoch)
    if name == "GCRS":
        return GCRS(epoch)
    if name in _DYNAMICAL_NAMES:
        return Dynamical(epoch)

    raise FrameParseError(f"Cannot create equatorial frame for: {text!r}")


def describe_fits(frame: EquatorialFrame, alt: str = "") -> dict[str, Any]:
    """FITS keywords describing a frame.

    Args:
        frame: Frame to describe.
        alt: Alternative coordinate-system suffix (``''`` or ``'A'``..``'Z'``).

    Returns:
        dict[str, Any]: ``RADESYS{alt}``, plus ``EQUINOX{alt}`` (the epoch
        year) for precessing frames.

    Examples:
        ```python
        from astroframes.frames import FK4_B1950, describe_fits
        describe_fits(FK4_B1950)  # {'RADESYS': 'FK4', 'EQUINOX': 1950.0}
        ```
    """
    cards: dict[str, Any] = {f"RADESYS{alt}": frame.fits_name}
    if frame.precessing:
        cards[f"EQUINOX{alt}"] = frame.epoch.year
    return cards


def frame_from_fits(header: Mapping[str, Any], alt: str = "") -> EquatorialFrame:
    """Frame described by FITS header keywords.

    ``RADESYS{alt}`` and ``EQUINOX{alt}`` are combined and parsed with
    :func:`frame_from_string`. If that fails, a known ``EQUINOX`` selects
    FK4 or FK5 by year and anything else falls back to ICRS. Dynamical
    frames take their epoch from ``MJD-OBS``, else ``DATE-OBS``.

    Args:
        header: Header keyword/value pairs.
        alt: Alternative coordinate-system suffix.

    Returns:
        EquatorialFrame: The described frame.
    """
    radesys = header.get(f"RADESYS{alt}")
    equinox = header.get(f"EQUINOX{alt}")

    description = "" if radesys is None else str(radesys).strip().strip("'")
    if equinox is not None:
        description = f"{description} {float(equinox)}"

    try:
        frame = frame_from_string(description)
    except FrameParseError:
        frame = ICRS_FRAME if equinox is None else frame_for_epoch_year(float(equinox))

    if isinstance(frame, Dynamical):
        frame = _dynamical_from_observation(header, frame)

    return frame


def _dynamical_from_observation(header: Mapping[str, Any], frame: Dynamical) -> Dynamical:
    if "MJD-OBS" in header:
        return Dynamical(JulianEpoch.from_mjd(float(header["MJD-OBS"])))
    if "DATE-OBS" in header:
        try:
            return Dynamical(JulianEpoch.from_mjd(parse_fits_date(str(header["DATE-OBS"]))))
        except ValueError:
            logger.warning(
                "Unparseable DATE-OBS %r, using %s", header["DATE-OBS"], frame.epoch
            )
            return frame
    logger.warning("No MJD-OBS or DATE-OBS in header, using %s", frame.epoch)
    return frame
