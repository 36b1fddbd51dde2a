"""Equatorial reference frames and conversions between them.

Frames are immutable values (:class:`ICRS`, :class:`GCRS`, :class:`FK4`,
:class:`FK5`, :class:`Dynamical`, :class:`Topocentric`). Direction
vectors move between them with :func:`convert`, or with a reusable
:class:`EquatorialTransform` session. Frames can also be written to and
recovered from FITS ``RADESYS``/``EQUINOX`` keywords.
"""

from astroframes.frames._fits import (
    describe_fits,
    frame_for_epoch_year,
    frame_from_fits,
    frame_from_string,
)
from astroframes.frames._operations import (
    AberrationStep,
    GeocentricStep,
    RotationStep,
    aberrate,
    deflect,
    observer_equatorial_velocity,
    parallax_shift,
    polar_wobble_matrix,
    undeflect,
    undo_parallax_shift,
)
from astroframes.frames._systems import (
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
    EquatorialFrame,
    FrameKind,
    Topocentric,
    dynamical,
    fk4,
    fk5,
    gcrs,
    icrs,
    is_precessing,
    topocentric,
)
from astroframes.frames._transform import (
    EquatorialTransform,
    convert,
    convert_in_place,
)

__all__ = [
    "DYNAMICAL_J2000",
    "FK4",
    "FK4_B1900",
    "FK4_B1950",
    "FK5",
    "FK5_J2000",
    "GCRS",
    "GCRS_J2000",
    "ICRS",
    "ICRS_FRAME",
    "AberrationStep",
    "Dynamical",
    "EquatorialFrame",
    "EquatorialTransform",
    "FrameKind",
    "GeocentricStep",
    "RotationStep",
    "Topocentric",
    "aberrate",
    "convert",
    "convert_in_place",
    "deflect",
    "describe_fits",
    "dynamical",
    "fk4",
    "fk5",
    "frame_for_epoch_year",
    "frame_from_fits",
    "frame_from_string",
    "gcrs",
    "icrs",
    "is_precessing",
    "observer_equatorial_velocity",
    "parallax_shift",
    "polar_wobble_matrix",
    "topocentric",
    "undeflect",
    "undo_parallax_shift",
]
