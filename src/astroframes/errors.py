"""Exception types raised by astroframes.

All library errors derive from :class:`FrameError`, and each concrete error
also derives from the built-in exception that best describes it, so callers
may catch either the specific type, the library base class, or the
built-in.
"""

from __future__ import annotations


class FrameError(Exception):
    """Base class for errors raised by astroframes."""


class EphemerisDomainError(FrameError, ValueError):
    """An ephemeris query fell outside the calibrated MJD window."""

    def __init__(self, mjd: float, mjd_min: float, mjd_max: float) -> None:
        self.mjd = mjd
        self.mjd_min = mjd_min
        self.mjd_max = mjd_max
        super().__init__(
            f"MJD {mjd} is outside the ephemeris domain [{mjd_min}, {mjd_max}]"
        )


class UnsupportedRouteError(FrameError, NotImplementedError):
    """No conversion route exists between two frames."""

    def __init__(self, from_frame, to_frame) -> None:
        self.from_frame = from_frame
        self.to_frame = to_frame
        super().__init__(f"No conversion route from {from_frame} to {to_frame}")


class EpochMismatchError(FrameError, TypeError):
    """A frame was built from an epoch of the wrong year convention."""


class FrameParseError(FrameError, ValueError):
    """A frame description string or header could not be interpreted."""


class FrameMismatchError(FrameError, ValueError):
    """Coordinates tagged with one frame were converted as if from another."""
