"""Exception types raised by the ephemeris engine.

Searches that legitimately find nothing return None; the exceptions here are
reserved for bad input, bodies that do not support an operation, and numerical
refinements that exceed their iteration caps.
"""

from __future__ import annotations


class EphemerisError(Exception):
    """Base class for all ephemeris engine errors."""


class InvalidArgumentError(EphemerisError, ValueError):
    """An argument is out of range, not finite, or otherwise malformed."""


class UnsupportedBodyError(EphemerisError, ValueError):
    """The requested body is not valid for this computation (e.g. Earth seen from Earth)."""


class NonConvergenceError(EphemerisError, RuntimeError):
    """An iterative refinement exceeded its iteration cap."""
