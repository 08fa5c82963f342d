"""Ephemeris evaluation and astronomical event search.

This package computes positions of the Sun, Moon, planets, Jupiter's Galilean
moons and user-defined stars, and searches for events such as rise/set,
culmination, conjunctions, lunar phases, seasons, eclipses, transits and
apsides:
- Time: ``time_utils.Instant`` (UT and TT, Delta-T model, rms-julian parsing)
- Positions: ``ephemeris`` (heliocentric, barycentric, geocentric, topocentric)
- Frames: ``frames`` and ``earth_orientation`` (precession, nutation, sidereal time)
- Events: ``riseset``, ``longitude``, ``seasons``, ``eclipses``, ``transits``,
  ``apsis``, ``extrema``, ``illumination``, all built on ``search``

Modules are imported directly, e.g. ``from ephemeris_engine.riseset import search_rise_set``.
"""

from ephemeris_engine.bodies import Body, define_star
from ephemeris_engine.errors import (
    EphemerisError,
    InvalidArgumentError,
    NonConvergenceError,
    UnsupportedBodyError,
)
from ephemeris_engine.observer import Observer
from ephemeris_engine.time_utils import Instant

__all__: list[str] = [
    'Body',
    'EphemerisError',
    'Instant',
    'InvalidArgumentError',
    'NonConvergenceError',
    'Observer',
    'UnsupportedBodyError',
    'define_star',
]
