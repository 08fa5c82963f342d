"""Atmospheric refraction and conversions to and from horizontal vectors."""

from __future__ import annotations

import math
from enum import Enum

from ephemeris_engine.angle_utils import verify_number
from ephemeris_engine.constants import DEG2RAD
from ephemeris_engine.errors import NonConvergenceError
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import (
    Frame,
    Spherical,
    Vector,
    sphere_from_vector,
    toggle_azimuth_direction,
    vector_from_sphere,
)

_INVERSE_TOLERANCE = 1.0e-14
_INVERSE_ITER_LIMIT = 100


class Refraction(Enum):
    """Atmospheric refraction models for altitude angles.

    NORMAL is Saemundsson's formula with a linear taper to zero at the nadir
    below one degree under the horizon. JPL_HOR is the same formula without
    the taper, for comparison with JPL Horizons output only.
    """

    NONE = 'none'
    NORMAL = 'normal'
    JPL_HOR = 'jplhor'


def refraction(option: Refraction, altitude: float) -> float:
    """Angle in degrees a body at geometric ``altitude`` appears raised by refraction.

    Parameters:
        option: Refraction model.
        altitude: Geometric altitude in degrees. Values outside [-90, 90]
            yield zero.

    Returns:
        Non-negative refraction in degrees.
    """
    verify_number(altitude)
    if altitude < -90.0 or altitude > 90.0:
        return 0.0
    if option is Refraction.NONE:
        return 0.0

    hd = max(altitude, -1.0)
    refr = (1.02 / math.tan((hd + 10.3 / (hd + 5.11)) * DEG2RAD)) / 60.0
    if option is Refraction.NORMAL and altitude < -1.0:
        # Taper linearly to zero at the nadir.
        refr *= (altitude + 90.0) / 89.0
    return refr


def inverse_refraction(option: Refraction, bent_altitude: float) -> float:
    """Correction in degrees to subtract refraction from an apparent altitude.

    The result is negative or zero; adding it to ``bent_altitude`` gives the
    geometric altitude.

    Raises:
        NonConvergenceError: The fixed-point iteration did not settle.
    """
    verify_number(bent_altitude)
    if bent_altitude < -90.0 or bent_altitude > 90.0:
        return 0.0

    altitude = bent_altitude - refraction(option, bent_altitude)
    for _ in range(_INVERSE_ITER_LIMIT):
        diff = (altitude + refraction(option, altitude)) - bent_altitude
        if abs(diff) < _INVERSE_TOLERANCE:
            return altitude - bent_altitude
        altitude -= diff
    raise NonConvergenceError(f'inverse_refraction did not converge for {bent_altitude}')


def horizon_from_vector(vec: Vector, option: Refraction) -> Spherical:
    """Convert a HOR vector (north, west, zenith) to altitude/azimuth angles.

    Returns:
        Spherical with ``lat`` = altitude (refracted per ``option``),
        ``lon`` = azimuth clockwise from north, ``dist`` = vector length.
    """
    sphere = sphere_from_vector(vec)
    return Spherical(
        sphere.lat + refraction(option, sphere.lat),
        toggle_azimuth_direction(sphere.lon),
        sphere.dist,
    )


def vector_from_horizon(sphere: Spherical, time: Instant, option: Refraction) -> Vector:
    """Convert apparent altitude/azimuth (``lat``/``lon``) to a HOR vector."""
    lon = toggle_azimuth_direction(sphere.lon)
    lat = sphere.lat + inverse_refraction(option, sphere.lat)
    return vector_from_sphere(Spherical(lat, lon, sphere.dist), time, Frame.HOR)
