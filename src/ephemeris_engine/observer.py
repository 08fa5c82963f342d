"""Geographic observers: geocentric position/velocity and the inverse mapping."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from ephemeris_engine.angle_utils import verify_number
from ephemeris_engine.constants import (
    ANGVEL,
    DEG2RAD,
    EARTH_EQUATORIAL_RADIUS_KM,
    EARTH_FLATTENING_SQUARED,
    EARTH_POLAR_RADIUS_KM,
    KM_PER_AU,
    RAD2DEG,
    SECONDS_PER_DAY,
)
from ephemeris_engine.earth_orientation import (
    OrientationCache,
    PrecessDirection,
    gyration,
    gyration_state,
    nutation,
    precession,
    sidereal_time,
)
from ephemeris_engine.errors import InvalidArgumentError, NonConvergenceError
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, StateVector, Vector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observer:
    """A location on or near the Earth's surface.

    Attributes:
        latitude: Geodetic latitude in degrees, north positive, [-90, 90].
        longitude: Degrees east of Greenwich (west negative), [-180, 180].
        height: Metres above mean sea level.
    """

    latitude: float
    longitude: float
    height: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, 'latitude', verify_number(self.latitude))
        object.__setattr__(self, 'longitude', verify_number(self.longitude))
        object.__setattr__(self, 'height', verify_number(self.height))
        if self.latitude < -90.0 or self.latitude > 90.0:
            raise InvalidArgumentError(
                f'Latitude {self.latitude} is out of range. Must be -90..+90.'
            )
        if self.longitude < -180.0 or self.longitude > 180.0:
            raise InvalidArgumentError(
                f'Longitude {self.longitude} is out of range. Must be -180..+180.'
            )


def observer_gravity(latitude: float, height: float) -> float:
    """Effective gravity in m/s^2 from the WGS 84 ellipsoidal gravity formula.

    Parameters:
        latitude: Degrees north or south; only its magnitude matters.
        height: Metres above sea level; accurate from 0 to 100 km.

    Returns:
        Gravitational plus centrifugal acceleration in m/s^2.
    """
    s = math.sin(latitude * DEG2RAD)
    s2 = s * s
    g0 = 9.7803253359 * (1.0 + 0.00193185265241 * s2) / math.sqrt(1.0 - 0.00669437999013 * s2)
    return g0 * (1.0 - (3.15704e-07 - 2.10269e-09 * s2) * height + 7.37452e-14 * height * height)


def terra(observer: Observer, st: float) -> tuple[np.ndarray, np.ndarray]:
    """Observer position (AU) and velocity (AU/day) in the true equator of date.

    Parameters:
        observer: Geographic location.
        st: Greenwich apparent sidereal time in hours.

    Returns:
        (pos, vel) as numpy arrays.
    """
    phi = observer.latitude * DEG2RAD
    sinphi = math.sin(phi)
    cosphi = math.cos(phi)
    c = 1.0 / math.sqrt(cosphi * cosphi + EARTH_FLATTENING_SQUARED * sinphi * sinphi)
    s = EARTH_FLATTENING_SQUARED * c
    ht_km = observer.height / 1000.0
    ach = EARTH_EQUATORIAL_RADIUS_KM * c + ht_km
    ash = EARTH_EQUATORIAL_RADIUS_KM * s + ht_km
    stlocl = (15.0 * st + observer.longitude) * DEG2RAD
    sinst = math.sin(stlocl)
    cosst = math.cos(stlocl)
    pos = np.array([
        ach * cosphi * cosst / KM_PER_AU,
        ach * cosphi * sinst / KM_PER_AU,
        ash * sinphi / KM_PER_AU,
    ])
    vel = np.array([
        -ANGVEL * ach * cosphi * sinst * SECONDS_PER_DAY / KM_PER_AU,
        ANGVEL * ach * cosphi * cosst * SECONDS_PER_DAY / KM_PER_AU,
        0.0,
    ])
    return (pos, vel)


def inverse_terra(ovec: np.ndarray, st: float) -> Observer:
    """Geographic location of a geocentric true-equator-of-date vector (AU).

    Latitude is solved with Newton's method on the ellipsoid.

    Raises:
        NonConvergenceError: Latitude did not converge in 10 iterations.
    """
    x = float(ovec[0]) * KM_PER_AU
    y = float(ovec[1]) * KM_PER_AU
    z = float(ovec[2]) * KM_PER_AU
    p = math.hypot(x, y)
    if p < 1.0e-6:
        # Within a millimetre of a pole: longitude is arbitrary.
        lon_deg = 0.0
        lat_deg = 90.0 if z > 0.0 else -90.0
        height_km = abs(z) - EARTH_POLAR_RADIUS_KM
        return Observer(lat_deg, lon_deg, 1000.0 * height_km)

    stlocl = math.atan2(y, x)
    lon_deg = RAD2DEG * stlocl - 15.0 * st
    while lon_deg <= -180.0:
        lon_deg += 360.0
    while lon_deg > 180.0:
        lon_deg -= 360.0

    f2 = EARTH_FLATTENING_SQUARED
    factor = (f2 - 1.0) * EARTH_EQUATORIAL_RADIUS_KM
    lat = math.atan2(z, p)
    count = 0
    while True:
        count += 1
        if count > 10:
            logger.error('inverse_terra did not converge for vector %s', ovec)
            raise NonConvergenceError('inverse_terra failed to converge')
        cos_lat = math.cos(lat)
        sin_lat = math.sin(lat)
        cos2 = cos_lat * cos_lat
        sin2 = sin_lat * sin_lat
        radicand = cos2 + f2 * sin2
        denom = math.sqrt(radicand)
        w = (factor * sin_lat * cos_lat) / denom - z * cos_lat + p * sin_lat
        if abs(w) < 1.0e-8:
            break
        d = (
            factor * ((cos2 - sin2) / denom - sin2 * cos2 * (f2 - 1.0) / (factor * radicand))
            + z * sin_lat
            + p * cos_lat
        )
        lat -= w / d

    adjust = EARTH_EQUATORIAL_RADIUS_KM / denom
    if abs(sin_lat) > abs(cos_lat):
        height_km = z / sin_lat - f2 * adjust
    else:
        height_km = p / cos_lat - adjust
    return Observer(RAD2DEG * lat, lon_deg, 1000.0 * height_km)


def observer_vector(
    time: Instant,
    observer: Observer,
    of_date: bool,
    cache: OrientationCache | None = None,
) -> Vector:
    """Geocentric position of ``observer`` in AU.

    Parameters:
        time: Instant of interest.
        observer: Geographic location.
        of_date: True for the equator of date (EQD), False for J2000 (EQJ).
        cache: Optional orientation cache.

    Returns:
        Geocentric equatorial Vector.
    """
    pos, _ = terra(observer, sidereal_time(time, cache))
    vec = Vector.from_array(pos, time, Frame.EQD)
    if of_date:
        return vec
    return gyration(vec, PrecessDirection.INTO_2000, cache)


def observer_state(
    time: Instant,
    observer: Observer,
    of_date: bool,
    cache: OrientationCache | None = None,
) -> StateVector:
    """Geocentric position (AU) and velocity (AU/day) of ``observer``."""
    pos, vel = terra(observer, sidereal_time(time, cache))
    state = StateVector(pos[0], pos[1], pos[2], vel[0], vel[1], vel[2], time, Frame.EQD)
    if of_date:
        return state
    return gyration_state(state, PrecessDirection.INTO_2000, cache)


def vector_observer(
    vec: Vector,
    of_date: bool,
    cache: OrientationCache | None = None,
) -> Observer:
    """Geographic location corresponding to a geocentric equatorial vector.

    This is the inverse of observer_vector; ``vec.t`` sets the Earth's rotation.
    """
    gast = sidereal_time(vec.t, cache)
    if not of_date:
        vec = precession(vec, PrecessDirection.FROM_2000)
        vec = nutation(vec, PrecessDirection.FROM_2000, cache)
    return inverse_terra(vec.as_array(), gast)
