"""Rise, set, altitude-crossing and hour-angle searches for an observer."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from ephemeris_engine.angle_utils import verify_number
from ephemeris_engine.atmosphere import atmosphere
from ephemeris_engine.bodies import Body, StarTable
from ephemeris_engine.constants import (
    DEG2RAD,
    EARTH_EQUATORIAL_RADIUS_KM,
    EARTH_FLATTENING,
    EARTH_FLATTENING_SQUARED,
    MOON_EQUATORIAL_RADIUS_AU,
    RAD2DEG,
    REFRACTION_NEAR_HORIZON,
    SUN_RADIUS_AU,
)
from ephemeris_engine.earth_orientation import sidereal_time
from ephemeris_engine.ephemeris import HorizontalCoordinates, equator, horizon
from ephemeris_engine.errors import (
    InvalidArgumentError,
    NonConvergenceError,
    UnsupportedBodyError,
)
from ephemeris_engine.observer import Observer
from ephemeris_engine.refraction import Refraction
from ephemeris_engine.search import SearchOptions, find_ascent, search
from ephemeris_engine.time_utils import Instant

logger = logging.getLogger(__name__)

SOLAR_DAYS_PER_SIDEREAL_DAY = 0.9972695717592592

# Window width for the ascent finder; short enough that altitude cannot
# rise and fall back within one window.
RISE_SET_DT = 0.42

HOUR_ANGLE_ITER_LIMIT = 50

# Typical maximum rates (degrees/day) of right ascension and declination.
_ANGULAR_RATES: dict[Body, tuple[float, float]] = {
    Body.MOON: (4.5, 8.2),
    Body.SUN: (0.8, 0.5),
    Body.MERCURY: (-1.6, 1.0),
    Body.VENUS: (-0.8, 0.6),
    Body.MARS: (-0.5, 0.4),
    Body.JUPITER: (-0.2, 0.2),
    Body.SATURN: (-0.2, 0.2),
    Body.URANUS: (-0.2, 0.2),
    Body.NEPTUNE: (-0.2, 0.2),
    Body.PLUTO: (-0.2, 0.2),
}


class Direction(Enum):
    """Direction of a horizon crossing."""

    RISE = 1
    SET = -1


@dataclass(frozen=True)
class HourAngleEvent:
    """When a body reaches an hour angle, and where it appears then."""

    time: Instant
    hor: HorizontalCoordinates


def _max_altitude_slope(body: Body, latitude: float) -> float:
    """Upper bound on |d altitude / dt| in degrees per day."""
    if latitude < -90.0 or latitude > 90.0:
        raise InvalidArgumentError(f'Invalid latitude: {latitude}')
    if body.is_star_slot:
        deriv_ra, deriv_dec = 0.0, 0.0
    else:
        rates = _ANGULAR_RATES.get(body)
        if rates is None:
            raise UnsupportedBodyError(f'Cannot search altitude of {body.value}')
        deriv_ra, deriv_dec = rates
    latrad = DEG2RAD * latitude
    return abs(((360.0 / SOLAR_DAYS_PER_SIDEREAL_DAY) - deriv_ra) * math.cos(latrad)) + abs(
        deriv_dec * math.sin(latrad)
    )


def horizon_dip_angle(observer: Observer, meters_above_ground: float) -> float:
    """Degrees the visible horizon lies below the observer's horizontal plane.

    Accounts for Earth's oblateness and for refraction of the grazing ray.
    """
    phi = observer.latitude * DEG2RAD
    sinphi = math.sin(phi)
    cosphi = math.cos(phi)
    c = 1.0 / math.hypot(cosphi, sinphi * EARTH_FLATTENING)
    s = c * EARTH_FLATTENING_SQUARED
    ht_km = (observer.height - meters_above_ground) / 1000.0
    ach = EARTH_EQUATORIAL_RADIUS_KM * c + ht_km
    ash = EARTH_EQUATORIAL_RADIUS_KM * s + ht_km
    radius_m = 1000.0 * math.hypot(ach * cosphi, ash * sinphi)

    # Refraction coefficient of a ray tangent to the surface (Sweer 1938).
    k = 0.175 * (1.0 - (6.5e-3 / 283.15) * (observer.height - (2.0 / 3.0) * meters_above_ground)) ** 3.256
    return RAD2DEG * -(math.sqrt(2.0 * (1.0 - k) * meters_above_ground / radius_m) / (1.0 - k))


class _AltitudeDiff:
    """Signed altitude of a body's limb above a target altitude."""

    def __init__(
        self,
        body: Body,
        direction: Direction,
        observer: Observer,
        body_radius_au: float,
        target_altitude: float,
        stars: StarTable | None,
    ) -> None:
        self.body = body
        self.direction = direction
        self.observer = observer
        self.body_radius_au = body_radius_au
        self.target_altitude = target_altitude
        self.stars = stars

    def __call__(self, time: Instant) -> float:
        ofdate = equator(self.body, time, self.observer, True, True, self.stars)
        hor = horizon(time, self.observer, ofdate.ra, ofdate.dec, Refraction.NONE)
        altitude = hor.altitude + RAD2DEG * math.asin(self.body_radius_au / ofdate.dist)
        return self.direction.value * (altitude - self.target_altitude)


def _internal_search_altitude(
    body: Body,
    observer: Observer,
    direction: Direction,
    start: Instant,
    limit_days: float,
    body_radius_au: float,
    target_altitude: float,
    stars: StarTable | None,
) -> Instant | None:
    limit_days = verify_number(limit_days)
    target_altitude = verify_number(target_altitude)
    if target_altitude < -90.0 or target_altitude > 90.0:
        raise InvalidArgumentError(f'Invalid target altitude: {target_altitude}')

    max_deriv = _max_altitude_slope(body, observer.latitude)
    altdiff = _AltitudeDiff(body, direction, observer, body_radius_au, target_altitude, stars)

    # Keep t1 < t2 whether searching forward or backward.
    t1 = t2 = start
    a1 = a2 = altdiff(start)
    while True:
        if limit_days < 0.0:
            t1 = t2.add_days(-RISE_SET_DT)
            a1 = altdiff(t1)
        else:
            t2 = t1.add_days(+RISE_SET_DT)
            a2 = altdiff(t2)

        ascent = find_ascent(0, altdiff, max_deriv, t1, t2, a1, a2)
        if ascent is not None:
            options = SearchOptions(dt_tolerance_seconds=0.1, init_f1=ascent.ax, init_f2=ascent.ay)
            time = search(altdiff, ascent.tx, ascent.ty, options)
            if time is not None:
                # The last window may reach past the limit.
                if limit_days < 0.0:
                    if time.ut < start.ut + limit_days:
                        return None
                elif time.ut > start.ut + limit_days:
                    return None
                return time
            logger.error('Altitude search failed inside a verified ascent [%s, %s]', ascent.tx, ascent.ty)
            raise NonConvergenceError('Rise/set search failed inside a bracketing interval')

        if limit_days < 0.0:
            if t1.ut < start.ut + limit_days:
                return None
            t2 = t1
            a2 = a1
        else:
            if t2.ut > start.ut + limit_days:
                return None
            t1 = t2
            a1 = a2


def search_rise_set(
    body: Body,
    observer: Observer,
    direction: Direction,
    start: Instant,
    limit_days: float,
    meters_above_ground: float = 0.0,
    stars: StarTable | None = None,
) -> Instant | None:
    """Find the next rise or set of a body's upper limb.

    Standard horizon refraction (scaled by air density at the ground), the
    dip of the visible horizon for an elevated observer, and the apparent
    radius of the Sun and Moon are taken into account.

    Parameters:
        body: Body to search; not the Earth.
        observer: Geographic location. ``observer.height`` is above sea level.
        direction: Direction.RISE or Direction.SET.
        start: Instant to start searching from.
        limit_days: Search window in days; negative searches backward.
        meters_above_ground: Observer height above the local ground level.
        stars: Optional star table.

    Returns:
        Time of the event, or None if it does not occur within the window.
    """
    meters_above_ground = verify_number(meters_above_ground)
    if meters_above_ground < 0.0:
        raise InvalidArgumentError(f'Invalid meters_above_ground: {meters_above_ground}')

    if body is Body.SUN:
        body_radius_au = SUN_RADIUS_AU
    elif body is Body.MOON:
        body_radius_au = MOON_EQUATORIAL_RADIUS_AU
    else:
        body_radius_au = 0.0

    atmos = atmosphere(observer.height - meters_above_ground)
    dip = horizon_dip_angle(observer, meters_above_ground)
    altitude = dip - REFRACTION_NEAR_HORIZON * atmos.density
    return _internal_search_altitude(
        body, observer, direction, start, limit_days, body_radius_au, altitude, stars
    )


def search_altitude(
    body: Body,
    observer: Observer,
    direction: Direction,
    start: Instant,
    limit_days: float,
    altitude: float,
    stars: StarTable | None = None,
) -> Instant | None:
    """Find when the center of a body crosses ``altitude`` degrees (unrefracted).

    Direction.RISE finds the body ascending through the altitude,
    Direction.SET descending.

    Raises:
        InvalidArgumentError: ``altitude`` is outside [-90, 90].
    """
    return _internal_search_altitude(body, observer, direction, start, limit_days, 0.0, altitude, stars)


def search_hour_angle(
    body: Body,
    observer: Observer,
    hour_angle: float,
    start: Instant,
    direction: int = +1,
    stars: StarTable | None = None,
) -> HourAngleEvent:
    """Find when ``body`` next reaches ``hour_angle`` as seen by ``observer``.

    Hour angle 0 is the upper culmination (meridian transit), 12 the lower.

    Parameters:
        body: Body to search; not the Earth.
        observer: Geographic location.
        hour_angle: Sidereal hours in [0, 24).
        start: Instant to start from.
        direction: +1 to search forward in time, -1 backward.
        stars: Optional star table.

    Returns:
        HourAngleEvent with the time and refracted horizontal coordinates.

    Raises:
        UnsupportedBodyError: ``body`` is the Earth.
        InvalidArgumentError: ``hour_angle`` or ``direction`` is invalid.
        NonConvergenceError: The correction did not settle.
    """
    if body is Body.EARTH:
        raise UnsupportedBodyError('Cannot search hour angle of the Earth')
    hour_angle = verify_number(hour_angle)
    if hour_angle < 0.0 or hour_angle >= 24.0:
        raise InvalidArgumentError(f'Invalid hour angle: {hour_angle}')
    if direction not in (-1, +1):
        raise InvalidArgumentError(f'Invalid search direction: {direction}')

    time = start
    for iteration in range(1, HOUR_ANGLE_ITER_LIMIT + 1):
        gast = sidereal_time(time)
        ofdate = equator(body, time, observer, True, True, stars)

        delta_sidereal_hours = math.fmod(
            (hour_angle + ofdate.ra - observer.longitude / 15.0) - gast, 24.0
        )
        if iteration == 1:
            # First pass always moves in the requested direction.
            if direction > 0:
                if delta_sidereal_hours < 0.0:
                    delta_sidereal_hours += 24.0
            elif delta_sidereal_hours > 0.0:
                delta_sidereal_hours -= 24.0
        elif delta_sidereal_hours < -12.0:
            delta_sidereal_hours += 24.0
        elif delta_sidereal_hours > 12.0:
            delta_sidereal_hours -= 24.0

        if abs(delta_sidereal_hours) * 3600.0 < 0.1:
            hor = horizon(time, observer, ofdate.ra, ofdate.dec, Refraction.NORMAL)
            return HourAngleEvent(time, hor)

        time = time.add_days((delta_sidereal_hours / 24.0) * SOLAR_DAYS_PER_SIDEREAL_DAY)

    logger.error('Hour angle search for %s did not converge from %s', body.value, start)
    raise NonConvergenceError(f'search_hour_angle did not converge for {body.value}')


def hour_angle(body: Body, time: Instant, observer: Observer, stars: StarTable | None = None) -> float:
    """Hour angle of ``body`` for ``observer`` at ``time``, sidereal hours in [0, 24)."""
    gast = sidereal_time(time)
    ofdate = equator(body, time, observer, True, True, stars)
    value = math.fmod(observer.longitude / 15.0 + gast - ofdate.ra, 24.0)
    if value < 0.0:
        value += 24.0
    return value
