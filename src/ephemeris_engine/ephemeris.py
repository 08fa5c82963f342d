"""Body positions: heliocentric, barycentric, geocentric and topocentric.

Every function that resolves a star slot accepts an optional ``stars`` table;
the default table from bodies.get_star_table() is used otherwise.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from ephemeris_engine.angle_utils import normalize_longitude, verify_number
from ephemeris_engine.bodies import Body, StarTable, get_star_table
from ephemeris_engine.constants import (
    C_AUDAY,
    DAYS_PER_MILLENNIUM,
    DEG2RAD,
    HOUR2RAD,
    RAD2DEG,
    RAD2HOUR,
)
from ephemeris_engine.earth_orientation import (
    OrientationCache,
    PrecessDirection,
    e_tilt,
    gyration,
    sidereal_time,
)
from ephemeris_engine.errors import NonConvergenceError, UnsupportedBodyError
from ephemeris_engine.frames import rotation_eqj_ecl
from ephemeris_engine.gravity import GIANT_PLANETS, MajorBodies
from ephemeris_engine.lunar import geo_emb_state, geo_moon, geo_moon_state
from ephemeris_engine.observer import Observer, observer_vector
from ephemeris_engine.planets import get_planet_model, has_series_model
from ephemeris_engine.planets.base import evaluate_series
from ephemeris_engine.planets.pluto import calc_pluto
from ephemeris_engine.refraction import Refraction, refraction
from ephemeris_engine.rotation import spin
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import (
    EquatorialCoordinates,
    Frame,
    StateVector,
    Vector,
    angle_between,
    equator_from_vector,
    vector_from_equator,
)

logger = logging.getLogger(__name__)

LIGHT_TIME_ITER_LIMIT = 10
LIGHT_TIME_TOLERANCE = 1.0e-9

PositionFunction = Callable[[Instant], Vector]


@dataclass(frozen=True)
class HorizontalCoordinates:
    """Azimuth/altitude of a body seen by an observer, with matching RA/Dec.

    Attributes:
        azimuth: Degrees clockwise from north, [0, 360).
        altitude: Degrees above the horizon, optionally raised by refraction.
        ra: Right ascension in hours, refracted along with the altitude.
        dec: Declination in degrees, refracted along with the altitude.
    """

    azimuth: float
    altitude: float
    ra: float
    dec: float


@dataclass(frozen=True)
class EclipticCoordinates:
    """Ecliptic vector (AU) plus latitude and longitude in degrees."""

    vec: Vector
    elat: float
    elon: float


def _zero_state(time: Instant) -> StateVector:
    return StateVector(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, time, Frame.EQJ)


def _state_from_arrays(r: np.ndarray, v: np.ndarray, time: Instant) -> StateVector:
    return StateVector(
        float(r[0]), float(r[1]), float(r[2]),
        float(v[0]), float(v[1]), float(v[2]),
        time,
        Frame.EQJ,
    )


def _star_vector(body: Body, time: Instant, stars: StarTable | None) -> Vector:
    star = (stars or get_star_table()).get(body)
    return vector_from_equator(star.ra, star.dec, star.dist, time)


def _earth_state(time: Instant) -> StateVector:
    r, v = get_planet_model(Body.EARTH).state(time.tt)
    return _state_from_arrays(r, v, time)


def helio_state(body: Body, time: Instant, stars: StarTable | None = None) -> StateVector:
    """Heliocentric EQJ position (AU) and velocity (AU/day) of ``body``.

    Raises:
        UnsupportedBodyError: ``body`` is an undefined star slot.
    """
    if body is Body.SUN:
        return _zero_state(time)
    if has_series_model(body):
        r, v = get_planet_model(body).state(time.tt)
        return _state_from_arrays(r, v, time)
    if body is Body.PLUTO:
        return calc_pluto(time, heliocentric=True)
    if body is Body.MOON:
        return _earth_state(time) + geo_moon_state(time)
    if body is Body.EMB:
        return _earth_state(time) + geo_emb_state(time)
    if body is Body.SSB:
        sun = MajorBodies(time.tt, GIANT_PLANETS).state(Body.SUN)
        return _state_from_arrays(-sun.r, -sun.v, time)
    if body.is_star_slot:
        pos = _star_vector(body, time, stars)
        return StateVector.from_vectors(pos, Vector(0.0, 0.0, 0.0, time, Frame.EQJ))
    raise UnsupportedBodyError(f'helio_state: unsupported body {body.value}')


def helio_vector(body: Body, time: Instant, stars: StarTable | None = None) -> Vector:
    """Heliocentric EQJ position of ``body`` in AU."""
    if has_series_model(body):
        return Vector.from_array(get_planet_model(body).position(time.tt), time, Frame.EQJ)
    if body is Body.MOON:
        earth = Vector.from_array(get_planet_model(Body.EARTH).position(time.tt), time)
        return earth + geo_moon(time)
    if body.is_star_slot:
        return _star_vector(body, time, stars)
    return helio_state(body, time, stars).position()


def helio_distance(body: Body, time: Instant, stars: StarTable | None = None) -> float:
    """Distance in AU between the Sun's center and ``body``."""
    if has_series_model(body):
        model = get_planet_model(body)
        return evaluate_series(model.rad, time.tt / DAYS_PER_MILLENNIUM)
    return helio_vector(body, time, stars).length()


def bary_state(body: Body, time: Instant, stars: StarTable | None = None) -> StateVector:
    """Position and velocity of ``body`` relative to the solar-system barycenter.

    The barycenter is estimated from the Sun and the four giant planets.
    """
    if body is Body.SSB:
        return _zero_state(time)
    if body is Body.PLUTO:
        return calc_pluto(time, heliocentric=False)

    major = MajorBodies(time.tt, GIANT_PLANETS)
    if body is Body.SUN or any(body is b for b, _ in GIANT_PLANETS):
        state = major.state(body)
        return _state_from_arrays(state.r, state.v, time)

    sun = major.state(Body.SUN)
    return helio_state(body, time, stars) + _state_from_arrays(sun.r, sun.v, time)


def correct_light_travel(func: PositionFunction, time: Instant) -> Vector:
    """Solve for the apparent position of a body whose light left it earlier.

    ``func`` returns the observer-relative position at a given instant; it is
    re-evaluated at back-dated instants until the light time settles.

    Returns:
        The back-dated relative position, stamped with ``time``.

    Raises:
        NonConvergenceError: No convergence within LIGHT_TIME_ITER_LIMIT passes.
    """
    ltime = time
    for count in range(1, LIGHT_TIME_ITER_LIMIT + 1):
        pos = func(ltime)
        ltime2 = time.add_days(-pos.length() / C_AUDAY)
        if abs(ltime2.tt - ltime.tt) < LIGHT_TIME_TOLERANCE:
            logger.debug('Light-time solution converged after %d iterations', count)
            return pos.with_time(time)
        ltime = ltime2
    logger.error('Light-time correction did not converge at %s', time)
    raise NonConvergenceError('Light-travel time solver did not converge')


class BodyPosition:
    """Position of ``body`` relative to ``observer_body`` for correct_light_travel.

    With ``observer_pos`` fixed, the observer stays where it was at the time of
    observation. Without it the observer is evaluated at the back-dated time,
    which shifts the result by the observer's motion during the light time
    (aberration).
    """

    def __init__(
        self,
        observer_body: Body,
        observer_pos: Vector | None,
        body: Body,
        stars: StarTable | None = None,
    ) -> None:
        self.observer_body = observer_body
        self.observer_pos = observer_pos
        self.body = body
        self.stars = stars

    def __call__(self, time: Instant) -> Vector:
        if self.observer_pos is None:
            observer_pos = helio_vector(self.observer_body, time, self.stars)
        else:
            observer_pos = self.observer_pos.with_time(time)
        return helio_vector(self.body, time, self.stars) - observer_pos


def geo_vector(
    body: Body,
    time: Instant,
    aberration: bool,
    stars: StarTable | None = None,
) -> Vector:
    """Geocentric EQJ position of ``body`` corrected for light travel time.

    Parameters:
        body: Any supported body. The Earth yields the zero vector.
        time: Instant of observation.
        aberration: True to include the Earth's motion during the light time.
        stars: Optional star table.

    Returns:
        Vector from the Earth's center to the body, in AU.
    """
    if body is Body.EARTH:
        return Vector(0.0, 0.0, 0.0, time, Frame.EQJ)
    if body is Body.MOON:
        return geo_moon(time)
    if body.is_star_slot:
        # Stars are fixed; light time does not move them.
        return _star_vector(body, time, stars) - helio_vector(Body.EARTH, time)

    observer_pos = None if aberration else helio_vector(Body.EARTH, time)
    return correct_light_travel(BodyPosition(Body.EARTH, observer_pos, body, stars), time)


def equator(
    body: Body,
    time: Instant,
    observer: Observer,
    of_date: bool,
    aberration: bool,
    stars: StarTable | None = None,
    cache: OrientationCache | None = None,
) -> EquatorialCoordinates:
    """Topocentric equatorial coordinates of ``body`` seen by ``observer``.

    Parameters:
        body: Body to observe; not the Earth.
        time: Instant of observation.
        observer: Geographic location.
        of_date: True for the true equator of date, False for J2000.
        aberration: True to correct for aberration.
        stars: Optional star table.
        cache: Optional orientation cache.

    Raises:
        UnsupportedBodyError: ``body`` is the Earth.
    """
    if body is Body.EARTH:
        raise UnsupportedBodyError('Cannot observe the Earth from the Earth')
    gc_observer = observer_vector(time, observer, False, cache)
    gc = geo_vector(body, time, aberration, stars)
    j2000 = gc - gc_observer
    if not of_date:
        return equator_from_vector(j2000)
    return equator_from_vector(gyration(j2000, PrecessDirection.FROM_2000, cache))


def horizon(
    time: Instant,
    observer: Observer,
    ra: float,
    dec: float,
    option: Refraction = Refraction.NONE,
    cache: OrientationCache | None = None,
) -> HorizontalCoordinates:
    """Convert equator-of-date RA/Dec to azimuth/altitude for ``observer``.

    Parameters:
        time: Instant of observation.
        observer: Geographic location.
        ra: Right ascension of date, hours.
        dec: Declination of date, degrees.
        option: Refraction model applied to the altitude (and RA/Dec).
        cache: Optional orientation cache.
    """
    ra = verify_number(ra)
    dec = verify_number(dec)

    sinlat = math.sin(observer.latitude * DEG2RAD)
    coslat = math.cos(observer.latitude * DEG2RAD)
    sinlon = math.sin(observer.longitude * DEG2RAD)
    coslon = math.cos(observer.longitude * DEG2RAD)
    sindc = math.sin(dec * DEG2RAD)
    cosdc = math.cos(dec * DEG2RAD)
    sinra = math.sin(ra * HOUR2RAD)
    cosra = math.cos(ra * HOUR2RAD)

    spin_angle = -15.0 * sidereal_time(time, cache)
    uz = spin(spin_angle, [coslat * coslon, coslat * sinlon, sinlat])
    un = spin(spin_angle, [-sinlat * coslon, -sinlat * sinlon, coslat])
    uw = spin(spin_angle, [sinlon, -coslon, 0.0])

    p = np.array([cosdc * cosra, cosdc * sinra, sindc])
    pz = float(p @ uz)
    pn = float(p @ un)
    pw = float(p @ uw)

    proj = math.hypot(pn, pw)
    if proj > 0.0:
        az = -RAD2DEG * math.atan2(pw, pn)
        if az < 0.0:
            az += 360.0
    else:
        az = 0.0

    zd = RAD2DEG * math.atan2(proj, pz)
    out_ra = ra
    out_dec = dec

    if option is not Refraction.NONE:
        zd0 = zd
        refr = refraction(option, 90.0 - zd)
        zd -= refr
        if refr > 0.0 and zd > 3.0e-4:
            sinzd = math.sin(zd * DEG2RAD)
            coszd = math.cos(zd * DEG2RAD)
            sinzd0 = math.sin(zd0 * DEG2RAD)
            coszd0 = math.cos(zd0 * DEG2RAD)
            pr = ((p - coszd0 * uz) / sinzd0) * sinzd + uz * coszd
            proj = math.hypot(pr[0], pr[1])
            if proj > 0.0:
                out_ra = RAD2HOUR * math.atan2(pr[1], pr[0])
                if out_ra < 0.0:
                    out_ra += 24.0
            else:
                out_ra = 0.0
            out_dec = RAD2DEG * math.atan2(pr[2], proj)

    return HorizontalCoordinates(az, 90.0 - zd, out_ra, out_dec)


def _rotate_equatorial_to_ecliptic(equ: Vector, cos_ob: float, sin_ob: float, frame: Frame) -> EclipticCoordinates:
    ex = equ.x
    ey = equ.y * cos_ob + equ.z * sin_ob
    ez = -equ.y * sin_ob + equ.z * cos_ob
    xyproj = math.hypot(ex, ey)
    elon = 0.0
    if xyproj > 0.0:
        elon = RAD2DEG * math.atan2(ey, ex)
        if elon < 0.0:
            elon += 360.0
    elat = RAD2DEG * math.atan2(ez, xyproj)
    return EclipticCoordinates(Vector(ex, ey, ez, equ.t, frame), elat, elon)


def ecliptic(eqj: Vector, cache: OrientationCache | None = None) -> EclipticCoordinates:
    """Convert an EQJ vector to the true ecliptic of date (ECT) at ``eqj.t``."""
    eqd = gyration(eqj, PrecessDirection.FROM_2000, cache)
    tobl = e_tilt(eqj.t, cache).tobl * DEG2RAD
    return _rotate_equatorial_to_ecliptic(eqd, math.cos(tobl), math.sin(tobl), Frame.ECT)


def ecliptic_longitude(body: Body, time: Instant, stars: StarTable | None = None) -> float:
    """Heliocentric longitude of ``body`` in the J2000 ecliptic, degrees [0, 360).

    Raises:
        UnsupportedBodyError: ``body`` is the Sun.
    """
    if body is Body.SUN:
        raise UnsupportedBodyError('Cannot calculate heliocentric longitude of the Sun')
    ecl = rotation_eqj_ecl().rotate_vector(helio_vector(body, time, stars))
    return normalize_longitude(RAD2DEG * math.atan2(ecl.y, ecl.x))


def pair_longitude(body1: Body, body2: Body, time: Instant, stars: StarTable | None = None) -> float:
    """Geocentric ecliptic longitude of ``body1`` minus that of ``body2``, in [0, 360).

    Raises:
        UnsupportedBodyError: Either body is the Earth.
    """
    if body1 is Body.EARTH or body2 is Body.EARTH:
        raise UnsupportedBodyError('The Earth does not have a longitude as seen from itself')
    eclip1 = ecliptic(geo_vector(body1, time, False, stars))
    eclip2 = ecliptic(geo_vector(body2, time, False, stars))
    return normalize_longitude(eclip1.elon - eclip2.elon)


def angle_from_sun(body: Body, time: Instant, stars: StarTable | None = None) -> float:
    """Angle in degrees between ``body`` and the Sun as seen from the Earth's center.

    Raises:
        UnsupportedBodyError: ``body`` is the Earth.
    """
    if body is Body.EARTH:
        raise UnsupportedBodyError('The Earth does not have an angle as seen from itself')
    sv = geo_vector(Body.SUN, time, True)
    bv = geo_vector(body, time, True, stars)
    return angle_between(sv, bv)
