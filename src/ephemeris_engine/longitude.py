"""Longitude-based events: conjunctions and oppositions, elongations, lunar phases."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from ephemeris_engine.angle_utils import longitude_offset, verify_number
from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import (
    EARTH_ORBITAL_PERIOD,
    MEAN_SYNODIC_MONTH,
    SECONDS_PER_DAY,
)
from ephemeris_engine.ephemeris import angle_from_sun, ecliptic_longitude, pair_longitude
from ephemeris_engine.errors import NonConvergenceError, UnsupportedBodyError
from ephemeris_engine.planets import orbital_period
from ephemeris_engine.search import SearchFunction, SearchOptions, search
from ephemeris_engine.time_utils import Instant

logger = logging.getLogger(__name__)

RELATIVE_LONGITUDE_ITER_LIMIT = 100

# Days of uncertainty around the mean-motion estimate of a lunar phase.
MOON_PHASE_UNCERTAINTY = 1.5

QUARTER_NAMES = ('New Moon', 'First Quarter', 'Full Moon', 'Third Quarter')

# Relative longitude windows (degrees) that bracket greatest elongation.
_ELONGATION_WINDOWS: dict[Body, tuple[float, float]] = {
    Body.MERCURY: (50.0, 85.0),
    Body.VENUS: (40.0, 50.0),
}


class Visibility(Enum):
    """Which side of the Sun a body appears on."""

    MORNING = 'morning'
    EVENING = 'evening'


@dataclass(frozen=True)
class ElongationEvent:
    """Angular separation of a body from the Sun at a given time.

    Attributes:
        time: Instant of the observation.
        visibility: MORNING if the body rises before the Sun, EVENING otherwise.
        elongation: Angle from the Sun in degrees, seen from the Earth's center.
        ecliptic_separation: Ecliptic longitude difference from the Sun, [0, 180].
    """

    time: Instant
    visibility: Visibility
    elongation: float
    ecliptic_separation: float


@dataclass(frozen=True)
class MoonQuarter:
    """A lunar quarter: 0 new, 1 first quarter, 2 full, 3 third quarter."""

    quarter: int
    time: Instant

    @property
    def name(self) -> str:
        return QUARTER_NAMES[self.quarter]


def synodic_period(body: Body) -> float:
    """Mean days between successive conjunctions of a planet with the Sun.

    Raises:
        UnsupportedBodyError: ``body`` is the Earth or not a planet.
    """
    if body is Body.EARTH:
        raise UnsupportedBodyError('The Earth does not have a synodic period as seen from itself')
    period = orbital_period(body)
    return abs(EARTH_ORBITAL_PERIOD / (EARTH_ORBITAL_PERIOD / period - 1.0))


def _rlon_offset(body: Body, time: Instant, direction: int, target_rel_lon: float) -> float:
    plon = ecliptic_longitude(body, time)
    elon = ecliptic_longitude(Body.EARTH, time)
    diff = direction * (elon - plon)
    return longitude_offset(diff - target_rel_lon)


def search_relative_longitude(body: Body, target_rel_lon: float, start: Instant) -> Instant:
    """Find when the Earth-minus-planet heliocentric longitude reaches a target.

    A target of 0 finds inferior conjunction (Mercury, Venus) or opposition
    (superior planets); 180 finds superior conjunction or conjunction.

    Parameters:
        body: A planet other than the Earth.
        target_rel_lon: Target relative longitude, degrees.
        start: Instant to search forward from.

    Raises:
        UnsupportedBodyError: ``body`` is the Earth, Sun, Moon, a barycenter or a star.
        NonConvergenceError: No convergence after RELATIVE_LONGITUDE_ITER_LIMIT steps.
    """
    if body is Body.EARTH or not body.is_planet:
        raise UnsupportedBodyError(f'Relative longitude is not defined for {body.value}')
    target_rel_lon = verify_number(target_rel_lon)

    syn = synodic_period(body)
    direction = +1 if body.is_superior_planet else -1

    # Negative error means we are behind the target; always search forward.
    error_angle = _rlon_offset(body, start, direction, target_rel_lon)
    if error_angle > 0.0:
        error_angle -= 360.0

    time = start
    for _ in range(RELATIVE_LONGITUDE_ITER_LIMIT):
        day_adjust = (-error_angle / 360.0) * syn
        time = time.add_days(day_adjust)
        if abs(day_adjust) * SECONDS_PER_DAY < 1.0:
            return time

        prev_angle = error_angle
        error_angle = _rlon_offset(body, time, direction, target_rel_lon)
        if abs(prev_angle) < 30.0 and prev_angle != error_angle:
            # Rescale the period to the local relative speed of the two planets.
            ratio = prev_angle / (prev_angle - error_angle)
            if 0.5 < ratio < 2.0:
                syn *= ratio

    logger.error('Relative longitude search for %s did not converge from %s', body.value, start)
    raise NonConvergenceError(f'search_relative_longitude did not converge for {body.value}')


def elongation(body: Body, time: Instant) -> ElongationEvent:
    """Angular separation of ``body`` from the Sun and its morning/evening visibility."""
    lon = pair_longitude(body, Body.SUN, time)
    if lon > 180.0:
        visibility = Visibility.MORNING
        lon = 360.0 - lon
    else:
        visibility = Visibility.EVENING
    return ElongationEvent(time, visibility, angle_from_sun(body, time), lon)


def search_relative_longitude_window(
    body: Body,
    start: Instant,
    s1: float,
    s2: float,
    slope: SearchFunction,
    what: str,
) -> Instant:
    """Find a zero of ``slope`` for an inferior planet inside a relative longitude window.

    The event is known to occur while the planet-minus-Earth heliocentric
    longitude lies within [s1, s2] or [-s2, -s1] degrees. Those windows keep
    the search away from the cusps at 0 and 180 degrees, where ``slope`` is
    discontinuous.

    Parameters:
        body: Mercury or Venus.
        start: The event must not be earlier than this.
        s1: Inner edge of the window, degrees.
        s2: Outer edge of the window, degrees.
        slope: Negative before the event and positive after it.
        what: Name of the event for error messages.

    Raises:
        NonConvergenceError: ``slope`` does not change sign across the window,
            or no event was found after 2 windows.
    """
    start_time = start
    for attempt in range(1, 3):
        plon = ecliptic_longitude(body, start_time)
        elon = ecliptic_longitude(Body.EARTH, start_time)
        rlon = longitude_offset(plon - elon)

        if -s1 <= rlon < s1:
            adjust_days = 0.0
            rlon_lo, rlon_hi = s1, s2
        elif rlon >= s2 or rlon < -s2:
            adjust_days = 0.0
            rlon_lo, rlon_hi = -s2, -s1
        elif rlon >= 0.0:
            # Inside [s1, s2]: back up to its start.
            adjust_days = -synodic_period(body) / 4.0
            rlon_lo, rlon_hi = s1, s2
        else:
            adjust_days = -synodic_period(body) / 4.0
            rlon_lo, rlon_hi = -s2, -s1

        t_start = start_time.add_days(adjust_days)
        t1 = search_relative_longitude(body, rlon_lo, t_start)
        t2 = search_relative_longitude(body, rlon_hi, t1)

        m1 = slope(t1)
        if m1 >= 0.0:
            raise NonConvergenceError(f'{what}: slope at window start is {m1}')
        m2 = slope(t2)
        if m2 <= 0.0:
            raise NonConvergenceError(f'{what}: slope at window end is {m2}')

        tx = search(slope, t1, t2, SearchOptions(dt_tolerance_seconds=10.0, init_f1=m1, init_f2=m2))
        if tx is None:
            raise NonConvergenceError(f'{what}: search failed on attempt {attempt} ({t1} to {t2})')

        if tx.tt >= start.tt:
            return tx

        logger.debug('%s at %s is before %s; trying the next window', what, tx, start)
        start_time = t2.add_days(1.0)

    raise NonConvergenceError(f'{what}: no event found after 2 tries')


def search_max_elongation(body: Body, start: Instant) -> ElongationEvent:
    """Find the next greatest elongation of Mercury or Venus.

    Raises:
        UnsupportedBodyError: ``body`` is not Mercury or Venus.
        NonConvergenceError: The event could not be bracketed.
    """
    window = _ELONGATION_WINDOWS.get(body)
    if window is None:
        raise UnsupportedBodyError('search_max_elongation works for Mercury and Venus only')
    s1, s2 = window
    dt = 0.01

    def neg_slope(t: Instant) -> float:
        # Elongation slope goes from positive to negative at the maximum.
        e1 = angle_from_sun(body, t.add_days(-dt / 2.0))
        e2 = angle_from_sun(body, t.add_days(+dt / 2.0))
        return (e1 - e2) / dt

    tx = search_relative_longitude_window(body, start, s1, s2, neg_slope, 'search_max_elongation')
    return elongation(body, tx)


def moon_phase(time: Instant) -> float:
    """Geocentric ecliptic longitude of the Moon minus that of the Sun, [0, 360).

    0 is new moon, 90 first quarter, 180 full moon, 270 third quarter.
    """
    return pair_longitude(Body.MOON, Body.SUN, time)


def search_moon_phase(target_lon: float, start: Instant, limit_days: float) -> Instant | None:
    """Find when the Moon next reaches the phase angle ``target_lon``.

    Parameters:
        target_lon: Phase angle in degrees (see moon_phase).
        start: Instant to search from.
        limit_days: Window length; negative searches backward.

    Returns:
        The instant of the phase, or None if it falls outside the window.
    """
    target_lon = verify_number(target_lon)
    limit_days = verify_number(limit_days)

    def moon_offset(t: Instant) -> float:
        return longitude_offset(moon_phase(t) - target_lon)

    ya = moon_offset(start)
    if limit_days < 0.0:
        if ya < 0.0:
            ya += 360.0
        est_dt = -(MEAN_SYNODIC_MONTH * ya) / 360.0
        dt2 = est_dt + MOON_PHASE_UNCERTAINTY
        if dt2 < limit_days:
            return None
        dt1 = max(limit_days, est_dt - MOON_PHASE_UNCERTAINTY)
    else:
        if ya > 0.0:
            ya -= 360.0
        est_dt = -(MEAN_SYNODIC_MONTH * ya) / 360.0
        dt1 = est_dt - MOON_PHASE_UNCERTAINTY
        if dt1 > limit_days:
            return None
        dt2 = min(limit_days, est_dt + MOON_PHASE_UNCERTAINTY)

    t1 = start.add_days(dt1)
    t2 = start.add_days(dt2)
    return search(moon_offset, t1, t2, SearchOptions(dt_tolerance_seconds=0.1))


def search_moon_quarter(start: Instant) -> MoonQuarter:
    """Find the first lunar quarter after ``start``.

    Raises:
        NonConvergenceError: No quarter was found within 10 days.
    """
    phase_start = moon_phase(start)
    quarter = (int(math.floor(phase_start / 90.0)) + 1) % 4
    time = search_moon_phase(90.0 * quarter, start, 10.0)
    if time is None:
        raise NonConvergenceError(f'Cannot find moon quarter after {start}')
    return MoonQuarter(quarter, time)


def next_moon_quarter(mq: MoonQuarter) -> MoonQuarter:
    """Find the quarter following ``mq``."""
    # Quarters are at least 6 days apart.
    return search_moon_quarter(mq.time.add_days(6.0))
