"""Perigee/apogee of the Moon and perihelion/aphelion of the planets."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import KM_PER_AU, MEAN_SYNODIC_MONTH, MINUTES_PER_DAY
from ephemeris_engine.ephemeris import helio_distance
from ephemeris_engine.errors import EphemerisError, NonConvergenceError, UnsupportedBodyError
from ephemeris_engine.lunar import calc_moon
from ephemeris_engine.planets import orbital_period
from ephemeris_engine.search import SearchOptions, search
from ephemeris_engine.time_utils import Instant

logger = logging.getLogger(__name__)

# Finite-difference step for distance slopes, days.
SLOPE_DT = 0.001

LUNAR_APSIS_INCREMENT = 5.0
LUNAR_APSIS_SKIP = 11.0

# Bodies whose distance curve has several local extrema near each apsis.
_BRUTE_FORCE_BODIES = frozenset({Body.NEPTUNE, Body.PLUTO})


class ApsisKind(Enum):
    PERICENTER = 0
    APOCENTER = 1


@dataclass(frozen=True)
class Apsis:
    """Closest or farthest point of an orbit.

    Attributes:
        time: Instant of the event.
        kind: PERICENTER or APOCENTER.
        dist_au: Distance between the centers of the two bodies, AU.
    """

    time: Instant
    kind: ApsisKind
    dist_au: float

    @property
    def dist_km(self) -> float:
        return self.dist_au * KM_PER_AU


def _slope(distance: Callable[[Instant], float], t: Instant) -> float:
    r1 = distance(t.add_days(-SLOPE_DT / 2.0))
    r2 = distance(t.add_days(+SLOPE_DT / 2.0))
    return (r2 - r1) / SLOPE_DT


def _moon_distance(t: Instant) -> float:
    return calc_moon(t).dist


def _search_slope_change(
    distance: Callable[[Instant], float],
    start: Instant,
    increment: float,
    span: float,
    what: str,
) -> Apsis:
    """Step forward until the distance slope changes sign, then refine."""

    def positive_slope(t: Instant) -> float:
        return _slope(distance, t)

    def negative_slope(t: Instant) -> float:
        return -_slope(distance, t)

    t1 = start
    m1 = positive_slope(t1)
    iteration = 0
    while iteration * increment < span:
        t2 = t1.add_days(increment)
        m2 = positive_slope(t2)
        if m1 * m2 <= 0.0:
            if m1 < 0.0 or m2 > 0.0:
                tx = search(positive_slope, t1, t2, SearchOptions(init_f1=m1, init_f2=m2))
                kind = ApsisKind.PERICENTER
            elif m1 > 0.0 or m2 < 0.0:
                tx = search(negative_slope, t1, t2, SearchOptions(init_f1=-m1, init_f2=-m2))
                kind = ApsisKind.APOCENTER
            else:
                raise EphemerisError(f'Both distance slopes are zero in {what} apsis search')
            if tx is None:
                logger.error('%s apsis slope search failed between %s and %s', what, t1, t2)
                raise NonConvergenceError(f'Failed to find slope transition in {what} apsis search')
            return Apsis(tx, kind, distance(tx))
        t1 = t2
        m1 = m2
        iteration += 1

    raise NonConvergenceError(f'No {what} apsis found after {start}')


def search_lunar_apsis(start: Instant) -> Apsis:
    """Find the first lunar perigee or apogee after ``start``."""
    return _search_slope_change(
        _moon_distance, start, LUNAR_APSIS_INCREMENT, 2.0 * MEAN_SYNODIC_MONTH, 'lunar'
    )


def _check_alternates(prev: Apsis, nxt: Apsis) -> Apsis:
    if nxt.kind is prev.kind:
        raise EphemerisError(f'Previous apsis was {prev.kind.name}, next is also {nxt.kind.name}')
    return nxt


def next_lunar_apsis(apsis: Apsis) -> Apsis:
    """Find the lunar apsis following ``apsis``; kinds alternate."""
    return _check_alternates(apsis, search_lunar_apsis(apsis.time.add_days(LUNAR_APSIS_SKIP)))


def _planet_extreme(body: Body, kind: ApsisKind, start: Instant, day_span: float) -> Apsis:
    """Narrow a sampled extremum of heliocentric distance down to one minute."""
    direction = 1.0 if kind is ApsisKind.APOCENTER else -1.0
    npoints = 10
    while True:
        interval = day_span / (npoints - 1)
        if interval < 1.0 / MINUTES_PER_DAY:
            apsis_time = start.add_days(interval / 2.0)
            return Apsis(apsis_time, kind, helio_distance(body, apsis_time))

        best_i = -1
        best_dist = 0.0
        for i in range(npoints):
            dist = direction * helio_distance(body, start.add_days(i * interval))
            if i == 0 or dist > best_dist:
                best_i = i
                best_dist = dist

        start = start.add_days((best_i - 1) * interval)
        day_span = 2.0 * interval


def _brute_search_planet_apsis(body: Body, start: Instant) -> Apsis:
    """Sample most of an orbit and pick the earliest extremum after ``start``."""
    npoints = 100
    period = orbital_period(body)
    # Rewind 30 degrees of orbit and sample 300 degrees.
    t1 = start.add_days(period * (-30.0 / 360.0))
    t2 = start.add_days(period * (270.0 / 360.0))
    interval = (t2.ut - t1.ut) / (npoints - 1)

    t_min = t_max = t1
    min_dist = max_dist = helio_distance(body, t1)
    for i in range(1, npoints):
        time = t1.add_days(i * interval)
        dist = helio_distance(body, time)
        if dist > max_dist:
            max_dist = dist
            t_max = time
        if dist < min_dist:
            min_dist = dist
            t_min = time

    perihelion = _planet_extreme(body, ApsisKind.PERICENTER, t_min.add_days(-2.0 * interval), 4.0 * interval)
    aphelion = _planet_extreme(body, ApsisKind.APOCENTER, t_max.add_days(-2.0 * interval), 4.0 * interval)
    if perihelion.time.tt >= start.tt:
        if start.tt <= aphelion.time.tt < perihelion.time.tt:
            return aphelion
        return perihelion
    if aphelion.time.tt >= start.tt:
        return aphelion
    raise EphemerisError(f'Failed to find {body.value} apsis after {start}')


def search_planet_apsis(body: Body, start: Instant) -> Apsis:
    """Find the first perihelion or aphelion of a planet after ``start``.

    Raises:
        UnsupportedBodyError: ``body`` is not Mercury through Pluto.
    """
    if not body.is_planet:
        raise UnsupportedBodyError(f'Cannot search apsis of {body.value}')
    if body in _BRUTE_FORCE_BODIES:
        return _brute_search_planet_apsis(body, start)

    period = orbital_period(body)
    return _search_slope_change(
        lambda t: helio_distance(body, t), start, period / 6.0, 2.0 * period, body.value
    )


def next_planet_apsis(body: Body, apsis: Apsis) -> Apsis:
    """Find the planet apsis following ``apsis``; kinds alternate."""
    # Skip a quarter orbit before searching again.
    skip = 0.25 * orbital_period(body)
    return _check_alternates(apsis, search_planet_apsis(body, apsis.time.add_days(skip)))
