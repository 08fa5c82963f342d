"""Searches for the most northern or southern excursions of a body.

Declination is measured from the true equator of date and ecliptic latitude
from the true ecliptic of date, both as seen from the Earth's center with
light-time and aberration corrections.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ephemeris_engine.angle_utils import verify_number
from ephemeris_engine.bodies import Body, StarTable
from ephemeris_engine.constants import SECONDS_PER_DAY
from ephemeris_engine.ephemeris import ecliptic, geo_vector
from ephemeris_engine.errors import InvalidArgumentError, UnsupportedBodyError
from ephemeris_engine.frames import rotation_eqj_eqd
from ephemeris_engine.search import search
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import equator_from_vector

DEFAULT_WINDOW_DAYS = 10.0

_DT = 1.0 / SECONDS_PER_DAY


class ExtremumKind(Enum):
    """Which extreme to look for; the value is the sign applied to the slope."""

    MAXIMUM = -1
    MINIMUM = +1


@dataclass(frozen=True)
class ExtremumEvent:
    time: Instant
    kind: ExtremumKind
    angle: float


AngleFunction = Callable[[Instant], float]


def declination_of_date(body: Body, time: Instant, stars: StarTable | None = None) -> float:
    """Apparent geocentric declination of ``body`` in the true equator of date."""
    eqj = geo_vector(body, time, True, stars)
    eqd = rotation_eqj_eqd(time).rotate_vector(eqj)
    return equator_from_vector(eqd).dec


def ecliptic_latitude_of_date(body: Body, time: Instant, stars: StarTable | None = None) -> float:
    """Apparent geocentric latitude of ``body`` above the true ecliptic of date."""
    return ecliptic(geo_vector(body, time, True, stars)).elat


def _search_extremum(
    func: AngleFunction,
    start: Instant,
    kind: ExtremumKind,
    limit_days: float,
    window_days: float,
) -> ExtremumEvent | None:
    limit_days = verify_number(limit_days)
    window_days = verify_number(window_days)
    if limit_days <= 0.0:
        raise InvalidArgumentError(f'limit_days must be positive, not {limit_days}')
    if window_days <= 0.0:
        raise InvalidArgumentError(f'window_days must be positive, not {window_days}')

    def slope(t: Instant) -> float:
        return kind.value * (func(t.add_days(+_DT)) - func(t.add_days(-_DT)))

    t1 = start
    while t1.ut - start.ut < limit_days:
        t2 = t1.add_days(min(window_days, start.ut + limit_days - t1.ut))
        tx = search(slope, t1, t2)
        if tx is not None:
            return ExtremumEvent(tx, kind, func(tx))
        t1 = t2
    return None


def _check_body(body: Body) -> None:
    if body is Body.EARTH:
        raise UnsupportedBodyError('The Earth has no geocentric direction')
    if body.is_star_slot:
        raise UnsupportedBodyError(f'{body.value} is fixed; it has no extrema')


def search_declination_extremum(
    body: Body,
    start: Instant,
    kind: ExtremumKind,
    limit_days: float,
    window_days: float = DEFAULT_WINDOW_DAYS,
) -> ExtremumEvent | None:
    """Find when ``body`` next reaches its most northern or southern declination.

    Parameters:
        body: Moon, Sun or a planet other than the Earth.
        start: Instant to search forward from.
        kind: MAXIMUM (most northern) or MINIMUM (most southern).
        limit_days: How far forward to look.
        window_days: Sub-window width; it must be shorter than the time between
            a maximum and the following minimum.

    Returns:
        The extremum, or None if none was found within ``limit_days``.
    """
    _check_body(body)
    return _search_extremum(
        lambda t: declination_of_date(body, t), start, kind, limit_days, window_days
    )


def search_ecliptic_latitude_extremum(
    body: Body,
    start: Instant,
    kind: ExtremumKind,
    limit_days: float,
    window_days: float = DEFAULT_WINDOW_DAYS,
) -> ExtremumEvent | None:
    """Find when ``body`` next reaches its greatest or least ecliptic latitude.

    Same arguments as search_declination_extremum.
    """
    _check_body(body)
    return _search_extremum(
        lambda t: ecliptic_latitude_of_date(body, t), start, kind, limit_days, window_days
    )
