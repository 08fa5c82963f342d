"""Equinoxes, solstices and the apparent ecliptic longitude of the Sun."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ephemeris_engine.angle_utils import longitude_offset, verify_number
from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import C_AUDAY
from ephemeris_engine.earth_orientation import OrientationCache
from ephemeris_engine.ephemeris import EclipticCoordinates, ecliptic, helio_vector
from ephemeris_engine.errors import InvalidArgumentError, NonConvergenceError
from ephemeris_engine.search import SearchOptions, search
from ephemeris_engine.time_utils import Instant


@dataclass(frozen=True)
class SeasonInfo:
    """The two equinoxes and two solstices of one calendar year."""

    mar_equinox: Instant
    jun_solstice: Instant
    sep_equinox: Instant
    dec_solstice: Instant


def sun_position(time: Instant, cache: OrientationCache | None = None) -> EclipticCoordinates:
    """Apparent geocentric position of the Sun in the true ecliptic of date.

    The Earth is evaluated one light-time early, which accounts for the
    aberration of sunlight.
    """
    adjusted = time.add_days(-1.0 / C_AUDAY)
    earth = helio_vector(Body.EARTH, adjusted)
    return ecliptic(-earth, cache)


def search_sun_longitude(target_lon: float, start: Instant, limit_days: float) -> Instant | None:
    """Find when the Sun reaches apparent ecliptic longitude ``target_lon``.

    Parameters:
        target_lon: Degrees in [0, 360); 0 is the March equinox, 90 the June
            solstice, 180 the September equinox, 270 the December solstice.
        start: Instant known to be before the event.
        limit_days: Days after ``start`` known to be after the event.

    Returns:
        The instant, or None if it is not inside the window.
    """
    target_lon = verify_number(target_lon)
    limit_days = verify_number(limit_days)

    def sun_offset(t: Instant) -> float:
        return longitude_offset(sun_position(t).elon - target_lon)

    t2 = start.add_days(limit_days)
    return search(sun_offset, start, t2, SearchOptions(dt_tolerance_seconds=0.01))


def seasons(year: int | datetime) -> SeasonInfo:
    """Find the equinoxes and solstices of a UTC calendar year.

    Parameters:
        year: Calendar year, or a datetime whose year is used.

    Raises:
        InvalidArgumentError: ``year`` is not an integer or datetime.
        NonConvergenceError: An event was not found near its expected date.
    """
    if isinstance(year, datetime):
        year = year.year
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidArgumentError(f'Cannot calculate seasons for year {year!r}')

    def find(target_lon: float, month: int) -> Instant:
        start = Instant.from_calendar(year, month, 10)
        time = search_sun_longitude(target_lon, start, 20.0)
        if time is None:
            raise NonConvergenceError(f'Cannot find season change near {start}')
        return time

    return SeasonInfo(
        mar_equinox=find(0.0, 3),
        jun_solstice=find(90.0, 6),
        sep_equinox=find(180.0, 9),
        dec_solstice=find(270.0, 12),
    )
