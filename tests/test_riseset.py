"""Tests for rise/set, altitude and hour-angle searches."""

from __future__ import annotations

import pytest

from ephemeris_engine.bodies import Body, StarTable
from ephemeris_engine.ephemeris import equator, horizon
from ephemeris_engine.errors import InvalidArgumentError, UnsupportedBodyError
from ephemeris_engine.observer import Observer
from ephemeris_engine.refraction import Refraction
from ephemeris_engine.riseset import (
    Direction,
    horizon_dip_angle,
    hour_angle,
    search_altitude,
    search_hour_angle,
    search_rise_set,
)
from ephemeris_engine.time_utils import Instant

LONDON = Observer(51.5074, -0.1278, 35.0)
MARCH_15 = Instant.from_calendar(2024, 3, 15)


def test_london_sunrise_and_sunset() -> None:
    """Mid-March sunrise in London is around 06 UT and sunset around 18 UT."""

    rise = search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0)
    sunset = search_rise_set(Body.SUN, LONDON, Direction.SET, MARCH_15, 1.0)

    assert rise is not None
    assert sunset is not None
    assert 5 <= rise.to_datetime().hour <= 8
    assert 17 <= sunset.to_datetime().hour <= 20
    assert rise < sunset


def test_sunrise_limb_altitude() -> None:
    """At sunrise the Sun's center is about 50 arcminutes below the horizon."""

    rise = search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0)
    assert rise is not None

    eq = equator(Body.SUN, rise, LONDON, True, True)
    hor = horizon(rise, LONDON, eq.ra, eq.dec, Refraction.NONE)

    assert hor.altitude == pytest.approx(-0.83, abs=0.05)


def test_backward_search() -> None:
    """A negative limit finds the previous event."""

    sunset = search_rise_set(Body.SUN, LONDON, Direction.SET, MARCH_15, -1.0)

    assert sunset is not None
    assert sunset < MARCH_15
    assert MARCH_15.ut - sunset.ut < 1.0


def test_forward_limit_excludes_later_event() -> None:
    """An event just past start + limit_days is not reported; one just inside is."""

    rise = search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0)
    assert rise is not None
    gap = rise.ut - MARCH_15.ut

    assert search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, 0.05) is None
    assert search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, gap - 0.01) is None

    inside = search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, gap + 0.01)
    assert inside is not None
    assert inside.ut == pytest.approx(rise.ut, abs=1e-5)


def test_backward_limit_excludes_earlier_event() -> None:
    """Searching backward, an event before start + limit_days is not reported."""

    noon = MARCH_15.add_days(0.5)
    rise = search_rise_set(Body.SUN, LONDON, Direction.RISE, noon, -1.0)
    assert rise is not None
    gap = noon.ut - rise.ut

    assert search_rise_set(Body.SUN, LONDON, Direction.RISE, noon, -0.05) is None
    assert search_rise_set(Body.SUN, LONDON, Direction.RISE, noon, -(gap - 0.01)) is None

    inside = search_rise_set(Body.SUN, LONDON, Direction.RISE, noon, -(gap + 0.01))
    assert inside is not None
    assert inside.ut == pytest.approx(rise.ut, abs=1e-5)


def test_altitude_search_respects_limit() -> None:
    """search_altitude applies the same window to twilight events."""

    dawn = search_altitude(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0, -6.0)
    assert dawn is not None
    gap = dawn.ut - MARCH_15.ut

    assert search_altitude(Body.SUN, LONDON, Direction.RISE, MARCH_15, gap - 0.01, -6.0) is None


def test_moon_rise_within_two_days() -> None:
    """The Moon rises at least once in any 25-hour span at mid latitudes."""

    rise = search_rise_set(Body.MOON, LONDON, Direction.RISE, MARCH_15, 2.0)

    assert rise is not None
    assert MARCH_15.ut < rise.ut < MARCH_15.ut + 1.1


def test_polar_night_has_no_sunrise() -> None:
    """Near the North Pole in December the Sun never rises."""

    arctic = Observer(85.0, 0.0)
    start = Instant.from_calendar(2023, 12, 15)

    assert search_rise_set(Body.SUN, arctic, Direction.RISE, start, 10.0) is None


def test_star_rise() -> None:
    """User-defined stars rise like any other body."""

    stars = StarTable().with_star(Body.STAR1, 6.75, -16.7, 8.6)

    rise = search_rise_set(Body.STAR1, LONDON, Direction.RISE, MARCH_15, 1.0, stars=stars)

    assert rise is not None


def test_negative_ground_height_rejected() -> None:
    """meters_above_ground must not be negative."""

    with pytest.raises(InvalidArgumentError):
        search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0, meters_above_ground=-1.0)


def test_earth_rise_unsupported() -> None:
    """The Earth has no altitude as seen from itself."""

    with pytest.raises(UnsupportedBodyError):
        search_rise_set(Body.EARTH, LONDON, Direction.RISE, MARCH_15, 1.0)


def test_horizon_dip() -> None:
    """An elevated observer sees the horizon depressed; at ground level there is no dip."""

    tower = Observer(51.5074, -0.1278, 300.0)

    assert horizon_dip_angle(tower, 0.0) == 0.0
    assert -0.7 < horizon_dip_angle(tower, 300.0) < -0.5


def test_elevated_observer_sees_earlier_sunrise() -> None:
    """Standing on a tower lets the observer see the Sun rise earlier."""

    tower = Observer(51.5074, -0.1278, 300.0)
    ground = search_rise_set(Body.SUN, tower, Direction.RISE, MARCH_15, 1.0)
    elevated = search_rise_set(Body.SUN, tower, Direction.RISE, MARCH_15, 1.0, meters_above_ground=300.0)

    assert ground is not None
    assert elevated is not None
    assert elevated < ground


def test_civil_twilight() -> None:
    """Civil dawn precedes sunrise by roughly half an hour in March."""

    dawn = search_altitude(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0, -6.0)
    rise = search_rise_set(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0)

    assert dawn is not None
    assert rise is not None
    assert 20.0 < (rise.ut - dawn.ut) * 1440.0 < 45.0


def test_search_altitude_range() -> None:
    """Target altitudes beyond the zenith are rejected."""

    with pytest.raises(InvalidArgumentError):
        search_altitude(Body.SUN, LONDON, Direction.RISE, MARCH_15, 1.0, 91.0)


def test_hour_angle_event_matches_horizon() -> None:
    """The reported horizontal coordinates match equator plus horizon at the event time."""

    observer = Observer(6.56784, -1.5674, 0.0)
    start = Instant.from_string('2023-08-22T00:00:00Z')

    event = search_hour_angle(Body.MOON, observer, 4.0, start)
    eq = equator(Body.MOON, event.time, observer, True, True)
    hor = horizon(event.time, observer, eq.ra, eq.dec, Refraction.NORMAL)

    assert event.time > start
    assert event.hor.azimuth == pytest.approx(hor.azimuth, abs=1e-6)
    assert event.hor.altitude == pytest.approx(hor.altitude, abs=1e-6)
    assert hour_angle(Body.MOON, event.time, observer) == pytest.approx(4.0, abs=1e-4)


def test_culmination_is_due_south() -> None:
    """From the northern hemisphere the Sun culminates on the southern meridian."""

    event = search_hour_angle(Body.SUN, LONDON, 0.0, MARCH_15)

    assert event.hor.azimuth == pytest.approx(180.0, abs=0.01)
    assert 11 <= event.time.to_datetime().hour <= 12


def test_hour_angle_backward() -> None:
    """direction=-1 finds the previous culmination."""

    event = search_hour_angle(Body.SUN, LONDON, 0.0, MARCH_15, direction=-1)

    assert event.time < MARCH_15


@pytest.mark.parametrize(('ha', 'direction'), [(24.0, 1), (-1.0, 1), (1.0, 0)])
def test_hour_angle_validation(ha: float, direction: int) -> None:
    """Hour angle must be in [0, 24) and direction +1 or -1."""

    with pytest.raises(InvalidArgumentError):
        search_hour_angle(Body.SUN, LONDON, ha, MARCH_15, direction)


def test_hour_angle_of_earth_unsupported() -> None:
    """The Earth has no hour angle."""

    with pytest.raises(UnsupportedBodyError):
        search_hour_angle(Body.EARTH, LONDON, 0.0, MARCH_15)
