"""Tests for conjunctions, elongations and lunar phases."""

from __future__ import annotations

import pytest

from ephemeris_engine.bodies import Body
from ephemeris_engine.errors import InvalidArgumentError, UnsupportedBodyError
from ephemeris_engine.longitude import (
    Visibility,
    elongation,
    moon_phase,
    next_moon_quarter,
    search_max_elongation,
    search_moon_phase,
    search_moon_quarter,
    search_relative_longitude,
    synodic_period,
)
from ephemeris_engine.time_utils import Instant

MINUTE = 1.0 / 1440.0


def test_new_moon_phase() -> None:
    """The phase angle is near zero at the January 2023 new moon."""

    phase = moon_phase(Instant.from_calendar(2023, 1, 21, 20, 53))

    assert phase < 5.0 or phase > 355.0


def test_full_moon_phase() -> None:
    """The phase angle is near 180 at the August 2023 full moon."""

    assert moon_phase(Instant.from_calendar(2023, 8, 1, 18, 31)) == pytest.approx(180.0, abs=1.0)


def test_search_new_moon_forward_and_backward() -> None:
    """The new moon is found from either side within the window."""

    expected = Instant.from_calendar(2023, 1, 21, 20, 53)

    forward = search_moon_phase(0.0, Instant.from_calendar(2023, 1, 10), 40.0)
    backward = search_moon_phase(0.0, Instant.from_calendar(2023, 1, 25), -10.0)

    assert forward is not None
    assert backward is not None
    assert forward.ut == pytest.approx(expected.ut, abs=3 * MINUTE)
    assert backward.ut == pytest.approx(forward.ut, abs=MINUTE / 60.0)


def test_search_moon_phase_outside_window() -> None:
    """A phase that falls after the window yields None."""

    assert search_moon_phase(180.0, Instant.from_calendar(2023, 1, 22), 3.0) is None


def test_search_moon_phase_rejects_nan() -> None:
    """Non-finite targets raise."""

    with pytest.raises(InvalidArgumentError):
        search_moon_phase(float('nan'), Instant(0.0), 30.0)


def test_moon_quarters_cycle() -> None:
    """Successive quarters advance by one and are about a week apart."""

    mq = search_moon_quarter(Instant.from_calendar(2024, 1, 1))

    assert mq.quarter == 3
    assert mq.name == 'Third Quarter'
    assert mq.time.ut == pytest.approx(Instant.from_calendar(2024, 1, 4, 3, 30).ut, abs=10 * MINUTE)

    for _ in range(8):
        nxt = next_moon_quarter(mq)
        assert nxt.quarter == (mq.quarter + 1) % 4
        assert 6.0 < nxt.time.ut - mq.time.ut < 9.0
        mq = nxt


def test_synodic_periods() -> None:
    """Mean synodic periods of Venus and Jupiter."""

    assert synodic_period(Body.VENUS) == pytest.approx(583.9, abs=1.0)
    assert synodic_period(Body.JUPITER) == pytest.approx(398.9, abs=1.0)
    with pytest.raises(UnsupportedBodyError):
        synodic_period(Body.EARTH)


def test_jupiter_opposition() -> None:
    """Jupiter reached opposition on 2023-11-03."""

    tx = search_relative_longitude(Body.JUPITER, 0.0, Instant.from_calendar(2023, 1, 1))

    assert tx.ut == pytest.approx(Instant.from_calendar(2023, 11, 3).ut, abs=1.0)


def test_consecutive_oppositions_match_synodic_period() -> None:
    """Two oppositions in a row are one synodic period apart."""

    first = search_relative_longitude(Body.JUPITER, 0.0, Instant.from_calendar(2023, 1, 1))
    second = search_relative_longitude(Body.JUPITER, 0.0, first.add_days(10.0))

    assert second.ut - first.ut == pytest.approx(synodic_period(Body.JUPITER), rel=0.03)


def test_venus_inferior_conjunction() -> None:
    """Venus passed inferior conjunction on 2023-08-13."""

    tx = search_relative_longitude(Body.VENUS, 0.0, Instant.from_calendar(2023, 1, 1))

    assert tx.ut == pytest.approx(Instant.from_calendar(2023, 8, 13).ut, abs=1.0)


@pytest.mark.parametrize('body', [Body.EARTH, Body.SUN, Body.MOON, Body.SSB])
def test_relative_longitude_unsupported(body: Body) -> None:
    """Only planets other than the Earth have a relative longitude."""

    with pytest.raises(UnsupportedBodyError):
        search_relative_longitude(body, 0.0, Instant(0.0))


def test_mercury_max_elongation() -> None:
    """Mercury's greatest elongations fall between 17.9 and 28 degrees."""

    start = Instant.from_calendar(2024, 1, 1)
    event = search_max_elongation(Body.MERCURY, start)

    assert 17.9 <= event.elongation <= 28.0
    assert event.time > start
    assert event.time.ut - start.ut < 120.0


def test_venus_max_elongation_2023() -> None:
    """Venus reached greatest eastern elongation, 45.4 degrees, on 2023-06-04."""

    event = search_max_elongation(Body.VENUS, Instant.from_calendar(2023, 1, 1))

    assert event.visibility is Visibility.EVENING
    assert event.elongation == pytest.approx(45.4, abs=0.3)
    assert event.time.ut == pytest.approx(Instant.from_calendar(2023, 6, 4).ut, abs=1.0)


def test_max_elongation_requires_inferior_planet() -> None:
    """Superior planets have no greatest elongation."""

    with pytest.raises(UnsupportedBodyError):
        search_max_elongation(Body.MARS, Instant(0.0))


def test_elongation_morning_visibility() -> None:
    """Venus after inferior conjunction is a morning object."""

    event = elongation(Body.VENUS, Instant.from_calendar(2023, 10, 23))

    assert event.visibility is Visibility.MORNING
    assert 40.0 < event.elongation < 50.0
    assert 0.0 <= event.ecliptic_separation <= 180.0
