"""Tests for Pluto's integrated ephemeris."""

from __future__ import annotations

import logging

import pytest

from ephemeris_engine.bodies import Body
from ephemeris_engine.ephemeris import equator
from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.frames import rotation_eqj_ecl
from ephemeris_engine.longitude import search_relative_longitude
from ephemeris_engine.observer import Observer
from ephemeris_engine.planets import pluto
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import sphere_from_vector


def test_sample_range_is_symmetric() -> None:
    """The sample table spans 730000 days either side of J2000."""

    first, last = pluto.sample_range()

    assert first == pytest.approx(-730000.0)
    assert last == pytest.approx(730000.0)


def test_pluto_distance_2024() -> None:
    """Pluto is about 35 AU from the Sun in 2024."""

    state = pluto.calc_pluto(Instant.from_calendar(2024, 1, 1))

    assert 33.5 < state.position().length() < 36.5
    assert state.velocity().length() < 0.004


def test_barycentric_and_heliocentric_differ_slightly() -> None:
    """The Sun's barycentric offset separates the two states by under 0.02 AU."""

    t = Instant.from_calendar(2024, 1, 1)
    helio = pluto.calc_pluto(t, heliocentric=True)
    bary = pluto.calc_pluto(t, heliocentric=False)

    assert 0.0 < (helio.position() - bary.position()).length() < 0.02


def test_continuous_across_steps() -> None:
    """Positions one hour apart differ by about one hour of motion."""

    t = Instant(1000.0)
    a = pluto.calc_pluto(t)
    b = pluto.calc_pluto(t.add_days(1.0 / 24.0))
    moved = (b.position() - a.position()).length()

    assert moved == pytest.approx(a.velocity().length() / 24.0, rel=0.01)


def test_segment_cache_can_be_cleared() -> None:
    """Clearing the cache does not change results."""

    t = Instant(-5000.0)
    before = pluto.calc_pluto(t)
    pluto.clear_segment_cache()
    after = pluto.calc_pluto(t)

    assert after.position().as_array() == pytest.approx(before.position().as_array(), abs=1e-12)


def test_far_extrapolation_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    """Times beyond the allowed extrapolation raise InvalidArgumentError."""

    monkeypatch.setenv('EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS', '0')

    with pytest.raises(InvalidArgumentError):
        pluto.calc_pluto(Instant(740000.0))


def test_near_extrapolation_warns(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    """Short extrapolation is allowed but logged as a warning."""

    monkeypatch.setenv('EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS', '5000')

    with caplog.at_level(logging.WARNING, logger='ephemeris_engine.planets.pluto'):
        state = pluto.calc_pluto(Instant(-731000.0))

    assert 'Extrapolating Pluto' in caplog.text
    assert 25.0 < state.position().length() < 55.0


def test_heliocentric_direction_at_j2000() -> None:
    """At J2000 Pluto lies near ecliptic longitude 250.5 and latitude +11.2 degrees."""

    state = pluto.calc_pluto(Instant(0.0))
    ecl = sphere_from_vector(rotation_eqj_ecl().rotate_vector(state.position()))

    assert ecl.lon == pytest.approx(250.55, abs=0.1)
    assert ecl.lat == pytest.approx(11.16, abs=0.1)
    assert ecl.dist == pytest.approx(30.22, abs=0.01)


def test_geocentric_position_2000() -> None:
    """Pluto was in Ophiuchus at the start of 2000."""

    eq = equator(Body.PLUTO, Instant(0.0), Observer(0.0, 0.0, 0.0), False, True)

    assert eq.ra == pytest.approx(16.76, abs=0.05)
    assert eq.dec == pytest.approx(-11.43, abs=0.2)


def test_geocentric_position_2024() -> None:
    """Pluto was in Capricornus near RA 20h, Dec -23 at the start of 2024."""

    eq = equator(Body.PLUTO, Instant.from_calendar(2024, 1, 1), Observer(0.0, 0.0, 0.0), False, True)

    assert eq.ra == pytest.approx(20.08, abs=0.15)
    assert eq.dec == pytest.approx(-23.0, abs=0.5)
    assert 34.5 < eq.dist < 37.0


def test_opposition_2024() -> None:
    """Pluto reached opposition in late July 2024."""

    opposition = search_relative_longitude(Body.PLUTO, 0.0, Instant.from_calendar(2024, 1, 1))

    assert opposition.ut == pytest.approx(Instant.from_calendar(2024, 7, 23).ut, abs=3.0)
