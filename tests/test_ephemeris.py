"""Tests for heliocentric, barycentric and geocentric body positions."""

from __future__ import annotations

import pytest

from ephemeris_engine.bodies import Body, StarTable
from ephemeris_engine.constants import C_AUDAY, KM_PER_AU
from ephemeris_engine.earth_orientation import sidereal_time
from ephemeris_engine.ephemeris import (
    angle_from_sun,
    bary_state,
    ecliptic,
    ecliptic_longitude,
    equator,
    geo_vector,
    helio_distance,
    helio_state,
    helio_vector,
    horizon,
    pair_longitude,
)
from ephemeris_engine.errors import UnsupportedBodyError
from ephemeris_engine.observer import Observer
from ephemeris_engine.refraction import Refraction
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame

PERIHELION_2024 = Instant.from_calendar(2024, 1, 3)
APHELION_2024 = Instant.from_calendar(2024, 7, 5)
LONDON = Observer(51.5074, -0.1278, 35.0)


def test_earth_distance_extremes() -> None:
    """The Earth is about 0.983 AU from the Sun in January and 1.017 AU in July."""

    assert helio_distance(Body.EARTH, PERIHELION_2024) == pytest.approx(0.9833, abs=5e-4)
    assert helio_distance(Body.EARTH, APHELION_2024) == pytest.approx(1.0167, abs=5e-4)


@pytest.mark.parametrize(
    ('body', 'low', 'high'),
    [
        (Body.MERCURY, 0.307, 0.467),
        (Body.VENUS, 0.718, 0.729),
        (Body.MARS, 1.38, 1.67),
        (Body.JUPITER, 4.95, 5.46),
        (Body.SATURN, 9.0, 10.1),
        (Body.URANUS, 18.2, 20.1),
        (Body.NEPTUNE, 29.8, 30.4),
        (Body.PLUTO, 29.6, 49.4),
    ],
)
def test_planet_distances_in_range(body: Body, low: float, high: float) -> None:
    """Heliocentric distances fall between perihelion and aphelion."""

    dist = helio_vector(body, PERIHELION_2024).length()

    assert low <= dist <= high
    assert helio_distance(body, PERIHELION_2024) == pytest.approx(dist, rel=1e-6)


def test_helio_distance_series_matches_vector() -> None:
    """The radius series and the full position agree."""

    assert helio_distance(Body.MARS, APHELION_2024) == pytest.approx(
        helio_vector(Body.MARS, APHELION_2024).length(), rel=1e-6
    )


def test_sun_is_origin() -> None:
    """The Sun sits at the heliocentric origin with zero velocity."""

    state = helio_state(Body.SUN, PERIHELION_2024)

    assert state.position().length() == 0.0
    assert state.velocity().length() == 0.0


def test_earth_orbital_speed() -> None:
    """The Earth moves about 0.0172 AU/day."""

    speed = helio_state(Body.EARTH, PERIHELION_2024).velocity().length()

    assert speed == pytest.approx(0.01747, abs=2e-4)


def test_moon_helio_near_earth() -> None:
    """The Moon's heliocentric position is within 0.003 AU of the Earth's."""

    moon = helio_vector(Body.MOON, PERIHELION_2024)
    earth = helio_vector(Body.EARTH, PERIHELION_2024)

    assert (moon - earth).length() < 0.003
    emb = helio_vector(Body.EMB, PERIHELION_2024)
    assert (emb - earth).length() < 0.0001


def test_barycenter_offset() -> None:
    """The solar-system barycenter lies within 0.02 AU of the Sun."""

    ssb = helio_vector(Body.SSB, PERIHELION_2024)
    sun = bary_state(Body.SUN, PERIHELION_2024).position()

    assert ssb.length() < 0.02
    assert (ssb + sun).length() == pytest.approx(0.0, abs=1e-9)
    assert bary_state(Body.SSB, PERIHELION_2024).position().length() == 0.0


def test_bary_state_of_planet() -> None:
    """Barycentric and heliocentric positions differ by the Sun's offset."""

    sun = bary_state(Body.SUN, PERIHELION_2024).position()
    mars_b = bary_state(Body.MARS, PERIHELION_2024).position()
    mars_h = helio_vector(Body.MARS, PERIHELION_2024)

    assert (mars_b - mars_h - sun).length() == pytest.approx(0.0, abs=1e-9)


def test_earth_geo_vector_is_zero() -> None:
    """The Earth's geocentric position is the zero vector."""

    assert geo_vector(Body.EARTH, PERIHELION_2024, True).length() == 0.0


def test_moon_distance() -> None:
    """The Moon is between perigee and apogee distance."""

    dist_km = geo_vector(Body.MOON, PERIHELION_2024, True).length() * KM_PER_AU

    assert 356000.0 < dist_km < 407000.0


def test_light_time_correction() -> None:
    """Jupiter's apparent position is shifted back by its light travel time."""

    t = PERIHELION_2024
    apparent = geo_vector(Body.JUPITER, t, False)
    light_days = apparent.length() / C_AUDAY
    earth = helio_vector(Body.EARTH, t)
    retarded = helio_vector(Body.JUPITER, t.add_days(-light_days)) - earth

    assert (apparent - retarded).length() < 1e-7


def test_aberration_changes_direction_slightly() -> None:
    """Including aberration moves Mars by under 30 arcseconds."""

    t = PERIHELION_2024
    with_ab = geo_vector(Body.MARS, t, True)
    without = geo_vector(Body.MARS, t, False)
    angle_asec = (with_ab.unit() - without.unit()).length() * 206264.806

    assert 0.0 < angle_asec < 30.0


def test_equator_rejects_earth() -> None:
    """The Earth cannot be observed from its own surface."""

    with pytest.raises(UnsupportedBodyError):
        equator(Body.EARTH, PERIHELION_2024, LONDON, True, True)


def test_sun_at_march_equinox() -> None:
    """At the March 2024 equinox the Sun is near RA 0h, Dec 0."""

    t = Instant.from_calendar(2024, 3, 20, 3, 6)
    eq = equator(Body.SUN, t, LONDON, True, True)

    assert min(eq.ra, 24.0 - eq.ra) < 0.01
    assert abs(eq.dec) < 0.01
    # J2000 longitude trails the equinox of date by the precession since 2000.
    assert ecliptic_longitude(Body.EARTH, t) == pytest.approx(179.66, abs=0.05)


def test_equator_j2000_and_of_date_differ() -> None:
    """Precession since 2000 shifts RA by a few arcminutes."""

    j2000 = equator(Body.MARS, PERIHELION_2024, LONDON, False, True)
    of_date = equator(Body.MARS, PERIHELION_2024, LONDON, True, True)

    assert 0.0 < abs(of_date.ra - j2000.ra) < 0.05
    assert j2000.vec.frame is Frame.EQJ


def test_horizon_zenith_and_refraction() -> None:
    """A body at the local zenith has altitude 90; refraction lifts low bodies."""

    t = PERIHELION_2024
    obs = Observer(30.0, 0.0)

    lst = sidereal_time(t)
    overhead = horizon(t, obs, lst, 30.0)
    assert overhead.altitude == pytest.approx(90.0, abs=1e-9)

    low = horizon(t, obs, lst, 30.0 - 89.0)
    low_refracted = horizon(t, obs, lst, 30.0 - 89.0, Refraction.NORMAL)
    assert low.altitude == pytest.approx(1.0, abs=1e-9)
    assert low.azimuth == pytest.approx(180.0, abs=1e-6)
    assert low_refracted.altitude > low.altitude + 0.3


def test_ecliptic_of_sun_is_on_ecliptic() -> None:
    """The geocentric Sun has near-zero ecliptic latitude."""

    ecl = ecliptic(geo_vector(Body.SUN, PERIHELION_2024, True))

    assert abs(ecl.elat) < 0.001
    assert ecl.vec.frame is Frame.ECT


def test_longitude_errors() -> None:
    """Heliocentric longitude of the Sun and geocentric angles of the Earth are undefined."""

    with pytest.raises(UnsupportedBodyError):
        ecliptic_longitude(Body.SUN, PERIHELION_2024)
    with pytest.raises(UnsupportedBodyError):
        pair_longitude(Body.EARTH, Body.SUN, PERIHELION_2024)
    with pytest.raises(UnsupportedBodyError):
        angle_from_sun(Body.EARTH, PERIHELION_2024)


def test_angle_from_sun_for_moon_near_full() -> None:
    """Near full moon the Moon is opposite the Sun."""

    full_moon = Instant.from_calendar(2024, 1, 25, 17, 54)

    assert angle_from_sun(Body.MOON, full_moon) > 170.0


def test_star_position() -> None:
    """A defined star is fixed in direction from the Sun."""

    stars = StarTable().with_star(Body.STAR4, 6.0, 0.0, 10.0)
    vec = helio_vector(Body.STAR4, PERIHELION_2024, stars)

    assert vec.y > 0.0
    assert abs(vec.x) / vec.length() < 1e-12
    geo = geo_vector(Body.STAR4, PERIHELION_2024, True, stars)
    assert (geo - vec).length() < 1.1
