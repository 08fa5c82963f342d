"""Tests for geographic observers and their geocentric vectors."""

from __future__ import annotations

import pytest

from ephemeris_engine.constants import EARTH_EQUATORIAL_RADIUS_KM, KM_PER_AU
from ephemeris_engine.earth_orientation import OrientationCache
from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.observer import (
    Observer,
    observer_gravity,
    observer_state,
    observer_vector,
    vector_observer,
)
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame

TIME = Instant.from_calendar(2024, 3, 15, 6, 0, 0)


@pytest.mark.parametrize('lat', [-90.5, 91.0])
def test_latitude_out_of_range(lat: float) -> None:
    """Latitudes beyond the poles are rejected."""

    with pytest.raises(InvalidArgumentError):
        Observer(lat, 0.0)


@pytest.mark.parametrize('lon', [-180.5, 181.0, 1000.0, float('nan'), float('inf')])
def test_longitude_out_of_range(lon: float) -> None:
    """Longitudes outside -180..+180 and non-finite longitudes are rejected."""

    with pytest.raises(InvalidArgumentError):
        Observer(10.0, lon, 0.0)


@pytest.mark.parametrize('lon', [-180.0, 180.0])
def test_longitude_limits_accepted(lon: float) -> None:
    """The antimeridian itself is a valid longitude."""

    assert Observer(0.0, lon).longitude == lon


def test_non_finite_height_rejected() -> None:
    """Height must be a finite number."""

    with pytest.raises(InvalidArgumentError):
        Observer(0.0, 0.0, float('nan'))


def test_gravity_varies_with_latitude_and_height() -> None:
    """WGS 84 gravity is about 9.780 at the equator and stronger at the poles."""

    equator = observer_gravity(0.0, 0.0)

    assert equator == pytest.approx(9.7803, abs=1e-3)
    assert observer_gravity(90.0, 0.0) == pytest.approx(9.8322, abs=1e-3)
    assert observer_gravity(0.0, 10000.0) < equator


def test_observer_vector_length() -> None:
    """An equatorial sea-level observer sits one Earth radius from the center."""

    vec = observer_vector(TIME, Observer(0.0, 45.0), True)

    assert vec.frame is Frame.EQD
    assert vec.length() * KM_PER_AU == pytest.approx(EARTH_EQUATORIAL_RADIUS_KM, abs=1e-6)


def test_observer_vector_j2000_frame() -> None:
    """Without of_date the vector is tagged J2000."""

    vec = observer_vector(TIME, Observer(51.5074, -0.1278, 35.0), False)

    assert vec.frame is Frame.EQJ


@pytest.mark.parametrize('of_date', [True, False])
@pytest.mark.parametrize(
    'observer',
    [Observer(51.5074, -0.1278, 35.0), Observer(-33.86, 151.21, 58.0), Observer(6.56784, -1.5674)],
)
def test_vector_observer_round_trip(observer: Observer, of_date: bool) -> None:
    """vector_observer recovers the location that produced a vector."""

    cache = OrientationCache()
    back = vector_observer(observer_vector(TIME, observer, of_date, cache), of_date, cache)

    assert back.latitude == pytest.approx(observer.latitude, abs=1e-6)
    assert back.longitude == pytest.approx(observer.longitude, abs=1e-6)
    assert back.height == pytest.approx(observer.height, abs=1e-2)


def test_observer_state_velocity() -> None:
    """Equatorial surface speed is about 0.465 km/s."""

    state = observer_state(TIME, Observer(0.0, 0.0), True)
    speed_km_s = state.velocity().length() * KM_PER_AU / 86400.0

    assert speed_km_s == pytest.approx(0.465, abs=0.002)
    assert state.position().as_array() == pytest.approx(
        observer_vector(TIME, Observer(0.0, 0.0), True).as_array()
    )
