"""Tests for frame-tagged vectors and coordinate conversions."""

from __future__ import annotations

import pytest

from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import (
    Frame,
    Spherical,
    StateVector,
    Vector,
    angle_between,
    equator_from_vector,
    sphere_from_vector,
    toggle_azimuth_direction,
    vector_from_equator,
    vector_from_sphere,
)

T0 = Instant(0.0)


def test_vector_arithmetic() -> None:
    """Addition, subtraction, scaling and products behave componentwise."""

    a = Vector(1.0, 2.0, 3.0, T0)
    b = Vector(-1.0, 0.5, 2.0, T0)

    assert (a + b).as_array().tolist() == [0.0, 2.5, 5.0]
    assert (a - b).as_array().tolist() == [2.0, 1.5, 1.0]
    assert (2.0 * a).z == 6.0
    assert (a / 2.0).x == 0.5
    assert a.dot(b) == pytest.approx(6.0)
    c = Vector(1.0, 0.0, 0.0, T0).cross(Vector(0.0, 1.0, 0.0, T0))
    assert c.as_array().tolist() == [0.0, 0.0, 1.0]


def test_frame_mismatch_raises() -> None:
    """Mixing vectors from different frames is rejected."""

    a = Vector(1.0, 0.0, 0.0, T0, Frame.EQJ)
    b = Vector(0.0, 1.0, 0.0, T0, Frame.ECL)

    with pytest.raises(InvalidArgumentError):
        a + b
    with pytest.raises(InvalidArgumentError):
        a.dot(b)


def test_any_frame_is_compatible() -> None:
    """Untagged vectors combine with any frame and take on its tag."""

    a = Vector(1.0, 0.0, 0.0, T0, Frame.ANY)
    b = Vector(0.0, 1.0, 0.0, T0, Frame.ECL)

    assert (a + b).frame is Frame.ECL


def test_unit_of_zero_vector_raises() -> None:
    """A zero vector has no direction."""

    with pytest.raises(InvalidArgumentError):
        Vector(0.0, 0.0, 0.0, T0).unit()
    assert Vector(3.0, 0.0, 4.0, T0).unit().length() == pytest.approx(1.0)


def test_state_vector_parts() -> None:
    """A state splits into position and velocity and negates both."""

    state = StateVector(1.0, 2.0, 3.0, 0.1, 0.2, 0.3, T0)
    neg = -state

    assert state.position().length() == pytest.approx(14.0**0.5)
    assert neg.velocity().as_array().tolist() == [-0.1, -0.2, -0.3]
    assert (state - state).x == 0.0


def test_angle_between() -> None:
    """Perpendicular and opposite vectors give 90 and 180 degrees."""

    x = Vector(1.0, 0.0, 0.0, T0)
    y = Vector(0.0, 2.0, 0.0, T0)

    assert angle_between(x, y) == pytest.approx(90.0)
    assert angle_between(x, -x) == pytest.approx(180.0)
    with pytest.raises(InvalidArgumentError):
        angle_between(x, Vector(0.0, 0.0, 0.0, T0))


def test_sphere_round_trip() -> None:
    """Spherical to Cartesian and back preserves coordinates."""

    sphere = Spherical(-23.5, 301.25, 2.0)
    back = sphere_from_vector(vector_from_sphere(sphere, T0))

    assert back.lat == pytest.approx(-23.5)
    assert back.lon == pytest.approx(301.25)
    assert back.dist == pytest.approx(2.0)


def test_sphere_from_polar_vector() -> None:
    """Vectors along the z axis have longitude 0 and latitude +/-90."""

    assert sphere_from_vector(Vector(0.0, 0.0, -2.0, T0)) == Spherical(-90.0, 0.0, 2.0)
    with pytest.raises(InvalidArgumentError):
        sphere_from_vector(Vector(0.0, 0.0, 0.0, T0))


def test_equator_round_trip() -> None:
    """RA in hours and declination in degrees survive the vector conversion."""

    vec = vector_from_equator(18.5, 42.0, 1.5, T0)
    equ = equator_from_vector(vec)

    assert equ.ra == pytest.approx(18.5)
    assert equ.dec == pytest.approx(42.0)
    assert equ.dist == pytest.approx(1.5)
    assert 'RA' in str(equ)


@pytest.mark.parametrize(('az', 'expected'), [(0.0, 0.0), (90.0, 270.0), (359.0, 1.0)])
def test_toggle_azimuth_direction(az: float, expected: float) -> None:
    """Azimuths flip between clockwise and counterclockwise."""

    assert toggle_azimuth_direction(az) == pytest.approx(expected)
