"""Tests for named rotations between reference frames."""

from __future__ import annotations

import numpy as np
import pytest

from ephemeris_engine import frames
from ephemeris_engine.observer import Observer
from ephemeris_engine.rotation import RotationMatrix
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, Vector

TIME = Instant.from_calendar(2023, 8, 22)
OBSERVER = Observer(6.56784, -1.5674, 0.0)


def _round_trip(forward: RotationMatrix, backward: RotationMatrix) -> np.ndarray:
    return backward.rot @ forward.rot


@pytest.mark.parametrize(
    ('forward', 'backward'),
    [
        (frames.rotation_eqj_ecl(), frames.rotation_ecl_eqj()),
        (frames.rotation_eqj_gal(), frames.rotation_gal_eqj()),
        (frames.rotation_eqj_eqd(TIME), frames.rotation_eqd_eqj(TIME)),
        (frames.rotation_eqd_ect(TIME), frames.rotation_ect_eqd(TIME)),
        (frames.rotation_eqj_ect(TIME), frames.rotation_ect_eqj(TIME)),
        (frames.rotation_eqd_hor(TIME, OBSERVER), frames.rotation_hor_eqd(TIME, OBSERVER)),
        (frames.rotation_eqj_hor(TIME, OBSERVER), frames.rotation_hor_eqj(TIME, OBSERVER)),
        (frames.rotation_ecl_hor(TIME, OBSERVER), frames.rotation_hor_ecl(TIME, OBSERVER)),
        (frames.rotation_eqd_ecl(TIME), frames.rotation_ecl_eqd(TIME)),
    ],
)
def test_rotation_pairs_are_inverses(
    forward: RotationMatrix, backward: RotationMatrix
) -> None:
    """Each named rotation and its reverse compose to the identity."""

    assert forward.is_orthonormal()
    assert backward.is_orthonormal()
    assert np.allclose(_round_trip(forward, backward), np.eye(3), atol=1e-12)
    assert forward.source is backward.target
    assert forward.target is backward.source


def test_frame_tags() -> None:
    """Named rotations carry their source and target frames."""

    rot = frames.rotation_eqj_hor(TIME, OBSERVER)

    assert rot.source is Frame.EQJ
    assert rot.target is Frame.HOR
    assert frames.rotation_jup_eqj().source is Frame.JUP


def test_ecliptic_pole_maps_to_ecliptic_z() -> None:
    """The J2000 ecliptic pole lies 23.44 degrees from the celestial pole."""

    pole = frames.rotation_ecl_eqj().rotate_vector(Vector(0.0, 0.0, 1.0, TIME, Frame.ECL))

    assert pole.frame is Frame.EQJ
    assert np.degrees(np.arccos(pole.z)) == pytest.approx(23.4393, abs=1e-3)


def test_zenith_points_up() -> None:
    """The horizontal zenith maps back to a unit vector whose declination is the latitude."""

    zenith = frames.rotation_hor_eqd(TIME, OBSERVER).rotate_vector(
        Vector(0.0, 0.0, 1.0, TIME, Frame.HOR)
    )

    assert np.degrees(np.arcsin(zenith.z)) == pytest.approx(OBSERVER.latitude, abs=1e-9)


def test_galactic_center_direction() -> None:
    """The galactic x axis points toward RA 17h45.6m, Dec -28.94."""

    center = frames.rotation_gal_eqj().rotate_vector(Vector(1.0, 0.0, 0.0, TIME, Frame.GAL))
    ra_hours = (np.degrees(np.arctan2(center.y, center.x)) % 360.0) / 15.0

    assert ra_hours == pytest.approx(17.76, abs=0.01)
    assert np.degrees(np.arcsin(center.z)) == pytest.approx(-28.94, abs=0.01)
