"""Tests for frame-tagged rotation matrices."""

from __future__ import annotations

import numpy as np
import pytest

from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.rotation import RotationMatrix, spin
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, StateVector, Vector

T0 = Instant(0.0)


def test_pivot_is_right_handed() -> None:
    """A +90 degree pivot about z carries x onto y."""

    rot = RotationMatrix.identity().pivot(2, 90.0)
    out = rot.rotate_vector(Vector(1.0, 0.0, 0.0, T0))

    assert out.x == pytest.approx(0.0, abs=1e-15)
    assert out.y == pytest.approx(1.0)
    assert out.z == pytest.approx(0.0, abs=1e-15)


def test_pivot_rejects_bad_axis() -> None:
    """Only axes 0, 1 and 2 exist."""

    with pytest.raises(InvalidArgumentError):
        RotationMatrix.identity().pivot(3, 10.0)
    with pytest.raises(InvalidArgumentError):
        RotationMatrix.identity().pivot(0, float('nan'))


def test_inverse_undoes_rotation() -> None:
    """Combining a rotation with its inverse gives the identity."""

    rot = RotationMatrix.identity().pivot(0, 30.0).pivot(1, -45.0).pivot(2, 120.0)
    both = rot.combine(rot.inverse())

    assert np.allclose(both.rot, np.eye(3), atol=1e-12)
    assert rot.is_orthonormal()


def test_combine_applies_self_first() -> None:
    """combine(a, b) gives the same result as applying a then b."""

    a = RotationMatrix.identity().pivot(0, 25.0)
    b = RotationMatrix.identity().pivot(2, 70.0)
    v = Vector(0.3, -0.4, 0.8, T0)

    expected = b.rotate_vector(a.rotate_vector(v))
    actual = a.combine(b).rotate_vector(v)

    assert actual.as_array() == pytest.approx(expected.as_array())


def test_frame_tags_checked() -> None:
    """Chaining or applying a matrix outside its frames raises."""

    eqj_to_ecl = RotationMatrix(np.eye(3), Frame.EQJ, Frame.ECL)
    hor_to_eqd = RotationMatrix(np.eye(3), Frame.HOR, Frame.EQD)

    with pytest.raises(InvalidArgumentError):
        eqj_to_ecl.combine(hor_to_eqd)
    with pytest.raises(InvalidArgumentError):
        eqj_to_ecl.rotate_vector(Vector(1.0, 0.0, 0.0, T0, Frame.HOR))
    assert eqj_to_ecl.rotate_vector(Vector(1.0, 0.0, 0.0, T0)).frame is Frame.ECL


def test_invalid_matrix_rejected() -> None:
    """Non-3x3 or non-finite arrays are not rotations."""

    with pytest.raises(InvalidArgumentError):
        RotationMatrix(np.eye(2))
    bad = np.eye(3)
    bad[0, 0] = np.inf
    with pytest.raises(InvalidArgumentError):
        RotationMatrix(bad)


def test_matrix_is_immutable() -> None:
    """The stored array cannot be written through."""

    rot = RotationMatrix.identity()

    with pytest.raises(ValueError):
        rot.rot[0, 0] = 2.0


def test_rotate_state_rotates_velocity() -> None:
    """Velocity is rotated with the same matrix as position."""

    rot = RotationMatrix.identity().pivot(2, 90.0)
    state = rot.rotate_state(StateVector(1.0, 0.0, 0.0, 0.0, 0.0, 1.0, T0))

    assert state.y == pytest.approx(1.0)
    assert state.vz == pytest.approx(1.0)


def test_spin_about_z() -> None:
    """spin turns the x axis toward -y for a positive angle."""

    out = spin(90.0, [1.0, 0.0, 0.0])

    assert out == pytest.approx([0.0, -1.0, 0.0], abs=1e-15)
