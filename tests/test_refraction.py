"""Tests for atmospheric refraction models."""

from __future__ import annotations

import pytest

from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.refraction import (
    Refraction,
    horizon_from_vector,
    inverse_refraction,
    refraction,
    vector_from_horizon,
)
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Spherical


def test_refraction_at_horizon() -> None:
    """Normal refraction lifts a body on the horizon by about 29 arcminutes."""

    assert refraction(Refraction.NORMAL, 0.0) == pytest.approx(0.483, abs=0.002)


def test_refraction_none_and_out_of_range() -> None:
    """No refraction when disabled or outside [-90, 90]."""

    assert refraction(Refraction.NONE, 0.0) == 0.0
    assert refraction(Refraction.NORMAL, 91.0) == 0.0
    assert refraction(Refraction.NORMAL, -91.0) == 0.0


def test_refraction_small_at_zenith() -> None:
    """Refraction almost vanishes overhead."""

    assert refraction(Refraction.NORMAL, 90.0) < 1e-4


def test_normal_tapers_below_horizon() -> None:
    """NORMAL tapers to zero at the nadir while JPL_HOR does not."""

    assert refraction(Refraction.NORMAL, -90.0) == pytest.approx(0.0, abs=1e-12)
    assert refraction(Refraction.JPL_HOR, -90.0) > 0.1
    assert refraction(Refraction.NORMAL, -45.0) < refraction(Refraction.JPL_HOR, -45.0)


def test_refraction_rejects_nan() -> None:
    """Non-finite altitudes raise."""

    with pytest.raises(InvalidArgumentError):
        refraction(Refraction.NORMAL, float('nan'))


@pytest.mark.parametrize('bent', [-5.0, 0.0, 0.5, 10.0, 45.0, 89.0])
def test_inverse_refraction_round_trip(bent: float) -> None:
    """Removing then re-applying refraction returns the apparent altitude."""

    correction = inverse_refraction(Refraction.NORMAL, bent)
    geometric = bent + correction

    assert correction <= 0.0
    assert geometric + refraction(Refraction.NORMAL, geometric) == pytest.approx(bent, abs=1e-10)


def test_horizon_vector_round_trip() -> None:
    """Apparent altitude and azimuth survive a trip through a HOR vector."""

    sphere = Spherical(2.0, 135.0, 1.0)
    vec = vector_from_horizon(sphere, Instant(0.0), Refraction.NORMAL)
    back = horizon_from_vector(vec, Refraction.NORMAL)

    assert back.lat == pytest.approx(2.0, abs=1e-9)
    assert back.lon == pytest.approx(135.0, abs=1e-9)
