"""Tests for the US Standard Atmosphere model."""

from __future__ import annotations

import pytest

from ephemeris_engine.atmosphere import atmosphere
from ephemeris_engine.errors import InvalidArgumentError


def test_sea_level() -> None:
    """Sea level has standard pressure and temperature and unit density."""

    info = atmosphere(0.0)

    assert info.pressure == pytest.approx(101325.0)
    assert info.temperature == pytest.approx(288.15)
    assert info.density == pytest.approx(1.0)


def test_tropopause_and_stratosphere() -> None:
    """Temperature falls to 216.65 K at 11 km and stays there to 20 km."""

    low = atmosphere(11000.0)
    mid = atmosphere(15000.0)

    assert low.temperature == pytest.approx(216.65)
    assert low.pressure == pytest.approx(22632.0, rel=1e-3)
    assert mid.temperature == pytest.approx(216.65)
    assert mid.pressure < low.pressure


def test_upper_layer_warms() -> None:
    """Above 20 km temperature rises again while pressure keeps dropping."""

    upper = atmosphere(30000.0)

    assert upper.temperature == pytest.approx(226.65)
    assert upper.pressure < atmosphere(20000.0).pressure
    assert 0.0 < upper.density < 0.02


def test_below_sea_level() -> None:
    """Dead Sea depths are within range and denser than sea level."""

    assert atmosphere(-430.0).density > 1.0


@pytest.mark.parametrize('elevation', [-501.0, 100001.0, float('inf')])
def test_out_of_range(elevation: float) -> None:
    """Elevations outside -500..100000 m raise."""

    with pytest.raises(InvalidArgumentError):
        atmosphere(elevation)
