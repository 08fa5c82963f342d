"""Tests for lunar, global solar and local solar eclipse searches."""

from __future__ import annotations

import math

import pytest

from ephemeris_engine.eclipses import (
    EclipseKind,
    eclipse_kind_from_umbra,
    next_global_solar_eclipse,
    next_lunar_eclipse,
    next_local_solar_eclipse,
    obscuration,
    search_global_solar_eclipse,
    search_local_solar_eclipse,
    search_lunar_eclipse,
)
from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.observer import Observer
from ephemeris_engine.time_utils import Instant

HOUR = 1.0 / 24.0
START_2024 = Instant.from_calendar(2024, 1, 1)


def test_obscuration_disjoint_and_concentric() -> None:
    """Separated discs do not overlap; concentric discs overlap by the smaller area."""

    assert obscuration(1.0, 1.0, 2.5) == 0.0
    assert obscuration(1.0, 2.0, 0.0) == 1.0
    assert obscuration(2.0, 1.0, 0.0) == pytest.approx(0.25)


def test_obscuration_contained_disc() -> None:
    """A small disc fully inside a larger one covers its area ratio."""

    assert obscuration(2.0, 1.0, 0.5) == pytest.approx(0.25)
    assert obscuration(1.0, 2.0, 0.5) == 1.0


def test_obscuration_half_overlap() -> None:
    """Equal discs whose edges pass through each other's centers overlap by about 39%."""

    expected = (2.0 * math.pi / 3.0 - math.sqrt(3.0) / 2.0) / math.pi

    assert obscuration(1.0, 1.0, 1.0) == pytest.approx(expected)


@pytest.mark.parametrize(('a', 'b', 'c'), [(0.0, 1.0, 0.5), (1.0, -1.0, 0.5), (1.0, 1.0, -0.1)])
def test_obscuration_invalid(a: float, b: float, c: float) -> None:
    """Non-positive radii and negative separations raise."""

    with pytest.raises(InvalidArgumentError):
        obscuration(a, b, c)


def test_kind_from_umbra() -> None:
    """A positive umbra means totality; a negative one means an annular eclipse."""

    assert eclipse_kind_from_umbra(10.0) is EclipseKind.TOTAL
    assert eclipse_kind_from_umbra(-10.0) is EclipseKind.ANNULAR


def test_lunar_eclipses_2024() -> None:
    """2024 had a penumbral eclipse on March 25 and a partial one on September 18."""

    first = search_lunar_eclipse(START_2024)
    second = next_lunar_eclipse(first.peak)

    assert first.kind is EclipseKind.PENUMBRAL
    assert first.peak.ut == pytest.approx(Instant.from_calendar(2024, 3, 25, 7, 13).ut, abs=HOUR)
    assert first.obscuration == 0.0
    assert first.partial_begin is None
    assert first.total_begin is None
    assert first.penumbral_begin < first.peak < first.penumbral_end

    assert second.kind is EclipseKind.PARTIAL
    assert second.peak.ut == pytest.approx(Instant.from_calendar(2024, 9, 18, 2, 44).ut, abs=HOUR)
    assert 0.0 < second.obscuration < 0.2
    assert second.partial_begin is not None
    assert second.partial_end is not None
    assert second.penumbral_begin < second.partial_begin < second.peak < second.partial_end
    assert second.total_begin is None


def test_total_lunar_eclipse_2025() -> None:
    """The March 14, 2025 lunar eclipse was total for about an hour."""

    info = search_lunar_eclipse(Instant.from_calendar(2025, 1, 1))

    assert info.kind is EclipseKind.TOTAL
    assert info.obscuration == 1.0
    assert info.peak.ut == pytest.approx(Instant.from_calendar(2025, 3, 14, 6, 59).ut, abs=HOUR)
    assert 25.0 < info.sd_total < 40.0
    assert info.sd_total < info.sd_partial < info.sd_penum


def test_lunar_eclipse_peaks_increase() -> None:
    """Successive lunar eclipses are strictly later."""

    info = search_lunar_eclipse(START_2024)
    previous = info.peak
    for _ in range(4):
        info = next_lunar_eclipse(info.peak)
        assert info.peak > previous
        previous = info.peak


def test_global_solar_eclipses_2024() -> None:
    """April 8, 2024 was total over North America; October 2, 2024 was annular."""

    first = search_global_solar_eclipse(START_2024)
    second = next_global_solar_eclipse(first.peak)

    assert first.kind is EclipseKind.TOTAL
    assert first.peak.ut == pytest.approx(Instant.from_calendar(2024, 4, 8, 18, 17).ut, abs=HOUR)
    assert first.latitude is not None
    assert first.longitude is not None
    assert first.latitude == pytest.approx(25.3, abs=1.0)
    assert first.longitude == pytest.approx(-104.1, abs=1.5)
    assert first.obscuration == 1.0

    assert second.kind is EclipseKind.ANNULAR
    assert second.peak.ut == pytest.approx(Instant.from_calendar(2024, 10, 2, 18, 45).ut, abs=HOUR)
    assert second.obscuration is not None
    assert 0.8 < second.obscuration < 1.0


def test_partial_global_eclipse_has_no_location() -> None:
    """The March 29, 2025 eclipse was partial; its axis missed the Earth."""

    info = search_global_solar_eclipse(Instant.from_calendar(2025, 1, 1))

    assert info.kind is EclipseKind.PARTIAL
    assert info.latitude is None
    assert info.longitude is None
    assert info.distance > 6000.0


def test_global_solar_eclipse_peaks_increase() -> None:
    """Successive solar eclipses are strictly later."""

    info = search_global_solar_eclipse(START_2024)
    previous = info.peak
    for _ in range(3):
        info = next_global_solar_eclipse(info.peak)
        assert info.peak > previous
        previous = info.peak


def test_local_total_eclipse_dallas() -> None:
    """Dallas saw about four minutes of totality on April 8, 2024."""

    dallas = Observer(32.78, -96.80, 130.0)
    info = search_local_solar_eclipse(START_2024, dallas)

    assert info.kind is EclipseKind.TOTAL
    assert info.obscuration == 1.0
    assert info.peak.time.ut == pytest.approx(Instant.from_calendar(2024, 4, 8, 18, 42).ut, abs=0.5 * HOUR)
    assert info.peak.altitude > 60.0
    assert info.total_begin is not None
    assert info.total_end is not None
    totality_minutes = (info.total_end.time.ut - info.total_begin.time.ut) * 1440.0
    assert 2.0 < totality_minutes < 5.0
    assert info.partial_begin.time < info.total_begin.time < info.peak.time
    assert info.peak.time < info.total_end.time < info.partial_end.time


def test_local_partial_eclipse_and_next() -> None:
    """An observer off the path sees a partial eclipse; later eclipses follow in order."""

    new_york = Observer(40.71, -74.01, 10.0)
    info = search_local_solar_eclipse(START_2024, new_york)

    assert info.kind is EclipseKind.PARTIAL
    assert info.total_begin is None
    assert 0.5 < info.obscuration < 1.0
    assert info.partial_begin.time < info.peak.time < info.partial_end.time

    following = next_local_solar_eclipse(info.peak.time, new_york)
    assert following.peak.time > info.peak.time
    assert following.partial_begin.altitude > 0.0 or following.partial_end.altitude > 0.0
