"""Tests for lunar and planetary apsides."""

from __future__ import annotations

import pytest

from ephemeris_engine.apsis import (
    ApsisKind,
    next_lunar_apsis,
    next_planet_apsis,
    search_lunar_apsis,
    search_planet_apsis,
)
from ephemeris_engine.bodies import Body
from ephemeris_engine.errors import UnsupportedBodyError
from ephemeris_engine.time_utils import Instant


def test_lunar_perigee_january_2024() -> None:
    """The first lunar apsis after 2024-01-02 is the January 13 perigee."""

    apsis = search_lunar_apsis(Instant.from_calendar(2024, 1, 2))

    assert apsis.kind is ApsisKind.PERICENTER
    assert apsis.time.ut == pytest.approx(Instant.from_calendar(2024, 1, 13, 10, 35).ut, abs=0.5)
    assert 356000.0 < apsis.dist_km < 371000.0


def test_lunar_apsides_alternate() -> None:
    """Perigee and apogee alternate roughly two weeks apart."""

    apsis = search_lunar_apsis(Instant.from_calendar(2024, 1, 2))
    for _ in range(6):
        nxt = next_lunar_apsis(apsis)
        assert nxt.kind is not apsis.kind
        assert 10.0 < nxt.time.ut - apsis.time.ut < 19.0
        if nxt.kind is ApsisKind.APOCENTER:
            assert 404000.0 < nxt.dist_km < 407000.0
        else:
            assert 356000.0 < nxt.dist_km < 371000.0
        apsis = nxt


def test_earth_perihelion_2024() -> None:
    """The Earth reached perihelion in early January 2024 at about 0.983 AU."""

    apsis = search_planet_apsis(Body.EARTH, Instant.from_calendar(2023, 12, 1))

    assert apsis.kind is ApsisKind.PERICENTER
    assert apsis.time.ut == pytest.approx(Instant.from_calendar(2024, 1, 3).ut, abs=2.0)
    assert apsis.dist_au == pytest.approx(0.9833, abs=5e-4)


def test_mars_apsides() -> None:
    """Mars passed perihelion in June 2022 and aphelion in May 2023."""

    peri = search_planet_apsis(Body.MARS, Instant.from_calendar(2022, 1, 1))
    aph = next_planet_apsis(Body.MARS, peri)

    assert peri.kind is ApsisKind.PERICENTER
    assert peri.time.ut == pytest.approx(Instant.from_calendar(2022, 6, 21).ut, abs=5.0)
    assert peri.dist_au == pytest.approx(1.3814, abs=0.002)
    assert aph.kind is ApsisKind.APOCENTER
    assert aph.time.ut == pytest.approx(Instant.from_calendar(2023, 5, 30).ut, abs=5.0)
    assert aph.dist_au == pytest.approx(1.6660, abs=0.002)


def test_neptune_apsis() -> None:
    """Neptune's apsis search returns an extreme distance after the start time."""

    start = Instant.from_calendar(2000, 1, 1)
    apsis = search_planet_apsis(Body.NEPTUNE, start)

    assert apsis.time > start
    assert 29.7 < apsis.dist_au < 30.5


@pytest.mark.parametrize('body', [Body.SUN, Body.MOON, Body.STAR1])
def test_planet_apsis_unsupported(body: Body) -> None:
    """Only planets have heliocentric apsides."""

    with pytest.raises(UnsupportedBodyError):
        search_planet_apsis(body, Instant(0.0))
