"""Tests for transits of Mercury and Venus."""

from __future__ import annotations

import pytest

from ephemeris_engine.bodies import Body
from ephemeris_engine.errors import UnsupportedBodyError
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.transits import next_transit, search_transit

HOUR = 1.0 / 24.0


def test_mercury_transits() -> None:
    """Mercury transited the Sun on 2003-05-07 and 2006-11-08."""

    first = search_transit(Body.MERCURY, Instant.from_calendar(2000, 1, 1))
    second = next_transit(Body.MERCURY, first.peak)

    assert first.peak.ut == pytest.approx(Instant.from_calendar(2003, 5, 7, 7, 52).ut, abs=HOUR)
    assert second.peak.ut == pytest.approx(Instant.from_calendar(2006, 11, 8, 21, 41).ut, abs=HOUR)
    for info in (first, second):
        assert info.start < info.peak < info.finish
        assert 3.0 < (info.finish.ut - info.start.ut) * 24.0 < 6.0
        assert 0.0 < info.separation < 16.5


def test_venus_transit_2004() -> None:
    """Venus transited the Sun on 2004-06-08, lasting about six hours."""

    info = search_transit(Body.VENUS, Instant.from_calendar(2000, 1, 1))

    assert info.peak.ut == pytest.approx(Instant.from_calendar(2004, 6, 8, 8, 20).ut, abs=HOUR)
    assert 5.5 < (info.finish.ut - info.start.ut) * 24.0 < 6.8


@pytest.mark.parametrize('body', [Body.MARS, Body.MOON, Body.EARTH])
def test_transit_unsupported(body: Body) -> None:
    """Only Mercury and Venus transit the Sun as seen from the Earth."""

    with pytest.raises(UnsupportedBodyError):
        search_transit(body, Instant(0.0))
