"""Tests for equinox and solstice searches."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.seasons import search_sun_longitude, seasons, sun_position
from ephemeris_engine.time_utils import Instant

TOLERANCE = 15.0 / 1440.0


def test_seasons_2024() -> None:
    """The 2024 equinoxes and solstices match published times."""

    info = seasons(2024)

    assert info.mar_equinox.ut == pytest.approx(Instant.from_calendar(2024, 3, 20, 3, 6).ut, abs=TOLERANCE)
    assert info.jun_solstice.ut == pytest.approx(Instant.from_calendar(2024, 6, 20, 20, 51).ut, abs=TOLERANCE)
    assert info.sep_equinox.ut == pytest.approx(Instant.from_calendar(2024, 9, 22, 12, 44).ut, abs=TOLERANCE)
    assert info.dec_solstice.ut == pytest.approx(Instant.from_calendar(2024, 12, 21, 9, 21).ut, abs=TOLERANCE)


def test_seasons_dates() -> None:
    """Calendar dates of the 2024 events."""

    info = seasons(2024)
    dates = [
        t.to_datetime().date().isoformat()
        for t in (info.mar_equinox, info.jun_solstice, info.sep_equinox, info.dec_solstice)
    ]

    assert dates == ['2024-03-20', '2024-06-20', '2024-09-22', '2024-12-21']


def test_seasons_accepts_datetime() -> None:
    """A datetime selects its year."""

    info = seasons(datetime(1999, 7, 4, tzinfo=timezone.utc))

    assert info.mar_equinox.to_datetime().year == 1999


@pytest.mark.parametrize('year', [2024.0, '2024', True])
def test_seasons_rejects_non_integer(year: object) -> None:
    """Only integer years and datetimes are accepted."""

    with pytest.raises(InvalidArgumentError):
        seasons(year)  # type: ignore[arg-type]


def test_sun_position_at_equinox() -> None:
    """At the equinox the Sun's apparent longitude is zero."""

    info = seasons(2024)
    lon = sun_position(info.mar_equinox).elon

    assert min(lon, 360.0 - lon) < 1e-4


def test_search_sun_longitude_none_outside_window() -> None:
    """A longitude not reached inside the window yields None."""

    assert search_sun_longitude(90.0, Instant.from_calendar(2024, 1, 1), 30.0) is None
