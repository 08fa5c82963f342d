"""Tests for the Instant type, Delta-T models and rms-julian wrappers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ephemeris_engine import time_utils
from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.time_utils import Instant


def test_ensure_leapsecs_uses_configured_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Leap-second init loads the kernel named by EPHEMERIS_LEAPSECS."""

    calls: list[tuple[object, ...]] = []

    def _load_lsk(*args: object) -> None:
        calls.append(args)

    monkeypatch.setattr('julian.load_lsk', _load_lsk)
    monkeypatch.setattr('ephemeris_engine.time_utils.get_leapsecs_path', lambda: 'dummy.tls')
    monkeypatch.setattr(time_utils, '_leapsecs_loaded', False)

    time_utils._ensure_leapsecs()

    assert calls == [('dummy.tls',)]
    assert time_utils._leapsecs_loaded


def test_ensure_leapsecs_falls_back_to_bundled_kernel(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unreadable kernel path falls back to the rms-julian bundled LSK."""

    calls: list[tuple[object, ...]] = []

    def _load_lsk(*args: object) -> None:
        calls.append(args)
        if args:
            raise OSError('missing')

    monkeypatch.setattr('julian.load_lsk', _load_lsk)
    monkeypatch.setattr('ephemeris_engine.time_utils.get_leapsecs_path', lambda: 'missing.tls')
    monkeypatch.setattr(time_utils, '_leapsecs_loaded', False)

    time_utils._ensure_leapsecs()

    assert calls == [('missing.tls',), ()]


def test_parse_datetime_accepts_iso_z_suffix() -> None:
    """ISO-8601 trailing Z parses as UTC like the same timestamp without Z."""

    with_z = time_utils.parse_datetime('2022-08-18T00:01:47Z')
    without_z = time_utils.parse_datetime('2022-08-18T00:01:47')

    assert with_z is not None
    assert without_z is not None
    assert with_z == without_z


def test_parse_datetime_accepts_year_hms_form() -> None:
    """'YYYY HH:MM:SS' parses as Jan 1 at the given time."""

    compact = time_utils.parse_datetime('1700 01:01:01')
    explicit = time_utils.parse_datetime('1700-01-01 01:01:01')

    assert compact is not None
    assert explicit is not None
    assert compact == explicit


def test_parse_datetime_rejects_garbage() -> None:
    """Unparseable text yields None rather than raising."""

    assert time_utils.parse_datetime('not a date') is None


def test_epoch_formats_as_noon() -> None:
    """UT 0 is 2000-01-01 at noon."""

    assert str(Instant(0.0)) == '2000-01-01T12:00:00.000Z'


def test_from_calendar_matches_day_count() -> None:
    """Midnight on 2000-01-02 is half a day after the epoch."""

    assert Instant.from_calendar(2000, 1, 2).ut == pytest.approx(0.5)
    assert Instant.from_calendar(2000, 1, 1, 18).ut == pytest.approx(0.25)


def test_from_string_and_datetime_agree() -> None:
    """A timestamp string and the equivalent aware datetime give the same UT."""

    a = Instant.from_string('2023-08-22T00:00:00Z')
    b = Instant.from_datetime(datetime(2023, 8, 22, tzinfo=timezone.utc))

    assert a.ut == pytest.approx(b.ut, abs=1e-9)
    assert str(a) == '2023-08-22T00:00:00.000Z'


def test_from_string_invalid_raises() -> None:
    """Bad timestamps raise InvalidArgumentError."""

    with pytest.raises(InvalidArgumentError):
        Instant.from_string('yesterday-ish')


def test_to_datetime_round_trip() -> None:
    """to_datetime returns an aware UTC datetime at millisecond resolution."""

    dt = datetime(2024, 3, 15, 6, 7, 8, 250000, tzinfo=timezone.utc)

    assert Instant.from_datetime(dt).to_datetime() == dt


def test_make_coerces_supported_types() -> None:
    """make accepts Instants, numbers, strings and datetimes."""

    t = Instant(100.0)

    assert Instant.make(t) is t
    assert Instant.make(100).ut == pytest.approx(100.0)
    assert Instant.make('2000-01-01T12:00:00Z').ut == pytest.approx(0.0, abs=1e-9)
    with pytest.raises(InvalidArgumentError):
        Instant.make(True)
    with pytest.raises(InvalidArgumentError):
        Instant.make([1.0])  # type: ignore[arg-type]


def test_non_finite_ut_rejected() -> None:
    """NaN and infinity are not valid times."""

    with pytest.raises(InvalidArgumentError):
        Instant(float('nan'))
    with pytest.raises(InvalidArgumentError):
        Instant(float('inf'))


def test_tt_leads_ut_by_delta_t() -> None:
    """In 2024 TT runs about 69 seconds ahead of UT."""

    t = Instant.from_calendar(2024, 1, 1)
    delta_seconds = (t.tt - t.ut) * 86400.0

    assert 60.0 < delta_seconds < 80.0


def test_terrestrial_time_round_trip() -> None:
    """from_terrestrial_time inverts the UT to TT conversion."""

    for ut in (-36525.0, 0.0, 8766.25):
        t = Instant(ut)
        back = Instant.from_terrestrial_time(t.tt)
        assert back.ut == pytest.approx(ut, abs=1e-9)


def test_add_days_and_ordering() -> None:
    """Instants order by UT and add_days moves forward or backward."""

    t = Instant(10.0)

    assert t.add_days(1.5).ut == pytest.approx(11.5)
    assert t.add_days(-20.0).ut == pytest.approx(-10.0)
    assert t < t.add_days(1e-6)


def test_jpl_horizons_model_is_clamped() -> None:
    """The JPL Horizons model is frozen after early 2017."""

    limit = 17.0 * 365.242190
    frozen = time_utils.delta_t_jpl_horizons(limit)

    assert time_utils.delta_t_jpl_horizons(limit + 3000.0) == frozen
    assert time_utils.delta_t_jpl_horizons(0.0) == time_utils.delta_t_espenak_meeus(0.0)


def test_set_delta_t_model(monkeypatch: pytest.MonkeyPatch) -> None:
    """Models can be selected by name or callable; unknown names raise."""

    monkeypatch.setattr(time_utils, '_delta_t_func', None)

    time_utils.set_delta_t_model('JPL-Horizons')
    assert time_utils.get_delta_t_function() is time_utils.delta_t_jpl_horizons

    time_utils.set_delta_t_model(lambda ut: 0.0)
    assert Instant(123.0).tt == pytest.approx(123.0)

    with pytest.raises(InvalidArgumentError):
        time_utils.set_delta_t_model('sundial')


def test_configured_model_resolved_lazily(monkeypatch: pytest.MonkeyPatch) -> None:
    """The active model comes from configuration on first use."""

    monkeypatch.setattr(time_utils, '_delta_t_func', None)
    monkeypatch.setattr('ephemeris_engine.time_utils.get_delta_t_model', lambda: 'jpl-horizons')

    assert time_utils.get_delta_t_function() is time_utils.delta_t_jpl_horizons
