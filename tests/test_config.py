"""Tests for environment-driven configuration getters."""

from __future__ import annotations

import logging

import pytest

from ephemeris_engine import config


def test_delta_t_model_defaults_to_espenak_meeus(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without EPHEMERIS_DELTA_T_MODEL the Espenak-Meeus model is selected."""

    monkeypatch.delenv('EPHEMERIS_DELTA_T_MODEL', raising=False)

    assert config.get_delta_t_model() == 'espenak-meeus'


def test_delta_t_model_is_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    """Model names from the environment are normalized to lower case."""

    monkeypatch.setenv('EPHEMERIS_DELTA_T_MODEL', ' JPL-Horizons ')

    assert config.get_delta_t_model() == 'jpl-horizons'


def test_unknown_delta_t_model_falls_back_with_warning(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    """An unknown model name logs a warning and uses the default."""

    monkeypatch.setenv('EPHEMERIS_DELTA_T_MODEL', 'bogus')

    with caplog.at_level(logging.WARNING, logger='ephemeris_engine.config'):
        name = config.get_delta_t_model()

    assert name == config.DEFAULT_DELTA_T_MODEL
    assert 'bogus' in caplog.text


def test_leapsecs_path_empty_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unset EPHEMERIS_LEAPSECS means the bundled kernel."""

    monkeypatch.delenv('EPHEMERIS_LEAPSECS', raising=False)

    assert config.get_leapsecs_path() == ''


def test_leapsecs_path_is_stripped(monkeypatch: pytest.MonkeyPatch) -> None:
    """Whitespace around the kernel path is ignored."""

    monkeypatch.setenv('EPHEMERIS_LEAPSECS', '  /data/naif0012.tls ')

    assert config.get_leapsecs_path() == '/data/naif0012.tls'


def test_pluto_extrapolation_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """The Pluto extrapolation allowance defaults to one century."""

    monkeypatch.delenv('EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS', raising=False)

    assert config.get_pluto_max_extrapolation_days() == pytest.approx(36525.0)


def test_pluto_extrapolation_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """A numeric value in the environment is used as-is."""

    monkeypatch.setenv('EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS', '1000')

    assert config.get_pluto_max_extrapolation_days() == pytest.approx(1000.0)


@pytest.mark.parametrize('raw', ['abc', '-5', 'nan'])
def test_pluto_extrapolation_invalid_values_fall_back(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    """Non-numeric, negative and NaN allowances revert to the default."""

    monkeypatch.setenv('EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS', raw)

    assert config.get_pluto_max_extrapolation_days() == config.DEFAULT_PLUTO_MAX_EXTRAPOLATION_DAYS
