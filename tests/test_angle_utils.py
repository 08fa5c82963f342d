"""Tests for angle normalization and formatting helpers."""

from __future__ import annotations

import pytest

from ephemeris_engine.angle_utils import dms_string, longitude_offset, normalize_longitude, verify_number
from ephemeris_engine.errors import InvalidArgumentError


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [(0.0, 0.0), (360.0, 0.0), (-10.0, 350.0), (725.0, 5.0), (359.5, 359.5)],
)
def test_normalize_longitude(raw: float, expected: float) -> None:
    """Angles wrap into [0, 360)."""

    assert normalize_longitude(raw) == pytest.approx(expected)


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [(180.0, 180.0), (-180.0, 180.0), (190.0, -170.0), (-350.0, 10.0), (0.0, 0.0)],
)
def test_longitude_offset(raw: float, expected: float) -> None:
    """Differences wrap into (-180, 180]."""

    assert longitude_offset(raw) == pytest.approx(expected)


def test_verify_number_accepts_numeric_strings_and_ints() -> None:
    """Finite numeric input is returned as float."""

    assert verify_number(3) == 3.0
    assert verify_number('2.5') == 2.5  # type: ignore[arg-type]


@pytest.mark.parametrize('bad', [float('nan'), float('inf'), 'abc', None])
def test_verify_number_rejects(bad: object) -> None:
    """Non-finite or non-numeric input raises InvalidArgumentError."""

    with pytest.raises(InvalidArgumentError):
        verify_number(bad)  # type: ignore[arg-type]


def test_invalid_argument_is_value_error() -> None:
    """Callers can catch argument errors as ValueError."""

    with pytest.raises(ValueError):
        verify_number(float('nan'))


def test_dms_string_positive_and_negative() -> None:
    """Degrees, minutes and seconds with the requested separators."""

    assert dms_string(12.5, 'hms') == ' 12h 30m 00.000s'
    assert dms_string(-0.5, 'dms') == ' -0d 30m 00.000s'
