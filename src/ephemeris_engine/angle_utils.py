"""Angle normalization and formatting helpers."""

from __future__ import annotations

import math

from ephemeris_engine.errors import InvalidArgumentError


def verify_number(x: float) -> float:
    """Return x as float if finite; raise InvalidArgumentError otherwise.

    Parameters:
        x: Value to check.

    Returns:
        float(x).
    """
    try:
        value = float(x)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f'Value is not a number: {x!r}') from e
    if not math.isfinite(value):
        raise InvalidArgumentError(f'Value is not finite: {x!r}')
    return value


def normalize_longitude(lon: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    while lon < 0.0:
        lon += 360.0
    while lon >= 360.0:
        lon -= 360.0
    return lon


def longitude_offset(diff: float) -> float:
    """Wrap an angle difference in degrees into (-180, +180]."""
    offset = diff
    while offset <= -180.0:
        offset += 360.0
    while offset > 180.0:
        offset -= 360.0
    return offset


def dms_string(
    value: float,
    separator: str,
    ndecimal: int = 3,
) -> str:
    """Format angle as degrees/hours, minutes, seconds.

    Parameters:
        value: Angle in degrees (or hours for RA).
        separator: 3-character string for separators (e.g. 'hms' or 'dms').
        ndecimal: 3 or 4 decimal places for seconds.

    Returns:
        Formatted string (e.g. " 12h 30m 45.123s").
    """
    if len(separator) < 3:
        sep1 = sep2 = sep3 = ' '
    else:
        sep1, sep2, sep3 = separator[0], separator[1], separator[2]
    isign = 1 if value >= 0 else -1
    secs = abs(value * 3600.0)
    ntens = 10**ndecimal
    ims = round(secs * ntens)
    isec = ims // ntens
    ims = ims - ntens * isec
    imin = isec // 60
    isec = isec - 60 * imin
    ideg = imin // 60
    imin = imin - 60 * ideg
    ideg = ideg * isign
    if ndecimal == 3:
        frac = f'{ims:03d}'
    else:
        frac = f'{ims:04d}'
    out = f'{ideg:3d}{sep1} {imin:02d}{sep2} {isec:02d}.{frac}{sep3}'
    if isign < 0 and ideg == 0:
        out = out[0:1] + '-' + out[2:]
    return out
