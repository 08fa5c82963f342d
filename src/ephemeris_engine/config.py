"""Configuration: Delta-T model, leap-second kernel and Pluto limits from environment."""

import logging
import os

logger = logging.getLogger(__name__)

# Env var overrides with sensible defaults.
DEFAULT_DELTA_T_MODEL = 'espenak-meeus'
DELTA_T_MODELS = ('espenak-meeus', 'jpl-horizons')
DEFAULT_PLUTO_MAX_EXTRAPOLATION_DAYS = 36525.0


def get_delta_t_model() -> str:
    """Return the Delta-T model name (EPHEMERIS_DELTA_T_MODEL env var or default).

    Returns:
        One of DELTA_T_MODELS. Unknown names fall back to the default.
    """
    name = os.environ.get('EPHEMERIS_DELTA_T_MODEL', DEFAULT_DELTA_T_MODEL).strip().lower()
    if name not in DELTA_T_MODELS:
        logger.warning(
            'Unknown EPHEMERIS_DELTA_T_MODEL %r; using %s.', name, DEFAULT_DELTA_T_MODEL
        )
        return DEFAULT_DELTA_T_MODEL
    return name


def get_leapsecs_path() -> str:
    """Return path to a NAIF LSK leap seconds file for rms-julian.

    Empty string means use the kernel bundled with rms-julian.

    Returns:
        Path string, possibly empty.
    """
    return os.environ.get('EPHEMERIS_LEAPSECS', '').strip()


def get_pluto_max_extrapolation_days() -> float:
    """Return how far (days) Pluto may be evaluated outside its sample table.

    Returns:
        Non-negative day count (EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS or default).
    """
    raw = os.environ.get('EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS', '')
    if not raw.strip():
        return DEFAULT_PLUTO_MAX_EXTRAPOLATION_DAYS
    try:
        value = float(raw)
    except ValueError:
        logger.warning(
            'Invalid EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS %r; using %s.',
            raw,
            DEFAULT_PLUTO_MAX_EXTRAPOLATION_DAYS,
        )
        return DEFAULT_PLUTO_MAX_EXTRAPOLATION_DAYS
    if value < 0.0 or value != value:
        logger.warning(
            'Negative EPHEMERIS_PLUTO_MAX_EXTRAPOLATION_DAYS %r; using %s.',
            raw,
            DEFAULT_PLUTO_MAX_EXTRAPOLATION_DAYS,
        )
        return DEFAULT_PLUTO_MAX_EXTRAPOLATION_DAYS
    return value
