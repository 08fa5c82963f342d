"""Time scales: the Instant type, Delta-T models, and rms-julian calendar wrappers."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import julian

from ephemeris_engine.angle_utils import verify_number
from ephemeris_engine.config import get_delta_t_model, get_leapsecs_path
from ephemeris_engine.constants import DAYS_PER_TROPICAL_YEAR, SECONDS_PER_DAY
from ephemeris_engine.errors import InvalidArgumentError, NonConvergenceError

logger = logging.getLogger(__name__)

DeltaTFunction = Callable[[float], float]

# Leap seconds loaded once at first use.
_leapsecs_loaded = False

# Active Delta-T model; resolved from configuration on first use.
_delta_t_func: DeltaTFunction | None = None

_MS_PER_DAY = 86400000


def _ensure_leapsecs() -> None:
    """Load the leap-second kernel for rms-julian if not already loaded.

    Uses EPHEMERIS_LEAPSECS when set; otherwise, or when that file cannot be
    read, the kernel bundled with rms-julian.
    """
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    path = get_leapsecs_path()
    if path:
        try:
            julian.load_lsk(path)
            _leapsecs_loaded = True
            logger.info('Leap seconds loaded from %s.', path)
            return
        except (OSError, KeyError, ValueError) as e:
            logger.info(
                'Leap seconds from %s not used (%s); using rms-julian bundled LSK.',
                path,
                e,
            )
    julian.load_lsk()
    _leapsecs_loaded = True


def delta_t_espenak_meeus(ut: float) -> float:
    """Return TT - UT in seconds from the Espenak-Meeus polynomial expressions.

    The year argument is measured so that y = 2000 falls on 2000-01-15, as in
    the published expressions. Segments join continuously at their boundaries.

    Parameters:
        ut: Universal Time in days since J2000.

    Returns:
        Delta-T in seconds.
    """
    y = 2000.0 + ((ut - 14.0) / DAYS_PER_TROPICAL_YEAR)
    if y < -500:
        u = (y - 1820) / 100
        return -20 + (32 * u * u)
    if y < 500:
        u = y / 100
        return (
            10583.6
            + u
            * (
                -1014.41
                + u * (33.78311 + u * (-5.952053 + u * (-0.1798452 + u * (0.022174192 + u * 0.0090316521))))
            )
        )
    if y < 1600:
        u = (y - 1000) / 100
        return (
            1574.2
            + u
            * (
                -556.01
                + u * (71.23472 + u * (0.319781 + u * (-0.8503463 + u * (-0.005050998 + u * 0.0083572073))))
            )
        )
    if y < 1700:
        u = y - 1600
        return 120 - 0.9808 * u - 0.01532 * u * u + u * u * u / 7129.0
    if y < 1800:
        u = y - 1700
        return 8.83 + u * (0.1603 + u * (-0.0059285 + u * (0.00013336 - u / 1174000.0)))
    if y < 1860:
        u = y - 1800
        return 13.72 + u * (
            -0.332447
            + u
            * (
                0.0068612
                + u
                * (0.0041116 + u * (-0.00037436 + u * (0.0000121272 + u * (-0.0000001699 + u * 0.000000000875))))
            )
        )
    if y < 1900:
        u = y - 1860
        return 7.62 + u * (0.5737 + u * (-0.251754 + u * (0.01680668 + u * (-0.0004473624 + u / 233174.0))))
    if y < 1920:
        u = y - 1900
        return -2.79 + u * (1.494119 + u * (-0.0598939 + u * (0.0061966 - u * 0.000197)))
    if y < 1941:
        u = y - 1920
        return 21.20 + u * (0.84493 + u * (-0.076100 + u * 0.0020936))
    if y < 1961:
        u = y - 1950
        return 29.07 + 0.407 * u - u * u / 233.0 + u * u * u / 2547.0
    if y < 1986:
        u = y - 1975
        return 45.45 + 1.067 * u - u * u / 260.0 - u * u * u / 718.0
    if y < 2005:
        u = y - 2000
        return 63.86 + u * (0.3345 + u * (-0.060374 + u * (0.0017275 + u * (0.000651814 + u * 0.00002373599))))
    if y < 2050:
        u = y - 2000
        return 62.92 + 0.32217 * u + 0.005589 * u * u
    if y < 2150:
        u = (y - 1820) / 100
        return -20 + 32 * u * u - 0.5628 * (2150 - y)
    u = (y - 1820) / 100
    return -20 + (32 * u * u)


def delta_t_jpl_horizons(ut: float) -> float:
    """Return Delta-T in seconds, held constant after early 2017 as JPL Horizons does.

    Parameters:
        ut: Universal Time in days since J2000.

    Returns:
        Delta-T in seconds.
    """
    limit = 17.0 * 365.242190
    return delta_t_espenak_meeus(ut if ut < limit else limit)


_DELTA_T_MODELS: dict[str, DeltaTFunction] = {
    'espenak-meeus': delta_t_espenak_meeus,
    'jpl-horizons': delta_t_jpl_horizons,
}


def set_delta_t_model(model: str | DeltaTFunction) -> None:
    """Select the Delta-T model used for every Instant created afterwards.

    Parameters:
        model: A model name ('espenak-meeus' or 'jpl-horizons') or a callable
            mapping UT days to Delta-T seconds.

    Raises:
        InvalidArgumentError: Unknown model name.
    """
    global _delta_t_func
    if callable(model):
        _delta_t_func = model
        return
    try:
        _delta_t_func = _DELTA_T_MODELS[model.strip().lower()]
    except KeyError as e:
        raise InvalidArgumentError(
            f'Unknown Delta-T model {model!r}; expected one of {sorted(_DELTA_T_MODELS)}'
        ) from e


def get_delta_t_function() -> DeltaTFunction:
    """Return the active Delta-T function, resolving the configured model on first use."""
    global _delta_t_func
    if _delta_t_func is None:
        name = get_delta_t_model()
        logger.info('Using Delta-T model %s.', name)
        _delta_t_func = _DELTA_T_MODELS[name]
    return _delta_t_func


def delta_t(ut: float) -> float:
    """Return Delta-T (TT - UT) in seconds for the active model."""
    return get_delta_t_function()(ut)


def terrestrial_time(ut: float) -> float:
    """Convert UT days since J2000 to TT days since J2000."""
    return ut + delta_t(ut) / SECONDS_PER_DAY


def parse_datetime(string: str) -> tuple[int, float] | None:
    """Parse date/time string to UTC (day, sec).

    Parameters:
        string: Date/time string (format accepted by rms-julian).

    Returns:
        (day, sec) where day is days since 2000-01-01, sec is seconds within that
        day; None on parse failure.
    """
    _ensure_leapsecs()
    candidate_strings = [string]
    stripped = string.strip()
    if stripped.endswith(('Z', 'z')):
        # rms-julian does not parse ISO UTC suffix "Z"; drop it so the value
        # is treated as UTC.
        candidate_strings.append(stripped[:-1])
    year_hms_match = re.fullmatch(r'(\d{4})\s+(\d{1,2}:\d{2}:\d{2})', stripped)
    if year_hms_match is not None:
        year, hms = year_hms_match.groups()
        candidate_strings.append(f'{year}-01-01 {hms}')
    for candidate in candidate_strings:
        try:
            result = julian.day_sec_from_string(candidate)
            day, sec = result[0], result[1]
            return (int(day), float(sec))
        except (ValueError, TypeError, LookupError, OSError):
            continue
    return None


@dataclass(frozen=True, order=True)
class Instant:
    """A moment in time as Universal Time and Terrestrial Time.

    Both values are fractional days since J2000.0 (2000-01-01T12:00:00).
    ``tt`` is always derived from ``ut`` through the active Delta-T model.
    """

    ut: float
    tt: float = field(init=False)

    def __post_init__(self) -> None:
        ut = verify_number(self.ut)
        object.__setattr__(self, 'ut', ut)
        object.__setattr__(self, 'tt', terrestrial_time(ut))

    @classmethod
    def make(cls, value: Instant | float | int | str | datetime) -> Instant:
        """Coerce an Instant, UT day count, datetime, or timestamp string to Instant."""
        if isinstance(value, Instant):
            return value
        if isinstance(value, datetime):
            return cls.from_datetime(value)
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls(float(value))
        raise InvalidArgumentError(f'Cannot convert {value!r} to an Instant')

    @classmethod
    def from_calendar(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
    ) -> Instant:
        """Create an Instant from a UTC calendar date and clock time."""
        day_num = day_from_ymd(year, month, day)
        sec = hour * 3600.0 + minute * 60.0 + second
        return cls(day_num - 0.5 + sec / SECONDS_PER_DAY)

    @classmethod
    def from_string(cls, text: str) -> Instant:
        """Parse a UTC timestamp such as '2023-08-22T00:00:00Z'.

        Raises:
            InvalidArgumentError: The string cannot be parsed.
        """
        parsed = parse_datetime(text)
        if parsed is None:
            raise InvalidArgumentError(f'Cannot parse date/time {text!r}')
        day, sec = parsed
        return cls(day - 0.5 + sec / SECONDS_PER_DAY)

    @classmethod
    def from_datetime(cls, dt: datetime) -> Instant:
        """Create an Instant from a datetime; naive datetimes are taken as UTC."""
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        second = dt.second + dt.microsecond / 1.0e6
        return cls.from_calendar(dt.year, dt.month, dt.day, dt.hour, dt.minute, second)

    @classmethod
    def from_terrestrial_time(cls, tt: float) -> Instant:
        """Find the Instant whose Terrestrial Time is ``tt``.

        Iterates on UT; converges in a few passes because Delta-T varies slowly.

        Raises:
            NonConvergenceError: More than 20 iterations were needed.
        """
        tt = verify_number(tt)
        time = cls(tt)
        for _ in range(20):
            err = tt - time.tt
            if abs(err) < 1.0e-12:
                return time
            time = time.add_days(err)
        logger.error('Terrestrial time inversion did not converge for tt=%s', tt)
        raise NonConvergenceError(f'Could not convert terrestrial time {tt} to an Instant')

    def add_days(self, days: float) -> Instant:
        """Return a new Instant ``days`` later in UT (negative moves backward)."""
        return Instant(self.ut + days)

    def _day_ms(self) -> tuple[int, int]:
        day = math.floor(self.ut + 0.5)
        ms = round((self.ut + 0.5 - day) * _MS_PER_DAY)
        if ms >= _MS_PER_DAY:
            day += 1
            ms -= _MS_PER_DAY
        return (int(day), int(ms))

    def to_datetime(self) -> datetime:
        """Return the UTC datetime (millisecond resolution)."""
        day, ms = self._day_ms()
        year, month, mday = ymd_from_day(day)
        base = datetime(year, month, mday, tzinfo=timezone.utc)
        return base + timedelta(milliseconds=ms)

    def __str__(self) -> str:
        day, ms = self._day_ms()
        year, month, mday = ymd_from_day(day)
        hour, rem = divmod(ms, 3600000)
        minute, rem = divmod(rem, 60000)
        sec, milli = divmod(rem, 1000)
        return (
            f'{year:04d}-{month:02d}-{mday:02d}'
            f'T{hour:02d}:{minute:02d}:{sec:02d}.{milli:03d}Z'
        )


def ymd_from_day(day: int) -> tuple[int, int, int]:
    """Convert day since 2000-01-01 to calendar date.

    Parameters:
        day: Days since 2000-01-01.

    Returns:
        (year, month, day).
    """
    year, month, mday = julian.ymd_from_day(day)
    return (int(year), int(month), int(mday))


def day_from_ymd(year: int, month: int, day: int) -> int:
    """Convert calendar date to days since 2000-01-01.

    Parameters:
        year, month, day: Calendar date.

    Returns:
        Days since 2000-01-01.
    """
    return int(julian.day_from_ymd(year, month, day))
