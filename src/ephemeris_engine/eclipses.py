"""Lunar and solar eclipse searches.

Every search steps through successive full or new moons, discards those where
the Moon is too far from the ecliptic for an eclipse to be possible, and then
refines the time of closest approach to the relevant shadow axis.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import (
    DEG2RAD,
    EARTH_EQUATORIAL_RADIUS_KM,
    EARTH_FLATTENING,
    EARTH_FLATTENING_SQUARED,
    EARTH_MEAN_RADIUS_KM,
    KM_PER_AU,
    MINUTES_PER_DAY,
    MOON_MEAN_RADIUS_KM,
    MOON_POLAR_RADIUS_AU,
    MOON_POLAR_RADIUS_KM,
    RAD2DEG,
    SUN_RADIUS_AU,
)
from ephemeris_engine.earth_orientation import sidereal_time
from ephemeris_engine.ephemeris import equator, horizon
from ephemeris_engine.errors import EphemerisError, InvalidArgumentError, NonConvergenceError
from ephemeris_engine.frames import rotation_eqj_eqd
from ephemeris_engine.longitude import search_moon_phase
from ephemeris_engine.lunar import ecliptic_geo_moon
from ephemeris_engine.observer import Observer
from ephemeris_engine.refraction import Refraction
from ephemeris_engine.search import search
from ephemeris_engine.shadow import (
    ShadowInfo,
    calc_shadow,
    local_moon_shadow,
    peak_earth_shadow,
    peak_local_moon_shadow,
    peak_moon_shadow,
    shadow_semi_duration,
)
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, Vector, angle_between

logger = logging.getLogger(__name__)

# Ecliptic latitude of the Moon (degrees) beyond which no eclipse is possible.
PRUNE_LATITUDE = 1.8

# Umbra radius (km) above which a central eclipse counts as total.
TOTAL_UMBRA_BIAS_KM = 0.014

MAX_LUNATIONS = 12

_PARTIAL_WINDOW = 0.2
_TOTAL_WINDOW = 0.01


class EclipseKind(Enum):
    PENUMBRAL = 'penumbral'
    PARTIAL = 'partial'
    ANNULAR = 'annular'
    TOTAL = 'total'


@dataclass(frozen=True)
class EclipseEvent:
    """A moment in a local solar eclipse and the Sun's refracted altitude then."""

    time: Instant
    altitude: float


@dataclass(frozen=True)
class LunarEclipseInfo:
    """A lunar eclipse.

    Attributes:
        kind: PENUMBRAL, PARTIAL or TOTAL.
        obscuration: Peak fraction of the Moon's disc inside the umbra.
        peak: Instant of greatest eclipse.
        sd_penum: Semi-duration of the penumbral phase, minutes.
        sd_partial: Semi-duration of the partial phase, minutes (0 if none).
        sd_total: Semi-duration of totality, minutes (0 if none).
    """

    kind: EclipseKind
    obscuration: float
    peak: Instant
    sd_penum: float
    sd_partial: float
    sd_total: float

    def _offset(self, minutes: float) -> Instant:
        return self.peak.add_days(minutes / MINUTES_PER_DAY)

    @property
    def penumbral_begin(self) -> Instant:
        return self._offset(-self.sd_penum)

    @property
    def penumbral_end(self) -> Instant:
        return self._offset(+self.sd_penum)

    @property
    def partial_begin(self) -> Instant | None:
        return self._offset(-self.sd_partial) if self.sd_partial > 0.0 else None

    @property
    def partial_end(self) -> Instant | None:
        return self._offset(+self.sd_partial) if self.sd_partial > 0.0 else None

    @property
    def total_begin(self) -> Instant | None:
        return self._offset(-self.sd_total) if self.sd_total > 0.0 else None

    @property
    def total_end(self) -> Instant | None:
        return self._offset(+self.sd_total) if self.sd_total > 0.0 else None


@dataclass(frozen=True)
class GlobalSolarEclipseInfo:
    """A solar eclipse seen from anywhere on the Earth.

    Attributes:
        kind: PARTIAL, ANNULAR or TOTAL.
        obscuration: Fraction of the Sun's disc covered at the peak location,
            or None for a partial eclipse whose axis misses the Earth.
        peak: Instant the shadow axis is closest to the Earth's center.
        distance: Distance of the shadow axis from the Earth's center, km.
        latitude: Geodetic latitude where the axis meets the surface, or None.
        longitude: Longitude where the axis meets the surface, or None.
    """

    kind: EclipseKind
    obscuration: float | None
    peak: Instant
    distance: float
    latitude: float | None
    longitude: float | None


@dataclass(frozen=True)
class LocalSolarEclipseInfo:
    """A solar eclipse as seen by one observer.

    ``total_begin`` and ``total_end`` are None unless the eclipse is total or
    annular for this observer.
    """

    kind: EclipseKind
    obscuration: float
    partial_begin: EclipseEvent
    total_begin: EclipseEvent | None
    peak: EclipseEvent
    total_end: EclipseEvent | None
    partial_end: EclipseEvent


def obscuration(a: float, b: float, c: float) -> float:
    """Fraction of a disc of radius ``a`` covered by a disc of radius ``b`` at separation ``c``.

    Raises:
        InvalidArgumentError: A radius is not positive or ``c`` is negative.
    """
    if a <= 0.0:
        raise InvalidArgumentError('Radius of first disc must be positive')
    if b <= 0.0:
        raise InvalidArgumentError('Radius of second disc must be positive')
    if c < 0.0:
        raise InvalidArgumentError('Distance between discs must not be negative')

    if c >= a + b:
        return 0.0

    if c == 0.0:
        return 1.0 if a <= b else (b * b) / (a * a)

    x = (a * a - b * b + c * c) / (2.0 * c)
    radicand = a * a - x * x
    if radicand <= 0.0:
        # One disc lies inside the other.
        return 1.0 if a <= b else (b * b) / (a * a)

    # Two lens-shaped areas, each a sector minus a triangle.
    y = math.sqrt(radicand)
    lens1 = a * a * math.acos(x / a) - x * y
    lens2 = b * b * math.acos((c - x) / b) - (c - x) * y
    return (lens1 + lens2) / (math.pi * a * a)


def eclipse_kind_from_umbra(k: float) -> EclipseKind:
    """TOTAL when the umbra reaches the observer, ANNULAR otherwise."""
    return EclipseKind.TOTAL if k > TOTAL_UMBRA_BIAS_KM else EclipseKind.ANNULAR


def solar_eclipse_obscuration(hm: Vector, lo: Vector) -> float:
    """Fraction of the Sun's disc covered by the Moon for a non-total eclipse.

    Parameters:
        hm: Heliocentric Moon, AU.
        lo: Lunacentric observer, AU.
    """
    ho = hm + lo
    sun_radius = math.asin(SUN_RADIUS_AU / ho.length())
    moon_radius = math.asin(MOON_POLAR_RADIUS_AU / lo.length())
    separation = angle_between(lo, ho)
    # Never called for total eclipses, so keep marginal cases below 1.
    return min(0.9999, obscuration(sun_radius, moon_radius, separation * DEG2RAD))


def _geoid_intersect(shadow: ShadowInfo) -> GlobalSolarEclipseInfo:
    """Find where the Moon's shadow axis meets the Earth's surface, if it does."""
    kind = EclipseKind.PARTIAL
    peak = shadow.time
    distance = shadow.r
    latitude: float | None = None
    longitude: float | None = None
    eclipse_obscuration: float | None = None

    rot = rotation_eqj_eqd(shadow.time)
    v = rot.rotate_vector(shadow.dir)
    e = rot.rotate_vector(shadow.target)

    # Work in km, stretching z so that the Earth becomes a sphere.
    vx, vy, vz = v.x * KM_PER_AU, v.y * KM_PER_AU, v.z * KM_PER_AU / EARTH_FLATTENING
    ex, ey, ez = e.x * KM_PER_AU, e.y * KM_PER_AU, e.z * KM_PER_AU / EARTH_FLATTENING

    radius = EARTH_EQUATORIAL_RADIUS_KM
    a = vx * vx + vy * vy + vz * vz
    b = -2.0 * (vx * ex + vy * ey + vz * ez)
    c = (ex * ex + ey * ey + ez * ez) - radius * radius
    radic = b * b - 4.0 * a * c

    if radic > 0.0:
        # The nearer intersection is on the day side.
        u = (-b - math.sqrt(radic)) / (2.0 * a)
        px = u * vx - ex
        py = u * vy - ey
        pz = (u * vz - ez) * EARTH_FLATTENING

        proj = math.hypot(px, py) * EARTH_FLATTENING_SQUARED
        if proj == 0.0:
            latitude = 90.0 if pz > 0.0 else -90.0
        else:
            latitude = RAD2DEG * math.atan(pz / proj)

        gast = sidereal_time(peak)
        longitude = math.fmod(RAD2DEG * math.atan2(py, px) - 15.0 * gast, 360.0)
        if longitude <= -180.0:
            longitude += 360.0
        elif longitude > 180.0:
            longitude -= 360.0

        # Lunacentric observer on the axis, back in EQJ.
        o = Vector(px / KM_PER_AU, py / KM_PER_AU, pz / KM_PER_AU, shadow.time, Frame.EQD)
        o = rot.inverse().rotate_vector(o) + shadow.target

        surface = calc_shadow(MOON_POLAR_RADIUS_KM, shadow.time, o, shadow.dir)
        if surface.r > 1.0e-9 or surface.r < 0.0:
            logger.error('Geoid intersection is %s km off the shadow axis', surface.r)
            raise EphemerisError(f'Unexpected shadow distance from geoid intersection: {surface.r}')

        kind = eclipse_kind_from_umbra(surface.k)
        if kind is EclipseKind.TOTAL:
            eclipse_obscuration = 1.0
        else:
            eclipse_obscuration = solar_eclipse_obscuration(shadow.dir, o)

    return GlobalSolarEclipseInfo(kind, eclipse_obscuration, peak, distance, latitude, longitude)


def search_lunar_eclipse(start: Instant) -> LunarEclipseInfo:
    """Find the first lunar eclipse after ``start``.

    Raises:
        NonConvergenceError: No eclipse within MAX_LUNATIONS full moons.
    """
    fm_time = start
    for _ in range(MAX_LUNATIONS):
        full_moon = search_moon_phase(180.0, fm_time, 40.0)
        if full_moon is None:
            raise NonConvergenceError(f'Cannot find full moon after {fm_time}')

        if abs(ecliptic_geo_moon(full_moon).lat) < PRUNE_LATITUDE:
            shadow = peak_earth_shadow(full_moon)
            if shadow.r < shadow.p + MOON_MEAN_RADIUS_KM:
                kind = EclipseKind.PENUMBRAL
                eclipse_obscuration = 0.0
                sd_total = 0.0
                sd_partial = 0.0
                sd_penum = shadow_semi_duration(shadow.time, shadow.p + MOON_MEAN_RADIUS_KM, 200.0)

                if shadow.r < shadow.k + MOON_MEAN_RADIUS_KM:
                    kind = EclipseKind.PARTIAL
                    sd_partial = shadow_semi_duration(shadow.time, shadow.k + MOON_MEAN_RADIUS_KM, sd_penum)

                    if shadow.r + MOON_MEAN_RADIUS_KM < shadow.k:
                        kind = EclipseKind.TOTAL
                        eclipse_obscuration = 1.0
                        sd_total = shadow_semi_duration(
                            shadow.time, shadow.k - MOON_MEAN_RADIUS_KM, sd_partial
                        )
                    else:
                        eclipse_obscuration = obscuration(MOON_MEAN_RADIUS_KM, shadow.k, shadow.r)

                return LunarEclipseInfo(
                    kind, eclipse_obscuration, shadow.time, sd_penum, sd_partial, sd_total
                )

        fm_time = full_moon.add_days(10.0)

    raise NonConvergenceError(f'Failed to find lunar eclipse within {MAX_LUNATIONS} full moons')


def next_lunar_eclipse(prev_peak: Instant) -> LunarEclipseInfo:
    """Find the lunar eclipse after the one that peaked at ``prev_peak``."""
    return search_lunar_eclipse(prev_peak.add_days(10.0))


def search_global_solar_eclipse(start: Instant) -> GlobalSolarEclipseInfo:
    """Find the first solar eclipse visible anywhere on the Earth after ``start``.

    Raises:
        NonConvergenceError: No eclipse within MAX_LUNATIONS new moons.
    """
    nm_time = start
    for _ in range(MAX_LUNATIONS):
        new_moon = search_moon_phase(0.0, nm_time, 40.0)
        if new_moon is None:
            raise NonConvergenceError(f'Cannot find new moon after {nm_time}')

        if abs(ecliptic_geo_moon(new_moon).lat) < PRUNE_LATITUDE:
            shadow = peak_moon_shadow(new_moon)
            if shadow.r < shadow.p + EARTH_MEAN_RADIUS_KM:
                return _geoid_intersect(shadow)

        nm_time = new_moon.add_days(10.0)

    raise NonConvergenceError(f'Failed to find solar eclipse within {MAX_LUNATIONS} new moons')


def next_global_solar_eclipse(prev_peak: Instant) -> GlobalSolarEclipseInfo:
    return search_global_solar_eclipse(prev_peak.add_days(10.0))


def _sun_altitude(time: Instant, observer: Observer) -> float:
    equ = equator(Body.SUN, time, observer, True, True)
    return horizon(time, observer, equ.ra, equ.dec, Refraction.NORMAL).altitude


def _calc_event(observer: Observer, time: Instant) -> EclipseEvent:
    return EclipseEvent(time, _sun_altitude(time, observer))


def _local_partial_distance(shadow: ShadowInfo) -> float:
    return shadow.p - shadow.r


def _local_total_distance(shadow: ShadowInfo) -> float:
    # The umbra radius is negative for an annular eclipse.
    return abs(shadow.k) - shadow.r


def _local_eclipse_transition(
    observer: Observer,
    direction: float,
    func: Callable[[ShadowInfo], float],
    t1: Instant,
    t2: Instant,
) -> EclipseEvent:
    def evaluate(time: Instant) -> float:
        return direction * func(local_moon_shadow(time, observer))

    time = search(evaluate, t1, t2)
    if time is None:
        logger.error('Local eclipse contact search failed between %s and %s', t1, t2)
        raise NonConvergenceError('Local eclipse transition search failed')
    return _calc_event(observer, time)


def _local_eclipse(shadow: ShadowInfo, observer: Observer) -> LocalSolarEclipseInfo:
    peak = _calc_event(observer, shadow.time)
    t1 = shadow.time.add_days(-_PARTIAL_WINDOW)
    t2 = shadow.time.add_days(+_PARTIAL_WINDOW)
    partial_begin = _local_eclipse_transition(observer, +1.0, _local_partial_distance, t1, shadow.time)
    partial_end = _local_eclipse_transition(observer, -1.0, _local_partial_distance, shadow.time, t2)

    total_begin: EclipseEvent | None = None
    total_end: EclipseEvent | None = None
    if shadow.r < abs(shadow.k):
        t1 = shadow.time.add_days(-_TOTAL_WINDOW)
        t2 = shadow.time.add_days(+_TOTAL_WINDOW)
        total_begin = _local_eclipse_transition(observer, +1.0, _local_total_distance, t1, shadow.time)
        total_end = _local_eclipse_transition(observer, -1.0, _local_total_distance, shadow.time, t2)
        kind = eclipse_kind_from_umbra(shadow.k)
    else:
        kind = EclipseKind.PARTIAL

    if kind is EclipseKind.TOTAL:
        eclipse_obscuration = 1.0
    else:
        eclipse_obscuration = solar_eclipse_obscuration(shadow.dir, shadow.target)

    return LocalSolarEclipseInfo(
        kind, eclipse_obscuration, partial_begin, total_begin, peak, total_end, partial_end
    )


def search_local_solar_eclipse(start: Instant, observer: Observer) -> LocalSolarEclipseInfo:
    """Find the next solar eclipse visible to ``observer``.

    Eclipses that begin and end with the Sun below the horizon are skipped.
    """
    nm_time = start
    while True:
        new_moon = search_moon_phase(0.0, nm_time, 40.0)
        if new_moon is None:
            raise NonConvergenceError(f'Cannot find new moon after {nm_time}')

        if abs(ecliptic_geo_moon(new_moon).lat) < PRUNE_LATITUDE:
            shadow = peak_local_moon_shadow(new_moon, observer)
            if shadow.r < shadow.p:
                eclipse = _local_eclipse(shadow, observer)
                if eclipse.partial_begin.altitude > 0.0 or eclipse.partial_end.altitude > 0.0:
                    return eclipse
                logger.debug('Skipping solar eclipse at %s below the horizon', shadow.time)

        nm_time = new_moon.add_days(10.0)


def next_local_solar_eclipse(prev_peak: Instant, observer: Observer) -> LocalSolarEclipseInfo:
    return search_local_solar_eclipse(prev_peak.add_days(10.0), observer)
