"""Shadow geometry shared by eclipse and transit searches.

A shadow is described relative to a line through the Sun and a shadow-casting
body. For a target point, ``u`` is the projection of the target onto the
shadow axis in units of the Sun-to-caster distance, ``r`` is the distance of
the target from the axis, and ``k`` and ``p`` are the umbra and penumbra
radii at the target's distance (all distances in kilometres).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import (
    EARTH_ECLIPSE_RADIUS_KM,
    KM_PER_AU,
    MOON_MEAN_RADIUS_KM,
    SUN_RADIUS_KM,
)
from ephemeris_engine.ephemeris import geo_vector
from ephemeris_engine.errors import NonConvergenceError
from ephemeris_engine.lunar import geo_moon
from ephemeris_engine.observer import Observer, observer_vector
from ephemeris_engine.search import search
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Vector

logger = logging.getLogger(__name__)

# Search half-widths, days, around the predicted time of closest approach.
EARTH_SHADOW_WINDOW = 0.03
MOON_SHADOW_WINDOW = 0.03
LOCAL_MOON_SHADOW_WINDOW = 0.2
PLANET_SHADOW_WINDOW = 1.0

_SLOPE_DT = 1.0 / 86400.0


@dataclass(frozen=True)
class ShadowInfo:
    """Position of a target relative to the shadow cast by a body.

    Attributes:
        time: Instant of the geometry.
        u: Projection of the target onto the shadow axis.
        r: Distance of the target from the shadow axis, km.
        k: Umbra radius at the target, km (negative inside an antumbra).
        p: Penumbra radius at the target, km.
        target: Vector from the caster to the target, AU.
        dir: Vector from the Sun to the caster, AU.
    """

    time: Instant
    u: float
    r: float
    k: float
    p: float
    target: Vector
    dir: Vector


ShadowFunction = Callable[[Instant], ShadowInfo]


def calc_shadow(body_radius_km: float, time: Instant, target: Vector, direction: Vector) -> ShadowInfo:
    u = direction.dot(target) / direction.dot(direction)
    dx = u * direction.x - target.x
    dy = u * direction.y - target.y
    dz = u * direction.z - target.z
    r = KM_PER_AU * math.sqrt(dx * dx + dy * dy + dz * dz)
    k = SUN_RADIUS_KM - (1.0 + u) * (SUN_RADIUS_KM - body_radius_km)
    p = -SUN_RADIUS_KM + (1.0 + u) * (SUN_RADIUS_KM + body_radius_km)
    return ShadowInfo(time, u, r, k, p, target, direction)


def earth_shadow(time: Instant) -> ShadowInfo:
    """The Moon's position relative to the Earth's shadow."""
    # Sunlight passing through the Earth's center travels along -s.
    s = geo_vector(Body.SUN, time, True)
    m = geo_moon(time)
    return calc_shadow(EARTH_ECLIPSE_RADIUS_KM, time, m, -s)


def moon_shadow(time: Instant) -> ShadowInfo:
    """The Earth's center relative to the Moon's shadow."""
    s = geo_vector(Body.SUN, time, True)
    m = geo_moon(time)
    return calc_shadow(MOON_MEAN_RADIUS_KM, time, -m, m - s)


def local_moon_shadow(time: Instant, observer: Observer) -> ShadowInfo:
    """An observer on the Earth's surface relative to the Moon's shadow."""
    pos = observer_vector(time, observer, False)
    s = geo_vector(Body.SUN, time, True)
    m = geo_moon(time)
    return calc_shadow(MOON_MEAN_RADIUS_KM, time, pos - m, m - s)


def planet_shadow(body: Body, planet_radius_km: float, time: Instant) -> ShadowInfo:
    """The Earth's center relative to the shadow of Mercury or Venus."""
    g = geo_vector(body, time, True)
    e = geo_vector(Body.SUN, time, True)
    return calc_shadow(planet_radius_km, time, -g, g - e)


def shadow_distance_slope(shadow_func: ShadowFunction, time: Instant) -> float:
    """Rate of change of the axis distance ``r``, km/day."""
    shadow1 = shadow_func(time.add_days(-_SLOPE_DT))
    shadow2 = shadow_func(time.add_days(+_SLOPE_DT))
    return (shadow2.r - shadow1.r) / _SLOPE_DT


def _peak_shadow(shadow_func: ShadowFunction, center: Instant, window: float, what: str) -> ShadowInfo:
    t1 = center.add_days(-window)
    t2 = center.add_days(+window)
    tx = search(lambda t: shadow_distance_slope(shadow_func, t), t1, t2)
    if tx is None:
        logger.error('Peak %s search failed near %s', what, center)
        raise NonConvergenceError(f'Failed to find peak {what} time near {center}')
    return shadow_func(tx)


def peak_earth_shadow(center: Instant) -> ShadowInfo:
    """Time near ``center`` when the Moon is closest to the Earth's shadow axis."""
    return _peak_shadow(earth_shadow, center, EARTH_SHADOW_WINDOW, 'Earth shadow')


def peak_moon_shadow(center: Instant) -> ShadowInfo:
    """Time near ``center`` when the Earth's center is closest to the Moon's shadow axis."""
    return _peak_shadow(moon_shadow, center, MOON_SHADOW_WINDOW, 'Moon shadow')


def peak_local_moon_shadow(center: Instant, observer: Observer) -> ShadowInfo:
    return _peak_shadow(
        lambda t: local_moon_shadow(t, observer), center, LOCAL_MOON_SHADOW_WINDOW, 'local Moon shadow'
    )


def peak_planet_shadow(body: Body, planet_radius_km: float, center: Instant) -> ShadowInfo:
    return _peak_shadow(
        lambda t: planet_shadow(body, planet_radius_km, t), center, PLANET_SHADOW_WINDOW, 'planet shadow'
    )


def shadow_semi_duration(center: Instant, radius_limit: float, window_minutes: float) -> float:
    """Half the time, in minutes, that the Moon spends within ``radius_limit`` of the Earth's shadow axis.

    Raises:
        NonConvergenceError: A boundary crossing was not found within the window.
    """
    window = window_minutes / (24.0 * 60.0)
    before = center.add_days(-window)
    after = center.add_days(+window)
    t1 = search(lambda t: -(earth_shadow(t).r - radius_limit), before, center)
    t2 = search(lambda t: +(earth_shadow(t).r - radius_limit), center, after)
    if t1 is None or t2 is None:
        logger.error('Shadow semi-duration search failed around %s', center)
        raise NonConvergenceError(f'Failed to find shadow semi-duration around {center}')
    return (t2.ut - t1.ut) * ((24.0 * 60.0) / 2.0)


def planet_shadow_boundary(time: Instant, body: Body, planet_radius_km: float, direction: float) -> float:
    """Signed distance of the Earth's center outside the planet's penumbra."""
    shadow = planet_shadow(body, planet_radius_km, time)
    return direction * (shadow.r - shadow.p)
