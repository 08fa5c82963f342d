"""Transits of Mercury and Venus across the Sun's disc."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import MERCURY_MEAN_RADIUS_KM, VENUS_RADIUS_KM
from ephemeris_engine.ephemeris import angle_from_sun
from ephemeris_engine.errors import NonConvergenceError, UnsupportedBodyError
from ephemeris_engine.longitude import search_relative_longitude
from ephemeris_engine.search import search
from ephemeris_engine.shadow import peak_planet_shadow, planet_shadow_boundary
from ephemeris_engine.time_utils import Instant

logger = logging.getLogger(__name__)

# Largest Sun-planet separation (degrees) at inferior conjunction worth refining.
TRANSIT_THRESHOLD_ANGLE = 0.4

_CONTACT_WINDOW_DAYS = 1.0

_PLANET_RADII_KM = {
    Body.MERCURY: MERCURY_MEAN_RADIUS_KM,
    Body.VENUS: VENUS_RADIUS_KM,
}


@dataclass(frozen=True)
class TransitInfo:
    """A transit as seen from the Earth's center.

    Attributes:
        start: First contact of the planet's penumbra with the Earth's center.
        peak: Instant of minimum separation from the Sun's center.
        finish: Last contact.
        separation: Minimum angular separation from the Sun's center, arcminutes.
    """

    start: Instant
    peak: Instant
    finish: Instant
    separation: float


def _transit_boundary(body: Body, radius_km: float, t1: Instant, t2: Instant, direction: float) -> Instant:
    tx = search(lambda t: planet_shadow_boundary(t, body, radius_km, direction), t1, t2)
    if tx is None:
        logger.error('Transit contact search failed for %s between %s and %s', body.value, t1, t2)
        raise NonConvergenceError('Planet transit boundary search failed')
    return tx


def search_transit(body: Body, start: Instant) -> TransitInfo:
    """Find the first transit of Mercury or Venus after ``start``.

    Raises:
        UnsupportedBodyError: ``body`` is not Mercury or Venus.
    """
    radius_km = _PLANET_RADII_KM.get(body)
    if radius_km is None:
        raise UnsupportedBodyError(f'Transits are only calculated for Mercury and Venus, not {body.value}')

    search_time = start
    while True:
        conj = search_relative_longitude(body, 0.0, search_time)
        if angle_from_sun(body, conj) < TRANSIT_THRESHOLD_ANGLE:
            shadow = peak_planet_shadow(body, radius_km, conj)
            if shadow.r < shadow.p:
                before = shadow.time.add_days(-_CONTACT_WINDOW_DAYS)
                after = shadow.time.add_days(+_CONTACT_WINDOW_DAYS)
                first = _transit_boundary(body, radius_km, before, shadow.time, -1.0)
                last = _transit_boundary(body, radius_km, shadow.time, after, +1.0)
                separation = 60.0 * angle_from_sun(body, shadow.time)
                return TransitInfo(first, shadow.time, last, separation)

        logger.debug('Inferior conjunction of %s at %s is not a transit', body.value, conj)
        search_time = conj.add_days(10.0)


def next_transit(body: Body, prev_peak: Instant) -> TransitInfo:
    """Find the transit after the one that peaked at ``prev_peak``."""
    return search_transit(body, prev_peak.add_days(100.0))
