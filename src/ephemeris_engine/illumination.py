"""Visual magnitude and phase of the Sun, Moon and planets."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import DEG2RAD, KM_PER_AU, RAD2DEG, SUN_MAG_1AU
from ephemeris_engine.ephemeris import ecliptic, helio_vector
from ephemeris_engine.errors import UnsupportedBodyError
from ephemeris_engine.longitude import search_relative_longitude_window
from ephemeris_engine.lunar import geo_moon
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Vector, angle_between

# Polynomial coefficients in (phase / 100) for planetary magnitudes.
_MAGNITUDE_COEFFICIENTS: dict[Body, tuple[float, float, float, float]] = {
    Body.MERCURY: (-0.60, 4.98, -4.88, 3.02),
    Body.MARS: (-1.52, 1.60, 0.0, 0.0),
    Body.JUPITER: (-9.40, 0.50, 0.0, 0.0),
    Body.URANUS: (-7.19, 0.25, 0.0, 0.0),
    Body.NEPTUNE: (-6.87, 0.0, 0.0, 0.0),
    Body.PLUTO: (-1.00, 4.00, 0.0, 0.0),
}
_VENUS_CRESCENT = (0.98, -1.02, 0.0, 0.0)
_VENUS_GIBBOUS = (-4.47, 1.03, 0.57, 0.13)

_MOON_MEAN_DISTANCE_AU = 385000.6 / KM_PER_AU

# Saturn's ring plane relative to the ecliptic.
SATURN_RING_INCLINATION = 28.06

# Relative longitude window (degrees) in which Venus is brightest.
_VENUS_PEAK_WINDOW = (10.0, 30.0)


@dataclass(frozen=True)
class IlluminationInfo:
    """Brightness and lighting geometry of a body.

    Attributes:
        time: Instant of the observation.
        mag: Apparent visual magnitude.
        phase_angle: Sun-body-Earth angle in degrees (0 for the Sun).
        phase_fraction: Illuminated fraction of the disc, 0 to 1.
        helio_dist: Body distance from the Sun, AU.
        geo_dist: Body distance from the Earth, AU.
        gc: Geocentric EQJ vector of the body.
        hc: Heliocentric EQJ vector of the body.
        ring_tilt: Tilt of Saturn's rings toward the Earth in degrees; None otherwise.
    """

    time: Instant
    mag: float
    phase_angle: float
    phase_fraction: float
    helio_dist: float
    geo_dist: float
    gc: Vector
    hc: Vector
    ring_tilt: float | None = None


def moon_magnitude(phase: float, helio_dist: float, geo_dist: float) -> float:
    rad = phase * DEG2RAD
    rad2 = rad * rad
    mag = -12.717 + 1.49 * abs(rad) + 0.0431 * rad2 * rad2
    geo_au = geo_dist / _MOON_MEAN_DISTANCE_AU
    return mag + 5.0 * math.log10(helio_dist * geo_au)


def saturn_magnitude(
    phase: float, helio_dist: float, geo_dist: float, gc: Vector, time: Instant
) -> tuple[float, float]:
    """Magnitude of Saturn including its rings, and the ring tilt in degrees."""
    eclip = ecliptic(gc)
    ir = DEG2RAD * SATURN_RING_INCLINATION
    nr = DEG2RAD * (169.51 + 3.82e-5 * time.tt)  # ascending node of the rings

    lat = DEG2RAD * eclip.elat
    lon = DEG2RAD * eclip.elon
    tilt = math.asin(math.sin(lat) * math.cos(ir) - math.cos(lat) * math.sin(ir) * math.sin(lon - nr))
    sin_tilt = math.sin(abs(tilt))

    mag = -9.0 + 0.044 * phase
    mag += sin_tilt * (-2.6 + 1.2 * sin_tilt)
    mag += 5.0 * math.log10(helio_dist * geo_dist)
    return mag, RAD2DEG * tilt


def visual_magnitude(body: Body, phase: float, helio_dist: float, geo_dist: float) -> float:
    """Magnitude of a planet other than Saturn from its phase angle and distances.

    Raises:
        UnsupportedBodyError: No magnitude model for ``body``.
    """
    if body is Body.VENUS:
        coeffs = _VENUS_GIBBOUS if phase < 163.6 else _VENUS_CRESCENT
    else:
        coeffs = _MAGNITUDE_COEFFICIENTS.get(body)
        if coeffs is None:
            raise UnsupportedBodyError(f'No magnitude model for {body.value}')
    c0, c1, c2, c3 = coeffs
    x = phase / 100.0
    mag = c0 + x * (c1 + x * (c2 + x * c3))
    return mag + 5.0 * math.log10(helio_dist * geo_dist)


def illumination(body: Body, time: Instant) -> IlluminationInfo:
    """Visual magnitude and phase of ``body`` as seen from the Earth's center.

    Raises:
        UnsupportedBodyError: ``body`` is the Earth, a barycenter or a star.
    """
    if body is Body.EARTH:
        raise UnsupportedBodyError('The illumination of the Earth is not defined')
    if body.is_barycenter or body.is_star_slot:
        raise UnsupportedBodyError(f'No illumination model for {body.value}')

    earth = helio_vector(Body.EARTH, time)
    ring_tilt: float | None = None

    if body is Body.SUN:
        gc = -earth
        hc = Vector(0.0, 0.0, 0.0, time)
        # The Sun emits rather than reflects; its phase is defined as 0.
        phase = 0.0
    else:
        if body is Body.MOON:
            gc = geo_moon(time)
            hc = earth + gc
        else:
            hc = helio_vector(body, time)
            gc = hc - earth
        phase = angle_between(gc, hc)

    geo_dist = gc.length()
    helio_dist = hc.length()

    if body is Body.SUN:
        mag = SUN_MAG_1AU + 5.0 * math.log10(geo_dist)
    elif body is Body.MOON:
        mag = moon_magnitude(phase, helio_dist, geo_dist)
    elif body is Body.SATURN:
        mag, ring_tilt = saturn_magnitude(phase, helio_dist, geo_dist, gc, time)
    else:
        mag = visual_magnitude(body, phase, helio_dist, geo_dist)

    phase_fraction = (1.0 + math.cos(DEG2RAD * phase)) / 2.0
    return IlluminationInfo(time, mag, phase, phase_fraction, helio_dist, geo_dist, gc, hc, ring_tilt)


def search_peak_magnitude(body: Body, start: Instant) -> IlluminationInfo:
    """Find the next time Venus is at its brightest.

    Raises:
        UnsupportedBodyError: ``body`` is not Venus.
        NonConvergenceError: The peak could not be bracketed.
    """
    if body is not Body.VENUS:
        raise UnsupportedBodyError('search_peak_magnitude works for Venus only')
    dt = 0.01

    def slope(t: Instant) -> float:
        # Magnitude falls as the body brightens, so the slope rises through 0 at the peak.
        y1 = illumination(body, t.add_days(-dt / 2.0)).mag
        y2 = illumination(body, t.add_days(+dt / 2.0)).mag
        return (y2 - y1) / dt

    s1, s2 = _VENUS_PEAK_WINDOW
    tx = search_relative_longitude_window(body, start, s1, s2, slope, 'search_peak_magnitude')
    return illumination(body, tx)
