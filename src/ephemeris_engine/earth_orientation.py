"""Earth orientation: nutation, obliquity, precession, and sidereal time.

Nutation and sidereal time are memoized per Terrestrial Time in an explicit
OrientationCache. A module default cache serves callers that do not pass
their own; threads that share the engine should each pass a private cache.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from ephemeris_engine.constants import ASEC2RAD, ASEC360, DEG2RAD, DAYS_PER_CENTURY
from ephemeris_engine.rotation import RotationMatrix
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, StateVector, Vector

logger = logging.getLogger(__name__)


class PrecessDirection(Enum):
    """Direction of a precession/nutation conversion."""

    FROM_2000 = 'from2000'  # J2000 mean equator to equator of date
    INTO_2000 = 'into2000'  # equator of date to J2000 mean equator


@dataclass(frozen=True)
class NutationAngles:
    """Nutation in longitude (dpsi) and obliquity (deps), arcseconds."""

    dpsi: float
    deps: float


@dataclass(frozen=True)
class EarthTiltInfo:
    """Earth's axis orientation at one instant.

    Attributes:
        tt: Terrestrial Time the values apply to.
        dpsi: Nutation in longitude, arcseconds.
        deps: Nutation in obliquity, arcseconds.
        ee: Equation of the equinoxes, seconds of time.
        mobl: Mean obliquity of the ecliptic, degrees.
        tobl: True obliquity of the ecliptic, degrees.
    """

    tt: float
    dpsi: float
    deps: float
    ee: float
    mobl: float
    tobl: float


def iau2000b(time: Instant) -> NutationAngles:
    """Five-term truncation of the IAU 2000B nutation model."""

    def mod(x: float) -> float:
        return (x % ASEC360) * ASEC2RAD

    t = time.tt / DAYS_PER_CENTURY
    elp = mod(1287104.79305 + t * 129596581.0481)
    f = mod(335779.526232 + t * 1739527262.8478)
    d = mod(1072260.70369 + t * 1602961601.2090)
    om = mod(450160.398036 - t * 6962890.5431)

    sarg = math.sin(om)
    carg = math.cos(om)
    dp = (-172064161.0 - 174666.0 * t) * sarg + 33386.0 * carg
    de = (92052331.0 + 9086.0 * t) * carg + 15377.0 * sarg

    arg = 2.0 * (f - d + om)
    sarg = math.sin(arg)
    carg = math.cos(arg)
    dp += (-13170906.0 - 1675.0 * t) * sarg - 13696.0 * carg
    de += (5730336.0 - 3015.0 * t) * carg - 4587.0 * sarg

    arg = 2.0 * (f + om)
    sarg = math.sin(arg)
    carg = math.cos(arg)
    dp += (-2276413.0 - 234.0 * t) * sarg + 2796.0 * carg
    de += (978459.0 - 485.0 * t) * carg + 1374.0 * sarg

    arg = 2.0 * om
    sarg = math.sin(arg)
    carg = math.cos(arg)
    dp += (2074554.0 + 207.0 * t) * sarg - 698.0 * carg
    de += (-897492.0 + 470.0 * t) * carg - 291.0 * sarg

    sarg = math.sin(elp)
    carg = math.cos(elp)
    dp += (1475877.0 - 3633.0 * t) * sarg + 11817.0 * carg
    de += (73871.0 - 184.0 * t) * carg - 1924.0 * sarg

    # Fixed offsets account for the planetary terms omitted above.
    return NutationAngles(-0.000135 + dp * 1.0e-7, 0.000388 + de * 1.0e-7)


def mean_obliquity(time: Instant) -> float:
    """Mean obliquity of the ecliptic of date, degrees."""
    t = time.tt / DAYS_PER_CENTURY
    asec = (
        ((((-0.0000000434 * t - 0.000000576) * t + 0.00200340) * t - 0.0001831) * t - 46.836769) * t
        + 84381.406
    )
    return asec / 3600.0


def era(time: Instant) -> float:
    """Earth Rotation Angle in degrees, [0, 360)."""
    thet1 = 0.7790572732640 + 0.00273781191135448 * time.ut
    thet3 = time.ut % 1.0
    theta = 360.0 * ((thet1 + thet3) % 1.0)
    if theta < 0.0:
        theta += 360.0
    return theta


class OrientationCache:
    """Memo of the most recent Earth tilt and sidereal time, keyed by TT."""

    def __init__(self) -> None:
        self._tilt: EarthTiltInfo | None = None
        self._sidereal: tuple[float, float] | None = None

    def clear(self) -> None:
        """Forget all memoized values."""
        self._tilt = None
        self._sidereal = None

    def tilt(self, time: Instant) -> EarthTiltInfo:
        """Return EarthTiltInfo for ``time``, computing it on a key mismatch."""
        if self._tilt is None or self._tilt.tt != time.tt:
            nut = iau2000b(time)
            mobl = mean_obliquity(time)
            tobl = mobl + nut.deps / 3600.0
            ee = nut.dpsi * math.cos(mobl * DEG2RAD) / 15.0
            self._tilt = EarthTiltInfo(time.tt, nut.dpsi, nut.deps, ee, mobl, tobl)
        return self._tilt

    def sidereal_time(self, time: Instant) -> float:
        """Return Greenwich Apparent Sidereal Time in hours, [0, 24)."""
        if self._sidereal is None or self._sidereal[0] != time.tt:
            logger.debug('Sidereal time cache miss at tt=%s', time.tt)
            t = time.tt / DAYS_PER_CENTURY
            eqeq = 15.0 * self.tilt(time).ee
            theta = era(time)
            st = eqeq + 0.014506 + (
                (((-0.0000000368 * t - 0.000029956) * t - 0.00000044) * t + 1.3915817) * t
                + 4612.156534
            ) * t
            gst = ((st / 3600.0 + theta) % 360.0) / 15.0
            if gst < 0.0:
                gst += 24.0
            self._sidereal = (time.tt, gst)
        return self._sidereal[1]


# Module-level default cache (replaceable through set_orientation_cache).
_cache = OrientationCache()


def get_orientation_cache() -> OrientationCache:
    """Return the default OrientationCache instance."""
    return _cache


def set_orientation_cache(cache: OrientationCache) -> None:
    """Replace the default OrientationCache instance."""
    global _cache
    _cache = cache


def e_tilt(time: Instant, cache: OrientationCache | None = None) -> EarthTiltInfo:
    """Nutation angles and obliquities at ``time``."""
    return (cache or _cache).tilt(time)


def sidereal_time(time: Instant, cache: OrientationCache | None = None) -> float:
    """Greenwich Apparent Sidereal Time in hours, [0, 24)."""
    return (cache or _cache).sidereal_time(time)


def precession_rotation(time: Instant, direction: PrecessDirection) -> RotationMatrix:
    """Precession matrix between J2000 and the mean equator of date."""
    t = time.tt / DAYS_PER_CENTURY
    eps0 = 84381.406
    psia = ((((-0.0000000951 * t + 0.000132851) * t - 0.00114045) * t - 1.0790069) * t + 5038.481507) * t
    omegaa = ((((0.0000003337 * t - 0.000000467) * t - 0.00772503) * t + 0.0512623) * t - 0.025754) * t + eps0
    chia = ((((-0.0000000560 * t + 0.000170663) * t - 0.00121197) * t - 2.3814292) * t + 10.556403) * t

    eps0 *= ASEC2RAD
    psia *= ASEC2RAD
    omegaa *= ASEC2RAD
    chia *= ASEC2RAD

    sa = math.sin(eps0)
    ca = math.cos(eps0)
    sb = math.sin(-psia)
    cb = math.cos(-psia)
    sc = math.sin(-omegaa)
    cc = math.cos(-omegaa)
    sd = math.sin(chia)
    cd = math.cos(chia)

    xx = cd * cb - sb * sd * cc
    yx = cd * sb * ca + sd * cc * cb * ca - sa * sd * sc
    zx = cd * sb * sa + sd * cc * cb * sa + ca * sd * sc
    xy = -sd * cb - sb * cd * cc
    yy = -sd * sb * ca + cd * cc * cb * ca - sa * cd * sc
    zy = -sd * sb * sa + cd * cc * cb * sa + ca * cd * sc
    xz = sb * sc
    yz = -sc * cb * ca - sa * cc
    zz = -sc * cb * sa + cc * ca

    if direction is PrecessDirection.INTO_2000:
        return RotationMatrix([[xx, xy, xz], [yx, yy, yz], [zx, zy, zz]])
    return RotationMatrix([[xx, yx, zx], [xy, yy, zy], [xz, yz, zz]])


def nutation_rotation(
    time: Instant,
    direction: PrecessDirection,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    """Nutation matrix between the mean and true equator of date."""
    tilt = e_tilt(time, cache)
    oblm = tilt.mobl * DEG2RAD
    oblt = tilt.tobl * DEG2RAD
    psi = tilt.dpsi * ASEC2RAD
    cobm = math.cos(oblm)
    sobm = math.sin(oblm)
    cobt = math.cos(oblt)
    sobt = math.sin(oblt)
    cpsi = math.cos(psi)
    spsi = math.sin(psi)

    xx = cpsi
    yx = -spsi * cobm
    zx = -spsi * sobm
    xy = spsi * cobt
    yy = cpsi * cobm * cobt + sobm * sobt
    zy = cpsi * sobm * cobt - cobm * sobt
    xz = spsi * sobt
    yz = cpsi * cobm * sobt - sobm * cobt
    zz = cpsi * sobm * sobt + cobm * cobt

    if direction is PrecessDirection.FROM_2000:
        return RotationMatrix([[xx, yx, zx], [xy, yy, zy], [xz, yz, zz]])
    return RotationMatrix([[xx, xy, xz], [yx, yy, yz], [zx, zy, zz]])


def gyration_rotation(
    time: Instant,
    direction: PrecessDirection,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    """Combined precession and nutation, tagged EQJ->EQD or EQD->EQJ."""
    prec = precession_rotation(time, direction)
    nut = nutation_rotation(time, direction, cache)
    if direction is PrecessDirection.INTO_2000:
        rot = nut.combine(prec)
        return RotationMatrix(rot.rot, Frame.EQD, Frame.EQJ)
    rot = prec.combine(nut)
    return RotationMatrix(rot.rot, Frame.EQJ, Frame.EQD)


def gyration(
    vec: Vector,
    direction: PrecessDirection,
    cache: OrientationCache | None = None,
) -> Vector:
    """Convert a vector between J2000 mean equator and true equator of ``vec.t``."""
    return gyration_rotation(vec.t, direction, cache).rotate_vector(vec)


def gyration_state(
    state: StateVector,
    direction: PrecessDirection,
    cache: OrientationCache | None = None,
) -> StateVector:
    """Gyrate position and velocity together (the matrix is treated as constant)."""
    return gyration_rotation(state.t, direction, cache).rotate_state(state)


def precession(vec: Vector, direction: PrecessDirection) -> Vector:
    """Precess a vector between J2000 and the mean equator of ``vec.t``."""
    out = precession_rotation(vec.t, direction).rot @ vec.as_array()
    return Vector.from_array(out, vec.t, Frame.ANY)


def nutation(
    vec: Vector,
    direction: PrecessDirection,
    cache: OrientationCache | None = None,
) -> Vector:
    """Nutate a vector between the mean and true equator of ``vec.t``."""
    out = nutation_rotation(vec.t, direction, cache).rot @ vec.as_array()
    return Vector.from_array(out, vec.t, Frame.ANY)
