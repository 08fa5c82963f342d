"""Named rotation matrices between the supported reference frames.

Each constructor returns a RotationMatrix tagged with its source and target
frames, so chaining and application are checked.
"""

from __future__ import annotations

import math

from ephemeris_engine.constants import DEG2RAD
from ephemeris_engine.earth_orientation import (
    OrientationCache,
    PrecessDirection,
    e_tilt,
    gyration_rotation,
    sidereal_time,
)
from ephemeris_engine.observer import Observer
from ephemeris_engine.rotation import RotationMatrix, spin
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame

# cos and sin of the J2000 mean obliquity, 0.40909260059599012 radians
_COS_OB = 0.9174821430670688
_SIN_OB = 0.3977769691083922

_EQJ_TO_GAL = (
    (-0.0548624779711344, -0.8734572784246782, -0.4838000529948520),
    (0.4941095946388765, -0.4447938112296831, 0.7470034631630423),
    (-0.8676668813529025, -0.1980677870294097, 0.4559861124470794),
)

_JUP_TO_EQJ = (
    (9.99432765338654e-01, 3.03959428906285e-02, -1.44994559663353e-02),
    (-3.36771074697641e-02, 9.02057912352809e-01, -4.30299169409101e-01),
    (0.0, 4.30543388542295e-01, 9.02569881273754e-01),
)


def rotation_eqj_ecl() -> RotationMatrix:
    """J2000 mean equator to J2000 mean ecliptic."""
    return RotationMatrix(
        [[1.0, 0.0, 0.0], [0.0, _COS_OB, _SIN_OB], [0.0, -_SIN_OB, _COS_OB]],
        Frame.EQJ,
        Frame.ECL,
    )


def rotation_ecl_eqj() -> RotationMatrix:
    """J2000 mean ecliptic to J2000 mean equator."""
    return rotation_eqj_ecl().inverse()


def rotation_eqj_eqd(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    """J2000 mean equator to true equator of date (precession then nutation)."""
    return gyration_rotation(time, PrecessDirection.FROM_2000, cache)


def rotation_eqd_eqj(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    """True equator of date to J2000 mean equator (nutation then precession)."""
    return gyration_rotation(time, PrecessDirection.INTO_2000, cache)


def rotation_eqd_hor(
    time: Instant,
    observer: Observer,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    """True equator of date to the observer's horizontal frame.

    The horizontal axes are north, west, and zenith.
    """
    sin_lat = math.sin(observer.latitude * DEG2RAD)
    cos_lat = math.cos(observer.latitude * DEG2RAD)
    sin_lon = math.sin(observer.longitude * DEG2RAD)
    cos_lon = math.cos(observer.longitude * DEG2RAD)

    uze = [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat]
    une = [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat]
    uwe = [sin_lon, -cos_lon, 0.0]

    spin_angle = -15.0 * sidereal_time(time, cache)
    uz = spin(spin_angle, uze)
    un = spin(spin_angle, une)
    uw = spin(spin_angle, uwe)
    return RotationMatrix([un, uw, uz], Frame.EQD, Frame.HOR)


def rotation_hor_eqd(
    time: Instant,
    observer: Observer,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    return rotation_eqd_hor(time, observer, cache).inverse()


def rotation_hor_eqj(
    time: Instant,
    observer: Observer,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    return rotation_hor_eqd(time, observer, cache).combine(rotation_eqd_eqj(time, cache))


def rotation_eqj_hor(
    time: Instant,
    observer: Observer,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    return rotation_hor_eqj(time, observer, cache).inverse()


def rotation_eqd_ecl(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    return rotation_eqd_eqj(time, cache).combine(rotation_eqj_ecl())


def rotation_ecl_eqd(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    return rotation_eqd_ecl(time, cache).inverse()


def rotation_ecl_hor(
    time: Instant,
    observer: Observer,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    return rotation_ecl_eqd(time, cache).combine(rotation_eqd_hor(time, observer, cache))


def rotation_hor_ecl(
    time: Instant,
    observer: Observer,
    cache: OrientationCache | None = None,
) -> RotationMatrix:
    return rotation_ecl_hor(time, observer, cache).inverse()


def rotation_eqj_gal() -> RotationMatrix:
    """J2000 mean equator to IAU 1958 galactic coordinates."""
    return RotationMatrix(_EQJ_TO_GAL, Frame.EQJ, Frame.GAL)


def rotation_gal_eqj() -> RotationMatrix:
    return rotation_eqj_gal().inverse()


def rotation_eqd_ect(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    """True equator of date to true ecliptic of date (rotation by the true obliquity)."""
    tobl = e_tilt(time, cache).tobl * DEG2RAD
    c = math.cos(tobl)
    s = math.sin(tobl)
    return RotationMatrix([[1.0, 0.0, 0.0], [0.0, c, s], [0.0, -s, c]], Frame.EQD, Frame.ECT)


def rotation_ect_eqd(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    return rotation_eqd_ect(time, cache).inverse()


def rotation_eqj_ect(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    return rotation_eqj_eqd(time, cache).combine(rotation_eqd_ect(time, cache))


def rotation_ect_eqj(time: Instant, cache: OrientationCache | None = None) -> RotationMatrix:
    return rotation_ect_eqd(time, cache).combine(rotation_eqd_eqj(time, cache))


def rotation_jup_eqj() -> RotationMatrix:
    """Jupiter equatorial frame (as used by the Galilean moon series) to J2000."""
    return RotationMatrix(_JUP_TO_EQJ, Frame.JUP, Frame.EQJ)
