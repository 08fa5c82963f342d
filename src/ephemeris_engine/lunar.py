"""Geocentric Moon position from the Montenbruck-Pfleger lunar series.

The series is the Improved Lunar Ephemeris (Brown's theory) as truncated in
Montenbruck & Pfleger, "Astronomy on the Personal Computer". It yields the
Moon's longitude, latitude and distance referred to the mean ecliptic and
equinox of date.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ephemeris_engine.constants import (
    ARC,
    DAYS_PER_CENTURY,
    DEG2RAD,
    EARTH_EQUATORIAL_RADIUS_AU,
    EARTH_MOON_MASS_RATIO,
    PI2,
    RAD2DEG,
)
from ephemeris_engine.earth_orientation import (
    OrientationCache,
    PrecessDirection,
    e_tilt,
    mean_obliquity,
    nutation_rotation,
    precession_rotation,
)
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, Spherical, StateVector, Vector

# Central-difference half step for the Moon's velocity, days (0.864 seconds).
MOON_STATE_DT = 1.0e-5

# Columns: longitude, distance-correction, gamma, parallax coefficients,
# then the multipliers of l, l', F and D.
_SOLUTION_TERMS = np.array([
    (13.9020, 14.0600, -0.0010, 0.2607, 0, 0, 0, 4),
    (0.4030, -4.0100, 0.3940, 0.0023, 0, 0, 0, 3),
    (2369.9120, 2373.3600, 0.6010, 28.2333, 0, 0, 0, 2),
    (-125.1540, -112.7900, -0.7250, -0.9781, 0, 0, 0, 1),
    (1.9790, 6.9800, -0.4450, 0.0433, 1, 0, 0, 4),
    (191.9530, 192.7200, 0.0290, 3.0861, 1, 0, 0, 2),
    (-8.4660, -13.5100, 0.4550, -0.1093, 1, 0, 0, 1),
    (22639.5000, 22609.0700, 0.0790, 186.5398, 1, 0, 0, 0),
    (18.6090, 3.5900, -0.0940, 0.0118, 1, 0, 0, -1),
    (-4586.4650, -4578.1300, -0.0770, 34.3117, 1, 0, 0, -2),
    (3.2150, 5.4400, 0.1920, -0.0386, 1, 0, 0, -3),
    (-38.4280, -38.6400, 0.0010, 0.6008, 1, 0, 0, -4),
    (-0.3930, -1.4300, -0.0920, 0.0086, 1, 0, 0, -6),
    (-0.2890, -1.5900, 0.1230, -0.0053, 0, 1, 0, 4),
    (-24.4200, -25.1000, 0.0400, -0.3000, 0, 1, 0, 2),
    (18.0230, 17.9300, 0.0070, 0.1494, 0, 1, 0, 1),
    (-668.1460, -126.9800, -1.3020, -0.3997, 0, 1, 0, 0),
    (0.5600, 0.3200, -0.0010, -0.0037, 0, 1, 0, -1),
    (-165.1450, -165.0600, 0.0540, 1.9178, 0, 1, 0, -2),
    (-1.8770, -6.4600, -0.4160, 0.0339, 0, 1, 0, -4),
    (0.2130, 1.0200, -0.0740, 0.0054, 2, 0, 0, 4),
    (14.3870, 14.7800, -0.0170, 0.2833, 2, 0, 0, 2),
    (-0.5860, -1.2000, 0.0540, -0.0100, 2, 0, 0, 1),
    (769.0160, 767.9600, 0.1070, 10.1657, 2, 0, 0, 0),
    (1.7500, 2.0100, -0.0180, 0.0155, 2, 0, 0, -1),
    (-211.6560, -152.5300, 5.6790, -0.3039, 2, 0, 0, -2),
    (1.2250, 0.9100, -0.0300, -0.0088, 2, 0, 0, -3),
    (-30.7730, -34.0700, -0.3080, 0.3722, 2, 0, 0, -4),
    (-0.5700, -1.4000, -0.0740, 0.0109, 2, 0, 0, -6),
    (-2.9210, -11.7500, 0.7870, -0.0484, 1, 1, 0, 2),
    (1.2670, 1.5200, -0.0220, 0.0164, 1, 1, 0, 1),
    (-109.6730, -115.1800, 0.4610, -0.9490, 1, 1, 0, 0),
    (-205.9620, -182.3600, 2.0560, 1.4437, 1, 1, 0, -2),
    (0.2330, 0.3600, 0.0120, -0.0025, 1, 1, 0, -3),
    (-4.3910, -9.6600, -0.4710, 0.0673, 1, 1, 0, -4),
    (0.2830, 1.5300, -0.1110, 0.0060, 1, -1, 0, 4),
    (14.5770, 31.7000, -1.5400, 0.2302, 1, -1, 0, 2),
    (147.6870, 138.7600, 0.6790, 1.1528, 1, -1, 0, 0),
    (-1.0890, 0.5500, 0.0210, 0.0000, 1, -1, 0, -1),
    (28.4750, 23.5900, -0.4430, -0.2257, 1, -1, 0, -2),
    (-0.2760, -0.3800, -0.0060, -0.0036, 1, -1, 0, -3),
    (0.6360, 2.2700, 0.1460, -0.0102, 1, -1, 0, -4),
    (-0.1890, -1.6800, 0.1310, -0.0028, 0, 2, 0, 2),
    (-7.4860, -0.6600, -0.0370, -0.0086, 0, 2, 0, 0),
    (-8.0960, -16.3500, -0.7400, 0.0918, 0, 2, 0, -2),
    (-5.7410, -0.0400, 0.0000, -0.0009, 0, 0, 2, 2),
    (0.2550, 0.0000, 0.0000, 0.0000, 0, 0, 2, 1),
    (-411.6080, -0.2000, 0.0000, -0.0124, 0, 0, 2, 0),
    (0.5840, 0.8400, 0.0000, 0.0071, 0, 0, 2, -1),
    (-55.1730, -52.1400, 0.0000, -0.1052, 0, 0, 2, -2),
    (0.2540, 0.2500, 0.0000, -0.0017, 0, 0, 2, -3),
    (0.0250, -1.6700, 0.0000, 0.0031, 0, 0, 2, -4),
    (1.0600, 2.9600, -0.1660, 0.0243, 3, 0, 0, 2),
    (36.1240, 50.6400, -1.3000, 0.6215, 3, 0, 0, 0),
    (-13.1930, -16.4000, 0.2580, -0.1187, 3, 0, 0, -2),
    (-1.1870, -0.7400, 0.0420, 0.0074, 3, 0, 0, -4),
    (-0.2930, -0.3100, -0.0020, 0.0046, 3, 0, 0, -6),
    (-0.2900, -1.4500, 0.1160, -0.0051, 2, 1, 0, 2),
    (-7.6490, -10.5600, 0.2590, -0.1038, 2, 1, 0, 0),
    (-8.6270, -7.5900, 0.0780, -0.0192, 2, 1, 0, -2),
    (-2.7400, -2.5400, 0.0220, 0.0324, 2, 1, 0, -4),
    (1.1810, 3.3200, -0.2120, 0.0213, 2, -1, 0, 2),
    (9.7030, 11.6700, -0.1510, 0.1268, 2, -1, 0, 0),
    (-0.3520, -0.3700, 0.0010, -0.0028, 2, -1, 0, -1),
    (-2.4940, -1.1700, -0.0030, -0.0017, 2, -1, 0, -2),
    (0.3600, 0.2000, -0.0120, -0.0043, 2, -1, 0, -4),
    (-1.1670, -1.2500, 0.0080, -0.0106, 1, 2, 0, 0),
    (-7.4120, -6.1200, 0.1170, 0.0484, 1, 2, 0, -2),
    (-0.3110, -0.6500, -0.0320, 0.0044, 1, 2, 0, -4),
    (0.7570, 1.8200, -0.1050, 0.0112, 1, -2, 0, 2),
    (2.5800, 2.3200, 0.0270, 0.0196, 1, -2, 0, 0),
    (2.5330, 2.4000, -0.0140, -0.0212, 1, -2, 0, -2),
    (-0.3440, -0.5700, -0.0250, 0.0036, 0, 3, 0, -2),
    (-0.9920, -0.0200, 0.0000, 0.0000, 1, 0, 2, 2),
    (-45.0990, -0.0200, 0.0000, -0.0010, 1, 0, 2, 0),
    (-0.1790, -9.5200, 0.0000, -0.0833, 1, 0, 2, -2),
    (-0.3010, -0.3300, 0.0000, 0.0014, 1, 0, 2, -4),
    (-6.3820, -3.3700, 0.0000, -0.0481, 1, 0, -2, 2),
    (39.5280, 85.1300, 0.0000, -0.7136, 1, 0, -2, 0),
    (9.3660, 0.7100, 0.0000, -0.0112, 1, 0, -2, -2),
    (0.2020, 0.0200, 0.0000, 0.0000, 1, 0, -2, -4),
    (0.4150, 0.1000, 0.0000, 0.0013, 0, 1, 2, 0),
    (-2.1520, -2.2600, 0.0000, -0.0066, 0, 1, 2, -2),
    (-1.4400, -1.3000, 0.0000, 0.0014, 0, 1, -2, 2),
    (0.3840, -0.0400, 0.0000, 0.0000, 0, 1, -2, -2),
    (1.9380, 3.6000, -0.1450, 0.0401, 4, 0, 0, 0),
    (-0.9520, -1.5800, 0.0520, -0.0130, 4, 0, 0, -2),
    (-0.5510, -0.9400, 0.0320, -0.0097, 3, 1, 0, 0),
    (-0.4820, -0.5700, 0.0050, -0.0045, 3, 1, 0, -2),
    (0.6810, 0.9600, -0.0260, 0.0115, 3, -1, 0, 0),
    (-0.2970, -0.2700, 0.0020, -0.0009, 2, 2, 0, -2),
    (0.2540, 0.2100, -0.0030, 0.0000, 2, -2, 0, -2),
    (-0.2500, -0.2200, 0.0040, 0.0014, 1, 3, 0, -2),
    (-3.9960, 0.0000, 0.0000, 0.0004, 2, 0, 2, 0),
    (0.5570, -0.7500, 0.0000, -0.0090, 2, 0, 2, -2),
    (-0.4590, -0.3800, 0.0000, -0.0053, 2, 0, -2, 2),
    (-1.2980, 0.7400, 0.0000, 0.0004, 2, 0, -2, 0),
    (0.5380, 1.1400, 0.0000, -0.0141, 2, 0, -2, -2),
    (0.2630, 0.0200, 0.0000, 0.0000, 1, 1, 2, 0),
    (0.4260, 0.0700, 0.0000, -0.0006, 1, 1, -2, -2),
    (-0.3040, 0.0300, 0.0000, 0.0003, 1, -1, 2, 0),
    (-0.3720, -0.1900, 0.0000, -0.0027, 1, -1, -2, 2),
    (0.4180, 0.0000, 0.0000, 0.0000, 0, 0, 4, 0),
    (-0.3300, -0.0400, 0.0000, 0.0000, 3, 0, 2, 0),
], dtype=np.float64)
_SOLUTION_TERMS.flags.writeable = False

# Latitude perturbations N: coefficient, then multipliers of l, l', F, D.
_LATITUDE_TERMS = np.array([
    (-526.069, 0, 0, 1, -2),
    (-3.352, 0, 0, 1, -4),
    (44.297, 1, 0, 1, -2),
    (-6.000, 1, 0, 1, -4),
    (20.599, -1, 0, 1, 0),
    (-30.598, -1, 0, 1, -2),
    (-24.649, -2, 0, 1, 0),
    (-2.000, -2, 0, 1, -2),
    (-22.571, 0, 1, 1, -2),
    (10.985, 0, -1, 1, -2),
], dtype=np.float64)
_LATITUDE_TERMS.flags.writeable = False

# Long-period longitude terms: amplitude (arcsec), phase and rate (revolutions).
_LONGITUDE_EXTRA = np.array([
    (0.82, 0.7736, -62.5512),
    (0.31, 0.0466, -125.1025),
    (0.35, 0.5785, -25.1042),
    (0.66, 0.4591, 1335.8075),
    (0.64, 0.3130, -91.5680),
    (1.14, 0.1480, 1331.2898),
    (0.21, 0.5918, 1056.5859),
    (0.44, 0.5784, 1322.8595),
    (0.24, 0.2275, -5.7374),
    (0.28, 0.2965, 2.6929),
    (0.33, 0.3132, 6.3368),
], dtype=np.float64)
_LONGITUDE_EXTRA.flags.writeable = False


@dataclass(frozen=True)
class MoonPosition:
    """Geocentric Moon position, mean ecliptic and equinox of date.

    Attributes:
        lon: Ecliptic longitude, radians in [0, 2*pi).
        lat: Ecliptic latitude, radians.
        dist: Distance from Earth's center, AU.
    """

    lon: float
    lat: float
    dist: float


def _sine(phi: float) -> float:
    return math.sin(PI2 * phi)


def _frac(x: float) -> float:
    return x - math.floor(x)


def _terms(
    multipliers: np.ndarray,
    args: np.ndarray,
    factors: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """Cosine and sine parts of each product term.

    Each argument contributes ``(factor * exp(i * arg)) ** n``; negative ``n``
    takes the complex conjugate, so the factor enters as ``factor ** |n|``.
    """
    phase = multipliers @ args
    amplitude = np.prod(factors ** np.abs(multipliers), axis=1)
    return (amplitude * np.cos(phase), amplitude * np.sin(phase))


def calc_moon(time: Instant) -> MoonPosition:
    """Evaluate the lunar series at ``time``."""
    t = time.tt / DAYS_PER_CENTURY
    t2 = t * t

    s1 = _sine(0.19833 + 0.05611 * t)
    s2 = _sine(0.27869 + 0.04508 * t)
    s3 = _sine(0.16827 - 0.36903 * t)
    s4 = _sine(0.34734 - 5.37261 * t)
    s5 = _sine(0.10498 - 5.37899 * t)
    s6 = _sine(0.42681 - 0.41855 * t)
    s7 = _sine(0.14943 - 5.37511 * t)

    dl0 = 0.84 * s1 + 0.31 * s2 + 14.27 * s3 + 7.26 * s4 + 0.28 * s5 + 0.24 * s6
    dl = 2.94 * s1 + 0.31 * s2 + 14.27 * s3 + 9.34 * s4 + 1.12 * s5 + 0.83 * s6
    dls = -6.40 * s1 - 1.89 * s6
    df = 0.21 * s1 + 0.31 * s2 + 14.27 * s3 - 88.70 * s4 - 15.30 * s5 + 0.24 * s6 - 1.86 * s7
    dd = dl0 - dls
    dgam = (
        -3332.0e-9 * _sine(0.59734 - 5.37261 * t)
        - 539.0e-9 * _sine(0.35498 - 5.37899 * t)
        - 64.0e-9 * _sine(0.39943 - 5.37511 * t)
    )

    l0 = PI2 * _frac(0.60643382 + 1336.85522467 * t - 0.00000313 * t2) + dl0 / ARC
    lm = PI2 * _frac(0.37489701 + 1325.55240982 * t + 0.00002565 * t2) + dl / ARC
    ls = PI2 * _frac(0.99312619 + 99.99735956 * t - 0.00000044 * t2) + dls / ARC
    f = PI2 * _frac(0.25909118 + 1342.22782980 * t - 0.00000892 * t2) + df / ARC
    d = PI2 * _frac(0.82736186 + 1236.85308708 * t - 0.00000397 * t2) + dd / ARC

    args = np.array([lm, ls, f, d])
    factors = np.array([
        1.000002208,
        0.997504612 - 0.002495388 * t,
        1.000002708 + 139.978 * dgam,
        1.0,
    ])

    cos_part, sin_part = _terms(_SOLUTION_TERMS[:, 4:], args, factors)
    dlam = float(np.dot(_SOLUTION_TERMS[:, 0], sin_part))
    ds = float(np.dot(_SOLUTION_TERMS[:, 1], sin_part))
    gam1c = float(np.dot(_SOLUTION_TERMS[:, 2], cos_part))
    sinpi = 3422.7 + float(np.dot(_SOLUTION_TERMS[:, 3], cos_part))

    _, lat_sin = _terms(_LATITUDE_TERMS[:, 1:], args, factors)
    n = float(np.dot(_LATITUDE_TERMS[:, 0], lat_sin))

    extra = _LONGITUDE_EXTRA
    dlam += float(np.sum(extra[:, 0] * np.sin(PI2 * (extra[:, 1] + extra[:, 2] * t))))

    s = f + ds / ARC
    lat_seconds = (
        (1.000002708 + 139.978 * dgam) * (18518.511 + 1.189 * gam1c) * math.sin(s)
        - 6.24 * math.sin(3.0 * s)
        + n
    )

    return MoonPosition(
        lon=PI2 * _frac((l0 + dlam / ARC) / PI2),
        lat=lat_seconds / ARC,
        dist=(ARC * EARTH_EQUATORIAL_RADIUS_AU) / (0.999953253 * sinpi),
    )


def _mean_ecliptic_vector(moon: MoonPosition) -> np.ndarray:
    dist_cos_lat = moon.dist * math.cos(moon.lat)
    return np.array([
        dist_cos_lat * math.cos(moon.lon),
        dist_cos_lat * math.sin(moon.lon),
        moon.dist * math.sin(moon.lat),
    ])


def _ecliptic_to_equator(time: Instant, ecl: np.ndarray) -> np.ndarray:
    """Rotate mean ecliptic of date to mean equator of date."""
    obl = mean_obliquity(time) * DEG2RAD
    c = math.cos(obl)
    s = math.sin(obl)
    return np.array([ecl[0], c * ecl[1] - s * ecl[2], s * ecl[1] + c * ecl[2]])


def geo_moon(time: Instant) -> Vector:
    """Geocentric Moon position in EQJ (AU)."""
    moon = calc_moon(time)
    mean_eq = _ecliptic_to_equator(time, _mean_ecliptic_vector(moon))
    pos = precession_rotation(time, PrecessDirection.INTO_2000).rot @ mean_eq
    return Vector.from_array(pos, time, Frame.EQJ)


def geo_moon_state(time: Instant) -> StateVector:
    """Geocentric Moon position (AU) and velocity (AU/day) in EQJ.

    The velocity is a central difference over +/- MOON_STATE_DT days.
    """
    r1 = geo_moon(time.add_days(-MOON_STATE_DT))
    r2 = geo_moon(time.add_days(+MOON_STATE_DT))
    return StateVector(
        (r1.x + r2.x) / 2.0,
        (r1.y + r2.y) / 2.0,
        (r1.z + r2.z) / 2.0,
        (r2.x - r1.x) / (2.0 * MOON_STATE_DT),
        (r2.y - r1.y) / (2.0 * MOON_STATE_DT),
        (r2.z - r1.z) / (2.0 * MOON_STATE_DT),
        time,
    )


def geo_emb_state(time: Instant) -> StateVector:
    """Geocentric state of the Earth/Moon barycenter in EQJ."""
    return geo_moon_state(time) * (1.0 / (1.0 + EARTH_MOON_MASS_RATIO))


def ecliptic_geo_moon(time: Instant, cache: OrientationCache | None = None) -> Spherical:
    """Geocentric Moon position in the true ecliptic of date.

    Returns:
        Spherical with latitude and longitude in degrees and distance in AU.
    """
    moon = calc_moon(time)
    mean_eq = _ecliptic_to_equator(time, _mean_ecliptic_vector(moon))
    true_eq = nutation_rotation(time, PrecessDirection.FROM_2000, cache).rot @ mean_eq
    tobl = e_tilt(time, cache).tobl * DEG2RAD
    c = math.cos(tobl)
    s = math.sin(tobl)
    x = float(true_eq[0])
    y = float(c * true_eq[1] + s * true_eq[2])
    z = float(-s * true_eq[1] + c * true_eq[2])
    dist = math.sqrt(x * x + y * y + z * z)
    lon = RAD2DEG * math.atan2(y, x)
    if lon < 0.0:
        lon += 360.0
    lat = RAD2DEG * math.atan2(z, math.hypot(x, y))
    return Spherical(lat, lon, dist)
