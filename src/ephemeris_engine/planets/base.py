"""Planet model dataclass and evaluation of VSOP87-style trigonometric series."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from ephemeris_engine.constants import DAYS_PER_MILLENNIUM

# Coefficient tables are written in units of 1e-8 (radians or AU).
_TABLE_SCALE = 1.0e-8

Term = tuple[float, float, float]


def make_series(*powers: Sequence[Term]) -> tuple[np.ndarray, ...]:
    """Build one coordinate series from per-power term lists.

    Parameters:
        powers: For each power of time (t**0, t**1, ...), a list of
            (amplitude * 1e8, phase in radians, frequency in radians/millennium).

    Returns:
        Tuple of (n, 3) float arrays with amplitudes scaled to radians or AU.
    """
    out = []
    for terms in powers:
        arr = np.array(terms, dtype=np.float64).reshape(-1, 3)
        arr[:, 0] *= _TABLE_SCALE
        arr.flags.writeable = False
        out.append(arr)
    return tuple(out)


def evaluate_series(series: tuple[np.ndarray, ...], t: float) -> float:
    """Sum of t**k * sum(A * cos(B + C * t)) over all powers k."""
    total = 0.0
    tpower = 1.0
    for arr in series:
        total += tpower * float(np.sum(arr[:, 0] * np.cos(arr[:, 1] + arr[:, 2] * t)))
        tpower *= t
    return total


def series_derivative(series: tuple[np.ndarray, ...], t: float) -> float:
    """Derivative of evaluate_series with respect to t (per millennium)."""
    total = 0.0
    for k, arr in enumerate(series):
        angle = arr[:, 1] + arr[:, 2] * t
        cos_sum = float(np.sum(arr[:, 0] * np.cos(angle)))
        sin_sum = float(np.sum(arr[:, 0] * arr[:, 2] * np.sin(angle)))
        term = -sin_sum * (t**k)
        if k > 0:
            term += k * cos_sum * (t ** (k - 1))
        total += term
    return total


@dataclass(frozen=True)
class PlanetModel:
    """Heliocentric series model of one planet.

    Attributes:
        name: Planet name.
        lon: Longitude series, radians, J2000 mean ecliptic.
        lat: Latitude series, radians.
        rad: Distance series, AU.
        gm: Gravitational parameter in AU^3/day^2.
        orbital_period: Mean sidereal period in days.
    """

    name: str
    lon: tuple[np.ndarray, ...]
    lat: tuple[np.ndarray, ...]
    rad: tuple[np.ndarray, ...]
    gm: float
    orbital_period: float

    def spherical(self, tt: float) -> tuple[float, float, float]:
        """Heliocentric ecliptic (longitude rad, latitude rad, distance AU) at TT days."""
        t = tt / DAYS_PER_MILLENNIUM
        return (
            evaluate_series(self.lon, t),
            evaluate_series(self.lat, t),
            evaluate_series(self.rad, t),
        )

    def position(self, tt: float) -> np.ndarray:
        """Heliocentric EQJ position in AU."""
        lon, lat, rad = self.spherical(tt)
        return ecliptic_to_equatorial(_to_cartesian(lon, lat, rad))

    def state(self, tt: float) -> tuple[np.ndarray, np.ndarray]:
        """Heliocentric EQJ position (AU) and velocity (AU/day)."""
        t = tt / DAYS_PER_MILLENNIUM
        lon = evaluate_series(self.lon, t)
        lat = evaluate_series(self.lat, t)
        rad = evaluate_series(self.rad, t)
        dlon = series_derivative(self.lon, t)
        dlat = series_derivative(self.lat, t)
        drad = series_derivative(self.rad, t)

        coslon = math.cos(lon)
        sinlon = math.sin(lon)
        coslat = math.cos(lat)
        sinlat = math.sin(lat)
        vx = drad * coslat * coslon - rad * sinlat * coslon * dlat - rad * coslat * sinlon * dlon
        vy = drad * coslat * sinlon - rad * sinlat * sinlon * dlat + rad * coslat * coslon * dlon
        vz = drad * sinlat + rad * coslat * dlat
        pos = ecliptic_to_equatorial(_to_cartesian(lon, lat, rad))
        vel = ecliptic_to_equatorial(np.array([vx, vy, vz]) / DAYS_PER_MILLENNIUM)
        return (pos, vel)


def _to_cartesian(lon: float, lat: float, rad: float) -> np.ndarray:
    rcoslat = rad * math.cos(lat)
    return np.array([rcoslat * math.cos(lon), rcoslat * math.sin(lon), rad * math.sin(lat)])


def ecliptic_to_equatorial(ecl: np.ndarray) -> np.ndarray:
    """Rotate a J2000 dynamical-ecliptic vector into the J2000 mean equator (EQJ)."""
    x, y, z = float(ecl[0]), float(ecl[1]), float(ecl[2])
    return np.array([
        x + 0.000000440360 * y - 0.000000190919 * z,
        -0.000000479966 * x + 0.917482137087 * y - 0.397776982902 * z,
        0.397776982902 * y + 0.917482137087 * z,
    ])
