"""Cartesian and spherical vectors tagged with an Instant and a reference frame."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

import cspyce
import numpy as np

from ephemeris_engine.angle_utils import dms_string
from ephemeris_engine.constants import RAD2DEG, RAD2HOUR, DEG2RAD
from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.time_utils import Instant


class Frame(Enum):
    """Reference frames a vector or rotation matrix can be expressed in."""

    EQJ = 'EQJ'  # J2000 mean equator and equinox
    EQD = 'EQD'  # true equator and equinox of date
    ECL = 'ECL'  # J2000 mean ecliptic
    ECT = 'ECT'  # true ecliptic of date
    HOR = 'HOR'  # topocentric horizontal (north, west, zenith)
    GAL = 'GAL'  # IAU 1958 galactic
    JUP = 'JUP'  # Jupiter equatorial
    ANY = 'ANY'  # untagged


def frames_compatible(a: Frame, b: Frame) -> bool:
    """True if two frame tags may be mixed (equal, or either is untagged)."""
    return a is b or a is Frame.ANY or b is Frame.ANY


def _check_frames(a: Frame, b: Frame) -> Frame:
    if not frames_compatible(a, b):
        raise InvalidArgumentError(f'Frame mismatch: {a.value} vs {b.value}')
    return b if a is Frame.ANY else a


@dataclass(frozen=True)
class Vector:
    """A 3D vector valid at instant ``t``; units are AU unless stated otherwise."""

    x: float
    y: float
    z: float
    t: Instant
    frame: Frame = Frame.EQJ

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def __add__(self, other: Vector) -> Vector:
        frame = _check_frames(self.frame, other.frame)
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z, self.t, frame)

    def __sub__(self, other: Vector) -> Vector:
        frame = _check_frames(self.frame, other.frame)
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z, self.t, frame)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z, self.t, self.frame)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(scalar * self.x, scalar * self.y, scalar * self.z, self.t, self.frame)

    __rmul__ = __mul__

    def __truediv__(self, denom: float) -> Vector:
        return Vector(self.x / denom, self.y / denom, self.z / denom, self.t, self.frame)

    def dot(self, other: Vector) -> float:
        _check_frames(self.frame, other.frame)
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        frame = _check_frames(self.frame, other.frame)
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
            self.t,
            frame,
        )

    def unit(self) -> Vector:
        """Unit vector in the same direction.

        Raises:
            InvalidArgumentError: Zero-length vector.
        """
        r = self.length()
        if r == 0.0:
            raise InvalidArgumentError('Cannot normalize a zero-length vector')
        return self / r

    def with_time(self, t: Instant) -> Vector:
        return replace(self, t=t)

    def with_frame(self, frame: Frame) -> Vector:
        return replace(self, frame=frame)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray | list[float], t: Instant, frame: Frame = Frame.EQJ) -> Vector:
        return cls(float(arr[0]), float(arr[1]), float(arr[2]), t, frame)


@dataclass(frozen=True)
class StateVector:
    """Position (AU) and velocity (AU/day) sharing one Instant and frame."""

    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    t: Instant
    frame: Frame = Frame.EQJ

    @classmethod
    def from_vectors(cls, pos: Vector, vel: Vector) -> StateVector:
        frame = _check_frames(pos.frame, vel.frame)
        return cls(pos.x, pos.y, pos.z, vel.x, vel.y, vel.z, pos.t, frame)

    def position(self) -> Vector:
        return Vector(self.x, self.y, self.z, self.t, self.frame)

    def velocity(self) -> Vector:
        return Vector(self.vx, self.vy, self.vz, self.t, self.frame)

    def __add__(self, other: StateVector) -> StateVector:
        frame = _check_frames(self.frame, other.frame)
        return StateVector(
            self.x + other.x,
            self.y + other.y,
            self.z + other.z,
            self.vx + other.vx,
            self.vy + other.vy,
            self.vz + other.vz,
            self.t,
            frame,
        )

    def __sub__(self, other: StateVector) -> StateVector:
        return self + (-other)

    def __neg__(self) -> StateVector:
        return StateVector(-self.x, -self.y, -self.z, -self.vx, -self.vy, -self.vz, self.t, self.frame)

    def __mul__(self, scalar: float) -> StateVector:
        return StateVector(
            scalar * self.x,
            scalar * self.y,
            scalar * self.z,
            scalar * self.vx,
            scalar * self.vy,
            scalar * self.vz,
            self.t,
            self.frame,
        )

    __rmul__ = __mul__


@dataclass(frozen=True)
class Spherical:
    """Spherical coordinates: latitude and longitude in degrees, distance in any unit."""

    lat: float
    lon: float
    dist: float


@dataclass(frozen=True)
class EquatorialCoordinates:
    """Right ascension (hours), declination (degrees), distance (AU) and the source vector."""

    ra: float
    dec: float
    dist: float
    vec: Vector

    def __str__(self) -> str:
        return f'RA {dms_string(self.ra, "hms")}  Dec {dms_string(self.dec, "dms")}  {self.dist:.9f} AU'


def angle_between(a: Vector, b: Vector) -> float:
    """Angle in degrees, in [0, 180], between two vectors.

    Raises:
        InvalidArgumentError: Either vector is too short to define a direction.
    """
    if a.x * a.x + a.y * a.y + a.z * a.z < 1.0e-8:
        raise InvalidArgumentError('angle_between: first vector is too short')
    if b.x * b.x + b.y * b.y + b.z * b.z < 1.0e-8:
        raise InvalidArgumentError('angle_between: second vector is too short')
    _check_frames(a.frame, b.frame)
    return RAD2DEG * float(cspyce.vsep(a.as_array(), b.as_array()))


def sphere_from_vector(vec: Vector) -> Spherical:
    """Convert a Cartesian vector to latitude/longitude (degrees, lon in [0, 360)) and distance.

    Raises:
        InvalidArgumentError: Zero vector.
    """
    xyproj = vec.x * vec.x + vec.y * vec.y
    dist = math.sqrt(xyproj + vec.z * vec.z)
    if xyproj == 0.0:
        if vec.z == 0.0:
            raise InvalidArgumentError('Zero-length vector not allowed')
        return Spherical(90.0 if vec.z > 0.0 else -90.0, 0.0, dist)
    _, lon, lat = cspyce.reclat(vec.as_array())
    lon_deg = RAD2DEG * float(lon)
    if lon_deg < 0.0:
        lon_deg += 360.0
    return Spherical(RAD2DEG * float(lat), lon_deg, dist)


def vector_from_sphere(sphere: Spherical, t: Instant, frame: Frame = Frame.EQJ) -> Vector:
    """Convert spherical coordinates (degrees) to a Cartesian vector at instant ``t``."""
    arr = cspyce.latrec(sphere.dist, DEG2RAD * sphere.lon, DEG2RAD * sphere.lat)
    return Vector.from_array(arr, t, frame)


def equator_from_vector(vec: Vector) -> EquatorialCoordinates:
    """Convert an equatorial Cartesian vector to right ascension and declination.

    Raises:
        InvalidArgumentError: Zero vector.
    """
    if vec.x == 0.0 and vec.y == 0.0 and vec.z == 0.0:
        raise InvalidArgumentError('Zero-length vector not allowed')
    dist, ra, dec = cspyce.recrad(vec.as_array())
    return EquatorialCoordinates(RAD2HOUR * float(ra), RAD2DEG * float(dec), float(dist), vec)


def vector_from_equator(ra: float, dec: float, dist: float, t: Instant) -> Vector:
    """Convert right ascension (hours), declination (degrees) and distance to an EQJ vector."""
    arr = cspyce.radrec(dist, 15.0 * DEG2RAD * ra, DEG2RAD * dec)
    return Vector.from_array(arr, t, Frame.EQJ)


def toggle_azimuth_direction(az: float) -> float:
    """Switch an azimuth between clockwise and counterclockwise measurement."""
    az = 360.0 - az
    if az >= 360.0:
        az -= 360.0
    elif az < 0.0:
        az += 360.0
    return az
