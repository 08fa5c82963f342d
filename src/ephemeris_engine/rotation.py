"""Frame-tagged 3x3 rotation matrices.

Matrices are stored row-major so that ``out = rot @ v``. Each matrix records
the frame it converts from (``source``) and to (``target``); applying it to a
vector in another frame, or chaining it after a matrix with a different
target, raises InvalidArgumentError. ``Frame.ANY`` disables the check.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ephemeris_engine.constants import DEG2RAD
from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.vectors import Frame, StateVector, Vector, frames_compatible


@dataclass(frozen=True, eq=False)
class RotationMatrix:
    """Orthonormal 3x3 rotation from ``source`` frame to ``target`` frame."""

    rot: np.ndarray
    source: Frame = Frame.ANY
    target: Frame = Frame.ANY

    def __post_init__(self) -> None:
        arr = np.array(self.rot, dtype=np.float64)
        if arr.shape != (3, 3) or not np.all(np.isfinite(arr)):
            raise InvalidArgumentError('Rotation matrix must be a 3x3 array of finite numbers')
        arr.flags.writeable = False
        object.__setattr__(self, 'rot', arr)

    @classmethod
    def identity(cls, frame: Frame = Frame.ANY) -> RotationMatrix:
        """Identity matrix mapping ``frame`` to itself."""
        return cls(np.eye(3), frame, frame)

    def inverse(self) -> RotationMatrix:
        """Inverse rotation (transpose) with source and target swapped."""
        return RotationMatrix(self.rot.T, self.target, self.source)

    def combine(self, other: RotationMatrix) -> RotationMatrix:
        """Rotation that applies ``self`` first, then ``other``.

        Raises:
            InvalidArgumentError: ``self.target`` does not match ``other.source``.
        """
        if not frames_compatible(self.target, other.source):
            raise InvalidArgumentError(
                f'Cannot combine {self.source.value}->{self.target.value} '
                f'with {other.source.value}->{other.target.value}'
            )
        return RotationMatrix(other.rot @ self.rot, self.source, other.target)

    def pivot(self, axis: int, angle: float, target: Frame = Frame.ANY) -> RotationMatrix:
        """Re-orient by rotating ``angle`` degrees about coordinate ``axis`` (0, 1, or 2).

        The pivot follows the right-hand rule and is applied after this matrix.

        Raises:
            InvalidArgumentError: Axis is not 0, 1, or 2, or angle is not finite.
        """
        if axis not in (0, 1, 2):
            raise InvalidArgumentError(f'Invalid axis {axis}. Must be 0, 1, or 2.')
        if not math.isfinite(angle):
            raise InvalidArgumentError(f'Invalid pivot angle {angle!r}')
        radians = angle * DEG2RAD
        c = math.cos(radians)
        s = math.sin(radians)
        i = (axis + 1) % 3
        j = (axis + 2) % 3
        p = np.eye(3)
        p[i, i] = c
        p[i, j] = -s
        p[j, i] = s
        p[j, j] = c
        return RotationMatrix(p @ self.rot, self.source, target)

    def rotate_vector(self, vec: Vector) -> Vector:
        """Apply the rotation to a vector expressed in ``source``."""
        if not frames_compatible(self.source, vec.frame):
            raise InvalidArgumentError(
                f'Vector in frame {vec.frame.value} cannot be rotated from {self.source.value}'
            )
        out = self.rot @ vec.as_array()
        frame = vec.frame if self.target is Frame.ANY else self.target
        return Vector.from_array(out, vec.t, frame)

    def rotate_state(self, state: StateVector) -> StateVector:
        """Apply the rotation to both position and velocity."""
        pos = self.rotate_vector(state.position())
        vel = self.rotate_vector(state.velocity())
        return StateVector.from_vectors(pos, vel)

    def is_orthonormal(self, tolerance: float = 1.0e-9) -> bool:
        """True if rot @ rot.T is the identity within ``tolerance``."""
        return bool(np.allclose(self.rot @ self.rot.T, np.eye(3), atol=tolerance, rtol=0.0))


def spin(angle: float, vec: np.ndarray | list[float]) -> np.ndarray:
    """Rotate a raw 3-vector counterclockwise by ``angle`` degrees about the z axis."""
    radians = angle * DEG2RAD
    c = math.cos(radians)
    s = math.sin(radians)
    return np.array([c * vec[0] + s * vec[1], c * vec[1] - s * vec[0], vec[2]], dtype=np.float64)
