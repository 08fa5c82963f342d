"""Pluto by numerical integration between heliocentric state samples.

The samples are spaced ``PLUTO_TIME_STEP`` days apart. The one at J2000 is
Pluto's osculating heliocentric state from the JPL DE ephemeris; every other
sample is integrated outward from its neighbor toward J2000 under the pull of
the Sun and the four giant planets. Between two samples the orbit is
integrated forward from the lower one and backward from the upper one; the
two trajectories are blended linearly so the result is continuous across the
segment. Each integrated segment is cached.
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache

import numpy as np

from ephemeris_engine import config
from ephemeris_engine.bodies import Body
from ephemeris_engine.errors import InvalidArgumentError
from ephemeris_engine.gravity import (
    GIANT_PLANETS,
    GravCalc,
    MajorBodies,
    grav_from_state,
    grav_step,
    update_position,
    update_velocity,
)
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, StateVector

logger = logging.getLogger(__name__)

PLUTO_NUM_STATES = 51
PLUTO_TIME_STEP = 29200.0
PLUTO_DT = 146.0
PLUTO_NSTEPS = 201

_EPOCH_INDEX = PLUTO_NUM_STATES // 2
_FIRST_TT = -PLUTO_TIME_STEP * _EPOCH_INDEX
_LAST_TT = _FIRST_TT + PLUTO_TIME_STEP * (PLUTO_NUM_STATES - 1)

# Heliocentric EQJ state at TT 0: position in AU, velocity in AU/day.
_EPOCH_POSITION = np.array([-9.8753673425269, -27.978789938717, -5.753712759681])
_EPOCH_VELOCITY = np.array([3.0287533248818e-03, -1.1276087003636e-03, -1.2651326732125e-03])

_segment_cache: dict[int, list[GravCalc]] = {}


@lru_cache(maxsize=None)
def _sample(index: int) -> GravCalc:
    """Barycentric sample ``index`` (0 to PLUTO_NUM_STATES - 1) with its acceleration."""
    if index == _EPOCH_INDEX:
        return grav_from_state(0.0, _EPOCH_POSITION, _EPOCH_VELOCITY, GIANT_PLANETS)[1]
    tt = _FIRST_TT + index * PLUTO_TIME_STEP
    if index > _EPOCH_INDEX:
        return _one_way(_sample(index - 1), tt, PLUTO_DT)[1]
    return _one_way(_sample(index + 1), tt, -PLUTO_DT)[1]


def _clamp_index(frac: float, nsteps: int) -> int:
    index = int(math.floor(frac))
    if index < 0:
        return 0
    if index >= nsteps:
        return nsteps - 1
    return index


def _blend(x: np.ndarray, y: np.ndarray, ramp: float) -> np.ndarray:
    return (1.0 - ramp) * x + ramp * y


def _get_segment(tt: float) -> list[GravCalc] | None:
    """Integrated grid covering ``tt``, or None outside the sample range."""
    if tt < _FIRST_TT or tt > _LAST_TT:
        return None

    seg_index = _clamp_index((tt - _FIRST_TT) / PLUTO_TIME_STEP, PLUTO_NUM_STATES - 1)
    seg = _segment_cache.get(seg_index)
    if seg is not None:
        return seg

    logger.debug('Integrating Pluto segment %d', seg_index)
    lower = _sample(seg_index)
    upper = _sample(seg_index + 1)

    forward = [lower]
    step_tt = lower.tt
    for _ in range(1, PLUTO_NSTEPS - 1):
        step_tt += PLUTO_DT
        forward.append(grav_step(step_tt, forward[-1], GIANT_PLANETS)[1])
    forward.append(upper)

    reverse = [upper]
    step_tt = upper.tt
    for _ in range(1, PLUTO_NSTEPS - 1):
        step_tt -= PLUTO_DT
        reverse.append(grav_step(step_tt, reverse[-1], GIANT_PLANETS)[1])
    reverse.append(lower)
    reverse.reverse()

    seg = [lower]
    for i in range(1, PLUTO_NSTEPS - 1):
        ramp = i / (PLUTO_NSTEPS - 1)
        f = forward[i]
        b = reverse[i]
        seg.append(GravCalc(
            f.tt,
            _blend(f.r, b.r, ramp),
            _blend(f.v, b.v, ramp),
            _blend(f.a, b.a, ramp),
        ))
    seg.append(upper)
    _segment_cache[seg_index] = seg
    return seg


def _one_way(start: GravCalc, target_tt: float, dt: float) -> tuple[MajorBodies, GravCalc]:
    """Integrate from ``start`` to ``target_tt`` in steps of ``dt`` (sign gives direction)."""
    n = max(1, math.ceil((target_tt - start.tt) / dt))
    calc = start
    major = None
    for i in range(n):
        step_tt = target_tt if i + 1 == n else calc.tt + dt
        major, calc = grav_step(step_tt, calc, GIANT_PLANETS)
    return (major, calc)


def sample_range() -> tuple[float, float]:
    """First and last TT covered by the Pluto sample table."""
    return (_FIRST_TT, _LAST_TT)


def clear_segment_cache() -> None:
    _segment_cache.clear()


def calc_pluto(time: Instant, heliocentric: bool = True) -> StateVector:
    """Pluto's EQJ state (AU, AU/day) relative to the Sun or the SSB.

    Parameters:
        time: Instant of evaluation.
        heliocentric: True for a heliocentric state, False for barycentric.

    Returns:
        StateVector of Pluto.

    Raises:
        InvalidArgumentError: ``time`` lies further outside the sample table
            than config.get_pluto_max_extrapolation_days() allows.
    """
    tt = time.tt
    major: MajorBodies | None = None
    seg = _get_segment(tt)
    if seg is None:
        allowance = config.get_pluto_max_extrapolation_days()
        overshoot = _FIRST_TT - tt if tt < _FIRST_TT else tt - _LAST_TT
        if overshoot > allowance:
            raise InvalidArgumentError(
                f'Pluto is not available {overshoot:.1f} days outside its sample table '
                f'(limit {allowance:.1f} days)'
            )
        logger.warning(
            'Extrapolating Pluto %.1f days outside its sample table', overshoot
        )
        if tt < _FIRST_TT:
            major, calc = _one_way(_sample(0), tt, -PLUTO_DT)
        else:
            major, calc = _one_way(_sample(PLUTO_NUM_STATES - 1), tt, PLUTO_DT)
        r = calc.r
        v = calc.v
    else:
        left = _clamp_index((tt - seg[0].tt) / PLUTO_DT, PLUTO_NSTEPS - 1)
        s1 = seg[left]
        s2 = seg[left + 1]
        acc = (s1.a + s2.a) / 2.0
        ra = update_position(tt - s1.tt, s1.r, s1.v, acc)
        va = update_velocity(tt - s1.tt, s1.v, acc)
        rb = update_position(tt - s2.tt, s2.r, s2.v, acc)
        vb = update_velocity(tt - s2.tt, s2.v, acc)
        ramp = (tt - s1.tt) / PLUTO_DT
        r = _blend(ra, rb, ramp)
        v = _blend(va, vb, ramp)

    if heliocentric:
        if major is None:
            major = MajorBodies(tt, GIANT_PLANETS)
        sun = major.state(Body.SUN)
        r = r - sun.r
        v = v - sun.v

    return StateVector(
        float(r[0]), float(r[1]), float(r[2]),
        float(v[0]), float(v[1]), float(v[2]),
        time,
        Frame.EQJ,
    )
