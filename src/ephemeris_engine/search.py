"""Root finding in time for scalar functions of an Instant.

search() locates an ascending zero crossing inside a bracket. find_ascent()
narrows a wide interval down to one that brackets an ascending crossing,
using a bound on the function's rate of change to prune subintervals that
cannot contain one.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from ephemeris_engine.constants import SECONDS_PER_DAY
from ephemeris_engine.errors import NonConvergenceError
from ephemeris_engine.time_utils import Instant

logger = logging.getLogger(__name__)

SearchFunction = Callable[[Instant], float]

# Recursion limit for find_ascent.
MAX_ASCENT_DEPTH = 17


@dataclass(frozen=True)
class SearchOptions:
    """Tuning for search().

    Attributes:
        dt_tolerance_seconds: Stop once the bracket is narrower than this.
        init_f1: Known value of the function at t1, to save one evaluation.
        init_f2: Known value of the function at t2.
        iter_limit: Maximum refinement passes before NonConvergenceError.
    """

    dt_tolerance_seconds: float = 1.0
    init_f1: float | None = None
    init_f2: float | None = None
    iter_limit: int = 20


@dataclass(frozen=True)
class AscentInfo:
    """An interval [tx, ty] over which the function rises from ax < 0 to ay >= 0."""

    tx: Instant
    ty: Instant
    ax: float
    ay: float


def _quad_interp(
    tm: float, dt: float, fa: float, fm: float, fb: float
) -> tuple[float, float, float] | None:
    """Fit a parabola through three equally spaced samples and find its root.

    Parameters:
        tm: UT of the middle sample.
        dt: Spacing between samples, days.
        fa: Value at tm - dt.
        fm: Value at tm.
        fb: Value at tm + dt.

    Returns:
        (x, t, df_dt) where x in [-1, 1] locates the single root, t is its UT
        and df_dt the slope there; None if there is not exactly one root in range.
    """
    q = (fb + fa) / 2.0 - fm
    r = (fb - fa) / 2.0
    s = fm

    if q == 0.0:
        if r == 0.0:
            return None
        x = -s / r
        if x < -1.0 or x > 1.0:
            return None
    else:
        u = r * r - 4.0 * q * s
        if u <= 0.0:
            return None
        ru = math.sqrt(u)
        x1 = (-r + ru) / (2.0 * q)
        x2 = (-r - ru) / (2.0 * q)
        if -1.0 <= x1 <= 1.0:
            if -1.0 <= x2 <= 1.0:
                return None
            x = x1
        elif -1.0 <= x2 <= 1.0:
            x = x2
        else:
            return None

    t = tm + x * dt
    df_dt = (2.0 * q * x + r) / dt
    return (x, t, df_dt)


def search(
    func: SearchFunction,
    t1: Instant,
    t2: Instant,
    options: SearchOptions | None = None,
) -> Instant | None:
    """Find the time in [t1, t2] when ``func`` ascends through zero.

    The caller should pick a window small enough that ``func`` crosses zero
    at most once, going from negative to non-negative.

    Parameters:
        func: Function of time to solve.
        t1: Lower bound of the window.
        t2: Upper bound of the window.
        options: Optional tolerances and cached endpoint values.

    Returns:
        The crossing time, or None if no ascending crossing was found.

    Raises:
        NonConvergenceError: The refinement needed more than ``iter_limit`` passes.
    """
    opts = options or SearchOptions()
    dt_days = abs(opts.dt_tolerance_seconds / SECONDS_PER_DAY)
    f1 = opts.init_f1 if opts.init_f1 is not None else func(t1)
    f2 = opts.init_f2 if opts.init_f2 is not None else func(t2)
    fmid = 0.0
    calc_fmid = True

    iteration = 0
    while True:
        iteration += 1
        if iteration > opts.iter_limit:
            logger.error('search did not converge between %s and %s', t1, t2)
            raise NonConvergenceError(
                f'search exceeded {opts.iter_limit} iterations between {t1} and {t2}'
            )

        dt = (t2.tt - t1.tt) / 2.0
        tmid = t1.add_days(dt)
        if abs(dt) < dt_days:
            return tmid

        if calc_fmid:
            fmid = func(tmid)
        else:
            calc_fmid = True

        q = _quad_interp(tmid.ut, t2.ut - tmid.ut, f1, fmid, f2)
        if q is not None:
            _, q_ut, q_df_dt = q
            tq = Instant(q_ut)
            fq = func(tq)
            if q_df_dt != 0.0:
                dt_guess = abs(fq / q_df_dt)
                if dt_guess < dt_days:
                    return tq

                # Try a tighter bracket centered on the interpolated root.
                dt_guess *= 1.2
                if dt_guess < dt / 10.0:
                    tleft = tq.add_days(-dt_guess)
                    tright = tq.add_days(+dt_guess)
                    if (tleft.ut - t1.ut) * (tleft.ut - t2.ut) < 0.0 and (
                        (tright.ut - t1.ut) * (tright.ut - t2.ut) < 0.0
                    ):
                        fleft = func(tleft)
                        fright = func(tright)
                        if fleft < 0.0 <= fright:
                            f1 = fleft
                            f2 = fright
                            t1 = tleft
                            t2 = tright
                            fmid = fq
                            calc_fmid = False
                            continue
            logger.debug('Quadratic step rejected at %s; bisecting', tq)

        if f1 < 0.0 <= fmid:
            t2 = tmid
            f2 = fmid
            continue

        if fmid < 0.0 <= f2:
            t1 = tmid
            f1 = fmid
            continue

        # No ascending crossing, or more than one in the window.
        return None


def find_ascent(
    depth: int,
    func: SearchFunction,
    max_deriv: float,
    t1: Instant,
    t2: Instant,
    a1: float,
    a2: float,
) -> AscentInfo | None:
    """Find the first subinterval of [t1, t2] where ``func`` ascends through zero.

    Parameters:
        depth: Current recursion depth; callers pass 0.
        func: Function of time.
        max_deriv: Upper bound on |d func / dt| in units per day.
        t1: Start of the interval.
        t2: End of the interval.
        a1: func(t1).
        a2: func(t2).

    Returns:
        AscentInfo bracketing the first ascending crossing, or None if the
        derivative bound shows there is none.

    Raises:
        NonConvergenceError: Recursion went deeper than MAX_ASCENT_DEPTH.
    """
    if a1 < 0.0 <= a2:
        return AscentInfo(t1, t2, a1, a2)

    if a1 >= 0.0 and a2 < 0.0:
        # Strictly descending over the whole interval.
        return None

    if depth > MAX_ASCENT_DEPTH:
        logger.error('find_ascent recursion too deep between %s and %s', t1, t2)
        raise NonConvergenceError('find_ascent recursion exceeded its depth limit')

    dt = t2.ut - t1.ut
    if dt * SECONDS_PER_DAY < 1.0:
        return None

    # Both ends share a sign; the function cannot reach zero and come back
    # within the interval if it would have to move faster than max_deriv.
    da = min(abs(a1), abs(a2))
    if da > max_deriv * (dt / 2.0):
        logger.debug('find_ascent pruned [%s, %s] at depth %d', t1, t2, depth)
        return None

    tmid = Instant((t1.ut + t2.ut) / 2.0)
    amid = func(tmid)
    return find_ascent(depth + 1, func, max_deriv, t1, tmid, a1, amid) or find_ascent(
        depth + 1, func, max_deriv, tmid, t2, amid, a2
    )
