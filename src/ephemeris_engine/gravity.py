"""Gravity simulation of small bodies moving among the Sun and planets.

The Sun and planets follow their series models; the solar-system barycenter is
estimated from each planet's pull on the Sun. Small bodies are advanced with a
predictor-corrector step that averages the acceleration at both ends of the
interval.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import (
    EARTH_GM,
    JUPITER_GM,
    MARS_GM,
    MERCURY_GM,
    MOON_GM,
    NEPTUNE_GM,
    SATURN_GM,
    SUN_GM,
    URANUS_GM,
    VENUS_GM,
)
from ephemeris_engine.errors import InvalidArgumentError, UnsupportedBodyError
from ephemeris_engine.planets import get_planet_model
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, StateVector

logger = logging.getLogger(__name__)

GravitatorList = Sequence[tuple[Body, float]]

# Earth carries the Moon's mass.
ALL_PLANETS: tuple[tuple[Body, float], ...] = (
    (Body.MERCURY, MERCURY_GM),
    (Body.VENUS, VENUS_GM),
    (Body.EARTH, EARTH_GM + MOON_GM),
    (Body.MARS, MARS_GM),
    (Body.JUPITER, JUPITER_GM),
    (Body.SATURN, SATURN_GM),
    (Body.URANUS, URANUS_GM),
    (Body.NEPTUNE, NEPTUNE_GM),
)

GIANT_PLANETS: tuple[tuple[Body, float], ...] = (
    (Body.JUPITER, JUPITER_GM),
    (Body.SATURN, SATURN_GM),
    (Body.URANUS, URANUS_GM),
    (Body.NEPTUNE, NEPTUNE_GM),
)


@dataclass(frozen=True)
class BodyState:
    """Barycentric position (AU) and velocity (AU/day) at TT ``tt``."""

    tt: float
    r: np.ndarray
    v: np.ndarray


@dataclass(frozen=True)
class GravCalc:
    """Barycentric state of a simulated small body plus its acceleration (AU/day^2)."""

    tt: float
    r: np.ndarray
    v: np.ndarray
    a: np.ndarray


def update_position(dt: float, r: np.ndarray, v: np.ndarray, a: np.ndarray) -> np.ndarray:
    """Position after ``dt`` days under constant acceleration."""
    return r + dt * (v + (dt / 2.0) * a)


def update_velocity(dt: float, v: np.ndarray, a: np.ndarray) -> np.ndarray:
    """Velocity after ``dt`` days under constant acceleration."""
    return v + dt * a


class MajorBodies:
    """Barycentric states of the Sun and a set of planets at one TT.

    Parameters:
        tt: Terrestrial time, days since J2000.
        planets: (body, GM) pairs to include; the Sun is always present.
    """

    def __init__(self, tt: float, planets: GravitatorList = ALL_PLANETS) -> None:
        self.tt = tt
        self._masses: list[tuple[Body, float]] = [(Body.SUN, SUN_GM)]
        ssb_r = np.zeros(3)
        ssb_v = np.zeros(3)
        helio: list[tuple[Body, np.ndarray, np.ndarray]] = []
        for body, gm in planets:
            r, v = get_planet_model(body).state(tt)
            shift = gm / (gm + SUN_GM)
            ssb_r = ssb_r + shift * r
            ssb_v = ssb_v + shift * v
            helio.append((body, r, v))
            self._masses.append((body, gm))

        self._states: dict[Body, BodyState] = {
            body: BodyState(tt, r - ssb_r, v - ssb_v) for body, r, v in helio
        }
        self._states[Body.SUN] = BodyState(tt, -ssb_r, -ssb_v)

    def state(self, body: Body) -> BodyState:
        """Barycentric state of the Sun, a simulated planet, or the SSB itself.

        Raises:
            UnsupportedBodyError: The body is not part of this simulation.
        """
        if body is Body.SSB:
            return BodyState(self.tt, np.zeros(3), np.zeros(3))
        found = self._states.get(body)
        if found is None:
            raise UnsupportedBodyError(f'{body.value} is not a gravitating body in this simulation')
        return found

    def acceleration(self, pos: np.ndarray) -> np.ndarray:
        """Net gravitational acceleration at barycentric position ``pos``."""
        acc = np.zeros(3)
        for body, gm in self._masses:
            d = self._states[body].r - pos
            r2 = float(d @ d)
            acc += d * (gm / (r2 * math.sqrt(r2)))
        return acc


def grav_from_state(
    tt: float,
    r_helio: np.ndarray,
    v_helio: np.ndarray,
    planets: GravitatorList = ALL_PLANETS,
) -> tuple[MajorBodies, GravCalc]:
    """Convert a heliocentric state into a barycentric GravCalc with its acceleration."""
    major = MajorBodies(tt, planets)
    sun = major.state(Body.SUN)
    r = r_helio + sun.r
    v = v_helio + sun.v
    return (major, GravCalc(tt, r, v, major.acceleration(r)))


def advance(major: MajorBodies, calc: GravCalc) -> GravCalc:
    """Advance ``calc`` to ``major.tt`` with one predictor-corrector step."""
    dt = major.tt - calc.tt
    approx = update_position(dt, calc.r, calc.v, calc.a)
    mean_acc = (major.acceleration(approx) + calc.a) / 2.0
    r = update_position(dt, calc.r, calc.v, mean_acc)
    v = update_velocity(dt, calc.v, mean_acc)
    return GravCalc(major.tt, r, v, major.acceleration(r))


def grav_step(
    tt: float,
    calc: GravCalc,
    planets: GravitatorList = ALL_PLANETS,
) -> tuple[MajorBodies, GravCalc]:
    """One integration step from ``calc.tt`` to ``tt``."""
    major = MajorBodies(tt, planets)
    return (major, advance(major, calc))


def _export(r: np.ndarray, v: np.ndarray, time: Instant) -> StateVector:
    return StateVector(
        float(r[0]), float(r[1]), float(r[2]),
        float(v[0]), float(v[1]), float(v[2]),
        time,
        Frame.EQJ,
    )


class GravitySimulator:
    """Simulates small bodies such as asteroids and comets under solar-system gravity.

    Parameters:
        origin: Body the caller's state vectors are relative to. Must be the
            SSB, the Sun, or a planet from Mercury to Neptune.
        time: Instant of the initial states.
        body_states: Initial EQJ states (AU, AU/day) relative to ``origin``.

    Raises:
        InvalidArgumentError: A state's time differs from ``time``.
        UnsupportedBodyError: ``origin`` is not a simulated body.
    """

    def __init__(self, origin: Body, time: Instant, body_states: Sequence[StateVector]) -> None:
        for state in body_states:
            if state.t.tt != time.tt:
                raise InvalidArgumentError('Inconsistent times in body_states')
            if state.frame not in (Frame.EQJ, Frame.ANY):
                raise InvalidArgumentError(
                    f'Body states must be in EQJ, not {state.frame.value}'
                )

        self._origin = origin
        self._time = time
        self._major = MajorBodies(time.tt)
        o = self._major.state(origin)
        self._bodies: list[GravCalc] = []
        for state in body_states:
            r = np.array([state.x, state.y, state.z]) + o.r
            v = np.array([state.vx, state.vy, state.vz]) + o.v
            self._bodies.append(GravCalc(time.tt, r, v, self._major.acceleration(r)))

    @property
    def origin(self) -> Body:
        return self._origin

    @property
    def time(self) -> Instant:
        return self._time

    def update(self, time: Instant) -> list[StateVector]:
        """Advance every small body to ``time`` in one step and return their states.

        Calling with the current time returns the current states unchanged.
        """
        if time.tt != self._time.tt:
            major = MajorBodies(time.tt)
            self._bodies = [advance(major, calc) for calc in self._bodies]
            self._major = major
            logger.debug('Gravity simulation stepped %d bodies to tt=%s', len(self._bodies), time.tt)
        self._time = time

        o = self._major.state(self._origin)
        return [_export(calc.r - o.r, calc.v - o.v, time) for calc in self._bodies]

    def solar_system_body_state(self, body: Body) -> StateVector:
        """State of the Sun, a planet, or the SSB relative to the simulation origin."""
        b = self._major.state(body)
        o = self._major.state(self._origin)
        return _export(b.r - o.r, b.v - o.v, self._time)
