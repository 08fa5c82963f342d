"""Jovicentric states of Io, Europa, Ganymede and Callisto (L1.2 theory, truncated).

Each moon is described by mean orbital elements plus short periodic series in
the elements; the elements are converted to a state in Jupiter's equatorial
frame and rotated into EQJ.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ephemeris_engine.constants import PI2
from ephemeris_engine.frames import rotation_jup_eqj
from ephemeris_engine.time_utils import Instant
from ephemeris_engine.vectors import Frame, StateVector

# Days from 1950-01-01T00:00 TT to the J2000 epoch.
_EPOCH_1950_OFFSET = 18262.5

# Convergence threshold of the eccentric-longitude iteration, radians.
_KEPLER_TOLERANCE = 1.0e-12


@dataclass(frozen=True)
class MoonModel:
    """Series coefficients for one Galilean moon.

    Attributes:
        name: Moon name.
        mu: Gravitational parameter of Jupiter plus the moon, AU^3/day^2.
        al: Mean longitude at the 1950 epoch (radians) and mean motion (rad/day).
        a: Semi-major axis terms (amplitude AU, phase, frequency).
        l: Mean longitude terms (amplitude rad, phase, frequency).
        z: Eccentricity-vector terms.
        zeta: Inclination-vector terms.
    """

    name: str
    mu: float
    al: tuple[float, float]
    a: np.ndarray
    l: np.ndarray  # noqa: E741
    z: np.ndarray
    zeta: np.ndarray


def _table(rows: list[tuple[float, float, float]]) -> np.ndarray:
    arr = np.array(rows, dtype=np.float64).reshape(-1, 3)
    arr.flags.writeable = False
    return arr


IO = MoonModel(
    name='Io',
    mu=2.8248942843381399e-07,
    al=(1.4462132960212239e+00, 3.5515522861824000e+00),
    a=_table([
        (0.0028210960212903, 0.0, 0.0),
    ]),
    l=_table([
        (-0.0001925258348666, 4.9369589722644998e+00, 1.3584836583050000e-02),
        (-0.0000970803596076, 4.3188796477322002e+00, 1.3034138432430000e-02),
        (-0.0000898817416500, 1.9080016428616999e+00, 3.0506486715799999e-03),
        (-0.0000553101050262, 1.4936156681568999e+00, 1.2938928911549999e-02),
    ]),
    z=_table([
        (0.0041510849668155, 4.0899396355450000e+00, -1.2906864146660001e-02),
        (0.0006260521444113, 1.4461888986270000e+00, 3.5515522949801999e+00),
        (0.0000352747346169, 2.1256287034577999e+00, 1.2727416566999999e-04),
    ]),
    zeta=_table([
        (0.0003142172466014, 2.7964219722923001e+00, -2.3150960980000000e-03),
        (0.0000904169207946, 1.0477061879627001e+00, -5.6920638196000003e-04),
    ]),
)

EUROPA = MoonModel(
    name='Europa',
    mu=2.8248327439289299e-07,
    al=(-3.7352634374713622e-01, 1.7693227111234699e+00),
    a=_table([
        (0.0044871037804314, 0.0, 0.0),
        (0.0000004324367498, 1.8196456062910000e+00, 1.7822295777568000e+00),
    ]),
    l=_table([
        (0.0008576433172936, 4.3188693178264002e+00, 1.3034138308049999e-02),
        (0.0004549582875086, 1.4936531751079001e+00, 1.2938928819619999e-02),
        (0.0003248939825174, 1.8196494533458001e+00, 1.7822295777568000e+00),
        (-0.0003074250079334, 4.9377037005910998e+00, 1.3584832867240000e-02),
        (0.0001982386144784, 1.9079869054759999e+00, 3.0510121286900001e-03),
        (0.0001834063551804, 2.1402853388529000e+00, 1.4500978933800000e-03),
        (-0.0001434383188452, 5.6222140366630002e+00, 8.9111478887838003e-01),
        (-0.0000771939140944, 4.3002724372349999e+00, 2.6733443704265998e+00),
    ]),
    z=_table([
        (-0.0093589104136341, 4.0899396509038999e+00, -1.2906864146660001e-02),
        (0.0002988994545555, 5.9097265185595003e+00, 1.7693227079461999e+00),
        (0.0002139036390350, 2.1256289300016000e+00, 1.2727418406999999e-04),
        (0.0001980963564781, 2.7435168292649998e+00, 6.7797343008999997e-04),
        (0.0001210388158965, 5.5839943711203004e+00, 3.2056614899999997e-05),
        (0.0000837042048393, 1.6094538368039000e+00, -9.0402165808846002e-01),
        (0.0000823525166369, 1.4461887708689001e+00, 3.5515522949801999e+00),
    ]),
    zeta=_table([
        (0.0040404917832303, 1.0477063169425000e+00, -5.6920640539999997e-04),
        (0.0002200421034564, 3.3368857864364001e+00, -1.2491307306999999e-04),
        (0.0001662544744719, 2.4134862374710999e+00, 0.0),
        (0.0000590282470983, 5.9719930968366004e+00, -3.0561602250000000e-05),
    ]),
)

GANYMEDE = MoonModel(
    name='Ganymede',
    mu=2.8249818418472298e-07,
    al=(2.8740893911433479e-01, 8.7820792358932798e-01),
    a=_table([
        (0.0071566594572575, 0.0, 0.0),
        (0.0000013930299110, 1.1586745884981000e+00, 2.6733443704265998e+00),
    ]),
    l=_table([
        (0.0002310797886226, 2.1402987195941998e+00, 1.4500978438400001e-03),
        (-0.0001828635964118, 4.3188672736968003e+00, 1.3034138282630000e-02),
        (0.0001512378778204, 4.9373102372298003e+00, 1.3584834812520000e-02),
        (-0.0001163720969778, 4.3002659861490002e+00, 2.6733443704265998e+00),
        (-0.0000955478069846, 1.4936612842567001e+00, 1.2938928798570001e-02),
        (0.0000815246854464, 5.6222137132535002e+00, 8.9111478887838003e-01),
        (-0.0000801219679602, 1.2995922951532000e+00, 1.0034433456728999e+00),
        (-0.0000607017260182, 6.4978769669238001e-01, 5.0172167043264004e-01),
    ]),
    z=_table([
        (0.0014289811307319, 2.1256295942738999e+00, 1.2727413029000001e-04),
        (0.0007710931226760, 5.5836330003496002e+00, 3.2064341100000001e-05),
        (0.0005925911780766, 4.0899396636447998e+00, -1.2906864146660001e-02),
        (0.0002045597496146, 5.2713683670371996e+00, -1.2523544076106000e-01),
        (0.0001785118648258, 2.8743156721063001e-01, 8.7820792442520001e-01),
        (0.0001131999784893, 1.4462127277818000e+00, 3.5515522949801999e+00),
        (-0.0000658778169210, 2.2702423990985001e+00, -1.7951364394536999e+00),
        (0.0000497058888328, 5.9096792204858000e+00, 1.7693227129285001e+00),
    ]),
    zeta=_table([
        (0.0015932721570848, 3.3368862796665000e+00, -1.2491307058000000e-04),
        (0.0008533093128905, 2.4133881688166001e+00, 0.0),
        (0.0003513347911037, 5.9720789850126996e+00, -3.0561017709999999e-05),
        (-0.0001441929255483, 1.0477061764435001e+00, -5.6920632124000004e-04),
    ]),
)

CALLISTO = MoonModel(
    name='Callisto',
    mu=2.8249214488990899e-07,
    al=(-3.6203412913757038e-01, 3.7648623343382798e-01),
    a=_table([
        (0.0125879701715314, 0.0, 0.0),
        (0.0000035952049470, 6.4965776007116005e-01, 5.0172168165034003e-01),
        (0.0000027580210652, 1.8084235781510001e+00, 3.1750660413359002e+00),
    ]),
    l=_table([
        (0.0005586040123824, 2.1404207189814999e+00, 1.4500979323100001e-03),
        (-0.0003805813868176, 2.7358844897852999e+00, 2.9729650620000000e-05),
        (0.0002205152863262, 6.4979652596399995e-01, 5.0172167243580001e-01),
        (0.0001877895151158, 1.8084787604004999e+00, 3.1750660413359002e+00),
        (0.0000766916975242, 6.2720114319754998e+00, 1.3928364636651001e+00),
        (0.0000747056855106, 1.2995916202344000e+00, 1.0034433456728999e+00),
    ]),
    z=_table([
        (0.0073755808467977, 5.5836071576083999e+00, 3.2065099140000001e-05),
        (0.0002065924169942, 5.9209831565786004e+00, 3.7648624194703001e-01),
        (0.0001589869764021, 2.8744006242622999e-01, 8.7820792442520001e-01),
        (-0.0001561131605348, 2.1257397865089001e+00, 1.2727441285000001e-04),
        (0.0001486043380971, 1.4462134301023000e+00, 3.5515522949801999e+00),
        (0.0000635073108731, 5.9096803285953996e+00, 1.7693227129285001e+00),
        (0.0000599351698525, 4.1125517584797997e+00, -2.7985797954588998e+00),
        (0.0000540660842731, 5.5390350845569003e+00, 2.8683408228299999e-03),
        (-0.0000489596900866, 4.6218149483337996e+00, -6.2695712529518999e-01),
    ]),
    zeta=_table([
        (0.0038422977898495, 2.4133922085556998e+00, 0.0),
        (0.0022453891791894, 5.9721736773277003e+00, -3.0561255249999997e-05),
        (-0.0002604479450559, 3.3368746306408998e+00, -1.2491309972000001e-04),
        (0.0000332112143230, 5.5604137742336999e+00, 2.9003768850700000e-03),
    ]),
)

MOON_MODELS = (IO, EUROPA, GANYMEDE, CALLISTO)


@dataclass(frozen=True)
class JupiterMoonsInfo:
    """Jovicentric EQJ states (AU, AU/day) of the four Galilean moons."""

    io: StateVector
    europa: StateVector
    ganymede: StateVector
    callisto: StateVector

    def moons(self) -> tuple[StateVector, StateVector, StateVector, StateVector]:
        return (self.io, self.europa, self.ganymede, self.callisto)


def _elements(model: MoonModel, t: float) -> tuple[float, float, float, float, float, float]:
    """Semi-major axis, mean longitude, (k, h) and (q, p) at ``t`` days after 1950."""
    a = float(np.sum(model.a[:, 0] * np.cos(model.a[:, 1] + t * model.a[:, 2])))
    al = model.al[0] + t * model.al[1]
    al += float(np.sum(model.l[:, 0] * np.sin(model.l[:, 1] + t * model.l[:, 2])))
    al %= PI2

    zarg = model.z[:, 1] + t * model.z[:, 2]
    k = float(np.sum(model.z[:, 0] * np.cos(zarg)))
    h = float(np.sum(model.z[:, 0] * np.sin(zarg)))

    zetarg = model.zeta[:, 1] + t * model.zeta[:, 2]
    q = float(np.sum(model.zeta[:, 0] * np.cos(zetarg)))
    p = float(np.sum(model.zeta[:, 0] * np.sin(zetarg)))
    return (a, al, k, h, q, p)


def _elements_to_state(
    time: Instant,
    mu: float,
    elem: tuple[float, float, float, float, float, float],
) -> StateVector:
    """Convert equinoctial elements to a state in Jupiter's equatorial frame."""
    a, al, k, h, q, p = elem
    an = math.sqrt(mu / (a * a * a))

    ee = al + k * math.sin(al) - h * math.cos(al)
    while True:
        ce = math.cos(ee)
        se = math.sin(ee)
        de = (al - ee + k * se - h * ce) / (1.0 - k * ce - h * se)
        ee += de
        if abs(de) < _KEPLER_TOLERANCE:
            break

    ce = math.cos(ee)
    se = math.sin(ee)
    dle = h * ce - k * se
    rsam1 = -k * ce - h * se
    asr = 1.0 / (1.0 + rsam1)
    phi = math.sqrt(1.0 - k * k - h * h)
    psi = 1.0 / (1.0 + phi)
    x1 = a * (ce - k - psi * h * dle)
    y1 = a * (se - h + psi * k * dle)
    vx1 = an * asr * a * (-se - psi * h * rsam1)
    vy1 = an * asr * a * (ce + psi * k * rsam1)
    f2 = 2.0 * math.sqrt(1.0 - q * q - p * p)
    p2 = 1.0 - 2.0 * p * p
    q2 = 1.0 - 2.0 * q * q
    pq = 2.0 * p * q

    return StateVector(
        x1 * p2 + y1 * pq,
        x1 * pq + y1 * q2,
        (q * y1 - x1 * p) * f2,
        vx1 * p2 + vy1 * pq,
        vx1 * pq + vy1 * q2,
        (q * vy1 - vx1 * p) * f2,
        time,
        Frame.JUP,
    )


def moon_state(time: Instant, model: MoonModel) -> StateVector:
    """Jovicentric EQJ state of one moon."""
    elem = _elements(model, time.tt + _EPOCH_1950_OFFSET)
    state = _elements_to_state(time, model.mu, elem)
    return rotation_jup_eqj().rotate_state(state)


def jupiter_moons(time: Instant) -> JupiterMoonsInfo:
    """Jovicentric positions and velocities of Jupiter's four largest moons.

    Parameters:
        time: Instant of evaluation.

    Returns:
        JupiterMoonsInfo with EQJ states relative to Jupiter's center.
    """
    return JupiterMoonsInfo(
        io=moon_state(time, IO),
        europa=moon_state(time, EUROPA),
        ganymede=moon_state(time, GANYMEDE),
        callisto=moon_state(time, CALLISTO),
    )
