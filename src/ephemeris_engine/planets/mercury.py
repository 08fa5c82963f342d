"""Mercury series model (truncated VSOP87, J2000 ecliptic)."""

from __future__ import annotations

from ephemeris_engine.constants import MERCURY_GM, MERCURY_ORBITAL_PERIOD
from ephemeris_engine.planets.base import PlanetModel, make_series

MERCURY_MODEL = PlanetModel(
    name='Mercury',
    lon=make_series(
        [
            (440250710, 0, 0),
            (40989415, 1.48302034, 26087.9031416),
            (5046294, 4.4778549, 52175.8062831),
            (855347, 1.165203, 78263.709425),
            (165590, 4.119692, 104351.612566),
            (34562, 1.02605, 130439.51571),
            (7583, 4.1571, 156527.4188),
            (1803, 4.3627, 27197.2817),
        ],
        [
            (2608790324475, 0, 0),
            (1126008, 6.2170397, 26087.9031416),
            (303471, 3.055655, 52175.806283),
            (80538, 6.10455, 78263.70942),
            (21245, 2.83532, 104351.61257),
            (5592, 5.8268, 130439.5157),
            (1472, 2.5185, 156527.4188),
            (388, 5.480, 182615.322),
            (352, 3.052, 1109.379),
            (103, 2.149, 208703.225),
            (94, 6.12, 27197.28),
            (91, 0.00, 24978.52),
            (52, 5.62, 5661.33),
        ],
        [
            (16904, 4.69072, 26087.90314),
            (7397, 1.3474, 52175.8063),
            (3018, 4.4564, 78263.7094),
            (1107, 1.2623, 104351.6126),
            (378, 4.320, 130439.516),
            (123, 1.069, 156527.419),
        ],
        [
            (188, 0.035, 52175.806),
            (142, 3.125, 26087.903),
            (97, 3.00, 78263.71),
        ],
    ),
    lat=make_series(
        [
            (11737529, 1.98357499, 26087.9031416),
            (2388077, 5.0373896, 52175.8062831),
            (1222840, 3.1415927, 0),
            (543252, 1.796444, 78263.709425),
            (129779, 4.832325, 104351.612566),
            (31867, 1.58088, 130439.51571),
            (7963, 4.6097, 156527.4188),
        ],
        [
            (274646, 3.950085, 26087.903142),
            (99738, 3.141593, 0),
            (22675, 0.01515, 52175.80628),
            (10895, 0.48540, 78263.70942),
            (6353, 3.4294, 104351.6126),
        ],
    ),
    rad=make_series(
        [
            (39528272, 0, 0),
            (7834132, 6.1923372, 26087.9031416),
            (795526, 2.959897, 52175.806283),
            (121282, 6.010642, 78263.709425),
            (21922, 2.77820, 104351.61257),
            (4354, 5.8289, 130439.5157),
            (918, 2.597, 156527.419),
            (290, 1.424, 25028.521),
            (260, 3.028, 27197.282),
            (202, 5.647, 182615.322),
            (201, 5.592, 31749.235),
            (142, 6.253, 24978.525),
            (100, 3.734, 21535.950),
        ],
        [
            (217348, 4.656172, 26087.903142),
            (44142, 1.42386, 52175.80628),
            (10094, 4.47466, 78263.70942),
            (2433, 1.2423, 104351.6126),
            (1624, 0, 0),
            (604, 4.293, 130439.516),
            (153, 1.061, 156527.419),
        ],
        [
            (3118, 3.0823, 26087.9031),
            (1245, 6.1518, 52175.8063),
            (425, 2.926, 78263.709),
            (136, 5.980, 104351.613),
        ],
        [
            (33, 1.68, 26087.90),
        ],
    ),
    gm=MERCURY_GM,
    orbital_period=MERCURY_ORBITAL_PERIOD,
)
