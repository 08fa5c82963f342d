"""US Standard Atmosphere (1976) pressure, temperature and relative density."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ephemeris_engine.angle_utils import verify_number
from ephemeris_engine.errors import InvalidArgumentError

SEA_LEVEL_PRESSURE_PA = 101325.0
SEA_LEVEL_TEMPERATURE_K = 288.15
# Temperature of the isothermal layer between 11 and 20 km.
STRATOSPHERE_TEMPERATURE_K = 216.65

MIN_ELEVATION_M = -500.0
MAX_ELEVATION_M = 100000.0


@dataclass(frozen=True)
class AtmosphereInfo:
    """Atmospheric state at one elevation.

    Attributes:
        pressure: Pascals.
        temperature: Kelvins.
        density: Density relative to sea level (1.0 at sea level).
    """

    pressure: float
    temperature: float
    density: float


def atmosphere(elevation: float) -> AtmosphereInfo:
    """Model the atmosphere at ``elevation`` metres above sea level.

    Parameters:
        elevation: Metres, from -500 to 100000.

    Returns:
        AtmosphereInfo for that elevation.

    Raises:
        InvalidArgumentError: Elevation is not finite or out of range.
    """
    elevation = verify_number(elevation)
    if elevation < MIN_ELEVATION_M or elevation > MAX_ELEVATION_M:
        raise InvalidArgumentError(f'Invalid elevation: {elevation}')

    t0 = SEA_LEVEL_TEMPERATURE_K
    t1 = STRATOSPHERE_TEMPERATURE_K
    if elevation <= 11000.0:
        temperature = t0 - 0.0065 * elevation
        pressure = SEA_LEVEL_PRESSURE_PA * (t0 / temperature) ** -5.25577
    elif elevation <= 20000.0:
        temperature = t1
        pressure = 22632.0 * math.exp(-0.00015768832 * (elevation - 11000.0))
    else:
        temperature = t1 + 0.001 * (elevation - 20000.0)
        pressure = 5474.87 * (t1 / temperature) ** 34.16319

    # Ideal gas: density is proportional to P/T.
    density = (pressure / temperature) / (SEA_LEVEL_PRESSURE_PA / t0)
    return AtmosphereInfo(pressure, temperature, density)
