"""Per-planet series models (heliocentric, J2000 ecliptic series rotated to EQJ)."""

from __future__ import annotations

import logging

from ephemeris_engine.bodies import Body
from ephemeris_engine.constants import PLUTO_ORBITAL_PERIOD
from ephemeris_engine.errors import UnsupportedBodyError
from ephemeris_engine.planets.base import PlanetModel
from ephemeris_engine.planets.earth import EARTH_MODEL
from ephemeris_engine.planets.jupiter import JUPITER_MODEL
from ephemeris_engine.planets.mars import MARS_MODEL
from ephemeris_engine.planets.mercury import MERCURY_MODEL
from ephemeris_engine.planets.neptune import NEPTUNE_MODEL
from ephemeris_engine.planets.saturn import SATURN_MODEL
from ephemeris_engine.planets.uranus import URANUS_MODEL
from ephemeris_engine.planets.venus import VENUS_MODEL

logger = logging.getLogger(__name__)

_PLANET_MODELS: dict[Body, PlanetModel] = {
    Body.MERCURY: MERCURY_MODEL,
    Body.VENUS: VENUS_MODEL,
    Body.EARTH: EARTH_MODEL,
    Body.MARS: MARS_MODEL,
    Body.JUPITER: JUPITER_MODEL,
    Body.SATURN: SATURN_MODEL,
    Body.URANUS: URANUS_MODEL,
    Body.NEPTUNE: NEPTUNE_MODEL,
}


def has_series_model(body: Body) -> bool:
    """True if the body's heliocentric position comes from a trigonometric series."""
    return body in _PLANET_MODELS


def get_planet_model(body: Body) -> PlanetModel:
    """Return the series model for a planet.

    Parameters:
        body: Mercury through Neptune. Pluto is integrated, not a series.

    Returns:
        The immutable PlanetModel for the body.

    Raises:
        UnsupportedBodyError: The body has no series model.
    """
    model = _PLANET_MODELS.get(body)
    if model is None:
        raise UnsupportedBodyError(f'No series model for {body.value}')
    return model


def orbital_period(body: Body) -> float:
    """Mean sidereal orbital period of a planet, days.

    Raises:
        UnsupportedBodyError: ``body`` is not Mercury through Pluto.
    """
    if body is Body.PLUTO:
        return PLUTO_ORBITAL_PERIOD
    return get_planet_model(body).orbital_period


__all__ = [
    'PlanetModel',
    'get_planet_model',
    'has_series_model',
    'orbital_period',
]
