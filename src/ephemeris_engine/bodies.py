"""Supported bodies and the user-definable fixed star table."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ephemeris_engine.angle_utils import verify_number
from ephemeris_engine.constants import AU_PER_LY
from ephemeris_engine.errors import InvalidArgumentError, UnsupportedBodyError


class Body(Enum):
    """Closed set of bodies the engine can locate."""

    SUN = 'Sun'
    MOON = 'Moon'
    MERCURY = 'Mercury'
    VENUS = 'Venus'
    EARTH = 'Earth'
    MARS = 'Mars'
    JUPITER = 'Jupiter'
    SATURN = 'Saturn'
    URANUS = 'Uranus'
    NEPTUNE = 'Neptune'
    PLUTO = 'Pluto'
    EMB = 'EMB'  # Earth/Moon barycenter
    SSB = 'SSB'  # Solar System barycenter
    STAR1 = 'Star1'
    STAR2 = 'Star2'
    STAR3 = 'Star3'
    STAR4 = 'Star4'
    STAR5 = 'Star5'
    STAR6 = 'Star6'
    STAR7 = 'Star7'
    STAR8 = 'Star8'

    @property
    def is_planet(self) -> bool:
        """True for Mercury through Pluto, Earth included."""
        return self in _PLANETS

    @property
    def is_star_slot(self) -> bool:
        return self in _STAR_SLOTS

    @property
    def is_barycenter(self) -> bool:
        return self in (Body.EMB, Body.SSB)

    @property
    def is_superior_planet(self) -> bool:
        """True for planets orbiting outside the Earth's orbit."""
        return self in _SUPERIOR_PLANETS

    @classmethod
    def from_name(cls, name: str) -> Body:
        """Look up a body by case-insensitive name (e.g. 'mars', 'Star3').

        Raises:
            UnsupportedBodyError: No body has that name.
        """
        key = name.strip().lower()
        for body in cls:
            if body.value.lower() == key:
                return body
        raise UnsupportedBodyError(f'Unknown body name {name!r}')


_PLANETS = frozenset({
    Body.MERCURY,
    Body.VENUS,
    Body.EARTH,
    Body.MARS,
    Body.JUPITER,
    Body.SATURN,
    Body.URANUS,
    Body.NEPTUNE,
    Body.PLUTO,
})

_SUPERIOR_PLANETS = frozenset({
    Body.MARS,
    Body.JUPITER,
    Body.SATURN,
    Body.URANUS,
    Body.NEPTUNE,
    Body.PLUTO,
})

STAR_SLOTS = (
    Body.STAR1,
    Body.STAR2,
    Body.STAR3,
    Body.STAR4,
    Body.STAR5,
    Body.STAR6,
    Body.STAR7,
    Body.STAR8,
)
_STAR_SLOTS = frozenset(STAR_SLOTS)


@dataclass(frozen=True)
class StarDefinition:
    """J2000 direction and distance of a user-defined star.

    Attributes:
        ra: Right ascension in hours, [0, 24).
        dec: Declination in degrees, [-90, 90].
        dist: Heliocentric distance in AU.
    """

    ra: float
    dec: float
    dist: float


@dataclass(frozen=True)
class StarTable:
    """Immutable mapping from star slot to its definition; unset slots are absent."""

    stars: Mapping[Body, StarDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'stars', MappingProxyType(dict(self.stars)))

    def get(self, body: Body) -> StarDefinition:
        """Definition of ``body``.

        Raises:
            UnsupportedBodyError: ``body`` is not a star slot or has not been defined.
        """
        if not body.is_star_slot:
            raise UnsupportedBodyError(f'{body.value} is not a star slot')
        try:
            return self.stars[body]
        except KeyError as e:
            raise UnsupportedBodyError(f'{body.value} has not been defined') from e

    def with_star(self, body: Body, ra: float, dec: float, dist_ly: float) -> StarTable:
        """Return a new table with ``body`` defined; this table is unchanged.

        Parameters:
            body: One of Body.STAR1 .. Body.STAR8.
            ra: Right ascension in J2000 hours, [0, 24).
            dec: Declination in J2000 degrees, [-90, 90].
            dist_ly: Distance in light-years, at least 1.

        Raises:
            InvalidArgumentError: A value is out of range or ``body`` is not a star slot.
        """
        if not body.is_star_slot:
            raise InvalidArgumentError(f'{body.value} is not a user-definable star slot')
        ra = verify_number(ra)
        dec = verify_number(dec)
        dist_ly = verify_number(dist_ly)
        if ra < 0.0 or ra >= 24.0:
            raise InvalidArgumentError(f'Invalid right ascension for star: {ra}')
        if dec < -90.0 or dec > 90.0:
            raise InvalidArgumentError(f'Invalid declination for star: {dec}')
        if dist_ly < 1.0:
            raise InvalidArgumentError(f'Invalid star distance (must be >= 1 light-year): {dist_ly}')
        stars = dict(self.stars)
        stars[body] = StarDefinition(ra, dec, dist_ly * AU_PER_LY)
        return StarTable(stars)


_star_table = StarTable()


def get_star_table() -> StarTable:
    """Return the current default star table."""
    return _star_table


def set_star_table(table: StarTable) -> None:
    """Replace the default star table."""
    global _star_table
    _star_table = table


def define_star(body: Body, ra: float, dec: float, dist_ly: float) -> StarTable:
    """Define a star slot in the default table and return the new table.

    Raises:
        InvalidArgumentError: See StarTable.with_star.
    """
    table = get_star_table().with_star(body, ra, dec, dist_ly)
    set_star_table(table)
    return table
