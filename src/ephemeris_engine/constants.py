"""Fixed constants: units, Earth/Moon/Sun figures, gravitational parameters, periods."""

import math

# Angle conversions
DEG2RAD = 0.017453292519943296
RAD2DEG = 57.295779513082321
HOUR2RAD = 0.2617993877991494365
RAD2HOUR = 3.819718634205488
ARCSEC_PER_DEGREE = 3600.0
ASEC360 = 1296000.0
ASEC2RAD = 4.848136811095359935899141e-6
ARC = 3600.0 * 180.0 / math.pi  # arcseconds per radian
PI2 = 2.0 * math.pi
DEGREES_PER_HOUR_RA = 15.0

# Time
SECONDS_PER_DAY = 86400.0
MINUTES_PER_DAY = 1440.0
DAYS_PER_TROPICAL_YEAR = 365.24217
DAYS_PER_MILLENNIUM = 365250.0
DAYS_PER_CENTURY = 36525.0
MEAN_SYNODIC_MONTH = 29.530588  # average days between new moons

# Distance and speed
KM_PER_AU = 1.4959787069098932e8
C_AUDAY = 173.1446326846693  # speed of light in AU/day
AU_PER_LY = 63241.07708807546
AU_PER_PARSEC = 206264.80624709636

# Earth figure (IAU 2015 nominal); flattening is the polar/equatorial ratio
EARTH_FLATTENING = 0.996647180302104
EARTH_FLATTENING_SQUARED = EARTH_FLATTENING * EARTH_FLATTENING
EARTH_EQUATORIAL_RADIUS_KM = 6378.1366
EARTH_EQUATORIAL_RADIUS_AU = EARTH_EQUATORIAL_RADIUS_KM / KM_PER_AU
EARTH_POLAR_RADIUS_KM = EARTH_EQUATORIAL_RADIUS_KM * EARTH_FLATTENING
EARTH_MEAN_RADIUS_KM = 6371.0
EARTH_ATMOSPHERE_KM = 88.0
EARTH_ECLIPSE_RADIUS_KM = EARTH_MEAN_RADIUS_KM + EARTH_ATMOSPHERE_KM
ANGVEL = 7.2921150e-5  # Earth rotation, radians/second

# Moon and Sun figures
MOON_EQUATORIAL_RADIUS_KM = 1738.1
MOON_MEAN_RADIUS_KM = 1737.4
MOON_POLAR_RADIUS_KM = 1736.0
MOON_EQUATORIAL_RADIUS_AU = MOON_EQUATORIAL_RADIUS_KM / KM_PER_AU
MOON_POLAR_RADIUS_AU = MOON_POLAR_RADIUS_KM / KM_PER_AU
SUN_RADIUS_KM = 695700.0
SUN_RADIUS_AU = SUN_RADIUS_KM / KM_PER_AU
MERCURY_EQUATORIAL_RADIUS_KM = 2440.5
MERCURY_POLAR_RADIUS_KM = 2438.3
MERCURY_MEAN_RADIUS_KM = 2439.7
VENUS_RADIUS_KM = 6051.8
SUN_MAG_1AU = -0.17 - 5.0 * math.log10(AU_PER_PARSEC)

# Atmospheric refraction at the horizon (degrees)
REFRACTION_NEAR_HORIZON = 34.0 / 60.0

# Gravitational parameters, AU^3/day^2
SUN_GM = 0.2959122082855911e-03
MERCURY_GM = 0.4912547451450812e-10
VENUS_GM = 0.7243452486162703e-09
EARTH_GM = 0.8887692390113509e-09
MARS_GM = 0.9549535105779258e-10
JUPITER_GM = 0.2825345909524226e-06
SATURN_GM = 0.8459715185680659e-07
URANUS_GM = 0.1292024916781969e-07
NEPTUNE_GM = 0.1524358900784276e-07
PLUTO_GM = 0.2188699765425970e-11
EARTH_MOON_MASS_RATIO = 81.30056
MOON_GM = EARTH_GM / EARTH_MOON_MASS_RATIO

# Mean orbital periods, days
MERCURY_ORBITAL_PERIOD = 87.969
VENUS_ORBITAL_PERIOD = 224.701
EARTH_ORBITAL_PERIOD = 365.256
MARS_ORBITAL_PERIOD = 686.980
JUPITER_ORBITAL_PERIOD = 4332.589
SATURN_ORBITAL_PERIOD = 10759.22
URANUS_ORBITAL_PERIOD = 30685.4
NEPTUNE_ORBITAL_PERIOD = 60189.0
PLUTO_ORBITAL_PERIOD = 90560.0
