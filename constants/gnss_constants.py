from enum import Enum
from types import MappingProxyType


class Constellation(Enum):
    GPS = 1
    GLO = 2
    GAL = 3
    BDS = 4


class TimeConstants:
    # Julian day of the J2000.0 epoch (2000-01-01 12:00:00 TT)
    J2000_JD = 2451545.0

    # Days per Julian century
    DAYS_PER_JULIAN_CENTURY = 36525.0

    # Julian day offset used by the calendar to Julian day formula
    JD_CALENDAR_OFFSET = 1721013.5


class SiderealConstants:
    """Coefficients of the GMST polynomial in seconds of time (IAU 1982)."""

    # Constant term in seconds
    C0_SEC = 67310.54841

    # Linear term in seconds per Julian century
    C1_SEC = 876600.0 * 3600 + 8640184.812866

    # Quadratic term
    C2_SEC = 0.093104

    # Cubic term
    C3_SEC = -6.2e-6

    # 360 deg / 86400 s: seconds of time to degrees
    SEC_PER_DEG = 240.0


# Single letter satellite id prefix for each GNSS family, as used in SP3 ids.
CONSTELLATION_TO_PREFIX = MappingProxyType(
    {
        Constellation.GPS: "G",
        Constellation.BDS: "C",
        Constellation.GAL: "E",
        Constellation.GLO: "R",
    }
)

PREFIX_TO_CONSTELLATION = MappingProxyType(
    {prefix: const for const, prefix in CONSTELLATION_TO_PREFIX.items()}
)

# Trailing path duration in seconds, roughly one orbital period.
GNSS_ORBIT_PERIOD_S = 43200.0
LEO_ORBIT_PERIOD_S = 12800.0


def constellation_from_sat_id(sat_id: str):
    """Return the GNSS family of a satellite id, or None for non GNSS ids."""
    if not sat_id:
        return None
    return PREFIX_TO_CONSTELLATION.get(sat_id[0])


def orbit_period_s(sat_id: str) -> float:
    """Trailing path duration of a satellite, GNSS or LEO by id prefix."""
    if constellation_from_sat_id(sat_id) is None:
        return LEO_ORBIT_PERIOD_S
    return GNSS_ORBIT_PERIOD_S
