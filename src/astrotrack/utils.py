"""
astrotrack.utils — Foundational Utilities
==========================================

Physical constants, time utilities (UTC instants, Julian Date, Greenwich
mean sidereal time) and simple spherical-Earth distances.
All numerics are NumPy.
"""

from datetime import datetime, timezone

import numpy as np

# ── Physical Constants ──────────────────────────────────────────────────────
R_EARTH_KM = 6378.137               # WGS-84 equatorial radius          [km]
R_EARTH_POLAR_KM = 6356.7523142     # WGS-84 polar radius               [km]
F_EARTH = (R_EARTH_KM - R_EARTH_POLAR_KM) / R_EARTH_KM   # flattening
E2_EARTH = 2 * F_EARTH - F_EARTH ** 2                      # first eccentricity squared
MU_EARTH_KM = 398600.4              # Earth gravitational parameter     [km³/s²]
R_EARTH_MEAN_M = 6_371_000.0        # mean radius for great circles     [m]

MINUTES_PER_DAY = 1440.0
DAILY_SECONDS = 86400.0
JD_UNIX_EPOCH = 2_440_587.5
JD_J2000 = 2_451_545.0

HALF_EARTH_CIRCUMFERENCE = 6371 * np.pi * 500   # [m]


# ── Time Utilities ──────────────────────────────────────────────────────────

def as_utc(instant: datetime) -> datetime:
    """Return *instant* as a timezone-aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current wall-clock instant (UTC)."""
    return datetime.now(timezone.utc)


def julian_day(instant: datetime) -> float:
    """Julian Date of a datetime instant (UTC)."""
    return as_utc(instant).timestamp() / DAILY_SECONDS + JD_UNIX_EPOCH


def gmst(jd: float) -> float:
    """Greenwich Mean Sidereal Time [rad] from Julian Date.

    Uses the IAU 1982 model (accurate to ~0.1 arcsec for dates near J2000).
    """
    T = (jd - JD_J2000) / 36_525.0
    # GMST in seconds of time
    theta_sec = 67310.54841 + (876600.0 * 3600.0 + 8640184.812866) * T \
                + 0.093104 * T**2 - 6.2e-6 * T**3
    theta_deg = (theta_sec / 240.0) % 360.0  # convert seconds→degrees
    return np.deg2rad(theta_deg)


def sidereal_angle(instant: datetime) -> float:
    """Greenwich mean sidereal angle [rad, 0..2π) at a datetime instant."""
    return gmst(julian_day(instant))


# ── Spherical-Earth Distances ───────────────────────────────────────────────

def great_circle_distance(lat1: float, lon1: float,
                          lat2: float, lon2: float) -> float:
    """Haversine distance [m] between two points given in degrees."""
    phi1, phi2 = np.deg2rad(lat1), np.deg2rad(lat2)
    dphi = np.deg2rad(lat2 - lat1)
    dlam = np.deg2rad(lon2 - lon1)

    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlam / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(R_EARTH_MEAN_M * c)


def horizon_distance(altitude: float) -> float:
    """Distance [m] to the true horizon from *altitude* [m]."""
    return float(np.sqrt(12.756 * altitude) * 1000)
