"""
astrotrack.frames — ECI → Geodetic Conversion
==============================================

Converts an Earth-Centered Inertial position into geodetic latitude,
longitude and altitude on the WGS-84 ellipsoid, given the Greenwich
sidereal angle of the instant.

The latitude is refined by a fixed-count fixed-point iteration (no
convergence test, no early exit), following the Celestrak column
"Orbital Coordinate Systems, Part III" (T.S. Kelso, 1996).
"""
import numpy as np
from numpy.typing import NDArray

from .utils import R_EARTH_KM, E2_EARTH

GEODETIC_ITERATIONS = 20


def wrap_longitude(lon: float) -> float:
    """Wrap a longitude [deg] into [−180, 180)."""
    return (lon + 180.0) % 360.0 - 180.0


def eci_to_geodetic(r_eci: NDArray, theta: float) -> tuple[float, float, float]:
    """ECI position [km] → geodetic latitude [deg], longitude [deg], altitude [km].

    Parameters
    ----------
    r_eci : (3,) — position in ECI [km]
    theta : float — Greenwich sidereal angle of the instant [rad]

    Returns
    -------
    lat, lon, alt : float — [deg], [deg] in [−180, 180), [km]
    """
    x, y, z = (float(c) for c in r_eci)
    a = R_EARTH_KM
    R = np.sqrt(x * x + y * y)

    lon = np.arctan2(y, x) - theta
    lat = np.arctan2(z, R)

    C = 0.0
    for _ in range(GEODETIC_ITERATIONS):
        sin_lat = np.sin(lat)
        C = 1.0 / np.sqrt(1.0 - E2_EARTH * sin_lat * sin_lat)
        lat = np.arctan2(z + a * C * E2_EARTH * sin_lat, R)

    alt = R / np.cos(lat) - a * C

    return float(np.rad2deg(lat)), wrap_longitude(float(np.rad2deg(lon))), float(alt)
