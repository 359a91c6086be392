"""
astrotrack.sun — Solar Sub-Point & Night Test
==============================================

Low-precision solar sub-point (the point on the Earth where the Sun is at
the zenith) following the NOAA solar calculator formulae, and a day/night
test for a sub-satellite point.

A point counts as night when its great-circle distance from the solar
sub-point exceeds a quarter of the Earth's circumference widened by the
distance to the horizon seen from the satellite's altitude.

Reference
---------
NOAA Global Monitoring Laboratory, *Solar Calculation Details*
    (after Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed.).
"""

from datetime import datetime

import numpy as np

from .utils import (HALF_EARTH_CIRCUMFERENCE, JD_J2000, as_utc,
                    great_circle_distance, horizon_distance, julian_day)


def sun_subpoint(instant: datetime) -> tuple[float, float]:
    """Latitude and longitude [deg] of the point directly beneath the Sun.

    Latitude is the solar declination; longitude follows from the true
    solar time at Greenwich.

    Parameters
    ----------
    instant : datetime — naive values are read as UTC

    Returns
    -------
    lat, lon : float — [deg], lon in [−180, 180]
    """
    instant = as_utc(instant)
    rad = np.pi / 180.0

    midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
    minutes = (instant - midnight).total_seconds() / 60.0
    jc = (julian_day(instant) - JD_J2000) / 36_525.0

    # Mean longitude / anomaly [deg]
    mean_long = (280.46646 + jc * (36000.76983 + jc * 0.0003032)) % 360.0
    mean_anom = 357.52911 + jc * (35999.05029 - 0.0001537 * jc)

    # Equation of centre, true and apparent longitude [deg]
    eq_ctr = (np.sin(rad * mean_anom) * (1.914602 - jc * (0.004817 + 0.000014 * jc))
              + np.sin(rad * 2 * mean_anom) * (0.019993 - 0.000101 * jc)
              + np.sin(rad * 3 * mean_anom) * 0.000289)
    omega = rad * (125.04 - 1934.136 * jc)
    app_long = mean_long + eq_ctr - 0.00569 - 0.00478 * np.sin(omega)

    # Obliquity [deg]
    mean_obliq = 23.0 + (26.0 + (21.448 - jc * (46.815 + jc * (0.00059 - jc * 0.001813))) / 60.0) / 60.0
    obliq = mean_obliq + 0.00256 * np.cos(omega)

    lat = np.arcsin(np.sin(rad * obliq) * np.sin(rad * app_long)) / rad

    # Equation of time [min]
    ecc = 0.016708634 - jc * (0.000042037 + 0.0000001267 * jc)
    y = np.tan(rad * obliq / 2.0) ** 2
    eq_time = 4.0 * (y * np.sin(2 * rad * mean_long)
                     - 2.0 * ecc * np.sin(rad * mean_anom)
                     + 4.0 * ecc * y * np.sin(rad * mean_anom) * np.cos(2 * rad * mean_long)
                     - 0.5 * y * y * np.sin(4 * rad * mean_long)
                     - 1.25 * ecc * ecc * np.sin(2 * rad * mean_anom)) / rad

    true_solar_time = (minutes + eq_time) % 1440.0
    hour_angle = true_solar_time / 4.0
    lon = -(hour_angle + 180.0 if hour_angle < 0 else hour_angle - 180.0)

    return float(lat), float(lon)


def is_night(lat: float, lon: float, altitude_km: float, instant: datetime) -> bool:
    """True when the sub-satellite point (lat, lon) lies in the Earth's night.

    Parameters
    ----------
    lat, lon : float — sub-satellite point [deg]
    altitude_km : float — satellite altitude [km]
    instant : datetime

    Returns
    -------
    night : bool
    """
    sun_lat, sun_lon = sun_subpoint(instant)
    dist = great_circle_distance(sun_lat, sun_lon, lat, lon)
    return dist > HALF_EARTH_CIRCUMFERENCE + horizon_distance(altitude_km * 1000.0)
