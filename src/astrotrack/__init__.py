"""
astrotrack — Near-Earth Satellite Tracking from Two-Line Elements
==================================================================

A pure-NumPy library that propagates NORAD Two-Line Element sets with the
near-Earth SGP4 model of Spacetrack Report #3 and reports where the
satellite is: ECI state, geodetic latitude / longitude / altitude, inertial
speed and orbital period.

Pipeline::

    TLE text ──parse_tle──► TLE ──Orbit──► coefficients (fixed)
                                              │
                        instant ──propagate───┴──► PropagationResult

Around the propagator sit a solar sub-point estimate with a day/night test,
ground-track sampling, and a :class:`Satellite` object bundling a TLE with
its current position and track.

Deep-space (SDP4) perturbations are not modelled; the propagator is meant
for orbits with periods under 225 minutes.
"""

from .config import (
    GravityModel,
    STR3, STR3_WGS84_RADIUS, GRAVITY_MODELS,
    set_gravity_model, get_gravity_model,
)

from .tle import (
    TLE, TLEFormatError,
    parse_tle, parse_tle_batch, parse_tle_list,
    tle_checksum, verify_checksum,
)

from .orbits import (
    KeplerSolution,
    solve_kepler,
    compute_orbital_period,
)

from .frames import (
    eci_to_geodetic,
    wrap_longitude,
)

from .propagator import (
    Orbit,
    PropagationResult,
    SecularCoefficients,
    SimplifiedDragModel,
    FullDragModel,
    initialize_coefficients,
)

from .sun import sun_subpoint, is_night

from .coverage import GroundPoint, ground_track, night_segments

from .satellite import Satellite

from .utils import (
    utc_now,
    julian_day,
    gmst,
    sidereal_angle,
    great_circle_distance,
    horizon_distance,
    R_EARTH_KM,
    MU_EARTH_KM,
)

__version__ = "1.0.0"
__all__ = [
    # ── Configuration ──
    "GravityModel", "STR3", "STR3_WGS84_RADIUS", "GRAVITY_MODELS",
    "set_gravity_model", "get_gravity_model",
    # ── Element sets ──
    "TLE", "TLEFormatError", "parse_tle", "parse_tle_batch", "parse_tle_list",
    "tle_checksum", "verify_checksum",
    # ── Propagation ──
    "Orbit", "PropagationResult", "SecularCoefficients",
    "SimplifiedDragModel", "FullDragModel", "initialize_coefficients",
    "KeplerSolution", "solve_kepler", "compute_orbital_period",
    "eci_to_geodetic", "wrap_longitude",
    # ── Sun / ground track ──
    "sun_subpoint", "is_night",
    "GroundPoint", "ground_track", "night_segments",
    "Satellite",
    # ── Utilities ──
    "utc_now", "julian_day", "gmst", "sidereal_angle",
    "great_circle_distance", "horizon_distance",
    "R_EARTH_KM", "MU_EARTH_KM",
]
