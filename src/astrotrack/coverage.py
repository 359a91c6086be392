"""
astrotrack.coverage — Ground Track & Day/Night Segmentation
============================================================

Samples the sub-satellite ground track of an :class:`~astrotrack.propagator.Orbit`
over a fraction of its period and splits the track into the stretches that
pass over the Earth's night side.

Every sample is an independent propagation to its own instant; the Orbit
carries no state between samples.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np

from .propagator import Orbit
from .sun import is_night
from .utils import as_utc

logger = logging.getLogger(__name__)

SAMPLES_PER_ORBIT = 180


@dataclass(frozen=True)
class GroundPoint:
    """One ground-track sample."""
    instant: datetime
    latitude: float     # [deg]
    longitude: float    # [deg]
    altitude: float     # [km]
    night: bool

    def lat_lng(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


# ════════════════════════════════════════════════════════════════════════════
#  Ground Track
# ════════════════════════════════════════════════════════════════════════════

def ground_track(
    orbit: Orbit,
    start: datetime,
    path_length: float = 0.5,
    samples_per_orbit: int = SAMPLES_PER_ORBIT,
) -> list[GroundPoint]:
    """Sample the ground track from *start* over *path_length* orbits.

    Samples are spaced ``period / samples_per_orbit`` apart; the track holds
    ``floor(samples_per_orbit * path_length + 1) + 1`` points, so half an
    orbit at the default spacing gives 92 points.

    Parameters
    ----------
    orbit : Orbit
    start : datetime — first sample instant
    path_length : float — track length as a fraction of the orbital period
    samples_per_orbit : int — samples per full period

    Returns
    -------
    track : list[GroundPoint]

    Raises
    ------
    ValueError
        If *path_length* is negative or *samples_per_orbit* is below 1.
    """
    if path_length < 0:
        raise ValueError(f"path_length must be non-negative, got {path_length}")
    if samples_per_orbit < 1:
        raise ValueError(f"samples_per_orbit must be >= 1, got {samples_per_orbit}")

    start = as_utc(start)
    dt = orbit.period / samples_per_orbit
    n_points = int(np.floor(samples_per_orbit * path_length + 1)) + 1

    track = []
    for k in range(n_points):
        t = start + timedelta(seconds=dt * k)
        res = orbit.propagate(t)
        track.append(GroundPoint(
            instant=t,
            latitude=res.latitude,
            longitude=res.longitude,
            altitude=res.altitude,
            night=is_night(res.latitude, res.longitude, res.altitude, t),
        ))

    logger.debug("Ground track: %d points every %.1f s from %s",
                 n_points, dt, start.isoformat())
    return track


# ════════════════════════════════════════════════════════════════════════════
#  Day / Night
# ════════════════════════════════════════════════════════════════════════════

def night_segments(track: list[GroundPoint]) -> list[list[GroundPoint]]:
    """Split a track into its maximal runs of consecutive night points.

    Parameters
    ----------
    track : list[GroundPoint]

    Returns
    -------
    segments : list of list[GroundPoint] — in track order
    """
    if not track:
        return []

    night = np.array([p.night for p in track], dtype=bool)
    diff = np.diff(night.astype(int))
    starts = np.where(diff == 1)[0] + 1
    ends = np.where(diff == -1)[0] + 1

    if night[0]:
        starts = np.concatenate([[0], starts])
    if night[-1]:
        ends = np.concatenate([ends, [len(track)]])

    return [track[s:e] for s, e in zip(starts, ends)]
