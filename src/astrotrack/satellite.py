"""
astrotrack.satellite — Tracked Satellite
=========================================

:class:`Satellite` bundles a TLE, its :class:`~astrotrack.propagator.Orbit`
and the display state a tracking view needs: the current sub-satellite
position and the ground-track path ahead of it, with its night stretches.
"""
from datetime import datetime

from .config import GravityModel
from .coverage import SAMPLES_PER_ORBIT, GroundPoint, ground_track, night_segments
from .propagator import Orbit, PropagationResult
from .tle import TLE
from .utils import as_utc, utc_now


class Satellite:
    """A TLE with its current position and ground track.

    Parameters
    ----------
    tle : TLE
    path_length : float — ground-track length as a fraction of the period
    instant : datetime or None — display instant; None takes the current
        time once, at construction
    gravity : str, GravityModel or None — passed to :class:`Orbit`
    """

    def __init__(self, tle: TLE, path_length: float = 0.5,
                 instant: datetime | None = None,
                 gravity: str | GravityModel | None = None):
        self.tle = tle
        self.orbit = Orbit(tle, gravity)
        self.title = tle.name
        self.path_length = path_length
        self.instant = as_utc(instant) if instant is not None else utc_now()
        self.state: PropagationResult | None = None
        self.path: list[GroundPoint] = []
        self.refresh()

    def __repr__(self) -> str:
        return f"Satellite({self.title!r}, instant={self.instant.isoformat()})"

    @property
    def position(self) -> dict | None:
        """Current sub-satellite point as {'latitude', 'longitude'}."""
        return self.state.lat_lng() if self.state is not None else None

    @property
    def night_segments(self) -> list[list[GroundPoint]]:
        return night_segments(self.path)

    def refresh(self) -> None:
        """Propagate to the current instant and rebuild the path."""
        self.state = self.orbit.propagate(self.instant)
        self._update_path()

    def refresh_path(self) -> None:
        """Redraw the path; a path shorter than one sample keeps the old one."""
        if self.path_length >= 1.0 / SAMPLES_PER_ORBIT:
            self._update_path()

    def _update_path(self) -> None:
        self.path = ground_track(self.orbit, self.instant, self.path_length)

    def set_instant(self, instant: datetime) -> None:
        self.instant = as_utc(instant)
        self.refresh()

    def to_dict(self) -> dict:
        return {
            "date": self.instant.isoformat(),
            "title": self.title,
            "position": self.position,
            "path": [p.lat_lng() for p in self.path],
        }
