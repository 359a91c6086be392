"""
astrotrack.orbits — Kepler Equation & Period
=============================================

The Kepler equation in the eccentric-longitude form used by the near-Earth
propagator, and the two-body orbital period.  All pure NumPy.
"""
import logging
from typing import NamedTuple

import numpy as np

from .utils import MU_EARTH_KM

logger = logging.getLogger(__name__)

KEPLER_TOLERANCE = 1.0e-6
KEPLER_MAX_ITER = 10


class KeplerSolution(NamedTuple):
    """Result of :func:`solve_kepler`.

    ``epw`` is the iterate whose sin/cos are reported in ``sin_epw`` /
    ``cos_epw``; the short-period terms are built from them.  On convergence
    this is the iterate before the final, sub-tolerance Newton step.
    """
    epw: float
    sin_epw: float
    cos_epw: float
    iterations: int
    converged: bool


# ════════════════════════════════════════════════════════════════════════════
#  Kepler Equation
# ════════════════════════════════════════════════════════════════════════════

def solve_kepler(capu: float, axn: float, ayn: float,
                 tol: float = KEPLER_TOLERANCE,
                 max_iter: int = KEPLER_MAX_ITER) -> KeplerSolution:
    """Solve  capu = E − axn·sin(E) + ayn·cos(E)  for the eccentric longitude.

    Newton iteration started at ``E = capu``.  The loop stops when two
    successive iterates differ by no more than *tol*, or after *max_iter*
    iterations, in which case the last iterate is accepted as is.

    Parameters
    ----------
    capu : float — mean longitude minus node [rad]
    axn, ayn : float — eccentricity components in the longitude frame
    tol : float — convergence tolerance on the iterate step [rad]
    max_iter : int — iteration bound

    Returns
    -------
    KeplerSolution
    """
    temp2 = capu
    sin_epw = cos_epw = 0.0
    for k in range(1, max_iter + 1):
        sin_epw = np.sin(temp2)
        cos_epw = np.cos(temp2)
        epw = ((capu - ayn * cos_epw + axn * sin_epw - temp2)
               / (1.0 - axn * cos_epw - ayn * sin_epw) + temp2)
        if abs(epw - temp2) <= tol:
            return KeplerSolution(temp2, sin_epw, cos_epw, k, True)
        temp2 = epw

    logger.debug("Kepler iteration stopped after %d steps without converging "
                 "(capu=%.6f, axn=%.6f, ayn=%.6f)", max_iter, capu, axn, ayn)
    return KeplerSolution(temp2, sin_epw, cos_epw, max_iter, False)


# ════════════════════════════════════════════════════════════════════════════
#  Period
# ════════════════════════════════════════════════════════════════════════════

def compute_orbital_period(a: float, mu: float = MU_EARTH_KM) -> float:
    """Orbital period [s] for semi-major axis a [km]."""
    return 2.0 * np.pi * np.sqrt(a**3 / mu)
