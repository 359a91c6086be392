"""
astrotrack.propagator — Near-Earth Analytic Propagator
=======================================================

SGP4 near-Earth propagation of a Two-Line Element set to an arbitrary
instant, following Spacetrack Report #3:

1. Construction derives a fixed coefficient set from the elements:
   un-Kozai'd mean motion and semi-major axis, secular gravity rates and
   drag coefficients.  Orbits with perigee below 220 km get the simplified
   drag model; all others the full one.
2. Each propagation applies the secular gravity and drag update, the
   long-period periodics, solves Kepler's equation for the eccentric
   longitude, adds the J2 short-period terms and builds the ECI state,
   which is then converted to geodetic coordinates.

Deep-space (period ≥ 225 min) resonance and lunisolar terms are not
modelled.  Degenerate elements are not guarded against: they come out as
non-finite numbers rather than exceptions.

Reference
---------
Hoots, F.R. & Roehrich, R.L. (1980). SPACETRACK Report No. 3.
Vallado, D.A., Crawford, P., Hujsak, R. & Kelso, T.S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from .config import GravityModel, resolve_gravity_model
from .frames import eci_to_geodetic
from .orbits import compute_orbital_period, solve_kepler
from .tle import TLE
from .utils import MINUTES_PER_DAY, MU_EARTH_KM, as_utc, sidereal_angle

logger = logging.getLogger(__name__)

TWOPI = 2.0 * np.pi
TOTHRD = 0.66666667

SIMPLIFIED_PERIGEE_KM = 220.0
ECC_DRAG_FLOOR = 1.0e-4


# ════════════════════════════════════════════════════════════════════════════
#  Coefficient Set
# ════════════════════════════════════════════════════════════════════════════

class OrbitalElements(NamedTuple):
    """Element set in propagator units (radians, radians/minute)."""
    inclo: float
    nodeo: float
    ecco: float
    argpo: float
    mo: float
    no_kozai: float
    bstar: float


class MeanElements(NamedTuple):
    """Secularly updated mean elements at a given time since epoch."""
    a: float        # semi-major axis [earth radii]
    e: float
    xl: float       # mean longitude [rad]
    mp: float       # mean anomaly [rad]
    omega: float    # argument of perigee [rad]
    node: float     # right ascension of ascending node [rad]


@dataclass(frozen=True)
class SimplifiedDragModel:
    """Drag terms for perigee below 220 km: first order in time only."""
    cc1: float
    cc4: float
    t2cof: float

    def secular_terms(self, tsince: float, xmdf: float, omgadf: float,
                      bstar: float) -> tuple[float, float, float, float, float]:
        """Return (mean anomaly, arg. of perigee, tempa, tempe, templ)."""
        tempa = 1.0 - self.cc1 * tsince
        tempe = bstar * self.cc4 * tsince
        templ = self.t2cof * tsince * tsince
        return xmdf, omgadf, tempa, tempe, templ


@dataclass(frozen=True)
class FullDragModel:
    """Drag terms up to fourth order in time, with drag-coupled M/ω update."""
    cc1: float
    cc4: float
    cc5: float
    t2cof: float
    omgcof: float
    xmcof: float
    eta: float
    delmo: float
    sinmao: float
    d2: float
    d3: float
    d4: float
    t3cof: float
    t4cof: float
    t5cof: float

    def secular_terms(self, tsince: float, xmdf: float, omgadf: float,
                      bstar: float) -> tuple[float, float, float, float, float]:
        """Return (mean anomaly, arg. of perigee, tempa, tempe, templ)."""
        tsq = tsince * tsince
        delomg = self.omgcof * tsince
        delm = self.xmcof * ((1.0 + self.eta * np.cos(xmdf)) ** 3 - self.delmo)
        temp = delomg + delm
        xmp = xmdf + temp
        omega = omgadf - temp

        tcube = tsq * tsince
        tfour = tsince * tcube
        tempa = 1.0 - self.cc1 * tsince - self.d2 * tsq - self.d3 * tcube - self.d4 * tfour
        tempe = bstar * self.cc4 * tsince + bstar * self.cc5 * (np.sin(xmp) - self.sinmao)
        templ = self.t2cof * tsq + self.t3cof * tcube + tfour * (self.t4cof + tsince * self.t5cof)
        return xmp, omega, tempa, tempe, templ


DragModel = SimplifiedDragModel | FullDragModel


@dataclass(frozen=True)
class SecularCoefficients:
    """Everything the propagator derives once from the element set."""
    elements: OrbitalElements
    gravity: GravityModel
    aodp: float         # un-Kozai'd semi-major axis [earth radii]
    xnodp: float        # un-Kozai'd mean motion [rad/min]
    perigee: float      # perigee height [km]
    cosio: float
    sinio: float
    x3thm1: float
    x1mth2: float
    x7thm1: float
    mdot: float         # mean anomaly rate [rad/min]
    argpdot: float      # argument of perigee rate [rad/min]
    nodedot: float      # node rate [rad/min]
    nodecf: float       # node drag coefficient [rad/min²]
    xlcof: float
    aycof: float
    period: float       # [s]
    drag: DragModel

    @property
    def simplified(self) -> bool:
        return isinstance(self.drag, SimplifiedDragModel)


def elements_from_tle(tle: TLE) -> OrbitalElements:
    """Convert TLE degrees and rev/day to radians and rad/min."""
    return OrbitalElements(
        inclo=np.deg2rad(tle.inclination),
        nodeo=np.deg2rad(tle.raan),
        ecco=np.float64(tle.eccentricity),
        argpo=np.deg2rad(tle.argp),
        mo=np.deg2rad(tle.mean_anomaly),
        no_kozai=np.float64(tle.mean_motion) * TWOPI / MINUTES_PER_DAY,
        bstar=np.float64(tle.bstar),
    )


def is_simplified(aodp: float, ecco: float, gravity: GravityModel) -> bool:
    """True when perigee lies below 220 km, selecting the simplified drag model.

    The comparison is strict: a perigee exactly at 220 km uses the full model.
    """
    return aodp * (1.0 - ecco) < SIMPLIFIED_PERIGEE_KM / gravity.radius_km + 1.0


def atmosphere_parameters(perigee: float, gravity: GravityModel) -> tuple[float, float]:
    """Density-function parameters (s4 [earth radii], qoms24) for a perigee [km].

    Above 156 km the standard ``s`` and ``qoms2t`` apply.  Between 98 and
    156 km ``s4`` follows the perigee (perigee − 78 km); at or below 98 km
    it is held at 20 km.
    """
    s4 = gravity.s
    qoms24 = gravity.qoms2t
    if perigee < 156.0:
        s4 = perigee - 78.0
        if perigee <= 98.0:
            s4 = 20.0
        qoms24 = ((120.0 - s4) / gravity.radius_km) ** 4
        s4 = s4 / gravity.radius_km + 1.0
    return s4, qoms24


def initialize_coefficients(tle: TLE, gravity: GravityModel) -> SecularCoefficients:
    """Derive the secular and drag coefficients for a TLE.

    Parameters
    ----------
    tle : TLE — element source
    gravity : GravityModel — Earth constants

    Returns
    -------
    SecularCoefficients
    """
    el = elements_from_tle(tle)
    ck2, ck4, xke = gravity.ck2, gravity.ck4, gravity.xke
    eo, bstar = el.ecco, el.bstar

    # ── Recover original mean motion (xnodp) and semi-major axis (aodp) ──
    a1 = (xke / el.no_kozai) ** TOTHRD
    cosio = np.cos(el.inclo)
    theta2 = cosio * cosio
    x3thm1 = 3.0 * theta2 - 1.0
    betao2 = 1.0 - eo * eo
    betao = np.sqrt(betao2)
    del1 = 1.5 * ck2 * x3thm1 / (a1 * a1 * betao * betao2)
    ao = a1 * (1.0 - del1 * (1.0 / 3.0 + del1 * (1.0 + 134.0 / 81.0 * del1)))
    delo = 1.5 * ck2 * x3thm1 / (ao * ao * betao * betao2)
    xnodp = el.no_kozai / (1.0 + delo)
    aodp = ao / (1.0 - delo)

    # ── Atmosphere and drag ──
    simplified = is_simplified(aodp, eo, gravity)
    perigee = (aodp * (1.0 - eo) - 1.0) * gravity.radius_km
    s4, qoms24 = atmosphere_parameters(perigee, gravity)

    pinvsq = 1.0 / (aodp * aodp * betao2 * betao2)
    tsi = 1.0 / (aodp - s4)
    eta = aodp * eo * tsi
    etasq = eta * eta
    eeta = eo * eta
    psisq = abs(1.0 - etasq)
    coef = qoms24 * tsi ** 4
    coef1 = coef / psisq ** 3.5

    c2 = coef1 * xnodp * (aodp * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
                          + 0.75 * ck2 * tsi / psisq * x3thm1
                          * (8.0 + 3.0 * etasq * (8.0 + etasq)))
    cc1 = bstar * c2
    sinio = np.sin(el.inclo)
    a3ovk2 = -gravity.xj3 / ck2
    x1mth2 = 1.0 - theta2
    cc4 = 2.0 * xnodp * coef1 * aodp * betao2 * (
        eta * (2.0 + 0.5 * etasq) + eo * (0.5 + 2.0 * etasq)
        - 2.0 * ck2 * tsi / (aodp * psisq)
        * (-3.0 * x3thm1 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
           + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * np.cos(2.0 * el.argpo)))

    # ── Secular gravity rates ──
    theta4 = theta2 * theta2
    temp1 = 3.0 * ck2 * pinvsq * xnodp
    temp2 = temp1 * ck2 * pinvsq
    temp3 = 1.25 * ck4 * pinvsq * pinvsq * xnodp
    mdot = (xnodp + 0.5 * temp1 * betao * x3thm1
            + 0.0625 * temp2 * betao * (13.0 - 78.0 * theta2 + 137.0 * theta4))
    x1m5th = 1.0 - 5.0 * theta2
    argpdot = (-0.5 * temp1 * x1m5th
               + 0.0625 * temp2 * (7.0 - 114.0 * theta2 + 395.0 * theta4)
               + temp3 * (3.0 - 36.0 * theta2 + 49.0 * theta4))
    xhdot1 = -temp1 * cosio
    nodedot = xhdot1 + (0.5 * temp2 * (4.0 - 19.0 * theta2)
                        + 2.0 * temp3 * (3.0 - 7.0 * theta2)) * cosio
    nodecf = 3.5 * betao2 * xhdot1 * cc1
    t2cof = 1.5 * cc1

    # ── Long-period coefficients ──
    denom = 1.0 + cosio
    if abs(denom) < 1.5e-12:
        denom = 1.5e-12
    xlcof = 0.125 * a3ovk2 * sinio * (3.0 + 5.0 * cosio) / denom
    aycof = 0.25 * a3ovk2 * sinio
    x7thm1 = 7.0 * theta2 - 1.0

    if simplified:
        drag = SimplifiedDragModel(cc1=cc1, cc4=cc4, t2cof=t2cof)
    else:
        # Terms that divide by e blow up for near-circular orbits.
        if eo > ECC_DRAG_FLOOR:
            c3 = coef * tsi * a3ovk2 * xnodp * sinio / eo
            xmcof = -TOTHRD * coef * bstar / eeta
        else:
            c3 = 0.0
            xmcof = 0.0
        cc5 = 2.0 * coef1 * aodp * betao2 * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

        c1sq = cc1 * cc1
        d2 = 4.0 * aodp * tsi * c1sq
        temp = d2 * tsi * cc1 / 3.0
        d3 = (17.0 * aodp + s4) * temp
        d4 = 0.5 * temp * aodp * tsi * (221.0 * aodp + 31.0 * s4) * cc1
        drag = FullDragModel(
            cc1=cc1, cc4=cc4, cc5=cc5, t2cof=t2cof,
            omgcof=bstar * c3 * np.cos(el.argpo),
            xmcof=xmcof,
            eta=eta,
            delmo=(1.0 + eta * np.cos(el.mo)) ** 3,
            sinmao=np.sin(el.mo),
            d2=d2, d3=d3, d4=d4,
            t3cof=d2 + 2.0 * c1sq,
            t4cof=0.25 * (3.0 * d3 + cc1 * (12.0 * d2 + 10.0 * c1sq)),
            t5cof=0.2 * (3.0 * d4 + 12.0 * cc1 * d3 + 6.0 * d2 * d2
                         + 15.0 * c1sq * (2.0 * d2 + c1sq)),
        )

    logger.debug("Initialized %s: perigee %.1f km, %s drag model",
                 tle.name or tle.norad_id, perigee,
                 "simplified" if simplified else "full")

    return SecularCoefficients(
        elements=el, gravity=gravity,
        aodp=aodp, xnodp=xnodp, perigee=perigee,
        cosio=cosio, sinio=sinio,
        x3thm1=x3thm1, x1mth2=x1mth2, x7thm1=x7thm1,
        mdot=mdot, argpdot=argpdot, nodedot=nodedot, nodecf=nodecf,
        xlcof=xlcof, aycof=aycof,
        period=compute_orbital_period(aodp * gravity.radius_km, MU_EARTH_KM),
        drag=drag,
    )


# ════════════════════════════════════════════════════════════════════════════
#  Propagation Result
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, eq=False)
class PropagationResult:
    """State of an orbit at one instant."""
    instant: datetime
    tsince: float           # minutes since TLE epoch
    r_eci: NDArray          # ECI position [km]
    v_eci: NDArray          # ECI velocity [km/s]
    altitude: float         # [km]
    velocity: float         # inertial speed [km/s]
    period: float           # [s]
    latitude: float         # geodetic [deg]
    longitude: float        # [deg], [−180, 180)

    @property
    def position(self) -> tuple[float, float]:
        """(latitude, longitude) [deg]."""
        return self.latitude, self.longitude

    def lat_lng(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "altitude": self.altitude,
            "velocity": self.velocity,
            "period": self.period,
            "date": self.instant.isoformat(),
        }


# ════════════════════════════════════════════════════════════════════════════
#  Orbit
# ════════════════════════════════════════════════════════════════════════════

class Orbit:
    """Near-Earth propagator bound to one TLE.

    The coefficient set is computed once and never changes, so an Orbit can
    be shared freely; every call to :meth:`propagate` returns a new
    :class:`PropagationResult` and leaves the Orbit untouched.

    Parameters
    ----------
    tle : TLE — element source
    gravity : str, GravityModel or None — Earth constants; None uses
        :func:`astrotrack.config.get_gravity_model`
    """

    def __init__(self, tle: TLE, gravity: str | GravityModel | None = None):
        self.tle = tle
        self.gravity = resolve_gravity_model(gravity)
        self.coefficients = initialize_coefficients(tle, self.gravity)

    def __repr__(self) -> str:
        return (f"Orbit(norad_id={self.tle.norad_id}, gravity={self.gravity.name!r}, "
                f"simplified={self.simplified})")

    @property
    def simplified(self) -> bool:
        """True when the simplified (perigee < 220 km) drag model is in use."""
        return self.coefficients.simplified

    @property
    def period(self) -> float:
        """Orbital period [s] from the un-Kozai'd semi-major axis."""
        return self.coefficients.period

    def clone(self) -> "Orbit":
        """New Orbit on the same TLE and gravity model."""
        return Orbit(self.tle, self.gravity)

    def mean_elements(self, tsince: float) -> MeanElements:
        """Secular gravity and drag update of the mean elements.

        Parameters
        ----------
        tsince : float — minutes since epoch (negative for past instants)
        """
        c = self.coefficients
        el = c.elements
        xmdf = el.mo + c.mdot * tsince
        omgadf = el.argpo + c.argpdot * tsince
        xnoddf = el.nodeo + c.nodedot * tsince
        xnode = xnoddf + c.nodecf * tsince * tsince

        xmp, omega, tempa, tempe, templ = c.drag.secular_terms(
            tsince, xmdf, omgadf, el.bstar)

        a = c.aodp * tempa * tempa
        e = el.ecco - tempe
        xl = xmp + omega + xnode + c.xnodp * templ
        return MeanElements(a=a, e=e, xl=xl, mp=xmp, omega=omega, node=xnode)

    def eci_state(self, tsince: float) -> tuple[NDArray, NDArray]:
        """ECI position [km] and velocity [km/s] at *tsince* minutes from epoch."""
        c = self.coefficients
        ck2, xke = c.gravity.ck2, c.gravity.xke
        m = self.mean_elements(tsince)
        a, e, omega, xnode = m.a, m.e, m.omega, m.node

        beta = np.sqrt(1.0 - e * e)
        xn = xke / a ** 1.5

        # ── Long-period periodics ──
        axn = e * np.cos(omega)
        temp = 1.0 / (a * beta * beta)
        xll = temp * c.xlcof * axn
        aynl = temp * c.aycof
        xlt = m.xl + xll
        ayn = e * np.sin(omega) + aynl

        # ── Kepler's equation ──
        capu = np.fmod(xlt - xnode, TWOPI)
        kep = solve_kepler(capu, axn, ayn)
        sinepw, cosepw = kep.sin_epw, kep.cos_epw

        # ── Short-period preliminary quantities ──
        ecose = axn * cosepw + ayn * sinepw
        esine = axn * sinepw - ayn * cosepw
        elsq = axn * axn + ayn * ayn
        temp = 1.0 - elsq
        pl = a * temp
        r = a * (1.0 - ecose)
        temp1 = 1.0 / r
        rdot = xke * np.sqrt(a) * esine * temp1
        rfdot = xke * np.sqrt(pl) * temp1
        temp2 = a * temp1
        betal = np.sqrt(temp)
        temp3 = 1.0 / (1.0 + betal)
        cosu = temp2 * (cosepw - axn + ayn * esine * temp3)
        sinu = temp2 * (sinepw - ayn - axn * esine * temp3)
        u = np.arctan2(sinu, cosu)
        if u < 0.0:
            u += TWOPI
        sin2u = 2.0 * sinu * cosu
        cos2u = 2.0 * cosu * cosu - 1.0
        temp = 1.0 / pl
        temp1 = ck2 * temp
        temp2 = temp1 * temp

        # ── Short-period periodics ──
        rk = r * (1.0 - 1.5 * temp2 * betal * c.x3thm1) + 0.5 * temp1 * c.x1mth2 * cos2u
        uk = u - 0.25 * temp2 * c.x7thm1 * sin2u
        xnodek = xnode + 1.5 * temp2 * c.cosio * sin2u
        xinck = c.elements.inclo + 1.5 * temp2 * c.cosio * c.sinio * cos2u
        rdotk = rdot - xn * temp1 * c.x1mth2 * sin2u
        rfdotk = rfdot + xn * temp1 * (c.x1mth2 * cos2u + 1.5 * c.x3thm1)

        # ── Orientation vectors ──
        sinuk, cosuk = np.sin(uk), np.cos(uk)
        sinik, cosik = np.sin(xinck), np.cos(xinck)
        sinnok, cosnok = np.sin(xnodek), np.cos(xnodek)
        xmx = -sinnok * cosik
        xmy = cosnok * cosik
        U = np.array([xmx * sinuk + cosnok * cosuk,
                      xmy * sinuk + sinnok * cosuk,
                      sinik * sinuk])
        V = np.array([xmx * cosuk - cosnok * sinuk,
                      xmy * cosuk - sinnok * sinuk,
                      sinik * cosuk])

        r_eci = rk * U * c.gravity.radius_km
        v_eci = (rdotk * U + rfdotk * V) * c.gravity.radius_km / 60.0
        return r_eci, v_eci

    def propagate(self, instant: datetime) -> PropagationResult:
        """Propagate to *instant* and convert to geodetic coordinates.

        Parameters
        ----------
        instant : datetime — target instant; naive values are read as UTC

        Returns
        -------
        PropagationResult
        """
        instant = as_utc(instant)
        tsince = self.tle.minutes_since_epoch(instant)
        r_eci, v_eci = self.eci_state(tsince)
        r_eci.flags.writeable = False
        v_eci.flags.writeable = False

        lat, lon, alt = eci_to_geodetic(r_eci, sidereal_angle(instant))

        return PropagationResult(
            instant=instant,
            tsince=tsince,
            r_eci=r_eci,
            v_eci=v_eci,
            altitude=alt,
            velocity=float(np.linalg.norm(v_eci)),
            period=self.period,
            latitude=lat,
            longitude=lon,
        )
