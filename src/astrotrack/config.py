"""
astrotrack.config — Gravity Model Configuration
================================================

Earth gravity constants used by the near-Earth propagator, and the
module-wide default model picked up by :class:`astrotrack.propagator.Orbit`
when no model is given explicitly.

The constants are the Spacetrack Report #3 set (WGS-72 zonal harmonics,
``ck2 = J2/2``, ``ck4 = -3/8 J4``).  Two variants differ only in the Earth
radius used to scale the output to kilometres:

- ``STR3``              — 6378.135 km, the value of the published report.
- ``STR3_WGS84_RADIUS`` — 6378.137 km (WGS-84), the default.

Call ``set_gravity_model`` before building orbits; orbits already
constructed keep the model they were built with.

Reference
---------
Hoots, F.R. & Roehrich, R.L. (1980). SPACETRACK Report No. 3.
"""

from typing import NamedTuple


class GravityModel(NamedTuple):
    """Constants for the near-Earth propagator.

    Attributes
    ----------
    name : str — model identifier
    ck2 : float — 0.5 * J2 * ae²
    ck4 : float — -0.375 * J4 * ae⁴
    xj3 : float — J3 zonal harmonic
    xke : float — sqrt(GM) in earth radii³ / min²
    qoms2t : float — (q0 - s)⁴ reference density parameter [earth radii⁴]
    s : float — density function parameter [earth radii]
    radius_km : float — Earth radius used for the distance scale [km]
    """

    name: str
    ck2: float
    ck4: float
    xj3: float
    xke: float
    qoms2t: float
    s: float
    radius_km: float


STR3 = GravityModel(
    name="str3",
    ck2=5.413080e-4,
    ck4=0.62098875e-6,
    xj3=-0.253881e-5,
    xke=0.743669161e-1,
    qoms2t=1.88027916e-9,
    s=1.01222928,
    radius_km=6378.135,
)
"""Spacetrack Report #3 constants, 6378.135 km Earth radius."""

STR3_WGS84_RADIUS = STR3._replace(name="str3-wgs84", radius_km=6378.137)
"""Spacetrack Report #3 constants scaled with the WGS-84 radius."""

GRAVITY_MODELS = {
    STR3.name: STR3,
    STR3_WGS84_RADIUS.name: STR3_WGS84_RADIUS,
}
"""Mapping of model names to ``GravityModel`` instances."""

_gravity_model = STR3_WGS84_RADIUS


def resolve_gravity_model(model: str | GravityModel | None) -> GravityModel:
    """Turn a model name, a model, or None (the default) into a GravityModel.

    Raises
    ------
    ValueError
        If *model* is a name that is not in ``GRAVITY_MODELS``.
    """
    if model is None:
        return _gravity_model
    if isinstance(model, GravityModel):
        return model
    try:
        return GRAVITY_MODELS[model.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown gravity model {model!r}. "
            f"Must be one of: {', '.join(sorted(GRAVITY_MODELS))}"
        ) from None


def set_gravity_model(model: str | GravityModel) -> None:
    """Set the module-wide default gravity model.

    Parameters
    ----------
    model : str or GravityModel — a key of ``GRAVITY_MODELS`` or a model
    """
    global _gravity_model
    if model is None:
        raise ValueError("A gravity model name or GravityModel is required.")
    _gravity_model = resolve_gravity_model(model)


def get_gravity_model() -> GravityModel:
    """Return the current module-wide default gravity model."""
    return _gravity_model
