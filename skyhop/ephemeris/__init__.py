from .analytic import AnalyticEphemeris
from .base import EphemerisBackend
from .types import (
    SOLAR_SYSTEM_BODIES,
    BodyPosition,
    HorizontalPosition,
    Illumination,
    MoonPhases,
    ObserverLocation,
    RiseSetTransit,
)


def get_ephemeris_backend(config) -> EphemerisBackend:
    backend_name = (getattr(config, "ephemeris_backend", None) or "astropy").lower()
    if backend_name == "astropy":
        from .astropy_backend import AstropyEphemeris

        return AstropyEphemeris()
    if backend_name == "analytic":
        return AnalyticEphemeris()
    raise ValueError(f"Unknown ephemeris backend: {backend_name}")


def observer_from_config(config) -> ObserverLocation:
    return ObserverLocation(
        latitude_deg=config.site_latitude_deg,
        longitude_deg=config.site_longitude_deg,
        elevation_m=config.site_elevation_m,
        temperature_c=config.site_temperature_c,
        pressure_hpa=config.site_pressure_hpa,
        name=config.site_name,
    )


__all__ = [
    "SOLAR_SYSTEM_BODIES",
    "AnalyticEphemeris",
    "BodyPosition",
    "EphemerisBackend",
    "HorizontalPosition",
    "Illumination",
    "MoonPhases",
    "ObserverLocation",
    "RiseSetTransit",
    "get_ephemeris_backend",
    "observer_from_config",
]
