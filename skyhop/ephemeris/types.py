from dataclasses import dataclass
import datetime

# Closed set of names resolved through the ephemeris rather than the catalog.
SOLAR_SYSTEM_BODIES = (
    "sun",
    "moon",
    "mercury",
    "venus",
    "earth",
    "mars",
    "jupiter",
    "saturn",
    "uranus",
    "neptune",
    "pluto",
)

AU_KM = 149597870.7


@dataclass
class ObserverLocation:
    latitude_deg: float
    longitude_deg: float
    elevation_m: float = 0.0
    temperature_c: float | None = None
    pressure_hpa: float | None = None
    name: str | None = None


@dataclass(frozen=True)
class BodyPosition:
    ra_hours: float
    dec_deg: float
    distance_au: float | None = None


@dataclass(frozen=True)
class HorizontalPosition:
    altitude_deg: float
    azimuth_deg: float


@dataclass
class RiseSetTransit:
    rise_utc: datetime.datetime | None = None
    set_utc: datetime.datetime | None = None
    transit_utc: datetime.datetime | None = None
    transit_altitude_deg: float | None = None
    circumpolar: bool = False
    always_above: bool = False
    always_below: bool = False


@dataclass
class Illumination:
    phase_angle_deg: float
    fraction: float
    waxing: bool | None = None


@dataclass
class MoonPhases:
    new_moon_utc: datetime.datetime | None = None
    first_quarter_utc: datetime.datetime | None = None
    full_moon_utc: datetime.datetime | None = None
    last_quarter_utc: datetime.datetime | None = None
