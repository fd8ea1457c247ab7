import datetime
import logging
from dataclasses import dataclass

from skyhop.ephemeris.base import EphemerisBackend, as_utc
from skyhop.ephemeris.types import AU_KM, Illumination, MoonPhases, ObserverLocation, RiseSetTransit
from skyhop.resolver import ObjectResolver, is_solar_system_body

logger = logging.getLogger(__name__)

EXCELLENT_ALTITUDE_DEG = 30.0


@dataclass
class ObjectDetails:
    query: str
    name: str
    ra_hours: float
    dec_deg: float
    altitude_deg: float
    azimuth_deg: float
    above_horizon: bool
    visibility: str
    observed_utc: datetime.datetime
    object_type: str | None = None
    magnitude: float | None = None
    constellation: str | None = None
    common_name: str | None = None
    rise_set: RiseSetTransit | None = None
    visibility_note: str | None = None
    distance_au: float | None = None
    distance_km: float | None = None
    illumination: Illumination | None = None
    moon_phases: MoonPhases | None = None


def visibility_label(altitude_deg: float) -> str:
    if altitude_deg <= 0:
        return "Below horizon (not visible)"
    if altitude_deg > EXCELLENT_ALTITUDE_DEG:
        return "Excellent visibility"
    return "Above horizon"


def rise_set_note(times: RiseSetTransit) -> str | None:
    if times.circumpolar:
        if times.always_above:
            return "This object is circumpolar and remains above the horizon from this location."
        if times.always_below:
            return "This object is circumpolar and remains below the horizon from this location."
        return "This object is circumpolar from this location."
    if times.rise_utc is None and times.set_utc is None:
        if times.transit_altitude_deg is not None and times.transit_altitude_deg < 0:
            return "This object does not rise above the horizon on this date from this location."
        return "Rise and set times are not available for this object on this date at this location."
    return None


def describe_object(
    name: str,
    resolver: ObjectResolver,
    ephemeris: EphemerisBackend,
    observer: ObserverLocation,
    instant: datetime.datetime | None = None,
) -> ObjectDetails:
    """Position, visibility and timing for one object.

    Raises ``ObjectNotFound`` when the name does not resolve.
    """
    instant = as_utc(instant or datetime.datetime.now(datetime.timezone.utc))
    record = resolver.resolve(name, instant)
    horizontal = ephemeris.horizontal_position(record.ra_hours, record.dec_deg, observer, instant)
    body = name.strip().lower() if is_solar_system_body(name) else None
    times = ephemeris.rise_set_transit(record.ra_hours, record.dec_deg, observer, instant, body=body)

    details = ObjectDetails(
        query=name,
        name=record.name,
        ra_hours=record.ra_hours,
        dec_deg=record.dec_deg,
        altitude_deg=horizontal.altitude_deg,
        azimuth_deg=horizontal.azimuth_deg,
        above_horizon=horizontal.altitude_deg > 0,
        visibility=visibility_label(horizontal.altitude_deg),
        observed_utc=instant,
        object_type=record.object_type,
        magnitude=record.magnitude,
        constellation=record.constellation,
        common_name=record.common_name,
        rise_set=times,
        visibility_note=rise_set_note(times),
    )

    if body is not None:
        position = ephemeris.equatorial_position(body, instant)
        if position.distance_au is not None:
            details.distance_au = position.distance_au
            details.distance_km = position.distance_au * AU_KM
        details.illumination = ephemeris.illumination(body, instant)
        if body == "moon":
            details.moon_phases = ephemeris.moon_phases(instant)
        logger.debug("Solar-system details for %s: distance=%s au", body, details.distance_au)

    return details
