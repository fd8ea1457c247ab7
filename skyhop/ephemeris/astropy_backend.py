import datetime
import logging
from typing import Sequence

import astropy.units as u
import numpy as np
from astropy.coordinates import AltAz, EarthLocation, SkyCoord, get_body
from astropy.time import Time

from skyhop.errors import EphemerisError
from .base import EphemerisBackend, as_utc
from .types import BodyPosition, HorizontalPosition, ObserverLocation

logger = logging.getLogger(__name__)


def _earth_location(observer: ObserverLocation) -> EarthLocation:
    return EarthLocation(
        lat=observer.latitude_deg * u.deg,
        lon=observer.longitude_deg * u.deg,
        height=(observer.elevation_m or 0.0) * u.m,
    )


def _altaz_frame(observer: ObserverLocation, obstime: Time) -> AltAz:
    kwargs = {}
    # Refraction is only applied when a pressure is given.
    if observer.pressure_hpa is not None:
        kwargs["pressure"] = observer.pressure_hpa * u.hPa
    if observer.temperature_c is not None:
        kwargs["temperature"] = observer.temperature_c * u.deg_C
    return AltAz(obstime=obstime, location=_earth_location(observer), **kwargs)


class AstropyEphemeris(EphemerisBackend):
    name = "astropy"

    def equatorial_position(self, body: str, instant: datetime.datetime) -> BodyPosition:
        body = body.strip().lower()
        if body == "earth":
            raise EphemerisError("Earth has no geocentric position")
        obstime = Time(as_utc(instant))
        try:
            coord = get_body(body, obstime)
        except (KeyError, ValueError) as e:
            raise EphemerisError(f"Cannot compute position of {body}: {e}") from e
        distance = coord.distance.to(u.au).value
        logger.debug("get_body(%s, %s) -> ra=%s dec=%s", body, obstime.isot, coord.ra, coord.dec)
        return BodyPosition(
            ra_hours=float(coord.ra.hour),
            dec_deg=float(coord.dec.degree),
            distance_au=float(distance) if np.isfinite(distance) else None,
        )

    def horizontal_position(
        self,
        ra_hours: float,
        dec_deg: float,
        observer: ObserverLocation,
        instant: datetime.datetime,
    ) -> HorizontalPosition:
        obstime = Time(as_utc(instant))
        coord = SkyCoord(ra=ra_hours * 15.0 * u.deg, dec=dec_deg * u.deg, frame="icrs")
        aa = coord.transform_to(_altaz_frame(observer, obstime))
        return HorizontalPosition(
            altitude_deg=float(aa.alt.degree),
            azimuth_deg=float(aa.az.degree),
        )

    def altitudes(
        self,
        ra_hours: float,
        dec_deg: float,
        observer: ObserverLocation,
        times: Sequence[datetime.datetime],
    ) -> list[float]:
        if not times:
            return []
        obstime = Time([as_utc(t) for t in times])
        coord = SkyCoord(ra=ra_hours * 15.0 * u.deg, dec=dec_deg * u.deg, frame="icrs")
        aa = coord.transform_to(_altaz_frame(observer, obstime))
        return [float(alt) for alt in np.atleast_1d(aa.alt.degree)]

    def body_altitudes(
        self,
        body: str,
        observer: ObserverLocation,
        times: Sequence[datetime.datetime],
    ) -> list[float]:
        body = body.strip().lower()
        if not times:
            return []
        obstime = Time([as_utc(t) for t in times])
        try:
            coord = get_body(body, obstime)
        except (KeyError, ValueError) as e:
            raise EphemerisError(f"Cannot compute position of {body}: {e}") from e
        aa = coord.transform_to(_altaz_frame(observer, obstime))
        return [float(alt) for alt in np.atleast_1d(aa.alt.degree)]
