from abc import ABC, abstractmethod
import datetime
import math
from typing import Sequence

from skyhop.coords import separation_deg
from .types import (
    BodyPosition,
    HorizontalPosition,
    Illumination,
    MoonPhases,
    ObserverLocation,
    RiseSetTransit,
)

RISE_SET_CADENCE_MIN = 10
MOON_PHASE_SEARCH_DAYS = 40
_MOON_PHASE_STEP_HOURS = 12
_MOON_PHASE_BISECTIONS = 24
_OBLIQUITY_RAD = math.radians(23.4393)

MOON_PHASE_ELONGATIONS = {
    "new_moon_utc": 0.0,
    "first_quarter_utc": 90.0,
    "full_moon_utc": 180.0,
    "last_quarter_utc": 270.0,
}


def as_utc(instant: datetime.datetime) -> datetime.datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=datetime.timezone.utc)
    return instant.astimezone(datetime.timezone.utc)


def ecliptic_longitude_deg(ra_hours: float, dec_deg: float) -> float:
    ra = math.radians(ra_hours * 15.0)
    dec = math.radians(dec_deg)
    y = math.sin(ra) * math.cos(_OBLIQUITY_RAD) + math.tan(dec) * math.sin(_OBLIQUITY_RAD)
    x = math.cos(ra)
    return math.degrees(math.atan2(y, x)) % 360.0


def _start_of_day(day) -> datetime.datetime:
    if isinstance(day, datetime.datetime):
        day = as_utc(day).date()
    return datetime.datetime(day.year, day.month, day.day, tzinfo=datetime.timezone.utc)


def _interpolate(t0: datetime.datetime, t1: datetime.datetime, a0: float, a1: float) -> datetime.datetime:
    if a1 == a0:
        return t0
    fraction = -a0 / (a1 - a0)
    return t0 + (t1 - t0) * fraction


class EphemerisBackend(ABC):
    """Positions of solar-system bodies and horizon geometry for an observer.

    Subclasses supply ``equatorial_position`` and ``horizontal_position``;
    rise/set/transit, illumination and lunar phases are derived from them.
    """

    name = "base"

    @abstractmethod
    def equatorial_position(self, body: str, instant: datetime.datetime) -> BodyPosition:
        """Apparent geocentric RA/Dec of ``body``; raises ``EphemerisError`` if unsupported."""
        raise NotImplementedError

    @abstractmethod
    def horizontal_position(
        self,
        ra_hours: float,
        dec_deg: float,
        observer: ObserverLocation,
        instant: datetime.datetime,
    ) -> HorizontalPosition:
        raise NotImplementedError

    def altitudes(
        self,
        ra_hours: float,
        dec_deg: float,
        observer: ObserverLocation,
        times: Sequence[datetime.datetime],
    ) -> list[float]:
        return [
            self.horizontal_position(ra_hours, dec_deg, observer, t).altitude_deg
            for t in times
        ]

    def body_altitudes(
        self,
        body: str,
        observer: ObserverLocation,
        times: Sequence[datetime.datetime],
    ) -> list[float]:
        """Altitudes of a moving body, re-evaluating its position at every instant."""
        altitudes = []
        for t in times:
            position = self.equatorial_position(body, t)
            altitudes.append(
                self.horizontal_position(position.ra_hours, position.dec_deg, observer, t).altitude_deg
            )
        return altitudes

    def rise_set_transit(
        self,
        ra_hours: float,
        dec_deg: float,
        observer: ObserverLocation,
        day,
        body: str | None = None,
    ) -> RiseSetTransit:
        """Rise, set and transit during the UTC day containing ``day``.

        Pass ``body`` for the Sun, Moon or a planet so the track follows the
        body's motion; otherwise ``ra_hours``/``dec_deg`` are held fixed.
        """
        start = _start_of_day(day)
        step = datetime.timedelta(minutes=RISE_SET_CADENCE_MIN)
        times = [start + step * i for i in range(24 * 60 // RISE_SET_CADENCE_MIN + 1)]
        if body is None:
            alts = self.altitudes(ra_hours, dec_deg, observer, times)
        else:
            alts = self.body_altitudes(body, observer, times)

        result = RiseSetTransit()
        best = max(range(len(alts)), key=lambda i: alts[i])
        result.transit_utc = times[best]
        result.transit_altitude_deg = alts[best]

        if abs(dec_deg) > 90.0 - abs(observer.latitude_deg):
            result.circumpolar = True
            result.always_above = min(alts) > 0.0
            result.always_below = max(alts) <= 0.0

        for i in range(len(alts) - 1):
            a0, a1 = alts[i], alts[i + 1]
            if result.rise_utc is None and a0 <= 0.0 < a1:
                result.rise_utc = _interpolate(times[i], times[i + 1], a0, a1)
            if result.set_utc is None and a0 > 0.0 >= a1:
                result.set_utc = _interpolate(times[i], times[i + 1], a0, a1)
        return result

    def illumination(self, body: str, instant: datetime.datetime) -> Illumination | None:
        """Phase of the Moon or a planet as seen from Earth, ``None`` for other bodies."""
        body = body.strip().lower()
        if body in ("sun", "earth", "pluto"):
            return None
        target = self.equatorial_position(body, instant)
        sun = self.equatorial_position("sun", instant)
        if target.distance_au is None or sun.distance_au is None:
            return None

        elongation = math.radians(
            separation_deg(target.ra_hours, target.dec_deg, sun.ra_hours, sun.dec_deg)
        )
        earth_sun = sun.distance_au
        earth_body = target.distance_au
        sun_body = math.sqrt(
            max(0.0, earth_sun ** 2 + earth_body ** 2 - 2.0 * earth_sun * earth_body * math.cos(elongation))
        )
        if sun_body == 0.0:
            return None
        cos_phase = (sun_body ** 2 + earth_body ** 2 - earth_sun ** 2) / (2.0 * sun_body * earth_body)
        phase_angle = math.degrees(math.acos(max(-1.0, min(1.0, cos_phase))))
        fraction = (1.0 + math.cos(math.radians(phase_angle))) / 2.0

        east = (
            ecliptic_longitude_deg(target.ra_hours, target.dec_deg)
            - ecliptic_longitude_deg(sun.ra_hours, sun.dec_deg)
        ) % 360.0
        return Illumination(phase_angle_deg=phase_angle, fraction=fraction, waxing=east < 180.0)

    def moon_elongation_deg(self, instant: datetime.datetime) -> float:
        moon = self.equatorial_position("moon", instant)
        sun = self.equatorial_position("sun", instant)
        return (
            ecliptic_longitude_deg(moon.ra_hours, moon.dec_deg)
            - ecliptic_longitude_deg(sun.ra_hours, sun.dec_deg)
        ) % 360.0

    def moon_phases(self, instant: datetime.datetime) -> MoonPhases:
        start = as_utc(instant)
        step = datetime.timedelta(hours=_MOON_PHASE_STEP_HOURS)
        count = MOON_PHASE_SEARCH_DAYS * 24 // _MOON_PHASE_STEP_HOURS
        times = [start + step * i for i in range(count + 1)]
        elongations = [self.moon_elongation_deg(t) for t in times]

        phases = MoonPhases()
        for field_name, target in MOON_PHASE_ELONGATIONS.items():
            for i in range(count):
                d0 = _offset(elongations[i], target)
                d1 = _offset(elongations[i + 1], target)
                if d0 < 0.0 <= d1:
                    setattr(phases, field_name, self._bisect_phase(times[i], times[i + 1], target))
                    break
        return phases

    def _bisect_phase(self, lo: datetime.datetime, hi: datetime.datetime, target: float) -> datetime.datetime:
        for _ in range(_MOON_PHASE_BISECTIONS):
            mid = lo + (hi - lo) / 2
            if _offset(self.moon_elongation_deg(mid), target) < 0.0:
                lo = mid
            else:
                hi = mid
        return lo + (hi - lo) / 2


def _offset(elongation: float, target: float) -> float:
    """Signed distance of ``elongation`` past ``target`` in [-180, 180)."""
    return ((elongation - target + 180.0) % 360.0) - 180.0
