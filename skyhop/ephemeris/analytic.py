"""Low-precision ephemeris that needs nothing beyond numpy.

The Sun and planets come from the JPL mean Keplerian elements valid for
1800-2050 (Standish, "Keplerian Elements for Approximate Positions of the
Major Planets"); the Moon from the leading terms of the ELP-2000/82 series
as tabulated by Meeus. Everything is referred to the J2000 equator and
equinox so positions line up with the star catalogs without precession.
Errors stay well under a degree, which is plenty for a finder or for
deciding whether something is up.
"""
import datetime
import math

import numpy as np

from skyhop.errors import EphemerisError
from .base import EphemerisBackend, as_utc
from .types import AU_KM, BodyPosition, HorizontalPosition, ObserverLocation

J2000_JD = 2451545.0
UNIX_EPOCH_JD = 2440587.5
DAYS_PER_CENTURY = 36525.0

_OBLIQUITY_J2000 = math.radians(23.43928)
_PRECESSION_DEG_PER_CENTURY = 1.3969713

# a [au], e, I, L, longitude of perihelion, longitude of node [deg];
# second row is the rate per Julian century. "earth" is the Earth-Moon barycentre.
_ELEMENTS = {
    "mercury": (
        (0.38709927, 0.20563593, 7.00497902, 252.25032350, 77.45779628, 48.33076593),
        (0.00000037, 0.00001906, -0.00594749, 149472.67411175, 0.16047689, -0.12534081),
    ),
    "venus": (
        (0.72333566, 0.00677672, 3.39467605, 181.97909950, 131.60246718, 76.67984255),
        (0.00000390, -0.00004107, -0.00078890, 58517.81538729, 0.00268329, -0.27769418),
    ),
    "earth": (
        (1.00000261, 0.01671123, -0.00001531, 100.46457166, 102.93768193, 0.0),
        (0.00000562, -0.00004392, -0.01294668, 35999.37244981, 0.32327364, 0.0),
    ),
    "mars": (
        (1.52371034, 0.09339410, 1.84969142, -4.55343205, -23.94362959, 49.55953891),
        (0.00001847, 0.00007882, -0.00813131, 19140.30268499, 0.44441088, -0.29257343),
    ),
    "jupiter": (
        (5.20288700, 0.04838624, 1.30439695, 34.39644051, 14.72847983, 100.47390909),
        (-0.00011607, -0.00013253, -0.00183714, 3034.74612775, 0.21252668, 0.20469106),
    ),
    "saturn": (
        (9.53667594, 0.05386179, 2.48599187, 49.95424423, 92.59887831, 113.66242448),
        (-0.00125060, -0.00050991, 0.00193609, 1222.49362201, -0.41897216, -0.28867794),
    ),
    "uranus": (
        (19.18916464, 0.04725744, 0.77263783, 313.23810451, 170.95427630, 74.01692503),
        (-0.00196176, -0.00004397, -0.00242939, 428.48202785, 0.40805281, 0.04240589),
    ),
    "neptune": (
        (30.06992276, 0.00859048, 1.77004347, -55.12002969, 44.96476227, 131.78422574),
        (0.00026291, 0.00005105, 0.00035372, 218.45945325, -0.32241464, -0.00508664),
    ),
}
PLANETS = tuple(name for name in _ELEMENTS if name != "earth")

# Multiples of D, M, M', F and the coefficient (1e-6 deg, or 1e-3 km for distance).
_MOON_LONGITUDE = np.array([
    [0, 0, 1, 0, 6288774],
    [2, 0, -1, 0, 1274027],
    [2, 0, 0, 0, 658314],
    [0, 0, 2, 0, 213618],
    [0, 1, 0, 0, -185116],
    [0, 0, 0, 2, -114332],
    [2, 0, -2, 0, 58793],
    [2, -1, -1, 0, 57066],
    [2, 0, 1, 0, 53322],
    [2, -1, 0, 0, 45758],
], dtype=float)
_MOON_LATITUDE = np.array([
    [0, 0, 0, 1, 5128122],
    [0, 0, 1, 1, 280602],
    [0, 0, 1, -1, 277693],
    [2, 0, 0, -1, 173237],
    [2, 0, -1, 1, 55413],
    [2, 0, -1, -1, 46271],
], dtype=float)
_MOON_DISTANCE = np.array([
    [0, 0, 1, 0, -20905355],
    [2, 0, -1, 0, -3699111],
    [2, 0, 0, 0, -2955968],
    [0, 0, 2, 0, -569925],
], dtype=float)
_MOON_MEAN_DISTANCE_KM = 385000.56


def julian_date(instant: datetime.datetime) -> float:
    return as_utc(instant).timestamp() / 86400.0 + UNIX_EPOCH_JD


def julian_centuries(instant: datetime.datetime) -> float:
    return (julian_date(instant) - J2000_JD) / DAYS_PER_CENTURY


def gmst_deg(jd):
    """Greenwich mean sidereal time (IAU 1982) for a scalar or array of Julian dates."""
    d = np.asarray(jd, dtype=float) - J2000_JD
    t = d / DAYS_PER_CENTURY
    return (280.46061837 + 360.98564736629 * d + 0.000387933 * t ** 2 - t ** 3 / 38710000.0) % 360.0


def alt_az_deg(ra_hours: float, dec_deg: float, latitude_deg: float, longitude_deg: float, jd):
    hour_angle = np.radians(gmst_deg(jd) + longitude_deg - ra_hours * 15.0)
    dec = math.radians(dec_deg)
    lat = math.radians(latitude_deg)
    sin_alt = math.sin(dec) * math.sin(lat) + math.cos(dec) * math.cos(lat) * np.cos(hour_angle)
    alt = np.degrees(np.arcsin(np.clip(sin_alt, -1.0, 1.0)))
    # Azimuth from north through east.
    az = np.degrees(np.arctan2(
        -np.sin(hour_angle) * math.cos(dec),
        math.sin(dec) * math.cos(lat) - math.cos(dec) * math.sin(lat) * np.cos(hour_angle),
    )) % 360.0
    return alt, az


def _rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _eccentric_anomaly(mean_anomaly: float, e: float) -> float:
    ecc = mean_anomaly + e * math.sin(mean_anomaly)
    for _ in range(20):
        delta = (ecc - e * math.sin(ecc) - mean_anomaly) / (1.0 - e * math.cos(ecc))
        ecc -= delta
        if abs(delta) < 1e-12:
            break
    return ecc


def heliocentric_ecliptic(body: str, t: float) -> np.ndarray:
    """Heliocentric J2000 ecliptic position (au) from the mean elements at ``t`` centuries."""
    base, rate = _ELEMENTS[body]
    a, e, incl, mean_long, perihelion, node = np.asarray(base) + np.asarray(rate) * t
    mean_anomaly = math.radians((mean_long - perihelion + 180.0) % 360.0 - 180.0)
    ecc = _eccentric_anomaly(mean_anomaly, e)
    in_plane = np.array([a * (math.cos(ecc) - e), a * math.sqrt(1.0 - e * e) * math.sin(ecc), 0.0])
    orientation = (
        _rotation_z(math.radians(node))
        @ _rotation_x(math.radians(incl))
        @ _rotation_z(math.radians(perihelion - node))
    )
    return orientation @ in_plane


def moon_ecliptic(t: float) -> np.ndarray:
    """Geocentric J2000 ecliptic position of the Moon in au."""
    mean_long = 218.3164477 + 481267.88123421 * t
    arguments = np.radians(np.array([
        297.8501921 + 445267.1114034 * t,
        357.5291092 + 35999.0502909 * t,
        134.9633964 + 477198.8675055 * t,
        93.2720950 + 483202.0175233 * t,
    ]) % 360.0)
    eccentricity = 1.0 - 0.002516 * t

    def series(table, func):
        coefficients = table[:, 4] * eccentricity ** np.abs(table[:, 1])
        return float(np.sum(coefficients * func(table[:, :4] @ arguments)))

    longitude = mean_long + series(_MOON_LONGITUDE, np.sin) * 1e-6 - _PRECESSION_DEG_PER_CENTURY * t
    latitude = series(_MOON_LATITUDE, np.sin) * 1e-6
    distance = (_MOON_MEAN_DISTANCE_KM + series(_MOON_DISTANCE, np.cos) * 1e-3) / AU_KM

    lam, beta = math.radians(longitude), math.radians(latitude)
    return distance * np.array([
        math.cos(beta) * math.cos(lam),
        math.cos(beta) * math.sin(lam),
        math.sin(beta),
    ])


def geocentric_ecliptic(body: str, t: float) -> np.ndarray:
    if body == "sun":
        return -heliocentric_ecliptic("earth", t)
    if body == "moon":
        return moon_ecliptic(t)
    if body in PLANETS:
        return heliocentric_ecliptic(body, t) - heliocentric_ecliptic("earth", t)
    if body == "earth":
        raise EphemerisError("Earth has no geocentric position")
    raise EphemerisError(f"Body not supported by the analytic ephemeris: {body}")


class AnalyticEphemeris(EphemerisBackend):
    name = "analytic"

    def equatorial_position(self, body: str, instant: datetime.datetime) -> BodyPosition:
        body = body.strip().lower()
        x, y, z = _rotation_x(_OBLIQUITY_J2000) @ geocentric_ecliptic(body, julian_centuries(instant))
        return BodyPosition(
            ra_hours=math.degrees(math.atan2(y, x)) % 360.0 / 15.0,
            dec_deg=math.degrees(math.atan2(z, math.hypot(x, y))),
            distance_au=float(math.sqrt(x * x + y * y + z * z)),
        )

    def horizontal_position(
        self,
        ra_hours: float,
        dec_deg: float,
        observer: ObserverLocation,
        instant: datetime.datetime,
    ) -> HorizontalPosition:
        alt, az = alt_az_deg(
            ra_hours, dec_deg, observer.latitude_deg, observer.longitude_deg, julian_date(instant)
        )
        return HorizontalPosition(altitude_deg=float(alt), azimuth_deg=float(az))

    def altitudes(self, ra_hours, dec_deg, observer, times):
        jd = np.array([julian_date(t) for t in times], dtype=float)
        alt, _ = alt_az_deg(ra_hours, dec_deg, observer.latitude_deg, observer.longitude_deg, jd)
        return [float(a) for a in np.atleast_1d(alt)]
