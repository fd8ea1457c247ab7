"""Angular separation and bearing between two equatorial positions.

Positions are any objects exposing ``ra_hours`` and ``dec_deg`` (catalog
records, ephemeris body positions).
"""
import math
from dataclasses import dataclass

CARDINAL_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)

# Nudges angles sitting on a 22.5° bucket boundary to the same side every time.
_CARDINAL_EPSILON = 0.001


@dataclass(frozen=True)
class Bearing:
    degrees: float
    cardinal: str


def separation_deg(ra1_hours: float, dec1_deg: float, ra2_hours: float, dec2_deg: float) -> float:
    ra1 = math.radians(ra1_hours * 15.0)
    ra2 = math.radians(ra2_hours * 15.0)
    dec1 = math.radians(dec1_deg)
    dec2 = math.radians(dec2_deg)
    cos_sep = math.sin(dec1) * math.sin(dec2) + math.cos(dec1) * math.cos(dec2) * math.cos(ra1 - ra2)
    cos_sep = max(-1.0, min(1.0, cos_sep))
    return math.degrees(math.acos(cos_sep))


def angular_separation_deg(a, b) -> float:
    return separation_deg(a.ra_hours, a.dec_deg, b.ra_hours, b.dec_deg)


def bearing_deg(ra1_hours: float, dec1_deg: float, ra2_hours: float, dec2_deg: float) -> float:
    """Initial course from point 1 to point 2, degrees east of north in [0, 360)."""
    ra1 = math.radians(ra1_hours * 15.0)
    ra2 = math.radians(ra2_hours * 15.0)
    dec1 = math.radians(dec1_deg)
    dec2 = math.radians(dec2_deg)
    y = math.sin(ra2 - ra1)
    x = math.cos(dec1) * math.tan(dec2) - math.sin(dec1) * math.cos(ra2 - ra1)
    angle = math.degrees(math.atan2(y, x))
    if angle < 0:
        angle += 360.0
    return angle % 360.0


def cardinal_direction(degrees: float) -> str:
    index = round((degrees % 360.0) / 22.5 + _CARDINAL_EPSILON) % 16
    return CARDINAL_POINTS[index]


def bearing(a, b) -> Bearing:
    angle = bearing_deg(a.ra_hours, a.dec_deg, b.ra_hours, b.dec_deg)
    return Bearing(degrees=round(angle, 1) % 360.0, cardinal=cardinal_direction(angle))
