import datetime
import logging
from dataclasses import dataclass, field
from typing import Sequence

from skyhop.ephemeris.base import EphemerisBackend, as_utc
from skyhop.ephemeris.types import ObserverLocation
from skyhop.errors import ObjectNotFound
from skyhop.resolver import ObjectResolver

logger = logging.getLogger(__name__)


@dataclass
class StreamSample:
    object: str
    time_utc: datetime.datetime
    altitude_deg: float
    azimuth_deg: float
    above_horizon: bool
    magnitude: float | None = None
    constellation: str | None = None
    object_type: str | None = None


@dataclass
class EphemerisStream:
    start_utc: datetime.datetime
    cadence_min: float
    duration_min: float
    min_altitude_deg: float
    samples: list[StreamSample] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)

    @property
    def suggested_poll_interval_s(self) -> float:
        return self.cadence_min * 60


def ephemeris_stream(
    objects: Sequence[str],
    resolver: ObjectResolver,
    ephemeris: EphemerisBackend,
    observer: ObserverLocation,
    start: datetime.datetime | None = None,
    cadence_min: float = 5,
    duration_min: float = 60,
    min_altitude_deg: float = 0,
) -> EphemerisStream:
    if cadence_min <= 0:
        raise ValueError("cadence_min must be positive")
    if duration_min <= 0:
        raise ValueError("duration_min must be positive")

    start = as_utc(start or datetime.datetime.now(datetime.timezone.utc))
    stream = EphemerisStream(
        start_utc=start,
        cadence_min=cadence_min,
        duration_min=duration_min,
        min_altitude_deg=min_altitude_deg,
    )
    unresolved = set()

    offset = 0.0
    while offset <= duration_min:
        t = start + datetime.timedelta(minutes=offset)
        for name in objects:
            try:
                record = resolver.resolve(name, t)
            except ObjectNotFound as e:
                if name not in unresolved:
                    logger.debug("Skipping %s in stream: %s", name, e)
                    unresolved.add(name)
                    stream.unresolved.append(name)
                continue
            horizontal = ephemeris.horizontal_position(record.ra_hours, record.dec_deg, observer, t)
            if horizontal.altitude_deg < min_altitude_deg:
                continue
            stream.samples.append(
                StreamSample(
                    object=name,
                    time_utc=t,
                    altitude_deg=round(horizontal.altitude_deg, 2),
                    azimuth_deg=round(horizontal.azimuth_deg, 2),
                    above_horizon=horizontal.altitude_deg > 0,
                    magnitude=record.magnitude,
                    constellation=record.constellation,
                    object_type=record.object_type,
                )
            )
        offset += cadence_min

    stream.samples.sort(key=lambda s: (s.time_utc, s.object))
    return stream
