from .details import ObjectDetails, describe_object
from .stream import EphemerisStream, StreamSample, ephemeris_stream

__all__ = [
    "ObjectDetails",
    "describe_object",
    "EphemerisStream",
    "StreamSample",
    "ephemeris_stream",
]
