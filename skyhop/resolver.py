import datetime
import logging

from skyhop.catalog.store import CatalogStore
from skyhop.catalog.types import EquatorialRecord
from skyhop.ephemeris.base import EphemerisBackend
from skyhop.ephemeris.types import SOLAR_SYSTEM_BODIES
from skyhop.errors import EphemerisError, ObjectNotFound

logger = logging.getLogger(__name__)

SOLAR_SYSTEM_TYPES = {
    "sun": "Star",
    "moon": "Moon",
    "pluto": "Dwarf Planet",
}


def is_solar_system_body(name: str) -> bool:
    return name.strip().lower() in SOLAR_SYSTEM_BODIES


class ObjectResolver:
    """Resolve a user-supplied name to an equatorial position.

    Precedence: solar-system bodies, common-name aliases, stars, deep-sky
    objects. Matching is case-insensitive.
    """

    def __init__(self, store: CatalogStore, ephemeris: EphemerisBackend):
        self.store = store
        self.ephemeris = ephemeris

    def resolve(self, name: str, instant: datetime.datetime | None = None) -> EquatorialRecord:
        key = name.strip().lower()
        if not key:
            raise ObjectNotFound(name)

        if key in SOLAR_SYSTEM_BODIES:
            return self._solar_system_record(name, key, instant)

        canonical = self.store.resolve_alias(key)
        if canonical is not None:
            record = self.store.lookup_dso(canonical)
            if record is not None:
                return record

        record = self.store.lookup_star(key)
        if record is not None:
            return record

        record = self.store.lookup_dso(key)
        if record is not None:
            return record

        raise ObjectNotFound(name)

    def _solar_system_record(self, name: str, key: str, instant) -> EquatorialRecord:
        instant = instant or datetime.datetime.now(datetime.timezone.utc)
        try:
            position = self.ephemeris.equatorial_position(key, instant)
        except EphemerisError as e:
            logger.debug("Ephemeris failed for %s: %s", key, e)
            raise ObjectNotFound(name, str(e)) from e
        return EquatorialRecord(
            ra_hours=position.ra_hours,
            dec_deg=position.dec_deg,
            name=key.capitalize(),
            object_type=SOLAR_SYSTEM_TYPES.get(key, "Planet"),
        )
