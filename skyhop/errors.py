class SkyhopError(Exception):
    """Base exception for skyhop errors."""


class ObjectNotFound(SkyhopError, LookupError):
    """Raised when a name matches no solar-system body or catalog entry."""

    def __init__(self, name: str, detail: str | None = None):
        self.name = name
        self.detail = detail
        message = f"Unknown celestial object: {name}"
        if detail:
            message = f"{message}. {detail}"
        super().__init__(message)


class CatalogUnavailable(SkyhopError):
    """Raised when no source file exists for a catalog category."""


class MalformedRow(SkyhopError, ValueError):
    """Raised for a single catalog row that cannot be normalized."""


class EphemerisError(SkyhopError):
    """Raised when an ephemeris backend cannot compute a body."""


class CatalogUpdateError(SkyhopError):
    """Raised when no catalog source could be fetched."""
