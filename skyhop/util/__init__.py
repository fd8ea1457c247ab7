from .format import (
    deg_to_dms,
    format_degrees,
    format_hours,
    hours_to_hms,
)

__all__ = [
    "deg_to_dms",
    "format_degrees",
    "format_hours",
    "hours_to_hms",
]
