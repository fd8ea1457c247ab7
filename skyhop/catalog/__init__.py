from .types import EquatorialRecord
from .parser import parse_dso_file, parse_star_file
from .store import CatalogStore
from .loader import load_catalog_store

__all__ = [
    "EquatorialRecord",
    "parse_star_file",
    "parse_dso_file",
    "CatalogStore",
    "load_catalog_store",
]
