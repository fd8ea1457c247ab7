import logging
from pathlib import Path
from typing import Iterable, Sequence

from skyhop.config import Config
from skyhop.errors import CatalogUnavailable
from .parser import format_hint_for_path, parse_dso_file, parse_star_file
from .store import CatalogStore
from .types import EquatorialRecord

logger = logging.getLogger(__name__)

# First existing file wins.
STAR_CANDIDATES = ("hygdata_v41.csv", "stars.csv", "bright_stars.csv", "sample_stars.csv")
DSO_CANDIDATES = ("ngc.csv", "NGC.csv", "messier.csv", "dso.csv", "sample_dso.csv")

BUNDLED_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def find_catalog_file(candidates: Sequence[str], search_dirs: Iterable[Path]) -> Path:
    searched = []
    for directory in search_dirs:
        for name in candidates:
            path = Path(directory) / name
            searched.append(str(path))
            if path.is_file():
                return path
    raise CatalogUnavailable(f"No catalog file found (searched: {', '.join(searched)})")


def _read(path: Path) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def load_star_records(path: Path) -> list[EquatorialRecord]:
    return parse_star_file(_read(path), format_hint_for_path(path))


def load_dso_records(path: Path) -> list[EquatorialRecord]:
    return parse_dso_file(_read(path), format_hint_for_path(path))


def _locate(kind: str, explicit: Path | None, candidates, search_dirs) -> Path:
    if explicit is not None:
        if not explicit.is_file():
            raise CatalogUnavailable(f"Configured {kind} catalog not found: {explicit}")
        return explicit
    return find_catalog_file(candidates, search_dirs)


def load_catalog_store(config: Config | None = None, search_dirs: Sequence[Path] | None = None) -> CatalogStore:
    """Build the catalog store once from the best available star and DSO files.

    A missing catalog leaves that half of the store empty and is logged as a
    warning.
    """
    config = config or Config({})
    if search_dirs is None:
        search_dirs = [config.catalog_data_dir, BUNDLED_DATA_DIR]

    store = CatalogStore()

    try:
        star_path = _locate("star", config.catalog_star_file, STAR_CANDIDATES, search_dirs)
    except CatalogUnavailable as e:
        logger.warning("Star catalog unavailable: %s", e)
    else:
        records = load_star_records(star_path)
        for record in records:
            store.add_star(record)
        logger.info("Loaded %d stars from %s", len(records), star_path)

    try:
        dso_path = _locate("DSO", config.catalog_dso_file, DSO_CANDIDATES, search_dirs)
    except CatalogUnavailable as e:
        logger.warning("DSO catalog unavailable: %s", e)
    else:
        records = load_dso_records(dso_path)
        for record in records:
            store.add_dso(record)
        logger.info(
            "Loaded %d deep-sky records (%d aliases) from %s",
            len(records),
            store.alias_count,
            dso_path,
        )

    return store
