import datetime
import json
import logging
import socket
from dataclasses import dataclass
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import urlopen

from skyhop.config import DEFAULT_DATA_DIR
from skyhop.errors import CatalogUpdateError
from .parser import format_hint_for_path, parse_dso_file, parse_star_file

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT_S = 15
METADATA_FILENAME = "metadata.json"


@dataclass(frozen=True)
class CatalogSource:
    destination: str
    location: str
    description: str
    kind: str  # "star" or "dso"


DEFAULT_SOURCES = (
    CatalogSource(
        destination="ngc.csv",
        location="https://raw.githubusercontent.com/mattiaverga/OpenNGC/master/database_files/NGC.csv",
        description="OpenNGC catalog",
        kind="dso",
    ),
    CatalogSource(
        destination="hygdata_v41.csv",
        location="https://raw.githubusercontent.com/astronexus/HYG-Database/master/hyg/CURRENT/hygdata_v41.csv",
        description="HYG database v41",
        kind="star",
    ),
)


def update_catalogs(data_dir: Path | None = None, sources=None) -> dict:
    """Fetch each catalog source into ``data_dir`` and write metadata alongside.

    Sources are URLs or local paths. A failing source is logged and skipped;
    ``CatalogUpdateError`` is raised only when nothing could be fetched.
    """
    data_dir = Path(data_dir) if data_dir is not None else DEFAULT_DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    sources = DEFAULT_SOURCES if sources is None else tuple(sources)

    fetched = []
    failed = []
    for source in sources:
        target = data_dir / source.destination
        try:
            _fetch(source.location, target)
        except (HTTPError, URLError, socket.timeout, OSError, ValueError) as e:
            logger.warning("Failed to fetch %s from %s: %s", source.description, source.location, e)
            failed.append({"destination": source.destination, "source": source.location, "error": str(e)})
            continue
        records = _count_records(target, source.kind)
        logger.info("Fetched %s to %s (%d records)", source.description, target, records)
        fetched.append(
            {
                "destination": source.destination,
                "source": source.location,
                "description": source.description,
                "records": records,
                "bytes": target.stat().st_size,
            }
        )

    if sources and not fetched:
        raise CatalogUpdateError(
            "No catalog could be fetched: " + "; ".join(f"{f['source']} ({f['error']})" for f in failed)
        )

    meta = {
        "data_dir": str(data_dir),
        "files": fetched,
        "failed": failed,
        "updated_utc": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
    _write_metadata(meta, data_dir / METADATA_FILENAME)
    return meta


def _fetch(location: str, target: Path) -> None:
    parsed = urlparse(location)
    if parsed.scheme in ("http", "https"):
        if not Path(parsed.path).name:
            raise ValueError(f"Invalid source URL: {location}")
        with urlopen(location, timeout=DOWNLOAD_TIMEOUT_S) as resp:
            data = resp.read()
        target.write_bytes(data)
        return
    path = Path(location).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Source not found: {location}")
    if path.resolve() != target.resolve():
        target.write_bytes(path.read_bytes())


def _count_records(path: Path, kind: str) -> int:
    content = path.read_text(encoding="utf-8", errors="replace")
    hint = format_hint_for_path(path)
    if kind == "star":
        return len(parse_star_file(content, hint))
    return len(parse_dso_file(content, hint))


def _write_metadata(meta: dict, path: Path) -> None:
    path.write_text(json.dumps(meta, indent=2, sort_keys=True), encoding="utf-8")
