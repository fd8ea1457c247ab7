import json
from unittest.mock import patch
from urllib.error import URLError

import pytest

from skyhop.catalog.update import METADATA_FILENAME, CatalogSource, update_catalogs
from skyhop.errors import CatalogUpdateError

STARS_CSV = (
    "name,ra_hours,dec_degrees,mag,constellation\n"
    "Vega,18.6156,38.7837,0.03,Lyr\n"
    "Deneb,20.6905,45.2803,1.25,Cyg\n"
)


@pytest.fixture
def local_star_source(tmp_path):
    src = tmp_path / "src" / "bright.csv"
    src.parent.mkdir()
    src.write_text(STARS_CSV, encoding="utf-8")
    return CatalogSource(destination="stars.csv", location=str(src), description="bright stars", kind="star")


def test_update_from_local_file(tmp_path, local_star_source):
    data_dir = tmp_path / "data"
    meta = update_catalogs(data_dir=data_dir, sources=[local_star_source])

    assert (data_dir / "stars.csv").read_text(encoding="utf-8") == STARS_CSV
    assert meta["failed"] == []
    (entry,) = meta["files"]
    assert entry["destination"] == "stars.csv"
    assert entry["records"] == 2
    assert entry["bytes"] == len(STARS_CSV.encode("utf-8"))

    written = json.loads((data_dir / METADATA_FILENAME).read_text(encoding="utf-8"))
    assert written["files"][0]["records"] == 2
    assert "updated_utc" in written


def test_update_skips_failed_source(tmp_path, local_star_source):
    missing = CatalogSource(
        destination="ngc.csv",
        location=str(tmp_path / "missing.csv"),
        description="missing DSOs",
        kind="dso",
    )
    meta = update_catalogs(data_dir=tmp_path / "data", sources=[missing, local_star_source])
    assert [f["destination"] for f in meta["files"]] == ["stars.csv"]
    assert [f["destination"] for f in meta["failed"]] == ["ngc.csv"]


def test_update_raises_when_nothing_fetched(tmp_path):
    missing = CatalogSource(
        destination="stars.csv",
        location=str(tmp_path / "missing.csv"),
        description="missing stars",
        kind="star",
    )
    with pytest.raises(CatalogUpdateError, match="No catalog could be fetched"):
        update_catalogs(data_dir=tmp_path / "data", sources=[missing])
    assert not (tmp_path / "data" / METADATA_FILENAME).exists()


def test_update_downloads_url(tmp_path):
    source = CatalogSource(
        destination="stars.csv",
        location="https://example.org/catalogs/stars.csv",
        description="remote stars",
        kind="star",
    )
    with patch("skyhop.catalog.update.urlopen") as mock_urlopen:
        mock_urlopen.return_value.__enter__.return_value.read.return_value = STARS_CSV.encode("utf-8")
        meta = update_catalogs(data_dir=tmp_path, sources=[source])

    mock_urlopen.assert_called_once()
    assert mock_urlopen.call_args.kwargs["timeout"] == 15
    assert meta["files"][0]["records"] == 2


def test_update_network_error_is_reported(tmp_path, local_star_source):
    remote = CatalogSource(
        destination="ngc.csv",
        location="https://example.org/catalogs/NGC.csv",
        description="remote DSOs",
        kind="dso",
    )
    with patch("skyhop.catalog.update.urlopen", side_effect=URLError("offline")):
        meta = update_catalogs(data_dir=tmp_path / "data", sources=[remote, local_star_source])
    assert meta["failed"][0]["source"] == remote.location
    assert "offline" in meta["failed"][0]["error"]
