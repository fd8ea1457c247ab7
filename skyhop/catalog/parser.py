"""Normalize star and deep-sky CSV catalogs into ``EquatorialRecord``s.

Supported layouts:

* HYG database (``hygdata_v*.csv``): ``proper``, ``bf``, ``hip``, ``hd``,
  ``ra`` (hours), ``dec``, ``mag``, ``con``.
* OpenNGC (``NGC.csv``): semicolon separated, sexagesimal ``RA``/``Dec``,
  ``V-Mag``/``B-Mag``, Messier cross-reference in ``M``.
* Generic comma files: ``name``, ``ra_hours`` or ``RA`` (degrees),
  ``dec_degrees`` or ``Dec``, ``mag`` and friends.

Each logical field is read through an ordered table of
``(column, transform)`` pairs; the first column holding a usable value wins.
"""
import csv
import dataclasses
import io
import logging
import math
import re
from typing import Callable, Iterable

from skyhop.errors import MalformedRow
from .types import EquatorialRecord

logger = logging.getLogger(__name__)

FORMAT_HYG = "hyg"
FORMAT_OPENNGC = "openngc"

_FORMAT_DELIMITERS = {
    FORMAT_HYG: ",",
    FORMAT_OPENNGC: ";",
}

# Unnamed stars at or beyond this magnitude are not loaded.
FAINT_UNNAMED_STAR_LIMIT = 6.0

FieldTable = tuple[tuple[str, Callable[[str], object]], ...]


def detect_delimiter(content: str, format_hint: str | None = None) -> str:
    if format_hint in _FORMAT_DELIMITERS:
        return _FORMAT_DELIMITERS[format_hint]
    if ";" in content and "," not in content:
        return ";"
    return ","


def parse_float(value: str) -> float | None:
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_sexagesimal(value: str) -> float | None:
    """Combine ``[±]A:B:C`` into ``A + B/60 + C/3600``, signed by the first character."""
    value = value.strip()
    parts = value.split(":")
    if len(parts) != 3:
        return None
    sign = -1.0 if value.startswith("-") else 1.0
    head = parts[0].lstrip("+-")
    whole = parse_float(head)
    minutes = parse_float(parts[1])
    seconds = parse_float(parts[2])
    if whole is None or minutes is None or seconds is None:
        return None
    return sign * (abs(whole) + minutes / 60.0 + seconds / 3600.0)


def parse_hours(value: str) -> float | None:
    if ":" in value:
        return parse_sexagesimal(value)
    return parse_float(value)


def parse_ra_degrees(value: str) -> float | None:
    """RA column that is sexagesimal hours when it has colons, else decimal degrees."""
    if ":" in value:
        return parse_sexagesimal(value)
    degrees = parse_float(value)
    if degrees is None:
        return None
    return degrees / 15.0


def parse_declination(value: str) -> float | None:
    if ":" in value:
        return parse_sexagesimal(value)
    return parse_float(value)


_ZERO_PADDED_ID = re.compile(r"^(NGC|IC|M)0+(?=\d)", re.IGNORECASE)


def normalize_catalog_id(name: str) -> str:
    return _ZERO_PADDED_ID.sub(r"\1", name.strip())


def _clean(value: str) -> str | None:
    value = value.strip()
    return value or None


def _split_names(value: str) -> tuple[str, ...] | None:
    cleaned = value.replace("|", ",")
    names = tuple(p.strip() for p in cleaned.split(",") if p.strip())
    return names or None


def _parse_messier_id(value: str) -> str | None:
    value = value.strip()
    if value.isdecimal():
        return f"M{int(value)}"
    if value.upper().startswith("M") and value[1:].strip().isdecimal():
        return f"M{int(value[1:])}"
    return None


RA_FIELDS: FieldTable = (
    ("ra_hours", parse_hours),
    ("ra", parse_hours),
    ("RA", parse_ra_degrees),
)

DEC_FIELDS: FieldTable = (
    ("dec_degrees", parse_declination),
    ("dec", parse_declination),
    ("Dec", parse_declination),
)

CONSTELLATION_FIELDS: FieldTable = (
    ("con", _clean),
    ("Const", _clean),
    ("Constellation", _clean),
    ("constellation", _clean),
    ("CON", _clean),
)

STAR_PROPER_NAME_FIELDS: FieldTable = (
    ("proper", _clean),
    ("ProperName", _clean),
    ("name", _clean),
)

STAR_DESIGNATION_FIELDS: FieldTable = (
    ("bf", _clean),
    ("BayerFlamsteed", _clean),
    ("alt_name", _clean),
)

STAR_CATALOG_NUMBER_FIELDS: FieldTable = (
    ("hip", lambda v: f"HIP {v.strip()}" if v.strip() else None),
    ("hd", lambda v: f"HD {v.strip()}" if v.strip() else None),
)

STAR_MAGNITUDE_FIELDS: FieldTable = (
    ("mag", parse_float),
    ("Mag", parse_float),
    ("magnitude", parse_float),
    ("Magnitude", parse_float),
    ("Vmag", parse_float),
)

DSO_NAME_FIELDS: FieldTable = (
    ("Name", _clean),
    ("name", _clean),
    ("id", _clean),
    ("ID", _clean),
)

DSO_COMMON_NAME_FIELDS: FieldTable = (
    ("common_name", _split_names),
    ("commonName", _split_names),
    ("common name", _split_names),
    ("Common names", _split_names),
)

DSO_TYPE_FIELDS: FieldTable = (
    ("Type", _clean),
    ("type", _clean),
)

# Visual, then blue, then whatever the file calls its magnitude.
DSO_MAGNITUDE_FIELDS: FieldTable = (
    ("V-Mag", parse_float),
    ("VMAG", parse_float),
    ("vmag", parse_float),
    ("B-Mag", parse_float),
    ("BMAG", parse_float),
    ("bmag", parse_float),
    ("magnitude", parse_float),
    ("Magnitude", parse_float),
    ("MAG", parse_float),
    ("mag", parse_float),
)

DSO_MESSIER_FIELDS: FieldTable = (
    ("M", _parse_messier_id),
    ("messier", _parse_messier_id),
    ("messier_id", _parse_messier_id),
)

OPENNGC_TYPES = {
    "*": "Star",
    "**": "Double Star",
    "*ASS": "Association of Stars",
    "OCL": "Open Cluster",
    "GCL": "Globular Cluster",
    "CL+N": "Star Cluster + Nebula",
    "G": "Galaxy",
    "GPAIR": "Galaxy Pair",
    "GTRPL": "Galaxy Triplet",
    "GGROUP": "Group of Galaxies",
    "PN": "Planetary Nebula",
    "HII": "HII Ionized Region",
    "DRKN": "Dark Nebula",
    "EMN": "Emission Nebula",
    "NEB": "Nebula",
    "RFN": "Reflection Nebula",
    "SNR": "Supernova Remnant",
    "NOVA": "Nova Star",
    "NONEX": "Nonexistent Object",
    "DUP": "Duplicated Object",
    "OTHER": "Other Classified Object",
}


def first_value(row: dict, fields: FieldTable):
    for column, transform in fields:
        raw = row.get(column)
        if raw is None:
            continue
        raw = str(raw)
        if not raw.strip():
            continue
        value = transform(raw)
        if value is not None:
            return value
    return None


def _coordinates(row: dict) -> tuple[float, float]:
    ra_hours = first_value(row, RA_FIELDS)
    dec_deg = first_value(row, DEC_FIELDS)
    if ra_hours is None or dec_deg is None:
        raise MalformedRow("missing or non-numeric coordinates")
    if not -90.0 <= dec_deg <= 90.0:
        raise MalformedRow(f"declination out of range: {dec_deg}")
    return ra_hours, dec_deg


def _map_openngc_type(code: str | None) -> str | None:
    if code is None:
        return None
    return OPENNGC_TYPES.get(code.strip().upper(), code)


def _read_rows(content: str, format_hint: str | None) -> csv.DictReader:
    content = content.lstrip("\ufeff")
    delimiter = detect_delimiter(content, format_hint)
    lines = (line for line in io.StringIO(content) if not line.startswith("#"))
    reader = csv.DictReader(lines, delimiter=delimiter)
    if reader.fieldnames is not None:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
    return reader


def _parse_rows(reader: csv.DictReader, parse_row, label: str) -> list[EquatorialRecord]:
    records: list[EquatorialRecord] = []
    skipped = 0
    for row in reader:
        try:
            records.extend(parse_row(row))
        except MalformedRow as e:
            skipped += 1
            logger.debug("Skipping %s row at line %d: %s", label, reader.line_num, e)
    if skipped:
        logger.debug("Skipped %d %s rows", skipped, label)
    return records


def _star_row(row: dict) -> Iterable[EquatorialRecord]:
    proper = first_value(row, STAR_PROPER_NAME_FIELDS)
    if proper == "Sol":
        raise MalformedRow("the Sun is resolved through the ephemeris")
    designation = first_value(row, STAR_DESIGNATION_FIELDS)
    magnitude = first_value(row, STAR_MAGNITUDE_FIELDS)
    constellation = first_value(row, CONSTELLATION_FIELDS)

    if not proper and not designation:
        if magnitude is None or magnitude >= FAINT_UNNAMED_STAR_LIMIT:
            raise MalformedRow("unnamed star too faint to load")

    name = proper or designation or first_value(row, STAR_CATALOG_NUMBER_FIELDS)
    if not name and magnitude is not None:
        name = f"Star mag {magnitude:.1f}"
        if constellation:
            name += f" in {constellation}"
    if not name:
        raise MalformedRow("no resolvable star name")

    ra_hours, dec_deg = _coordinates(row)
    return [
        EquatorialRecord(
            ra_hours=ra_hours,
            dec_deg=dec_deg,
            name=name,
            magnitude=magnitude,
            object_type="Star",
            constellation=constellation,
            designation=designation if proper else None,
        )
    ]


def _dso_row_parser(format_hint: str | None):
    def parse(row: dict) -> Iterable[EquatorialRecord]:
        name = first_value(row, DSO_NAME_FIELDS)
        if not name:
            raise MalformedRow("no resolvable object name")
        name = normalize_catalog_id(name)
        ra_hours, dec_deg = _coordinates(row)

        object_type = first_value(row, DSO_TYPE_FIELDS)
        if format_hint == FORMAT_OPENNGC:
            object_type = _map_openngc_type(object_type)
        common_names = first_value(row, DSO_COMMON_NAME_FIELDS) or ()

        record = EquatorialRecord(
            ra_hours=ra_hours,
            dec_deg=dec_deg,
            name=name,
            magnitude=first_value(row, DSO_MAGNITUDE_FIELDS),
            common_name=common_names[0] if common_names else None,
            object_type=object_type,
            constellation=first_value(row, CONSTELLATION_FIELDS),
            aliases=common_names,
        )
        records = [record]
        messier_id = first_value(row, DSO_MESSIER_FIELDS)
        if messier_id and messier_id.lower() != record.key:
            records.append(dataclasses.replace(record, name=messier_id))
        return records

    return parse


def parse_star_file(content: str, format_hint: str | None = None) -> list[EquatorialRecord]:
    reader = _read_rows(content, format_hint)
    return _parse_rows(reader, _star_row, "star")


def parse_dso_file(content: str, format_hint: str | None = None) -> list[EquatorialRecord]:
    reader = _read_rows(content, format_hint)
    return _parse_rows(reader, _dso_row_parser(format_hint), "DSO")


def format_hint_for_path(path) -> str | None:
    name = str(getattr(path, "name", path))
    if "hygdata_v" in name.lower():
        return FORMAT_HYG
    if name.lower() == "ngc.csv" or "NGC.csv" in name:
        return FORMAT_OPENNGC
    return None
