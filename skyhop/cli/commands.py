import datetime
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from skyhop.catalog.listing import list_objects
from skyhop.catalog.loader import load_catalog_store
from skyhop.catalog.update import update_catalogs
from skyhop.config import Config, load_config
from skyhop.ephemeris import ObserverLocation, get_ephemeris_backend, observer_from_config
from skyhop.errors import CatalogUpdateError, EphemerisError, ObjectNotFound
from skyhop.hopping import Pathfinder
from skyhop.hopping.formatters import format_text as format_path_text
from skyhop.hopping.formatters import path_to_dict
from skyhop.resolver import ObjectResolver
from skyhop.services import describe_object, ephemeris_stream
from skyhop.util.format import deg_to_dms, format_degrees, format_hours, hours_to_hms

logger = logging.getLogger(__name__)


def _json_envelope(command: str, ok: bool, data=None, error=None) -> dict:
    return {
        "ok": ok,
        "command": command,
        "timestamp_utc": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "data": data,
        "error": error,
    }


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _init_logging(level: str | None) -> None:
    if not level:
        return
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }
    logging.basicConfig(level=level_map.get(level, logging.INFO))


def _config_path_from_args(args) -> Path | None:
    if args is None:
        return None
    path = getattr(args, "config", None)
    return Path(path) if path else None


def _parse_datetime_arg(value: str | None) -> datetime.datetime | None:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.datetime.fromisoformat(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def _parse_location_args(args, config) -> ObserverLocation:
    observer = observer_from_config(config)
    lat = getattr(args, "latitude_deg", None)
    lon = getattr(args, "longitude_deg", None)
    elev = getattr(args, "elevation_m", None)
    if (lat is None) != (lon is None):
        raise ValueError(
            "Both latitude and longitude are required when specifying location"
        )
    if lat is not None:
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"Latitude out of range: {lat}")
        observer.latitude_deg = lat
        observer.longitude_deg = lon
        observer.name = None
    if elev is not None:
        observer.elevation_m = elev
    return observer


def _load_config(args):
    try:
        return load_config(_config_path_from_args(args))
    except FileNotFoundError as e:
        raise ValueError(str(e)) from e


def _report_error(command: str, args, code: str, message: str, status: int) -> int:
    if getattr(args, "json", False):
        _print_json(
            _json_envelope(
                command=command,
                ok=False,
                data=None,
                error={"code": code, "message": message, "details": None},
            )
        )
    else:
        print(message, file=sys.stderr)
    return status


class _Session:
    """Everything a query command needs, built once per invocation."""

    def __init__(self, args):
        self.config = _load_config(args)
        self.observer = _parse_location_args(args, self.config)
        self.instant = _parse_datetime_arg(getattr(args, "time", None)) or datetime.datetime.now(
            datetime.timezone.utc
        )
        self.ephemeris = get_ephemeris_backend(self.config)
        self.store = load_catalog_store(self.config)
        self.resolver = ObjectResolver(self.store, self.ephemeris)


def run_doctor(args=None) -> int:
    _init_logging(getattr(args, "log_level", None))

    try:
        config = load_config(_config_path_from_args(args))
        config_check = {"ok": True, "detail": "loaded (defaults applied if missing)"}
    except (OSError, ValueError) as e:
        config = Config({})
        config_check = {"ok": False, "detail": f"invalid config: {e}"}

    store = load_catalog_store(config)

    def check_catalog(count: int, kind: str):
        if count:
            return {"ok": True, "detail": f"{count} {kind} entries"}
        return {"ok": False, "detail": "no catalog file found (run 'skyhop update')"}

    def check_ephemeris():
        try:
            backend = get_ephemeris_backend(config)
            position = backend.equatorial_position("sun", datetime.datetime.now(datetime.timezone.utc))
        except (ValueError, EphemerisError, ImportError) as e:
            return {"ok": False, "detail": str(e)}
        return {"ok": True, "detail": f"sun at RA {format_hours(position.ra_hours)}"}

    checks = {
        "config": config_check,
        "star_catalog": check_catalog(store.star_count, "star"),
        "dso_catalog": check_catalog(store.dso_count, "deep-sky"),
        f"ephemeris ({config.ephemeris_backend})": check_ephemeris(),
    }
    ok = all(c["ok"] for c in checks.values())

    if getattr(args, "json", False):
        _print_json(
            _json_envelope(
                command="doctor",
                ok=ok,
                data={"checks": checks},
                error=None
                if ok
                else {
                    "code": "doctor_failed",
                    "message": "one or more checks failed",
                    "details": None,
                },
            )
        )
    else:
        print("Skyhop Doctor Report")
        print("====================")
        for name, result in checks.items():
            status = "OK" if result["ok"] else "MISSING"
            print(f"{name:22} : {status} ({result['detail']})")
        if ok:
            print("\nSystem ready.")
        else:
            print("\nSome components are missing or not configured.")

    return 0 if ok else 1


def _format_time(dt: datetime.datetime | None) -> str:
    if dt is None:
        return "N/A"
    return dt.astimezone(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def _format_details_text(details) -> str:
    lines = [details.name]
    lines.append("=" * len(details.name))
    if details.common_name:
        lines.append(f"Also known as: {details.common_name}")
    if details.object_type:
        lines.append(f"Type: {details.object_type}")
    if details.magnitude is not None:
        lines.append(f"Magnitude: {details.magnitude:.2f}")
    if details.constellation:
        lines.append(f"Constellation: {details.constellation}")
    lines.append(f"Time: {_format_time(details.observed_utc)}")
    lines.append(
        f"RA/Dec: {hours_to_hms(details.ra_hours)} {deg_to_dms(details.dec_deg)} "
        f"({format_hours(details.ra_hours, 4)}, {format_degrees(details.dec_deg, 4)})"
    )
    lines.append(
        f"Alt/Az: {format_degrees(details.altitude_deg, 1)} / {format_degrees(details.azimuth_deg, 1)}"
    )
    lines.append(f"Visibility: {details.visibility}")
    if details.rise_set is not None:
        lines.append(
            f"Rise: {_format_time(details.rise_set.rise_utc)}  "
            f"Transit: {_format_time(details.rise_set.transit_utc)}  "
            f"Set: {_format_time(details.rise_set.set_utc)}"
        )
    if details.visibility_note:
        lines.append(details.visibility_note)
    if details.distance_au is not None:
        lines.append(f"Distance: {details.distance_au:.6f} AU ({details.distance_km:,.0f} km)")
    if details.illumination is not None:
        trend = ""
        if details.illumination.waxing is not None:
            trend = " waxing" if details.illumination.waxing else " waning"
        lines.append(f"Illuminated: {details.illumination.fraction * 100:.1f}%{trend}")
    if details.moon_phases is not None:
        phases = details.moon_phases
        lines.append(f"New moon: {_format_time(phases.new_moon_utc)}")
        lines.append(f"First quarter: {_format_time(phases.first_quarter_utc)}")
        lines.append(f"Full moon: {_format_time(phases.full_moon_utc)}")
        lines.append(f"Last quarter: {_format_time(phases.last_quarter_utc)}")
    return "\n".join(lines)


def run_lookup(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        session = _Session(args)
        details = describe_object(
            args.name, session.resolver, session.ephemeris, session.observer, session.instant
        )
    except ObjectNotFound as e:
        return _report_error("lookup", args, "object_not_found", str(e), 1)
    except ValueError as e:
        return _report_error("lookup", args, "invalid_argument", str(e), 2)

    if getattr(args, "json", False):
        _print_json(_json_envelope(command="lookup", ok=True, data=asdict(details), error=None))
    else:
        print(_format_details_text(details))
    return 0


def run_hop(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        session = _Session(args)
        config = session.config
        fov = args.fov if args.fov is not None else config.hopping_fov_deg
        if fov is None:
            raise ValueError("A field of view is required (use --fov or set hopping.fov_deg).")
        pathfinder = Pathfinder(session.store, session.resolver, session.ephemeris, session.observer)
        result = pathfinder.find_path(
            args.target,
            fov_deg=float(fov),
            max_hop_magnitude=_first_set(args.max_hop_magnitude, config.hopping_max_hop_magnitude),
            initial_search_radius_deg=_first_set(
                args.search_radius, config.hopping_initial_search_radius_deg
            ),
            start_star_magnitude_threshold=_first_set(
                args.start_magnitude, config.hopping_start_star_magnitude_threshold
            ),
            max_hops=int(_first_set(args.max_hops, config.hopping_max_hops)),
            instant=session.instant,
        )
    except ValueError as e:
        return _report_error("hop", args, "invalid_argument", str(e), 2)

    if getattr(args, "json", False):
        error = None
        if not result.reached:
            error = {"code": result.status.value, "message": result.summary, "details": None}
        _print_json(
            _json_envelope(command="hop", ok=result.reached, data=path_to_dict(result), error=error)
        )
    else:
        print(format_path_text(result))
    return 0 if result.reached else 1


def _first_set(value, default):
    return value if value is not None else default


def run_list(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        config = _load_config(args)
        store = load_catalog_store(config)
        listing = list_objects(
            store,
            category=args.category,
            limit=args.limit,
            offset=args.offset,
            min_magnitude=args.min_magnitude,
            constellation=args.constellation,
        )
    except ValueError as e:
        return _report_error("list", args, "invalid_argument", str(e), 2)

    if getattr(args, "json", False):
        data = asdict(listing)
        data["total_categories"] = listing.total_categories
        data["total_objects"] = listing.total_objects
        _print_json(_json_envelope(command="list", ok=True, data=data, error=None))
        return 0

    for page in listing.categories:
        header = f"{page.category} ({page.object_count} of {page.total})"
        print(header)
        print("-" * len(header))
        for name in page.names:
            print(f"  {name}")
        print()
    print(f"{listing.total_objects} objects in {listing.total_categories} categories")
    return 0


def run_stream(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        session = _Session(args)
        stream = ephemeris_stream(
            args.names,
            session.resolver,
            session.ephemeris,
            session.observer,
            start=session.instant,
            cadence_min=args.cadence,
            duration_min=args.duration,
            min_altitude_deg=args.min_altitude,
        )
    except ValueError as e:
        return _report_error("stream", args, "invalid_argument", str(e), 2)

    if getattr(args, "json", False):
        data = asdict(stream)
        data["suggested_poll_interval_s"] = stream.suggested_poll_interval_s
        _print_json(_json_envelope(command="stream", ok=True, data=data, error=None))
        return 0

    for sample in stream.samples:
        print(
            f"{sample.time_utc.strftime('%H:%M')}  {sample.object:20}  "
            f"alt {sample.altitude_deg:6.2f}°  az {sample.azimuth_deg:6.2f}°"
        )
    for name in stream.unresolved:
        print(f"Unknown object skipped: {name}", file=sys.stderr)
    return 0


def run_update(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        config = _load_config(args)
    except ValueError as e:
        return _report_error("update", args, "invalid_argument", str(e), 2)
    data_dir = Path(args.data_dir).expanduser() if getattr(args, "data_dir", None) else config.catalog_data_dir
    try:
        meta = update_catalogs(data_dir=data_dir)
    except CatalogUpdateError as e:
        return _report_error("update", args, "update_failed", str(e), 1)

    if getattr(args, "json", False):
        _print_json(_json_envelope(command="update", ok=not meta["failed"], data=meta, error=None))
    else:
        for entry in meta["files"]:
            print(f"{entry['destination']}: {entry['records']} records from {entry['source']}")
        for entry in meta["failed"]:
            print(f"{entry['destination']}: FAILED ({entry['error']})", file=sys.stderr)
    return 0 if not meta["failed"] else 1
