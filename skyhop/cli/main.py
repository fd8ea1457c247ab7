import argparse
import sys

from skyhop import __version__
from skyhop.cli import commands


def _common_parser() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--config", help="Path to config TOML (default ~/.config/skyhop/config.toml)")
    parent.add_argument("--json", action="store_true", help="Output result as JSON")
    parent.add_argument(
        "--log-level",
        dest="log_level",
        choices=("debug", "info", "warn", "error"),
        help="Enable logging at this level",
    )
    parent.add_argument("--lat", dest="latitude_deg", type=float, help="Observer latitude in degrees")
    parent.add_argument("--lon", dest="longitude_deg", type=float, help="Observer longitude in degrees (east positive)")
    parent.add_argument("--elev", dest="elevation_m", type=float, help="Observer elevation in meters")
    parent.add_argument("--time", help="Observation time, ISO 8601 (default now; naive times are UTC)")
    return parent


def build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    parser = argparse.ArgumentParser(prog="skyhop", description="Find celestial objects and star-hop to them.")
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("doctor", parents=[common], help="Check config, catalogs and ephemeris")

    lookup_parser = subparsers.add_parser("lookup", parents=[common], help="Position and visibility of an object")
    lookup_parser.add_argument("name", help="Object name, e.g. Jupiter, Vega, M31, 'Andromeda Galaxy'")

    hop_parser = subparsers.add_parser("hop", parents=[common], help="Plan a star-hopping path to a target")
    hop_parser.add_argument("target", help="Target object name")
    hop_parser.add_argument("--fov", type=float, help="Finder or eyepiece field of view in degrees")
    hop_parser.add_argument("--max-hop-magnitude", dest="max_hop_magnitude", type=float, help="Faintest star to hop through")
    hop_parser.add_argument("--search-radius", dest="search_radius", type=float, help="Start star search radius in degrees")
    hop_parser.add_argument("--start-magnitude", dest="start_magnitude", type=float, help="Faintest acceptable start star")
    hop_parser.add_argument("--max-hops", dest="max_hops", type=int, help="Give up after this many hops")

    list_parser = subparsers.add_parser("list", parents=[common], help="List known objects by category")
    list_parser.add_argument(
        "--category",
        default="all",
        help="planets, stars, messier, ic, ngc, dso or all (default all)",
    )
    list_parser.add_argument("--limit", type=int, help="Maximum names per category")
    list_parser.add_argument("--offset", type=int, default=0, help="Names to skip per category; only applied with --limit")
    list_parser.add_argument("--min-magnitude", dest="min_magnitude", type=float, help="Only objects at least this bright")
    list_parser.add_argument("--constellation", help="IAU constellation code, e.g. Ori")

    stream_parser = subparsers.add_parser("stream", parents=[common], help="Alt/az time series for objects")
    stream_parser.add_argument("names", nargs="+", help="Objects to track")
    stream_parser.add_argument("--cadence", type=float, default=5, help="Minutes between samples (default 5)")
    stream_parser.add_argument("--duration", type=float, default=60, help="Minutes to cover (default 60)")
    stream_parser.add_argument("--min-altitude", dest="min_altitude", type=float, default=0, help="Drop samples below this altitude")

    update_parser = subparsers.add_parser("update", parents=[common], help="Download catalog files")
    update_parser.add_argument("--data-dir", dest="data_dir", help="Destination directory (default from config)")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"Skyhop {__version__}")
        return 0

    handlers = {
        "doctor": commands.run_doctor,
        "lookup": commands.run_lookup,
        "hop": commands.run_hop,
        "list": commands.run_list,
        "stream": commands.run_stream,
        "update": commands.run_update,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 0
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
