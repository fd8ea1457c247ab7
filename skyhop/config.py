import math
import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import tomli as tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:  # Python < 3.11
        import tomli as tomllib

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "skyhop" / "config.toml"
DEFAULT_DATA_DIR = Path.home() / ".skyhop" / "data"

DEFAULT_SITE = {
    "latitude_deg": 49.2827,
    "longitude_deg": -123.1207,
    "elevation_m": 30.0,
    "temperature_c": 15.0,
    "pressure_hpa": 1013.25,
}

# Environment overrides for the observing site, applied over the config file.
SITE_ENV_VARS = {
    "latitude_deg": "OBSERVER_LATITUDE",
    "longitude_deg": "OBSERVER_LONGITUDE",
    "elevation_m": "OBSERVER_ALTITUDE",
    "temperature_c": "OBSERVER_TEMPERATURE",
    "pressure_hpa": "OBSERVER_PRESSURE",
}


def _env_float(name: str, environ) -> float | None:
    raw = environ.get(name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


class Config:
    def __init__(self, data: dict, environ=None):
        self._data = data
        self._environ = os.environ if environ is None else environ

    def _site_value(self, key: str) -> float:
        override = _env_float(SITE_ENV_VARS[key], self._environ)
        if override is not None:
            return override
        value = self._data.get("site", {}).get(key, None)
        if value is None:
            return DEFAULT_SITE[key]
        return float(value)

    @property
    def site_latitude_deg(self) -> float:
        return self._site_value("latitude_deg")

    @property
    def site_longitude_deg(self) -> float:
        return self._site_value("longitude_deg")

    @property
    def site_elevation_m(self) -> float:
        return self._site_value("elevation_m")

    @property
    def site_temperature_c(self) -> float:
        return self._site_value("temperature_c")

    @property
    def site_pressure_hpa(self) -> float:
        return self._site_value("pressure_hpa")

    @property
    def site_name(self):
        return self._data.get("site", {}).get("name", None)

    @property
    def catalog_data_dir(self) -> Path:
        path = self._data.get("catalog", {}).get("data_dir", None)
        if not path:
            return DEFAULT_DATA_DIR
        return Path(path).expanduser()

    @property
    def catalog_star_file(self) -> Path | None:
        path = self._data.get("catalog", {}).get("star_file", None)
        if not path:
            return None
        return Path(path).expanduser()

    @property
    def catalog_dso_file(self) -> Path | None:
        path = self._data.get("catalog", {}).get("dso_file", None)
        if not path:
            return None
        return Path(path).expanduser()

    @property
    def ephemeris_backend(self) -> str:
        return self._data.get("ephemeris", {}).get("backend", "astropy")

    @property
    def hopping_fov_deg(self):
        return self._data.get("hopping", {}).get("fov_deg", None)

    @property
    def hopping_max_hop_magnitude(self) -> float:
        return self._data.get("hopping", {}).get("max_hop_magnitude", 8.0)

    @property
    def hopping_initial_search_radius_deg(self) -> float:
        return self._data.get("hopping", {}).get("initial_search_radius_deg", 20.0)

    @property
    def hopping_start_star_magnitude_threshold(self) -> float:
        return self._data.get("hopping", {}).get("start_star_magnitude_threshold", 3.5)

    @property
    def hopping_max_hops(self) -> int:
        return self._data.get("hopping", {}).get("max_hops", 20)


def load_config(path: Path | None = None) -> Config:
    explicit_path = path
    path = path or DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit_path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")
        # Return default config if default file missing
        return Config({})

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return Config(data)
