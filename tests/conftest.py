import datetime

import pytest

from skyhop.catalog.store import CatalogStore
from skyhop.catalog.types import EquatorialRecord
from skyhop.ephemeris.base import EphemerisBackend
from skyhop.ephemeris.types import BodyPosition, HorizontalPosition, ObserverLocation
from skyhop.errors import EphemerisError
from skyhop.resolver import ObjectResolver


def pytest_addoption(parser):
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run tests marked as integration",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--integration"):
        return

    for item in items:
        if "integration" in item.keywords:
            item.add_marker(
                pytest.mark.skip(
                    reason="need --integration option to run integration tests"
                )
            )


class FakeEphemeris(EphemerisBackend):
    """Altitude equals declination; azimuth is RA in degrees.

    Bodies come from ``positions``; anything else raises ``EphemerisError``.
    Every horizontal lookup is recorded in ``calls``.
    """

    name = "fake"

    def __init__(self, positions=None):
        self.positions = dict(positions or {})
        self.calls: list[tuple[float, float]] = []

    def equatorial_position(self, body, instant):
        try:
            return self.positions[body.strip().lower()]
        except KeyError:
            raise EphemerisError(f"no position for {body}") from None

    def horizontal_position(self, ra_hours, dec_deg, observer, instant):
        self.calls.append((ra_hours, dec_deg))
        return HorizontalPosition(altitude_deg=dec_deg, azimuth_deg=(ra_hours * 15.0) % 360.0)


def star(name, ra_hours, dec_deg, magnitude, **kwargs):
    return EquatorialRecord(
        ra_hours=ra_hours,
        dec_deg=dec_deg,
        name=name,
        magnitude=magnitude,
        object_type="Star",
        **kwargs,
    )


def dso(name, ra_hours, dec_deg, magnitude=None, **kwargs):
    return EquatorialRecord(ra_hours=ra_hours, dec_deg=dec_deg, name=name, magnitude=magnitude, **kwargs)


@pytest.fixture
def instant():
    return datetime.datetime(2024, 7, 1, 6, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def observer():
    return ObserverLocation(latitude_deg=49.2827, longitude_deg=-123.1207, elevation_m=30.0)


@pytest.fixture
def fake_ephemeris():
    return FakeEphemeris(
        {
            "sun": BodyPosition(ra_hours=6.6, dec_deg=23.1, distance_au=1.0167),
            "moon": BodyPosition(ra_hours=2.0, dec_deg=12.0, distance_au=0.0026),
            "jupiter": BodyPosition(ra_hours=4.1, dec_deg=20.5, distance_au=5.6),
        }
    )


@pytest.fixture
def make_star():
    return star


@pytest.fixture
def make_dso():
    return dso


@pytest.fixture
def sample_store():
    return CatalogStore.from_records(
        stars=[
            star("Vega", 18.6156, 38.7837, 0.03, constellation="Lyr"),
            star("Sheliak", 18.8347, 33.3627, 3.52, constellation="Lyr"),
            star("Polaris", 2.5302, 89.2641, 1.98, constellation="UMi", designation="Alpha UMi"),
        ],
        dsos=[
            dso(
                "NGC224",
                0.7123,
                41.2692,
                3.4,
                common_name="Andromeda Galaxy",
                object_type="Galaxy",
                constellation="And",
                aliases=("Andromeda Galaxy",),
            ),
            dso(
                "M31",
                0.7123,
                41.2692,
                3.4,
                common_name="Andromeda Galaxy",
                object_type="Galaxy",
                constellation="And",
                aliases=("Andromeda Galaxy",),
            ),
            dso("IC434", 5.6833, -2.45, 7.3, object_type="Nebula", constellation="Ori"),
            dso("Vega", 1.0, 1.0, 9.0, object_type="Decoy"),
        ],
    )


@pytest.fixture
def resolver(sample_store, fake_ephemeris):
    return ObjectResolver(sample_store, fake_ephemeris)
