import datetime

import pytest

from skyhop.config import Config
from skyhop.coords import separation_deg
from skyhop.ephemeris import (
    AnalyticEphemeris,
    get_ephemeris_backend,
    observer_from_config,
)
from skyhop.ephemeris.base import as_utc, ecliptic_longitude_deg
from skyhop.errors import EphemerisError


def test_factory_analytic():
    config = Config({"ephemeris": {"backend": "analytic"}}, environ={})
    assert isinstance(get_ephemeris_backend(config), AnalyticEphemeris)


def test_factory_astropy_is_default():
    backend = get_ephemeris_backend(Config({}, environ={}))
    assert backend.name == "astropy"


def test_factory_unknown_backend():
    config = Config({"ephemeris": {"backend": "jpl"}}, environ={})
    with pytest.raises(ValueError, match="Unknown ephemeris backend"):
        get_ephemeris_backend(config)


def test_observer_from_config():
    config = Config(
        {"site": {"latitude_deg": -34.93, "longitude_deg": 138.60, "elevation_m": 50, "name": "Adelaide"}},
        environ={},
    )
    observer = observer_from_config(config)
    assert observer.latitude_deg == -34.93
    assert observer.longitude_deg == 138.60
    assert observer.elevation_m == 50.0
    assert observer.pressure_hpa == 1013.25
    assert observer.name == "Adelaide"


def test_as_utc():
    naive = datetime.datetime(2024, 7, 1, 6, 0)
    assert as_utc(naive).tzinfo == datetime.timezone.utc
    plus_ten = datetime.timezone(datetime.timedelta(hours=10))
    local = datetime.datetime(2024, 7, 1, 16, 0, tzinfo=plus_ten)
    assert as_utc(local) == datetime.datetime(2024, 7, 1, 6, 0, tzinfo=datetime.timezone.utc)


def test_ecliptic_longitude_of_equinox_and_solstice():
    assert ecliptic_longitude_deg(0.0, 0.0) == pytest.approx(0.0)
    assert ecliptic_longitude_deg(6.0, 23.4393) == pytest.approx(90.0, abs=1e-6)


@pytest.mark.integration
def test_astropy_sun_agrees_with_analytic(instant):
    astropy_backend = get_ephemeris_backend(Config({}, environ={}))
    analytic = AnalyticEphemeris()
    a = astropy_backend.equatorial_position("sun", instant)
    b = analytic.equatorial_position("sun", instant)
    assert separation_deg(a.ra_hours, a.dec_deg, b.ra_hours, b.dec_deg) < 1.0
    assert a.distance_au == pytest.approx(b.distance_au, abs=0.001)


@pytest.mark.integration
def test_astropy_polaris_altitude(observer, instant):
    backend = get_ephemeris_backend(Config({}, environ={}))
    horizontal = backend.horizontal_position(2.5302, 89.2641, observer, instant)
    assert horizontal.altitude_deg == pytest.approx(observer.latitude_deg, abs=1.0)


@pytest.mark.integration
def test_astropy_rejects_earth(instant):
    backend = get_ephemeris_backend(Config({}, environ={}))
    with pytest.raises(EphemerisError):
        backend.equatorial_position("earth", instant)
