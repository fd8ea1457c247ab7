from unittest.mock import patch

import pytest

from skyhop.ephemeris.types import AU_KM, RiseSetTransit
from skyhop.errors import ObjectNotFound
from skyhop.services.details import describe_object, rise_set_note, visibility_label


def test_visibility_label():
    assert visibility_label(45.0) == "Excellent visibility"
    assert visibility_label(30.0) == "Above horizon"
    assert visibility_label(0.5) == "Above horizon"
    assert visibility_label(0.0) == "Below horizon (not visible)"
    assert visibility_label(-20.0) == "Below horizon (not visible)"


def test_rise_set_note():
    assert rise_set_note(RiseSetTransit(circumpolar=True, always_above=True)).endswith(
        "remains above the horizon from this location."
    )
    assert "remains below" in rise_set_note(RiseSetTransit(circumpolar=True, always_below=True))
    assert "does not rise" in rise_set_note(RiseSetTransit(transit_altitude_deg=-5.0))
    assert rise_set_note(RiseSetTransit(transit_altitude_deg=5.0)).startswith("Rise and set times are not available")


def test_describe_star(resolver, fake_ephemeris, observer, instant):
    details = describe_object("vega", resolver, fake_ephemeris, observer, instant)
    assert details.query == "vega"
    assert details.name == "Vega"
    assert details.altitude_deg == pytest.approx(38.7837)
    assert details.above_horizon
    assert details.visibility == "Excellent visibility"
    assert details.constellation == "Lyr"
    assert details.magnitude == pytest.approx(0.03)
    assert details.observed_utc == instant
    assert details.distance_au is None
    assert details.illumination is None
    assert details.rise_set is not None


def test_describe_below_horizon(resolver, fake_ephemeris, observer, instant):
    details = describe_object("IC434", resolver, fake_ephemeris, observer, instant)
    assert not details.above_horizon
    assert details.visibility == "Below horizon (not visible)"


def test_describe_dso_by_alias(resolver, fake_ephemeris, observer, instant):
    details = describe_object("Andromeda Galaxy", resolver, fake_ephemeris, observer, instant)
    assert details.name == "NGC224"
    assert details.common_name == "Andromeda Galaxy"
    assert details.object_type == "Galaxy"


def test_describe_planet_adds_distance_and_phase(resolver, fake_ephemeris, observer, instant):
    details = describe_object("Jupiter", resolver, fake_ephemeris, observer, instant)
    assert details.name == "Jupiter"
    assert details.distance_au == pytest.approx(5.6)
    assert details.distance_km == pytest.approx(5.6 * AU_KM)
    assert details.illumination is not None
    assert 0.0 <= details.illumination.fraction <= 1.0
    assert details.moon_phases is None


def test_describe_sun_has_no_illumination(resolver, fake_ephemeris, observer, instant):
    details = describe_object("Sun", resolver, fake_ephemeris, observer, instant)
    assert details.illumination is None
    assert details.distance_au == pytest.approx(1.0167)


def test_describe_unknown(resolver, fake_ephemeris, observer, instant):
    with pytest.raises(ObjectNotFound):
        describe_object("Nothing", resolver, fake_ephemeris, observer, instant)


@pytest.mark.parametrize("query,body", [("Jupiter", "jupiter"), ("Vega", None), ("M31", None)])
def test_rise_set_follows_solar_system_bodies(resolver, fake_ephemeris, observer, instant, query, body):
    with patch.object(fake_ephemeris, "rise_set_transit", wraps=fake_ephemeris.rise_set_transit) as rise_set:
        describe_object(query, resolver, fake_ephemeris, observer, instant)
    assert rise_set.call_args.kwargs["body"] == body
