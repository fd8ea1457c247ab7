import datetime

import pytest

from skyhop.services.stream import ephemeris_stream


def test_stream_samples_every_cadence(resolver, fake_ephemeris, observer, instant):
    stream = ephemeris_stream(
        ["Vega", "M31"],
        resolver,
        fake_ephemeris,
        observer,
        start=instant,
        cadence_min=15,
        duration_min=60,
    )
    assert len(stream.samples) == 2 * 5
    assert stream.samples[0].time_utc == instant
    assert stream.samples[-1].time_utc == instant + datetime.timedelta(minutes=60)
    assert [s.object for s in stream.samples[:2]] == ["M31", "Vega"]
    assert stream.suggested_poll_interval_s == 900
    assert stream.unresolved == []


def test_stream_drops_samples_below_min_altitude(resolver, fake_ephemeris, observer, instant):
    stream = ephemeris_stream(
        ["Vega", "IC434"],
        resolver,
        fake_ephemeris,
        observer,
        start=instant,
        cadence_min=30,
        duration_min=30,
        min_altitude_deg=0,
    )
    assert {s.object for s in stream.samples} == {"Vega"}

    stream = ephemeris_stream(
        ["Vega"],
        resolver,
        fake_ephemeris,
        observer,
        start=instant,
        cadence_min=30,
        duration_min=30,
        min_altitude_deg=40,
    )
    assert stream.samples == []


def test_stream_records_unresolved_once(resolver, fake_ephemeris, observer, instant):
    stream = ephemeris_stream(
        ["Nothing", "Vega"],
        resolver,
        fake_ephemeris,
        observer,
        start=instant,
        cadence_min=10,
        duration_min=30,
    )
    assert stream.unresolved == ["Nothing"]
    assert all(s.object == "Vega" for s in stream.samples)


def test_stream_sample_fields(resolver, fake_ephemeris, observer, instant):
    stream = ephemeris_stream(["Sheliak"], resolver, fake_ephemeris, observer, start=instant, cadence_min=5, duration_min=5)
    sample = stream.samples[0]
    assert sample.altitude_deg == pytest.approx(33.36, abs=0.01)
    assert sample.above_horizon
    assert sample.magnitude == pytest.approx(3.52)
    assert sample.constellation == "Lyr"
    assert sample.object_type == "Star"


@pytest.mark.parametrize("cadence,duration", [(0, 60), (-5, 60), (5, 0)])
def test_stream_rejects_non_positive_window(resolver, fake_ephemeris, observer, cadence, duration):
    with pytest.raises(ValueError):
        ephemeris_stream(["Vega"], resolver, fake_ephemeris, observer, cadence_min=cadence, duration_min=duration)
