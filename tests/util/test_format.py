from skyhop.util.format import (
    deg_to_dms,
    format_degrees,
    format_hours,
    hours_to_hms,
)


def test_hours_to_hms_zero():
    assert hours_to_hms(0.0) == "00h00m00.0s"


def test_hours_to_hms_vega():
    assert hours_to_hms(18.6156) == "18h36m56.2s"


def test_hours_to_hms_wrap():
    # 24h wraps to 00
    assert hours_to_hms(24.0) == "00h00m00.0s"


def test_hours_to_hms_rounding_carry():
    # 23:59:59.99 with 1 decimal should round to 00h00m00.0s
    hours = ((24 * 3600) - 0.04) / 3600.0
    assert hours_to_hms(hours, precision=1) == "00h00m00.0s"


def test_hours_to_hms_no_decimals():
    assert hours_to_hms(1.5, precision=0) == "01h30m00s"


def test_deg_to_dms_positive():
    assert deg_to_dms(38.7837) == "+38°47'01\""


def test_deg_to_dms_negative():
    assert deg_to_dms(-10.5) == "-10°30'00\""


def test_deg_to_dms_precision():
    assert deg_to_dms(10.0, precision=1) == "+10°00'00.0\""


def test_format_hours_and_degrees():
    assert format_hours(1.5) == "1.50h"
    assert format_degrees(12.3456) == "12.35°"
    assert format_degrees(-2.0, 1) == "-2.0°"

