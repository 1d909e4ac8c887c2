import pytest

from graxil.formatting import format_duration, format_hashrate, format_number


@pytest.mark.parametrize(
    "rate,unit",
    [
        (0.0, " H/s"),
        (999.0, " H/s"),
        (1_000.0, " KH/s"),
        (999_999.0, " KH/s"),
        (1_000_000.0, " MH/s"),
        (385_000_000.0, " MH/s"),
        (1_000_000_000.0, " GH/s"),
        (5e12, " GH/s"),
    ],
)
def test_format_hashrate_units(rate, unit):
    assert format_hashrate(rate).endswith(unit)


def test_format_hashrate_has_two_decimals():
    for rate in (12.0, 12_345.0, 12_345_678.0, 12_345_678_901.0):
        number = format_hashrate(rate).split(" ")[0]
        assert len(number.split(".")[1]) == 2


def test_format_hashrate_megahash_example():
    assert format_hashrate(1_500_000.0) == "1.50 MH/s"


@pytest.mark.parametrize("secs", [0, 1, 59])
def test_format_duration_seconds(secs):
    assert format_duration(secs) == f"{secs}s"


def test_format_duration_truncates_fractions():
    assert format_duration(59.9) == format_duration(59)


@pytest.mark.parametrize("secs", [60, 119, 3599])
def test_format_duration_minutes(secs):
    result = format_duration(secs)
    assert result.endswith("m")
    assert int(result[:-1]) * 60 <= secs < (int(result[:-1]) + 1) * 60


def test_format_duration_hours():
    assert format_duration(5400) == "1.5h"
    assert format_duration(3600).endswith("h")


@pytest.mark.parametrize("num", [0, 7, 999])
def test_format_number_small_is_plain(num):
    assert format_number(num) == str(num)


@pytest.mark.parametrize(
    "num,suffix",
    [
        (1_000, "K"),
        (999_999, "K"),
        (1_000_000, "M"),
        (999_000_000, "M"),
        (1_000_000_000, "B"),
        (2**64 - 1, "B"),
    ],
)
def test_format_number_suffixes(num, suffix):
    result = format_number(num)
    assert result.endswith(suffix)
    assert len(result[:-1].split(".")[1]) == 1


def test_format_number_thousands_example():
    assert format_number(1_500) == "1.5K"