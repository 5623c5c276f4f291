"""Tests for weather_data module."""
import time
from weather_data import Snapshot, WeatherResult, ResultSource


def make_snapshot(observed_at):
    return Snapshot(temperature="292.550000", humidity="89", wind_speed="3.130000", observed_at=observed_at)


def test_snapshot_age_is_now_minus_observed():
    assert make_snapshot(1000).age_seconds(now=1300) == 300


def test_snapshot_age_never_negative():
    # clock skew between the provider stamp and the reader
    assert make_snapshot(1000).age_seconds(now=900) == 0


def test_snapshot_is_stale():
    """Test is_stale() method."""
    old = make_snapshot(int(time.time()) - 3600)

    assert old.is_stale(max_age_seconds=900) is True
    assert old.is_stale(max_age_seconds=7200) is False


def test_result_from_snapshot():
    result = WeatherResult.from_snapshot(make_snapshot(1000), now=1042, source=ResultSource.CACHED)

    assert result.temperature == "292.550000"
    assert result.humidity == "89"
    assert result.wind_speed == "3.130000"
    assert result.data_age_seconds == "42"
    assert result.error == ""
    assert result.ok is True


def test_failure_has_empty_fields():
    result = WeatherResult.failure("No data for zip 10001", ResultSource.NO_DATA)

    assert result.ok is False
    assert (result.temperature, result.humidity, result.wind_speed, result.data_age_seconds) == ("", "", "", "")


def test_to_dict_wire_shape():
    result = WeatherResult.from_snapshot(make_snapshot(1000), now=1000, source=ResultSource.FRESH)

    assert result.to_dict() == {
        "temperature": "292.550000",
        "humidity": "89",
        "windSpeed": "3.130000",
        "dataAgeSeconds": "0",
        "error": "",
        "source": "fresh",
    }
