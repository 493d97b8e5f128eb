from datetime import datetime, timedelta, timezone

import pytest

from keptnkit.timeutils import (
    GetStartEndTimeParams,
    get_keptn_timestamp,
    get_start_end_time,
    parse_duration,
)

ALT_FORMAT = "%Y-%m-%dT%H:%M:%S"
TOLERANCE = timedelta(minutes=1)


def _now():
    return datetime.now(timezone.utc)


def _round_minute(value):
    base = value.replace(second=0, microsecond=0)
    if value - base >= timedelta(seconds=30):
        return base + timedelta(minutes=1)
    return base


def test_keptn_timestamp_format():
    t0 = datetime(2021, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
    assert get_keptn_timestamp(t0) == "2021-01-01T00:00:00.000Z"
    assert get_keptn_timestamp(t0 + timedelta(milliseconds=5)) == "2021-01-01T00:00:00.005Z"


def test_parse_duration_values():
    assert parse_duration("10m") == timedelta(minutes=10)
    assert parse_duration("5m") == timedelta(minutes=5)
    assert parse_duration("1h30m") == timedelta(hours=1, minutes=30)
    assert parse_duration("1.5s") == timedelta(seconds=1.5)
    assert parse_duration("-2h") == timedelta(hours=-2)
    assert parse_duration("0") == timedelta(0)


@pytest.mark.parametrize("text", ["", "xyz", "xym", "10", "5q", "."])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_start_and_end_date_provided():
    now = _now()
    params = GetStartEndTimeParams(
        start_date=get_keptn_timestamp(_round_minute(now)),
        end_date=get_keptn_timestamp(_round_minute(now + timedelta(minutes=5))),
    )
    start, end = get_start_end_time(params)
    assert abs(start - _round_minute(now)) <= TOLERANCE
    assert abs(end - _round_minute(now + timedelta(minutes=5))) <= TOLERANCE
    assert end - start == timedelta(minutes=5)


def test_start_and_end_date_different_format():
    now = _now()
    params = GetStartEndTimeParams(
        start_date=_round_minute(now).strftime(ALT_FORMAT),
        end_date=_round_minute(now + timedelta(minutes=5)).strftime(ALT_FORMAT),
        time_format=ALT_FORMAT,
    )
    start, end = get_start_end_time(params)
    assert abs(start - _round_minute(now)) <= TOLERANCE
    assert abs(end - _round_minute(now + timedelta(minutes=5))) <= TOLERANCE
    assert end - start == timedelta(minutes=5)


def test_start_and_timeframe():
    now = _now()
    params = GetStartEndTimeParams(start_date=get_keptn_timestamp(_round_minute(now)), timeframe="10m")
    start, end = get_start_end_time(params)
    assert abs(start - _round_minute(now)) <= TOLERANCE
    assert abs(end - _round_minute(now + timedelta(minutes=10))) <= TOLERANCE
    assert end - start == timedelta(minutes=10)


def test_only_timeframe():
    now = _now()
    start, end = get_start_end_time(GetStartEndTimeParams(timeframe="10m"))
    assert abs(start - _round_minute(now - timedelta(minutes=10))) <= TOLERANCE
    assert abs(end - _round_minute(now)) <= TOLERANCE
    assert abs((end - start) - timedelta(minutes=10)) <= timedelta(seconds=1)


def _error_cases():
    now = _now()
    later = get_keptn_timestamp(now + timedelta(minutes=1))
    current = get_keptn_timestamp(now)
    return [
        GetStartEndTimeParams(start_date=later, end_date=current),
        GetStartEndTimeParams(start_date=later, end_date=current, timeframe="5m"),
        GetStartEndTimeParams(start_date=later),
        GetStartEndTimeParams(end_date=later),
        GetStartEndTimeParams(timeframe="xyz"),
        GetStartEndTimeParams(timeframe="xym"),
        GetStartEndTimeParams(start_date="abc", timeframe="5m"),
        GetStartEndTimeParams(start_date=later, end_date="abc"),
    ]


@pytest.mark.parametrize("params", _error_cases())
def test_get_start_end_time_errors(params):
    with pytest.raises(ValueError):
        get_start_end_time(params)


def test_error_messages():
    with pytest.raises(ValueError, match="no timeframe or end date provided"):
        GetStartEndTimeParams(start_date="x").validate()
    with pytest.raises(ValueError, match="mutually exclusive"):
        GetStartEndTimeParams(start_date="x", end_date="y", timeframe="5m").validate()
    with pytest.raises(ValueError, match="start date is required"):
        GetStartEndTimeParams(end_date="y").validate()
    with pytest.raises(ValueError, match="could not parse provided timeframe"):
        get_start_end_time(GetStartEndTimeParams(timeframe="xyz"))
    with pytest.raises(ValueError, match="at least 1 minute"):
        now = get_keptn_timestamp(_now())
        get_start_end_time(GetStartEndTimeParams(start_date=now, end_date=now))