import math

import pytest

from backend.core.schedule_helpers import (
    ScheduleValidationError,
    export_interval,
    format_minutes,
    parse_time_to_minutes,
    resolve_history_limit,
    sanitize_active_schema_payload,
    sanitize_intervals_payload,
    sanitize_query_temperature,
    sanitize_schema_payload,
    sanitize_temperature,
)


def test_parse_time_to_minutes():
    assert parse_time_to_minutes("09:00") == 540
    assert parse_time_to_minutes("9:05") == 545
    assert parse_time_to_minutes("23:59") == 1439
    assert parse_time_to_minutes("24:00") is None
    assert parse_time_to_minutes("24:00", allow_end_of_day=True) == 1440
    for bad in ("", "9", "12:60", "25:00", "ab:cd", "12:5", None, 540, " 09:00 ", "09:00\n", "０９:００"):
        assert parse_time_to_minutes(bad) is None


def test_format_minutes():
    assert format_minutes(0) == "00:00"
    assert format_minutes(545) == "09:05"
    assert format_minutes(1440) == "24:00"


def test_sanitize_temperature_rejects_non_finite():
    assert sanitize_temperature(21, "t") == pytest.approx(21.0)
    for bad in (math.nan, math.inf, -math.inf, "21", None, True, 10**400):
        with pytest.raises(ScheduleValidationError):
            sanitize_temperature(bad, "t")


def test_sanitize_query_temperature():
    assert sanitize_query_temperature("21.3") == pytest.approx(21.3)
    for bad in (None, "", "warm", "nan", "inf"):
        with pytest.raises(ScheduleValidationError):
            sanitize_query_temperature(bad)


def test_sanitize_intervals_payload_converts_times():
    intervals = sanitize_intervals_payload([
        {"dayOfWeek": 1, "start": "09:00", "end": "17:00"},
        {"dayOfWeek": 5, "start": "22:00", "end": "24:00"},
    ])
    assert [(i.day_of_week, i.start_time_minutes, i.end_time_minutes) for i in intervals] == [
        (1, 540, 1020),
        (5, 1320, 1440),
    ]


@pytest.mark.parametrize(
    "interval",
    [
        {"dayOfWeek": 7, "start": "09:00", "end": "17:00"},
        {"dayOfWeek": "1", "start": "09:00", "end": "17:00"},
        {"dayOfWeek": 1, "start": "9am", "end": "17:00"},
        {"dayOfWeek": 1, "start": "17:00", "end": "09:00"},
        {"dayOfWeek": 1, "start": "09:00", "end": "09:00"},
        {"dayOfWeek": 1, "start": "24:00", "end": "24:00"},
        {"dayOfWeek": 1, "start": 540, "end": 1020},
        {"dayOfWeek": 1, "start": " 09:00", "end": "17:00"},
        "09:00-17:00",
    ],
)
def test_sanitize_intervals_payload_rejects_whole_batch(interval):
    batch = [{"dayOfWeek": 2, "start": "08:00", "end": "10:00"}, interval]
    with pytest.raises(ScheduleValidationError) as excinfo:
        sanitize_intervals_payload(batch)
    assert excinfo.value.field.startswith("intervals[1]")


def test_sanitize_intervals_payload_requires_list():
    assert sanitize_intervals_payload(None) == []
    with pytest.raises(ScheduleValidationError):
        sanitize_intervals_payload({"dayOfWeek": 1})


def test_sanitize_schema_payload_defaults_optional_fields():
    fields = sanitize_schema_payload({
        "name": "  Office  ",
        "inOfficeTemperature": 21,
        "outOfOfficeTemperature": 17.5,
    })
    assert fields == {
        "name": "Office",
        "description": None,
        "in_office_temperature": 21.0,
        "out_of_office_temperature": 17.5,
        "intervals": [],
    }


def test_sanitize_schema_payload_requires_name_and_temperatures():
    with pytest.raises(ScheduleValidationError) as excinfo:
        sanitize_schema_payload({"inOfficeTemperature": 21, "outOfOfficeTemperature": 17})
    assert excinfo.value.field == "name"
    with pytest.raises(ScheduleValidationError) as excinfo:
        sanitize_schema_payload({"name": "A", "inOfficeTemperature": 21})
    assert excinfo.value.field == "outOfOfficeTemperature"
    with pytest.raises(ScheduleValidationError):
        sanitize_schema_payload(["not", "an", "object"])


def test_sanitize_active_schema_payload():
    assert sanitize_active_schema_payload({"schemaId": None}) is None
    assert sanitize_active_schema_payload({}) is None
    assert sanitize_active_schema_payload({"schemaId": 3}) == 3
    for bad in (0, -1, 1.5, "3", True):
        with pytest.raises(ScheduleValidationError):
            sanitize_active_schema_payload({"schemaId": bad})


def test_resolve_history_limit():
    assert resolve_history_limit(None) == 50
    assert resolve_history_limit("10") == 10
    assert resolve_history_limit("0") == 50
    assert resolve_history_limit("-3") == 50
    assert resolve_history_limit("abc") == 50
    assert resolve_history_limit("nan") == 50
    assert resolve_history_limit("2000") == 500


def test_export_interval_round_trips_wire_format():
    interval = sanitize_intervals_payload([{"dayOfWeek": 1, "start": "09:00", "end": "17:30"}])[0]
    exported = export_interval(interval)
    assert exported["start"] == "09:00"
    assert exported["end"] == "17:30"
    assert exported["startTimeMinutes"] == 540
    assert exported["endTimeMinutes"] == 1050
