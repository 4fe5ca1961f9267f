from datetime import datetime

import pytest

import backend.core.store as store
from backend.core.models import EffectiveTarget, Interval, TemperatureReading
from backend.core.power import power_state, recommend_power_state
from backend.core.targets import resolve_effective_target

# 2024-01-08 was a Monday, 2024-01-07 a Sunday
MONDAY_10 = datetime(2024, 1, 8, 10, 0)
MONDAY_08 = datetime(2024, 1, 8, 8, 0)
SUNDAY_10 = datetime(2024, 1, 7, 10, 0)


@pytest.fixture
def office_schema(store_db):
    schema = store.create_schema(
        "Office",
        None,
        21.0,
        17.0,
        [Interval(day_of_week=1, start_time_minutes=540, end_time_minutes=1020)],
    )
    store.set_active_schema(schema.id)
    return schema


def test_default_target_when_no_schema_active(store_db):
    store.create_schema("Inactive", None, 25.0, 10.0)
    for now in (MONDAY_10, SUNDAY_10):
        assert resolve_effective_target(now) == EffectiveTarget(
            temperature=22.0, source="default", schema_id=None, mode=None
        )


def test_active_schema_in_office(office_schema):
    result = resolve_effective_target(MONDAY_10)
    assert result == EffectiveTarget(
        temperature=21.0, source="schema", schema_id=office_schema.id, mode="in-office"
    )


@pytest.mark.parametrize("now", [MONDAY_08, SUNDAY_10, datetime(2024, 1, 8, 17, 0)])
def test_active_schema_out_of_office(office_schema, now):
    result = resolve_effective_target(now)
    assert result.mode == "out-of-office"
    assert result.temperature == pytest.approx(17.0)
    assert result.schema_id == office_schema.id


def test_schema_replaces_default_even_when_default_changes(office_schema):
    store.set_base_target_temperature(30.0)
    assert resolve_effective_target(MONDAY_08).temperature == pytest.approx(17.0)
    store.set_active_schema(None)
    assert resolve_effective_target(MONDAY_08).temperature == pytest.approx(30.0)


def test_resolution_is_idempotent(office_schema):
    assert resolve_effective_target(MONDAY_10) == resolve_effective_target(MONDAY_10)


def test_deleting_active_schema_falls_back_to_default(office_schema):
    store.delete_schema(office_schema.id)
    assert resolve_effective_target(MONDAY_10).source == "default"


def test_power_recommendation_without_readings(office_schema):
    assert recommend_power_state(MONDAY_10) is None


def test_power_recommendation_thresholds(office_schema):
    store.log_temperature(20.0)
    assert recommend_power_state(MONDAY_10) == 1
    store.log_temperature(21.0)
    assert recommend_power_state(MONDAY_10) == 0
    # out of office target is 17, so 21 stays off
    assert recommend_power_state(MONDAY_08) == 0


def test_power_recommendation_uses_latest_reading(store_db):
    store.log_temperature(25.0)
    store.log_temperature(18.0)
    assert recommend_power_state(MONDAY_10) == 1


def test_power_state_uses_given_reading_and_target():
    target = EffectiveTarget(temperature=21.0, source="default")
    reading = TemperatureReading(timestamp=MONDAY_10, temperature=20.9)
    assert power_state(reading, target) == 1
    assert power_state(TemperatureReading(timestamp=MONDAY_10, temperature=21.0), target) == 0
    assert power_state(None, target) is None
