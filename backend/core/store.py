# -*- coding: utf-8 -*-
"""Persistence of the default target, temperature readings and schemas.

Every mutating call runs inside a single session transaction, so readers never
see two active schemas or a schema caught between deleting and re-inserting its
intervals.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from backend.core.config import CLIMATE
from backend.core.db import ClimateSchema, SchemaInterval, SessionLocal, Setting, TemperatureLog
from backend.core.models import Interval, Schema, TemperatureReading
from backend.core.schedule import ScheduleValidationError, validate_interval

logger = logging.getLogger(__name__)

TARGET_TEMPERATURE_KEY = "target_temperature"


class SchemaNotFoundError(LookupError):
    """Raised when a schema id does not exist."""

    def __init__(self, schema_id: int):
        super().__init__(f"Schema {schema_id} not found")
        self.schema_id = schema_id


class SchemaNameConflictError(ValueError):
    """Raised when a schema name is already taken (case-insensitive)."""

    def __init__(self, name: str):
        super().__init__(f"Schema with name '{name}' already exists")
        self.name = name


def _finite(value, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScheduleValidationError(f"{field} must be a finite number", field)
    try:
        value = float(value)
    except OverflowError as exc:
        # ints beyond the float range
        raise ScheduleValidationError(f"{field} must be a finite number", field) from exc
    if not math.isfinite(value):
        raise ScheduleValidationError(f"{field} must be a finite number", field)
    return value


def _interval_from_row(row: SchemaInterval) -> Interval:
    return Interval(
        id=row.id,
        day_of_week=row.day_of_week,
        start_time_minutes=row.start_time_minutes,
        end_time_minutes=row.end_time_minutes,
    )


def _schema_from_row(row: ClimateSchema, with_intervals: bool = True) -> Schema:
    return Schema(
        id=row.id,
        name=row.name,
        description=row.description,
        in_office_temperature=row.in_office_temp,
        out_of_office_temperature=row.out_of_office_temp,
        is_active=bool(row.is_active),
        intervals=[_interval_from_row(i) for i in row.intervals] if with_intervals else [],
    )


def _check_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    # validate the whole batch before anything is written
    checked: List[Interval] = []
    for index, interval in enumerate(intervals):
        checked.append(
            validate_interval(
                interval.day_of_week,
                interval.start_time_minutes,
                interval.end_time_minutes,
                field=f"intervals[{index}]",
            )
        )
    return checked


def _check_schema_fields(name, in_office_temperature, out_of_office_temperature):
    if not isinstance(name, str) or not name.strip():
        raise ScheduleValidationError("name is required", "name")
    return (
        name.strip(),
        _finite(in_office_temperature, "inOfficeTemperature"),
        _finite(out_of_office_temperature, "outOfOfficeTemperature"),
    )


def _ensure_name_free(session: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = session.query(ClimateSchema.id).filter(func.lower(ClimateSchema.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(ClimateSchema.id != exclude_id)
    if query.first() is not None:
        raise SchemaNameConflictError(name)


def _commit(session: Session, name: str) -> None:
    # the unique index still guards against a concurrent writer taking the name
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if "name" in str(exc.orig).lower():
            raise SchemaNameConflictError(name) from exc
        raise


# ---- default target ----

def get_base_target_temperature() -> float:
    with SessionLocal() as session:
        row = session.get(Setting, TARGET_TEMPERATURE_KEY)
        if row is None or row.value is None:
            return float(CLIMATE["default_target_temp_c"])
        return float(row.value)


def set_base_target_temperature(value: float) -> None:
    value = _finite(value, "targetTemperature")
    with SessionLocal() as session:
        session.merge(Setting(key=TARGET_TEMPERATURE_KEY, value=repr(value)))
        session.commit()
    logger.info("Default target temperature set to %.2f", value)


# ---- temperature log ----

def log_temperature(value: float) -> TemperatureReading:
    value = _finite(value, "temperature")
    with SessionLocal() as session:
        row = TemperatureLog(temperature=value)
        session.add(row)
        session.commit()
        return TemperatureReading(timestamp=row.ts, temperature=row.temperature)


def get_recent_temperatures(limit: int = 50) -> List[TemperatureReading]:
    with SessionLocal() as session:
        rows = (
            session.query(TemperatureLog)
            .order_by(TemperatureLog.ts.desc(), TemperatureLog.id.desc())
            .limit(limit)
            .all()
        )
        return [TemperatureReading(timestamp=row.ts, temperature=row.temperature) for row in rows]


def get_latest_temperature() -> Optional[TemperatureReading]:
    recent = get_recent_temperatures(1)
    return recent[0] if recent else None


# ---- schemas ----

def list_schemas() -> List[Schema]:
    with SessionLocal() as session:
        rows = session.query(ClimateSchema).order_by(func.lower(ClimateSchema.name)).all()
        return [_schema_from_row(row, with_intervals=False) for row in rows]


def get_schema_by_id(schema_id: int) -> Optional[Schema]:
    with SessionLocal() as session:
        row = session.get(ClimateSchema, schema_id)
        return _schema_from_row(row) if row is not None else None


def get_active_schema() -> Optional[Schema]:
    with SessionLocal() as session:
        row = session.query(ClimateSchema).filter(ClimateSchema.is_active.is_(True)).first()
        return _schema_from_row(row) if row is not None else None


def create_schema(
    name: str,
    description: Optional[str],
    in_office_temperature: float,
    out_of_office_temperature: float,
    intervals: Sequence[Interval] = (),
) -> Schema:
    name, in_temp, out_temp = _check_schema_fields(name, in_office_temperature, out_of_office_temperature)
    checked = _check_intervals(intervals)
    with SessionLocal() as session:
        _ensure_name_free(session, name)
        row = ClimateSchema(
            name=name,
            description=description,
            in_office_temp=in_temp,
            out_of_office_temp=out_temp,
            is_active=False,
        )
        row.intervals = [
            SchemaInterval(
                day_of_week=i.day_of_week,
                start_time_minutes=i.start_time_minutes,
                end_time_minutes=i.end_time_minutes,
            )
            for i in checked
        ]
        session.add(row)
        _commit(session, name)
        session.refresh(row)
        logger.info("Created schema %s (%s) with %d interval(s)", row.id, name, len(checked))
        return _schema_from_row(row)


def update_schema(
    schema_id: int,
    name: str,
    description: Optional[str],
    in_office_temperature: float,
    out_of_office_temperature: float,
    intervals: Sequence[Interval] = (),
) -> Optional[Schema]:
    name, in_temp, out_temp = _check_schema_fields(name, in_office_temperature, out_of_office_temperature)
    checked = _check_intervals(intervals)
    with SessionLocal() as session:
        row = session.get(ClimateSchema, schema_id)
        if row is None:
            return None
        _ensure_name_free(session, name, exclude_id=schema_id)
        try:
            row.name = name
            row.description = description
            row.in_office_temp = in_temp
            row.out_of_office_temp = out_temp
            # delete-then-reinsert, committed together with the field changes
            row.intervals.clear()
            session.flush()
            row.intervals.extend(
                SchemaInterval(
                    day_of_week=i.day_of_week,
                    start_time_minutes=i.start_time_minutes,
                    end_time_minutes=i.end_time_minutes,
                )
                for i in checked
            )
            _commit(session, name)
        except StaleDataError:
            # row deleted by another session after it was loaded
            session.rollback()
            logger.info("Schema %s disappeared during update", schema_id)
            return None
        session.refresh(row)
        logger.info("Updated schema %s (%s) with %d interval(s)", schema_id, name, len(checked))
        return _schema_from_row(row)


def delete_schema(schema_id: int) -> bool:
    with SessionLocal() as session:
        row = session.get(ClimateSchema, schema_id)
        if row is None:
            return False
        was_active = bool(row.is_active)
        session.delete(row)
        session.commit()
    if was_active:
        logger.info("Deleted active schema %s; falling back to default target", schema_id)
    else:
        logger.info("Deleted schema %s", schema_id)
    return True


def set_active_schema(schema_id: Optional[int]) -> None:
    """Make ``schema_id`` the only active schema, or clear activation with ``None``.

    Raises ``SchemaNotFoundError`` for an unknown id; the previous activation is
    left untouched in that case.
    """
    with SessionLocal() as session:
        if schema_id is not None and session.get(ClimateSchema, schema_id) is None:
            raise SchemaNotFoundError(schema_id)
        session.query(ClimateSchema).filter(ClimateSchema.is_active.is_(True)).update(
            {ClimateSchema.is_active: False}, synchronize_session=False
        )
        if schema_id is not None:
            updated = session.query(ClimateSchema).filter(ClimateSchema.id == schema_id).update(
                {ClimateSchema.is_active: True}, synchronize_session=False
            )
            if updated != 1:
                # deleted between the lookup and the update
                session.rollback()
                raise SchemaNotFoundError(schema_id)
        session.commit()
    logger.info("Active schema set to %s", schema_id)


__all__ = [
    "SchemaNotFoundError",
    "SchemaNameConflictError",
    "get_base_target_temperature",
    "set_base_target_temperature",
    "log_temperature",
    "get_recent_temperatures",
    "get_latest_temperature",
    "list_schemas",
    "get_schema_by_id",
    "get_active_schema",
    "create_schema",
    "update_schema",
    "delete_schema",
    "set_active_schema",
]
