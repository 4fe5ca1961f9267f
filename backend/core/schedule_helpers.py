# -*- coding: utf-8 -*-
"""Helper utilities for validating incoming schedule payloads and exporting them."""
from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from backend.core.config import HISTORY
from backend.core.models import Interval
from backend.core.schedule import MINUTES_PER_DAY, ScheduleValidationError, validate_interval

_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)


def parse_time_to_minutes(value: Any, allow_end_of_day: bool = False) -> Optional[int]:
    """Parse ``"HH:MM"`` into minutes since midnight, ``None`` if malformed.

    ``"24:00"`` is only accepted with ``allow_end_of_day`` (interval ends).
    """
    if not isinstance(value, str):
        return None
    match = _TIME_RE.fullmatch(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if allow_end_of_day and hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def sanitize_temperature(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScheduleValidationError(f"{field} must be a finite number", field)
    try:
        value = float(value)
    except OverflowError as exc:
        raise ScheduleValidationError(f"{field} must be a finite number", field) from exc
    if not math.isfinite(value):
        raise ScheduleValidationError(f"{field} must be a finite number", field)
    return value


def sanitize_query_temperature(raw: Optional[str]) -> float:
    """Temperature sent as a query-string value by GET-only sensors."""
    try:
        value = float(raw) if raw is not None else math.nan
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise ScheduleValidationError("Invalid temperature", "temperature")
    return value


def sanitize_intervals_payload(intervals: Any) -> List[Interval]:
    if intervals is None:
        return []
    if not isinstance(intervals, list):
        raise ScheduleValidationError("intervals must be an array", "intervals")
    sanitized: List[Interval] = []
    for index, raw in enumerate(intervals):
        field = f"intervals[{index}]"
        if not isinstance(raw, dict):
            raise ScheduleValidationError("Each interval must be a JSON object", field)
        day = raw.get("dayOfWeek")
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise ScheduleValidationError(
                "dayOfWeek must be an integer between 0 (Sunday) and 6 (Saturday)", f"{field}.dayOfWeek"
            )
        start_raw, end_raw = raw.get("start"), raw.get("end")
        if not isinstance(start_raw, str) or not isinstance(end_raw, str):
            raise ScheduleValidationError("start and end must be strings in HH:MM format", field)
        start = parse_time_to_minutes(start_raw)
        end = parse_time_to_minutes(end_raw, allow_end_of_day=True)
        if start is None or end is None:
            raise ScheduleValidationError("start and end must be valid times in HH:MM format", field)
        sanitized.append(validate_interval(day, start, end, field=field))
    return sanitized


def sanitize_schema_payload(payload: Any) -> Dict[str, Any]:
    """Validate a create/update body and return keyword arguments for the store."""
    if not isinstance(payload, dict):
        raise ScheduleValidationError("Schema payload must be a JSON object")
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ScheduleValidationError("name is required", "name")
    description = payload.get("description")
    if description is not None and not isinstance(description, str):
        raise ScheduleValidationError("description must be a string or null", "description")
    return {
        "name": name.strip(),
        "description": description,
        "in_office_temperature": sanitize_temperature(payload.get("inOfficeTemperature"), "inOfficeTemperature"),
        "out_of_office_temperature": sanitize_temperature(
            payload.get("outOfOfficeTemperature"), "outOfOfficeTemperature"
        ),
        "intervals": sanitize_intervals_payload(payload.get("intervals")),
    }


def sanitize_active_schema_payload(payload: Any) -> Optional[int]:
    if not isinstance(payload, dict):
        raise ScheduleValidationError("Payload must be a JSON object")
    schema_id = payload.get("schemaId")
    if schema_id is None:
        return None
    if isinstance(schema_id, bool) or not isinstance(schema_id, int) or schema_id <= 0:
        raise ScheduleValidationError("schemaId must be a positive integer or null", "schemaId")
    return schema_id


def resolve_history_limit(raw: Optional[str]) -> int:
    default = int(HISTORY["default_limit"])
    maximum = int(HISTORY["max_limit"])
    try:
        limit = int(float(raw)) if raw is not None else default
    except (ValueError, OverflowError):
        return default
    if limit <= 0:
        return default
    return min(limit, maximum)


def export_interval(interval: Interval) -> Dict[str, Any]:
    return {
        "id": interval.id,
        "dayOfWeek": interval.day_of_week,
        "start": format_minutes(interval.start_time_minutes),
        "end": format_minutes(interval.end_time_minutes),
        "startTimeMinutes": interval.start_time_minutes,
        "endTimeMinutes": interval.end_time_minutes,
    }


__all__ = [
    "ScheduleValidationError",
    "parse_time_to_minutes",
    "format_minutes",
    "sanitize_temperature",
    "sanitize_query_temperature",
    "sanitize_intervals_payload",
    "sanitize_schema_payload",
    "sanitize_active_schema_payload",
    "resolve_history_limit",
    "export_interval",
]
