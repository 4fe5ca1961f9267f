# -*- coding: utf-8 -*-
# backend/routers/api.py - REST API for the dashboard, sensors and the power socket
import logging
from typing import Optional

from fastapi import APIRouter, Body, HTTPException, Query, Response

from backend.core import store
from backend.core.power import power_state
from backend.core.schedule_helpers import (
    ScheduleValidationError,
    resolve_history_limit,
    sanitize_active_schema_payload,
    sanitize_query_temperature,
    sanitize_schema_payload,
    sanitize_temperature,
)
from backend.core.schemas import (
    ActiveSchemaResponse,
    BaseTargetDTO,
    HistoryResponse,
    PowerRecommendationDTO,
    ReadingDTO,
    SchemaDTO,
    SchemaListResponse,
    SchemaResponse,
    SchemaSummaryDTO,
    StatusDTO,
    TargetDTO,
    as_utc,
)
from backend.core.targets import resolve_effective_target

logger = logging.getLogger(__name__)

router = APIRouter()


def _bad_request(exc: ScheduleValidationError) -> HTTPException:
    logger.warning("Rejected payload (%s): %s", exc.field or "body", exc)
    return HTTPException(status_code=400, detail=str(exc))


_MAX_ROW_ID = 2**63 - 1


def _parse_id(raw: str) -> int:
    # ASCII digits only; "abc", "-1", "0" and "１" are all 400
    digits = raw.lstrip("0")
    if not (raw.isascii() and raw.isdigit()) or not digits:
        raise HTTPException(status_code=400, detail="Invalid id")
    # SQLite rowids are signed 64-bit, anything larger cannot exist
    if len(digits) > 19 or int(digits) > _MAX_ROW_ID:
        raise HTTPException(status_code=404, detail="Schema not found")
    return int(digits)


def _field(payload, key):
    return payload.get(key) if isinstance(payload, dict) else None


# ---- temperature ----

@router.get("/temperature/target", response_model=TargetDTO)
def get_target():
    return TargetDTO.from_effective(resolve_effective_target())


@router.get("/temperature/status", response_model=StatusDTO)
def get_status():
    effective = resolve_effective_target()
    latest = store.get_latest_temperature()
    return StatusDTO(
        target_temperature=effective.temperature,
        target_source=effective.source,
        target_schema_id=effective.schema_id,
        target_mode=effective.mode,
        current_temperature=latest.temperature if latest else None,
        current_temperature_timestamp=as_utc(latest.timestamp) if latest else None,
    )


@router.post("/temperature/target", response_model=BaseTargetDTO)
def set_target(payload=Body(...)):
    try:
        value = sanitize_temperature(_field(payload, "targetTemperature"), "targetTemperature")
    except ScheduleValidationError as exc:
        raise _bad_request(exc)
    store.set_base_target_temperature(value)
    return BaseTargetDTO(target_temperature=value)


@router.post("/temperature/current")
def post_current(payload=Body(...)):
    try:
        value = sanitize_temperature(_field(payload, "temperature"), "temperature")
    except ScheduleValidationError as exc:
        raise _bad_request(exc)
    store.log_temperature(value)
    return {"ok": True}


@router.get("/temperature/current")
def get_current(temperature: Optional[str] = Query(None)):
    # for sensors that can only send GET requests: ?temperature=21.3
    try:
        value = sanitize_query_temperature(temperature)
    except ScheduleValidationError as exc:
        raise _bad_request(exc)
    store.log_temperature(value)
    return {"ok": True}


@router.get("/temperature/history", response_model=HistoryResponse)
def get_history(limit: Optional[str] = Query(None)):
    rows = store.get_recent_temperatures(resolve_history_limit(limit))
    return HistoryResponse(history=[ReadingDTO.from_reading(row) for row in rows])


@router.get("/power-socket/recommendation", response_model=PowerRecommendationDTO)
def get_power_recommendation():
    # one reading and one resolved target, so state agrees with both reported values
    latest = store.get_latest_temperature()
    effective = resolve_effective_target()
    return PowerRecommendationDTO(
        state=power_state(latest, effective),
        target_temperature=effective.temperature,
        current_temperature=latest.temperature if latest else None,
    )


# ---- schemas ----

@router.get("/schemas", response_model=SchemaListResponse)
def list_schemas():
    return SchemaListResponse(schemas=[SchemaSummaryDTO.from_schema(s) for s in store.list_schemas()])


@router.get("/schemas/{schema_id}", response_model=SchemaResponse)
def get_schema(schema_id: str):
    schema_id = _parse_id(schema_id)
    schema = store.get_schema_by_id(schema_id)
    if schema is None:
        raise HTTPException(status_code=404, detail="Schema not found")
    return SchemaResponse(schema_=SchemaDTO.from_schema(schema))


@router.post("/schemas", response_model=SchemaResponse, status_code=201)
def create_schema(payload=Body(...)):
    try:
        fields = sanitize_schema_payload(payload)
        schema = store.create_schema(**fields)
    except ScheduleValidationError as exc:
        raise _bad_request(exc)
    except store.SchemaNameConflictError:
        raise HTTPException(status_code=409, detail="Schema with this name already exists")
    return SchemaResponse(schema_=SchemaDTO.from_schema(schema))


@router.put("/schemas/{schema_id}", response_model=SchemaResponse)
def update_schema(schema_id: str, payload=Body(...)):
    schema_id = _parse_id(schema_id)
    try:
        fields = sanitize_schema_payload(payload)
        schema = store.update_schema(schema_id, **fields)
    except ScheduleValidationError as exc:
        raise _bad_request(exc)
    except store.SchemaNameConflictError:
        raise HTTPException(status_code=409, detail="Schema with this name already exists")
    if schema is None:
        raise HTTPException(status_code=404, detail="Schema not found")
    return SchemaResponse(schema_=SchemaDTO.from_schema(schema))


@router.delete("/schemas/{schema_id}", status_code=204)
def delete_schema(schema_id: str):
    schema_id = _parse_id(schema_id)
    if not store.delete_schema(schema_id):
        raise HTTPException(status_code=404, detail="Schema not found")
    return Response(status_code=204)


@router.get("/schemas-active", response_model=SchemaResponse)
def get_active_schema():
    active = store.get_active_schema()
    return SchemaResponse(schema_=SchemaDTO.from_schema(active) if active else None)


@router.post("/schemas-active", response_model=ActiveSchemaResponse)
def set_active_schema(payload=Body(...)):
    try:
        schema_id = sanitize_active_schema_payload(payload)
    except ScheduleValidationError as exc:
        raise _bad_request(exc)
    try:
        store.set_active_schema(schema_id)
    except store.SchemaNotFoundError:
        raise HTTPException(status_code=404, detail="Schema not found")
    return ActiveSchemaResponse(schema_id=schema_id)
