# -*- coding: utf-8 -*-
# backend/core/schemas.py - Pydantic models for API responses
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.core.models import EffectiveTarget, Schema, TemperatureReading
from backend.core.schedule_helpers import export_interval


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class IntervalDTO(_WireModel):
    id: Optional[int] = None
    day_of_week: int = Field(alias="dayOfWeek")
    start: str
    end: str
    start_time_minutes: int = Field(alias="startTimeMinutes")
    end_time_minutes: int = Field(alias="endTimeMinutes")


class SchemaSummaryDTO(_WireModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = Field(alias="isActive")
    in_office_temperature: float = Field(alias="inOfficeTemperature")
    out_of_office_temperature: float = Field(alias="outOfOfficeTemperature")

    @classmethod
    def from_schema(cls, schema: Schema) -> "SchemaSummaryDTO":
        return cls(
            id=schema.id,
            name=schema.name,
            description=schema.description,
            is_active=schema.is_active,
            in_office_temperature=schema.in_office_temperature,
            out_of_office_temperature=schema.out_of_office_temperature,
        )


class SchemaDTO(SchemaSummaryDTO):
    intervals: List[IntervalDTO] = Field(default_factory=list)

    @classmethod
    def from_schema(cls, schema: Schema) -> "SchemaDTO":
        summary = SchemaSummaryDTO.from_schema(schema)
        return cls(
            **summary.model_dump(),
            intervals=[IntervalDTO(**export_interval(i)) for i in schema.intervals],
        )


class SchemaListResponse(BaseModel):
    schemas: List[SchemaSummaryDTO]


class SchemaResponse(BaseModel):
    schema_: Optional[SchemaDTO] = Field(alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class ActiveSchemaResponse(_WireModel):
    schema_id: Optional[int] = Field(alias="schemaId")


class TargetDTO(_WireModel):
    target_temperature: float = Field(alias="targetTemperature")
    source: Literal["schema", "default"]
    schema_id: Optional[int] = Field(alias="schemaId")
    mode: Optional[Literal["in-office", "out-of-office"]] = None

    @classmethod
    def from_effective(cls, effective: EffectiveTarget) -> "TargetDTO":
        return cls(
            target_temperature=effective.temperature,
            source=effective.source,
            schema_id=effective.schema_id,
            mode=effective.mode,
        )


class StatusDTO(_WireModel):
    target_temperature: float = Field(alias="targetTemperature")
    target_source: Literal["schema", "default"] = Field(alias="targetSource")
    target_schema_id: Optional[int] = Field(alias="targetSchemaId")
    target_mode: Optional[Literal["in-office", "out-of-office"]] = Field(alias="targetMode")
    current_temperature: Optional[float] = Field(alias="currentTemperature")
    current_temperature_timestamp: Optional[datetime] = Field(alias="currentTemperatureTimestamp")


class BaseTargetDTO(_WireModel):
    target_temperature: float = Field(alias="targetTemperature")


class ReadingDTO(BaseModel):
    timestamp: datetime
    temperature: float

    @classmethod
    def from_reading(cls, reading: TemperatureReading) -> "ReadingDTO":
        return cls(timestamp=as_utc(reading.timestamp), temperature=reading.temperature)


class HistoryResponse(BaseModel):
    history: List[ReadingDTO]


class PowerRecommendationDTO(_WireModel):
    state: Optional[Literal[0, 1]] = None
    target_temperature: float = Field(alias="targetTemperature")
    current_temperature: Optional[float] = Field(alias="currentTemperature")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # the store keeps naive UTC timestamps
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
