# -*- coding: utf-8 -*-
# backend/core/models.py - runtime models (detached from SQLAlchemy sessions)
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal, Optional

TargetSource = Literal["schema", "default"]
OfficeMode = Literal["in-office", "out-of-office"]


@dataclass(frozen=True)
class Interval:
    day_of_week: int            # 0 = Sunday ... 6 = Saturday
    start_time_minutes: int     # inclusive
    end_time_minutes: int       # exclusive
    id: Optional[int] = None


@dataclass
class Schema:
    id: int
    name: str
    description: Optional[str]
    in_office_temperature: float
    out_of_office_temperature: float
    is_active: bool = False
    intervals: List[Interval] = field(default_factory=list)


@dataclass(frozen=True)
class TemperatureReading:
    timestamp: datetime     # naive UTC
    temperature: float


@dataclass(frozen=True)
class EffectiveTarget:
    temperature: float
    source: TargetSource
    schema_id: Optional[int] = None
    mode: Optional[OfficeMode] = None
