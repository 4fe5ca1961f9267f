# -*- coding: utf-8 -*-
# backend/core/targets.py – effective target temperature (default vs. active schema)
from __future__ import annotations

from datetime import datetime
from typing import Optional

from backend.core import store
from backend.core.models import EffectiveTarget
from backend.core.schedule import is_within_schedule, utc_day_and_minute, utc_now


def resolve_effective_target(now: Optional[datetime] = None) -> EffectiveTarget:
    """Return the temperature in force at ``now`` (UTC, defaults to the current time).

    An active schema replaces the default entirely: inside one of its intervals
    the in-office temperature applies, otherwise the out-of-office one.
    """
    base = store.get_base_target_temperature()
    active = store.get_active_schema()

    if active is None:
        return EffectiveTarget(temperature=base, source="default")

    day, minute = utc_day_and_minute(now or utc_now())
    if is_within_schedule(active.intervals, day, minute):
        return EffectiveTarget(
            temperature=active.in_office_temperature,
            source="schema",
            schema_id=active.id,
            mode="in-office",
        )
    return EffectiveTarget(
        temperature=active.out_of_office_temperature,
        source="schema",
        schema_id=active.id,
        mode="out-of-office",
    )
