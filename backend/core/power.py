# -*- coding: utf-8 -*-
"""Power socket recommendation for the heater.

Plain threshold on the latest reading: 1 = on (below target), 0 = off (at or
above target), None = no reading logged yet. Dwell times or a dead band belong
here, on top of the resolver, once they are needed.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from backend.core import store
from backend.core.models import EffectiveTarget, TemperatureReading
from backend.core.targets import resolve_effective_target


def power_state(latest: Optional[TemperatureReading], effective: EffectiveTarget) -> Optional[int]:
    """Threshold decision for an already-resolved reading and target."""
    if latest is None:
        return None
    if latest.temperature >= effective.temperature:
        return 0
    return 1


def recommend_power_state(now: Optional[datetime] = None) -> Optional[int]:
    latest = store.get_latest_temperature()
    if latest is None:
        return None
    return power_state(latest, resolve_effective_target(now))
