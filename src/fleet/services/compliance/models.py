"""Vehicle compliance result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ...models.domain import TimeWindow, VehicleType, ZoneType


def _parity(is_odd: bool) -> str:
    return "odd" if is_odd else "even"


@dataclass(slots=True)
class CirculationDayResult:
    compliant: bool
    plate_number: str
    date: datetime
    is_odd_plate: bool
    is_odd_date: bool
    is_exempt: bool
    exemption_reason: Optional[str] = None

    @property
    def plate_parity(self) -> str:
        return _parity(self.is_odd_plate)

    @property
    def date_parity(self) -> str:
        return _parity(self.is_odd_date)


@dataclass(slots=True)
class TimeRestrictionResult:
    allowed: bool
    current_time: str
    zone_type: ZoneType
    vehicle_type: VehicleType
    restricted_window: Optional[TimeWindow] = None
    alternatives: List[TimeWindow] = field(default_factory=list)


@dataclass(slots=True)
class ComplianceResult:
    compliant: bool
    zone_type: ZoneType
    checked_at: datetime
    violations: List[str]
    warnings: List[str]
    suggested_actions: List[str]
    circulation: CirculationDayResult
    time_restriction: TimeRestrictionResult
