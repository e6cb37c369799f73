"""Hub operation result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...models.domain import Vehicle


@dataclass(slots=True)
class CapacityRequirement:
    weight: float
    volume: float


@dataclass(slots=True)
class AllocationResult:
    success: bool
    message: str
    vehicle: Optional[Vehicle] = None
    alternatives: List[Vehicle] = field(default_factory=list)


@dataclass(slots=True)
class CapacityStatus:
    vehicle_utilization: float
    storage_utilization: float
    loading_bay_utilization: float
    buffer_vehicle_availability: int
    is_at_capacity: bool
    recommended_actions: List[str]


@dataclass(slots=True)
class OperatingHoursStatus:
    is_open: bool
    current_time: str
    open_time: str
    close_time: str
    minutes_until_close: Optional[int] = None
    next_open_time: Optional[str] = None
