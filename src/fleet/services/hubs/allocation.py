"""Buffer pool mutation and standby vehicle selection.

These functions read and then mutate ``hub.buffer_vehicles``; callers that
share a hub across threads run them under ``FleetStore.hub_lock``.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Optional

from ...models.domain import Hub, HubStatus, PollutionLevel, Vehicle, VehicleStatus, VehicleType
from ..timewindows import Clock, system_clock
from .models import AllocationResult, CapacityRequirement

logger = logging.getLogger(__name__)

NEUTRAL_FIT_SCORE = 0.5


def add_buffer_vehicle(hub: Hub, vehicle: Vehicle, *, clock: Clock = system_clock) -> bool:
    if len(hub.buffer_vehicles) >= hub.capacity.buffer_vehicle_slots:
        logger.warning(f"Hub {hub.id} buffer full ({hub.capacity.buffer_vehicle_slots} slots), rejecting {vehicle.id}")
        return False
    if any(existing.id == vehicle.id for existing in hub.buffer_vehicles):
        logger.warning(f"Vehicle {vehicle.id} already in hub {hub.id} buffer")
        return False
    hub.buffer_vehicles.append(vehicle)
    hub.updated_at = clock()
    logger.info(f"Vehicle {vehicle.id} added to hub {hub.id} buffer")
    return True


def remove_buffer_vehicle(hub: Hub, vehicle_id: str, *, clock: Clock = system_clock) -> bool:
    remaining = [vehicle for vehicle in hub.buffer_vehicles if vehicle.id != vehicle_id]
    if len(remaining) == len(hub.buffer_vehicles):
        return False
    hub.buffer_vehicles = remaining
    hub.updated_at = clock()
    logger.info(f"Vehicle {vehicle_id} removed from hub {hub.id} buffer")
    return True


def capacity_fit_score(vehicle: Vehicle, required: Optional[CapacityRequirement]) -> float:
    """Higher is a tighter fit; 0.5 when nothing is required."""

    if required is None:
        return NEUTRAL_FIT_SCORE
    weight_fit = required.weight / vehicle.capacity.weight
    volume_fit = required.volume / vehicle.capacity.volume
    return min(weight_fit, volume_fit)


def _pick_better(best: Vehicle, current: Vehicle, required: Optional[CapacityRequirement]) -> Vehicle:
    best_is_bs6 = best.compliance.pollution_level == PollutionLevel.BS6
    current_is_bs6 = current.compliance.pollution_level == PollutionLevel.BS6
    if current_is_bs6 != best_is_bs6:
        return current if current_is_bs6 else best
    return current if capacity_fit_score(current, required) > capacity_fit_score(best, required) else best


def allocate_buffer_vehicle(
    hub: Hub,
    vehicle_type: Optional[VehicleType] = None,
    min_capacity: Optional[CapacityRequirement] = None,
    *,
    clock: Clock = system_clock,
) -> AllocationResult:
    """Select a standby vehicle and hand it over to active duty."""

    if hub.status != HubStatus.ACTIVE:
        return AllocationResult(
            success=False,
            message=f"Hub {hub.name} is not active (status: {hub.status.value})",
        )

    available = [vehicle for vehicle in hub.buffer_vehicles if vehicle.status == VehicleStatus.AVAILABLE]
    if not available:
        logger.warning(f"Allocation at hub {hub.id} failed: no buffer vehicles available")
        return AllocationResult(success=False, message="No buffer vehicles available at this hub")

    candidates = available
    if vehicle_type is not None:
        candidates = [vehicle for vehicle in candidates if vehicle.type == vehicle_type]
    if min_capacity is not None:
        candidates = [
            vehicle
            for vehicle in candidates
            if vehicle.capacity.weight >= min_capacity.weight and vehicle.capacity.volume >= min_capacity.volume
        ]

    if not candidates:
        logger.warning(f"Allocation at hub {hub.id} failed: no buffer vehicle matches the requirements")
        return AllocationResult(
            success=False,
            message="No buffer vehicles match the specified requirements",
            alternatives=available,
        )

    selected = reduce(lambda best, current: _pick_better(best, current, min_capacity), candidates)

    now = clock()
    selected.status = VehicleStatus.IN_TRANSIT
    selected.last_updated = now
    hub.updated_at = now
    logger.info(f"Buffer vehicle {selected.id} allocated from hub {hub.id}")
    return AllocationResult(
        success=True,
        message=f"Buffer vehicle {selected.id} allocated successfully",
        vehicle=selected,
    )
