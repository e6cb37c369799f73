"""Hub capacity, operating hours and breakdown hand-off."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...config import settings
from ...models.domain import Hub, HubStatus, Route, Vehicle, VehicleStatus, VehicleType
from ..geospatial import distance_km
from ..timewindows import (
    MINUTES_PER_DAY,
    Clock,
    clock_string,
    local_time,
    system_clock,
    time_to_minutes,
    weekday_name,
)
from .allocation import allocate_buffer_vehicle
from .models import AllocationResult, CapacityRequirement, CapacityStatus, OperatingHoursStatus

logger = logging.getLogger(__name__)


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def capacity_status(
    hub: Hub,
    *,
    storage_utilization: Optional[float] = None,
    loading_bay_utilization: Optional[float] = None,
) -> CapacityStatus:
    """Utilisation snapshot with advisories.

    Storage and loading-bay utilisation are taken from the arguments when
    supplied, otherwise derived from the hub's live counters.
    """

    vehicle_utilization = _percent(hub.capacity.current_vehicles, hub.capacity.max_vehicles)
    if storage_utilization is None:
        storage_utilization = _percent(hub.storage_in_use, hub.capacity.storage_area)
    if loading_bay_utilization is None:
        loading_bay_utilization = _percent(hub.active_loading_bays, hub.capacity.loading_bays)
    available = sum(1 for vehicle in hub.buffer_vehicles if vehicle.status == VehicleStatus.AVAILABLE)

    actions: list[str] = []
    if vehicle_utilization > settings.hub_redirect_percent:
        actions.append("Consider redirecting new vehicles to alternative hubs")
    if available < settings.hub_min_available_buffer:
        actions.append("Replenish buffer vehicle inventory")
    if storage_utilization > settings.hub_storage_alert_percent:
        actions.append("Expedite outbound shipments to free storage space")

    return CapacityStatus(
        vehicle_utilization=round(vehicle_utilization, 2),
        storage_utilization=round(storage_utilization, 2),
        loading_bay_utilization=round(loading_bay_utilization, 2),
        buffer_vehicle_availability=available,
        is_at_capacity=vehicle_utilization >= settings.hub_at_capacity_percent or available == 0,
        recommended_actions=actions,
    )


def validate_operating_hours(
    hub: Hub,
    at: Optional[datetime] = None,
    *,
    clock: Clock = system_clock,
) -> OperatingHoursStatus:
    moment = local_time(at or clock())
    current_time = clock_string(moment)

    open_time, close_time = hub.operating_hours.open, hub.operating_hours.close
    override = hub.operating_hours.special_hours.get(weekday_name(moment))
    if override is not None:
        open_time, close_time = override.start, override.end

    now = time_to_minutes(current_time)
    opens = time_to_minutes(open_time)
    closes = time_to_minutes(close_time)

    minutes_until_close: Optional[int] = None
    next_open_time: Optional[str] = None

    if opens > closes:
        # Overnight shift, e.g. 22:00-06:00.
        is_open = now >= opens or now < closes
        if is_open:
            minutes_until_close = closes - now if now < closes else MINUTES_PER_DAY - now + closes
        else:
            next_open_time = open_time
    else:
        is_open = opens <= now < closes
        if is_open:
            minutes_until_close = closes - now
        elif now < opens:
            next_open_time = open_time
        else:
            next_open_time = f"{open_time} (next day)"

    return OperatingHoursStatus(
        is_open=is_open,
        current_time=current_time,
        open_time=open_time,
        close_time=close_time,
        minutes_until_close=minutes_until_close,
        next_open_time=next_open_time,
    )


def update_hub_status(hub: Hub, status: HubStatus, *, clock: Clock = system_clock) -> None:
    hub.status = status
    hub.updated_at = clock()


def update_current_vehicle_count(hub: Hub, count: int, *, clock: Clock = system_clock) -> None:
    hub.capacity.current_vehicles = max(0, min(count, hub.capacity.max_vehicles))
    hub.updated_at = clock()


def distance_between_hubs(origin: Hub, destination: Hub) -> float:
    return distance_km(origin.location, destination.location)


def replace_route_vehicle(
    hub: Hub,
    route: Route,
    failed_vehicle: Optional[Vehicle],
    vehicle_type: Optional[VehicleType] = None,
    min_capacity: Optional[CapacityRequirement] = None,
    *,
    clock: Clock = system_clock,
) -> AllocationResult:
    """Substitute a broken-down vehicle on ``route`` with a buffer vehicle.

    The failed vehicle is marked as broken down and the route is rebound only
    when an allocation succeeds.
    """

    result = allocate_buffer_vehicle(hub, vehicle_type, min_capacity, clock=clock)
    if not result.success:
        return result

    now = clock()
    if failed_vehicle is not None:
        failed_vehicle.status = VehicleStatus.BREAKDOWN
        failed_vehicle.last_updated = now
    previous = route.vehicle_id
    route.vehicle_id = result.vehicle.id
    route.updated_at = now
    logger.info(f"Route {route.id} vehicle {previous} replaced by {result.vehicle.id} from hub {hub.id}")
    return result
