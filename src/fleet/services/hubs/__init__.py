"""Hub allocation service exports."""

from .allocation import add_buffer_vehicle, allocate_buffer_vehicle, capacity_fit_score, remove_buffer_vehicle
from .service import (
    capacity_status,
    distance_between_hubs,
    replace_route_vehicle,
    update_current_vehicle_count,
    update_hub_status,
    validate_operating_hours,
)

__all__ = [
    "add_buffer_vehicle",
    "remove_buffer_vehicle",
    "allocate_buffer_vehicle",
    "capacity_fit_score",
    "capacity_status",
    "validate_operating_hours",
    "update_hub_status",
    "update_current_vehicle_count",
    "distance_between_hubs",
    "replace_route_vehicle",
]
