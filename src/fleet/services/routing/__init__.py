"""Route lifecycle service exports."""

from .analysis import compute_efficiency, suggest_optimizations
from .compliance import validate_route_compliance
from .lifecycle import (
    add_traffic_factor,
    cancel_route,
    complete_route,
    completed_stops,
    next_stop,
    set_stop_status,
    start_route,
    total_traffic_delay,
)

__all__ = [
    "start_route",
    "complete_route",
    "cancel_route",
    "set_stop_status",
    "add_traffic_factor",
    "total_traffic_delay",
    "next_stop",
    "completed_stops",
    "compute_efficiency",
    "suggest_optimizations",
    "validate_route_compliance",
]
