"""Route execution state machine and live updates."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...models.domain import Route, RouteStatus, RouteStop, StopStatus, TrafficFactor
from ..timewindows import Clock, system_clock
from .analysis import round_half_up

logger = logging.getLogger(__name__)

_CANCELLABLE = (RouteStatus.PLANNED, RouteStatus.ACTIVE)


def start_route(route: Route, *, clock: Clock = system_clock) -> bool:
    if route.status != RouteStatus.PLANNED:
        logger.debug(f"Ignoring start for route {route.id} in status {route.status.value}")
        return False
    now = clock()
    route.status = RouteStatus.ACTIVE
    route.started_at = now
    route.updated_at = now
    logger.info(f"Route {route.id} started")
    return True


def complete_route(route: Route, *, clock: Clock = system_clock) -> bool:
    if route.status != RouteStatus.ACTIVE:
        logger.debug(f"Ignoring complete for route {route.id} in status {route.status.value}")
        return False
    now = clock()
    route.status = RouteStatus.COMPLETED
    route.completed_at = now
    route.updated_at = now
    if route.started_at is not None and route.actual_duration is None:
        elapsed_minutes = (now - route.started_at).total_seconds() / 60
        route.actual_duration = max(0, round_half_up(elapsed_minutes))
    logger.info(f"Route {route.id} completed")
    return True


def cancel_route(route: Route, *, clock: Clock = system_clock) -> bool:
    if route.status not in _CANCELLABLE:
        logger.debug(f"Ignoring cancel for route {route.id} in status {route.status.value}")
        return False
    route.status = RouteStatus.CANCELLED
    route.updated_at = clock()
    logger.info(f"Route {route.id} cancelled")
    return True


def set_stop_status(
    route: Route,
    stop_id: str,
    status: StopStatus,
    at: Optional[datetime] = None,
    *,
    clock: Clock = system_clock,
) -> bool:
    """Update a stop's status, stamping arrival/departure times. False if unknown."""

    stop = next((item for item in route.stops if item.id == stop_id), None)
    if stop is None:
        return False

    moment = at or clock()
    stop.status = status
    if status == StopStatus.ARRIVED:
        stop.actual_arrival_time = moment
    elif status == StopStatus.COMPLETED and stop.actual_departure_time is None:
        stop.actual_departure_time = moment

    route.updated_at = clock()
    return True


def add_traffic_factor(route: Route, factor: TrafficFactor, *, clock: Clock = system_clock) -> None:
    """Record a traffic report; a newer report for the same segment replaces the old one."""

    route.traffic_factors = [item for item in route.traffic_factors if item.segment_id != factor.segment_id]
    route.traffic_factors.append(factor)
    route.updated_at = clock()


def total_traffic_delay(route: Route) -> float:
    return sum(factor.delay_minutes for factor in route.traffic_factors)


def next_stop(route: Route) -> Optional[RouteStop]:
    return next((stop for stop in route.stops if stop.status == StopStatus.PENDING), None)


def completed_stops(route: Route) -> list[RouteStop]:
    return [stop for stop in route.stops if stop.status == StopStatus.COMPLETED]
