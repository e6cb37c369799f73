"""Route lifecycle endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, status

from ...data.store import FleetStore
from ...schemas.routes import (
    EfficiencyMetricsModel,
    OptimizationSuggestionModel,
    RouteComplianceModel,
    RouteComplianceRequest,
    RouteCreate,
    RouteModel,
    StopStatusUpdate,
    TrafficFactorModel,
)
from ...services.routing import (
    add_traffic_factor,
    cancel_route,
    complete_route,
    compute_efficiency,
    set_stop_status,
    start_route,
    suggest_optimizations,
    total_traffic_delay,
    validate_route_compliance,
)
from ...services.timewindows import Clock
from ..dependencies import bad_request, clock_dependency, not_found, store_dependency

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


@router.post("", response_model=RouteModel, status_code=status.HTTP_201_CREATED)
def create_route(
    payload: RouteCreate,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    route = payload.to_domain(created_at=clock())
    try:
        store.add_route(route)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return asdict(route)


@router.get("/{route_id}", response_model=RouteModel)
def get_route(route_id: str, store: FleetStore = Depends(store_dependency)) -> dict:
    route = store.get_route(route_id)
    if route is None:
        raise not_found("Route", route_id)
    return asdict(route)


def _transition(store: FleetStore, route_id: str, action, clock: Clock) -> dict:
    try:
        with store.route_lock(route_id) as route:
            changed = action(route, clock=clock)
            payload = asdict(route)
    except KeyError as exc:
        raise not_found("Route", route_id) from exc
    if not changed:
        logger.info(f"Route {route_id} transition {action.__name__} ignored in status {payload['status'].value}")
    return payload


@router.post("/{route_id}/start", response_model=RouteModel)
def start(route_id: str, store: FleetStore = Depends(store_dependency), clock: Clock = Depends(clock_dependency)) -> dict:
    return _transition(store, route_id, start_route, clock)


@router.post("/{route_id}/complete", response_model=RouteModel)
def complete(route_id: str, store: FleetStore = Depends(store_dependency), clock: Clock = Depends(clock_dependency)) -> dict:
    return _transition(store, route_id, complete_route, clock)


@router.post("/{route_id}/cancel", response_model=RouteModel)
def cancel(route_id: str, store: FleetStore = Depends(store_dependency), clock: Clock = Depends(clock_dependency)) -> dict:
    return _transition(store, route_id, cancel_route, clock)


@router.put("/{route_id}/stops/{stop_id}", response_model=RouteModel)
def update_stop(
    route_id: str,
    stop_id: str,
    payload: StopStatusUpdate,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    try:
        with store.route_lock(route_id) as route:
            found = set_stop_status(route, stop_id, payload.status, payload.at, clock=clock)
            snapshot = asdict(route)
    except KeyError as exc:
        raise not_found("Route", route_id) from exc
    if not found:
        raise not_found("Stop", stop_id)
    return snapshot


@router.post("/{route_id}/traffic", response_model=RouteModel)
def report_traffic(
    route_id: str,
    payload: TrafficFactorModel,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    factor = payload.to_domain()
    if factor.timestamp is None:
        factor.timestamp = clock()
    try:
        with store.route_lock(route_id) as route:
            add_traffic_factor(route, factor, clock=clock)
            return asdict(route)
    except KeyError as exc:
        raise not_found("Route", route_id) from exc


@router.get("/{route_id}/efficiency", response_model=EfficiencyMetricsModel)
def efficiency(route_id: str, store: FleetStore = Depends(store_dependency)) -> EfficiencyMetricsModel:
    route = store.get_route(route_id)
    if route is None:
        raise not_found("Route", route_id)
    return EfficiencyMetricsModel(**asdict(compute_efficiency(route)), total_traffic_delay=total_traffic_delay(route))


@router.get("/{route_id}/suggestions", response_model=list[OptimizationSuggestionModel])
def suggestions(route_id: str, store: FleetStore = Depends(store_dependency)) -> list[dict]:
    route = store.get_route(route_id)
    if route is None:
        raise not_found("Route", route_id)
    return [asdict(item) for item in suggest_optimizations(route)]


@router.post("/{route_id}/compliance", response_model=RouteComplianceModel)
def validate_compliance(
    route_id: str,
    payload: RouteComplianceRequest,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    try:
        with store.route_lock(route_id) as route:
            vehicle = store.get_vehicle(route.vehicle_id) if payload.apply_vehicle_exemptions else None
            snapshot = validate_route_compliance(
                route,
                payload.zone_types,
                areas=[area.to_domain() for area in payload.areas],
                vehicle=vehicle,
                clock=clock,
            )
            return asdict(snapshot)
    except KeyError as exc:
        raise not_found("Route", route_id) from exc
    except ValueError as exc:
        raise bad_request(exc) from exc
