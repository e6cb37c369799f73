"""Hub buffer fleet and allocation endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...data.store import FleetStore
from ...schemas.common import OperationResult
from ...schemas.hubs import (
    AllocationRequest,
    AllocationResponse,
    BufferVehicleRequest,
    CapacityStatusModel,
    HubCreate,
    HubModel,
    OperatingHoursStatusModel,
)
from ...services.hubs import (
    add_buffer_vehicle,
    allocate_buffer_vehicle,
    capacity_status,
    remove_buffer_vehicle,
    replace_route_vehicle,
    validate_operating_hours,
)
from ...services.hubs.models import CapacityRequirement
from ...services.timewindows import Clock
from ..dependencies import bad_request, clock_dependency, not_found, store_dependency

router = APIRouter(prefix="/hubs", tags=["hubs"])

logger = logging.getLogger(__name__)


@router.post("", response_model=HubModel, status_code=status.HTTP_201_CREATED)
def create_hub(
    payload: HubCreate,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    hub = payload.to_domain(created_at=clock())
    for vehicle_id in payload.buffer_vehicle_ids:
        vehicle = store.get_vehicle(vehicle_id)
        if vehicle is None:
            raise bad_request(ValueError(f"Unknown buffer vehicle '{vehicle_id}'"))
        hub.buffer_vehicles.append(vehicle)
    try:
        store.add_hub(hub)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return asdict(hub)


@router.get("/{hub_id}", response_model=HubModel)
def get_hub(hub_id: str, store: FleetStore = Depends(store_dependency)) -> dict:
    hub = store.get_hub(hub_id)
    if hub is None:
        raise not_found("Hub", hub_id)
    return asdict(hub)


@router.post("/{hub_id}/buffer", response_model=OperationResult)
def add_to_buffer(
    hub_id: str,
    payload: BufferVehicleRequest,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> OperationResult:
    vehicle = store.get_vehicle(payload.vehicle_id)
    if vehicle is None:
        raise not_found("Vehicle", payload.vehicle_id)
    try:
        with store.hub_lock(hub_id) as hub:
            added = add_buffer_vehicle(hub, vehicle, clock=clock)
    except KeyError as exc:
        raise not_found("Hub", hub_id) from exc
    if not added:
        return OperationResult(success=False, message=f"Vehicle {vehicle.id} not added: buffer full or duplicate")
    return OperationResult(success=True, message=f"Vehicle {vehicle.id} added to buffer")


@router.delete("/{hub_id}/buffer/{vehicle_id}", response_model=OperationResult)
def remove_from_buffer(
    hub_id: str,
    vehicle_id: str,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> OperationResult:
    try:
        with store.hub_lock(hub_id) as hub:
            removed = remove_buffer_vehicle(hub, vehicle_id, clock=clock)
    except KeyError as exc:
        raise not_found("Hub", hub_id) from exc
    if not removed:
        return OperationResult(success=False, message=f"Vehicle {vehicle_id} is not in the buffer")
    return OperationResult(success=True, message=f"Vehicle {vehicle_id} removed from buffer")


@router.post("/{hub_id}/allocate", response_model=AllocationResponse)
def allocate(
    hub_id: str,
    payload: AllocationRequest,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    requirement = (
        CapacityRequirement(weight=payload.min_capacity.weight, volume=payload.min_capacity.volume)
        if payload.min_capacity
        else None
    )
    route = None
    if payload.route_id is not None:
        route = store.get_route(payload.route_id)
        if route is None:
            raise not_found("Route", payload.route_id)

    try:
        with store.hub_lock(hub_id) as hub:
            if route is None:
                result = allocate_buffer_vehicle(hub, payload.vehicle_type, requirement, clock=clock)
            else:
                with store.route_lock(route.id):
                    failed_vehicle = store.get_vehicle(route.vehicle_id)
                    result = replace_route_vehicle(
                        hub, route, failed_vehicle, payload.vehicle_type, requirement, clock=clock
                    )
    except KeyError as exc:
        raise not_found("Hub", hub_id) from exc

    if not result.success:
        logger.info(f"Allocation request at hub {hub_id} unsuccessful: {result.message}")
    return asdict(result)


@router.get("/{hub_id}/capacity", response_model=CapacityStatusModel)
def capacity(
    hub_id: str,
    storage_utilization: float | None = Query(default=None, ge=0),
    loading_bay_utilization: float | None = Query(default=None, ge=0),
    store: FleetStore = Depends(store_dependency),
) -> dict:
    hub = store.get_hub(hub_id)
    if hub is None:
        raise not_found("Hub", hub_id)
    return asdict(
        capacity_status(
            hub,
            storage_utilization=storage_utilization,
            loading_bay_utilization=loading_bay_utilization,
        )
    )


@router.get("/{hub_id}/operating-hours", response_model=OperatingHoursStatusModel)
def operating_hours(
    hub_id: str,
    at: datetime | None = Query(default=None, description="Moment to evaluate; defaults to now."),
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    hub = store.get_hub(hub_id)
    if hub is None:
        raise not_found("Hub", hub_id)
    try:
        return asdict(validate_operating_hours(hub, at, clock=clock))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
