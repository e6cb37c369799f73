"""Vehicle registration and compliance endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from ...data.store import FleetStore
from ...models.domain import Vehicle, ZoneType
from ...schemas.common import GeoLocationModel
from ...schemas.vehicles import (
    CirculationDayModel,
    ComplianceCheckModel,
    TimeRestrictionCheckModel,
    VehicleModel,
    VehicleStatusUpdate,
)
from ...services.compliance import (
    check_circulation_day,
    check_compliance,
    check_time_restriction,
    update_location,
    update_status,
)
from ...services.timewindows import Clock
from ..dependencies import bad_request, clock_dependency, not_found, store_dependency

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def _require_vehicle(store: FleetStore, vehicle_id: str) -> Vehicle:
    vehicle = store.get_vehicle(vehicle_id)
    if vehicle is None:
        raise not_found("Vehicle", vehicle_id)
    return vehicle


@router.post("", response_model=VehicleModel, status_code=status.HTTP_201_CREATED)
def register_vehicle(
    payload: VehicleModel,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    vehicle = payload.to_domain()
    vehicle.last_updated = vehicle.last_updated or clock()
    try:
        store.add_vehicle(vehicle)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return asdict(vehicle)


@router.get("/{vehicle_id}", response_model=VehicleModel)
def get_vehicle(vehicle_id: str, store: FleetStore = Depends(store_dependency)) -> dict:
    return asdict(_require_vehicle(store, vehicle_id))


@router.get("/{vehicle_id}/circulation", response_model=CirculationDayModel)
def circulation_day(
    vehicle_id: str,
    on: datetime | None = Query(default=None, description="Date to evaluate; defaults to today."),
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> CirculationDayModel:
    vehicle = _require_vehicle(store, vehicle_id)
    try:
        result = check_circulation_day(vehicle, on, clock=clock)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return CirculationDayModel(
        **asdict(result),
        plate_parity=result.plate_parity,
        date_parity=result.date_parity,
    )


@router.get("/{vehicle_id}/time-restriction", response_model=TimeRestrictionCheckModel)
def time_restriction(
    vehicle_id: str,
    zone_type: ZoneType = Query(...),
    at: datetime | None = Query(default=None, description="Moment to evaluate; defaults to now."),
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    vehicle = _require_vehicle(store, vehicle_id)
    return asdict(check_time_restriction(vehicle, zone_type, at, clock=clock))


@router.get("/{vehicle_id}/compliance", response_model=ComplianceCheckModel)
def compliance(
    vehicle_id: str,
    zone_type: ZoneType = Query(...),
    at: datetime | None = Query(default=None, description="Moment to evaluate; defaults to now."),
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    vehicle = _require_vehicle(store, vehicle_id)
    try:
        result = check_compliance(vehicle, zone_type, at, clock=clock)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return asdict(result)


@router.put("/{vehicle_id}/location", response_model=VehicleModel)
def put_location(
    vehicle_id: str,
    payload: GeoLocationModel,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    vehicle = _require_vehicle(store, vehicle_id)
    try:
        update_location(vehicle, payload.to_domain(), clock=clock)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return asdict(vehicle)


@router.put("/{vehicle_id}/status", response_model=VehicleModel)
def put_status(
    vehicle_id: str,
    payload: VehicleStatusUpdate,
    store: FleetStore = Depends(store_dependency),
    clock: Clock = Depends(clock_dependency),
) -> dict:
    vehicle = _require_vehicle(store, vehicle_id)
    # Buffered vehicles change status under their hub's lock, like allocation.
    with store.buffer_locks(vehicle_id):
        update_status(vehicle, payload.status, clock=clock)
        return asdict(vehicle)
