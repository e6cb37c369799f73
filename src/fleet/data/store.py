"""In-memory, id-indexed registry of vehicles, routes and hubs."""

from __future__ import annotations

import functools
import threading
from contextlib import ExitStack, contextmanager
from typing import Iterator, Optional

from ..models.domain import Hub, Route, Vehicle
from ..services.validation import FieldValidationError, validate_hub, validate_route, validate_vehicle


class FleetStore:
    """Holds every entity once; all other holders keep references or ids.

    Hubs and routes each get their own lock so compound read-modify-write
    sequences (buffer mutation, allocation, stop updates) are serialised per
    entity without blocking unrelated work.
    """

    def __init__(self) -> None:
        self._vehicles: dict[str, Vehicle] = {}
        self._routes: dict[str, Route] = {}
        self._hubs: dict[str, Hub] = {}
        self._hub_locks: dict[str, threading.Lock] = {}
        self._route_locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    # Vehicles

    def add_vehicle(self, vehicle: Vehicle) -> Vehicle:
        validate_vehicle(vehicle)
        with self._registry_lock:
            if vehicle.id in self._vehicles:
                raise FieldValidationError("id", f"vehicle '{vehicle.id}' already exists")
            self._vehicles[vehicle.id] = vehicle
        return vehicle

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        return self._vehicles.get(vehicle_id)

    def list_vehicles(self) -> list[Vehicle]:
        return list(self._vehicles.values())

    # Routes

    def add_route(self, route: Route) -> Route:
        validate_route(route)
        with self._registry_lock:
            if route.id in self._routes:
                raise FieldValidationError("id", f"route '{route.id}' already exists")
            if route.vehicle_id not in self._vehicles:
                raise FieldValidationError("vehicle_id", f"unknown vehicle '{route.vehicle_id}'")
            self._routes[route.id] = route
            self._route_locks[route.id] = threading.Lock()
        return route

    def get_route(self, route_id: str) -> Optional[Route]:
        return self._routes.get(route_id)

    def list_routes(self) -> list[Route]:
        return list(self._routes.values())

    # Hubs

    def add_hub(self, hub: Hub) -> Hub:
        validate_hub(hub)
        with self._registry_lock:
            if hub.id in self._hubs:
                raise FieldValidationError("id", f"hub '{hub.id}' already exists")
            for vehicle in hub.buffer_vehicles:
                if vehicle.id not in self._vehicles:
                    validate_vehicle(vehicle)
            # Buffer entries must be the registered vehicle objects, not copies.
            hub.buffer_vehicles = [self._vehicles.setdefault(vehicle.id, vehicle) for vehicle in hub.buffer_vehicles]
            self._hubs[hub.id] = hub
            self._hub_locks[hub.id] = threading.Lock()
        return hub

    def get_hub(self, hub_id: str) -> Optional[Hub]:
        return self._hubs.get(hub_id)

    def list_hubs(self) -> list[Hub]:
        return list(self._hubs.values())

    # Locks

    @contextmanager
    def hub_lock(self, hub_id: str) -> Iterator[Hub]:
        hub = self._hubs.get(hub_id)
        if hub is None:
            raise KeyError(hub_id)
        with self._hub_locks[hub_id]:
            yield hub

    @contextmanager
    def buffer_locks(self, vehicle_id: str) -> Iterator[list[Hub]]:
        """Hold the lock of every hub whose buffer contains ``vehicle_id``.

        Locks are taken in hub id order.
        """

        hub_ids = sorted(
            hub.id for hub in self._hubs.values() if any(vehicle.id == vehicle_id for vehicle in hub.buffer_vehicles)
        )
        with ExitStack() as stack:
            for hub_id in hub_ids:
                stack.enter_context(self._hub_locks[hub_id])
            yield [self._hubs[hub_id] for hub_id in hub_ids]

    @contextmanager
    def route_lock(self, route_id: str) -> Iterator[Route]:
        route = self._routes.get(route_id)
        if route is None:
            raise KeyError(route_id)
        with self._route_locks[route_id]:
            yield route


@functools.lru_cache(maxsize=1)
def get_store() -> FleetStore:
    """Process-wide store used by the HTTP layer."""

    return FleetStore()
