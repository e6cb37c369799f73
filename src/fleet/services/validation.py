"""Input validation for fleet entities.

Every failure raises :class:`FieldValidationError`, which names the offending
field and the reason. Values are never coerced into range.
"""

from __future__ import annotations

import re

from ..models.domain import Capacity, GeoLocation, Hub, Route, TimeWindow, Vehicle
from .timewindows import WEEKDAYS, time_to_minutes

_DIGITS = re.compile(r"\d")


class FieldValidationError(ValueError):
    """Raised when an entity field holds a malformed value."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Validation failed for {field}: {reason}")
        self.field = field
        self.reason = reason


def validate_geo_location(location: GeoLocation | None, field: str = "location") -> None:
    if location is None:
        raise FieldValidationError(field, "location is required")
    if location.latitude is None or not -90 <= location.latitude <= 90:
        raise FieldValidationError(f"{field}.latitude", "must be between -90 and 90")
    if location.longitude is None or not -180 <= location.longitude <= 180:
        raise FieldValidationError(f"{field}.longitude", "must be between -180 and 180")


def validate_capacity(capacity: Capacity | None, field: str = "capacity") -> None:
    if capacity is None:
        raise FieldValidationError(field, "capacity is required")
    if capacity.weight is None or capacity.weight <= 0:
        raise FieldValidationError(f"{field}.weight", "must be a positive number")
    if capacity.volume is None or capacity.volume <= 0:
        raise FieldValidationError(f"{field}.volume", "must be a positive number")


def validate_plate_number(plate_number: str, field: str = "specs.plate_number") -> None:
    if not plate_number or not plate_number.strip():
        raise FieldValidationError(field, "plate number is required")
    if not _DIGITS.search(plate_number):
        raise FieldValidationError(field, "plate number must contain at least one digit")


def validate_time_window(window: TimeWindow, field: str) -> None:
    for name, value in (("start", window.start), ("end", window.end)):
        try:
            time_to_minutes(value)
        except ValueError as exc:
            raise FieldValidationError(f"{field}.{name}", str(exc)) from exc


def validate_vehicle(vehicle: Vehicle) -> None:
    if not vehicle.id:
        raise FieldValidationError("id", "vehicle id is required")
    validate_capacity(vehicle.capacity)
    validate_geo_location(vehicle.location)
    validate_plate_number(vehicle.specs.plate_number)
    if vehicle.specs.vehicle_age < 0:
        raise FieldValidationError("specs.vehicle_age", "must be a non-negative number")
    for index, restriction in enumerate(vehicle.compliance.time_restrictions):
        prefix = f"compliance.time_restrictions[{index}]"
        validate_time_window(restriction.restricted_hours, f"{prefix}.restricted_hours")
        unknown = [day for day in restriction.days_applicable if day not in WEEKDAYS]
        if unknown:
            raise FieldValidationError(f"{prefix}.days_applicable", f"unknown weekday names: {', '.join(unknown)}")


def validate_route(route: Route) -> None:
    if not route.id:
        raise FieldValidationError("id", "route id is required")
    if not route.vehicle_id:
        raise FieldValidationError("vehicle_id", "route must reference a vehicle")
    for name in ("estimated_distance", "estimated_duration", "estimated_fuel_consumption"):
        if getattr(route, name) < 0:
            raise FieldValidationError(name, "must be a non-negative number")

    seen: set[str] = set()
    for index, stop in enumerate(route.stops):
        if stop.sequence != index + 1:
            raise FieldValidationError(
                f"stops[{index}].sequence",
                f"expected {index + 1}, got {stop.sequence}; sequences must be 1-based and contiguous",
            )
        if stop.id in seen:
            raise FieldValidationError(f"stops[{index}].id", f"duplicate stop id '{stop.id}'")
        seen.add(stop.id)
        if stop.duration < 0:
            raise FieldValidationError(f"stops[{index}].duration", "must be a non-negative number")
        validate_geo_location(stop.location, f"stops[{index}].location")


def validate_hub(hub: Hub) -> None:
    if not hub.id:
        raise FieldValidationError("id", "hub id is required")
    validate_geo_location(hub.location)
    capacity = hub.capacity
    if capacity.max_vehicles <= 0:
        raise FieldValidationError("capacity.max_vehicles", "must be a positive number")
    if not 0 <= capacity.current_vehicles <= capacity.max_vehicles:
        raise FieldValidationError("capacity.current_vehicles", "must be between 0 and max_vehicles")
    if capacity.buffer_vehicle_slots < 0:
        raise FieldValidationError("capacity.buffer_vehicle_slots", "must be a non-negative number")
    if len(hub.buffer_vehicles) > capacity.buffer_vehicle_slots:
        raise FieldValidationError("buffer_vehicles", "buffer exceeds buffer_vehicle_slots")
    ids = [vehicle.id for vehicle in hub.buffer_vehicles]
    if len(ids) != len(set(ids)):
        raise FieldValidationError("buffer_vehicles", "buffer contains duplicate vehicle ids")

    validate_time_window(
        TimeWindow(start=hub.operating_hours.open, end=hub.operating_hours.close),
        "operating_hours",
    )
    for day, window in hub.operating_hours.special_hours.items():
        if day not in WEEKDAYS:
            raise FieldValidationError("operating_hours.special_hours", f"unknown weekday '{day}'")
        validate_time_window(window, f"operating_hours.special_hours.{day}")
