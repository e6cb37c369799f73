"""Regulatory checks for a single vehicle.

Three rule families are evaluated here: the odd/even circulation-day rule,
zone-specific time-of-day movement bans, and the composite policy check that
combines them with permit, pollution and access-privilege requirements.
Non-compliance is returned as data; only malformed input raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ...config import settings
from ...models.domain import (
    EMERGENCY_EXCEPTION,
    ESSENTIAL_SERVICES_EXCEPTION,
    FuelType,
    GeoLocation,
    PollutionLevel,
    TimeWindow,
    Vehicle,
    VehicleStatus,
    VehicleType,
    ZoneType,
)
from ..timewindows import (
    Clock,
    clock_string,
    is_overnight,
    is_time_in_range,
    local_time,
    system_clock,
    time_to_minutes,
    weekday_name,
)
from ..validation import validate_geo_location, validate_plate_number
from .models import CirculationDayResult, ComplianceResult, TimeRestrictionResult

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def _has_exception(vehicle: Vehicle, tag: str) -> bool:
    return any(tag in restriction.exceptions for restriction in vehicle.compliance.time_restrictions)


def circulation_exemption(vehicle: Vehicle) -> Optional[str]:
    """Reason the vehicle is exempt from the circulation-day rule, if any."""

    fuel = vehicle.specs.fuel_type
    if fuel == FuelType.ELECTRIC:
        return "Electric vehicle exemption"
    if vehicle.type == VehicleType.THREE_WHEELER:
        return "Three-wheeler exemption"
    if fuel == FuelType.CNG:
        return "CNG vehicle exemption"
    if _has_exception(vehicle, EMERGENCY_EXCEPTION):
        return "Emergency vehicle exemption"
    return None


def has_time_restriction_exemption(vehicle: Vehicle) -> bool:
    return _has_exception(vehicle, EMERGENCY_EXCEPTION) or _has_exception(vehicle, ESSENTIAL_SERVICES_EXCEPTION)


def has_zone_access(vehicle: Vehicle, zone_type: ZoneType) -> bool:
    privileges = vehicle.access_privileges
    if zone_type == ZoneType.RESIDENTIAL:
        return privileges.residential_zones
    if zone_type == ZoneType.COMMERCIAL:
        return privileges.commercial_zones
    if zone_type == ZoneType.INDUSTRIAL:
        return privileges.industrial_zones
    if zone_type == ZoneType.MIXED:
        return privileges.residential_zones and privileges.commercial_zones
    return False


def check_circulation_day(
    vehicle: Vehicle,
    on: Optional[datetime] = None,
    *,
    clock: Clock = system_clock,
) -> CirculationDayResult:
    """Evaluate the odd/even plate rule for the calendar day of ``on``."""

    plate_number = vehicle.specs.plate_number
    validate_plate_number(plate_number)
    moment = local_time(on or clock())

    last_digit = int(_NON_DIGITS.sub("", plate_number)[-1])
    is_odd_plate = last_digit % 2 == 1
    is_odd_date = moment.day % 2 == 1

    exemption_reason = circulation_exemption(vehicle)
    is_exempt = exemption_reason is not None

    return CirculationDayResult(
        compliant=is_exempt or is_odd_plate == is_odd_date,
        plate_number=plate_number,
        date=moment,
        is_odd_plate=is_odd_plate,
        is_odd_date=is_odd_date,
        is_exempt=is_exempt,
        exemption_reason=exemption_reason,
    )


def alternative_time_windows(restricted: TimeWindow) -> list[TimeWindow]:
    """Suggest operating windows outside a restricted interval."""

    if is_overnight(restricted.start, restricted.end):
        return [TimeWindow(start=restricted.end, end=restricted.start)]

    candidates = [
        TimeWindow(start=settings.alternative_window_start, end=restricted.start),
        TimeWindow(start=restricted.end, end=settings.alternative_window_end),
    ]
    return [window for window in candidates if time_to_minutes(window.start) < time_to_minutes(window.end)]


def check_time_restriction(
    vehicle: Vehicle,
    zone_type: ZoneType,
    at: Optional[datetime] = None,
    *,
    clock: Clock = system_clock,
) -> TimeRestrictionResult:
    """Check the vehicle's time-of-day bans for ``zone_type`` at ``at``."""

    moment = local_time(at or clock())
    current_time = clock_string(moment)
    day = weekday_name(moment)
    exempt = has_time_restriction_exemption(vehicle)

    for restriction in vehicle.compliance.time_restrictions:
        if restriction.zone_type != zone_type or day not in restriction.days_applicable:
            continue
        window = restriction.restricted_hours
        if is_time_in_range(current_time, window.start, window.end) and not exempt:
            return TimeRestrictionResult(
                allowed=False,
                current_time=current_time,
                zone_type=zone_type,
                vehicle_type=vehicle.type,
                restricted_window=window,
                alternatives=alternative_time_windows(window),
            )

    return TimeRestrictionResult(
        allowed=True,
        current_time=current_time,
        zone_type=zone_type,
        vehicle_type=vehicle.type,
    )


def check_compliance(
    vehicle: Vehicle,
    zone_type: ZoneType,
    at: Optional[datetime] = None,
    *,
    clock: Clock = system_clock,
) -> ComplianceResult:
    """Run every rule and collect violations, warnings and remediations."""

    moment = at or clock()
    violations: list[str] = []
    warnings: list[str] = []
    suggested_actions: list[str] = []

    if not vehicle.compliance.pollution_certificate:
        violations.append("Missing valid pollution certificate")
        suggested_actions.append("Obtain valid pollution certificate")

    if not vehicle.compliance.permit_valid:
        violations.append("Invalid or expired permit")
        suggested_actions.append("Renew vehicle permit")

    circulation = check_circulation_day(vehicle, moment)
    if not circulation.compliant:
        violations.append(
            f"Odd-even rule violation: {circulation.plate_parity.capitalize()} plate on {circulation.date_parity} date"
        )
        suggested_actions.append("Use alternative vehicle or wait for compliant date")

    time_result = check_time_restriction(vehicle, zone_type, moment)
    if not time_result.allowed:
        violations.append(
            f"Time restriction violation: {vehicle.type.value} not allowed in {zone_type.value} zone "
            f"at {time_result.current_time}"
        )
        if time_result.alternatives:
            windows = ", ".join(f"{window.start}-{window.end}" for window in time_result.alternatives)
            suggested_actions.append(f"Alternative time windows: {windows}")

    if not has_zone_access(vehicle, zone_type):
        violations.append(f"No access privilege for {zone_type.value} zone")
        suggested_actions.append("Use vehicle with appropriate zone access")

    if vehicle.compliance.pollution_level == PollutionLevel.BS3 and zone_type == ZoneType.COMMERCIAL:
        warnings.append("BS3 vehicle may face restrictions in commercial zones")
        suggested_actions.append("Consider upgrading to BS6 vehicle")

    if vehicle.specs.vehicle_age > settings.max_vehicle_age_years:
        warnings.append(
            f"Vehicle age exceeds {settings.max_vehicle_age_years} years, may face additional restrictions"
        )
        suggested_actions.append("Consider vehicle replacement")

    if violations:
        logger.info(f"Vehicle {vehicle.id} non-compliant for {zone_type.value} zone: {len(violations)} violation(s)")

    return ComplianceResult(
        compliant=not violations,
        zone_type=zone_type,
        checked_at=moment,
        violations=violations,
        warnings=warnings,
        suggested_actions=suggested_actions,
        circulation=circulation,
        time_restriction=time_result,
    )


def update_location(vehicle: Vehicle, location: GeoLocation, *, clock: Clock = system_clock) -> None:
    validate_geo_location(location)
    now = clock()
    vehicle.location = replace(location, timestamp=now)
    vehicle.last_updated = now


def update_status(vehicle: Vehicle, status: VehicleStatus, *, clock: Clock = system_clock) -> None:
    if vehicle.status != status:
        logger.debug(f"Vehicle {vehicle.id} status {vehicle.status.value} -> {status.value}")
    vehicle.status = status
    vehicle.last_updated = clock()
