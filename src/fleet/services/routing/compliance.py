"""Route-level compliance snapshot."""

from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import (
    ComplianceExemption,
    ComplianceViolation,
    ComplianceWarning,
    GeoArea,
    Route,
    RouteComplianceValidation,
    RouteStop,
    Severity,
    TrafficLevel,
    Vehicle,
    ZoneType,
)
from ..compliance.service import has_time_restriction_exemption
from ..geospatial import is_location_near, resolve_zone_type
from ..timewindows import Clock, local_time, system_clock

logger = logging.getLogger(__name__)


def _in_residential_curfew(arrival: datetime) -> bool:
    hour = arrival.hour
    start, end = settings.residential_curfew_start_hour, settings.residential_curfew_end_hour
    if start > end:
        return hour >= start or hour < end
    return start <= hour < end


def _zone_for_stop(
    index: int,
    stop: RouteStop,
    zone_types: Sequence[ZoneType],
    areas: Sequence[GeoArea],
) -> ZoneType:
    if index < len(zone_types) and zone_types[index] is not None:
        return zone_types[index]
    return resolve_zone_type(stop.location, areas) or ZoneType.MIXED


def validate_route_compliance(
    route: Route,
    zone_types: Sequence[ZoneType],
    *,
    areas: Sequence[GeoArea] = (),
    vehicle: Optional[Vehicle] = None,
    clock: Clock = system_clock,
) -> RouteComplianceValidation:
    """Re-derive the route's compliance snapshot and store it on the route.

    ``zone_types`` is parallel to ``route.stops``. Stops without an entry are
    classified through ``areas`` and fall back to a mixed zone.
    """

    violations: list[ComplianceViolation] = []
    warnings: list[ComplianceWarning] = []
    exemptions: list[ComplianceExemption] = []
    exempt_vehicle = vehicle is not None and has_time_restriction_exemption(vehicle)

    for index, stop in enumerate(route.stops):
        zone_type = _zone_for_stop(index, stop, zone_types, areas)
        arrival = local_time(stop.estimated_arrival_time)

        if zone_type == ZoneType.RESIDENTIAL and _in_residential_curfew(arrival):
            if exempt_vehicle:
                exemptions.append(
                    ComplianceExemption(
                        type="time_restriction",
                        reason=f"Emergency/essential services exception for stop {stop.id}",
                        valid_until=datetime.combine(arrival.date(), time.max, tzinfo=arrival.tzinfo),
                        authorized_by=f"vehicle {vehicle.id} compliance record",
                    )
                )
            else:
                violations.append(
                    ComplianceViolation(
                        type="time_restriction",
                        description="Vehicle arrival during restricted hours in residential zone",
                        severity=Severity.HIGH,
                        penalty=settings.residential_curfew_penalty,
                        location=stop.location,
                        timestamp=arrival,
                        route_stop_id=stop.id,
                    )
                )

        severe_nearby = any(
            factor.traffic_level == TrafficLevel.SEVERE
            and is_location_near(factor.from_location, stop.location, settings.traffic_proximity_km)
            for factor in route.traffic_factors
        )
        if severe_nearby:
            warnings.append(
                ComplianceWarning(
                    type="traffic_delay",
                    description="Severe traffic expected at this location",
                    recommendation="Consider alternative route or timing",
                    location=stop.location,
                    timestamp=arrival,
                )
            )

    now = clock()
    snapshot = RouteComplianceValidation(
        is_compliant=not violations,
        validated_at=now,
        violations=violations,
        warnings=warnings,
        exemptions=exemptions,
    )
    route.compliance_validation = snapshot
    route.updated_at = now
    logger.info(
        f"Route {route.id} compliance: {len(violations)} violation(s), {len(warnings)} warning(s), "
        f"{len(exemptions)} exemption(s)"
    )
    return snapshot
