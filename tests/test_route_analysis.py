from datetime import datetime, timedelta, timezone

import pytest

from src.fleet.models.domain import (
    AccessPrivileges,
    Capacity,
    ComplianceInfo,
    ComplianceViolation,
    FuelType,
    GeoArea,
    GeoLocation,
    PollutionLevel,
    Route,
    RouteComplianceValidation,
    RouteStop,
    Severity,
    StopType,
    TimeRestriction,
    TimeWindow,
    TrafficFactor,
    TrafficLevel,
    Vehicle,
    VehicleSpecs,
    VehicleStatus,
    VehicleType,
    ZoneType,
)
from src.fleet.config import settings
from src.fleet.services.routing import compute_efficiency, suggest_optimizations, validate_route_compliance
from src.fleet.services.routing.analysis import round_half_up
from src.fleet.services.routing.models import SuggestionType

VALIDATED_AT = datetime(2024, 1, 16, 8, 0)


def _stop(index: int, arrival: datetime, location: GeoLocation | None = None, duration: float = 10) -> RouteStop:
    return RouteStop(
        id=f"S{index}",
        sequence=index,
        location=location or GeoLocation(latitude=28.60 + index * 0.01, longitude=77.20),
        type=StopType.DELIVERY,
        estimated_arrival_time=arrival,
        estimated_departure_time=arrival + timedelta(minutes=duration),
        duration=duration,
    )


def _route(stops: list[RouteStop], **kwargs) -> Route:
    params = {
        "estimated_duration": 150,
        "estimated_distance": 30.5,
        "estimated_fuel_consumption": 4.2,
    }
    params.update(kwargs)
    return Route(id="R1", vehicle_id="V1", stops=stops, **params)


def _violation(severity: Severity) -> ComplianceViolation:
    return ComplianceViolation(
        type="time_restriction",
        description="test",
        severity=severity,
        location=GeoLocation(latitude=28.6, longitude=77.2),
        timestamp=VALIDATED_AT,
    )


def _emergency_vehicle() -> Vehicle:
    restriction = TimeRestriction(
        zone_type=ZoneType.RESIDENTIAL,
        restricted_hours=TimeWindow(start="23:00", end="07:00"),
        days_applicable=["tuesday"],
        exceptions=["emergency"],
    )
    return Vehicle(
        id="V1",
        type=VehicleType.TRUCK,
        sub_type=None,
        capacity=Capacity(weight=5000, volume=20),
        location=GeoLocation(latitude=28.6, longitude=77.2),
        status=VehicleStatus.IN_TRANSIT,
        compliance=ComplianceInfo(
            pollution_certificate=True,
            pollution_level=PollutionLevel.BS6,
            permit_valid=True,
            time_restrictions=[restriction],
        ),
        specs=VehicleSpecs(plate_number="DL01AB1234", fuel_type=FuelType.DIESEL, vehicle_age=2, manufacturing_year=2022),
        access_privileges=AccessPrivileges(residential_zones=True),
    )


def _factor(level: TrafficLevel, delay: float, location: GeoLocation | None = None) -> TrafficFactor:
    origin = location or GeoLocation(latitude=28.70, longitude=77.30)
    return TrafficFactor(
        segment_id=f"seg-{level.value}-{delay}",
        from_location=origin,
        to_location=GeoLocation(latitude=origin.latitude + 0.05, longitude=origin.longitude),
        traffic_level=level,
        delay_minutes=delay,
    )


def test_efficiency_uses_estimates_without_actuals():
    route = _route([])

    metrics = compute_efficiency(route)

    assert metrics.total_distance == 30.5
    assert metrics.total_duration == 150
    assert metrics.fuel_efficiency == 7.26
    assert metrics.average_speed == 12.2
    assert metrics.compliance_score == 100.0


def test_efficiency_with_actual_fuel_and_two_stops():
    stops = [
        _stop(1, VALIDATED_AT, duration=15),
        _stop(2, VALIDATED_AT + timedelta(hours=1), duration=15),
    ]
    route = _route(stops, estimated_fuel_consumption=5.0, actual_fuel_consumption=4.2)

    metrics = compute_efficiency(route)

    assert metrics.fuel_efficiency == 7.26
    assert metrics.stop_efficiency == 80.0


def test_efficiency_prefers_actuals_including_zero():
    route = _route([], actual_distance=0.0, actual_duration=60, actual_fuel_consumption=2.0)

    metrics = compute_efficiency(route)

    assert metrics.total_distance == 0.0
    assert metrics.total_duration == 60
    assert metrics.fuel_efficiency == 0.0


def test_efficiency_guards_division_by_zero():
    route = _route([], estimated_duration=0, estimated_fuel_consumption=0)

    metrics = compute_efficiency(route)

    assert metrics.fuel_efficiency == 0.0
    assert metrics.average_speed == 0.0
    assert metrics.stop_efficiency == 0.0


def test_compliance_score_counts_violations_against_stops():
    stops = [_stop(index, VALIDATED_AT + timedelta(hours=index)) for index in range(1, 6)]
    route = _route(stops)
    route.compliance_validation = RouteComplianceValidation(
        is_compliant=False, validated_at=VALIDATED_AT, violations=[_violation(Severity.HIGH)]
    )

    metrics = compute_efficiency(route)

    assert metrics.compliance_score == 80.0
    assert metrics.stop_efficiency == pytest.approx((150 - 50) / 150 * 100, abs=0.01)


def test_reorder_suggestion_needs_enough_stops_and_savings():
    stops = [_stop(index, VALIDATED_AT + timedelta(hours=index)) for index in range(1, 5)]

    suggestions = suggest_optimizations(_route(stops))

    assert [item.type for item in suggestions] == [SuggestionType.REORDER_STOPS]
    improvement = suggestions[0].estimated_improvement
    assert improvement.distance_saving_km == pytest.approx(4.58, abs=0.01)
    assert improvement.time_saving_minutes > 10

    assert suggest_optimizations(_route(stops[:3])) == []
    assert suggest_optimizations(_route(stops, estimated_distance=10)) == []


def test_traffic_and_violation_suggestions():
    route = _route([_stop(1, VALIDATED_AT)])
    route.traffic_factors = [
        _factor(TrafficLevel.HEAVY, 10),
        _factor(TrafficLevel.SEVERE, 20),
        _factor(TrafficLevel.LIGHT, 40),
    ]
    route.compliance_validation = RouteComplianceValidation(
        is_compliant=False, validated_at=VALIDATED_AT, violations=[_violation(Severity.CRITICAL)]
    )

    suggestions = {item.type: item for item in suggest_optimizations(route)}

    assert set(suggestions) == {SuggestionType.ALTERNATIVE_ROUTE, SuggestionType.TIME_ADJUSTMENT}
    alternative = suggestions[SuggestionType.ALTERNATIVE_ROUTE].estimated_improvement
    assert alternative.time_saving_minutes == 18.0
    assert alternative.fuel_saving_liters == 0.5


def test_low_severity_violations_do_not_trigger_time_adjustment():
    route = _route([_stop(1, VALIDATED_AT)])
    route.compliance_validation = RouteComplianceValidation(
        is_compliant=False, validated_at=VALIDATED_AT, violations=[_violation(Severity.MEDIUM)]
    )

    assert suggest_optimizations(route) == []


def test_residential_curfew_stops_are_violations():
    late = datetime(2024, 1, 16, 23, 30)
    early = datetime(2024, 1, 17, 6, 59)
    morning = datetime(2024, 1, 17, 7, 0)
    route = _route([_stop(1, late), _stop(2, early), _stop(3, morning), _stop(4, late)])

    snapshot = validate_route_compliance(
        route,
        [ZoneType.RESIDENTIAL, ZoneType.RESIDENTIAL, ZoneType.RESIDENTIAL, ZoneType.COMMERCIAL],
        clock=lambda: VALIDATED_AT,
    )

    assert snapshot.is_compliant is False
    assert [violation.route_stop_id for violation in snapshot.violations] == ["S1", "S2"]
    assert all(violation.severity == Severity.HIGH for violation in snapshot.violations)
    assert all(violation.penalty == 5000 for violation in snapshot.violations)
    assert route.compliance_validation is snapshot
    assert snapshot.validated_at == VALIDATED_AT


def test_stops_without_zone_fall_back_to_mixed():
    route = _route([_stop(1, datetime(2024, 1, 16, 23, 30))])

    snapshot = validate_route_compliance(route, [], clock=lambda: VALIDATED_AT)

    assert snapshot.is_compliant is True


def test_stops_are_classified_through_zone_areas():
    inside = GeoLocation(latitude=28.55, longitude=77.25)
    route = _route([_stop(1, datetime(2024, 1, 16, 23, 30), location=inside)])
    area = GeoArea(
        id="A1",
        name="Residential block",
        zone_type=ZoneType.RESIDENTIAL,
        boundaries=[(28.5, 77.2), (28.6, 77.2), (28.6, 77.3), (28.5, 77.3)],
    )

    snapshot = validate_route_compliance(route, [None], areas=[area], clock=lambda: VALIDATED_AT)

    assert [violation.route_stop_id for violation in snapshot.violations] == ["S1"]


def test_severe_traffic_nearby_adds_warning():
    stop_location = GeoLocation(latitude=28.6100, longitude=77.2000)
    route = _route([_stop(1, VALIDATED_AT, location=stop_location)])
    route.traffic_factors = [
        _factor(TrafficLevel.SEVERE, 15, location=GeoLocation(latitude=28.6150, longitude=77.2000)),
        _factor(TrafficLevel.HEAVY, 30, location=stop_location),
    ]

    snapshot = validate_route_compliance(route, [ZoneType.COMMERCIAL], clock=lambda: VALIDATED_AT)

    assert snapshot.is_compliant is True
    assert [warning.type for warning in snapshot.warnings] == ["traffic_delay"]


def test_exempt_vehicle_records_exemption_instead_of_violation():
    vehicle = _emergency_vehicle()
    route = _route([_stop(1, datetime(2024, 1, 16, 23, 30))])

    snapshot = validate_route_compliance(route, [ZoneType.RESIDENTIAL], vehicle=vehicle, clock=lambda: VALIDATED_AT)

    assert snapshot.is_compliant is True
    assert snapshot.violations == []
    assert len(snapshot.exemptions) == 1
    assert snapshot.exemptions[0].valid_until.date() == datetime(2024, 1, 16).date()


def test_exemptions_ignored_when_vehicle_not_supplied():
    route = _route([_stop(1, datetime(2024, 1, 16, 23, 30))])

    snapshot = validate_route_compliance(route, [ZoneType.RESIDENTIAL], clock=lambda: VALIDATED_AT)

    assert len(snapshot.violations) == 1
    assert snapshot.exemptions == []


def test_curfew_applies_to_aware_arrival_times():
    # 18:00 UTC is 23:30 in Asia/Kolkata.
    route = _route([_stop(1, datetime(2024, 1, 16, 18, 0, tzinfo=timezone.utc))])

    snapshot = validate_route_compliance(route, [ZoneType.RESIDENTIAL], clock=lambda: VALIDATED_AT)

    assert [violation.route_stop_id for violation in snapshot.violations] == ["S1"]


def test_reorder_savings_round_halves_up(monkeypatch):
    monkeypatch.setattr(settings, "reorder_savings_ratio", 0.5)
    monkeypatch.setattr(settings, "reorder_minutes_per_km", 1.0)
    stops = [_stop(index, VALIDATED_AT + timedelta(hours=index)) for index in range(1, 5)]

    suggestions = suggest_optimizations(_route(stops, estimated_distance=21))

    assert [item.type for item in suggestions] == [SuggestionType.REORDER_STOPS]
    assert suggestions[0].estimated_improvement.time_saving_minutes == 11


def test_round_half_up():
    assert [round_half_up(value) for value in (0.5, 1.5, 2.5, 10.5, 10.49)] == [1, 2, 3, 11, 10]
