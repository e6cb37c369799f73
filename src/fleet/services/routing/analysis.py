"""Route efficiency metrics and improvement heuristics."""

from __future__ import annotations

import math
from typing import Optional

from ...config import settings
from ...models.domain import Route, Severity, TrafficLevel
from .models import EfficiencyMetrics, EstimatedImprovement, OptimizationSuggestion, SuggestionType

_CONGESTED = (TrafficLevel.HEAVY, TrafficLevel.SEVERE)
_SERIOUS = (Severity.HIGH, Severity.CRITICAL)


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, with halves going up."""

    return math.floor(value + 0.5)


def _prefer_actual(actual: Optional[float], estimate: float) -> float:
    return actual if actual is not None else estimate


def compute_efficiency(route: Route) -> EfficiencyMetrics:
    total_distance = _prefer_actual(route.actual_distance, route.estimated_distance)
    total_duration = _prefer_actual(route.actual_duration, route.estimated_duration)
    fuel_consumed = _prefer_actual(route.actual_fuel_consumption, route.estimated_fuel_consumption)

    fuel_efficiency = total_distance / fuel_consumed if fuel_consumed > 0 else 0.0
    average_speed = (total_distance / total_duration) * 60 if total_duration > 0 else 0.0

    stop_time = sum(stop.duration for stop in route.stops)
    stop_efficiency = (total_duration - stop_time) / total_duration * 100 if total_duration > 0 else 0.0

    violation_count = len(route.compliance_validation.violations) if route.compliance_validation else 0
    total_stops = len(route.stops)
    compliance_score = (total_stops - violation_count) / total_stops * 100 if total_stops else 100.0

    return EfficiencyMetrics(
        total_distance=round(total_distance, 2),
        total_duration=round_half_up(total_duration),
        fuel_efficiency=round(fuel_efficiency, 2),
        average_speed=round(average_speed, 2),
        stop_efficiency=round(stop_efficiency, 2),
        compliance_score=round(compliance_score, 2),
    )


def estimate_reordering_savings(route: Route) -> EstimatedImprovement:
    saved_km = route.estimated_distance * settings.reorder_savings_ratio
    return EstimatedImprovement(
        time_saving_minutes=round_half_up(saved_km * settings.reorder_minutes_per_km),
        distance_saving_km=round(saved_km, 2),
        fuel_saving_liters=round(saved_km * settings.reorder_litres_per_km, 2),
    )


def suggest_optimizations(route: Route) -> list[OptimizationSuggestion]:
    """Independent heuristics; any subset may fire."""

    suggestions: list[OptimizationSuggestion] = []

    if len(route.stops) > settings.reorder_min_stops:
        savings = estimate_reordering_savings(route)
        if savings.time_saving_minutes > settings.reorder_min_time_saving_minutes:
            suggestions.append(
                OptimizationSuggestion(
                    type=SuggestionType.REORDER_STOPS,
                    description="Reorder stops to minimize travel distance and time",
                    estimated_improvement=savings,
                    implementation_complexity="medium",
                )
            )

    congested = [factor for factor in route.traffic_factors if factor.traffic_level in _CONGESTED]
    if congested:
        delay = sum(factor.delay_minutes for factor in congested)
        suggestions.append(
            OptimizationSuggestion(
                type=SuggestionType.ALTERNATIVE_ROUTE,
                description="Use alternative routes to avoid heavy traffic",
                estimated_improvement=EstimatedImprovement(
                    time_saving_minutes=round(delay * settings.traffic_delay_recovery_ratio, 2),
                    fuel_saving_liters=settings.alternative_route_fuel_saving_litres,
                ),
                implementation_complexity="low",
            )
        )

    violations = route.compliance_validation.violations if route.compliance_validation else []
    if any(violation.severity in _SERIOUS for violation in violations):
        suggestions.append(
            OptimizationSuggestion(
                type=SuggestionType.TIME_ADJUSTMENT,
                description="Adjust departure time to avoid compliance violations",
                estimated_improvement=EstimatedImprovement(),
                implementation_complexity="low",
            )
        )

    return suggestions
