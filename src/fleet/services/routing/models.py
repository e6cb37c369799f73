"""Routing analysis models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SuggestionType(str, Enum):
    REORDER_STOPS = "reorder_stops"
    ALTERNATIVE_ROUTE = "alternative_route"
    TIME_ADJUSTMENT = "time_adjustment"
    VEHICLE_CHANGE = "vehicle_change"


@dataclass(slots=True)
class EfficiencyMetrics:
    total_distance: float
    total_duration: float
    fuel_efficiency: float  # km per litre
    average_speed: float  # km/h
    stop_efficiency: float  # % of time spent driving
    compliance_score: float  # % of stops without violations


@dataclass(slots=True)
class EstimatedImprovement:
    time_saving_minutes: float = 0.0
    distance_saving_km: float = 0.0
    fuel_saving_liters: float = 0.0


@dataclass(slots=True)
class OptimizationSuggestion:
    type: SuggestionType
    description: str
    estimated_improvement: EstimatedImprovement
    implementation_complexity: str
