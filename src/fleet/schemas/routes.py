"""Route request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import (
    GeoArea,
    OptimizationMetadata,
    Route,
    RouteStatus,
    RouteStop,
    Severity,
    StopStatus,
    StopType,
    TrafficFactor,
    TrafficLevel,
    ZoneType,
)
from ..services.routing.models import SuggestionType
from .common import GeoLocationModel


class RouteStopModel(BaseModel):
    id: str
    sequence: int
    location: GeoLocationModel
    type: StopType
    estimated_arrival_time: datetime
    estimated_departure_time: datetime
    duration: float = Field(..., description="Minutes spent at the stop.")
    status: StopStatus = StopStatus.PENDING
    actual_arrival_time: Optional[datetime] = None
    actual_departure_time: Optional[datetime] = None
    address: Optional[str] = None
    delivery_id: Optional[str] = None
    instructions: List[str] = Field(default_factory=list)

    def to_domain(self) -> RouteStop:
        payload = self.model_dump(exclude={"location"})
        return RouteStop(location=self.location.to_domain(), **payload)


class TrafficFactorModel(BaseModel):
    segment_id: str
    from_location: GeoLocationModel
    to_location: GeoLocationModel
    traffic_level: TrafficLevel
    delay_minutes: float = Field(..., ge=0)
    alternative_available: bool = False
    timestamp: Optional[datetime] = None

    def to_domain(self) -> TrafficFactor:
        return TrafficFactor(
            segment_id=self.segment_id,
            from_location=self.from_location.to_domain(),
            to_location=self.to_location.to_domain(),
            traffic_level=self.traffic_level,
            delay_minutes=self.delay_minutes,
            alternative_available=self.alternative_available,
            timestamp=self.timestamp,
        )


class OptimizationMetadataModel(BaseModel):
    algorithm_used: str
    optimization_time_ms: float
    iterations: int
    objective_value: float
    constraints_applied: List[str] = Field(default_factory=list)
    fallback_used: bool = False
    version: str = "1.0"


class ComplianceViolationModel(BaseModel):
    type: str
    description: str
    severity: Severity
    location: GeoLocationModel
    timestamp: datetime
    penalty: Optional[float] = None
    route_stop_id: Optional[str] = None


class ComplianceWarningModel(BaseModel):
    type: str
    description: str
    recommendation: str
    location: GeoLocationModel
    timestamp: datetime


class ComplianceExemptionModel(BaseModel):
    type: str
    reason: str
    valid_until: datetime
    authorized_by: str


class RouteComplianceModel(BaseModel):
    is_compliant: bool
    validated_at: datetime
    violations: List[ComplianceViolationModel]
    warnings: List[ComplianceWarningModel]
    exemptions: List[ComplianceExemptionModel]


class RouteCreate(BaseModel):
    id: str
    vehicle_id: str
    stops: List[RouteStopModel]
    estimated_duration: float
    estimated_distance: float
    estimated_fuel_consumption: float
    actual_duration: Optional[float] = None
    actual_distance: Optional[float] = None
    actual_fuel_consumption: Optional[float] = None
    driver_id: Optional[str] = None
    hub_id: Optional[str] = None
    delivery_ids: List[str] = Field(default_factory=list)
    route_type: Optional[str] = None
    optimization_metadata: Optional[OptimizationMetadataModel] = None

    def to_domain(self, created_at: datetime) -> Route:
        metadata = self.optimization_metadata
        return Route(
            id=self.id,
            vehicle_id=self.vehicle_id,
            stops=[stop.to_domain() for stop in self.stops],
            estimated_duration=self.estimated_duration,
            estimated_distance=self.estimated_distance,
            estimated_fuel_consumption=self.estimated_fuel_consumption,
            actual_duration=self.actual_duration,
            actual_distance=self.actual_distance,
            actual_fuel_consumption=self.actual_fuel_consumption,
            driver_id=self.driver_id,
            hub_id=self.hub_id,
            delivery_ids=list(self.delivery_ids),
            route_type=self.route_type,
            optimization_metadata=OptimizationMetadata(**metadata.model_dump()) if metadata else None,
            created_at=created_at,
            updated_at=created_at,
        )


class RouteModel(RouteCreate):
    status: RouteStatus
    traffic_factors: List[TrafficFactorModel]
    compliance_validation: Optional[RouteComplianceModel] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class StopStatusUpdate(BaseModel):
    status: StopStatus
    at: Optional[datetime] = Field(default=None, description="Event time; defaults to now.")


class ZoneAreaModel(BaseModel):
    id: str
    name: str
    zone_type: ZoneType
    boundaries: List[tuple[float, float]] = Field(..., min_length=3, description="(lat, lon) polygon vertices.")

    def to_domain(self) -> GeoArea:
        return GeoArea(id=self.id, name=self.name, zone_type=self.zone_type, boundaries=list(self.boundaries))


class RouteComplianceRequest(BaseModel):
    zone_types: List[Optional[ZoneType]] = Field(
        default_factory=list,
        description="Zone type per stop, parallel to the stop list.",
    )
    areas: List[ZoneAreaModel] = Field(
        default_factory=list,
        description="Zone polygons used for stops without an explicit zone type.",
    )
    apply_vehicle_exemptions: bool = Field(
        default=False,
        description="Record curfew exemptions for vehicles holding emergency/essential exceptions.",
    )


class EfficiencyMetricsModel(BaseModel):
    total_distance: float
    total_duration: float
    fuel_efficiency: float
    average_speed: float
    stop_efficiency: float
    compliance_score: float
    total_traffic_delay: float


class EstimatedImprovementModel(BaseModel):
    time_saving_minutes: float
    distance_saving_km: float
    fuel_saving_liters: float


class OptimizationSuggestionModel(BaseModel):
    type: SuggestionType
    description: str
    estimated_improvement: EstimatedImprovementModel
    implementation_complexity: str
