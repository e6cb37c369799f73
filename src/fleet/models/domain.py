"""Domain models for vehicles, routes and hubs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class VehicleType(str, Enum):
    TRUCK = "truck"
    TEMPO = "tempo"
    VAN = "van"
    THREE_WHEELER = "three-wheeler"
    ELECTRIC = "electric"


class VehicleSubType(str, Enum):
    HEAVY_TRUCK = "heavy-truck"
    LIGHT_TRUCK = "light-truck"
    MINI_TRUCK = "mini-truck"
    TEMPO_TRAVELLER = "tempo-traveller"
    PICKUP_VAN = "pickup-van"
    AUTO_RICKSHAW = "auto-rickshaw"
    E_RICKSHAW = "e-rickshaw"


class VehicleStatus(str, Enum):
    AVAILABLE = "available"
    IN_TRANSIT = "in-transit"
    LOADING = "loading"
    MAINTENANCE = "maintenance"
    BREAKDOWN = "breakdown"
    RESERVED = "reserved"


class PollutionLevel(str, Enum):
    BS6 = "BS6"
    BS4 = "BS4"
    BS3 = "BS3"
    ELECTRIC = "electric"


class FuelType(str, Enum):
    DIESEL = "diesel"
    PETROL = "petrol"
    CNG = "cng"
    ELECTRIC = "electric"


class ZoneType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    MIXED = "mixed"


class RouteStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class StopType(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"
    HUB = "hub"
    WAYPOINT = "waypoint"


class StopStatus(str, Enum):
    PENDING = "pending"
    ARRIVED = "arrived"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class TrafficLevel(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    SEVERE = "severe"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class HubStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class HubType(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MICRO = "micro"


# Exception tags recognised on time restriction records.
EMERGENCY_EXCEPTION = "emergency"
ESSENTIAL_SERVICES_EXCEPTION = "essential_services"


@dataclass(slots=True)
class GeoLocation:
    latitude: float
    longitude: float
    timestamp: Optional[datetime] = None
    address: Optional[str] = None


@dataclass(slots=True)
class GeoArea:
    """Named polygon classified by zone type; coordinates are (lat, lon) pairs."""

    id: str
    name: str
    zone_type: ZoneType
    boundaries: List[tuple[float, float]]


@dataclass(slots=True)
class Dimensions:
    length: float
    width: float
    height: float


@dataclass(slots=True)
class Capacity:
    weight: float  # kg
    volume: float  # m3
    max_dimensions: Optional[Dimensions] = None


@dataclass(slots=True)
class TimeWindow:
    start: str  # HH:MM
    end: str  # HH:MM


@dataclass(slots=True)
class TimeRestriction:
    zone_type: ZoneType
    restricted_hours: TimeWindow
    days_applicable: List[str] = field(default_factory=list)
    exceptions: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ComplianceInfo:
    pollution_certificate: bool
    pollution_level: PollutionLevel
    permit_valid: bool
    zone_restrictions: List[str] = field(default_factory=list)
    time_restrictions: List[TimeRestriction] = field(default_factory=list)


@dataclass(slots=True)
class VehicleSpecs:
    plate_number: str
    fuel_type: FuelType
    vehicle_age: int
    manufacturing_year: int
    registration_state: str = "DL"
    engine_capacity: Optional[float] = None


@dataclass(slots=True)
class AccessPrivileges:
    residential_zones: bool = False
    commercial_zones: bool = False
    industrial_zones: bool = False
    restricted_hours: bool = False
    pollution_sensitive_zones: bool = False
    narrow_lanes: bool = False


@dataclass(slots=True)
class DriverInfo:
    id: str
    name: str
    license_number: str = ""
    working_hours: float = 0.0
    max_working_hours: float = 10.0
    contact_number: str = ""


@dataclass(slots=True)
class Vehicle:
    """A delivery vehicle together with its regulatory record."""

    id: str
    type: VehicleType
    sub_type: Optional[VehicleSubType]
    capacity: Capacity
    location: GeoLocation
    status: VehicleStatus
    compliance: ComplianceInfo
    specs: VehicleSpecs
    access_privileges: AccessPrivileges
    driver_info: Optional[DriverInfo] = None
    last_updated: Optional[datetime] = None


@dataclass(slots=True)
class RouteStop:
    id: str
    sequence: int
    location: GeoLocation
    type: StopType
    estimated_arrival_time: datetime
    estimated_departure_time: datetime
    duration: float  # minutes spent at the stop
    status: StopStatus = StopStatus.PENDING
    actual_arrival_time: Optional[datetime] = None
    actual_departure_time: Optional[datetime] = None
    address: Optional[str] = None
    delivery_id: Optional[str] = None
    instructions: List[str] = field(default_factory=list)


@dataclass(slots=True)
class TrafficFactor:
    segment_id: str
    from_location: GeoLocation
    to_location: GeoLocation
    traffic_level: TrafficLevel
    delay_minutes: float
    alternative_available: bool = False
    timestamp: Optional[datetime] = None


@dataclass(slots=True)
class OptimizationMetadata:
    """Result metadata handed over by the route construction step."""

    algorithm_used: str
    optimization_time_ms: float
    iterations: int
    objective_value: float
    constraints_applied: List[str] = field(default_factory=list)
    fallback_used: bool = False
    version: str = "1.0"


@dataclass(slots=True)
class ComplianceViolation:
    type: str
    description: str
    severity: Severity
    location: GeoLocation
    timestamp: datetime
    penalty: Optional[float] = None
    route_stop_id: Optional[str] = None


@dataclass(slots=True)
class ComplianceWarning:
    type: str
    description: str
    recommendation: str
    location: GeoLocation
    timestamp: datetime


@dataclass(slots=True)
class ComplianceExemption:
    type: str
    reason: str
    valid_until: datetime
    authorized_by: str


@dataclass(slots=True)
class RouteComplianceValidation:
    is_compliant: bool
    validated_at: datetime
    violations: List[ComplianceViolation] = field(default_factory=list)
    warnings: List[ComplianceWarning] = field(default_factory=list)
    exemptions: List[ComplianceExemption] = field(default_factory=list)


@dataclass(slots=True)
class Route:
    id: str
    vehicle_id: str
    stops: List[RouteStop]
    estimated_duration: float  # minutes
    estimated_distance: float  # km
    estimated_fuel_consumption: float  # litres
    status: RouteStatus = RouteStatus.PLANNED
    actual_duration: Optional[float] = None
    actual_distance: Optional[float] = None
    actual_fuel_consumption: Optional[float] = None
    traffic_factors: List[TrafficFactor] = field(default_factory=list)
    driver_id: Optional[str] = None
    hub_id: Optional[str] = None
    delivery_ids: List[str] = field(default_factory=list)
    route_type: Optional[str] = None
    optimization_metadata: Optional[OptimizationMetadata] = None
    compliance_validation: Optional[RouteComplianceValidation] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass(slots=True)
class HubCapacity:
    max_vehicles: int
    current_vehicles: int
    storage_area: float  # m2
    loading_bays: int
    buffer_vehicle_slots: int


@dataclass(slots=True)
class OperatingHours:
    open: str  # HH:MM
    close: str  # HH:MM
    timezone: str = "Asia/Kolkata"
    special_hours: Dict[str, TimeWindow] = field(default_factory=dict)


@dataclass(slots=True)
class HubContactInfo:
    manager_name: str
    phone: str
    email: str
    emergency_contact: str


@dataclass(slots=True)
class Hub:
    """A regional hub holding standby vehicles for breakdown substitution."""

    id: str
    name: str
    location: GeoLocation
    capacity: HubCapacity
    operating_hours: OperatingHours
    status: HubStatus = HubStatus.ACTIVE
    hub_type: HubType = HubType.PRIMARY
    buffer_vehicles: List[Vehicle] = field(default_factory=list)
    facilities: List[str] = field(default_factory=list)
    contact_info: Optional[HubContactInfo] = None
    storage_in_use: float = 0.0  # m2
    active_loading_bays: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
