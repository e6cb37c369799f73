"""Vehicle request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import (
    AccessPrivileges,
    Capacity,
    ComplianceInfo,
    Dimensions,
    DriverInfo,
    FuelType,
    PollutionLevel,
    TimeRestriction,
    Vehicle,
    VehicleSpecs,
    VehicleStatus,
    VehicleSubType,
    VehicleType,
    ZoneType,
)
from .common import GeoLocationModel, TimeWindowModel


class DimensionsModel(BaseModel):
    length: float
    width: float
    height: float


class CapacityModel(BaseModel):
    weight: float = Field(..., description="Payload in kilograms.")
    volume: float = Field(..., description="Cargo volume in cubic metres.")
    max_dimensions: Optional[DimensionsModel] = None

    def to_domain(self) -> Capacity:
        dims = self.max_dimensions
        return Capacity(
            weight=self.weight,
            volume=self.volume,
            max_dimensions=Dimensions(**dims.model_dump()) if dims else None,
        )


class TimeRestrictionModel(BaseModel):
    zone_type: ZoneType
    restricted_hours: TimeWindowModel
    days_applicable: List[str] = Field(default_factory=list, description="Lowercase weekday names.")
    exceptions: List[str] = Field(default_factory=list, description="Exception tags, e.g. 'emergency'.")


class ComplianceInfoModel(BaseModel):
    pollution_certificate: bool
    pollution_level: PollutionLevel
    permit_valid: bool
    zone_restrictions: List[str] = Field(default_factory=list)
    time_restrictions: List[TimeRestrictionModel] = Field(default_factory=list)

    def to_domain(self) -> ComplianceInfo:
        return ComplianceInfo(
            pollution_certificate=self.pollution_certificate,
            pollution_level=self.pollution_level,
            permit_valid=self.permit_valid,
            zone_restrictions=list(self.zone_restrictions),
            time_restrictions=[
                TimeRestriction(
                    zone_type=item.zone_type,
                    restricted_hours=item.restricted_hours.to_domain(),
                    days_applicable=[day.lower() for day in item.days_applicable],
                    exceptions=list(item.exceptions),
                )
                for item in self.time_restrictions
            ],
        )


class VehicleSpecsModel(BaseModel):
    plate_number: str
    fuel_type: FuelType
    vehicle_age: int
    manufacturing_year: int
    registration_state: str = "DL"
    engine_capacity: Optional[float] = None


class AccessPrivilegesModel(BaseModel):
    residential_zones: bool = False
    commercial_zones: bool = False
    industrial_zones: bool = False
    restricted_hours: bool = False
    pollution_sensitive_zones: bool = False
    narrow_lanes: bool = False


class DriverInfoModel(BaseModel):
    id: str
    name: str
    license_number: str = ""
    working_hours: float = 0.0
    max_working_hours: float = 10.0
    contact_number: str = ""


class VehicleModel(BaseModel):
    id: str
    type: VehicleType
    sub_type: Optional[VehicleSubType] = None
    capacity: CapacityModel
    location: GeoLocationModel
    status: VehicleStatus = VehicleStatus.AVAILABLE
    compliance: ComplianceInfoModel
    specs: VehicleSpecsModel
    access_privileges: AccessPrivilegesModel = Field(default_factory=AccessPrivilegesModel)
    driver_info: Optional[DriverInfoModel] = None
    last_updated: Optional[datetime] = None

    def to_domain(self) -> Vehicle:
        return Vehicle(
            id=self.id,
            type=self.type,
            sub_type=self.sub_type,
            capacity=self.capacity.to_domain(),
            location=self.location.to_domain(),
            status=self.status,
            compliance=self.compliance.to_domain(),
            specs=VehicleSpecs(**self.specs.model_dump()),
            access_privileges=AccessPrivileges(**self.access_privileges.model_dump()),
            driver_info=DriverInfo(**self.driver_info.model_dump()) if self.driver_info else None,
            last_updated=self.last_updated,
        )


class VehicleStatusUpdate(BaseModel):
    status: VehicleStatus


class CirculationDayModel(BaseModel):
    compliant: bool
    plate_number: str
    date: datetime
    is_odd_plate: bool
    is_odd_date: bool
    plate_parity: str
    date_parity: str
    is_exempt: bool
    exemption_reason: Optional[str] = None


class TimeRestrictionCheckModel(BaseModel):
    allowed: bool
    current_time: str
    zone_type: ZoneType
    vehicle_type: VehicleType
    restricted_window: Optional[TimeWindowModel] = None
    alternatives: List[TimeWindowModel] = Field(default_factory=list)


class ComplianceCheckModel(BaseModel):
    compliant: bool
    zone_type: ZoneType
    checked_at: datetime
    violations: List[str]
    warnings: List[str]
    suggested_actions: List[str]
