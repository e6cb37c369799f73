"""Hub request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.domain import (
    Hub,
    HubCapacity,
    HubContactInfo,
    HubStatus,
    HubType,
    OperatingHours,
    VehicleType,
)
from .common import GeoLocationModel, TimeWindowModel
from .vehicles import VehicleModel


class HubCapacityModel(BaseModel):
    max_vehicles: int
    current_vehicles: int = 0
    storage_area: float
    loading_bays: int
    buffer_vehicle_slots: int


class OperatingHoursModel(BaseModel):
    open: str = Field(..., description="Opening time as HH:MM.")
    close: str = Field(..., description="Closing time as HH:MM.")
    timezone: str = "Asia/Kolkata"
    special_hours: Dict[str, TimeWindowModel] = Field(
        default_factory=dict,
        description="Per-weekday overrides keyed by lowercase weekday name.",
    )


class HubContactInfoModel(BaseModel):
    manager_name: str
    phone: str
    email: str
    emergency_contact: str


class HubCreate(BaseModel):
    id: str
    name: str
    location: GeoLocationModel
    capacity: HubCapacityModel
    operating_hours: OperatingHoursModel
    status: HubStatus = HubStatus.ACTIVE
    hub_type: HubType = HubType.PRIMARY
    buffer_vehicle_ids: List[str] = Field(default_factory=list, description="Registered vehicles to hold in the buffer.")
    facilities: List[str] = Field(default_factory=list)
    contact_info: Optional[HubContactInfoModel] = None
    storage_in_use: float = Field(default=0.0, ge=0)
    active_loading_bays: int = Field(default=0, ge=0)

    def to_domain(self, created_at: datetime) -> Hub:
        hours = self.operating_hours
        return Hub(
            id=self.id,
            name=self.name,
            location=self.location.to_domain(),
            capacity=HubCapacity(**self.capacity.model_dump()),
            operating_hours=OperatingHours(
                open=hours.open,
                close=hours.close,
                timezone=hours.timezone,
                special_hours={day.lower(): window.to_domain() for day, window in hours.special_hours.items()},
            ),
            status=self.status,
            hub_type=self.hub_type,
            facilities=list(self.facilities),
            contact_info=HubContactInfo(**self.contact_info.model_dump()) if self.contact_info else None,
            storage_in_use=self.storage_in_use,
            active_loading_bays=self.active_loading_bays,
            created_at=created_at,
            updated_at=created_at,
        )


class HubModel(BaseModel):
    id: str
    name: str
    location: GeoLocationModel
    capacity: HubCapacityModel
    operating_hours: OperatingHoursModel
    status: HubStatus
    hub_type: HubType
    buffer_vehicles: List[VehicleModel]
    facilities: List[str]
    contact_info: Optional[HubContactInfoModel] = None
    storage_in_use: float
    active_loading_bays: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BufferVehicleRequest(BaseModel):
    vehicle_id: str


class CapacityRequirementModel(BaseModel):
    weight: float = Field(..., gt=0)
    volume: float = Field(..., gt=0)


class AllocationRequest(BaseModel):
    vehicle_type: Optional[VehicleType] = None
    min_capacity: Optional[CapacityRequirementModel] = None
    route_id: Optional[str] = Field(
        default=None,
        description="Route whose broken-down vehicle is being replaced.",
    )


class AllocationResponse(BaseModel):
    success: bool
    message: str
    vehicle: Optional[VehicleModel] = None
    alternatives: List[VehicleModel] = Field(default_factory=list)


class CapacityStatusModel(BaseModel):
    vehicle_utilization: float
    storage_utilization: float
    loading_bay_utilization: float
    buffer_vehicle_availability: int
    is_at_capacity: bool
    recommended_actions: List[str]


class OperatingHoursStatusModel(BaseModel):
    is_open: bool
    current_time: str
    open_time: str
    close_time: str
    minutes_until_close: Optional[int] = None
    next_open_time: Optional[str] = None
