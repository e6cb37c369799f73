"""Shared request/response fragments."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models.domain import GeoLocation, TimeWindow


class GeoLocationModel(BaseModel):
    latitude: float
    longitude: float
    timestamp: Optional[datetime] = None
    address: Optional[str] = None

    def to_domain(self) -> GeoLocation:
        return GeoLocation(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=self.timestamp,
            address=self.address,
        )


class TimeWindowModel(BaseModel):
    start: str = Field(..., description="Window start as HH:MM.")
    end: str = Field(..., description="Window end as HH:MM.")

    def to_domain(self) -> TimeWindow:
        return TimeWindow(start=self.start, end=self.end)


class OperationResult(BaseModel):
    success: bool
    message: str
