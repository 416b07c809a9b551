"""Location report schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LocationCreate(BaseModel):
    """Coordinate report submitted by a tracked tourist's device."""

    model_config = ConfigDict(populate_by_name=True)

    tourist_id: int | None = Field(default=None, alias="touristId")
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    timestamp: datetime | None = Field(default=None, description="Event time on the device")


class LocationRecord(BaseModel):
    """Stored location report."""

    id: int
    tourist_id: int
    latitude: float
    longitude: float
    timestamp: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


ZoneStatus = Literal["inside", "outside", "unknown"]


class LocationResponse(BaseModel):
    """Location ingest response."""

    message: str
    location: LocationRecord
    zone_status: ZoneStatus
