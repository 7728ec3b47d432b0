from typing import Optional

from pydantic import BaseModel, Field

from models.bus import BusStatus


class BusCreate(BaseModel):
    plate: Optional[str] = None
    model: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0, description="Seated + standing passengers")
    status: BusStatus = BusStatus.STOPPED
    driver_id: Optional[int] = None
    route_id: Optional[int] = None


class BusUpdate(BaseModel):
    plate: Optional[str] = None
    model: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0)
    status: Optional[BusStatus] = None
    driver_id: Optional[int] = None
    route_id: Optional[int] = None


class BusDetailsUpdate(BaseModel):
    """Fields a driver can edit from the manage screen of the driver app."""
    plate: Optional[str] = None
    model: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0)
