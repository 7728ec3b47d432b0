from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
from core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BusStatus(str, Enum):
    IN_TRANSIT = "IN_TRANSIT"
    STOPPED = "STOPPED"
    MAINTENANCE = "MAINTENANCE"
    ACCIDENT = "ACCIDENT"
    BREAKDOWN = "BREAKDOWN"


class Bus(Base):
    __tablename__ = "buses"
    id = Column(Integer, primary_key=True, index=True)
    nia = Column(String, unique=True, nullable=False)  # BUS-0001, assigned once at creation
    plate = Column(String, unique=True, nullable=True)
    model = Column(String, nullable=True)
    capacity = Column(Integer, nullable=True)
    status = Column(SAEnum(BusStatus, name="bus_status"), nullable=False, default=BusStatus.STOPPED)
    driver_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=True)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    # Python side so ordering by last modification keeps sub-second precision
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    driver = relationship("User", back_populates="bus")
    route = relationship("Route", back_populates="buses")
