from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Integer, String, DateTime, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db import Base
from models.bus import utcnow

if TYPE_CHECKING:
    from models.bus import Bus


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    DRIVER = "DRIVER"
    PASSENGER = "PASSENGER"


class DriverStatus(str, Enum):
    """Operational status of a driver, consulted when filtering buses"""
    AVAILABLE = "AVAILABLE"
    IN_TRANSIT = "IN_TRANSIT"
    OFFLINE = "OFFLINE"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        index=True
    )

    name: Mapped[str] = mapped_column(
        String,
        nullable=False
    )

    email: Mapped[str] = mapped_column(
        String,
        unique=True,
        index=True
    )

    number: Mapped[str] = mapped_column(
        String,
        unique=True,
        index=True
    )  # phone number

    password: Mapped[str] = mapped_column(
        String,
        nullable=False
    )  # bcrypt hash

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role"),
        default=UserRole.PASSENGER
    )

    status: Mapped[DriverStatus] = mapped_column(
        SAEnum(DriverStatus, name="driver_status"),
        default=DriverStatus.OFFLINE
    )

    profile_picture_url: Mapped[str | None] = mapped_column(
        String,
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    bus: Mapped[Optional[Bus]] = relationship(
        back_populates="driver",
        uselist=False
    )
