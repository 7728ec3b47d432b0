from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from models.user import DriverStatus, UserRole


class UserCreate(BaseModel):
    name: str = Field(...)
    email: EmailStr = Field(...)
    number: str = Field(...)
    password: str = Field(...)
    role: UserRole = UserRole.PASSENGER
    status: DriverStatus = DriverStatus.OFFLINE
    profile_picture_url: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    number: Optional[str] = None
    role: Optional[UserRole] = None
    status: Optional[DriverStatus] = None
    profile_picture_url: Optional[str] = None


class UserWhere(BaseModel):
    """Unique lookup key for a user: exactly one of id, email or number."""
    id: Optional[int] = None
    email: Optional[EmailStr] = None
    number: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one_key(self):
        given = [k for k in ("id", "email", "number") if getattr(self, k) is not None]
        if len(given) != 1:
            raise ValueError("Provide exactly one of id, email or number")
        return self
