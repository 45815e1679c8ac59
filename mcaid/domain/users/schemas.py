"""User domain schemas - profiles and notification preferences"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import USER_ROLES
from ...shared.validators import validate_email, validate_phone


class UserCreate(BaseModel):
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    role: str = "mother"
    specialization: Optional[str] = None
    storeName: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        if v not in USER_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(USER_ROLES)}")
        return v


class UserResponse(BaseModel):
    id: int
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None


class NotificationPreferencesResponse(BaseModel):
    email: bool
    sms: bool
    push: bool
    phone: Optional[str] = None
    pushToken: Optional[str] = None


class NotificationPreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their current value"""

    email: Optional[bool] = None
    sms: Optional[bool] = None
    push: Optional[bool] = None
    phone: Optional[str] = None
    pushToken: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v:
            return validate_phone(v)
        return v
