"""Appointment domain schemas - Pydantic models for validation"""

import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

APPOINTMENT_TYPES = ("virtual", "in-person")
APPOINTMENT_STATUSES = ("scheduled", "confirmed", "completed", "cancelled", "rescheduled")

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time(v: Optional[str]) -> Optional[str]:
    if v is not None and not TIME_PATTERN.match(v.strip()):
        raise ValueError("Time must be in HH:MM format")
    return v.strip() if v else v


def _check_type(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in APPOINTMENT_TYPES:
        raise ValueError(f"Type must be one of: {', '.join(APPOINTMENT_TYPES)}")
    return v


class AppointmentCreate(BaseModel):
    """Schema for medical personnel scheduling an appointment for a mother"""

    motherId: int
    appointmentDate: date
    appointmentTime: str
    type: str = "virtual"
    meetingLink: Optional[str] = None
    location: Optional[str] = None
    reason: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointmentTime")
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)


class AppointmentBook(BaseModel):
    """Schema for a mother booking an appointment with medical personnel"""

    medicalPersonnelId: int
    appointmentDate: date
    appointmentTime: str
    type: str = "virtual"
    reason: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointmentTime")
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)


class AppointmentUpdate(BaseModel):
    """Schema for updating an existing appointment"""

    appointmentDate: Optional[date] = None
    appointmentTime: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    meetingLink: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointmentTime")
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in APPOINTMENT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(APPOINTMENT_STATUSES)}")
        return v


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: int
    motherId: int
    medicalPersonnelId: int
    appointmentDate: date
    appointmentTime: str
    type: str
    status: str
    meetingLink: Optional[str] = None
    location: Optional[str] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
