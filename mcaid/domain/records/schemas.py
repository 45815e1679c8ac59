"""Medical records schemas - medications and health notes"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator


class MedicationCreate(BaseModel):
    """Schema for prescribing a medication"""

    name: str
    dosage: str
    frequency: str
    startDate: date
    endDate: Optional[date] = None
    instructions: Optional[str] = None

    @field_validator("name", "dosage", "frequency")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def end_after_start(self):
        if self.endDate and self.endDate < self.startDate:
            raise ValueError("End date cannot be before start date")
        return self


class MedicationResponse(BaseModel):
    id: int
    motherId: int
    prescribedById: int
    name: str
    dosage: str
    frequency: str
    startDate: date
    endDate: Optional[date] = None
    instructions: Optional[str] = None
    created_at: Optional[datetime] = None


class HealthNoteCreate(BaseModel):
    """Schema for adding a note; alertType turns the note into a health alert"""

    content: str
    alertType: Optional[str] = None

    @field_validator("content")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Note content cannot be empty")
        return v.strip()


class HealthNoteResponse(BaseModel):
    id: int
    motherId: int
    authorId: int
    content: str
    alertType: Optional[str] = None
    created_at: Optional[datetime] = None


class PatientDetailResponse(BaseModel):
    """A patient's record as seen by medical personnel who treat her"""

    id: int
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    medications: list[MedicationResponse] = []
    notes: list[HealthNoteResponse] = []
