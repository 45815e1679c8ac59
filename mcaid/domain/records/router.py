"""Medical records router - patient records, prescriptions and health notes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_role
from ...database import get_db
from ...models import HealthNote, Medication, User
from ...notifications.dispatcher import NotificationDispatcher
from ...shared.recipients import get_dispatcher
from .schemas import (
    HealthNoteCreate,
    HealthNoteResponse,
    MedicationCreate,
    MedicationResponse,
    PatientDetailResponse,
)
from .service import RecordsService

router = APIRouter(prefix="/patients", tags=["Medical Records"])


def get_records_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> RecordsService:
    """Dependency injection for RecordsService"""
    return RecordsService(db, dispatcher)


def medication_response(m: Medication) -> MedicationResponse:
    return MedicationResponse(
        id=m.id,
        motherId=m.mother_id,
        prescribedById=m.prescribed_by_id,
        name=m.name,
        dosage=m.dosage,
        frequency=m.frequency,
        startDate=m.start_date,
        endDate=m.end_date,
        instructions=m.instructions,
        created_at=m.created_at,
    )


def note_response(note: HealthNote) -> HealthNoteResponse:
    return HealthNoteResponse(
        id=note.id,
        motherId=note.mother_id,
        authorId=note.author_id,
        content=note.content,
        alertType=note.alert_type,
        created_at=note.created_at,
    )


@router.get("/{mother_id}", response_model=PatientDetailResponse)
async def get_patient(
    mother_id: int,
    current_user: User = Depends(require_role("medical")),
    service: RecordsService = Depends(get_records_service),
):
    """View a patient's record (medical personnel with an appointment only)"""
    mother, medications, notes = service.get_patient(mother_id, current_user)
    return PatientDetailResponse(
        id=mother.id,
        firstName=mother.first_name,
        lastName=mother.last_name,
        email=mother.email,
        phone=mother.phone,
        medications=[medication_response(m) for m in medications],
        notes=[note_response(n) for n in notes],
    )


@router.get("/{mother_id}/medications", response_model=list[MedicationResponse])
async def get_medications(
    mother_id: int,
    current_user: User = Depends(get_current_user),
    service: RecordsService = Depends(get_records_service),
):
    return [medication_response(m) for m in service.get_medications(mother_id, current_user)]


@router.post("/{mother_id}/medications", response_model=MedicationResponse, status_code=201)
async def prescribe_medication(
    mother_id: int,
    data: MedicationCreate,
    current_user: User = Depends(require_role("medical")),
    service: RecordsService = Depends(get_records_service),
):
    """Prescribe a medication to a patient (medical personnel only)"""
    return medication_response(service.prescribe_medication(mother_id, data, current_user))


@router.post("/{mother_id}/notes", response_model=HealthNoteResponse, status_code=201)
async def add_health_note(
    mother_id: int,
    data: HealthNoteCreate,
    current_user: User = Depends(require_role("medical")),
    service: RecordsService = Depends(get_records_service),
):
    """Add a health note; every note pushes to the patient, alertType also raises an alert"""
    return note_response(service.add_health_note(mother_id, data, current_user))
