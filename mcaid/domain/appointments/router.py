"""Appointment router - FastAPI endpoints for appointment operations"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_role
from ...database import get_db
from ...models import Appointment, User
from ...notifications.dispatcher import NotificationDispatcher
from ...shared.recipients import get_dispatcher
from .schemas import AppointmentBook, AppointmentCreate, AppointmentResponse, AppointmentUpdate
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, dispatcher)


def to_response(a: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        motherId=a.mother_id,
        medicalPersonnelId=a.medical_personnel_id,
        appointmentDate=a.date,
        appointmentTime=a.time,
        type=a.type,
        status=a.status,
        meetingLink=a.meeting_link,
        location=a.location,
        reason=a.reason,
        notes=a.notes,
        created_at=a.created_at,
    )


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get all appointments the current user takes part in"""
    return [to_response(a) for a in service.get_appointments(current_user)]


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(require_role("medical")),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Schedule an appointment for a mother (medical personnel only)"""
    return to_response(service.create_appointment(data, current_user))


@router.post("/book", response_model=AppointmentResponse, status_code=201)
async def book_appointment(
    data: AppointmentBook,
    current_user: User = Depends(require_role("mother")),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment with medical personnel (mothers only)"""
    return to_response(service.book_appointment(data, current_user))


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Update an appointment; the other participant is notified"""
    return to_response(service.update_appointment(appointment_id, data, current_user))
