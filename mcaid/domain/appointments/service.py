"""Appointment service - Business logic for scheduling, booking and rescheduling"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, User
from ...notifications.dispatcher import NotificationDispatcher
from ...notifications.events import EventKind
from ...shared.recipients import notify_user
from .repository import AppointmentRepository
from .schemas import AppointmentBook, AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session, dispatcher: NotificationDispatcher):
        self.db = db
        self.dispatcher = dispatcher
        self.repo = AppointmentRepository()

    def get_appointments(self, user: User) -> list[Appointment]:
        """Get all appointments for the current user"""
        return self.repo.get_appointments_for_user(self.db, user.id)

    def create_appointment(self, data: AppointmentCreate, user: User) -> Appointment:
        """Medical personnel schedules an appointment; the mother is notified"""
        mother = self.repo.get_user_with_role(self.db, data.motherId, "mother")
        if not mother:
            raise HTTPException(status_code=404, detail="Patient not found")

        logger.info(f"📅 Medical user {user.id} scheduling appointment for mother {mother.id}")
        appointment = self.repo.create_appointment(
            self.db,
            mother_id=mother.id,
            medical_personnel_id=user.id,
            date=data.appointmentDate,
            time=data.appointmentTime,
            type=data.type,
            status="scheduled",
            meeting_link=data.meetingLink,
            location=data.location,
            reason=data.reason,
            notes=data.notes,
        )

        self._notify(EventKind.APPOINTMENT_CREATED, appointment, mother, initiated_by="medical")
        return appointment

    def book_appointment(self, data: AppointmentBook, user: User) -> Appointment:
        """Mother books an appointment; the medical personnel is notified"""
        personnel = self.repo.get_user_with_role(self.db, data.medicalPersonnelId, "medical")
        if not personnel:
            raise HTTPException(status_code=404, detail="Medical personnel not found")

        logger.info(f"📅 Mother {user.id} booking appointment with medical user {personnel.id}")
        appointment = self.repo.create_appointment(
            self.db,
            mother_id=user.id,
            medical_personnel_id=personnel.id,
            date=data.appointmentDate,
            time=data.appointmentTime,
            type=data.type,
            status="scheduled",
            reason=data.reason,
            notes=data.notes,
        )

        self._notify(EventKind.APPOINTMENT_CREATED, appointment, personnel, initiated_by="mother")
        return appointment

    def update_appointment(self, appointment_id: int, data: AppointmentUpdate, user: User) -> Appointment:
        """Either participant updates an appointment; the other participant is notified"""
        appointment = self.repo.get_appointment_for_participant(self.db, appointment_id, user.id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")

        updates = {
            "date": data.appointmentDate,
            "time": data.appointmentTime,
            "type": data.type,
            "status": data.status,
            "meeting_link": data.meetingLink,
            "location": data.location,
            "notes": data.notes,
        }
        if not any(value is not None for value in updates.values()):
            raise HTTPException(status_code=400, detail="No fields to update")

        appointment = self.repo.update_appointment(self.db, appointment, **updates)

        if user.id == appointment.mother_id:
            self._notify(
                EventKind.APPOINTMENT_UPDATED, appointment, appointment.medical_personnel, initiated_by="mother"
            )
        else:
            self._notify(EventKind.APPOINTMENT_UPDATED, appointment, appointment.mother, initiated_by="medical")
        return appointment

    def _notify(self, kind: EventKind, appointment: Appointment, recipient: User, initiated_by: str) -> None:
        notify_user(
            self.dispatcher,
            kind,
            recipient,
            appointment_id=appointment.id,
            doctor_name=appointment.medical_personnel.full_name,
            patient_name=appointment.mother.full_name,
            date=appointment.date,
            time=appointment.time,
            appointment_type=appointment.type,
            meeting_link=appointment.meeting_link,
            notes=appointment.notes,
            location=appointment.location,
            status=appointment.status,
            initiated_by=initiated_by,
        )
