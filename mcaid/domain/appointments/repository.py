"""Appointment repository - Database operations for appointments"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Appointment, User


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_user_with_role(db: Session, user_id: int, role: str) -> Optional[User]:
        """Get a user by ID, only if they hold the given role"""
        return db.query(User).filter(User.id == user_id, User.role == role).first()

    @staticmethod
    def get_appointments_for_user(db: Session, user_id: int) -> list[Appointment]:
        """Get all appointments the user takes part in"""
        return (
            db.query(Appointment)
            .filter(or_(Appointment.mother_id == user_id, Appointment.medical_personnel_id == user_id))
            .order_by(Appointment.date.asc(), Appointment.time.asc())
            .all()
        )

    @staticmethod
    def get_appointment_for_participant(
        db: Session, appointment_id: int, user_id: int
    ) -> Optional[Appointment]:
        """Get an appointment only if the user is the mother or the medical personnel on it"""
        return (
            db.query(Appointment)
            .filter(
                Appointment.id == appointment_id,
                or_(Appointment.mother_id == user_id, Appointment.medical_personnel_id == user_id),
            )
            .first()
        )

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        """Create a new appointment"""
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        """Update an appointment with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment
