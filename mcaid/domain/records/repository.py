"""Medical records repository - Database operations for medications and health notes"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, HealthNote, Medication, User


class RecordsRepository:
    """Repository for medical record database operations"""

    @staticmethod
    def get_mother(db: Session, mother_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == mother_id, User.role == "mother").first()

    @staticmethod
    def has_appointment(db: Session, mother_id: int, medical_personnel_id: int) -> bool:
        return (
            db.query(Appointment.id)
            .filter(
                Appointment.mother_id == mother_id,
                Appointment.medical_personnel_id == medical_personnel_id,
            )
            .first()
            is not None
        )

    @staticmethod
    def get_health_notes(db: Session, mother_id: int) -> list[HealthNote]:
        return (
            db.query(HealthNote)
            .filter(HealthNote.mother_id == mother_id)
            .order_by(HealthNote.created_at.desc())
            .all()
        )

    @staticmethod
    def get_medications(db: Session, mother_id: int) -> list[Medication]:
        return (
            db.query(Medication)
            .filter(Medication.mother_id == mother_id)
            .order_by(Medication.start_date.desc())
            .all()
        )

    @staticmethod
    def create_medication(db: Session, **medication_data) -> Medication:
        medication = Medication(**medication_data)
        db.add(medication)
        db.commit()
        db.refresh(medication)
        return medication

    @staticmethod
    def create_health_note(db: Session, **note_data) -> HealthNote:
        note = HealthNote(**note_data)
        db.add(note)
        db.commit()
        db.refresh(note)
        return note
