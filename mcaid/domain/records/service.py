"""Medical records service - patient records, prescriptions and health notes"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import HealthNote, Medication, User
from ...notifications.dispatcher import NotificationDispatcher
from ...notifications.events import EventKind
from ...shared.recipients import notify_user
from .repository import RecordsRepository
from .schemas import HealthNoteCreate, MedicationCreate

logger = logging.getLogger(__name__)


class RecordsService:
    def __init__(self, db: Session, dispatcher: NotificationDispatcher):
        self.db = db
        self.dispatcher = dispatcher
        self.repo = RecordsRepository()

    def _get_mother(self, mother_id: int) -> User:
        mother = self.repo.get_mother(self.db, mother_id)
        if not mother:
            raise HTTPException(status_code=404, detail="Patient not found")
        return mother

    def get_patient(self, mother_id: int, user: User) -> tuple[User, list[Medication], list[HealthNote]]:
        """
        Open a patient's record.

        Only medical personnel with at least one appointment with the mother
        may view it. The mother gets a push telling her who is reviewing.
        """
        mother = self._get_mother(mother_id)
        if not self.repo.has_appointment(self.db, mother.id, user.id):
            raise HTTPException(status_code=403, detail="Access denied. No appointment with this patient.")

        medications = self.repo.get_medications(self.db, mother.id)
        notes = self.repo.get_health_notes(self.db, mother.id)
        logger.info(f"🩺 Medical user {user.id} viewing record of mother {mother.id}")

        notify_user(
            self.dispatcher,
            EventKind.PATIENT_RECORD_VIEWED,
            mother,
            reviewer_name=user.full_name,
            medical_personnel_id=user.id,
        )
        return mother, medications, notes

    def get_medications(self, mother_id: int, user: User) -> list[Medication]:
        """Mothers may only read their own medications"""
        if user.role == "mother" and user.id != mother_id:
            raise HTTPException(status_code=403, detail="Not allowed to view these records")
        self._get_mother(mother_id)
        return self.repo.get_medications(self.db, mother_id)

    def prescribe_medication(self, mother_id: int, data: MedicationCreate, user: User) -> Medication:
        """Record a prescription and notify the mother on every channel she allows"""
        mother = self._get_mother(mother_id)

        logger.info(f"💊 Medical user {user.id} prescribing {data.name} to mother {mother.id}")
        medication = self.repo.create_medication(
            self.db,
            mother_id=mother.id,
            prescribed_by_id=user.id,
            name=data.name,
            dosage=data.dosage,
            frequency=data.frequency,
            start_date=data.startDate,
            end_date=data.endDate,
            instructions=data.instructions,
        )

        notify_user(
            self.dispatcher,
            EventKind.MEDICATION_PRESCRIBED,
            mother,
            medication_name=medication.name,
            dosage=medication.dosage,
            frequency=medication.frequency,
            start_date=medication.start_date,
            end_date=medication.end_date,
            prescriber_name=user.full_name,
        )
        return medication

    def add_health_note(self, mother_id: int, data: HealthNoteCreate, user: User) -> HealthNote:
        """
        Add a note to the mother's record.

        Every note pushes a short notice to the mother. Notes with an alert
        type also raise a health alert on all of her channels.
        """
        mother = self._get_mother(mother_id)

        note = self.repo.create_health_note(
            self.db,
            mother_id=mother.id,
            author_id=user.id,
            content=data.content,
            alert_type=data.alertType,
        )

        notify_user(self.dispatcher, EventKind.MEDICAL_NOTE_ADDED, mother, author_name=user.full_name)

        if note.alert_type:
            logger.info(f"🚨 Health alert '{note.alert_type}' raised for mother {mother.id}")
            notify_user(
                self.dispatcher,
                EventKind.HEALTH_ALERT,
                mother,
                alert_type=note.alert_type,
                message=note.content,
            )
        return note
