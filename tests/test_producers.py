"""Domain services persist first, then hand a detached event to the dispatcher."""

import asyncio
import datetime
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from mcaid.domain.appointments.schemas import AppointmentBook, AppointmentCreate, AppointmentUpdate
from mcaid.domain.appointments.service import AppointmentService
from mcaid.domain.chat.schemas import ChatMessageCreate
from mcaid.domain.chat.service import ChatService, room_id_for
from mcaid.domain.orders.schemas import OrderStatusUpdate
from mcaid.domain.orders.service import OrderService
from mcaid.domain.records.schemas import HealthNoteCreate, MedicationCreate
from mcaid.domain.records.service import RecordsService
from mcaid.domain.users.schemas import NotificationPreferencesUpdate, UserCreate
from mcaid.domain.users.service import UserService
from mcaid.models import Appointment, Order
from mcaid.notifications.events import Channel, EventKind
from mcaid.shared import recipients as recipients_module


def _sent_event(mock_dispatcher):
    mock_dispatcher.notify.assert_called_once()
    return mock_dispatcher.notify.call_args.args[0]


@pytest.fixture
def mock_dispatcher():
    return MagicMock()


def test_create_appointment_notifies_mother(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical", first_name="Jane", last_name="Doe")
    mother = make_user("mother", first_name="Amina", last_name="Otieno")
    service = AppointmentService(db_session, mock_dispatcher)

    appointment = service.create_appointment(
        AppointmentCreate(motherId=mother.id, appointmentDate=datetime.date(2024, 3, 1), appointmentTime="10:00"),
        doctor,
    )

    assert appointment.id is not None
    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.APPOINTMENT_CREATED.value
    assert event.recipient.user_id == str(mother.id)
    assert event.payload.doctor_name == "Jane Doe"
    assert event.payload.date == "2024-03-01"
    assert event.payload.initiated_by == "medical"
    assert event.payload.meeting_link is None


def test_create_appointment_for_unknown_mother_is_404(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    service = AppointmentService(db_session, mock_dispatcher)

    with pytest.raises(HTTPException) as exc_info:
        service.create_appointment(
            AppointmentCreate(motherId=999, appointmentDate=datetime.date(2024, 3, 1), appointmentTime="10:00"),
            doctor,
        )
    assert exc_info.value.status_code == 404
    mock_dispatcher.notify.assert_not_called()


def test_book_appointment_notifies_personnel(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    mother = make_user("mother", first_name="Amina", last_name="Otieno")
    service = AppointmentService(db_session, mock_dispatcher)

    service.book_appointment(
        AppointmentBook(
            medicalPersonnelId=doctor.id, appointmentDate=datetime.date(2024, 3, 1), appointmentTime="09:30"
        ),
        mother,
    )

    event = _sent_event(mock_dispatcher)
    assert event.recipient.user_id == str(doctor.id)
    assert event.payload.initiated_by == "mother"
    assert event.payload.patient_name == "Amina Otieno"


def test_update_by_mother_notifies_personnel(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    mother = make_user("mother")
    appointment = Appointment(
        mother_id=mother.id, medical_personnel_id=doctor.id, date=datetime.date(2024, 3, 1), time="10:00"
    )
    db_session.add(appointment)
    db_session.commit()

    service = AppointmentService(db_session, mock_dispatcher)
    service.update_appointment(appointment.id, AppointmentUpdate(appointmentTime="11:00"), mother)

    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.APPOINTMENT_UPDATED.value
    assert event.recipient.user_id == str(doctor.id)
    assert event.payload.time == "11:00"


def test_update_by_stranger_is_404(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    mother = make_user("mother")
    stranger = make_user("mother")
    appointment = Appointment(
        mother_id=mother.id, medical_personnel_id=doctor.id, date=datetime.date(2024, 3, 1), time="10:00"
    )
    db_session.add(appointment)
    db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        AppointmentService(db_session, mock_dispatcher).update_appointment(
            appointment.id, AppointmentUpdate(status="cancelled"), stranger
        )
    assert exc_info.value.status_code == 404


def test_prescribe_medication_notifies_mother(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical", first_name="Jane", last_name="Doe")
    mother = make_user("mother")

    RecordsService(db_session, mock_dispatcher).prescribe_medication(
        mother.id,
        MedicationCreate(name="Folic Acid", dosage="400mcg", frequency="daily", startDate=datetime.date(2024, 3, 1)),
        doctor,
    )

    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.MEDICATION_PRESCRIBED.value
    assert event.payload.medication_name == "Folic Acid"
    assert event.payload.start_date == "2024-03-01"
    assert event.payload.prescriber_name == "Jane Doe"


def _sent_events(mock_dispatcher):
    return [c.args[0] for c in mock_dispatcher.notify.call_args_list]


def test_health_note_without_alert_type_pushes_note_notice(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical", first_name="Jane", last_name="Doe")
    mother = make_user("mother")

    RecordsService(db_session, mock_dispatcher).add_health_note(
        mother.id, HealthNoteCreate(content="Routine check, all good."), doctor
    )

    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.MEDICAL_NOTE_ADDED.value
    assert event.recipient.user_id == str(mother.id)
    assert event.payload.author_name == "Jane Doe"


def test_health_note_with_alert_type_sends_note_notice_and_health_alert(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    mother = make_user("mother")

    RecordsService(db_session, mock_dispatcher).add_health_note(
        mother.id, HealthNoteCreate(content="Blood pressure is elevated.", alertType="High Blood Pressure"), doctor
    )

    note_event, alert_event = _sent_events(mock_dispatcher)
    assert note_event.kind == EventKind.MEDICAL_NOTE_ADDED.value
    assert alert_event.kind == EventKind.HEALTH_ALERT.value
    assert alert_event.payload.alert_type == "High Blood Pressure"
    assert alert_event.payload.message == "Blood pressure is elevated."


def _appointment(db_session, mother, doctor):
    appointment = Appointment(
        mother_id=mother.id, medical_personnel_id=doctor.id, date=datetime.date(2024, 3, 1), time="10:00"
    )
    db_session.add(appointment)
    db_session.commit()
    return appointment


def test_viewing_patient_record_pushes_review_notice(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical", first_name="Jane", last_name="Doe")
    mother = make_user("mother")
    _appointment(db_session, mother, doctor)
    RecordsService(db_session, MagicMock()).add_health_note(
        mother.id, HealthNoteCreate(content="Routine check."), doctor
    )

    patient, medications, notes = RecordsService(db_session, mock_dispatcher).get_patient(mother.id, doctor)

    assert patient.id == mother.id
    assert medications == []
    assert [n.content for n in notes] == ["Routine check."]
    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.PATIENT_RECORD_VIEWED.value
    assert event.recipient.user_id == str(mother.id)
    assert event.payload.reviewer_name == "Jane Doe"
    assert event.payload.medical_personnel_id == str(doctor.id)


def test_viewing_patient_without_appointment_is_403(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    mother = make_user("mother")

    with pytest.raises(HTTPException) as exc_info:
        RecordsService(db_session, mock_dispatcher).get_patient(mother.id, doctor)
    assert exc_info.value.status_code == 403
    mock_dispatcher.notify.assert_not_called()


def test_viewing_non_mother_record_is_404(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    store = make_user("store")

    with pytest.raises(HTTPException) as exc_info:
        RecordsService(db_session, mock_dispatcher).get_patient(store.id, doctor)
    assert exc_info.value.status_code == 404
    mock_dispatcher.notify.assert_not_called()


@pytest.mark.parametrize("role", ["mother", "medical", "store"])
def test_registration_sends_welcome_email(db_session, mock_dispatcher, role):
    user = UserService(db_session, mock_dispatcher).create_user(
        UserCreate(firstName="Amina", lastName="Otieno", email=f"amina.{role}@example.com", role=role)
    )

    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.USER_REGISTERED.value
    assert event.recipient.user_id == str(user.id)
    assert event.recipient.email == f"amina.{role}@example.com"
    assert event.payload.first_name == "Amina"
    assert event.payload.role == role
    assert event.payload.app_link


def test_admin_registration_sends_no_welcome(db_session, mock_dispatcher):
    UserService(db_session, mock_dispatcher).create_user(
        UserCreate(firstName="Root", lastName="Admin", email="admin@example.com", role="admin")
    )
    mock_dispatcher.notify.assert_not_called()


def test_duplicate_registration_sends_no_welcome(db_session, make_user, mock_dispatcher):
    existing = make_user("mother")

    with pytest.raises(HTTPException) as exc_info:
        UserService(db_session, mock_dispatcher).create_user(
            UserCreate(firstName="Amina", lastName="Otieno", email=existing.email)
        )
    assert exc_info.value.status_code == 400
    mock_dispatcher.notify.assert_not_called()


def _order(db_session, mother, store, **fields):
    order = Order(mother_id=mother.id, store_id=store.id, total_amount=25.0, **fields)
    db_session.add(order)
    db_session.commit()
    return order


def test_order_delivered_stamps_time_and_tracking_number(db_session, make_user, mock_dispatcher):
    mother = make_user("mother")
    store = make_user("store")
    order = _order(db_session, mother, store)

    updated = OrderService(db_session, mock_dispatcher).update_order_status(
        order.id, OrderStatusUpdate(status="delivered"), store
    )

    assert updated.actual_delivery_time is not None
    assert updated.tracking_number.startswith(f"MC{order.id:06d}-")
    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.ORDER_STATUS_CHANGED.value
    assert event.recipient.user_id == str(mother.id)
    assert event.payload.tracking_number == updated.tracking_number


def test_order_status_keeps_existing_tracking_number(db_session, make_user, mock_dispatcher):
    mother = make_user("mother")
    store = make_user("store")
    order = _order(db_session, mother, store, tracking_number="TRK-1")

    updated = OrderService(db_session, mock_dispatcher).update_order_status(
        order.id, OrderStatusUpdate(status="preparing"), store
    )
    assert updated.tracking_number == "TRK-1"
    assert updated.actual_delivery_time is None


def test_invalid_order_status_is_400(db_session, make_user, mock_dispatcher):
    mother = make_user("mother")
    store = make_user("store")
    order = _order(db_session, mother, store)

    with pytest.raises(HTTPException) as exc_info:
        OrderService(db_session, mock_dispatcher).update_order_status(
            order.id, OrderStatusUpdate(status="teleported"), store
        )
    assert exc_info.value.status_code == 400
    mock_dispatcher.notify.assert_not_called()


def test_other_store_cannot_update_order(db_session, make_user, mock_dispatcher):
    mother = make_user("mother")
    store = make_user("store")
    other_store = make_user("store")
    order = _order(db_session, mother, store)

    with pytest.raises(HTTPException) as exc_info:
        OrderService(db_session, mock_dispatcher).update_order_status(
            order.id, OrderStatusUpdate(status="confirmed"), other_store
        )
    assert exc_info.value.status_code == 404


def test_chat_message_pushes_truncated_preview(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical", first_name="Jane", last_name="Doe")
    mother = make_user("mother")
    text = "x" * 250

    message = ChatService(db_session, mock_dispatcher).send_message(
        ChatMessageCreate(receiverId=mother.id, message=text), doctor
    )

    assert message.chat_room == room_id_for(doctor.id, mother.id)
    event = _sent_event(mock_dispatcher)
    assert event.kind == EventKind.CHAT_MESSAGE_RECEIVED.value
    assert event.payload.preview == "x" * 100
    assert event.payload.sender_name == "Jane Doe"


def test_preference_update_flows_into_recipient(db_session, make_user, mock_dispatcher):
    doctor = make_user("medical")
    mother = make_user("mother")
    UserService(db_session, mock_dispatcher).update_preferences(NotificationPreferencesUpdate(sms=False), mother)

    RecordsService(db_session, mock_dispatcher).prescribe_medication(
        mother.id,
        MedicationCreate(name="Iron", dosage="65mg", frequency="daily", startDate=datetime.date(2024, 3, 1)),
        doctor,
    )

    event = _sent_event(mock_dispatcher)
    assert event.recipient.preferences.sms is False
    assert event.recipient.preferences.is_enabled(Channel.EMAIL) is True


def test_service_succeeds_when_event_cannot_be_built(db_session, make_user, mock_dispatcher, monkeypatch):
    doctor = make_user("medical")
    mother = make_user("mother")

    def broken_recipient(user):
        raise ValueError("corrupt contact record")

    monkeypatch.setattr(recipients_module, "recipient_from_user", broken_recipient)

    medication = RecordsService(db_session, mock_dispatcher).prescribe_medication(
        mother.id,
        MedicationCreate(name="Folic Acid", dosage="400mcg", frequency="daily", startDate=datetime.date(2024, 3, 1)),
        doctor,
    )

    assert medication.id is not None
    mock_dispatcher.notify.assert_not_called()


def test_notify_user_drops_invalid_payload(make_user, mock_dispatcher):
    mother = make_user("mother")

    recipients_module.notify_user(mock_dispatcher, EventKind.HEALTH_ALERT, mother, alert_type=None, message="x")

    mock_dispatcher.notify.assert_not_called()


def test_service_returns_before_slow_channel_finishes(db_session, make_user, dispatcher, senders):
    doctor = make_user("medical", first_name="Jane", last_name="Doe")
    mother = make_user("mother")
    senders[Channel.SMS].configure(delay=0.2)
    service = AppointmentService(db_session, dispatcher)

    async def run():
        appointment = service.create_appointment(
            AppointmentCreate(motherId=mother.id, appointmentDate=datetime.date(2024, 3, 1), appointmentTime="10:00"),
            doctor,
        )
        sms_sent_when_returned = len(senders[Channel.SMS].sent)
        await dispatcher.drain(timeout=2)
        return appointment, sms_sent_when_returned

    appointment, sms_sent_when_returned = asyncio.run(run())

    assert appointment.id is not None
    assert sms_sent_when_returned == 0
    assert len(senders[Channel.SMS].sent) == 1
