import datetime

import pytest

from mcaid.notifications.events import DomainEvent, EventKind, MedicationPayload
from mcaid.notifications.exceptions import UnsupportedEventKind
from mcaid.notifications.mapper import TEMPLATE_REGISTRY, map_event_to_messages


def _appointment_event(recipient, **payload):
    data = {"doctorName": "Jane Doe", "date": "2024-03-01", "time": "10:00", "meetingLink": None}
    data.update(payload)
    return DomainEvent(kind="appointment-created", recipient=recipient, payload=data)


def test_every_event_kind_has_a_template():
    assert set(TEMPLATE_REGISTRY) == set(EventKind)


def test_appointment_email_contains_doctor_date_time_and_link_fallback(make_recipient):
    messages = map_event_to_messages(_appointment_event(make_recipient()))

    assert "Appointment" in messages.email.subject
    for expected in ("Jane Doe", "2024-03-01", "10:00", "To be provided"):
        assert expected in messages.email.html
    assert messages.sms.text == (
        "Reminder: You have an appointment with Dr. Jane Doe on 2024-03-01 at 10:00. "
        "Meeting link: To be provided"
    )
    assert messages.push.title == "New Appointment Scheduled"


def test_missing_optional_fields_never_render_as_none(make_recipient):
    messages = map_event_to_messages(_appointment_event(make_recipient(name="")))
    rendered = [messages.email.html, messages.email.text, messages.sms.text, messages.push.body]
    for text in rendered:
        assert "None" not in text
        assert "undefined" not in text
        assert "null" not in text
    assert "Location" not in messages.email.html


def test_meeting_link_is_rendered_when_present(make_recipient):
    event = _appointment_event(make_recipient(), meetingLink="https://meet.example.com/abc")
    messages = map_event_to_messages(event)
    assert "https://meet.example.com/abc" in messages.sms.text
    assert "To be provided" not in messages.email.html


def test_doctor_title_is_not_doubled(make_recipient):
    messages = map_event_to_messages(_appointment_event(make_recipient(), doctorName="Dr. Jane Doe"))
    assert "Dr. Dr." not in messages.sms.text


def test_booking_by_mother_notifies_personnel(make_recipient):
    event = _appointment_event(
        make_recipient(name="Jane Doe"), patientName="Amina Otieno", initiatedBy="mother"
    )
    messages = map_event_to_messages(event)
    assert messages.email.subject == "New Appointment Booked - MCaid"
    assert messages.sms.text == "Amina Otieno has booked an appointment with you on 2024-03-01 at 10:00"


def test_dates_render_as_stored(make_recipient):
    event = DomainEvent(
        kind=EventKind.MEDICATION_PRESCRIBED,
        recipient=make_recipient(),
        payload=MedicationPayload(
            medication_name="Folic Acid",
            dosage="400mcg",
            frequency="daily",
            start_date=datetime.date(2024, 3, 1),
            prescriber_name="Jane Doe",
        ),
    )
    messages = map_event_to_messages(event)
    assert "2024-03-01" in messages.email.html
    assert "End Date" not in messages.email.html
    assert messages.sms.text == "Dr. Jane Doe has prescribed Folic Acid (400mcg, daily)"


def test_order_status_uses_tracking_number(make_recipient):
    event = DomainEvent(
        kind="order-status-changed",
        recipient=make_recipient(),
        payload={"trackingNumber": "MC000001-ABC123", "status": "out-for-delivery"},
    )
    messages = map_event_to_messages(event)
    assert messages.email.subject == "Order Update - MC000001-ABC123"
    assert messages.sms.text == "Order MC000001-ABC123: Your order is out for delivery!"


def test_health_alert(make_recipient):
    event = DomainEvent(
        kind="health-alert",
        recipient=make_recipient(),
        payload={"alertType": "High Blood Pressure", "message": "Please rest & check again <today>"},
    )
    messages = map_event_to_messages(event)
    assert messages.email.subject == "Health Alert - High Blood Pressure"
    assert messages.sms.text == "Health Alert: Please rest & check again <today>"
    assert "&lt;today&gt;" in messages.email.html


def test_chat_message_is_push_only(make_recipient):
    event = DomainEvent(
        kind="chat-message-received",
        recipient=make_recipient(),
        payload={"senderName": "Dr. Jane Doe", "preview": "How are you feeling?", "chatRoom": "1_2"},
    )
    messages = map_event_to_messages(event)
    assert messages.email is None
    assert messages.sms is None
    assert messages.push.title == "New message from Dr. Jane Doe"
    assert messages.push.data == {"type": "chat", "chatRoom": "1_2"}


def test_welcome_is_email_only(make_recipient):
    event = DomainEvent(
        kind="user-registered",
        recipient=make_recipient(),
        payload={"firstName": "Amina", "role": "mother", "appLink": "http://localhost:5173"},
    )
    messages = map_event_to_messages(event)
    assert messages.sms is None
    assert messages.push is None
    assert messages.email.subject == "Welcome to MCaid!"
    assert "Amina" in messages.email.html
    assert 'href="http://localhost:5173"' in messages.email.html
    assert messages.email.text.endswith("Get started: http://localhost:5173")


def test_medical_note_is_push_only(make_recipient):
    event = DomainEvent(kind="medical-note-added", recipient=make_recipient(), payload={"authorName": "Jane Doe"})
    messages = map_event_to_messages(event)
    assert messages.email is None
    assert messages.sms is None
    assert messages.push.title == "Medical Note Added"
    assert messages.push.body == "Dr. Jane Doe has added a note to your medical record"
    assert messages.push.data == {"type": "medical-note"}


def test_patient_record_viewed_is_push_only(make_recipient):
    event = DomainEvent(
        kind="patient-record-viewed",
        recipient=make_recipient(),
        payload={"reviewerName": "Jane Doe", "medicalPersonnelId": 7},
    )
    messages = map_event_to_messages(event)
    assert messages.email is None
    assert messages.push.title == "Medical Review"
    assert messages.push.body == "Dr. Jane Doe is reviewing your medical information"
    assert messages.push.data == {"type": "medical-review", "medicalPersonnelId": "7"}


def test_unknown_kind_raises(make_recipient):
    event = DomainEvent(kind="not-a-real-kind", recipient=make_recipient(), payload={})
    with pytest.raises(UnsupportedEventKind):
        map_event_to_messages(event)
