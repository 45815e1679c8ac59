"""
Notification data model
Domain events, recipients, preferences and per-channel dispatch outcomes.
Nothing here is persisted: events live only for the duration of one dispatch.
"""

import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class EventKind(str, Enum):
    APPOINTMENT_CREATED = "appointment-created"
    APPOINTMENT_UPDATED = "appointment-updated"
    MEDICATION_PRESCRIBED = "medication-prescribed"
    ORDER_STATUS_CHANGED = "order-status-changed"
    HEALTH_ALERT = "health-alert"
    CHAT_MESSAGE_RECEIVED = "chat-message-received"
    USER_REGISTERED = "user-registered"
    MEDICAL_NOTE_ADDED = "medical-note-added"
    PATIENT_RECORD_VIEWED = "patient-record-viewed"


def _as_text(value: Any) -> Any:
    """Render dates exactly as stored; no timezone conversion"""
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


class _Payload(BaseModel):
    """Payloads accept both snake_case and camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class NotificationPreferences(BaseModel):
    email: bool = True
    sms: bool = True
    push: bool = True

    def is_enabled(self, channel: "Channel") -> bool:
        return bool(getattr(self, Channel(channel).value))


class Recipient(BaseModel):
    """Denormalized contact snapshot of the user being notified"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    push_id: Optional[str] = None
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, v):
        return str(v) if v is not None else v

    @property
    def push_target(self) -> Optional[str]:
        # Push providers address users by external id when no device id is stored
        return self.push_id or self.user_id

    def contact_for(self, channel: "Channel") -> Optional[str]:
        channel = Channel(channel)
        if channel == Channel.EMAIL:
            return self.email
        if channel == Channel.SMS:
            return self.phone
        return self.push_target


class AppointmentPayload(_Payload):
    appointment_id: Optional[str] = None
    doctor_name: str
    patient_name: Optional[str] = None
    date: str
    time: str
    appointment_type: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None
    initiated_by: str = "medical"

    @field_validator("date", "appointment_id", mode="before")
    @classmethod
    def _render_as_text(cls, v):
        return str(_as_text(v)) if v is not None else v


class MedicationPayload(_Payload):
    medication_name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    prescriber_name: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _render_dates(cls, v):
        return _as_text(v)


class OrderStatusPayload(_Payload):
    order_id: Optional[str] = None
    tracking_number: str
    status: str
    estimated_delivery: Optional[str] = None

    @field_validator("order_id", "estimated_delivery", mode="before")
    @classmethod
    def _render_as_text(cls, v):
        return str(_as_text(v)) if v is not None else v


class HealthAlertPayload(_Payload):
    alert_type: str
    message: str


class ChatMessagePayload(_Payload):
    sender_name: str
    preview: str
    chat_room: Optional[str] = None


class WelcomePayload(_Payload):
    first_name: str
    role: Optional[str] = None
    app_link: Optional[str] = None


class MedicalNotePayload(_Payload):
    author_name: str


class PatientRecordViewedPayload(_Payload):
    reviewer_name: str
    medical_personnel_id: Optional[str] = None

    @field_validator("medical_personnel_id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        return str(v) if v is not None else v


PAYLOAD_TYPES: dict[EventKind, type[_Payload]] = {
    EventKind.APPOINTMENT_CREATED: AppointmentPayload,
    EventKind.APPOINTMENT_UPDATED: AppointmentPayload,
    EventKind.MEDICATION_PRESCRIBED: MedicationPayload,
    EventKind.ORDER_STATUS_CHANGED: OrderStatusPayload,
    EventKind.HEALTH_ALERT: HealthAlertPayload,
    EventKind.CHAT_MESSAGE_RECEIVED: ChatMessagePayload,
    EventKind.USER_REGISTERED: WelcomePayload,
    EventKind.MEDICAL_NOTE_ADDED: MedicalNotePayload,
    EventKind.PATIENT_RECORD_VIEWED: PatientRecordViewedPayload,
}


def parse_event_kind(kind: Any) -> Optional[EventKind]:
    """Return the EventKind for a kind string, or None when it is not known"""
    if isinstance(kind, EventKind):
        return kind
    return EventKind._value2member_map_.get(kind)


class DomainEvent(BaseModel):
    """
    Something happened that may warrant notifying a user.

    `kind` is kept as a plain string so that an unrecognized kind still reaches
    the mapper, which rejects it with UnsupportedEventKind. For known kinds the
    payload is validated into the matching payload type.
    """

    kind: str
    recipient: Recipient
    payload: Any = None

    @field_validator("kind", mode="before")
    @classmethod
    def _kind_value(cls, v):
        return v.value if isinstance(v, Enum) else v

    @model_validator(mode="after")
    def _typed_payload(self):
        event_kind = parse_event_kind(self.kind)
        if event_kind is None:
            return self
        payload_type = PAYLOAD_TYPES[event_kind]
        if not isinstance(self.payload, payload_type):
            self.payload = payload_type.model_validate(self.payload or {})
        return self


class DispatchOutcome(BaseModel):
    """Result of one attempted send on one channel; informational only"""

    channel: Channel
    recipient: str
    success: bool
    skipped: bool = False
    error: Optional[str] = None
    reason: Optional[str] = None
    message_id: Optional[str] = None

    @classmethod
    def sent(cls, channel: Channel, recipient: str, message_id: Optional[str] = None):
        return cls(channel=channel, recipient=recipient, success=True, message_id=message_id)

    @classmethod
    def skip(cls, channel: Channel, recipient: str, reason: str):
        return cls(channel=channel, recipient=recipient, success=True, skipped=True, reason=reason)

    @classmethod
    def failed(cls, channel: Channel, recipient: str, error: str):
        return cls(channel=channel, recipient=recipient, success=False, error=error)
