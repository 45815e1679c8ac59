"""Event-to-message mapping: pure, no I/O"""

from typing import Callable

from . import templates
from .events import DomainEvent, EventKind, Recipient, parse_event_kind
from .exceptions import UnsupportedEventKind
from .messages import RenderedMessages

Renderer = Callable[..., RenderedMessages]

TEMPLATE_REGISTRY: dict[EventKind, Renderer] = {
    EventKind.APPOINTMENT_CREATED: templates.render_appointment_created,
    EventKind.APPOINTMENT_UPDATED: templates.render_appointment_updated,
    EventKind.MEDICATION_PRESCRIBED: templates.render_medication_prescribed,
    EventKind.ORDER_STATUS_CHANGED: templates.render_order_status_changed,
    EventKind.HEALTH_ALERT: templates.render_health_alert,
    EventKind.CHAT_MESSAGE_RECEIVED: templates.render_chat_message,
    EventKind.USER_REGISTERED: templates.render_user_registered,
    EventKind.MEDICAL_NOTE_ADDED: templates.render_medical_note_added,
    EventKind.PATIENT_RECORD_VIEWED: templates.render_patient_record_viewed,
}


def get_renderer(kind: str) -> Renderer:
    """Look up the renderer for an event kind"""
    event_kind = parse_event_kind(kind)
    if event_kind is None:
        raise UnsupportedEventKind(str(kind))
    return TEMPLATE_REGISTRY[event_kind]


def map_event_to_messages(event: DomainEvent) -> RenderedMessages:
    """
    Produce the email, SMS and push bodies for a domain event.

    Raises:
        UnsupportedEventKind: If the event kind has no template
    """
    renderer = get_renderer(event.kind)
    recipient: Recipient = event.recipient
    return renderer(event.payload, recipient)
