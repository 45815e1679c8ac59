"""Notification domain - multi-channel fan-out of domain events"""

from .dispatcher import NotificationDispatcher, build_dispatcher
from .events import (
    AppointmentPayload,
    Channel,
    ChatMessagePayload,
    DispatchOutcome,
    DomainEvent,
    EventKind,
    HealthAlertPayload,
    MedicationPayload,
    NotificationPreferences,
    OrderStatusPayload,
    Recipient,
)
from .exceptions import NotificationError, TransportError, UnsupportedEventKind

__all__ = [
    "AppointmentPayload",
    "Channel",
    "ChatMessagePayload",
    "DispatchOutcome",
    "DomainEvent",
    "EventKind",
    "HealthAlertPayload",
    "MedicationPayload",
    "NotificationDispatcher",
    "NotificationError",
    "NotificationPreferences",
    "OrderStatusPayload",
    "Recipient",
    "TransportError",
    "UnsupportedEventKind",
    "build_dispatcher",
]
