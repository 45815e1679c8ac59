"""Channel routing per event kind and the preference gate"""

import logging
from collections.abc import Iterable

from .events import Channel, EventKind, NotificationPreferences, Recipient, parse_event_kind
from .exceptions import UnsupportedEventKind

logger = logging.getLogger(__name__)

ALL_CHANNELS = (Channel.EMAIL, Channel.SMS, Channel.PUSH)

EVENT_CHANNELS: dict[EventKind, tuple[Channel, ...]] = {
    EventKind.APPOINTMENT_CREATED: ALL_CHANNELS,
    EventKind.APPOINTMENT_UPDATED: ALL_CHANNELS,
    EventKind.MEDICATION_PRESCRIBED: ALL_CHANNELS,
    EventKind.ORDER_STATUS_CHANGED: ALL_CHANNELS,
    EventKind.HEALTH_ALERT: ALL_CHANNELS,
    EventKind.CHAT_MESSAGE_RECEIVED: (Channel.PUSH,),
    EventKind.USER_REGISTERED: (Channel.EMAIL,),
    EventKind.MEDICAL_NOTE_ADDED: (Channel.PUSH,),
    EventKind.PATIENT_RECORD_VIEWED: (Channel.PUSH,),
}


def requested_channels(kind: str) -> tuple[Channel, ...]:
    """Channels attempted for an event kind before preferences are applied"""
    event_kind = parse_event_kind(kind)
    if event_kind is None:
        raise UnsupportedEventKind(str(kind))
    return EVENT_CHANNELS[event_kind]


def select_channels(
    preferences: NotificationPreferences,
    requested: Iterable[Channel],
    recipient: Recipient,
) -> set[Channel]:
    """
    Reduce requested channels to those the recipient has enabled and can be reached on.

    A channel needs both its preference flag and a non-empty contact field
    (SMS without a phone number is dropped even when sms=True). Unknown
    channel names are dropped. Never raises; an empty set means nothing is sent.
    """
    allowed = set()
    for requested_channel in requested:
        channel = Channel._value2member_map_.get(requested_channel)
        if channel is None:
            logger.debug(f"⚠️ Unknown channel {requested_channel!r} dropped for user {recipient.user_id}")
            continue
        if not preferences.is_enabled(channel):
            logger.debug(f"🔕 {channel.value} disabled by preference for user {recipient.user_id}")
            continue
        contact = recipient.contact_for(channel)
        if not contact or not contact.strip():
            logger.debug(f"⚠️ No {channel.value} contact on file for user {recipient.user_id}")
            continue
        allowed.add(channel)
    return allowed
