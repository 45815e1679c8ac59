"""Snapshot persisted users into notification recipients and hand events to the dispatcher"""

import logging

from fastapi import Request

from ..models import User
from ..notifications.dispatcher import NotificationDispatcher
from ..notifications.events import DomainEvent, EventKind, NotificationPreferences, Recipient

logger = logging.getLogger(__name__)


def recipient_from_user(user: User) -> Recipient:
    return Recipient(
        user_id=str(user.id),
        name=user.full_name,
        email=user.email,
        phone=user.phone,
        push_id=user.push_token,
        preferences=NotificationPreferences(
            email=user.notify_email,
            sms=user.notify_sms,
            push=user.notify_push,
        ),
    )


def notify_user(dispatcher: NotificationDispatcher, kind: EventKind, user: User, **payload) -> None:
    """
    Build a domain event for `user` and schedule it on the dispatcher.

    Called after the triggering write has committed, so this never raises:
    a recipient or payload that fails validation is logged and dropped.
    """
    try:
        event = DomainEvent(kind=kind, recipient=recipient_from_user(user), payload=payload)
    except Exception:
        logger.exception(f"❌ Could not build {kind} notification for user {getattr(user, 'id', None)}")
        return
    dispatcher.notify(event)


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """Dependency returning the dispatcher built at application startup"""
    return request.app.state.dispatcher
