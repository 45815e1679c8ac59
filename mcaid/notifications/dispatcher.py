"""
Notification Dispatcher
Fans one domain event out to every allowed channel concurrently.
One channel failing never blocks or cancels the others, and producers never
see a notification error.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from .. import config
from .channels.base import ChannelSender
from .channels.email import EmailSender
from .channels.push import OneSignalPushSender, PushSender
from .channels.sms import TwilioSMSSender
from .events import Channel, DispatchOutcome, DomainEvent
from .exceptions import UnsupportedEventKind
from .mapper import map_event_to_messages
from .preferences import requested_channels, select_channels

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Coordinates preference gating, message mapping and concurrent channel sends"""

    def __init__(self, senders: Union[Mapping[Channel, ChannelSender], Iterable[ChannelSender]]):
        if isinstance(senders, Mapping):
            self.senders: dict[Channel, ChannelSender] = {Channel(k): v for k, v in senders.items()}
        else:
            self.senders = {sender.channel: sender for sender in senders}
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def dispatch(self, event: DomainEvent) -> list[DispatchOutcome]:
        """
        Deliver an event on every channel the recipient allows.

        Returns one outcome per attempted channel, in routing order.

        Raises:
            UnsupportedEventKind: Before any send, if the kind is not routable
        """
        requested = requested_channels(event.kind)
        recipient = event.recipient
        allowed = select_channels(recipient.preferences, requested, recipient)
        if not allowed:
            logger.info(f"🔕 No channels allowed for {event.kind} to user {recipient.user_id}")
            return []

        rendered = map_event_to_messages(event)

        tasks: dict[Channel, asyncio.Task] = {}
        for channel in requested:
            if channel not in allowed:
                continue
            message = rendered.for_channel(channel)
            if message is None:
                continue
            sender = self.senders.get(channel)
            if sender is None:
                logger.warning(f"⚠️ No sender registered for {channel.value}, skipping {event.kind}")
                continue
            tasks[channel] = asyncio.create_task(sender.send(recipient, message))

        results = await asyncio.gather(*tasks.values(), return_exceptions=True)

        outcomes = []
        for channel, result in zip(tasks, results):
            if isinstance(result, DispatchOutcome):
                outcome = result
            elif isinstance(result, Exception):
                outcome = DispatchOutcome.failed(channel, recipient.contact_for(channel) or "", str(result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcome = DispatchOutcome.failed(
                    channel, recipient.contact_for(channel) or "", f"Unexpected send result: {result!r}"
                )
            self._log_outcome(event, outcome)
            outcomes.append(outcome)
        return outcomes

    def notify(self, event: DomainEvent) -> Optional[asyncio.Task]:
        """
        Schedule a detached, best-effort dispatch and return immediately.

        Never raises. The task is held until it finishes so it cannot be
        garbage collected mid-flight.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"⚠️ No running event loop, {getattr(event, 'kind', event)} notification dropped")
            return None

        task = loop.create_task(self._dispatch_safely(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _dispatch_safely(self, event: DomainEvent) -> list[DispatchOutcome]:
        try:
            return await self.dispatch(event)
        except UnsupportedEventKind as e:
            logger.exception(f"❌ Unsupported notification event kind: {e.kind}")
        except Exception as e:
            logger.exception(f"❌ Notification dispatch failed for {getattr(event, 'kind', event)}: {e}")
        return []

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight dispatches, giving up after `timeout` seconds"""
        if not self._pending:
            return
        logger.info(f"⏳ Waiting for {len(self._pending)} notification dispatch(es) to finish")
        _, still_pending = await asyncio.wait(list(self._pending), timeout=timeout)
        if still_pending:
            logger.warning(f"⚠️ {len(still_pending)} notification dispatch(es) still running after {timeout}s")

    @staticmethod
    def _log_outcome(event: DomainEvent, outcome: DispatchOutcome) -> None:
        channel = outcome.channel.value
        if outcome.skipped:
            logger.info(f"ℹ️ {event.kind} {channel} skipped for {outcome.recipient}: {outcome.reason}")
        elif outcome.success:
            logger.info(f"✅ {event.kind} {channel} sent to {outcome.recipient}")
        else:
            logger.error(f"❌ {event.kind} {channel} failed for {outcome.recipient}: {outcome.error}")


def build_dispatcher() -> NotificationDispatcher:
    """Build a dispatcher wired to the transports configured in the environment"""
    email_sender = EmailSender(
        from_address=config.EMAIL_FROM_ADDRESS,
        smtp_host=config.EMAIL_HOST,
        smtp_port=config.EMAIL_PORT,
        smtp_username=config.EMAIL_USER,
        smtp_password=config.EMAIL_PASS,
        smtp_use_tls=config.EMAIL_USE_TLS,
        resend_api_key=config.RESEND_API_KEY,
    )
    sms_sender = TwilioSMSSender(
        account_sid=config.TWILIO_ACCOUNT_SID,
        auth_token=config.TWILIO_AUTH_TOKEN,
        from_number=config.TWILIO_PHONE_NUMBER,
        messaging_service_sid=config.TWILIO_MESSAGING_SERVICE_SID,
        timeout=config.NOTIFICATION_TIMEOUT_SECONDS,
    )
    if config.ONESIGNAL_APP_ID and config.ONESIGNAL_API_KEY:
        push_sender: PushSender = OneSignalPushSender(
            app_id=config.ONESIGNAL_APP_ID,
            api_key=config.ONESIGNAL_API_KEY,
            timeout=config.NOTIFICATION_TIMEOUT_SECONDS,
        )
    else:
        push_sender = PushSender()

    for sender in (email_sender, sms_sender, push_sender):
        state = "configured" if sender.is_configured() else "not configured (sends will be skipped)"
        logger.info(f"🔧 {sender.channel.value} sender {type(sender).__name__}: {state}")

    return NotificationDispatcher([email_sender, sms_sender, push_sender])
