"""
Push notification senders
PushSender is the placeholder used when no push provider is configured: it
reports success without delivering anything. OneSignalPushSender performs
real delivery through the OneSignal REST API.
"""

import logging
from typing import Optional

import httpx

from ..events import Channel, DispatchOutcome, Recipient
from ..exceptions import TransportError
from ..messages import PushMessage
from .base import ChannelSender

logger = logging.getLogger(__name__)

ONESIGNAL_NOTIFICATIONS_URL = "https://onesignal.com/api/v1/notifications"


class PushSender(ChannelSender):
    channel = Channel.PUSH

    async def send(self, recipient: Recipient, message: PushMessage) -> DispatchOutcome:
        target = recipient.push_target or ""
        logger.debug(f"🔔 Push notification (no provider) to {target}: {message.title}")
        return DispatchOutcome.sent(self.channel, target)


class OneSignalPushSender(PushSender):
    def __init__(
        self,
        app_id: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.app_id and self.api_key)

    async def send(self, recipient: Recipient, message: PushMessage) -> DispatchOutcome:
        if not self.is_configured():
            return await super().send(recipient, message)

        target = recipient.push_target or ""
        body = {
            "app_id": self.app_id,
            "include_external_user_ids": [target],
            "headings": {"en": message.title},
            "contents": {"en": message.body},
            "data": message.data,
        }
        headers = {
            "Authorization": f"Basic {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.info(f"🔔 Sending push notification via OneSignal to {target}")
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(ONESIGNAL_NOTIFICATIONS_URL, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"❌ OneSignal API unreachable: {e}")
            raise TransportError(self.channel.value, str(e)) from e

        try:
            result = response.json()
        except ValueError:
            result = {}

        if not isinstance(result, dict):
            logger.error(f"❌ OneSignal API returned unexpected body [{response.status_code}]: {response.text}")
            raise TransportError(
                self.channel.value, f"Unexpected response: {response.text}", status_code=response.status_code
            )

        if response.status_code >= 400 or result.get("errors"):
            errors = result.get("errors") or response.text
            logger.error(f"❌ OneSignal API error [{response.status_code}]: {errors}")
            raise TransportError(self.channel.value, str(errors), status_code=response.status_code)

        logger.info(f"✅ Push notification sent to {target} ({result.get('id')})")
        return DispatchOutcome.sent(self.channel, target, message_id=result.get("id"))
