"""
Twilio SMS Sender
Sends SMS through the Twilio REST API. When credentials are missing the
send is a deliberate soft-skip, not an error.
"""

import logging
from typing import Optional

import httpx

from ...shared.validators import is_e164
from ..events import Channel, DispatchOutcome, Recipient
from ..exceptions import TransportError
from ..messages import SMSMessage
from .base import ChannelSender

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSMSSender(ChannelSender):
    channel = Channel.SMS

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        messaging_service_sid: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.messaging_service_sid = messaging_service_sid
        self.timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(
            self.account_sid and self.auth_token and (self.from_number or self.messaging_service_sid)
        )

    async def send(self, recipient: Recipient, message: SMSMessage) -> DispatchOutcome:
        to_phone = recipient.phone or ""
        if not self.is_configured():
            logger.info(f"ℹ️ Twilio not configured, SMS to {to_phone} not sent")
            return DispatchOutcome.skip(self.channel, to_phone, "Twilio not configured")

        # Ensure phone number is in E.164 format
        if not is_e164(to_phone):
            logger.warning(f"⚠️ Phone number not in E.164 format: {to_phone}")
            raise TransportError(self.channel.value, "Phone number must be in E.164 format (e.g., +254712345678)")

        data = {"To": to_phone, "Body": message.text}
        if self.messaging_service_sid:
            data["MessagingServiceSid"] = self.messaging_service_sid
        else:
            data["From"] = self.from_number

        logger.info(f"📱 Sending SMS to Twilio API for {to_phone}")
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(
                    f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json",
                    auth=(self.account_sid, self.auth_token),
                    data=data,
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Twilio API unreachable: {e}")
            raise TransportError(self.channel.value, str(e)) from e

        if response.status_code in (200, 201):
            try:
                result = response.json()
            except ValueError as e:
                logger.error(f"❌ Twilio returned {response.status_code} with an unreadable body")
                raise TransportError(
                    self.channel.value, "Invalid response from Twilio", status_code=response.status_code
                ) from e
            message_sid = result.get("sid") if isinstance(result, dict) else None
            logger.info(f"✅ SMS sent successfully to {to_phone} (SID: {message_sid})")
            return DispatchOutcome.sent(self.channel, to_phone, message_id=message_sid)

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        if not isinstance(error_data, dict):
            error_data = {}
        error_message = error_data.get("message", "Unknown error")
        error_code = error_data.get("code")
        logger.error(f"❌ Twilio API error [{error_code}]: {error_message}")
        raise TransportError(
            self.channel.value,
            f"[{error_code}] {error_message}" if error_code else error_message,
            status_code=response.status_code,
        )
